"""create ai declarations

Revision ID: 3c9d41a7e2b0
Revises:
Create Date: 2026-10-18 18:40:12.517204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c9d41a7e2b0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'ai_declarations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_name', sa.String(length=255), nullable=False),
        sa.Column('assignment_title', sa.String(length=255), nullable=False),
        sa.Column('ai_tool', sa.String(length=255), nullable=False),
        sa.Column('usage_purpose', sa.Text(), nullable=False),
        sa.Column('ai_content', sa.Text(), nullable=False),
        sa.Column('screenshot_path', sa.String(length=500), nullable=True),
        sa.Column('submission_id', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        mysql_charset='utf8mb4',
        mysql_collate='utf8mb4_unicode_ci',
    )
    op.create_index('idx_user_name', 'ai_declarations', ['user_name'], unique=False)
    op.create_index('idx_created_at', 'ai_declarations', ['created_at'], unique=False)


def downgrade():
    op.drop_index('idx_created_at', table_name='ai_declarations')
    op.drop_index('idx_user_name', table_name='ai_declarations')
    op.drop_table('ai_declarations')
