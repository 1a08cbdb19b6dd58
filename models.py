from datetime import datetime, timezone
from typing import Optional

from extensions import db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Declaration(db.Model):
    """One AI tool declared by one user for one assignment.

    A submission naming several tools is stored as several rows that share
    every field except ``ai_tool`` and ``id``.
    """

    __tablename__ = "ai_declarations"

    id = db.Column(db.Integer, primary_key=True)
    user_name = db.Column(db.String(255), nullable=False)
    assignment_title = db.Column(db.String(255), nullable=False)
    ai_tool = db.Column(db.String(255), nullable=False)
    usage_purpose = db.Column(db.Text, nullable=False)
    ai_content = db.Column(db.Text, nullable=False)
    screenshot_path = db.Column(db.String(500))
    submission_id = db.Column(db.String(32))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        db.Index("idx_user_name", "user_name"),
        db.Index("idx_created_at", "created_at"),
    )

    @property
    def created_at_utc(self) -> Optional[datetime]:
        # sqlite and MySQL DATETIME hand back naive values, stored as UTC
        if not self.created_at:
            return None
        if self.created_at.tzinfo is None:
            return self.created_at.replace(tzinfo=timezone.utc)
        return self.created_at

    @property
    def created_at_iso(self) -> Optional[str]:
        created_at = self.created_at_utc
        return created_at.isoformat() if created_at else None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_name": self.user_name,
            "assignment_title": self.assignment_title,
            "ai_tool": self.ai_tool,
            "usage_purpose": self.usage_purpose,
            "ai_content": self.ai_content,
            "screenshot_path": self.screenshot_path,
            "submission_id": self.submission_id,
            "created_at": self.created_at_iso,
        }
