"""Creating and listing AI usage declarations."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import FileStorage

from extensions import db
from models import Declaration, utcnow
from services.storage import UploadStorage

AI_TOOLS: Sequence[str] = (
    "ChatGPT",
    "GitHub Copilot",
    "Claude",
    "Grammarly",
    "Turnitin",
    "DALL-E",
    "Data Analysis Tools",
)


class DeclarationStoreError(RuntimeError):
    """Raised when one or more declaration rows could not be written.

    Rows committed before the failure stay in the table.
    """

    def __init__(self, message: str, created: Sequence[Declaration], failed: int, cause: Exception):
        super().__init__(message)
        self.created = list(created)
        self.failed = failed
        self.cause = cause


@dataclass
class DeclarationSubmission:
    user_name: str
    assignment_title: str
    tools: List[str]
    usage_purpose: str
    ai_content: str
    screenshot: Optional[FileStorage] = None


@dataclass
class SubmissionResult:
    submission_id: str
    screenshot_path: Optional[str]
    declarations: List[Declaration] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.declarations)

    @property
    def message(self) -> str:
        return f"Successfully created {self.count} declaration(s)"


def _insert_row(submission: DeclarationSubmission, tool: str, **shared) -> Declaration:
    declaration = Declaration(
        user_name=submission.user_name,
        assignment_title=submission.assignment_title,
        ai_tool=tool,
        usage_purpose=submission.usage_purpose,
        ai_content=submission.ai_content,
        **shared,
    )
    db.session.add(declaration)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return declaration


def create_declarations(submission: DeclarationSubmission, storage: UploadStorage) -> SubmissionResult:
    """Store the screenshot, then write one committed row per declared tool.

    Every tool is attempted even if an earlier insert failed. When nothing
    was written the stored screenshot is removed again.
    """
    screenshot_path = storage.save(submission.screenshot) if submission.screenshot else None
    result = SubmissionResult(submission_id=uuid.uuid4().hex, screenshot_path=screenshot_path)
    shared = {
        "screenshot_path": screenshot_path,
        "submission_id": result.submission_id,
        "created_at": utcnow(),
    }

    failures: List[Exception] = []
    for tool in submission.tools:
        try:
            result.declarations.append(_insert_row(submission, tool, **shared))
        except SQLAlchemyError as exc:
            current_app.logger.exception("Failed to insert declaration for tool %r", tool)
            failures.append(exc)

    if failures:
        if not result.declarations and screenshot_path:
            storage.delete(screenshot_path)
        raise DeclarationStoreError(
            "Failed to create declaration",
            created=result.declarations,
            failed=len(failures),
            cause=failures[0],
        )

    current_app.logger.info(
        "Created %d declaration(s) for %r / %r",
        result.count,
        submission.user_name,
        submission.assignment_title,
    )
    return result


def list_declarations() -> List[Declaration]:
    return (
        db.session.query(Declaration)
        .order_by(Declaration.created_at.desc(), Declaration.id.asc())
        .all()
    )
