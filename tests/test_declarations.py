from io import BytesIO

import pytest
from sqlalchemy.exc import OperationalError
from werkzeug.datastructures import FileStorage

from extensions import db
from models import Declaration
from services import declarations as declarations_service
from services.declarations import (
    DeclarationStoreError,
    DeclarationSubmission,
    create_declarations,
    list_declarations,
)


def _submission(tools, screenshot=None):
    return DeclarationSubmission(
        user_name="Alice",
        assignment_title="Essay 1",
        tools=tools,
        usage_purpose="brainstorming",
        ai_content="outline",
        screenshot=screenshot,
    )


def _screenshot():
    return FileStorage(stream=BytesIO(b"\x89PNG fake"), filename="shot.png", content_type="image/png")


def _fail_for(monkeypatch, failing_tools):
    original = declarations_service._insert_row

    def flaky_insert(submission, tool, **shared):
        if tool in failing_tools:
            raise OperationalError("INSERT", {}, Exception("disk full"))
        return original(submission, tool, **shared)

    monkeypatch.setattr(declarations_service, "_insert_row", flaky_insert)


def test_create_declarations_shares_submission_fields(app, memory_storage):
    with app.app_context():
        result = create_declarations(_submission(["ChatGPT", "Grammarly"], _screenshot()), memory_storage)

        assert result.count == 2
        assert result.message == "Successfully created 2 declaration(s)"
        assert result.screenshot_path.startswith("/uploads/screenshot-")
        assert memory_storage.exists(result.screenshot_path)

        rows = db.session.query(Declaration).order_by(Declaration.id).all()
        assert [row.ai_tool for row in rows] == ["ChatGPT", "Grammarly"]
        assert {row.screenshot_path for row in rows} == {result.screenshot_path}
        assert {row.submission_id for row in rows} == {result.submission_id}
        assert rows[0].created_at == rows[1].created_at


def test_each_submission_gets_its_own_id(app, memory_storage):
    with app.app_context():
        first = create_declarations(_submission(["Claude"]), memory_storage)
        second = create_declarations(_submission(["Claude"]), memory_storage)
        assert first.submission_id != second.submission_id
        assert db.session.query(Declaration).count() == 2


def test_partial_insert_failure_keeps_written_rows(monkeypatch, app, memory_storage):
    _fail_for(monkeypatch, {"Grammarly"})
    with app.app_context():
        with pytest.raises(DeclarationStoreError) as excinfo:
            create_declarations(
                _submission(["ChatGPT", "Grammarly", "Claude"], _screenshot()),
                memory_storage,
            )

        error = excinfo.value
        assert error.failed == 1
        assert [row.ai_tool for row in error.created] == ["ChatGPT", "Claude"]
        assert isinstance(error.cause, OperationalError)

        rows = db.session.query(Declaration).all()
        assert sorted(row.ai_tool for row in rows) == ["ChatGPT", "Claude"]
        # committed rows still point at the screenshot
        assert memory_storage.exists(rows[0].screenshot_path)


def test_total_insert_failure_removes_screenshot(monkeypatch, app, memory_storage):
    _fail_for(monkeypatch, {"ChatGPT"})
    with app.app_context():
        with pytest.raises(DeclarationStoreError):
            create_declarations(_submission(["ChatGPT"], _screenshot()), memory_storage)
        assert db.session.query(Declaration).count() == 0
    assert memory_storage.files == {}


def test_list_declarations_empty(app):
    with app.app_context():
        assert list_declarations() == []
