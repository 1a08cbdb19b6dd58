from datetime import datetime, timezone

from models import Declaration
from services.grouping import group_declarations, group_key

STAMP = datetime(2026, 5, 4, 12, 30, tzinfo=timezone.utc)


def _row(tool, user="Alice", title="Essay 1", created_at=STAMP, submission_id=None, row_id=None):
    return Declaration(
        id=row_id,
        user_name=user,
        assignment_title=title,
        ai_tool=tool,
        usage_purpose="brainstorming",
        ai_content="outline",
        created_at=created_at,
        submission_id=submission_id,
    )


def test_rows_of_one_submission_form_one_group():
    groups = group_declarations([_row("ChatGPT", submission_id="a1"), _row("Grammarly", submission_id="a1")])
    assert len(groups) == 1
    group = groups[0]
    assert group.tools == ["ChatGPT", "Grammarly"]
    assert group.user_name == "Alice"
    assert group.assignment_title == "Essay 1"
    assert group.created_at == STAMP


def test_first_seen_order_is_kept():
    later = datetime(2026, 5, 5, 8, 0, tzinfo=timezone.utc)
    rows = [
        _row("Claude", user="Bob", created_at=later),
        _row("ChatGPT"),
        _row("Copilot", user="Bob", created_at=later),
    ]
    groups = group_declarations(rows)
    assert [g.user_name for g in groups] == ["Bob", "Alice"]
    assert groups[0].tools == ["Claude", "Copilot"]


def test_submission_id_separates_identical_legacy_keys():
    rows = [
        _row("ChatGPT", submission_id="first"),
        _row("Claude", submission_id="second"),
    ]
    assert [g.tools for g in group_declarations(rows)] == [["ChatGPT"], ["Claude"]]


def test_legacy_rows_fall_back_to_name_title_timestamp():
    row = _row("ChatGPT")
    assert group_key(row) == f"Alice-Essay 1-{STAMP.isoformat()}"
    other_title = _row("Claude", title="Essay 2")
    assert len(group_declarations([row, _row("Claude"), other_title])) == 2


def test_empty_input():
    assert group_declarations([]) == []
