"""Rebuilds submissions from the flat declaration rows for display."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from models import Declaration


def group_key(declaration: Declaration) -> str:
    if declaration.submission_id:
        return declaration.submission_id
    created_at = declaration.created_at
    if isinstance(created_at, datetime):
        created_at = created_at.isoformat()
    # Rows written before submission ids existed fall back to name/title/time
    return f"{declaration.user_name}-{declaration.assignment_title}-{created_at}"


@dataclass
class DeclarationGroup:
    key: str
    declarations: List[Declaration] = field(default_factory=list)

    @property
    def first(self) -> Declaration:
        return self.declarations[0]

    @property
    def user_name(self) -> str:
        return self.first.user_name

    @property
    def assignment_title(self) -> str:
        return self.first.assignment_title

    @property
    def usage_purpose(self) -> str:
        return self.first.usage_purpose

    @property
    def ai_content(self) -> str:
        return self.first.ai_content

    @property
    def screenshot_path(self) -> Optional[str]:
        return self.first.screenshot_path

    @property
    def created_at(self):
        return self.first.created_at_utc

    @property
    def tools(self) -> List[str]:
        return [decl.ai_tool for decl in self.declarations]


def group_declarations(declarations: Iterable[Declaration]) -> List[DeclarationGroup]:
    """Group rows by submission, keeping the order in which keys first appear."""
    groups: dict[str, DeclarationGroup] = {}
    for declaration in declarations:
        key = group_key(declaration)
        if key not in groups:
            groups[key] = DeclarationGroup(key=key)
        groups[key].declarations.append(declaration)
    return list(groups.values())
