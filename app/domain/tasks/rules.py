from __future__ import annotations

from datetime import date
from typing import Any, Optional

from app.constants import MAX_ATTACHMENTS, MAX_DESCRIPTION_LEN, MAX_TITLE_LEN
from app.domain.common.errors import ValidationError
from app.domain.common.time import date_from_iso
from app.models import Attachment, TaskStatus


def validate_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required.")
    title = title.strip()
    if len(title) > MAX_TITLE_LEN:
        raise ValidationError(f"Title is too long (max {MAX_TITLE_LEN} chars).")
    return title


def validate_description(description: Any) -> str:
    if description is None:
        return ""
    if not isinstance(description, str):
        raise ValidationError("Description must be a string.")
    description = description.strip()
    if len(description) > MAX_DESCRIPTION_LEN:
        raise ValidationError(f"Description is too long (max {MAX_DESCRIPTION_LEN} chars).")
    return description


def parse_status(raw: Any) -> TaskStatus:
    if not isinstance(raw, str):
        raise ValidationError("Status must be a string.")
    try:
        return TaskStatus.parse(raw.strip())
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise ValidationError(f"Invalid status. Allowed: {allowed}.")


def parse_due_date(raw: Any) -> Optional[date]:
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise ValidationError("Due date must be an ISO date string.")
    # accept full ISO datetimes from date pickers, keep only the calendar day
    try:
        return date_from_iso(raw.strip()[:10])
    except ValueError:
        raise ValidationError("Due date must be in YYYY-MM-DD format.")


def parse_attachments(raw: Any) -> tuple[Attachment, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ValidationError("Attachments must be a list.")
    if len(raw) > MAX_ATTACHMENTS:
        raise ValidationError(f"Too many attachments (max {MAX_ATTACHMENTS}).")
    out: list[Attachment] = []
    for item in raw:
        if isinstance(item, str):
            item = {"name": item.rsplit("/", 1)[-1], "url": item}
        if not isinstance(item, dict):
            raise ValidationError("Each attachment must be an object with name and url.")
        name = item.get("name")
        url = item.get("url")
        if not isinstance(url, str) or not url.strip():
            raise ValidationError("Attachment url is required.")
        if not isinstance(name, str) or not name.strip():
            name = url.rsplit("/", 1)[-1]
        out.append(Attachment(name=name.strip(), url=url.strip()))
    return tuple(out)
