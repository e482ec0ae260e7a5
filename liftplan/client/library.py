from __future__ import annotations
from typing import Optional

from ..schemas import WorkoutRead
from ..structure import norm_name
from .errors import ValidationFailure
from .remote import RemoteStore


def create_from_text(remote: RemoteStore, raw_text: str, title: Optional[str] = None) -> WorkoutRead:
    """Parse free text into a structured workout and save it to the library."""
    text = (raw_text or "").strip()
    if not text:
        raise ValidationFailure("Type a workout first.")
    parsed = remote.parse(text)
    return remote.insert_workout(
        title=norm_name(title) or parsed.title,
        raw_input=text,
        structured=parsed.model_dump(),
    )
