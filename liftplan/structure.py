"""
Coercion of the loosely shaped structure the parse service produces.

The same rules apply when the structure is first parsed and whenever a stored
``structured_json`` is read back, so a half-filled payload never raises.
"""
import math
from typing import Any, List, Optional

from .schemas import ParsedExercise, ParsedWorkout


def norm_name(s: Any) -> str:
    if not isinstance(s, str):
        return ""
    return " ".join(s.strip().split())


def as_int(v: Any) -> Optional[int]:
    """Accepts 3, 3.0, "3"; anything else is None."""
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float) and math.isfinite(v):
        return int(v)
    if isinstance(v, str):
        try:
            f = float(v.strip())
        except ValueError:
            return None
        return int(f) if math.isfinite(f) else None
    return None


def as_float(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        f = float(v)
    elif isinstance(v, str):
        try:
            f = float(v.strip())
        except ValueError:
            return None
    else:
        return None
    return f if math.isfinite(f) else None


def exercise_from(raw: Any) -> Optional[ParsedExercise]:
    if not isinstance(raw, dict):
        return None
    name = norm_name(raw.get("name"))
    if not name:
        return None
    return ParsedExercise(
        name=name,
        sets=as_int(raw.get("sets")),
        reps=as_int(raw.get("reps")),
        weight=as_float(raw.get("weight")),
        unit=norm_name(raw.get("unit")) or None,
    )


def exercises_of(structured: Any) -> List[ParsedExercise]:
    if not isinstance(structured, dict):
        return []
    out: List[ParsedExercise] = []
    for raw in structured.get("exercises") or []:
        ex = exercise_from(raw)
        if ex is not None:
            out.append(ex)
    return out


def muscle_groups_of(structured: Any) -> List[str]:
    if not isinstance(structured, dict):
        return []
    groups = structured.get("muscle_groups") or []
    if not isinstance(groups, list):
        return []
    return [g for g in (norm_name(m) for m in groups) if g]


def normalize_parsed(data: Any, fallback_title: str = "Workout") -> ParsedWorkout:
    """Missing or junk fields become "no data"; exercises without a name are dropped."""
    if not isinstance(data, dict):
        data = {}
    return ParsedWorkout(
        title=norm_name(data.get("title")) or fallback_title,
        category=norm_name(data.get("category")) or None,
        muscle_groups=muscle_groups_of(data),
        duration=as_int(data.get("duration")),
        exercises=exercises_of(data),
    )
