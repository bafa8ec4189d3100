from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def apply_changes(record, changes: dict, fields) -> list:
    """Copy the entries of ``changes`` named in ``fields`` onto ``record``."""
    applied = []
    for name, value in changes.items():
        if name in fields:
            setattr(record, name, value)
            applied.append(name)
    return applied
