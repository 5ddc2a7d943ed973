"""Reading a number out of the free-form "planned reps" text of an exercise."""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional

# digits at the very start, closed by end of text or a separator (not "30s")
_LEADING_INT = re.compile(r"^(\d+)(?!\w)")


@dataclass(slots=True, frozen=True)
class PlannedReps:
    leading: Optional[int]
    raw: str

    @property
    def fallback(self) -> str:
        """What to record for a set nobody logged reps for."""
        return str(self.leading) if self.leading is not None else self.raw


def parse_planned_reps(text: Optional[str]) -> PlannedReps:
    """
    ``"12-10-8"`` -> 12, ``"10 reps"`` -> 10. Text whose first token is not a
    plain integer (``"30s/lado"``, ``"max"``) keeps only the stripped raw text.
    """
    raw = (text or "").strip()
    m = _LEADING_INT.match(raw)
    return PlannedReps(leading=int(m.group(1)) if m else None, raw=raw)
