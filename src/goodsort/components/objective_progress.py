from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class ObjectiveProgress:
    """Per-level goal bookkeeping fed by the resolution event stream."""

    level_number: int = 0
    goals: Dict[int, int] = field(default_factory=dict)
    collected: Dict[int, int] = field(default_factory=dict)
    clear_all_goal: bool = True
    moves_limit: int = 0  # 0 = unlimited
    moves_made: int = 0
    completed: bool = False
    failed: bool = False

    @property
    def moves_remaining(self) -> int | None:
        if self.moves_limit <= 0:
            return None
        return max(0, self.moves_limit - self.moves_made)

    def goals_met(self) -> bool:
        return all(self.collected.get(type_id, 0) >= target for type_id, target in self.goals.items())
