from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class AbilityBudget:
    """Remaining per-level uses for each special ability."""

    remaining: Dict[str, int] = field(default_factory=dict)

    def uses_left(self, ability: str) -> int:
        return self.remaining.get(ability, 0)
