from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class ResolutionState:
    """Tracks resolution-level state shared across systems.

    cascade_active stays True from the moment an action is validated until
    its trace has been published, so re-entrant input is rejected.
    """

    action_source: Optional[str] = None
    cascade_active: bool = False
    cascade_depth: int = 0
    actions_resolved: int = 0
