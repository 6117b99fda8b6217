from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems nobody else references alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# INPUT & SELECTION
# ============================================================================
EVENT_TILE_CLICK = "tile_click"              # payload: x, y
EVENT_TILE_SELECTED = "tile_selected"        # payload: x, y
EVENT_TILE_DESELECTED = "tile_deselected"    # payload: reason=str, prev_x, prev_y


# ============================================================================
# BOARD RESOLUTION
# ============================================================================
EVENT_RESOLUTION_STARTED = "resolution_started"  # payload: action=str
EVENT_TILE_MOVED = "tile_moved"                  # payload: source=(x,y), target=(x,y), type_id=int
EVENT_TILES_SHUFFLED = "tiles_shuffled"          # payload: placements=list[((x,y), int)]
EVENT_TILES_MATCHED = "tiles_matched"            # payload: type_id=int, cells=list[(x,y)], forced=bool
EVENT_TILES_PROMOTED = "tiles_promoted"          # payload: section=int, row=int, cells=list[(x,y)]
EVENT_BOARD_QUIESCENT = "board_quiescent"        # payload: action=str, passes=int, board_empty=bool
EVENT_BOARD_CLEARED = "board_cleared"            # payload: action=str


# ============================================================================
# LEVEL LIFECYCLE
# ============================================================================
EVENT_LEVEL_LOADED = "level_loaded"          # payload: level_number=int, width=int, height=int, section_count=int
EVENT_LEVEL_COMPLETED = "level_completed"    # payload: level_number=int, reason=str
EVENT_LEVEL_FAILED = "level_failed"          # payload: level_number=int, reason=str


# ============================================================================
# ABILITIES
# ============================================================================
EVENT_ABILITY_ACTIVATE_REQUEST = "ability_activate_request"  # payload: ability=str
EVENT_ABILITY_USED = "ability_used"                          # payload: ability=str, remaining=int, trace=ResolutionTrace
EVENT_ABILITY_REJECTED = "ability_rejected"                  # payload: ability=str, reason=str
EVENT_ABILITY_BUDGET_CHANGED = "ability_budget_changed"      # payload: ability=str, remaining=int


# ============================================================================
# OBJECTIVES
# ============================================================================
EVENT_ITEM_COLLECTED = "item_collected"    # payload: type_id=int, collected=int, target=int
EVENT_MOVES_CHANGED = "moves_changed"      # payload: moves_made=int, moves_remaining=int|None
