import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from esper import World
from goodsort.events.bus import (
    EventBus,
    EVENT_BOARD_QUIESCENT,
    EVENT_LEVEL_LOADED,
    EVENT_RESOLUTION_STARTED,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
)
from goodsort.events.trace import ResolutionTrace
from goodsort.components.board_position import Layer
from goodsort.errors import BoardError, InvalidCoordinate, NoSelectionActive
from goodsort.systems.board_ops import get_board, is_occupied
from goodsort.systems.match_resolution import MatchResolutionSystem

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]


class SelectionKind(Enum):
    IDLE = "idle"
    ARMED = "armed"
    MOVE_TRIGGERED = "move_triggered"


@dataclass(frozen=True, slots=True)
class SelectionOutcome:
    """Result of one select() call.

    ``rejected`` marks a no-op (empty cell while idle, input during a cascade).
    ``trace`` is set only when the selection triggered a move.
    """
    kind: SelectionKind
    cell: Optional[Cell] = None
    trace: Optional[ResolutionTrace] = None
    rejected: bool = False


class SelectionSystem:
    """Two-state selection protocol: Idle, or one armed front tile."""

    def __init__(self, world: World, event_bus: EventBus, engine: MatchResolutionSystem):
        self.world = world
        self.event_bus = event_bus
        self.engine = engine
        self.selected: Optional[Cell] = None
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_LEVEL_LOADED, self.on_level_loaded)
        self.event_bus.subscribe(EVENT_RESOLUTION_STARTED, self.on_resolution_started)
        self.event_bus.subscribe(EVENT_BOARD_QUIESCENT, self.on_board_quiescent)

    def current_selection(self) -> Optional[Cell]:
        self._drop_if_emptied()
        return self.selected

    def select(self, x: int, y: int) -> SelectionOutcome:
        if self.engine.is_resolving:
            logger.debug("Selection at (%d, %d) ignored while resolving", x, y)
            return self._outcome(rejected=True)
        if not get_board(self.world).is_cell_enabled(x, y):
            raise InvalidCoordinate(x, y, reason="not a playable cell")
        self._drop_if_emptied()
        cell = (x, y)
        occupied = is_occupied(self.world, x, y, Layer.FRONT)
        if self.selected is None:
            if not occupied:
                return SelectionOutcome(kind=SelectionKind.IDLE, rejected=True)
            self._arm(cell)
            return SelectionOutcome(kind=SelectionKind.ARMED, cell=cell)
        if cell == self.selected:
            self._clear("same_cell")
            return SelectionOutcome(kind=SelectionKind.IDLE)
        if occupied:
            self._arm(cell)
            return SelectionOutcome(kind=SelectionKind.ARMED, cell=cell)
        source = self.selected
        # Disarm first so the quiescence check during publishing sees Idle.
        self.selected = None
        try:
            trace = self.engine.submit_move(source, cell)
        except BoardError:
            self.selected = source
            raise
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason="moved", prev_x=source[0], prev_y=source[1])
        return SelectionOutcome(kind=SelectionKind.MOVE_TRIGGERED, cell=cell, trace=trace)

    def cancel_selection(self) -> Cell:
        """Disarm the current selection (right-click); raises NoSelectionActive when idle."""
        prev = self.current_selection()
        if prev is None:
            raise NoSelectionActive("no tile is selected")
        self._clear("cancelled")
        return prev

    def on_tile_click(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        try:
            self.select(x, y)
        except InvalidCoordinate as exc:
            logger.debug("Click outside playable cells ignored: %s", exc)

    def on_level_loaded(self, sender, **kwargs):
        if self.selected is not None:
            self._clear("level_loaded")

    def on_resolution_started(self, sender, **kwargs):
        # Abilities rearrange the board under an armed tile.
        if kwargs.get("action") != "move" and self.selected is not None:
            self._clear("board_changed")

    def on_board_quiescent(self, sender, **kwargs):
        self._drop_if_emptied()

    def _outcome(self, *, rejected: bool = False) -> SelectionOutcome:
        kind = SelectionKind.ARMED if self.selected is not None else SelectionKind.IDLE
        return SelectionOutcome(kind=kind, cell=self.selected, rejected=rejected)

    def _arm(self, cell: Cell) -> None:
        self.selected = cell
        self.event_bus.emit(EVENT_TILE_SELECTED, x=cell[0], y=cell[1])

    def _clear(self, reason: str) -> None:
        prev = self.selected
        self.selected = None
        if prev is not None:
            self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev_x=prev[0], prev_y=prev[1])

    def _drop_if_emptied(self) -> None:
        if self.selected is None:
            return
        if not is_occupied(self.world, self.selected[0], self.selected[1], Layer.FRONT):
            self._clear("cell_emptied")
