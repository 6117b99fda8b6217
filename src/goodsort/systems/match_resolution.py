import logging
from typing import Callable, List, Tuple

from esper import World
from goodsort.events.bus import (
    EventBus,
    EVENT_BOARD_CLEARED,
    EVENT_RESOLUTION_STARTED,
)
from goodsort.events.trace import (
    BoardQuiescent,
    ResolutionTrace,
    TileMoved,
    TilesMatched,
    TilesPromoted,
)
from goodsort.components.board_position import Layer
from goodsort.errors import ResolutionError, ResolutionInProgress
from goodsort.systems.board_ops import (
    count_tiles,
    get_board,
    is_board_empty,
    is_occupied,
    is_row_empty_in_section,
    move_front_tile,
    place_tile,
    remove_tile,
)
from goodsort.systems.match import MatchGroup, find_matches
from goodsort.systems.resolution_state_utils import get_or_create_resolution_state, is_resolving
from goodsort.utils.board_dump import format_board

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]


class MatchResolutionSystem:
    """Runs the match -> clear -> promote cascade to a quiescent fixed point.

    Every entry point validates, mutates the board, resolves synchronously and
    returns the ResolutionTrace. The finished trace is then republished on the
    event bus while the resolution lock is still held, so subscribers observe
    the final board and any input they try to inject is rejected.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.last_trace: ResolutionTrace | None = None

    @property
    def is_resolving(self) -> bool:
        return is_resolving(self.world)

    def submit_move(self, source: Cell, target: Cell) -> ResolutionTrace:
        """Move a front tile into an empty front cell and resolve the result.

        Legal for any empty enabled cell, adjacent or not, match or no match.
        Raises MoveError subclasses without touching the board.
        """
        source = (int(source[0]), int(source[1]))
        target = (int(target[0]), int(target[1]))

        def apply(trace: ResolutionTrace) -> None:
            type_id = move_front_tile(self.world, source, target)
            logger.debug("Moved type %s from %s to %s", type_id, source, target)
            trace.append(TileMoved(source=source, target=target, type_id=type_id))

        return self.run_action("move", apply)

    def settle(self, action: str = "settle") -> ResolutionTrace:
        """Resolve whatever the board currently holds (used right after a level load)."""
        return self.run_action(action, lambda trace: None)

    def run_action(
        self,
        action: str,
        apply: Callable[[ResolutionTrace], None],
        *,
        from_promotion: bool = False,
    ) -> ResolutionTrace:
        """Apply one board mutation under the resolution lock and cascade to quiescence.

        ``apply`` records its own opening events on the trace and must raise
        before mutating anything if it rejects the action. With
        ``from_promotion`` the cascade starts at the promotion step, for
        actions that already cleared tiles themselves.
        """
        state = get_or_create_resolution_state(self.world)
        if state.cascade_active:
            raise ResolutionInProgress(
                f"cannot start {action} while {state.action_source} is resolving",
                context={"action": action, "active": state.action_source},
            )
        state.cascade_active = True
        state.action_source = action
        state.cascade_depth = 0
        try:
            trace = ResolutionTrace(action=action)
            apply(trace)
            self.event_bus.emit(EVENT_RESOLUTION_STARTED, action=action)
            self._cascade(trace, from_promotion=from_promotion)
            self.last_trace = trace
            state.actions_resolved += 1
            self._publish(trace)
            return trace
        finally:
            state.cascade_active = False
            state.action_source = None

    def _cascade(self, trace: ResolutionTrace, *, from_promotion: bool) -> None:
        state = get_or_create_resolution_state(self.world)
        # Each productive step lowers 2 * back + front: a clear removes 3+ front
        # tiles, a promotion turns back tiles into front tiles.
        max_steps = 2 * count_tiles(self.world, Layer.BACK) + count_tiles(self.world, Layer.FRONT) + 1
        steps = 0
        passes = 0
        if from_promotion:
            self._promote_empty_rows(trace)
        while True:
            steps += 1
            if steps > max_steps:
                raise ResolutionError(
                    "cascade did not reach a fixed point",
                    context={"steps": steps, "action": trace.action},
                )
            groups = find_matches(self.world)
            if groups:
                passes += 1
                state.cascade_depth = passes
                self._clear_groups(trace, groups)
                self._promote_empty_rows(trace)
                continue
            # No match left; a move or shuffle can still have emptied a section-row.
            if self._promote_empty_rows(trace):
                continue
            break
        board_empty = is_board_empty(self.world)
        trace.append(BoardQuiescent(passes=passes, board_empty=board_empty))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%s resolved in %d pass(es), board_empty=%s\n%s",
                trace.action, passes, board_empty, format_board(self.world),
            )

    def _clear_groups(self, trace: ResolutionTrace, groups: List[MatchGroup]) -> None:
        for group in groups:
            for x, y in group.cells:
                remove_tile(self.world, x, y, Layer.FRONT)
            logger.debug("Matched %d x type %s at %s", len(group), group.type_id, list(group.cells))
            trace.append(TilesMatched(type_id=group.type_id, cells=group.cells))

    def _promote_empty_rows(self, trace: ResolutionTrace) -> bool:
        """Promote back tiles of every section-row that is empty on the front layer."""
        board = get_board(self.world)
        promoted_any = False
        for section in board.enabled_sections():
            for y in range(board.height):
                if not is_row_empty_in_section(self.world, section, y, Layer.FRONT):
                    continue
                cells: List[Cell] = []
                for x in board.section_columns(section):
                    if not is_occupied(self.world, x, y, Layer.BACK):
                        continue
                    type_id = remove_tile(self.world, x, y, Layer.BACK)
                    place_tile(self.world, x, y, Layer.FRONT, type_id)
                    cells.append((x, y))
                if cells:
                    promoted_any = True
                    logger.debug("Promoted back tiles in section %d row %d: %s", section, y, cells)
                    trace.append(TilesPromoted(section=section, row=y, cells=tuple(cells)))
        return promoted_any

    def _publish(self, trace: ResolutionTrace) -> None:
        for event in trace:
            self.event_bus.emit(event.event_name, action=trace.action, **event.payload())
        if trace.board_empty:
            self.event_bus.emit(EVENT_BOARD_CLEARED, action=trace.action)
