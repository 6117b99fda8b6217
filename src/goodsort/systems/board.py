import logging
from typing import List

from esper import World
from goodsort.events.bus import EventBus, EVENT_LEVEL_LOADED
from goodsort.components.active_switch import ActiveSwitch
from goodsort.components.board import Board
from goodsort.components.board_position import BoardPosition, Layer
from goodsort.components.cell_index import CellIndex
from goodsort.components.tile import TileType
from goodsort.constants import EMPTY_TILE
from goodsort.errors import BoardNotLoaded, LevelConfigError
from goodsort.level import LevelConfig
from goodsort.systems.board_ops import get_tile_registry
from goodsort.utils.board_dump import format_board

logger = logging.getLogger(__name__)


class BoardSystem:
    """Owns the board entities and rebuilds them from a LevelConfig on every load."""

    def __init__(self, world: World, event_bus: EventBus, level: LevelConfig | None = None):
        self.world = world
        self.event_bus = event_bus
        self.board_entity: int | None = None
        self.level: LevelConfig | None = None
        if level is not None:
            self.load_level(level)

    def load_level(self, level: LevelConfig) -> None:
        """Discard the current board and build a fresh one from ``level``.

        Unknown tile types are rejected before anything is torn down, so a bad
        config leaves the previous board in place.
        """
        self._check_tile_types(level)
        self._clear_board()
        disabled = frozenset(level.disabled_sections)
        board = Board(
            width=level.width,
            height=level.height,
            section_count=level.section_count,
            disabled_sections=disabled,
        )
        index = CellIndex()
        self.board_entity = self.world.create_entity(board, index)
        dropped = 0
        for y in range(board.height):
            for x in range(board.width):
                enabled = board.is_cell_enabled(x, y)
                for layer, type_id in ((Layer.FRONT, level.front_at(x, y)), (Layer.BACK, level.back_at(x, y))):
                    if not enabled:
                        # Disabled sections get no cell entities at all.
                        if type_id != EMPTY_TILE:
                            dropped += 1
                        continue
                    active = type_id != EMPTY_TILE
                    ent = self.world.create_entity(
                        BoardPosition(x=x, y=y, layer=layer),
                        TileType(type_id=type_id if active else EMPTY_TILE),
                        ActiveSwitch(active=active),
                    )
                    index.entities[(x, y, layer)] = ent
        if dropped:
            logger.warning(
                "Level %s places %d tile(s) in disabled sections %s; they were dropped",
                level.level_number, dropped, sorted(disabled),
            )
        self.level = level
        logger.info(
            "Level %s loaded: %dx%d, %d section(s), disabled=%s",
            level.level_number, level.width, level.height, level.section_count, sorted(disabled),
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Initial grid state:\n%s", format_board(self.world))
        self.event_bus.emit(
            EVENT_LEVEL_LOADED,
            level=level,
            level_number=level.level_number,
            width=level.width,
            height=level.height,
            section_count=level.section_count,
        )

    def reset(self) -> None:
        """Rebuild the current level from scratch."""
        if self.level is None:
            raise BoardNotLoaded("no level loaded")
        self.load_level(self.level)

    def board(self) -> Board:
        if self.board_entity is None:
            raise BoardNotLoaded("no level loaded")
        return self.world.component_for_entity(self.board_entity, Board)

    def _check_tile_types(self, level: LevelConfig) -> None:
        registry = get_tile_registry(self.world)
        unknown: List[int] = sorted(
            {
                value
                for value in list(level.front_layout) + list(level.back_layout)
                if value != EMPTY_TILE and not registry.is_known(value)
            }
        )
        if unknown:
            raise LevelConfigError(
                "level uses unknown tile types",
                context={"unknown": unknown, "known": registry.defined_types()},
            )

    def _clear_board(self) -> None:
        stale = [ent for ent, _ in self.world.get_component(BoardPosition)]
        stale.extend(ent for ent, _ in self.world.get_component(Board))
        for ent in stale:
            self.world.delete_entity(ent, immediate=True)
        self.board_entity = None
