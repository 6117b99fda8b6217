"""One playable board: world, event bus and every rule system wired together.

Presentation layers hold a GameSession, forward clicks to ``select`` (or emit
EVENT_TILE_CLICK on ``event_bus``) and replay the returned ResolutionTrace.
"""
from __future__ import annotations

import random
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Tuple

from goodsort.components.board_position import Layer
from goodsort.components.objective_progress import ObjectiveProgress
from goodsort.constants import DEFAULT_TILE_TYPES
from goodsort.errors import LevelConfigError, ResolutionInProgress
from goodsort.events.bus import EventBus
from goodsort.events.trace import ResolutionTrace
from goodsort.level import LevelConfig, load_level
from goodsort.systems.ability_system import AbilitySystem
from goodsort.systems.board import BoardSystem
from goodsort.systems.board_ops import BoardSnapshot, board_snapshot, is_board_empty, tile_at
from goodsort.systems.match import find_matching_moves
from goodsort.systems.match_resolution import MatchResolutionSystem
from goodsort.systems.objective_system import LOAD_ACTION, ObjectiveSystem
from goodsort.systems.power_budget_system import PowerBudgetSystem
from goodsort.systems.selection import SelectionOutcome, SelectionSystem
from goodsort.utils.board_dump import format_board
from goodsort.world import create_world

Cell = Tuple[int, int]
LevelSource = LevelConfig | Mapping[str, Any] | str | Path


class GameSession:
    def __init__(
        self,
        level: LevelSource | None = None,
        *,
        rng: random.Random | None = None,
        event_bus: EventBus | None = None,
        tile_types: Iterable[str] = DEFAULT_TILE_TYPES,
    ) -> None:
        self.event_bus = event_bus or EventBus()
        self.world = create_world(self.event_bus, tile_types=tile_types, rng=rng)
        self.rng: random.Random = getattr(self.world, "random")
        self.board_system = BoardSystem(self.world, self.event_bus)
        self.engine = MatchResolutionSystem(self.world, self.event_bus)
        self.selection = SelectionSystem(self.world, self.event_bus, self.engine)
        self.abilities = AbilitySystem(self.world, self.event_bus, self.engine, rng=self.rng)
        self.power_budget = PowerBudgetSystem(self.world, self.event_bus, self.abilities)
        self.objectives = ObjectiveSystem(self.world, self.event_bus)
        if level is not None:
            self.load_level(level)

    @property
    def level(self) -> LevelConfig | None:
        return self.board_system.level

    @property
    def last_trace(self) -> ResolutionTrace | None:
        return self.engine.last_trace

    def load_level(self, level: LevelSource) -> ResolutionTrace:
        """Rebuild the board from ``level`` and settle any match it starts with."""
        if self.engine.is_resolving:
            raise ResolutionInProgress("cannot load a level while resolving")
        config = _coerce_level(level)
        self.board_system.load_level(config)
        return self.engine.settle(LOAD_ACTION)

    def reset(self) -> ResolutionTrace:
        if self.level is None:
            raise LevelConfigError("no level loaded")
        return self.load_level(self.level)

    # Player actions

    def submit_move(self, source: Cell, target: Cell) -> ResolutionTrace:
        return self.engine.submit_move(source, target)

    def select(self, x: int, y: int) -> SelectionOutcome:
        return self.selection.select(x, y)

    def cancel_selection(self) -> Cell:
        return self.selection.cancel_selection()

    def use_random_match(self) -> ResolutionTrace:
        return self.abilities.use_random_match()

    def use_shuffle(self) -> ResolutionTrace:
        return self.abilities.use_shuffle()

    def request_ability(self, ability: str) -> ResolutionTrace:
        """Budgeted activation: spends one of the level's uses on success."""
        return self.power_budget.use(ability)

    # Queries

    def current_selection(self) -> Cell | None:
        return self.selection.current_selection()

    def tile_at(self, x: int, y: int, layer: Layer = Layer.FRONT) -> int | None:
        return tile_at(self.world, x, y, layer)

    def is_board_empty(self) -> bool:
        return is_board_empty(self.world)

    def snapshot(self) -> BoardSnapshot:
        return board_snapshot(self.world)

    def hint_moves(self) -> List[Tuple[Cell, Cell]]:
        return find_matching_moves(self.world)

    def uses_left(self, ability: str) -> int:
        return self.power_budget.uses_left(ability)

    @property
    def progress(self) -> ObjectiveProgress:
        return self.objectives.progress()

    def dump(self) -> str:
        return format_board(self.world)


def _coerce_level(level: LevelSource) -> LevelConfig:
    if isinstance(level, LevelConfig):
        return level
    if isinstance(level, Mapping):
        return LevelConfig.from_dict(level)
    if isinstance(level, (str, Path)):
        return load_level(level)
    raise LevelConfigError(f"unsupported level source: {type(level).__name__}")
