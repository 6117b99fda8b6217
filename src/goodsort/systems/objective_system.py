from __future__ import annotations

import logging

from esper import World

from goodsort.components.objective_progress import ObjectiveProgress
from goodsort.events.bus import (
    EventBus,
    EVENT_BOARD_QUIESCENT,
    EVENT_ITEM_COLLECTED,
    EVENT_LEVEL_COMPLETED,
    EVENT_LEVEL_FAILED,
    EVENT_LEVEL_LOADED,
    EVENT_MOVES_CHANGED,
    EVENT_TILE_MOVED,
    EVENT_TILES_MATCHED,
)
from goodsort.level import LevelConfig

logger = logging.getLogger(__name__)

# Matches settled while a level loads belong to the starting layout, not to the player.
LOAD_ACTION = "load"


class ObjectiveSystem:
    """Observes the resolution stream and decides when a level is won or lost."""

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        event_bus.subscribe(EVENT_LEVEL_LOADED, self.on_level_loaded)
        event_bus.subscribe(EVENT_TILES_MATCHED, self.on_tiles_matched)
        event_bus.subscribe(EVENT_TILE_MOVED, self.on_tile_moved)
        event_bus.subscribe(EVENT_BOARD_QUIESCENT, self.on_board_quiescent)

    def progress(self) -> ObjectiveProgress:
        for _, progress in self.world.get_component(ObjectiveProgress):
            return progress
        progress = ObjectiveProgress()
        self.world.create_entity(progress)
        return progress

    def on_level_loaded(self, sender, **payload) -> None:
        level: LevelConfig | None = payload.get("level")
        if level is None:
            return
        progress = self.progress()
        progress.level_number = level.level_number
        progress.goals = dict(level.sorting_goals)
        progress.collected = {}
        progress.clear_all_goal = level.clear_all_goal
        progress.moves_limit = level.moves_limit
        progress.moves_made = 0
        progress.completed = False
        progress.failed = False

    def on_tiles_matched(self, sender, **payload) -> None:
        if payload.get("action") == LOAD_ACTION:
            return
        type_id = payload.get("type_id")
        cells = payload.get("cells") or []
        if type_id is None or not cells:
            return
        progress = self.progress()
        collected = progress.collected.get(type_id, 0) + len(cells)
        progress.collected[type_id] = collected
        self.event_bus.emit(
            EVENT_ITEM_COLLECTED,
            type_id=type_id,
            collected=collected,
            target=progress.goals.get(type_id, 0),
        )

    def on_tile_moved(self, sender, **payload) -> None:
        progress = self.progress()
        if progress.completed or progress.failed:
            return
        progress.moves_made += 1
        self.event_bus.emit(
            EVENT_MOVES_CHANGED,
            moves_made=progress.moves_made,
            moves_remaining=progress.moves_remaining,
        )

    def on_board_quiescent(self, sender, **payload) -> None:
        if payload.get("action") == LOAD_ACTION:
            return
        progress = self.progress()
        if progress.completed or progress.failed:
            return
        board_empty = bool(payload.get("board_empty"))
        if progress.clear_all_goal:
            reason = "board_cleared" if board_empty else None
        else:
            reason = "goals_met" if progress.goals and progress.goals_met() else None
        if reason is not None:
            progress.completed = True
            logger.info("Level %s completed: %s", progress.level_number, reason)
            self.event_bus.emit(EVENT_LEVEL_COMPLETED, level_number=progress.level_number, reason=reason)
            return
        if progress.moves_remaining == 0:
            progress.failed = True
            logger.info("Level %s failed after %d move(s)", progress.level_number, progress.moves_made)
            self.event_bus.emit(EVENT_LEVEL_FAILED, level_number=progress.level_number, reason="out_of_moves")
