"""Resolution trace: the ordered, finite event list returned by every resolved action.

Presentation layers replay the events at their own pace; objective tracking
consumes the same events, either from the returned trace or from the bus.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterator, List, Tuple

from goodsort.events.bus import (
    EVENT_BOARD_QUIESCENT,
    EVENT_TILE_MOVED,
    EVENT_TILES_MATCHED,
    EVENT_TILES_PROMOTED,
    EVENT_TILES_SHUFFLED,
)

Cell = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class TileMoved:
    source: Cell
    target: Cell
    type_id: int

    event_name: ClassVar[str] = EVENT_TILE_MOVED

    def payload(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "type_id": self.type_id}


@dataclass(frozen=True, slots=True)
class TilesShuffled:
    placements: Tuple[Tuple[Cell, int], ...]

    event_name: ClassVar[str] = EVENT_TILES_SHUFFLED

    def payload(self) -> Dict[str, Any]:
        return {"placements": list(self.placements)}


@dataclass(frozen=True, slots=True)
class TilesMatched:
    """One cleared group. ``forced`` marks the random match ability's clear."""
    type_id: int
    cells: Tuple[Cell, ...]
    forced: bool = False

    event_name: ClassVar[str] = EVENT_TILES_MATCHED

    def payload(self) -> Dict[str, Any]:
        return {"type_id": self.type_id, "cells": list(self.cells), "forced": self.forced}


@dataclass(frozen=True, slots=True)
class TilesPromoted:
    section: int
    row: int
    cells: Tuple[Cell, ...]

    event_name: ClassVar[str] = EVENT_TILES_PROMOTED

    def payload(self) -> Dict[str, Any]:
        return {"section": self.section, "row": self.row, "cells": list(self.cells)}


@dataclass(frozen=True, slots=True)
class BoardQuiescent:
    passes: int
    board_empty: bool

    event_name: ClassVar[str] = EVENT_BOARD_QUIESCENT

    def payload(self) -> Dict[str, Any]:
        return {"passes": self.passes, "board_empty": self.board_empty}


@dataclass(slots=True)
class ResolutionTrace:
    """Events of one resolved action, in the order they happened."""

    action: str
    events: List[Any] = field(default_factory=list)

    def append(self, event: Any) -> None:
        self.events.append(event)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def of_type(self, kind: type) -> List[Any]:
        return [event for event in self.events if isinstance(event, kind)]

    def matched(self) -> List[TilesMatched]:
        return self.of_type(TilesMatched)

    def promoted(self) -> List[TilesPromoted]:
        return self.of_type(TilesPromoted)

    @property
    def quiescent(self) -> bool:
        return bool(self.events) and isinstance(self.events[-1], BoardQuiescent)

    @property
    def board_empty(self) -> bool:
        return self.quiescent and self.events[-1].board_empty

    @property
    def passes(self) -> int:
        return self.events[-1].passes if self.quiescent else 0

    @property
    def tiles_cleared(self) -> int:
        return sum(len(event.cells) for event in self.matched())
