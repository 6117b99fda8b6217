"""Level configuration: the opaque input a board is rebuilt from on every load."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from goodsort.constants import (
    DEFAULT_GRID_HEIGHT,
    DEFAULT_GRID_WIDTH,
    DEFAULT_SECTION_COUNT,
    EMPTY_TILE,
)
from goodsort.errors import LevelConfigError

logger = logging.getLogger(__name__)

# Text-row notation used by from_rows: '-' or '.' is empty, 'A' is type 0, 'B' type 1, ...
ROW_EMPTY_CHARS = "-."


@dataclass(slots=True)
class LevelConfig:
    """Board shape, both layer layouts and per-level rules.

    Layouts are row-major (index = y * width + x) and use EMPTY_TILE for
    empty cells.
    """

    width: int = DEFAULT_GRID_WIDTH
    height: int = DEFAULT_GRID_HEIGHT
    section_count: int = DEFAULT_SECTION_COUNT
    disabled_sections: List[int] = field(default_factory=list)
    front_layout: List[int] = field(default_factory=list)
    back_layout: List[int] = field(default_factory=list)
    level_number: int = 0
    name: str = ""
    moves_limit: int = 0  # 0 = unlimited
    sorting_goals: Dict[int, int] = field(default_factory=dict)
    clear_all_goal: bool = True
    random_match_uses: int = 0
    shuffle_uses: int = 0

    def __post_init__(self) -> None:
        cells = self.width * self.height if self.width > 0 and self.height > 0 else 0
        if not self.front_layout:
            self.front_layout = [EMPTY_TILE] * cells
        if not self.back_layout:
            self.back_layout = [EMPTY_TILE] * cells
        self.validate()

    @property
    def columns_per_section(self) -> int:
        return self.width // self.section_count

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise LevelConfigError(
                "board dimensions must be positive",
                context={"width": self.width, "height": self.height},
            )
        if self.section_count <= 0:
            raise LevelConfigError("section count must be positive", context={"section_count": self.section_count})
        if self.width % self.section_count != 0:
            raise LevelConfigError(
                "width must be divisible by section count",
                context={"width": self.width, "section_count": self.section_count},
            )
        expected = self.width * self.height
        for label, layout in (("front_layout", self.front_layout), ("back_layout", self.back_layout)):
            if len(layout) != expected:
                raise LevelConfigError(
                    f"{label} length mismatch",
                    context={"expected": expected, "actual": len(layout)},
                )
            for index, value in enumerate(layout):
                if not isinstance(value, int) or isinstance(value, bool) or value < EMPTY_TILE:
                    raise LevelConfigError(
                        f"{label} holds an invalid tile type",
                        context={"index": index, "value": value},
                    )
        for section in self.disabled_sections:
            if not 0 <= section < self.section_count:
                raise LevelConfigError(
                    "disabled section out of range",
                    context={"section": section, "section_count": self.section_count},
                )
        for type_id, target in self.sorting_goals.items():
            if type_id < 0 or target < 0:
                raise LevelConfigError("invalid sorting goal", context={"type_id": type_id, "target": target})
        if self.moves_limit < 0 or self.random_match_uses < 0 or self.shuffle_uses < 0:
            raise LevelConfigError("limits and ability uses must not be negative")

    def front_at(self, x: int, y: int) -> int:
        return self.front_layout[y * self.width + x]

    def back_at(self, x: int, y: int) -> int:
        return self.back_layout[y * self.width + x]

    def tile_count(self) -> int:
        return sum(1 for value in self.front_layout if value != EMPTY_TILE) + sum(
            1 for value in self.back_layout if value != EMPTY_TILE
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LevelConfig":
        """Build a config from a JSON-style mapping (camelCase or snake_case keys)."""

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            return default

        clear_all = pick("clear_all_goal", "clearAllItemsGoal", default=True)
        if not isinstance(clear_all, bool):
            raise LevelConfigError("clear_all_goal must be a boolean", context={"value": clear_all})
        try:
            goals_raw = pick("sorting_goals", "sortingGoals", default={}) or {}
            if isinstance(goals_raw, Mapping):
                goals = {int(k): int(v) for k, v in goals_raw.items()}
            else:
                goals = {int(entry["item_type"]): int(entry["target_count"]) for entry in goals_raw}
            return cls(
                width=int(pick("width", "gridWidth", default=DEFAULT_GRID_WIDTH)),
                height=int(pick("height", "gridHeight", default=DEFAULT_GRID_HEIGHT)),
                section_count=int(pick("section_count", "sectionCount", default=DEFAULT_SECTION_COUNT)),
                disabled_sections=[int(s) for s in pick("disabled_sections", "disabledSections", default=[]) or []],
                front_layout=list(pick("front_layout", "frontLayout", default=[]) or []),
                back_layout=list(pick("back_layout", "backLayout", default=[]) or []),
                level_number=int(pick("level_number", "levelNumber", default=0)),
                name=str(pick("name", "levelName", default="")),
                moves_limit=int(pick("moves_limit", "movesLimit", default=0)),
                sorting_goals=goals,
                clear_all_goal=clear_all,
                random_match_uses=int(pick("random_match_uses", "randomMatchUses", default=0)),
                shuffle_uses=int(pick("shuffle_uses", "shuffleUses", default=0)),
            )
        except (TypeError, ValueError, KeyError) as exc:
            raise LevelConfigError(f"malformed level configuration: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "section_count": self.section_count,
            "disabled_sections": list(self.disabled_sections),
            "front_layout": list(self.front_layout),
            "back_layout": list(self.back_layout),
            "level_number": self.level_number,
            "name": self.name,
            "moves_limit": self.moves_limit,
            "sorting_goals": {str(k): v for k, v in self.sorting_goals.items()},
            "clear_all_goal": self.clear_all_goal,
            "random_match_uses": self.random_match_uses,
            "shuffle_uses": self.shuffle_uses,
        }

    @classmethod
    def from_rows(
        cls,
        front_rows: Sequence[str],
        back_rows: Sequence[str] | None = None,
        *,
        section_count: int = 1,
        disabled_sections: Iterable[int] = (),
        **options: Any,
    ) -> "LevelConfig":
        """Build a config from text rows, top row first: 'AAB-' -> [0, 0, 1, -1]."""
        if not front_rows:
            raise LevelConfigError("at least one row is required")
        width = len(front_rows[0])
        height = len(front_rows)
        front = _parse_rows(front_rows, width)
        if back_rows is None:
            back = [EMPTY_TILE] * (width * height)
        else:
            if len(back_rows) != height:
                raise LevelConfigError("back rows must match front row count")
            back = _parse_rows(back_rows, width)
        return cls(
            width=width,
            height=height,
            section_count=section_count,
            disabled_sections=list(disabled_sections),
            front_layout=front,
            back_layout=back,
            **options,
        )


def _parse_rows(rows: Sequence[str], width: int) -> List[int]:
    values: List[int] = []
    for row in rows:
        if len(row) != width:
            raise LevelConfigError("all rows must have the same width", context={"row": row})
        for char in row:
            if char in ROW_EMPTY_CHARS:
                values.append(EMPTY_TILE)
            elif "A" <= char <= "Z":
                values.append(ord(char) - ord("A"))
            else:
                raise LevelConfigError("unknown tile character", context={"char": char})
    return values


def load_level(path: Path | str) -> LevelConfig:
    """Read a level configuration from a JSON file."""
    level_path = Path(path)
    try:
        with level_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as exc:
        raise LevelConfigError(f"cannot read level file: {exc}", context={"path": str(level_path)}) from exc
    except json.JSONDecodeError as exc:
        raise LevelConfigError(f"invalid level JSON: {exc}", context={"path": str(level_path)}) from exc
    if not isinstance(data, dict):
        raise LevelConfigError("level file must hold a JSON object", context={"path": str(level_path)})
    config = LevelConfig.from_dict(data)
    logger.info("Loaded level %s (%s) from %s", config.level_number, config.name or "unnamed", level_path)
    return config
