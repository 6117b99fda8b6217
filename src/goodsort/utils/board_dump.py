from __future__ import annotations

from typing import List

from esper import World

from goodsort.components.board import Board
from goodsort.components.board_position import Layer
from goodsort.systems.board_ops import tile_at


def _symbol(type_id: int | None) -> str:
    if type_id is None:
        return "-"
    if 0 <= type_id < 26:
        return chr(ord("A") + type_id)
    return "?"


def format_board(world: World) -> str:
    """Render both layers as text rows, top row first, sections split by '|'.

    Front and back layers are shown side by side; disabled cells print as '#'.
    Returns an empty string when no board is loaded.
    """
    boards = list(world.get_component(Board))
    if not boards:
        return ""
    board = boards[0][1]
    lines: List[str] = []
    for y in range(board.height):
        halves = []
        for layer in (Layer.FRONT, Layer.BACK):
            chunks = []
            for section in range(board.section_count):
                cols = board.section_columns(section)
                if not board.is_section_enabled(section):
                    chunks.append("#" * len(cols))
                    continue
                chunks.append("".join(_symbol(tile_at(world, x, y, layer)) for x in cols))
            halves.append("|".join(chunks))
        lines.append(f"{y:>2} {halves[0]}   {halves[1]}")
    return "\n".join(lines)
