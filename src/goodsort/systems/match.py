from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from esper import World

from goodsort.components.board import Board
from goodsort.constants import MIN_MATCH_LENGTH
from goodsort.systems.board_ops import front_tile_map, get_board

Cell = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class MatchGroup:
    """A maximal horizontal run of one tile type inside a single section-row."""
    type_id: int
    cells: Tuple[Cell, ...]

    @property
    def row(self) -> int:
        return self.cells[0][1]

    def __len__(self) -> int:
        return len(self.cells)


def find_matches_in(board: Board, types: Dict[Cell, int]) -> List[MatchGroup]:
    """Scan a front-layer type map for runs of MIN_MATCH_LENGTH or more.

    Rows top to bottom, sections left to right, columns left to right. A run
    stops at an empty cell, a type change or the section's last column.
    """
    matches: List[MatchGroup] = []
    for y in range(board.height):
        for section in board.enabled_sections():
            run: List[Cell] = []
            last_type = None
            for x in board.section_columns(section):
                tval = types.get((x, y))
                if tval is not None and tval == last_type:
                    run.append((x, y))
                    continue
                if len(run) >= MIN_MATCH_LENGTH:
                    matches.append(MatchGroup(type_id=last_type, cells=tuple(run)))
                run = [(x, y)] if tval is not None else []
                last_type = tval
            if len(run) >= MIN_MATCH_LENGTH:
                matches.append(MatchGroup(type_id=last_type, cells=tuple(run)))
    return matches


def find_matches(world: World) -> List[MatchGroup]:
    """Detect every match group on the front layer without touching the board."""
    return find_matches_in(get_board(world), front_tile_map(world))


def predict_move_creates_match(
    world: World, source: Cell, target: Cell, *, types: Dict[Cell, int] | None = None
) -> bool:
    """Return True if moving the front tile at source into empty target would form a match."""
    board = get_board(world)
    tile_map = types if types is not None else front_tile_map(world)
    if source not in tile_map or target in tile_map:
        return False
    if not board.is_cell_enabled(*target):
        return False
    moved = tile_map.copy()
    moved[target] = moved.pop(source)
    return any(target in group.cells for group in find_matches_in(board, moved))


def find_matching_moves(world: World) -> List[Tuple[Cell, Cell]]:
    """Enumerate (source, target) moves that would produce a match through the moved tile."""
    board = get_board(world)
    tile_map = front_tile_map(world)
    if not tile_map:
        return []
    empties = [
        (x, y)
        for y in range(board.height)
        for x in range(board.width)
        if board.is_cell_enabled(x, y) and (x, y) not in tile_map
    ]
    moves: List[Tuple[Cell, Cell]] = []
    for source in sorted(tile_map, key=lambda cell: (cell[1], cell[0])):
        for target in empties:
            if predict_move_creates_match(world, source, target, types=tile_map):
                moves.append((source, target))
    return moves
