"""Section-aware two-layer tile store on top of the ECS world.

Pure queries and mutators that never leave a layer half-updated. Nothing
here knows about matching or cascades; see match.py and match_resolution.py for that.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from esper import World

from goodsort.components.active_switch import ActiveSwitch
from goodsort.components.board import Board
from goodsort.components.board_position import Layer
from goodsort.components.cell_index import CellIndex
from goodsort.components.tile import TileType
from goodsort.components.tile_type_registry import TileTypeRegistry
from goodsort.components.tile_types import TileTypes
from goodsort.constants import EMPTY_TILE
from goodsort.errors import (
    BoardNotLoaded,
    CellNotOccupied,
    CellOccupied,
    InvalidCoordinate,
    UnknownTileType,
)

Cell = Tuple[int, int]
LayerRows = Tuple[Tuple[Optional[int], ...], ...]
BoardSnapshot = Tuple[LayerRows, LayerRows]


def get_tile_registry(world: World) -> TileTypes:
    for entity, _ in world.get_component(TileTypeRegistry):
        return world.component_for_entity(entity, TileTypes)
    raise RuntimeError("TileTypes definitions not found")


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise BoardNotLoaded("board not initialised; load a level first")


def _cell_index(world: World) -> Dict[Tuple[int, int, Layer], int]:
    for _, index in world.get_component(CellIndex):
        return index.entities
    return {}


def get_entity_at(world: World, x: int, y: int, layer: Layer = Layer.FRONT) -> int | None:
    return _cell_index(world).get((x, y, layer))


def section_of(world: World, x: int) -> int:
    return get_board(world).section_of(x)


def _slot(world: World, x: int, y: int, layer: Layer) -> Tuple[ActiveSwitch, TileType] | None:
    entity = get_entity_at(world, x, y, layer)
    if entity is None:
        return None
    return (
        world.component_for_entity(entity, ActiveSwitch),
        world.component_for_entity(entity, TileType),
    )


def _require_slot(world: World, x: int, y: int, layer: Layer) -> Tuple[ActiveSwitch, TileType]:
    board = get_board(world)
    if not board.in_bounds(x, y):
        raise InvalidCoordinate(x, y)
    slot = _slot(world, x, y, layer)
    if slot is None:
        raise InvalidCoordinate(x, y, reason="in a disabled section")
    return slot


def is_occupied(world: World, x: int, y: int, layer: Layer = Layer.FRONT) -> bool:
    """True if the cell holds a tile; out-of-range or disabled cells are never occupied."""
    slot = _slot(world, x, y, layer)
    return slot is not None and slot[0].active


def tile_at(world: World, x: int, y: int, layer: Layer = Layer.FRONT) -> int | None:
    """Tile type id at the cell, or None when empty, out of range or disabled."""
    slot = _slot(world, x, y, layer)
    if slot is None or not slot[0].active:
        return None
    return slot[1].type_id


def place_tile(world: World, x: int, y: int, layer: Layer, type_id: int) -> None:
    switch, tile = _require_slot(world, x, y, layer)
    if type_id == EMPTY_TILE or not get_tile_registry(world).is_known(type_id):
        raise UnknownTileType(f"cannot place tile type {type_id}", context={"type_id": type_id})
    if switch.active:
        raise CellOccupied(f"cell ({x}, {y}) already holds a tile", context={"layer": layer.value})
    tile.type_id = type_id
    switch.active = True


def remove_tile(world: World, x: int, y: int, layer: Layer) -> int:
    switch, tile = _require_slot(world, x, y, layer)
    if not switch.active:
        raise CellNotOccupied(f"cell ({x}, {y}) is empty", context={"layer": layer.value})
    type_id = tile.type_id
    tile.type_id = EMPTY_TILE
    switch.active = False
    return type_id


def move_front_tile(world: World, source: Cell, target: Cell) -> int:
    """Relocate the front tile at source into the empty front cell target.

    Both cells are validated before either is touched, so a rejected move
    leaves the board unchanged. Returns the moved type id.
    """
    src_switch, src_tile = _require_slot(world, source[0], source[1], Layer.FRONT)
    dst_switch, dst_tile = _require_slot(world, target[0], target[1], Layer.FRONT)
    if not src_switch.active:
        raise CellNotOccupied(f"no tile to move at {source}", context={"source": source})
    if dst_switch.active:
        raise CellOccupied(f"move target {target} is occupied", context={"target": target})
    type_id = src_tile.type_id
    dst_tile.type_id = type_id
    dst_switch.active = True
    src_tile.type_id = EMPTY_TILE
    src_switch.active = False
    return type_id


def is_row_empty_in_section(world: World, section: int, y: int, layer: Layer = Layer.FRONT) -> bool:
    board = get_board(world)
    return all(not is_occupied(world, x, y, layer) for x in board.section_columns(section))


def layer_tile_map(world: World, layer: Layer = Layer.FRONT) -> Dict[Cell, int]:
    """Return mapping of occupied cell positions on one layer to their type ids."""
    mapping: Dict[Cell, int] = {}
    for (x, y, cell_layer), entity in _cell_index(world).items():
        if cell_layer is not layer:
            continue
        if not world.component_for_entity(entity, ActiveSwitch).active:
            continue
        mapping[(x, y)] = world.component_for_entity(entity, TileType).type_id
    return mapping


def front_tile_map(world: World) -> Dict[Cell, int]:
    return layer_tile_map(world, Layer.FRONT)


def enabled_cells(world: World) -> List[Cell]:
    """All enabled cell coordinates in row-major order."""
    board = get_board(world)
    return [
        (x, y)
        for y in range(board.height)
        for x in range(board.width)
        if board.is_cell_enabled(x, y)
    ]


def count_tiles(world: World, layer: Layer | None = None) -> int:
    total = 0
    for (_, _, cell_layer), entity in _cell_index(world).items():
        if layer is not None and cell_layer is not layer:
            continue
        if world.component_for_entity(entity, ActiveSwitch).active:
            total += 1
    return total


def is_board_empty(world: World) -> bool:
    return count_tiles(world) == 0


def board_snapshot(world: World) -> BoardSnapshot:
    """Immutable copy of both layers, indexed [y][x]; None marks empty cells."""
    board = get_board(world)

    def rows(layer: Layer) -> LayerRows:
        return tuple(
            tuple(tile_at(world, x, y, layer) for x in range(board.width))
            for y in range(board.height)
        )

    return rows(Layer.FRONT), rows(Layer.BACK)
