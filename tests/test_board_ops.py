import pytest

from goodsort.components.board_position import Layer
from goodsort.constants import EMPTY_TILE
from goodsort.errors import (
    BoardNotLoaded,
    CellNotOccupied,
    CellOccupied,
    InvalidCoordinate,
    MoveError,
    UnknownTileType,
)
from goodsort.events.bus import EventBus
from goodsort.systems.board_ops import (
    board_snapshot,
    count_tiles,
    enabled_cells,
    front_tile_map,
    is_board_empty,
    is_occupied,
    is_row_empty_in_section,
    move_front_tile,
    place_tile,
    remove_tile,
    section_of,
    tile_at,
)
from goodsort.world import create_world
from tests.helpers import build_board, layer_rows


def test_queries_report_types_per_layer():
    world, _, _ = build_board(["AB-"], ["--C"])
    assert tile_at(world, 0, 0) == 0
    assert tile_at(world, 1, 0, Layer.FRONT) == 1
    assert tile_at(world, 2, 0, Layer.FRONT) is None
    assert tile_at(world, 2, 0, Layer.BACK) == 2
    assert is_occupied(world, 0, 0)
    assert not is_occupied(world, 0, 0, Layer.BACK)


def test_out_of_range_queries_return_defined_result():
    world, _, _ = build_board(["AB-"])
    assert tile_at(world, 3, 0) is None
    assert tile_at(world, -1, 0) is None
    assert tile_at(world, 0, 1) is None
    assert not is_occupied(world, 99, 99)


def test_place_and_remove():
    world, _, _ = build_board(["---"])
    place_tile(world, 1, 0, Layer.FRONT, 4)
    assert tile_at(world, 1, 0) == 4
    with pytest.raises(CellOccupied):
        place_tile(world, 1, 0, Layer.FRONT, 2)
    assert remove_tile(world, 1, 0, Layer.FRONT) == 4
    with pytest.raises(CellNotOccupied):
        remove_tile(world, 1, 0, Layer.FRONT)
    with pytest.raises(InvalidCoordinate):
        place_tile(world, 5, 0, Layer.FRONT, 1)


@pytest.mark.parametrize("type_id", [EMPTY_TILE, 6, 99])
def test_place_rejects_unregistered_tile_types(type_id):
    world, _, _ = build_board(["---"], ["-B-"])
    before = board_snapshot(world)
    with pytest.raises(UnknownTileType):
        place_tile(world, 0, 0, Layer.FRONT, type_id)
    assert board_snapshot(world) == before
    assert not is_occupied(world, 0, 0)
    assert count_tiles(world) == 1


def test_queries_before_any_level_raise_board_not_loaded():
    world = create_world(EventBus())
    with pytest.raises(BoardNotLoaded):
        board_snapshot(world)
    with pytest.raises(MoveError):
        place_tile(world, 0, 0, Layer.FRONT, 0)


def test_disabled_section_rejects_placement_and_reads_empty():
    world, _, _ = build_board(["AAABBB"], section_count=2, disabled_sections=[1])
    # Tiles authored into a disabled section never reach the board.
    assert tile_at(world, 3, 0) is None
    with pytest.raises(InvalidCoordinate):
        place_tile(world, 4, 0, Layer.FRONT, 1)
    assert enabled_cells(world) == [(0, 0), (1, 0), (2, 0)]


def test_move_front_tile_relocates():
    world, _, _ = build_board(["A--B"])
    assert move_front_tile(world, (0, 0), (2, 0)) == 0
    assert layer_rows(world) == ["--AB"]


@pytest.mark.parametrize(
    "source,target,error",
    [
        ((1, 0), (2, 0), CellNotOccupied),
        ((0, 0), (3, 0), CellOccupied),
        ((0, 0), (9, 0), InvalidCoordinate),
        ((-1, 0), (2, 0), InvalidCoordinate),
        ((0, 0), (0, 0), CellOccupied),
    ],
)
def test_rejected_move_leaves_board_unchanged(source, target, error):
    world, _, _ = build_board(["A--B"], ["C--D"])
    before = board_snapshot(world)
    with pytest.raises(error):
        move_front_tile(world, source, target)
    assert board_snapshot(world) == before


def test_move_errors_share_a_base():
    world, _, _ = build_board(["A--"])
    with pytest.raises(MoveError):
        move_front_tile(world, (1, 0), (2, 0))


def test_row_emptiness_is_per_section():
    world, _, _ = build_board(["A-----", "------"], section_count=2)
    assert not is_row_empty_in_section(world, 0, 0)
    assert is_row_empty_in_section(world, 1, 0)
    assert is_row_empty_in_section(world, 0, 1)
    assert section_of(world, 4) == 1


def test_board_empty_counts_both_layers():
    world, _, _ = build_board(["---"], ["-A-"])
    assert not is_board_empty(world)
    assert count_tiles(world) == 1
    assert count_tiles(world, Layer.FRONT) == 0
    remove_tile(world, 1, 0, Layer.BACK)
    assert is_board_empty(world)


def test_front_tile_map_and_snapshot_shape():
    world, _, _ = build_board(["A-", "-B"], ["--", "C-"])
    assert front_tile_map(world) == {(0, 0): 0, (1, 1): 1}
    front, back = board_snapshot(world)
    assert front == ((0, None), (None, 1))
    assert back == ((None, None), (2, None))
