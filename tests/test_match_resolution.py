import logging
import random

import pytest

from goodsort.components.board_position import Layer
from goodsort.errors import CellOccupied, ResolutionInProgress
from goodsort.events.bus import (
    EVENT_BOARD_CLEARED,
    EVENT_BOARD_QUIESCENT,
    EVENT_RESOLUTION_STARTED,
    EVENT_TILE_MOVED,
    EVENT_TILES_MATCHED,
    EVENT_TILES_PROMOTED,
)
from goodsort.events.trace import BoardQuiescent, TileMoved, TilesMatched, TilesPromoted
from goodsort.systems.board_ops import (
    board_snapshot,
    count_tiles,
    enabled_cells,
    front_tile_map,
    get_board,
    is_occupied,
    is_row_empty_in_section,
    remove_tile,
    tile_at,
)
from goodsort.systems.match import find_matches
from tests.helpers import build_board, layer_rows, record_events


def test_move_into_run_clears_it():
    world, _, engine = build_board(["AAA------"])
    trace = engine.submit_move((0, 0), (3, 0))
    assert trace.events == [
        TileMoved(source=(0, 0), target=(3, 0), type_id=0),
        TilesMatched(type_id=0, cells=((1, 0), (2, 0), (3, 0))),
        BoardQuiescent(passes=1, board_empty=True),
    ]
    assert layer_rows(world) == ["---------"]
    assert trace.board_empty and trace.tiles_cleared == 3


def test_cleared_row_promotes_back_tiles():
    world, _, engine = build_board(["AA-A-----"], ["B-BB-----"])
    trace = engine.submit_move((3, 0), (2, 0))
    assert trace.promoted() == [TilesPromoted(section=0, row=0, cells=((0, 0), (2, 0), (3, 0)))]
    assert layer_rows(world) == ["B-BB-----"]
    assert layer_rows(world, Layer.BACK) == ["---------"]
    assert trace.passes == 1


def test_promotion_that_forms_a_run_triggers_another_pass():
    world, _, engine = build_board(["AA-A-----"], ["-BBB-----"])
    trace = engine.submit_move((3, 0), (2, 0))
    kinds = [type(event) for event in trace]
    assert kinds == [TileMoved, TilesMatched, TilesPromoted, TilesMatched, BoardQuiescent]
    assert trace.matched()[1].cells == ((1, 0), (2, 0), (3, 0))
    assert trace.passes == 2
    assert trace.board_empty


def test_surviving_front_tile_blocks_promotion_in_its_section_row():
    world, _, engine = build_board(["AAAC--"], ["B-BBDD"], section_count=2)
    trace = engine.settle()
    assert layer_rows(world) == ["B-BC--"]
    assert layer_rows(world, Layer.BACK) == ["---BDD"]
    assert [p.section for p in trace.promoted()] == [0]


def test_move_that_empties_a_row_promotes_without_a_match():
    world, _, engine = build_board(["A--", "---"], ["CC-", "---"])
    trace = engine.submit_move((0, 0), (1, 1))
    assert trace.events == [
        TileMoved(source=(0, 0), target=(1, 1), type_id=0),
        TilesPromoted(section=0, row=0, cells=((0, 0), (1, 0))),
        BoardQuiescent(passes=0, board_empty=False),
    ]
    assert layer_rows(world) == ["CC-", "-A-"]


def test_move_needs_no_match_and_no_adjacency():
    world, _, engine = build_board(["A-------B", "---------"])
    trace = engine.submit_move((0, 0), (7, 1))
    assert trace.matched() == []
    assert tile_at(world, 7, 1) == 0


def test_rejected_move_raises_and_releases_lock():
    world, _, engine = build_board(["AB-"], ["C--"])
    before = board_snapshot(world)
    with pytest.raises(CellOccupied):
        engine.submit_move((0, 0), (1, 0))
    assert board_snapshot(world) == before
    assert not engine.is_resolving
    engine.submit_move((0, 0), (2, 0))
    assert tile_at(world, 2, 0) == 0


def test_trace_is_republished_on_the_bus():
    world, bus, engine = build_board(["AAA------"])
    seen = record_events(
        bus,
        EVENT_RESOLUTION_STARTED,
        EVENT_TILE_MOVED,
        EVENT_TILES_MATCHED,
        EVENT_TILES_PROMOTED,
        EVENT_BOARD_QUIESCENT,
        EVENT_BOARD_CLEARED,
    )
    engine.submit_move((0, 0), (3, 0))
    assert [name for name, _ in seen] == [
        EVENT_RESOLUTION_STARTED,
        EVENT_TILE_MOVED,
        EVENT_TILES_MATCHED,
        EVENT_BOARD_QUIESCENT,
        EVENT_BOARD_CLEARED,
    ]
    matched = seen[2][1]
    assert matched["action"] == "move"
    assert matched["cells"] == [(1, 0), (2, 0), (3, 0)]
    assert matched["forced"] is False


def test_input_from_subscribers_is_rejected_until_quiescent():
    world, bus, engine = build_board(["AAA---B--"])
    attempts = []

    def meddle(sender, **payload):
        try:
            engine.submit_move((6, 0), (7, 0))
        except ResolutionInProgress as exc:
            attempts.append(exc)

    bus.subscribe(EVENT_TILES_MATCHED, meddle)
    engine.submit_move((0, 0), (3, 0))
    assert len(attempts) == 1
    assert tile_at(world, 6, 0) == 1
    assert not engine.is_resolving


def test_run_action_from_promotion_promotes_first():
    world, _, engine = build_board(["A--"], ["BBB"])

    def clear(trace):
        remove_tile(world, 0, 0, Layer.FRONT)

    trace = engine.run_action("custom", clear, from_promotion=True)
    kinds = [type(event) for event in trace]
    assert kinds == [TilesPromoted, TilesMatched, BoardQuiescent]
    assert trace.action == "custom"
    assert trace.board_empty


def test_settle_on_quiescent_board_only_reports_quiescence():
    world, _, engine = build_board(["AB-"], ["C--"])
    trace = engine.settle()
    assert trace.events == [BoardQuiescent(passes=0, board_empty=False)]
    assert engine.last_trace is trace


def test_quiescent_dump_skipped_unless_debug(caplog, monkeypatch):
    dumps = []
    monkeypatch.setattr(
        "goodsort.systems.match_resolution.format_board",
        lambda world: dumps.append(world) or "<grid>",
    )
    world, _, engine = build_board(["AA-A-----"])
    with caplog.at_level(logging.INFO, logger="goodsort.systems.match_resolution"):
        engine.submit_move((3, 0), (2, 0))
    assert dumps == []
    with caplog.at_level(logging.DEBUG, logger="goodsort.systems.match_resolution"):
        engine.settle()
    assert dumps == [world]
    assert "settle resolved in 0 pass(es)" in caplog.text


def _assert_quiescent(world):
    board = get_board(world)
    assert find_matches(world) == []
    for section in board.enabled_sections():
        for y in range(board.height):
            if is_row_empty_in_section(world, section, y, Layer.FRONT):
                assert all(not is_occupied(world, x, y, Layer.BACK) for x in board.section_columns(section))


def test_random_play_terminates_and_never_creates_tiles():
    rng = random.Random(7)
    for _ in range(25):
        front = ["".join(rng.choice("ABC--") for _ in range(9)) for _ in range(4)]
        back = ["".join(rng.choice("ABC-") for _ in range(9)) for _ in range(4)]
        world, _, engine = build_board(front, back, section_count=3)
        total = count_tiles(world)
        trace = engine.settle()
        assert trace.quiescent
        _assert_quiescent(world)
        total -= trace.tiles_cleared
        assert count_tiles(world) == total
        for _ in range(15):
            tiles = sorted(front_tile_map(world))
            empties = [cell for cell in enabled_cells(world) if cell not in front_tile_map(world)]
            if not tiles or not empties:
                break
            trace = engine.submit_move(rng.choice(tiles), rng.choice(empties))
            assert trace.quiescent
            _assert_quiescent(world)
            after = count_tiles(world)
            assert after == total - trace.tiles_cleared
            total = after
