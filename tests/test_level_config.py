import json

import pytest

from goodsort.constants import EMPTY_TILE
from goodsort.errors import LevelConfigError
from goodsort.level import LevelConfig, load_level


def test_defaults_fill_empty_layouts():
    level = LevelConfig(width=6, height=2, section_count=2)
    assert level.front_layout == [EMPTY_TILE] * 12
    assert level.back_layout == [EMPTY_TILE] * 12
    assert level.columns_per_section == 3
    assert level.tile_count() == 0


def test_from_rows_parses_notation():
    level = LevelConfig.from_rows(["AB-", "..C"], ["--A", "---"])
    assert level.width == 3 and level.height == 2
    assert level.front_layout == [0, 1, -1, -1, -1, 2]
    assert level.front_at(2, 1) == 2
    assert level.back_at(2, 0) == 0
    assert level.tile_count() == 4


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": 0, "height": 4},
        {"width": 8, "height": 4, "section_count": 3},
        {"width": 3, "height": 1, "section_count": 1, "front_layout": [0, 1]},
        {"width": 3, "height": 1, "section_count": 1, "front_layout": [0, -2, 1]},
        {"width": 6, "height": 1, "section_count": 2, "disabled_sections": [2]},
        {"width": 3, "height": 1, "section_count": 1, "moves_limit": -1},
    ],
)
def test_invalid_configs_rejected(kwargs):
    with pytest.raises(LevelConfigError):
        LevelConfig(**kwargs)


def test_from_dict_accepts_camel_case():
    level = LevelConfig.from_dict(
        {
            "gridWidth": 3,
            "gridHeight": 1,
            "sectionCount": 1,
            "frontLayout": [0, 0, -1],
            "backLayout": [-1, -1, 1],
            "levelNumber": 7,
            "movesLimit": 12,
            "sortingGoals": [{"item_type": 0, "target_count": 3}],
            "clearAllItemsGoal": False,
            "randomMatchUses": 2,
            "shuffleUses": 1,
        }
    )
    assert level.level_number == 7
    assert level.sorting_goals == {0: 3}
    assert not level.clear_all_goal
    assert level.random_match_uses == 2 and level.shuffle_uses == 1


def test_to_dict_feeds_from_dict():
    level = LevelConfig.from_rows(["AB-"], level_number=3, sorting_goals={1: 3})
    assert LevelConfig.from_dict(level.to_dict()) == level


def test_load_level_reads_json(tmp_path):
    path = tmp_path / "level_1.json"
    path.write_text(json.dumps({"width": 3, "height": 1, "section_count": 1, "front_layout": [2, 2, 2]}))
    level = load_level(path)
    assert level.front_layout == [2, 2, 2]


def test_load_level_reports_bad_files(tmp_path):
    with pytest.raises(LevelConfigError):
        load_level(tmp_path / "missing.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(LevelConfigError):
        load_level(broken)
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]")
    with pytest.raises(LevelConfigError):
        load_level(listing)


def test_malformed_dict_values_rejected():
    with pytest.raises(LevelConfigError):
        LevelConfig.from_dict({"width": "wide"})


@pytest.mark.parametrize("value", ["false", 0, 1, None])
def test_clear_all_goal_must_be_a_real_boolean(value):
    with pytest.raises(LevelConfigError):
        LevelConfig.from_dict({"width": 3, "height": 1, "section_count": 1, "clearAllItemsGoal": value})
