from goodsort.errors import (
    AbilityUnavailable,
    BoardError,
    CellOccupied,
    GoodsortError,
    InvalidCoordinate,
    MoveError,
    ResolutionInProgress,
)


def test_invalid_coordinate_carries_position():
    err = InvalidCoordinate(4, 2, reason="in a disabled section")
    assert (err.x, err.y) == (4, 2)
    assert err.code == "INVALID_COORDINATE"
    assert str(err) == "[INVALID_COORDINATE] cell (4, 2) is in a disabled section (x=4, y=2)"


def test_to_dict_serialises_context():
    err = AbilityUnavailable("shuffle", "budget_exhausted")
    assert err.to_dict() == {
        "code": "ABILITY_UNAVAILABLE",
        "message": "shuffle unavailable: budget_exhausted",
        "context": {"ability": "shuffle", "reason": "budget_exhausted"},
    }


def test_hierarchy():
    assert MoveError is BoardError
    assert issubclass(CellOccupied, MoveError)
    assert issubclass(ResolutionInProgress, BoardError)
    assert issubclass(AbilityUnavailable, GoodsortError)
    err = GoodsortError("plain", code="CUSTOM")
    assert str(err) == "[CUSTOM] plain"
