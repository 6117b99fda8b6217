"""
Goodsort error hierarchy.

Every rule violation is a local, recoverable condition reported to the caller
as an exception; the board and selection state are left untouched by any
rejected call.

Usage:
    from goodsort.errors import MoveError

    try:
        trace = engine.submit_move((0, 0), (3, 0))
    except MoveError as e:
        logger.info("move rejected: %s", e)
"""

from typing import Any

__all__ = [
    "AbilityUnavailable",
    "BoardError",
    "BoardNotLoaded",
    "CellNotOccupied",
    "CellOccupied",
    "GoodsortError",
    "InvalidCoordinate",
    "LevelConfigError",
    "MoveError",
    "NoSelectionActive",
    "ResolutionError",
    "ResolutionInProgress",
    "UnknownTileType",
]


class GoodsortError(Exception):
    """Base exception for all goodsort errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "GOODSORT_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Board Errors
# =============================================================================


class BoardError(GoodsortError):
    """Board mutation or move request rejected."""
    code: str = "BOARD_ERROR"


# Moves are rejected with the same taxonomy as direct board mutations.
MoveError = BoardError


class InvalidCoordinate(BoardError):
    """Cell outside the board or inside a disabled section."""
    code: str = "INVALID_COORDINATE"

    def __init__(self, x: int, y: int, reason: str = "out of range"):
        super().__init__(f"cell ({x}, {y}) is {reason}", context={"x": x, "y": y})
        self.x = x
        self.y = y
        self.reason = reason


class CellNotOccupied(BoardError):
    """Operation needs a tile but the cell is empty."""
    code: str = "CELL_NOT_OCCUPIED"


class CellOccupied(BoardError):
    """Operation needs an empty cell but it holds a tile."""
    code: str = "CELL_OCCUPIED"


class ResolutionInProgress(BoardError):
    """Input arrived while a cascade was still resolving."""
    code: str = "RESOLUTION_IN_PROGRESS"


class UnknownTileType(BoardError):
    """Tile type id is the empty marker or missing from the TileTypes registry."""
    code: str = "UNKNOWN_TILE_TYPE"


class BoardNotLoaded(BoardError):
    """Board query or action issued before any level was loaded."""
    code: str = "BOARD_NOT_LOADED"


# =============================================================================
# Interaction Errors
# =============================================================================


class NoSelectionActive(GoodsortError):
    """Selection-dependent request made while nothing is armed."""
    code: str = "NO_SELECTION_ACTIVE"


class AbilityUnavailable(GoodsortError):
    """Ability cannot run now.

    Raised when no tile type qualifies, when a cascade is in progress, or
    when the ability budget is exhausted.

    Attributes:
        ability: Name of the rejected ability
        reason: Short machine-readable reason
    """
    code: str = "ABILITY_UNAVAILABLE"

    def __init__(self, ability: str, reason: str, message: str | None = None):
        super().__init__(
            message or f"{ability} unavailable: {reason}",
            context={"ability": ability, "reason": reason},
        )
        self.ability = ability
        self.reason = reason


# =============================================================================
# Configuration / Engine Errors
# =============================================================================


class LevelConfigError(GoodsortError):
    """Level configuration rejected at load time."""
    code: str = "LEVEL_CONFIG"


class ResolutionError(GoodsortError):
    """Cascade failed to reach a fixed point within its pass bound.

    Indicates an engine bug, never a player error.
    """
    code: str = "RESOLUTION_ERROR"
