from dataclasses import dataclass
from enum import Enum


class Layer(Enum):
    """The two stacked tile grids; back tiles stay hidden until promoted."""
    FRONT = "front"
    BACK = "back"


@dataclass(slots=True)
class BoardPosition:
    x: int
    y: int
    layer: Layer = Layer.FRONT
