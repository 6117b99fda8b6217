from dataclasses import dataclass

@dataclass(slots=True)
class TileTypeRegistry:
    """Tag for the one entity whose TileTypes component names every tile type id."""
    pass
