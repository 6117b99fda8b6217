DEFAULT_GRID_WIDTH = 9
DEFAULT_GRID_HEIGHT = 4
DEFAULT_SECTION_COUNT = 3

# Layout value marking an empty cell in level configuration arrays.
EMPTY_TILE = -1

# Shortest horizontal run that counts as a match.
MIN_MATCH_LENGTH = 3

# Number of tiles the random match ability force-clears.
RANDOM_MATCH_SIZE = 3

# Canonical goods, indexed by tile type id.
DEFAULT_TILE_TYPES = (
    "apple",
    "banana",
    "lime",
    "orange",
    "grape",
    "blueberry",
)

ABILITY_RANDOM_MATCH = "random_match"
ABILITY_SHUFFLE = "shuffle"
