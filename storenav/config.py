import math

# Grid settings
# Store floor is a fixed square of cells
GRID_WIDTH = 30
GRID_HEIGHT = 30
# Tile codes used by row-based grids and layout files
TILE_FLOOR = 0
TILE_SHELF = 1

# Movement costs (8-directional)
STEP_COST = 1.0
DIAGONAL_COST = math.sqrt(2)
# Default search heuristic: 'manhattan' (reference behaviour) or 'octile' (optimal)
HEURISTIC = 'manhattan'

# Route stepping
# Seconds between two steps of the walker along a path
STEP_INTERVAL = 0.15
# Estimated shopper walking time per grid step (minutes)
MINUTES_PER_STEP = 0.1
# Shopping list estimate: minutes per pending item plus a fixed base
MINUTES_PER_ITEM = 2
BASE_TRIP_MINUTES = 5

# Layout settings
# Layout file: JSON definition of the store floor (located in storenav/)
LAYOUT_FILE = 'layouts/default.json'
# Section used when an aisle or section is unknown
ENTRANCE_SECTION = 'Entrance'

# Screen settings
CELL_SIZE = 20
SCREEN_WIDTH = GRID_WIDTH * CELL_SIZE
# Extra band under the map for the status line
STATUS_HEIGHT = 40
SCREEN_HEIGHT = GRID_HEIGHT * CELL_SIZE + STATUS_HEIGHT
FPS = 30

# Colors
FLOOR_COLOR = (245, 245, 245)
GRID_LINE_COLOR = (220, 220, 220)
SHELF_COLOR = (150, 150, 150)
PATH_COLOR = (59, 130, 246)
START_COLOR = (37, 99, 235)
END_COLOR = (239, 68, 68)
WALKER_COLOR = (30, 64, 175)
STATUS_BG_COLOR = (239, 246, 255)
STATUS_TEXT_COLOR = (30, 58, 138)
