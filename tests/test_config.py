import math
from storenav import config


def test_diagonal_cost_value():
    # Diagonal step should cost sqrt(2) orthogonal steps
    assert math.isclose(config.DIAGONAL_COST, math.sqrt(2), rel_tol=1e-9)
    assert config.STEP_COST == 1.0


def test_layout_file_extension():
    # Layout file should be a JSON definition
    assert config.LAYOUT_FILE.endswith(".json")


def test_screen_fits_grid():
    assert config.SCREEN_WIDTH == config.GRID_WIDTH * config.CELL_SIZE
    assert config.SCREEN_HEIGHT > config.GRID_HEIGHT * config.CELL_SIZE
