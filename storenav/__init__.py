"""Store floor navigation: occupancy grid, A* routing and the store map viewer."""
