"""Example pipeline: mark a skewed die region, slice it and look up bits."""

import logging

from dietoy import DieSession

logger = logging.getLogger(__name__)

CLICKS = [(104.0, 91.0), (12.0, 8.0), (3.0, 87.0), (98.0, 15.0)]


def main() -> None:
    session = DieSession()
    for click in CLICKS:
        session.add_or_pick_bounds_point(click)
    session.rebuild_region()
    logger.info("Region: %s", session.boundary_polygon())

    for x in (30.0, 55.0, 80.0):
        session.add_slice((x, 50.0), "horizontal")
    for y in (35.0, 65.0):
        session.add_slice((50.0, y), "vertical")

    points = session.rebuild_grid()
    rows, columns = session.grid_shape()
    print(f"{rows} x {columns} grid, {len(points)} bit locations")
    for idx, (x, y) in enumerate(points):
        row, column = session.bit_cell(idx)
        print(f"[{row}, {column}] ({x:.2f}, {y:.2f})")

    index, distance = session.nearest_bit((50.0, 50.0))
    print(f"Nearest bit to (50, 50): {session.bit_cell(index)} at distance {distance:.2f}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
