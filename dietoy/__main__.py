import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from dietoy import DieSession, DieToyError, load_description
from dietoy.render import load_image, render_overlay

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _parse_point(value: str) -> Tuple[float, float]:
    pieces = value.replace(",", " ").split()
    if len(pieces) != 2:
        raise argparse.ArgumentTypeError(f"could not parse point from '{value}'")
    try:
        x, y = (float(piece) for piece in pieces)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return (x, y)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Compute bit locations of a rectified die region")
    parser.add_argument("description", help="Path to the die description (.ddf) file")
    parser.add_argument(
        "-i",
        "--image",
        help="Die image drawn underneath the overlay",
    )
    parser.add_argument(
        "--nearest",
        type=_parse_point,
        help="Report the bit location closest to the image point X,Y",
    )
    parser.add_argument(
        "--plot-output",
        help="Write a PNG overlay of the region and bit locations to the given path",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        description = load_description(args.description)
        session = DieSession.from_description(description)
        points = session.bit_locations()
        rows, columns = session.grid_shape()
    except (OSError, DieToyError) as exc:
        logger.error("Cannot build bit grid from %s: %s", args.description, exc)
        raise SystemExit(1)

    print(f"Grid: {rows} row(s) x {columns} column(s), {len(points)} bit location(s)")
    for idx, (x, y) in enumerate(points):
        row, column = divmod(idx, columns)
        print(f"  [{row}, {column}] ({x:.3f}, {y:.3f})")

    if args.nearest is not None:
        index, distance = session.nearest_bit(args.nearest)
        row, column = session.bit_cell(index)
        x, y = points[index]
        print(f"Nearest to ({args.nearest[0]:.3f}, {args.nearest[1]:.3f}): "
              f"[{row}, {column}] ({x:.3f}, {y:.3f}) distance={distance:.3f}")

    if args.plot_output:
        output_path = Path(args.plot_output)
        try:
            image = load_image(args.image) if args.image else None
            logger.info("Writing overlay to %s", output_path)
            render_overlay(session, output_path, tool="bit-display", image=image)
        except (OSError, DieToyError) as exc:
            logger.error("Cannot write overlay to %s: %s", output_path, exc)
            raise SystemExit(1)
        print(f"Overlay written to {output_path}")


if __name__ == "__main__":
    main(sys.argv[1:])
