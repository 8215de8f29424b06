# This file is part of boxgrid.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

import argparse
import logging
import sys
from collections.abc import Sequence

from boxgrid import BoxSide, Edge, UnsupportedOrientationError

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="boxgrid",
        description="Print the edges that close the boxes next to an edge.",
    )
    parser.add_argument(
        "coords",
        nargs="*",
        type=int,
        default=[0, 0, 0, 1],
        metavar="N",
        help="Endpoints x1 y1 x2 y2 (default: 0 0 0 1).",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)
    if len(args.coords) != 4:
        parser.error("expected exactly four coordinates: x1 y1 x2 y2")
    return args


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    edge = Edge.between(*args.coords)
    print(f"{edge}: {edge.orientation.value}")

    for side in (BoxSide.NEGATIVE, BoxSide.POSITIVE):
        try:
            participating = edge.participating_edges(side)
        except UnsupportedOrientationError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        except ValueError as e:
            print(f"{side.value}: {e}")
            continue

        logger.debug("%s box next to %s", side.value, edge)
        print(f"{side.value}:")
        for other in participating:
            print(f"  {other}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
