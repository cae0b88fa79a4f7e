#!/usr/bin/env python3
"""Write built-in and randomly generated challenges as a mirror-relative file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mirror_engine import AreaConfig, builtin_challenges
from mirror_engine.challenges import challenges_to_relative_file, generate_random_challenge

logger = logging.getLogger("generate_challenges")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a mirror-relative challenge file")
    parser.add_argument("--out", required=True, help="Output JSON path")
    parser.add_argument("--count", type=int, default=2, help="Number of random challenges")
    parser.add_argument("--pieces", type=int, default=2, help="Tiles per random challenge (1-4)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=200,
        help="Attempts per random challenge before giving up",
    )
    parser.add_argument(
        "--no-builtin", action="store_true", help="Skip the built-in starter challenges"
    )
    parser.add_argument("--tile-size", type=float, default=100.0, help="Tile frame size")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logs"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    area = AreaConfig(tile_size=args.tile_size)
    rng = np.random.default_rng(args.seed)
    challenges = [] if args.no_builtin else builtin_challenges(area)

    next_id = max((c.id for c in challenges), default=0) + 1
    for _ in range(max(0, args.count)):
        challenge = generate_random_challenge(args.pieces, area, rng, args.max_attempts)
        if challenge is None:
            continue
        challenge.id = next_id
        challenge.name = f"Random challenge #{next_id}"
        next_id += 1
        challenges.append(challenge)

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(challenges_to_relative_file(challenges, area), indent=2))
    logger.info("Wrote %d challenges to %s", len(challenges), out_path)
    print(f"Wrote {len(challenges)} challenges to {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
