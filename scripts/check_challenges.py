#!/usr/bin/env python3
"""Validate every challenge in a challenge file.

Accepts either a mirror-relative file or an absolute list of challenges.
Exits with status 1 when the file has format errors or any challenge
breaks a rule.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mirror_engine import AreaConfig, Challenge, MirrorEngine
from mirror_engine.challenges import relative_file_to_challenges, validate_relative_file
from mirror_engine.contracts import FileCheck

logger = logging.getLogger("check_challenges")

PASSING = {
    "touches_mirror": True,
    "enters_mirror": False,
    "has_tile_overlaps": False,
    "has_reflection_overlaps": False,
    "tiles_connected": True,
    "tiles_in_area": True,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check challenge files against the mirror rules")
    parser.add_argument("path", help="Challenge JSON file (relative or absolute layout)")
    parser.add_argument("--width", type=float, default=700.0, help="Play area width")
    parser.add_argument("--height", type=float, default=600.0, help="Play area height")
    parser.add_argument("--mirror-x", type=float, default=700.0, help="Mirror line X")
    parser.add_argument("--tile-size", type=float, default=100.0, help="Tile frame size")
    parser.add_argument("--json", action="store_true", help="Print a JSON report")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logs"
    )
    return parser


def _load(payload: object, area: AreaConfig) -> tuple[list[Challenge], FileCheck]:
    if isinstance(payload, dict):
        check = validate_relative_file(payload, area)
        if check.errors and not isinstance(payload.get("challenges"), list):
            return [], check
        try:
            challenges = relative_file_to_challenges(payload, area)
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Could not convert relative file: %s", exc)
            return [], check
        return challenges, check
    if isinstance(payload, list):
        challenges, check = [], FileCheck()
        for index, entry in enumerate(payload, start=1):
            try:
                challenges.append(Challenge.from_dict(entry))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                check.errors.append(f"Challenge {index}: malformed entry ({exc!r})")
        return challenges, check
    return [], FileCheck(errors=["Unrecognised challenge file layout"])


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    area = AreaConfig(
        width=args.width,
        height=args.height,
        mirror_line_x=args.mirror_x,
        tile_size=args.tile_size,
    )
    engine = MirrorEngine(area)
    payload = json.loads(Path(args.path).read_text())
    challenges, check = _load(payload, area)

    results = []
    for challenge in challenges:
        verdict = engine.validate(challenge.pieces)
        results.append({"id": challenge.id, "name": challenge.name, "verdict": verdict.to_dict()})

    failed = [r for r in results if not r["verdict"]["is_valid"]]
    if args.json:
        report = {
            "file": {"errors": check.errors, "warnings": check.warnings},
            "challenges": results,
        }
        print(json.dumps(report, indent=2))
    else:
        for message in check.errors:
            print(f"ERROR {message}")
        for message in check.warnings:
            print(f"WARNING {message}")
        for result in results:
            verdict = result["verdict"]
            if verdict["is_valid"]:
                print(f"Challenge {result['id']} ({result['name']}): VALID")
                continue
            broken = [name for name, want in PASSING.items() if verdict[name] != want]
            print(f"Challenge {result['id']} ({result['name']}): INVALID ({', '.join(broken)})")
        print(f"Checked {len(results)} challenges, {len(failed)} invalid")

    return 1 if check.errors or failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
