"""Probe the Gemini and vectorizer.ai credentials from the current environment."""

from __future__ import annotations

import argparse
import asyncio
import sys

from outfitgen.integrations import CHECKS, IntegrationCheckResult, run_all_checks


def _describe(result: IntegrationCheckResult) -> str:
    status = "✅" if result.success else "❌"
    return f"{status} {result.name} ({result.elapsed_ms:.0f} ms): {result.message}"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--only",
        action="append",
        choices=sorted(CHECKS),
        help="run just this check; may be repeated",
    )
    args = parser.parse_args(argv)

    results = asyncio.run(run_all_checks(names=args.only))
    for result in results:
        print(_describe(result))
    return 0 if all(result.success for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
