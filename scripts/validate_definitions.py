#!/usr/bin/env python3
"""Check a component definitions document before publishing it.

Loads the document (local path or URL), reports uids that appear more than
once (only the first occurrence is used at runtime) and validates every
component's example against its own inputs.

Usage:
    python scripts/validate_definitions.py path/to/definitions.json
    python scripts/validate_definitions.py https://example.com/definitions.json

Exits with status 1 when the document fails to load or an example is invalid.
"""

import argparse
import asyncio
import json
import logging
import sys
from collections import Counter
from pathlib import Path

from uicp.blocks.schemas import Block
from uicp.definitions.sources import DefinitionsLoadError, is_remote, load_definitions
from uicp.validation.validator import validate_block

logger = logging.getLogger("validate_definitions")


def find_duplicate_uids(locator: str) -> list[str]:
    """Uids listed more than once in a local JSON document."""
    if is_remote(locator) or not locator.endswith(".json"):
        return []
    raw = json.loads(Path(locator).read_text(encoding="utf-8"))
    counts = Counter(c.get("uid") for c in raw.get("components", []))
    return sorted(uid for uid, n in counts.items() if n > 1)


async def check(locator: str) -> int:
    logger.debug(f"Loading definitions from {locator}")
    try:
        definitions = await load_definitions(locator)
    except DefinitionsLoadError as e:
        logger.error(f"Could not load definitions: {e}")
        return 1

    print(f"Definitions version '{definitions.version}': {len(definitions.components)} components")

    for uid in find_duplicate_uids(locator):
        print(f"WARNING: duplicate uid '{uid}' (first occurrence wins)")

    failures = 0
    for component in definitions.components:
        if component.example is None:
            print(f"  {component.uid}: no example")
            continue
        if not isinstance(component.example, dict):
            print(f"  {component.uid}: example is not an object")
            failures += 1
            continue
        result = validate_block(Block(uid=component.uid, data=component.example), definitions)
        if result.valid:
            print(f"  {component.uid}: ok")
        else:
            failures += 1
            print(f"  {component.uid}: INVALID example")
            for error in result.errors:
                print(f"    - {error}")

    return 1 if failures else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Validate a UICP definitions document")
    parser.add_argument("locator", help="Path or URL of the definitions document")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    sys.exit(asyncio.run(check(args.locator)))


if __name__ == "__main__":
    main()
