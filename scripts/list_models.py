"""List the OpenRouter models available for summaries.

Usage:
    # Table of model ids and per-million prices
    python scripts/list_models.py

    # Raw JSON
    python scripts/list_models.py --json

    # Only ids containing a substring
    python scripts/list_models.py --filter claude
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from pathlib import Path

# Ensure project root is on PYTHONPATH
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bookdigest.domain.exceptions import DigestError
from bookdigest.services.model_catalog_service import ModelCatalogService


def main() -> int:
    parser = argparse.ArgumentParser(description="List OpenRouter models")
    parser.add_argument("--json", action="store_true", help="Print raw JSON")
    parser.add_argument("--filter", default="", help="Substring the model id must contain")
    args = parser.parse_args()

    service = ModelCatalogService.from_settings()
    try:
        models = asyncio.run(service.list_models())
    except DigestError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    models = [m for m in models if args.filter.lower() in m.id.lower()]
    if args.json:
        print(json.dumps([asdict(m) for m in models], indent=2, ensure_ascii=False))
        return 0

    print("=" * 60)
    print(f"{'model':<40} {'prompt':>8} {'compl.':>8}")
    print("=" * 60)
    for m in models:
        print(f"{m.id:<40} {m.pricing['prompt']:>8} {m.pricing['completion']:>8}")
    print(f"\n{len(models)} model(s), prices in USD per million tokens")
    return 0


if __name__ == "__main__":
    sys.exit(main())
