"""
Print the current Fiscal Monitor figures.

Resolves every metric straight from open.canada.ca (or from a running API
with --api-base) and prints them as a table or JSON.  Handy for refreshing
the badge's fallback constants.

Usage:
    python fiscal_snapshot.py                       # all metrics, table output
    python fiscal_snapshot.py --metric deficit --json
    python fiscal_snapshot.py --api-base http://localhost:3000
"""

import argparse
import json
import logging
import sys

from badge.renderer import METRIC_ORDER, format_value
from badge.sources import HttpMetricSource, LocalMetricSource, MetricSource
from opendata.errors import FiscalDataError
from opendata.tables import TableExtractor
from resolver.registry import load_registry
from utils.config import AppConfig
from utils.formatting import format_amount

logger = logging.getLogger("fiscal_snapshot")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--metric", action="append", choices=METRIC_ORDER,
                        help="Metric to resolve (repeatable; default: all)")
    parser.add_argument("--api-base", default=None,
                        help="Read from a running API instead of the portal")
    parser.add_argument("--json", action="store_true", help="Emit JSON")
    parser.add_argument("--lang", default="en", choices=("en", "fr"),
                        help="Language for compact values in table output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def snapshot(source: MetricSource, keys) -> tuple[dict, dict]:
    """Resolve *keys*; returns (results, errors) keyed by metric name."""
    results, errors = {}, {}
    for key in keys:
        try:
            reading = source.fetch(key)
        except (FiscalDataError, OSError, ValueError) as exc:
            logger.error("%s: %s", key, exc)
            errors[key] = str(exc)
            continue
        results[key] = {"asOf": reading.as_of, "value": reading.value}
    return results, errors


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    config = AppConfig.from_env()
    registry = load_registry(config.metric_registry_path)
    keys = args.metric or list(METRIC_ORDER)

    source: MetricSource
    if args.api_base:
        owner = source = HttpMetricSource(args.api_base, registry=registry)
    else:
        owner = TableExtractor(config)
        source = LocalMetricSource(owner, registry)

    try:
        results, errors = snapshot(source, keys)
    finally:
        owner.close()

    if args.json:
        print(json.dumps({"metrics": results, "errors": errors}, indent=2))
    else:
        for key in keys:
            if key in results:
                r = results[key]
                print(f"{key:<14} {format_amount(r['value']):>22} "
                      f"{format_value(r['value'], args.lang):>10}  as of {r['asOf']}")
            else:
                print(f"{key:<14} {'ERROR':>22}  {errors[key]}")
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
