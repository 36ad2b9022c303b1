#!/usr/bin/env python3
"""
CLI for property valuations and valuation report PDFs.

Usage:
    python -m reporting.cli estimate --type <type> --location <loc> --area <sqft> [options]
    python -m reporting.cli report --type <type> --location <loc> --area <sqft> [options]

Examples:
    # Quick estimate
    python -m reporting.cli estimate --type apartment --location "Gulshan, Dhaka" --area 1500

    # Full result as JSON, with amenities
    python -m reporting.cli estimate --type duplex --location "Banani, Dhaka" --area 2200 \\
        --condition excellent --age 3 --amenity parking --amenity gym --json

    # Reproducible PDF
    python -m reporting.cli report --type house --location "Uttara, Dhaka" --area 1800 \\
        --output valuation.pdf --seed 42
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from core.valuation import (
    InvalidValuationInput,
    PropertyValuationEngine,
    create_valuation_input,
)
from core.valuation.rates import BASE_RATES, CONDITION_LABELS, type_label
from utils.formatting import format_currency, format_price_compact
from utils.logging_setup import configure_logging

from .valuation_pdf import ValuationReportGenerator

logger = logging.getLogger(__name__)


def build_input(args):
    """Build a validated ValuationInput from parsed arguments."""
    return create_valuation_input({
        "property_type": args.type,
        "location": args.location,
        "area_sqft": args.area,
        "condition": args.condition,
        "age_years": args.age,
        "bedrooms": args.bedrooms,
        "bathrooms": args.bathrooms,
        "amenities": args.amenity or [],
    })


def cmd_estimate(args):
    """Print an estimate for the given property."""
    try:
        valuation_input = build_input(args)
        report = PropertyValuationEngine(seed=args.seed).appraise(
            valuation_input,
            include_market=args.json,
            include_comparables=args.json,
        )
    except InvalidValuationInput as e:
        for error in e.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return 0

    result = report.result
    print(f"{type_label(valuation_input.property_type)} in {valuation_input.location}")
    print(f"  Condition:       {CONDITION_LABELS[valuation_input.condition]}")
    print(f"  Estimated value: {format_currency(result.estimated_value)} "
          f"({format_price_compact(result.estimated_value)})")
    print(f"  Range:           {format_currency(result.low_estimate)} - "
          f"{format_currency(result.high_estimate)}")
    print(f"  Per sq ft:       {format_currency(result.price_per_sqft)}")
    return 0


def cmd_report(args):
    """Generate a valuation PDF for the given property."""
    try:
        valuation_input = build_input(args)
        report = PropertyValuationEngine(seed=args.seed).appraise(valuation_input)
    except InvalidValuationInput as e:
        for error in e.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    pdf_bytes = ValuationReportGenerator().generate_from_report(
        report, reference=args.reference
    )
    output_path.write_bytes(pdf_bytes)
    logger.info("Wrote %d bytes to %s", len(pdf_bytes), output_path)

    print(f"Report generated: {output_path}")
    return 0


def add_property_arguments(parser):
    parser.add_argument("--type", required=True, help="Property type (apartment, house, villa, ...)")
    parser.add_argument(
        "--location",
        required=True,
        help=f"Location, one of: {', '.join(BASE_RATES)}. Unlisted locations use a default rate",
    )
    parser.add_argument("--area", required=True, type=float, help="Area in square feet")
    parser.add_argument("--condition", default="good", help="excellent, good, average or needs-renovation")
    parser.add_argument("--age", type=int, default=0, help="Property age in years")
    parser.add_argument("--bedrooms", default=None, help="Number of bedrooms")
    parser.add_argument("--bathrooms", default=None, help="Number of bathrooms")
    parser.add_argument("--amenity", action="append", help="Amenity (repeatable)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for simulated market data")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="reporting.cli",
        description="Haven Homes - Property Valuation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m reporting.cli estimate --type apartment --location "Gulshan, Dhaka" --area 1500
    python -m reporting.cli report --type house --location "Uttara, Dhaka" --area 1800 --output valuation.pdf
        """,
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Estimate command
    est_parser = subparsers.add_parser(
        "estimate",
        help="Print an estimate",
    )
    add_property_arguments(est_parser)
    est_parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    est_parser.set_defaults(func=cmd_estimate)

    # Report command
    rep_parser = subparsers.add_parser(
        "report",
        help="Generate a valuation PDF",
    )
    add_property_arguments(rep_parser)
    rep_parser.add_argument("--output", default="reports/valuation.pdf", help="Output PDF path")
    rep_parser.add_argument("--reference", default=None, help="Reference printed on the report")
    rep_parser.set_defaults(func=cmd_report)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
