#!/usr/bin/env python3
"""Compute Q7,10 for one or more gauges from a daily discharge CSV."""

import argparse
import json
from pathlib import Path
import sys

import pandas as pd

from lowflow.config.settings import Settings
from lowflow.pipeline import calculate_q710, calculate_q710_batch
from lowflow.utils.logger import setup_logger


def parse_arguments() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Q7,10 low-flow frequency analysis of daily discharge records"
    )

    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="CSV file with 'date' and 'flow' columns",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=Path("configs/q710.yaml"),
        help="Path to configuration file",
    )

    parser.add_argument(
        "--station-id",
        type=str,
        help="Station identifier for a single-station CSV",
    )

    parser.add_argument(
        "--station-column",
        type=str,
        help="Column holding station ids; each station is processed separately",
    )

    parser.add_argument("--start-date", type=str, help="Inclusive first date")
    parser.add_argument("--end-date", type=str, help="Inclusive last date")

    parser.add_argument(
        "--output",
        type=Path,
        help="Output JSON file (printed to stdout when omitted)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level",
    )

    args = parser.parse_args()
    if not args.station_id and not args.station_column:
        parser.error("one of --station-id or --station-column is required")
    return args


def main() -> int:
    """Main entry point."""
    args = parse_arguments()
    logger = setup_logger("q710_run", level=args.log_level)

    if args.config.exists():
        settings = Settings.from_yaml(args.config)
        logger.info(f"Loaded configuration from {args.config}")
    else:
        settings = Settings()
        logger.info("Using default configuration")

    data = pd.read_csv(args.input, parse_dates=["date"])
    logger.info(f"Read {len(data)} rows from {args.input}")

    if args.station_column:
        if args.start_date or args.end_date:
            mask = pd.Series(True, index=data.index)
            if args.start_date:
                mask &= data["date"] >= pd.Timestamp(args.start_date)
            if args.end_date:
                mask &= data["date"] <= pd.Timestamp(args.end_date)
            data = data[mask]
        records_by_station = {
            str(station): group[["date", "flow"]]
            for station, group in data.groupby(args.station_column, sort=False)
        }
        outcomes = calculate_q710_batch(records_by_station, settings)
        payload = {station: outcome.to_dict() for station, outcome in outcomes.items()}
        failed = sum(1 for outcome in outcomes.values() if not outcome.ok)
    else:
        outcome = calculate_q710(
            data[["date", "flow"]],
            args.station_id,
            settings,
            start_date=args.start_date,
            end_date=args.end_date,
        )
        payload = outcome.to_dict()
        failed = 0 if outcome.ok else 1

    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        logger.info(f"Results saved to {args.output}")
    else:
        print(text)

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
