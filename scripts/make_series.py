#!/usr/bin/env python3
"""
CLI tool to synthesize chart series and print or save them.
"""

import sys
import argparse
from pathlib import Path
from typing import Optional

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pandas as pd
from loguru import logger
from rich.console import Console
from rich.table import Table

from config.settings import settings
from data_tools.validate import validate_request, validate_series
from synth.chart_data import momentum_factor, request_for_range, series_to_frame
from synth.config_loader import build_presets, load_config
from synth.ranges import RANGE_PRESETS
from synth.walk import SeriesRequest, synthesize

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Synthesize price series that end at a given price")
    parser.add_argument("--price", type=float, required=True, help="Price the series ends at")
    parser.add_argument("--range", dest="ranges", action="append",
                        help="Range code (1D, 5D, 1M, 6M, 1Y, 5Y, MAX); repeatable, defaults to all")
    parser.add_argument("--momentum", default="Fair", help="Momentum rating (Strong, Fair, Weak)")
    parser.add_argument("--volatility", default=None, help="Base volatility, scaled per range")
    parser.add_argument("--trend", type=float, default=None,
                        help="Explicit per-step trend bias; overrides --momentum and range scaling")
    parser.add_argument("--seed", type=int, default=settings.SYNTH_SEED, help="Random seed")
    parser.add_argument("--config", default=settings.SYNTH_CONFIG_PATH, help="Config file path")
    parser.add_argument("--output", help="CSV file to write (all ranges stacked)")
    parser.add_argument("--strict", action="store_true", help="Validate requests and results")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level for stderr output")
    return parser


def configure_logging(level: str) -> int:
    """Replace loguru's default sink with a stderr sink at the given level."""
    logger.remove()
    return logger.add(sys.stderr, level=level)


def render_series(code: str, df: pd.DataFrame) -> None:
    """Print a compact summary table for one series."""
    table = Table(title=f"{code} ({len(df)} points)", show_header=True, header_style="bold cyan")
    table.add_column("Label", style="dim")
    table.add_column("Timestamp (UTC)")
    table.add_column("Value", justify="right")

    # First, middle and last rows are enough to eyeball the shape
    rows = sorted({0, len(df) // 2, len(df) - 1})
    for i in rows:
        row = df.iloc[i]
        table.add_row(row["label"], row["ts"].strftime("%Y-%m-%d %H:%M"), f"{row['value']:.2f}")

    console.print(table)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    config = load_config(args.config)
    presets = build_presets(config) if config.synth.presets else RANGE_PRESETS
    volatility = args.volatility if args.volatility is not None else config.synth.default_volatility
    ranges = args.ranges or [str(r) for r in presets]

    generator = np.random.default_rng(args.seed)

    def rng() -> float:
        return float(generator.random())

    now = settings.local_now()

    console.print("\n[bold cyan]Synthesizing Series[/bold cyan]")
    console.print(f"End price: {args.price} | Momentum: {args.momentum} "
                  f"(factor {momentum_factor(args.momentum)}) | Volatility: {volatility}")

    frames = []
    for code in ranges:
        request = request_for_range(args.price, code, args.momentum, volatility, presets)
        if args.trend is not None:
            request = SeriesRequest(end_value=args.price, range=code,
                                    trend_bias=args.trend, volatility=request.volatility)

        try:
            if args.strict:
                validate_request(request, presets)
            points = synthesize(request, rng=rng, now=now, presets=presets,
                                min_value=config.synth.min_value)
            if args.strict:
                validate_series(points, request, presets, config.synth.min_value)
        except ValueError as e:
            console.print(f"[red]❌ {code}: {e}[/red]")
            return 1

        df = series_to_frame(points)
        render_series(code, df)
        frames.append(df.assign(range=code))

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        pd.concat(frames, ignore_index=True).to_csv(output_path, index=False)
        console.print(f"[green]✅ Saved {sum(len(f) for f in frames)} rows to {output_path}[/green]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
