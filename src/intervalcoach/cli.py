#!/usr/bin/env python3
"""
IntervalCoach CLI.

Run the daily decision cycle against a JSON export of wellness, fitness,
goal and activity data.

Usage:
    intervalcoach decide --input day.json           # Full decision bundle
    intervalcoach decide --input day.json --json    # Machine-readable output
    intervalcoach baseline --input day.json         # Recompute the baseline
    intervalcoach phase --goal-date 2025-09-14      # Periodization phase
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box
from rich.markup import escape

from .analysis.phase import PhaseCalculator
from .baselines import MIN_RECORDS
from .config import Settings, get_settings
from .exceptions import InsufficientDataError, IntervalCoachError
from .integrations.base import JsonFileSource
from .models.baseline import MetricBaseline
from .models.decisions import Phase
from .services.orchestrator import HISTORY_DAYS, DailyDecision, DailyInputs, build_orchestrator

console = Console()


def get_recovery_color(category: str) -> str:
    """Get rich color for a recovery category."""
    colors = {
        "green": "green",
        "yellow": "yellow",
        "red": "red",
    }
    return colors.get(category, "white")


def get_illness_color(probability: str) -> str:
    """Get rich color for an illness probability tier."""
    colors = {
        "none": "green",
        "possible": "yellow",
        "likely": "red",
        "high": "bold red",
    }
    return colors.get(probability, "white")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD")


def _fmt(value, digits: int = 1) -> str:
    return "-" if value is None else f"{value:.{digits}f}"


def _weeks_out_label(phase: Phase) -> str:
    if phase.weeks_out is None:
        return "no goal set"
    return f"{phase.weeks_out:.0f} weeks out"


def _settings_for(args) -> Settings:
    settings = get_settings()
    updates = {}
    if getattr(args, "db", None):
        updates["baseline_db_path"] = Path(args.db)
    if getattr(args, "no_enhance", False):
        updates["enhancement_enabled"] = False
    return settings.model_copy(update=updates) if updates else settings


def _load_inputs(args) -> DailyInputs:
    source = JsonFileSource(args.input)
    today = args.today or source.today or date.today()
    return DailyInputs.from_sources(
        today,
        wellness=source,
        fitness=source,
        goals=source,
        activities=source,
    )


def print_decision(decision: DailyDecision) -> None:
    """Render a decision bundle."""
    recovery = decision.recovery
    color = get_recovery_color(recovery.category)
    console.print(Panel(
        f"[bold {color}]{recovery.status}[/bold {color}]\n"
        f"Effective intensity: [bold]{decision.effective_modifier:.2f}[/bold]",
        title=f"IntervalCoach - {decision.date.isoformat()}",
        box=box.ROUNDED,
    ))

    table = Table(title="Baseline comparison", box=box.SIMPLE)
    table.add_column("Metric")
    table.add_column("Today", justify="right")
    table.add_column("Baseline", justify="right")
    table.add_column("z", justify="right")
    table.add_column("Status")
    for result in (decision.hrv, decision.rhr):
        table.add_row(
            result.metric.upper(),
            _fmt(result.current),
            _fmt(result.baseline),
            _fmt(result.z_score, 2),
            result.status,
        )
    console.print(table)

    intensity = decision.intensity
    console.print(
        f"Intensity modifier: [bold]{intensity.modifier:.2f}[/bold] "
        f"({intensity.confidence.value} confidence) - {intensity.description}"
    )

    illness = decision.illness
    illness_color = get_illness_color(illness.probability.value)
    console.print(
        f"Illness risk: [{illness_color}]{illness.probability.value}[/{illness_color}] "
        f"- {illness.recommendation}"
    )
    if illness.training_guidance:
        console.print(f"  {illness.training_guidance}")

    gap = decision.training_gap
    gap_days = "no recent sessions" if gap.gap_days is None else f"{gap.gap_days} days"
    console.print(
        f"Training gap: {gap_days} ({gap.interpretation}, x{gap.intensity_modifier:.2f}) "
        f"- {gap.recommendation}"
    )

    phase = decision.phase
    console.print(f"Phase: [bold]{phase.phase_name}[/bold] ({_weeks_out_label(phase)}) - {phase.focus}")

    advice = decision.load_advice
    if advice:
        console.print(
            f"Load: CTL {advice.current_ctl:.1f} -> {advice.target_ctl:.1f}, "
            f"{advice.ramp_rate_advice.value}, weekly TSS {advice.tss_range['min']}-{advice.tss_range['max']} "
            f"(daily {advice.daily_tss_range['min']}-{advice.daily_tss_range['max']})"
        )
        console.print(f"  {advice.load_advice}")
        if advice.warning:
            console.print(f"  [yellow]Warning: {advice.warning}[/yellow]")

    if decision.enhanced:
        console.print(f"[dim]Enhanced: {', '.join(decision.enhanced)}[/dim]")


def _baseline_row(table: Table, name: str, metric: MetricBaseline) -> None:
    table.add_row(
        name,
        _fmt(metric.mean_30d),
        _fmt(metric.std_dev_30d, 2),
        _fmt(metric.mean_7d),
        f"{_fmt(metric.min_30d)}-{_fmt(metric.max_30d)}",
        str(metric.sample_count),
    )


def cmd_decide(args) -> int:
    """Run the full decision cycle."""
    inputs = _load_inputs(args)
    orchestrator = build_orchestrator(_settings_for(args))
    decision = orchestrator.decide(inputs)

    if args.json:
        print(json.dumps(decision.to_dict(), indent=2, default=str))
    else:
        print_decision(decision)
    return 0


def cmd_baseline(args) -> int:
    """Recompute and show the baseline."""
    inputs = _load_inputs(args)
    orchestrator = build_orchestrator(_settings_for(args))
    baseline = orchestrator.baseline_store.refresh(inputs.wellness)

    if baseline is None:
        raise InsufficientDataError(
            "baseline",
            required=MIN_RECORDS,
            available=len(inputs.wellness),
            details={"window_days": HISTORY_DAYS},
        )

    if args.json:
        print(json.dumps(baseline.to_dict(), indent=2))
        return 0

    table = Table(title=f"Baseline ({baseline.calculated_at:%Y-%m-%d %H:%M})", box=box.SIMPLE)
    for column in ("Metric", "30d mean", "30d std", "7d mean", "30d range", "Samples"):
        table.add_column(column)
    _baseline_row(table, "HRV (ms)", baseline.hrv)
    _baseline_row(table, "RHR (bpm)", baseline.rhr)
    console.print(table)
    return 0


def cmd_phase(args) -> int:
    """Show the periodization phase for a goal date."""
    today = args.today or date.today()
    phase = PhaseCalculator.for_goal(args.goal_date, today)

    if args.json:
        print(json.dumps(phase.to_dict(), indent=2))
    else:
        console.print(f"[bold]{phase.phase_name}[/bold] ({_weeks_out_label(phase)})")
        console.print(f"Focus: {phase.focus}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intervalcoach",
        description="IntervalCoach - adaptive training decisions from personal baselines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  intervalcoach decide --input day.json
  intervalcoach decide --input day.json --json --today 2025-06-01
  intervalcoach baseline --input day.json --db baselines.db
  intervalcoach phase --goal-date 2025-09-14
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Decide command
    decide_p = subparsers.add_parser("decide", help="Run the daily decision cycle")
    decide_p.add_argument("--input", "-i", required=True, help="JSON file with daily data")
    decide_p.add_argument("--json", action="store_true", help="Print JSON instead of a summary")
    decide_p.add_argument("--db", help="Baseline database path")
    decide_p.add_argument("--today", type=_parse_date, help="Decision date (YYYY-MM-DD)")
    decide_p.add_argument("--no-enhance", action="store_true", help="Use deterministic rules only")

    # Baseline command
    baseline_p = subparsers.add_parser("baseline", help="Recompute the personal baseline")
    baseline_p.add_argument("--input", "-i", required=True, help="JSON file with daily data")
    baseline_p.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    baseline_p.add_argument("--db", help="Baseline database path")
    baseline_p.add_argument("--today", type=_parse_date, help="Reference date (YYYY-MM-DD)")

    # Phase command
    phase_p = subparsers.add_parser("phase", help="Show the periodization phase")
    phase_p.add_argument("--goal-date", type=_parse_date, help="Goal event date (YYYY-MM-DD)")
    phase_p.add_argument("--today", type=_parse_date, help="Reference date (YYYY-MM-DD)")
    phase_p.add_argument("--json", action="store_true", help="Print JSON")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "decide": cmd_decide,
        "baseline": cmd_baseline,
        "phase": cmd_phase,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        return command(args)
    except IntervalCoachError as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        return 2


if __name__ == "__main__":
    sys.exit(main())
