#!/usr/bin/env python3
"""
Network quality CLI -- latency, jitter, packet loss and a speed test.

Usage::

    python netcheck.py                          # ping test + speed test
    python netcheck.py --mode ping              # only probe the targets
    python netcheck.py --mode speed --seed 7    # reproducible speed test
    python netcheck.py --simple                 # plain text
    python netcheck.py --json                   # JSON to stdout
    python netcheck.py -o result.json           # save to file
    python netcheck.py --target "Home=https://router.lan/"
    python netcheck.py --count 10 --save-config  # remember settings
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys
from typing import List, Optional

from netquality.api import ClientInfo, NetworkInfoAPI
from netquality.config import load_config, save_config, validate_settings
from netquality.errors import ConfigurationError, LookupFailed, MeasurementCancelled
from netquality.latency import LatencyProbe
from netquality.logging_config import configure_logging
from netquality.orchestrator import MultiTargetRunner, PhaseEvent, PhaseOrchestrator
from netquality.runner import RunnerTimings, SpeedTestResult, SpeedTestRunner
from netquality.synthetic import SyntheticSource
from netquality.targets import Target, targets_from_config, validate_targets
from ui.dashboard import (
    ProgressDisplay,
    TargetBoard,
    console,
    print_client_info,
    print_final_results,
    print_header,
    print_ping_summary,
)
from ui.output import create_result_json, format_target_line, format_text_result, save_json

logger = logging.getLogger("netcheck")


# ---------------------------------------------------------------------------
# Phases
# ---------------------------------------------------------------------------

async def _client_info() -> Optional[ClientInfo]:
    try:
        async with NetworkInfoAPI() as api:
            return await api.get_client_info()
    except LookupFailed:
        return None


async def run_ping_test(
    targets: List[Target],
    count: int,
    interval: float,
    timeout: float,
    show_ui: bool,
) -> List[PhaseEvent]:
    """Probe every target in turn and return the completed events."""
    async with LatencyProbe(timeout=timeout) as probe:
        runner = MultiTargetRunner(PhaseOrchestrator(probe, interval=interval))
        if not show_ui:
            return await runner.run(targets, count)

        console.print("\n[bold]Testing latency to servers...[/bold]")
        with TargetBoard(targets) as board:
            return await runner.run(targets, count, on_update=board.update)


async def run_speed_test(
    seed: Optional[int],
    ramp_duration: float,
    show_ui: bool,
) -> SpeedTestResult:
    source = SyntheticSource(random.Random(seed) if seed is not None else None)
    timings = RunnerTimings(ramp_duration=ramp_duration)
    runner = SpeedTestRunner(source=source, timings=timings)

    if not show_ui:
        return await runner.run()

    console.print("\n[bold]Running speed test...[/bold]")
    progress = ProgressDisplay()

    def _on_progress(label: str, value: Optional[float]) -> None:
        # ping/jitter have no value to animate
        if label in ("Download", "Upload"):
            progress.update(label, value)

    progress.start()
    try:
        return await runner.run(
            on_progress=_on_progress,
            on_ping_complete=print_ping_summary,
        )
    finally:
        progress.stop()


# ---------------------------------------------------------------------------
# Core sequence
# ---------------------------------------------------------------------------

async def run_check(
    *,
    mode: str = "all",
    targets: Optional[List[Target]] = None,
    count: int,
    interval: float,
    timeout: float,
    ramp_duration: float,
    seed: Optional[int] = None,
    json_output: bool = False,
    output_file: Optional[str] = None,
    simple: bool = False,
    lookup_ip: bool = True,
) -> dict:
    """Execute the requested phases and return a JSON-serialisable dict."""
    show_ui = not json_output and not simple

    if show_ui:
        print_header()

    client_info = await _client_info() if lookup_ip else None
    if show_ui and lookup_ip:
        print_client_info(client_info)
    elif simple and lookup_ip:
        print(f"IP: {client_info.ip if client_info else 'Unavailable'}")

    ping_events: Optional[List[PhaseEvent]] = None
    if mode in ("all", "ping"):
        ping_events = await run_ping_test(targets or [], count, interval, timeout, show_ui)
        if simple:
            for event in ping_events:
                print(format_target_line(event))

    speed_result: Optional[SpeedTestResult] = None
    if mode in ("all", "speed"):
        speed_result = await run_speed_test(seed, ramp_duration, show_ui)
        if show_ui:
            print_final_results(speed_result)
        elif simple:
            print(format_text_result(speed_result, client_info.ip if client_info else ""))

    result_json = create_result_json(
        client_info=client_info.to_dict() if client_info else None,
        ping_events=ping_events,
        speed_test=speed_result,
    )

    if json_output:
        print(json.dumps(result_json, indent=2))

    if output_file:
        save_json(result_json, output_file)
        if not json_output:
            console.print(f"\n[green]Results saved to:[/green] {output_file}")

    return result_json


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def build_parser(config: dict) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Network quality check -- latency, jitter, loss and speed",
    )
    parser.add_argument("--mode", choices=("all", "ping", "speed"), default="all", help="Which tests to run (default: all)")

    # Output modes
    parser.add_argument("--json", "-j", action="store_true", help="Output results as JSON")
    parser.add_argument("--output", "-o", type=str, metavar="FILE", help="Save results to JSON file")
    parser.add_argument("--simple", "-s", action="store_true", help="Simple output mode (no dashboard)")
    parser.add_argument("--no-ip", action="store_true", help="Skip the public IP lookup")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging to stderr")

    # Ping parameters
    parser.add_argument("--target", action="append", metavar="NAME=URL", help="Probe this target instead of the defaults (repeatable)")
    parser.add_argument("--count", type=int, default=config["ping_count"], metavar="N", help="Probes per target (default: %(default)s)")
    parser.add_argument("--interval", type=float, default=config["ping_interval"], metavar="SECS", help="Delay between probes (default: %(default)s)")
    parser.add_argument("--timeout", type=float, default=config["probe_timeout"], metavar="SECS", help="Per-probe timeout (default: %(default)s)")

    # Speed test parameters
    parser.add_argument("--duration", type=float, default=config["ramp_duration"], metavar="SECS", help="Download/upload animation length (default: %(default)s)")
    parser.add_argument("--seed", type=int, metavar="N", help="Seed the synthetic value source")
    parser.add_argument("--save-config", action="store_true", help="Store the effective settings as defaults and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    config = load_config()
    args = build_parser(config).parse_args(argv)

    configure_logging("DEBUG" if args.verbose else config.get("log_level"))

    try:
        validate_settings(
            ping_count=args.count,
            ping_interval=args.interval,
            probe_timeout=args.timeout,
            ramp_duration=args.duration,
        )
        if args.target:
            targets = [Target.from_spec(spec) for spec in args.target]
        else:
            targets = targets_from_config(config)
        if args.mode in ("all", "ping") or args.save_config:
            validate_targets(targets)
    except ConfigurationError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    if args.save_config:
        path = save_config({
            **config,
            "ping_count": args.count,
            "ping_interval": args.interval,
            "probe_timeout": args.timeout,
            "ramp_duration": args.duration,
            "targets": [t.to_dict() for t in targets] if args.target else config["targets"],
        })
        console.print(f"[green]Settings saved to:[/green] {path}")
        return

    try:
        asyncio.run(
            run_check(
                mode=args.mode,
                targets=targets,
                count=args.count,
                interval=args.interval,
                timeout=args.timeout,
                ramp_duration=args.duration,
                seed=args.seed,
                json_output=args.json,
                output_file=args.output,
                simple=args.simple,
                lookup_ip=not args.no_ip,
            )
        )
    except (KeyboardInterrupt, MeasurementCancelled):
        console.print("\n[yellow]Test cancelled by user[/yellow]")
        sys.exit(1)
    except Exception as exc:
        logger.debug("Unhandled error", exc_info=True)
        console.print(f"\n[red]Error: {exc}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
