"""CLI entry point for teststream."""
from __future__ import annotations

import logging
import sys
from typing import BinaryIO, Optional, Tuple

import click
from colorama import Fore, Style, init as colorama_init

from teststream import __version__
from teststream.plan import PlanOptions, RunPlan, load_plan, run_plan
from teststream.reporting import CheckReport, JsonFormatter, check_file

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

logger = logging.getLogger(__name__)


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"teststream {__version__}")
    raise click.exceptions.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output on stderr.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the teststream version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Stream test run events as newline-delimited JSON."""

    _configure_logging(verbose)
    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.argument("plan_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--filter", "name_filters", type=str, help="Comma-separated test name filters (supports globs).")
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False),
    help="Write events to this file instead of stdout.",
)
@click.option("--clean-bench", is_flag=True, help="Emit deviation and mib_per_second as separate numeric fields.")
@click.option("--validate", is_flag=True, help="Check every event against its schema before writing it.")
@click.pass_obj
def replay(
    state: CliState,
    plan_path: str,
    name_filters: Optional[str],
    output_path: Optional[str],
    clean_bench: bool,
    validate: bool,
) -> None:
    """Replay a YAML run plan as an event stream."""

    options = PlanOptions(filters=_split_csv(name_filters))
    try:
        plan = load_plan(plan_path)
        if output_path:
            with open(output_path, "wb") as sink:
                succeeded = _replay(plan, sink, options, clean_bench=clean_bench, validate=validate)
        else:
            sink = sys.stdout.buffer
            succeeded = _replay(plan, sink, options, clean_bench=clean_bench, validate=validate)
    except Exception as exc:  # pragma: no cover - CLI error translation
        if state.verbose:
            logger.exception("replay of %s failed", plan_path)
        raise click.ClickException(str(exc)) from exc
    raise click.exceptions.Exit(0 if succeeded else 1)


@cli.command()
@click.argument("stream_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
def check(stream_path: str, no_color: bool) -> None:
    """Check a recorded event stream against the wire contract."""

    try:
        report = check_file(stream_path)
    except OSError as exc:  # pragma: no cover - filesystem protection
        raise click.ClickException(f"Failed to read {stream_path}: {exc}") from exc
    colorama_init()
    for violation in report.violations:
        click.echo(f"line {violation.line}: {violation.message}")
    _print_summary(report, use_color=not no_color)
    raise click.exceptions.Exit(0 if report.ok else 1)


def _replay(plan: RunPlan, sink: BinaryIO, options: PlanOptions, *, clean_bench: bool, validate: bool) -> bool:
    formatter = JsonFormatter(sink, legacy_bench_format=not clean_bench, validate=validate)
    return run_plan(plan, formatter, options)


def _print_summary(report: CheckReport, *, use_color: bool = True) -> None:
    summary_color = ""
    if use_color:
        summary_color = Fore.GREEN if report.ok else Fore.RED
    reset = Style.RESET_ALL if use_color else ""
    if report.succeeded is None:
        suite = "unknown"
    else:
        suite = "ok" if report.succeeded else "failed"
    click.echo(
        f"{summary_color}Summary{reset}: events={report.events} tests={report.tests} "
        f"violations={len(report.violations)} suite={suite}"
    )


def _split_csv(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return tuple()
    parts = [part.strip() for part in value.split(",") if part.strip()]
    return tuple(parts)


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="teststream", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
