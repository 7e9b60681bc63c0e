"""CLI adapter for ``lib_test_most`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect how a suite would be configured (modifiers plus the
``DIE_ON_FAIL`` / ``BAIL_ON_FAIL`` environment switches) and watch the failure
policies act on a tiny demonstration suite, without writing a test file.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_options` – prints the resolved :class:`SuiteOptions` as JSON.
* :func:`cli_demo` – runs the ``[pass, fail, pass]`` demonstration suite.
* :func:`cli_fail` – deterministic error for traceback handling.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It calls the composition root
(:func:`start_suite`) and the modifier parser, never the policies directly.
``lib_cli_exit_tools`` centralises the exit code strategy so a suite abort or a
bail-out surfaces with a consistent status.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.default import DefaultEnvLoader
from .application.modifiers import MODIFIER_FLAGS, parse_modifiers
from .core import start_suite
from .testing import i_should_fail, run_demo_suite

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

PLAN_MODIFIERS: Final[tuple[str, ...]] = ("defer_plan", "no_plan")
MODIFIER_CHOICES: Final[tuple[str, ...]] = (*MODIFIER_FLAGS, "no_plan")


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` when metadata is missing."""

    try:
        return metadata.version("lib_test_most")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Fail-fast policies and deferred plans for test suites",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_test_most",
    message="lib_test_most version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_test_most")
    except metadata.PackageNotFoundError:
        click.echo("lib_test_most (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_test_most')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")
    for entry in meta.get_all("Project-URL") or []:
        click.echo(f"  {entry}")


@cli.command("options", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("modifiers", nargs=-1)
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_options(modifiers: Sequence[str], indent: Optional[int]) -> None:
    """Print the options a suite started with MODIFIERS would use.

    Environment switches are included. Arguments that are not behaviour flags
    are listed under ``forwarded``.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["options", "die", "no_plan"], env={"BAIL_ON_FAIL": ""})
    >>> json.loads(result.output)["failure_policy"]
    'die'
    """

    requested, forwarded = parse_modifiers(modifiers)
    resolved = DefaultEnvLoader().load().merge(requested)
    payload = {**resolved.as_dict(), "failure_policy": resolved.failure_policy, "forwarded": list(forwarded)}
    click.echo(json.dumps(payload, indent=indent))


@cli.command("demo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("modifiers", nargs=-1, type=click.Choice(MODIFIER_CHOICES))
@click.pass_context
def cli_demo(ctx: click.Context, modifiers: Sequence[str]) -> None:
    """Run a three-test suite (pass, fail, pass) as TAP and exit with its status.

    Without a plan modifier the suite uses ``defer_plan``. Add ``die`` or
    ``bail`` to watch the failure policies stop it at the third test.
    """

    chosen = list(modifiers)
    if not any(modifier in PLAN_MODIFIERS for modifier in chosen):
        chosen.append("defer_plan")
    suite = start_suite(*chosen, name="demo", register_exit_hook=False)
    ctx.exit(run_demo_suite(suite))


@cli.command("fail", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_fail() -> None:
    """Trigger a deterministic error for testing traceback handling."""

    i_should_fail()


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_test_most",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
