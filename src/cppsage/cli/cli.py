import logging
import os

import click

from cppsage.cli.commands.compile_cmd import compile_cmd
from cppsage.cli.commands.doctor_cmd import doctor_cmd
from cppsage.cli.commands.install_cmd import install_cmd
from cppsage.cli.commands.new_cmd import new_cmd
from cppsage.cli.commands.run_cmd import run_cmd
from cppsage.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


def configure_logging(debug: bool) -> None:
    """Enable debug logging via --debug or the SAGE_DEBUG environment variable."""
    if debug or os.getenv("SAGE_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="cppsage")
@click.option("--debug", is_flag=True, help="Show debug logging.")
@click.option("--dry-run", is_flag=True, help="Print external commands instead of running them.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings, errors and tool output.")
@click.pass_context
def cli(ctx: click.Context, debug: bool, dry_run: bool, quiet: bool) -> None:
    """Scaffold, install, build and run C++ projects with CMake and Conan."""
    configure_logging(debug)
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(dry_run=dry_run, quiet=quiet)


cli.add_command(new_cmd)
cli.add_command(install_cmd)
cli.add_command(compile_cmd)
cli.add_command(run_cmd)
cli.add_command(doctor_cmd)


def main() -> None:
    """CLI entry point used by the `sage` console script."""
    cli()
