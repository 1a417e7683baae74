import click

from cppsage.cli.error_boundary import cli_error_boundary
from cppsage.core.context import SageContext
from cppsage.core.scaffold import create_project


@click.command("new")
@click.argument("name")
@click.pass_obj
@cli_error_boundary
def new_cmd(ctx: SageContext, name: str) -> None:
    """Create a new C++ project named NAME."""
    ctx.feedback.info(f"Creating new project: {click.style(name, bold=True)}")

    if ctx.dry_run:
        ctx.feedback.info(f"[DRY RUN] Would create {ctx.cwd / name}")
        return

    create_project(ctx.cwd, name)
    ctx.feedback.success(f"Project '{name}' created successfully!")
    ctx.feedback.info(f"Next: cd {name} && sage run")
