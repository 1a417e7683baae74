import click
from rich.console import Console
from rich.table import Table

from cppsage.cli.error_boundary import cli_error_boundary
from cppsage.core.context import SageContext
from cppsage.core.manifest import read_manifest_or_empty
from cppsage.core.tool_probe import ToolAvailability, ToolProbe, required_tools


def render_tool_table(availability: list[ToolAvailability]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("tool", style="bold", no_wrap=True)
    table.add_column("status", no_wrap=True)
    table.add_column("details")

    for tool in availability:
        if tool.found:
            table.add_row(tool.tool_name, "[green]OK[/green]", f"[dim]{tool.version or ''}[/dim]")
        else:
            hint = f"[cyan]{tool.install_hint}[/cyan]"
            table.add_row(tool.tool_name, "[red]Not found[/red]", hint)
    return table


@click.command("doctor")
@click.pass_obj
@cli_error_boundary
def doctor_cmd(ctx: SageContext) -> None:
    """Check for required tools.

    Exits non-zero if any tool is missing.
    """
    ctx.feedback.info("Checking for required tools...")

    project = ctx.project()
    probe = ToolProbe(ctx.runner, ctx.cwd)
    availability = probe.probe_all(required_tools(project.config.tools))

    # Output table to stderr (consistent with user_output convention)
    console = Console(stderr=True, width=120)
    console.print(render_tool_table(availability))
    console.print()

    requirements = read_manifest_or_empty(project.manifest_path)
    ctx.feedback.info(f"{len(requirements)} dependencies declared in {project.manifest_path.name}")

    missing = [tool.tool_name for tool in availability if not tool.found]
    if missing:
        ctx.feedback.error(f"Missing tools: {', '.join(missing)}")
        raise SystemExit(1)
