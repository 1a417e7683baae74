import click

from cppsage.cli.commands.compile_cmd import build_orchestrator, warn_if_dependencies_missing
from cppsage.cli.error_boundary import cli_error_boundary
from cppsage.core.context import SageContext
from cppsage.core.pipeline import EXECUTE_STAGE, RunOrchestrator


@click.command("run", context_settings={"ignore_unknown_options": True})
@click.argument("program_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
@cli_error_boundary
def run_cmd(ctx: SageContext, program_args: tuple[str, ...]) -> None:
    """Compile and run the project.

    Arguments after the command are passed to the program. sage exits with
    the program's exit code.
    """
    project = ctx.project()
    warn_if_dependencies_missing(ctx, project)

    orchestrator = RunOrchestrator(build_orchestrator(ctx), ctx.runner, dry_run=ctx.dry_run)
    result = orchestrator.run(project, program_args)

    if result.failed_stage == EXECUTE_STAGE:
        ctx.feedback.warning(f"{project.name} exited with code {result.exit_code}")
        raise SystemExit(result.exit_code)
    result.raise_for_failure()
