import click

from cppsage.cli.error_boundary import cli_error_boundary
from cppsage.cli.output import forward_process_output
from cppsage.core.context import SageContext
from cppsage.core.manifest import read_manifest_or_empty
from cppsage.core.pipeline import CONFIGURE_STAGE, BuildOrchestrator, Stage
from cppsage.core.project_discovery import ProjectContext

_STAGE_MESSAGES = {
    CONFIGURE_STAGE: "Configuring project with CMake...",
}


def warn_if_dependencies_missing(ctx: SageContext, project: ProjectContext) -> None:
    """Warn when the manifest declares packages but nothing was installed."""
    requirements = read_manifest_or_empty(project.manifest_path)
    if requirements and not project.toolchain_path.exists():
        ctx.feedback.warning(
            f"{len(requirements)} dependencies declared but the Conan toolchain is missing. "
            "Run 'sage install' first."
        )


def build_orchestrator(ctx: SageContext) -> BuildOrchestrator:
    def announce(stage: Stage) -> None:
        ctx.feedback.info(_STAGE_MESSAGES.get(stage.name, "Compiling project with CMake..."))

    return BuildOrchestrator(
        ctx.runner, forward_process_output, on_stage_start=announce, dry_run=ctx.dry_run
    )


@click.command("compile")
@click.pass_obj
@cli_error_boundary
def compile_cmd(ctx: SageContext) -> None:
    """Configure and compile the project."""
    project = ctx.project()
    warn_if_dependencies_missing(ctx, project)

    result = build_orchestrator(ctx).build(project)
    result.raise_for_failure()
    ctx.feedback.success("Project compiled successfully!")
