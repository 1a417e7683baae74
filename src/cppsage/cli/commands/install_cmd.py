import click

from cppsage.cli.error_boundary import cli_error_boundary
from cppsage.cli.output import forward_process_output, user_output
from cppsage.core.context import SageContext
from cppsage.core.installer import DependencyInstaller
from cppsage.core.manifest import read_manifest


@click.command("install")
@click.pass_obj
@cli_error_boundary
def install_cmd(ctx: SageContext) -> None:
    """Install dependencies and update the project's CMakeLists.txt.

    Reads packages/requirements.txt, installs it with Conan, and rewrites the
    region between the dependency markers to link exactly those packages.
    """
    project = ctx.project()
    ctx.feedback.info("Installing dependencies...")

    requirements = read_manifest(project.manifest_path)
    if requirements:
        ctx.feedback.info(f"Found dependencies: {', '.join(r.reference for r in requirements)}")
        ctx.feedback.info("Running conan install...")
    else:
        ctx.feedback.warning("No dependencies to install.")

    installer = DependencyInstaller(ctx.runner, forward_process_output, dry_run=ctx.dry_run)
    result = installer.install(project, requirements)

    relative = project.build_description_path.relative_to(project.root)
    if ctx.dry_run:
        ctx.feedback.info(f"[DRY RUN] Would write dependency block to {relative}:")
        user_output(result.document.managed, nl=False)
    elif result.build_description_updated:
        ctx.feedback.success(f"Successfully updated {relative}")
    else:
        ctx.feedback.info(f"{relative} is already up to date")
