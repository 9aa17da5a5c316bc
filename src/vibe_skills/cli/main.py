import sys
from collections import OrderedDict
from pathlib import Path

import click
from rich.markup import escape

from .. import __version__
from ..config import LoggingConfig, load_settings, setup_logging
from ..registry.errors import SkillsError
from .cli_utils import CLIContext, console
from .commands.cache import cache
from .commands.index import index
from .commands.skills import install, list_skills, remove, stacks, update


class OrderedGroup(click.Group):
    def __init__(self, name=None, commands=None, **attrs):
        super().__init__(name=name, commands=commands, **attrs)
        self.commands = OrderedDict()

    def add_command(self, cmd, name=None):
        name = name or cmd.name
        self.commands[name] = cmd

    def list_commands(self, ctx):
        return self.commands.keys()


@click.group(
    cls=OrderedGroup,
    help="vibe-skills - install and update Claude skills from a skills registry.",
)
@click.version_option(version=__version__, prog_name="vibe-skills")
@click.option("--ref", "-r", help="Registry ref: branch, tag or commit (default: main)")
@click.option(
    "--local",
    "-l",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Use a local registry directory instead of the remote one",
)
@click.option("--refresh", is_flag=True, help="Ignore the cached registry index and fetch it again")
@click.option(
    "--project-dir",
    "-C",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Project whose .claude/skills/ is managed",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Log level (default: WARNING, or VIBE_SKILLS_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, ref: str | None, local: Path | None, refresh: bool, project_dir: Path, log_level: str | None):
    """Main entry point for the vibe-skills CLI."""
    settings = load_settings(ref=ref, log_level=log_level)
    setup_logging(LoggingConfig(level=settings.log_level, format=settings.log_format))

    ctx.obj = CLIContext(
        settings=settings,
        project_dir=project_dir.resolve(),
        local=local,
        refresh=refresh,
    )


cli.add_command(install)
cli.add_command(remove)
cli.add_command(update)
cli.add_command(list_skills)
cli.add_command(stacks)
cli.add_command(cache)
cli.add_command(index)


def main():
    try:
        cli()
    except SkillsError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]", highlight=False, soft_wrap=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
