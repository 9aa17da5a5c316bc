import sys

import click
from rich import box
from rich.markup import escape
from rich.table import Table

from ...registry.errors import SkillsError
from ..cli_utils import CLIContext, console, pass_cli_context, print_batch_result


def _fail(message: str) -> None:
    console.print(f"[red]✗ {escape(message)}[/red]", highlight=False, soft_wrap=True)
    sys.exit(1)


@click.command()
@click.argument("names", nargs=-1)
@click.option("--stack", "-s", help="Install every skill in a stack")
@click.option("--all", "install_all", is_flag=True, help="Install every skill in the registry")
@pass_cli_context
def install(cli: CLIContext, names: tuple[str, ...], stack: str | None, install_all: bool):
    """Install skills into .claude/skills/ of the current project.

    Examples:
        vibe-skills install code-reviewer
        vibe-skills install code-reviewer sqlserver-expert
        vibe-skills install --stack database
        vibe-skills install --all
    """
    modes = sum([bool(names), stack is not None, install_all])
    if modes != 1:
        raise click.UsageError("Give skill names, --stack or --all (exactly one of them)")

    installer = cli.installer()

    if install_all:
        console.print("Installing all skills...")
        result = installer.install_all()
    elif stack is not None:
        console.print(f"Installing stack [cyan]{escape(stack)}[/cyan]...")
        result = installer.install_stack(stack)
    else:
        console.print(f"Installing {len(names)} skill(s)...")
        result = installer.install_multiple(names)

    print_batch_result(result, "install", "Installed")


@click.command()
@click.argument("names", nargs=-1, required=True)
@pass_cli_context
def remove(cli: CLIContext, names: tuple[str, ...]):
    """Remove installed skills."""
    installer = cli.installer()
    result = installer.remove_multiple(names)
    print_batch_result(result, "remove", "Removed")


@click.command()
@click.argument("names", nargs=-1)
@pass_cli_context
def update(cli: CLIContext, names: tuple[str, ...]):
    """Update installed skills to what the registry ref currently holds.

    Examples:
        vibe-skills update                     # every installed skill
        vibe-skills update code-reviewer
    """
    installer = cli.installer()

    if not names:
        installed = installer.list_installed()
        if not installed:
            console.print("No skills installed to update")
            return

        console.print(f"Updating {len(installed)} installed skill(s)...")
        result = installer.update_all()
    else:
        console.print(f"Updating {len(names)} skill(s)...")
        result = installer.update_multiple(names)

    print_batch_result(result, "update", "Updated")


@click.command("list")
@click.option("--installed", "-i", is_flag=True, help="Only show skills installed in this project")
@click.option("--stack", "-s", help="Only show skills in this stack")
@pass_cli_context
def list_skills(cli: CLIContext, installed: bool, stack: str | None):
    """List skills available in the registry."""
    installer = cli.installer()

    if installed:
        names = installer.list_installed()
        if not names:
            console.print("[yellow]No skills installed.[/yellow]")
            return
        for name in names:
            console.print(f"  {name}")
        return

    try:
        skills = installer.provider.list_by_stack(stack) if stack else installer.provider.list()
    except SkillsError as e:
        _fail(str(e))
        return

    installed_names = set(installer.list_installed())

    table = Table(title=f"Skills ({len(skills)})", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Stack", style="blue")
    table.add_column("Description", style="dim")
    table.add_column("Installed", style="green", justify="center")

    for skill in skills:
        description = skill.description
        if len(description) > 60:
            description = description[:57] + "..."
        table.add_row(skill.name, skill.stack, description, "✓" if skill.name in installed_names else "")

    console.print(table)


@click.command()
@pass_cli_context
def stacks(cli: CLIContext):
    """List the stacks (categories) in the registry."""
    provider = cli.provider()
    try:
        skills = provider.list()
    except SkillsError as e:
        _fail(str(e))
        return

    counts: dict[str, int] = {}
    for skill in skills:
        counts[skill.stack] = counts.get(skill.stack, 0) + 1

    if not counts:
        console.print("[yellow]The registry has no skills.[/yellow]")
        return

    for name in provider.stacks():
        console.print(f"  [cyan]{escape(name)}[/cyan] ({counts[name]})")
