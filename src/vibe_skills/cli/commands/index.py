import sys
from pathlib import Path

import click
from rich.markup import escape

from ...registry.index import write_index
from ..cli_utils import console


@click.group()
def index():
    """Maintain a registry index."""
    pass


@index.command("generate")
@click.argument("skills_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Output file")
def generate(skills_dir: Path, output: Path | None):
    """Write registry.json for a <stack>/<name>/SKILL.md tree."""
    console.print(f"Scanning skills in {escape(str(skills_dir))}...", soft_wrap=True)
    try:
        output_file, registry_index = write_index(skills_dir, output)
    except OSError as e:
        console.print(f"[red]✗ Could not write index: {escape(str(e))}[/red]", highlight=False, soft_wrap=True)
        sys.exit(1)

    for skill in registry_index.skills:
        console.print(f"  Found: {escape(skill.stack)}/{escape(skill.name)}")

    console.print(f"\nGenerated {escape(str(output_file))} with {len(registry_index.skills)} skill(s)", soft_wrap=True)
