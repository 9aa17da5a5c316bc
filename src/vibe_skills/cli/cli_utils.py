import sys
from dataclasses import dataclass
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from ..config import Settings
from ..registry import LocalSkillProvider, RegistryCache, RemoteSkillProvider, SkillInstaller, SkillProvider
from ..registry.models import BatchResult

console = Console()


@dataclass
class CLIContext:
    """Options shared by every command, built once by the root group."""

    settings: Settings
    project_dir: Path
    local: Path | None = None
    refresh: bool = False

    def cache(self) -> RegistryCache:
        return RegistryCache(self.settings.cache_dir, ttl=self.settings.cache_ttl_delta)

    def provider(self) -> SkillProvider:
        if self.local is not None:
            provider: SkillProvider = LocalSkillProvider(self.local, cache=self.cache())
        else:
            provider = RemoteSkillProvider(
                base_url=self.settings.registry_url,
                ref=self.settings.ref,
                cache=self.cache(),
                timeout=self.settings.http_timeout,
            )
        if self.refresh:
            provider.refresh()
        return provider

    def installer(self) -> SkillInstaller:
        return SkillInstaller(self.provider(), self.project_dir)


pass_cli_context = click.make_pass_decorator(CLIContext)


def print_batch_result(result: BatchResult, action: str, past: str) -> None:
    """Print one line per item, then exit non-zero if anything failed."""
    for name in result.succeeded:
        console.print(f"  [green]✓[/green] {name}")
    for failure in result.failed:
        console.print(f"  [red]✗ {escape(str(failure))}[/red]", highlight=False, soft_wrap=True)

    if not result.ok:
        console.print(f"\n[red]Failed to {action} {len(result.failed)} skill(s)[/red]")
        sys.exit(1)

    if result.succeeded:
        console.print(f"\n{past} {len(result.succeeded)} skill(s)")
