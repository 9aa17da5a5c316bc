from pathlib import Path

from vibe_skills.registry.errors import RegistryFetchError
from vibe_skills.registry.models import SKILL_FILE, RegistryIndex, Skill
from vibe_skills.registry.providers import SkillProvider


def make_skill(name: str, stack: str = "common", description: str = "") -> Skill:
    return Skill(name=name, stack=stack, description=description, path=f"{stack}/{name}/{SKILL_FILE}")


class FakeProvider(SkillProvider):
    """In-memory provider: an index plus the file set of each skill."""

    def __init__(self, skills: list[Skill], files: dict[str, dict[str, bytes]] | None = None, cache=None):
        super().__init__("test-ref", cache)
        self.index = RegistryIndex(skills=skills)
        self.files = files or {}
        self.fetch_count = 0
        self.broken: set[str] = set()

    def fetch_index(self) -> RegistryIndex:
        self.fetch_count += 1
        return self.index

    def get_files(self, skill: Skill) -> dict[str, bytes]:
        if skill.name in self.broken:
            raise RegistryFetchError(f"failed to fetch files for {skill.name}")
        return dict(self.files.get(skill.name, {SKILL_FILE: f"# {skill.name}\n".encode()}))


def write_skill_tree(root: Path, skills: dict[str, dict[str, str]]) -> Path:
    """Create ``<stack>/<name>/<file>`` entries from ``{"stack/name": {file: text}}``."""
    for skill_path, files in skills.items():
        for relative, text in files.items():
            target = root / skill_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text)
    return root
