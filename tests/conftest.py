from pathlib import Path

import pytest

from tests.utils.test_helpers import FakeProvider, make_skill
from vibe_skills.registry.cache import RegistryCache
from vibe_skills.registry.installer import SkillInstaller
from vibe_skills.registry.models import SKILL_FILE


@pytest.fixture
def cache(tmp_path: Path) -> RegistryCache:
    return RegistryCache(tmp_path / "cache")


@pytest.fixture
def provider() -> FakeProvider:
    skills = [
        make_skill("code-reviewer", "common", "Reviews code"),
        make_skill("sqlserver-expert", "database", "SQL Server help"),
    ]
    files = {
        "code-reviewer": {
            SKILL_FILE: b"# Code reviewer\n",
            "references/checklist.md": b"- naming\n- tests\n",
        },
        "sqlserver-expert": {SKILL_FILE: b"# SQL Server\n"},
    }
    return FakeProvider(skills, files)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def installer(provider: FakeProvider, project_dir: Path) -> SkillInstaller:
    return SkillInstaller(provider, project_dir)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch):
    """Keep settings and cache away from the real home directory."""
    home = tmp_path / "home"
    monkeypatch.setenv("VIBE_SKILLS_HOME_DIR", str(home))
    for var in ("VIBE_SKILLS_REF", "VIBE_SKILLS_REGISTRY_URL", "VIBE_SKILLS_CACHE_TTL", "VIBE_SKILLS_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return home
