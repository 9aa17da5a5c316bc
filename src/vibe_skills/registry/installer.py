import shutil
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

import structlog

from .errors import SkillIOError, SkillNotInstalledError, SkillsError
from .models import SKILL_FILE, BatchResult, is_safe_name
from .providers import SkillProvider

logger = structlog.get_logger(__name__)

TARGET_DIR = Path(".claude") / "skills"


class SkillInstaller:
    """Materializes skills under ``<base_dir>/.claude/skills/<name>/``.

    There is no manifest: a skill is installed when its directory holds
    ``SKILL.md``. Nothing is rolled back. A failed install can leave a
    partially written directory, and an update whose install step fails
    leaves the skill removed.
    """

    def __init__(self, provider: SkillProvider, base_dir: Path):
        self.provider = provider
        self.base_dir = Path(base_dir)
        self.target_dir = self.base_dir / TARGET_DIR

    def skill_dir(self, name: str) -> Path:
        """Directory a skill named ``name`` is installed into."""
        return self.target_dir / name

    def install(self, name: str) -> None:
        """Write every file of skill ``name`` into its directory, overwriting existing files."""
        skill = self.provider.find(name)
        files = self.provider.get_files(skill)
        skill_dir = self.skill_dir(skill.name)

        for relative, content in files.items():
            destination = self._resolve_destination(skill_dir, relative)
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                destination.write_bytes(content)
            except OSError as e:
                raise SkillIOError(f"failed to write {relative}: {e}") from e

        logger.info("Installed skill", skill=skill.name, files=len(files), path=str(skill_dir))

    def install_multiple(self, names: Iterable[str]) -> BatchResult:
        """Install each name in turn. One failure does not stop the rest."""
        return self._run_batch(names, self.install)

    def install_stack(self, stack: str) -> BatchResult:
        """Install every skill of ``stack``. An unknown stack is reported as a single failure named after it."""
        try:
            skills = self.provider.list_by_stack(stack)
        except SkillsError as e:
            result = BatchResult()
            result.add_failure(stack, e)
            return result

        return self._run_batch([skill.name for skill in skills], self.install)

    def install_all(self) -> BatchResult:
        """Install every skill in the registry. Index failures are reported under the name ``*``."""
        try:
            skills = self.provider.list()
        except SkillsError as e:
            result = BatchResult()
            result.add_failure("*", e)
            return result

        return self._run_batch([skill.name for skill in skills], self.install)

    def remove(self, name: str) -> None:
        """Delete the directory of an installed skill.

        Raises:
            SkillNotInstalledError: If ``name`` is not installed.
        """
        if not self.is_installed(name):
            raise SkillNotInstalledError(name)

        skill_dir = self.skill_dir(name)
        try:
            shutil.rmtree(skill_dir)
        except OSError as e:
            raise SkillIOError(f"failed to remove {skill_dir}: {e}") from e

        logger.info("Removed skill", skill=name, path=str(skill_dir))

    def remove_multiple(self, names: Iterable[str]) -> BatchResult:
        """Remove each name in turn. One failure does not stop the rest."""
        return self._run_batch(names, self.remove)

    def list_installed(self) -> list[str]:
        """Names of subdirectories of the target directory that contain SKILL.md."""
        if not self.target_dir.is_dir():
            return []

        try:
            entries = sorted(self.target_dir.iterdir())
        except OSError as e:
            raise SkillIOError(f"failed to list {self.target_dir}: {e}") from e

        return [entry.name for entry in entries if entry.is_dir() and (entry / SKILL_FILE).is_file()]

    def is_installed(self, name: str) -> bool:
        """True when ``name`` is a plain directory name holding SKILL.md."""
        if not is_safe_name(name):
            return False
        return (self.skill_dir(name) / SKILL_FILE).is_file()

    def update(self, name: str) -> None:
        """Remove an installed skill, then install it again from the provider.

        Raises:
            SkillNotInstalledError: If ``name`` is not installed.
        """
        if not self.is_installed(name):
            raise SkillNotInstalledError(name)

        self.remove(name)
        self.install(name)
        logger.info("Updated skill", skill=name)

    def update_multiple(self, names: Iterable[str]) -> BatchResult:
        """Update each name in turn. One failure does not stop the rest."""
        return self._run_batch(names, self.update)

    def update_all(self) -> BatchResult:
        """Update every installed skill. An empty result means nothing was installed."""
        try:
            installed = self.list_installed()
        except SkillsError as e:
            result = BatchResult()
            result.add_failure("*", e)
            return result

        if not installed:
            return BatchResult()

        return self._run_batch(installed, self.update)

    def _run_batch(self, names: Iterable[str], operation) -> BatchResult:
        result = BatchResult()
        for name in names:
            try:
                operation(name)
            except SkillsError as e:
                logger.debug("Skill operation failed", skill=name, error=str(e))
                result.add_failure(name, e)
            else:
                result.add_success(name)
        return result

    @staticmethod
    def _resolve_destination(skill_dir: Path, relative: str) -> Path:
        pure = PurePosixPath(relative.replace("\\", "/"))
        if pure.is_absolute() or not pure.parts or ".." in pure.parts:
            raise SkillIOError(f"unsafe file path in skill: {relative}")
        return skill_dir.joinpath(*pure.parts)
