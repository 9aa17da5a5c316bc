from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

import httpx
import structlog
from pydantic import ValidationError

from .. import __version__
from .cache import RegistryCache
from .errors import CacheError, EmptyStackError, RegistryFetchError, SkillNotFoundError
from .index import INDEX_FILE, generate_index
from .models import SKILL_FILE, RegistryIndex, Skill

logger = structlog.get_logger(__name__)

DEFAULT_REGISTRY_URL = "https://raw.githubusercontent.com/cuongtl1992/vibe-skills"
DEFAULT_REF = "main"


class SkillProvider(ABC):
    """Source of skill metadata and content for one registry reference.

    Subclasses only know how to fetch an index and read skill files. Index
    lookup, stack filtering and cache handling live here.
    """

    def __init__(self, ref: str, cache: RegistryCache | None = None):
        self.ref = ref
        self.cache = cache
        self._index: RegistryIndex | None = None
        self._skip_cache = False

    @abstractmethod
    def fetch_index(self) -> RegistryIndex:
        """Fetch the index from the underlying source, bypassing every cache."""

    @abstractmethod
    def get_files(self, skill: Skill) -> dict[str, bytes]:
        """Return every file of ``skill`` keyed by POSIX path relative to the skill directory."""

    def get_content(self, skill: Skill) -> bytes:
        return self.get_files(skill)[SKILL_FILE]

    def load_index(self) -> RegistryIndex:
        if self._index is not None:
            return self._index

        if self.cache is not None and not self._skip_cache:
            cached = self.cache.get(self.ref)
            if cached is not None:
                logger.debug("Using cached registry index", ref=self.ref)
                self._index = cached
                return cached

        index = self.fetch_index()
        logger.info("Fetched registry index", ref=self.ref, skills=len(index.skills))

        if self.cache is not None:
            try:
                self.cache.set(self.ref, index)
            except CacheError as e:
                logger.warning("Could not cache registry index", ref=self.ref, error=str(e))

        self._index = index
        self._skip_cache = False
        return index

    def refresh(self) -> None:
        """Fetch on the next lookup. The cached entry is only replaced once that fetch succeeds."""
        self._index = None
        self._skip_cache = True

    def find(self, name: str) -> Skill:
        for skill in self.load_index().skills:
            if skill.name == name:
                return skill
        raise SkillNotFoundError(name)

    def list(self) -> list[Skill]:
        return list(self.load_index().skills)

    def list_by_stack(self, stack: str) -> list[Skill]:
        skills = [skill for skill in self.load_index().skills if skill.stack == stack]
        if not skills:
            raise EmptyStackError(stack)
        return skills

    def stacks(self) -> list[str]:
        seen: dict[str, None] = {}
        for skill in self.load_index().skills:
            seen.setdefault(skill.stack, None)
        return list(seen)


class RemoteSkillProvider(SkillProvider):
    """Reads a registry published as raw files, e.g. a GitHub repository at a ref.

    Layout: ``{base_url}/{ref}/skills/registry.json`` for the index and
    ``{base_url}/{ref}/skills/<skill dir>/<file>`` for skill files.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_REGISTRY_URL,
        ref: str = DEFAULT_REF,
        cache: RegistryCache | None = None,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ):
        super().__init__(ref, cache)
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))
        self.headers = {"User-Agent": f"vibe-skills/{__version__}"}
        self._client = client

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, self.ref, "skills", *parts])

    def _get(self, url: str) -> bytes:
        client = self._client or httpx.Client(timeout=self.timeout, headers=self.headers, follow_redirects=True)
        try:
            response = client.get(url)
            response.raise_for_status()
            return response.content
        except httpx.HTTPError as e:
            raise RegistryFetchError(f"failed to fetch {url}: {e}") from e
        finally:
            if self._client is None:
                client.close()

    def fetch_index(self) -> RegistryIndex:
        url = self._url(INDEX_FILE)
        logger.debug("Fetching registry index", url=url)
        content = self._get(url)
        try:
            return RegistryIndex.model_validate_json(content)
        except ValidationError as e:
            raise RegistryFetchError(f"invalid registry index at {url}: {e}") from e

    def get_content(self, skill: Skill) -> bytes:
        return self._get(self._url(skill.directory, SKILL_FILE))

    def get_files(self, skill: Skill) -> dict[str, bytes]:
        files = {SKILL_FILE: self.get_content(skill)}
        for relative in skill.files:
            relative = PurePosixPath(relative).as_posix()
            if relative == SKILL_FILE:
                continue
            files[relative] = self._get(self._url(skill.directory, relative))
        return files


class LocalSkillProvider(SkillProvider):
    """Reads skills from a directory laid out as ``<stack>/<name>/SKILL.md``.

    Uses ``registry.json`` in that directory when present, otherwise scans it.
    A repository checkout is accepted too: its ``skills/`` subdirectory is used.
    """

    def __init__(self, root: Path, cache: RegistryCache | None = None):
        root = Path(root).expanduser().resolve()
        super().__init__(str(root), cache)
        if not (root / INDEX_FILE).exists() and (root / "skills").is_dir():
            root = root / "skills"
        self.root = root

    def fetch_index(self) -> RegistryIndex:
        if not self.root.is_dir():
            raise RegistryFetchError(f"local registry not found: {self.root}")

        index_file = self.root / INDEX_FILE
        if not index_file.exists():
            logger.debug("No index file, scanning directory", root=str(self.root))
            try:
                return generate_index(self.root)
            except (OSError, ValueError) as e:
                raise RegistryFetchError(f"failed to scan {self.root}: {e}") from e

        try:
            return RegistryIndex.model_validate(json.loads(index_file.read_text(encoding="utf-8")))
        except (OSError, ValueError) as e:
            raise RegistryFetchError(f"failed to read {index_file}: {e}") from e

    def _skill_dir(self, skill: Skill) -> Path:
        return self.root / skill.directory

    def get_content(self, skill: Skill) -> bytes:
        path = self._skill_dir(skill) / SKILL_FILE
        try:
            return path.read_bytes()
        except OSError as e:
            raise RegistryFetchError(f"failed to read {path}: {e}") from e

    def get_files(self, skill: Skill) -> dict[str, bytes]:
        skill_dir = self._skill_dir(skill)
        if not skill_dir.is_dir():
            raise RegistryFetchError(f"skill directory not found: {skill_dir}")

        files: dict[str, bytes] = {}
        try:
            for path in sorted(skill_dir.rglob("*")):
                if path.is_file():
                    files[path.relative_to(skill_dir).as_posix()] = path.read_bytes()
        except OSError as e:
            raise RegistryFetchError(f"failed to read skill files in {skill_dir}: {e}") from e

        if SKILL_FILE not in files:
            raise RegistryFetchError(f"{SKILL_FILE} missing in {skill_dir}")
        return files
