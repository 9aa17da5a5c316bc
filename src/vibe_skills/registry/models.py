"""
Pydantic models for the skills registry.

These mirror the JSON documents the tool reads and writes: the registry index
published next to the skills, and the cache entries kept under the user's
home directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator

SKILL_FILE = "SKILL.md"
INDEX_VERSION = "1.0"


class Skill(BaseModel):
    """A named unit of skill content listed in a registry index."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique skill name, used as the install directory name")
    stack: str = Field(..., description="Category the skill belongs to")
    description: str = Field("", description="One-line summary")
    path: str = Field(..., description="Location of SKILL.md relative to the registry skills root")
    files: list[str] = Field(default_factory=list, description="Extra files shipped next to SKILL.md")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Skill names become directory names, so they must be path-safe."""
        if not is_safe_name(v):
            raise ValueError(f"Skill name must be a single path segment: {v!r}")
        return v

    @property
    def directory(self) -> str:
        """Directory of the skill inside the registry, e.g. ``common/code-reviewer``."""
        return str(PurePosixPath(self.path).parent)


class RegistryIndex(BaseModel):
    """Snapshot of every skill available for one registry reference."""

    version: str = Field(INDEX_VERSION, description="Index format version")
    skills: list[Skill] = Field(default_factory=list)


class CacheEntry(BaseModel):
    data: RegistryIndex
    ref: str
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("fetched_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def age_seconds(self, now: datetime | None = None) -> float:
        now = now or datetime.now(timezone.utc)
        return (now - self.fetched_at).total_seconds()


@dataclass
class SkillFailure:
    """One failed item of a batch operation."""

    name: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.name}: {self.error}"


@dataclass
class BatchResult:
    """Outcome of a batch install/update/remove, in input order."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[SkillFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def add_success(self, name: str) -> None:
        self.succeeded.append(name)

    def add_failure(self, name: str, error: Exception) -> None:
        self.failed.append(SkillFailure(name=name, error=error))


def is_safe_name(name: str) -> bool:
    if not name or name in (".", ".."):
        return False
    return "/" not in name and "\\" not in name
