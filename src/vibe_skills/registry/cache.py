import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import structlog
from pydantic import ValidationError

from .errors import CacheError
from .models import CacheEntry, RegistryIndex

logger = structlog.get_logger(__name__)

DEFAULT_CACHE_TTL = timedelta(hours=1)


def sanitize_ref(ref: str) -> str:
    """Map a registry reference to a file name stem.

    ``a/b``, ``a\\b`` and ``a:b`` all map to ``a_b``; such collisions are accepted.
    """
    return ref.replace("/", "_").replace("\\", "_").replace(":", "_")


class RegistryCache:
    """Caches one registry index per reference, one JSON file each."""

    def __init__(self, cache_dir: Path, ttl: timedelta = DEFAULT_CACHE_TTL):
        self.cache_dir = Path(cache_dir)
        self.ttl = ttl

    def path_for(self, ref: str) -> Path:
        return self.cache_dir / f"{sanitize_ref(ref)}.json"

    def get(self, ref: str) -> RegistryIndex | None:
        """Return the cached index for ``ref`` if present and fresh, else None."""
        entry = self._load_entry(self.path_for(ref))
        if entry is None:
            return None

        age = entry.age_seconds()
        if age > self.ttl.total_seconds():
            logger.debug("Cache entry expired", ref=ref, age_seconds=round(age, 1))
            return None

        return entry.data

    def set(self, ref: str, index: RegistryIndex) -> None:
        """Store ``index`` for ``ref``, replacing any previous entry."""
        entry = CacheEntry(data=index, ref=ref, fetched_at=datetime.now(timezone.utc))
        cache_file = self.path_for(ref)

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            # Write beside the target and swap it in so readers never see a partial file
            fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=".", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(entry.model_dump_json(indent=2))
                os.replace(tmp_name, cache_file)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except PermissionError as e:
            raise CacheError(f"Permission denied writing cache file {cache_file}") from e
        except OSError as e:
            raise CacheError(f"Failed to write cache file {cache_file}: {e}") from e

        logger.debug("Cached registry index", ref=ref, path=str(cache_file), skills=len(index.skills))

    def clear(self) -> None:
        """Remove every cached entry."""
        if not self.cache_dir.exists():
            return

        for cache_file in self.cache_dir.glob("*.json"):
            try:
                cache_file.unlink()
            except OSError as e:
                raise CacheError(f"Failed to delete cache file {cache_file}: {e}") from e

    def clear_ref(self, ref: str) -> None:
        """Remove the entry for ``ref``. Raises CacheError when there is none."""
        cache_file = self.path_for(ref)
        try:
            cache_file.unlink()
        except FileNotFoundError as e:
            raise CacheError(f"No cache entry for ref: {ref}") from e
        except OSError as e:
            raise CacheError(f"Failed to delete cache file {cache_file}: {e}") from e

    def entries(self) -> list[CacheEntry]:
        """All readable entries, expired or not, sorted by ref."""
        if not self.cache_dir.exists():
            return []

        entries = []
        for cache_file in sorted(self.cache_dir.glob("*.json")):
            entry = self._load_entry(cache_file)
            if entry is not None:
                entries.append(entry)
        return sorted(entries, key=lambda e: e.ref)

    def is_fresh(self, entry: CacheEntry) -> bool:
        return entry.age_seconds() <= self.ttl.total_seconds()

    def _load_entry(self, cache_file: Path) -> CacheEntry | None:
        try:
            return CacheEntry.model_validate_json(cache_file.read_bytes())
        except FileNotFoundError:
            return None
        except ValidationError as e:
            logger.debug("Corrupted cache file, ignoring", path=str(cache_file), error=str(e))
            return None
        except PermissionError:
            logger.warning("Permission denied reading cache file", path=str(cache_file))
            return None
        except OSError as e:
            logger.debug("Error reading cache file", path=str(cache_file), error=str(e))
            return None
