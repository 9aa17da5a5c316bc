from pathlib import Path

import structlog
from pydantic import ValidationError

from .models import SKILL_FILE, RegistryIndex, Skill

logger = structlog.get_logger(__name__)

INDEX_FILE = "registry.json"
DESCRIPTION_MAX_LENGTH = 100


def extract_description(markdown: str) -> str:
    """First line that is not blank, a heading or a code fence, truncated."""
    for line in markdown.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or stripped.startswith("```"):
            continue
        return stripped[:DESCRIPTION_MAX_LENGTH]
    return ""


def generate_index(skills_dir: Path) -> RegistryIndex:
    """Build an index from a tree laid out as ``<stack>/<name>/SKILL.md``.

    Skills are ordered by their path. Files at any other depth are ignored.
    """
    skills_dir = Path(skills_dir)
    skills: list[Skill] = []

    for skill_md in sorted(skills_dir.glob(f"*/*/{SKILL_FILE}")):
        if not skill_md.is_file():
            continue

        relative = skill_md.relative_to(skills_dir)
        stack, name = relative.parts[0], relative.parts[1]

        try:
            text = skill_md.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read skill document", path=str(skill_md), error=str(e))
            text = ""

        try:
            skill = Skill(
                name=name,
                stack=stack,
                description=extract_description(text),
                path=relative.as_posix(),
            )
        except ValidationError as e:
            logger.warning("Skipping skill with invalid metadata", path=str(skill_md), error=str(e))
            continue

        skills.append(skill)
        logger.debug("Found skill", stack=stack, name=name)

    return RegistryIndex(skills=skills)


def write_index(skills_dir: Path, output: Path | None = None) -> tuple[Path, RegistryIndex]:
    """Generate the index for ``skills_dir`` and write it as JSON."""
    output = Path(output) if output else Path(skills_dir) / INDEX_FILE
    index = generate_index(skills_dir)
    # Generated entries never carry extra files; keep the published format minimal
    payload = index.model_dump_json(indent=2, exclude={"skills": {"__all__": {"files"}}})
    output.write_text(payload + "\n", encoding="utf-8")
    return output, index
