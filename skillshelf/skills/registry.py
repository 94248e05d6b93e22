"""
Skill registry for the bundled markdown skill library.

A skill is a directory holding an entry document (SKILL.md) with optional
YAML-like frontmatter, plus nested references/ and assets/ files. The
registry discovers skill directories under the library root and indexes
them by identifier.

Usage:
    from skillshelf.skills import get_skill_registry

    registry = get_skill_registry()
    for summary in registry.list_skills():
        print(summary.name, summary.description)
    skill = registry.get("owasp-appsec")
    print(skill.document)  # verbatim SKILL.md text
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Optional

from .exceptions import DuplicateSkillError, SkillNotFoundError

logger = logging.getLogger("skillshelf.skills")

DEFAULT_ENTRY_FILENAME = "SKILL.md"

# First path component -> resource kind
_KIND_DIRS = {"references": "reference", "assets": "asset"}

# Separators and whitespace cannot appear in a skill identifier
_INVALID_NAME_RE = re.compile(r"[/\\\s]")


@dataclass(frozen=True)
class Skill:
    """A skill bundle parsed from its directory."""

    name: str
    description: str
    document: str
    content: str
    tags: tuple[str, ...]
    version: int
    root: str
    entry_filename: str
    resources: tuple[str, ...]

    @property
    def entry_path(self) -> Path:
        return Path(self.root) / self.entry_filename

    def has_resource(self, relative_path: str) -> bool:
        return relative_path == self.entry_filename or relative_path in self.resources


class SkillSummary(NamedTuple):
    """Name and routing description of one skill."""

    name: str
    description: str


def resource_kind(relative_path: str, entry_filename: str = DEFAULT_ENTRY_FILENAME) -> str:
    """Classify a skill-relative path as entry, reference, asset or other."""
    if relative_path in ("", entry_filename):
        return "entry"
    head = relative_path.split("/", 1)[0]
    return _KIND_DIRS.get(head, "other")


def is_valid_skill_name(name: str) -> bool:
    """A name must fit the <skill> segment of a <namespace>://<skill>/<path> URI."""
    return bool(name) and _INVALID_NAME_RE.search(name) is None


def _parse_frontmatter(text: str) -> tuple[dict[str, str | list[str] | int], str]:
    """
    Parse optional YAML-like frontmatter from markdown text.

    Handles simple key: value and key: [a, b, c] syntax.
    No PyYAML dependency required.

    Returns (metadata_dict, body_text).
    """
    if not text.startswith("---"):
        return {}, text

    # Find closing ---
    end_match = re.search(r"\n---\s*\n", text[3:])
    if end_match is None:
        return {}, text

    frontmatter_str = text[3 : 3 + end_match.start()]
    body = text[3 + end_match.end() :]

    metadata: dict[str, str | list[str] | int] = {}
    for line in frontmatter_str.strip().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, _, value = line.partition(":")
        key = key.strip()
        value = value.strip()

        # Parse list: [a, b, c]
        if value.startswith("[") and value.endswith("]"):
            items = [item.strip().strip("\"'") for item in value[1:-1].split(",")]
            metadata[key] = [item for item in items if item]
        # Parse integer
        elif value.isdigit():
            metadata[key] = int(value)
        # Strip matching quotes
        elif len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            metadata[key] = value[1:-1]
        else:
            metadata[key] = value

    return metadata, body


def _collect_resources(skill_dir: Path, entry_filename: str) -> tuple[str, ...]:
    """List every non-hidden file under a skill directory except the entry document."""
    paths = []
    for path in skill_dir.rglob("*"):
        if not path.is_file():
            continue
        relative = path.relative_to(skill_dir)
        if any(part.startswith(".") for part in relative.parts):
            continue
        rel = relative.as_posix()
        if rel == entry_filename:
            continue
        paths.append(rel)
    return tuple(sorted(paths))


def _load_skill(skill_dir: Path, entry_filename: str) -> Skill:
    """Load a single skill from its directory."""
    entry = skill_dir / entry_filename
    document = entry.read_bytes().decode("utf-8")
    metadata, body = _parse_frontmatter(document)

    # Blank name falls back to the directory name
    name = str(metadata.get("name") or "").strip() or skill_dir.name
    description = str(metadata.get("description", ""))
    version = metadata.get("version", 1)
    if not isinstance(version, int):
        version = 1

    raw_tags = metadata.get("tags", [])
    if isinstance(raw_tags, list):
        tags = tuple(str(t) for t in raw_tags)
    else:
        tags = (str(raw_tags),)

    return Skill(
        name=name,
        description=description,
        document=document,
        content=body.strip(),
        tags=tags,
        version=version,
        root=str(skill_dir),
        entry_filename=entry_filename,
        resources=_collect_resources(skill_dir, entry_filename),
    )


class SkillRegistry:
    """
    Discovers skill directories under the library root.

    Lazy-loaded: skills are read from disk on first access.
    Call reload() to re-read from disk after changes.
    """

    def __init__(
        self,
        library_dir: Optional[Path] = None,
        entry_filename: Optional[str] = None,
    ):
        if library_dir is None or entry_filename is None:
            from ..config import settings

            library_dir = library_dir if library_dir is not None else settings.skills.library_dir
            entry_filename = entry_filename or settings.skills.entry_filename
        self._library_dir = Path(library_dir)
        self._entry_filename = entry_filename
        self._skills: dict[str, Skill] = {}
        self._loaded = False
        self._generation = 0

    @property
    def library_dir(self) -> Path:
        return self._library_dir

    @property
    def entry_filename(self) -> str:
        return self._entry_filename

    @property
    def generation(self) -> int:
        """Incremented on every load(); lets readers drop data cached from older loads."""
        return self._generation

    def load(self) -> int:
        """
        Load every skill directory under the library root.

        Returns the number of skills loaded. Raises DuplicateSkillError
        when two directories declare the same name; nothing is kept in
        that case.
        """
        skills: dict[str, Skill] = {}
        self._skills.clear()
        self._loaded = False
        self._generation += 1

        if not self._library_dir.is_dir():
            logger.warning("Skill library directory does not exist: %s", self._library_dir)
            self._loaded = True
            return 0

        for skill_dir in sorted(self._library_dir.iterdir()):
            if not skill_dir.is_dir() or not (skill_dir / self._entry_filename).is_file():
                continue
            try:
                skill = _load_skill(skill_dir, self._entry_filename)
            except Exception:
                logger.exception("Failed to load skill from %s", skill_dir)
                continue

            if not is_valid_skill_name(skill.name):
                logger.warning("Skipping skill in %s: name %r is not addressable", skill_dir, skill.name)
                continue

            existing = skills.get(skill.name)
            if existing is not None:
                raise DuplicateSkillError(skill.name, existing.root, skill.root)
            skills[skill.name] = skill
            logger.debug("Loaded skill: %s (%d resources)", skill.name, len(skill.resources))

        self._skills.update(skills)
        self._loaded = True
        logger.info("Loaded %d skills from %s", len(skills), self._library_dir)
        return len(skills)

    def _ensure_loaded(self) -> None:
        """Lazy-load skills on first access."""
        if not self._loaded:
            self.load()

    def reload(self) -> int:
        """Re-read all skills from disk. Returns count loaded."""
        self._loaded = False
        return self.load()

    def find(self, name: str) -> Optional[Skill]:
        """Get a skill by exact name, or None."""
        self._ensure_loaded()
        return self._skills.get(name)

    def get(self, name: str) -> Skill:
        """Get a skill by exact name (e.g., 'owasp-appsec')."""
        skill = self.find(name)
        if skill is None:
            raise SkillNotFoundError(name)
        return skill

    def entry_document(self, name: str) -> str:
        """Return the verbatim entry document of a skill."""
        return self.get(name).document

    def get_by_tag(self, tag: str) -> list[Skill]:
        """Get all skills that have a given tag."""
        self._ensure_loaded()
        return [s for name, s in sorted(self._skills.items()) if tag in s.tags]

    def names(self) -> list[str]:
        """List all loaded skill names."""
        self._ensure_loaded()
        return sorted(self._skills.keys())

    def list_skills(self) -> list[SkillSummary]:
        """List (name, description) for every skill, sorted by name."""
        self._ensure_loaded()
        return [SkillSummary(name, s.description) for name, s in sorted(self._skills.items())]

    def __contains__(self, name: object) -> bool:
        self._ensure_loaded()
        return name in self._skills

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._skills)


_skill_registry: Optional[SkillRegistry] = None


def get_skill_registry() -> SkillRegistry:
    """Get or create the singleton SkillRegistry."""
    global _skill_registry
    if _skill_registry is None:
        from ..config import settings

        _skill_registry = SkillRegistry(
            library_dir=settings.skills.library_dir,
            entry_filename=settings.skills.entry_filename,
        )
    return _skill_registry
