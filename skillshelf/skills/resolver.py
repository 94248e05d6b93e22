"""
Resource resolver: maps a skill identifier plus a relative path to a document.

Documents are addressed either as (skill, path) pairs, as
"<skill>/<path>" strings, or as URIs of the form

    <namespace>://<skill-name>/<relative-path>

e.g. skill://owasp-appsec/references/cheatsheets/authentication.md.
An empty path (or the entry file name) selects the skill's SKILL.md.

Content is returned verbatim. Anything that does not name a document
inside the skill directory raises a NotFoundError subclass.
"""

import logging
from pathlib import Path
from typing import NamedTuple, Optional
from urllib.parse import unquote

from .exceptions import InvalidResourceURIError, ResourceNotFoundError
from .registry import SkillRegistry, resource_kind

logger = logging.getLogger("skillshelf.resolver")

DEFAULT_NAMESPACE = "skill"


class ResourceRef(NamedTuple):
    """A parsed resource URI."""

    namespace: str
    skill: str
    path: str


class Resource(NamedTuple):
    """One addressable document of a skill."""

    skill: str
    path: str
    kind: str
    uri: str


def format_resource_uri(namespace: str, skill_name: str, path: str = "") -> str:
    """Build the URI addressing a skill document."""
    path = path.lstrip("/")
    if not path:
        return f"{namespace}://{skill_name}"
    return f"{namespace}://{skill_name}/{path}"


def parse_resource_uri(uri: str, namespace: str = DEFAULT_NAMESPACE) -> ResourceRef:
    """
    Split a <namespace>://<skill>/<path> URI.

    Raises InvalidResourceURIError when the scheme is missing or differs
    from the expected namespace, or when no skill name is present.
    """
    scheme, sep, rest = uri.strip().partition("://")
    if not sep:
        raise InvalidResourceURIError(uri, "missing '://'")
    if scheme.lower() != namespace:
        raise InvalidResourceURIError(uri, f"expected namespace {namespace!r}")

    skill_name, _, path = rest.partition("/")
    if not skill_name:
        raise InvalidResourceURIError(uri, "missing skill name")
    return ResourceRef(namespace, unquote(skill_name), unquote(path))


def _normalize_path(skill_name: str, relative_path: str) -> str:
    """Collapse '.' and empty segments; reject absolute and parent paths."""
    if relative_path.startswith("/") or "\\" in relative_path:
        raise ResourceNotFoundError(skill_name, relative_path, "path must be relative")
    parts = [p for p in relative_path.split("/") if p not in ("", ".")]
    if ".." in parts:
        raise ResourceNotFoundError(skill_name, relative_path, "path leaves the skill directory")
    return "/".join(parts)


class ResourceResolver:
    """
    Resolves skill documents through a SkillRegistry.

    Reads are cached so the same request always returns the same string;
    the cache is dropped whenever the registry reloads.
    """

    def __init__(self, registry: SkillRegistry, namespace: str = DEFAULT_NAMESPACE):
        self._registry = registry
        self._namespace = namespace
        self._cache: dict[tuple[str, str], str] = {}
        self._cache_generation = -1

    @property
    def registry(self) -> SkillRegistry:
        return self._registry

    @property
    def namespace(self) -> str:
        return self._namespace

    def clear_cache(self) -> None:
        self._cache.clear()

    def resolve(self, skill_name: str, relative_path: str = "") -> str:
        """Return the verbatim body of a document inside a skill."""
        skill = self._registry.get(skill_name)
        rel = _normalize_path(skill_name, relative_path)
        if rel in ("", skill.entry_filename):
            return skill.document

        if self._cache_generation != self._registry.generation:
            self._cache.clear()
            self._cache_generation = self._registry.generation

        key = (skill.name, rel)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        if not skill.has_resource(rel):
            raise ResourceNotFoundError(skill_name, rel)

        root = Path(skill.root).resolve()
        target = (root / rel).resolve()
        if not target.is_relative_to(root):
            logger.warning("Refusing %s/%s: resolves outside the skill directory", skill_name, rel)
            raise ResourceNotFoundError(skill_name, rel, "path leaves the skill directory")

        try:
            text = target.read_bytes().decode("utf-8")
        except FileNotFoundError:
            raise ResourceNotFoundError(skill_name, rel, "removed since load") from None
        except UnicodeDecodeError:
            raise ResourceNotFoundError(skill_name, rel, "not a UTF-8 text document") from None

        self._cache[key] = text
        logger.debug("Resolved %s/%s (%d chars)", skill_name, rel, len(text))
        return text

    def resolve_path(self, path: str) -> str:
        """Resolve '<skill>/<relative-path>' (a bare '<skill>' gives the entry document)."""
        skill_name, _, rel = path.lstrip("/").partition("/")
        return self.resolve(skill_name, rel)

    def resolve_uri(self, uri: str) -> str:
        """Resolve '<namespace>://<skill>/<relative-path>'."""
        ref = parse_resource_uri(uri, self._namespace)
        return self.resolve(ref.skill, ref.path)

    def uri_for(self, skill_name: str, path: str = "") -> str:
        """Canonical URI for a document, with '.' and empty segments collapsed."""
        return format_resource_uri(self._namespace, skill_name, _normalize_path(skill_name, path))

    def list_resources(self, skill_name: str, kind: Optional[str] = None) -> list[Resource]:
        """List the documents a skill owns, entry document first."""
        skill = self._registry.get(skill_name)
        paths = (skill.entry_filename,) + skill.resources
        resources = []
        for path in paths:
            path_kind = resource_kind(path, skill.entry_filename)
            if kind is not None and path_kind != kind:
                continue
            resources.append(Resource(skill.name, path, path_kind, self.uri_for(skill.name, path)))
        return resources


_resolver: Optional[ResourceResolver] = None


def get_resource_resolver() -> ResourceResolver:
    """Get or create the singleton ResourceResolver over the singleton registry."""
    global _resolver
    if _resolver is None:
        from ..config import settings
        from .registry import get_skill_registry

        _resolver = ResourceResolver(get_skill_registry(), namespace=settings.skills.uri_namespace)
    return _resolver
