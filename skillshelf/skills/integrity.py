"""
Structural checks over a skill library.

check_library() walks every skill and reports problems a reader would hit:
documents that cannot be read as text, empty entry documents, missing
routing descriptions, and relative Markdown links (or skill:// links) that
point at documents which do not exist. Links inside fenced code blocks are
ignored.
"""

import logging
import posixpath
import re
from typing import NamedTuple

from .exceptions import DuplicateSkillError, NotFoundError
from .resolver import ResourceResolver

logger = logging.getLogger("skillshelf.integrity")

_FENCE_RE = re.compile(r"^(```|~~~).*?^\1", re.MULTILINE | re.DOTALL)
_LINK_RE = re.compile(r"\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)")
_EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "#")


class IntegrityIssue(NamedTuple):
    code: str
    skill: str
    path: str
    message: str


def extract_links(markdown: str) -> list[str]:
    """Return link targets from Markdown text, skipping fenced code blocks."""
    text = _FENCE_RE.sub("", markdown)
    return [m.group(1) for m in _LINK_RE.finditer(text)]


def _check_link(resolver: ResourceResolver, skill_name: str, doc_path: str, target: str) -> str | None:
    """Return an error message if the link target does not resolve, else None."""
    target = target.split("#", 1)[0]
    if not target:
        return None

    if target.startswith(f"{resolver.namespace}://"):
        try:
            resolver.resolve_uri(target)
        except NotFoundError as exc:
            return str(exc)
        return None

    base = posixpath.dirname(doc_path)
    joined = posixpath.normpath(posixpath.join(base, target))
    if joined.startswith("../") or joined == "..":
        return f"link {target!r} leaves the skill directory"
    try:
        resolver.resolve(skill_name, joined)
    except NotFoundError:
        return f"link {target!r} does not resolve to a document"
    return None


def check_skill(resolver: ResourceResolver, skill_name: str) -> list[IntegrityIssue]:
    """Check one skill's entry document and the links of all its Markdown documents."""
    skill = resolver.registry.get(skill_name)
    issues: list[IntegrityIssue] = []

    if not skill.content.strip():
        issues.append(IntegrityIssue("empty-entry", skill.name, skill.entry_filename, "entry document is empty"))
    if not skill.description.strip():
        issues.append(
            IntegrityIssue("missing-description", skill.name, skill.entry_filename, "no description in frontmatter")
        )

    for resource in resolver.list_resources(skill.name):
        if not resource.path.endswith(".md"):
            continue
        try:
            text = resolver.resolve(skill.name, resource.path)
        except NotFoundError as exc:
            issues.append(IntegrityIssue("unreadable", skill.name, resource.path, str(exc)))
            continue
        for target in extract_links(text):
            if target.startswith(_EXTERNAL_PREFIXES):
                continue
            error = _check_link(resolver, skill.name, resource.path, target)
            if error:
                issues.append(IntegrityIssue("broken-link", skill.name, resource.path, error))

    return issues


def check_library(resolver: ResourceResolver) -> list[IntegrityIssue]:
    """Run every check over every skill in the resolver's registry."""
    registry = resolver.registry
    try:
        names = registry.names()
    except DuplicateSkillError as exc:
        logger.error("Library has duplicate skill names: %s", exc)
        return [IntegrityIssue("duplicate-name", exc.name, "", str(exc))]

    issues: list[IntegrityIssue] = []
    for name in names:
        issues.extend(check_skill(resolver, name))

    if issues:
        logger.warning("Found %d integrity issues in %s", len(issues), registry.library_dir)
    else:
        logger.info("Skill library %s is consistent (%d skills)", registry.library_dir, len(names))
    return issues
