"""
Skill registry and resource resolution.

Skills are directories of markdown documents (SKILL.md plus nested
references/ and assets/) loaded from the library on demand.

Usage:
    from skillshelf.skills import get_resource_resolver

    resolver = get_resource_resolver()
    text = resolver.resolve_uri("skill://owasp-appsec/references/cheatsheets/authentication.md")
"""

from .exceptions import (
    DuplicateSkillError,
    InvalidResourceURIError,
    NotFoundError,
    ResourceNotFoundError,
    SkillNotFoundError,
    SkillshelfError,
)
from .registry import Skill, SkillRegistry, SkillSummary, get_skill_registry
from .resolver import (
    Resource,
    ResourceRef,
    ResourceResolver,
    format_resource_uri,
    get_resource_resolver,
    parse_resource_uri,
)

__all__ = [
    "DuplicateSkillError",
    "InvalidResourceURIError",
    "NotFoundError",
    "Resource",
    "ResourceNotFoundError",
    "ResourceRef",
    "ResourceResolver",
    "Skill",
    "SkillNotFoundError",
    "SkillRegistry",
    "SkillSummary",
    "SkillshelfError",
    "format_resource_uri",
    "get_resource_resolver",
    "get_skill_registry",
    "parse_resource_uri",
]
