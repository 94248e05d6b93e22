"""
Skillshelf MCP Server.

Exposes the skill library to any MCP-compatible client (Claude Desktop,
Cursor, custom agents).

Tools:
    list_skills            -- identifiers and one-line descriptions, optional tag filter
    load_skill             -- a skill's entry document (SKILL.md)
    list_skill_resources   -- references and assets bundled with a skill
    load_skill_resource    -- one document by skill name and relative path
    load_resource_uri      -- one document by skill://<skill>/<path> URI

Every document is also published as an MCP resource under its URI.

Run:
    python -m skillshelf.mcp.skills_server          # stdio
    python -m skillshelf.mcp.skills_server --sse    # SSE HTTP transport
"""

import argparse
import json
import logging
from functools import partial
from pathlib import Path, PurePosixPath
from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.resources import FunctionResource

from ..skills import NotFoundError, ResourceResolver, get_resource_resolver

logger = logging.getLogger("skillshelf.mcp.skills")

_MIME_TYPES = {".md": "text/markdown", ".txt": "text/plain", ".json": "application/json"}


mcp = FastMCP(
    "skillshelf",
    instructions=(
        "Reference library of skills: planning guides, OWASP application-security "
        "cheatsheets, a code-review checklist, project scaffolding and commit-message "
        "style. Call list_skills to pick a skill by its description, load_skill to read "
        "its guide, then load_skill_resource for the references it links to. "
        "Templates under assets/ are returned as-is for you to fill in."
    ),
)


def _resolver() -> ResourceResolver:
    return get_resource_resolver()


def _not_found(exc: NotFoundError, **extra) -> str:
    return json.dumps({"found": False, "error": str(exc), **extra})


# ---------------------------------------------------------------------------
# Tool: list_skills
# ---------------------------------------------------------------------------

@mcp.tool()
async def list_skills(tag: Optional[str] = None) -> str:
    """
    List available skills with their one-line descriptions.

    tag: Only return skills carrying this tag (e.g. "security")
    """
    try:
        registry = _resolver().registry
        if tag:
            skills = [{"name": s.name, "description": s.description} for s in registry.get_by_tag(tag)]
        else:
            skills = [s._asdict() for s in registry.list_skills()]
        return json.dumps({"skills": skills, "count": len(skills)})
    except Exception as exc:
        logger.exception("list_skills error")
        return json.dumps({"error": str(exc), "skills": []})


# ---------------------------------------------------------------------------
# Tool: load_skill
# ---------------------------------------------------------------------------

@mcp.tool()
async def load_skill(name: str) -> str:
    """
    Load a skill's entry document.

    name: Exact skill identifier from list_skills (e.g. "owasp-appsec")
    """
    try:
        resolver = _resolver()
        skill = resolver.registry.get(name)
        return json.dumps({
            "found": True,
            "name": skill.name,
            "description": skill.description,
            "uri": resolver.uri_for(skill.name),
            "content": skill.document,
            "resources": list(skill.resources),
        })
    except NotFoundError as exc:
        return _not_found(exc)
    except Exception as exc:
        logger.exception("load_skill error")
        return json.dumps({"error": str(exc), "found": False})


# ---------------------------------------------------------------------------
# Tool: list_skill_resources
# ---------------------------------------------------------------------------

@mcp.tool()
async def list_skill_resources(name: str, kind: Optional[str] = None) -> str:
    """
    List the documents bundled with a skill.

    name: Skill identifier
    kind: Optional filter -- "entry", "reference", "asset" or "other"
    """
    try:
        resources = _resolver().list_resources(name, kind=kind)
        return json.dumps({
            "found": True,
            "resources": [r._asdict() for r in resources],
            "count": len(resources),
        })
    except NotFoundError as exc:
        return _not_found(exc, resources=[])
    except Exception as exc:
        logger.exception("list_skill_resources error")
        return json.dumps({"error": str(exc), "found": False, "resources": []})


# ---------------------------------------------------------------------------
# Tool: load_skill_resource
# ---------------------------------------------------------------------------

@mcp.tool()
async def load_skill_resource(name: str, path: str) -> str:
    """
    Load one document of a skill by relative path.

    name: Skill identifier
    path: Path inside the skill, e.g. "references/cheatsheets/authentication.md"
    """
    try:
        resolver = _resolver()
        content = resolver.resolve(name, path)
        return json.dumps({
            "found": True,
            "uri": resolver.uri_for(name, path),
            "content": content,
        })
    except NotFoundError as exc:
        return _not_found(exc)
    except Exception as exc:
        logger.exception("load_skill_resource error")
        return json.dumps({"error": str(exc), "found": False})


# ---------------------------------------------------------------------------
# Tool: load_resource_uri
# ---------------------------------------------------------------------------

@mcp.tool()
async def load_resource_uri(uri: str) -> str:
    """
    Load one document by URI.

    uri: skill://<skill-name>/<relative-path>; omit the path for the entry document
    """
    try:
        content = _resolver().resolve_uri(uri)
        return json.dumps({"found": True, "uri": uri, "content": content})
    except NotFoundError as exc:
        return _not_found(exc)
    except Exception as exc:
        logger.exception("load_resource_uri error")
        return json.dumps({"error": str(exc), "found": False})


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

def register_document_resources(server: FastMCP, resolver: ResourceResolver) -> int:
    """
    Publish every skill document as an MCP resource read on demand.

    Returns the number of resources registered.
    """
    count = 0
    for summary in resolver.registry.list_skills():
        for resource in resolver.list_resources(summary.name):
            if resource.kind == "entry":
                description = summary.description
            else:
                description = f"{resource.kind} of {resource.skill}"
            server.add_resource(
                FunctionResource(
                    uri=resource.uri,
                    name=f"{resource.skill}/{resource.path}",
                    description=description,
                    mime_type=_MIME_TYPES.get(PurePosixPath(resource.path).suffix, "text/plain"),
                    fn=partial(resolver.resolve, resource.skill, resource.path),
                )
            )
            count += 1
    logger.info("Registered %d skill documents as MCP resources", count)
    return count


def main(argv: Optional[list[str]] = None) -> None:
    from dotenv import load_dotenv

    load_dotenv(Path.cwd() / ".env")

    from ..config import settings

    parser = argparse.ArgumentParser(description="Skillshelf MCP server")
    parser.add_argument("--sse", action="store_true", help="Serve over SSE HTTP instead of stdio")
    parser.add_argument("--host", default=settings.mcp.host)
    parser.add_argument("--port", type=int, default=settings.mcp.port)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if settings.mcp.register_resources:
        register_document_resources(mcp, _resolver())

    if args.sse:
        from .auth import serve_sse

        mcp.settings.host = args.host
        mcp.settings.port = args.port
        serve_sse(mcp, args.host, args.port)
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
