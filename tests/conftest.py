"""Shared fixtures: a small on-disk skill library."""

from pathlib import Path

import pytest

ALPHA_ENTRY = """---
name: alpha
description: Alpha skill for tests
tags: [security, demo]
version: 3
---

# Alpha

See the [guide](references/guide.md) and the [template](assets/template.md).
"""

BETA_ENTRY = "# Beta\n\nNo frontmatter here.\n"


def write_file(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
    return path


@pytest.fixture
def library(tmp_path) -> Path:
    root = tmp_path / "library"
    write_file(root / "alpha" / "SKILL.md", ALPHA_ENTRY)
    write_file(root / "alpha" / "references" / "guide.md", "# Guide\r\n\r\nWindows line endings kept.\r\n")
    write_file(root / "alpha" / "references" / "nested" / "deep.md", "# Deep\n\nBack to [guide](../guide.md).\n")
    write_file(root / "alpha" / "assets" / "template.md", "# Template\n\n<fill me>\n")
    write_file(root / "alpha" / ".hidden.md", "hidden\n")
    write_file(root / "beta" / "SKILL.md", BETA_ENTRY)
    write_file(root / "notaskill" / "README.md", "# Not a skill\n")
    return root


@pytest.fixture
def registry(library):
    from skillshelf.skills import SkillRegistry

    return SkillRegistry(library)


@pytest.fixture
def resolver(registry):
    from skillshelf.skills import ResourceResolver

    return ResourceResolver(registry)
