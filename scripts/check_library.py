#!/usr/bin/env python3
"""
Check a skill library for structural problems.

Lists every skill with its description and resource count, then reports
empty entry documents, missing descriptions and broken links.
Exits with status 1 when any issue is found.

Usage:
    python scripts/check_library.py
    python scripts/check_library.py --library-dir path/to/library
    python scripts/check_library.py --quiet
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).parent.parent / ".env")

from rich.console import Console
from rich.table import Table

logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger("check_library")

console = Console()


def main() -> int:
    from skillshelf.config import settings
    from skillshelf.skills import DuplicateSkillError, ResourceResolver, SkillRegistry
    from skillshelf.skills.integrity import check_library

    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--library-dir", type=Path, default=settings.skills.library_dir)
    parser.add_argument("--quiet", action="store_true", help="Only print issues")
    args = parser.parse_args()

    registry = SkillRegistry(args.library_dir, entry_filename=settings.skills.entry_filename)
    resolver = ResourceResolver(registry, namespace=settings.skills.uri_namespace)

    if not args.quiet:
        try:
            summaries = registry.list_skills()
        except DuplicateSkillError:
            summaries = []
        table = Table(title=f"Skills in {args.library_dir}")
        table.add_column("Skill", style="cyan")
        table.add_column("Description")
        table.add_column("Resources", justify="right")
        for summary in summaries:
            skill = registry.get(summary.name)
            table.add_row(summary.name, summary.description, str(len(skill.resources)))
        console.print(table)

    issues = check_library(resolver)
    if not issues:
        console.print("[green]No issues found[/green]")
        return 0

    issue_table = Table(title=f"{len(issues)} issue(s)", style="red")
    issue_table.add_column("Code")
    issue_table.add_column("Skill")
    issue_table.add_column("Document")
    issue_table.add_column("Message")
    for issue in issues:
        issue_table.add_row(issue.code, issue.skill, issue.path, issue.message)
    console.print(issue_table)
    return 1


if __name__ == "__main__":
    sys.exit(main())
