"""
Skillshelf - a library of markdown skills for agents.

Bundles planning, application-security, code-review, scaffolding and
commit-message guides, and resolves them by skill identifier and path.
"""

__version__ = "0.1.0"
