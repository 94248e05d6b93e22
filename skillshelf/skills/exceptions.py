"""
Custom exceptions for the skill library.

Every failed lookup raises a NotFoundError subclass instead of returning
an empty result.
"""


class SkillshelfError(Exception):
    """Base exception for all skill library errors."""

    pass


class NotFoundError(SkillshelfError):
    """Raised when a skill or one of its documents does not exist."""

    pass


class SkillNotFoundError(NotFoundError):
    """Raised when no skill has the requested identifier."""

    def __init__(self, skill_name: str):
        self.skill_name = skill_name
        super().__init__(f"Skill not found: {skill_name}")


class ResourceNotFoundError(NotFoundError):
    """Raised when a path does not name a document inside a skill."""

    def __init__(self, skill_name: str, path: str, reason: str = ""):
        self.skill_name = skill_name
        self.path = path
        self.reason = reason
        message = f"Resource not found: {skill_name}/{path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidResourceURIError(ResourceNotFoundError):
    """Raised when a resource URI cannot be parsed."""

    def __init__(self, uri: str, reason: str):
        self.uri = uri
        super().__init__("", "", reason)
        self.args = (f"Invalid resource URI {uri!r}: {reason}",)


class DuplicateSkillError(SkillshelfError):
    """Raised when two skill directories declare the same identifier."""

    def __init__(self, name: str, first: str, second: str):
        self.name = name
        self.first = first
        self.second = second
        super().__init__(f"Duplicate skill name {name!r}: {first} and {second}")
