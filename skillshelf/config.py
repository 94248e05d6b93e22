"""
Centralized configuration management using Pydantic Settings.

Configuration is loaded from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Bundled skill library: skillshelf/library/
_LIBRARY_DIR = Path(__file__).parent / "library"


class SkillsConfig(BaseSettings):
    """Skill library configuration."""

    model_config = SettingsConfigDict(env_prefix="SKILLSHELF_SKILLS_", env_file=".env", extra="ignore")

    library_dir: Path = Field(default=_LIBRARY_DIR, description="Directory holding one subdirectory per skill")
    entry_filename: str = Field(default="SKILL.md", description="Entry document file name inside a skill")
    uri_namespace: str = Field(default="skill", description="Scheme used in <namespace>://<skill>/<path> URIs")

    @field_validator("uri_namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        v = v.strip().lower()
        if not v or not v.isidentifier():
            raise ValueError(f"Invalid URI namespace: {v!r}")
        return v


class MCPConfig(BaseSettings):
    """MCP server configuration."""

    model_config = SettingsConfigDict(env_prefix="SKILLSHELF_MCP_", env_file=".env", extra="ignore")

    host: str = Field(default="127.0.0.1", description="SSE bind host")
    port: int = Field(default=8060, description="SSE bind port")
    auth_token: Optional[str] = Field(default=None, description="Bearer token required in SSE mode (unset = no auth)")
    register_resources: bool = Field(
        default=True,
        description="Expose every skill document as an MCP resource in addition to the tools",
    )


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_prefix="SKILLSHELF_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # General
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Nested configs
    skills: SkillsConfig = Field(default_factory=SkillsConfig)
    mcp: MCPConfig = Field(default_factory=MCPConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()


# Singleton settings instance
settings = Settings()
