"""Centralized configuration for mcp-docs-server using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mcp_docs_server.domain.model import FieldWeights


LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Search tuning (threshold, weights, highlight radius) is read once at
    startup and frozen into the index; changing it requires a restart.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Corpus
    docs_data_dir: Path = Field(default=Path("data"), description="Root directory of the markdown corpus")
    docs_server_name: str = Field(default="mcp-docs-server", description="Name advertised by the MCP server")

    # Matching and scoring
    search_threshold: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Highest accepted per-field match score (edit distance / query length)",
    )
    search_max_score: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Documents whose combined score exceeds this are dropped",
    )
    search_score_combination: Literal["product", "mean"] = Field(
        default="product", description="How per-field scores are combined into a document score"
    )

    # Field weights
    weight_title: float = Field(default=0.4, gt=0.0, le=1.0, description="Weight of the title field")
    weight_content: float = Field(default=0.3, gt=0.0, le=1.0, description="Weight of the content field")
    weight_tags: float = Field(default=0.2, gt=0.0, le=1.0, description="Weight of the tags field")
    weight_category: float = Field(default=0.1, gt=0.0, le=1.0, description="Weight of the category field")

    # Results
    highlight_context_chars: int = Field(default=50, ge=0, description="Context characters around highlights")
    max_query_length: int = Field(default=256, ge=1, description="Longest accepted search query")

    # Server settings
    mcp_transport: Literal["stdio", "http"] = Field(default="stdio", description="MCP transport")
    mcp_host: str = Field(default="127.0.0.1", description="MCP server host (http transport)")
    mcp_port: int = Field(default=15005, ge=1, le=65535, description="MCP server port (http transport)")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON log lines")
    log_logger_levels: dict[str, str] = Field(
        default_factory=dict,
        description='Per-logger level overrides as JSON, e.g. {"mcp_docs_server.search": "debug"}',
    )

    # Tracing
    trace_console: bool = Field(default=False, description="Print finished spans to stderr")

    @model_validator(mode="after")
    def _check_log_level(self) -> "Settings":
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of debug, info, warning, error, critical (got {self.log_level!r})")
        invalid = {name: level for name, level in self.log_logger_levels.items() if level.upper() not in LOG_LEVELS}
        if invalid:
            details = ", ".join(f"{name}={level}" for name, level in invalid.items())
            raise ValueError(f"Invalid log level(s) in LOG_LOGGER_LEVELS: {details}")
        return self

    def field_weights(self) -> FieldWeights:
        """Build the immutable field weight configuration."""
        return FieldWeights(
            title=self.weight_title,
            content=self.weight_content,
            tags=self.weight_tags,
            category=self.weight_category,
        )

    def resolve_data_dir(self) -> Path:
        """Data directory as an absolute path (relative paths resolve from cwd)."""
        return self.docs_data_dir.expanduser().resolve()
