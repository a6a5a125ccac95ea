"""
Pydantic settings models for the Knowledge Graph Engine.

All configuration is defined here with defaults matching the
classic pipe-delimited relations workflow.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class GraphSettings(BaseModel):
    """Graph engine configuration."""

    max_name_length: int = Field(
        default=127,
        ge=1,
        le=4096,
        description="Maximum length of entity names and relation labels. Longer values are truncated.",
    )
    max_candidates: int = Field(
        default=16,
        ge=1,
        le=256,
        description="Maximum fuzzy-match candidates offered for disambiguation",
    )
    relation_order: Literal["newest_first", "insertion"] = Field(
        default="newest_first",
        description="Order of outgoing relations: most recently added first, or in insertion order",
    )


class FileSettings(BaseModel):
    """Default file locations."""

    data_file: Path = Field(
        default=Path("relations.txt"),
        description="Pipe-delimited triple file used by load and save",
    )
    dot_file: Path = Field(
        default=Path("kg_graph.dot"),
        description="Graphviz DOT output file",
    )

    @field_validator("data_file", "dot_file", mode="before")
    @classmethod
    def convert_to_path(cls, v: str | Path) -> Path:
        """Convert string paths to Path objects."""
        return Path(v) if isinstance(v, str) else v


class ExportSettings(BaseModel):
    """Graphviz DOT export styling."""

    rankdir: Literal["LR", "RL", "TB", "BT"] = Field(
        default="LR",
        description="Graph layout direction",
    )
    font_name: str = Field(
        default="Calibri",
        description="Font used for nodes, edges and graph labels",
    )
    node_color: str = Field(
        default="#1A73E8",
        description="Node border color",
    )
    node_fill_color: str = Field(
        default="#E8F0FE",
        description="Node fill color",
    )
    edge_color: str = Field(
        default="#5F6368",
        description="Edge and arrow color",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum logging level",
    )
    format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        description="Log message format string",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Date format for log timestamps",
    )
    file_path: Path | None = Field(
        default=None,
        description="Path to log file. None means console only.",
    )
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum log file size before rotation",
    )
    backup_count: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Number of backup log files to keep",
    )
    log_to_console: bool = Field(
        default=True,
        description="Whether to output logs to console",
    )

    @field_validator("file_path", mode="before")
    @classmethod
    def convert_file_path(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v


class Settings(BaseModel):
    """
    Root configuration model containing all subsystem settings.

    Settings are loaded from YAML with environment variable overrides.
    """

    graph: GraphSettings = Field(
        default_factory=GraphSettings,
        description="Graph engine settings",
    )
    files: FileSettings = Field(
        default_factory=FileSettings,
        description="Default file locations",
    )
    export: ExportSettings = Field(
        default_factory=ExportSettings,
        description="DOT export styling",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    model_config = {
        "extra": "forbid",
        "validate_default": True,
    }
