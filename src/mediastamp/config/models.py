"""Configuration models describing mediastamp settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

_SEP = "[-,_/. ]"

DEFAULT_FILENAME_PATTERNS: Tuple[str, ...] = (
    rf"[0-9]{{4}}{_SEP}[0-9]{{2}}{_SEP}[0-9]{{2}}{_SEP}[0-9]{{2}}{_SEP}[0-9]{{2}}{_SEP}[0-9]{{2}}",
    rf"[0-9]{{4}}{_SEP}[0-9]{{2}}{_SEP}[0-9]{{2}} at [0-9]{{2}}{_SEP}[0-9]{{2}}{_SEP}[0-9]{{2}}",
    rf"[0-9]{{4}}{_SEP}[0-9]{{2}}{_SEP}[0-9]{{2}} um [0-9]{{2}}{_SEP}[0-9]{{2}}{_SEP}[0-9]{{2}}",
    rf"[0-9]{{4}}{_SEP}[0-9]{{2}}{_SEP}[0-9]{{2}}T[0-9]{{2}}{_SEP}[0-9]{{2}}{_SEP}[0-9]{{2}}",
    rf"[0-9]{{8}}{_SEP}[0-9]{{6}}",
    r"[0-9]{14}",
    rf"[0-9]{{4}}{_SEP}[0-9]{{2}}{_SEP}[0-9]{{2}}",
    r"[0-9]{8}",
    rf"[0-9]{{4}}{_SEP}[0-9]{{2}}",
    r"[0-9]{6}",
)


class MediastampBaseModel(BaseModel):
    """Shared configuration for mediastamp Pydantic models."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class TimestampSettings(MediastampBaseModel):
    """Formats, patterns, and tag names used during reconciliation.

    Attributes:
        principal_tags: Metadata tags treated as authoritative capture times.
        metadata_formats: strptime formats tried, in order, on metadata values.
        filename_format: Format of the timestamp prefix injected into file names.
        write_format: Format used when writing metadata tags.
        attribute_format: Format expected by the filesystem attribute tool.
        partition_string: Separator between the timestamp prefix and the old name.
        filename_patterns: Ordered regular expressions locating dates in file names.
        default_day: Day used to complete year-month partial dates.
        default_time: Time of day (HHMMSS) used to complete date-only candidates.
        year_span: Number of years before the current year still considered valid.
    """

    principal_tags: Tuple[str, ...] = ("DateTimeOriginal", "CreateDate")
    metadata_formats: Tuple[str, ...] = (
        "%Y:%m:%d %H:%M:%S",
        "%Y:%m:%d %H:%M:%S%z",
        "%Y-%m-%d %H:%M:%S",
    )
    filename_format: str = "%Y%m%d_%H%M%S"
    write_format: str = "%Y:%m:%d %H:%M:%S"
    attribute_format: str = "%m/%d/%Y %H:%M:%S"
    partition_string: str = "__"
    filename_patterns: Tuple[str, ...] = DEFAULT_FILENAME_PATTERNS
    default_day: str = Field(default="01", pattern=r"^(0[1-9]|1[0-9]|2[0-8])$")
    default_time: str = Field(default="000100", pattern=r"^([01][0-9]|2[0-3])[0-5][0-9][0-5][0-9]$")
    year_span: int = Field(default=100, ge=0)


class ToolSettings(MediastampBaseModel):
    """External tool locations and invocation limits.

    Attributes:
        exiftool_path: ExifTool executable.
        exiftool_config: Optional ExifTool config file passed via ``-config``.
        setfile_path: macOS SetFile executable.
        attribute_writer: Strategy for writing filesystem timestamps.
        timeout_seconds: Upper bound for every external process call.
        max_workers: Worker threads for per-file work; None lets Python decide.
    """

    exiftool_path: str = "exiftool"
    exiftool_config: Optional[Path] = None
    setfile_path: str = "SetFile"
    attribute_writer: Literal["auto", "setfile", "utime"] = "auto"
    timeout_seconds: float = Field(default=60.0, gt=0)
    max_workers: Optional[int] = Field(default=None, ge=1)


class FolderSettings(MediastampBaseModel):
    """Folder names and file filters applied inside a target directory.

    Attributes:
        quarantine: Sub folder receiving files that fail validation.
        zero_byte: Sub folder receiving empty files.
        excluded_suffixes: File suffixes never processed.
        tool_artifact_suffix: Name suffix of ExifTool temporary files.
    """

    quarantine: str = "_unsuccessful"
    zero_byte: str = "_zeroByte"
    excluded_suffixes: Tuple[str, ...] = (".txt",)
    tool_artifact_suffix: str = "exiftool_tmp"


class InteractionSettings(MediastampBaseModel):
    """Operator interaction settings.

    Attributes:
        preview_app: macOS application used to show files during prompts.
        none_key: Answer meaning "none of the proposed timestamps apply".
    """

    preview_app: Optional[str] = "Preview"
    none_key: str = "-"


class LoggingSettings(MediastampBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional log file path.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "INFO"
    file: Optional[Path] = None
    max_size_mb: int = 10
    backup_count: int = 5


class CLIOptions(MediastampBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
    """

    quiet_default: bool = False


class MediastampConfig(MediastampBaseModel):
    """Top-level configuration struct for mediastamp.

    Attributes:
        timestamps: Formats, patterns, and tag names.
        tools: External tool settings.
        folders: Folder names and filters.
        interaction: Operator interaction settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    timestamps: TimestampSettings = Field(default_factory=TimestampSettings)
    tools: ToolSettings = Field(default_factory=ToolSettings)
    folders: FolderSettings = Field(default_factory=FolderSettings)
    interaction: InteractionSettings = Field(default_factory=InteractionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "DEFAULT_FILENAME_PATTERNS",
    "MediastampBaseModel",
    "TimestampSettings",
    "ToolSettings",
    "FolderSettings",
    "InteractionSettings",
    "LoggingSettings",
    "CLIOptions",
    "MediastampConfig",
]
