"""Configuration models describing as2index settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class As2IndexBaseModel(BaseModel):
    """Shared configuration for settings models."""

    model_config = ConfigDict(extra="forbid")


class DecodingSettings(As2IndexBaseModel):
    """Options controlling how packages are opened and decoded.

    Attributes:
        entry_name: Name of the container entry holding the index.
        comment_encoding: Codec used to decode the raw archive comment.
    """

    entry_name: str = "index.sav"
    comment_encoding: str = "cp437"


class LoggingSettings(As2IndexBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level applied by the CLI.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class CLIOptions(As2IndexBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
        date_format: strftime pattern used when rendering timestamps.
        reveal_password: Whether `show` prints the decrypted password in clear text.
    """

    quiet_default: bool = False
    summary_default: bool = False
    date_format: str = "%Y-%m-%d %H:%M:%S"
    reveal_password: bool = False


class As2IndexConfig(As2IndexBaseModel):
    """Top-level configuration struct.

    Attributes:
        decoding: Package decoding settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    decoding: DecodingSettings = Field(default_factory=DecodingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "As2IndexBaseModel",
    "DecodingSettings",
    "LoggingSettings",
    "CLIOptions",
    "As2IndexConfig",
]
