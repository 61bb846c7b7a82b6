"""Base configuration types."""

# Standard library imports
import os
import typing
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

# Local imports
from ..core.exceptions import ConfigurationError

ENV_PREFIX = "CMDWRAP_"

# Windows caps a process command line at 32767 characters
DEFAULT_MAX_ARGUMENT_LENGTH = 32767

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CmdWrapConfig:
    """Runtime configuration for command assembly and execution."""

    # Syntax settings
    max_argument_length: int = field(default=DEFAULT_MAX_ARGUMENT_LENGTH)

    # Execution settings
    cancel_timeout: float = field(default=5.0)
    encoding: str = field(default="utf-8")
    encoding_errors: str = field(default="replace")

    # Log settings
    log_level: str = field(default="INFO")
    log_file: Optional[Path] = field(default=None)
    verbose: bool = field(default=False)
    debug: bool = field(default=False)

    def __post_init__(self):
        """Initialize configuration after creation."""
        self._load_from_env()
        self._validate()

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        hints = typing.get_type_hints(type(self))
        for config_field in fields(self):
            env_key = f"{ENV_PREFIX}{config_field.name.upper()}"
            env_value = os.getenv(env_key)
            if env_value is None:
                continue

            # Strip any comments and whitespace
            env_value = env_value.split("#")[0].strip()

            field_type = hints[config_field.name]
            try:
                if field_type is bool:
                    value = env_value.lower() in ("true", "1", "yes", "on")
                elif field_type in (Path, Optional[Path]):
                    value = Path(os.path.expanduser(env_value)) if env_value else None
                elif field_type in (int, float):
                    value = field_type(env_value)
                else:
                    value = env_value
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {env_key}: {env_value} - {str(e)}",
                    field=config_field.name,
                ) from e

            setattr(self, config_field.name, value)

    def _validate(self) -> None:
        """Validate configuration values."""
        if self.max_argument_length <= 0:
            raise ConfigurationError(
                "max_argument_length must be positive", field="max_argument_length"
            )
        if self.cancel_timeout < 0:
            raise ConfigurationError(
                "cancel_timeout must not be negative", field="cancel_timeout"
            )
        if not self.encoding:
            raise ConfigurationError("encoding must not be empty", field="encoding")
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}",
                field="log_level",
            )
