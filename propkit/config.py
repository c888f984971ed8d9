"""
Configuration module for propkit.

Provides centralized configuration for the default query scope and the
removal operations of paranoid models.
"""

import logging
import os
from typing import Any, Dict, Optional, Union, get_args, get_origin

from pydantic import BaseModel, Field, field_validator


class PropkitConfig(BaseModel):
    """Central configuration for paranoid models.

    Configuration Sources (in order of precedence):
        1. Programmatic settings (highest priority)
        2. Environment variables (PROPKIT_ prefix)
        3. Default values (lowest priority)

    Example:
        >>> config = PropkitConfig(commit_on_remove=False)

        Loading from environment:

        >>> os.environ['PROPKIT_COMMIT_ON_REMOVE'] = 'false'
        >>> config = PropkitConfig.from_env()

    Note:
        The default scope listener reads the global configuration on every
        query, so ``set_config``/``configure`` take effect immediately.
    """

    log_level: str = Field("WARNING", description="Level for the propkit logger")

    # Query scoping
    default_scope_enabled: bool = Field(
        True, description="Exclude soft-deleted records from default queries"
    )

    # Removal
    commit_on_remove: bool = Field(
        True, description="Commit the session after destroy/delete (else flush)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is a known logging level name."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()

    @classmethod
    def from_env(cls, prefix: str = "PROPKIT_") -> "PropkitConfig":
        """
        Load configuration from environment variables.

        Args:
            prefix: Prefix for environment variables

        Returns:
            Configuration instance
        """
        config_dict: Dict[str, Any] = {}

        for field_name, field_info in cls.model_fields.items():
            env_var = f"{prefix}{field_name.upper()}"
            if env_var not in os.environ:
                continue
            value = os.environ[env_var]

            field_type = field_info.annotation
            if get_origin(field_type) is Union:
                args = get_args(field_type)
                field_type = next((arg for arg in args if arg is not type(None)), str)

            if field_type == bool:
                config_dict[field_name] = value.lower() in ("true", "1", "yes", "on")
            else:
                config_dict[field_name] = value

        return cls.model_validate(config_dict)


# Global configuration instance
_config: Optional[PropkitConfig] = None


def get_config() -> PropkitConfig:
    """
    Get the global configuration instance.

    Returns:
        Global configuration
    """
    global _config

    if _config is None:
        _config = PropkitConfig.from_env()

    return _config


def set_config(config: Optional[PropkitConfig]) -> None:
    """
    Set the global configuration instance.

    Args:
        config: Configuration to set, or None to reload from the environment
            on next access
    """
    global _config
    _config = config


def configure(**kwargs: Any) -> PropkitConfig:
    """
    Configure propkit with keyword arguments.

    Args:
        **kwargs: Configuration parameters

    Returns:
        Updated configuration
    """
    global _config

    if _config is None:
        _config = PropkitConfig(**kwargs)
    else:
        config_dict = _config.to_dict()
        config_dict.update(kwargs)
        _config = PropkitConfig(**config_dict)

    return _config


def configure_logging(config: Optional[PropkitConfig] = None) -> logging.Logger:
    """
    Apply the configured log level to the ``propkit`` logger.

    Args:
        config: Configuration to use, defaults to the global one

    Returns:
        The package logger
    """
    config = config or get_config()
    logger = logging.getLogger("propkit")
    logger.setLevel(config.log_level)
    return logger
