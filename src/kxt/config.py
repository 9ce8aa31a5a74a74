"""
Knowledge Text Configuration
============================

This module handles configuration loading for kxt hosts.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. YAML file: $KXT_CONFIG, else kxt.yaml in the working directory,
       else config.yaml at the project root
    3. Default values (lowest priority)

Environment Variable Mapping:
    KXT_CONFIG                    -> path of the YAML file
    KXT_CHECKPOINT_MAX_FRAMES     -> checkpoint.max_frames_since_snapshot
    KXT_CHECKPOINT_MAX_ELAPSED_MS -> checkpoint.max_elapsed_ms_since_snapshot
    KXT_CODEC_ENCODING            -> codec.encoding
    KXT_LOG_LEVEL                 -> logging.level
    KXT_LOG_FORMAT                -> logging.format

An empty KXT_CHECKPOINT_* value disables that limit.

Example:
    from kxt.config import settings
    from kxt.log import CheckpointPolicy, DocumentLog

    policy = CheckpointPolicy.from_config(settings.checkpoint)
    log = DocumentLog.new(policy=policy)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class CheckpointConfig(BaseModel):
    """Automatic snapshot insertion limits."""

    max_frames_since_snapshot: Optional[int] = Field(
        default=256,
        ge=1,
        description="Force a snapshot after N content/cursor frames (None = no limit)",
    )
    max_elapsed_ms_since_snapshot: Optional[int] = Field(
        default=60_000,
        ge=1,
        description="Force a snapshot after M ms of log time (None = no limit)",
    )


class CodecConfig(BaseModel):
    """Serialized .kxt file settings."""

    encoding: str = Field(default="utf-8", description="Text encoding of .kxt files")
    write_end_marker: bool = Field(
        default=True,
        description="Terminate written files with the end marker line",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for kxt.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    checkpoint: CheckpointConfig = Field(default_factory=CheckpointConfig)
    codec: CodecConfig = Field(default_factory=CodecConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to a YAML file. If None, uses $KXT_CONFIG or
            searches kxt.yaml (cwd) and the project root config.yaml.
            A generic config.yaml in the cwd belongs to the host and is
            never read.

    Returns:
        Settings: Loaded configuration
    """
    # Find config file
    if config_path is None:
        config_path = os.environ.get("KXT_CONFIG") or None
    if config_path is None:
        search_paths = [
            Path("kxt.yaml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    # Build settings object
    return Settings.model_validate(config_data)


def _optional_int(raw: str) -> Optional[int]:
    raw = raw.strip()
    if not raw or raw.lower() == "none":
        return None
    return int(raw)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Checkpoint settings
    if (env_frames := os.environ.get("KXT_CHECKPOINT_MAX_FRAMES")) is not None:
        config_data.setdefault("checkpoint", {})["max_frames_since_snapshot"] = _optional_int(env_frames)
    if (env_elapsed := os.environ.get("KXT_CHECKPOINT_MAX_ELAPSED_MS")) is not None:
        config_data.setdefault("checkpoint", {})["max_elapsed_ms_since_snapshot"] = _optional_int(env_elapsed)

    # Codec settings
    if env_encoding := os.environ.get("KXT_CODEC_ENCODING"):
        config_data.setdefault("codec", {})["encoding"] = env_encoding

    # Logging settings
    if env_log := os.environ.get("KXT_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_format := os.environ.get("KXT_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_format


def setup_logging(settings: Settings) -> None:
    """
    Configure logging based on settings.

    Meant for hosts (viewer, CLI, scripts). The library itself only
    creates module loggers and never configures handlers.
    """
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
