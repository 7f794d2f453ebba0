"""
newsreach Configuration
=======================

Persistent configuration with:
- JSON storage
- Environment variable overrides
- Credentials kept in memory only (the password is never written)
- Validation
"""

from __future__ import annotations

import os
import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional
import logging

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".newsreach"
CONFIG_FILE = CONFIG_DIR / "config.json"
LOG_DIR = CONFIG_DIR / "logs"

DEFAULT_HOST = "news.sunsite.dk"
DEFAULT_PORT = 119


@dataclass
class ServerConfig:
    """NNTP server and principal."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    username: str = ""
    password: str = field(default="", repr=False)


@dataclass
class TimeoutConfig:
    """Per-operation timeouts in seconds (connect and each line read)."""
    auth: float = 5.0
    groups: float = 7.0      # LIST
    articles: float = 8.0    # GROUP + LISTGROUP
    article: float = 10.0    # HEAD, ARTICLE


@dataclass
class LimitsConfig:
    """Bounds on what a server may send in one response."""
    max_body_lines: int = 1_000_000
    max_body_bytes: int = 64 * 1024 * 1024
    max_line_length: int = 64 * 1024


@dataclass
class DisplayConfig:
    """Consumer-side display settings."""
    max_articles_shown: int = 200    # newest first


@dataclass
class Config:
    """Main configuration container."""
    server: ServerConfig = field(default_factory=ServerConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    version: str = "1.0.0"

    def to_dict(self, include_password: bool = False) -> dict:
        """Convert to dictionary."""
        data = asdict(self)
        if not include_password:
            data["server"].pop("password", None)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create from dictionary."""
        return cls(
            server=ServerConfig(**data.get("server", {})),
            timeouts=TimeoutConfig(**data.get("timeouts", {})),
            limits=LimitsConfig(**data.get("limits", {})),
            display=DisplayConfig(**data.get("display", {})),
            version=data.get("version", "1.0.0")
        )

    def validate(self) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if not self.server.host.strip():
            errors.append("Server host must not be empty")

        if self.server.port < 1 or self.server.port > 65535:
            errors.append("Invalid port number")

        for name in ("auth", "groups", "articles", "article"):
            if getattr(self.timeouts, name) <= 0:
                errors.append(f"Timeout '{name}' must be positive")

        if self.limits.max_body_lines < 1:
            errors.append("Max body lines must be at least 1")

        if self.limits.max_body_bytes < 1024:
            errors.append("Max body size must be at least 1024 bytes")

        if self.limits.max_line_length < 512:
            errors.append("Max line length must be at least 512 bytes (RFC 3977)")

        if self.display.max_articles_shown < 1:
            errors.append("Articles shown must be at least 1")

        return errors


def load_config(path: Optional[Path] = None) -> Config:
    """
    Load configuration from file.
    Falls back to defaults if not found.
    Supports environment variable overrides.
    """
    path = path or CONFIG_FILE
    config = Config()

    # Load from file if exists
    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                config = Config.from_dict(data)
                logger.info(f"Loaded config from {path}")
        except Exception as e:
            logger.warning(f"Failed to load config: {e}")

    # Environment variable overrides
    env_overrides = {
        "NEWSREACH_HOST": ("server", "host"),
        "NEWSREACH_PORT": ("server", "port", int),
        "NEWSREACH_USER": ("server", "username"),
        "NEWSREACH_PASS": ("server", "password"),
        "NEWSREACH_TIMEOUT": ("timeouts", None, float),
    }

    for env_var, target in env_overrides.items():
        value = os.environ.get(env_var)
        if value:
            section, key = target[0], target[1]
            converter = target[2] if len(target) > 2 else str

            try:
                section_obj = getattr(config, section)
                converted = converter(value)
                # No key: apply to every field of the section
                keys = [key] if key else list(asdict(section_obj))
                for k in keys:
                    setattr(section_obj, k, converted)
                logger.debug(f"Override from {env_var}: {section}.{key or '*'}")
            except Exception as e:
                logger.warning(f"Failed to apply {env_var}: {e}")

    return config


def save_config(config: Config, path: Optional[Path] = None) -> bool:
    """
    Save configuration to file, without the password.
    Creates config directory if needed.
    """
    path = path or CONFIG_FILE
    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=2)

        logger.info(f"Saved config to {path}")
        return True

    except Exception as e:
        logger.error(f"Failed to save config: {e}")
        return False


def ensure_directories(base: Optional[Path] = None) -> None:
    """Ensure the config and log directories exist."""
    base = base or CONFIG_DIR
    for d in (base, base / "logs"):
        d.mkdir(parents=True, exist_ok=True)
