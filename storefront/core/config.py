"""
Configuration management for the storefront voice assistant.

Loads settings from YAML config file and provides typed access.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import yaml

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()


def _project_root() -> Path:
    """Return project root (parent of storefront package)."""
    return Path(__file__).resolve().parent.parent.parent


DEFAULT_CONFIG_PATH = _project_root() / "config" / "default.yaml"


@dataclass
class VoiceConfig:
    """Configuration for the voice command pipeline."""

    # Model configuration
    model: str = "gpt-4o-mini"
    temperature: float = 0
    request_timeout: float = 10.0       # Seconds before a classifier call is abandoned

    # Recovery supervisor
    recovery_threshold: int = 3         # Consecutive failures before a full capture restart
    error_resume_delay: float = 1.0     # Seconds to wait after a capture error
    end_restart_delay: float = 0.3      # Seconds to wait when restarting after natural end fails
    restart_delay: float = 1.0          # Seconds between teardown and a fresh session
    action_log_size: int = 50           # Most-recent entries kept in the action log

    # Filter price range (dollars)
    price_floor: float = 0
    price_ceiling: float = 200

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "VoiceConfig":
        """Load configuration from YAML file."""
        path = config_path or DEFAULT_CONFIG_PATH
        if not path.exists():
            return cls(model=os.environ.get("OPENAI_MODEL", cls.model))

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        models_config = data.get('models', {})
        recovery_config = data.get('recovery', {})
        filters_config = data.get('filters', {})

        return cls(
            model=os.environ.get("OPENAI_MODEL") or models_config.get('classifier', 'gpt-4o-mini'),
            temperature=models_config.get('temperature', 0),
            request_timeout=models_config.get('request_timeout', 10.0),
            recovery_threshold=recovery_config.get('threshold', 3),
            error_resume_delay=recovery_config.get('error_resume_delay', 1.0),
            end_restart_delay=recovery_config.get('end_restart_delay', 0.3),
            restart_delay=recovery_config.get('restart_delay', 1.0),
            action_log_size=recovery_config.get('action_log_size', 50),
            price_floor=filters_config.get('price_floor', 0),
            price_ceiling=filters_config.get('price_ceiling', 200),
        )


# Global config instance
_config: Optional[VoiceConfig] = None


def get_config() -> VoiceConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = VoiceConfig.from_yaml()
    return _config


def set_config(config: VoiceConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
