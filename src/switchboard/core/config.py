"""3-layer configuration system for Switchboard.

Loads and merges configuration from:
1. Default settings (built-in)
2. Project config (.switchboard/config.yaml)
3. CLI parameters (override)
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = ".switchboard"
CONFIG_FILE = "config.yaml"

DEFAULT_CONFIG: dict = {
    "runtime": {
        "max_iterations": 10,
        "default_model": "gpt-4o-mini",
        "cost_ceiling": 0.05,
        "coordination_timeout_ms": 60000,
        "delegation_key_length": 50,
    },
    "logging": {
        "level": "WARNING",
    },
    "agents": {},
    "tools": {
        "http_fetch": {"timeout_seconds": 20, "max_chars": 8000},
    },
    "ai": {
        "provider": "openai",
        "timeout_seconds": 300,
        "retry_attempts": 3,
        "retry_delay_seconds": 5,
        "openai": {
            "api_key_env": "OPENAI_API_KEY",
        },
        "anthropic": {
            "model": "claude-sonnet-4-5-20250929",
            "api_key_env": "ANTHROPIC_API_KEY",
            "max_tokens": 8000,
            "model_map": {
                "gpt-4o-nano": "claude-haiku-4-5-20251001",
                "gpt-4o-mini": "claude-haiku-4-5-20251001",
                "gpt-4o": "claude-sonnet-4-5-20250929",
                "o4-mini": "claude-sonnet-4-5-20250929",
            },
        },
        "ollama": {
            "endpoint": "http://localhost:11434",
            "model": "llama3.1:70b",
        },
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def config_path(project_path: Path) -> Path:
    return project_path / CONFIG_DIR / CONFIG_FILE


def load_project_config(project_path: Path) -> dict:
    """Load project configuration from .switchboard/config.yaml."""
    path = config_path(project_path)
    if not path.exists():
        return {}
    try:
        content = path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        loaded = yaml.safe_load(content) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return {}
    if not isinstance(loaded, dict):
        logger.warning("Ignoring config %s: top level must be a mapping", path)
        return {}
    return loaded


def get_effective_config(
    project_path: Optional[Path] = None,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    if project_path is not None:
        project_config = load_project_config(project_path)
        if project_config:
            config = deep_merge(config, project_config)
        config["_project_path"] = str(project_path)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    return config


def agent_overrides(config: dict, agent_id: str) -> dict:
    return dict((config.get("agents") or {}).get(agent_id) or {})


def initialize_project(project_path: Path, provider: str = "openai") -> Path:
    """Write a starter .switchboard/config.yaml if none exists."""
    path = config_path(project_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        path.write_text(
            "# Switchboard project configuration\n"
            "\n"
            "runtime:\n"
            "  max_iterations: 10\n"
            "  default_model: gpt-4o-mini\n"
            "  cost_ceiling: 0.05\n"
            "  coordination_timeout_ms: 60000\n"
            "\n"
            "ai:\n"
            f"  provider: {provider}\n",
            encoding="utf-8",
        )
    return path
