"""Configuration system for Parley.

This module provides two things:

1. AgentConfig, the constructor contract of the Agent (name, version,
   description, confidence threshold and default prompt templates). It is
   validated on creation; malformed values raise ValueError immediately.

2. A typed settings loader that reads TOML files and environment variables,
   following a clear precedence order:

   1. Environment variables (highest priority)
   2. config/local.toml (if it exists)
   3. config/default.toml (lowest priority)

Settings are frozen dataclasses so they cannot be mutated after loading.

Environment Variables:
    PARLEY_CONFIG_DIR: Directory holding default.toml / local.toml
    PARLEY_NAME: Agent name
    PARLEY_VERSION: Agent version
    PARLEY_DESCRIPTION: Agent description used by the greeting template
    PARLEY_MIN_CONFIDENCE: Intent threshold (default: 0.7, within [0, 1])
    PARLEY_MAX_CONTEXT_MESSAGES: Records shown to LLM handlers (default: 20, must be > 0)
    PARLEY_DEBUG: Enable DEBUG-level logging (default: false)
    PARLEY_LLM_ENABLED: Register the ollama-backed intent handler (default: false)
    PARLEY_MODEL: Ollama model name
    PARLEY_THINK: Enable extended thinking mode (default: false)
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from parley.agent.prompts import PromptTemplate
from parley.agent.intents.resolver import DEFAULT_MIN_CONFIDENCE
from parley.agent.utils.helpers import get_config_dir
from parley.agent.utils.logging import get_logger


logger = get_logger("parley")


@dataclass(frozen=True)
class AgentConfig:
    """Construction parameters of an Agent.

    Attributes:
        name: Agent name, used in greetings. Must be non-empty.
        version: Agent version string. Must be non-empty.
        description: Optional one-line description.
        min_confidence: Intent threshold in [0, 1]; None means the default (0.7).
        default_prompts: Templates registered when the agent is created.
    """
    name: str
    version: str
    description: str | None = None
    min_confidence: float | None = None
    default_prompts: tuple[PromptTemplate, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Agent name must be a non-empty string")
        if not isinstance(self.version, str) or not self.version.strip():
            raise ValueError("Agent version must be a non-empty string")
        if self.min_confidence is not None and not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError(f"min_confidence must be within [0, 1], got {self.min_confidence}")
        object.__setattr__(self, "default_prompts", tuple(self.default_prompts))

    @property
    def effective_min_confidence(self) -> float:
        return DEFAULT_MIN_CONFIDENCE if self.min_confidence is None else self.min_confidence


@dataclass(frozen=True)
class AgentSettings:
    """Settings for the agent identity and turn handling.

    Attributes:
        name: Agent name.
        version: Agent version.
        description: Agent description.
        min_confidence: Intent threshold.
        max_context_messages: How many recent log records LLM-backed handlers see.
        debug: Enable DEBUG-level logging.
    """
    name: str
    version: str
    description: str
    min_confidence: float
    max_context_messages: int
    debug: bool


@dataclass(frozen=True)
class LLMSettings:
    """Settings for the optional ollama-backed intent handler.

    Attributes:
        enabled: Whether to register the handler at all.
        model: Name of the model, which must be available in the configured Ollama instance.
        think: Whether to enable extended thinking mode for models that support it.
    """
    enabled: bool
    model: str
    think: bool


@dataclass(frozen=True)
class Settings:
    """Top-level immutable settings."""
    agent: AgentSettings
    llm: LLMSettings
    prompts: tuple[PromptTemplate, ...] = ()


def _parse_bool(value: str) -> bool:
    """Parse common boolean strings."""
    if isinstance(value, bool):
        return value
    if value.lower() in ("true", "1", "yes"):
        return True
    if value.lower() in ("false", "0", "no"):
        return False
    raise ValueError(f"Cannot parse '{value}' as boolean")


def _load_toml(path: Path) -> dict:
    """Load TOML file, returning empty dict when missing."""
    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except Exception as exc:
        raise RuntimeError(f"Failed to load TOML file {path}: {exc}") from exc


def _merged_sections(default_data: dict, local_data: dict) -> dict:
    merged: dict[str, dict] = {}
    for section in ("agent", "llm", "prompts"):
        merged[section] = {
            **default_data.get(section, {}),
            **local_data.get(section, {}),
        }
    return merged


def _env_or(config: dict, env_key: str, config_key: str, default=None):
    return os.getenv(env_key, config.get(config_key, default))


def _int_value(raw_value, field_name: str) -> int:
    try:
        return int(raw_value)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"{field_name} must be an integer. Got: {raw_value}") from exc


def _float_value(raw_value, field_name: str) -> float:
    try:
        return float(raw_value)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"{field_name} must be a number. Got: {raw_value}") from exc


def _bool_value(raw_value, env_key: str) -> bool:
    try:
        return _parse_bool(raw_value) if isinstance(raw_value, str) else bool(raw_value)
    except ValueError as exc:
        raise ValueError(f"Invalid {env_key} value: {raw_value}") from exc


def load_settings() -> Settings:
    """Load and validate settings from TOML + env overrides."""
    config_dir = get_config_dir()

    default_path = config_dir / "default.toml"
    if not default_path.exists():
        raise RuntimeError(f"default.toml not found at {default_path}")

    default_data = _load_toml(default_path)
    local_data = _load_toml(config_dir / "local.toml")

    merged = _merged_sections(default_data, local_data)

    agent_config = merged["agent"]
    name = str(_env_or(agent_config, "PARLEY_NAME", "name", "")).strip()
    version = str(_env_or(agent_config, "PARLEY_VERSION", "version", "")).strip()
    description = str(_env_or(agent_config, "PARLEY_DESCRIPTION", "description", "")).strip()
    min_confidence = _float_value(
        _env_or(agent_config, "PARLEY_MIN_CONFIDENCE", "min_confidence", DEFAULT_MIN_CONFIDENCE),
        "min_confidence",
    )
    max_context = _int_value(
        _env_or(agent_config, "PARLEY_MAX_CONTEXT_MESSAGES", "max_context_messages", 20),
        "max_context_messages",
    )
    debug = _bool_value(_env_or(agent_config, "PARLEY_DEBUG", "debug", False), "PARLEY_DEBUG")

    if not name:
        raise ValueError("Agent name not configured. Set PARLEY_NAME or config agent.name")
    if not version:
        raise ValueError("Agent version not configured. Set PARLEY_VERSION or config agent.version")
    if not 0.0 <= min_confidence <= 1.0:
        raise ValueError(f"min_confidence must be within [0, 1], got {min_confidence}. Set PARLEY_MIN_CONFIDENCE or config agent.min_confidence.")
    if max_context <= 0:
        raise ValueError(f"max_context_messages must be greater than zero, got {max_context}. Set PARLEY_MAX_CONTEXT_MESSAGES or config agent.max_context_messages.")

    agent_settings = AgentSettings(
        name=name,
        version=version,
        description=description,
        min_confidence=min_confidence,
        max_context_messages=max_context,
        debug=debug,
    )

    llm_config = merged["llm"]
    llm_enabled = _bool_value(_env_or(llm_config, "PARLEY_LLM_ENABLED", "enabled", False), "PARLEY_LLM_ENABLED")
    llm_model = str(_env_or(llm_config, "PARLEY_MODEL", "model", "")).strip()
    llm_think = _bool_value(_env_or(llm_config, "PARLEY_THINK", "think", False), "PARLEY_THINK")

    if llm_enabled and not llm_model:
        raise ValueError("LLM model not configured. Set PARLEY_MODEL or config llm.model")

    llm_settings = LLMSettings(enabled=llm_enabled, model=llm_model, think=llm_think)

    prompts = []
    for prompt_name, template in merged["prompts"].items():
        if not isinstance(template, str):
            raise ValueError(f"Prompt template {prompt_name} must be a string")
        prompts.append(PromptTemplate(name=prompt_name, template=template))

    settings = Settings(agent=agent_settings, llm=llm_settings, prompts=tuple(prompts))
    logger.info(
        f"Configuration loaded: agent={name} v{version}, min_confidence={min_confidence}, "
        f"llm={'on' if llm_enabled else 'off'}, debug={debug}"
    )

    return settings


def build_agent_config(settings: Settings) -> AgentConfig:
    """Turn loaded settings into the Agent's constructor contract."""
    return AgentConfig(
        name=settings.agent.name,
        version=settings.agent.version,
        description=settings.agent.description or None,
        min_confidence=settings.agent.min_confidence,
        default_prompts=settings.prompts,
    )
