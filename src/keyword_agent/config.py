"""Configuration loading: environment, .env, YAML files and prompt files.

The core client takes plain values; this module is where they come from
when running from the command line or an embedding application.
"""

from pathlib import Path

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from keyword_agent.client import DEFAULT_ENDPOINT

PROMPTS_DIR = Path(__file__).parent / "prompts"
DEFAULT_PROMPT_FILE = PROMPTS_DIR / "keywords.md"
DEFAULT_MODEL = "gpt-4o-mini"


class ConfigError(Exception):
    """Raised when a config or prompt file cannot be loaded."""


def load_prompt(path: Path | None = None) -> str:
    """Read a system prompt file. Defaults to the bundled keyword prompt."""
    path = Path(path) if path else DEFAULT_PROMPT_FILE
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise ConfigError(f"Cannot read prompt file {path}: {e}") from e


class Settings(BaseSettings):
    """Client settings, read from KEYWORD_AGENT_* env vars or .env."""

    model_config = SettingsConfigDict(
        env_prefix="KEYWORD_AGENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    endpoint: str = DEFAULT_ENDPOINT
    api_key: str = ""
    model: str = DEFAULT_MODEL
    system_prompt: str = Field(default_factory=load_prompt)


def load_yaml_config(path: Path) -> dict:
    """Load a YAML mapping of settings fields."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def load_settings(config_path: Path | None = None, **overrides) -> Settings:
    """Build Settings from env, an optional YAML file, and explicit overrides.

    Precedence: overrides > YAML file > environment > defaults.
    Overrides that are None are ignored. A ``system_prompt_file`` key
    (in YAML or overrides) is read into ``system_prompt``.
    """
    values = load_yaml_config(config_path) if config_path else {}
    _resolve_prompt_file(values, base_dir=Path(config_path).parent if config_path else None)

    explicit = {k: v for k, v in overrides.items() if v is not None}
    _resolve_prompt_file(explicit)
    values.update(explicit)

    return Settings(**values)


def _resolve_prompt_file(values: dict, base_dir: Path | None = None) -> None:
    prompt_file = values.pop("system_prompt_file", None)
    if prompt_file is None:
        return
    prompt_file = Path(prompt_file)
    if base_dir is not None and not prompt_file.is_absolute():
        prompt_file = base_dir / prompt_file
    values["system_prompt"] = load_prompt(prompt_file)
