import os
from pathlib import Path
from typing import List, Optional, Tuple, Type

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from .core.rules.models import KeyMode
from .core.rules.scanner import RULE_EXTENSIONS, TEST_SUFFIXES
from .infrastructure.engine.args import OutputFormat


def get_config_path() -> Path:
    """Location of the user config file, overridable with RULESMITH_CONFIG."""
    override = os.environ.get("RULESMITH_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "rulesmith" / "config.toml"


def config_file_exists() -> bool:
    return get_config_path().is_file()


class Settings(BaseSettings):
    # Matching engine
    ENGINE_BINARY: str = "semgrep"
    ENGINE_TIMEOUT: Optional[float] = None
    METRICS: bool = False
    OUTPUT_FORMAT: OutputFormat = OutputFormat.JSON

    # Rule registry
    KEY_MODE: KeyMode = KeyMode.SIMPLE
    PATH_ONLY_KEYS: bool = False
    RULE_EXTENSIONS: List[str] = list(RULE_EXTENSIONS)
    EXCLUDE_SUFFIXES: List[str] = list(TEST_SUFFIXES)

    # Policies
    POLICY_PATHS: List[str] = []

    # Environment (RULESMITH_*) and .env override the TOML config file
    model_config = SettingsConfigDict(
        env_prefix="RULESMITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=get_config_path()),
        )


# Private singleton instance
_settings = None


def get_settings() -> Settings:
    """
    Get or create the settings singleton.

    Raises:
        pydantic.ValidationError: If a configured value has the wrong type
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads env and config file."""
    global _settings
    _settings = None
