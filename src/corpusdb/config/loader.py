"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (CORPUSDB__SECTION__KEY)
3. Project config (corpusdb.yaml in the working directory)
4. Global config (~/.config/corpusdb/config.yaml)
5. Built-in defaults (lowest priority)

The resulting CorpusDbConfig is a plain value: callers build it once and pass
it to Database/Importer constructors.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from corpusdb.config.models import (
    CorpusDbConfig,
    DatabaseConfig,
    ImportConfig,
    LoggingConfig,
)
from corpusdb.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/corpusdb/config.yaml").expanduser()
PROJECT_CONFIG_NAME = "corpusdb.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with an instance-based YAML source."""

    class CorpusDbSettings(BaseSettings):
        """Root config. Env vars: CORPUSDB__LOGGING__LEVEL, CORPUSDB__DATABASE__URL, etc."""

        model_config = SettingsConfigDict(
            env_prefix="CORPUSDB__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        database: DatabaseConfig = DatabaseConfig()
        import_run: ImportConfig = ImportConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return CorpusDbSettings


def load_config(
    config_path: Path | None = None,
    *,
    project_dir: Path | None = None,
    **kwargs: Any,
) -> CorpusDbConfig:
    """Load config: defaults < global yaml < project yaml < env vars < kwargs.

    Args:
        config_path: Explicit YAML file. Replaces the project file lookup.
        project_dir: Directory holding corpusdb.yaml. Defaults to cwd.
        **kwargs: Override values (highest precedence).

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    if config_path is None:
        config_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME

    yaml_config = _deep_merge(_load_yaml(GLOBAL_CONFIG_PATH), _load_yaml(config_path))

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return CorpusDbConfig.model_validate(settings.model_dump())
