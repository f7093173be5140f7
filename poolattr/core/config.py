"""Configuration loading and validation for poolattr."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from poolattr.core.errors import ConfigLoadError, ConfigValidationError

DATABASE_ENV = "POOLATTR_DATABASE"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class Settings:
    database: Path
    timeout_s: float = 5.0
    transactional_delete: bool = False
    log_level: str = "WARNING"
    source: Path | None = None


def _config_dir() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "poolattr"


def _data_dir() -> Path:
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share")) / "poolattr"


def default_config_path() -> Path:
    return _config_dir() / "config.yaml"


def _load_schema_validator() -> Any:
    schema_text = resources.files("poolattr.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _build_settings(doc: dict[str, Any], source: Path | None) -> Settings:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    database = Path(doc["database"]).expanduser() if "database" in doc else _data_dir() / "pool.db"
    return Settings(
        database=database,
        timeout_s=float(doc.get("timeout_s", 5.0)),
        transactional_delete=bool(doc.get("transactional_delete", False)),
        log_level=str(doc.get("log_level", "WARNING")),
        source=source,
    )


def load_settings(config_path: Path | None = None, *, database: str | Path | None = None) -> Settings:
    """Load settings from *config_path*, or the XDG default if it exists.

    ``$POOLATTR_DATABASE`` overrides the configured database path and an
    explicit *database* argument overrides both.
    """
    doc: dict[str, Any] = {}
    source: Path | None = None
    if config_path is not None:
        doc = _read_yaml(config_path)
        source = config_path
    else:
        candidate = default_config_path()
        if candidate.is_file():
            doc = _read_yaml(candidate)
            source = candidate

    settings = _build_settings(doc, source)
    if source is not None:
        LOGGER.debug("Loaded configuration from %s", source)

    override = database if database is not None else os.environ.get(DATABASE_ENV)
    if override:
        settings = replace(settings, database=Path(override).expanduser())
    return settings
