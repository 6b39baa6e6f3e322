"""User configuration for Strata.

Stored as JSON at $STRATA_CONFIG, or ~/.config/strata/config.json when the
variable is unset. Missing files and missing keys fall back to defaults.
"""

import json
import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "STRATA_CONFIG"


class StorageConfig(BaseModel):
    backend: Literal["memory", "filesystem"] = "filesystem"
    blob_dir: str = "./.strata/blobs"


class RenderConfig(BaseModel):
    canvas_width: int = Field(default=1200, gt=0)
    canvas_height: int = Field(default=1200, gt=0)


class CollectionConfig(BaseModel):
    state_file: str = "./.strata/state.json"
    name_template: str = "{name} #{item_id}"


class StrataConfig(BaseModel):
    storage: StorageConfig = Field(default_factory=StorageConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    collection: CollectionConfig = Field(default_factory=CollectionConfig)


class ConfigError(ValueError):
    """Raised for unknown keys or values of the wrong type."""


def config_path() -> Path:
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env)
    return Path.home() / ".config" / "strata" / "config.json"


def load_config(path: Path | None = None) -> StrataConfig:
    path = path or config_path()
    if not path.exists():
        return StrataConfig()

    with open(path) as f:
        data = json.load(f)
    try:
        return StrataConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e


def save_config(config: StrataConfig, path: Path | None = None) -> Path:
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(config.model_dump_json(indent=2))
    logger.info(f"Saved config to {path}")
    return path


def config_keys(config: StrataConfig) -> list[str]:
    """All settable keys as 'section.field'."""
    keys = []
    for section_name in StrataConfig.model_fields:
        section = getattr(config, section_name)
        for field_name in type(section).model_fields:
            keys.append(f"{section_name}.{field_name}")
    return keys


def set_config_value(config: StrataConfig, key: str, raw: str) -> StrataConfig:
    """Return a copy of config with key set from its string form.

    Raises:
        ConfigError: Unknown key, or a value that does not fit the field
    """
    section_name, _, field_name = key.partition(".")
    if key not in config_keys(config):
        raise ConfigError(f"Unknown key: {key}")

    section = getattr(config, section_name)
    annotation = type(section).model_fields[field_name].annotation
    value: object = raw
    if annotation is int:
        try:
            value = int(raw)
        except ValueError:
            raise ConfigError(f"Invalid integer for {key}: {raw}") from None

    data = config.model_dump()
    data[section_name][field_name] = value
    try:
        return StrataConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {raw}") from e
