"""Configuration models and helpers for the sysctlconf command line."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from omegaconf import DictConfig, OmegaConf
from pydantic import BaseModel, Field, field_validator

LOG = logging.getLogger(__name__)


class OutputConfig(BaseModel):
    """Presentation preferences for printed trees."""

    format: Literal["tree", "json", "plain"] = Field(
        default="tree", description="Printer used for parsed configs."
    )
    rich_tree: bool = Field(default=True, description="Render the tree format with rich.")
    indent: int = Field(default=2, ge=1, le=8, description="Indent width for json and plain tree output.")
    sort_keys: bool = Field(default=True, description="Print keys in sorted order.")
    export_json: Optional[Path] = Field(default=None, description="Optional JSON export path.")

    @field_validator("export_json")
    @classmethod
    def validate_export_path(cls, value: Optional[Path]) -> Optional[Path]:
        """Ensure the export directory exists."""
        if value is not None:
            value.parent.mkdir(parents=True, exist_ok=True)
        return value


class AppConfig(BaseModel):
    """Top-level configuration for the sysctlconf CLI."""

    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> AppConfig:
    """
    Build AppConfig from an optional YAML settings file and keyword overrides.

    The settings file is merged over the defaults with OmegaConf. Overrides use dotted
    notation (e.g. ``output.format=json``); ``None`` values are skipped so unset CLI
    options leave file or default values in place.
    """
    merged = OmegaConf.create(AppConfig().model_dump(mode="json"))

    if config_path:
        file_conf = OmegaConf.load(config_path)
        if not isinstance(file_conf, DictConfig):
            raise ValueError(f"Settings file {config_path} must contain a mapping")
        LOG.debug("Loaded settings from %s", config_path)
        merged = OmegaConf.merge(merged, file_conf)

    for dotted_key, value in (overrides or {}).items():
        if value is None:
            continue
        OmegaConf.update(merged, dotted_key, value, merge=True)

    return AppConfig.model_validate(OmegaConf.to_container(merged, resolve=True))
