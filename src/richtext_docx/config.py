"""YAML-backed configuration for the rich-text exporter."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from richtext_docx.exceptions import ConfigError


@dataclass
class StyleConfig:
    """Word document style mappings."""

    heading_prefix: str = "Heading"  # e.g. "Heading 1", "Heading 2"
    body_style: str = "Normal"
    list_style: str = "List Paragraph"
    table_style: str = "Table Grid"
    bullet_text: str = "•"
    list_indent_twips: int = 720
    list_hanging_twips: int = 360


@dataclass
class ImageConfig:
    """Image resolution and sizing settings."""

    default_width_px: int = 480
    default_aspect_ratio: float = 0.75  # height / width
    max_width_inches: float = 6.0
    fetch_timeout_seconds: float = 10.0
    max_concurrent_fetches: int = 8


@dataclass
class MarkupConfig:
    """Markup parser selection and editor conventions."""

    engine: str = "beautifulsoup"
    features: str = "html.parser"
    list_type_attribute: str = "data-list"
    list_indent_attribute: str = "data-indent"
    align_class_prefix: str = "ql-align-"
    indent_class_prefix: str = "ql-indent-"


@dataclass
class Config:
    """Top-level exporter configuration."""

    style: StyleConfig = field(default_factory=StyleConfig)
    image: ImageConfig = field(default_factory=ImageConfig)
    markup: MarkupConfig = field(default_factory=MarkupConfig)
    verbose: bool = False

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        """Load configuration from a YAML file."""
        try:
            text = path.read_text(encoding="utf-8")
            data = yaml.safe_load(text) or {}
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path}")
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}")

        return cls._from_dict(data)

    @classmethod
    def from_yaml_string(cls, text: str) -> Config:
        """Load configuration from a YAML string."""
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML: {exc}")
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> Config:
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a mapping")

        style_data = data.get("style") or {}
        image_data = data.get("image") or {}
        markup_data = data.get("markup") or {}

        return cls(
            style=StyleConfig(**{k: v for k, v in style_data.items() if k in StyleConfig.__dataclass_fields__}),
            image=ImageConfig(**{k: v for k, v in image_data.items() if k in ImageConfig.__dataclass_fields__}),
            markup=MarkupConfig(**{k: v for k, v in markup_data.items() if k in MarkupConfig.__dataclass_fields__}),
            verbose=data.get("verbose", False),
        )

    @classmethod
    def default(cls) -> Config:
        """Return the default configuration."""
        return cls()

    @classmethod
    def load(cls, path: Optional[Path] = None) -> Config:
        """Load config from path, or return defaults if path is None."""
        if path is None:
            return cls.default()
        return cls.from_yaml(path)
