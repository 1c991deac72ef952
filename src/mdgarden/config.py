"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


CONFIG_FILE = "config.yaml"


class CustomFilter(BaseModel):
    """A user pattern/replacement pair applied to every compiled note."""
    pattern: str
    flags:   str = "g"
    replace: str = ""


class PathRewriteRule(BaseModel):
    """Rewrites a vault path prefix when computing public garden URLs."""
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to:    str = ""


class Settings(BaseModel):
    app_name:        str = "mdgarden"
    vault_dir:       str = Field(default=".",    description="Root directory of the note vault")
    output_dir:      str = Field(default="dist", description="Directory for compiled notes and images")
    db_url:          str = "sqlite:///mdgarden.db"
    max_depth:       int = Field(default=4, ge=1, description="Max nested transclusion depth")
    parser_config:   str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    slugify_enabled: bool = Field(default=True, description="Slugify garden URL path segments")
    publish_key:     str = Field(default="dg-publish",   description="Front-matter flag selecting notes to publish")
    permalink_key:   str = Field(default="dg-permalink", description="Front-matter key overriding a note URL")
    block_query_keyword:  str = "dataview"
    script_query_keyword: str = "dataviewjs"
    inline_query_prefix:  str = "="
    inline_script_prefix: str = "$="
    custom_filters:     list[CustomFilter]    = Field(default_factory=list)
    path_rewrite_rules: list[PathRewriteRule] = Field(default_factory=list)
    log_level: str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDGARDEN_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDGARDEN_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid settings: {e}") from e
