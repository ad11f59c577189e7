"""Audit configuration: YAML file + CLI overrides + built-in defaults.

audit_config.yaml:
  content_root: src/data
  manifest: src/data/chapters.ts
  forbidden_substrings: ["黑木", "黒木"]
  required_sections: [flashcards, quiz, vocab, dialogue, grammar]

Relative paths in the file resolve against the file's own directory.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import jsonschema
import yaml

from tools.unit_model import DEFAULT_FORBIDDEN_SUBSTRINGS, REQUIRED_SECTION_TYPES

SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"
CONFIG_SCHEMA_FILE = "audit_config_schema_v0.1.json"

DEFAULT_CONTENT_ROOT = "src/data"
DEFAULT_MANIFEST_NAME = "chapters.ts"


class ConfigError(Exception):
    """The config file is unreadable or fails schema validation."""


@dataclass
class AuditConfig:
    content_root: Path
    manifest: Path
    forbidden_substrings: tuple = DEFAULT_FORBIDDEN_SUBSTRINGS
    required_sections: tuple = REQUIRED_SECTION_TYPES


def load_config_file(path: str | Path) -> dict:
    """Load and schema-check a YAML config; paths come back resolved."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse config {path}: {e}") from e

    if data is None:
        data = {}
    with open(SCHEMAS_DIR / CONFIG_SCHEMA_FILE, encoding="utf-8") as f:
        schema = json.load(f)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ConfigError(f"Config {path}: {e.message}") from e

    base = path.resolve().parent
    for key in ("content_root", "manifest"):
        if key in data:
            data[key] = base / data[key]
    return data


def resolve_config(config_path=None, content_root=None, manifest=None,
                   forbidden=None) -> AuditConfig:
    """Merge CLI values over the config file over defaults."""
    data = load_config_file(config_path) if config_path else {}

    root = Path(content_root) if content_root else Path(data.get("content_root", DEFAULT_CONTENT_ROOT))
    if manifest:
        manifest_path = Path(manifest)
    elif "manifest" in data:
        manifest_path = Path(data["manifest"])
    else:
        manifest_path = root / DEFAULT_MANIFEST_NAME

    return AuditConfig(
        content_root=root,
        manifest=manifest_path,
        forbidden_substrings=tuple(forbidden or data.get("forbidden_substrings", DEFAULT_FORBIDDEN_SUBSTRINGS)),
        required_sections=tuple(data.get("required_sections", REQUIRED_SECTION_TYPES)),
    )
