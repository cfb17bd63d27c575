"""Loading of packaged YAML keyword tables, with an optional override directory."""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any

import yaml


def normalize_text(value: str) -> str:
    return " ".join(value.lower().strip().split())


def load_yaml(resource_name: str, templates_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load one YAML template.

    Args:
        resource_name: File name inside the templates directory (e.g. 'categories.yaml')
        templates_path: Directory that replaces the packaged templates, if given

    Returns:
        The parsed mapping, or an empty dict when the file does not exist.
    """
    if templates_path:
        file_path = Path(templates_path) / resource_name
        if not file_path.exists():
            return {}
        with file_path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    try:
        resource = resources.files("hearth.templates").joinpath(resource_name)
        with resource.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}
    except FileNotFoundError:
        return {}


def keyword_table(data: dict[str, Any], key: str) -> dict[str, list[str]]:
    """Read a ``name -> [keywords]`` table, normalizing keywords and dropping junk."""
    table: dict[str, list[str]] = {}
    for name, keywords in (data.get(key) or {}).items():
        if not isinstance(keywords, list):
            continue
        table[str(name)] = [normalize_text(str(k)) for k in keywords if k]
    return table
