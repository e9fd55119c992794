from __future__ import annotations
from pathlib import Path
from typing import Any, Dict

import yaml

from rna_layout.errors import LayoutConfigError


def read_yaml(path: str | Path) -> Dict[str, Any]:
    """
    Read and parse a YAML mapping file.

    Raises
    ------
    LayoutConfigError
        If the file does not have a YAML suffix or its top level is not a mapping.
    """
    path_obj = Path(path)
    if path_obj.suffix.lower() not in {".yml", ".yaml"}:
        raise LayoutConfigError(f"Only YAML files are supported: {path_obj}")

    data = yaml.safe_load(path_obj.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise LayoutConfigError(f"Top level of {path_obj} must be a mapping")

    return data
