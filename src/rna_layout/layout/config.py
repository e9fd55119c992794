from __future__ import annotations
from dataclasses import dataclass, fields
import logging
import math
from pathlib import Path
from typing import Any, Dict, Mapping

from rna_layout.errors import LayoutConfigError
from rna_layout.layout.placement import RotationDirection
from rna_layout.utils.yaml_io import read_yaml

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_SPACE = 45.0
DEFAULT_PAIR_SPACE = 45.0


@dataclass(frozen=True, slots=True)
class LayoutConfig:
    """
    Spacing and orientation settings for one layout pass.

    Attributes
    ----------
    primary_space : float
        Distance between consecutive backbone positions (unpaired bases and
        stem steps). Defaults to 45.
    pair_space : float
        Distance between the two bases of a pair. Defaults to 45.
    rotation : RotationDirection
        Rotation sign the layout starts with. `CW` (1) by default; `CCW` (-1)
        mirrors every pair.
    """
    primary_space: float = DEFAULT_PRIMARY_SPACE
    pair_space: float = DEFAULT_PAIR_SPACE
    rotation: RotationDirection = RotationDirection.CW

    def __post_init__(self):
        for name in ("primary_space", "pair_space"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise LayoutConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise LayoutConfigError(f"{name} must be a positive finite number, got {value!r}")
        # Coerce so frozen instances always hold the canonical types.
        object.__setattr__(self, "primary_space", float(self.primary_space))
        object.__setattr__(self, "pair_space", float(self.pair_space))
        object.__setattr__(self, "rotation", _parse_rotation(self.rotation))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LayoutConfig:
        """
        Builds a config from a plain mapping, e.g. a parsed YAML `layout:` section.

        Raises
        ------
        LayoutConfigError
            If the mapping holds unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise LayoutConfigError(f"Unknown layout config keys: {', '.join(unknown)}")
        return cls(**dict(data))


def _parse_rotation(value: Any) -> RotationDirection:
    """Accepts a `RotationDirection`, its integer sign, or its name (`cw`/`ccw`)."""
    if isinstance(value, str):
        try:
            return RotationDirection[value.strip().upper()]
        except KeyError:
            raise LayoutConfigError(f"rotation must be 'cw' or 'ccw', got {value!r}") from None
    try:
        return RotationDirection(value)
    except ValueError:
        raise LayoutConfigError(f"rotation must be 1 or -1, got {value!r}") from None


def load_layout_config(path: str | Path) -> LayoutConfig:
    """
    Loads a `LayoutConfig` from a YAML file.

    The settings may sit at the top level or under a `layout:` key::

        layout:
          primary_space: 40
          pair_space: 30
          rotation: ccw

    Parameters
    ----------
    path : str | Path
        Path to a `.yml` / `.yaml` file.

    Returns
    -------
    LayoutConfig
        The validated configuration.
    """
    data: Dict[str, Any] = read_yaml(path)
    section = data.get("layout", data)
    if not isinstance(section, Mapping):
        raise LayoutConfigError(f"'layout' section of {path} must be a mapping")

    config = LayoutConfig.from_mapping(section)
    logger.info(f"Loaded layout config from {path}: {config}")
    return config
