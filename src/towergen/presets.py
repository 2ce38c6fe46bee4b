"""Named parameter presets loaded from YAML.

Presets are stored in YAML documents of the form::

    schema_version: "1.0"
    presets:
      twisted:
        segment_count: 40
        twist_range: [0, 180]
        ...

Search order for ``presets.yaml`` files:
    1. Directories from the ``TOWERGEN_PRESET_DATA`` environment variable
       (``os.pathsep`` separated)
    2. User config directory (``~/.config/towergen/presets/``)
    3. Bundled data shipped with the package

Presets from earlier directories override presets of the same name from
later ones.  Preset values go through :meth:`ParameterSet.from_mapping`,
so malformed values degrade to defaults rather than failing.
"""

from __future__ import annotations

import logging
import os
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from towergen.params import ParameterSet

logger = logging.getLogger(__name__)

TOWERGEN_PRESET_DATA = "TOWERGEN_PRESET_DATA"
PRESET_FILENAME = "presets.yaml"

_BUNDLED_DATA_DIR = Path(__file__).parent / "data"


def clear_cache() -> None:
    """Forget cached directories and documents (after editing preset files)."""
    _get_data_dirs.cache_clear()
    _load_yaml_cached.cache_clear()


@lru_cache(maxsize=None)
def _get_data_dirs() -> tuple[Path, ...]:
    dirs: List[Path] = []

    env_path = os.environ.get(TOWERGEN_PRESET_DATA)
    if env_path:
        for p in env_path.split(os.pathsep):
            p = p.strip()
            if p:
                path = Path(p).expanduser().resolve()
                if path.is_dir():
                    dirs.append(path)
                else:
                    logger.warning("Preset directory %s does not exist", path)

    if sys.platform == "win32":
        config_base = Path(os.environ.get("APPDATA", "~")).expanduser()
    else:
        config_base = Path.home() / ".config"
    user_config = config_base / "towergen" / "presets"
    if user_config.is_dir():
        dirs.append(user_config)

    if _BUNDLED_DATA_DIR.is_dir():
        dirs.append(_BUNDLED_DATA_DIR)

    return tuple(dirs)


@lru_cache(maxsize=32)
def _load_yaml_cached(path_str: str) -> Dict[str, Any]:
    return _load_yaml(Path(path_str))


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load and validate one preset document."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in preset file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid preset format in {path}: expected dict at root")

    schema_version = str(data.get("schema_version", "1.0"))
    if not schema_version.startswith("1."):
        raise ValueError(
            f"Unsupported schema version '{schema_version}' in {path}. "
            f"Expected version 1.x"
        )

    presets = data.get("presets")
    if not isinstance(presets, dict):
        raise ValueError(f"Preset file {path} missing required 'presets' mapping")
    for name, values in presets.items():
        if not isinstance(values, dict):
            raise ValueError(f"Preset '{name}' in {path} must be a mapping")

    logger.debug("Loaded %d presets from %s", len(presets), path)
    return presets


def load_presets(path: Optional[Path] = None) -> Dict[str, Dict[str, Any]]:
    """Return all presets as raw mappings.

    With ``path`` only that file is read; otherwise every search directory
    is merged, earlier directories taking precedence.
    """
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Preset file not found: {path}")
        return dict(_load_yaml_cached(str(path.resolve())))

    merged: Dict[str, Dict[str, Any]] = {}
    for data_dir in reversed(_get_data_dirs()):
        candidate = data_dir / PRESET_FILENAME
        if candidate.exists():
            merged.update(_load_yaml_cached(str(candidate)))
    return merged


def list_presets(path: Optional[Path] = None) -> List[str]:
    return sorted(load_presets(path))


def load_preset(name: str, path: Optional[Path] = None) -> ParameterSet:
    """Return the parameter set stored under ``name``."""
    presets = load_presets(path)
    if name not in presets:
        searched = [str(path)] if path is not None else [str(d) for d in _get_data_dirs()]
        raise FileNotFoundError(
            f"No preset named '{name}'.\n"
            f"Searched: {searched}\n"
            f"Available presets: {sorted(presets)}"
        )
    return ParameterSet.from_mapping(presets[name])


__all__ = [
    "TOWERGEN_PRESET_DATA",
    "clear_cache",
    "list_presets",
    "load_preset",
    "load_presets",
]
