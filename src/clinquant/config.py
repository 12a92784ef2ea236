"""Loading and saving variable configurations as YAML or JSON."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .types import VariableConfig

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_YAML_SUFFIXES = (".yaml", ".yml")


def _read(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in _YAML_SUFFIXES:
            return yaml.safe_load(f)
        return json.load(f)


def load_variable_config(path: PathLike) -> VariableConfig:
    """Load one variable configuration from a ``.yaml``/``.yml`` or ``.json`` file.

    Keys follow :meth:`VariableConfig.to_dict`; camelCase keys such as
    ``normalRange`` and ``zoneConfigs`` are accepted.
    """
    path = Path(path)
    data = _read(path)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a variable configuration mapping")
    logger.debug("loaded variable config %s from %s", data.get("name"), path)
    return VariableConfig.from_dict(data)


def load_variable_configs(path: PathLike) -> List[VariableConfig]:
    """Load several configurations from a file holding a ``variables`` list."""
    path = Path(path)
    data = _read(path)
    if isinstance(data, dict):
        data = data.get("variables")
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a list of variable configurations")
    return [VariableConfig.from_dict(item) for item in data]


def save_variable_config(config: VariableConfig, path: PathLike) -> None:
    """Write a configuration; the format follows the file suffix."""
    path = Path(path)
    data: Dict[str, Any] = config.to_dict()
    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in _YAML_SUFFIXES:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
        else:
            json.dump(data, f, indent=2, ensure_ascii=False)
