"""YAML config loading plus dotted-path get/set for ``heatshield config``."""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from heatshield.config.defaults import DEFAULT_COOL_ZONES
from heatshield.config.schema import HeatShieldConfig

logger = logging.getLogger(__name__)

API_KEY_ENV = "OPENWEATHER_API_KEY"

_TRUTHY = {"1", "true", "yes", "on"}


def read_raw_config(path: str | Path) -> dict:
    """The YAML mapping exactly as written in ``path``; empty when the file is missing."""
    try:
        return yaml.safe_load(Path(path).read_text()) or {}
    except FileNotFoundError:
        return {}


def build_config(raw: dict) -> HeatShieldConfig:
    """Validate a raw mapping into the effective config.

    An empty ``cool_zones`` list is filled with DEFAULT_COOL_ZONES and a
    non-blank OPENWEATHER_API_KEY in the environment wins over
    ``weather.api_key``. ``raw`` itself is left untouched.
    """
    data = copy.deepcopy(raw)
    if not data.get("cool_zones"):
        data["cool_zones"] = [zone.model_dump() for zone in DEFAULT_COOL_ZONES]

    env_key = os.environ.get(API_KEY_ENV, "").strip()
    if env_key:
        if not isinstance(data.get("weather"), dict):
            data["weather"] = {}
        data["weather"]["api_key"] = env_key

    return HeatShieldConfig(**data)


def load_config(path: str | Path) -> HeatShieldConfig:
    """Read ``path`` into a validated HeatShieldConfig. A missing or empty file gives the defaults."""
    path = Path(path)
    if not path.exists():
        logger.warning("No config at %s, falling back to built-in defaults", path)
    return build_config(read_raw_config(path))


def _walk(data: Any, parts: list[str], dotted_key: str) -> Any:
    node = data
    for part in parts:
        try:
            node = node[int(part)] if isinstance(node, list) else node[part]
        except (KeyError, IndexError, ValueError, TypeError):
            raise KeyError(f"Config key not found: {dotted_key}") from None
    return node


def get_config_value(config: HeatShieldConfig, dotted_key: str) -> Any:
    """Look up a JSON-form value such as ``zones.search_radius_m`` or ``cool_zones.0.name``."""
    return _walk(config.model_dump(mode="json"), dotted_key.split("."), dotted_key)


def _coerce(current: Any, value: Any) -> Any:
    """Convert CLI string input to the type of the value it replaces."""
    if not isinstance(value, str):
        return value
    if isinstance(current, bool):
        return value.lower() in _TRUTHY
    if isinstance(current, (int, float)):
        return type(current)(value)
    return value


def set_config_value(
    config: HeatShieldConfig, dotted_key: str, value: Any
) -> HeatShieldConfig:
    """Return a re-validated copy of ``config`` with one field replaced.

    Raises KeyError if the path does not exist and pydantic's ValidationError
    if the new value breaks a constraint.
    """
    data = config.model_dump(mode="json")
    *parents, leaf = dotted_key.split(".")
    container = _walk(data, parents, dotted_key)
    if not isinstance(container, dict) or leaf not in container:
        raise KeyError(f"Config key not found: {dotted_key}")
    container[leaf] = _coerce(container[leaf], value)
    return HeatShieldConfig(**data)


def set_config_file_value(path: str | Path, dotted_key: str, value: Any) -> HeatShieldConfig:
    """Change one value in the YAML file at ``path`` and return the new effective config.

    Only the named key is written. Values injected at load time (the
    environment API key, the default cool zones) stay out of the file unless
    the key being set lives under them.
    """
    raw = read_raw_config(path)
    effective = build_config(raw)
    new_value = get_config_value(set_config_value(effective, dotted_key, value), dotted_key)

    *parents, leaf = dotted_key.split(".")
    if parents and parents[0] == "cool_zones" and not raw.get("cool_zones"):
        raw["cool_zones"] = effective.model_dump(mode="json")["cool_zones"]
    node = raw
    for part in parents:
        if isinstance(node, list):
            node = node[int(part)]
        else:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
    node[leaf] = new_value

    updated = build_config(raw)
    Path(path).write_text(
        yaml.safe_dump(raw, default_flow_style=False, sort_keys=False, allow_unicode=True)
    )
    return updated
