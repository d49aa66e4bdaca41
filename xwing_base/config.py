"""Engine configuration.

Settings come from an optional JSON file merged over built-in defaults, so a
config file only needs the keys it changes::

    {
        "assets": {"root": "https://example.org/img", "timeout_sec": 5},
        "export": {"filename_prefix": "my-base"}
    }
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from xwing_base.exporter import DEFAULT_PREFIX
from xwing_base.loader import DEFAULT_TIMEOUT
from xwing_base.types import ExecutionContext

DEFAULT_CONFIG_PATH = Path("xwing_base.json")

_DEFAULTS: Dict[str, Any] = {
    "assets": {
        "root": "assets/img",
        "context": None,
        "timeout_sec": DEFAULT_TIMEOUT,
    },
    "export": {
        "filename_prefix": DEFAULT_PREFIX,
    },
    "fonts": {
        "regular": None,
        "bold": None,
    },
}


@dataclass(frozen=True)
class EngineConfig:
    """Runtime settings for :class:`~xwing_base.engine.RenderEngine`.

    Attributes:
        asset_root: Directory or http(s) base URL of the asset namespace.
        context: Execution context; ``None`` detects it from ``asset_root``.
        request_timeout: Seconds allowed per network asset request.
        filename_prefix: Prefix for exported file names.
        font_path: Regular weight TrueType font override.
        bold_font_path: Bold weight TrueType font override.
    """

    asset_root: str = "assets/img"
    context: Optional[ExecutionContext] = None
    request_timeout: float = DEFAULT_TIMEOUT
    filename_prefix: str = DEFAULT_PREFIX
    font_path: Optional[str] = None
    bold_font_path: Optional[str] = None


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def config_from_mapping(raw: Dict[str, Any]) -> EngineConfig:
    """Build an :class:`EngineConfig` from a (partial) nested mapping.

    Raises:
        ValueError: If ``assets.context`` names an unknown execution context.
    """
    merged = _deep_merge(_DEFAULTS, raw)
    assets = merged["assets"]
    context = assets.get("context")
    return EngineConfig(
        asset_root=str(assets["root"]),
        context=ExecutionContext(context) if context else None,
        request_timeout=float(assets["timeout_sec"]),
        filename_prefix=str(merged["export"]["filename_prefix"]),
        font_path=merged["fonts"].get("regular"),
        bold_font_path=merged["fonts"].get("bold"),
    )


def load_config(path: Optional[Path] = None) -> EngineConfig:
    """Read ``path`` (default ``xwing_base.json``); defaults if it is missing."""
    config_path = path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            return config_from_mapping(json.load(f))
    return config_from_mapping({})
