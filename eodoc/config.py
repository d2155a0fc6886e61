"""Configuration loading for eodoc (.eodoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".eodoc.yml"
TRANSFORM_ERROR_POLICIES = ("fail", "skip")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class DocsConfig:
    """Effective settings for one documentation run."""

    input_dir: str = "1-parse"
    output_dir: str = "docs"
    stylesheet: Optional[Path] = None
    transformer: Optional[Path] = None
    sort: bool = True
    on_transform_error: str = "fail"

    def with_overrides(self, **overrides: Any) -> "DocsConfig":
        """Return a copy with every non-``None`` override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if "on_transform_error" in values:
            values["on_transform_error"] = _as_policy(values["on_transform_error"])
        return replace(self, **values)


def load_config(target: str | Path) -> DocsConfig:
    """Load configuration for ``target``; defaults apply when no file exists."""
    config_file = _resolve_config_path(Path(target))
    root = config_file.parent

    if not config_file.exists():
        return DocsConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    docs = _as_dict(data.get("docs"))
    defaults = DocsConfig()
    stylesheet = _as_str(docs.get("stylesheet"))
    transformer = _as_str(docs.get("transformer"))
    sort = _as_bool(docs.get("sort"))

    return DocsConfig(
        input_dir=_as_str(docs.get("input_dir")) or defaults.input_dir,
        output_dir=_as_str(docs.get("output_dir")) or defaults.output_dir,
        stylesheet=(root / stylesheet) if stylesheet else None,
        transformer=(root / transformer) if transformer else None,
        sort=defaults.sort if sort is None else sort,
        on_transform_error=_as_policy(docs.get("on_transform_error", defaults.on_transform_error)),
    )


def _resolve_config_path(target: Path) -> Path:
    target = target.expanduser()
    if target.name == CONFIG_FILENAME:
        return target.resolve()
    return (target / CONFIG_FILENAME).resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_policy(value: Any) -> str:
    policy = str(value).strip().lower()
    if policy not in TRANSFORM_ERROR_POLICIES:
        allowed = ", ".join(TRANSFORM_ERROR_POLICIES)
        raise ConfigError(f"on_transform_error must be one of {allowed}, got {value!r}")
    return policy


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None
