"""Configuration helpers for the collections summary pipeline."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .models import AUTO_DIALER, PAYMENT_PROMISE

LOGGER = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when configuration files are missing or malformed."""


_SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}


def load_configuration(path: str | Path) -> Dict[str, Any]:
    """Load configuration data from a JSON or YAML file."""

    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file '{file_path}' was not found")

    if file_path.suffix.lower() not in _SUPPORTED_EXTENSIONS:
        raise ConfigurationError(
            f"Unsupported configuration format '{file_path.suffix}'. Supported extensions: {sorted(_SUPPORTED_EXTENSIONS)}"
        )

    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - dependency optional
            raise ConfigurationError(
                "YAML configuration requires the 'pyyaml' package to be installed"
            ) from exc
        data = yaml.safe_load(text)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{file_path}' must contain a mapping at the top level")
    return data


@dataclass
class PipelineSettings:
    """Typed view over the configuration mapping."""

    dialer_actor: str = AUTO_DIALER
    promise_outcome: str = PAYMENT_PROMISE
    concurrent: bool = False
    max_workers: Optional[int] = None
    event_columns: Dict[str, Any] = field(default_factory=dict)
    assignment_columns: Dict[str, Any] = field(default_factory=dict)
    follow_up_days: int = 7
    min_activities_without_promise: int = 5

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "PipelineSettings":
        columns = config.get("columns") or {}
        if not isinstance(columns, Mapping):
            raise ConfigurationError("'columns' must be a mapping with 'events' and/or 'assignments' keys")

        unknown = set(config) - _KNOWN_KEYS
        for key in sorted(unknown):
            LOGGER.debug("Ignoring unknown configuration key %s", key)

        max_workers = config.get("max_workers")
        try:
            return cls(
                dialer_actor=str(config.get("dialer_actor", AUTO_DIALER)),
                promise_outcome=str(config.get("promise_outcome", PAYMENT_PROMISE)),
                concurrent=_as_bool(config.get("concurrent", False)),
                max_workers=int(max_workers) if max_workers is not None else None,
                event_columns=dict(columns.get("events") or {}),
                assignment_columns=dict(columns.get("assignments") or {}),
                follow_up_days=int(config.get("follow_up_days", 7)),
                min_activities_without_promise=int(config.get("min_activities_without_promise", 5)),
            )
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid configuration value: {exc}") from exc


_KNOWN_KEYS = {
    "dialer_actor",
    "promise_outcome",
    "concurrent",
    "max_workers",
    "columns",
    "follow_up_days",
    "min_activities_without_promise",
}

_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0", ""}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
    raise ValueError(f"expected a boolean, got {value!r}")


def load_settings(path: str | Path | None) -> PipelineSettings:
    """Return settings from ``path``, or defaults when no file is given."""

    if path is None:
        return PipelineSettings()
    return PipelineSettings.from_mapping(load_configuration(path))
