from __future__ import annotations

import json
import os
import warnings
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path("~/.config/ordertrack/config.json").expanduser()
DEFAULT_DATA_DIR = "~/.ordertrack"

CONFIG_ENV_OVERRIDES = {
    "data_dir": "ORDERTRACK_DATA_DIR",
    "session_id": "ORDERTRACK_SESSION",
    "log_level": "ORDERTRACK_LOG_LEVEL",
    "warn_on_preview_save": "ORDERTRACK_WARN_ON_PREVIEW_SAVE",
    "default_category": "ORDERTRACK_DEFAULT_CATEGORY",
}

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def get_config_path(path: Path | None = None) -> Path:
    candidate = path or Path(os.getenv("ORDERTRACK_CONFIG", DEFAULT_CONFIG_PATH))
    return candidate.expanduser()


def read_config_file(path: Path | None = None) -> dict[str, Any]:
    config_path = get_config_path(path)
    if not config_path.exists():
        return {}
    raw = config_path.read_text()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid config json") from exc
    if not isinstance(data, dict):
        raise ValueError("config must be an object")
    return data


def write_config_file(data: dict[str, Any], path: Path | None = None) -> Path:
    config_path = get_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n")
    return config_path


def get_env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, env_var in CONFIG_ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value is not None:
            overrides[key] = value
    return overrides


@dataclass
class OrderTrackConfig:
    data_dir: str = DEFAULT_DATA_DIR
    # None means "one session per parent shell"
    session_id: str | None = None
    log_level: str = "WARNING"
    warn_on_preview_save: bool = True
    default_category: str = "Default"

    def resolved_session_id(self) -> str:
        return self.session_id or str(os.getppid())

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    if value.lower() in {"1", "true", "yes", "on"}:
        return True
    if value.lower() in {"0", "false", "off", "no"}:
        return False
    return default


def _coerce_bool(value: object, default: bool, *, key: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return _parse_bool(value, default)
    warnings.warn(f"Invalid bool for {key}: {value!r}", RuntimeWarning, stacklevel=2)
    return default


def _coerce_log_level(value: object, default: str, *, key: str) -> str:
    if value is None:
        return default
    if isinstance(value, str) and value.strip().upper() in LOG_LEVELS:
        return value.strip().upper()
    warnings.warn(f"Invalid log level for {key}: {value!r}", RuntimeWarning, stacklevel=2)
    return default


def _coerce_str(value: object, default: str | None, *, key: str) -> str | None:
    if value is None:
        return default
    if isinstance(value, (str, int)) and str(value).strip():
        return str(value).strip()
    warnings.warn(f"Invalid string for {key}: {value!r}", RuntimeWarning, stacklevel=2)
    return default


def load_config(path: Path | None = None) -> OrderTrackConfig:
    cfg = OrderTrackConfig()
    config_path = get_config_path(path)
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
        except json.JSONDecodeError:
            data = {}
        if isinstance(data, dict):
            cfg = _apply_dict(cfg, data)
    cfg = _apply_env(cfg)
    return cfg


def _apply_dict(cfg: OrderTrackConfig, data: dict[str, Any]) -> OrderTrackConfig:
    for key, value in data.items():
        if not hasattr(cfg, key):
            continue
        if key == "warn_on_preview_save":
            cfg.warn_on_preview_save = _coerce_bool(value, cfg.warn_on_preview_save, key=key)
            continue
        if key == "log_level":
            cfg.log_level = _coerce_log_level(value, cfg.log_level, key=key)
            continue
        setattr(cfg, key, _coerce_str(value, getattr(cfg, key), key=key))
    return cfg


def _apply_env(cfg: OrderTrackConfig) -> OrderTrackConfig:
    cfg.data_dir = os.getenv("ORDERTRACK_DATA_DIR", cfg.data_dir)
    cfg.session_id = os.getenv("ORDERTRACK_SESSION", cfg.session_id)
    cfg.log_level = _coerce_log_level(
        os.getenv("ORDERTRACK_LOG_LEVEL"), cfg.log_level, key="log_level"
    )
    cfg.warn_on_preview_save = _parse_bool(
        os.getenv("ORDERTRACK_WARN_ON_PREVIEW_SAVE"), cfg.warn_on_preview_save
    )
    cfg.default_category = os.getenv("ORDERTRACK_DEFAULT_CATEGORY", cfg.default_category)
    return cfg
