from __future__ import annotations

import json

from rich import print

from ordertrack.config import (
    OrderTrackConfig,
    get_config_path,
    get_env_overrides,
    load_config,
)

from .common import fail, read_config_or_exit, write_config_or_exit

_BOOL_KEYS = {"warn_on_preview_save"}


def config_show_cmd() -> None:
    cfg = load_config()
    print(f"Config file: {get_config_path()}")
    print(json.dumps(cfg.to_dict(), indent=2))
    overrides = get_env_overrides()
    if overrides:
        print("[yellow]Environment overrides:[/yellow] " + ", ".join(sorted(overrides)))


def config_set_cmd(*, key: str, value: str) -> None:
    if key not in OrderTrackConfig.__dataclass_fields__:
        fail(f"Unknown config key: {key}")
    data = read_config_or_exit()
    if value == "":
        data.pop(key, None)
    elif key in _BOOL_KEYS:
        lowered = value.strip().lower()
        if lowered not in {"1", "true", "yes", "on", "0", "false", "no", "off"}:
            fail(f"{key} expects a boolean")
        data[key] = lowered in {"1", "true", "yes", "on"}
    else:
        data[key] = value
    write_config_or_exit(data)
    print(f"[green]✓ Set {key}[/green]")
