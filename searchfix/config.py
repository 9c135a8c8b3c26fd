"""
Config file loading for searchfix.

Reads ~/.config/searchfix/config.toml and returns structured config.
Never raises — always returns a valid dict with sensible defaults.
"""

from pathlib import Path

from searchfix.system_info import DEFAULT_LOG_PATH

_CONFIG_PATH = Path.home() / ".config" / "searchfix" / "config.toml"

_BOOL_KEYS = ("verbose_logging", "auto_open_log", "confirm_before_delete")


def default_config() -> dict:
    """Return a fresh dict holding the built-in defaults."""
    return {
        "verbose_logging": False,
        "auto_open_log": False,
        "confirm_before_delete": True,
        "log_path": DEFAULT_LOG_PATH,
    }


def load_config(path: Path | None = None) -> dict:
    """
    Load and return searchfix config from TOML file.

    Returns {"verbose_logging": bool, "auto_open_log": bool,
             "confirm_before_delete": bool, "log_path": Path}.

    Missing file or parse errors return all defaults. A key with the
    wrong type falls back to its own default without discarding the rest.
    """
    config_path = path or _CONFIG_PATH
    config = default_config()

    if not config_path.is_file():
        return config

    try:
        raw = config_path.read_bytes()
    except OSError:
        return config

    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore[no-redef]
        except ModuleNotFoundError:
            return config

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except Exception:
        return config

    for key in _BOOL_KEYS:
        value = data.get(key)
        if isinstance(value, bool):
            config[key] = value

    log_path = data.get("log_path")
    if isinstance(log_path, str) and log_path.strip():
        config["log_path"] = Path(log_path).expanduser()

    return config
