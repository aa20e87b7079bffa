"""
Config file loading for mediarun.

Reads ~/.config/mediarun/config.toml and returns structured config.
Never raises — always returns a valid dict with sensible defaults.
"""

from pathlib import Path

_CONFIG_PATH = Path.home() / ".config" / "mediarun" / "config.toml"

DEFAULT_SHELL = "/bin/sh"
DEFAULT_POLL_INTERVAL = 0.5


def default_config() -> dict:
    return {"shell": DEFAULT_SHELL, "poll_interval": DEFAULT_POLL_INTERVAL}


def load_config(path: Path | None = None) -> dict:
    """
    Load and return mediarun config from TOML file.

    Returns {"shell": str, "poll_interval": float} — always valid, never raises.
    Missing file, parse errors, or bad shapes fall back to defaults per key.
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

    shell = data.get("shell")
    if isinstance(shell, str) and shell.startswith("/"):
        config["shell"] = shell

    interval = data.get("poll_interval")
    # bool is an int subclass; `poll_interval = true` is not a number here
    if isinstance(interval, (int, float)) and not isinstance(interval, bool) and interval > 0:
        config["poll_interval"] = float(interval)

    return config
