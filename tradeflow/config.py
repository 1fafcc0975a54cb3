"""Configuration and login identity.

Configuration lives in ``~/.config/tradeflow/config.toml``; the logged-in
owner is kept next to it in ``session.json``. ``TRADEFLOW_CONFIG_DIR``
moves both, and ``TRADEFLOW_USER`` overrides the stored owner.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import toml

from tradeflow.errors import NotAuthenticatedError

logger = logging.getLogger(__name__)


CONFIG_DIR_ENV = "TRADEFLOW_CONFIG_DIR"
USER_ENV = "TRADEFLOW_USER"

CONFIG_FILE = "config.toml"
SESSION_FILE = "session.json"
DB_FILE = "tradeflow.db"


def get_config_dir() -> Path:
    """Directory holding the config, session and default database."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "tradeflow"


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILE


def load_config() -> dict[str, Any]:
    """Load the configuration file.

    Returns:
        Config dict, empty if the file is missing or unreadable.
    """
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    try:
        return toml.load(config_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return {}


def create_template_config() -> Path:
    """Write a template configuration file and return its path."""
    config_dir = get_config_dir()
    config_path = config_dir / CONFIG_FILE

    config_dir.mkdir(parents=True, exist_ok=True)

    template = {
        "openai": {
            "api_key": "",  # Leave empty to use OPENAI_API_KEY env var
            "model": "gpt-4o",
        },
        "database": {
            "path": str(config_dir / DB_FILE),
        },
    }

    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path


def get_db_path(config: Optional[dict[str, Any]] = None) -> Path:
    """Database location from config, defaulting to the config directory."""
    config = load_config() if config is None else config
    path = config.get("database", {}).get("path")
    if path:
        return Path(path).expanduser()
    return get_config_dir() / DB_FILE


def get_openai_setting(key: str, config: Optional[dict[str, Any]] = None) -> Optional[str]:
    """Read a value from the [openai] section; blank values count as unset."""
    config = load_config() if config is None else config
    value = config.get("openai", {}).get(key)
    return value or None


# ==================== Session ====================


def _session_path() -> Path:
    return get_config_dir() / SESSION_FILE


def save_session(owner: str) -> Path:
    """Remember the logged-in owner."""
    session_path = _session_path()
    session_path.parent.mkdir(parents=True, exist_ok=True)
    with open(session_path, "w") as f:
        json.dump({"owner": owner}, f)
    return session_path


def clear_session() -> bool:
    """Forget the logged-in owner. Returns False if nobody was logged in."""
    session_path = _session_path()
    if not session_path.exists():
        return False
    session_path.unlink()
    return True


def get_owner() -> Optional[str]:
    """Current owner key from TRADEFLOW_USER or the session file."""
    override = os.environ.get(USER_ENV, "").strip()
    if override:
        return override

    session_path = _session_path()
    if not session_path.exists():
        return None
    try:
        with open(session_path) as f:
            owner = json.load(f).get("owner")
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable session %s: %s", session_path, e)
        return None
    return owner.strip() if isinstance(owner, str) and owner.strip() else None


def require_login() -> str:
    """Current owner key, or raise if nobody is logged in."""
    owner = get_owner()
    if owner is None:
        raise NotAuthenticatedError(
            "Not logged in. Run 'tradeflow login NAME' or set TRADEFLOW_USER."
        )
    return owner
