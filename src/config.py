"""Configuration settings for the case event generator."""

import getpass
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DIR_NAME = "covid-datagenerator"
DB_FILE = "data-gen.db"


def get_data_directory() -> Path:
    """Get the directory holding the persistent store, creating it if missing."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if not xdg_data:
        try:
            xdg_data = str(Path.home() / ".local" / "share")
        except RuntimeError:
            xdg_data = None

    if xdg_data:
        data_dir = Path(xdg_data) / APP_DIR_NAME
    else:
        try:
            user = getpass.getuser()
        except (KeyError, OSError):
            user = "unknown"
        data_dir = Path(tempfile.gettempdir()) / user.replace("\\", "") / APP_DIR_NAME

    if not data_dir.exists():
        logger.debug(f"Directory {data_dir} doesn't exist - creating now")
        data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_database_uri(database_path: str = None) -> str:
    """Get SQLAlchemy database URI from arguments or environment variables."""
    if database_path:
        Path(database_path).parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{database_path}"

    uri = os.environ.get("CASE_EVENTS_DATABASE_URI")
    if uri:
        return uri
    return f"sqlite:///{get_data_directory() / DB_FILE}"


def get_redis_host_and_port():
    """Get Redis connection details from environment variables."""
    host = os.environ.get("REDIS_HOST", "localhost")
    port = int(os.environ.get("REDIS_PORT", "6379"))
    return dict(host=host, port=port)


def get_publish_channel():
    """Get the Redis channel case events are published to, if any."""
    return os.environ.get("CASE_EVENTS_PUBLISH_CHANNEL") or None


def get_log_level() -> str:
    """Get log level from environment variables."""
    return os.environ.get("CASE_EVENTS_LOG_LEVEL", "debug").lower()
