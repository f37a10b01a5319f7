"""Taskflow runtime configuration."""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from taskflow.config_utils import env_bool, env_first, env_float, env_optional_str, env_str


DEFAULT_DRAG_THRESHOLD_PX = 8.0

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

# Column ids whose header colour can be overridden.
COLOR_COLUMNS = ("new", "processing", "done")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class TaskflowConfig:
    """Runtime configuration for the Taskflow app.

    DB selection:
    - TASKFLOW_DATABASE_URL: app-specific DB URL (preferred)
    - PLATFORM_DATABASE_URL: shared DB URL
    - DATABASE_URL: generic fallback
    - If none is set, defaults to local SQLite at data/taskflow.db

    Board:
    - TASKFLOW_DRAG_THRESHOLD_PX: pointer travel before a press becomes a drag (default: 8)
    - TASKFLOW_ROLLBACK_ON_SYNC_FAILURE: move a task back to its last confirmed
      column when its status sync fails (default: true)

    App:
    - TASKFLOW_USER_EMAIL: user preselected in the sidebar
    - TASKFLOW_SEED_DEMO: seed demo users/tasks into an empty DB (default: true)
    - TASKFLOW_LOG_LEVEL: logging level name (default: INFO)

    Theme:
    - TASKFLOW_COLOR_NEW, TASKFLOW_COLOR_PROCESSING, TASKFLOW_COLOR_DONE: hex
      colour for that kanban column header (default: stylesheet colours)
    """

    database_url: str
    drag_threshold_px: float
    rollback_on_sync_failure: bool
    default_user_email: Optional[str]
    seed_demo: bool
    log_level: str
    column_colors: Dict[str, str]

    @classmethod
    def from_env(cls) -> "TaskflowConfig":
        db_url = env_first("TASKFLOW_DATABASE_URL", "PLATFORM_DATABASE_URL", "DATABASE_URL")
        if not db_url:
            data_dir = _repo_root() / "data"
            data_dir.mkdir(parents=True, exist_ok=True)
            db_url = f"sqlite:///{(data_dir / 'taskflow.db').as_posix()}"

        threshold = env_float("TASKFLOW_DRAG_THRESHOLD_PX", DEFAULT_DRAG_THRESHOLD_PX)

        return cls(
            database_url=db_url,
            drag_threshold_px=max(0.0, threshold),
            rollback_on_sync_failure=env_bool("TASKFLOW_ROLLBACK_ON_SYNC_FAILURE", True),
            default_user_email=env_optional_str("TASKFLOW_USER_EMAIL"),
            seed_demo=env_bool("TASKFLOW_SEED_DEMO", True),
            log_level=env_str("TASKFLOW_LOG_LEVEL", "INFO").upper(),
            column_colors=_column_colors(),
        )


def _column_colors() -> Dict[str, str]:
    colors = {}
    for column_id in COLOR_COLUMNS:
        value = env_optional_str(f"TASKFLOW_COLOR_{column_id.upper()}")
        if value and _HEX_COLOR.match(value):
            colors[column_id] = value
    return colors


_config: Optional[TaskflowConfig] = None


def get_config() -> TaskflowConfig:
    """Get the Taskflow configuration (cached)."""
    global _config
    if _config is None:
        _config = TaskflowConfig.from_env()
    return _config


def reset_config() -> None:
    global _config
    _config = None


def configure_logging(cfg: Optional[TaskflowConfig] = None) -> None:
    """Send Taskflow logs to stdout. Safe to call on every Streamlit rerun."""
    cfg = cfg or get_config()
    level = getattr(logging, cfg.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format=_LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("taskflow").setLevel(level)
