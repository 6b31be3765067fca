# src/task_tally/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Projects are data (a registry), not copies of the sync function.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from .core.models import Destination, ProjectConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "TALLY"

DEFAULT_ASANA_BASE_URL = "https://app.asana.com/api/1.0"
# Old enough that completed tasks are listed alongside incomplete ones.
DEFAULT_COMPLETED_SINCE = "1970-01-01T00:00:00.000Z"
MAX_PAGE_LIMIT = 100

_PROJECT_ENTRY_RE = re.compile(r"^\s*(?P<gid>[^=\s]+)\s*=\s*(?P<sheet>.+?)\s*!\s*(?P<row>\d+)\s*$")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if present; existing environment wins."""
    from dotenv import load_dotenv

    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def parse_projects(raw: str) -> List[ProjectConfig]:
    """
    Parse a project registry string.

    Entries are separated by ';' or newlines, each `<project_gid>=<sheet name>!<row>`.
    Malformed entries are logged and skipped.
    """
    projects: List[ProjectConfig] = []
    for entry in re.split(r"[;\n]", raw or ""):
        if not entry.strip():
            continue
        m = _PROJECT_ENTRY_RE.match(entry)
        if not m or int(m.group("row")) < 1:
            logger.warning("Ignoring malformed project entry: %r", entry.strip())
            continue
        projects.append(
            ProjectConfig(
                project_gid=m.group("gid"),
                destination=Destination(sheet_name=m.group("sheet"), row=int(m.group("row"))),
            )
        )
    return projects


def projects_from_dicts(items: List[dict[str, Any]]) -> List[ProjectConfig]:
    """Build ProjectConfig objects from `config_local.PROJECTS`-style dicts."""
    projects: List[ProjectConfig] = []
    for item in items:
        try:
            row = int(item["row"])
            gid = str(item["project_gid"]).strip()
            sheet = str(item["sheet_name"]).strip()
        except (KeyError, TypeError, ValueError):
            logger.warning("Ignoring malformed project dict: %r", item)
            continue
        if not gid or not sheet or row < 1:
            logger.warning("Ignoring malformed project dict: %r", item)
            continue
        name = item.get("name")
        projects.append(
            ProjectConfig(
                project_gid=gid,
                destination=Destination(sheet_name=sheet, row=row),
                name=str(name) if name else None,
            )
        )
    return projects


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Upstream (Asana) ----
    asana_access_token: Optional[str]
    asana_base_url: str
    page_limit: int
    completed_since: str
    http_timeout_seconds: float

    # ---- Destination (Google Sheets) ----
    google_credentials_path: Path
    spreadsheet_key: Optional[str]

    # ---- Schedule ----
    sync_interval_seconds: float

    # ---- Project registry ----
    projects: List[ProjectConfig]

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-tally") or "task-tally"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task_tally"))

        asana_access_token = _first_env(_k("ASANA_ACCESS_TOKEN"), "ASANA_ACCESS_TOKEN", default=None)
        asana_base_url = _env(_k("ASANA_BASE_URL"), DEFAULT_ASANA_BASE_URL).rstrip("/")

        page_limit = min(MAX_PAGE_LIMIT, max(1, _env_int(_k("PAGE_LIMIT"), MAX_PAGE_LIMIT)))
        completed_since = _env(_k("COMPLETED_SINCE"), DEFAULT_COMPLETED_SINCE).strip() or DEFAULT_COMPLETED_SINCE
        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 30.0)

        google_credentials_path = _env_path(_k("GOOGLE_CREDENTIALS_PATH"), Path("credentials.json"))
        spreadsheet_key = (_first_env(_k("SPREADSHEET_KEY"), default="") or "").strip() or None

        sync_interval_seconds = _env_float(_k("SYNC_INTERVAL_SECONDS"), 3600.0)

        projects = parse_projects(_env(_k("PROJECTS"), ""))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            asana_access_token=asana_access_token,
            asana_base_url=asana_base_url,
            page_limit=page_limit,
            completed_since=completed_since,
            http_timeout_seconds=http_timeout_seconds,
            google_credentials_path=google_credentials_path,
            spreadsheet_key=spreadsheet_key,
            sync_interval_seconds=sync_interval_seconds,
            projects=projects,
        )


SETTINGS = Settings.from_env()

# ---- Optional local overrides (never committed) ----
# Prefer .env for secrets; use config_local.py only for the project registry.
try:
    import config_local as _config_local  # type: ignore
except ImportError:
    _config_local = None

if _config_local is not None and hasattr(_config_local, "PROJECTS"):
    object.__setattr__(SETTINGS, "projects", projects_from_dicts(list(_config_local.PROJECTS)))  # type: ignore[misc]


def get_settings() -> Settings:
    return SETTINGS
