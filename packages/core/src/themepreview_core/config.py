import logging
import os
from pathlib import Path
from typing import Optional

import yaml

from themepreview_core.blueprint import (
    DEFAULT_PLAYGROUND_URL,
    DEFAULT_PROXY_URL,
    DEFAULT_VALIDATION_PLUGIN,
    normalize_blueprint,
)
from themepreview_core.exceptions import ConfigError
from themepreview_core.manifest import MANIFEST_FILE

logger = logging.getLogger(__name__)

COMMENT_MODE = "comment"
DESCRIPTION_MODE = "append-to-description"
PREVIEW_MODES = (COMMENT_MODE, DESCRIPTION_MODE)
DIFF_SOURCES = ("git", "api")

DEFAULT_CONFIG: dict = {
    "manifest_file": MANIFEST_FILE,
    "bot_login": "github-actions[bot]",
    "playground_url": DEFAULT_PLAYGROUND_URL,
    "proxy_url": DEFAULT_PROXY_URL,
    "base_ref": "origin/trunk",
    "fetch_base": True,
    "diff_source": "git",  # "git" = local git diff, "api" = pull request files API
    "install_theme_check": True,
    "validation_plugin": DEFAULT_VALIDATION_PLUGIN,
    "login_username": "admin",
    "login_password": "password",
    "single_theme": False,  # the repository root is one theme
    "theme_dir": ".",  # theme directory in single-theme mode
    "theme_slug": None,  # slug used when style.css has no Text Domain
    "events": ["pull_request", "pull_request_target"],
    "preview_mode": COMMENT_MODE,
    "blueprint": None,  # JSON replacing every generated blueprint
    "comment_template": None,
    "description_template": None,
    "restore_button_if_removed": True,
}


def load_config(config_path: str = ".themepreview.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .themepreview.yml in the current directory
      3. CLI argument overrides

    The merged result is validated; bad values raise ConfigError or
    InvalidBlueprintError before anything touches the pull request.
    """
    config = {**DEFAULT_CONFIG, "events": list(DEFAULT_CONFIG["events"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping of settings.")
        logger.debug("Loaded %d setting(s) from %s", len(file_config), config_path)
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    validate_config(config)

    # GitHub Actions environment
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["github_repository"] = os.environ.get("GITHUB_REPOSITORY")
    config["github_event_path"] = os.environ.get("GITHUB_EVENT_PATH")
    config["github_event_name"] = os.environ.get("GITHUB_EVENT_NAME")

    return config


def validate_config(config: dict) -> dict:
    """Check value types in place. A single event name is turned into a list."""
    if config.get("diff_source") not in DIFF_SOURCES:
        raise ConfigError(f"diff_source must be one of {', '.join(DIFF_SOURCES)}, got {config.get('diff_source')!r}.")
    if config.get("preview_mode") not in PREVIEW_MODES:
        raise ConfigError(
            f"preview_mode must be one of {', '.join(PREVIEW_MODES)}, got {config.get('preview_mode')!r}."
        )

    events = config.get("events")
    if isinstance(events, str):
        logger.debug("events is a single name, using [%r]", events)
        config["events"] = [events]
    elif not isinstance(events, list) or not all(isinstance(e, str) for e in events):
        raise ConfigError("events must be a list of event names.")

    for key in ("comment_template", "description_template", "theme_slug"):
        if config.get(key) is not None and not isinstance(config[key], str):
            raise ConfigError(f"{key} must be a string.")

    config["blueprint"] = normalize_blueprint(config.get("blueprint"))
    return config


def blueprint_options(config: dict) -> dict:
    """Pick the build_blueprint keyword arguments out of ``config``."""
    return {
        "proxy_url": config.get("proxy_url", DEFAULT_PROXY_URL),
        "install_validation_plugin": config.get("install_theme_check", True),
        "validation_plugin": config.get("validation_plugin", DEFAULT_VALIDATION_PLUGIN),
        "username": config.get("login_username", "admin"),
        "password": config.get("login_password", "password"),
    }
