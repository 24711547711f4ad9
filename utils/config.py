"""
Configuration Module
====================
Loads per-platform scraper settings from the bundled utils/platforms.json.

Environment overrides:
- SCRAPER_CONFIG: path to an alternate platforms.json
- GITHUB_TOKEN: enables GitHub GraphQL (pinned repos) and higher REST limits
- SCRAPER_LOG_LEVEL: logging level name (default INFO)
"""

import json
import os
from pathlib import Path
from typing import Dict, Optional

PACKAGE_DIR = Path(__file__).parent
DEFAULT_CONFIG_PATH = PACKAGE_DIR / "platforms.json"


def load_config(config_path: Optional[str] = None) -> Dict:
    """
    Load the platform configuration file.

    Args:
        config_path: Explicit path; falls back to $SCRAPER_CONFIG, then the bundled file

    Returns:
        Parsed configuration dict with 'platforms' and 'default_headers' keys
    """
    path = Path(config_path or os.getenv("SCRAPER_CONFIG") or DEFAULT_CONFIG_PATH)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        config = json.load(f)

    config.setdefault('platforms', {})
    config.setdefault('default_headers', {})
    return config


def get_github_token() -> Optional[str]:
    """Return the GitHub token if one is configured (blank counts as unset)."""
    token = os.getenv("GITHUB_TOKEN", "").strip()
    return token or None


def get_log_level() -> str:
    return os.getenv("SCRAPER_LOG_LEVEL", "INFO").upper()
