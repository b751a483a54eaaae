"""
Centralized environment variable loading for Storygrid.

Loads ``.env`` once and exposes API key getters with fallbacks.

Usage:
    from storygrid.core.env_loader import ensure_env_loaded
    ensure_env_loaded()
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

_env_loaded = False


def get_project_root() -> Path:
    """Get the project root directory (where .env is located)."""
    # storygrid/core/env_loader.py -> two levels up
    return Path(__file__).parent.parent.parent


def ensure_env_loaded(override: bool = False) -> bool:
    """
    Ensure environment variables from .env are loaded.

    Looks in the current working directory first, then the project root.

    Args:
        override: If True, .env values replace variables already set

    Returns:
        True if a .env file was loaded, False if already loaded or not found
    """
    global _env_loaded

    if _env_loaded:
        return False

    for env_path in (Path.cwd() / ".env", get_project_root() / ".env"):
        if env_path.exists():
            load_dotenv(env_path, override=override)
            _env_loaded = True
            return True

    return False


def get_api_key(key_name: str, fallback_keys: Optional[List[str]] = None) -> Optional[str]:
    """
    Get an API key from environment, with fallback options.

    Args:
        key_name: Primary environment variable name
        fallback_keys: List of fallback variable names to try

    Returns:
        API key value or None if not found
    """
    ensure_env_loaded()

    value = os.getenv(key_name)
    if value:
        return value

    for fallback in fallback_keys or []:
        value = os.getenv(fallback)
        if value:
            return value

    return None


def get_google_api_key() -> Optional[str]:
    """Get Google/Gemini API key."""
    return get_api_key("GOOGLE_API_KEY", ["GEMINI_API_KEY"])
