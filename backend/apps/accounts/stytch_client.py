"""
Stytch consumer client factory.

Each call builds a fresh client from settings; callers pass it down
explicitly instead of sharing a module-level instance.
"""

import stytch

from config.settings.base import settings


def get_stytch_client() -> stytch.Client:
    """Build a Stytch consumer client configured from settings."""
    return stytch.Client(
        project_id=settings.STYTCH_PROJECT_ID,
        secret=settings.STYTCH_SECRET,
    )
