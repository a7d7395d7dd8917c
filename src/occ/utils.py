"""
Utility functions for occ.
"""

import sys
from typing import Optional

from .constants import CONTAINER_IMAGE_NAME, DEFAULT_IMAGE_TAG, PLATFORM_MAC


def current_platform(system: Optional[str] = None) -> str:
    """Return the platform name used when choosing mounts and environment."""
    system = system or sys.platform
    if system == "darwin":
        return PLATFORM_MAC
    return system


def image_reference(tag: Optional[str] = None) -> str:
    """Build the container image reference for a tag."""
    return f"{CONTAINER_IMAGE_NAME}:{tag or DEFAULT_IMAGE_TAG}"


def parse_bool(value: object) -> bool:
    """Interpret a config or environment value as a boolean."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ["1", "true", "yes", "y", "on"]
