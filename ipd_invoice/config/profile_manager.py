"""Active layout profile for invoice generation.

The CLI activates one profile per run; generation stages read it through
get_profile(). The "default" profile never fails: without configs/ on disk
it resolves to the built-in A4 letterhead layout.
"""

import logging
from typing import Optional

from .profile_loader import DEFAULT_PROFILE_NAME, LayoutProfile, get_default_profile, load_profile

logger = logging.getLogger(__name__)

_active_profile: Optional[LayoutProfile] = None


def activate_profile(profile_name: str = DEFAULT_PROFILE_NAME) -> LayoutProfile:
    """Make a layout profile the active one for page geometry and rendering.

    Args:
        profile_name: Profile name (YAML file stem under configs/profiles)

    Returns:
        The activated LayoutProfile

    Raises:
        FileNotFoundError: If a non-default profile doesn't exist
        ValueError: If the profile YAML is invalid
    """
    global _active_profile
    if profile_name == DEFAULT_PROFILE_NAME:
        profile = get_default_profile()
    else:
        profile = load_profile(profile_name)

    geometry = profile.geometry()
    logger.info(
        f"Layout profile '{profile.name}': {geometry.page_width:g}x{geometry.page_height:g} pt, "
        f"{geometry.usable_content_height:g} pt usable per page"
    )
    _active_profile = profile
    return profile


def get_profile() -> LayoutProfile:
    """Get the active profile, activating the default on first use."""
    if _active_profile is None:
        return activate_profile(DEFAULT_PROFILE_NAME)
    return _active_profile


def reset_profile() -> None:
    """Forget the active profile; the next get_profile() activates the default."""
    global _active_profile
    _active_profile = None
