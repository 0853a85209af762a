"""Layout profile loader for page geometry and rendering options."""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field

from ..models.page_geometry import PageGeometry

DEFAULT_PROFILE_NAME = "default"


@dataclass
class LayoutProfile:
    """Configuration profile for invoice layout."""
    name: str
    description: str = ""
    page: Dict[str, float] = field(default_factory=dict)
    render: Dict[str, Any] = field(default_factory=dict)
    letterhead: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LayoutProfile':
        """Create LayoutProfile from dictionary."""
        return cls(
            name=data.get('name', 'default'),
            description=data.get('description', ''),
            page=data.get('page') or {},
            render=data.get('render') or {},
            letterhead=data.get('letterhead')
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'description': self.description,
            'page': self.page,
            'render': self.render,
            'letterhead': self.letterhead
        }

    def geometry(self) -> PageGeometry:
        """Page geometry for this profile (A4 values fill missing keys)."""
        return PageGeometry.from_dict(self.page)

    @property
    def render_width(self) -> Optional[int]:
        value = self.render.get('width_px')
        return int(value) if value is not None else None

    @property
    def render_scale(self) -> Optional[int]:
        value = self.render.get('scale')
        return int(value) if value is not None else None

    def letterhead_path(self) -> Optional[Path]:
        """Letterhead path, resolved against the project root when relative."""
        if not self.letterhead:
            return None
        path = Path(self.letterhead)
        if not path.is_absolute():
            path = get_profiles_dir().parent.parent / path
        return path


def get_profiles_dir() -> Path:
    """Get directory containing profile YAML files.

    Returns:
        Path to profiles directory
    """
    # ipd_invoice/config/profile_loader.py -> ipd_invoice/config -> ipd_invoice -> root
    project_root = Path(__file__).resolve().parent.parent.parent
    return project_root / "configs" / "profiles"


def load_profile(profile_name: str = DEFAULT_PROFILE_NAME) -> LayoutProfile:
    """Load a layout profile.

    Args:
        profile_name: Name of profile to load (without .yaml extension)

    Returns:
        LayoutProfile object

    Raises:
        FileNotFoundError: If profile file doesn't exist
        ValueError: If profile file is invalid
    """
    profile_path = get_profiles_dir() / f"{profile_name}.yaml"

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_name} (expected at {profile_path})")

    try:
        with open(profile_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in profile {profile_name}: {e}") from e

    if not data:
        raise ValueError(f"Profile file is empty: {profile_path}")
    if not isinstance(data, dict):
        raise ValueError(f"Profile {profile_name} must be a mapping")

    return LayoutProfile.from_dict(data)


def list_available_profiles() -> list[str]:
    """List all available profile names.

    Returns:
        List of profile names (without .yaml extension)
    """
    profiles_dir = get_profiles_dir()

    if not profiles_dir.exists():
        return [DEFAULT_PROFILE_NAME]

    profiles = [profile_file.stem for profile_file in profiles_dir.glob("*.yaml")]
    return sorted(profiles) if profiles else [DEFAULT_PROFILE_NAME]


def get_default_profile() -> LayoutProfile:
    """Get default profile (always available).

    Returns:
        Default LayoutProfile
    """
    try:
        return load_profile(DEFAULT_PROFILE_NAME)
    except FileNotFoundError:
        # No configs/ directory (installed package): A4 letterhead layout
        return LayoutProfile(
            name=DEFAULT_PROFILE_NAME,
            description="A4 portrait with letterhead margins",
            page=PageGeometry.a4().to_dict(),
            render={'width_px': 595, 'scale': 3}
        )
