"""Central configuration for IPD invoice generation."""

import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_RENDER_SCALE = 3


def get_app_name() -> str:
    """Get application name."""
    return "IPD Invoice"


def get_project_root() -> Path:
    """Repository root (ipd_invoice/config/settings.py -> ipd_invoice/config -> ipd_invoice -> root)."""
    return Path(__file__).resolve().parent.parent.parent


def get_app_version() -> str:
    """Get application version from pyproject.toml."""
    try:
        import tomli
        pyproject_path = get_project_root() / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            pyproject = tomli.load(f)
            return pyproject.get("project", {}).get("version", "0.1.0")
    except Exception:
        # Installed without the source tree
        return "0.1.0"


def get_default_output_dir() -> Path:
    """Get default output directory.

    Uses IPD_INVOICE_OUTPUT_DIR when set, otherwise project root / "out".

    Returns:
        Path object to default output directory (created if needed)
    """
    env_dir = os.getenv("IPD_INVOICE_OUTPUT_DIR")
    output_dir = Path(env_dir) if env_dir else get_project_root() / "out"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def get_letterhead_path() -> Optional[Path]:
    """Get letterhead image path.

    Returns:
        Path from IPD_INVOICE_LETTERHEAD, or None (pages get no letterhead)
    """
    env_path = os.getenv("IPD_INVOICE_LETTERHEAD")
    if not env_path:
        return None
    path = Path(env_path)
    if not path.is_file():
        logger.warning(f"Letterhead not found at {path}, continuing without letterhead")
        return None
    return path


def get_render_scale() -> Optional[int]:
    """Get render scale override (pixels per layout unit).

    Returns:
        IPD_INVOICE_RENDER_SCALE as a positive int, or None when unset or invalid
        (the layout profile's scale applies)
    """
    env_value = os.getenv("IPD_INVOICE_RENDER_SCALE")
    if not env_value:
        return None
    try:
        scale = int(env_value)
    except ValueError:
        logger.warning(f"Invalid render scale: {env_value}, using profile scale")
        return None
    if scale < 1:
        logger.warning(f"Render scale must be >= 1, got {scale}, using profile scale")
        return None
    return scale


def get_font_path() -> Optional[str]:
    """Get TrueType font path for invoice text (None uses Pillow's default font)."""
    return os.getenv("IPD_INVOICE_FONT") or None
