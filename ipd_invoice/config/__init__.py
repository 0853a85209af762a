"""Configuration package."""

from .settings import (
    get_app_name,
    get_app_version,
    get_default_output_dir,
    get_font_path,
    get_letterhead_path,
    get_render_scale,
)

__all__ = [
    'get_app_name',
    'get_app_version',
    'get_default_output_dir',
    'get_font_path',
    'get_letterhead_path',
    'get_render_scale',
]
