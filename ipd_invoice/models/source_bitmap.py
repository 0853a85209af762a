"""Rendered source content handed to the paginator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class SourceBitmap:
    """A fully rendered, read-only source bitmap.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        image: Pixel buffer, or None when only planning pages
    """

    width: int
    height: int
    image: Optional[Image.Image] = None

    def __post_init__(self):
        """Validate dimensions are non-negative and match the image."""
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Bitmap dimensions must be >= 0, got {self.width}x{self.height}"
            )
        if self.image is not None and self.image.size != (self.width, self.height):
            raise ValueError(
                f"Image size {self.image.size} does not match "
                f"bitmap dimensions {(self.width, self.height)}"
            )

    @classmethod
    def from_image(cls, image: Image.Image) -> SourceBitmap:
        """Wrap a Pillow image."""
        width, height = image.size
        return cls(width=width, height=height, image=image)

    @property
    def has_pixels(self) -> bool:
        return self.image is not None
