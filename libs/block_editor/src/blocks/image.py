"""Élément Image : src obligatoire, dimensions optionnelles."""
from typing import Literal, Optional

from pydantic import Field

from .base import BlockContent, RequiredUrl


class ImageContent(BlockContent):
    SEED = {"src": "https://placehold.co/600x400", "alt": "Image"}

    src: RequiredUrl
    alt: str = ""
    width: Optional[int] = Field(default=None, ge=1, le=2000)
    height: Optional[int] = Field(default=None, ge=1, le=2000)
    object_fit: Literal["cover", "contain", "fill", "none"] = "cover"
