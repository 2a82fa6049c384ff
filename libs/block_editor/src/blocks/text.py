"""Élément Text : paragraphe."""
from typing import Literal, Optional

from pydantic import Field

from .base import BlockContent, HexColor


class TextContent(BlockContent):
    SEED = {"content": "Cliquez pour modifier le texte", "fontSize": 16, "fontWeight": "400", "color": "#333333"}

    layer_name: str = "Texte"
    content: str = Field(default="Saisissez votre texte ici...", min_length=1)
    alignment: Literal["left", "center", "right", "justify"] = "left"
    color: Optional[HexColor] = None
    font_size: Optional[int] = Field(default=None, ge=8, le=72)
    font_weight: Optional[str] = None
