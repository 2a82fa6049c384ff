"""Élément Heading : titre h1..h6."""
from typing import Literal, Optional

from pydantic import Field

from .base import BlockContent, HexColor


class HeadingContent(BlockContent):
    SEED = {"level": "h1", "fontSize": 32, "fontWeight": "700", "color": "#000000"}

    layer_name: str = "Titre"
    text: str = Field(default="Nouveau titre", min_length=1)
    content: Optional[str] = None  # alias historique de text
    level: Literal["h1", "h2", "h3", "h4", "h5", "h6"] = "h2"
    alignment: Literal["left", "center", "right"] = "left"
    color: Optional[HexColor] = None
    font_size: Optional[int] = Field(default=None, ge=12, le=120)
    font_weight: Optional[str] = None
