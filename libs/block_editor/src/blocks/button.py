"""Élément Button : lien d'action stylé."""
from typing import Literal, Optional

from pydantic import Field

from .base import BlockContent, HexColor, Url


class ButtonContent(BlockContent):
    SEED = {"url": "", "backgroundColor": "#000000", "textColor": "#ffffff"}

    layer_name: str = "Bouton"
    text: str = Field(default="Cliquez ici", min_length=1)
    label: Optional[str] = None  # alias historique de text
    url: Optional[Url] = None
    variant: Literal["primary", "secondary", "outline", "ghost"] = "primary"
    size: Literal["sm", "md", "lg"] = "md"
    full_width: bool = False
    background_color: Optional[HexColor] = None
    text_color: Optional[HexColor] = None
