"""Bloc Hero : titre, sous-titre, couleurs et bouton optionnel."""
from typing import Optional

from pydantic import Field

from .base import BlockContent, HexColor, Url


class HeroContent(BlockContent):
    SEED = {"title": "Nouveau Hero", "subtitle": "Description du hero"}

    title: str = Field(min_length=1)
    subtitle: Optional[str] = None
    background_color: HexColor = "#ffffff"
    text_color: HexColor = "#000000"
    button_text: Optional[str] = None
    button_url: Optional[Url] = None
