"""Bloc CTA : bouton d'appel à l'action à deux couches de couleur."""
from typing import Literal, Optional

from pydantic import Field

from .base import BlockContent, ContentModel, HexColor, Url


class CTABorder(ContentModel):
    width: int = Field(default=0, ge=0, le=10)
    color: HexColor = "#000000"
    radius: int = Field(default=8, ge=0, le=50)
    style: Literal["solid", "dashed", "dotted"] = "solid"


class CTAShadow(ContentModel):
    h_offset: int = 0
    v_offset: int = 0
    blur: int = 0
    spread: int = 0
    color: HexColor = "#000000"


class CTADisplay(ContentModel):
    padding: int = Field(default=16, ge=0, le=100)
    margin: int = Field(default=0, ge=0, le=100)


class CTAContent(BlockContent):
    # URL et comportement
    destination_url: Optional[Url] = None
    open_in_new_tab: bool = False

    # Contenu
    name: str = Field(default="PRENDRE RENDEZ-VOUS", min_length=1)
    image_thumbnail: Optional[Url] = None
    icon_class: Optional[str] = None

    # Couleurs (2 couches)
    primary_color: HexColor = "#FFFF00"
    secondary_color: HexColor = "#FF0000"
    text_color: HexColor = "#FFFFFF"
    text_alignment: Literal["center", "left", "right", "justify"] = "center"
    background_color: HexColor = "#000000"

    animation: Literal["none", "fade", "slide", "bounce"] = "none"
    sensitive_content_warning: bool = False
    columns: Literal["1", "2"] = "1"

    # Avancé
    border: Optional[CTABorder] = None
    shadow: Optional[CTAShadow] = None
    display: Optional[CTADisplay] = None
