"""
Sous-schémas réutilisables : layout (padding/margin), fond, bordure, avancé.
Partagés par Section et les éléments conteneurs.
"""
from typing import List, Literal

from pydantic import Field

from .base import ContentModel, HexColor


class FourSided(ContentModel):
    """Valeurs 4 côtés (padding)."""
    top:    int = Field(default=0, ge=0, le=1000)
    right:  int = Field(default=0, ge=0, le=1000)
    bottom: int = Field(default=0, ge=0, le=1000)
    left:   int = Field(default=0, ge=0, le=1000)


class Margin(ContentModel):
    top:    int = Field(default=0, ge=-1000, le=1000)
    right:  int = Field(default=0, ge=-1000, le=1000)
    bottom: int = Field(default=0, ge=-1000, le=1000)
    left:   int = Field(default=0, ge=-1000, le=1000)


class Layout(ContentModel):
    mode: Literal["full-width", "contained"] = "contained"
    padding: FourSided = Field(default_factory=FourSided)
    margin: Margin = Field(default_factory=Margin)


class Background(ContentModel):
    type: Literal["solid", "gradient"] = "solid"
    solid_color: HexColor = "#ffffff"
    gradient_color1: HexColor = "#ffffff"
    gradient_color2: HexColor = "#000000"
    gradient_angle: int = Field(default=90, ge=0, le=360)


class Border(ContentModel):
    width: int = Field(default=0, ge=0, le=20)
    radius: int = Field(default=0, ge=0, le=100)
    style: Literal["solid", "dashed", "dotted"] = "solid"
    color: HexColor = "#000000"
    color_hover: HexColor = "#000000"


class Advanced(ContentModel):
    custom_class: str = ""
    visibility: List[Literal["mobile", "tablet", "desktop"]] = Field(default_factory=list)
