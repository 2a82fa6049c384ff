"""Bloc Section : conteneur de mise en page (layout + fond + bordure + avancé)."""
from pydantic import Field

from .base import BlockContent, ContentModel
from .common import Advanced, Background, Border, Layout


class SectionStyle(ContentModel):
    layout: Layout = Field(default_factory=Layout)
    background: Background = Field(default_factory=Background)
    border: Border = Field(default_factory=Border)


class SectionContent(BlockContent):
    SEED = {
        "layerName": "Nouvelle section",
        "style": {"layout": {"padding": {"top": 16, "right": 16, "bottom": 16, "left": 16}}},
    }

    layer_name: str = Field(default="Section", min_length=1)
    style: SectionStyle = Field(default_factory=SectionStyle)
    advanced: Advanced = Field(default_factory=Advanced)
