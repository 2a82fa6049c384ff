"""
Schémas de contenu par type : exports publics.
"""
from .base import BlockContent, BlockRecord, ContentModel, HexColor, Url, RequiredUrl
from .common import FourSided, Margin, Layout, Background, Border, Advanced
from .section import SectionContent, SectionStyle
from .container import ContainerContent
from .heading import HeadingContent
from .text import TextContent
from .button import ButtonContent
from .image import ImageContent
from .hero import HeroContent
from .cta import CTAContent, CTABorder, CTAShadow, CTADisplay

__all__ = [
    # Base
    "BlockContent", "BlockRecord", "ContentModel", "HexColor", "Url", "RequiredUrl",
    # Commun
    "FourSided", "Margin", "Layout", "Background", "Border", "Advanced",
    # Blocs / éléments
    "SectionContent", "SectionStyle",
    "ContainerContent",
    "HeadingContent",
    "TextContent",
    "ButtonContent",
    "ImageContent",
    "HeroContent",
    "CTAContent", "CTABorder", "CTAShadow", "CTADisplay",
]
