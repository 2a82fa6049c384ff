"""Élément Container : regroupe des éléments en flex/grid."""
from typing import Literal, Optional

from pydantic import Field

from .base import BlockContent
from .common import FourSided


class ContainerContent(BlockContent):
    SEED = {"padding": {"top": 16, "right": 16, "bottom": 16, "left": 16}}

    layer_name: str = Field(default="Container", min_length=1)
    display: Literal["flex", "grid", "block"] = "flex"
    gap: int = Field(default=16, ge=0, le=100)
    padding: Optional[FourSided] = None
