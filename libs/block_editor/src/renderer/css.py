"""
Styles inline à partir des réglages de contenu (layout, fond, bordure).
Chaque helper retourne une liste de déclarations "prop:valeur" ; style_attr() assemble.
"""
import html
from typing import List, Optional, Union

from ..blocks.common import Background, Border, FourSided, Layout, Margin


def sides(v: Optional[Union[FourSided, Margin]]) -> str:
    if v is None:
        return "0"
    return f"{v.top}px {v.right}px {v.bottom}px {v.left}px"


def layout_css(layout: Layout) -> List[str]:
    decls = [f"padding:{sides(layout.padding)}", f"margin:{sides(layout.margin)}"]
    if layout.mode == "contained":
        decls += ["max-width:1200px", "margin-left:auto", "margin-right:auto"]
    return decls


def background_css(bg: Background) -> List[str]:
    if bg.type == "gradient":
        return [f"background:linear-gradient({bg.gradient_angle}deg,{bg.gradient_color1},{bg.gradient_color2})"]
    return [f"background:{bg.solid_color}"]


def border_css(border: Border) -> List[str]:
    decls = [f"border-radius:{border.radius}px"]
    if border.width:
        decls.append(f"border:{border.width}px {border.style} {border.color}")
    return decls


def style_attr(decls: List[str]) -> str:
    """' style="a:b;c:d"' : vide si aucune déclaration."""
    decls = [d for d in decls if d]
    if not decls:
        return ""
    return f' style="{html.escape(";".join(decls), quote=True)}"'
