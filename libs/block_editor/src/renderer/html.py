"""
Renderer HTML : contenu normalisé → HTML.

Dispatch par type (_RENDERERS) ; chaque fonction reçoit le modèle validé et le HTML
des enfants déjà rendus. Mêmes fonctions en édition et en aperçu ; seul l'habillage
(wrapper éditeur, blocs inactifs) dépend du RenderContext.
Type inconnu ou contenu invalide → placeholder neutre, jamais d'exception.
"""
import html
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..blocks import (
    BlockRecord, ButtonContent, CTAContent, ContainerContent, HeadingContent,
    HeroContent, ImageContent, SectionContent, TextContent,
)
from ..elements.document import DOCUMENT_TYPE, BlockContentDocument, Element
from ..registry import REGISTRY, SchemaRegistry
from .context import RenderContext
from .css import background_css, border_css, layout_css, sides, style_attr

log = logging.getLogger(__name__)


def _esc(v: Any) -> str:
    return html.escape(str(v), quote=True)


def _classes(*names: Optional[str]) -> str:
    return " ".join(n for n in names if n)


# ── Renderers par type ──────────────────────────────────────────────────────

def render_hero(m: HeroContent, children_html: str = "") -> str:
    subtitle = f'\n    <p class="hero__subtitle">{_esc(m.subtitle)}</p>' if m.subtitle else ""
    button = ""
    if m.button_text:
        button = f'\n    <a href="{_esc(m.button_url or "#")}" class="btn btn-primary">{_esc(m.button_text)}</a>'
    style = style_attr([f"background:{m.background_color}", f"color:{m.text_color}"])
    return f"""<div class="hero"{style}>
  <div class="hero__content">
    <h1 class="hero__title">{_esc(m.title)}</h1>{subtitle}{button}
  </div>{children_html}
</div>"""


def render_cta(m: CTAContent, children_html: str = "") -> str:
    decls = [
        f"background:{m.background_color}",
        f"color:{m.text_color}",
        f"text-align:{m.text_alignment}",
        f"--cta-primary:{m.primary_color}",
        f"--cta-secondary:{m.secondary_color}",
    ]
    if m.border:
        decls.append(f"border-radius:{m.border.radius}px")
        if m.border.width:
            decls.append(f"border:{m.border.width}px {m.border.style} {m.border.color}")
    if m.shadow:
        s = m.shadow
        decls.append(f"box-shadow:{s.h_offset}px {s.v_offset}px {s.blur}px {s.spread}px {s.color}")
    if m.display:
        decls += [f"padding:{m.display.padding}px", f"margin:{m.display.margin}px"]

    target = ' target="_blank" rel="noopener"' if m.open_in_new_tab else ""
    icon = f'<i class="{_esc(m.icon_class)}"></i> ' if m.icon_class else ""
    thumb = f'<img class="cta__thumb" src="{_esc(m.image_thumbnail)}" alt="">' if m.image_thumbnail else ""
    warning = '<p class="cta__warning">Contenu sensible</p>' if m.sensitive_content_warning else ""
    classes = _classes("cta", f"cta--cols-{m.columns}", f"cta--anim-{m.animation}" if m.animation != "none" else None)
    return f"""<div class="{classes}"{style_attr(decls)}>
  {warning}{thumb}<a href="{_esc(m.destination_url or "#")}" class="cta__button"{target}>{icon}{_esc(m.name)}</a>{children_html}
</div>"""


def render_section(m: SectionContent, children_html: str = "") -> str:
    decls = layout_css(m.style.layout) + background_css(m.style.background) + border_css(m.style.border)
    classes = _classes("section", f"section--{m.style.layout.mode}", m.advanced.custom_class)
    hidden = "".join(f" hide-{v}" for v in m.advanced.visibility)
    return f"""<section class="{_esc(classes + hidden)}" data-layer="{_esc(m.layer_name)}"{style_attr(decls)}>
{children_html}
</section>"""


def render_container(m: ContainerContent, children_html: str = "") -> str:
    decls = [f"display:{m.display}"]
    if m.display != "block":
        decls.append(f"gap:{m.gap}px")
    if m.padding is not None:
        decls.append(f"padding:{sides(m.padding)}")
    return f'<div class="container" data-layer="{_esc(m.layer_name)}"{style_attr(decls)}>\n{children_html}\n</div>'


def render_heading(m: HeadingContent, children_html: str = "") -> str:
    decls = [f"text-align:{m.alignment}"]
    if m.color:
        decls.append(f"color:{m.color}")
    if m.font_size:
        decls.append(f"font-size:{m.font_size}px")
    if m.font_weight:
        decls.append(f"font-weight:{m.font_weight}")
    return f"<{m.level} class=\"heading\"{style_attr(decls)}>{_esc(m.content or m.text)}</{m.level}>"


def render_text(m: TextContent, children_html: str = "") -> str:
    decls = [f"text-align:{m.alignment}"]
    if m.color:
        decls.append(f"color:{m.color}")
    if m.font_size:
        decls.append(f"font-size:{m.font_size}px")
    if m.font_weight:
        decls.append(f"font-weight:{m.font_weight}")
    return f'<p class="text"{style_attr(decls)}>{_esc(m.content)}</p>'


def render_button(m: ButtonContent, children_html: str = "") -> str:
    decls = []
    if m.background_color:
        decls.append(f"background:{m.background_color}")
    if m.text_color:
        decls.append(f"color:{m.text_color}")
    if m.full_width:
        decls.append("width:100%")
    classes = _classes("btn", f"btn-{m.variant}", f"btn-{m.size}")
    return f'<a href="{_esc(m.url or "#")}" class="{classes}"{style_attr(decls)}>{_esc(m.label or m.text)}</a>'


def render_image(m: ImageContent, children_html: str = "") -> str:
    decls = [f"object-fit:{m.object_fit}"]
    size = ""
    if m.width:
        size += f' width="{m.width}"'
    if m.height:
        size += f' height="{m.height}"'
    return f'<img class="image" src="{_esc(m.src)}" alt="{_esc(m.alt)}"{size}{style_attr(decls)}>'


_RENDERERS: Dict[str, Callable[[Any, str], str]] = {
    "Hero":      render_hero,
    "CTA":       render_cta,
    "Section":   render_section,
    "Container": render_container,
    "Heading":   render_heading,
    "Text":      render_text,
    "Button":    render_button,
    "Image":     render_image,
}


def placeholder(block_type: str, reason: str) -> str:
    return f'<div class="block-placeholder" data-block-type="{_esc(block_type)}">{_esc(reason)}</div>'


# ── Dispatch ────────────────────────────────────────────────────────────────

def render_content(block_type: str, content: Any, children_html: str = "",
                   registry: Optional[SchemaRegistry] = None,
                   ctx: Optional[RenderContext] = None) -> str:
    """HTML d'un contenu typé. Ne lève jamais : placeholder si type inconnu ou contenu invalide."""
    registry = registry or REGISTRY
    if block_type == DOCUMENT_TYPE:
        return render_document(content, ctx, registry)

    fn = _RENDERERS.get(block_type)
    model_cls = registry.model_for(block_type)
    if fn is None or model_cls is None:
        return placeholder(block_type, f"Bloc non pris en charge : {block_type}")
    try:
        model = model_cls.model_validate(content)
    except PydanticValidationError:
        log.warning("Contenu invalide pour %s : placeholder rendu", block_type)
        return placeholder(block_type, "Contenu invalide")
    return fn(model, children_html)


def render_element(element: Union[Element, Dict[str, Any]], ctx: Optional[RenderContext] = None,
                   registry: Optional[SchemaRegistry] = None) -> str:
    """Rendu récursif d'un élément et de ses enfants."""
    ctx = ctx or RenderContext()
    if not isinstance(element, Element):
        element = Element.model_validate(element)

    children_html = "\n".join(render_element(c, ctx, registry) for c in element.children)
    inner = render_content(element.type, element.props, children_html, registry, ctx)
    if not ctx.editing:
        return inner

    classes = _classes("editor-element", "editor-element--selected" if ctx.selected_id == element.id else None)
    return (f'<div class="{classes}" data-element-id="{_esc(element.id)}" '
            f'data-element-type="{_esc(element.type)}">{inner}</div>')


def render_document(content: Any, ctx: Optional[RenderContext] = None,
                    registry: Optional[SchemaRegistry] = None) -> str:
    try:
        doc = BlockContentDocument.model_validate(content)
    except PydanticValidationError:
        log.warning("Document page-builder invalide : placeholder rendu")
        return placeholder(DOCUMENT_TYPE, "Contenu invalide")
    body = "\n".join(render_element(el, ctx, registry) for el in doc.elements)
    return f'<div class="page-builder" data-name="{_esc(doc.metadata.name)}">\n{body}\n</div>'


def render_block(block: BlockRecord, ctx: Optional[RenderContext] = None,
                 registry: Optional[SchemaRegistry] = None) -> str:
    """
    Un bloc de template.
    Aperçu : bloc inactif → "" ; édition : wrapper editor-block (grisé si inactif).
    """
    ctx = ctx or RenderContext()
    if not ctx.editing and not block.is_active:
        return ""

    inner = render_content(block.type, block.content, "", registry, ctx)
    if not ctx.editing:
        return inner

    classes = _classes(
        "editor-block",
        "editor-block--inactive" if not block.is_active else None,
        "editor-block--selected" if block.id is not None and ctx.selected_id == block.id else None,
    )
    return (f'<div class="{classes}" data-block-id="{_esc(block.id or "")}" '
            f'data-block-type="{_esc(block.type)}" data-sort-order="{block.sort_order}">\n{inner}\n</div>')


def render_blocks(blocks: Iterable[BlockRecord], ctx: Optional[RenderContext] = None,
                  registry: Optional[SchemaRegistry] = None) -> str:
    parts = [render_block(b, ctx, registry) for b in sorted(blocks, key=lambda b: b.sort_order)]
    return "\n".join(p for p in parts if p)


_BASE_CSS = """
*{box-sizing:border-box}body{margin:0;font-family:system-ui,sans-serif}
.container{max-width:1200px;margin:0 auto}
.btn{display:inline-block;padding:.6em 1.2em;text-decoration:none;border-radius:6px}
.btn-sm{font-size:.85em}.btn-lg{font-size:1.15em}
.image{max-width:100%;height:auto}
.block-placeholder{padding:16px;border:1px dashed #999999;color:#666666;text-align:center}
.editor-block{position:relative;outline:1px dashed transparent}
.editor-block:hover,.editor-element:hover{outline-color:#3b82f6}
.editor-block--selected,.editor-element--selected{outline:2px solid #3b82f6}
.editor-block--inactive{opacity:.4}
"""


def render_page(title: str, blocks: List[BlockRecord], ctx: Optional[RenderContext] = None,
                description: str = "", registry: Optional[SchemaRegistry] = None,
                extra_head: str = "") -> str:
    """Document HTML complet d'un template."""
    ctx = ctx or RenderContext()
    body = render_blocks(blocks, ctx, registry)
    body_attrs = ""
    if ctx.editing:
        body_attrs = ' class="editor-canvas"'
        if ctx.open_panel:
            body_attrs += f' data-open-panel="{_esc(ctx.open_panel)}"'

    return f"""<!DOCTYPE html>
<html lang="fr">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{_esc(title)}</title>
  {f'<meta name="description" content="{_esc(description)}">' if description else ''}
  <style>{_BASE_CSS}</style>
  {extra_head}
</head>
<body{body_attrs}>
{body}
</body>
</html>"""
