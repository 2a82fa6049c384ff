"""
Block Editor : schémas de contenu, arbre d'éléments page-builder et rendu HTML.

Usage :
    >>> from block_editor import REGISTRY, render_content
    >>> content = REGISTRY.validate("Hero", {"title": "Bienvenue"}).content
    >>> html = render_content("Hero", content)

Page-builder :
    >>> from block_editor import create_element, insert_element
    >>> section = create_element("Section")
    >>> elements = insert_element([], section)
"""

# ── Schémas ─────────────────────────────────────────────────────────────────
from .blocks import (
    BlockContent, BlockRecord,
    SectionContent, ContainerContent, HeadingContent, TextContent,
    ButtonContent, ImageContent, HeroContent, CTAContent,
)
from .errors import ContentValidationError, ROOT_PATH
from .registry import REGISTRY, SchemaRegistry, ValidatedContent, default_registry

# ── Page-builder ────────────────────────────────────────────────────────────
from .elements import (
    DOCUMENT_TYPE, BlockContentDocument, Element, empty_document, validate_document,
    find_element, find_parent_id, index_elements, insert_element, move_element,
    remove_element, update_props,
)
from .elements.factory import ELEMENT_TYPES, create_element

# ── Rendu ───────────────────────────────────────────────────────────────────
from .renderer import RenderContext, render_block, render_blocks, render_content, render_element, render_page

__version__ = "0.1.0"

__all__ = [
    # Schémas
    "BlockContent", "BlockRecord",
    "SectionContent", "ContainerContent", "HeadingContent", "TextContent",
    "ButtonContent", "ImageContent", "HeroContent", "CTAContent",
    "ContentValidationError", "ROOT_PATH",
    "REGISTRY", "SchemaRegistry", "ValidatedContent", "default_registry",
    # Page-builder
    "DOCUMENT_TYPE", "BlockContentDocument", "Element", "empty_document", "validate_document",
    "find_element", "find_parent_id", "index_elements", "insert_element", "move_element",
    "remove_element", "update_props",
    "ELEMENT_TYPES", "create_element",
    # Rendu
    "RenderContext", "render_block", "render_blocks", "render_content", "render_element", "render_page",
]
