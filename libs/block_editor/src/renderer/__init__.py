from .context import RenderContext
from .html import (
    placeholder, render_block, render_blocks, render_content, render_document,
    render_element, render_page,
)

__all__ = [
    "RenderContext", "placeholder", "render_block", "render_blocks", "render_content",
    "render_document", "render_element", "render_page",
]
