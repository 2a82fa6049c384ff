"""
Rendu HTML des templates.
GET /preview/templates/{id}                        aperçu public (blocs actifs, en cache)
GET /admin/digital-templates/{id}/canvas?selected= canvas d'édition (blocs inactifs grisés)
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from block_editor import BlockRecord, RenderContext, render_page

from ...auth import authorize
from ...cache import cached_view
from ...database import db_get_template, db_list_blocks, get_db, jl
from ...errors import STATUS_BY_CODE, NotFoundError
from ...models import CurrentUser, TemplateBlockDB
from ..identity import current_user

log = logging.getLogger(__name__)
router = APIRouter(tags=["Preview"])


def _records(blocks: List[TemplateBlockDB]) -> List[BlockRecord]:
    return [
        BlockRecord(id=b.id, type=b.type, content=jl(b.content), sort_order=b.sort_order, is_active=b.is_active)
        for b in blocks
    ]


def _error_page(status_code: int, message: str) -> HTMLResponse:
    return HTMLResponse(f"<p style='font-family:sans-serif;padding:40px'>{message}</p>", status_code=status_code)


@router.get("/preview/templates/{template_id}", response_class=HTMLResponse)
def preview_template(template_id: str, db: Session = Depends(get_db)):
    template = db_get_template(db, template_id)
    if template is None:
        return _error_page(NotFoundError.status_code, "Template introuvable")

    def build() -> str:
        blocks = _records(db_list_blocks(db, template.id))
        return render_page(template.name, blocks, RenderContext(mode="preview"), template.description or "")

    return HTMLResponse(cached_view(f"/preview/templates/{template.id}", build))


@router.get("/admin/digital-templates/{template_id}/canvas", response_class=HTMLResponse)
def edit_canvas(template_id: str, selected: Optional[str] = Query(default=None),
                panel: Optional[str] = Query(default=None), db: Session = Depends(get_db),
                user: Optional[CurrentUser] = Depends(current_user)):
    template = db_get_template(db, template_id)
    if template is None:
        return _error_page(NotFoundError.status_code, "Template introuvable")
    decision = authorize(db, user, template, "view")
    if not decision.allowed:
        return _error_page(STATUS_BY_CODE[decision.code], decision.reason)

    ctx = RenderContext(mode="edit", selected_id=selected, open_panel=panel)
    return HTMLResponse(render_page(template.name, _records(db_list_blocks(db, template.id)), ctx))
