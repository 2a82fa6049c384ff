"""
Digital templates : API JSON de l'éditeur.
GET    /api/templates?scope=global|workspace:<id>
POST   /api/templates                              {name, description?, kind, workspace_id?}
GET    /api/templates/{id}                         template + blocs ordonnés
PATCH  /api/templates/{id}                         {name?, description?}
DELETE /api/templates/{id}
POST   /api/templates/{id}/duplicate               copie "Copie de <nom>", mêmes blocs
POST   /api/templates/{id}/blocks                  {type}
POST   /api/templates/{id}/blocks/reorder          {moved_block_id, target_index}
DELETE /api/templates/{id}/blocks/{block_id}
GET    /api/blocks/{id}
PUT    /api/blocks/{id}/content                    {content}
PATCH  /api/blocks/{id}/active                     {is_active}
POST   /api/blocks/{id}/elements                   {type, parent_id?, index?}
POST   /api/blocks/{id}/elements/{element_id}/move {parent_id?, index?}
DELETE /api/blocks/{id}/elements/{element_id}
GET    /api/block-types                            catalogue + JSON schemas
POST   /api/block-types/{type}/validate            validation à blanc
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from block_editor import REGISTRY

from ... import actions
from ...database import get_db
from ...models import CurrentUser
from ..identity import current_user, respond

log = logging.getLogger(__name__)
router = APIRouter(tags=["Digital Templates"])


# ── Templates ──────────────────────────────────────────────────────────────────

@router.get("/api/templates")
def list_templates(scope: Optional[str] = Query(default=None), db: Session = Depends(get_db),
                   user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.list_templates(db, user, scope))


@router.post("/api/templates")
def create_template(body: Dict[str, Any] = Body(...), db: Session = Depends(get_db),
                    user: Optional[CurrentUser] = Depends(current_user)):
    # corps brut : la validation (TemplateCreate) se fait après l'authentification
    result = actions.create_template(db, user, body.get("name"), body.get("description"),
                                     body.get("kind", "content_block"), body.get("workspace_id"))
    return respond(result, 201)


@router.get("/api/templates/{template_id}")
def get_template(template_id: str, db: Session = Depends(get_db),
                 user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.get_template_for_edit(db, user, template_id))


@router.patch("/api/templates/{template_id}")
def update_template(template_id: str, body: Dict[str, Any] = Body(...), db: Session = Depends(get_db),
                    user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.update_template(db, user, template_id, body.get("name"),
                                           body.get("description", actions.UNSET)))


@router.delete("/api/templates/{template_id}")
def delete_template(template_id: str, db: Session = Depends(get_db),
                    user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.delete_template(db, user, template_id))


@router.post("/api/templates/{template_id}/duplicate")
def duplicate_template(template_id: str, db: Session = Depends(get_db),
                       user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.duplicate_template(db, user, template_id), 201)


# ── Blocs ──────────────────────────────────────────────────────────────────────

@router.post("/api/templates/{template_id}/blocks")
def create_block(template_id: str, body: Dict[str, Any] = Body(...), db: Session = Depends(get_db),
                 user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.create_block(db, user, template_id, body.get("type")), 201)


@router.post("/api/templates/{template_id}/blocks/reorder")
def reorder_blocks(template_id: str, body: Dict[str, Any] = Body(...), db: Session = Depends(get_db),
                   user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.reorder_blocks(db, user, template_id, body.get("moved_block_id"),
                                           body.get("target_index")))


@router.delete("/api/templates/{template_id}/blocks/{block_id}")
def delete_block(template_id: str, block_id: str, db: Session = Depends(get_db),
                 user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.delete_block(db, user, template_id, block_id))


@router.get("/api/blocks/{block_id}")
def get_block(block_id: str, db: Session = Depends(get_db),
              user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.get_block(db, user, block_id))


@router.put("/api/blocks/{block_id}/content")
def save_block_content(block_id: str, body: Dict[str, Any] = Body(...), db: Session = Depends(get_db),
                       user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.save_block_content(db, user, block_id, body.get("content")))


@router.patch("/api/blocks/{block_id}/active")
def toggle_block(block_id: str, body: Dict[str, Any] = Body(...), db: Session = Depends(get_db),
                 user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.toggle_block(db, user, block_id, body.get("is_active")))


# ── Éléments page-builder ──────────────────────────────────────────────────────

@router.post("/api/blocks/{block_id}/elements")
def add_element(block_id: str, body: Dict[str, Any] = Body(...), db: Session = Depends(get_db),
                user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.add_element(db, user, block_id, body.get("type"),
                                       body.get("parent_id"), body.get("index")), 201)


@router.post("/api/blocks/{block_id}/elements/{element_id}/move")
def move_element(block_id: str, element_id: str, body: Dict[str, Any] = Body(...), db: Session = Depends(get_db),
                 user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.move_element(db, user, block_id, element_id,
                                        body.get("parent_id"), body.get("index")))


@router.delete("/api/blocks/{block_id}/elements/{element_id}")
def remove_element(block_id: str, element_id: str, db: Session = Depends(get_db),
                   user: Optional[CurrentUser] = Depends(current_user)):
    return respond(actions.remove_element(db, user, block_id, element_id))


# ── Catalogue ──────────────────────────────────────────────────────────────────

@router.get("/api/block-types")
def block_types():
    return {"types": REGISTRY.catalog()}


@router.post("/api/block-types/{block_type}/validate")
def validate_block_type(block_type: str, content: Dict[str, Any] = Body(...)):
    return respond(actions.validate_content(block_type, content))
