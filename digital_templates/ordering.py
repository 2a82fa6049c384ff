"""
Ordre et mutations des blocs d'un template.

Invariant après chaque opération réussie : sort_order = 0..N-1 sans trou.
Une opération = un commit. Échec → rollback, rien de partiel n'est visible.
Contrainte unique (template_id, sort_order) : le renumérotage passe par des positions
temporaires au-dessus du max avant les positions finales.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from block_editor import REGISTRY

from .database import db_get_block, db_list_blocks, jd, transaction
from .errors import NotFoundError, ValidationError
from .models import TemplateBlockDB

log = logging.getLogger(__name__)


def reorder_ids(ids: List[str], moved_id: str, target_index: int) -> List[str]:
    """Nouvel ordre après déplacement de `moved_id` à `target_index` (borné à [0, N-1])."""
    if moved_id not in ids:
        raise NotFoundError("Bloc introuvable dans ce template")
    target = max(0, min(target_index, len(ids) - 1))
    out = [i for i in ids if i != moved_id]
    out.insert(target, moved_id)
    return out


def _resequence(db: Session, ordered: List[TemplateBlockDB]) -> None:
    """Pose sort_order = 0..N-1 dans l'ordre donné (deux flushs)."""
    if [b.sort_order for b in ordered] == list(range(len(ordered))):
        return
    offset = max(max((b.sort_order for b in ordered), default=0) + 1, len(ordered))
    for i, b in enumerate(ordered):
        b.sort_order = offset + i
    db.flush()
    for i, b in enumerate(ordered):
        b.sort_order = i
    db.flush()


def get_owned_block(db: Session, template_id: str, block_id: str) -> TemplateBlockDB:
    block = db_get_block(db, block_id)
    if block is None or block.template_id != template_id:
        raise NotFoundError("Bloc introuvable dans ce template")
    return block


def reorder(db: Session, template_id: str, moved_block_id: str, target_index: int) -> List[str]:
    blocks = db_list_blocks(db, template_id)
    ids = [b.id for b in blocks]
    new_ids = reorder_ids(ids, moved_block_id, target_index)
    if new_ids == ids:
        return ids

    by_id = {b.id: b for b in blocks}
    with transaction(db):
        _resequence(db, [by_id[i] for i in new_ids])
    log.info("Template %s réordonné : %s → %d", template_id, moved_block_id, new_ids.index(moved_block_id))
    return new_ids


def insert(db: Session, template_id: str, block_type: str,
           content: Optional[Dict[str, Any]] = None) -> TemplateBlockDB:
    """Ajoute un bloc en fin de template (contenu par défaut du type si `content` absent)."""
    if content is None:
        try:
            content = REGISTRY.default_content(block_type)
        except ValueError as e:
            raise ValidationError({"type": [str(e)]}) from e

    with transaction(db):
        current_max = (db.query(func.max(TemplateBlockDB.sort_order))
                       .filter(TemplateBlockDB.template_id == template_id).scalar())
        block = TemplateBlockDB(
            template_id=template_id, type=block_type, content=jd(content),
            sort_order=0 if current_max is None else current_max + 1, is_active=True,
        )
        db.add(block)
    db.refresh(block)
    log.info("Bloc %s (%s) ajouté au template %s en position %d", block.id, block_type, template_id, block.sort_order)
    return block


def delete(db: Session, template_id: str, block_id: str) -> None:
    """Supprime le bloc puis resserre les positions suivantes."""
    block = get_owned_block(db, template_id, block_id)
    with transaction(db):
        db.delete(block)
        db.flush()
        _resequence(db, db_list_blocks(db, template_id))
    log.info("Bloc %s supprimé du template %s", block_id, template_id)


def toggle_active(db: Session, block: TemplateBlockDB, is_active: bool) -> TemplateBlockDB:
    """Visibilité seulement : la position ne bouge pas."""
    with transaction(db):
        block.is_active = is_active
    return block


def update_content(db: Session, block: TemplateBlockDB, content: Dict[str, Any]) -> TemplateBlockDB:
    """Écrase le contenu (idempotent). `content` doit déjà être validé."""
    with transaction(db):
        block.content = jd(content)
    return block
