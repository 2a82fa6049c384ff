"""
Actions de l'éditeur de templates : point d'entrée unique des mutations.

Chaque action suit le même pipeline :
  1. authentification (échec immédiat)
  2. validation du contenu (aucun accès en écriture si invalide)
  3. chargement du template + autorisation
  4. mutation atomique (ordering)
  5. invalidation des vues en cache

Aucune exception ne sort d'une action : résultat uniforme
  {"success": True, ...}  |  {"success": False, "code", "error", "fieldErrors"?}
"""
import functools
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from block_editor import DOCUMENT_TYPE, REGISTRY, ContentValidationError, create_element, empty_document
from block_editor.elements import tree
from block_editor.errors import field_errors_from_pydantic

from . import ordering
from .auth import authorize, authorize_create
from .cache import invalidate, template_paths
from .database import (
    block_to_dict, db_get_block, db_get_template, db_list_blocks, db_list_templates,
    jd, jl, template_to_dict, transaction,
)
from .errors import EditorError, NotFoundError, Unauthenticated, UnknownError, ValidationError
from .models import CurrentUser, TemplateBlockDB, TemplateCreate, TemplateDB, TemplateKind, TemplateUpdate

log = logging.getLogger(__name__)


def action(fn):
    """Convertit toute erreur en résultat {"success": False, ...} et annule la transaction."""
    @functools.wraps(fn)
    def wrapper(db: Session, user: Optional[CurrentUser], *args, **kwargs) -> Dict[str, Any]:
        try:
            return fn(db, user, *args, **kwargs)
        except EditorError as e:
            db.rollback()
            return e.to_result()
        except ContentValidationError as e:
            db.rollback()
            return ValidationError(e.field_errors).to_result()
        except PydanticValidationError as e:
            db.rollback()
            return ValidationError(field_errors_from_pydantic(e)).to_result()
        except Exception:
            db.rollback()
            log.exception("Action %s : erreur inattendue (user=%s)", fn.__name__, getattr(user, "id", None))
            return UnknownError().to_result()
    return wrapper


# ── Étapes communes ─────────────────────────────────────────────────────────

def _ok(warnings=None, **fields) -> Dict[str, Any]:
    out = {"success": True, **fields}
    if warnings:
        out["warnings"] = list(warnings)
    return out


def _require_user(user: Optional[CurrentUser]) -> CurrentUser:
    if user is None:
        raise Unauthenticated()
    return user


def _load_template(db: Session, template_id: str) -> TemplateDB:
    template = db_get_template(db, template_id)
    if template is None:
        raise NotFoundError("Template introuvable")
    return template


def _load_block(db: Session, block_id: str) -> TemplateBlockDB:
    block = db_get_block(db, block_id)
    if block is None:
        raise NotFoundError("Bloc introuvable")
    return block


def _authorize(db: Session, user: CurrentUser, template: TemplateDB, what: str = "edit") -> None:
    authorize(db, user, template, what).raise_if_denied()


# Corps HTTP bruts : types vérifiés ici, après l'authentification
def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _check_fields(**checks) -> None:
    """checks = {champ: (valeur, test, message)} → ValidationError avec toutes les erreurs."""
    errors = {field: [msg] for field, (value, ok, msg) in checks.items() if not ok(value)}
    if errors:
        raise ValidationError(errors)


def _id_or_none(v: Any) -> bool:
    return v is None or (isinstance(v, str) and v != "")


def _index_or_none(v: Any) -> bool:
    return v is None or _is_int(v)


def _non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v != ""


# ── Blocs ───────────────────────────────────────────────────────────────────

@action
def save_block_content(db: Session, user: Optional[CurrentUser], block_id: str, content: Any) -> Dict[str, Any]:
    """Remplace le contenu d'un bloc après validation par le schéma de son type."""
    user = _require_user(user)
    block = _load_block(db, block_id)
    validated = REGISTRY.validate(block.type, content)

    template = _load_template(db, block.template_id)
    _authorize(db, user, template)

    ordering.update_content(db, block, validated.content)
    invalidate(*template_paths(template.id, block.id))
    return _ok(validated.warnings)


@action
def reorder_blocks(db: Session, user: Optional[CurrentUser], template_id: str,
                   moved_block_id: str, target_index: int) -> Dict[str, Any]:
    user = _require_user(user)
    _check_fields(
        movedBlockId=(moved_block_id, _non_empty_str, "Champ obligatoire"),
        targetIndex=(target_index, _is_int, "Doit être un nombre entier"),
    )

    template = _load_template(db, template_id)
    _authorize(db, user, template)

    new_order = ordering.reorder(db, template.id, moved_block_id, target_index)
    invalidate(*template_paths(template.id))
    return _ok(newOrder=new_order)


@action
def create_block(db: Session, user: Optional[CurrentUser], template_id: str, block_type: str) -> Dict[str, Any]:
    """Ajoute un bloc du type donné en fin de template, avec son contenu par défaut."""
    user = _require_user(user)
    _check_fields(type=(block_type, _non_empty_str, "Champ obligatoire"))
    if not REGISTRY.is_registered(block_type):
        raise ValidationError({"type": [f"Type de bloc inconnu : {block_type}"]})
    content = REGISTRY.default_content(block_type)

    template = _load_template(db, template_id)
    _authorize(db, user, template)

    block = ordering.insert(db, template.id, block_type, content)
    invalidate(*template_paths(template.id, block.id))
    return _ok(blockId=block.id)


@action
def delete_block(db: Session, user: Optional[CurrentUser], template_id: str, block_id: str) -> Dict[str, Any]:
    user = _require_user(user)
    template = _load_template(db, template_id)
    _authorize(db, user, template)

    ordering.delete(db, template.id, block_id)
    invalidate(*template_paths(template.id, block_id))
    return _ok()


@action
def toggle_block(db: Session, user: Optional[CurrentUser], block_id: str, is_active: bool) -> Dict[str, Any]:
    user = _require_user(user)
    _check_fields(isActive=(is_active, lambda v: isinstance(v, bool), "Doit être un booléen"))
    block = _load_block(db, block_id)

    template = _load_template(db, block.template_id)
    _authorize(db, user, template)

    ordering.toggle_active(db, block, is_active)
    invalidate(*template_paths(template.id, block.id))
    return _ok(isActive=block.is_active)


@action
def get_block(db: Session, user: Optional[CurrentUser], block_id: str) -> Dict[str, Any]:
    user = _require_user(user)
    block = _load_block(db, block_id)
    template = _load_template(db, block.template_id)
    _authorize(db, user, template, "view")
    return _ok(block=block_to_dict(block), template=template_to_dict(template))


# ── Templates ───────────────────────────────────────────────────────────────

@action
def get_template_for_edit(db: Session, user: Optional[CurrentUser], template_id: str) -> Dict[str, Any]:
    user = _require_user(user)
    template = _load_template(db, template_id)
    _authorize(db, user, template, "view")
    return _ok(template=template_to_dict(template, db_list_blocks(db, template.id)))


@action
def list_templates(db: Session, user: Optional[CurrentUser], scope: Optional[str] = None) -> Dict[str, Any]:
    """Templates visibles par l'utilisateur, filtrés par portée ('global' | 'workspace:<id>')."""
    user = _require_user(user)
    try:
        templates = db_list_templates(db, scope)
    except ValueError as e:
        raise ValidationError({"scope": [str(e)]}) from e
    visible = [t for t in templates if authorize(db, user, t, "view").allowed]
    return _ok(templates=[template_to_dict(t) for t in visible])


@action
def create_template(db: Session, user: Optional[CurrentUser], name: str, description: Optional[str] = None,
                    kind: str = TemplateKind.CONTENT_BLOCK.value,
                    workspace_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Crée un template.
    global → admin plateforme ; workspace → work_admin du workspace.
    Un template content_block naît avec un bloc PageBuilder vide en position 0,
    dans la même transaction.
    """
    user = _require_user(user)
    data = TemplateCreate(name=name, description=description, kind=kind, workspace_id=workspace_id)
    initial = None
    if data.kind == TemplateKind.CONTENT_BLOCK:
        initial = REGISTRY.validate(DOCUMENT_TYPE, empty_document(data.name, data.description or "")).content

    authorize_create(db, user, data.workspace_id).raise_if_denied()

    with transaction(db):
        template = TemplateDB(
            name=data.name, description=data.description, kind=data.kind.value,
            workspace_id=data.workspace_id, created_by_user_id=user.id,
        )
        db.add(template)
        if initial is not None:
            db.add(TemplateBlockDB(template=template, type=DOCUMENT_TYPE, content=jd(initial),
                                   sort_order=0, is_active=True))
    log.info("Template %s créé (%s, %s) par %s", template.id, data.kind.value, template.owner_scope, user.id)
    invalidate(*template_paths(template.id))
    return _ok(templateId=template.id)


UNSET: Any = object()


@action
def update_template(db: Session, user: Optional[CurrentUser], template_id: str,
                    name: Optional[str] = None, description: Any = UNSET) -> Dict[str, Any]:
    """
    Renomme / redécrit un template.
    description absente (UNSET) → inchangée ; None ou "" → effacée.
    """
    user = _require_user(user)
    clear_description = description is None or description == ""
    is_new = description is not UNSET and not clear_description
    data = TemplateUpdate(name=name, description=description if is_new else None)

    template = _load_template(db, template_id)
    _authorize(db, user, template)

    with transaction(db):
        if data.name is not None:
            template.name = data.name
        if clear_description:
            template.description = None
        elif data.description is not None:
            template.description = data.description
    invalidate(*template_paths(template.id))
    return _ok(template=template_to_dict(template))


@action
def delete_template(db: Session, user: Optional[CurrentUser], template_id: str) -> Dict[str, Any]:
    """Supprime le template et ses blocs (cascade)."""
    user = _require_user(user)
    template = _load_template(db, template_id)
    _authorize(db, user, template, "delete")

    block_ids = [b.id for b in template.blocks]
    with transaction(db):
        db.delete(template)
    log.info("Template %s supprimé par %s", template_id, user.id)
    invalidate(*template_paths(template_id))
    invalidate(*(f"/admin/editor/{bid}" for bid in block_ids))
    return _ok()


@action
def duplicate_template(db: Session, user: Optional[CurrentUser], template_id: str) -> Dict[str, Any]:
    """
    Copie un template ("Copie de <nom>") dans la même portée, blocs compris
    (ordre, contenu et état actif conservés), en une seule transaction.
    Il faut pouvoir lire l'original et créer dans sa portée.
    """
    user = _require_user(user)
    source = _load_template(db, template_id)
    _authorize(db, user, source, "view")
    authorize_create(db, user, source.workspace_id).raise_if_denied()

    name = f"Copie de {source.name}"[:255]
    blocks = db_list_blocks(db, source.id)
    with transaction(db):
        duplicate = TemplateDB(
            name=name, description=source.description, kind=source.kind,
            workspace_id=source.workspace_id, created_by_user_id=user.id,
        )
        db.add(duplicate)
        for b in blocks:
            db.add(TemplateBlockDB(template=duplicate, type=b.type, content=b.content,
                                   sort_order=b.sort_order, is_active=b.is_active))
    log.info("Template %s dupliqué en %s par %s", source.id, duplicate.id, user.id)
    invalidate(*template_paths(duplicate.id))
    return _ok(templateId=duplicate.id, name=duplicate.name)


# ── Éléments page-builder (repassent par save_block_content) ───────────────

def _load_document(db: Session, user: CurrentUser, block_id: str) -> Dict[str, Any]:
    block = _load_block(db, block_id)
    _authorize(db, user, _load_template(db, block.template_id))
    if block.type != DOCUMENT_TYPE:
        raise ValidationError({"type": ["Ce bloc n'est pas un document page-builder"]})
    return jl(block.content)


def _save_elements(db: Session, user: CurrentUser, block_id: str, doc: Dict[str, Any],
                   elements, **extra) -> Dict[str, Any]:
    result = save_block_content(db, user, block_id, {**doc, "elements": tree.dump_elements(elements)})
    if result["success"]:
        result.update(extra)
    return result


@action
def add_element(db: Session, user: Optional[CurrentUser], block_id: str, element_type: str,
                parent_id: Optional[str] = None, index: Optional[int] = None) -> Dict[str, Any]:
    user = _require_user(user)
    _check_fields(
        type=(element_type, _non_empty_str, "Champ obligatoire"),
        parentId=(parent_id, _id_or_none, "Identifiant invalide"),
        index=(index, _index_or_none, "Doit être un nombre entier"),
    )
    doc = _load_document(db, user, block_id)
    try:
        element = create_element(element_type)
    except ValueError as e:
        raise ValidationError({"type": [str(e)]}) from e
    try:
        elements = tree.insert_element(tree.load_elements(doc.get("elements", [])), element, parent_id, index)
    except KeyError as e:
        raise NotFoundError("Élément parent introuvable") from e
    return _save_elements(db, user, block_id, doc, elements, elementId=element.id)


@action
def move_element(db: Session, user: Optional[CurrentUser], block_id: str, element_id: str,
                 parent_id: Optional[str] = None, index: Optional[int] = None) -> Dict[str, Any]:
    user = _require_user(user)
    _check_fields(
        parentId=(parent_id, _id_or_none, "Identifiant invalide"),
        index=(index, _index_or_none, "Doit être un nombre entier"),
    )
    doc = _load_document(db, user, block_id)
    try:
        elements = tree.move_element(tree.load_elements(doc.get("elements", [])), element_id, parent_id, index)
    except KeyError as e:
        raise NotFoundError("Élément introuvable") from e
    except ValueError as e:
        raise ValidationError({"parentId": [str(e)]}) from e
    return _save_elements(db, user, block_id, doc, elements)


@action
def remove_element(db: Session, user: Optional[CurrentUser], block_id: str, element_id: str) -> Dict[str, Any]:
    user = _require_user(user)
    doc = _load_document(db, user, block_id)
    try:
        elements = tree.remove_element(tree.load_elements(doc.get("elements", [])), element_id)
    except KeyError as e:
        raise NotFoundError("Élément introuvable") from e
    return _save_elements(db, user, block_id, doc, elements)


def validate_content(block_type: str, content: Any) -> Dict[str, Any]:
    """Validation à blanc (aucune écriture) : contenu normalisé ou erreurs par champ."""
    try:
        validated = REGISTRY.validate(block_type, content)
    except ContentValidationError as e:
        return ValidationError(e.field_errors).to_result()
    return _ok(validated.warnings, content=validated.content)
