"""
Document Page-Builder : { elements: Element[], metadata: { name, description? } }.
Arbre récursif (tableau d'enfants, pas de référence parent) : sérialisation JSON directe.
"""
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ..errors import ContentValidationError, ROOT_PATH, field_errors_from_pydantic, join_path, merge_errors

if TYPE_CHECKING:
    from ..registry import SchemaRegistry

log = logging.getLogger(__name__)

DOCUMENT_TYPE = "PageBuilder"


class Element(BaseModel):
    """Nœud de l'arbre. props validées par le schéma enregistré pour `type`."""
    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    props: Dict[str, Any] = Field(default_factory=dict)
    children: List["Element"] = Field(default_factory=list)


class DocumentMetadata(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class BlockContentDocument(BaseModel):
    elements: List[Element] = Field(default_factory=list)
    metadata: DocumentMetadata


def empty_document(name: str = "Nouveau bloc", description: str = "") -> Dict[str, Any]:
    return {"elements": [], "metadata": {"name": name, "description": description}}


def _validate_elements(
    elements: List[Element],
    registry: "SchemaRegistry",
    prefix: str,
    seen: Set[str],
    errors: Dict[str, List[str]],
    warnings: List[str],
) -> List[Dict[str, Any]]:
    normalized = []
    for i, el in enumerate(elements):
        path = join_path(prefix, i)
        if el.id in seen:
            errors.setdefault(join_path(path, "id"), []).append(f"Identifiant d'élément dupliqué : {el.id}")
        seen.add(el.id)

        props = el.props
        if el.type == DOCUMENT_TYPE:
            errors.setdefault(join_path(path, "type"), []).append("Un document ne peut pas être imbriqué")
        elif registry.is_registered(el.type):
            try:
                props = registry.validate(el.type, el.props).content
            except ContentValidationError as e:
                merge_errors(errors, {join_path(path, "props", p if p != ROOT_PATH else ""): m
                                      for p, m in e.field_errors.items()})
        else:
            msg = f"Type d'élément inconnu {el.type!r} accepté sans validation ({path})"
            log.warning(msg)
            warnings.append(msg)

        children = _validate_elements(el.children, registry, join_path(path, "children"), seen, errors, warnings)
        normalized.append({"id": el.id, "type": el.type, "props": props, "children": children})
    return normalized


def validate_document(data: Any, registry: "SchemaRegistry") -> Tuple[Dict[str, Any], List[str]]:
    """
    Valide un document complet.

    1. Structure (elements/metadata, id/type/children de chaque nœud)
    2. props de chaque élément via le registry (chemins préfixés elements.N.props…)
    3. Unicité des id sur tout l'arbre

    Retourne (document normalisé, warnings) ou lève ContentValidationError.
    """
    try:
        doc = BlockContentDocument.model_validate(data)
    except PydanticValidationError as e:
        raise ContentValidationError(field_errors_from_pydantic(e))

    errors: Dict[str, List[str]] = {}
    warnings: List[str] = []
    elements = _validate_elements(doc.elements, registry, "elements", set(), errors, warnings)
    if errors:
        raise ContentValidationError(errors)

    return {"elements": elements, "metadata": doc.metadata.model_dump(mode="json", exclude_none=True)}, warnings
