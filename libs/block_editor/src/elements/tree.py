"""
Opérations pures sur l'arbre d'éléments.
Aucune fonction ne modifie sa liste d'entrée : chaque opération retourne une nouvelle liste
(les sous-arbres non touchés sont partagés).

Erreurs : KeyError si un id référencé est absent, ValueError si l'opération casserait l'arbre
(id dupliqué, déplacement dans son propre descendant).
"""
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .document import Element


def load_elements(raw: List[Dict[str, Any]]) -> List[Element]:
    return [Element.model_validate(el) for el in raw]


def dump_elements(elements: List[Element]) -> List[Dict[str, Any]]:
    return [el.model_dump(mode="json") for el in elements]


def walk(elements: List[Element]) -> Iterator[Element]:
    """Parcours en profondeur, ordre document."""
    for el in elements:
        yield el
        yield from walk(el.children)


def index_elements(elements: List[Element]) -> Dict[str, Element]:
    """Index à plat id → élément (les id sont uniques sur tout l'arbre)."""
    return {el.id: el for el in walk(elements)}


def find_element(elements: List[Element], element_id: str) -> Optional[Element]:
    return index_elements(elements).get(element_id)


def locate(elements: List[Element], element_id: str,
           _parent: Optional[str] = None) -> Optional[Tuple[Optional[str], int]]:
    """(id du parent ou None si racine, position parmi les frères) : None si absent."""
    for i, el in enumerate(elements):
        if el.id == element_id:
            return _parent, i
        found = locate(el.children, element_id, el.id)
        if found is not None:
            return found
    return None


def find_parent_id(elements: List[Element], element_id: str) -> Optional[str]:
    """id du parent, None pour un élément racine. KeyError si l'élément est absent."""
    found = locate(elements, element_id)
    if found is None:
        raise KeyError(element_id)
    return found[0]


def _insert_at(siblings: List[Element], element: Element, index: Optional[int]) -> List[Element]:
    pos = len(siblings) if index is None else max(0, min(index, len(siblings)))
    return siblings[:pos] + [element] + siblings[pos:]


def _insert(elements: List[Element], element: Element,
            parent_id: Optional[str], index: Optional[int]) -> List[Element]:
    if parent_id is None:
        return _insert_at(elements, element, index)
    out = []
    for el in elements:
        if el.id == parent_id:
            el = el.model_copy(update={"children": _insert_at(el.children, element, index)})
        elif el.children:
            el = el.model_copy(update={"children": _insert(el.children, element, parent_id, index)})
        out.append(el)
    return out


def _remove(elements: List[Element], element_id: str) -> List[Element]:
    out = []
    for el in elements:
        if el.id == element_id:
            continue
        if el.children:
            el = el.model_copy(update={"children": _remove(el.children, element_id)})
        out.append(el)
    return out


def insert_element(elements: List[Element], element: Element,
                   parent_id: Optional[str] = None, index: Optional[int] = None) -> List[Element]:
    """Insère `element` (et son sous-arbre) sous `parent_id` (racine si None), en fin par défaut."""
    existing = index_elements(elements)
    clash = set(index_elements([element])) & set(existing)
    if clash:
        raise ValueError(f"Identifiant(s) déjà présent(s) dans l'arbre : {', '.join(sorted(clash))}")
    if parent_id is not None and parent_id not in existing:
        raise KeyError(parent_id)
    return _insert(elements, element, parent_id, index)


def remove_element(elements: List[Element], element_id: str) -> List[Element]:
    """Supprime l'élément et tout son sous-arbre."""
    if element_id not in index_elements(elements):
        raise KeyError(element_id)
    return _remove(elements, element_id)


def move_element(elements: List[Element], element_id: str,
                 parent_id: Optional[str] = None, index: Optional[int] = None) -> List[Element]:
    """
    Déplace un élément (avec ses enfants) sous `parent_id`, à `index`.
    `index` s'entend dans la liste cible après retrait de l'élément (borné).
    """
    idx = index_elements(elements)
    node = idx.get(element_id)
    if node is None:
        raise KeyError(element_id)
    if parent_id is not None:
        if parent_id not in idx:
            raise KeyError(parent_id)
        if parent_id == element_id or parent_id in index_elements(node.children):
            raise ValueError("Impossible de déplacer un élément dans lui-même ou dans un de ses descendants")
    return _insert(_remove(elements, element_id), node, parent_id, index)


def update_props(elements: List[Element], element_id: str, props: Dict[str, Any]) -> List[Element]:
    """Fusionne `props` dans les props de l'élément (mise à jour superficielle)."""
    if element_id not in index_elements(elements):
        raise KeyError(element_id)

    def _update(nodes: List[Element]) -> List[Element]:
        out = []
        for el in nodes:
            if el.id == element_id:
                el = el.model_copy(update={"props": {**el.props, **props}})
            elif el.children:
                el = el.model_copy(update={"children": _update(el.children)})
            out.append(el)
        return out

    return _update(elements)
