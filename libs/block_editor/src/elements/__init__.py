"""
Document page-builder et opérations sur l'arbre d'éléments.
La fabrique (elements.factory) dépend du registry : importée à part.
"""
from .document import (
    DOCUMENT_TYPE, BlockContentDocument, DocumentMetadata, Element,
    empty_document, validate_document,
)
from .tree import (
    dump_elements, find_element, find_parent_id, index_elements, insert_element,
    load_elements, locate, move_element, remove_element, update_props, walk,
)

__all__ = [
    "DOCUMENT_TYPE", "BlockContentDocument", "DocumentMetadata", "Element",
    "empty_document", "validate_document",
    "dump_elements", "find_element", "find_parent_id", "index_elements", "insert_element",
    "load_elements", "locate", "move_element", "remove_element", "update_props", "walk",
]
