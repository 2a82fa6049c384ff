"""Fabrique d'éléments page-builder : props par défaut validées + id uuid frais."""
import uuid
from typing import List, Optional

from ..registry import REGISTRY, SchemaRegistry
from .document import Element

ELEMENT_TYPES = ("Section", "Container", "Heading", "Text", "Button", "Image")


def create_element(element_type: str, registry: Optional[SchemaRegistry] = None,
                   children: Optional[List[Element]] = None) -> Element:
    registry = registry or REGISTRY
    if element_type not in ELEMENT_TYPES or not registry.is_registered(element_type):
        raise ValueError(f"Type d'élément inconnu : {element_type}")
    return Element(
        id=str(uuid.uuid4()),
        type=element_type,
        props=registry.default_content(element_type),
        children=children or [],
    )
