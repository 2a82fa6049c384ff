"""
Registry des schémas de contenu : type de bloc → modèle pydantic.

  validate(type, content)   →  ValidatedContent(content normalisé, warnings)
  default_content(type)     →  contenu par défaut validé (création de bloc / d'élément)
  catalog()                 →  types enregistrés + JSON schema

Types connus : fail-closed (ContentValidationError).
Types inconnus : fail-open (contenu rendu tel quel + warning loggé).
"""
import logging
from typing import Any, Dict, List, NamedTuple, Optional, Type

from pydantic import ValidationError as PydanticValidationError

from .blocks import (
    BlockContent, ButtonContent, CTAContent, ContainerContent, HeadingContent,
    HeroContent, ImageContent, SectionContent, TextContent,
)
from .elements.document import DOCUMENT_TYPE, BlockContentDocument, empty_document, validate_document
from .errors import ContentValidationError, ROOT_PATH, field_errors_from_pydantic

log = logging.getLogger(__name__)


class ValidatedContent(NamedTuple):
    content: Dict[str, Any]
    warnings: List[str]


class SchemaRegistry:
    """Table type → modèle. Le type document (PageBuilder) est toujours connu."""

    def __init__(self):
        self._models: Dict[str, Type[BlockContent]] = {}

    def register(self, block_type: str, model: Type[BlockContent]) -> None:
        if block_type == DOCUMENT_TYPE:
            raise ValueError(f"{DOCUMENT_TYPE} est réservé au document page-builder")
        self._models[block_type] = model

    def types(self) -> List[str]:
        return [*self._models, DOCUMENT_TYPE]

    def is_registered(self, block_type: str) -> bool:
        return block_type == DOCUMENT_TYPE or block_type in self._models

    def model_for(self, block_type: str) -> Optional[Type[BlockContent]]:
        return self._models.get(block_type)

    def validate(self, block_type: str, content: Any) -> ValidatedContent:
        """Valide et normalise. Pur : `content` n'est jamais modifié."""
        if not isinstance(content, dict):
            raise ContentValidationError.single(ROOT_PATH, "Doit être un objet")

        if block_type == DOCUMENT_TYPE:
            doc, warnings = validate_document(content, self)
            return ValidatedContent(doc, warnings)

        model = self._models.get(block_type)
        if model is None:
            msg = f"Type de bloc inconnu {block_type!r} : contenu accepté sans validation"
            log.warning(msg)
            return ValidatedContent(dict(content), [msg])

        try:
            return ValidatedContent(model.model_validate(content).to_content(), [])
        except PydanticValidationError as e:
            raise ContentValidationError(field_errors_from_pydantic(e))

    def default_content(self, block_type: str) -> Dict[str, Any]:
        if block_type == DOCUMENT_TYPE:
            return self.validate(block_type, empty_document()).content
        model = self._models.get(block_type)
        if model is None:
            raise ValueError(f"Type de bloc inconnu : {block_type}")
        return self.validate(block_type, dict(model.SEED)).content

    def catalog(self) -> List[Dict[str, Any]]:
        out = [
            {"type": t, "schema": model.model_json_schema(by_alias=True)}
            for t, model in self._models.items()
        ]
        out.append({"type": DOCUMENT_TYPE, "schema": BlockContentDocument.model_json_schema()})
        return out


def default_registry() -> SchemaRegistry:
    registry = SchemaRegistry()
    registry.register("Section",   SectionContent)
    registry.register("Container", ContainerContent)
    registry.register("Heading",   HeadingContent)
    registry.register("Text",      TextContent)
    registry.register("Button",    ButtonContent)
    registry.register("Image",     ImageContent)
    registry.register("Hero",      HeroContent)
    registry.register("CTA",       CTAContent)
    return registry


REGISTRY = default_registry()
