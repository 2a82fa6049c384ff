"""
Socle des schémas de contenu.
Clés JSON stockées en camelCase (alias), attributs Python en snake_case.
"""
import re
from typing import Annotated, Any, ClassVar, Dict, Optional
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_HEX_COLOR = re.compile(r"#[0-9A-Fa-f]{6}")


def _check_hex_color(v: str) -> str:
    if not _HEX_COLOR.fullmatch(v):
        raise ValueError("Couleur invalide (format hex : #RRGGBB)")
    return v


def _check_url(v: str) -> str:
    if v == "":
        return v
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("URL invalide")
    return v


def _check_required_url(v: str) -> str:
    if v == "":
        raise ValueError("URL obligatoire")
    return _check_url(v)


HexColor    = Annotated[str, AfterValidator(_check_hex_color)]
Url         = Annotated[str, AfterValidator(_check_url)]       # "" accepté (champ vidé)
RequiredUrl = Annotated[str, AfterValidator(_check_required_url)]


class ContentModel(BaseModel):
    """Base de tous les sous-objets de contenu (alias camelCase, clés inconnues ignorées)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class BlockContent(ContentModel):
    """Contenu d'un bloc/élément. SEED = valeurs posées à la création (avant validation)."""
    SEED: ClassVar[Dict[str, Any]] = {}

    def to_content(self) -> Dict[str, Any]:
        """Forme normalisée stockée : alias camelCase, champs optionnels absents omis."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class BlockRecord(ContentModel):
    """Bloc tel que stocké / échangé : {type, content, sortOrder, isActive}."""
    id: Optional[str] = None
    type: str
    content: Dict[str, Any] = Field(default_factory=dict)
    sort_order: int = Field(default=0, ge=0)
    is_active: bool = True
