"""
Erreurs de validation du contenu des blocs.
Chemin de champ (ex: "border.width", "elements.0.props.text") → liste de messages.
"""
from typing import Dict, List

from pydantic import ValidationError as PydanticValidationError

ROOT_PATH = "_root"

_MESSAGES: Dict[str, str] = {
    "missing":             "Champ obligatoire",
    "string_type":         "Doit être une chaîne de caractères",
    "string_too_short":    "Doit contenir au moins {min_length} caractère(s)",
    "string_too_long":     "Doit contenir au plus {max_length} caractères",
    "greater_than_equal":  "Doit être supérieur ou égal à {ge}",
    "less_than_equal":     "Doit être inférieur ou égal à {le}",
    "literal_error":       "Valeur invalide, attendu : {expected}",
    "int_type":            "Doit être un nombre entier",
    "int_parsing":         "Doit être un nombre entier",
    "int_from_float":      "Doit être un nombre entier",
    "float_type":          "Doit être un nombre",
    "float_parsing":       "Doit être un nombre",
    "bool_type":           "Doit être un booléen",
    "bool_parsing":        "Doit être un booléen",
    "dict_type":           "Doit être un objet",
    "model_type":          "Doit être un objet",
    "model_attributes_type": "Doit être un objet",
    "list_type":           "Doit être une liste",
}


class ContentValidationError(ValueError):
    """Contenu refusé par le schéma de son type. Jamais persisté partiellement."""

    def __init__(self, field_errors: Dict[str, List[str]]):
        self.field_errors = {path: list(msgs) for path, msgs in field_errors.items()}
        super().__init__(f"Contenu invalide : {', '.join(sorted(self.field_errors)) or ROOT_PATH}")

    def first_errors(self) -> Dict[str, str]:
        """Premier message par chemin : ce que l'UI affiche sous chaque champ."""
        return {path: msgs[0] for path, msgs in self.field_errors.items() if msgs}

    @classmethod
    def single(cls, path: str, message: str) -> "ContentValidationError":
        return cls({path: [message]})


def join_path(*parts) -> str:
    return ".".join(str(p) for p in parts if p not in (None, ""))


def _message(err: dict) -> str:
    if err["type"] == "value_error":
        return str(err.get("ctx", {}).get("error", err["msg"]))
    template = _MESSAGES.get(err["type"])
    if template is None:
        return err["msg"]
    try:
        return template.format(**err.get("ctx", {}))
    except (KeyError, IndexError):
        return err["msg"]


def field_errors_from_pydantic(exc: PydanticValidationError, prefix: str = "") -> Dict[str, List[str]]:
    """Convertit une ValidationError pydantic en mapping chemin → messages."""
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        path = join_path(prefix, *err["loc"]) or ROOT_PATH
        errors.setdefault(path, []).append(_message(err))
    return errors


def merge_errors(target: Dict[str, List[str]], source: Dict[str, List[str]]) -> Dict[str, List[str]]:
    for path, msgs in source.items():
        target.setdefault(path, []).extend(msgs)
    return target
