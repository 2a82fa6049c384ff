"""
Erreurs de l'éditeur : chaque classe porte son code, son statut HTTP et sa forme résultat.
Le décorateur `action` (actions.py) convertit tout en {"success": False, ...}.
"""
from typing import Any, Dict, List, Optional


class EditorError(Exception):
    code = "unknown_error"
    status_code = 500
    default_message = "Erreur inattendue, veuillez réessayer"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_result(self) -> Dict[str, Any]:
        return {"success": False, "code": self.code, "error": self.message}


class ValidationError(EditorError):
    code = "validation_error"
    status_code = 422
    default_message = "Contenu invalide"

    def __init__(self, field_errors: Dict[str, List[str]], message: Optional[str] = None):
        self.field_errors = field_errors
        super().__init__(message)

    def to_result(self) -> Dict[str, Any]:
        out = super().to_result()
        out["fieldErrors"] = {path: msgs[0] for path, msgs in self.field_errors.items() if msgs}
        return out


class AuthorizationError(EditorError):
    code = "forbidden"
    status_code = 403
    default_message = "Accès refusé"


class Unauthenticated(AuthorizationError):
    code = "unauthenticated"
    status_code = 401
    default_message = "Authentification requise"


class Forbidden(AuthorizationError):
    pass


class NotFoundError(EditorError):
    code = "not_found"
    status_code = 404
    default_message = "Introuvable"


class ConflictError(EditorError):
    code = "conflict"
    status_code = 409
    default_message = "Modification concurrente détectée, rechargez la page et réessayez"


class UnknownError(EditorError):
    pass


STATUS_BY_CODE = {cls.code: cls.status_code for cls in (
    ValidationError, Unauthenticated, Forbidden, NotFoundError, ConflictError, UnknownError,
)}
