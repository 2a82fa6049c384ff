"""
Identité de l'appelant : en-tête X-User-Id résolu en CurrentUser.
La gestion de session est hors périmètre : l'en-tête la remplace.
"""
from typing import Optional

from fastapi import Depends, Header
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import db_get_user, get_db
from ..errors import STATUS_BY_CODE
from ..models import CurrentUser


def current_user(x_user_id: Optional[str] = Header(default=None),
                 db: Session = Depends(get_db)) -> Optional[CurrentUser]:
    if not x_user_id:
        return None
    user = db_get_user(db, x_user_id)
    if user is None:
        return None
    # appartenances lues en base par auth.authorize, pas ici
    return CurrentUser(id=user.id, role=user.platform_role)


def respond(result: dict, success_status: int = 200) -> JSONResponse:
    """Résultat d'action → réponse JSON avec le statut HTTP du code d'erreur."""
    if result.get("success"):
        return JSONResponse(result, status_code=success_status)
    return JSONResponse(result, status_code=STATUS_BY_CODE.get(result.get("code"), 500))
