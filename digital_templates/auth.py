"""
Contrôle d'accès aux templates.

  global            → rôle plateforme super_admin / admin uniquement
  workspace:<id>    → membres de <id> uniquement (lookup (user_id, workspace_id) en base)
                      les admins plateforme n'ont PAS d'accès implicite

Refus « non authentifié » distinct de « interdit ».
"""
import logging
from typing import NamedTuple, Optional

from sqlalchemy.orm import Session

from .database import db_get_membership
from .errors import Forbidden, Unauthenticated
from .models import CurrentUser, PlatformRole, TemplateDB, WorkspaceRole

log = logging.getLogger(__name__)

ACTIONS = ("view", "edit", "delete")


class Decision(NamedTuple):
    allowed:       bool
    reason:        str
    code:          Optional[str] = None   # unauthenticated | forbidden
    required_role: Optional[str] = None

    def raise_if_denied(self) -> None:
        if self.allowed:
            return
        if self.code == Unauthenticated.code:
            raise Unauthenticated(self.reason)
        raise Forbidden(self.reason)


def _allow(reason: str) -> Decision:
    return Decision(True, reason)


def _unauthenticated() -> Decision:
    return Decision(False, "Authentification requise", Unauthenticated.code)


def authorize(db: Session, user: Optional[CurrentUser], template: TemplateDB, action: str = "edit") -> Decision:
    if action not in ACTIONS:
        raise ValueError(f"Action inconnue : {action}")
    if user is None:
        return _unauthenticated()

    if template.workspace_id is None:
        if user.is_platform_admin:
            return _allow("Administrateur plateforme")
        verb = "supprimer" if action == "delete" else "modifier"
        log.info("Accès refusé : %s sur template global %s (rôle=%s)", user.id, template.id, user.role)
        return Decision(False, f"Seuls les administrateurs plateforme peuvent {verb} les templates globaux",
                        Forbidden.code, PlatformRole.ADMIN.value)

    if db_get_membership(db, user.id, template.workspace_id) is None:
        log.info("Accès refusé : %s non membre du workspace %s", user.id, template.workspace_id)
        return Decision(False, "Ce template appartient à un autre workspace",
                        Forbidden.code, WorkspaceRole.WORK_USER.value)
    return _allow("Membre du workspace")


def authorize_create(db: Session, user: Optional[CurrentUser], workspace_id: Optional[str]) -> Decision:
    """Création : global → admin plateforme ; workspace → work_admin de ce workspace."""
    if user is None:
        return _unauthenticated()

    if workspace_id is None:
        if user.is_platform_admin:
            return _allow("Administrateur plateforme")
        return Decision(False, "Seuls les administrateurs plateforme peuvent créer des templates globaux",
                        Forbidden.code, PlatformRole.ADMIN.value)

    membership = db_get_membership(db, user.id, workspace_id)
    if membership is None or membership.role != WorkspaceRole.WORK_ADMIN.value:
        return Decision(False, "Seuls les administrateurs du workspace peuvent créer des templates",
                        Forbidden.code, WorkspaceRole.WORK_ADMIN.value)
    return _allow("Administrateur du workspace")
