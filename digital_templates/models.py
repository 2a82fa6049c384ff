"""
Data models : Template, TemplateBlock + identité (User, Workspace, WorkspaceMember)
SQLAlchemy (SQLite) + Pydantic v2 + Enums
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

import sqlalchemy as sa
from pydantic import BaseModel, Field
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ── ENUMS ──────────────────────────────────────────────────────────────

class TemplateKind(str, Enum):
    PROFILE_TEMPLATE = "profile_template"
    CONTENT_BLOCK    = "content_block"


class PlatformRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN       = "admin"
    MANAGER     = "manager"


class WorkspaceRole(str, Enum):
    WORK_ADMIN   = "work_admin"
    WORK_MANAGER = "work_manager"
    WORK_USER    = "work_user"


PLATFORM_ADMIN_ROLES = (PlatformRole.SUPER_ADMIN.value, PlatformRole.ADMIN.value)

GLOBAL_SCOPE = "global"


def workspace_scope(workspace_id: str) -> str:
    return f"workspace:{workspace_id}"


def parse_scope(scope: str) -> Optional[str]:
    """'global' → None, 'workspace:<id>' → '<id>'. ValueError sinon."""
    if scope == GLOBAL_SCOPE:
        return None
    prefix, _, workspace_id = scope.partition(":")
    if prefix != "workspace" or not workspace_id:
        raise ValueError(f"Portée invalide : {scope}")
    return workspace_id


# ── ORM ────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


class UserDB(Base):
    __tablename__ = "users"
    id:            Mapped[str]           = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email:         Mapped[str]           = mapped_column(sa.String, nullable=False, unique=True)
    name:          Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    platform_role: Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)  # super_admin | admin | manager

    memberships: Mapped[List["WorkspaceMemberDB"]] = relationship("WorkspaceMemberDB", back_populates="user", cascade="all, delete-orphan")


class WorkspaceDB(Base):
    __tablename__ = "workspaces"
    id:   Mapped[str] = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(sa.String, nullable=False)
    slug: Mapped[str] = mapped_column(sa.String, nullable=False, unique=True)


class WorkspaceMemberDB(Base):
    __tablename__ = "workspace_members"
    __table_args__ = (sa.UniqueConstraint("user_id", "workspace_id", name="uq_member_user_workspace"),)
    id:           Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    user_id:      Mapped[str] = mapped_column(sa.String, sa.ForeignKey("users.id"), nullable=False)
    workspace_id: Mapped[str] = mapped_column(sa.String, sa.ForeignKey("workspaces.id"), nullable=False)
    role:         Mapped[str] = mapped_column(sa.String, default=WorkspaceRole.WORK_USER.value)

    user: Mapped["UserDB"] = relationship("UserDB", back_populates="memberships")


class TemplateDB(Base):
    __tablename__ = "digital_templates"
    id:                 Mapped[str]           = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name:               Mapped[str]           = mapped_column(sa.String(255), nullable=False)
    description:        Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    kind:               Mapped[str]           = mapped_column(sa.String, default=TemplateKind.CONTENT_BLOCK.value)
    workspace_id:       Mapped[Optional[str]] = mapped_column(sa.String, sa.ForeignKey("workspaces.id"), nullable=True)  # NULL = global
    created_by_user_id: Mapped[Optional[str]] = mapped_column(sa.String, sa.ForeignKey("users.id"), nullable=True)
    created_at:         Mapped[datetime]      = mapped_column(sa.DateTime, default=datetime.utcnow)
    updated_at:         Mapped[datetime]      = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    blocks: Mapped[List["TemplateBlockDB"]] = relationship(
        "TemplateBlockDB", back_populates="template",
        cascade="all, delete-orphan", order_by="TemplateBlockDB.sort_order",
    )

    @property
    def owner_scope(self) -> str:
        return GLOBAL_SCOPE if self.workspace_id is None else workspace_scope(self.workspace_id)


class TemplateBlockDB(Base):
    __tablename__ = "template_blocks"
    __table_args__ = (sa.UniqueConstraint("template_id", "sort_order", name="uq_block_template_order"),)
    id:          Mapped[str]      = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    template_id: Mapped[str]      = mapped_column(sa.String, sa.ForeignKey("digital_templates.id", ondelete="CASCADE"), nullable=False, index=True)
    type:        Mapped[str]      = mapped_column(sa.String, nullable=False)
    content:     Mapped[str]      = mapped_column(sa.Text, default="{}")  # JSON
    sort_order:  Mapped[int]      = mapped_column(sa.Integer, nullable=False, default=0)
    is_active:   Mapped[bool]     = mapped_column(sa.Boolean, default=True)
    created_at:  Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow)
    updated_at:  Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    template: Mapped["TemplateDB"] = relationship("TemplateDB", back_populates="blocks")


# ── PYDANTIC SCHEMAS ────────────────────────────────────────────────────

class CurrentUser(BaseModel):
    """Identité résolue par la couche session (hors périmètre)."""
    id:                    str
    role:                  Optional[str]  = None   # rôle plateforme
    workspace_memberships: Dict[str, str] = Field(default_factory=dict)  # indicatif : jamais lu par auth

    @property
    def is_platform_admin(self) -> bool:
        return self.role in PLATFORM_ADMIN_ROLES


class TemplateCreate(BaseModel):
    name:         str           = Field(min_length=3, max_length=255)
    description:  Optional[str] = Field(default=None, max_length=1000)
    kind:         TemplateKind  = TemplateKind.CONTENT_BLOCK
    workspace_id: Optional[str] = None  # None = global


class TemplateUpdate(BaseModel):
    name:        Optional[str] = Field(default=None, min_length=3, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)

