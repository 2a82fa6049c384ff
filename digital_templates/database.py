"""SQLite : init + session + helpers de lecture"""
import json, logging, os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from .errors import ConflictError
from .models import Base, TemplateBlockDB, TemplateDB, UserDB, WorkspaceMemberDB, parse_scope

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"

DB_PATH      = os.getenv("DB_PATH", str(DATA_DIR / "digital_templates.db"))
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DB_PATH}")
SQL_ECHO     = os.getenv("SQL_ECHO", "0") == "1"


def _make_engine(url: str):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, echo=SQL_ECHO)


ENGINE       = _make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=ENGINE)


def configure(url: str):
    """Rebranche l'engine (tests : base temporaire)."""
    global ENGINE
    ENGINE = _make_engine(url)
    SessionLocal.configure(bind=ENGINE)
    return ENGINE


def init_db():
    if ENGINE.url.drivername.startswith("sqlite") and ENGINE.url.database:
        Path(ENGINE.url.database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=ENGINE)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """Un commit par opération ; rollback sur échec, IntegrityError → ConflictError."""
    try:
        yield
        db.commit()
    except IntegrityError as e:
        db.rollback()
        log.warning("Conflit d'écriture : %s", e.orig)
        raise ConflictError() from e
    except Exception:
        db.rollback()
        raise


# ── JSON helpers ──
def jl(s: str) -> Any:
    try: return json.loads(s or "{}")
    except (TypeError, ValueError): return {}

def jd(o) -> str:
    return json.dumps(o, ensure_ascii=False)


# ── Templates ──
def db_get_template(db: Session, template_id: str) -> Optional[TemplateDB]:
    return db.query(TemplateDB).filter_by(id=template_id).first()

def db_list_templates(db: Session, scope_filter: Optional[str] = None) -> List[TemplateDB]:
    """scope_filter : None (tous), 'global', 'workspace:<id>'."""
    q = db.query(TemplateDB)
    if scope_filter is not None:
        workspace_id = parse_scope(scope_filter)
        q = q.filter(TemplateDB.workspace_id.is_(None)) if workspace_id is None else q.filter_by(workspace_id=workspace_id)
    return q.order_by(TemplateDB.created_at.desc()).all()


# ── Blocks ──
def db_get_block(db: Session, block_id: str) -> Optional[TemplateBlockDB]:
    return db.query(TemplateBlockDB).filter_by(id=block_id).first()

def db_list_blocks(db: Session, template_id: str) -> List[TemplateBlockDB]:
    return db.query(TemplateBlockDB).filter_by(template_id=template_id).order_by(TemplateBlockDB.sort_order).all()

def block_to_dict(b: TemplateBlockDB) -> Dict[str, Any]:
    return {
        "id": b.id, "templateId": b.template_id, "type": b.type, "content": jl(b.content),
        "sortOrder": b.sort_order, "isActive": b.is_active,
    }

def template_to_dict(t: TemplateDB, blocks: Optional[List[TemplateBlockDB]] = None) -> Dict[str, Any]:
    out = {
        "id": t.id, "name": t.name, "description": t.description, "kind": t.kind,
        "ownerScope": t.owner_scope, "createdByUserId": t.created_by_user_id,
        "createdAt": t.created_at.isoformat() if t.created_at else None,
        "updatedAt": t.updated_at.isoformat() if t.updated_at else None,
    }
    if blocks is not None:
        out["blocks"] = [block_to_dict(b) for b in blocks]
    return out


# ── Identité ──
def db_get_user(db: Session, user_id: str) -> Optional[UserDB]:
    return db.query(UserDB).filter_by(id=user_id).first()

def db_get_membership(db: Session, user_id: str, workspace_id: str) -> Optional[WorkspaceMemberDB]:
    return db.query(WorkspaceMemberDB).filter_by(user_id=user_id, workspace_id=workspace_id).first()
