"""
Tests des actions de l'éditeur : pipeline auth → validation → autorisation → mutation → invalidation.
"""
import pytest

from digital_templates import actions, cache, database
from digital_templates.database import db_get_block, db_list_blocks, jl
from digital_templates.models import CurrentUser, TemplateDB, WorkspaceMemberDB


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def db(tmp_path):
    database.configure(f"sqlite:///{tmp_path / 'test.db'}")
    database.init_db()
    cache.clear()
    session = database.SessionLocal()
    session.add_all([
        WorkspaceMemberDB(user_id="alice", workspace_id="ws-a", role="work_admin"),
        WorkspaceMemberDB(user_id="bob",   workspace_id="ws-b", role="work_admin"),
    ])
    session.commit()
    yield session
    session.close()
    cache.clear()


ADMIN = CurrentUser(id="root", role="admin")
ALICE = CurrentUser(id="alice")
BOB   = CurrentUser(id="bob")


def _template(db, workspace_id=None) -> str:
    t = TemplateDB(name="Landing", kind="profile_template", workspace_id=workspace_id)
    db.add(t)
    db.commit()
    return t.id


def _block(db, user, template_id, block_type="Text"):
    result = actions.create_block(db, user, template_id, block_type)
    assert result["success"], result
    return result["blockId"]


@pytest.fixture
def invalidated():
    paths = []
    cache.on_invalidate(paths.append)
    return paths


# ── Scénarios ─────────────────────────────────────────────────────────────

class TestScenarios:
    def test_reorder_first_to_last(self, db):
        tid = _template(db)
        b0, b1, b2 = (_block(db, ADMIN, tid) for _ in range(3))
        result = actions.reorder_blocks(db, ADMIN, tid, b0, 2)
        assert result == {"success": True, "newOrder": [b1, b2, b0]}
        assert [(b.id, b.sort_order) for b in db_list_blocks(db, tid)] == [(b1, 0), (b2, 1), (b0, 2)]

    def test_cta_invalid_color_rejected(self, db):
        tid = _template(db)
        bid = _block(db, ADMIN, tid, "CTA")
        before = db_get_block(db, bid).content
        result = actions.save_block_content(db, ADMIN, bid, {"primaryColor": "red"})
        assert result["success"] is False
        assert result["code"] == "validation_error"
        assert set(result["fieldErrors"]) == {"primaryColor"}
        assert len(db_list_blocks(db, tid)) == 1
        assert db_get_block(db, bid).content == before

    def test_non_member_cannot_save(self, db):
        tid = _template(db, "ws-a")
        bid = _block(db, ALICE, tid)
        before = db_get_block(db, bid).content
        result = actions.save_block_content(db, BOB, bid, {"content": "piraté"})
        assert result["code"] == "forbidden"
        assert db_get_block(db, bid).content == before

    def test_delete_block_of_other_template(self, db):
        t1, t2 = _template(db), _template(db)
        a = _block(db, ADMIN, t1)
        b = _block(db, ADMIN, t2)
        result = actions.delete_block(db, ADMIN, t1, b)
        assert result["code"] == "not_found"
        assert [x.id for x in db_list_blocks(db, t1)] == [a]
        assert [x.id for x in db_list_blocks(db, t2)] == [b]

    def test_two_creates_on_empty_template(self, db):
        tid = _template(db)
        first, second = _block(db, ADMIN, tid, "Hero"), _block(db, ADMIN, tid, "CTA")
        assert [(b.id, b.sort_order) for b in db_list_blocks(db, tid)] == [(first, 0), (second, 1)]


# ── Contenu ───────────────────────────────────────────────────────────────

class TestSaveContent:
    def test_round_trip_returns_normalized(self, db):
        tid = _template(db)
        bid = _block(db, ADMIN, tid, "Hero")
        assert actions.save_block_content(db, ADMIN, bid, {"title": "Bonjour", "junk": 1}) == {"success": True}
        loaded = actions.get_block(db, ADMIN, bid)["block"]["content"]
        assert loaded == {"title": "Bonjour", "backgroundColor": "#ffffff", "textColor": "#000000"}

    def test_all_field_errors_first_message(self, db):
        tid = _template(db)
        bid = _block(db, ADMIN, tid, "CTA")
        result = actions.save_block_content(db, ADMIN, bid, {"border": {"width": 11}, "textAlignment": "x"})
        assert result["fieldErrors"]["border.width"] == "Doit être inférieur ou égal à 10"
        assert "textAlignment" in result["fieldErrors"]

    def test_unauthenticated_before_anything(self, db):
        result = actions.save_block_content(db, None, "nope", {"title": ""})
        assert result == {"success": False, "code": "unauthenticated", "error": "Authentification requise"}

    def test_unknown_block(self, db):
        assert actions.save_block_content(db, ADMIN, "nope", {})["code"] == "not_found"

    def test_invalidates_views(self, db, invalidated):
        tid = _template(db)
        bid = _block(db, ADMIN, tid, "Hero")
        invalidated.clear()
        actions.save_block_content(db, ADMIN, bid, {"title": "Nouveau"})
        assert set(invalidated) == {
            "/admin/digital-templates", f"/admin/digital-templates/{tid}",
            f"/preview/templates/{tid}", f"/admin/editor/{bid}",
        }

    def test_failing_listener_does_not_fail_save(self, db):
        tid = _template(db)
        bid = _block(db, ADMIN, tid, "Hero")

        def _broken(path):
            raise RuntimeError("cdn indisponible")

        cache.on_invalidate(_broken)
        assert actions.save_block_content(db, ADMIN, bid, {"title": "Ok"})["success"] is True

    def test_unexpected_error_is_opaque(self, db, monkeypatch):
        tid = _template(db)
        bid = _block(db, ADMIN, tid, "Hero")

        def _explode(*args, **kwargs):
            raise RuntimeError("disk I/O error at /var/lib/db")

        monkeypatch.setattr(actions.ordering, "update_content", _explode)
        result = actions.save_block_content(db, ADMIN, bid, {"title": "x"})
        assert result["code"] == "unknown_error"
        assert "disk" not in result["error"]


# ── Blocs ─────────────────────────────────────────────────────────────────

class TestBlocks:
    def test_create_unknown_type_rejected(self, db):
        tid = _template(db)
        result = actions.create_block(db, ADMIN, tid, "Carousel")
        assert result["code"] == "validation_error"
        assert "type" in result["fieldErrors"]
        assert db_list_blocks(db, tid) == []

    def test_create_forbidden_leaves_storage(self, db):
        tid = _template(db, "ws-a")
        assert actions.create_block(db, BOB, tid, "Hero")["code"] == "forbidden"
        assert db_list_blocks(db, tid) == []

    def test_delete_compacts(self, db):
        tid = _template(db)
        ids = [_block(db, ADMIN, tid) for _ in range(3)]
        assert actions.delete_block(db, ADMIN, tid, ids[0]) == {"success": True}
        assert [b.sort_order for b in db_list_blocks(db, tid)] == [0, 1]

    def test_toggle(self, db):
        tid = _template(db)
        bid = _block(db, ADMIN, tid)
        assert actions.toggle_block(db, ADMIN, bid, False) == {"success": True, "isActive": False}
        assert db_get_block(db, bid).is_active is False

    def test_reorder_rejects_non_integer(self, db):
        tid = _template(db)
        bid = _block(db, ADMIN, tid)
        assert actions.reorder_blocks(db, ADMIN, tid, bid, "2")["code"] == "validation_error"

    def test_malformed_arguments_are_field_errors(self, db):
        """Champs manquants ou mal typés : validation_error par champ, rien n'est écrit."""
        tid = _template(db)
        bid = _block(db, ADMIN, tid)
        result = actions.reorder_blocks(db, ADMIN, tid, None, "abc")
        assert result["code"] == "validation_error"
        assert set(result["fieldErrors"]) == {"movedBlockId", "targetIndex"}
        assert actions.create_block(db, ADMIN, tid, None)["fieldErrors"] == {"type": "Champ obligatoire"}
        assert actions.toggle_block(db, ADMIN, bid, None)["fieldErrors"] == {"isActive": "Doit être un booléen"}
        assert [b.id for b in db_list_blocks(db, tid)] == [bid]

    def test_unauthenticated_wins_over_malformed(self, db):
        assert actions.reorder_blocks(db, None, "x", None, "abc")["code"] == "unauthenticated"
        assert actions.toggle_block(db, None, "x", None)["code"] == "unauthenticated"
        assert actions.add_element(db, None, "x", None, index="1")["code"] == "unauthenticated"


# ── Templates ─────────────────────────────────────────────────────────────

class TestTemplates:
    def test_content_block_template_gets_initial_document(self, db):
        result = actions.create_template(db, ADMIN, "Page d'accueil", "Bloc principal")
        assert result["success"]
        blocks = db_list_blocks(db, result["templateId"])
        assert [(b.type, b.sort_order) for b in blocks] == [("PageBuilder", 0)]
        assert jl(blocks[0].content) == {
            "elements": [], "metadata": {"name": "Page d'accueil", "description": "Bloc principal"},
        }

    def test_profile_template_starts_empty(self, db):
        result = actions.create_template(db, ADMIN, "Profil", kind="profile_template")
        assert db_list_blocks(db, result["templateId"]) == []

    def test_name_too_short(self, db):
        result = actions.create_template(db, ADMIN, "ab")
        assert result["code"] == "validation_error"
        assert "name" in result["fieldErrors"]

    def test_workspace_creation_needs_work_admin(self, db):
        assert actions.create_template(db, ALICE, "Équipe A", workspace_id="ws-a")["success"]
        assert actions.create_template(db, ALICE, "Globale")["code"] == "forbidden"
        assert actions.create_template(db, ALICE, "Intrus", workspace_id="ws-b")["code"] == "forbidden"

    def test_get_for_edit_lists_blocks_in_order(self, db):
        tid = _template(db)
        ids = [_block(db, ADMIN, tid, t) for t in ("Hero", "CTA", "Section")]
        result = actions.get_template_for_edit(db, ADMIN, tid)
        assert [b["id"] for b in result["template"]["blocks"]] == ids
        assert result["template"]["ownerScope"] == "global"

    def test_get_for_edit_not_found(self, db):
        assert actions.get_template_for_edit(db, ADMIN, "nope")["code"] == "not_found"

    def test_list_only_visible(self, db):
        g = _template(db)
        a = _template(db, "ws-a")
        _template(db, "ws-b")
        assert {t["id"] for t in actions.list_templates(db, ALICE)["templates"]} == {a}
        assert {t["id"] for t in actions.list_templates(db, ADMIN)["templates"]} == {g}
        assert actions.list_templates(db, ALICE, "workspace:ws-b")["templates"] == []
        assert actions.list_templates(db, ALICE, "bogus")["code"] == "validation_error"

    def test_update_and_delete(self, db):
        tid = _template(db, "ws-a")
        _block(db, ALICE, tid)
        assert actions.update_template(db, ALICE, tid, name="Renommé")["template"]["name"] == "Renommé"
        assert actions.delete_template(db, BOB, tid)["code"] == "forbidden"
        assert actions.delete_template(db, ALICE, tid) == {"success": True}
        assert db_list_blocks(db, tid) == []

    def test_update_description_absent_kept_empty_cleared(self, db):
        tid = actions.create_template(db, ADMIN, "Landing", "Version 1")["templateId"]
        kept = actions.update_template(db, ADMIN, tid, name="Landing 2")["template"]
        assert kept["description"] == "Version 1"
        assert actions.update_template(db, ADMIN, tid, description="")["template"]["description"] is None
        actions.update_template(db, ADMIN, tid, description="Version 2")
        assert actions.update_template(db, ADMIN, tid, description=None)["template"]["description"] is None


class TestDuplicate:
    def test_copies_blocks_in_order(self, db, invalidated):
        tid = _template(db)
        b0, b1, b2 = (_block(db, ADMIN, tid, t) for t in ("Hero", "CTA", "Text"))
        actions.save_block_content(db, ADMIN, b0, {"title": "Accueil"})
        actions.toggle_block(db, ADMIN, b1, False)
        invalidated.clear()

        result = actions.duplicate_template(db, ADMIN, tid)
        assert result["success"]
        assert result["name"] == "Copie de Landing"
        new_id = result["templateId"]
        assert new_id != tid

        src, dup = db_list_blocks(db, tid), db_list_blocks(db, new_id)
        assert [(b.type, b.sort_order, b.is_active, jl(b.content)) for b in dup] == \
               [(b.type, b.sort_order, b.is_active, jl(b.content)) for b in src]
        assert not {b.id for b in dup} & {b0, b1, b2}
        assert cache.LIST_PATH in invalidated
        assert f"/preview/templates/{new_id}" in invalidated

    def test_same_scope(self, db):
        tid = _template(db, "ws-a")
        result = actions.duplicate_template(db, ALICE, tid)
        assert result["success"]
        duplicated = actions.get_template_for_edit(db, ALICE, result["templateId"])["template"]
        assert duplicated["ownerScope"] == "workspace:ws-a"

    def test_permissions(self, db):
        g = _template(db)
        a = _template(db, "ws-a")
        assert actions.duplicate_template(db, ALICE, g)["code"] == "forbidden"
        assert actions.duplicate_template(db, BOB, a)["code"] == "forbidden"
        assert actions.duplicate_template(db, None, g)["code"] == "unauthenticated"
        assert actions.duplicate_template(db, ADMIN, "nope")["code"] == "not_found"

    def test_work_user_cannot_duplicate(self, db):
        db.add(WorkspaceMemberDB(user_id="carol", workspace_id="ws-a", role="work_user"))
        db.commit()
        tid = _template(db, "ws-a")
        before = len(actions.list_templates(db, ALICE)["templates"])
        assert actions.duplicate_template(db, CurrentUser(id="carol"), tid)["code"] == "forbidden"
        assert len(actions.list_templates(db, ALICE)["templates"]) == before


# ── Éléments page-builder ─────────────────────────────────────────────────

class TestElements:
    @pytest.fixture
    def doc_block(self, db):
        tid = actions.create_template(db, ADMIN, "Document")["templateId"]
        return db_list_blocks(db, tid)[0].id

    def _elements(self, db, block_id):
        return jl(db_get_block(db, block_id).content)["elements"]

    def test_add_nested_elements(self, db, doc_block):
        section = actions.add_element(db, ADMIN, doc_block, "Section")
        heading = actions.add_element(db, ADMIN, doc_block, "Heading", parent_id=section["elementId"])
        assert heading["success"]
        (root,) = self._elements(db, doc_block)
        assert root["id"] == section["elementId"]
        assert root["children"][0]["id"] == heading["elementId"]

    def test_move_and_remove(self, db, doc_block):
        s = actions.add_element(db, ADMIN, doc_block, "Section")["elementId"]
        c = actions.add_element(db, ADMIN, doc_block, "Container")["elementId"]
        t = actions.add_element(db, ADMIN, doc_block, "Text", parent_id=c)["elementId"]

        assert actions.move_element(db, ADMIN, doc_block, c, parent_id=s)["success"]
        (root,) = self._elements(db, doc_block)
        assert root["children"][0]["children"][0]["id"] == t

        assert actions.move_element(db, ADMIN, doc_block, s, parent_id=t)["code"] == "validation_error"
        assert actions.remove_element(db, ADMIN, doc_block, c) == {"success": True}
        assert self._elements(db, doc_block)[0]["children"] == []

    def test_unknown_element_type(self, db, doc_block):
        assert actions.add_element(db, ADMIN, doc_block, "Hero")["code"] == "validation_error"

    def test_missing_parent(self, db, doc_block):
        assert actions.add_element(db, ADMIN, doc_block, "Text", parent_id="nope")["code"] == "not_found"

    def test_not_a_document(self, db):
        tid = _template(db)
        bid = _block(db, ADMIN, tid, "Hero")
        assert actions.add_element(db, ADMIN, bid, "Text")["code"] == "validation_error"

    def test_forbidden(self, db, doc_block):
        assert actions.add_element(db, ALICE, doc_block, "Text")["code"] == "forbidden"


def test_validate_content_dry_run():
    ok = actions.validate_content("Hero", {"title": "T"})
    assert ok["success"] and ok["content"]["title"] == "T"
    ko = actions.validate_content("Hero", {})
    assert ko["fieldErrors"] == {"title": "Champ obligatoire"}
