"""
Tests du registry : dispatch par type, fail-open/fail-closed, document page-builder.
"""
import logging

import pytest

from block_editor import (
    DOCUMENT_TYPE, REGISTRY, ContentValidationError, HeroContent, SchemaRegistry,
    default_registry,
)


def test_all_types_registered():
    assert set(REGISTRY.types()) == {
        "Section", "Container", "Heading", "Text", "Button", "Image", "Hero", "CTA", "PageBuilder",
    }
    assert REGISTRY.is_registered("CTA")
    assert not REGISTRY.is_registered("Carousel")


def test_default_content_is_valid_for_every_type():
    """Le contenu par défaut de chaque type repasse la validation sans changement."""
    for block_type in REGISTRY.types():
        content = REGISTRY.default_content(block_type)
        assert REGISTRY.validate(block_type, content).content == content


def test_default_content_seeds():
    assert REGISTRY.default_content("Hero")["title"] == "Nouveau Hero"
    assert REGISTRY.default_content("Section")["layerName"] == "Nouvelle section"
    assert REGISTRY.default_content(DOCUMENT_TYPE) == {
        "elements": [], "metadata": {"name": "Nouveau bloc", "description": ""},
    }


def test_default_content_unknown_type():
    with pytest.raises(ValueError):
        REGISTRY.default_content("Carousel")


def test_unknown_type_fail_open(caplog):
    """Type inconnu : contenu accepté tel quel, warning loggé et retourné."""
    with caplog.at_level(logging.WARNING):
        result = REGISTRY.validate("Carousel", {"slides": [1, 2, 3]})
    assert result.content == {"slides": [1, 2, 3]}
    assert len(result.warnings) == 1
    assert "Carousel" in caplog.text


def test_non_object_content_rejected():
    for block_type in ("Hero", "Carousel", DOCUMENT_TYPE):
        with pytest.raises(ContentValidationError) as exc:
            REGISTRY.validate(block_type, ["pas", "un", "objet"])
        assert exc.value.first_errors() == {"_root": "Doit être un objet"}


def test_document_type_is_reserved():
    registry = SchemaRegistry()
    with pytest.raises(ValueError):
        registry.register(DOCUMENT_TYPE, HeroContent)


def test_custom_registry_is_isolated():
    registry = default_registry()
    registry.register("Banner", HeroContent)
    assert registry.is_registered("Banner")
    assert not REGISTRY.is_registered("Banner")


def test_catalog_exposes_json_schemas():
    catalog = {entry["type"]: entry["schema"] for entry in REGISTRY.catalog()}
    assert set(catalog) == set(REGISTRY.types())
    assert "title" in catalog["Hero"]["properties"]
    assert "primaryColor" in catalog["CTA"]["properties"]
    assert "elements" in catalog[DOCUMENT_TYPE]["properties"]


# ── Document page-builder ────────────────────────────────────────────────────

def _doc(*elements):
    return {"elements": list(elements), "metadata": {"name": "Bloc"}}


def _el(el_id, el_type, props=None, children=None):
    return {"id": el_id, "type": el_type, "props": props or {}, "children": children or []}


def test_document_props_normalized_recursively():
    doc = _doc(_el("s1", "Section", children=[_el("h1", "Heading", {"text": "Titre"})]))
    content = REGISTRY.validate(DOCUMENT_TYPE, doc).content
    section = content["elements"][0]
    assert section["props"]["layerName"] == "Section"
    assert section["children"][0]["props"]["level"] == "h2"
    assert content["metadata"] == {"name": "Bloc"}


def test_document_nested_error_path():
    """Erreur sur un petit-enfant : chemin complet elements.N.children.M.props.<champ>."""
    doc = _doc(_el("s1", "Section", children=[
        _el("t1", "Text", {"content": "ok"}),
        _el("h1", "Heading", {"text": ""}),
    ]))
    with pytest.raises(ContentValidationError) as exc:
        REGISTRY.validate(DOCUMENT_TYPE, doc)
    assert list(exc.value.first_errors()) == ["elements.0.children.1.props.text"]


def test_document_duplicate_ids():
    doc = _doc(_el("a", "Text", {"content": "x"}), _el("b", "Container", children=[_el("a", "Text", {"content": "y"})]))
    with pytest.raises(ContentValidationError) as exc:
        REGISTRY.validate(DOCUMENT_TYPE, doc)
    assert "elements.1.children.0.id" in exc.value.field_errors


def test_document_cannot_nest_document():
    doc = _doc(_el("x", DOCUMENT_TYPE))
    with pytest.raises(ContentValidationError) as exc:
        REGISTRY.validate(DOCUMENT_TYPE, doc)
    assert "elements.0.type" in exc.value.field_errors


def test_document_structure_errors():
    with pytest.raises(ContentValidationError) as exc:
        REGISTRY.validate(DOCUMENT_TYPE, {"elements": [{"type": "Text"}]})
    errors = exc.value.first_errors()
    assert errors["metadata"] == "Champ obligatoire"
    assert errors["elements.0.id"] == "Champ obligatoire"


def test_document_unknown_element_type_warns():
    doc = _doc(_el("w", "Widget", {"anything": True}))
    result = REGISTRY.validate(DOCUMENT_TYPE, doc)
    assert result.content["elements"][0]["props"] == {"anything": True}
    assert len(result.warnings) == 1
