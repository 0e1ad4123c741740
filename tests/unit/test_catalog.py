"""Tests for ContentCatalog loading, integrity checks, and admin edits."""

from pathlib import Path

import pytest

from compass.contexts.catalog.catalog import ContentCatalog, find_duplicate_ids
from compass.contexts.catalog.entries import EntryFamily, Persona, Resource, entry_from_dict
from compass.contexts.catalog.exceptions import (
    CatalogIntegrityError,
    EntryNotFoundError,
    InvalidCatalogStructureError,
)


def _sample_data():
    return {
        "personas": {
            "banking": {
                "operations": [
                    {"id": "b-coo", "title": "COO", "priority": "high", "level": "c-suite"},
                ],
                "payments": [
                    {"id": "b-pay", "title": "Payments Head", "influence": "influencer"},
                ],
            },
            "general": {
                "it": [
                    {
                        "id": "g-cio",
                        "title": "CIO",
                        "influence": "decision-maker",
                        "tags": {"primary": ["technology-leadership"]},
                    },
                ],
            },
        },
        "resources": {
            "general": {
                "finance": [
                    {"id": "g-roi", "title": "ROI Calculator", "type": "calculator"},
                ],
            },
        },
    }


@pytest.mark.unit
def test_from_dict_builds_typed_entries():
    """Test records become typed entries classified by their bucket."""
    catalog = ContentCatalog.from_dict(_sample_data())

    coo = catalog.find_entry(EntryFamily.PERSONAS, "b-coo")
    assert isinstance(coo, Persona)
    assert (coo.vertical, coo.lob) == ("banking", "operations")
    assert coo.priority == "high"

    roi = catalog.find_entry("resources", "g-roi")
    assert isinstance(roi, Resource)
    assert roi.resource_type == "calculator"

    assert catalog.counts() == {"personas": 3, "resources": 1, "use_cases": 0}


@pytest.mark.unit
def test_duplicate_ids_reject_catalog():
    """Test duplicate identifiers within a family raise CatalogIntegrityError."""
    data = _sample_data()
    data["personas"]["general"]["it"].append({"id": "b-coo", "title": "Another COO"})

    with pytest.raises(CatalogIntegrityError) as exc_info:
        ContentCatalog.from_dict(data)

    assert exc_info.value.family == "personas"
    assert exc_info.value.duplicate_ids == ["b-coo"]


@pytest.mark.unit
def test_same_id_in_different_families_is_allowed():
    """Test identifier uniqueness is scoped per family."""
    data = _sample_data()
    data["use_cases"] = {"general": {"finance": [{"id": "g-roi", "title": "ROI use case"}]}}
    catalog = ContentCatalog.from_dict(data)
    assert catalog.has_entry("use_cases", "g-roi")
    assert catalog.has_entry("resources", "g-roi")


@pytest.mark.unit
def test_find_duplicate_ids_order():
    """Test duplicates are reported once each in first-seen order."""
    entries = [
        Persona(id="a", title="A"),
        Persona(id="b", title="B"),
        Persona(id="a", title="A2"),
        Persona(id="b", title="B2"),
        Persona(id="a", title="A3"),
    ]
    assert find_duplicate_ids(entries) == ["a", "b"]


@pytest.mark.unit
def test_missing_title_is_rejected():
    """Test records without a title fail with InvalidCatalogStructureError."""
    with pytest.raises(InvalidCatalogStructureError):
        entry_from_dict(EntryFamily.PERSONAS, {"id": "x"}, "banking", "operations")


@pytest.mark.unit
def test_bucket_shape_is_checked():
    """Test a bucket that is not a list is rejected."""
    with pytest.raises(InvalidCatalogStructureError):
        ContentCatalog.from_dict({"personas": {"banking": {"operations": {"id": "x"}}}})


@pytest.mark.unit
def test_flat_tag_list_becomes_primary():
    """Test a flat tag list is read as primary tags."""
    entry = entry_from_dict(
        EntryFamily.PERSONAS, {"id": "x", "title": "X", "tags": ["ai-leadership"]}, "general", "it"
    )
    assert entry.tags == {"primary": ["ai-leadership"]}
    assert entry.has_tag("ai-leadership", group="primary")


@pytest.mark.unit
def test_read_access_in_catalog_order():
    """Test bucket, vertical, and LOB lookups follow catalog order."""
    catalog = ContentCatalog.from_dict(_sample_data())
    assert [e.id for e in catalog.vertical_entries("personas", "banking")] == ["b-coo", "b-pay"]
    assert catalog.bucket("personas", "banking", "unknown") == []
    assert catalog.verticals("personas") == ["banking", "general"]
    assert catalog.lobs("banking") == ["operations", "payments"]
    assert catalog.stats()["personas"] == {"banking": 2, "general": 1}


@pytest.mark.unit
def test_browsing_helpers():
    """Test tag, influence, and resource type filters."""
    catalog = ContentCatalog.from_dict(_sample_data())
    tagged = catalog.entries_with_tags("personas", ["technology-leadership"])
    assert [e.id for e in tagged] == ["g-cio"]
    assert [p.id for p in catalog.personas_by_influence("influencer")] == ["b-pay"]
    assert [r.id for r in catalog.resources_by_type("calculator")] == ["g-roi"]


@pytest.mark.unit
def test_add_entry_rejects_existing_id():
    """Test add_entry() files new entries and refuses duplicates."""
    catalog = ContentCatalog.from_dict(_sample_data())
    catalog.add_entry(Persona(id="b-cco", title="CCO", vertical="banking", lob="compliance"))
    assert catalog.bucket("personas", "banking", "compliance")[0].id == "b-cco"

    with pytest.raises(CatalogIntegrityError):
        catalog.add_entry(Persona(id="b-cco", title="Duplicate"))


@pytest.mark.unit
def test_update_entry_in_place_and_move():
    """Test update_entry() replaces fields and moves entries between buckets."""
    catalog = ContentCatalog.from_dict(_sample_data())

    updated = catalog.update_entry("personas", "b-coo", title="Chief Operating Officer")
    assert catalog.find_entry("personas", "b-coo").title == "Chief Operating Officer"
    assert updated.lob == "operations"

    catalog.update_entry("personas", "b-coo", lob="payments")
    assert catalog.bucket("personas", "banking", "operations") == []
    assert "operations" not in catalog.lobs("banking", "personas")
    assert [e.id for e in catalog.bucket("personas", "banking", "payments")] == ["b-pay", "b-coo"]


@pytest.mark.unit
def test_update_entry_errors():
    """Test update_entry() rejects unknown ids, id changes, and unknown fields."""
    catalog = ContentCatalog.from_dict(_sample_data())
    with pytest.raises(EntryNotFoundError):
        catalog.update_entry("personas", "nobody", title="x")
    with pytest.raises(ValueError):
        catalog.update_entry("personas", "b-coo", id="renamed")
    with pytest.raises(ValueError):
        catalog.update_entry("personas", "b-coo", resource_type="demo")


@pytest.mark.unit
def test_remove_entry():
    """Test remove_entry() drops the entry and empty buckets."""
    catalog = ContentCatalog.from_dict(_sample_data())
    removed = catalog.remove_entry("resources", "g-roi")
    assert removed.id == "g-roi"
    assert not catalog.has_entry("resources", "g-roi")
    assert catalog.verticals("resources") == []

    with pytest.raises(EntryNotFoundError):
        catalog.remove_entry("resources", "g-roi")


@pytest.mark.unit
def test_replace_catalog_keeps_object_identity():
    """Test replace_catalog() swaps content into the same catalog object."""
    catalog = ContentCatalog.from_dict(_sample_data())
    other = ContentCatalog.from_dict(
        {"personas": {"insurance": {"claims": [{"id": "i-claims", "title": "Claims"}]}}}
    )
    catalog.replace_catalog(other)
    assert catalog.counts()["personas"] == 1
    assert catalog.has_entry("personas", "i-claims")
    assert not catalog.has_entry("personas", "b-coo")


@pytest.mark.unit
def test_to_dict_drops_classification():
    """Test serialized records omit vertical and lob (implied by the bucket)."""
    data = ContentCatalog.from_dict(_sample_data()).to_dict()
    record = data["personas"]["banking"]["operations"][0]
    assert record["id"] == "b-coo"
    assert "vertical" not in record
    assert "lob" not in record
    assert ContentCatalog.from_dict(data).counts() == {"personas": 3, "resources": 1, "use_cases": 0}


@pytest.mark.unit
def test_from_directory_reads_yaml(tmp_path: Path):
    """Test from_directory() reads family files with or without the top-level key."""
    (tmp_path / "personas.yaml").write_text(
        "personas:\n"
        "  banking:\n"
        "    operations:\n"
        "      - id: b-coo\n"
        "        title: COO\n"
    )
    (tmp_path / "resources.yaml").write_text(
        "general:\n"
        "  finance:\n"
        "    - id: g-roi\n"
        "      title: ROI Calculator\n"
    )

    catalog = ContentCatalog.from_directory(tmp_path)
    assert catalog.counts() == {"personas": 1, "resources": 1, "use_cases": 0}
    assert catalog.source == str(tmp_path)


@pytest.mark.unit
def test_use_cases_by_category_and_all_tags():
    """Test use-case category filter and tag flattening across groups."""
    catalog = ContentCatalog.from_dict(
        {
            "use_cases": {
                "banking": {
                    "operations": [
                        {
                            "id": "b-loans",
                            "title": "Loans",
                            "category": "agentic",
                            "tags": {"primary": ["lending"], "secondary": ["lending", "kyc"]},
                        },
                        {"id": "b-accounts", "title": "Accounts", "category": "rpa"},
                    ]
                }
            }
        }
    )
    agentic = catalog.use_cases_by_category("agentic", vertical="banking")
    assert [use_case.id for use_case in agentic] == ["b-loans"]
    assert agentic[0].all_tags() == ["lending", "kyc"]
    assert catalog.use_cases_by_category("maestro") == []


@pytest.mark.unit
def test_malformed_context_notes_are_rejected():
    """Test context notes must be a mapping and outcomes must be a list."""
    with pytest.raises(InvalidCatalogStructureError) as exc_info:
        ContentCatalog.from_dict(
            {
                "resources": {
                    "banking": {
                        "operations": [
                            {"id": "b-demo", "title": "Demo", "deployment_context": "cloud-ready"}
                        ]
                    }
                }
            }
        )
    assert exc_info.value.entry_id == "b-demo"

    with pytest.raises(InvalidCatalogStructureError):
        entry_from_dict(
            EntryFamily.USE_CASES,
            {"id": "b-loans", "title": "Loans", "outcomes": "faster approvals"},
            "banking",
            "operations",
        )

    use_case = entry_from_dict(
        EntryFamily.USE_CASES,
        {"id": "b-loans", "title": "Loans", "customerContext": {"new-logo": "Start small"}},
        "banking",
        "operations",
    )
    assert use_case.customer_context == {"new-logo": "Start small"}
    assert use_case.outcomes == []


@pytest.mark.unit
def test_update_entry_rejects_malformed_context_notes():
    """Test update_entry() applies the same shape checks and leaves the entry unchanged."""
    catalog = ContentCatalog.from_dict(_sample_data())
    before = catalog.find_entry("resources", "g-roi")

    with pytest.raises(InvalidCatalogStructureError) as exc_info:
        catalog.update_entry("resources", "g-roi", customer_context=["new-logo"])
    assert exc_info.value.entry_id == "g-roi"
    assert catalog.find_entry("resources", "g-roi") is before

    updated = catalog.update_entry("resources", "g-roi", deployment_context={"cloud": "SaaS"})
    assert updated.deployment_context == {"cloud": "SaaS"}
