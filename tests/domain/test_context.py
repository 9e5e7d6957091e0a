from __future__ import annotations

import json

import pytest

from itemlens.domain.errors import ContextIdUnresolvedError, NoIdentifiersError
from itemlens.domain.pipeline.context import (
    ContextExtractor,
    ExtractionRule,
    FieldProbe,
    local_datasource_path,
)
from tests.helpers.ids import BODY_ID, HEADER_ID, PAGE_ID, PAGE_PATH


def test_extraction_rule_walks_keys_indexes_and_wildcards() -> None:
    blob = {"a": [{"b": "first"}, {"b": "second"}, {"c": "other"}]}

    assert list(ExtractionRule.parse("a.*.b").values(blob)) == ["first", "second"]
    assert list(ExtractionRule.parse("a.1.b").values(blob)) == ["second"]
    assert list(ExtractionRule.parse("a.9.b").values(blob)) == []
    assert str(ExtractionRule.parse("a.0.b")) == "a.0.b"


def test_extraction_rule_decodes_json_text_mid_path() -> None:
    blob = {"details": json.dumps({"devices": [{"id": "x"}]})}

    assert list(ExtractionRule.parse("details.devices.*.id").values(blob)) == ["x"]


def test_field_probe_prefers_earlier_rules_and_skips_blank_values() -> None:
    probe = FieldProbe.of("missing", "blank", "present", "later")
    blob = {"blank": "  ", "present": " value ", "later": "ignored"}

    assert probe.first(blob) == "value"
    assert probe.collect(blob) == ["value", "ignored"]


def test_extract_page_orders_current_item_first(page_context: dict[str, object]) -> None:
    page = ContextExtractor().extract_page({"data": page_context})

    assert page.item_ids == (PAGE_ID, HEADER_ID)
    assert page.current_item_id == PAGE_ID
    assert page.local_paths == ("Data/Article Body",)
    assert page.page_path == PAGE_PATH
    assert page.language == "en"


def test_extract_page_reads_editable_items_and_deduplicates() -> None:
    blob = {
        "pageInfo": {
            "id": f"{{{PAGE_ID}}}",
            "editableItems": [{"id": PAGE_ID.lower()}, {"itemId": BODY_ID}, {"id": "broken"}],
            "language": {"name": "de-DE"},
        }
    }

    page = ContextExtractor().extract_page(blob)

    assert page.item_ids == (PAGE_ID, BODY_ID)
    assert page.language == "de-DE"


def test_extract_page_falls_back_to_default_language() -> None:
    page = ContextExtractor(default_language="fr").extract_page({"itemId": PAGE_ID})

    assert page.language == "fr"
    assert page.page_path == ""


def test_extract_page_without_any_identifier_fails() -> None:
    with pytest.raises(NoIdentifiersError, match="No item IDs found in current context"):
        ContextExtractor().extract_page({"data": {"pageInfo": {"path": PAGE_PATH}}})


def test_extract_page_skips_malformed_current_item(caplog: pytest.LogCaptureFixture) -> None:
    blob = {"pageInfo": {"id": "not-an-id", "editableItems": [{"id": HEADER_ID}]}}

    page = ContextExtractor().extract_page(blob)

    assert page.item_ids == (HEADER_ID,)
    assert "Ignoring malformed current item id" in caplog.text


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("local:/Data/Text 1", "Data/Text 1"),
        ("LOCAL:Page Components/Hero", "Page Components/Hero"),
        ("local:", None),
        ("/sitecore/content/x", None),
    ],
)
def test_local_datasource_path(value: str, expected: str | None) -> None:
    assert local_datasource_path(value) == expected


@pytest.mark.parametrize(
    ("app_context", "expected"),
    [
        ({"resourceAccess": [{"context": {"preview": "p-1", "live": "l-1"}}]}, "p-1"),
        ({"resourceAccess": [{"context": {"live": "l-1"}}]}, "l-1"),
        ({"sitecoreContextId": "direct"}, "direct"),
        (
            {"resourceAccess": [{"context": {}}, {"context": {"master": "m-2"}}]},
            "m-2",
        ),
    ],
)
def test_extract_context_id_probes_in_priority_order(
    app_context: dict[str, object], expected: str
) -> None:
    assert ContextExtractor().extract_context_id({"data": app_context}) == expected


def test_extract_context_id_raises_when_nothing_matches() -> None:
    with pytest.raises(ContextIdUnresolvedError):
        ContextExtractor().extract_context_id({"data": {"resourceAccess": []}})
