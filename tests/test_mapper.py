from __future__ import annotations

import json
import re

import pytest

from luminance_connector.errors import ConfigurationError
from luminance_connector.mapper import (
    build_annotations_from_hubspot_mapping,
    build_annotations_from_mapping,
    create_initial_matter_payload,
    create_luminance_matter_tag_payload,
    filter_out_specific_tags,
    map_status_update_to_config_variables,
)

AMOUNT_MAPPING = [
    {
        "luminanceFields": "10",
        "salesforceopportunityField": "Amount",
        "salesforceFieldType": "currency",
        "luminanceFieldType": "currency",
    }
]


def _sf_descriptor(field_key: str, object_name: str) -> str:
    return json.dumps({"fieldKey": field_key, "objectName": object_name, "fieldType": "string", "isCustom": False})


def _hs_descriptor(field_key: str, object_name: str, field_type: str) -> str:
    return json.dumps({"fieldKey": field_key, "objectName": object_name, "fieldType": field_type})


def test_salesforce_amount_end_to_end():
    result = build_annotations_from_mapping(AMOUNT_MAPPING, {"Amount": 5000})
    assert result == {
        "required_matter_annotations": [
            {"annotation_type_id": 10, "content": {"value": 5000, "currency": "USD"}}
        ]
    }
    assert "name" not in result


def test_mapping_config_shapes_are_equivalent():
    expected = build_annotations_from_mapping(AMOUNT_MAPPING, {"Amount": 5000})
    for shape in (
        {"mymappings": AMOUNT_MAPPING},
        json.dumps({"mymappings": AMOUNT_MAPPING}),
        {"row0": AMOUNT_MAPPING[0]},
    ):
        assert build_annotations_from_mapping(shape, {"Amount": 5000}) == expected


def test_name_prefix_adds_random_suffix():
    a = build_annotations_from_mapping(AMOUNT_MAPPING, {"Amount": 1}, name_prefix="P")
    b = build_annotations_from_mapping(AMOUNT_MAPPING, {"Amount": 1}, name_prefix="P")
    assert re.fullmatch(r"P - [0-9a-z]{8}", a["name"])
    assert re.fullmatch(r"P - [0-9a-z]{8}", b["name"])


def test_defaults_come_from_settings(monkeypatch):
    monkeypatch.setenv("DEFAULT_CURRENCY", "eur")
    monkeypatch.setenv("MATTER_NAME_PREFIX", "Deal")
    result = build_annotations_from_mapping(AMOUNT_MAPPING, {"Amount": 5000})
    assert result["required_matter_annotations"][0]["content"] == {"value": 5000, "currency": "EUR"}
    assert result["name"].startswith("Deal - ")


def test_explicit_empty_prefix_overrides_settings(monkeypatch):
    monkeypatch.setenv("MATTER_NAME_PREFIX", "Deal")
    result = build_annotations_from_mapping(AMOUNT_MAPPING, {"Amount": 5000}, name_prefix="")
    assert "name" not in result


def test_explicit_currency_overrides_settings(monkeypatch):
    monkeypatch.setenv("DEFAULT_CURRENCY", "EUR")
    result = build_annotations_from_mapping(AMOUNT_MAPPING, {"Amount": 5000}, default_currency="JPY")
    assert result["required_matter_annotations"][0]["content"]["currency"] == "JPY"


@pytest.mark.parametrize("mappings", [[], {}, "not json", None])
def test_no_mapping_list_raises(mappings):
    with pytest.raises(ConfigurationError):
        build_annotations_from_mapping(mappings, {"Amount": 1})
    with pytest.raises(ConfigurationError):
        build_annotations_from_hubspot_mapping(mappings, {"amount": 1})


def test_salesforce_mixed_objects_and_missing_values():
    mappings = [
        {"luminanceFields": "1", "salesforceField": _sf_descriptor("Name", "Account")},
        {"luminanceFields": "2", "salesforceField": _sf_descriptor("Name", "Opportunity")},
        {
            "luminanceFields": "3",
            "salesforceopportunityField": "CloseDate",
            "salesforceFieldType": "date",
            "luminanceFieldType": "timestamp",
        },
        {
            "luminanceFields": "4",
            "salesforceopportunityField": "Probability",
            "salesforceFieldType": "number",
            "luminanceFieldType": "number",
        },
        {"luminanceFields": "oops", "salesforceopportunityField": "Missing"},
    ]
    primary = {"Name": "Big Deal", "CloseDate": "2024-03-31"}
    secondary = {"Name": "Acme Corp"}
    annotations = build_annotations_from_mapping(mappings, primary, secondary)["required_matter_annotations"]
    assert [a["annotation_type_id"] for a in annotations] == [1, 2, 3, 4, None]
    assert annotations[0]["content"] == {"value": "Acme Corp"}
    assert annotations[1]["content"] == {"value": "Big Deal"}
    assert annotations[2]["content"] == {"timestamp": "2024-03-31T00:00:00.000Z"}
    assert annotations[3]["content"] == {"value": 0}
    assert annotations[4]["content"] == {"value": ""}


def test_hubspot_mapping_resolves_primary_then_secondary():
    mappings = {
        "mymappings": [
            {"luminanceFields": "20", "hubspotField": _hs_descriptor("amount", "deals", "number"), "luminanceFieldType": "currency"},
            {"luminanceFields": "21", "hubspotField": _hs_descriptor("industry", "companies", "enumeration"), "luminanceFieldType": "text"},
            {"luminanceFields": "22", "hubspotField": _hs_descriptor("closedate", "deals", "datetime"), "luminanceFieldType": "timestamp"},
        ]
    }
    primary = {"amount": "1500", "closedate": 1700000000000}
    secondary = {"industry": "Legal", "amount": "9"}
    result = build_annotations_from_hubspot_mapping(mappings, primary, secondary, default_currency="GBP")
    annotations = result["required_matter_annotations"]
    assert annotations[0] == {"annotation_type_id": 20, "content": {"value": "1500", "currency": "GBP"}}
    assert annotations[1] == {"annotation_type_id": 21, "content": {"value": "Legal"}}
    assert annotations[2] == {"annotation_type_id": 22, "content": {"timestamp": "2023-11-14T22:13:20.000Z"}}


def test_build_then_reconcile_pipeline():
    mappings = [
        {"luminanceFields": "1", "salesforceField": _sf_descriptor("Name", "Account")},
        {"luminanceFields": "2", "salesforceopportunityField": "Amount", "salesforceFieldType": "number", "luminanceFieldType": "number"},
    ]
    built = build_annotations_from_mapping(mappings, {"Amount": 250}, {"Name": "Acme"}, name_prefix="M")
    tags = [{"id": 1, "type": "party", "name": "sf_counterparty"}, {"id": 2, "type": "money", "name": "sf_amount"}]
    reconciled = create_luminance_matter_tag_payload(tags, built, "CHF")
    assert reconciled["name"] == built["name"]
    assert reconciled["required_matter_annotations"] == [
        {"annotation_type_id": 1, "content": {"party": "Acme"}},
        {"annotation_type_id": 2, "content": {"value": 250, "currency": "CHF"}},
    ]


def test_filter_out_specific_tags_uses_settings_defaults(monkeypatch):
    items = [{"name": "sf_Amount"}, {"name": "hs_amount"}, {"label": "sf_x"}]
    assert filter_out_specific_tags(items) == [{"name": "sf_Amount"}]
    monkeypatch.setenv("TAG_FILTER", "hs_")
    from luminance_connector.config import get_settings

    get_settings.cache_clear()
    assert filter_out_specific_tags(items) == [{"name": "hs_amount"}]
    assert filter_out_specific_tags(items, "label", "SF_") == [{"label": "sf_x"}]


def test_small_payload_helpers():
    assert map_status_update_to_config_variables(
        {"document_link": "https://x/doc/1", "assignee": None, "contract_status": "Signed"}
    ) == {
        "luminanceDocumentLink": "https://x/doc/1",
        "luminanceAssignee": "",
        "luminanceStatus": "Signed",
    }
    assert create_initial_matter_payload("Deal", 7) == {"name": "Deal", "workflow_id": "7"}


def test_records_that_are_not_objects_read_as_empty():
    result = build_annotations_from_mapping(AMOUNT_MAPPING, [{"Amount": 1}], "not a record")
    assert result["required_matter_annotations"] == [
        {"annotation_type_id": 10, "content": {"value": 0, "currency": "USD"}}
    ]
    hubspot = [{"luminanceFields": "5", "hubspotField": "dealname"}]
    result = build_annotations_from_hubspot_mapping(hubspot, 42, ["x"])
    assert result["required_matter_annotations"] == [{"annotation_type_id": 5, "content": {"value": ""}}]


def test_json_encoded_records_are_decoded():
    account_name = [{"luminanceFields": "1", "salesforceField": _sf_descriptor("Name", "Account")}]
    result = build_annotations_from_mapping(
        AMOUNT_MAPPING + account_name,
        json.dumps({"Amount": 5000}),
        json.dumps({"Name": "Acme Corp"}),
    )
    assert result["required_matter_annotations"] == [
        {"annotation_type_id": 10, "content": {"value": 5000, "currency": "USD"}},
        {"annotation_type_id": 1, "content": {"value": "Acme Corp"}},
    ]
