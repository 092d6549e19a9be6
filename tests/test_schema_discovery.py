from core.services.schema_discovery import SchemaDiscoverer


def by_key(columns):
    return {c.key: c for c in columns}


def test_primary_value_array_with_label():
    sample = {"emails": [{"value": "a@x.com", "primary": True, "label": "work"}]}

    columns = by_key(SchemaDiscoverer().discover(sample, []))

    assert "emails.0.value" in columns
    primary = columns["emails.0.value"]
    assert primary.name == "Primary Emails (work)"
    assert primary.is_nested is True
    assert primary.parent_key == "emails"
    assert [k for k in columns if k.startswith("emails.")] == ["emails.0.value"]


def test_top_level_names_from_catalog_or_title_case():
    sample = {"id": 1, "org_id": 5, "expected_close_date": None}
    fields = [{"key": "org_id", "name": "Organization"}]

    columns = SchemaDiscoverer().discover(sample, fields)

    assert [(c.key, c.name, c.is_nested) for c in columns] == [
        ("id", "Id", False),
        ("org_id", "Organization", False),
        ("expected_close_date", "Expected Close Date", False),
    ]


def test_nested_object_and_reference_name():
    sample = {"person_id": {"name": "Ana", "email": [], "value": 9}}

    columns = by_key(SchemaDiscoverer().discover(sample, []))

    assert columns["person_id"].is_nested is False
    assert columns["person_id.name"].name == "Person Id Name"
    assert columns["person_id.name"].parent_key == "person_id"
    assert columns["person_id.value"].name == "Person Id Value"


def test_multiple_options_array_is_not_expanded():
    sample = {"details": {"tags": [{"id": 1, "label": "VIP"}, {"id": 2, "label": "New"}]}}

    columns = by_key(SchemaDiscoverer().discover(sample, []))

    tags = columns["details.tags"]
    assert tags.name == "Details Tags (Multiple Options)"
    assert tags.parent_key == "details"
    assert not any(k.startswith("details.tags.") for k in columns)


def test_other_arrays_recurse_into_first_item_only():
    sample = {"participants": [{"person_id": 1, "primary_flag": True}, {"person_id": 2, "extra": "x"}]}

    columns = by_key(SchemaDiscoverer().discover(sample, []))

    assert columns["participants.0.person_id"].name == "Participants (First Item) Person Id"
    assert "participants.1.person_id" not in columns
    assert not any(k.endswith(".extra") for k in columns)


def test_reserved_keys_are_skipped():
    sample = {"_internal": 1, "meta": {"_hidden": 2, "shown": 3}}

    keys = [c.key for c in SchemaDiscoverer().discover(sample, [])]

    assert keys == ["meta", "meta.shown"]


def test_depth_is_bounded():
    sample = {"a": {"b": {"c": {"d": {"leaf": 1}}}}}

    keys = [c.key for c in SchemaDiscoverer(max_depth=2).discover(sample, [])]

    assert "a.b.x" not in keys
    assert "a.b.c.d.leaf" not in keys
    assert keys == ["a"]


def test_custom_fields_named_from_catalog():
    sample = {"custom_fields": {"abc123": "3", "unknown_key": "x"}}
    fields = [{"key": "abc123", "name": "Lead Source"}]

    columns = by_key(SchemaDiscoverer().discover(sample, fields))

    assert columns["custom_fields.abc123"].name == "Lead Source"
    assert columns["custom_fields.abc123"].parent_key == "custom_fields"
    assert columns["custom_fields.unknown_key"].name == "Unknown Key"


def test_empty_sample_discovers_nothing():
    assert SchemaDiscoverer().discover({}, []) == []
    assert SchemaDiscoverer().discover(None, []) == []


HASH_A = "9f1c2b3a4d5e6f708192a3b4c5d6e7f8091a2b3c"
HASH_B = "0a1b2c3d4e5f60718293a4b5c6d7e8f9a0b1c2d3"


def test_v2_custom_field_shapes():
    sample = {
        "custom_fields": {
            "budget": {"value": 100, "currency": "EUR"},
            "period": {"value": "2024-01-01", "until": "2024-01-31"},
            "hq": {
                "value": "Rua A 1",
                "formatted_address": "Rua A 1, Lisboa, Portugal",
                "locality": "Lisboa",
                "postal_code": "1000-001",
                "subpremise": None,
            },
        }
    }
    fields = [{"key": "budget", "name": "Budget"}, {"key": "period", "name": "Contract"}, {"key": "hq", "name": "HQ"}]

    columns = by_key(SchemaDiscoverer().discover(sample, fields))

    assert columns["custom_fields.budget"].name == "Budget (Currency)"
    assert columns["custom_fields.period"].name == "Contract (Range)"
    assert columns["custom_fields.hq"].name == "HQ (Address)"
    assert columns["custom_fields.hq.formatted_address"].name == "HQ (Formatted Address)"
    assert columns["custom_fields.hq.formatted_address"].parent_key == "custom_fields.hq"
    assert columns["custom_fields.hq.locality"].name == "HQ (City)"
    assert columns["custom_fields.hq.postal_code"].name == "HQ (ZIP/Postal Code)"
    assert columns["custom_fields.hq.subpremise"].name == "HQ (Apartment/Suite)"
    assert "custom_fields.hq.value" not in columns
    assert "custom_fields.budget.value" not in columns


def test_unnamed_hash_custom_fields_get_generic_names():
    sample = {
        "custom_fields": {
            HASH_A: {"value": "Rua B 2", "formatted_address": "Rua B 2, Porto"},
            HASH_B: {"value": 5, "currency": "USD"},
            "c" * 40: "plain",
        }
    }

    columns = by_key(SchemaDiscoverer().discover(sample, []))

    assert columns[f"custom_fields.{HASH_A}"].name == "Address Field (Address)"
    assert columns[f"custom_fields.{HASH_B}"].name == "Currency Field (Currency)"
    assert columns[f"custom_fields.{'c' * 40}"].name == "Custom Field"


def test_metadata_keys_are_skipped():
    sample = {
        "id": 1,
        "first_char": "a",
        "visible_to": "3",
        "in_visible_list": True,
        "im": [{"value": "ana", "primary": True}],
        "org_id": {"name": "ACME", "first_char": "a", "value": 2},
    }

    keys = [c.key for c in SchemaDiscoverer().discover(sample, [])]

    assert keys == ["id", "org_id", "org_id.name", "org_id.value"]


def test_discoverer_keeps_no_state_between_calls():
    discoverer = SchemaDiscoverer()

    first = discoverer.discover({"title": "A", "value": 1}, [])
    second = discoverer.discover({"title": "B"}, [{"key": "title", "name": "Deal Title"}])

    assert [(c.key, c.name) for c in first] == [("title", "Title"), ("value", "Value")]
    assert [(c.key, c.name) for c in second] == [("title", "Deal Title")]
    assert set(vars(discoverer)) == {"max_depth", "log"}
