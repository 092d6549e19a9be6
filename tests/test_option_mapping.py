from core.schemas.field_schema import FieldDescriptor
from core.services.option_mapping import OptionLabelMapper


def test_only_fields_with_options_are_mapped(deal_fields):
    standard = [f for f in deal_fields if not f["edit_flag"]]
    custom = [f for f in deal_fields if f["edit_flag"]]

    mapping = OptionLabelMapper.build(standard, custom)

    assert set(mapping) == {"stage_id", "abc", "colors"}
    assert mapping["stage_id"] == {"1": "Lead In", "2": "Won"}
    assert mapping["colors"] == {"1": "Red", "2": "Blue"}


def test_custom_field_overrides_standard_with_same_key():
    standard = [{"key": "status", "options": [{"id": 1, "label": "Open"}]}]
    custom = [{"key": "status", "edit_flag": True, "options": [{"id": 1, "label": "Aberto"}]}]

    mapping = OptionLabelMapper.build(standard, custom)

    assert mapping == {"status": {"1": "Aberto"}}


def test_options_without_id_or_label_are_skipped():
    fields = [
        FieldDescriptor(
            key="size",
            options=[{"id": 1, "label": "S"}, {"id": None, "label": "M"}, {"id": 3, "label": None}],
        ),
        {"key": "empty", "options": []},
        {"key": "no_options"},
    ]

    assert OptionLabelMapper.build(fields) == {"size": {"1": "S"}}


def test_invalid_descriptor_is_ignored():
    assert OptionLabelMapper.build([{"name": "no key"}], []) == {}


def test_lead_labels_are_mapped_under_label_ids():
    lead_labels = [
        {"id": "f0a1", "name": "Hot", "color": "red"},
        {"id": "b2c3", "name": None},
        {"name": "no id"},
    ]

    mapping = OptionLabelMapper.build([], [], lead_labels)

    assert mapping == {"label_ids": {"f0a1": "Hot"}}
