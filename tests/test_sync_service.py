import pytest

from core.exceptions import ConfigurationError, NetworkFailure
from core.schemas.sync_config import SyncConfig
from core.services.sync_service import SyncService
from tests.fakes import FakePipedriveClient, RecordingReporter, RecordingSink, make_records

COLUMNS = [
    {"path": "title", "displayName": "Title"},
    {"path": "custom_fields.abc", "displayName": "Stage"},
]


def test_run_writes_projected_table(deal_fields, sink, reporter):
    client = FakePipedriveClient(
        records={"deals": [{"id": 1, "title": "Deal A", "custom_fields": {"abc": "3"}}]},
        fields={"/dealFields": deal_fields},
    )
    config = SyncConfig(entity_kind="deals", columns=COLUMNS)

    result = SyncService(client, sink, reporter=reporter).run(config)

    assert len(sink.writes) == 1
    written = sink.writes[0]
    assert written["table_name"] == "Deals"
    assert written["header_row"] == ["Title", "Stage"]
    assert written["data_rows"] == [["Deal A", "Qualified"]]
    assert result.records_fetched == 1
    assert result.rows_written == 1
    assert result.empty is False
    assert result.notice is None
    assert reporter.messages[-1][0] == "Synced 1 deals to Deals."


def test_catalog_is_fetched_before_records_on_every_run(deal_fields, sink):
    client = FakePipedriveClient(records={"deals": make_records(2)}, fields={"/dealFields": deal_fields})
    service = SyncService(client, sink)
    config = SyncConfig(entity_kind="deals", columns=COLUMNS, table_name="Pipeline")

    service.run(config)
    service.run(config)

    endpoints = [ep for ep, _ in client.calls]
    assert endpoints == ["/dealFields", "/deals", "/dealFields", "/deals"]
    assert sink.writes[0] == {**sink.writes[1], "synced_at": sink.writes[0]["synced_at"]}
    assert sink.writes[0]["table_name"] == "Pipeline"


def test_empty_result_writes_header_only_with_notice(sink):
    client = FakePipedriveClient(records={"persons": []})
    config = SyncConfig(entity_kind="persons", filter_id="12", columns=COLUMNS)

    result = SyncService(client, sink).run(config)

    assert sink.writes[0]["header_row"] == ["Title", "Stage"]
    assert sink.writes[0]["data_rows"] == []
    assert sink.writes[0]["table_name"] == "Contacts"
    assert result.empty is True
    assert result.notice == "No persons found with the specified filter."


def test_network_failure_leaves_sink_untouched(sink):
    client = FakePipedriveClient(records={"deals": make_records(250)}, fail_at_start=100)
    config = SyncConfig(entity_kind="deals", columns=COLUMNS)

    with pytest.raises(NetworkFailure) as info:
        SyncService(client, sink).run(config)

    assert len(info.value.partial_records) == 100
    assert sink.writes == []


def test_empty_column_spec_fails_before_any_request(sink):
    client = FakePipedriveClient(records={"deals": make_records(1)})
    config = SyncConfig(entity_kind="deals", columns=[])

    with pytest.raises(ConfigurationError) as info:
        SyncService(client, sink).run(config)

    assert info.value.phase == "config"
    assert client.calls == []
    assert sink.writes == []


def test_leads_use_deal_field_catalog(deal_fields, sink):
    client = FakePipedriveClient(
        records={"leads": [{"id": "a1", "title": "Lead", "custom_fields": {"abc": "4"}}]},
        fields={"/dealFields": deal_fields},
    )
    config = SyncConfig(entity_kind="leads", columns=COLUMNS)

    SyncService(client, sink).run(config)

    assert sink.writes[0]["data_rows"] == [["Lead", "Lost"]]


def test_discover_uses_one_sample_record(deal_fields):
    sample = {"id": 1, "title": "Deal A", "emails": [{"value": "a@x.com", "primary": True, "label": "work"}]}
    client = FakePipedriveClient(records={"deals": [sample] + make_records(150)}, fields={"/dealFields": deal_fields})

    columns = SyncService(client, RecordingSink()).discover("deals")

    assert [c.key for c in columns] == ["id", "title", "emails", "emails.0.value"]
    assert columns[1].name == "Title"
    assert columns[3].name == "Primary Emails (work)"
    assert len(client.list_calls("/deals")) == 1


def test_discover_without_records_returns_empty():
    client = FakePipedriveClient(records={"deals": []})

    assert SyncService(client, RecordingSink()).discover("deals") == []


def test_reporter_failure_does_not_break_run(deal_fields, sink):
    client = FakePipedriveClient(records={"deals": make_records(1)}, fields={"/dealFields": deal_fields})
    config = SyncConfig(entity_kind="deals", columns=COLUMNS)

    result = SyncService(client, sink, reporter=RecordingReporter(fail=True)).run(config)

    assert result.rows_written == 1


def test_lead_sync_resolves_label_ids(deal_fields, sink):
    client = FakePipedriveClient(
        records={"leads": [{"id": "l-1", "title": "Lead A", "label_ids": ["f0a1", "b2c3"]}]},
        fields={"/dealFields": deal_fields},
        lead_labels=[{"id": "f0a1", "name": "Hot"}, {"id": "b2c3", "name": "Cold"}],
    )
    config = SyncConfig(
        entity_kind="leads",
        columns=[{"path": "title", "displayName": "Title"}, {"path": "label_ids", "displayName": "Labels"}],
    )

    SyncService(client, sink).run(config)

    assert [ep for ep, _ in client.calls] == ["/dealFields", "/leadLabels", "/leads"]
    assert sink.writes[0]["data_rows"] == [["Lead A", "Hot, Cold"]]
