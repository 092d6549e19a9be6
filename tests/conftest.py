import pytest

from tests.fakes import RecordingReporter, RecordingSink


@pytest.fixture()
def reporter():
    return RecordingReporter()


@pytest.fixture()
def sink():
    return RecordingSink()


@pytest.fixture()
def deal_fields():
    return [
        {"id": 1, "key": "title", "name": "Title", "field_type": "varchar", "edit_flag": False},
        {
            "id": 2,
            "key": "stage_id",
            "name": "Stage",
            "field_type": "enum",
            "edit_flag": False,
            "options": [{"id": 1, "label": "Lead In"}, {"id": 2, "label": "Won"}],
        },
        {
            "id": 3,
            "key": "abc",
            "name": "Pipeline Stage",
            "field_type": "enum",
            "edit_flag": True,
            "options": [{"id": 3, "label": "Qualified"}, {"id": 4, "label": "Lost"}],
        },
        {
            "id": 4,
            "key": "colors",
            "name": "Colors",
            "field_type": "set",
            "edit_flag": True,
            "options": [{"id": 1, "label": "Red"}, {"id": 2, "label": "Blue"}],
        },
    ]
