from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import NOW
from src.domain.entities.time_series import CacheRecord, EntityState, Sample, parse_numeric


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("21.5", 21.5),
        (" 3 ", 3.0),
        (4, 4.0),
        (True, 1.0),
        ("21,5", None),
        ("nan", None),
        ("on", None),
        (None, None),
    ],
)
def test_parse_numeric(raw, expected) -> None:
    assert parse_numeric(raw) == expected


def test_sample_can_be_moved_in_time() -> None:
    sample = Sample(timestamp=NOW, value="7")
    moved = sample.at(NOW - timedelta(hours=1))

    assert moved.value == "7"
    assert moved.timestamp == NOW - timedelta(hours=1)
    assert sample.timestamp == NOW
    assert moved.numeric == 7.0


def test_cache_record_validity_depends_on_window() -> None:
    record = CacheRecord(hours_to_show=24, last_fetched=NOW)

    assert record.is_valid_for(24)
    assert not record.is_valid_for(12)
    assert record.data == []


def test_entity_state_attributes() -> None:
    state = EntityState(
        entity_id="sensor.t",
        state="20",
        attributes={"friendly_name": "Temp", "unit_of_measurement": "°C"},
    )

    assert state.friendly_name == "Temp"
    assert state.unit_of_measurement == "°C"
    assert state.last_changed.tzinfo is not None
