"""Pytest configuration and fixtures."""

import pytest
from datetime import datetime, timedelta, timezone

from pacefix.models.fit_data import (
    DecodedActivity, FITActivity, FITDeveloperDataId, FITDeviceInfo,
    FITEvent, FITFieldDescription, FITFileId, FITLapData, FITRecordData,
    FITSessionData,
)

START = datetime(2024, 5, 4, 7, 30, tzinfo=timezone.utc)


def make_records(count, interval=1.0, start=START, speed=2.5, heart_rate=None, cadence=None):
    """Records ``interval`` seconds apart at the recorded speed."""
    records = []
    for i in range(count):
        records.append(FITRecordData(
            timestamp=start + timedelta(seconds=i * interval),
            distance=i * interval * speed,
            speed=speed,
            enhanced_speed=speed,
            heart_rate=heart_rate(i) if callable(heart_rate) else heart_rate,
            cadence=cadence(i) if callable(cadence) else cadence,
        ))
    return records


def make_lap(start_offset, duration, distance, start=START, **extra):
    """Recorded lap starting ``start_offset`` seconds into the activity."""
    return FITLapData(
        timestamp=start + timedelta(seconds=start_offset + duration),
        start_time=start + timedelta(seconds=start_offset),
        total_elapsed_time=duration,
        total_timer_time=duration,
        total_distance=distance,
        avg_speed=distance / duration if duration else 0.0,
        max_speed=distance / duration if duration else 0.0,
        lap_trigger="manual",
        **extra,
    )


def make_activity(records, laps=None, timer_time=None, with_session=True, with_file_id=True):
    """Decoded activity around the given records and laps."""
    if timer_time is None and records:
        timer_time = (records[-1].timestamp - records[0].timestamp).total_seconds()

    sessions = []
    if with_session:
        sessions.append(FITSessionData(
            timestamp=records[-1].timestamp if records else START,
            start_time=START,
            total_elapsed_time=timer_time,
            total_timer_time=timer_time,
            total_distance=records[-1].distance if records else 0.0,
            sport="running",
            raw_values={"sport": 1},
        ))

    return DecodedActivity(
        file_path="morning_run.fit",
        file_ids=[FITFileId(type="activity", manufacturer="garmin", time_created=START,
                            raw_values={"type": 4, "manufacturer": 1})] if with_file_id else [],
        developer_data_ids=[FITDeveloperDataId(developer_data_index=0)],
        field_descriptions=[FITFieldDescription(developer_data_index=0, field_definition_number=0,
                                                field_name="stryd_power", units="watts")],
        device_infos=[FITDeviceInfo(timestamp=START, manufacturer="garmin", device_index="creator",
                                    raw_values={"manufacturer": 1, "device_index": 0})],
        records=records,
        events=[FITEvent(timestamp=START, event="timer", event_type="start",
                         raw_values={"event": 0, "event_type": 0})],
        laps=laps or [],
        sessions=sessions,
        activities=[FITActivity(timestamp=records[-1].timestamp if records else START,
                                total_timer_time=timer_time, num_sessions=1)],
    )


@pytest.fixture
def ten_second_activity():
    """Ten records one second apart starting at distance 0."""
    return make_activity(make_records(10))


@pytest.fixture
def two_lap_activity():
    """Two recorded laps of 300 s each, records every second."""
    records = make_records(601, heart_rate=lambda i: 140 + i % 20, cadence=85)
    laps = [
        make_lap(0, 300, 750.0, message_index=0),
        make_lap(300, 300, 750.0, message_index=1),
    ]
    return make_activity(records, laps=laps, timer_time=600.0)


@pytest.fixture
def long_activity():
    """626 records one second apart (625 s)."""
    records = make_records(626, heart_rate=lambda i: 130 + i % 30, cadence=lambda i: 170 + i % 10)
    laps = [make_lap(0, 625, 1562.5)]
    return make_activity(records, laps=laps)
