"""Tests for the record resampler."""

import pytest
from datetime import timedelta

from pacefix.analytics.resampler import RecordResampler
from pacefix.errors import InvalidConfigurationError, LengthMismatchError
from pacefix.models.fit_data import FITRecordData
from pacefix.models.options import TransformOptions

from conftest import START, make_lap, make_activity, make_records


def test_uniform_speed_integrates_distance(ten_second_activity):
    """At 5:00/km each one-second step adds 3.333 m."""
    speed = 1000 / 300
    records = RecordResampler(TransformOptions(speed=speed)).resample(ten_second_activity.records)

    assert len(records) == 10
    for k, record in enumerate(records):
        assert record.distance == pytest.approx(speed * k)
        assert record.speed == speed
        assert record.enhanced_speed == speed


def test_first_record_keeps_recorded_distance():
    """The first interval is not integrated; the first distance is kept."""
    records = make_records(5)
    records[0] = records[0].model_copy(update={"distance": 12.0})

    resampled = RecordResampler(TransformOptions(speed=4.0)).resample(records)

    assert resampled[0].distance == 12.0
    assert resampled[1].distance == pytest.approx(16.0)
    assert resampled[4].distance == pytest.approx(28.0)


def test_missing_first_distance_starts_at_zero():
    records = [FITRecordData(timestamp=START + timedelta(seconds=i)) for i in range(3)]
    resampled = RecordResampler(TransformOptions(speed=2.0)).resample(records)
    assert [r.distance for r in resampled] == pytest.approx([0.0, 2.0, 4.0])


def test_fractional_and_irregular_intervals():
    offsets = [0, 0.5, 1.5, 4.0, 4.25]
    records = [FITRecordData(timestamp=START + timedelta(seconds=s), distance=0.0) for s in offsets]

    resampled = RecordResampler(TransformOptions(speed=2.0)).resample(records)

    assert [r.distance for r in resampled] == pytest.approx([s * 2.0 for s in offsets])


def test_distance_non_decreasing():
    records = make_records(200, interval=0.7)
    resampled = RecordResampler(TransformOptions(speed=3.7)).resample(records)
    distances = [r.distance for r in resampled]
    assert all(b >= a for a, b in zip(distances, distances[1:]))


def test_other_signals_preserved():
    records = make_records(20, heart_rate=lambda i: 120 + i, cadence=lambda i: 80 + i)
    records = [r.model_copy(update={"position_lat": 45.0, "position_long": 7.0}) for r in records]

    resampled = RecordResampler(TransformOptions(speed=5.0)).resample(records)

    for before, after in zip(records, resampled):
        assert after.timestamp == before.timestamp
        assert after.heart_rate == before.heart_rate
        assert after.cadence == before.cadence
        assert after.position_lat == before.position_lat


def test_input_records_not_modified():
    records = make_records(5, speed=2.5)
    RecordResampler(TransformOptions(speed=5.0)).resample(records)
    assert records[4].distance == 10.0
    assert records[4].speed == 2.5


def test_empty_records_is_noop():
    assert RecordResampler(TransformOptions(speed=3.0)).resample([]) == []


def test_per_lap_speeds_switch_at_lap_start(two_lap_activity):
    """Records before 300 s use the first speed, from 300 s the second."""
    options = TransformOptions(speeds=[3.0, 4.0])
    resampler = RecordResampler(options, two_lap_activity.lap_windows())

    records = resampler.resample(two_lap_activity.records)

    assert all(r.speed == 3.0 for r in records[:300])
    assert all(r.speed == 4.0 for r in records[300:])
    assert records[299].distance == pytest.approx(3.0 * 299)
    assert records[-1].distance == pytest.approx(3.0 * 299 + 4.0 * 301)


def test_per_lap_cursor_skips_laps_without_records():
    """A lap shorter than the record interval is passed over."""
    records = make_records(4, interval=10.0)
    laps = [make_lap(0, 5, 12.5), make_lap(5, 3, 7.5), make_lap(8, 22, 55.0)]
    activity = make_activity(records, laps=laps)

    resampler = RecordResampler(TransformOptions(speeds=[1.0, 2.0, 3.0]), activity.lap_windows())
    resampled = resampler.resample(activity.records)

    assert [r.speed for r in resampled] == [1.0, 3.0, 3.0, 3.0]


def test_per_lap_length_mismatch(two_lap_activity):
    with pytest.raises(LengthMismatchError):
        RecordResampler(TransformOptions(speeds=[3.0, 4.0, 5.0]), two_lap_activity.lap_windows())


def test_empty_speeds_with_records():
    with pytest.raises(InvalidConfigurationError):
        RecordResampler(TransformOptions(speeds=[]), []).resample(make_records(3))
