import pytest

from domain.models import PHASES, PersistedSnapshot, clamp_index


def test_phase_schedule_order():
    assert [p.name for p in PHASES] == ["Setup", "Work Time", "Clean Up"]
    assert [p.key for p in PHASES] == ["setup", "work", "away"]
    assert [p.index for p in PHASES] == [0, 1, 2]


@pytest.mark.parametrize("index, expected", [(-1, 0), (0, 0), (2, 2), (9, 2)])
def test_clamp_index(index, expected):
    assert clamp_index(index) == expected


def test_to_dict_uses_stored_wire_keys():
    snap = PersistedSnapshot(
        phase_index=1,
        remaining_sec=42.5,
        running=True,
        durations_minutes={"setup": 5, "work": 30, "away": 5},
        saved_at_ms=1000.0,
    )

    assert snap.to_dict() == {
        "idx": 1,
        "remaining": 42.5,
        "running": True,
        "durations": {"setup": 5, "work": 30, "away": 5},
        "savedAt": 1000.0,
    }


def test_from_dict_reads_wire_payload():
    snap = PersistedSnapshot.from_dict(
        {"idx": 2, "remaining": 12.0, "running": True, "durations": {"work": 10}, "savedAt": 5}
    )

    assert snap.phase_index == 2
    assert snap.remaining_sec == 12.0
    assert snap.running is True
    assert snap.durations_minutes == {"work": 10}
    assert snap.saved_at_ms == 5.0


@pytest.mark.parametrize("payload", [None, [], "text", 42])
def test_from_dict_rejects_non_objects(payload):
    with pytest.raises(ValueError):
        PersistedSnapshot.from_dict(payload)


def test_from_dict_tolerates_missing_and_mistyped_fields():
    snap = PersistedSnapshot.from_dict(
        {"idx": "1", "remaining": "10", "running": 0, "durations": [1, 2], "savedAt": True}
    )

    assert snap.phase_index == 0
    assert snap.remaining_sec is None
    assert snap.running is False
    assert snap.durations_minutes == {}
    assert snap.saved_at_ms is None


def test_from_dict_clamps_index_and_negative_remaining():
    assert PersistedSnapshot.from_dict({"idx": 7}).phase_index == 2
    assert PersistedSnapshot.from_dict({"idx": -3}).phase_index == 0
    assert PersistedSnapshot.from_dict({"remaining": -4}).remaining_sec == 0.0


def test_from_dict_treats_ints_beyond_float_range_as_absent():
    huge = 10 ** 400
    snap = PersistedSnapshot.from_dict({"idx": huge, "remaining": huge, "savedAt": huge})

    assert snap.phase_index == 0
    assert snap.remaining_sec is None
    assert snap.saved_at_ms is None


def test_from_dict_treats_non_finite_numbers_as_absent():
    snap = PersistedSnapshot.from_dict({"idx": float("nan"), "remaining": float("inf")})

    assert snap.phase_index == 0
    assert snap.remaining_sec is None
