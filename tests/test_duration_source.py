import pytest

from services.duration_source import DurationSource, MemoryInput, parse_minutes


class CountingInput(MemoryInput):
    def __init__(self, value, **kw):
        super().__init__(value, **kw)
        self.writes = 0

    def set(self, value):
        self.writes += 1
        super().set(value)


@pytest.mark.parametrize(
    "raw, expected",
    [("12", 12), (" 7", 7), ("12abc", 12), ("2.5", 2), ("-3", -3), ("", None), ("abc", None), (None, None), (15, 15)],
)
def test_parse_minutes_reads_leading_integer(raw, expected):
    assert parse_minutes(raw) == expected


def test_valid_value_is_returned_without_rewriting_input():
    field = CountingInput("12")
    src = DurationSource([field, MemoryInput("30"), MemoryInput("5")])

    assert src.minutes_for(0) == 12
    assert field.writes == 0


def test_non_numeric_or_empty_falls_back_to_phase_default():
    inputs = [MemoryInput("abc"), MemoryInput(""), MemoryInput(None)]
    src = DurationSource(inputs)

    assert [src.minutes_for(i) for i in range(3)] == [5, 30, 5]
    assert [f.get() for f in inputs] == ["5", "30", "5"]


def test_out_of_range_values_are_clamped_and_written_back():
    inputs = [MemoryInput("0"), MemoryInput("5000"), MemoryInput("-2")]
    src = DurationSource(inputs)

    assert src.minutes_for(0) == 1
    assert src.minutes_for(1) == 999
    assert src.minutes_for(2) == 1
    assert [f.get() for f in inputs] == ["1", "999", "1"]


def test_partial_number_is_normalised_in_place():
    field = MemoryInput("12abc")
    src = DurationSource([field, MemoryInput("30"), MemoryInput("5")])

    assert src.minutes_for(0) == 12
    assert field.get() == "12"


def test_per_input_bounds_are_respected():
    field = MemoryInput("90", min_value=2, max_value=60)
    src = DurationSource([field, MemoryInput("30"), MemoryInput("5")])

    assert src.minutes_for(0) == 60
    field.set("1")
    assert src.minutes_for(0) == 2


def test_index_is_clamped_into_range(durations):
    assert durations.minutes_for(7) == durations.minutes_for(2)
    assert durations.minutes_for(-4) == durations.minutes_for(0)


def test_as_snapshot_and_seconds(durations, inputs):
    inputs[1].set("45")

    assert durations.as_snapshot() == {"setup": 5, "work": 45, "away": 5}
    assert durations.durations_sec() == [300.0, 2700.0, 300.0]


def test_restore_only_overwrites_truthy_values(durations, inputs):
    durations.restore({"setup": 2, "work": 0, "away": ""})

    assert [f.get() for f in inputs] == ["2", "30", "5"]


def test_with_defaults_uses_phase_defaults():
    src = DurationSource.with_defaults()
    assert src.as_snapshot() == {"setup": 5, "work": 30, "away": 5}


def test_input_count_must_match_phases():
    with pytest.raises(ValueError):
        DurationSource([MemoryInput("1")])
