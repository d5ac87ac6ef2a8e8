from datetime import datetime, timedelta, timezone

import pytest

from event_store.errors import ClientError
from event_store.validation import EventValidationError, validate_event_input

START = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
END = START + timedelta(minutes=15)


def test_valid_input_passes():
    validate_event_input("Standup", START, END)


def test_equal_start_and_end_is_allowed():
    validate_event_input("Instant", START, START)


def test_title_of_exactly_100_characters_is_allowed():
    validate_event_input("x" * 100, START, END)


@pytest.mark.parametrize(
    "title, start, end, reason",
    [
        ("", START, END, "title required"),
        ("x" * 101, START, END, "title too long"),
        ("Standup", END, START, "start before end"),
        # first failing rule wins
        ("", END, START, "title required"),
        ("x" * 101, END, START, "title too long"),
    ],
)
def test_rejections_report_first_failing_rule(title, start, end, reason):
    with pytest.raises(EventValidationError) as excinfo:
        validate_event_input(title, start, end)
    assert excinfo.value.message == reason
    assert isinstance(excinfo.value, ClientError)
    assert excinfo.value.status_code == 400


def test_ordering_compares_instants_across_offsets():
    # 10:00+02:00 is 08:00Z, which is before 09:00Z
    start = datetime(2024, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
    validate_event_input("Offsets", start, START)
