import pytest

from guildboard.core.errors import MSG_DAY, MSG_TIME_RANGE, ParseError
from guildboard.services.board.commands import parse_event_command

DEFAULT_TITLE = "BG3 event"


def test_saturday_evening_raid():
    assert parse_event_command("so 20-24 raid", DEFAULT_TITLE) == {
        "day": 5,
        "startHour": 20,
        "endHour": 24,
        "title": "raid",
        "weekOffset": 0,
    }


def test_week_offset_prefix_and_default_title():
    parsed = parse_event_command("+1 ut 18-20", DEFAULT_TITLE)
    assert parsed["weekOffset"] == 1
    assert parsed["day"] == 1
    assert parsed["title"] == DEFAULT_TITLE


@pytest.mark.parametrize(
    "text,day",
    [("po 8-9", 0), ("Út 8-9", 1), ("ST 8-9", 2), ("čt 8-9", 3), ("ct 8-9", 3), ("pá 8-9", 4), ("NE 8-9", 6)],
)
def test_day_tokens(text, day):
    assert parse_event_command(text, DEFAULT_TITLE)["day"] == day


def test_en_dash_and_spaces_around_dash():
    parsed = parse_event_command("  ne 9 – 12   long session  ", DEFAULT_TITLE)
    assert (parsed["startHour"], parsed["endHour"]) == (9, 12)
    assert parsed["title"] == "long session"


def test_unknown_day_token():
    with pytest.raises(ParseError) as exc:
        parse_event_command("xx 20-24", DEFAULT_TITLE)
    assert exc.value.kind == ParseError.DAY
    assert exc.value.message == MSG_DAY


@pytest.mark.parametrize("text", ["so 24-20", "so 20-20", "so 0-0", "so 20-25"])
def test_bad_time_range(text):
    with pytest.raises(ParseError) as exc:
        parse_event_command(text, DEFAULT_TITLE)
    assert exc.value.kind == ParseError.TIME_RANGE
    assert str(exc.value) == MSG_TIME_RANGE


def test_start_hour_24_is_rejected():
    with pytest.raises(ParseError) as exc:
        parse_event_command("so 24-24", DEFAULT_TITLE)
    assert exc.value.kind == ParseError.TIME_RANGE


def test_week_offset_out_of_range():
    with pytest.raises(ParseError) as exc:
        parse_event_command("+53 so 20-24", DEFAULT_TITLE)
    assert exc.value.kind == ParseError.WEEK_OFFSET
    assert parse_event_command("+52 so 20-24", DEFAULT_TITLE)["weekOffset"] == 52


@pytest.mark.parametrize("text", [None, "", "raid on saturday", "so 20", "so 100-200", "+x so 20-24"])
def test_format_errors(text):
    with pytest.raises(ParseError) as exc:
        parse_event_command(text, DEFAULT_TITLE)
    assert exc.value.kind == ParseError.FORMAT
