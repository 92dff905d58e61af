from datetime import date

import pytest

from linkedin_profile_scraper.normalize import (
    format_date,
    get_clean_text,
    get_duration_in_days,
    get_hostname,
    get_location_from_text,
    get_ongoing_duration_in_days,
    looks_like_date_range,
    parse_endorsement_count,
    split_date_range,
)


def test_get_clean_text():
    assert get_clean_text("  Jane \n  Doe\t") == "Jane Doe"
    assert get_clean_text("   ") is None
    assert get_clean_text(None) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Jan 2020", date(2020, 1, 1)),
        ("January 2020", date(2020, 1, 1)),
        ("Dec 2019", date(2019, 12, 1)),
        ("2014", date(2014, 1, 1)),
        ("Mar 3, 2021", date(2021, 3, 3)),
        ("Present", None),
        ("Jan", None),
        ("not a date 2020 at all xyz", None),
        ("", None),
        (None, None),
    ],
)
def test_format_date(text, expected):
    assert format_date(text) == expected


def test_durations():
    assert get_duration_in_days(date(2014, 1, 1), date(2016, 1, 1)) == 730
    assert get_duration_in_days(date(2016, 1, 1), date(2014, 1, 1)) is None
    assert get_duration_in_days(None, date(2014, 1, 1)) is None
    assert get_ongoing_duration_in_days(date(2020, 1, 1), today=date(2020, 1, 31)) == 30
    assert get_ongoing_duration_in_days(None) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Jan 2020 - Present · 4 yrs", ("Jan 2020", None, True)),
        ("Mar 2016 – Dec 2019 · 3 yrs 10 mos", ("Mar 2016", "Dec 2019", False)),
        ("2014 - 2016", ("2014", "2016", False)),
        ("2014–2016", ("2014", "2016", False)),
        ("Jun 2018", ("Jun 2018", None, False)),
        (None, (None, None, False)),
    ],
)
def test_split_date_range(text, expected):
    assert split_date_range(text) == expected


def test_looks_like_date_range():
    assert looks_like_date_range("Jan 2020 - Present · 4 yrs")
    assert looks_like_date_range("2014 - 2016")
    assert not looks_like_date_range("Acme Corp · Full-time")
    assert not looks_like_date_range("Knowledge of things")


def test_get_location_from_text():
    full = get_location_from_text("Amsterdam, North Holland, Netherlands")
    assert (full.city, full.province, full.country) == ("Amsterdam", "North Holland", "Netherlands")

    two = get_location_from_text("Berlin, Germany · Remote")
    assert (two.city, two.province, two.country) == ("Berlin", None, "Germany")

    area = get_location_from_text("Greater Seattle Area")
    assert (area.city, area.province, area.country) == ("Greater Seattle", None, None)

    assert get_location_from_text("Remote") is None
    assert get_location_from_text(None) is None


def test_parse_endorsement_count():
    assert parse_endorsement_count("12 endorsements") == 12
    assert parse_endorsement_count("1 endorsement") == 1
    assert parse_endorsement_count("99+ endorsements") == 99
    assert parse_endorsement_count("1,204 endorsements") == 1204
    assert parse_endorsement_count(None) == 0
    assert parse_endorsement_count("Endorsed by 3 colleagues") == 0


def test_get_hostname():
    assert get_hostname("https://www.linkedin.com/in/jane") == "www.linkedin.com"
    assert get_hostname("data:text/plain,hi") is None
