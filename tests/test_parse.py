import pytest
from file_sweeper.parse import format_size, parse_duration, parse_number_ranges, parse_size
from file_sweeper.exceptions import InputError
from file_sweeper import config


@pytest.mark.parametrize("text, expected", [
    ("10K", 10 * 1024),
    ("10k", 10 * 1024),
    ("10KiB", 10 * 1024),
    ("10KB", 10 * 1000),
    ("3 GiB", 3 * 1024 ** 3),
    ("2mb", 2 * 1000 ** 2),
    ("1Y", 1024 ** 8),
    ("512", 512),
    ("512B", 512),
])
def test_parse_size(text, expected):
    assert parse_size(text) == expected


@pytest.mark.parametrize("text", ["", "ten", "10X", "10 KiBs", "-5K"])
def test_parse_size_invalid(text):
    with pytest.raises(InputError):
        parse_size(text)


@pytest.mark.parametrize("text, expected", [
    ("0h", 0),
    ("5h", 5 * config.HOUR),
    ("2D", 2 * config.DAY),
    ("1y6m", config.YEAR + 6 * config.MONTH),
    ("1d 12h", config.DAY + 12 * config.HOUR),
])
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


def test_parse_duration_invalid():
    with pytest.raises(InputError):
        parse_duration("soon")


@pytest.mark.parametrize("num, expected", [
    (0, "0B"),
    (1023, "1023B"),
    (1024, "1.0KiB"),
    (1536, "1.5KiB"),
    (5 * 1024 ** 3, "5.0GiB"),
])
def test_format_size(num, expected):
    assert format_size(num) == expected


def test_parse_number_ranges():
    assert parse_number_ranges("1,7-9, 15") == [1, 7, 8, 9, 15]
    assert parse_number_ranges("  ") == []


@pytest.mark.parametrize("text", ["a", "1-2-3", "1,,2", "-3"])
def test_parse_number_ranges_invalid(text):
    with pytest.raises(InputError):
        parse_number_ranges(text)
