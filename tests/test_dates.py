"""Tests for date normalization."""

from datetime import date, datetime

import pytest

from kintree.dates import normalize_date


class TestNormalizeDate:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1839-08-29", "1839-08-29"),
            ("1746-00-00", "1746-01-01"),
            ("1990-05-01T12:00:00Z", "1990-05-01"),
            ("25 NOV 1954", "1954-11-25"),
            ("08 March 1893", "1893-03-08"),
            ("11 Aug. 1968", "1968-08-11"),
            ("NOV 1954", "1954-11-01"),
            ("May, 1837", "1837-05-01"),
            ("April 17, 1850", "1850-04-17"),
            ("SEPT. 17,1910", "1910-09-17"),
            ("05/15/1923", "1923-05-15"),
            ("1698", "1698-01-01"),
            ("ABT 1905", "1905-01-01"),
            ("(about 1833)", "1833-01-01"),
            ("AFTER 1870", "1870-01-01"),
            ("(1789?)", "1789-01-01"),
        ],
    )
    def test_formats(self, raw, expected):
        assert normalize_date(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "unknown", "31 FEB 1900", "13/40/1900"])
    def test_unparseable(self, raw):
        assert normalize_date(raw) is None

    def test_date_objects(self):
        assert normalize_date(date(1901, 2, 3)) == "1901-02-03"
        assert normalize_date(datetime(1901, 2, 3, 4, 5)) == "1901-02-03"
