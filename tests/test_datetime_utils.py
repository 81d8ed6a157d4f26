import unittest
from datetime import date, datetime, timezone

from utils.datetime_utils import (
    collect_dates, match_date, normalize_iso_datetime, parse_datetime, within_next_hours,
)


class TestDatetimeUtils(unittest.TestCase):

    def test_normalize(self):
        self.assertEqual(normalize_iso_datetime("2026-10-19 12:00:00+00:00"), "2026-10-19T12:00:00Z")
        self.assertEqual(normalize_iso_datetime("2026-10-19T12:00:00.123+0000"), "2026-10-19T12:00:00Z")
        self.assertEqual(normalize_iso_datetime("2026-10-19T12:00:00z"), "2026-10-19T12:00:00Z")
        self.assertEqual(normalize_iso_datetime(""), "")

    def test_parse_is_utc(self):
        self.assertEqual(parse_datetime("2026-10-19T14:00:00+02:00"),
                         datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))

    def test_window(self):
        now = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)
        self.assertTrue(within_next_hours("2026-10-20T08:00:00Z", now, 24))
        self.assertFalse(within_next_hours("2026-10-20T08:00:01Z", now, 24))
        self.assertFalse(within_next_hours("2026-10-19T07:59:00Z", now, 24))
        self.assertFalse(within_next_hours("not a date", now, 24))

    def test_match_date_prefers_start_time(self):
        self.assertEqual(match_date("2026-10-18", "2026-10-19T01:00:00Z"), date(2026, 10, 19))
        self.assertEqual(match_date("2026-10-18", ""), date(2026, 10, 18))
        self.assertIsNone(match_date("", None))

    def test_collect_dates(self):
        days = [date(2026, 10, 18), date(2026, 10, 19), None]
        self.assertEqual(collect_dates(days, 1),
                         ["2026-10-17", "2026-10-18", "2026-10-19", "2026-10-20"])


if __name__ == '__main__':
    unittest.main()
