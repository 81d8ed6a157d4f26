import unittest
from unittest.mock import AsyncMock, patch

from core.errors import UpstreamUnavailableError
from core.models import HistoryEntry, MatchRecord
from scrapers.sofascore import SofaScoreScraper, is_tour_singles, parse_event


def make_event(home="Daria Kasatkina", away="Ons Jabeur", winner_code=1,
               category="wta", status="finished"):
    return {
        "id": 101,
        "status": {"type": status},
        "tournament": {"category": {"slug": category}},
        "homeTeam": {"name": home},
        "awayTeam": {"name": away},
        "homeScore": {"current": 2, "period1": 6, "period2": 7},
        "awayScore": {"current": 0, "period1": 4, "period2": 5},
        "winnerCode": winner_code,
        "startTimestamp": 1792317600,
    }


class TestParsing(unittest.TestCase):

    def test_tour_singles_filter(self):
        self.assertTrue(is_tour_singles(make_event()))
        self.assertFalse(is_tour_singles(make_event(category="itf-women")))
        self.assertFalse(is_tour_singles(make_event(status="inprogress")))
        self.assertFalse(is_tour_singles(make_event(home="A / B", away="C / D")))

    def test_parse_event(self):
        match = parse_event(make_event(winner_code=2))
        self.assertEqual(match.winner, "away")
        self.assertEqual(match.score_text, "6-4, 7-5")
        self.assertEqual(match.start_time, "2026-10-18T10:00:00Z")

    def test_unknown_winner_code(self):
        self.assertIsNone(parse_event(make_event(winner_code=None)).winner)


class TestSofaScoreScraper(unittest.IsolatedAsyncioTestCase):

    def make_entry(self, date, start):
        match = MatchRecord(id="m1", league="WTA", home_team="Daria Kasatkina",
                            away_team="Ons Jabeur", start_time=start, market_odd=2.5)
        return HistoryEntry.from_match(match, date)

    async def test_queries_each_date_in_window(self):
        http = AsyncMock()
        http.get.return_value = {"events": [make_event()]}
        scraper = SofaScoreScraper(http, tolerance_days=1, request_delay=0)

        with patch("scrapers.sofascore.asyncio.sleep", new=AsyncMock()):
            completed = await scraper.fetch_completed([
                self.make_entry("2026-10-18", "2026-10-18T10:00:00Z"),
                self.make_entry("2026-10-19", "2026-10-19T10:00:00Z"),
            ])

        urls = [call.args[0] for call in http.get.await_args_list]
        self.assertEqual([u.rsplit("/", 1)[-1] for u in urls],
                         ["2026-10-17", "2026-10-18", "2026-10-19", "2026-10-20"])
        self.assertEqual(len(completed), 4)

    async def test_failed_date_skipped(self):
        http = AsyncMock()
        http.get.side_effect = UpstreamUnavailableError("sofascore", "HTTP 503")
        scraper = SofaScoreScraper(http, tolerance_days=0, request_delay=0)
        completed = await scraper.fetch_completed([self.make_entry("2026-10-18", "")])
        self.assertEqual(completed, [])


if __name__ == '__main__':
    unittest.main()
