import unittest
from unittest.mock import AsyncMock

from core.errors import UpstreamUnavailableError
from core.models import Confidence, DailyPicks, MatchRecord, Tier
from notifications.discord import (
    DISCORD_MAX_LENGTH, DiscordNotifier, format_additional_bets, format_daily_message,
    format_unavailable_message,
)


def make_bet(match_id, tier=Tier.SICK, ev=20.0, odds=2.0, probability=60.0):
    return MatchRecord(
        id=match_id,
        league="ATP",
        home_team=f"Home {match_id}",
        away_team=f"Away {match_id}",
        start_time="2026-10-19T12:00:00Z",
        market_odd=odds,
        win_probability=probability,
        confidence=Confidence.HIGH,
        reasoning="Strong serve on indoor hard courts.",
        expected_value=ev,
        tier=tier,
    )


class TestFormatting(unittest.TestCase):

    def test_empty_day(self):
        message = format_daily_message(DailyPicks([], [], None, 12))
        self.assertIn("No value betting opportunities", message)
        self.assertIn("12 matches analyzed", message)

    def test_bet_of_the_day(self):
        botd = make_bet("a")
        others = [botd, make_bet("b", Tier.ELITE, 7.0), make_bet("c", Tier.STRONG, 4.0)]
        message = format_daily_message(DailyPicks(others, [], botd, 10))
        self.assertIn("Bet of the Day", message)
        self.assertIn("Home a vs Away a", message)
        self.assertIn("+20.0%", message)
        self.assertIn("2 More Value Bets", message)

    def test_additional_bets_counts(self):
        bets = [make_bet("a"), make_bet("b", Tier.ELITE, 7.0), make_bet("c", Tier.ELITE, 8.0)]
        text = format_additional_bets(bets)
        self.assertIn("Elite Edge: 2", text)
        self.assertEqual(format_additional_bets(bets[:1]), "")

    def test_safe_bets_only(self):
        safe = make_bet("s", tier=None, ev=0.8, odds=1.4, probability=72)
        message = format_daily_message(DailyPicks([], [safe], None, 5))
        self.assertIn("Safe Bets Today", message)
        self.assertNotIn("Bet of the Day", message)

    def test_unavailable_notice_names_what_failed(self):
        message = format_unavailable_message("no oracle answered", "AI analysis")
        self.assertIn("AI analysis is unavailable today", message)
        self.assertNotIn("No value betting opportunities", message)

    def test_message_length_capped(self):
        botd = make_bet("a")
        botd.reasoning = "x" * 5000
        message = format_daily_message(DailyPicks([botd], [], botd, 1))
        self.assertLessEqual(len(message), DISCORD_MAX_LENGTH)


class TestDiscordNotifier(unittest.IsolatedAsyncioTestCase):

    async def test_no_webhook(self):
        http = AsyncMock()
        self.assertFalse(await DiscordNotifier(http, webhook_url="").send("hi"))
        http.post_json.assert_not_awaited()

    async def test_send(self):
        http = AsyncMock()
        self.assertTrue(await DiscordNotifier(http, webhook_url="https://hook").send("hi"))
        http.post_json.assert_awaited_once_with("https://hook", {"content": "hi"})

    async def test_failure_is_reported_not_raised(self):
        http = AsyncMock()
        http.post_json.side_effect = UpstreamUnavailableError("discord", "HTTP 500")
        self.assertFalse(await DiscordNotifier(http, webhook_url="https://hook").send("hi"))


if __name__ == '__main__':
    unittest.main()
