"""Discord webhook notifications for the daily picks."""
import logging
from typing import List, Optional

from config.settings import DISCORD_WEBHOOK_URL, FEATURED_SAFE_BETS_COUNT
from core.errors import UpstreamError
from core.http_client import HttpClient
from core.models import DailyPicks, MatchRecord, Tier

logger = logging.getLogger(__name__)

DISCORD_MAX_LENGTH = 2000
TIER_LEGEND = "💪 Strong (3-6%) | ⭐ Elite (6-10%) | 🔥 Sick (10%+)"


def _confidence(match: MatchRecord) -> str:
    return match.confidence.value.upper() if match.confidence else "LOW"


def format_additional_bets(value_bets: List[MatchRecord]) -> str:
    if len(value_bets) <= 1:
        return ""
    additional = len(value_bets) - 1
    lines = [f"📊 **{additional} More Value Bet{'s' if additional > 1 else ''} Available**"]
    for tier in (Tier.SICK, Tier.ELITE, Tier.STRONG):
        count = sum(1 for b in value_bets if b.tier is tier)
        if count:
            lines.append(f"   {tier.emoji} {tier.label}: {count}")
    return "\n".join(lines)


def format_bet_of_the_day(bet: MatchRecord, value_bets: List[MatchRecord]) -> str:
    return (
        f"🏆 **TennTrend - Bet of the Day**\n\n"
        f"**{bet.home_team} vs {bet.away_team}** ({bet.league})\n"
        f"🕐 Start: {bet.start_time}\n\n"
        f"{bet.tier.emoji} **{bet.tier.label}**\n"
        f"🎯 **Pick:** {bet.home_team} to Win\n"
        f"💰 **Odds:** {bet.market_odd:.2f}\n"
        f"🤖 **AI Win Probability:** {bet.win_probability:.0f}%\n"
        f"📈 **Expected Value:** {bet.expected_value:+.1f}%\n"
        f"🎲 **Confidence:** {_confidence(bet)}\n\n"
        f"💡 **Analysis:**\n{bet.reasoning}\n\n"
        f"{format_additional_bets(value_bets)}\n"
    )


def format_safe_bets(safe_bets: List[MatchRecord]) -> str:
    lines = ["🛡️ **Safe Bets Today** (High Probability Favorites)\n"]
    for i, bet in enumerate(safe_bets[:FEATURED_SAFE_BETS_COUNT], 1):
        lines.append(
            f"**{i}. {bet.home_team}** vs {bet.away_team}\n"
            f"   💰 Odds: {bet.market_odd:.2f} | 🤖 AI: {bet.win_probability:.0f}% | 🎲 {_confidence(bet)}\n"
            f"   🕐 {bet.start_time}\n"
        )
    return "\n".join(lines)


def format_daily_message(picks: DailyPicks) -> str:
    """Render the daily picks payload as one Discord message."""
    if picks.bet_of_the_day is None and not picks.safe_bets:
        return (
            "🎾 **TennTrend Daily Update**\n\n"
            "📊 No value betting opportunities found today.\n"
            f"🎯 {picks.total_games_analyzed} matches analyzed, none met the EV threshold.\n\n"
            f"{TIER_LEGEND}"
        )

    sections = []
    if picks.bet_of_the_day is not None:
        sections.append(format_bet_of_the_day(picks.bet_of_the_day, picks.value_bets))
    if picks.safe_bets:
        sections.append(format_safe_bets(picks.safe_bets))
    content = "\n---\n\n".join(sections)
    content += f"\n✨ EV Tiers: {TIER_LEGEND}"
    return content[:DISCORD_MAX_LENGTH]


def format_unavailable_message(error: str, what: str = "Match data") -> str:
    return (
        "⚠️ **TennTrend Daily Update**\n\n"
        f"{what} is unavailable today; yesterday's picks are shown as stale.\n"
        f"Reason: {error[:300]}"
    )


class DiscordNotifier:
    """Post messages to a Discord webhook; a no-op without one."""

    def __init__(self, http: HttpClient, webhook_url: Optional[str] = DISCORD_WEBHOOK_URL):
        self.http = http
        self.webhook_url = webhook_url

    async def send(self, content: str) -> bool:
        if not self.webhook_url:
            logger.info("[Discord] No webhook configured, skipping notification")
            return False
        try:
            await self.http.post_json(self.webhook_url, {"content": content})
        except UpstreamError as e:
            logger.error(f"[Discord] Failed to send notification: {e}")
            return False
        logger.info("[Discord] Notification sent")
        return True

    async def send_daily_picks(self, picks: DailyPicks) -> bool:
        return await self.send(format_daily_message(picks))

    async def send_unavailable(self, error: str, what: str = "Match data") -> bool:
        return await self.send(format_unavailable_message(error, what))
