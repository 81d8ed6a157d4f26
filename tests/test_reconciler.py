import os
import tempfile
import unittest
from unittest.mock import AsyncMock

from core.errors import UpstreamUnavailableError
from core.models import BetStatus, CompletedMatch, HistoryEntry, MatchRecord
from matching.event_matcher import EventMatcher
from settlement.reconciler import SettlementReconciler, compute_roi, determine_settlement
from settlement.stats import compute_stats
from storage.history_store import SAFE_LEDGER, VALUE_LEDGER, HistoryStore


def make_entry(match_id="m1", home="Daria Kasatkina", away="Ons Jabeur", odds=2.5,
               date="2026-10-18", start="2026-10-18T10:00:00Z"):
    match = MatchRecord(
        id=match_id,
        league="WTA",
        home_team=home,
        away_team=away,
        start_time=start,
        market_odd=odds,
        win_probability=50.0,
        expected_value=25.0,
    )
    return HistoryEntry.from_match(match, date)


def completed(home="D. Kasatkina", away="O. Jabeur", winner="home",
              start="2026-10-18T10:30:00Z", provider="fake"):
    return CompletedMatch(
        provider=provider, home=home, away=away, start_time=start,
        home_score=2, away_score=0, winner=winner, score_text="6-4, 6-2",
    )


class FakeProvider:

    def __init__(self, name, results=None, error=None):
        self.name = name
        self.fetch_completed = AsyncMock(return_value=results or [], side_effect=error)


class TestSettlementRules(unittest.TestCase):

    def test_roi(self):
        self.assertEqual(compute_roi(BetStatus.WIN, 2.5), 1.5)
        self.assertEqual(compute_roi(BetStatus.LOSS, 2.5), -1.0)
        self.assertEqual(compute_roi(BetStatus.PUSH, 2.5), 0.0)
        with self.assertRaises(ValueError):
            compute_roi(BetStatus.PENDING, 2.5)

    def test_win_loss_push(self):
        entry = make_entry()
        self.assertIs(determine_settlement(entry, completed(winner="home")).status, BetStatus.WIN)
        self.assertIs(determine_settlement(entry, completed(winner="away")).status, BetStatus.LOSS)
        push = determine_settlement(entry, completed(winner="draw"))
        self.assertIs(push.status, BetStatus.PUSH)
        self.assertEqual(push.roi, 0.0)

    def test_reversed_orientation(self):
        # Provider lists our home player as away, and that side won
        entry = make_entry()
        reversed_match = completed(home="Ons Jabeur", away="Daria Kasatkina", winner="away")
        settlement = determine_settlement(entry, reversed_match)
        self.assertIs(settlement.status, BetStatus.WIN)
        self.assertEqual(settlement.roi, 1.5)

    def test_unknown_winner_is_unresolved(self):
        self.assertIsNone(determine_settlement(make_entry(), completed(winner=None)))

    def test_ambiguous_side_is_unresolved(self):
        entry = make_entry(home="Karolina Pliskova", away="Kristyna Pliskova")
        match = completed(home="Karolina Pliskova", away="Kristyna Pliskova")
        self.assertIsNone(determine_settlement(entry, match))


class TestEventMatcher(unittest.TestCase):

    def test_skips_matches_without_winner(self):
        decided = completed(winner="home")
        found = EventMatcher.find_match(make_entry(), [completed(winner=None), decided])
        self.assertIs(found, decided)

    def test_only_undecided_match(self):
        self.assertIsNone(EventMatcher.find_match(make_entry(), [completed(winner=None)]))


class TestStats(unittest.TestCase):

    def test_totals(self):
        entries = []
        for i, (status, roi) in enumerate([
            (BetStatus.WIN, 1.5), (BetStatus.LOSS, -1.0), (BetStatus.PUSH, 0.0), (BetStatus.PENDING, None),
        ]):
            entry = make_entry(match_id=f"m{i}")
            entry.status, entry.roi = status, roi
            entries.append(entry)
        stats = compute_stats(entries)
        self.assertEqual((stats.total_bets, stats.wins, stats.losses, stats.pushes, stats.pending),
                         (4, 1, 1, 1, 1))
        self.assertEqual(stats.win_rate, 50.0)
        self.assertEqual(stats.total_roi, 0.5)

    def test_no_drift_over_many_entries(self):
        entries = []
        for i in range(1000):
            entry = make_entry(match_id=f"m{i}")
            entry.status, entry.roi = BetStatus.WIN, 0.1
            entries.append(entry)
        self.assertEqual(compute_stats(entries).total_roi, 100.0)

    def test_empty(self):
        stats = compute_stats([])
        self.assertEqual(stats.win_rate, 0.0)
        self.assertEqual(stats.total_roi, 0.0)


class TestSettlementReconciler(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.store = HistoryStore(os.path.join(self.tmpdir.name, "history.json"))

    def tearDown(self):
        self.tmpdir.cleanup()

    async def test_settles_and_persists(self):
        self.store.append(VALUE_LEDGER, make_entry())
        provider = FakeProvider("fake", [completed()])

        report = await SettlementReconciler(self.store, [provider]).run()

        self.assertEqual(len(report.settled), 1)
        entry = self.store.get(VALUE_LEDGER, "m1")
        self.assertIs(entry.status, BetStatus.WIN)
        self.assertEqual(entry.roi, 1.5)
        self.assertEqual(entry.result, "6-4, 6-2")
        self.assertEqual(entry.source, "fake")

        reloaded = HistoryStore.load(str(self.store.path))
        self.assertIs(reloaded.get(VALUE_LEDGER, "m1").status, BetStatus.WIN)
        self.assertEqual(reloaded.stats(VALUE_LEDGER).total_roi, 1.5)

    async def test_one_day_tolerance(self):
        self.store.append(VALUE_LEDGER, make_entry(match_id="next_day"))
        self.store.append(SAFE_LEDGER, make_entry(match_id="too_late", home="Coco Gauff", away="Jessica Pegula"))
        provider = FakeProvider("fake", [
            completed(start="2026-10-19T01:00:00Z"),
            completed(home="Coco Gauff", away="Jessica Pegula", start="2026-10-21T10:00:00Z"),
        ])

        report = await SettlementReconciler(self.store, [provider], tolerance_days=1).run()

        self.assertIs(self.store.get(VALUE_LEDGER, "next_day").status, BetStatus.WIN)
        self.assertIs(self.store.get(SAFE_LEDGER, "too_late").status, BetStatus.PENDING)
        self.assertEqual([e.id for _, e in report.unresolved], ["too_late"])

    async def test_unresolvable_stays_pending(self):
        self.store.append(VALUE_LEDGER, make_entry())
        provider = FakeProvider("fake", [completed(home="Iga Swiatek", away="Aryna Sabalenka")])

        report = await SettlementReconciler(self.store, [provider]).run()

        self.assertEqual(report.settled, [])
        self.assertIs(self.store.get(VALUE_LEDGER, "m1").status, BetStatus.PENDING)

    async def test_undecided_listing_does_not_hide_result(self):
        self.store.append(VALUE_LEDGER, make_entry())
        provider = FakeProvider("fake", [completed(winner=None), completed(winner="away")])

        await SettlementReconciler(self.store, [provider]).run()

        self.assertIs(self.store.get(VALUE_LEDGER, "m1").status, BetStatus.LOSS)

    async def test_rerun_changes_nothing(self):
        self.store.append(VALUE_LEDGER, make_entry())
        provider = FakeProvider("fake", [completed(winner="away")])
        reconciler = SettlementReconciler(self.store, [provider])

        await reconciler.run()
        settled_at = self.store.get(VALUE_LEDGER, "m1").settled_at
        provider.fetch_completed.return_value = [completed(winner="home")]
        report = await reconciler.run()

        entry = self.store.get(VALUE_LEDGER, "m1")
        self.assertEqual(report.settled, [])
        self.assertIs(entry.status, BetStatus.LOSS)
        self.assertEqual(entry.settled_at, settled_at)
        self.assertEqual(provider.fetch_completed.await_count, 1)

    async def test_falls_back_to_next_provider(self):
        self.store.append(VALUE_LEDGER, make_entry())
        broken = FakeProvider("primary", error=UpstreamUnavailableError("primary", "down"))
        backup = FakeProvider("backup", [completed(provider="backup")])

        await SettlementReconciler(self.store, [broken, backup]).run()

        self.assertEqual(self.store.get(VALUE_LEDGER, "m1").source, "backup")

    async def test_resolved_picks_not_sent_to_next_provider(self):
        self.store.append(VALUE_LEDGER, make_entry())
        self.store.append(VALUE_LEDGER, make_entry(match_id="m2", home="Coco Gauff", away="Jessica Pegula"))
        primary = FakeProvider("primary", [completed()])
        backup = FakeProvider("backup", [])

        await SettlementReconciler(self.store, [primary, backup]).run()

        sent = backup.fetch_completed.await_args.args[0]
        self.assertEqual([e.id for e in sent], ["m2"])


if __name__ == '__main__':
    unittest.main()
