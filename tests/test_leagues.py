import unittest

from config.leagues import DEFAULT_CONTEXT_SCORE, LEAGUE_CONFIG, classify_sport, get_context_score


class TestLeagues(unittest.TestCase):

    def test_only_tennis_tours_configured(self):
        self.assertEqual(set(LEAGUE_CONFIG), {"ATP", "WTA"})

    def test_classify_sport(self):
        self.assertEqual(classify_sport({"key": "tennis_atp_paris", "title": "ATP Paris"}), "ATP")
        self.assertEqual(classify_sport({"key": "tennis_wta_finals", "title": "WTA Finals"}), "WTA")
        self.assertIsNone(classify_sport({"key": "icehockey_nhl", "title": "NHL"}))
        self.assertIsNone(classify_sport({"key": "tennis_itf_m25", "title": "ITF"}))

    def test_context_score(self):
        self.assertEqual(get_context_score("ATP"), 100)
        self.assertEqual(get_context_score("Challenger"), DEFAULT_CONTEXT_SCORE)


if __name__ == '__main__':
    unittest.main()
