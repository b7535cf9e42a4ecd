"""
Unit tests for PlayerService.

Tests name validation, jersey number assignment, presence handling and roster
removal against a shared match state.
"""
import unittest
from unittest.mock import patch

from matchday.models import MatchState
from matchday.services import AutoSaver, PersistenceService, InMemoryStore, ValidationError
from matchday.services.player_service import PlayerService
from matchday.utils import MAX_JERSEY_NUMBER


class TestPlayerService(unittest.TestCase):
    """Test cases for PlayerService functionality."""

    def setUp(self) -> None:
        self.state = MatchState()
        # No runner: save requests are only counted
        self.autosaver = AutoSaver(self.state, PersistenceService(InMemoryStore(), self.state))
        self.service = PlayerService(self.state, self.autosaver)

    def test_add_player_trims_name_and_numbers_from_one(self) -> None:
        dan = self.service.add_player("  Dan ")
        self.assertEqual(dan.name, "Dan")
        self.assertEqual(dan.number, 1)
        self.assertEqual(self.state.all_players, [dan])
        self.assertEqual(self.autosaver.saves_requested, 1)

    def test_add_player_rejects_empty_names(self) -> None:
        for bad in ("", "   ", "\t\n", None):
            with self.assertRaises(ValidationError):
                self.service.add_player(bad)
        self.assertEqual(self.state.all_players, [])
        self.assertEqual(self.autosaver.saves_requested, 0)

    def test_add_player_fills_lowest_gap(self) -> None:
        a = self.service.add_player("A")
        b = self.service.add_player("B")
        c = self.service.add_player("C")
        self.assertEqual([a.number, b.number, c.number], [1, 2, 3])

        self.service.remove_player(b.id)
        d = self.service.add_player("D")
        self.assertEqual(d.number, 2)

        self.assertTrue(self.service.update_number(a.id, 10))
        e = self.service.add_player("E")
        self.assertEqual(e.number, 1)

    def test_add_player_falls_back_when_numbers_exhausted(self) -> None:
        for i in range(MAX_JERSEY_NUMBER):
            self.service.add_player(f"P{i}")
        extra = self.service.add_player("Extra")
        self.assertEqual(extra.number, MAX_JERSEY_NUMBER + 1)

    def test_get_all_players_returns_copy(self) -> None:
        self.service.add_player("Alice")
        roster = self.service.get_all_players()
        roster.clear()
        self.assertEqual(len(self.state.all_players), 1)

    def test_get_player(self) -> None:
        alice = self.service.add_player("Alice")
        self.assertIs(self.service.get_player(alice.id), alice)
        self.assertIsNone(self.service.get_player("nope"))

    def test_remove_unknown_player(self) -> None:
        self.assertFalse(self.service.remove_player("nope"))
        self.assertEqual(self.autosaver.saves_requested, 0)

    def test_remove_player_on_field_settles_session(self) -> None:
        alice = self.service.add_player("Alice")
        alice.is_playing = True
        alice.playing_start_ts = 1000.0
        self.state.is_match_active = True
        self.state.match_start_ts = 1000.0

        with patch("matchday.services.player_service.now_ts", return_value=1090.0):
            self.assertTrue(self.service.remove_player(alice.id))

        self.assertEqual(self.state.all_players, [])
        self.assertFalse(alice.is_playing)
        self.assertEqual(alice.playing_time, 90.0)
        self.assertIsNone(alice.playing_start_ts)

    def test_update_presence(self) -> None:
        alice = self.service.add_player("Alice")
        saves = self.autosaver.saves_requested

        self.assertTrue(self.service.update_presence(alice.id, False))
        self.assertFalse(alice.is_present)
        self.assertEqual(self.service.get_bench_players(), [])
        self.assertTrue(self.service.update_presence(alice.id, True))
        self.assertEqual(self.service.get_bench_players(), [alice])
        self.assertEqual(self.autosaver.saves_requested, saves + 2)

        self.assertFalse(self.service.update_presence("nope", True))
        self.assertEqual(self.autosaver.saves_requested, saves + 2)

    def test_marking_playing_player_absent_takes_them_off(self) -> None:
        alice = self.service.add_player("Alice")
        alice.is_playing = True
        alice.playing_time = 30.0
        alice.playing_start_ts = 500.0
        self.state.is_match_active = True
        self.state.match_start_ts = 400.0

        with patch("matchday.services.player_service.now_ts", return_value=560.0):
            self.assertTrue(self.service.update_presence(alice.id, False))

        self.assertFalse(alice.is_playing)
        self.assertIsNone(alice.playing_start_ts)
        self.assertEqual(alice.playing_time, 90.0)
        self.assertEqual(self.service.get_playing_players(), [])

    def test_update_number(self) -> None:
        alice = self.service.add_player("Alice")
        bob = self.service.add_player("Bob")
        saves = self.autosaver.saves_requested

        self.assertTrue(self.service.update_number(alice.id, 7))
        self.assertEqual(alice.number, 7)
        # Keeping your own number is allowed
        self.assertTrue(self.service.update_number(alice.id, 7))
        self.assertEqual(self.autosaver.saves_requested, saves + 2)

    def test_update_number_rejections(self) -> None:
        alice = self.service.add_player("Alice")
        bob = self.service.add_player("Bob")
        saves = self.autosaver.saves_requested

        self.assertFalse(self.service.update_number(alice.id, 0))
        self.assertFalse(self.service.update_number(alice.id, -3))
        self.assertFalse(self.service.update_number(alice.id, bob.number))
        self.assertFalse(self.service.update_number("nope", 50))
        self.assertFalse(self.service.update_number(alice.id, "ten"))

        self.assertEqual(alice.number, 1)
        self.assertEqual(self.autosaver.saves_requested, saves)


if __name__ == "__main__":
    unittest.main()
