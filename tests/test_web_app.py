"""Tests for the local JSON command API."""

import unittest
from unittest.mock import patch

from matchday.services import InMemoryStore, ServiceFactory
from matchday.ui.web_app import WebAppState, create_app
from matchday.utils import AppConfig, STORAGE_KEY


class TestWebApp(unittest.TestCase):
    """Exercise the endpoints through Flask's test client."""

    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.factory = ServiceFactory(config=AppConfig(), storage=self.store)
        self.app_state = WebAppState(self.factory)
        self.app = create_app(self.app_state)
        self.client = self.app.test_client()

    def tearDown(self) -> None:
        self.factory.shutdown()

    def _add(self, name: str) -> dict:
        response = self.client.post("/api/players", json={"name": name})
        self.assertEqual(response.status_code, 201)
        return response.get_json()["player"]

    def _state(self) -> dict:
        response = self.client.get("/api/state")
        self.assertEqual(response.status_code, 200)
        return response.get_json()

    def test_empty_state(self) -> None:
        data = self._state()
        self.assertTrue(data["success"])
        self.assertEqual(data["players"], [])
        self.assertEqual(data["match"]["phase"], "not_started")
        self.assertEqual(data["match"]["remaining"], "30:00")
        self.assertEqual(data["field"]["max_players"], 6)
        self.assertTrue(data["field"]["can_add_player"])

    def test_add_player(self) -> None:
        player = self._add("  Dan ")
        self.assertEqual(player["name"], "Dan")
        self.assertEqual(player["number"], 1)

        response = self.client.post("/api/players", json={"name": "   "})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()["success"])

        response = self.client.post("/api/players", json=["Dan"])
        self.assertEqual(response.status_code, 400)

    def test_roster_updates(self) -> None:
        alice = self._add("Alice")
        bob = self._add("Bob")

        response = self.client.post(f"/api/players/{alice['id']}/number", json={"number": 9})
        self.assertTrue(response.get_json()["success"])
        response = self.client.post(f"/api/players/{bob['id']}/number", json={"number": 9})
        self.assertEqual(response.status_code, 400)

        response = self.client.post(f"/api/players/{bob['id']}/presence", json={"is_present": False})
        self.assertTrue(response.get_json()["success"])
        response = self.client.post(f"/api/players/{bob['id']}/presence", json={"is_present": "no"})
        self.assertEqual(response.status_code, 400)

        response = self.client.delete(f"/api/players/{alice['id']}")
        self.assertTrue(response.get_json()["success"])
        response = self.client.delete(f"/api/players/{alice['id']}")
        self.assertEqual(response.status_code, 404)

        players = self._state()["players"]
        self.assertEqual([p["name"] for p in players], ["Bob"])
        self.assertFalse(players[0]["is_present"])

    def test_unknown_player_is_404(self) -> None:
        self.assertEqual(self.client.post("/api/field/nope").status_code, 404)
        self.assertEqual(self.client.delete("/api/field/nope").status_code, 404)
        self.assertEqual(
            self.client.post("/api/players/nope/number", json={"number": 3}).status_code, 404
        )
        self.assertEqual(
            self.client.post("/api/players/nope/presence", json={"is_present": True}).status_code, 404
        )

    def test_field_and_substitution(self) -> None:
        alice = self._add("Alice")
        bob = self._add("Bob")

        self.assertTrue(self.client.post(f"/api/field/{alice['id']}").get_json()["success"])
        self.assertEqual(self.client.post(f"/api/field/{alice['id']}").status_code, 400)

        response = self.client.post(
            "/api/substitute", json={"player_in_id": bob["id"], "player_out_id": alice["id"]}
        )
        self.assertTrue(response.get_json()["success"])
        self.assertEqual(self._state()["field"]["playing"], [bob["id"]])

        response = self.client.post(
            "/api/substitute", json={"player_in_id": bob["id"], "player_out_id": alice["id"]}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.post("/api/substitute", json={}).status_code, 400)

        self.assertTrue(self.client.delete(f"/api/field/{bob['id']}").get_json()["success"])
        self.assertEqual(self.client.delete(f"/api/field/{bob['id']}").status_code, 400)

    def test_match_lifecycle(self) -> None:
        for name in ("Alice", "Bob"):
            self._add(name)
        response = self.client.post("/api/match/initialize", json={"start_with_players": True})
        self.assertEqual(response.status_code, 400)

        self._add("Carol")
        with patch("matchday.services.timer_service.now_ts", return_value=1000.0), \
                patch("matchday.services.field_service.now_ts", return_value=1000.0):
            response = self.client.post("/api/match/initialize", json={"start_with_players": True})
        self.assertTrue(response.get_json()["success"])
        self.assertEqual(len(self._state()["field"]["playing"]), 3)

        with patch("matchday.services.timer_service.now_ts", return_value=1300.0):
            self.assertEqual(self.client.post("/api/match/tick").status_code, 200)
            response = self.client.post("/api/match/pause")
        self.assertEqual(response.get_json()["phase"], "paused")
        for player in self.app_state.match_state.all_players:
            self.assertEqual(player.playing_time, 300.0)

        self.assertEqual(self.client.post("/api/match/resume").get_json()["phase"], "running")
        self.assertEqual(self.client.post("/api/match/start").get_json()["phase"], "running")
        self.assertEqual(self.client.post("/api/match/reset").get_json()["phase"], "not_started")
        self.assertEqual(self._state()["field"]["playing"], [])

    def test_commands_are_saved_and_cleared(self) -> None:
        self._add("Alice")
        self.assertTrue(self.app_state.runner.wait_idle())
        self.assertIn(STORAGE_KEY, self.store.keys())

        response = self.client.delete("/api/saved-state")
        self.assertTrue(response.get_json()["success"])
        self.assertEqual(self.store.keys(), [])
        self.assertEqual(self._state()["players"], [])

    def test_saved_state_is_restored(self) -> None:
        self._add("Alice")
        self._add("Bob")
        self.assertTrue(self.app_state.runner.wait_idle())

        factory = ServiceFactory(config=AppConfig(), storage=self.store)
        try:
            self.assertTrue(factory.restore_saved_state())
            names = [p.name for p in factory.match_state.all_players]
            self.assertEqual(names, ["Alice", "Bob"])
        finally:
            factory.shutdown()


if __name__ == "__main__":
    unittest.main()
