"""
Local web command API for the Matchday Sideline Timekeeper.

This module contains the Flask app that exposes the roster, field and clock
commands as JSON endpoints for a page or script running on the same machine.
"""
import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from ..models import Player
from ..services import NotFoundError, ServiceFactory, ValidationError
from ..utils import APP_TITLE, fmt_mmss, now_ts, ts_to_iso

logger = logging.getLogger(__name__)


class WebAppState:
    """
    State holder for the web application.

    Every service comes from one ServiceFactory so they share a single
    MatchState instance.
    """

    def __init__(self, factory: Optional[ServiceFactory] = None):
        self.service_factory = factory or ServiceFactory()
        services = self.service_factory.create_complete_service_suite()
        self.match_state = self.service_factory.match_state
        self.player_service = services["player"]
        self.timer_service = services["timer"]
        self.field_service = services["field"]
        self.persistence_service = services["persistence"]
        self.runner = services["runner"]


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _player_view(player: Player, current_time: float) -> dict:
    playing_seconds = player.current_playing_seconds(current_time)
    return {
        "id": player.id,
        "name": player.name,
        "number": player.number,
        "is_present": player.is_present,
        "is_playing": player.is_playing,
        "playing_seconds": playing_seconds,
        "playing_time": fmt_mmss(playing_seconds),
    }


def create_app(app_state: Optional[WebAppState] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        app_state: Pre-wired services (a default WebAppState is built when omitted)

    Returns:
        Configured Flask application instance
    """
    state = app_state or WebAppState()
    app = Flask(__name__)
    app.config["APP_STATE"] = state

    def _require_player(player_id: str) -> Player:
        player = state.player_service.get_player(player_id)
        if player is None:
            raise NotFoundError(player_id)
        return player

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"success": False, "error": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify({"success": False, "error": str(e)}), 404

    # ==================== Read ==================== #

    @app.route("/api/state", methods=["GET"])
    def get_state():
        """Current clock, roster and field composition."""
        current_time = now_ts()
        with state.match_state.lock:
            ms = state.match_state
            elapsed = ms.get_elapsed_seconds(current_time)
            remaining = ms.get_remaining_seconds(current_time)
            return jsonify({
                "success": True,
                "title": APP_TITLE,
                "match": {
                    "phase": state.timer_service.get_match_phase(),
                    "is_match_active": ms.is_match_active,
                    "match_start_time": ts_to_iso(ms.match_start_ts),
                    "elapsed_seconds": elapsed,
                    "remaining_seconds": remaining,
                    "elapsed": fmt_mmss(elapsed),
                    "remaining": fmt_mmss(remaining),
                    "match_duration_seconds": ms.match_duration_seconds,
                },
                "field": {
                    "max_players": state.field_service.get_max_players_on_field(),
                    "can_add_player": state.field_service.can_add_player_to_field(),
                    "playing": [p.id for p in ms.playing_players],
                    "bench": [p.id for p in ms.bench_players],
                },
                "players": [_player_view(p, current_time) for p in ms.all_players],
            })

    # ==================== Roster ==================== #

    @app.route("/api/players", methods=["POST"])
    def add_player():
        data = _json_body()
        player = state.player_service.add_player(str(data.get("name") or ""))
        return jsonify({"success": True, "player": _player_view(player, now_ts())}), 201

    @app.route("/api/players/<player_id>", methods=["DELETE"])
    def remove_player(player_id: str):
        if not state.player_service.remove_player(player_id):
            raise NotFoundError(player_id)
        return jsonify({"success": True})

    @app.route("/api/players/<player_id>/presence", methods=["POST"])
    def update_presence(player_id: str):
        data = _json_body()
        if not isinstance(data.get("is_present"), bool):
            raise ValidationError("'is_present' must be true or false")
        if not state.player_service.update_presence(player_id, data["is_present"]):
            raise NotFoundError(player_id)
        return jsonify({"success": True})

    @app.route("/api/players/<player_id>/number", methods=["POST"])
    def update_number(player_id: str):
        data = _json_body()
        _require_player(player_id)
        if not state.player_service.update_number(player_id, data.get("number")):
            return jsonify({
                "success": False,
                "error": "Number must be positive and not used by another player",
            }), 400
        return jsonify({"success": True})

    # ==================== Field ==================== #

    @app.route("/api/field/<player_id>", methods=["POST"])
    def add_to_field(player_id: str):
        _require_player(player_id)
        if not state.field_service.add_player_to_field(player_id):
            return jsonify({
                "success": False,
                "error": "Player is absent, already playing, or the field is full",
            }), 400
        return jsonify({"success": True})

    @app.route("/api/field/<player_id>", methods=["DELETE"])
    def remove_from_field(player_id: str):
        _require_player(player_id)
        if not state.field_service.remove_player_from_field(player_id):
            return jsonify({"success": False, "error": "Player is not on the field"}), 400
        return jsonify({"success": True})

    @app.route("/api/substitute", methods=["POST"])
    def substitute():
        data = _json_body()
        player_in = data.get("player_in_id")
        player_out = data.get("player_out_id")
        if not player_in or not player_out:
            raise ValidationError("'player_in_id' and 'player_out_id' are required")
        if not state.field_service.substitute_player(player_in, player_out):
            return jsonify({"success": False, "error": "Invalid substitution"}), 400
        return jsonify({"success": True})

    # ==================== Clock ==================== #

    @app.route("/api/match/initialize", methods=["POST"])
    def initialize_match():
        data = _json_body()
        start_with_players = bool(data.get("start_with_players", False))
        if not state.field_service.initialize_match(start_with_players):
            return jsonify({
                "success": False,
                "error": "At least 3 present players are needed to start",
            }), 400
        return jsonify({"success": True})

    @app.route("/api/match/start", methods=["POST"])
    def start_match():
        state.timer_service.start_match()
        return jsonify({"success": True, "phase": state.timer_service.get_match_phase()})

    @app.route("/api/match/pause", methods=["POST"])
    def pause_match():
        state.timer_service.pause_match()
        return jsonify({"success": True, "phase": state.timer_service.get_match_phase()})

    @app.route("/api/match/resume", methods=["POST"])
    def resume_match():
        state.timer_service.resume_match()
        return jsonify({"success": True, "phase": state.timer_service.get_match_phase()})

    @app.route("/api/match/reset", methods=["POST"])
    def reset_match():
        state.timer_service.reset_match()
        return jsonify({"success": True, "phase": state.timer_service.get_match_phase()})

    @app.route("/api/match/tick", methods=["POST"])
    def tick():
        state.timer_service.update_playing_times()
        return jsonify({"success": True})

    # ==================== Storage ==================== #

    @app.route("/api/saved-state", methods=["DELETE"])
    def clear_saved_state():
        """Forget the saved match and empty the roster."""
        state.runner.wait_idle()
        state.runner.run(state.persistence_service.clear())
        return jsonify({"success": True})

    return app


def run_web_app(factory: Optional[ServiceFactory] = None) -> None:
    """
    Restore any saved match and run the web application.

    Args:
        factory: Service factory to use (built from the environment when omitted)
    """
    factory = factory or ServiceFactory()
    factory.restore_saved_state()
    app = create_app(WebAppState(factory))
    config = factory.config
    logger.info("Serving %s on http://%s:%d", APP_TITLE, config.host, config.port)
    try:
        app.run(host=config.host, port=config.port, debug=False)
    finally:
        factory.shutdown()
