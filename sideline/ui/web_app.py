"""
Web application module for the Sideline Manager.

This module contains the Flask server exposing the game manager as JSON API
endpoints. The app holds no state of its own: everything flows through the
``GameManager`` and ``LineupPlanner`` handed to ``create_app``.
"""
import logging
import math
from datetime import date, datetime, time
from typing import Any, Dict, Optional, Tuple

from flask import Flask, Response, jsonify, request

from ..models import FieldPosition, Game, Player
from ..services.game_manager import (
    FAILURE_GATEWAY, FAILURE_INVALID, FAILURE_UNAUTHENTICATED, GameManager, OperationResult
)
from ..services.lineup_service import LineupPlanner
from ..services.errors import LineupValidationError
from ..services.report_service import ReportService
from ..services.schedule_service import classify_games, game_history, game_result
from ..services.playtime import current_game_seconds, live_playtime_seconds
from ..utils import APP_TITLE, HOME, fmt_mmss, now_ms

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    FAILURE_INVALID: 400,
    FAILURE_UNAUTHENTICATED: 401,
    FAILURE_GATEWAY: 502,
}


class RequestDataError(Exception):
    """Request body could not be turned into operation arguments."""
    pass


def _game_payload(game: Game, now: int) -> Dict[str, Any]:
    """Gateway record of a game plus live clock values for display."""
    payload = game.to_record()
    elapsed = current_game_seconds(game, now)
    payload["elapsed_seconds"] = elapsed
    payload["clock"] = fmt_mmss(elapsed)
    payload["result"] = game_result(game)
    for entry_payload, entry in zip(payload["lineup"], game.lineup):
        entry_payload["live_playtime_seconds"] = live_playtime_seconds(entry, now)
    return payload


def _player_payload(player: Player) -> Dict[str, Any]:
    payload = player.to_record()
    payload["full_name"] = player.full_name
    return payload


def _snapshot_payload(snapshot: Any, now: int) -> Any:
    if isinstance(snapshot, Game):
        return _game_payload(snapshot, now)
    if isinstance(snapshot, Player):
        return _player_payload(snapshot)
    if hasattr(snapshot, "to_record"):
        return snapshot.to_record()
    return snapshot


def _result_response(result: OperationResult, key: str = "game") -> Tuple[Response, int]:
    if not result.ok:
        status = STATUS_BY_KIND.get(result.kind, 500)
        return jsonify({"success": False, "error": result.error, "kind": result.kind}), status
    if result.snapshot is None:
        return jsonify({"success": False, "error": "Not found"}), 404
    return jsonify({
        "success": True,
        "changed": result.changed,
        key: _snapshot_payload(result.snapshot, now_ms()),
    }), 200


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RequestDataError("Request body must be a JSON object")
    return data


def _parse_date(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise RequestDataError(f"Invalid date: {value!r}")


def _parse_time(value: Any) -> Optional[time]:
    if value in (None, ""):
        return None
    try:
        return time.fromisoformat(str(value))
    except ValueError:
        raise RequestDataError(f"Invalid time: {value!r}")


def _text_or_none(value: Any) -> Optional[str]:
    """Jersey numbers may arrive as JSON numbers."""
    return None if value is None else str(value)


def _parse_position(value: Any) -> Optional[FieldPosition]:
    if value is None:
        return None
    try:
        position = FieldPosition.from_dict(value)
    except (KeyError, TypeError, ValueError):
        raise RequestDataError(f"Invalid position: {value!r}")
    if not (math.isfinite(position.x) and math.isfinite(position.y)):
        raise RequestDataError(f"Position must be finite: {value!r}")
    return position


def create_app(
    manager: GameManager,
    planner: Optional[LineupPlanner] = None,
    report_service: Optional[ReportService] = None,
) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        manager: Game manager for the signed-in team (already loaded)
        planner: Pre-game lineup planner; one is built from the roster if omitted
        report_service: Report builder; the default exporter is used if omitted

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    planner = planner or LineupPlanner(manager.players)
    reports = report_service or ReportService()

    @app.errorhandler(RequestDataError)
    def handle_bad_request(error):
        return jsonify({"success": False, "error": str(error), "kind": FAILURE_INVALID}), 400

    @app.errorhandler(LineupValidationError)
    def handle_lineup_error(error):
        return jsonify({"success": False, "error": str(error), "kind": FAILURE_INVALID}), 400

    # ==================== State ==================== #

    @app.route("/api/state", methods=["GET"])
    def get_state():
        """Team, roster and games in one payload."""
        now = now_ms()
        history = game_history(manager.games)
        return jsonify({
            "success": True,
            "title": APP_TITLE,
            "team": manager.team.to_record(),
            "players": [_player_payload(p) for p in manager.players],
            "games": [_game_payload(g, now) for g in manager.games],
            "history": {"seasons": history.seasons, "competitions": history.competitions},
        })

    @app.route("/api/schedule", methods=["GET"])
    def get_schedule():
        now = now_ms()
        schedule = classify_games(manager.games, datetime.now())
        return jsonify({
            "success": True,
            "ongoing": [_game_payload(g, now) for g in schedule.ongoing],
            "upcoming": [_game_payload(g, now) for g in schedule.upcoming],
            "previous": [_game_payload(g, now) for g in schedule.previous],
        })

    @app.route("/api/team", methods=["PUT"])
    def update_team():
        data = _json_body()
        result = None
        if "name" in data:
            result = manager.rename_team(data["name"])
            if not result.ok:
                return _result_response(result, key="team")
        if "logo_url" in data:
            result = manager.set_team_logo(data["logo_url"])
        if result is None:
            raise RequestDataError("Nothing to update")
        return _result_response(result, key="team")

    # ==================== Games ==================== #

    @app.route("/api/games", methods=["GET"])
    def list_games():
        now = now_ms()
        return jsonify({"success": True, "games": [_game_payload(g, now) for g in manager.games]})

    @app.route("/api/games", methods=["POST"])
    def add_game():
        data = _json_body()
        result = manager.add_game(
            opponent=data.get("opponent", ""),
            game_date=_parse_date(data.get("game_date")),
            game_time=_parse_time(data.get("game_time")),
            location=data.get("location", HOME),
            season=data.get("season"),
            competition=data.get("competition"),
        )
        response, status = _result_response(result)
        return response, 201 if result.ok and status == 200 else status

    @app.route("/api/games/<game_id>", methods=["GET"])
    def get_game(game_id: str):
        game = manager.get_game(game_id)
        if game is None:
            return jsonify({"success": False, "error": "Not found"}), 404
        return jsonify({"success": True, "game": _game_payload(game, now_ms())})

    @app.route("/api/games/<game_id>", methods=["PUT"])
    def update_game(game_id: str):
        data = _json_body()
        changes = dict(data)
        if "game_date" in changes:
            changes["game_date"] = _parse_date(changes["game_date"])
        if "game_time" in changes:
            changes["game_time"] = _parse_time(changes["game_time"])
        return _result_response(manager.update_game(game_id, **changes))

    @app.route("/api/games/<game_id>", methods=["DELETE"])
    def delete_game(game_id: str):
        result = manager.delete_game(game_id)
        if result.ok and result.changed:
            return jsonify({"success": True}), 200
        return _result_response(result)

    # ==================== Live game ==================== #

    @app.route("/api/games/<game_id>/timer/start", methods=["POST"])
    def start_timer(game_id: str):
        return _result_response(manager.start_game_timer(game_id))

    @app.route("/api/games/<game_id>/timer/stop", methods=["POST"])
    def stop_timer(game_id: str):
        return _result_response(manager.stop_game_timer(game_id))

    @app.route("/api/games/<game_id>/timer/finish", methods=["POST"])
    def finish_game(game_id: str):
        return _result_response(manager.mark_game_finished(game_id))

    @app.route("/api/games/<game_id>/reset", methods=["POST"])
    def reset_game(game_id: str):
        return _result_response(manager.reset_game_lineup(game_id))

    @app.route("/api/games/<game_id>/moves", methods=["POST"])
    def move_player(game_id: str):
        data = _json_body()
        for key in ("player_id", "source", "target"):
            if not data.get(key):
                raise RequestDataError(f"Missing field: {key}")
        result = manager.move_player_in_game(
            game_id,
            data["player_id"],
            data["source"],
            data["target"],
            _parse_position(data.get("position")),
        )
        return _result_response(result)

    @app.route("/api/games/<game_id>/goals", methods=["POST"])
    def add_goal(game_id: str):
        data = _json_body()
        if not data.get("team"):
            raise RequestDataError("Missing field: team")
        result = manager.add_goal(
            game_id, data["team"], data.get("scorer_player_id"), data.get("assist_player_id")
        )
        return _result_response(result)

    @app.route("/api/games/<game_id>/goals/<team>", methods=["DELETE"])
    def remove_last_goal(game_id: str, team: str):
        return _result_response(manager.remove_last_goal(game_id, team))

    @app.route("/api/games/<game_id>/report", methods=["GET"])
    def game_report(game_id: str):
        game = manager.get_game(game_id)
        if game is None:
            return jsonify({"success": False, "error": "Not found"}), 404
        report = reports.generate_game_report(game, manager.players, now_ms())
        return jsonify({
            "success": True,
            "report": {
                "game_id": report.game_id,
                "elapsed_seconds": report.elapsed_seconds,
                "home_score": report.home_score,
                "away_score": report.away_score,
                "substitution_count": report.substitution_count,
                "total_playtime_seconds": report.total_playtime_seconds,
                "players": [vars(summary) for summary in report.players],
            },
        })

    @app.route("/api/games/<game_id>/report.csv", methods=["GET"])
    def game_report_csv(game_id: str):
        game = manager.get_game(game_id)
        if game is None:
            return jsonify({"success": False, "error": "Not found"}), 404
        report = reports.generate_game_report(game, manager.players, now_ms())
        return Response(
            reports.generate_report_csv(report),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=game_{game_id}_report.csv"},
        )

    # ==================== Roster ==================== #

    @app.route("/api/players", methods=["GET"])
    def list_players():
        return jsonify({"success": True, "players": [_player_payload(p) for p in manager.players]})

    @app.route("/api/players", methods=["POST"])
    def add_player():
        data = _json_body()
        result = manager.add_player(
            data.get("first_name", ""), data.get("last_name", ""), _text_or_none(data.get("number"))
        )
        planner.sync_roster(manager.players)
        response, status = _result_response(result, key="player")
        return response, 201 if result.ok and status == 200 else status

    @app.route("/api/players/<player_id>", methods=["PUT"])
    def update_player(player_id: str):
        data = _json_body()
        result = manager.update_player(
            player_id, data.get("first_name"), data.get("last_name"), _text_or_none(data.get("number"))
        )
        return _result_response(result, key="player")

    @app.route("/api/players/<player_id>", methods=["DELETE"])
    def delete_player(player_id: str):
        result = manager.delete_player(player_id)
        planner.sync_roster(manager.players)
        if result.ok and result.changed:
            return jsonify({"success": True, "unsynced_game_ids": result.unsynced_game_ids}), 200
        return _result_response(result, key="player")

    # ==================== Lineup planning ==================== #

    def _planner_payload() -> Dict[str, Any]:
        return {"success": True, "lineup": [slot.to_dict() for slot in planner.slots]}

    @app.route("/api/lineup", methods=["GET"])
    def get_lineup():
        return jsonify(_planner_payload())

    @app.route("/api/lineup/move", methods=["POST"])
    def plan_move():
        data = _json_body()
        moved = planner.move_player(
            data.get("player_id", ""), data.get("target", ""), _parse_position(data.get("position"))
        )
        if not moved:
            return jsonify({"success": False, "error": "Player not found"}), 404
        return jsonify(_planner_payload())

    @app.route("/api/lineup/swap", methods=["POST"])
    def plan_swap():
        data = _json_body()
        if not planner.swap_players(data.get("player1_id", ""), data.get("player2_id", "")):
            return jsonify({"success": False, "error": "Player not found"}), 404
        return jsonify(_planner_payload())

    @app.route("/api/lineup/reset", methods=["POST"])
    def plan_reset():
        planner.reset()
        return jsonify(_planner_payload())

    @app.route("/api/lineups", methods=["GET"])
    def list_saved_lineups():
        return jsonify({"success": True, "lineups": [l.to_dict() for l in planner.saved_lineups]})

    @app.route("/api/lineups", methods=["POST"])
    def save_lineup():
        data = _json_body()
        lineup = planner.save_lineup(data.get("name", ""))
        return jsonify({"success": True, "lineup": lineup.to_dict()}), 201

    @app.route("/api/lineups/<name>/load", methods=["POST"])
    def load_lineup(name: str):
        if not planner.load_lineup(name):
            return jsonify({"success": False, "error": f"Lineup {name!r} not found"}), 404
        return jsonify(_planner_payload())

    @app.route("/api/lineups/<name>", methods=["DELETE"])
    def delete_lineup(name: str):
        planner.delete_lineup(name)
        return jsonify({"success": True})

    return app


def run_web_app(app: Flask, host: str = "127.0.0.1", port: int = 7122) -> None:
    """
    Run the web application.

    Args:
        app: Application built by :func:`create_app`
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
    """
    logger.info("Serving %s on http://%s:%d", APP_TITLE, host, port)
    app.run(host=host, port=port, debug=False)
