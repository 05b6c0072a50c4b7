"""
Web application module for the Sideline match clock.

This module contains the Flask server exposing the match operations as JSON
endpoints for coach, referee and scoreboard clients.
"""
import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from ..models import Match, MatchPlayer, MatchEvent
from ..services import (
    ServiceFactory, MatchError, MatchNotFoundError, PlayerNotInMatchError,
    AuthorizationError, InvalidTransitionError, MatchValidationError, StoreError
)
from ..utils import AppConfig, APP_TITLE

log = logging.getLogger(__name__)

PIN_HEADER = "X-Match-Pin"

ERROR_STATUS = (
    (MatchNotFoundError, 404),
    (PlayerNotInMatchError, 404),
    (AuthorizationError, 403),
    (InvalidTransitionError, 409),
    (MatchValidationError, 400),
    (StoreError, 503),
)


def _match_json(match: Match) -> Dict[str, Any]:
    """Match fields safe to send to clients (never the PIN)."""
    data = match.to_json()
    data.pop("coach_pin", None)
    return data


def _player_json(row: MatchPlayer) -> Dict[str, Any]:
    return row.to_json()


def _event_json(event: MatchEvent) -> Dict[str, Any]:
    return event.to_json()


def create_app(services: Optional[dict] = None, config: Optional[AppConfig] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        services: Service suite from ServiceFactory.create_complete_service_suite
        config: Configuration used when no suite is supplied

    Returns:
        Configured Flask application instance
    """
    if services is None:
        services = ServiceFactory(config).create_complete_service_suite()

    lifecycle = services['lifecycle']
    actions = services['actions']
    lineup = services['lineup']
    queries = services['queries']

    app = Flask(__name__)
    app.config["SIDELINE_SERVICES"] = services

    def _body() -> Dict[str, Any]:
        return request.get_json(silent=True) or {}

    def _pin() -> str:
        return str(_body().get("pin") or request.headers.get(PIN_HEADER, ""))

    def _ok(**payload) -> Any:
        return jsonify({"success": True, **payload})

    @app.errorhandler(MatchError)
    def handle_match_error(exc: MatchError):
        status = next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 400)
        if status >= 500:
            log.error("Match operation failed: %s", exc)
        payload = {"success": False, "error": str(exc)}
        if isinstance(exc, InvalidTransitionError) and exc.status is not None:
            payload["status"] = exc.status.value
        return jsonify(payload), status

    @app.route("/api/health", methods=["GET"])
    def health():
        return _ok(app=APP_TITLE)

    # ==================== Lifecycle ==================== #

    @app.route("/api/matches", methods=["POST"])
    def create_match():
        data = _body()
        try:
            quarter_count = int(data.get("quarter_count", 4))
        except (TypeError, ValueError):
            raise MatchValidationError("quarter_count must be an integer")
        match = lifecycle.create_match(
            team_id=data.get("team_id", ""),
            opponent=data.get("opponent", ""),
            is_home=bool(data.get("is_home", True)),
            coach_pin=_pin(),
            player_ids=data.get("player_ids") or [],
            quarter_count=quarter_count,
            scheduled_at=data.get("scheduled_at"),
        )
        return _ok(match=_match_json(match)), 201

    @app.route("/api/matches/<match_id>/lineup", methods=["POST"])
    def open_lineup(match_id: str):
        return _ok(match=_match_json(lifecycle.open_lineup(match_id, _pin())))

    @app.route("/api/matches/<match_id>/start", methods=["POST"])
    def start_match(match_id: str):
        return _ok(match=_match_json(lifecycle.start(match_id, _pin())))

    @app.route("/api/matches/<match_id>/pause", methods=["POST"])
    def pause_clock(match_id: str):
        return _ok(match=_match_json(lifecycle.pause(match_id, _pin())))

    @app.route("/api/matches/<match_id>/resume", methods=["POST"])
    def resume_clock(match_id: str):
        return _ok(match=_match_json(lifecycle.resume(match_id, _pin())))

    @app.route("/api/matches/<match_id>/next-quarter", methods=["POST"])
    def next_quarter(match_id: str):
        return _ok(match=_match_json(lifecycle.next_quarter(match_id, _pin())))

    @app.route("/api/matches/<match_id>/resume-halftime", methods=["POST"])
    def resume_from_halftime(match_id: str):
        return _ok(match=_match_json(lifecycle.resume_from_halftime(match_id, _pin())))

    # ==================== Substitutions & goals ==================== #

    @app.route("/api/matches/<match_id>/substitute", methods=["POST"])
    def substitute(match_id: str):
        data = _body()
        match = actions.substitute(
            match_id, _pin(), data.get("player_out_id", ""), data.get("player_in_id", "")
        )
        return _ok(match=_match_json(match))

    @app.route("/api/matches/<match_id>/goals", methods=["POST"])
    def add_goal(match_id: str):
        data = _body()
        goal = actions.add_goal(
            match_id,
            _pin(),
            player_id=data.get("player_id"),
            assist_player_id=data.get("assist_player_id"),
            is_own_goal=bool(data.get("is_own_goal", False)),
            is_opponent_goal=bool(data.get("is_opponent_goal", False)),
        )
        return _ok(goal=_event_json(goal)), 201

    @app.route("/api/matches/<match_id>/goals/last", methods=["DELETE"])
    def undo_last_goal(match_id: str):
        removed = actions.undo_last_goal(match_id, _pin())
        return _ok(removed_goal=_event_json(removed))

    @app.route("/api/matches/<match_id>/score", methods=["POST"])
    def adjust_score(match_id: str):
        data = _body()
        match = actions.adjust_score(
            match_id,
            _pin(),
            team=data.get("team", ""),
            delta=data.get("delta"),
            scorer_number=data.get("scorer_number"),
        )
        return _ok(match=_match_json(match))

    # ==================== Lineup & roles ==================== #

    @app.route("/api/matches/<match_id>/players", methods=["POST"])
    def add_player(match_id: str):
        row = lineup.add_player_to_match(match_id, _pin(), _body().get("player_id", ""))
        return _ok(player=_player_json(row)), 201

    @app.route("/api/matches/<match_id>/players/<player_id>/on-field", methods=["POST"])
    def toggle_on_field(match_id: str, player_id: str):
        return _ok(player=_player_json(lineup.toggle_on_field(match_id, _pin(), player_id)))

    @app.route("/api/matches/<match_id>/players/<player_id>/keeper", methods=["POST"])
    def toggle_keeper(match_id: str, player_id: str):
        return _ok(player=_player_json(lineup.toggle_keeper(match_id, _pin(), player_id)))

    @app.route("/api/matches/<match_id>/players/<player_id>/absent", methods=["POST"])
    def toggle_absent(match_id: str, player_id: str):
        return _ok(player=_player_json(lineup.toggle_absent(match_id, _pin(), player_id)))

    @app.route("/api/matches/<match_id>/lead", methods=["POST"])
    def claim_lead(match_id: str):
        coach = lineup.claim_match_lead(match_id, _pin())
        return _ok(coach_name=coach.name)

    @app.route("/api/matches/<match_id>/lead", methods=["DELETE"])
    def release_lead(match_id: str):
        lineup.release_match_lead(match_id, _pin())
        return _ok()

    @app.route("/api/matches/<match_id>/referee", methods=["POST"])
    def assign_referee(match_id: str):
        match = lineup.assign_referee(match_id, _pin(), _body().get("referee_id"))
        return _ok(match=_match_json(match))

    # ==================== Queries ==================== #

    @app.route("/api/matches/<match_id>/playing-time", methods=["GET"])
    def get_playing_time(match_id: str):
        report = queries.get_playing_time(match_id, _pin())
        return _ok(**report.to_json())

    @app.route("/api/matches/<match_id>/suggestions", methods=["GET"])
    def get_suggestions(match_id: str):
        report = queries.get_suggested_substitutions(match_id, _pin())
        return _ok(**report.to_json())

    @app.route("/api/matches/<match_id>/clock", methods=["GET"])
    def get_clock(match_id: str):
        return _ok(clock=queries.get_match_clock(match_id))

    @app.route("/api/live/<code>", methods=["GET"])
    def get_clock_by_code(code: str):
        return _ok(clock=queries.get_match_clock_by_code(code))

    @app.route("/api/matches/<match_id>/events", methods=["GET"])
    def get_timeline(match_id: str):
        events = queries.get_timeline(match_id)
        return _ok(events=[_event_json(ev) for ev in events])

    return app


def run_web_app(config: Optional[AppConfig] = None) -> None:
    """
    Run the Flask web application.

    Args:
        config: Host, port, storage and log level settings
    """
    config = config or AppConfig.from_env()
    app = create_app(config=config)
    log.info("Starting %s on http://%s:%d", APP_TITLE, config.host, config.port)
    app.run(host=config.host, port=config.port, debug=False)
