from flask import current_app, jsonify, request

from tipper.exceptions import InvalidSnapshotError, UnknownPlayerError
from tipper.models import MAX_TIPS_PER_MASK
from tipper.routes.api import bp
from tipper.utils import scoring
from tipper.utils.snapshot import find_season, load_app_state, load_season_request


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        raise InvalidSnapshotError("Request body must be JSON")
    return data


def _scoreboard_response(season, players):
    ranked = scoring.calculate_scores(season, players)
    return jsonify(
        {
            "seasonId": season.id,
            "seasonName": season.name,
            "scoreboard": [score.to_dict() for score in ranked],
        }
    )


@bp.errorhandler(InvalidSnapshotError)
def handle_invalid_snapshot(error):
    current_app.logger.warning(f"Rejected snapshot: {error} - Path: {request.path}")
    return jsonify({"error": str(error)}), 400


@bp.errorhandler(UnknownPlayerError)
def handle_unknown_player(error):
    current_app.logger.warning(f"Unknown player in snapshot: {error.player_id}")
    return jsonify({"error": str(error), "playerId": error.player_id}), 422


@bp.route("/health")
def health():
    return jsonify({"status": "ok"})


@bp.route("/rules")
def rules():
    """Point schedule and stakes used by the scoring engine"""
    episodes = range(1, len(scoring.SHOW_DECAY) + 2)
    return jsonify(
        {
            "showPoints": [
                {"episode": ep, "points": scoring.points_for_show(ep)} for ep in episodes
            ],
            "showPointsFloorFromEpisode": len(scoring.SHOW_DECAY) + 1,
            "maxTipsPerMask": MAX_TIPS_PER_MASK,
            "finalTipMultipliers": {
                str(position + 1): multiplier
                for position, multiplier in scoring.FINAL_TIP_MULTIPLIERS.items()
            },
            "imitatorShare": scoring.IMITATOR_SHARE,
            "counterBet": {
                "decayPerShow": scoring.COUNTER_BET_DECAY_PER_SHOW,
                "regular": dict(
                    zip(("win", "bettorLoss", "targetLoss"), scoring.COUNTER_BET_STAKES_REGULAR)
                ),
                "final": dict(
                    zip(("win", "bettorLoss", "targetLoss"), scoring.COUNTER_BET_STAKES_FINAL)
                ),
            },
            "ranking": ["correctMasks", "wonCounterBets", "totalScore"],
        }
    )


@bp.route("/scoreboard", methods=["POST"])
def scoreboard():
    """Scoreboard for a single season: {"season": {...}, "players": [...]}"""
    season, players = load_season_request(_json_body())
    return _scoreboard_response(season, players)


@bp.route("/seasons/<season_id>/scoreboard", methods=["POST"])
def season_scoreboard(season_id):
    """Scoreboard for one season of a full export: {"players": [...], "seasons": [...]}"""
    players, seasons = load_app_state(_json_body())
    season = find_season(seasons, season_id)
    if season is None:
        return jsonify({"error": f"Season {season_id} not found"}), 404
    return _scoreboard_response(season, players)
