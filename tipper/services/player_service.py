"""
Global player roster for Mask Tipper

Players live outside any season; a season only lists the ids of the players
taking part. Operations take the roster tuple (and the seasons, where a
change cascades into them) and return new tuples.
"""

import logging
from dataclasses import replace

from tipper.exceptions import SeasonRuleError
from tipper.models import Player
from tipper.services.season_service import (
    clean_name,
    generate_id,
    remove_player_from_season,
)

logger = logging.getLogger(__name__)

# New players cycle through these by roster size
PLAYER_COLORS = (
    "#e6194b",
    "#3cb44b",
    "#ffe119",
    "#4363d8",
    "#f58231",
    "#911eb4",
    "#46f0f0",
    "#f032e6",
    "#bcf60c",
    "#fabebe",
)


def get_player(players, player_id):
    for player in players:
        if player.id == player_id:
            return player
    return None


def add_player(players, name, image_url=None):
    player = Player(
        id=generate_id(),
        name=clean_name(name, "Player"),
        color=PLAYER_COLORS[len(players) % len(PLAYER_COLORS)],
        image_url=image_url,
    )
    return tuple(players) + (player,)


def update_player(players, player_id, name, color, image_url=None):
    player = get_player(players, player_id)
    if player is None:
        raise SeasonRuleError(f"Player {player_id} not found")
    if not color:
        raise SeasonRuleError("Player color cannot be empty")

    updated = replace(
        player,
        name=clean_name(name, "Player"),
        color=color,
        image_url=image_url if image_url is not None else player.image_url,
    )
    return tuple(updated if p.id == player_id else p for p in players)


def delete_player(players, seasons, player_id):
    """
    Remove a player from the roster and from every season, along with their
    tips and every counter-bet by or against them.

    Returns:
        tuple: (players, seasons)
    """
    remaining = tuple(p for p in players if p.id != player_id)
    seasons = tuple(remove_player_from_season(season, player_id) for season in seasons)
    logger.info(f"Deleted player {player_id} from the roster and {len(seasons)} seasons")
    return remaining, seasons
