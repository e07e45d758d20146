"""
Scoring Engine for Mask Tipper

Turns a season snapshot (tips, reveals and counter-bets) into a ranked
scoreboard. Everything here is a pure function of its inputs: nothing is
cached and the snapshot is never modified.

Tip points:
    Each show is worth fewer base points than the one before it (20, 17,
    14, 11, 8, then 5 from show 6 on). A player scores a mask with their
    earliest correct tip. A final tip is boosted (x1.8 as first tip, x1.5
    as second tip). The season-wide earliest correct tip (the pioneer)
    gets the full amount, every later correct player gets 40% of theirs.

Counter-bet points:
    A counter-bet wagers that a specific tip is wrong. Stakes are higher
    against final tips and lose 20% per show between the tip and the bet.

Ranking:
    correct masks, then won counter-bets, then total points; remaining
    ties keep roster order.
"""

import math
from dataclasses import dataclass
from typing import Dict

from tipper.exceptions import InvalidSnapshotError, UnknownPlayerError
from tipper.models import Player, PlayerScore, Season, Show, Tip
from tipper.utils.logging_config import ContextualLogger

BASE_POINTS_PER_MASK = 20

# Share of the base points per show, indexed by episode number - 1.
# Anything past the last entry uses SHOW_DECAY_FLOOR.
SHOW_DECAY = (1.0, 0.85, 0.70, 0.55, 0.40)
SHOW_DECAY_FLOOR = 0.25

# Final tip multipliers by position in the player's tip sequence
FINAL_TIP_MULTIPLIERS = {0: 1.8, 1: 1.5}

IMITATOR_SHARE = 0.4

COUNTER_BET_DECAY_PER_SHOW = 0.2

# (win, bettor loss, target loss)
COUNTER_BET_STAKES_FINAL = (5, -3, -3)
COUNTER_BET_STAKES_REGULAR = (3, -2, -2)


def round_points(value):
    """Round half away from zero (2.5 -> 3, -2.5 -> -3)"""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def points_for_show(episode_number):
    """
    Base points for a correct tip made during the given episode.

    Returns:
        20, 17, 14, 11, 8 for episodes 1-5 and 5 for every later episode
    """
    if episode_number <= 1:
        return round_points(BASE_POINTS_PER_MASK * SHOW_DECAY[0])
    for episode, factor in enumerate(SHOW_DECAY, start=1):
        if episode_number == episode:
            return round_points(BASE_POINTS_PER_MASK * factor)
    # Later episodes, and anything that is not a whole episode number
    return round_points(BASE_POINTS_PER_MASK * SHOW_DECAY_FLOOR)


@dataclass(frozen=True)
class TipMatch:
    """A correct tip together with the player who made it and its show"""

    player_id: str
    tip: Tip
    show: Show

    def is_same_tip(self, other):
        return (
            other is not None
            and self.player_id == other.player_id
            and self.tip.created_at == other.tip.created_at
        )


@dataclass(frozen=True)
class CounterBetOutcome:
    bettor_points: int
    target_points: int
    won: bool


def resolve_tips(mask, season, participants):
    """
    Find every correct tip for a revealed mask.

    Tips whose show was deleted are ignored. The result is ordered by
    (episode number, creation time); the first entry is the pioneer.
    Exact ties keep participant order, then submission order.

    Args:
        mask: Mask with a usable reveal
        season: Season the mask belongs to (used for show lookups)
        participants: Players taking part, in roster order

    Returns:
        List[TipMatch], possibly empty
    """
    actual = mask.actual_celebrity
    if not actual:
        return []

    matches = []
    for player in participants:
        for tip in mask.tips.get(player.id):
            if not tip.matches(actual):
                continue
            show = season.get_show(tip.show_id)
            if show is None:
                continue
            matches.append(TipMatch(player.id, tip, show))

    matches.sort(key=lambda m: (m.show.episode_number, m.tip.created_at))
    return matches


def first_correct_matches(matches):
    """Each player's earliest match from an already ordered match list"""
    first: Dict[str, TipMatch] = {}
    for match in matches:
        first.setdefault(match.player_id, match)
    return first


def final_tip_multiplier(tip, sequence):
    if not tip.is_final:
        return 1.0
    position = sequence.position_of(tip.created_at)
    return FINAL_TIP_MULTIPLIERS.get(position, 1.0)


def calculate_tip_points(match, pioneer, sequence):
    """
    Points for a player's first correct tip on a mask.

    Args:
        match: The player's first correct TipMatch
        pioneer: The season-wide earliest TipMatch for the mask
        sequence: The player's full TipSequence for the mask

    Returns:
        int: awarded points
    """
    base = points_for_show(match.show.episode_number)
    boosted = base * final_tip_multiplier(match.tip, sequence)

    if match.is_same_tip(pioneer):
        return round_points(boosted)
    return round_points(boosted * IMITATOR_SHARE)


def counter_bet_decay(bet_show, tip_show):
    show_difference = max(0, bet_show.episode_number - tip_show.episode_number)
    return max(0.0, 1.0 - COUNTER_BET_DECAY_PER_SHOW * show_difference)


def resolve_counter_bet(bet, mask, season):
    """
    Evaluate one counter-bet against the tip it targeted.

    Returns:
        CounterBetOutcome, or None when the bet is inert (unscorable mask,
        missing target tip, or a deleted show)
    """
    actual = mask.actual_celebrity
    if not actual:
        return None

    target_tip = mask.tips.get(bet.target_player_id).at(bet.target_tip_index)
    bet_show = season.get_show(bet.show_id)
    if target_tip is None or bet_show is None:
        return None

    tip_show = season.get_show(target_tip.show_id)
    if tip_show is None:
        return None

    decay = counter_bet_decay(bet_show, tip_show)
    stakes = COUNTER_BET_STAKES_FINAL if target_tip.is_final else COUNTER_BET_STAKES_REGULAR
    win_points, bettor_loss, target_loss = (round_points(s * decay) for s in stakes)

    if target_tip.matches(actual):
        # The targeted tip was right, so the bet was wrong
        return CounterBetOutcome(bettor_points=bettor_loss, target_points=0, won=False)

    return CounterBetOutcome(
        bettor_points=win_points,
        target_points=target_loss,
        won=win_points > 0,
    )


def season_participants(season, players):
    """
    Roster players taking part in the season, in roster order.

    Raises:
        UnknownPlayerError: if the season lists a player missing from the roster
    """
    roster_ids = {player.id for player in players}
    for player_id in season.player_ids:
        if player_id not in roster_ids:
            raise UnknownPlayerError(player_id)

    season_ids = set(season.player_ids)
    return [player for player in players if player.id in season_ids]


def rank_scores(scores):
    """Stable sort by correct masks, won counter-bets, then total score"""
    return sorted(scores, key=lambda s: s.rank_key)


def _check_snapshot(season, players):
    if not isinstance(season, Season):
        raise InvalidSnapshotError(f"Expected a Season, got {type(season).__name__}")
    for field_name in ("player_ids", "masks", "shows", "counter_bets"):
        if not isinstance(getattr(season, field_name), (tuple, list)):
            raise InvalidSnapshotError(f"season.{field_name} must be a sequence")
    if not isinstance(players, (tuple, list)):
        raise InvalidSnapshotError("players must be a sequence")
    seen = set()
    for player in players:
        if not isinstance(player, Player):
            raise InvalidSnapshotError(f"Expected a Player, got {type(player).__name__}")
        if player.id in seen:
            raise InvalidSnapshotError(f"Player id {player.id!r} appears more than once")
        seen.add(player.id)


def _score_mask(mask, season, participants, scores, log):
    matches = resolve_tips(mask, season, participants)
    if not matches:
        log.debug(f"Mask {mask.id}: no correct tips")
        return

    pioneer = matches[0]
    first = first_correct_matches(matches)
    for player_id, match in first.items():
        points = calculate_tip_points(match, pioneer, mask.tips.get(player_id))
        scores[player_id].correct_masks += 1
        scores[player_id].score += points

    log.debug(
        f"Mask {mask.id}: pioneer {pioneer.player_id} in show {pioneer.show.episode_number}, "
        f"{len(first)} correct players"
    )


def _score_counter_bets(mask, season, scores, log):
    for bet in season.counter_bets_for(mask.id):
        bettor = scores.get(bet.bettor_player_id)
        target = scores.get(bet.target_player_id)
        if bettor is None or target is None:
            log.debug(f"Counter-bet {bet.id} skipped: player no longer in season")
            continue

        outcome = resolve_counter_bet(bet, mask, season)
        if outcome is None:
            log.debug(f"Counter-bet {bet.id} is inert: target tip or show missing")
            continue

        bettor.counter_bet_points += outcome.bettor_points
        if outcome.won:
            bettor.won_counter_bets += 1
        if outcome.target_points:
            target.counter_bet_points += outcome.target_points


def calculate_scores(season, players):
    """
    Build the ranked scoreboard for a season.

    Args:
        season: Season snapshot
        players: Global player roster (sequence of Player)

    Returns:
        List[PlayerScore] ordered by rank

    Raises:
        InvalidSnapshotError: if season or players are not the expected types
        UnknownPlayerError: if the season lists a player missing from the roster
    """
    _check_snapshot(season, players)
    log = ContextualLogger(__name__, {"season": season.id})

    participants = season_participants(season, players)
    scores: Dict[str, PlayerScore] = {
        player.id: PlayerScore(player_id=player.id, name=player.name, color=player.color)
        for player in participants
    }

    revealed = season.revealed_masks()
    for mask in revealed:
        _score_mask(mask, season, participants, scores, log)
        _score_counter_bets(mask, season, scores, log)

    for score in scores.values():
        score.total_score = score.score + score.counter_bet_points

    ranked = rank_scores(scores.values())
    log.info(
        f"Scoreboard computed for {len(ranked)} players over {len(revealed)} revealed masks"
    )
    return ranked
