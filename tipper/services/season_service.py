"""
Season editing rules for Mask Tipper

Every operation takes a Season and returns a new Season; snapshots handed
to the scoring engine are never changed in place. Rule violations raise
SeasonRuleError with a message meant for the player.
"""

import logging
import time
import uuid
from dataclasses import replace

from tipper.exceptions import SeasonRuleError
from tipper.models import CounterBet, Mask, Season, Show, Tip

logger = logging.getLogger(__name__)


def generate_id():
    """Opaque identifier for new players, seasons, masks, shows and counter-bets"""
    return uuid.uuid4().hex[:12]


def _now_ms():
    return int(time.time() * 1000)


def clean_name(name, what):
    name = (name or "").strip()
    if not name:
        raise SeasonRuleError(f"{what} name cannot be empty")
    return name


def _require_mask(season, mask_id):
    mask = season.get_mask(mask_id)
    if mask is None:
        raise SeasonRuleError(f"Mask {mask_id} not found")
    return mask


def _replace_mask(season, mask):
    return replace(
        season, masks=tuple(mask if m.id == mask.id else m for m in season.masks)
    )


def _require_active_show(season, action):
    if season.active_show is None:
        raise SeasonRuleError(f"Please start or select a show before {action}")
    return season.active_show


# Seasons


def create_season(name, image_url=None):
    return Season(id=generate_id(), name=clean_name(name, "Season"), image_url=image_url)


def rename_season(season, name, image_url=None):
    return replace(
        season,
        name=clean_name(name, "Season"),
        image_url=image_url if image_url is not None else season.image_url,
    )


def delete_season(seasons, season_id):
    return tuple(season for season in seasons if season.id != season_id)


# Players


def add_player_to_season(season, player_id):
    if player_id in season.player_ids:
        return season
    return replace(season, player_ids=season.player_ids + (player_id,))


def remove_player_from_season(season, player_id):
    """Remove a player together with their tips and every bet by or against them"""
    masks = tuple(replace(m, tips=m.tips.without_player(player_id)) for m in season.masks)
    counter_bets = tuple(
        bet
        for bet in season.counter_bets
        if player_id not in (bet.bettor_player_id, bet.target_player_id)
    )
    logger.info(f"Removed player {player_id} from season {season.id}")
    return replace(
        season,
        player_ids=tuple(pid for pid in season.player_ids if pid != player_id),
        masks=masks,
        counter_bets=counter_bets,
    )


# Masks


def add_mask(season, name, image_url=None):
    mask = Mask(id=generate_id(), name=clean_name(name, "Mask"), image_url=image_url)
    return replace(season, masks=season.masks + (mask,))


def rename_mask(season, mask_id, name, image_url=None):
    mask = _require_mask(season, mask_id)
    return _replace_mask(
        season,
        replace(
            mask,
            name=clean_name(name, "Mask"),
            image_url=image_url if image_url is not None else mask.image_url,
        ),
    )


def delete_mask(season, mask_id):
    return replace(
        season,
        masks=tuple(m for m in season.masks if m.id != mask_id),
        counter_bets=tuple(bet for bet in season.counter_bets if bet.mask_id != mask_id),
    )


def reveal_mask(season, mask_id, celebrity_name, image_url=None):
    mask = _require_mask(season, mask_id)
    revealed = replace(
        mask,
        is_revealed=True,
        revealed_celebrity=clean_name(celebrity_name, "Celebrity"),
        image_url=image_url if image_url is not None else mask.image_url,
    )
    logger.info(f"Mask {mask.name} revealed in season {season.id}")
    return _replace_mask(season, revealed)


# Shows


def add_show(season):
    """Append the next episode and make it the active show"""
    episode_number = max((s.episode_number for s in season.shows), default=0) + 1
    show = Show(id=generate_id(), name=f"Show {episode_number}", episode_number=episode_number)
    return replace(season, shows=season.shows + (show,), active_show_id=show.id)


def delete_show(season, show_id):
    """
    Delete a show along with the tips made and counter-bets placed during it.

    If the deleted show was active, the last remaining show becomes active.
    """
    shows = tuple(s for s in season.shows if s.id != show_id)
    masks = tuple(replace(m, tips=m.tips.without_show(show_id)) for m in season.masks)
    counter_bets = tuple(bet for bet in season.counter_bets if bet.show_id != show_id)

    active_show_id = season.active_show_id
    if active_show_id == show_id:
        active_show_id = shows[-1].id if shows else None

    return replace(
        season,
        shows=shows,
        masks=masks,
        counter_bets=counter_bets,
        active_show_id=active_show_id,
    )


def set_active_show(season, show_id):
    if season.get_show(show_id) is None:
        raise SeasonRuleError(f"Show {show_id} not found")
    return replace(season, active_show_id=show_id)


# Tips


def add_tip(season, mask_id, player_id, celebrity_name, is_final=False, created_at=None):
    """
    Record a tip during the active show.

    A final flag is only honoured on a player's first or second tip; on a
    third tip it is dropped.
    """
    show = _require_active_show(season, "adding a tip")
    mask = _require_mask(season, mask_id)
    if mask.is_revealed:
        raise SeasonRuleError("This mask has already been revealed")
    if player_id not in season.player_ids:
        raise SeasonRuleError(f"Player {player_id} is not part of this season")

    sequence = mask.tips.get(player_id)
    tip = Tip(
        celebrity_name=clean_name(celebrity_name, "Celebrity"),
        show_id=show.id,
        created_at=created_at if created_at is not None else _now_ms(),
        is_final=bool(is_final) and sequence.can_mark_final,
    )
    tips = mask.tips.with_sequence(player_id, sequence.append(tip))
    return _replace_mask(season, replace(mask, tips=tips))


def delete_last_tip(season, mask_id, player_id):
    mask = _require_mask(season, mask_id)
    sequence = mask.tips.get(player_id)
    if not sequence:
        return season
    tips = mask.tips.with_sequence(player_id, sequence.remove_last())
    return _replace_mask(season, replace(mask, tips=tips))


# Counter-bets


def add_counter_bet(season, mask_id, bettor_player_id, target_player_id):
    """Bet against the target's most recent tip for the mask"""
    show = _require_active_show(season, "placing a counter-bet")
    if bettor_player_id == target_player_id:
        raise SeasonRuleError("A player cannot bet against themselves")

    already_bet = any(
        bet.mask_id == mask_id
        and bet.bettor_player_id == bettor_player_id
        and bet.target_player_id == target_player_id
        for bet in season.counter_bets
    )
    if already_bet:
        raise SeasonRuleError(
            "A counter-bet against this player for this mask already exists"
        )

    target_tips = _require_mask(season, mask_id).tips.get(target_player_id)
    if not target_tips:
        raise SeasonRuleError("This player has no tips to bet against for this mask")

    bet = CounterBet(
        id=generate_id(),
        show_id=show.id,
        mask_id=mask_id,
        bettor_player_id=bettor_player_id,
        target_player_id=target_player_id,
        target_tip_index=len(target_tips) - 1,
    )
    return replace(season, counter_bets=season.counter_bets + (bet,))


def delete_counter_bet(season, bet_id):
    return replace(
        season, counter_bets=tuple(bet for bet in season.counter_bets if bet.id != bet_id)
    )
