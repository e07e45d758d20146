"""Tests for tip resolution, tip points and the full scoreboard."""

import logging

import pytest
from conftest import SHOWS, make_mask, make_player, make_season, make_tip

from tipper.exceptions import InvalidSnapshotError, UnknownPlayerError
from tipper.models import Season, TipSequence
from tipper.utils.scoring import (
    TipMatch,
    calculate_scores,
    calculate_tip_points,
    first_correct_matches,
    resolve_tips,
)

PLAYERS = (make_player("a"), make_player("b"), make_player("c"))


def _by_id(scores):
    return {s.player_id: s for s in scores}


def _single_mask_scores(tips, revealed="Jane Doe", shows=SHOWS, player_ids=("a", "b", "c")):
    season = make_season(player_ids, masks=[make_mask("m1", tips, revealed)], shows=shows)
    return _by_id(calculate_scores(season, PLAYERS))


# --- resolve_tips ---


def test_resolve_tips_orders_by_episode_then_creation_time():
    mask = make_mask(
        "m1",
        {
            "a": [make_tip("Jane Doe", "s2", 50)],
            "b": [make_tip("jane doe", "s1", 900)],
            "c": [make_tip("Jane Doe ", "s1", 400)],
        },
        revealed="Jane Doe",
    )
    season = make_season(("a", "b", "c"), masks=[mask], shows=SHOWS)

    matches = resolve_tips(mask, season, PLAYERS)

    assert [m.player_id for m in matches] == ["c", "b", "a"]
    assert matches[0].show.episode_number == 1


def test_resolve_tips_ignores_tips_from_deleted_shows():
    mask = make_mask(
        "m1",
        {"a": [make_tip("Jane Doe", "gone", 10)], "b": [make_tip("Jane Doe", "s2", 20)]},
        revealed="Jane Doe",
    )
    season = make_season(("a", "b"), masks=[mask], shows=SHOWS)

    matches = resolve_tips(mask, season, PLAYERS[:2])

    assert [m.player_id for m in matches] == ["b"]


def test_resolve_tips_ignores_non_participants():
    mask = make_mask("m1", {"z": [make_tip("Jane Doe", "s1", 1)]}, revealed="Jane Doe")
    season = make_season(("a",), masks=[mask], shows=SHOWS)

    assert resolve_tips(mask, season, PLAYERS[:1]) == []


def test_first_correct_matches_keeps_earliest_per_player():
    mask = make_mask(
        "m1",
        {
            "a": [make_tip("Jane Doe", "s3", 10), make_tip("Jane Doe", "s1", 20)],
            "b": [make_tip("Jane Doe", "s2", 30)],
        },
        revealed="Jane Doe",
    )
    season = make_season(("a", "b"), masks=[mask], shows=SHOWS)

    first = first_correct_matches(resolve_tips(mask, season, PLAYERS))

    assert first["a"].show.id == "s1"
    assert first["b"].show.id == "s2"


# --- calculate_tip_points ---


def test_calculate_tip_points_pioneer_gets_full_award():
    tip = make_tip("Jane Doe", "s1", 100)
    match = TipMatch("a", tip, SHOWS[0])
    assert calculate_tip_points(match, match, TipSequence((tip,))) == 20


def test_calculate_tip_points_imitator_gets_forty_percent():
    pioneer = TipMatch("a", make_tip("Jane Doe", "s1", 100), SHOWS[0])
    tip = make_tip("Jane Doe", "s3", 500)
    match = TipMatch("b", tip, SHOWS[2])
    # round(14 * 0.4) = round(5.6)
    assert calculate_tip_points(match, pioneer, TipSequence((tip,))) == 6


def test_calculate_tip_points_same_timestamp_other_player_is_not_pioneer():
    pioneer = TipMatch("a", make_tip("Jane Doe", "s1", 100), SHOWS[0])
    tip = make_tip("Jane Doe", "s1", 100)
    match = TipMatch("b", tip, SHOWS[0])
    assert calculate_tip_points(match, pioneer, TipSequence((tip,))) == 8


def test_final_tip_in_third_position_gets_no_bonus():
    # Stored data may break the rules; the bonus only exists for tip 1 and 2
    tips = (
        make_tip("X", "s1", 1),
        make_tip("Y", "s1", 2),
        make_tip("Jane Doe", "s1", 3, final=True),
    )
    match = TipMatch("a", tips[2], SHOWS[0])
    assert calculate_tip_points(match, match, TipSequence(tips)) == 20


# --- calculate_scores: scenarios ---


def test_pioneer_and_imitator_scenario():
    scores = _single_mask_scores(
        {
            "a": [make_tip("Jane Doe", "s1", 100)],
            "b": [make_tip("Jane Doe", "s2", 200)],
        }
    )

    assert scores["a"].score == 20
    assert scores["a"].correct_masks == 1
    # Imitator base uses their own show: round(17 * 0.4) = 7
    assert scores["b"].score == 7
    assert scores["b"].correct_masks == 1
    assert scores["c"].score == 0
    assert scores["c"].correct_masks == 0


def test_final_first_tip_pioneer_gets_1_8x():
    scores = _single_mask_scores({"a": [make_tip("Jane Doe", "s1", 100, final=True)]})
    assert scores["a"].score == 36


def test_final_second_tip_pioneer_gets_1_5x():
    scores = _single_mask_scores(
        {"a": [make_tip("Wrong", "s1", 100), make_tip("Jane Doe", "s2", 200, final=True)]}
    )
    # round(17 * 1.5) = round(25.5)
    assert scores["a"].score == 26


def test_final_imitator_discount_applies_to_boosted_points():
    scores = _single_mask_scores(
        {
            "a": [make_tip("Jane Doe", "s1", 100)],
            "b": [make_tip("Jane Doe", "s2", 200, final=True)],
        }
    )
    # round(17 * 1.8 * 0.4) = round(12.24)
    assert scores["b"].score == 12


def test_player_is_scored_by_earliest_correct_tip_only():
    scores = _single_mask_scores(
        {"a": [make_tip("Jane Doe", "s1", 100), make_tip("jane doe", "s2", 200)]}
    )
    assert scores["a"].score == 20
    assert scores["a"].correct_masks == 1


def test_name_comparison_ignores_case_and_surrounding_whitespace():
    scores = _single_mask_scores(
        {"a": [make_tip("  jAnE dOe  ", "s1", 100)]}, revealed=" Jane Doe "
    )
    assert scores["a"].score == 20


def test_unrevealed_mask_scores_nothing():
    scores = _single_mask_scores({"a": [make_tip("Jane Doe", "s1", 100)]}, revealed=None)
    assert scores["a"].score == 0
    assert scores["a"].correct_masks == 0


@pytest.mark.parametrize("reveal", ["", "   "])
def test_blank_reveal_scores_nothing(reveal):
    scores = _single_mask_scores({"a": [make_tip("Jane Doe", "s1", 100)]}, revealed=reveal)
    assert scores["a"].correct_masks == 0


def test_pioneer_tip_from_deleted_show_passes_pioneer_to_next_player():
    scores = _single_mask_scores(
        {
            "a": [make_tip("Jane Doe", "s1", 100)],
            "b": [make_tip("Jane Doe", "s2", 200)],
        },
        shows=SHOWS[1:],
    )
    assert scores["a"].correct_masks == 0
    assert scores["b"].score == 17


def test_exactly_one_pioneer_per_mask():
    scores = _single_mask_scores(
        {
            "a": [make_tip("Jane Doe", "s1", 100)],
            "b": [make_tip("Jane Doe", "s1", 100)],
            "c": [make_tip("Jane Doe", "s1", 100)],
        }
    )
    # Exact ties keep roster order, so only "a" is the pioneer
    assert [scores[p].score for p in "abc"] == [20, 8, 8]


# --- calculate_scores: full season ---


def test_full_season_scoreboard(full_season):
    ranked = calculate_scores(full_season, PLAYERS)
    scores = _by_id(ranked)

    assert (scores["a"].score, scores["a"].counter_bet_points, scores["a"].total_score) == (20, -3, 17)
    assert (scores["b"].score, scores["b"].counter_bet_points, scores["b"].total_score) == (36, -2, 34)
    assert (scores["c"].score, scores["c"].counter_bet_points, scores["c"].total_score) == (7, 2, 9)
    assert [s.correct_masks for s in ranked] == [1, 1, 1]
    assert scores["c"].won_counter_bets == 1
    assert [s.player_id for s in ranked] == ["c", "b", "a"]


def test_scoreboard_carries_player_display_data(full_season):
    roster = (make_player("a", "Anna", "#111111"), make_player("b"), make_player("c"))
    row = _by_id(calculate_scores(full_season, roster))["a"]
    assert row.name == "Anna"
    assert row.color == "#111111"


def test_calculate_scores_is_idempotent(full_season):
    first = calculate_scores(full_season, PLAYERS)
    second = calculate_scores(full_season, PLAYERS)
    assert first == second
    assert first is not second
    assert all(a is not b for a, b in zip(first, second))


def test_calculate_scores_does_not_modify_snapshot(full_season):
    before = full_season.to_dict()
    calculate_scores(full_season, PLAYERS)
    assert full_season.to_dict() == before


def test_only_season_players_are_listed():
    roster = PLAYERS + (make_player("d"),)
    season = make_season(("b", "d"), shows=SHOWS)
    assert [s.player_id for s in calculate_scores(season, roster)] == ["b", "d"]


def test_empty_season_returns_empty_scoreboard():
    assert calculate_scores(make_season(()), PLAYERS) == []


def test_unknown_season_player_fails_loudly():
    season = make_season(("a", "ghost"), shows=SHOWS)
    with pytest.raises(UnknownPlayerError) as excinfo:
        calculate_scores(season, PLAYERS)
    assert excinfo.value.player_id == "ghost"


def test_non_season_input_fails_loudly():
    with pytest.raises(InvalidSnapshotError):
        calculate_scores({"id": "s"}, PLAYERS)


def test_non_sequence_season_field_fails_loudly():
    broken = Season(id="s", name="Broken", player_ids=("a",), masks=None)
    with pytest.raises(InvalidSnapshotError):
        calculate_scores(broken, PLAYERS)


def test_duplicate_roster_ids_fail_loudly():
    roster = PLAYERS + (make_player("a", "Other A"),)
    with pytest.raises(InvalidSnapshotError, match="more than once"):
        calculate_scores(make_season(("a", "b")), roster)


def test_mask_results_are_logged_at_debug(full_season, caplog):
    with caplog.at_level(logging.DEBUG, logger="tipper.utils.scoring"):
        calculate_scores(full_season, PLAYERS)

    messages = [record.getMessage() for record in caplog.records]
    assert "Mask m1: pioneer a in show 1, 2 correct players [season=season-1]" in messages
    assert "Mask m2: pioneer b in show 1, 1 correct players [season=season-1]" in messages
