import os

os.environ.setdefault("FLASK_CONFIG", "testing")

import pytest  # noqa: E402

from tipper import create_app  # noqa: E402
from tipper.models import (  # noqa: E402
    CounterBet,
    Mask,
    Player,
    Season,
    Show,
    Tip,
    TipBook,
    TipSequence,
)


@pytest.fixture
def app():
    return create_app("testing")


@pytest.fixture
def client(app):
    return app.test_client()


def make_player(player_id, name=None, color="#ff0000"):
    return Player(id=player_id, name=name or player_id.upper(), color=color)


def make_show(show_id, episode_number):
    return Show(id=show_id, name=f"Show {episode_number}", episode_number=episode_number)


def make_tip(name, show_id, created_at, final=False):
    return Tip(celebrity_name=name, show_id=show_id, created_at=created_at, is_final=final)


def make_mask(mask_id, tips=None, revealed=None):
    """tips: {player_id: [Tip, ...]}; revealed: celebrity name or None"""
    book = TipBook({pid: TipSequence(tuple(seq)) for pid, seq in (tips or {}).items()})
    return Mask(
        id=mask_id,
        name=f"Mask {mask_id}",
        tips=book,
        is_revealed=revealed is not None,
        revealed_celebrity=revealed,
    )


def make_bet(bet_id, show_id, mask_id, bettor, target, index=0):
    return CounterBet(
        id=bet_id,
        show_id=show_id,
        mask_id=mask_id,
        bettor_player_id=bettor,
        target_player_id=target,
        target_tip_index=index,
    )


def make_season(player_ids, masks=(), shows=(), counter_bets=(), active_show_id=None):
    return Season(
        id="season-1",
        name="Season 1",
        player_ids=tuple(player_ids),
        masks=tuple(masks),
        shows=tuple(shows),
        active_show_id=active_show_id,
        counter_bets=tuple(counter_bets),
    )


SHOWS = (make_show("s1", 1), make_show("s2", 2), make_show("s3", 3))


@pytest.fixture
def shows():
    return SHOWS


@pytest.fixture
def roster():
    return (make_player("a"), make_player("b"), make_player("c"))


@pytest.fixture
def full_season():
    """
    Three players over two shows and three masks.

    a: pioneer on m1 (20), loses a counter-bet against b's final tip (-3)
    b: final first-tip pioneer on m2 (36), loses a counter-bet as target (-2)
    c: imitator on m1 in show 2 (7), wins a decayed counter-bet (+2)
    m3 is not revealed and must not count.
    """
    m1 = make_mask(
        "m1",
        {
            "a": [make_tip("Jane Doe", "s1", 100)],
            "b": [make_tip("John Roe", "s1", 110)],
            "c": [make_tip("  JANE doe", "s2", 300)],
        },
        revealed="Jane Doe",
    )
    m2 = make_mask(
        "m2",
        {
            "b": [make_tip("Max Muster", "s1", 120, final=True)],
            "a": [make_tip("Erika Muster", "s1", 130)],
        },
        revealed="Max Muster",
    )
    m3 = make_mask("m3", {"a": [make_tip("Jane Doe", "s1", 140)]})
    bets = (
        make_bet("cb1", "s2", "m1", "c", "b", 0),
        make_bet("cb2", "s1", "m2", "a", "b", 0),
        make_bet("cb3", "s2", "m3", "b", "a", 0),
    )
    return make_season(
        ("c", "a", "b"),
        masks=(m1, m2, m3),
        shows=SHOWS[:2],
        counter_bets=bets,
        active_show_id="s2",
    )
