#!/usr/bin/env python3
"""
Mask Tipper Management CLI

Command-line helpers for working with exported season files.
"""

import json
import logging

import click

from tipper import create_app
from tipper.exceptions import InvalidSnapshotError, UnknownPlayerError
from tipper.utils import scoring
from tipper.utils.snapshot import find_season, load_app_state

app = create_app()


def _load_export(path):
    with open(path, encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"{path} is not valid JSON: {e}")
    try:
        return load_app_state(data)
    except InvalidSnapshotError as e:
        raise click.ClickException(f"Invalid export: {e}")


@click.group()
def cli():
    """Mask Tipper Management CLI"""
    pass


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--season", "season_id", help="Season id (default: every season)")
def scoreboard(snapshot, season_id):
    """Print the ranked scoreboard for an exported season file"""
    players, seasons = _load_export(snapshot)

    if season_id:
        season = find_season(seasons, season_id)
        if season is None:
            raise click.ClickException(f"Season {season_id} not found")
        seasons = (season,)

    if not seasons:
        click.echo("No seasons found.")
        return

    for season in seasons:
        try:
            ranked = scoring.calculate_scores(season, players)
        except UnknownPlayerError as e:
            logging.error(f"Scoreboard failed for season {season.id}: {e}")
            raise click.ClickException(str(e))

        click.echo(f"🎭 {season.name}")
        click.echo("=" * 40)
        if not ranked:
            click.echo("  No players in this season.")
        for position, row in enumerate(ranked, start=1):
            click.echo(
                f"  {position}. {row.name}: {row.correct_masks} masks, "
                f"{row.won_counter_bets} counter-bets won, {row.total_score} points "
                f"({row.score} tips {row.counter_bet_points:+d} bets)"
            )
        click.echo("")


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
def validate(snapshot):
    """Check that an export file can be loaded"""
    players, seasons = _load_export(snapshot)
    click.echo(f"✅ {len(players)} players, {len(seasons)} seasons")
    for season in seasons:
        click.echo(
            f"  {season.name}: {len(season.shows)} shows, {len(season.masks)} masks, "
            f"{len(season.counter_bets)} counter-bets"
        )


@cli.command()
def rules():
    """Show the point schedule"""
    click.echo("Points for a correct tip by show:")
    for episode in range(1, len(scoring.SHOW_DECAY) + 2):
        suffix = "+" if episode > len(scoring.SHOW_DECAY) else ""
        click.echo(f"  Show {episode}{suffix}: {scoring.points_for_show(episode)}")
    click.echo(
        f"Final tip bonus: x{scoring.FINAL_TIP_MULTIPLIERS[0]} (tip 1), "
        f"x{scoring.FINAL_TIP_MULTIPLIERS[1]} (tip 2)"
    )
    click.echo(f"Later correct tips earn {int(scoring.IMITATOR_SHARE * 100)}% of their points")


if __name__ == "__main__":
    cli()
