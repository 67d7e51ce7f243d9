"""Command-line interface for btmm."""

import random
from pathlib import Path

import click

from btmm.models import TournamentPhase, TournamentState


# ============================================================================
# Helpers
# ============================================================================


def _open_repo(ctx):
    """Open the state repository for the database chosen on the command line."""
    from btmm.paths import get_default_db_path
    from btmm.storage import DatabaseManager, StateRepository

    db_path = ctx.obj.get("db") or ctx.obj["config"].get("db_path") or get_default_db_path()
    db = DatabaseManager(db_path)
    db.create_tables()
    return StateRepository(db.get_session())


def _load_config(ctx):
    from btmm.config_loader import ConfigError, load_and_validate_config

    try:
        return load_and_validate_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.echo(f"[ERROR] Configuration Error: {e}", err=True)
        raise click.Abort()


def _confirm(assume_yes: bool):
    """Yes/no collaborator for destructive operations."""
    if assume_yes:
        return lambda message: True
    return lambda message: click.confirm(message, default=False)


def _echo_champion(lang: str):
    from btmm.i18n import get_string

    def notify(pair):
        click.echo(f"\n[DONE] {get_string('cli.champion', lang, name=pair.name)}")

    return notify


def render_groups(state: TournamentState):
    """Print group rosters."""
    for group_id in state.groups:
        click.echo(f"\n  Group {group_id}:")
        for pair in state.pairs_in_group(group_id):
            click.echo(f"    #{pair.id} {pair.name}")


def render_match(state: TournamentState, match):
    """Print one match line."""
    if match.is_bye:
        click.echo(f"  [{match.id}] {match.label}: {state.team_name(match.team1)}")
        return

    score1 = "-" if match.score1 is None else match.score1
    score2 = "-" if match.score2 is None else match.score2
    status = "done" if match.completed else "open"
    title = f"Group {match.group_id}" if match.is_group else match.label
    click.echo(
        f"  [{match.id}] {title}: {state.team_name(match.team1)} "
        f"{score1} x {score2} {state.team_name(match.team2)} ({status})"
    )


def render_standings(state: TournamentState, group_id: str = None):
    """Print the ranking of one group or of every group."""
    from btmm.standings import get_sorted_standings

    groups = [group_id] if group_id else state.groups
    for gid in groups:
        click.echo(f"\n[STATS] Group {gid}")
        for position, pair in enumerate(get_sorted_standings(gid, state.pairs, state.matches), start=1):
            stats = pair.stats
            click.echo(
                f"  {position}. {pair.name} - {stats.points}pts "
                f"({stats.wins}W, balance {stats.balance:+d}, {stats.matches_played} played)"
            )


def render_summary(state: TournamentState):
    """Print a short overview of the tournament after a mutation."""
    click.echo(f"\n[INFO] Phase: {state.phase.value}")
    if state.phase == TournamentPhase.REGISTRATION:
        return
    done = sum(1 for m in state.group_matches() if m.completed)
    click.echo(f"[INFO] Group matches: {done}/{len(state.group_matches())} completed")
    if state.has_knockout:
        played = [m for m in state.knockout_matches() if not m.is_bye]
        done = sum(1 for m in played if m.completed)
        click.echo(f"[INFO] Knockout matches: {done}/{len(played)} completed")


# ============================================================================
# Commands
# ============================================================================


@click.group()
@click.version_option(version="0.1.0")
@click.option("--db", required=False, help="Path to SQLite database file")
@click.option("--config", "config_path", required=False, help="Path to config YAML file")
@click.pass_context
def cli(ctx, db: str, config_path: str):
    """Beach Tennis Matchmaker - draw pairs, run groups and a knockout bracket."""
    ctx.ensure_object(dict)
    ctx.obj["db"] = db
    ctx.obj["config_path"] = config_path
    ctx.obj["config"] = _load_config(ctx)


@cli.command()
@click.option("--players", "players_file", required=True, help="File with one name per line, or CSV with a 'name' column")
@click.option("--yes", "assume_yes", is_flag=True, help="Replace an existing tournament without asking")
@click.pass_context
def draw(ctx, players_file: str, assume_yes: bool):
    """Draw random pairs, groups and group matches.

    Example:
        btmm draw --players data/players.txt
    """
    from btmm.i18n import get_string
    from btmm.io_csv import CSVImportError, import_entrants_csv
    from btmm.tournament import draw as draw_tournament
    from btmm.validation import InputError

    cfg = ctx.obj["config"]
    repo = _open_repo(ctx)
    state = repo.load()

    if state.phase != TournamentPhase.REGISTRATION:
        if not _confirm(assume_yes)(get_string("cli.reset.confirm", cfg["lang"])):
            click.echo("[INFO] Draw cancelled")
            return

    try:
        click.echo(f"[INFO] Reading players from: {players_file}")
        names = import_entrants_csv(players_file)

        seed = cfg["random_seed"]
        rng = random.Random(seed) if seed is not None else None
        state = draw_tournament(TournamentState.initial(), names, rng=rng)
    except (CSVImportError, InputError) as e:
        click.echo(f"[ERROR] {e}", err=True)
        raise click.Abort()

    repo.save(state)

    click.echo(
        "[SUCCESS] "
        + get_string(
            "cli.draw.success",
            cfg["lang"],
            pairs=len(state.pairs),
            groups=len(state.groups),
            matches=len(state.matches),
        )
    )
    render_groups(state)
    render_summary(state)


@cli.command()
@click.argument("match_id", type=int)
@click.argument("team", type=click.IntRange(1, 2))
@click.argument("value", required=False, default="")
@click.pass_context
def score(ctx, match_id: int, team: int, value: str):
    """Enter the score of TEAM (1 or 2) in MATCH_ID; omit VALUE to clear it.

    Example:
        btmm score 3 1 6
    """
    from btmm.tournament import update_match_score
    from btmm.validation import InputError, ValidationError

    cfg = ctx.obj["config"]
    repo = _open_repo(ctx)
    state = repo.load()

    try:
        match = update_match_score(
            state, match_id, team, value, on_champion=_echo_champion(cfg["lang"])
        )
    except InputError as e:
        click.echo(f"[ERROR] {e}", err=True)
        raise click.Abort()
    except ValidationError as e:
        # The rejected field has already been cleared; keep that
        repo.save(state)
        click.echo(f"[ERROR] {e}", err=True)
        raise click.Abort()

    repo.save(state)
    render_match(state, match)
    render_summary(state)


@cli.command()
@click.option("--phase", type=click.Choice(["group", "knockout", "all"]), default="all")
@click.option("--open", "only_open", is_flag=True, help="Only show matches without a result")
@click.pass_context
def matches(ctx, phase: str, only_open: bool):
    """List matches."""
    state = _open_repo(ctx).load()

    for match in state.matches:
        if phase == "group" and not match.is_group:
            continue
        if phase == "knockout" and not match.is_knockout:
            continue
        if only_open and match.completed:
            continue
        render_match(state, match)


@cli.command()
@click.option("--group", "group_id", required=False, help="Group label (e.g., A)")
@click.pass_context
def standings(ctx, group_id: str):
    """Show group standings."""
    state = _open_repo(ctx).load()

    if group_id and group_id not in state.groups:
        click.echo(f"[ERROR] No group {group_id}", err=True)
        raise click.Abort()

    render_standings(state, group_id)


@cli.command()
@click.option("--yes", "assume_yes", is_flag=True, help="Proceed even with open group matches")
@click.pass_context
def knockout(ctx, assume_yes: bool):
    """Build the knockout bracket from the group standings.

    Example:
        btmm knockout
    """
    from btmm.i18n import get_string
    from btmm.tournament import generate_knockout
    from btmm.validation import InputError

    cfg = ctx.obj["config"]
    repo = _open_repo(ctx)
    state = repo.load()

    if state.phase == TournamentPhase.REGISTRATION:
        click.echo("[ERROR] No draw yet. Run 'btmm draw' first", err=True)
        raise click.Abort()

    try:
        moved = generate_knockout(
            state,
            confirm=_confirm(assume_yes),
            advance_per_group=cfg["advance_per_group"],
            lang=cfg["lang"],
        )
    except InputError as e:
        click.echo(f"[ERROR] {e}", err=True)
        raise click.Abort()

    if not moved:
        click.echo("[INFO] Knockout cancelled")
        return

    repo.save(state)
    click.echo(
        "[SUCCESS] "
        + get_string("cli.knockout.success", cfg["lang"], matches=len(state.knockout_matches()))
    )
    for match in state.knockout_matches():
        render_match(state, match)


@cli.command("back-to-groups")
@click.pass_context
def back_to_groups(ctx):
    """Return to the group stage (the bracket is kept)."""
    from btmm.tournament import return_to_groups

    repo = _open_repo(ctx)
    state = repo.load()

    if state.phase == TournamentPhase.REGISTRATION:
        click.echo("[ERROR] No draw yet", err=True)
        raise click.Abort()

    repo.save(return_to_groups(state))
    render_summary(state)


@cli.command()
@click.pass_context
def bracket(ctx):
    """Show the knockout bracket round by round."""
    from btmm.tournament import get_champion

    state = _open_repo(ctx).load()

    if not state.has_knockout:
        click.echo("[WARNING] No knockout bracket yet")
        return

    levels = sorted({m.round_level for m in state.knockout_matches()}, reverse=True)
    for level in levels:
        click.echo(f"\n[STATS] Round level {level}")
        for match in state.knockout_matches():
            if match.round_level == level:
                render_match(state, match)

    champion = get_champion(state)
    if champion:
        click.echo(f"\n[DONE] Champion: {champion.name}")


@cli.command()
@click.option("--what", type=click.Choice(["state", "standings", "matches"]), default="state")
@click.option("--out", required=False, help="Output file (state is printed when omitted)")
@click.pass_context
def export(ctx, what: str, out: str):
    """Export the tournament (JSON backup) or standings/matches (CSV)."""
    from btmm.backup import export_state
    from btmm.io_csv import export_matches_csv, export_standings_csv

    state = _open_repo(ctx).load()

    if what == "state":
        text = export_state(state)
        if out:
            Path(out).write_text(text, encoding="utf-8")
            click.echo(f"[SUCCESS] Backup written to {out}")
        else:
            click.echo(text)
        return

    if not out:
        click.echo("[ERROR] --out is required for CSV exports", err=True)
        raise click.Abort()

    if what == "standings":
        export_standings_csv(state, out)
    else:
        export_matches_csv(state, out)
    click.echo(f"[SUCCESS] Exported {what} to {out}")


@cli.command("import")
@click.argument("backup_file")
@click.option("--yes", "assume_yes", is_flag=True, help="Replace current data without asking")
@click.pass_context
def import_backup(ctx, backup_file: str, assume_yes: bool):
    """Restore a tournament from a JSON backup file."""
    from btmm.backup import BackupImportError, import_state
    from btmm.i18n import get_string

    cfg = ctx.obj["config"]
    backup_path = Path(backup_file)
    if not backup_path.exists():
        click.echo(f"[ERROR] Backup file not found: {backup_file}", err=True)
        raise click.Abort()

    try:
        state = import_state(backup_path.read_text(encoding="utf-8"))
    except BackupImportError as e:
        click.echo(f"[ERROR] Import Error: {e}", err=True)
        raise click.Abort()

    if not _confirm(assume_yes)(get_string("cli.import.confirm", cfg["lang"])):
        click.echo("[INFO] Import cancelled")
        return

    _open_repo(ctx).save(state)
    click.echo(f"[SUCCESS] {get_string('cli.import.success', cfg['lang'])}")
    render_summary(state)


@cli.command()
@click.option("--yes", "assume_yes", is_flag=True, help="Reset without asking")
@click.pass_context
def reset(ctx, assume_yes: bool):
    """Delete the current tournament and start over."""
    from btmm.tournament import reset_tournament

    cfg = ctx.obj["config"]
    repo = _open_repo(ctx)

    state = reset_tournament(_confirm(assume_yes), lang=cfg["lang"])
    if state is None:
        click.echo("[INFO] Reset cancelled")
        return

    repo.clear()
    repo.save(state)
    click.echo("[DONE] Tournament reset")


@cli.command()
@click.option("--phase", type=click.Choice(["group", "knockout", "all"]), default="all")
@click.option("--seed", type=int, required=False, help="Random seed for reproducible results")
@click.pass_context
def simulate(ctx, phase: str, seed: int):
    """Fill open matches with random results (for testing a setup)."""
    from btmm.tournament import simulate_results

    cfg = ctx.obj["config"]
    repo = _open_repo(ctx)
    state = repo.load()

    count = simulate_results(
        state,
        rng=random.Random(seed) if seed is not None else None,
        phase=None if phase == "all" else phase,
        on_champion=_echo_champion(cfg["lang"]),
    )

    repo.save(state)
    click.echo(f"[SUCCESS] Filled {count} matches")
    render_summary(state)


if __name__ == "__main__":
    cli()
