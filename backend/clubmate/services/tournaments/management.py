"""Tournament and roster management.

Status changes and roster edits run inside the tournament scope so they never
interleave with round creation reading the active roster.
"""

from flask import current_app
from sqlalchemy.exc import IntegrityError

from clubmate import db
from clubmate import repositories as stores
from clubmate.errors import (
    DuplicateTournamentName,
    InvalidTournamentState,
    PlayerNotFound,
    PlayerNotInTournament,
    TournamentNotFound,
    ValidationError,
)
from clubmate.models import Player, Tournament, TournamentStatus
from .scope import tournament_scope


# action -> (statuses it may start from, status it leads to)
_TRANSITIONS = {
    'start': ((TournamentStatus.CREATED,), TournamentStatus.IN_PROGRESS),
    'pause': ((TournamentStatus.IN_PROGRESS,), TournamentStatus.PAUSED),
    'resume': ((TournamentStatus.PAUSED,), TournamentStatus.IN_PROGRESS),
    'finish': (
        (TournamentStatus.CREATED, TournamentStatus.IN_PROGRESS, TournamentStatus.PAUSED),
        TournamentStatus.FINISHED,
    ),
}


def create_tournament(name, total_rounds) -> Tournament:
    name = (name or '').strip()
    if not name:
        raise ValidationError('Tournament name is required')
    try:
        total_rounds = int(total_rounds)
    except (TypeError, ValueError):
        raise ValidationError(f'total_rounds must be an integer, got {total_rounds!r}') from None
    max_rounds = int(current_app.config.get('MAX_TOTAL_ROUNDS', 100))
    if not 1 <= total_rounds <= max_rounds:
        raise ValidationError(f'total_rounds must be between 1 and {max_rounds}', total_rounds=total_rounds)
    if stores.tournaments.exists_by_name(name):
        raise DuplicateTournamentName(name)

    tournament = stores.tournaments.save(Tournament(name=name, total_rounds=total_rounds))
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateTournamentName(name) from None
    current_app.logger.info(f"[tournament-create] id={tournament.id} name={name!r} rounds={total_rounds}")
    return tournament


def get_tournament(tournament_id) -> Tournament:
    tournament = stores.tournaments.find_by_id(tournament_id)
    if tournament is None:
        raise TournamentNotFound(tournament_id)
    return tournament


def list_tournaments():
    return stores.tournaments.find_all()


def tournament_detail(tournament_id) -> dict:
    tournament = get_tournament(tournament_id)
    players = stores.players.find_by_tournament(tournament_id)
    data = tournament.to_dict()
    data['total_players'] = len(players)
    data['active_players'] = sum(1 for p in players if p.active)
    return data


def _transition(tournament_id, action) -> Tournament:
    allowed, status = _TRANSITIONS[action]
    with tournament_scope(tournament_id) as tournament:
        if tournament.status not in allowed:
            raise InvalidTournamentState(tournament_id, tournament.status, action)
        previous = tournament.status
        tournament.update_status(status)
        stores.tournaments.save(tournament)
    current_app.logger.info(f"[tournament-status] id={tournament_id} {previous} -> {status}")
    return tournament


def start_tournament(tournament_id) -> Tournament:
    return _transition(tournament_id, 'start')


def pause_tournament(tournament_id) -> Tournament:
    return _transition(tournament_id, 'pause')


def resume_tournament(tournament_id) -> Tournament:
    return _transition(tournament_id, 'resume')


def finish_tournament(tournament_id) -> Tournament:
    return _transition(tournament_id, 'finish')


def add_player(tournament_id, name) -> Player:
    name = (name or '').strip()
    if not name:
        raise ValidationError('Player name is required')
    with tournament_scope(tournament_id):
        player = stores.players.save(Player(name=name, tournament_id=tournament_id))
    current_app.logger.info(f"[player-add] tournament={tournament_id} player={player.id} name={name!r}")
    return player


def list_players(tournament_id, active_only=False):
    get_tournament(tournament_id)
    if active_only:
        return stores.players.find_active_by_tournament(tournament_id)
    return stores.players.find_by_tournament(tournament_id)


def _set_active(tournament_id, player_id, active: bool) -> Player:
    with tournament_scope(tournament_id):
        player = stores.players.find_by_id(player_id)
        if player is None:
            raise PlayerNotFound(player_id)
        if player.tournament_id != tournament_id:
            raise PlayerNotInTournament(player_id, tournament_id)
        if active:
            player.activate()
        else:
            player.deactivate()
        stores.players.save(player)
    current_app.logger.info(f"[player-{'activate' if active else 'deactivate'}] tournament={tournament_id} player={player_id}")
    return player


def deactivate_player(tournament_id, player_id) -> Player:
    """Soft removal: excluded from future pairings, history retained."""
    return _set_active(tournament_id, player_id, False)


def reactivate_player(tournament_id, player_id) -> Player:
    return _set_active(tournament_id, player_id, True)
