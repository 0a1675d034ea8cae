"""Standings derived from completed matches and recorded byes.

Scores are always recomputed from match history; ``Player.score`` is only a
cache written by ``recalculate_player_scores``. Single-player lookups go
through the same tally as the full table so the two can never disagree.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional

from flask import current_app

from clubmate import repositories as stores
from clubmate.errors import PlayerNotFound, PlayerNotInTournament, TournamentNotFound, ValidationError


@dataclass
class StandingEntry:
    player_id: int
    player_name: str
    score: float = 0.0
    matches_played: int = 0
    byes: int = 0
    rank: Optional[int] = None

    def to_dict(self):
        return asdict(self)


def _check_as_of(as_of_round):
    if as_of_round is not None and as_of_round < 0:
        raise ValidationError(f'as_of_round must be zero or positive, got {as_of_round}', as_of_round=as_of_round)


def _rounds_in_scope(tournament_id, as_of_round=None) -> Dict[int, object]:
    rounds = stores.rounds.find_by_tournament(tournament_id)
    return {r.id: r for r in rounds if as_of_round is None or r.round_number <= as_of_round}


def _tally(player, rounds_by_id) -> StandingEntry:
    entry = StandingEntry(player_id=player.id, player_name=player.name)
    for match in stores.matches.find_by_player(player.id):
        if match.round_id not in rounds_by_id or match.is_pending:
            continue
        entry.score += match.points_for(player.id)
        entry.matches_played += 1
    for round_ in rounds_by_id.values():
        if round_.bye_player_id == player.id:
            entry.score += round_.bye_points
            entry.byes += 1
    return entry


def _rank(entries: List[StandingEntry]) -> List[StandingEntry]:
    entries.sort(key=lambda e: (-e.score, e.player_id))
    for position, entry in enumerate(entries, start=1):
        entry.rank = position
    return entries


def standings(tournament_id, as_of_round=None) -> List[StandingEntry]:
    """Ranked standings of the active players, optionally as of a past round."""
    if stores.tournaments.find_by_id(tournament_id) is None:
        raise TournamentNotFound(tournament_id)
    _check_as_of(as_of_round)
    rounds_by_id = _rounds_in_scope(tournament_id, as_of_round)
    players = stores.players.find_active_by_tournament(tournament_id)
    return _rank([_tally(p, rounds_by_id) for p in players])


def tournament_standings(tournament_id, as_of_round=None) -> dict:
    tournament = stores.tournaments.find_by_id(tournament_id)
    if tournament is None:
        raise TournamentNotFound(tournament_id)
    table = standings(tournament_id, as_of_round)
    current_app.logger.info(
        f"[standings] tournament={tournament_id} as_of={as_of_round} players={len(table)}"
    )
    return {
        'tournament_id': tournament.id,
        'tournament_name': tournament.name,
        'total_rounds': tournament.total_rounds,
        'current_round': tournament.current_round if as_of_round is None else as_of_round,
        'standings': [e.to_dict() for e in table],
    }


def _player_in(tournament_id, player_id):
    player = stores.players.find_by_id(player_id)
    if player is None:
        raise PlayerNotFound(player_id)
    if player.tournament_id != tournament_id:
        raise PlayerNotInTournament(player_id, tournament_id)
    return player


def player_entry(tournament_id, player_id, as_of_round=None) -> StandingEntry:
    """The player's row of the standings table; inactive players get an unranked row."""
    player = _player_in(tournament_id, player_id)
    if player.active:
        for entry in standings(tournament_id, as_of_round):
            if entry.player_id == player_id:
                return entry
    _check_as_of(as_of_round)
    return _tally(player, _rounds_in_scope(tournament_id, as_of_round))


def player_score(tournament_id, player_id, as_of_round=None) -> float:
    return player_entry(tournament_id, player_id, as_of_round).score


def player_rank(tournament_id, player_id, as_of_round=None) -> Optional[int]:
    return player_entry(tournament_id, player_id, as_of_round).rank


def recalculate_player_scores(tournament_id, player_ids: Iterable[int]) -> Dict[int, float]:
    """Rewrite the cached score of each player from their full history."""
    rounds_by_id = _rounds_in_scope(tournament_id)
    updated = {}
    for player_id in player_ids:
        player = _player_in(tournament_id, player_id)
        score = _tally(player, rounds_by_id).score
        player.set_score(score)
        stores.players.save(player)
        updated[player_id] = score
    current_app.logger.debug(f"[scores] tournament={tournament_id} updated={updated}")
    return updated
