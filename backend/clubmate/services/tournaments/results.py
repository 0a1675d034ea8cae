"""Match result submission.

Results are write-once: a decided match has no correction path. Submission
validates the outcome against the match participants, then the match's
tournament ownership, then the match state, in that order.
"""

from dataclasses import dataclass
from typing import Optional

from flask import current_app

from clubmate import repositories as stores
from clubmate.errors import (
    InvalidOutcome,
    InvariantViolation,
    MatchAlreadyDecided,
    MatchNotFound,
    MatchNotInTournament,
    TournamentNotFound,
    WinnerNotParticipant,
    WinnerSlotMismatch,
)
from clubmate.models import MatchResult
from .scope import tournament_scope
from .standings import recalculate_player_scores


@dataclass(frozen=True)
class Outcome:
    result: str
    winner_id: Optional[int] = None

    @classmethod
    def draw(cls):
        return cls(MatchResult.DRAW)

    @classmethod
    def player1_win(cls, winner_id):
        return cls(MatchResult.PLAYER1_WIN, winner_id)

    @classmethod
    def player2_win(cls, winner_id):
        return cls(MatchResult.PLAYER2_WIN, winner_id)

    @classmethod
    def from_payload(cls, data: dict) -> 'Outcome':
        result = str((data or {}).get('result') or '').strip().upper()
        winner_id = (data or {}).get('winner_id')
        if isinstance(winner_id, bool) or (isinstance(winner_id, float) and not winner_id.is_integer()):
            raise InvalidOutcome(f'winner_id must be an integer, got {winner_id!r}')
        if winner_id is not None:
            try:
                winner_id = int(winner_id)
            except (TypeError, ValueError):
                raise InvalidOutcome(f'winner_id must be an integer, got {winner_id!r}') from None
        return cls(result, winner_id)

    @property
    def is_draw(self) -> bool:
        return self.result == MatchResult.DRAW


def _check_outcome(match, outcome: Outcome) -> None:
    if outcome.result not in MatchResult.DECIDED:
        raise InvalidOutcome(
            f'Invalid match result {outcome.result!r}: must be DRAW, PLAYER1_WIN or PLAYER2_WIN',
            result=outcome.result,
        )
    if outcome.is_draw:
        return
    if outcome.winner_id is None:
        raise InvalidOutcome(f'{outcome.result} requires a winner_id', result=outcome.result)
    if not match.involves(outcome.winner_id):
        raise WinnerNotParticipant(match.id, outcome.winner_id)
    expected = match.player1_id if outcome.result == MatchResult.PLAYER1_WIN else match.player2_id
    if outcome.winner_id != expected:
        raise WinnerSlotMismatch(match.id, outcome.result, outcome.winner_id, expected)


def _owning_round(match):
    round_ = stores.rounds.find_by_id(match.round_id)
    if round_ is None:
        current_app.logger.error(f"[invariant] match={match.id} points at missing round={match.round_id}")
        raise InvariantViolation(f'Round not found for match {match.id}', match_id=match.id)
    return round_


def submit_result(tournament_id, match_id, outcome: Outcome) -> dict:
    """Record the outcome of a pending match and refresh both players' scores."""
    current_app.logger.info(
        f"[result-submit] tournament={tournament_id} match={match_id} result={outcome.result} winner={outcome.winner_id}"
    )
    with tournament_scope(tournament_id):
        match = stores.matches.find_by_id(match_id)
        if match is None:
            raise MatchNotFound(match_id)

        _check_outcome(match, outcome)
        round_ = _owning_round(match)
        if round_.tournament_id != tournament_id:
            raise MatchNotInTournament(match_id, tournament_id)
        if match.is_completed:
            raise MatchAlreadyDecided(match.id, match.result)

        if outcome.is_draw:
            match.record_draw()
        else:
            match.record_win(outcome.winner_id)
        if not match.winner_is_consistent():
            current_app.logger.error(f"[invariant] match={match.id} result={match.result} winner={match.winner_id}")
            raise InvariantViolation(f'Match {match.id} winner disagrees with its result', match_id=match.id)
        stores.matches.save(match)

        # First result of a fresh round puts it in play
        if round_.is_pending:
            round_.start()
            stores.rounds.save(round_)

        recalculate_player_scores(tournament_id, [match.player1_id, match.player2_id])
        view = match.to_dict()

    current_app.logger.info(
        f"[result-recorded] tournament={tournament_id} match={match_id} result={view['result']} round={view['round_number']}"
    )
    return view


def match_details(tournament_id, match_id) -> dict:
    if stores.tournaments.find_by_id(tournament_id) is None:
        raise TournamentNotFound(tournament_id)
    match = stores.matches.find_by_id(match_id)
    if match is None:
        raise MatchNotFound(match_id)
    if _owning_round(match).tournament_id != tournament_id:
        raise MatchNotInTournament(match_id, tournament_id)
    return match.to_dict()
