"""Round lifecycle: opening, starting and locking rounds.

A round moves PENDING -> IN_PROGRESS -> COMPLETED and never skips a state.
Opening a round is the only way the tournament advances; it pairs the active
roster with the configured strategy and persists the round, its matches, the
bye credit and the new ``current_round`` as one unit of work.
"""

from dataclasses import asdict, dataclass
from typing import List, Optional

from flask import current_app

from clubmate import db
from clubmate import repositories as stores
from clubmate.errors import (
    AlreadyLocked,
    InsufficientPlayers,
    InvariantViolation,
    NoActivePlayers,
    NoMatchesToLock,
    PreviousRoundIncomplete,
    RoundIncomplete,
    RoundNotFound,
    RoundNotInTournament,
    TournamentComplete,
    TournamentNotFound,
)
from clubmate.models import Match, Round
from .pairing import PairingStrategy, get_strategy
from .scope import tournament_scope
from .standings import recalculate_player_scores


@dataclass(frozen=True)
class RoundStatusInfo:
    round_id: int
    round_number: int
    status: str
    completed_matches: int
    pending_matches: int
    total_matches: int
    locked: bool

    def to_dict(self):
        return asdict(self)


def configured_strategy() -> PairingStrategy:
    return get_strategy(current_app.config.get('PAIRING_STRATEGY', 'swiss'))


def can_pair(player_count: int, strategy: Optional[PairingStrategy] = None) -> bool:
    return (strategy or configured_strategy()).can_pair(player_count)


def strategy_name(strategy: Optional[PairingStrategy] = None) -> str:
    return (strategy or configured_strategy()).name


def _pending_count(round_) -> int:
    return sum(1 for m in stores.matches.find_by_round(round_.id) if m.is_pending)


def _invariant(message, **details):
    current_app.logger.error(f"[invariant] {message} details={details}")
    return InvariantViolation(message, **details)


def _get_round(round_id, tournament_id=None):
    round_ = stores.rounds.find_by_id(round_id)
    if round_ is None:
        raise RoundNotFound(round_id)
    if tournament_id is not None and round_.tournament_id != tournament_id:
        raise RoundNotInTournament(round_id, tournament_id)
    return round_


def _lock(round_) -> None:
    """Finish a round whose matches are all decided. Caller holds the tournament scope."""
    if round_.is_completed:
        raise AlreadyLocked(round_.round_number)
    matches = stores.matches.find_by_round(round_.id)
    if not matches:
        raise NoMatchesToLock(round_.round_number)
    pending = sum(1 for m in matches if m.is_pending)
    if pending:
        raise RoundIncomplete(round_.round_number, pending)
    if round_.is_pending:
        round_.start()
    round_.finish()
    stores.rounds.save(round_)


def _check_previous_round(tournament) -> None:
    previous = stores.rounds.find_by_number(tournament.id, tournament.current_round)
    if previous is None:
        raise _invariant(
            f'Tournament {tournament.id} is at round {tournament.current_round} but that round does not exist',
            tournament_id=tournament.id, round_number=tournament.current_round,
        )
    pending = _pending_count(previous)
    if previous.is_completed:
        if pending:
            raise _invariant(
                f'Round {previous.round_number} is locked but has {pending} pending matches',
                round_id=previous.id, pending=pending,
            )
        return
    if pending:
        raise PreviousRoundIncomplete(previous.round_number, pending)
    # Every result is in but nobody locked the round yet: lock it as part of this unit of work
    _lock(previous)
    current_app.logger.info(
        f"[round-lock] tournament={tournament.id} round={previous.round_number} locked before opening next round"
    )


def create_round(tournament_id, strategy: Optional[PairingStrategy] = None) -> Round:
    """Open the next round of a tournament and generate its pairings."""
    strategy = strategy or configured_strategy()
    with tournament_scope(tournament_id) as tournament:
        if tournament.current_round >= tournament.total_rounds:
            raise TournamentComplete(tournament.id, tournament.total_rounds)
        if tournament.current_round > 0:
            _check_previous_round(tournament)

        active = stores.players.find_active_by_tournament(tournament.id)
        if not active:
            raise NoActivePlayers(tournament.id)
        if len(active) < 2:
            raise InsufficientPlayers(len(active))

        round_number = tournament.current_round + 1
        pairing = strategy.pair(active, round_number)
        if len(pairing.unpaired) > 1:
            raise _invariant(
                f'{strategy.name} left {len(pairing.unpaired)} players unpaired',
                unpaired=[p.id for p in pairing.unpaired],
            )

        new_round = Round(tournament_id=tournament.id, round_number=round_number)
        for player_a, player_b in pairing.pairs:
            new_round.matches.append(Match(player1_id=player_a.id, player2_id=player_b.id))
        if pairing.bye is not None:
            new_round.grant_bye(pairing.bye, float(current_app.config.get('BYE_POINTS', 1.0)))
        stores.rounds.save(new_round)

        tournament.advance_round()
        stores.tournaments.save(tournament)

        if pairing.bye is not None:
            recalculate_player_scores(tournament.id, [pairing.bye.id])

        current_app.logger.info(
            f"[round-create] tournament={tournament.id} round={round_number} strategy={strategy.name} "
            f"matches={len(pairing.pairs)} bye={pairing.bye.id if pairing.bye else None}"
        )
    return new_round


def start_round(round_id, tournament_id=None) -> Round:
    round_ = _get_round(round_id, tournament_id)
    with tournament_scope(round_.tournament_id):
        db.session.refresh(round_)
        round_.start()
        stores.rounds.save(round_)
        current_app.logger.info(f"[round-start] tournament={round_.tournament_id} round={round_.round_number}")
    return round_


def lock_round(round_id, tournament_id=None) -> Round:
    """Mark a round COMPLETED once none of its matches are pending."""
    round_ = _get_round(round_id, tournament_id)
    with tournament_scope(round_.tournament_id):
        db.session.refresh(round_)
        _lock(round_)
        current_app.logger.info(f"[round-lock] tournament={round_.tournament_id} round={round_.round_number}")
    return round_


def round_status(round_id, tournament_id=None) -> RoundStatusInfo:
    round_ = _get_round(round_id, tournament_id)
    matches = stores.matches.find_by_round(round_.id)
    pending = sum(1 for m in matches if m.is_pending)
    return RoundStatusInfo(
        round_id=round_.id,
        round_number=round_.round_number,
        status=round_.status,
        completed_matches=len(matches) - pending,
        pending_matches=pending,
        total_matches=len(matches),
        locked=_is_locked(round_, pending),
    )


def _is_locked(round_, pending: int) -> bool:
    if round_.is_completed and pending:
        raise _invariant(
            f'Round {round_.round_number} is COMPLETED but has {pending} pending matches',
            round_id=round_.id, pending=pending,
        )
    return round_.is_completed


def is_round_locked(round_id, tournament_id=None) -> bool:
    round_ = _get_round(round_id, tournament_id)
    return _is_locked(round_, _pending_count(round_))


def list_rounds(tournament_id) -> List[Round]:
    if stores.tournaments.find_by_id(tournament_id) is None:
        raise TournamentNotFound(tournament_id)
    return stores.rounds.find_by_tournament(tournament_id)


def current_round(tournament_id) -> Optional[Round]:
    rounds = list_rounds(tournament_id)
    return rounds[-1] if rounds else None


def get_round(tournament_id, round_id) -> Round:
    if stores.tournaments.find_by_id(tournament_id) is None:
        raise TournamentNotFound(tournament_id)
    return _get_round(round_id, tournament_id)


def round_matches(tournament_id, round_id) -> List[Match]:
    return stores.matches.find_by_round(get_round(tournament_id, round_id).id)
