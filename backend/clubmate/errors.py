"""Error taxonomy for the tournament engine.

Three families are kept apart so callers can react to them differently:

- ``NotFound``: an id that does not resolve to a row.
- ``ValidationError`` / ``PreconditionFailed``: bad input or an operation
  attempted in the wrong state. Expected and recoverable.
- ``InvariantViolation``: stored data disagrees with itself. This points to a
  bug in a writer and is logged loudly by whoever raises it.

Every error carries a ``kind`` (its class name) and structured ``details``
that the HTTP layer renders next to the message.
"""


class ClubmateError(Exception):
    status_code = 400

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        payload = {'error': self.message, 'kind': self.kind}
        payload.update(self.details)
        return payload


# ---- Not found ----

class NotFound(ClubmateError):
    status_code = 404


class TournamentNotFound(NotFound):
    def __init__(self, tournament_id):
        super().__init__(f'Tournament not found: {tournament_id}', tournament_id=tournament_id)


class PlayerNotFound(NotFound):
    def __init__(self, player_id):
        super().__init__(f'Player not found: {player_id}', player_id=player_id)


class RoundNotFound(NotFound):
    def __init__(self, round_id):
        super().__init__(f'Round not found: {round_id}', round_id=round_id)


class MatchNotFound(NotFound):
    def __init__(self, match_id):
        super().__init__(f'Match not found: {match_id}', match_id=match_id)


# ---- Bad input ----

class ValidationError(ClubmateError):
    status_code = 400


class InvalidOutcome(ValidationError):
    pass


class WinnerNotParticipant(ValidationError):
    def __init__(self, match_id, winner_id):
        super().__init__(
            f'Winner {winner_id} is not a participant in match {match_id}',
            match_id=match_id, winner_id=winner_id,
        )


class WinnerSlotMismatch(ValidationError):
    def __init__(self, match_id, result, winner_id, expected_id):
        super().__init__(
            f'{result} on match {match_id} requires winner {expected_id}, got {winner_id}',
            match_id=match_id, winner_id=winner_id, expected_winner_id=expected_id,
        )


class DuplicatePlayer(ValidationError):
    def __init__(self, player_id):
        super().__init__(f'Player {player_id} appears more than once in the roster', player_id=player_id)


class InactivePlayer(ValidationError):
    def __init__(self, player_id):
        super().__init__(f'Player {player_id} is inactive and cannot be paired', player_id=player_id)


class UnknownPairingStrategy(ValidationError):
    def __init__(self, name, available):
        super().__init__(
            f'Unknown pairing strategy: {name!r}. Valid strategies: {", ".join(available)}',
            strategy=name, available=list(available),
        )


# ---- Wrong state ----

class PreconditionFailed(ClubmateError):
    status_code = 409


class InsufficientPlayers(PreconditionFailed):
    def __init__(self, count, minimum=2):
        super().__init__(
            f'At least {minimum} active players are required, found {count}',
            count=count, minimum=minimum,
        )


class NoActivePlayers(PreconditionFailed):
    def __init__(self, tournament_id):
        super().__init__(f'Tournament {tournament_id} has no active players', tournament_id=tournament_id, count=0)


class TournamentComplete(PreconditionFailed):
    def __init__(self, tournament_id, total_rounds):
        super().__init__(
            f'Tournament {tournament_id} has already played all {total_rounds} rounds',
            tournament_id=tournament_id, total_rounds=total_rounds,
        )


class PreviousRoundIncomplete(PreconditionFailed):
    def __init__(self, round_number, pending):
        super().__init__(
            f'Round {round_number} is incomplete with {pending} pending matches',
            round_number=round_number, pending=pending,
        )


class InvalidRoundState(PreconditionFailed):
    def __init__(self, round_number, status, action):
        super().__init__(
            f'Cannot {action} round {round_number}. Current status: {status}',
            round_number=round_number, status=status,
        )


class AlreadyLocked(PreconditionFailed):
    def __init__(self, round_number):
        super().__init__(f'Round {round_number} is already locked', round_number=round_number)


class NoMatchesToLock(PreconditionFailed):
    def __init__(self, round_number):
        super().__init__(f'Round {round_number} has no matches to lock', round_number=round_number)


class RoundIncomplete(PreconditionFailed):
    def __init__(self, round_number, pending):
        super().__init__(
            f'Cannot lock round {round_number}. Found {pending} pending matches',
            round_number=round_number, pending=pending,
        )


class MatchAlreadyDecided(PreconditionFailed):
    def __init__(self, match_id, result):
        super().__init__(f'Match {match_id} already has a result: {result}', match_id=match_id, result=result)


class MatchNotInTournament(PreconditionFailed):
    def __init__(self, match_id, tournament_id):
        super().__init__(
            f'Match {match_id} does not belong to tournament {tournament_id}',
            match_id=match_id, tournament_id=tournament_id,
        )


class RoundNotInTournament(PreconditionFailed):
    def __init__(self, round_id, tournament_id):
        super().__init__(
            f'Round {round_id} does not belong to tournament {tournament_id}',
            round_id=round_id, tournament_id=tournament_id,
        )


class PlayerNotInTournament(PreconditionFailed):
    def __init__(self, player_id, tournament_id):
        super().__init__(
            f'Player {player_id} is not in tournament {tournament_id}',
            player_id=player_id, tournament_id=tournament_id,
        )


class InvalidTournamentState(PreconditionFailed):
    def __init__(self, tournament_id, status, action):
        super().__init__(
            f'Cannot {action} tournament {tournament_id}. Current status: {status}',
            tournament_id=tournament_id, status=status,
        )


class DuplicateTournamentName(PreconditionFailed):
    def __init__(self, name):
        super().__init__(f'Tournament with name already exists: {name}', name=name)


# ---- Internal consistency ----

class InvariantViolation(ClubmateError):
    status_code = 500
