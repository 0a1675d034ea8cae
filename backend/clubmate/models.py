from datetime import datetime, timezone

from clubmate import db
from clubmate.errors import InvalidRoundState, MatchAlreadyDecided, TournamentComplete, WinnerNotParticipant


POINTS_FOR_WIN = 1.0
POINTS_FOR_DRAW = 0.5
POINTS_FOR_LOSS = 0.0


def _utcnow():
    return datetime.now(timezone.utc)


class TournamentStatus:
    CREATED = 'CREATED'
    IN_PROGRESS = 'IN_PROGRESS'
    PAUSED = 'PAUSED'
    FINISHED = 'FINISHED'


class RoundStatus:
    PENDING = 'PENDING'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'


class MatchResult:
    PENDING = 'PENDING'
    PLAYER1_WIN = 'PLAYER1_WIN'
    PLAYER2_WIN = 'PLAYER2_WIN'
    DRAW = 'DRAW'

    DECIDED = (PLAYER1_WIN, PLAYER2_WIN, DRAW)


class Tournament(db.Model):
    __tablename__ = 'tournament'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), unique=True, nullable=False, index=True)
    total_rounds = db.Column(db.Integer, nullable=False)
    current_round = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(16), nullable=False, default=TournamentStatus.CREATED)  # CREATED, IN_PROGRESS, PAUSED, FINISHED
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)
    players = db.relationship('Player', back_populates='tournament', order_by='Player.id')
    rounds = db.relationship('Round', back_populates='tournament', order_by='Round.round_number')

    def __init__(self, **kwargs):
        super(Tournament, self).__init__(**kwargs)
        if self.current_round is None:
            self.current_round = 0
        if self.status is None:
            self.status = TournamentStatus.CREATED

    def advance_round(self) -> int:
        """Move current_round forward by exactly one and return the new value."""
        if self.current_round >= self.total_rounds:
            raise TournamentComplete(self.id, self.total_rounds)
        self.current_round += 1
        self.updated_at = _utcnow()
        return self.current_round

    def update_status(self, status: str) -> None:
        self.status = status
        self.updated_at = _utcnow()

    @property
    def is_finished(self) -> bool:
        return self.status == TournamentStatus.FINISHED

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'total_rounds': self.total_rounds,
            'current_round': self.current_round,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False, index=True)
    score = db.Column(db.Float, nullable=False, default=0.0)
    active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)
    tournament = db.relationship('Tournament', back_populates='players')

    def __init__(self, **kwargs):
        super(Player, self).__init__(**kwargs)
        if self.score is None:
            self.score = 0.0
        if self.active is None:
            self.active = True

    def deactivate(self) -> None:
        self.active = False
        self.updated_at = _utcnow()

    def activate(self) -> None:
        self.active = True
        self.updated_at = _utcnow()

    def set_score(self, score: float) -> None:
        self.score = score
        self.updated_at = _utcnow()

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'tournament_id': self.tournament_id,
            'score': self.score,
            'active': self.active,
        }


class Round(db.Model):
    __tablename__ = 'round'
    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'round_number', name='uq_round_tournament_number'),
    )
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False, index=True)
    round_number = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(16), nullable=False, default=RoundStatus.PENDING)  # PENDING, IN_PROGRESS, COMPLETED
    # Unpaired player of an odd-sized round and the points they were credited
    bye_player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=True)
    bye_points = db.Column(db.Float, nullable=False, default=0.0)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)
    tournament = db.relationship('Tournament', back_populates='rounds')
    matches = db.relationship('Match', back_populates='round', order_by='Match.id')
    bye_player = db.relationship('Player', foreign_keys=[bye_player_id])

    def __init__(self, **kwargs):
        super(Round, self).__init__(**kwargs)
        if self.status is None:
            self.status = RoundStatus.PENDING
        if self.bye_points is None:
            self.bye_points = 0.0

    @property
    def is_pending(self) -> bool:
        return self.status == RoundStatus.PENDING

    @property
    def is_in_progress(self) -> bool:
        return self.status == RoundStatus.IN_PROGRESS

    @property
    def is_completed(self) -> bool:
        return self.status == RoundStatus.COMPLETED

    def start(self) -> None:
        if not self.is_pending:
            raise InvalidRoundState(self.round_number, self.status, 'start')
        self.status = RoundStatus.IN_PROGRESS
        self.updated_at = _utcnow()

    def finish(self) -> None:
        if not self.is_in_progress:
            raise InvalidRoundState(self.round_number, self.status, 'finish')
        self.status = RoundStatus.COMPLETED
        self.updated_at = _utcnow()

    def grant_bye(self, player, points: float) -> None:
        self.bye_player = player
        self.bye_points = points

    def to_dict(self, include_matches=False):
        data = {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'round_number': self.round_number,
            'status': self.status,
            'bye_player_id': self.bye_player_id,
            'bye_player_name': self.bye_player.name if self.bye_player else None,
            'bye_points': self.bye_points,
        }
        if include_matches:
            data['matches'] = [m.to_dict() for m in self.matches]
        return data


class Match(db.Model):
    __tablename__ = 'match'
    __table_args__ = (
        db.CheckConstraint('player1_id <> player2_id', name='ck_match_distinct_players'),
    )
    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey('round.id'), nullable=False, index=True)
    player1_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    player2_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    result = db.Column(db.String(16), nullable=False, default=MatchResult.PENDING)  # PENDING, PLAYER1_WIN, PLAYER2_WIN, DRAW
    winner_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)
    round = db.relationship('Round', back_populates='matches')
    player1 = db.relationship('Player', foreign_keys=[player1_id])
    player2 = db.relationship('Player', foreign_keys=[player2_id])

    def __init__(self, **kwargs):
        super(Match, self).__init__(**kwargs)
        if self.result is None:
            self.result = MatchResult.PENDING

    @property
    def is_pending(self) -> bool:
        return self.result == MatchResult.PENDING

    @property
    def is_completed(self) -> bool:
        return self.result != MatchResult.PENDING

    def involves(self, player_id) -> bool:
        return player_id in (self.player1_id, self.player2_id)

    def record_draw(self) -> None:
        if self.is_completed:
            raise MatchAlreadyDecided(self.id, self.result)
        self.result = MatchResult.DRAW
        self.winner_id = None
        self.updated_at = _utcnow()

    def record_win(self, winner_id) -> None:
        if self.is_completed:
            raise MatchAlreadyDecided(self.id, self.result)
        if winner_id == self.player1_id:
            self.result = MatchResult.PLAYER1_WIN
        elif winner_id == self.player2_id:
            self.result = MatchResult.PLAYER2_WIN
        else:
            raise WinnerNotParticipant(self.id, winner_id)
        self.winner_id = winner_id
        self.updated_at = _utcnow()

    def points_for(self, player_id) -> float:
        """Points this match awards to one participant (0.0 while pending)."""
        if self.result == MatchResult.DRAW:
            return POINTS_FOR_DRAW
        if self.result == MatchResult.PLAYER1_WIN and player_id == self.player1_id:
            return POINTS_FOR_WIN
        if self.result == MatchResult.PLAYER2_WIN and player_id == self.player2_id:
            return POINTS_FOR_WIN
        return POINTS_FOR_LOSS

    def winner_is_consistent(self) -> bool:
        if self.result == MatchResult.PLAYER1_WIN:
            return self.winner_id == self.player1_id
        if self.result == MatchResult.PLAYER2_WIN:
            return self.winner_id == self.player2_id
        return self.winner_id is None

    def to_dict(self):
        winner = None
        if self.winner_id is not None:
            winner = self.player1 if self.winner_id == self.player1_id else self.player2
        return {
            'id': self.id,
            'round_id': self.round_id,
            'round_number': self.round.round_number if self.round else None,
            'player1_id': self.player1_id,
            'player1_name': self.player1.name if self.player1 else None,
            'player2_id': self.player2_id,
            'player2_name': self.player2.name if self.player2 else None,
            'result': self.result,
            'winner_id': self.winner_id,
            'winner_name': winner.name if winner else None,
            'is_completed': self.is_completed,
        }
