"""Stores the tournament services read and write through.

``save`` only stages an object in the session. Commits belong to the
tournament scope (see ``services.tournaments.scope``) so that a unit of work
such as "round plus its matches" lands in one transaction.
"""

from sqlalchemy import or_

from clubmate import db
from clubmate.models import Match, Player, Round, Tournament


class TournamentStore:
    def find_by_id(self, tournament_id):
        return db.session.get(Tournament, tournament_id)

    def find_all(self):
        return Tournament.query.order_by(Tournament.id).all()

    def exists_by_name(self, name) -> bool:
        return db.session.query(Tournament.id).filter_by(name=name).first() is not None

    def save(self, tournament):
        db.session.add(tournament)
        return tournament


class PlayerStore:
    def find_by_id(self, player_id):
        return db.session.get(Player, player_id)

    def find_by_tournament(self, tournament_id):
        return Player.query.filter_by(tournament_id=tournament_id).order_by(Player.id).all()

    def find_active_by_tournament(self, tournament_id):
        return Player.query.filter_by(tournament_id=tournament_id, active=True).order_by(Player.id).all()

    def save(self, player):
        db.session.add(player)
        return player


class RoundStore:
    def find_by_id(self, round_id):
        return db.session.get(Round, round_id)

    def find_by_tournament(self, tournament_id):
        return Round.query.filter_by(tournament_id=tournament_id).order_by(Round.round_number).all()

    def find_by_number(self, tournament_id, round_number):
        return Round.query.filter_by(tournament_id=tournament_id, round_number=round_number).first()

    def save(self, round_):
        db.session.add(round_)
        return round_


class MatchStore:
    def find_by_id(self, match_id):
        return db.session.get(Match, match_id)

    def find_by_round(self, round_id):
        return Match.query.filter_by(round_id=round_id).order_by(Match.id).all()

    def find_by_player(self, player_id):
        return (
            Match.query
            .filter(or_(Match.player1_id == player_id, Match.player2_id == player_id))
            .order_by(Match.id)
            .all()
        )

    def save(self, match):
        db.session.add(match)
        return match


tournaments = TournamentStore()
players = PlayerStore()
rounds = RoundStore()
matches = MatchStore()
