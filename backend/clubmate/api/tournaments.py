from flask import Blueprint, jsonify, request
from clubmate.services.tournaments import management
from clubmate.services.tournaments import rounds as round_service
from clubmate.services.tournaments.standings import player_entry, tournament_standings
from clubmate.socketio_events import broadcast_tournament_update
from clubmate.errors import ValidationError


tournaments = Blueprint('tournaments', __name__)


def _round_param():
    raw = request.args.get('round')
    if raw is None or raw == '':
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f'round must be an integer, got {raw!r}') from None


@tournaments.route('', methods=['GET'])
def list_tournaments():
    return jsonify([t.to_dict() for t in management.list_tournaments()])


@tournaments.route('/<int:tournament_id>', methods=['GET'])
def get_tournament(tournament_id):
    return jsonify(management.tournament_detail(tournament_id))


@tournaments.route('/<int:tournament_id>/players', methods=['GET'])
def list_players(tournament_id):
    active_only = request.args.get('active', '').lower() in ('1', 'true', 'yes')
    players = management.list_players(tournament_id, active_only=active_only)
    return jsonify([p.to_dict() for p in players])


@tournaments.route('/<int:tournament_id>/players', methods=['POST'])
def add_player(tournament_id):
    data = request.get_json(silent=True) or {}
    player = management.add_player(tournament_id, data.get('name'))
    broadcast_tournament_update(tournament_id, 'player_added', player_id=player.id)
    return jsonify(player.to_dict()), 201


@tournaments.route('/<int:tournament_id>/players/<int:player_id>', methods=['DELETE'])
def remove_player(tournament_id, player_id):
    player = management.deactivate_player(tournament_id, player_id)
    broadcast_tournament_update(tournament_id, 'player_removed', player_id=player.id)
    return jsonify(player.to_dict())


@tournaments.route('/<int:tournament_id>/players/<int:player_id>/reactivate', methods=['POST'])
def reactivate_player(tournament_id, player_id):
    player = management.reactivate_player(tournament_id, player_id)
    broadcast_tournament_update(tournament_id, 'player_reactivated', player_id=player.id)
    return jsonify(player.to_dict())


@tournaments.route('/<int:tournament_id>/standings', methods=['GET'])
def get_standings(tournament_id):
    return jsonify(tournament_standings(tournament_id, _round_param()))


@tournaments.route('/<int:tournament_id>/standings/players/<int:player_id>', methods=['GET'])
def get_player_standing(tournament_id, player_id):
    entry = player_entry(tournament_id, player_id, _round_param())
    return jsonify(entry.to_dict())


@tournaments.route('/<int:tournament_id>/pairing', methods=['GET'])
def pairing_info(tournament_id):
    management.get_tournament(tournament_id)
    active = len(management.list_players(tournament_id, active_only=True))
    return jsonify({
        'tournament_id': tournament_id,
        'strategy': round_service.strategy_name(),
        'active_players': active,
        'can_pair': round_service.can_pair(active),
    })
