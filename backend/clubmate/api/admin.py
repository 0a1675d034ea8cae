from flask import Blueprint, jsonify, request
from clubmate.services.tournaments import management
from clubmate.services.tournaments import rounds as round_service
from clubmate.services.tournaments.pairing import get_strategy
from clubmate.socketio_events import broadcast_tournament_update


admin = Blueprint('admin', __name__)

_STATUS_ACTIONS = {
    'start': management.start_tournament,
    'pause': management.pause_tournament,
    'resume': management.resume_tournament,
    'finish': management.finish_tournament,
}


@admin.route('', methods=['POST'])
def create_tournament():
    data = request.get_json(silent=True) or {}
    tournament = management.create_tournament(data.get('name'), data.get('total_rounds'))
    return jsonify(tournament.to_dict()), 201


@admin.route('/<int:tournament_id>/<string:action>', methods=['POST'])
def change_status(tournament_id, action):
    handler = _STATUS_ACTIONS.get(action)
    if handler is None:
        return jsonify({'error': f'Unknown action {action!r}'}), 404
    tournament = handler(tournament_id)
    broadcast_tournament_update(tournament_id, f'tournament_{action}')
    return jsonify(tournament.to_dict())


@admin.route('/<int:tournament_id>/rounds', methods=['POST'])
def create_round(tournament_id):
    data = request.get_json(silent=True) or {}
    strategy = get_strategy(data['strategy']) if data.get('strategy') else None
    round_ = round_service.create_round(tournament_id, strategy)
    broadcast_tournament_update(tournament_id, 'round_created', round_number=round_.round_number)
    return jsonify(round_.to_dict(include_matches=True)), 201


@admin.route('/<int:tournament_id>/rounds/<int:round_id>/start', methods=['POST'])
def start_round(tournament_id, round_id):
    round_ = round_service.start_round(round_id, tournament_id)
    broadcast_tournament_update(tournament_id, 'round_started', round_number=round_.round_number)
    return jsonify(round_.to_dict())


@admin.route('/<int:tournament_id>/rounds/<int:round_id>/lock', methods=['POST'])
def lock_round(tournament_id, round_id):
    round_ = round_service.lock_round(round_id, tournament_id)
    broadcast_tournament_update(tournament_id, 'round_locked', round_number=round_.round_number)
    return jsonify(round_.to_dict())
