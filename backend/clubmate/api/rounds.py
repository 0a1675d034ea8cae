from flask import Blueprint, jsonify, request
from clubmate.services.tournaments import rounds as round_service
from clubmate.services.tournaments.results import Outcome, match_details, submit_result
from clubmate.socketio_events import broadcast_tournament_update
from clubmate.errors import ValidationError


rounds = Blueprint('rounds', __name__)


@rounds.route('/<int:tournament_id>/rounds', methods=['GET'])
def list_rounds(tournament_id):
    return jsonify([r.to_dict() for r in round_service.list_rounds(tournament_id)])


@rounds.route('/<int:tournament_id>/rounds/<int:round_id>', methods=['GET'])
def get_round(tournament_id, round_id):
    round_ = round_service.get_round(tournament_id, round_id)
    return jsonify(round_.to_dict(include_matches=True))


@rounds.route('/<int:tournament_id>/rounds/<int:round_id>/matches', methods=['GET'])
def get_round_matches(tournament_id, round_id):
    return jsonify([m.to_dict() for m in round_service.round_matches(tournament_id, round_id)])


@rounds.route('/<int:tournament_id>/rounds/<int:round_id>/status', methods=['GET'])
def get_round_status(tournament_id, round_id):
    return jsonify(round_service.round_status(round_id, tournament_id).to_dict())


@rounds.route('/<int:tournament_id>/matches/result', methods=['POST'])
def post_result(tournament_id):
    data = request.get_json(silent=True) or {}
    match_id = data.get('match_id')
    if match_id is None:
        raise ValidationError('match_id is required')
    try:
        match_id = int(match_id)
    except (TypeError, ValueError):
        raise ValidationError(f'match_id must be an integer, got {match_id!r}') from None

    view = submit_result(tournament_id, match_id, Outcome.from_payload(data))
    broadcast_tournament_update(tournament_id, 'result_submitted', match_id=match_id)
    return jsonify(view)


@rounds.route('/<int:tournament_id>/matches/<int:match_id>', methods=['GET'])
def get_match(tournament_id, match_id):
    return jsonify(match_details(tournament_id, match_id))
