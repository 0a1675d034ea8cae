import pytest

from clubmate.errors import (
    DuplicateTournamentName,
    InvalidTournamentState,
    PlayerNotFound,
    PlayerNotInTournament,
    TournamentNotFound,
    ValidationError,
)
from clubmate.models import TournamentStatus
from clubmate.services.tournaments import management


def test_create_tournament(flask_app):
    tournament = management.create_tournament('  Spring Open ', '5')
    assert tournament.name == 'Spring Open'
    assert tournament.total_rounds == 5
    assert tournament.current_round == 0
    assert tournament.status == TournamentStatus.CREATED


@pytest.mark.parametrize('name,rounds', [('', 3), ('Cup', 0), ('Cup', 101), ('Cup', 'three'), ('Cup', None)])
def test_create_tournament_rejects_bad_input(flask_app, name, rounds):
    with pytest.raises(ValidationError):
        management.create_tournament(name, rounds)


def test_tournament_names_are_unique(flask_app):
    management.create_tournament('Cup', 3)
    with pytest.raises(DuplicateTournamentName):
        management.create_tournament('Cup', 4)


def test_status_transitions(make_tournament):
    tournament, _ = make_tournament()
    assert management.start_tournament(tournament.id).status == TournamentStatus.IN_PROGRESS
    with pytest.raises(InvalidTournamentState):
        management.start_tournament(tournament.id)
    assert management.pause_tournament(tournament.id).status == TournamentStatus.PAUSED
    with pytest.raises(InvalidTournamentState):
        management.pause_tournament(tournament.id)
    assert management.resume_tournament(tournament.id).status == TournamentStatus.IN_PROGRESS
    finished = management.finish_tournament(tournament.id)
    assert finished.is_finished
    with pytest.raises(InvalidTournamentState):
        management.resume_tournament(tournament.id)


def test_roster(make_tournament):
    tournament, players = make_tournament(players=3)
    other, strangers = make_tournament(players=1)

    management.deactivate_player(tournament.id, players[1].id)
    assert [p.id for p in management.list_players(tournament.id, active_only=True)] == [players[0].id, players[2].id]
    assert len(management.list_players(tournament.id)) == 3

    management.reactivate_player(tournament.id, players[1].id)
    assert len(management.list_players(tournament.id, active_only=True)) == 3

    with pytest.raises(PlayerNotInTournament):
        management.deactivate_player(tournament.id, strangers[0].id)
    with pytest.raises(PlayerNotFound):
        management.deactivate_player(tournament.id, 9999)
    with pytest.raises(ValidationError):
        management.add_player(tournament.id, '   ')
    with pytest.raises(TournamentNotFound):
        management.add_player(9999, 'Ghost')


def test_tournament_detail(make_tournament):
    tournament, players = make_tournament(players=4)
    management.deactivate_player(tournament.id, players[0].id)
    detail = management.tournament_detail(tournament.id)
    assert detail['total_players'] == 4
    assert detail['active_players'] == 3
    assert [t.id for t in management.list_tournaments()] == [tournament.id]
    with pytest.raises(TournamentNotFound):
        management.get_tournament(9999)
