def _create(client, name='Club Open', rounds=3, players=('Alice', 'Bob', 'Cara', 'Dan')):
    res = client.post('/api/admin/tournaments', json={'name': name, 'total_rounds': rounds})
    assert res.status_code == 201
    tournament = res.get_json()
    for player in players:
        res = client.post(f"/api/tournaments/{tournament['id']}/players", json={'name': player})
        assert res.status_code == 201
    return tournament


def test_create_and_fetch_tournament(client):
    tournament = _create(client)
    assert tournament['status'] == 'CREATED'
    assert tournament['current_round'] == 0

    res = client.get(f"/api/tournaments/{tournament['id']}")
    assert res.status_code == 200
    detail = res.get_json()
    assert detail['total_players'] == 4
    assert detail['active_players'] == 4

    listed = client.get('/api/tournaments').get_json()
    assert [t['id'] for t in listed] == [tournament['id']]


def test_errors_render_kind_and_details(client):
    res = client.get('/api/tournaments/999')
    assert res.status_code == 404
    body = res.get_json()
    assert body['kind'] == 'TournamentNotFound'
    assert body['tournament_id'] == 999

    res = client.post('/api/admin/tournaments', json={'name': 'Cup'})
    assert res.status_code == 400
    assert res.get_json()['kind'] == 'ValidationError'

    _create(client, name='Cup', players=())
    res = client.post('/api/admin/tournaments', json={'name': 'Cup', 'total_rounds': 2})
    assert res.status_code == 409
    assert res.get_json()['kind'] == 'DuplicateTournamentName'


def test_full_round_flow(client):
    tid = _create(client)['id']

    res = client.post(f'/api/admin/tournaments/{tid}/rounds')
    assert res.status_code == 201
    round_ = res.get_json()
    assert round_['round_number'] == 1
    assert round_['status'] == 'PENDING'
    assert len(round_['matches']) == 2

    # can't open round 2 yet
    res = client.post(f'/api/admin/tournaments/{tid}/rounds')
    assert res.status_code == 409
    body = res.get_json()
    assert body['kind'] == 'PreviousRoundIncomplete'
    assert body['pending'] == 2

    res = client.post(f"/api/admin/tournaments/{tid}/rounds/{round_['id']}/start")
    assert res.get_json()['status'] == 'IN_PROGRESS'

    res = client.post(f"/api/admin/tournaments/{tid}/rounds/{round_['id']}/lock")
    assert res.status_code == 409
    assert res.get_json()['kind'] == 'RoundIncomplete'

    first, second = round_['matches']
    res = client.post(f'/api/tournaments/{tid}/matches/result', json={'match_id': first['id'], 'result': 'draw'})
    assert res.status_code == 200
    assert res.get_json()['result'] == 'DRAW'
    res = client.post(f'/api/tournaments/{tid}/matches/result', json={
        'match_id': second['id'], 'result': 'PLAYER2_WIN', 'winner_id': second['player2_id'],
    })
    assert res.get_json()['winner_id'] == second['player2_id']

    # resubmission is rejected
    res = client.post(f'/api/tournaments/{tid}/matches/result', json={'match_id': first['id'], 'result': 'DRAW'})
    assert res.status_code == 409
    assert res.get_json()['kind'] == 'MatchAlreadyDecided'

    status = client.get(f"/api/tournaments/{tid}/rounds/{round_['id']}/status").get_json()
    assert status['pending_matches'] == 0
    assert status['locked'] is False

    res = client.post(f"/api/admin/tournaments/{tid}/rounds/{round_['id']}/lock")
    assert res.get_json()['status'] == 'COMPLETED'
    status = client.get(f"/api/tournaments/{tid}/rounds/{round_['id']}/status").get_json()
    assert status['locked'] is True

    res = client.post(f'/api/admin/tournaments/{tid}/rounds')
    assert res.status_code == 201
    assert res.get_json()['round_number'] == 2

    rounds = client.get(f'/api/tournaments/{tid}/rounds').get_json()
    assert [r['round_number'] for r in rounds] == [1, 2]

    matches = client.get(f"/api/tournaments/{tid}/rounds/{round_['id']}/matches").get_json()
    assert all(m['is_completed'] for m in matches)
    match = client.get(f"/api/tournaments/{tid}/matches/{first['id']}").get_json()
    assert match['result'] == 'DRAW'


def test_result_validation_over_http(client):
    tid = _create(client, players=('Alice', 'Bob'))['id']
    match = client.post(f'/api/admin/tournaments/{tid}/rounds').get_json()['matches'][0]

    res = client.post(f'/api/tournaments/{tid}/matches/result', json={'result': 'DRAW'})
    assert res.status_code == 400

    res = client.post(f'/api/tournaments/{tid}/matches/result', json={
        'match_id': match['id'], 'result': 'PLAYER1_WIN', 'winner_id': 12345,
    })
    assert res.status_code == 400
    assert res.get_json()['kind'] == 'WinnerNotParticipant'

    res = client.post(f'/api/tournaments/{tid}/matches/result', json={'match_id': match['id'], 'result': 'MAYBE'})
    assert res.get_json()['kind'] == 'InvalidOutcome'

    res = client.post(f'/api/tournaments/{tid}/matches/result', json={'match_id': 4242, 'result': 'DRAW'})
    assert res.status_code == 404


def test_standings_endpoints(client):
    tid = _create(client, players=('Alice', 'Bob', 'Cara'))['id']
    round_ = client.post(f'/api/admin/tournaments/{tid}/rounds').get_json()
    match = round_['matches'][0]
    client.post(f'/api/tournaments/{tid}/matches/result', json={
        'match_id': match['id'], 'result': 'PLAYER1_WIN', 'winner_id': match['player1_id'],
    })

    table = client.get(f'/api/tournaments/{tid}/standings').get_json()
    assert table['current_round'] == 1
    scores = {e['player_id']: e['score'] for e in table['standings']}
    assert scores[match['player1_id']] == 1.0
    assert scores[match['player2_id']] == 0.0
    assert scores[round_['bye_player_id']] == 1.0

    before = client.get(f'/api/tournaments/{tid}/standings?round=0').get_json()
    assert all(e['score'] == 0.0 for e in before['standings'])

    res = client.get(f'/api/tournaments/{tid}/standings?round=abc')
    assert res.status_code == 400

    entry = client.get(f"/api/tournaments/{tid}/standings/players/{match['player1_id']}").get_json()
    assert entry['score'] == 1.0
    assert entry['rank'] in (1, 2)


def test_roster_endpoints(client):
    tid = _create(client, players=('Alice', 'Bob', 'Cara'))['id']
    players = client.get(f'/api/tournaments/{tid}/players').get_json()
    removed = client.delete(f"/api/tournaments/{tid}/players/{players[0]['id']}").get_json()
    assert removed['active'] is False

    active = client.get(f'/api/tournaments/{tid}/players?active=true').get_json()
    assert len(active) == 2

    pairing = client.get(f'/api/tournaments/{tid}/pairing').get_json()
    assert pairing == {'tournament_id': tid, 'strategy': 'SWISS', 'active_players': 2, 'can_pair': True}

    back = client.post(f"/api/tournaments/{tid}/players/{players[0]['id']}/reactivate").get_json()
    assert back['active'] is True

    res = client.post(f'/api/tournaments/{tid}/players', json={})
    assert res.status_code == 400


def test_tournament_status_endpoints(client):
    tid = _create(client)['id']
    assert client.post(f'/api/admin/tournaments/{tid}/start').get_json()['status'] == 'IN_PROGRESS'
    assert client.post(f'/api/admin/tournaments/{tid}/pause').get_json()['status'] == 'PAUSED'
    assert client.post(f'/api/admin/tournaments/{tid}/resume').get_json()['status'] == 'IN_PROGRESS'
    assert client.post(f'/api/admin/tournaments/{tid}/finish').get_json()['status'] == 'FINISHED'

    res = client.post(f'/api/admin/tournaments/{tid}/start')
    assert res.status_code == 409
    assert res.get_json()['kind'] == 'InvalidTournamentState'

    res = client.post(f'/api/admin/tournaments/{tid}/explode')
    assert res.status_code == 404


def test_create_round_with_strategy_override(client):
    tid = _create(client)['id']
    res = client.post(f'/api/admin/tournaments/{tid}/rounds', json={'strategy': 'round_robin'})
    assert res.status_code == 201

    res = client.post(f'/api/admin/tournaments/{tid}/rounds', json={'strategy': 'knockout'})
    assert res.status_code == 400
    assert res.get_json()['kind'] == 'UnknownPairingStrategy'


def test_standings_routes_respond_for_fresh_tournament(client):
    tid = _create(client, players=('Alice', 'Bob'))['id']
    res = client.get(f'/api/tournaments/{tid}/standings')
    assert res.status_code == 200
    assert [e['rank'] for e in res.get_json()['standings']] == [1, 2]

    players = client.get(f'/api/tournaments/{tid}/players').get_json()
    res = client.get(f"/api/tournaments/{tid}/standings/players/{players[1]['id']}")
    assert res.status_code == 200
    assert res.get_json()['rank'] == 2
