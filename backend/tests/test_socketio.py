def _names(events):
    return [e['name'] for e in events]


def test_socket_connect_and_join(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    assert 'connected' in _names(sio_client.get_received('/ws'))

    sio_client.emit('join_tournament', {'tournament_id': 7}, namespace='/ws')
    received = sio_client.get_received('/ws')
    joined = [e for e in received if e['name'] == 'joined']
    assert joined and joined[0]['args'][0] == {'room': 'tournament:7'}


def test_join_requires_tournament_id(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_tournament', {}, namespace='/ws')
    assert 'error' in _names(sio_client.get_received('/ws'))


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert received[0]['name'] == 'pong'
    assert received[0]['args'][0] == {'n': 1}


def test_writes_broadcast_to_tournament_room(client, sio_client):
    res = client.post('/api/admin/tournaments', json={'name': 'Live Cup', 'total_rounds': 2})
    tid = res.get_json()['id']

    sio_client.emit('join_tournament', {'tournament_id': tid}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    client.post(f'/api/tournaments/{tid}/players', json={'name': 'Alice'})
    client.post(f'/api/tournaments/{tid}/players', json={'name': 'Bob'})
    client.post(f'/api/admin/tournaments/{tid}/rounds')

    updates = [e['args'][0] for e in sio_client.get_received('/ws') if e['name'] == 'tournament_update']
    assert [u['event'] for u in updates] == ['player_added', 'player_added', 'round_created']
    assert all(u['tournament_id'] == tid for u in updates)
    assert updates[-1]['round_number'] == 1


def test_leave_stops_updates(client, sio_client):
    tid = client.post('/api/admin/tournaments', json={'name': 'Quiet Cup', 'total_rounds': 1}).get_json()['id']
    sio_client.emit('join_tournament', {'tournament_id': tid}, namespace='/ws')
    sio_client.emit('leave_tournament', {'tournament_id': tid}, namespace='/ws')
    assert 'left' in _names(sio_client.get_received('/ws'))

    client.post(f'/api/tournaments/{tid}/players', json={'name': 'Alice'})
    assert 'tournament_update' not in _names(sio_client.get_received('/ws'))
