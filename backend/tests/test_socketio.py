def _post_hole(client, match_id, hole=1):
    return client.post('/api/scores', json={
        'match_id': match_id, 'hole_number': hole, 'aviator_score': 3, 'producer_score': 4,
    })


def _names(sio_client):
    return [pkt['name'] for pkt in sio_client.get_received('/ws')]


def _subscribe(sio_client, tournament_id):
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    sio_client.emit('subscribe', {'tournament_id': tournament_id}, namespace='/ws')


def test_socket_connect_and_subscribe(sio_client, tournament):
    _subscribe(sio_client, tournament.id)
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)
    subscribed = [pkt for pkt in received if pkt['name'] == 'subscribed']
    assert subscribed[0]['args'][0] == {'room': f'tournament:{tournament.id}'}


def test_subscribe_needs_a_tournament(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('subscribe', {}, namespace='/ws')
    assert 'error' in _names(sio_client)


def test_ping(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'t': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert received[0]['name'] == 'pong'
    assert received[0]['args'][0] == {'t': 1}


def test_score_post_is_broadcast(admin_client, sio_client, tournament, singles_match):
    match = singles_match()
    _subscribe(sio_client, tournament.id)
    sio_client.get_received('/ws')  # flush

    res = _post_hole(admin_client, match.id)
    assert res.status_code == 200
    received = sio_client.get_received('/ws')
    names = [pkt['name'] for pkt in received]
    assert names == ['score-updated', 'match-updated', 'round-updated', 'tournament-updated']
    match_event = received[1]['args'][0]
    assert match_event['id'] == match.id
    assert match_event['leading_team'] == 'aviators'


def test_other_tournaments_do_not_hear_it(admin_client, sio_client, tournament, singles_match):
    match = singles_match()
    _subscribe(sio_client, tournament.id + 1)
    sio_client.get_received('/ws')
    assert _post_hole(admin_client, match.id).status_code == 200
    assert _names(sio_client) == []


def test_unsubscribed_clients_stop_receiving(admin_client, sio_client, tournament, singles_match):
    match = singles_match()
    _subscribe(sio_client, tournament.id)
    sio_client.emit('unsubscribe', {'tournament_id': tournament.id}, namespace='/ws')
    assert 'unsubscribed' in _names(sio_client)
    assert _post_hole(admin_client, match.id).status_code == 200
    assert _names(sio_client) == []
