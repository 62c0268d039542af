from conftest import ADMIN_PASSCODE
from scoreboard import db
from scoreboard.models import Tournament, User


def _add_player(client, name, team):
    res = client.post('/api/players', json={'name': name, 'team': team})
    assert res.status_code == 201
    return res.get_json()


def _setup_singles(client):
    """Create a Singles round and one match through the API."""
    round_ = client.post('/api/rounds', json={'name': 'Day 1 Singles', 'match_type': 'singles'})
    assert round_.status_code == 201
    round_ = round_.get_json()
    amelia = _add_player(client, 'Amelia', 'aviators')
    mel = _add_player(client, 'Mel', 'producers')
    res = client.post('/api/matches', json={
        'round_id': round_['id'],
        'name': 'Match 1',
        'aviator_player_ids': [amelia['id']],
        'producer_player_ids': [mel['id']],
    })
    assert res.status_code == 201
    return round_, res.get_json(), amelia, mel


def _post_hole(client, match_id, hole, aviator, producer):
    return client.post('/api/scores', json={
        'match_id': match_id,
        'hole_number': hole,
        'aviator_score': aviator,
        'producer_score': producer,
    })


def test_index(client):
    res = client.get('/api/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_writes_require_login(client, tournament):
    res = client.post('/api/scores', json={'match_id': 1, 'hole_number': 1, 'aviator_score': 4})
    assert res.status_code == 401
    assert client.post('/api/rounds', json={'name': 'R', 'match_type': 'Singles'}).status_code == 401


def test_bad_login(client, teams):
    res = client.post('/api/login', json={'username': 'nobody', 'passcode': 'nope'})
    assert res.status_code == 401


def test_seed_admin_must_change_passcode(client, teams, tournament):
    admin = User(username='captain', is_admin=True, needs_password_change=True)
    admin.set_passcode('1111')
    db.session.add(admin)
    db.session.commit()

    res = client.post('/api/login', json={'username': 'captain', 'password': '1111'})
    assert res.status_code == 200
    assert res.get_json()['user']['needs_password_change'] is True

    res = client.post('/api/players', json={'name': 'Amelia', 'team': 'aviators'})
    assert res.status_code == 403
    assert res.get_json()['error'] == 'Password change required'

    res = client.post('/api/change-password', json={'current_passcode': '0000', 'new_passcode': '9876'})
    assert res.status_code == 401
    res = client.post('/api/change-password', json={'current_passcode': '1111', 'new_passcode': '12'})
    assert res.status_code == 400
    res = client.post('/api/change-password', json={'current_passcode': '1111', 'new_passcode': '9876'})
    assert res.status_code == 200
    assert res.get_json()['user']['needs_password_change'] is False

    assert client.post('/api/players', json={'name': 'Amelia', 'team': 'aviators'}).status_code == 201


def test_non_admin_is_forbidden(client, teams, tournament):
    viewer = User(username='viewer', is_admin=False, needs_password_change=False)
    viewer.set_passcode(ADMIN_PASSCODE)
    db.session.add(viewer)
    db.session.commit()
    client.post('/api/login', json={'username': 'viewer', 'passcode': ADMIN_PASSCODE})
    res = client.post('/api/rounds', json={'name': 'R', 'match_type': 'Singles'})
    assert res.status_code == 403


def test_round_format_is_canonical(admin_client):
    res = admin_client.post('/api/rounds', json={'name': 'Day 2', 'match_type': '2-man scramble'})
    assert res.status_code == 201
    assert res.get_json()['match_type'] == '2-man Team Scramble'

    res = admin_client.post('/api/rounds', json={'name': 'Day 3', 'match_type': 'Foursomes'})
    assert res.status_code == 400

    rounds = admin_client.get('/api/rounds').get_json()
    assert [r['name'] for r in rounds] == ['Day 2']


def test_match_roster_is_validated(admin_client):
    round_, match, amelia, mel = _setup_singles(admin_client)
    chuck = _add_player(admin_client, 'Chuck', 'aviators')
    walt = _add_player(admin_client, 'Walt', 'producers')

    res = admin_client.post('/api/matches', json={
        'round_id': round_['id'], 'name': 'Match 2',
        'aviator_player_ids': [chuck['id'], amelia['id']], 'producer_player_ids': [walt['id']],
    })
    assert res.status_code == 400

    res = admin_client.post('/api/matches', json={
        'round_id': round_['id'], 'name': 'Match 2',
        'aviator_player_ids': [amelia['id']], 'producer_player_ids': [walt['id']],
    })
    assert res.status_code == 400
    assert 'already playing' in res.get_json()['error']

    res = admin_client.post('/api/matches', json={
        'round_id': 9999, 'name': 'Match 2',
        'aviator_player_ids': [chuck['id']], 'producer_player_ids': [walt['id']],
    })
    assert res.status_code == 404


def test_score_entry_flow(admin_client):
    round_, match, amelia, mel = _setup_singles(admin_client)

    res = _post_hole(admin_client, match['id'], 1, 3, 4)
    assert res.status_code == 200
    body = res.get_json()
    assert body['score']['match_status'] == 'A1'
    assert body['match']['status'] == 'in_progress'
    assert body['round']['pending_aviator_score'] == 1.0
    assert body['tournament']['pending_aviator_score'] == 1.0
    assert body['completed_now'] is False

    for hole in range(2, 10):
        body = _post_hole(admin_client, match['id'], hole, 3, 4).get_json()
    assert body['completed_now'] is True
    assert body['stats_applied'] is True
    assert body['match']['result'] == '9&9'
    assert body['match']['locked'] is True
    assert body['round']['aviator_score'] == 1.0
    assert body['round']['is_complete'] is True
    assert body['tournament']['aviator_score'] == 1.0

    res = _post_hole(admin_client, match['id'], 10, 3, 4)
    assert res.status_code == 409

    scores = admin_client.get(f"/api/scores?match_id={match['id']}").get_json()
    assert len(scores) == 9
    detail = admin_client.get(f"/api/matches/{match['id']}").get_json()
    assert [p['result'] for p in detail['participants']] == ['win', 'loss']

    stats = admin_client.get(f"/api/players/{amelia['id']}/stats").get_json()
    assert stats['player']['wins'] == 1
    assert stats['career']['total_wins'] == 1


def test_best_ball_player_scores(admin_client):
    round_ = admin_client.post('/api/rounds', json={'name': 'Best Ball', 'match_type': 'Best Ball'}).get_json()
    ids = {side: [_add_player(admin_client, f'{side}-{i}', side)['id'] for i in range(2)]
           for side in ('aviators', 'producers')}
    match = admin_client.post('/api/matches', json={
        'round_id': round_['id'], 'name': 'Match 1',
        'aviator_player_ids': ids['aviators'], 'producer_player_ids': ids['producers'],
    }).get_json()

    res = admin_client.post('/api/scores', json={
        'match_id': match['id'], 'hole_number': 1,
        'aviator_player_scores': [5, 4], 'producer_player_scores': [4, 6],
    })
    assert res.status_code == 200
    body = res.get_json()
    assert (body['score']['aviator_score'], body['score']['producer_score']) == (4, 4)
    assert body['score']['winning_team'] == 'tie'


def test_invalid_score_is_rejected(admin_client):
    round_, match, amelia, mel = _setup_singles(admin_client)
    assert _post_hole(admin_client, match['id'], 0, 3, 4).status_code == 400
    assert _post_hole(admin_client, match['id'], 1, 'four', 4).status_code == 400
    # Hole 2 before hole 1
    assert _post_hole(admin_client, match['id'], 2, 3, 4).status_code == 400
    assert _post_hole(admin_client, 9999, 1, 3, 4).status_code == 404
    res = admin_client.post('/api/scores', json={'hole_number': 1, 'aviator_score': 4})
    assert res.status_code == 400
    assert admin_client.get(f"/api/scores?match_id={match['id']}").get_json() == []


def test_override_and_unlock(admin_client):
    round_, match, amelia, mel = _setup_singles(admin_client)
    res = admin_client.post(f"/api/matches/{match['id']}/override",
                            json={'result': '3&2', 'winning_team': 'producers'})
    assert res.status_code == 200
    assert res.get_json()['match']['result'] == '3&2'

    res = admin_client.post(f"/api/matches/{match['id']}/override",
                            json={'result': 'AS'})
    assert res.status_code == 409

    res = admin_client.post(f"/api/matches/{match['id']}/unlock")
    assert res.status_code == 200
    body = res.get_json()['match']
    assert body['locked'] is False
    assert body['status'] == 'upcoming'
    assert admin_client.get(f"/api/players/{mel['id']}/stats").get_json()['player']['wins'] == 0

    res = admin_client.post(f"/api/matches/{match['id']}/unlock")
    assert res.status_code == 409


def test_player_in_a_match_cannot_be_deleted(admin_client):
    round_, match, amelia, mel = _setup_singles(admin_client)
    assert admin_client.delete(f"/api/players/{amelia['id']}").status_code == 409
    assert admin_client.delete(f"/api/matches/{match['id']}").status_code == 200
    assert admin_client.delete(f"/api/players/{amelia['id']}").status_code == 200


def test_round_with_matches_cannot_change_format(admin_client):
    round_, match, amelia, mel = _setup_singles(admin_client)
    res = admin_client.put(f"/api/rounds/{round_['id']}", json={'match_type': 'Best Ball'})
    assert res.status_code == 409
    res = admin_client.put(f"/api/rounds/{round_['id']}", json={'date': '2025-09-12'})
    assert res.status_code == 200
    assert res.get_json()['date'] == '2025-09-12'
    assert admin_client.delete(f"/api/rounds/{round_['id']}").status_code == 409


def test_conclude_writes_history(admin_client, tournament):
    round_, match, amelia, mel = _setup_singles(admin_client)
    for hole in range(1, 10):
        _post_hole(admin_client, match['id'], hole, 3, 4)

    res = admin_client.post(f'/api/tournaments/{tournament.id}/conclude', json={'location': 'Pinehurst'})
    assert res.status_code == 201
    history = res.get_json()
    assert history['winning_team'] == 'aviators'
    assert history['aviator_score'] == 1.0
    assert history['location'] == 'Pinehurst'
    assert db.session.get(Tournament, tournament.id).is_active is False

    res = admin_client.post(f'/api/tournaments/{tournament.id}/conclude')
    assert res.status_code == 409
    assert len(admin_client.get('/api/tournaments/history').get_json()) == 1


def test_create_activate_and_select_tournaments(admin_client, tournament):
    res = admin_client.post('/api/tournaments', json={'name': 'Next Cup', 'year': 2026, 'activate': True})
    assert res.status_code == 201
    new_id = res.get_json()['id']
    assert admin_client.get('/api/tournament').get_json()['id'] == new_id
    assert db.session.get(Tournament, tournament.id).is_active is False

    # Viewers can pin an older tournament for their session
    res = admin_client.post('/api/tournaments/select', json={'tournament_id': tournament.id})
    assert res.status_code == 200
    assert admin_client.get('/api/tournament').get_json()['id'] == tournament.id
    assert admin_client.get(f'/api/tournament?tournament_id={new_id}').get_json()['id'] == new_id

    assert admin_client.post('/api/tournaments', json={'name': '', 'year': 2026}).status_code == 400


def test_stats_views_and_reconcile(admin_client, tournament):
    round_, match, amelia, mel = _setup_singles(admin_client)
    for hole in range(1, 10):
        _post_hole(admin_client, match['id'], hole, 5, 4)

    rows = admin_client.get(f'/api/tournaments/{tournament.id}/stats').get_json()
    assert [(r['player_name'], r['points']) for r in rows] == [('Mel', 1.0), ('Amelia', 0.0)]

    res = admin_client.post('/api/admin/reconcile')
    assert res.status_code == 200
    assert res.get_json() == {'matches_replayed': 1}
    rows = admin_client.get(f'/api/tournaments/{tournament.id}/stats').get_json()
    assert rows[0]['wins'] == 1


def test_courses(admin_client):
    res = admin_client.post('/api/courses', json={
        'name': 'Pine Valley',
        'holes': [{'number': 1, 'par': 4, 'handicap_rank': 5}, {'number': 2, 'par': 3}],
    })
    assert res.status_code == 201
    assert res.get_json()['par'] == 7
    assert admin_client.post('/api/courses', json={'name': 'Pine Valley'}).status_code == 409
    courses = admin_client.get('/api/courses').get_json()
    assert [h['number'] for h in courses[0]['holes']] == [1, 2]

    res = admin_client.post('/api/rounds', json={
        'name': 'Day 1', 'match_type': 'Singles', 'course_id': courses[0]['id'],
    })
    assert res.get_json()['course_name'] == 'Pine Valley'


def test_teams_list_players(admin_client):
    _add_player(admin_client, 'Amelia', 'aviators')
    teams = admin_client.get('/api/teams').get_json()
    assert [t['short_name'] for t in teams] == ['aviators', 'producers']
    assert [p['name'] for p in teams[0]['players']] == ['Amelia']


def test_seed_reference_data_is_idempotent(flask_app):
    from scoreboard import seed_reference_data
    from scoreboard.models import Team
    for _ in range(2):
        seed_reference_data(flask_app.config)
        db.session.commit()
    assert Team.query.count() == 2
    admin = User.query.filter_by(username='superadmin').one()
    assert admin.is_admin and admin.needs_password_change
    assert admin.check_passcode('1111')
    active = Tournament.query.filter_by(is_active=True).all()
    assert len(active) == 1
    assert active[0].name.startswith('Test Cup ')


def test_reconcile_stats_command(flask_app, singles_match):
    from conftest import play_holes
    play_holes(singles_match().id, ['A'] * 9)
    result = flask_app.test_cli_runner().invoke(args=['reconcile-stats'])
    assert result.exit_code == 0
    assert 'Replayed 1 completed matches.' in result.output
