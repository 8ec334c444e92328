from conftest import NAMESPACE, QUESTIONS


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_unknown_session_summary(client):
    res = client.get('/api/sessions/ZZZZ')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Game not found'}


def test_session_summary(client, make_sio_client):
    organizer = make_sio_client()
    ack = organizer.emit('createSession', {
        'timelineDays': 5, 'location': 'Bristol', 'questions': QUESTIONS, 'password': 'hunt',
    }, namespace=NAMESPACE, callback=True)
    code = ack['gameKey']

    res = client.get(f'/api/sessions/{code.lower()}')
    assert res.status_code == 200
    summary = res.get_json()
    assert summary == {
        'gameKey': code,
        'status': 'waiting',
        'location': 'Bristol',
        'timelineDays': 5,
        'questionCount': 2,
        'playerCount': 0,
        'passwordRequired': True,
    }


def test_apps_do_not_share_sessions(flask_app):
    from hunt import create_app
    from conftest import TestConfig
    other = create_app(TestConfig)
    assert other.extensions['hunt'] is not flask_app.extensions['hunt']
    other.extensions['hunt'].create_session('org', 1, 'Bath', QUESTIONS)
    assert len(flask_app.extensions['hunt'].registry) == 0
