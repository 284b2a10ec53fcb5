def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_unknown_room_state(client):
    res = client.get('/api/rooms/000000')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Room not found'}


def test_room_state(client, sio_factory):
    host, guest = sio_factory(), sio_factory()
    pin = host.emit('create-room', callback=True)['pin']
    host.emit('join-room', {'pin': pin, 'playerName': 'Alice'}, callback=True)
    guest.emit('join-room', {'pin': pin, 'playerName': 'Bob'}, callback=True)

    res = client.get(f'/api/rooms/{pin}')
    assert res.status_code == 200
    state = res.get_json()
    assert state['pin'] == pin
    assert state['phase'] == 'setup'
    assert [p['name'] for p in state['players']] == ['Alice', 'Bob']
    assert state['currentPlayer'] is None
    assert state['usedWords'] == []
    assert state['settings'] == {'maxPlayers': 8, 'initialLives': 3, 'initialTimer': 10}

    host.emit('start-game', {'pin': pin}, callback=True)
    state = client.get(f'/api/rooms/{pin}').get_json()
    assert state['phase'] == 'playing'
    assert state['currentPlayer']['name'] == 'Alice'
    assert state['activeCombination']
    assert state['timeRemaining'] == 10
