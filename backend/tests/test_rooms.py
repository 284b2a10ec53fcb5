import pytest

from wordbomb.errors import AlreadyJoined, InvalidRequest, NameTaken, RoomFull, RoomNotFound
from wordbomb.models import Phase, Room, generate_room_code
from wordbomb.services.game.countdown import CountdownService
from wordbomb.services.game.registry import RoomRegistry


class SequenceRng:
    def __init__(self, values):
        self.values = list(values)

    def randint(self, low, high):
        return self.values.pop(0)


def _registry(rng=None):
    countdown = CountdownService(lambda code, token: False, autostart=False)
    return RoomRegistry(countdown, rng=rng)


def test_create_room_sets_up_host_and_code(coordinator):
    room = coordinator.create_room('sid-host')
    assert len(room.code) == 6 and room.code.isdigit()
    assert room.phase is Phase.SETUP
    assert room.is_host('sid-host')
    assert room.players == {}
    assert coordinator.registry.room_code_for('sid-host') == room.code


def test_room_code_regenerates_on_collision():
    assert generate_room_code({'123456'}, SequenceRng([123456, 123456, 654321])) == '654321'


def test_registry_never_hands_out_a_live_code():
    registry = _registry(SequenceRng([111111, 111111, 222222]))
    first = registry.create_room('a')
    second = registry.create_room('b')
    assert (first.code, second.code) == ('111111', '222222')


def test_deleted_room_code_is_freed():
    registry = _registry(SequenceRng([111111, 111111]))
    room = registry.create_room('a')
    assert registry.delete_room(room.code)
    assert room.closed
    assert registry.room_code_for('a') is None
    again = registry.create_room('b')
    assert again.code == '111111'
    assert not registry.delete_room('999999')


def test_get_room_unknown_code():
    with pytest.raises(RoomNotFound):
        _registry().get_room('000000')


def test_join_adds_player_and_broadcasts(coordinator, gateway):
    code = coordinator.create_room('sid-a').code
    room, player = coordinator.join_room('sid-a', code, 'A')
    assert player.lives == 3 and not player.eliminated
    assert list(room.players) == ['sid-a']
    assert gateway.names()[-2:] == ['players-updated', 'player-joined']
    assert gateway.last('player-joined')['message'] == 'A joined the game'
    assert gateway.subscriptions[code] == {'sid-a'}


def test_join_unknown_room(coordinator):
    with pytest.raises(RoomNotFound):
        coordinator.join_room('sid-x', '000000', 'X')


def test_join_requires_a_name(coordinator):
    code = coordinator.create_room('sid-a').code
    with pytest.raises(InvalidRequest):
        coordinator.join_room('sid-a', code, '   ')
    with pytest.raises(InvalidRequest):
        coordinator.join_room('sid-a', None, 'A')


def test_capacity_is_enforced(coordinator):
    code = coordinator.create_room('sid-0').code
    for i in range(8):
        coordinator.join_room(f'sid-{i}', code, f'P{i}')
    with pytest.raises(RoomFull):
        coordinator.join_room('sid-9', code, 'Late')
    room = coordinator.registry.get_room(code)
    assert len(room.players) == room.settings.max_players
    assert coordinator.registry.room_code_for('sid-9') is None


def test_duplicate_name_is_rejected(coordinator):
    code = coordinator.create_room('sid-a').code
    coordinator.join_room('sid-a', code, 'Sara')
    with pytest.raises(NameTaken):
        coordinator.join_room('sid-b', code, 'Sara')
    # exact, case-sensitive match
    coordinator.join_room('sid-c', code, 'sara')
    names = [p.name for p in coordinator.registry.get_room(code).players.values()]
    assert names == ['Sara', 'sara']


def test_same_connection_cannot_join_twice(coordinator):
    code = coordinator.create_room('sid-a').code
    coordinator.join_room('sid-a', code, 'A')
    with pytest.raises(AlreadyJoined):
        coordinator.join_room('sid-a', code, 'A2')


def test_last_player_leaving_deletes_room(coordinator, gateway):
    code = coordinator.create_room('sid-a').code
    coordinator.join_room('sid-a', code, 'A')
    gateway.clear()
    assert coordinator.disconnect('sid-a')
    assert code not in coordinator.registry
    assert gateway.events == []
    assert not coordinator.disconnect('sid-a')


def test_creator_leaving_before_join_deletes_empty_room(coordinator):
    code = coordinator.create_room('sid-a').code
    coordinator.disconnect('sid-a')
    assert code not in coordinator.registry


def test_host_leaving_promotes_earliest_joined(coordinator, gateway, lobby):
    gateway.clear()
    coordinator.disconnect('sid-a')
    room = coordinator.registry.get_room(lobby)
    assert room.host_connection_id == 'sid-b'
    assert gateway.names() == ['players-updated', 'player-left', 'host-changed']
    assert gateway.events[-1] == ('conn', 'sid-b', 'host-changed', {'isHost': True})
    assert gateway.last('player-left')['connectionId'] == 'sid-a'
    assert [p['name'] for p in gateway.last('players-updated')] == ['B', 'C']


def test_non_host_leaving_keeps_host(coordinator, gateway, lobby):
    gateway.clear()
    coordinator.disconnect('sid-c')
    room = coordinator.registry.get_room(lobby)
    assert room.host_connection_id == 'sid-a'
    assert 'host-changed' not in gateway.names()


def test_creating_a_new_room_leaves_the_old_one(coordinator):
    first = coordinator.create_room('sid-a').code
    coordinator.join_room('sid-a', first, 'A')
    second = coordinator.create_room('sid-a').code
    assert first not in coordinator.registry
    assert coordinator.registry.room_code_for('sid-a') == second


def test_joining_another_room_leaves_the_old_one(coordinator, lobby):
    other = coordinator.create_room('sid-z').code
    coordinator.join_room('sid-c', other, 'C')
    assert 'sid-c' not in coordinator.registry.get_room(lobby).players
    assert coordinator.registry.room_code_for('sid-c') == other


def test_earliest_player_uses_join_order():
    room = Room('123456', 'h')
    assert room.earliest_player() is None
    assert room.index_of('missing') == -1


def test_failed_join_elsewhere_keeps_current_seat(coordinator, gateway, lobby):
    other = coordinator.create_room('sid-x').code
    coordinator.join_room('sid-x', other, 'C')
    gateway.clear()
    with pytest.raises(NameTaken):
        coordinator.join_room('sid-c', other, 'C')
    assert 'sid-c' in coordinator.registry.get_room(lobby).players
    assert coordinator.registry.room_code_for('sid-c') == lobby
    assert gateway.events == []


def test_full_room_rejection_leaves_running_game_alone(coordinator, lobby):
    coordinator.start_game('sid-a', lobby)
    other = coordinator.create_room('sid-0').code
    for i in range(8):
        coordinator.join_room(f'sid-{i}', other, f'P{i}')
    with pytest.raises(RoomFull):
        coordinator.join_room('sid-a', other, 'A')
    room = coordinator.registry.get_room(lobby)
    assert list(room.players) == ['sid-a', 'sid-b', 'sid-c']
    assert room.is_host('sid-a')
    assert room.phase is Phase.PLAYING
    assert room.current_player().name == 'A'


def test_names_are_compared_as_given(coordinator):
    code = coordinator.create_room('sid-a').code
    coordinator.join_room('sid-a', code, 'Sara')
    _, player = coordinator.join_room('sid-b', code, 'Sara ')
    assert player.name == 'Sara '


def test_no_rooms_left_behind(coordinator, lobby):
    assert len(coordinator.registry) == 1
    for sid in ('sid-a', 'sid-b', 'sid-c'):
        coordinator.disconnect(sid)
    assert len(coordinator.registry) == 0
