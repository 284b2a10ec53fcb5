from flask import Blueprint, current_app, jsonify

from wordbomb.errors import GameRejection

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the word bomb game server!'})


@main.route('/api/rooms/<string:pin>', methods=['GET'])
def get_room_state(pin):
    """
    Returns a read-only snapshot of a live room.
    """
    coordinator = current_app.extensions['wordbomb']
    try:
        return jsonify(coordinator.snapshot(pin)), 200
    except GameRejection as exc:
        return jsonify({'error': str(exc)}), 404
