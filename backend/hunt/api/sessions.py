from flask import Blueprint, current_app, jsonify

sessions = Blueprint('sessions', __name__)


@sessions.route('/<string:game_code>', methods=['GET'])
def get_session_summary(game_code):
    """
    Returns the public summary of a live session so clients can check a code
    before opening a socket.
    """
    summary = current_app.extensions['hunt'].summary(game_code)
    if summary is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(summary), 200
