from functools import wraps
from typing import Any, Dict

from flask import current_app, request
from flask_socketio import emit

from hunt import socketio
from hunt.errors import HuntError, ValidationError
from hunt.services import SessionCoordinator


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _coordinator() -> SessionCoordinator:
    return current_app.extensions['hunt']


def _as_int(value):
    """Accept ints and numeric strings the way clients send them."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        digits = value.strip().lstrip('-')
        if digits.isascii() and digits.isdecimal():
            return int(value)
    return value


def acknowledged(handler):
    """Run a request handler and return its result as the Socket.IO ack."""
    @wraps(handler)
    def wrapper(data=None):
        if data is None:
            data = {}
        try:
            if not isinstance(data, dict):
                raise ValidationError('Request payload must be an object')
            result = handler(data)
        except HuntError as exc:
            current_app.logger.info(f"[rejected] event={handler.__name__} sid={_get_sid()} error={exc.code} message={exc.message!r}")
            return exc.to_ack()
        response: Dict[str, Any] = {'success': True}
        response.update(result or {})
        return response
    return wrapper


def handle_connect(auth=None):
    emit('connected', {'id': _get_sid()})


def handle_disconnect(reason=None):
    current_app.logger.info(f"[socket-disconnect] sid={_get_sid()}")
    _coordinator().disconnect(_get_sid())


@acknowledged
def handle_create_session(data):
    return _coordinator().create_session(
        _get_sid(),
        _as_int(data.get('timelineDays')),
        data.get('location'),
        data.get('questions'),
        password=data.get('password'),
    )


@acknowledged
def handle_save_session(data):
    return _coordinator().save_session(_get_sid(), data.get('gameKey'))


@acknowledged
def handle_delete_session(data):
    return _coordinator().delete_session(_get_sid(), data.get('gameKey'))


@acknowledged
def handle_update_questions(data):
    return _coordinator().update_questions(_get_sid(), data.get('gameKey'), data.get('questions'))


@acknowledged
def handle_start_session(data):
    return _coordinator().start_session(_get_sid(), data.get('gameKey'))


@acknowledged
def handle_advance_question(data):
    return _coordinator().advance_question(_get_sid(), data.get('gameKey'))


@acknowledged
def handle_finish_session(data):
    return _coordinator().finish_session(_get_sid(), data.get('gameKey'))


@acknowledged
def handle_get_state(data):
    return _coordinator().get_state(_get_sid(), data.get('gameKey'))


@acknowledged
def handle_join(data):
    return _coordinator().join(
        _get_sid(),
        data.get('gameKey'),
        data.get('playerName'),
        data.get('rejoinCode'),
        data.get('teamName'),
        password=data.get('password'),
    )


@acknowledged
def handle_rejoin(data):
    return _coordinator().rejoin(_get_sid(), data.get('gameKey'), data.get('rejoinCode'))


@acknowledged
def handle_leave(data):
    return _coordinator().leave(_get_sid(), data.get('gameKey'))


@acknowledged
def handle_submit_answer(data):
    return _coordinator().submit_answer(
        _get_sid(),
        data.get('gameKey'),
        _as_int(data.get('questionId')),
        text=data.get('submittedTextAnswer'),
        image_uri=data.get('submittedImageUri'),
    )


@acknowledged
def handle_review_answer(data):
    return _coordinator().review_answer(
        _get_sid(), data.get('gameKey'), _as_int(data.get('answerId')), data.get('status'),
    )


@acknowledged
def handle_save_score(data):
    return _coordinator().save_score(
        _get_sid(), data.get('gameKey'), _as_int(data.get('answerId')), _as_int(data.get('score')),
    )


# Inbound event name -> handler. Older clients use the *Game spellings.
EVENT_HANDLERS = {
    'createSession': handle_create_session,
    'createGame': handle_create_session,
    'saveSession': handle_save_session,
    'saveGame': handle_save_session,
    'deleteSession': handle_delete_session,
    'deleteGame': handle_delete_session,
    'updateQuestions': handle_update_questions,
    'startSession': handle_start_session,
    'advanceQuestion': handle_advance_question,
    'finishSession': handle_finish_session,
    'getState': handle_get_state,
    'join': handle_join,
    'joinGame': handle_join,
    'rejoin': handle_rejoin,
    'rejoinGame': handle_rejoin,
    'leaveSession': handle_leave,
    'submitAnswer': handle_submit_answer,
    'reviewAnswer': handle_review_answer,
    'saveScore': handle_save_score,
}


def handle_unexpected_error(exc):
    current_app.logger.exception(f"[socket-error] sid={_get_sid()} error={exc!r}")
    return {'success': False, 'message': 'Internal server error', 'error': 'internal'}


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_error_default(handle_unexpected_error)
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    for event, handler in EVENT_HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
