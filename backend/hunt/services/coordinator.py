"""Single entry point for every session operation.

Each method validates its input, runs to completion under one lock and
returns the success fields of the acknowledgement. Failures are raised as
``HuntError`` and become failure acknowledgements at the socket layer.
"""
import logging
import threading
from functools import wraps

from hunt.errors import ValidationError
from hunt.models import Question
from hunt.services.answers import AnswerReview
from hunt.services.broadcast import BroadcastRouter
from hunt.services.membership import MembershipManager
from hunt.services.registry import SessionRegistry

logger = logging.getLogger(__name__)


def build_questions(raw):
    """Turn wire question dicts into ordered ``Question`` records."""
    if not isinstance(raw, list) or not raw:
        raise ValidationError('Please add at least one question.')
    questions = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationError(f'Question {idx + 1} is malformed')
        text = item.get('questionText')
        if not isinstance(text, str) or not text.strip():
            raise ValidationError(f'Question {idx + 1} needs question text')
        questions.append(Question(
            id=idx,
            text=text.strip(),
            category=item.get('category') or '',
            expected_answer=item.get('expectedAnswer') or '',
            image_url=item.get('imageUrl') or None,
            caption=item.get('caption') or '',
        ))
    return questions


def _check_password_type(password):
    if password is not None and not isinstance(password, str):
        raise ValidationError('Password must be text')


def _serialized(method):
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class SessionCoordinator:
    def __init__(self, transport, hasher=None, code_length=4):
        self.router = BroadcastRouter(transport)
        self.registry = SessionRegistry(self.router, code_length=code_length)
        self.hasher = hasher
        check = hasher.check_password_hash if hasher is not None else None
        self.membership = MembershipManager(self.registry, self.router, check_password=check)
        self.answers = AnswerReview(self.registry, self.router)
        self._lock = threading.RLock()

    # Session lifecycle

    @_serialized
    def create_session(self, sid, timeline_days, location, questions, password=None):
        if isinstance(timeline_days, bool) or not isinstance(timeline_days, int) or timeline_days < 1:
            raise ValidationError('Please enter timeline days and location.')
        if not isinstance(location, str) or not location.strip():
            raise ValidationError('Please enter timeline days and location.')
        parsed = build_questions(questions)
        _check_password_type(password)
        password_hash = None
        if password:
            if self.hasher is None:
                raise ValidationError('Game passwords are not supported')
            password_hash = self.hasher.generate_password_hash(password).decode('utf-8')
        session = self.registry.create_session(sid, timeline_days, location.strip(), parsed, password_hash)
        return {'gameKey': session.code}

    @_serialized
    def save_session(self, sid, code):
        session = self.registry.require_organizer(code, sid)
        logger.info(f"[session-save] code={session.code} (in-memory only)")
        return {}

    @_serialized
    def delete_session(self, sid, code):
        self.registry.delete_session(code, sid)
        return {}

    @_serialized
    def update_questions(self, sid, code, questions):
        session = self.registry.require_organizer(code, sid)
        self.registry.replace_questions(session, build_questions(questions))
        return {'questionCount': len(session.questions)}

    @_serialized
    def start_session(self, sid, code):
        session = self.registry.require_organizer(code, sid)
        self.registry.start(session)
        return {'status': session.status}

    @_serialized
    def advance_question(self, sid, code):
        session = self.registry.require_organizer(code, sid)
        return {'currentQuestionIndex': self.registry.advance(session)}

    @_serialized
    def finish_session(self, sid, code):
        session = self.registry.require_organizer(code, sid)
        self.registry.finish(session)
        return {'status': session.status}

    @_serialized
    def summary(self, code):
        session = self.registry.get_session(code)
        return session.summary() if session is not None else None

    @_serialized
    def get_state(self, sid, code):
        session = self.registry.require(code)
        if session.organizer_id == sid:
            return {'game': session.to_dict(include_answers=True), 'isOrganizer': True}
        return {'game': session.public_dict(), 'isOrganizer': False}

    # Membership

    @_serialized
    def join(self, sid, code, name, rejoin_code, team, password=None):
        _check_password_type(password)
        player = self.membership.join(code, sid, name, rejoin_code, team, password=password)
        return {'gameKey': self.registry.get_session(code).code, 'playerId': player.connection_id}

    @_serialized
    def rejoin(self, sid, code, rejoin_code):
        player, _ = self.membership.rejoin(code, sid, rejoin_code)
        return {
            'gameKey': self.registry.get_session(code).code,
            'playerId': player.connection_id,
            'playerName': player.name,
            'teamName': player.team,
        }

    @_serialized
    def leave(self, sid, code):
        self.membership.leave(code, sid)
        return {}

    @_serialized
    def disconnect(self, sid):
        # Organizer status wins: their sessions end outright
        self.registry.on_organizer_disconnect(sid)
        self.membership.disconnect(sid)

    # Answers

    @_serialized
    def submit_answer(self, sid, code, question_id, text=None, image_uri=None):
        answer = self.answers.submit(code, sid, question_id, text=text, image_uri=image_uri)
        return {'answerId': answer.id}

    @_serialized
    def review_answer(self, sid, code, answer_id, status):
        self.answers.review(code, sid, answer_id, status)
        return {}

    @_serialized
    def save_score(self, sid, code, answer_id, score):
        self.answers.score(code, sid, answer_id, score)
        return {}
