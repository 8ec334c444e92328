"""Session registry: owns every live session of one application.

A session lives exactly as long as its organizer connection. Deleting the
session or losing the organizer removes it and tells the whole audience.
"""
import logging
from typing import Dict, List, Optional

from hunt.errors import NotFound, Unauthorized, ValidationError
from hunt.models import FINISHED, PLAYING, WAITING, Question, Session
from hunt.services.codes import generate_game_code

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(self, router, code_length: int = 4):
        self.router = router
        self.code_length = code_length
        self._sessions: Dict[str, Session] = {}

    def __contains__(self, code) -> bool:
        return self.get_session(code) is not None

    def __len__(self) -> int:
        return len(self._sessions)

    def codes(self) -> List[str]:
        return list(self._sessions)

    def create_session(self, organizer_id: str, timeline_days: int, location: str,
                       questions: List[Question], password_hash: Optional[str] = None) -> Session:
        code = generate_game_code(self._sessions, length=self.code_length)
        session = Session(
            code=code,
            organizer_id=organizer_id,
            timeline_days=timeline_days,
            location=location,
            questions=list(questions),
            password_hash=password_hash,
        )
        self._sessions[code] = session
        logger.info(f"[session-create] code={code} organizer={organizer_id} questions={len(session.questions)}")
        return session

    def get_session(self, code) -> Optional[Session]:
        if not isinstance(code, str):
            return None
        return self._sessions.get(code.strip().upper())

    def require(self, code) -> Session:
        session = self.get_session(code)
        if session is None:
            raise NotFound()
        return session

    def require_organizer(self, code, requester_id: str) -> Session:
        session = self.require(code)
        if session.organizer_id != requester_id:
            raise Unauthorized('Only the organizer can do that')
        return session

    def delete_session(self, code, requester_id: str) -> None:
        session = self.require_organizer(code, requester_id)
        self._end(session, 'Admin deleted the game.')

    def on_organizer_disconnect(self, connection_id: str) -> List[str]:
        """End every session organized by ``connection_id``; return their codes."""
        ended = [s for s in self._sessions.values() if s.organizer_id == connection_id]
        for session in ended:
            self._end(session, 'Admin disconnected')
        return [s.code for s in ended]

    def _end(self, session: Session, message: str) -> None:
        self.router.game_ended(session, message)
        self._sessions.pop(session.code, None)
        logger.info(f"[session-end] code={session.code} reason={message!r}")

    # Status transitions

    def replace_questions(self, session: Session, questions: List[Question]) -> None:
        if session.status != WAITING:
            raise ValidationError('Questions can only change before the game starts')
        session.questions = list(questions)
        session.current_question_index = 0
        logger.info(f"[questions] code={session.code} count={len(questions)}")

    def start(self, session: Session) -> None:
        if session.status != WAITING:
            raise ValidationError('Game has already started or is finished')
        session.status = PLAYING
        session.current_question_index = 0
        logger.info(f"[session-start] code={session.code}")
        self.router.to_everyone(session, 'gameStarted', {'gameKey': session.code})

    def advance(self, session: Session) -> int:
        if session.status != PLAYING:
            raise ValidationError('This game is not currently in progress')
        if session.current_question_index >= len(session.questions) - 1:
            raise ValidationError('Already at the last question')
        session.current_question_index += 1
        self.router.to_everyone(session, 'questionChanged', {'index': session.current_question_index})
        return session.current_question_index

    def finish(self, session: Session) -> None:
        if session.status != PLAYING:
            raise ValidationError('This game is not currently in progress')
        session.status = FINISHED
        logger.info(f"[session-finish] code={session.code}")
        self.router.to_everyone(session, 'gameFinished', {
            'gameKey': session.code, 'teamScores': session.team_scores(),
        })
