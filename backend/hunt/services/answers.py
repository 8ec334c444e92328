"""Answer review: pending -> correct/incorrect -> scored.

Only the organizer reviews and scores. After every change the organizer
gets the complete answer set again.
"""
import logging

from hunt.errors import NotFound, Unauthorized, ValidationError
from hunt.models import (
    FINISHED, MAX_SCORE, MIN_SCORE, PENDING, REVIEW_STATUSES, SubmittedAnswer,
)

logger = logging.getLogger(__name__)


def _blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


class AnswerReview:
    def __init__(self, registry, router):
        self.registry = registry
        self.router = router

    def submit(self, code, connection_id, question_id, text=None, image_uri=None) -> SubmittedAnswer:
        session = self.registry.require(code)
        player = session.player_by_connection(connection_id)
        if player is None:
            raise Unauthorized('You are not a player in this game')
        if session.status == FINISHED:
            raise ValidationError('This game has finished')
        if _blank(text) and _blank(image_uri):
            raise ValidationError('Please provide either a text answer or a photo')
        if session.question(question_id) is None:
            raise ValidationError('Unknown question')

        answer = SubmittedAnswer(
            id=session.next_answer_id(),
            question_id=question_id,
            player_uid=player.uid,
            player_name=player.name,
            team=player.team,
            text=None if _blank(text) else text,
            image_uri=None if _blank(image_uri) else image_uri,
        )
        session.answers[answer.id] = answer
        logger.info(f"[answer-submit] code={session.code} answer={answer.id} question={question_id} team={answer.team!r}")
        self.router.answers_updated(session, team=answer.team)
        return answer

    def _answer(self, session, answer_id) -> SubmittedAnswer:
        answer = session.answers.get(answer_id) if isinstance(answer_id, int) else None
        if answer is None:
            raise NotFound('Answer not found')
        return answer

    def review(self, code, requester_id, answer_id, status) -> SubmittedAnswer:
        session = self.registry.require_organizer(code, requester_id)
        answer = self._answer(session, answer_id)
        if status not in REVIEW_STATUSES:
            raise ValidationError('Status must be correct or incorrect')
        if answer.scored:
            raise ValidationError('Answer has already been scored')
        answer.status = status
        logger.info(f"[answer-review] code={session.code} answer={answer.id} status={status}")
        self.router.answers_updated(session, team=answer.team)
        return answer

    def score(self, code, requester_id, answer_id, score) -> SubmittedAnswer:
        session = self.registry.require_organizer(code, requester_id)
        answer = self._answer(session, answer_id)
        if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
            raise ValidationError(f'Score must be a whole number from {MIN_SCORE} to {MAX_SCORE}')
        if answer.status == PENDING:
            raise ValidationError('Review the answer before scoring it')
        if answer.scored:
            raise ValidationError('Answer has already been scored')
        answer.score = score
        player = session.players.get(answer.player_uid)
        if player is not None:
            player.score += score
        logger.info(f"[answer-score] code={session.code} answer={answer.id} score={score}")
        self.router.answers_updated(session, team=answer.team)
        self.router.scores_updated(session, player)
        return answer
