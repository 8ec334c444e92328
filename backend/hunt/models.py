"""In-memory game records. Nothing here outlives the process."""
import itertools
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

# Session status
WAITING = 'waiting'
PLAYING = 'playing'
FINISHED = 'finished'

# Answer review status
PENDING = 'pending'
CORRECT = 'correct'
INCORRECT = 'incorrect'
REVIEW_STATUSES = (CORRECT, INCORRECT)

MIN_SCORE = 1
MAX_SCORE = 5


@dataclass
class Question:
    id: int
    text: str
    category: str = ''
    expected_answer: str = ''
    image_url: Optional[str] = None
    caption: str = ''

    def to_dict(self):
        return {
            'id': self.id,
            'questionText': self.text,
            'imageUrl': self.image_url,
            'caption': self.caption,
            'category': self.category,
            'expectedAnswer': self.expected_answer,
        }


@dataclass
class Player:
    name: str
    team: str
    rejoin_code: str
    connection_id: Optional[str]
    score: int = 0
    last_connection_id: Optional[str] = None
    uid: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def connected(self) -> bool:
        return self.connection_id is not None

    def to_dict(self):
        return {
            'id': self.connection_id,
            'name': self.name,
            'team': self.team,
            'score': self.score,
            'connected': self.connected,
        }


@dataclass
class SubmittedAnswer:
    id: int
    question_id: int
    player_uid: str
    player_name: str
    team: str
    text: Optional[str] = None
    image_uri: Optional[str] = None
    status: str = PENDING
    score: Optional[int] = None

    @property
    def scored(self) -> bool:
        return self.score is not None

    def to_dict(self):
        return {
            'id': self.id,
            'questionId': self.question_id,
            'playerName': self.player_name,
            'teamName': self.team,
            'submittedTextAnswer': self.text,
            'submittedImageUri': self.image_uri,
            'status': self.status,
            'score': self.score,
            'scored': self.scored,
        }


@dataclass
class Session:
    code: str
    organizer_id: str
    timeline_days: int
    location: str
    questions: List[Question]
    password_hash: Optional[str] = None
    status: str = WAITING
    current_question_index: int = 0
    players: Dict[str, Player] = field(default_factory=dict)  # keyed by Player.uid
    answers: Dict[int, SubmittedAnswer] = field(default_factory=dict)
    _answer_ids: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)

    def next_answer_id(self) -> int:
        return next(self._answer_ids)

    def player_by_connection(self, connection_id: str) -> Optional[Player]:
        for player in self.players.values():
            if player.connection_id == connection_id:
                return player
        return None

    def player_by_rejoin_code(self, rejoin_code: str) -> Optional[Player]:
        for player in self.players.values():
            if player.rejoin_code == rejoin_code:
                return player
        return None

    def question(self, question_id) -> Optional[Question]:
        if isinstance(question_id, bool) or not isinstance(question_id, int):
            return None
        if 0 <= question_id < len(self.questions):
            return self.questions[question_id]
        return None

    def audience(self) -> List[str]:
        """Organizer first, then every connected player."""
        sids = [self.organizer_id]
        sids.extend(p.connection_id for p in self.players.values() if p.connected)
        return sids

    def team_scores(self) -> Dict[str, int]:
        scores: Dict[str, int] = {}
        for answer in self.answers.values():
            scores.setdefault(answer.team, 0)
            if answer.scored:
                scores[answer.team] += answer.score
        for player in self.players.values():
            scores.setdefault(player.team, 0)
        return scores

    def public_dict(self):
        return {
            'gameKey': self.code,
            'status': self.status,
            'timelineDays': self.timeline_days,
            'location': self.location,
            'currentQuestionIndex': self.current_question_index,
            'questions': [q.to_dict() for q in self.questions],
        }

    def to_dict(self, include_answers=False):
        data = self.public_dict()
        data['players'] = [p.to_dict() for p in self.players.values()]
        data['teamScores'] = self.team_scores()
        if include_answers:
            data['answers'] = [a.to_dict() for a in self.answers.values()]
        return data

    def summary(self):
        return {
            'gameKey': self.code,
            'status': self.status,
            'location': self.location,
            'timelineDays': self.timeline_days,
            'questionCount': len(self.questions),
            'playerCount': sum(1 for p in self.players.values() if p.connected),
            'passwordRequired': self.password_hash is not None,
        }
