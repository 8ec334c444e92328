"""Outbound notifications and their audience rules.

Membership and game-state changes go to the organizer plus every other
connected player except the connection that caused them. Termination
notices go to the whole audience. Review dashboards get the full answer
set, never a delta.
"""
import logging
from typing import Iterable, Optional

from hunt.models import Session

logger = logging.getLogger(__name__)


class SocketIOTransport:
    """Deliver events to single Socket.IO connections."""

    def __init__(self, socketio, namespace='/ws'):
        self.socketio = socketio
        self.namespace = namespace

    def send(self, event: str, payload: dict, to: str) -> None:
        self.socketio.emit(event, payload, to=to, namespace=self.namespace)


class BroadcastRouter:
    def __init__(self, transport):
        self.transport = transport

    def _deliver(self, event: str, payload: dict, sids: Iterable[str]) -> None:
        seen = set()
        for sid in sids:
            if sid is None or sid in seen:
                continue
            seen.add(sid)
            self.transport.send(event, payload, sid)
        logger.debug(f"[emit] event={event} recipients={len(seen)}")

    def to_connection(self, event: str, payload: dict, sid: str) -> None:
        self._deliver(event, payload, [sid])

    def to_organizer(self, session: Session, event: str, payload: dict) -> None:
        self._deliver(event, payload, [session.organizer_id])

    def to_peers(self, session: Session, event: str, payload: dict, exclude: Optional[str] = None) -> None:
        """Organizer plus every connected player, minus ``exclude``."""
        self._deliver(event, payload, [sid for sid in session.audience() if sid != exclude])

    def to_everyone(self, session: Session, event: str, payload: dict) -> None:
        self._deliver(event, payload, session.audience())

    def to_team(self, session: Session, team: str, event: str, payload: dict) -> None:
        self._deliver(event, payload, [
            p.connection_id for p in session.players.values() if p.connected and p.team == team
        ])

    # Named notifications

    def player_joined(self, session, player):
        self.to_peers(session, 'playerJoined', {
            'id': player.connection_id, 'name': player.name, 'team': player.team,
        }, exclude=player.connection_id)

    def player_left(self, session, player, sid):
        self.to_peers(session, 'playerLeft', {'id': sid, 'name': player.name}, exclude=sid)

    def player_rejoined(self, session, player, old_sid):
        self.to_peers(session, 'playerRejoined', {
            'id': player.connection_id, 'name': player.name, 'oldId': old_sid,
        }, exclude=player.connection_id)

    def game_ended(self, session, message):
        self.to_everyone(session, 'gameEnded', {'gameKey': session.code, 'message': message})

    def game_data(self, session, sid):
        self.to_connection('gameData', session.public_dict(), sid)

    def answers_updated(self, session, team=None):
        self.to_organizer(session, 'submittedAnswersUpdate', {
            'answers': [a.to_dict() for a in session.answers.values()],
        })
        if team is not None:
            self.to_team(session, team, 'teamAnswersUpdate', {
                'answers': [a.to_dict() for a in session.answers.values() if a.team == team],
            })

    def scores_updated(self, session, player=None):
        self.to_everyone(session, 'teamScoresUpdate', {'scores': session.team_scores()})
        if player is not None and player.connected:
            self.to_connection('playerScoresUpdate', {'score': player.score}, player.connection_id)
