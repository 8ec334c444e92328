"""Binding connections to durable players.

A player keeps a stable ``uid`` for the whole session; its connection id
changes on every rejoin. Rejoin codes are unique per session only.
"""
import logging
from typing import Callable, List, Optional, Tuple

from hunt.errors import AlreadyMember, InvalidRejoinCode, RejoinCodeTaken, Unauthorized, ValidationError
from hunt.models import FINISHED, Player, Session

logger = logging.getLogger(__name__)


class MembershipManager:
    def __init__(self, registry, router, check_password: Optional[Callable[[str, str], bool]] = None):
        self.registry = registry
        self.router = router
        self.check_password = check_password

    def _ensure_not_bound(self, session: Session, connection_id: str, player: Optional[Player] = None) -> None:
        if connection_id == session.organizer_id:
            raise AlreadyMember('The organizer cannot play in their own game')
        current = session.player_by_connection(connection_id)
        if current is not None and current is not player:
            raise AlreadyMember()

    def join(self, code, connection_id: str, name: str, rejoin_code: str, team: str,
             password: Optional[str] = None) -> Player:
        session = self.registry.require(code)
        self._ensure_not_bound(session, connection_id)
        if not all(isinstance(v, str) and v.strip() for v in (name, rejoin_code, team)):
            raise ValidationError('Player name, team name and rejoin code are required')
        if session.status == FINISHED:
            raise ValidationError('This game has finished')
        if session.password_hash is not None:
            if not password or self.check_password is None or not self.check_password(session.password_hash, password):
                raise Unauthorized('Incorrect game password')
        if session.player_by_rejoin_code(rejoin_code) is not None:
            raise RejoinCodeTaken()

        player = Player(name=name.strip(), team=team.strip(), rejoin_code=rejoin_code, connection_id=connection_id)
        session.players[player.uid] = player
        logger.info(f"[join] code={session.code} player={player.name!r} sid={connection_id} team={player.team!r}")
        self.router.player_joined(session, player)
        self.router.game_data(session, connection_id)
        return player

    def rejoin(self, code, connection_id: str, rejoin_code: str) -> Tuple[Player, Optional[str]]:
        """Move the player holding ``rejoin_code`` onto ``connection_id``.

        Returns the player and the connection id it had before.
        """
        session = self.registry.require(code)
        player = session.player_by_rejoin_code(rejoin_code) if rejoin_code else None
        if player is None:
            raise InvalidRejoinCode()
        self._ensure_not_bound(session, connection_id, player)

        old_id = player.connection_id or player.last_connection_id
        player.connection_id = connection_id
        logger.info(f"[rejoin] code={session.code} player={player.name!r} sid={connection_id} old={old_id}")
        self.router.player_rejoined(session, player, old_id)
        self.router.game_data(session, connection_id)
        return player, old_id

    def disconnect(self, connection_id: str) -> List[Tuple[Session, Player]]:
        """Detach ``connection_id`` from every player it drives.

        The player record stays so the same person can rejoin later.
        """
        dropped = []
        for code in self.registry.codes():
            session = self.registry.get_session(code)
            player = session.player_by_connection(connection_id)
            if player is None:
                continue
            player.last_connection_id = connection_id
            player.connection_id = None
            logger.info(f"[disconnect] code={session.code} player={player.name!r} sid={connection_id}")
            self.router.player_left(session, player, connection_id)
            dropped.append((session, player))
        return dropped

    def leave(self, code, connection_id: str) -> Player:
        session = self.registry.require(code)
        player = session.player_by_connection(connection_id)
        if player is None:
            raise Unauthorized('You are not a player in this game')
        del session.players[player.uid]
        logger.info(f"[leave] code={session.code} player={player.name!r} sid={connection_id}")
        self.router.player_left(session, player, connection_id)
        return player
