import logging
from collections import defaultdict
from typing import DefaultDict, Dict, Set

from livepoll.core.connection import Connection
from livepoll.core.exceptions import NotFoundError
from livepoll.models.poll import Poll
from livepoll.services.poll_store import PollStore

logger = logging.getLogger(__name__)

POLL_EVENT = "poll"
UPDATE_EVENT = "update"


class Broadcaster:
    """Per-poll rooms of connections that receive poll snapshots."""

    def __init__(self, store: PollStore) -> None:
        self._store = store
        self._rooms: DefaultDict[str, Set[Connection]] = defaultdict(set)
        self._memberships: Dict[Connection, Set[str]] = {}

    @property
    def room_count(self) -> int:
        return len(self._rooms)

    def subscriber_count(self, poll_id: str) -> int:
        return len(self._rooms.get(poll_id, ()))

    def subscribe(self, connection: Connection, poll_id: str) -> None:
        if connection.closed:
            return
        if connection not in self._memberships:
            self._memberships[connection] = set()
            connection.on_close(self.unsubscribe_all)
        self._memberships[connection].add(poll_id)
        self._rooms[poll_id].add(connection)

        try:
            poll = self._store.get_poll(poll_id)
        except NotFoundError:
            logger.debug(f"{connection!r} joined unknown poll {poll_id}")
            return
        self._deliver(connection, POLL_EVENT, poll.snapshot())

    def publish(self, poll_id: str, poll: Poll) -> None:
        snapshot = poll.snapshot()
        for connection in list(self._rooms.get(poll_id, ())):
            self._deliver(connection, UPDATE_EVENT, snapshot)

    def unsubscribe_all(self, connection: Connection) -> None:
        for poll_id in self._memberships.pop(connection, ()):
            room = self._rooms.get(poll_id)
            if room is None:
                continue
            room.discard(connection)
            if not room:
                self._rooms.pop(poll_id, None)

    def _deliver(self, connection: Connection, event: str, snapshot: dict) -> None:
        try:
            connection.send(event, snapshot)
        except Exception as e:
            logger.warning(f"Failed to queue {event} for {connection!r}: {e}")
            connection.close()
