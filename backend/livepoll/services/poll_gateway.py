import json
import logging
from typing import Any

from pydantic import ValidationError as SchemaError

from livepoll.core.broadcaster import Broadcaster
from livepoll.core.connection import Connection
from livepoll.core.exceptions import SilentRejection
from livepoll.schemas.poll import ClientMessage, VoteMessage
from livepoll.services.poll_store import PollStore

logger = logging.getLogger(__name__)


class PollGateway:
    """
    Translates realtime messages into store and broadcaster calls.

    The channel is fire-and-forget: a message that cannot be applied is
    dropped and the sender gets no reply.
    """

    def __init__(self, store: PollStore, broadcaster: Broadcaster) -> None:
        self.store = store
        self.broadcaster = broadcaster
        self._handlers = {
            "join": self.handle_join,
            "vote": self.handle_vote,
        }

    def dispatch_text(self, connection: Connection, text: str) -> None:
        try:
            payload = json.loads(text)
        except ValueError:
            logger.debug(f"Dropping non-JSON frame from {connection!r}")
            return
        self.dispatch(connection, payload)

    def dispatch(self, connection: Connection, payload: Any) -> None:
        try:
            message = ClientMessage.model_validate(payload)
            handler = self._handlers.get(message.event)
            if handler is None:
                raise SilentRejection(f"unknown event {message.event!r}")
            handler(connection, message.data)
        except (SchemaError, SilentRejection) as e:
            logger.debug(f"Dropping message from {connection!r}: {e}")

    def handle_join(self, connection: Connection, data: Any) -> None:
        if not isinstance(data, str):
            raise SilentRejection("join needs a poll id")
        self.broadcaster.subscribe(connection, data)

    def handle_vote(self, connection: Connection, data: Any) -> None:
        vote = VoteMessage.model_validate(data)
        poll = self.store.cast_vote(vote.pollId, vote.optionIndex)
        if poll is None:
            raise SilentRejection(f"vote {vote.optionIndex} on {vote.pollId} not applied")
        self.broadcaster.publish(vote.pollId, poll)
