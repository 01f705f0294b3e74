import logging
import threading
import uuid
from typing import Dict, List, Optional

from livepoll.core.exceptions import NotFoundError, ValidationError
from livepoll.models.poll import Poll, PollOption

logger = logging.getLogger(__name__)

MIN_OPTIONS = 2


def new_poll_id() -> str:
    return uuid.uuid4().hex


def _clean_options(options) -> List[str]:
    if not isinstance(options, list):
        raise ValidationError("Options must be a list")
    cleaned = []
    for option in options:
        if option is None:
            continue
        if not isinstance(option, str):
            raise ValidationError("Options must be strings")
        text = option.strip()
        if text:
            cleaned.append(text)
    return cleaned


class PollStore:
    """
    In-memory owner of every poll.

    All reads and writes go through the store. Mutation and snapshot capture
    happen inside one non-suspending critical section, so concurrent votes on
    a poll never lose an increment and callers only ever see copies.
    """

    def __init__(self):
        self._polls: Dict[str, Poll] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._polls)

    def __contains__(self, poll_id) -> bool:
        return poll_id in self._polls

    def create_poll(self, question, options) -> Poll:
        if not isinstance(question, str) or not question.strip():
            raise ValidationError("Question is required")
        texts = _clean_options(options)
        if len(texts) < MIN_OPTIONS:
            raise ValidationError(f"At least {MIN_OPTIONS} non-empty options are required")

        with self._lock:
            poll_id = new_poll_id()
            while poll_id in self._polls:
                poll_id = new_poll_id()
            poll = Poll(
                id=poll_id,
                question=question.strip(),
                options=[PollOption(text=text) for text in texts],
            )
            self._polls[poll_id] = poll
            created = poll.model_copy(deep=True)

        logger.info(f"Created poll {poll_id} with {len(texts)} options")
        return created

    def get_poll(self, poll_id: str) -> Poll:
        with self._lock:
            poll = self._polls.get(poll_id)
            if poll is None:
                raise NotFoundError("Poll not found")
            return poll.model_copy(deep=True)

    def cast_vote(self, poll_id: str, option_index) -> Optional[Poll]:
        """
        Add one vote to an option.

        Returns the updated poll, or None when the poll is unknown or the
        index is not a valid option position. Invalid votes change nothing.
        """
        # JSON clients may send whole numbers as 1.0
        if isinstance(option_index, float) and option_index.is_integer():
            option_index = int(option_index)
        if isinstance(option_index, bool) or not isinstance(option_index, int):
            return None
        with self._lock:
            poll = self._polls.get(poll_id)
            if poll is None or not 0 <= option_index < len(poll.options):
                return None
            poll.options[option_index].votes += 1
            updated = poll.model_copy(deep=True)

        logger.debug(f"Vote on poll {poll_id} option {option_index}")
        return updated
