import logging
import threading
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

EXPENSES = "expense"
CATEGORIES = "category"
ALL_TOPICS = frozenset({EXPENSES, CATEGORIES})


class ChangeFeed:
    """Publishes a topic after every committed write.

    Subscribers get the topic name and recompute whatever they derive from
    the store. A failing subscriber is logged and skipped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: dict[int, tuple[Callable[[str], None], frozenset[str]]] = {}
        self._next_token = 0

    def subscribe(
        self,
        callback: Callable[[str], None],
        topics: Iterable[str] = ALL_TOPICS,
    ) -> Callable[[], None]:
        """Register callback; returns a function that unsubscribes it."""
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = (callback, frozenset(topics))

        def unsubscribe():
            with self._lock:
                self._subscribers.pop(token, None)

        return unsubscribe

    def publish(self, topic: str):
        with self._lock:
            targets = [cb for cb, topics in self._subscribers.values() if topic in topics]
        for callback in targets:
            try:
                callback(topic)
            except Exception:
                logger.exception("Change subscriber failed for topic %r", topic)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
