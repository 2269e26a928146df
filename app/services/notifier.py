"""Notification des changements aux observateurs (listes tenues à jour en direct)."""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

ACTIVITIES = "activities"
CATEGORIES = "categories"
TRANSACTIONS = "transactions"
CLIENTS = "clients"

# Table SQL -> collection observable
COLLECTIONS_BY_TABLE = {
    "activities": ACTIVITIES,
    "activity_categories": CATEGORIES,
    "transactions": TRANSACTIONS,
    "clients": CLIENTS,
}


@dataclass
class ChangeEvent:
    """Changements validés (commit) sur une collection."""

    collection: str
    inserted: List[int] = field(default_factory=list)
    updated: List[int] = field(default_factory=list)
    deleted: List[int] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.inserted or self.updated or self.deleted)


Observer = Callable[[ChangeEvent], None]


class ChangeNotifier:
    """Registre d'observateurs par collection.

    Les observateurs sont appelés après le commit, dans le thread qui a validé
    la transaction. Une vue alimentée ainsi est cohérente à terme, pas un
    instantané transactionnel.
    """

    def __init__(self) -> None:
        self._observers: Dict[str, List[Observer]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, collection: str, observer: Observer) -> Callable[[], None]:
        """Abonne un observateur. Retourne la fonction de désabonnement."""
        with self._lock:
            self._observers[collection].append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers[collection]:
                    self._observers[collection].remove(observer)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        if event.is_empty():
            return
        with self._lock:
            observers = list(self._observers.get(event.collection, ()))
        for observer in observers:
            try:
                observer(event)
            except Exception:
                # Un observateur défaillant ne doit pas casser le commit
                logger.exception("Observer failed for collection %s", event.collection)

    def clear(self) -> None:
        with self._lock:
            self._observers.clear()


notifier = ChangeNotifier()
