"""
Listeners de session : publie les changements validés aux observateurs.

Les changements sont collectés à chaque flush puis publiés après le commit.
Un rollback les abandonne.
"""

from sqlalchemy import event
from sqlalchemy.orm import Session

from app.services.notifier import COLLECTIONS_BY_TABLE, ChangeEvent, notifier

_PENDING_KEY = "pending_change_events"


def _pending(session: Session) -> dict:
    return session.info.setdefault(_PENDING_KEY, {})


def _add(session: Session, collection: str, kind: str, instance_id: int) -> None:
    change = _pending(session).setdefault(collection, ChangeEvent(collection=collection))
    ids = getattr(change, kind)
    if instance_id not in ids:
        ids.append(instance_id)


def _record(session: Session, instances, kind: str) -> None:
    for instance in instances:
        collection = COLLECTIONS_BY_TABLE.get(getattr(instance, "__tablename__", None))
        if collection is None:
            continue
        instance_id = getattr(instance, "id", None)
        if instance_id is None:
            continue
        _add(session, collection, kind, instance_id)


def record_bulk_update(session: Session, table: str, ids) -> None:
    """Signale des lignes modifiées par un UPDATE en masse.

    Query.update ne passe pas par session.dirty, le flush ne les voit donc pas.
    """
    collection = COLLECTIONS_BY_TABLE.get(table)
    if collection is None:
        return
    for instance_id in ids:
        _add(session, collection, "updated", instance_id)


@event.listens_for(Session, "after_flush")
def collect_changes(session, flush_context):
    _record(session, session.new, "inserted")
    _record(session, [obj for obj in session.dirty if session.is_modified(obj)], "updated")
    _record(session, session.deleted, "deleted")


@event.listens_for(Session, "after_commit")
def publish_changes(session):
    pending = session.info.pop(_PENDING_KEY, {})
    for change in pending.values():
        notifier.publish(change)


@event.listens_for(Session, "after_rollback")
def discard_changes(session):
    session.info.pop(_PENDING_KEY, None)
