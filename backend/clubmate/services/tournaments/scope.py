"""Per-tournament mutual exclusion.

Round creation, round locking and result submission for one tournament must
never interleave: round creation reads ``current_round`` and the previous
round's matches and then writes both. Every write path therefore runs inside
``tournament_scope``, which holds a process-wide lock keyed by tournament id
and re-reads the tournament row with ``SELECT ... FOR UPDATE`` so that other
processes sharing the database serialize on the row as well.
"""

import threading
import weakref
from contextlib import contextmanager

from flask import current_app

from clubmate import db
from clubmate.errors import TournamentNotFound
from clubmate.models import Tournament


# Entries vanish once no caller holds the lock
_locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()
_locks_guard = threading.Lock()


def tournament_lock(tournament_id: int) -> threading.Lock:
    with _locks_guard:
        lock = _locks.get(tournament_id)
        if lock is None:
            lock = _locks[tournament_id] = threading.Lock()
        return lock


@contextmanager
def tournament_scope(tournament_id: int):
    """Yield the locked tournament; commit on success, roll back on any error."""
    with tournament_lock(tournament_id):
        try:
            tournament = db.session.execute(
                db.select(Tournament)
                .filter_by(id=tournament_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
            if tournament is None:
                raise TournamentNotFound(tournament_id)
            yield tournament
            db.session.commit()
        except Exception:
            db.session.rollback()
            current_app.logger.debug(f"[scope-rollback] tournament={tournament_id}")
            raise
