import contextlib
import logging
from typing import Iterator

from database.database import Database
from database.repositories import Repositories

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def unit_of_work(database: Database) -> Iterator[Repositories]:
    """Per-unit-of-work transaction scope.

    Yields a Repositories bundle bound to a fresh Session. Commits on
    success, rolls back on exception, always closes.

    Usage:
        with unit_of_work(db) as repos:
            application = repos.applications.get_by_id(application_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    with database.session_scope() as session:
        yield Repositories(session)
