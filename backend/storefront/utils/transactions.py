from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.exceptions import PersistenceFailure


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """
    Commit everything done inside the block as one transaction.
    Any exception rolls the whole block back; database errors are re-raised
    as PersistenceFailure, everything else propagates unchanged.
    Usage:
        with unit_of_work(db):
            ... DB work ...
    """
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceFailure(f"Database transaction aborted: {e}") from e
    except Exception:
        session.rollback()
        raise
