import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker

from library_api.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Engine plus a thread-local session registry, built once per application."""

    def __init__(self, url, echo=False, **engine_kwargs):
        if url.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        self.engine = create_engine(url, echo=echo, **engine_kwargs)
        self.session = scoped_session(sessionmaker(bind=self.engine))

    def create_all(self):
        Base.metadata.create_all(self.engine)

    def drop_all(self):
        Base.metadata.drop_all(self.engine)

    def remove(self, exception=None):
        self.session.remove()

    @contextmanager
    def atomic_transaction(self):
        """
        Run the enclosed block as one transaction on the current session.

        Commits when the block exits cleanly and rolls back everything it wrote
        on any exception, which is then re-raised.
        """
        session = self.session()
        try:
            yield session
            session.commit()
        except Exception:
            logger.debug("Rolling back transaction")
            session.rollback()
            raise

    def dispose(self):
        self.session.remove()
        self.engine.dispose()
