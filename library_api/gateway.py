import logging
from datetime import datetime

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import IntegrityError

import library_api.models as md
from library_api.errors import ConflictError

logger = logging.getLogger(__name__)


def live(model):
    return model.deleted_at.is_(None)


class LibraryGateway:
    """
    Reads and writes User, Book and Borrow rows on the current session.

    The gateway never commits. Callers decide the transaction boundary through
    ``Database.atomic_transaction``. Conditional writes return the number of
    rows they touched so callers can detect a lost race.
    """

    def __init__(self, database):
        self.database = database

    @property
    def session(self):
        return self.database.session()

    def _insert(self, obj, conflict_message):
        session = self.session
        session.add(obj)
        try:
            session.flush()
        except IntegrityError as e:
            logger.warning("Uniqueness violation: %s", e.orig)
            raise ConflictError(conflict_message) from e
        return obj

    def _update(self, stmt):
        result = self.session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount

    # users

    def create_user(self, name, email, password_hash, role):
        user = md.User(name=name, email=email, password=password_hash, role=role)
        return self._insert(user, "User with this email already exists")

    def get_user(self, user_id):
        stmt = select(md.User).where(and_(md.User.id == user_id, live(md.User)))
        return self.session.scalars(stmt).first()

    def get_user_by_email(self, email):
        stmt = select(md.User).where(and_(md.User.email == email, live(md.User)))
        return self.session.scalars(stmt).first()

    def add_penalty(self, user_id, amount):
        stmt = (
            update(md.User)
            .where(and_(md.User.id == user_id, live(md.User)))
            .values(penalty=md.User.penalty + amount)
        )
        return self._update(stmt)

    # books

    def create_book(self, title, author, number, genre, donated_by_id=None):
        book = md.Book(
            title=title,
            author=author,
            number=number,
            genre=genre,
            donated_by_id=donated_by_id,
            available=True,
        )
        return self._insert(book, "Book with this unique number already exists")

    def get_book(self, book_id):
        stmt = select(md.Book).where(and_(md.Book.id == book_id, live(md.Book)))
        return self.session.scalars(stmt).first()

    def get_book_by_number(self, number):
        stmt = select(md.Book).where(and_(md.Book.number == number, live(md.Book)))
        return self.session.scalars(stmt).first()

    def list_books(self):
        stmt = select(md.Book).where(live(md.Book)).order_by(md.Book.title.asc(), md.Book.id)
        return self.session.scalars(stmt).all()

    def mark_book_on_loan(self, book_id):
        stmt = (
            update(md.Book)
            .where(and_(md.Book.id == book_id, md.Book.available.is_(True), live(md.Book)))
            .values(available=False)
        )
        return self._update(stmt)

    def mark_book_available(self, book_id):
        stmt = (
            update(md.Book)
            .where(and_(md.Book.id == book_id, md.Book.available.is_(False), live(md.Book)))
            .values(available=True)
        )
        return self._update(stmt)

    # borrows

    def create_borrow(self, book_id, user_id, borrow_date: datetime, due_date: datetime):
        borrow = md.Borrow(
            book_id=book_id,
            user_id=user_id,
            borrow_date=borrow_date,
            due_date=due_date,
            returned=False,
        )
        return self._insert(borrow, "Could not record borrow transaction")

    def get_borrow(self, borrow_id):
        stmt = select(md.Borrow).where(and_(md.Borrow.id == borrow_id, live(md.Borrow)))
        return self.session.scalars(stmt).first()

    def get_open_borrow(self, borrow_id):
        stmt = select(md.Borrow).where(
            and_(md.Borrow.id == borrow_id, md.Borrow.returned.is_(False), live(md.Borrow))
        )
        return self.session.scalars(stmt).first()

    def count_open_borrows(self, user_id):
        stmt = select(func.count(md.Borrow.id)).where(
            and_(md.Borrow.user_id == user_id, md.Borrow.returned.is_(False), live(md.Borrow))
        )
        return self.session.scalar(stmt)

    def open_borrows_for_book(self, book_id):
        stmt = select(md.Borrow).where(
            and_(md.Borrow.book_id == book_id, md.Borrow.returned.is_(False), live(md.Borrow))
        )
        return self.session.scalars(stmt).all()

    def close_borrow(self, borrow_id, return_date: datetime, fine_amount: float):
        stmt = (
            update(md.Borrow)
            .where(and_(md.Borrow.id == borrow_id, md.Borrow.returned.is_(False), live(md.Borrow)))
            .values(returned=True, return_date=return_date, fine_amount=fine_amount)
        )
        return self._update(stmt)
