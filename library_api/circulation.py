import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from library_api.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from library_api.models import Role
from library_api.utils import borrow_limit, calculate_due_date, calculate_fine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BorrowReceipt:
    borrow_id: int
    book_id: int
    user_id: int
    due_date: datetime


@dataclass(frozen=True)
class ReturnReceipt:
    borrow_id: int
    book_id: int
    user_id: int
    return_date: datetime
    fine_incurred: float

    @property
    def is_overdue(self):
        return self.fine_incurred > 0


class Circulation:
    """
    Borrowing lifecycle for books.

    A book is either available or on loan, and a borrow is either open or
    returned. Every transition runs inside a single transaction and every
    state change is a conditional write, so two requests racing for the same
    book or the same borrow cannot both win.
    """

    def __init__(self, gateway, database, clock: Optional[Callable[[], datetime]] = None):
        self.gateway = gateway
        self.database = database
        self.clock = clock or datetime.now

    def list_books(self):
        return list(self.gateway.list_books())

    def add_book(self, title, author, number, genre):
        with self.database.atomic_transaction():
            self._ensure_unique_number(number)
            book = self.gateway.create_book(title, author, number, genre)
        logger.info("Book %s (%s) added to the catalog", book.id, number)
        return book

    def donate_book(self, title, author, number, genre, donated_by_id):
        with self.database.atomic_transaction():
            if self.gateway.get_user(donated_by_id) is None:
                raise ValidationError("DonatedByID does not correspond to an existing user")
            self._ensure_unique_number(number)
            book = self.gateway.create_book(
                title, author, number, genre, donated_by_id=donated_by_id
            )
        logger.info("Book %s (%s) donated by user %s", book.id, number, donated_by_id)
        return book

    def _ensure_unique_number(self, number):
        if self.gateway.get_book_by_number(number) is not None:
            raise ConflictError("Book with this unique number already exists")

    def borrow_book(self, book_id, user_id) -> BorrowReceipt:
        with self.database.atomic_transaction():
            book = self.gateway.get_book(book_id)
            if book is None or not book.available:
                raise NotFoundError("Book not found or not available")

            user = self.gateway.get_user(user_id)
            if user is None:
                raise NotFoundError("User not found or is blocked")
            if user.blocked:
                raise ForbiddenError("User not found or is blocked")

            role = Role(user.role)
            limit = borrow_limit(role)
            if limit is not None and self.gateway.count_open_borrows(user_id) >= limit:
                logger.warning("User %s refused: holds %s open borrows", user_id, limit)
                raise ForbiddenError(
                    f"{role.value.capitalize()} has reached the maximum borrowing limit of {limit} books"
                )

            if self.gateway.mark_book_on_loan(book_id) == 0:
                logger.warning("Book %s was lent by a concurrent request", book_id)
                raise NotFoundError("Book not found or not available")

            borrow_date = self.clock()
            due_date = calculate_due_date(date=borrow_date)
            borrow = self.gateway.create_borrow(book_id, user_id, borrow_date, due_date)
            receipt = BorrowReceipt(borrow.id, book_id, user_id, due_date)

        logger.info("Book %s lent to user %s until %s", book_id, user_id, due_date)
        return receipt

    def return_book(self, borrow_id) -> ReturnReceipt:
        with self.database.atomic_transaction():
            borrow = self.gateway.get_open_borrow(borrow_id)
            if borrow is None:
                raise NotFoundError("Active borrow record not found for this ID")

            return_date = self.clock()
            fine = calculate_fine(due_date=borrow.due_date, return_date=return_date)

            if self.gateway.close_borrow(borrow_id, return_date, fine) == 0:
                logger.warning("Borrow %s was closed by a concurrent request", borrow_id)
                raise NotFoundError("Active borrow record not found for this ID")
            if self.gateway.mark_book_available(borrow.book_id) == 0:
                logger.warning("Book %s was already available on return", borrow.book_id)
            if fine and self.gateway.add_penalty(borrow.user_id, fine) == 0:
                raise NotFoundError(f"User {borrow.user_id} not found")

            receipt = ReturnReceipt(borrow_id, borrow.book_id, borrow.user_id, return_date, fine)

        logger.info(
            "Borrow %s returned, book %s available again, fine %.2f",
            borrow_id,
            receipt.book_id,
            fine,
        )
        return receipt
