from datetime import datetime, timedelta

from werkzeug.security import check_password_hash, generate_password_hash

from library_api.models import Role

LOAN_PERIOD = timedelta(days=7)
FINE_PER_DAY = 1.0

# open borrows a user may hold at once; None means uncapped
BORROW_LIMITS: dict[Role, int | None] = {
    Role.LIBRARIAN: None,
    Role.STUDENT: 3,
    Role.GENERAL: None,
}


def hash_password(password):
    return generate_password_hash(password)


def check_password(password, password_hash):
    return check_password_hash(password_hash, password)


def borrow_limit(role: Role):
    return BORROW_LIMITS[role]


def calculate_due_date(**kwargs):
    return kwargs.get("date", datetime.now()) + LOAN_PERIOD


def overdue_days(due_date: datetime, return_date: datetime) -> int:
    """
    Whole days between the due date and the return date, rounded up.

    Any part of a day past the due date counts as a full day. Returning on or
    before the due date gives 0.
    """
    if return_date <= due_date:
        return 0
    days, remainder = divmod(return_date - due_date, timedelta(days=1))
    if remainder:
        days += 1
    return days


def calculate_fine(**kwargs):
    """
    Calculate the fine for a borrow.

    Keyword Arguments:
    due_date (datetime): When the book was due back.
    return_date (datetime): When it came back. Defaults to now.

    Returns:
    float: ``FINE_PER_DAY`` for each started overdue day. 0 if the due date is not provided.
    """
    due_date = kwargs.get("due_date")
    if due_date is None:
        return 0.0
    if not isinstance(due_date, datetime):
        due_date = datetime.fromisoformat(due_date)
    return_date = kwargs.get("return_date") or datetime.now()
    return float(overdue_days(due_date, return_date) * FINE_PER_DAY)
