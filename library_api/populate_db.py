import logging
from random import choice, randint

import click
from faker import Faker
from flask.cli import with_appcontext

from library_api.errors import LibraryError
from library_api.extensions import services as get_services
from library_api.models import Role

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "password"


def populate(services, users=10, books=20, borrows=5, seed=None):
    """Fill the database with fake users and books, and lend a few of them out."""
    if seed is not None:
        Faker.seed(seed)
    fake = Faker()

    created_users = []
    for i in range(users):
        role = Role.LIBRARIAN if i % 5 == 0 else choice((Role.STUDENT, Role.GENERAL))
        created_users.append(
            services.accounts.sign_up(fake.name(), fake.unique.email(), DEFAULT_PASSWORD, role)
        )

    created_books = []
    for _ in range(books):
        title, author, number, genre = (
            fake.sentence(randint(2, 6)).rstrip("."),
            fake.name(),
            fake.unique.isbn13(),
            fake.word(),
        )
        if created_users and randint(0, 3) == 0:
            book = services.circulation.donate_book(
                title, author, number, genre, choice(created_users).id
            )
        else:
            book = services.circulation.add_book(title, author, number, genre)
        created_books.append(book)

    lent = 0
    for book in created_books[:borrows]:
        if not created_users:
            break
        try:
            services.circulation.borrow_book(book.id, choice(created_users).id)
            lent += 1
        except LibraryError as e:
            logger.info("Skipped lending book %s: %s", book.id, e.message)

    return len(created_users), len(created_books), lent


@click.command("seed-db")
@click.option("--users", default=10, show_default=True, help="Users to create")
@click.option("--books", default=20, show_default=True, help="Books to create")
@click.option("--borrows", default=5, show_default=True, help="Books to lend out")
@click.option("--seed", type=int, default=None, help="Faker seed")
@with_appcontext
def seed_db_command(users, books, borrows, seed):
    """Populate the database with fake data."""
    counts = populate(get_services(), users=users, books=books, borrows=borrows, seed=seed)
    click.echo("Created {} users, {} books and {} borrows".format(*counts))
