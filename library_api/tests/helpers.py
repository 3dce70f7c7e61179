import unittest
from datetime import datetime, timedelta
from http import HTTPStatus

from faker import Faker
from sqlalchemy import func, select

from library_api import create_app
from library_api.config import TestConfig
from library_api.extensions import services
from library_api.models import Role

fake = Faker()

PASSWORD = "password"


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


class LibraryTestCase(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock(datetime(2024, 3, 1, 9, 30))
        self.app = create_app(TestConfig(), clock=self.clock)
        self.app_context = self.app.app_context()
        self.app_context.push()

        self.client = self.app.test_client()
        self.library = services()
        self.gateway = self.library.gateway
        self.circulation = self.library.circulation
        self.session = self.library.database.session

    def tearDown(self):
        self.library.database.remove()
        self.library.database.drop_all()
        self.app_context.pop()
        self.library.database.dispose()

    # data

    def make_user(self, role=Role.STUDENT, blocked=False, password=PASSWORD):
        user = self.library.accounts.sign_up(fake.name(), fake.unique.email(), password, role)
        if blocked:
            user.blocked = True
            self.session.commit()
        return user

    def make_book(self, title=None):
        return self.circulation.add_book(
            title or fake.sentence(3), fake.name(), fake.unique.isbn13(), fake.word()
        )

    def token_for(self, user):
        return self.library.credentials.issue(user.id, user.email, user.role)

    def auth_headers(self, user):
        return {"Authorization": f"Bearer {self.token_for(user)}"}

    # checks

    def count(self, model):
        return self.session.scalar(select(func.count()).select_from(model))

    def assertAvailabilityInvariant(self):
        for book in self.gateway.list_books():
            open_borrows = self.gateway.open_borrows_for_book(book.id)
            self.assertLessEqual(len(open_borrows), 1)
            self.assertEqual(book.available, not open_borrows, f"book {book.id}")

    def assertError(self, response, status: HTTPStatus, message=None):
        self.assertEqual(response.status_code, status, response.json)
        self.assertIn("error", response.json)
        if message is not None:
            self.assertIn(message, response.json["error"])
