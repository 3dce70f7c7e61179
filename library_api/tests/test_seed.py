import library_api.models as md
from library_api.tests.helpers import LibraryTestCase


class SeedCommandTestCase(LibraryTestCase):
    def test_seed_db(self):
        runner = self.app.test_cli_runner()
        result = runner.invoke(
            args=["seed-db", "--users", "5", "--books", "6", "--borrows", "3", "--seed", "7"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Created 5 users, 6 books and 3 borrows", result.output)

        self.assertEqual(self.count(md.User), 5)
        self.assertEqual(self.count(md.Book), 6)
        self.assertEqual(self.count(md.Borrow), 3)
        unavailable = [book for book in self.gateway.list_books() if not book.available]
        self.assertEqual(len(unavailable), 3)
        self.assertAvailabilityInvariant()
