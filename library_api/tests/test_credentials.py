import os
import tempfile
import unittest
from datetime import timedelta
from unittest import mock

from flask_jwt_extended import decode_token

from library_api.auth.credentials import Identity, identity_from_claims
from library_api.config import DevConfig, ProductionConfig, TestConfig, load_config
from library_api.errors import ConfigurationError, UnauthorizedError
from library_api.models import Role
from library_api.tests.helpers import LibraryTestCase


class CredentialServiceTestCase(LibraryTestCase):
    def setUp(self):
        super().setUp()
        self.credentials = self.library.credentials

    def test_hash_and_verify(self):
        credential = self.credentials.hash("s3cret")
        self.assertNotEqual(credential, "s3cret")
        self.assertTrue(self.credentials.verify("s3cret", credential))
        self.assertFalse(self.credentials.verify("S3cret", credential))

    def test_issue_and_validate(self):
        token = self.credentials.issue(7, "reader@example.com", Role.STUDENT)
        identity = self.credentials.validate(token)
        self.assertEqual(identity, Identity(7, "reader@example.com", Role.STUDENT))

    def test_token_claims(self):
        token = self.credentials.issue(7, "reader@example.com", "librarian")
        claims = decode_token(token)
        self.assertEqual(claims["sub"], "7")
        self.assertEqual(claims["role"], "librarian")
        self.assertEqual(claims["email"], "reader@example.com")
        self.assertIn("nbf", claims)
        self.assertEqual(claims["exp"] - claims["iat"], int(timedelta(hours=24).total_seconds()))

    def test_validate_rejects_garbage(self):
        with self.assertRaises(UnauthorizedError):
            self.credentials.validate("not.a.token")

    def test_validate_rejects_expired(self):
        token = self.credentials.issue(7, "reader@example.com", Role.GENERAL, ttl=timedelta(seconds=-1))
        with self.assertRaises(UnauthorizedError):
            self.credentials.validate(token)

    def test_issue_rejects_unknown_role(self):
        with self.assertRaises(ValueError):
            self.credentials.issue(7, "reader@example.com", "admin")


class IdentityClaimsTestCase(unittest.TestCase):
    def test_from_claims(self):
        identity = identity_from_claims({"user_id": "3", "email": "a@b.c", "role": "general"})
        self.assertEqual(identity.user_id, 3)
        self.assertIs(identity.role, Role.GENERAL)

    def test_missing_or_bad_claims(self):
        for claims in ({}, {"user_id": 3, "email": "a@b.c"}, {"user_id": 3, "email": "a", "role": "x"}):
            with self.assertRaises(UnauthorizedError):
                identity_from_claims(claims)


class ConfigTestCase(unittest.TestCase):
    def test_production_requires_database_and_secret(self):
        with self.assertRaises(ConfigurationError) as ctx:
            load_config("production", environ={})
        self.assertIn("DATABASE_URL", str(ctx.exception))
        self.assertIn("JWT_SECRET", str(ctx.exception))

        with self.assertRaises(ConfigurationError):
            load_config("dev", environ={"DATABASE_URL": "sqlite:///dev.sqlite"})

    def test_environment_values_are_used(self):
        config = load_config(
            "production",
            environ={"DATABASE_URL": "sqlite:///prod.sqlite", "JWT_SECRET": "a" * 32},
        )
        self.assertIsInstance(config, ProductionConfig)
        self.assertEqual(config.SQLALCHEMY_DATABASE_URI, "sqlite:///prod.sqlite")
        self.assertEqual(config.JWT_SECRET_KEY, "a" * 32)
        self.assertEqual(config.JWT_ACCESS_TOKEN_EXPIRES, timedelta(hours=24))

    def test_name_from_flask_env(self):
        environ = {"FLASK_ENV": "dev", "DATABASE_URL": "sqlite://", "JWT_SECRET": "b" * 32}
        self.assertIsInstance(load_config(environ=environ), DevConfig)

    def test_testing_needs_no_environment(self):
        config = load_config("testing", environ={})
        self.assertIsInstance(config, TestConfig)
        self.assertTrue(config.JWT_SECRET_KEY)

    def test_unknown_name(self):
        with self.assertRaises(ConfigurationError):
            load_config("staging", environ={})

    def test_dotenv_file_satisfies_required_settings(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, ".env")
            with open(path, "w") as f:
                f.write("DATABASE_URL=sqlite:///from-dotenv.sqlite\n")
                f.write("JWT_SECRET=" + "c" * 32 + "\n")

            with mock.patch.dict(os.environ, {}, clear=True):
                config = load_config("production", dotenv_path=path)

        self.assertEqual(config.SQLALCHEMY_DATABASE_URI, "sqlite:///from-dotenv.sqlite")
        self.assertEqual(config.JWT_SECRET_KEY, "c" * 32)

    def test_environment_wins_over_dotenv_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, ".env")
            with open(path, "w") as f:
                f.write("DATABASE_URL=sqlite:///from-dotenv.sqlite\nJWT_SECRET=from-file\n")

            environ = {"DATABASE_URL": "sqlite:///from-env.sqlite", "JWT_SECRET": "from-env"}
            with mock.patch.dict(os.environ, environ, clear=True):
                config = load_config("production", dotenv_path=path)

        self.assertEqual(config.SQLALCHEMY_DATABASE_URI, "sqlite:///from-env.sqlite")
        self.assertEqual(config.JWT_SECRET_KEY, "from-env")
