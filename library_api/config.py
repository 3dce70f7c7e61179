import os
from datetime import timedelta

from dotenv import find_dotenv, load_dotenv

from library_api.errors import ConfigurationError


class Config:
    SQLALCHEMY_DATABASE_URI = None
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = None
    JWT_ALGORITHM = "HS256"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_TYPE = "Bearer"
    API_PREFIX = "/api"
    RESTX_ERROR_404_HELP = False
    LOG_LEVEL = "INFO"
    DEBUG = False

    # environment variable -> config key, both required at startup
    REQUIRED_ENV = {
        "DATABASE_URL": "SQLALCHEMY_DATABASE_URI",
        "JWT_SECRET": "JWT_SECRET_KEY",
    }

    def load_environment(self, environ=None):
        environ = os.environ if environ is None else environ
        missing = [name for name in self.REQUIRED_ENV if not environ.get(name)]
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")
        for name, key in self.REQUIRED_ENV.items():
            setattr(self, key, environ[name])
        return self


class ProductionConfig(Config):
    pass


class DevConfig(Config):
    SQLALCHEMY_ECHO = True
    DEBUG = True
    LOG_LEVEL = "DEBUG"


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "test-secret-key-with-at-least-32-bytes"
    LOG_LEVEL = "WARNING"

    def load_environment(self, environ=None):
        return self


config_dict: dict[str, type[Config]] = {
    "production": ProductionConfig,
    "dev": DevConfig,
    "testing": TestConfig,
}


def load_config(name=None, environ=None, dotenv_path=None) -> Config:
    """
    Build the config for ``name`` (defaults to ``FLASK_ENV``) and fail fast on missing settings.

    Without an explicit ``environ`` the process environment is used, after loading
    a `.env` file (``dotenv_path``, or the nearest one from the working directory).
    Variables already set in the environment win over the file.
    """
    if environ is None:
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))
        environ = os.environ
    name = name or environ.get("FLASK_ENV", "production")
    try:
        config_cls = config_dict[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown configuration {name!r}. Must be one of {tuple(config_dict)}"
        ) from None
    return config_cls().load_environment(environ)
