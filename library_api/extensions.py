from dataclasses import dataclass

from flask import current_app

from library_api.auth.accounts import AccountService
from library_api.auth.credentials import CredentialService
from library_api.circulation import Circulation
from library_api.database import Database
from library_api.gateway import LibraryGateway

EXTENSION_KEY = "library_api"


@dataclass
class Services:
    database: Database
    gateway: LibraryGateway
    credentials: CredentialService
    accounts: AccountService
    circulation: Circulation

    @classmethod
    def build(cls, config, clock=None):
        database = Database(
            config.SQLALCHEMY_DATABASE_URI,
            echo=config.SQLALCHEMY_ECHO,
            **config.SQLALCHEMY_ENGINE_OPTIONS,
        )
        gateway = LibraryGateway(database)
        credentials = CredentialService(ttl=config.JWT_ACCESS_TOKEN_EXPIRES)
        return cls(
            database=database,
            gateway=gateway,
            credentials=credentials,
            accounts=AccountService(gateway, database, credentials),
            circulation=Circulation(gateway, database, clock=clock),
        )

    def init_app(self, app):
        app.extensions[EXTENSION_KEY] = self
        app.teardown_appcontext(self.database.remove)


def services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
