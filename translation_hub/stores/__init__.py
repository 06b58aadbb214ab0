"""Credential store interface and implementations."""

from translation_hub.stores.credential_store import (
    CredentialStore,
    CredentialStoreError,
    CredentialStoreUnavailableError,
    UserRecord,
)
from translation_hub.stores.memory_credential_store import InMemoryCredentialStore
from translation_hub.stores.sqlalchemy_credential_store import SqlAlchemyCredentialStore

__all__ = [
    "CredentialStore",
    "CredentialStoreError",
    "CredentialStoreUnavailableError",
    "InMemoryCredentialStore",
    "SqlAlchemyCredentialStore",
    "UserRecord",
]
