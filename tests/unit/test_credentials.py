"""Unit tests for secure credential store helpers."""

from keyring.errors import NoKeyringError
import pytest

from ttsprep.credentials import KeyringCredentialStore


class FakeKeyringModule:
    """In-memory keyring stub for deterministic credential store tests."""

    def __init__(self) -> None:
        """Initialize fake storage dictionary."""

        self._storage: dict[tuple[str, str], str] = {}

    def get_password(self, service_name: str, account_name: str) -> str | None:
        """Return previously stored password if present."""

        return self._storage.get((service_name, account_name))

    def set_password(self, service_name: str, account_name: str, value: str) -> None:
        """Store password value for the service/account key."""

        self._storage[(service_name, account_name)] = value

    def delete_password(self, service_name: str, account_name: str) -> None:
        """Delete password value for the service/account key."""

        self._storage.pop((service_name, account_name), None)


class MissingBackendKeyring:
    """Keyring stub behaving like an environment without a usable backend."""

    def get_password(self, service_name: str, account_name: str) -> str | None:
        """Raise the error keyring uses when no backend is configured."""

        raise NoKeyringError("no backend")


def test_keyring_store_roundtrip_set_get_clear() -> None:
    """Keyring store should set/get/clear API key values via keyring backend."""

    store = KeyringCredentialStore(backend=FakeKeyringModule())

    assert store.get_api_key() is None

    store.set_api_key("  abc123  ")
    assert store.get_api_key() == "abc123"

    assert store.clear_api_key() is True
    assert store.get_api_key() is None
    assert store.clear_api_key() is False


def test_keyring_store_rejects_blank_api_key() -> None:
    """Blank keys should never be persisted."""

    store = KeyringCredentialStore(backend=FakeKeyringModule())

    with pytest.raises(ValueError, match="non-empty"):
        store.set_api_key("   ")


def test_keyring_store_handles_missing_backend() -> None:
    """Reads should degrade to `None` when no keyring backend is available."""

    store = KeyringCredentialStore(backend=MissingBackendKeyring())

    assert store.get_api_key() is None
    assert store.clear_api_key() is False
