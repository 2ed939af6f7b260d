"""Abstract repository interface for the storage layer."""

from abc import ABC, abstractmethod


class PreferencesRepository(ABC):
    """Abstract interface for persisted key-value player state.

    Implementations must make every write durable before returning.
    """

    @abstractmethod
    def get_int(self, key: str, default: int) -> int:
        """Read an integer value.

        Args:
            key: The preference key.
            default: Value returned when the key is unset.

        Returns:
            The stored integer, or default.
        """
        pass

    @abstractmethod
    def get_float(self, key: str, default: float | None = None) -> float | None:
        """Read a real value.

        Args:
            key: The preference key.
            default: Value returned when the key is unset.

        Returns:
            The stored value, or default.
        """
        pass

    @abstractmethod
    def set_int(self, key: str, value: int) -> None:
        """Store an integer value, replacing any previous value."""
        pass

    @abstractmethod
    def set_float(self, key: str, value: float) -> None:
        """Store a real value, replacing any previous value."""
        pass

    @abstractmethod
    def has_key(self, key: str) -> bool:
        """Return True if the key is set."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing an unset key is a no-op."""
        pass

    @abstractmethod
    def delete_prefix(self, prefix: str) -> int:
        """Remove every key starting with prefix.

        Returns:
            Number of keys removed.
        """
        pass
