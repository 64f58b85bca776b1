import abc

from tpchudtf.provider import MemTableProvider


class AbstractCatalog(abc.ABC):
    """
    Thread-safe, name-keyed registry of table providers.

    Implementations must make register() atomic per entry: concurrent
    registrations and lookups from several threads are allowed. Registering a
    name twice replaces the earlier provider.
    """

    @abc.abstractmethod
    def register(self, name: str, provider: MemTableProvider) -> None:
        """Register a provider under name."""
        raise NotImplementedError

    @abc.abstractmethod
    def lookup(self, name: str) -> MemTableProvider | None:
        """Return the provider registered under name, or None."""
        raise NotImplementedError

    @abc.abstractmethod
    def table_names(self) -> list[str]:
        """Return the registered names in registration order."""
        raise NotImplementedError

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None
