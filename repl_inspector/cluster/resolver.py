import logging
import socket
from abc import abstractmethod
from typing import Dict, Iterable, Optional

logger = logging.getLogger(__name__)


class NameResolver:
    @abstractmethod
    def resolve(self, address: str) -> Optional[str]:
        """
        Display name for an IP address, or None when this strategy has no answer.
        """
        raise NotImplementedError("This method should be overridden by subclasses")


class DnsResolver(NameResolver):
    def resolve(self, address):
        try:
            hostname, _aliases, _addresses = socket.gethostbyaddr(address)
        except OSError as e:
            logger.debug("Reverse DNS for %s failed: %s", address, e)
            return None
        return hostname.rstrip('.') or None


class StaticTableResolver(NameResolver):
    def __init__(self, table: Dict[str, str]):
        self.table = dict(table or {})

    def resolve(self, address):
        return self.table.get(address)


class ChainResolver(NameResolver):
    """
    Asks each resolver in turn; the raw address is the last resort, so resolve() never returns None.
    """

    def __init__(self, resolvers: Iterable[NameResolver]):
        self.resolvers = list(resolvers)

    def resolve(self, address):
        for resolver in self.resolvers:
            name = resolver.resolve(address)
            if name:
                return name
        return address


def default_resolver(hosts: Dict[str, str]) -> ChainResolver:
    return ChainResolver([DnsResolver(), StaticTableResolver(hosts)])
