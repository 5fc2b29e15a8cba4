"""Excluded network ranges, parsed once at startup."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from ipaddress import IPv4Address, IPv4Network, IPv6Address, IPv6Network, ip_network

from .base import ConfigError

logger = logging.getLogger(__name__)

IPNetwork = IPv4Network | IPv6Network
IPAddress = IPv4Address | IPv6Address

_PREFIX_SEPARATOR = "/"


def parse_cidr(cidr: str) -> IPNetwork:
    """Parse one CIDR string.

    A decimal prefix length is mandatory; netmask forms such as
    ``10.0.0.0/255.0.0.0`` are rejected, and ``10.0.0.1`` alone is rejected even
    though :func:`ipaddress.ip_network` would read it as a ``/32``.  Host
    bits are allowed and masked off (``127.0.0.1/24`` -> ``127.0.0.0/24``).

    Raises:
        ConfigError: ``cidr`` is not a valid IPv4 or IPv6 CIDR.
    """
    if not isinstance(cidr, str):
        raise ConfigError(repr(cidr), "expected a string")

    value = cidr.strip()
    if _PREFIX_SEPARATOR not in value:
        raise ConfigError(cidr, "missing prefix length")

    prefix = value.rpartition(_PREFIX_SEPARATOR)[2]
    if not (prefix.isascii() and prefix.isdigit()):
        raise ConfigError(cidr, "prefix length must be a decimal number")

    try:
        return ip_network(value, strict=False)
    except ValueError as exc:
        raise ConfigError(cidr, str(exc)) from exc


class ExcludedNetworks:
    """Immutable, ordered set of network ranges to skip during resolution."""

    __slots__ = ("_networks",)

    def __init__(self, networks: Iterable[IPNetwork] = ()) -> None:
        self._networks: tuple[IPNetwork, ...] = tuple(networks)

    @classmethod
    def from_cidrs(cls, cidrs: Iterable[str]) -> ExcludedNetworks:
        """Build the set from CIDR strings, failing on the first bad one."""
        return cls(parse_cidr(cidr) for cidr in cidrs)

    @property
    def networks(self) -> tuple[IPNetwork, ...]:
        return self._networks

    def contains(self, address: IPAddress) -> bool:
        """Return ``True`` when ``address`` falls inside any range."""
        candidates: tuple[IPAddress, ...] = (address,)
        if isinstance(address, IPv6Address) and address.ipv4_mapped is not None:
            candidates = (address, address.ipv4_mapped)

        for network in self._networks:
            for candidate in candidates:
                if candidate.version == network.version and candidate in network:
                    return True
        return False

    def __contains__(self, address: object) -> bool:
        if not isinstance(address, (IPv4Address, IPv6Address)):
            return False
        return self.contains(address)

    def __iter__(self) -> Iterator[IPNetwork]:
        return iter(self._networks)

    def __len__(self) -> int:
        return len(self._networks)

    def __repr__(self) -> str:
        return f"ExcludedNetworks({[str(n) for n in self._networks]!r})"


def parse_excluded_networks(cidrs: Iterable[str]) -> ExcludedNetworks:
    """Validate ``cidrs`` and return the exclusion set.

    Raises:
        ConfigError: on the first invalid entry; no partial set is built.
    """
    excluded = ExcludedNetworks.from_cidrs(cidrs)
    logger.debug("Parsed %d excluded network(s): %s", len(excluded), excluded)
    return excluded
