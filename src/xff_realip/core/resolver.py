"""Real client IP resolution from proxy forwarding headers.

Candidate headers are inspected in priority order.  The first one whose
value yields a non-empty address chain becomes the *source*; its entries
are classified left to right and the first address that parses and is
not inside an excluded network is the real IP.  A source whose chain is
exhausted without a match resolves to nothing: later headers are **not**
consulted.

With ``clean_forwarded_header`` enabled the source header (and the
generic forwarding header, when they differ) is rewritten to hold only
the admissible addresses.  Otherwise both are left exactly as received.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from ipaddress import ip_address

from xff_realip.configs.system import (
    DEFAULT_FORWARDED_HEADER,
    DEFAULT_HEADER_NAMES,
    DEFAULT_REAL_IP_HEADER,
    RealIPConfig,
)

from .base import AddressClass, ConfigError, HeaderBag
from .networks import ExcludedNetworks, parse_excluded_networks

logger = logging.getLogger(__name__)

_CHAIN_SEPARATOR = ","
_CHAIN_JOINER = ", "


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one request.

    Attributes:
        real_ip: First admissible address, or ``None`` when none was found.
        source_header: Header the chain was read from, or ``None`` when every
            candidate header was absent or empty.
        chain: The source header's address chain as received.
        admissible: Admissible subset of ``chain`` in original order.
    """

    real_ip: str | None = None
    source_header: str | None = None
    chain: tuple[str, ...] = ()
    admissible: tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.real_ip is not None


def split_chain(values: Iterable[str]) -> list[str]:
    """Split header values into trimmed, non-empty address strings."""
    chain: list[str] = []
    for value in values:
        for segment in value.split(_CHAIN_SEPARATOR):
            segment = segment.strip()
            if segment:
                chain.append(segment)
    return chain


class RealIPResolver:
    """Stateless resolver; safe to share across concurrent requests."""

    def __init__(
        self,
        excluded: ExcludedNetworks,
        *,
        clean_forwarded_header: bool = False,
        header_names: Sequence[str] = DEFAULT_HEADER_NAMES,
        forwarded_header: str = DEFAULT_FORWARDED_HEADER,
        real_ip_header: str = DEFAULT_REAL_IP_HEADER,
    ) -> None:
        self._excluded = excluded
        self._clean = clean_forwarded_header
        self._forwarded_header = forwarded_header
        self._real_ip_header = real_ip_header

        names = list(header_names)
        if forwarded_header.lower() not in {name.lower() for name in names}:
            names.append(forwarded_header)
        self._header_names: tuple[str, ...] = tuple(names)

    @classmethod
    def from_config(cls, config: RealIPConfig) -> RealIPResolver:
        """Build a resolver from configuration.

        Raises:
            ConfigError: when any ``excluded_nets`` entry is invalid.
        """
        try:
            excluded = parse_excluded_networks(config.excluded_nets)
        except ConfigError as exc:
            logger.error("Refusing to start real-IP resolution: %s", exc)
            raise

        resolver = cls(
            excluded,
            clean_forwarded_header=config.clean_xff,
            header_names=config.header_names,
            forwarded_header=config.forwarded_header,
            real_ip_header=config.real_ip_header,
        )
        logger.info(
            "Real-IP resolver ready: %d excluded network(s), headers=%s, clean=%s",
            len(excluded),
            ", ".join(resolver.header_names),
            resolver.clean_forwarded_header,
        )
        return resolver

    # -----------------------------------------------------------------
    # Properties
    # -----------------------------------------------------------------

    @property
    def excluded(self) -> ExcludedNetworks:
        return self._excluded

    @property
    def header_names(self) -> tuple[str, ...]:
        return self._header_names

    @property
    def clean_forwarded_header(self) -> bool:
        return self._clean

    @property
    def forwarded_header(self) -> str:
        return self._forwarded_header

    @property
    def real_ip_header(self) -> str:
        return self._real_ip_header

    # -----------------------------------------------------------------
    # Classification
    # -----------------------------------------------------------------

    def classify(self, address: str) -> AddressClass:
        try:
            parsed = ip_address(address.strip())
        except ValueError:
            return AddressClass.INVALID
        if self._excluded.contains(parsed):
            return AddressClass.EXCLUDED
        return AddressClass.ADMISSIBLE

    def is_admissible(self, address: str) -> bool:
        return self.classify(address) is AddressClass.ADMISSIBLE

    # -----------------------------------------------------------------
    # Resolution
    # -----------------------------------------------------------------

    def find(self, headers: HeaderBag) -> Resolution:
        """Compute the outcome without touching ``headers``."""
        for name in self._header_names:
            chain = split_chain(headers.get_all(name))
            if not chain:
                continue

            admissible: list[str] = []
            for address in chain:
                verdict = self.classify(address)
                if verdict is AddressClass.ADMISSIBLE:
                    admissible.append(address)
                else:
                    logger.debug(
                        "Skipping %s address %r from %s", verdict.value, address, name
                    )

            return Resolution(
                real_ip=admissible[0] if admissible else None,
                source_header=name,
                chain=tuple(chain),
                admissible=tuple(admissible),
            )

        return Resolution()

    def resolve(self, headers: HeaderBag) -> Resolution:
        """Resolve the real IP and apply the header mutations to ``headers``."""
        resolution = self.find(headers)

        if resolution.real_ip is not None:
            headers.set(self._real_ip_header, resolution.real_ip)
        else:
            headers.delete(self._real_ip_header)

        if self._clean and resolution.source_header is not None:
            targets = [resolution.source_header]
            if resolution.source_header.lower() != self._forwarded_header.lower():
                targets.append(self._forwarded_header)
            cleaned = _CHAIN_JOINER.join(resolution.admissible)
            for name in targets:
                if cleaned:
                    headers.set(name, cleaned)
                else:
                    headers.delete(name)

        logger.debug(
            "Resolved real IP %s from %s",
            resolution.real_ip or "<none>",
            resolution.source_header or "<no header>",
        )
        return resolution
