"""Real client IP resolution core.

* ``ExcludedNetworks`` / ``parse_excluded_networks``: CIDR ranges parsed
  once at startup; ``ConfigError`` on the first invalid entry.
* ``RealIPResolver``: picks the first admissible address from the
  highest-priority non-empty forwarding header and optionally cleans it.
* ``HeaderBag``: the ``get_all`` / ``set`` / ``delete`` interface the
  resolver works against, with ``ScopeHeaders`` (ASGI) and
  ``DictHeaders`` (in-memory) implementations.
"""

from .base import AddressClass, ConfigError, HeaderBag
from .headers import DictHeaders, ScopeHeaders
from .networks import ExcludedNetworks, parse_cidr, parse_excluded_networks
from .resolver import RealIPResolver, Resolution, split_chain

__all__ = [
    "AddressClass",
    "ConfigError",
    "DictHeaders",
    "ExcludedNetworks",
    "HeaderBag",
    "RealIPResolver",
    "Resolution",
    "ScopeHeaders",
    "parse_cidr",
    "parse_excluded_networks",
    "split_chain",
]
