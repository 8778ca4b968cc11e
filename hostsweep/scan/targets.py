from dataclasses import dataclass
from typing import Iterator, List
import ipaddress

_TOTAL_BITS = 32
_PREFIX_MIN, _PREFIX_MAX = 0, _TOTAL_BITS


class InvalidAddressFormat(ValueError):
    """Raised when a CIDR string does not parse as an IPv4 address with a prefix length."""

    def __init__(self, text: str):
        super().__init__(f"Invalid address: {text}")
        self.text = text


@dataclass(frozen=True)
class NetworkPrefix:
    network: ipaddress.IPv4Address
    prefix_bits: int

    @property
    def total_bits(self) -> int:
        return _TOTAL_BITS

    @property
    def host_bits(self) -> int:
        return self.total_bits - self.prefix_bits

    @property
    def broadcast(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(int(self.network) + (1 << self.host_bits) - 1)

    def __str__(self):
        return f"{self.network}/{self.prefix_bits}"


def parse_network(text: str) -> NetworkPrefix:
    if text is None:
        raise InvalidAddressFormat(text)
    s = text.strip()

    if s.count("/") != 1:
        raise InvalidAddressFormat(text)
    addr, bits = s.split("/", 1)
    if not (bits.isascii() and bits.isdigit()):
        raise InvalidAddressFormat(text)

    prefix_bits = int(bits)
    if prefix_bits < _PREFIX_MIN or prefix_bits > _PREFIX_MAX:
        raise InvalidAddressFormat(text)

    try:
        address = ipaddress.IPv4Address(addr)
    except ValueError:
        raise InvalidAddressFormat(text)

    # host bits set in the address are masked off, like `ip route` does
    network = ipaddress.IPv4Network((address, prefix_bits), strict=False)
    return NetworkPrefix(network.network_address, prefix_bits)


def host_count(prefix: NetworkPrefix) -> int:
    """Usable hosts: everything but the network and broadcast address. /31 and /32 have none."""
    return max(0, (1 << prefix.host_bits) - 2)


def iter_hosts(prefix: NetworkPrefix) -> Iterator[ipaddress.IPv4Address]:
    base = int(prefix.network)
    for offset in range(1, host_count(prefix) + 1):
        yield ipaddress.IPv4Address(base + offset)


def expand_cidr(network: str) -> List[ipaddress.IPv4Address]:
    return list(iter_hosts(parse_network(network)))
