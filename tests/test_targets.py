# tests/test_targets.py
import ipaddress

import pytest

from hostsweep.scan.targets import (
    InvalidAddressFormat,
    expand_cidr,
    host_count,
    iter_hosts,
    parse_network,
)


def ip(s):
    return ipaddress.IPv4Address(s)


@pytest.mark.parametrize("bits", range(0, 31))
def test_host_count_matches_host_bits(bits):
    """Every prefix with at least two host bits has 2^hostBits - 2 usable hosts."""
    prefix = parse_network(f"10.0.0.0/{bits}")
    assert prefix.host_bits == 32 - bits
    assert host_count(prefix) == 2 ** (32 - bits) - 2


def test_slash_30_has_two_hosts():
    assert expand_cidr("10.0.0.0/30") == [ip("10.0.0.1"), ip("10.0.0.2")]


@pytest.mark.parametrize("cidr", ["10.0.0.0/31", "10.0.0.7/32"])
def test_degenerate_ranges_are_empty(cidr):
    prefix = parse_network(cidr)
    assert host_count(prefix) == 0
    assert list(iter_hosts(prefix)) == []


def test_host_bits_in_address_are_masked():
    prefix = parse_network("192.168.1.77/24")
    assert prefix.network == ip("192.168.1.0")
    assert prefix.broadcast == ip("192.168.1.255")
    assert str(prefix) == "192.168.1.0/24"


def test_non_byte_aligned_prefix_enumerates_every_host():
    """A /28 that does not start on a byte boundary of its own."""
    hosts = expand_cidr("172.16.5.32/28")
    assert hosts == [ip(f"172.16.5.{n}") for n in range(33, 47)]


def test_hosts_spanning_several_bytes():
    hosts = expand_cidr("10.1.0.0/20")
    assert len(hosts) == 4094
    assert len(set(hosts)) == len(hosts)
    assert hosts[0] == ip("10.1.0.1")
    assert hosts[254] == ip("10.1.0.255")
    assert hosts[255] == ip("10.1.1.0")
    assert hosts[-1] == ip("10.1.15.254")
    assert hosts == sorted(hosts)


def test_hosts_lie_strictly_inside_the_network():
    prefix = parse_network("192.168.8.0/22")
    net = ipaddress.ip_network("192.168.8.0/22")
    for host in iter_hosts(prefix):
        assert host in net
        assert prefix.network < host < prefix.broadcast


@pytest.mark.parametrize("cidr", [
    "not-an-address",
    "",
    "10.0.0.0",
    "10.0.0.0/",
    "10.0.0.0/33",
    "10.0.0.0/-1",
    "10.0.0.0/abc",
    "10.0.0/24",
    "256.0.0.0/24",
    "10.0.0.0/255.255.255.0",
    "10.0.0.0/24/8",
    "fe80::/64",
])
def test_invalid_cidr_is_rejected(cidr):
    with pytest.raises(InvalidAddressFormat) as excinfo:
        parse_network(cidr)
    assert str(excinfo.value) == f"Invalid address: {cidr}"


def test_invalid_address_format_is_a_value_error():
    with pytest.raises(ValueError):
        expand_cidr("not-an-address")
