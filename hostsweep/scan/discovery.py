import asyncio
import ipaddress
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Dict, Optional, Tuple

from .probe import IcmpProber, ProbeFailure, Prober
from .targets import expand_cidr

log = logging.getLogger(__name__)

AddressPool = Dict[ipaddress.IPv4Address, bool]


async def icmp_probe_single(prober: Prober, ip: ipaddress.IPv4Address,
                            executor: Optional[Executor] = None) -> Optional[Tuple[ipaddress.IPv4Address, bool]]:
    """
    Probes one host. Returns (address, reachable), or None when the probe itself failed
    so the address is left out of the pool.
    """
    try:
        reachable = await prober.probe(ip, executor=executor)
    except ProbeFailure as e:
        log.debug("dropping %s: %s", ip, e)
        return None
    log.debug("%s %s", ip, "up" if reachable else "down")
    return ip, reachable


async def analyze(subnet: str, prober: Optional[Prober] = None,
                  concurrency: Optional[int] = None) -> AddressPool:
    """
    Probes every usable host of a subnet in parallel.
    Returns a mapping of address -> reachable for every host whose probe completed.
    Raises InvalidAddressFormat before probing anything if the subnet does not parse.
    """
    hosts = expand_cidr(subnet)
    prober = prober or IcmpProber()
    semaphore = asyncio.Semaphore(concurrency) if concurrency else None

    log.debug("probing %d hosts in %s (concurrency=%s)", len(hosts), subnet, concurrency or "unbounded")
    # one worker thread per probe allowed in flight
    with ThreadPoolExecutor(max_workers=concurrency or max(1, len(hosts)),
                            thread_name_prefix="hostsweep-probe") as executor:

        async def check(ip: ipaddress.IPv4Address):
            if semaphore is None:
                return await icmp_probe_single(prober, ip, executor)
            async with semaphore:
                return await icmp_probe_single(prober, ip, executor)

        tasks = [asyncio.create_task(check(ip)) for ip in hosts]
        results = await asyncio.gather(*tasks, return_exceptions=True)

    pool: AddressPool = {}
    for result in results:
        if isinstance(result, BaseException):
            raise result
        if result is None:
            continue
        ip, reachable = result
        pool[ip] = reachable

    log.debug("%d of %d hosts answered probing", len(pool), len(hosts))
    return pool


def sweep(subnet: str, prober: Optional[Prober] = None,
          concurrency: Optional[int] = None) -> AddressPool:
    return asyncio.run(analyze(subnet, prober=prober, concurrency=concurrency))
