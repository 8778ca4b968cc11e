import asyncio
import ipaddress
import logging
import time
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import Dict, List, Optional, Union

import ping3
from ping3 import errors, ping

log = logging.getLogger(__name__)

DEFAULT_COUNT = 2
DEFAULT_TIMEOUT = 5.0


class ProbeFailure(Exception):
    """The reachability check could not be performed at all."""

    def __init__(self, address, reason):
        super().__init__(f"probe of {address} failed: {reason}")
        self.address = address
        self.reason = reason


class Prober(ABC):
    @abstractmethod
    async def probe(self, address: ipaddress.IPv4Address, executor: Optional[Executor] = None) -> bool:
        """
        Return True if the host answered, False if it stayed silent. Raise ProbeFailure otherwise.
        Blocking work goes to `executor`, or the loop default when None.
        """
        raise NotImplementedError


class IcmpProber(Prober):
    """
    ICMP echo prober backed by ping3.
    Sends up to `count` echo requests that share one overall deadline of `timeout` seconds
    and stops at the first reply.
    """

    def __init__(self, count: int = DEFAULT_COUNT, timeout: float = DEFAULT_TIMEOUT):
        self.count = count
        self.timeout = timeout
        # ping3 returns None for timeouts and False for every other error unless EXCEPTIONS is set
        ping3.EXCEPTIONS = True

    def check(self, host: str) -> bool:
        deadline = time.monotonic() + self.timeout
        for seq in range(self.count):
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            try:
                rtt = ping(host, timeout=remaining, seq=seq)
            except (errors.Timeout, errors.TimeExceeded, errors.DestinationUnreachable) as e:
                log.debug("no reply from %s to echo %d: %s", host, seq, e)
                continue
            except (errors.PingError, OSError) as e:
                raise ProbeFailure(host, e) from e
            if rtt is not None:
                return True
        return False

    async def probe(self, address: ipaddress.IPv4Address, executor: Optional[Executor] = None) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(executor, self.check, str(address))


Outcome = Union[bool, BaseException]


class FakeProber(Prober):
    """
    script: dict[address] -> True, False, or an exception instance to raise.
    delay: seconds to sleep before answering, either one number or dict[address] -> seconds.
    Unscripted addresses are unreachable.
    """

    def __init__(self, script: Optional[Dict[str, Outcome]] = None,
                 delay: Union[float, Dict[str, float]] = 0.0):
        self.script = {}
        if script:
            for k, v in script.items():
                self.script[ipaddress.IPv4Address(k)] = v
        if isinstance(delay, dict):
            self.delay = {ipaddress.IPv4Address(k): v for k, v in delay.items()}
        else:
            self.delay = delay
        self.probed: List[ipaddress.IPv4Address] = []
        self.finished: List[ipaddress.IPv4Address] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def _delay_for(self, address) -> float:
        if isinstance(self.delay, dict):
            return self.delay.get(address, 0.0)
        return self.delay

    async def probe(self, address: ipaddress.IPv4Address, executor: Optional[Executor] = None) -> bool:
        self.probed.append(address)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._delay_for(address))
            outcome = self.script.get(address, False)
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1
            self.finished.append(address)
