from dataclasses import dataclass
from typing import Optional

from hostsweep.scan.probe import DEFAULT_COUNT, DEFAULT_TIMEOUT, IcmpProber

@dataclass
class Settings:
    count: int = DEFAULT_COUNT          # echo requests per host
    timeout: float = DEFAULT_TIMEOUT    # seconds for the whole check of one host
    concurrency: Optional[int] = None   # None = one probe in flight per host
    columns: int = 4
    used_only: bool = False

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"count must be at least 1, got {self.count}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.concurrency is not None and self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")
        if self.columns < 1:
            raise ValueError(f"columns must be at least 1, got {self.columns}")

    def prober(self) -> IcmpProber:
        return IcmpProber(count=self.count, timeout=self.timeout)
