from typing import List

from hostsweep.scan.discovery import AddressPool

ADDRESS_WIDTH = 15


def format_pool(pool: AddressPool, columns: int = 4, used_only: bool = False) -> List[str]:
    """
    Lays the pool out as rows of rich markup, `columns` entries per row,
    addresses in byte order. Reachable hosts read "used" in green, the rest "free" in red.
    """
    ips = [ip for ip in pool if pool[ip] or not used_only]
    ips.sort(key=lambda ip: ip.packed)

    rows = []
    for i in range(0, len(ips), columns):
        cells = []
        for ip in ips[i:i + columns]:
            status, color = ("used", "green") if pool[ip] else ("free", "red")
            cells.append(f"{str(ip):<{ADDRESS_WIDTH}} - [{color}]{status:<4}[/{color}]")
        rows.append("    ".join(cells))
    return rows
