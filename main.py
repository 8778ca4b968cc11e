import asyncio
import logging
from typing import Optional

import typer
from rich.console import Console

from hostsweep.config import Settings
from hostsweep.render import format_pool
from hostsweep.scan import discovery
from hostsweep.scan.targets import InvalidAddressFormat

app = typer.Typer(help="IPv4 address pool analyzer: pings every host of a subnet and shows which addresses are in use.")

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

DEFAULTS = Settings()


@app.command()
def analyzer(
    cidr: Optional[str] = typer.Argument(None, help="Network to analyze, e.g. 192.168.1.0/24. Prompted for when omitted."),
    used_only: bool = typer.Option(DEFAULTS.used_only, "--used-only", "-u", help="Only show addresses that answered."),
    count: int = typer.Option(DEFAULTS.count, envvar="HOSTSWEEP_COUNT", help="Echo requests per host."),
    timeout: float = typer.Option(DEFAULTS.timeout, envvar="HOSTSWEEP_TIMEOUT", help="Seconds to wait for one host."),
    concurrency: Optional[int] = typer.Option(DEFAULTS.concurrency, envvar="HOSTSWEEP_CONCURRENCY", help="Max probes in flight (default: all hosts at once)."),
    columns: int = typer.Option(DEFAULTS.columns, envvar="HOSTSWEEP_COLUMNS", help="Addresses per output row."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings(count=count, timeout=timeout, concurrency=concurrency,
                            columns=columns, used_only=used_only)
    except ValueError as e:
        raise typer.BadParameter(str(e))

    if cidr is None:
        cidr = typer.prompt("Enter address and mask prefix to analyze")

    try:
        with console.status("loading"):
            pool = asyncio.run(discovery.analyze(cidr, prober=settings.prober(),
                                                 concurrency=settings.concurrency))
    except InvalidAddressFormat as e:
        err_console.print(str(e))
        raise typer.Exit(code=1)

    console.print(f"Analyzed address pool: {cidr}\n")
    for row in format_pool(pool, columns=settings.columns, used_only=settings.used_only):
        console.print(row, soft_wrap=True)


if __name__ == "__main__":
    app()
