import asyncio
import logging
import signal
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from evrelay.core.config import RelayConfig
from evrelay.core.errors import CheckpointWriteError, RelayError

console = Console(stderr=True)
logger = logging.getLogger("evrelay")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="info",
    show_default=True,
    envvar="EVRELAY_LOG_LEVEL",
)
def cli(log_level: str) -> None:
    """evrelay: relay contract events to a webhook."""
    setup_logging(log_level)


@cli.command("run")
@click.option("-t", "--topic", "event_name", envvar="EVRELAY_TOPIC", help="Event name to parse")
@click.option("-e", "--endpoint", "rpc_url", envvar="EVRELAY_ENDPOINT", help="Ethereum RPC endpoint URL")
@click.option("-a", "--address", envvar="EVRELAY_ADDRESS", help="Contract address to watch events from")
@click.option("-w", "--webhook", "webhook_url", envvar="EVRELAY_WEBHOOK", help="Webhook endpoint to send events to")
@click.option(
    "--abi",
    "abi_path",
    type=click.Path(path_type=Path),
    default=Path("abi.json"),
    show_default=True,
    envvar="EVRELAY_ABI",
    help="Contract ABI (JSON)",
)
@click.option(
    "--db",
    "checkpoint_path",
    type=click.Path(path_type=Path),
    default=Path("block.txt"),
    show_default=True,
    envvar="EVRELAY_DB",
    help="File storing the next block to scan",
)
@click.option(
    "--live",
    "liveness_addr",
    default=":9000",
    show_default=True,
    envvar="EVRELAY_LIVE",
    help="Liveness endpoint to bind on",
)
@click.option(
    "-d", "--delay", "poll_interval_s", type=float, default=10, show_default=True, envvar="EVRELAY_DELAY",
    help="Seconds between scan cycles",
)
@click.option(
    "-c", "--chunk-size", type=int, default=100, show_default=True, envvar="EVRELAY_CHUNK_SIZE",
    help="Blocks to parse in one cycle",
)
@click.option(
    "-s", "--start-block", type=int, default=0, show_default=True, envvar="EVRELAY_START_BLOCK",
    help="Starting block when no valid checkpoint exists",
)
def run_cmd(
    event_name: str | None,
    rpc_url: str | None,
    address: str | None,
    webhook_url: str | None,
    abi_path: Path,
    checkpoint_path: Path,
    liveness_addr: str,
    poll_interval_s: float,
    chunk_size: int,
    start_block: int,
) -> None:
    """Watch a contract for one event and POST every occurrence to a webhook."""
    from evrelay.orchestration.relay import run_relay

    config = RelayConfig(
        event_name=event_name or "",
        rpc_url=rpc_url or "",
        address=address or "",
        webhook_url=webhook_url or "",
        abi_path=abi_path,
        checkpoint_path=checkpoint_path,
        liveness_addr=liveness_addr,
        poll_interval_s=poll_interval_s,
        chunk_size=chunk_size,
        start_block=start_block,
    )

    async def run() -> None:
        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop.set)

        out = await run_relay(config, stop=stop)
        s = out.stats
        console.print(
            f"[bold]stopped[/] at block {out.checkpoint:,}: "
            f"[green]advanced[/]={s.cycles_advanced}  "
            f"[yellow]idle[/]={s.cycles_idle}  "
            f"[red]failed[/]={s.cycles_failed}  "
            f"(logs={s.total_logs}, delivered={s.delivered})"
        )

    try:
        asyncio.run(run())
    except CheckpointWriteError as e:
        logger.error("progress can no longer be recorded, stopping")
        raise click.ClickException(str(e)) from e
    except RelayError as e:
        raise click.ClickException(f"error: {e}") from e


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
