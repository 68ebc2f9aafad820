"""Syncer entry point: ship new agent log lines to the logging API."""

import argparse
import logging
import signal
import sys

from apscheduler.schedulers.blocking import BlockingScheduler

from shared.config_loader import load_yaml, section
from shared.errors import CheckpointWriteError, ConfigError
from syncer.src.checkpoint import CheckpointStore
from syncer.src.config import load_sync_config
from syncer.src.driver import SyncDriver
from syncer.src.models import SyncReport
from syncer.src.sink import SinkClient

logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync OpenClaw logs to the Pixan logging API")
    parser.add_argument("--config", default=None,
                        help="Path to YAML config (default: $CONFIG_PATH or config.yml)")
    parser.add_argument("--endpoint", dest="sink_endpoint", default=None,
                        help="Logging API endpoint that receives events")
    parser.add_argument("--log-dir", dest="log_directory", default=None,
                        help="Directory holding the daily openclaw-YYYY-MM-DD.log files")
    parser.add_argument("--checkpoint", dest="checkpoint_path", default=None,
                        help="Path of the checkpoint JSON file")
    parser.add_argument("--every", type=float, default=None, metavar="SECONDS",
                        help="Keep running and sync on this interval instead of once")
    return parser


def print_report(report: SyncReport) -> None:
    if report.file_missing:
        print(f"Log file not found: {report.file}", flush=True)
        return
    print(f"Processing {report.lines_processed} new lines from {report.file}", flush=True)
    print(f"Synced {report.sent} log entries", flush=True)
    if report.failed:
        print(f"Failed to send {report.failed} log entries", flush=True)


def run_once(driver: SyncDriver) -> None:
    print_report(driver.run())


def run_every(driver: SyncDriver, interval: float,
              scheduler: BlockingScheduler | None = None) -> None:
    """Sync now, then every *interval* seconds until a signal or a fatal error.

    Raises CheckpointWriteError after stopping the scheduler if a run could
    not save its checkpoint.
    """
    if scheduler is None:
        scheduler = BlockingScheduler()
    failures: list[CheckpointWriteError] = []

    def _job():
        try:
            run_once(driver)
        except CheckpointWriteError as exc:
            failures.append(exc)
            scheduler.shutdown(wait=False)

    # One job instance at a time keeps runs from racing on the checkpoint.
    scheduler.add_job(_job, "interval", seconds=interval,
                      max_instances=1, coalesce=True, id="sync")

    def _shutdown(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        scheduler.shutdown(wait=False)

    previous = {sig: signal.signal(sig, _shutdown) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        logger.info("Syncing every %.1f seconds", interval)
        run_once(driver)
        scheduler.start()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    if failures:
        raise failures[0]


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [SYNC] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    parser = build_cli_parser()
    args = parser.parse_args(argv)
    if args.every is not None and args.every <= 0:
        parser.error("--every must be a positive number of seconds")

    try:
        cfg = load_sync_config(
            section(load_yaml(args.config), "syncer"),
            overrides={
                "sink_endpoint": args.sink_endpoint,
                "log_directory": args.log_directory,
                "checkpoint_path": args.checkpoint_path,
            },
        )
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    logger.info("Syncing %s -> %s", cfg.log_directory, cfg.sink_endpoint)
    with SinkClient(cfg.sink_endpoint, timeout=cfg.request_timeout) as sink:
        driver = SyncDriver(cfg, CheckpointStore(cfg.checkpoint_path), sink)
        try:
            if args.every is not None:
                run_every(driver, args.every)
            else:
                run_once(driver)
        except CheckpointWriteError as exc:
            print(f"Sync failed: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
