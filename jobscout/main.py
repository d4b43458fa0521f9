"""Command-line entry point: one search pass, or a scheduled daemon."""

import argparse
import signal
import sys
import threading
import time
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from jobscout.config import AppConfig, ConfigurationError, EnvironmentConfig, load_config
from jobscout.logging import configure_logging, get_logger
from jobscout.persistence import close_database, init_database
from jobscout.scheduler import SchedulerService
from jobscout.service import JobResearchService

logger = get_logger(__name__, component="cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobscout",
        description="jobscout - collect, deduplicate and track job postings from ATS boards",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--manual-run",
        action="store_true",
        help="Run a single search pass immediately and exit",
    )
    parser.add_argument(
        "--company",
        action="append",
        dest="companies",
        metavar="NAME",
        help="Restrict the pass to this company (repeatable, case-insensitive)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    return parser


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """Load configuration and settle the log level: CLI, then LOG_LEVEL, then config file."""
    app_config, env_config = load_config(config_path)
    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level
    return app_config, env_config


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run jobscout.

    Returns:
        Exit code: 0 on success, 1 on configuration or fatal errors, or when a
        manual pass had company failures
    """
    start_time = time.time()
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "jobscout starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "manual_run": args.manual_run,
                "company_count": len(app_config.companies),
            },
        )

        init_database(env_config.database_url)
        service = JobResearchService(app_config)
        service.sync_companies()

        if args.manual_run:
            return _run_manual(service, args.companies, start_time)
        return _run_daemon(service, app_config, args.companies, start_time)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e.message}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            exc_info=True,
            extra={"event": "service.startup.failed", "error_type": type(e).__name__},
        )
        return 1
    finally:
        close_database()


def _run_manual(
    service: JobResearchService, companies: Optional[List[str]], start_time: float
) -> int:
    result = service.pipeline.run_once(companies)
    logger.info(
        f"Manual search completed: {result.scraped_count} scraped, "
        f"{len(result.new_jobs)} new, {result.seen_count} seen, "
        f"{len(result.expired_job_ids)} expired",
        extra={
            "event": "service.manual_run.completed",
            "duration_seconds": result.total_duration_seconds,
            "had_errors": result.had_errors,
            "uptime_seconds": round(time.time() - start_time, 2),
        },
    )
    for job in result.new_jobs:
        print(f"[new] {job.company}: {job.title} ({job.location}) {job.url}")
    return 1 if result.had_errors else 0


def _run_daemon(
    service: JobResearchService,
    app_config: AppConfig,
    companies: Optional[List[str]],
    start_time: float,
) -> int:
    shutdown_event = threading.Event()
    scheduler = SchedulerService(
        pass_callable=lambda: service.pipeline.run_once(companies),
        interval_seconds=app_config.scan_interval_seconds,
        shutdown_event=shutdown_event,
    )

    def handle_signal(signum, frame):
        logger.info(
            f"Received signal {signum}, shutting down",
            extra={"event": "service.signal_received", "signal": signum},
        )
        scheduler.shutdown(wait=False)

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    scheduler.start()
    try:
        shutdown_event.wait()
    except KeyboardInterrupt:
        scheduler.shutdown(wait=False)

    logger.info(
        "jobscout stopped",
        extra={"event": "service.stopping", "uptime_seconds": round(time.time() - start_time, 2)},
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
