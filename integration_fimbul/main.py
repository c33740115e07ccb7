"""Command line entry point: upsert the latest reading of each station."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from typing import Sequence

from pydantic import ValidationError

from .application import WeatherObservedService
from .config import Settings, get_settings
from .errors import IntegrationError, RunCancelledError
from .fimbul_client import FimbulClient
from .logging_config import configure_logging
from .ngsild import ContextBrokerClient

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_CANCELLED = 130


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--stations",
        "--stationId",
        dest="stations",
        default=None,
        help="Comma separated station ids (default: STATION_IDS from the environment)",
    )
    parser.add_argument(
        "--prefix",
        default=None,
        help="Entity id prefix ending (default: ENTITY_PREFIX_ENDING from the environment)",
    )
    parser.add_argument(
        "--no-clock-skew-correction",
        action="store_true",
        help="Keep timestamps that appear to be in the future as reported",
    )
    return parser.parse_args(argv)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    update: dict[str, object] = {}
    if args.stations is not None:
        update["station_ids"] = args.stations
    if args.prefix is not None:
        update["entity_prefix_ending"] = args.prefix
    if args.no_clock_skew_correction:
        update["apply_clock_skew_correction"] = False
    return settings.model_copy(update=update) if update else settings


def make_signal_handler(stop_event: threading.Event):
    """Return a handler that flags the stop event and interrupts the main thread.

    Raising from the handler aborts a blocking HTTP call instead of waiting
    for its timeout.
    """

    def signal_handler(sig, frame):  # noqa: ANN001
        logger.info("received signal, stopping", extra={"signal": sig})
        stop_event.set()
        raise KeyboardInterrupt

    return signal_handler


def run(
    settings: Settings,
    *,
    stop_event: threading.Event | None = None,
) -> int:
    fimbul = FimbulClient(settings.fimbul_url, timeout=settings.fimbul_timeout_seconds)
    broker = ContextBrokerClient(
        settings.context_broker_url,
        timeout=settings.broker_timeout_seconds,
        tenant=settings.broker_tenant,
        debug=settings.broker_debug,
    )
    service = WeatherObservedService(broker, fimbul, settings, stop_event=stop_event)
    try:
        service.create_weather_observed(
            settings.station_id_list,
            settings.entity_prefix_ending,
        )
    except KeyboardInterrupt:
        if stop_event is not None:
            stop_event.set()
        logger.warning("run cancelled")
        return EXIT_CANCELLED
    except RunCancelledError as exc:
        logger.warning("run cancelled", extra={"err": str(exc)})
        return EXIT_CANCELLED
    except IntegrationError as exc:
        logger.error(
            "failed to create weather observed entities (%s): %s",
            exc.__class__.__name__,
            exc,
        )
        return EXIT_FAILURE
    finally:
        fimbul.close()
        broker.close()
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = _apply_overrides(get_settings(), args)
    except ValidationError as exc:
        configure_logging()
        logger.error("invalid configuration", extra={"err": str(exc)})
        return EXIT_CONFIG

    configure_logging(settings.log_level, service=settings.app_name)

    stop_event = threading.Event()
    handler = make_signal_handler(stop_event)
    signal.signal(signal.SIGINT, handler)
    signal.signal(signal.SIGTERM, handler)

    return run(settings, stop_event=stop_event)


if __name__ == "__main__":
    sys.exit(main())
