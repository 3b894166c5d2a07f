"""CLI entry point for the ADS-B relay."""

from __future__ import annotations

import argparse
import contextlib
import logging
import os
import sys
from typing import Iterator, Optional, Sequence

from .common.config import Settings, SinkType, get_settings
from .common.errors import ConfigError, SinkConnectionError
from .core.pipeline.driver import RelayPipeline
from .core.transport.feed_client import FeedClient, iter_text_lines
from .sinks.factory import create_sink

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STREAM_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_STARTUP_ERROR = 3
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="adsb-relay",
        description="Relay SBS (BaseStation) ADS-B messages to MQTT or Kafka",
    )
    p.add_argument(
        "--input",
        metavar="PATH",
        help="read lines from a file ('-' for stdin) instead of the TCP feed",
    )
    p.add_argument(
        "--sink",
        choices=[s.value for s in SinkType],
        help="override SINK_TYPE (default: mqtt)",
    )
    p.add_argument("--env-file", metavar="PATH", help="dotenv file (default: ADSB_ENV_FILE or .env)")
    p.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"))
    p.add_argument("-v", "--verbose", action="store_true", help="log every publish and notification")
    return p


@contextlib.contextmanager
def open_lines(settings: Settings, input_path: Optional[str]) -> Iterator[Iterator[str]]:
    """Abre la fuente de líneas: archivo, stdin o feed TCP."""
    if input_path == "-":
        yield iter_text_lines(sys.stdin.buffer)
    elif input_path:
        with open(input_path, "rb") as f:
            yield iter_text_lines(f)
    else:
        if not settings.feed.host:
            raise ConfigError("ADSB_HOST not set")
        with FeedClient(
            settings.feed.host,
            settings.feed.port,
            connect_timeout=settings.feed.connect_timeout,
        ) as feed:
            yield feed.lines()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else getattr(logging, str(args.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    try:
        settings = get_settings(env_file=args.env_file, sink_type=args.sink)
    except ConfigError as e:
        logger.error("[CONFIG] %s", e)
        return EXIT_CONFIG_ERROR

    logger.info("ADS-B relay started")

    try:
        with open_lines(settings, args.input) as lines:
            return _relay(settings, lines)
    except ConfigError as e:
        logger.error("[CONFIG] %s", e)
        return EXIT_CONFIG_ERROR
    except SinkConnectionError as e:
        logger.error("[SINK] %s", e)
        return EXIT_STARTUP_ERROR
    except OSError as e:
        logger.error("[FEED] %s", e)
        return EXIT_STARTUP_ERROR
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_INTERRUPTED


def _relay(settings: Settings, lines: Iterator[str]) -> int:
    with create_sink(settings) as sink:
        pipeline = RelayPipeline(sink, stats_interval=settings.stats_interval)
        try:
            pipeline.run(lines)
        except OSError:
            # Ya registrado por el pipeline
            return EXIT_STREAM_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
