"""Command-line front-end: ``sensorsend stream`` and ``sensorsend listen``."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence, TextIO

from .config import SensorSendConfig, load_config
from .core import BlankAddressError, build_streamer, format_sample
from .receiver import DatagramListener
from .sensors.channels import RawEvent, parse_line
from .sensors.synthetic import synthetic_events

logger = logging.getLogger(__name__)


def _events_from_lines(lines: Iterable[str]) -> Iterator[Optional[RawEvent]]:
    for line in lines:
        yield parse_line(line)


def _configure_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve_config(args: argparse.Namespace) -> SensorSendConfig:
    cfg = load_config(args.config)
    if args.host is not None:
        cfg.host = args.host
    if args.port is not None:
        cfg.port = args.port
    return cfg.sanitized()


def _run_stream(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    cfg = _resolve_config(args)
    _configure_logging(cfg.log_level, args.verbose)

    streamer = build_streamer(cfg)
    try:
        streamer.connect(cfg.host)
    except BlankAddressError:
        streamer.close()
        parser.error("No host to stream to: pass --host or set 'host' in the config file.")

    handle: Optional[TextIO] = None
    try:
        if args.synthetic:
            events: Iterable[Optional[RawEvent]] = synthetic_events(args.rate, args.duration)
        elif args.input in (None, "-"):
            events = _events_from_lines(sys.stdin)
        else:
            path = Path(args.input).expanduser()
            if not path.exists():
                parser.error(f"Input file not found: {path}")
            handle = path.open("r", encoding="utf-8")
            events = _events_from_lines(handle)

        produced = streamer.feed(events)
        logger.info("Produced %d samples", produced)
    except KeyboardInterrupt:
        pass
    finally:
        streamer.close()
        if handle is not None:
            handle.close()

    stats = streamer.dispatcher.stats.snapshot()
    print(
        "sent={sent} failed={failed} dropped={dropped} submitted={submitted}".format(**stats)
    )
    return 0


def _run_listen(args: argparse.Namespace) -> int:
    _configure_logging("INFO", args.verbose)
    received = 0

    def _print_sample(sample, addr) -> None:
        nonlocal received
        received += 1
        print(f"{addr[0]}:{addr[1]} {format_sample(sample)}", flush=True)

    listener = DatagramListener(args.bind, args.port, callback=_print_sample)
    listener.start()
    try:
        while listener.is_alive():
            if args.count and received >= args.count:
                break
            time.sleep(0.05)
    except KeyboardInterrupt:
        pass
    finally:
        listener.stop()
    logger.info("Received %d samples", received)
    return 0


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sensorsend",
        description="Stream gravity/gyroscope samples as UDP datagrams.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every datagram (DEBUG level).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    stream = sub.add_parser("stream", help="Send raw sensor events to a receiver.")
    stream.add_argument("-c", "--config", type=str, help="YAML configuration file.")
    stream.add_argument("--host", type=str, help="Receiver address (overrides config).")
    stream.add_argument("--port", type=int, help="Receiver UDP port (default: 1593).")
    stream.add_argument(
        "-i",
        "--input",
        type=str,
        help=(
            "File of raw events, one JSON object or 'channel,x,y,z' per line. "
            "Use '-' or omit for stdin."
        ),
    )
    stream.add_argument(
        "--synthetic",
        action="store_true",
        help="Generate synthetic gravity/gyroscope events instead of reading input.",
    )
    stream.add_argument(
        "--rate",
        type=float,
        default=50.0,
        help="Synthetic events per second per channel (default: 50).",
    )
    stream.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Synthetic run time in seconds (default: until Ctrl+C).",
    )

    listen = sub.add_parser("listen", help="Print samples received on a UDP port.")
    listen.add_argument("--bind", type=str, default="0.0.0.0", help="Local address (default: 0.0.0.0).")
    listen.add_argument("--port", type=int, default=1593, help="UDP port (default: 1593).")
    listen.add_argument("-n", "--count", type=int, default=0, help="Exit after N samples (0 = forever).")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    if args.command == "stream":
        return _run_stream(args, parser)
    return _run_listen(args)


if __name__ == "__main__":
    raise SystemExit(main())
