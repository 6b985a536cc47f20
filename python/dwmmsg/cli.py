"""Command-line front end: ``dwm-msg [options] <message>``."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .client import DwmClient
from .config import load_config
from .payload import is_unsigned_int
from .protocol import EVENTS, DwmIpcError, Message

logger = logging.getLogger("dwm-msg")

_TYPES = {
    "command": "run_command",
    "run_command": "run_command",
    "get_monitors": "get_monitors",
    "get_tags": "get_tags",
    "get_layouts": "get_layouts",
    "get_dwm_client": "get_dwm_client",
    "subscribe": "subscribe",
}


def _message_type(value: str) -> str:
    try:
        return _TYPES[value.lower()]
    except KeyError:
        raise argparse.ArgumentTypeError(
            "Unknown message type (known types: command, get_monitors, get_tags, "
            "get_layouts, get_dwm_client, subscribe)"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dwm-msg",
        description="Communicate with dwm, the suckless window manager.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "message types:\n"
            "  run_command <name> [args...]  Run an IPC command\n"
            "  get_monitors                  Get monitor properties\n"
            "  get_tags                      Get list of tags\n"
            "  get_layouts                   Get list of layouts\n"
            "  get_dwm_client <window_id>    Get dwm client properties\n"
            "  subscribe [events...]         Subscribe to specified events\n"
            "\nevents: " + ", ".join(EVENTS)
        ),
    )
    parser.add_argument("-s", "--socket", help="path to the dwm IPC socket")
    parser.add_argument(
        "-t", "--type", type=_message_type, default="run_command",
        help="message type (default: run_command)",
    )
    parser.add_argument(
        "-i", "--ignore-reply", action="store_true", default=None,
        help='don\'t print "success" replies from run_command and subscribe',
    )
    parser.add_argument(
        "-m", "--monitor", action="store_true",
        help="with subscribe, keep listening for events instead of exiting "
             "after the first one",
    )
    parser.add_argument("-c", "--config", help="path to a YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("message", nargs=argparse.REMAINDER, help="command name and arguments, window id, or event names")
    return parser


def _print_reply(reply: Optional[Message]) -> None:
    if reply is None:
        return
    sys.stdout.write(reply.text() + "\n")
    sys.stdout.flush()


def _setup_logging(level: str) -> None:
    logging.basicConfig(stream=sys.stderr, format="dwm-msg: %(message)s")
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.WARNING))


def run(client: DwmClient, msg_type: str, message: List[str], monitor: bool = False) -> None:
    """Carry out one invocation against an open client."""
    if msg_type == "run_command":
        _print_reply(client.run_command(message[0], *message[1:]))
    elif msg_type == "get_monitors":
        _print_reply(client.get_monitors())
    elif msg_type == "get_tags":
        _print_reply(client.get_tags())
    elif msg_type == "get_layouts":
        _print_reply(client.get_layouts())
    elif msg_type == "get_dwm_client":
        _print_reply(client.get_client(message[0]))
    elif msg_type == "subscribe":
        for event in message:
            _print_reply(client.subscribe(event))
        if monitor:
            for event in client.events():
                _print_reply(event)
        else:
            _print_reply(client.read_event())


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.monitor and args.type != "subscribe":
        parser.error('The monitor option -m is used with "-t subscribe" exclusively.')
    if args.type == "run_command" and not args.message:
        parser.error("No command specified")
    if args.type == "get_dwm_client":
        if not args.message:
            parser.error("Expected the window id")
        if not is_unsigned_int(args.message[0]):
            parser.error("Expected unsigned integer argument")
    if args.type == "subscribe" and not args.message:
        parser.error("Expected event name")

    try:
        config = load_config(args.config)
    except DwmIpcError as exc:
        _setup_logging("warning")
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1

    _setup_logging("debug" if args.verbose else config.log_level)

    socket_path = args.socket or config.socket_path
    ignore_reply = config.ignore_reply if args.ignore_reply is None else args.ignore_reply

    try:
        with DwmClient(socket_path, ignore_reply=ignore_reply) as client:
            run(client, args.type, args.message, monitor=args.monitor)
    except DwmIpcError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1
    except KeyboardInterrupt:
        return 130
    except BrokenPipeError:
        # stdout was closed by the reader; point it at devnull so the
        # interpreter's final flush does not fail again.
        try:
            fd = sys.stdout.fileno()
            devnull = os.open(os.devnull, os.O_WRONLY)
            os.dup2(devnull, fd)
        except (OSError, ValueError):
            pass
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
