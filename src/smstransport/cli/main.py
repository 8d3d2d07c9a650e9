"""Main CLI entry point for smstransport."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable

from smstransport import __version__
from smstransport.driver.config import MockSessionConfig
from smstransport.driver.mock import MockDeviceSession
from smstransport.exceptions import SmsTransportError
from smstransport.messages import InboundMessage, SendResult, SendStatus
from smstransport.registry import ADAPTOR_REGISTRY, DRIVER_REGISTRY
from smstransport.transport import create


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smstransport",
        description="smstransport: pluggable SMS transport",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  smstransport drivers                                   List drivers and adaptors
  smstransport send --to +15551234 --content hello       Send through the simulated modem
  smstransport send --to +15551234 --content "$(cat long.txt)" --fail-fragment 1
  smstransport --version                                 Show version
        """,
    )
    parser.add_argument("--version", action="version", version=f"smstransport {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("drivers", help="List registered drivers and adaptors")

    send = subparsers.add_parser("send", help="Send a message through the simulated modem")
    send.add_argument("--to", required=True, help="Recipient phone number")
    send.add_argument("--content", required=True, help="Message body")
    send.add_argument(
        "--fail-fragment",
        metavar="INDEX",
        type=int,
        action="append",
        default=[],
        help="Make fragment INDEX (0-based) fail; may be repeated",
    )
    send.add_argument("--debug", action="store_true", help="Trace each driver phase to stderr")
    return parser


def _send(args: argparse.Namespace) -> int:
    try:
        session = MockDeviceSession(MockSessionConfig(failed_fragments=frozenset(args.fail_fragment)))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    outcome: dict[str, object] = {}

    def on_sent(err: BaseException | None, result: SendResult | None) -> None:
        outcome["err"] = err
        outcome["result"] = result

    def on_receive(message: InboundMessage, done: Callable[..., None]) -> None:
        print(f"Received from {message.from_}: {message.content}")
        done()

    def on_error(err: BaseException) -> None:
        print(f"Device error: {err}", file=sys.stderr)

    transport = create({"debug": args.debug}, session_factory=lambda options: session)
    transport.register_receive_handler(on_receive)
    transport.register_error_handler(on_error)
    try:
        transport.start()
        transport.send({"to": args.to, "content": args.content}, on_sent)
        session.poll()
    finally:
        transport.destroy()

    err = outcome.get("err")
    result = outcome.get("result")
    if err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    if isinstance(result, SendResult):
        print(
            f"{result.result.value} ({result.fragments_sent}/{result.fragments_total} fragments sent)"
        )
        return 0 if result.result is SendStatus.SUCCESS else 1
    print("Error: send did not complete", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the smstransport CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "debug", False) else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "drivers":
        print("Drivers:")
        for name, cls in sorted(DRIVER_REGISTRY.items()):
            print(f"  {name:<16} {cls.__name__}")
        print("Adaptors:")
        for name, cls in sorted(ADAPTOR_REGISTRY.items()):
            print(f"  {name:<16} {cls.__name__}")
        return 0

    if args.command == "send":
        try:
            return _send(args)
        except SmsTransportError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
