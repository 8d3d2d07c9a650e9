#!/usr/bin/env python3
"""Basic usage example for smstransport.

This example demonstrates:
1. Building a transport against the simulated modem
2. Registering handlers before starting
3. Sending short and fragmented messages
4. Acknowledging inbound messages only after they are stored
"""

from __future__ import annotations

import logging

from smstransport import MockDeviceSession, MockSessionConfig, create


def main() -> None:
    """Run the basic usage example."""
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print("=" * 60)
    print("smstransport Basic Usage Example")
    print("=" * 60)
    print()

    # Second fragment of every long message is lost
    session = MockDeviceSession(MockSessionConfig(failed_fragments=frozenset({1})))
    transport = create({"debug": False}, session_factory=lambda options: session)

    inbox: list[str] = []

    def on_message(message, done):
        inbox.append(f"{message.from_}: {message.content}")
        done()  # message is deleted from the SIM only now

    def on_error(err):
        print(f"   Device error: {err}")

    print("1. Registering handlers and starting...")
    transport.register_receive_handler(on_message)
    transport.register_error_handler(on_error)
    transport.start()
    print()

    print("2. Sending messages...")

    def report(label):
        def callback(err, result):
            if err:
                print(f"   {label}: error {err}")
            else:
                print(
                    f"   {label}: {result.result.value} "
                    f"({result.fragments_sent}/{result.fragments_total} fragments)"
                )

        return callback

    transport.send({"to": "+15551234", "content": "Short hello"}, report("short"))
    transport.send({"to": "+15551234", "content": "A" * 300}, report("long"))
    transport.send({"to": "+15551234"}, report("malformed"))
    session.poll()
    print()

    print("3. Receiving messages...")
    session.inject_receive("+15559876", "Clinic stock low")
    session.inject_error("signal lost")
    session.poll()
    for line in inbox:
        print(f"   {line}")
    print(f"   Messages left on SIM: {len(session.stored_messages)}")
    print()

    transport.destroy()
    print("Done.")


if __name__ == "__main__":
    main()
