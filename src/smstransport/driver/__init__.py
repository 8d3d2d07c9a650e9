"""SMS driver layer.

A driver owns one modem session and offers a small callback contract:
``send``, receive/error handler registration with an acknowledgement
handshake for inbound messages, and a start/stop/destroy lifecycle.

## Available Drivers

- **GammuJsonDriver** (``gammu-json``): binds to a gammu-json style device
  session; runs against the simulated session unless a factory is given
- **MockDeviceSession**: in-memory modem for tests and demos, with
  fragmentation and failure injection

## Quick Start

```python
from smstransport.driver import GammuJsonDriver, MockDeviceSession

session = MockDeviceSession()
driver = GammuJsonDriver(session_factory=lambda options: session)
driver.initialize({"debug": False})

def on_message(message, done):
    database.save(message)
    done()  # only now is the message deleted from the SIM

driver.register_receive_handler(on_message)
driver.register_error_handler(print)
driver.start()

driver.send({"to": "+15551234", "content": "hello"}, lambda err, result: print(result))
session.poll()
```
"""

from smstransport.driver.base import Driver, DriverState
from smstransport.driver.config import DriverOptions, GammuJsonOptions, MockSessionConfig
from smstransport.driver.gammu_json import GammuJsonDriver
from smstransport.driver.mock import MockDeviceSession
from smstransport.driver.session import DeviceSession

__all__ = [
    "Driver",
    "DriverState",
    "DriverOptions",
    "GammuJsonOptions",
    "GammuJsonDriver",
    "MockSessionConfig",
    "MockDeviceSession",
    "DeviceSession",
]
