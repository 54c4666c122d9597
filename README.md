# posagent

Building blocks for a local point-of-sale printing agent.

- **Receipt model**: `posagent.receipt` holds dataclasses for the receipt
  document a POS front end submits: `Receipt`, `Store`, `Terminal`,
  `Cashier`, `Line`, `Discount`, `Totals` and `Payment`.
  `Receipt.from_dict` builds a receipt from its decoded JSON wire shape.
  Missing or null keys take their zero value, unknown keys are ignored,
  and a value of the wrong type raises `ValueError`. `issued_at` must be an
  RFC 3339 time with a UTC offset. `Receipt.to_dict` converts a receipt
  back, writing `issued_at` as an RFC 3339 string.
- **TSPL2 label commands**: `posagent.tspl.commands` assembles raw TSPL2
  byte streams for thermal label printers. There is one function per
  command (`cls`, `size`, `gap`, `direction_cmd`, `density`, `speed`,
  `codepage`, `text`, `barcode_code128`, `barcode_ean13`, `qr_code`,
  `print_cmd`), a chainable `Builder`, and the enums `Dialect`,
  `Direction`, `QRMode` and `FontName`.
- **CP1252 transcoding**: `posagent.tspl.codepage.to_cp1252` turns text
  into Windows-1252 bytes. Printable ASCII, tab, LF and CR pass through
  unchanged. Any character CP1252 cannot represent, such as Arabic or CJK,
  becomes `?`, and a warning is logged once for each distinct character.
- **Identifiers**: `posagent.ids.new_uuid_v4` returns a random version 4
  UUID in lower-case 8-4-4-4-12 form.
- **Service hosting**: `posagent.service` contains
  - the service identity (`build_config`, which returns a `ServiceConfig`),
  - a single-instance guard (`acquire_single_instance`, `Handle`,
    `AlreadyRunningError`),
  - a status query (`status`),
  - install and uninstall helpers (`install`, `uninstall`,
    `uninstall_with_deps`, `stop_with_timeout`), which wrap failures in
    `ServiceError`,
  - a `Program` that runs a server and an optional heartbeat in
    background threads and stops them with timeouts.

## Installation

```
pip install .
```

The package has no runtime dependencies. To install the test tools too:

```
pip install ".[test]"
```

## Printing a price tag

```python
from posagent.tspl.commands import Builder, Dialect, Direction, FontName

label = (
    Builder(Dialect.STANDARD)
    .cls()
    .size(50, 40)
    .gap(2, 0)
    .direction(Direction.TOP_LEFT)
    .density(8)
    .speed(4)
    .codepage("1252")
    .text_cp1252(10, 10, FontName.FONT_3, 0, 1, 1, "Café Bistro")
    .text_simple(10, 50, FontName.FONT_4, "150 DZD")
    .barcode_ean13(10, 100, 80, 2, 0, 2, 2, "9780201379624")
    .print(1, 1)
    .to_bytes()
)
```

Each command ends in exactly one CRLF. String arguments are double-quoted.
CR and LF inside a value are replaced by spaces, and double quotes inside a
value by single quotes, so a value cannot end the line or inject another
command.

A builder created with `Dialect.RONGTA` writes EAN-13 barcodes with the
`"EAN-13"` identifier. The standard dialect writes `"EAN13"`.

## Loading a receipt

```python
from posagent.receipt import Receipt

receipt = Receipt.from_dict(payload)   # payload: the decoded JSON body
assert Receipt.from_dict(receipt.to_dict()) == receipt
```

## Transcoding text

```python
from posagent.tspl.codepage import to_cp1252

to_cp1252("Café — 150 €")   # b'Caf\xe9 \x97 150 \x80'
```

## Running the agent's background work

```python
import threading
from posagent.service import Program

class Server:
    def run(self, stop_event: threading.Event) -> None:
        stop_event.wait()

program = Program(server=Server())
program.start()   # returns at once
program.stop()    # sets the event and waits up to 10 s for the server
```

`uninstall_with_deps(svc, status, stop_timeout, logger)` accepts any object
with `install()`, `uninstall()`, `start()` and `stop()` methods. If `status()`
reports `"running"`, it stops the service first. A failed or hung stop is
logged and does not prevent the unregister.

## What this package does not do

- It does not render receipts to ESC/POS bytes, and it does not send
  anything to a printer. It only models receipts and builds TSPL2 label
  byte streams.
- It has no HTTP server, no heartbeat client and no command-line program.
  `Program` runs whatever server and heartbeat objects you give it.
- It does not talk to an operating-system service manager by itself. The
  single-instance guard never reports contention, `status()` returns
  `"unsupported on this platform"`, and post-install settings are not
  applied.

## Running the tests

```
pytest
```