"""TSPL2 command lines for thermal label printers.

Each command is one line of ASCII terminated by CRLF. The functions here
return a single command as bytes. :class:`Builder` chains them into a
complete label job. Nothing here performs I/O.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Union

from posagent.tspl.codepage import to_cp1252

CRLF = b"\r\n"

Payload = Union[str, bytes]


class Dialect(str, Enum):
    """Vendor variant of TSPL2. Only EAN-13 barcodes differ between them."""

    STANDARD = "standard"
    RONGTA = "rongta"


class Direction(IntEnum):
    """Label print direction: where the origin of the label area sits."""

    BOTTOM_LEFT = 0
    TOP_LEFT = 1


class QRMode(str, Enum):
    """Error correction level of a QR code."""

    L = "L"
    M = "M"
    Q = "Q"
    H = "H"


class FontName(str, Enum):
    """Printer-internal font identifiers used by TEXT."""

    FONT_1 = "1"
    FONT_2 = "2"
    FONT_3 = "3"
    FONT_4 = "4"
    FONT_5 = "5"
    ROMAN = "ROMAN.TTF"


def _raw(value: Payload | Enum) -> bytes:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bytes):
        return value
    return str(value).encode("utf-8")


def _sanitize(value: Payload | Enum) -> bytes:
    """Replace CR and LF with spaces so a value cannot end the command line."""
    return _raw(value).replace(b"\r", b" ").replace(b"\n", b" ")


def _quoted(value: Payload | Enum) -> bytes:
    """Double-quote a value; inner double quotes become single quotes."""
    return b'"' + _sanitize(value).replace(b'"', b"'") + b'"'


def _line(text: str) -> bytes:
    return text.encode("ascii") + CRLF


def cls() -> bytes:
    """CLS: clear the image buffer."""
    return _line("CLS")


def size(width_mm: int, height_mm: int) -> bytes:
    """SIZE: label width and height in millimetres."""
    return _line(f"SIZE {int(width_mm)} mm,{int(height_mm)} mm")


def gap(gap_mm: int, offset_mm: int) -> bytes:
    """GAP: distance between gap-sensed labels and its offset, in millimetres."""
    return _line(f"GAP {int(gap_mm)} mm,{int(offset_mm)} mm")


def direction_cmd(d: Direction | int) -> bytes:
    """DIRECTION: print direction, 0 or 1."""
    return _line(f"DIRECTION {int(d)}")


def density(level: int) -> bytes:
    """DENSITY: darkness from 0 to 15."""
    return _line(f"DENSITY {int(level)}")


def speed(ips: int) -> bytes:
    """SPEED: print speed in inches per second."""
    return _line(f"SPEED {int(ips)}")


def codepage(name: str) -> bytes:
    """CODEPAGE: character map for TEXT payloads, e.g. ``"1252"``."""
    return b"CODEPAGE " + _raw(name) + CRLF


def text(
    x: int,
    y: int,
    font: FontName | str,
    rotation: int,
    x_mul: int,
    y_mul: int,
    s: Payload,
) -> bytes:
    """TEXT: place a string at (x, y) dots with a printer-internal font.

    Text payloads are encoded as UTF-8; bytes are written unchanged.
    """
    head = b"TEXT %d,%d," % (x, y)
    params = b",%d,%d,%d," % (rotation, x_mul, y_mul)
    return head + _quoted(font) + params + _quoted(s) + CRLF


def barcode_code128(
    x: int,
    y: int,
    height_dots: int,
    human_readable: int,
    rotation: int,
    narrow: int,
    wide: int,
    data: Payload,
) -> bytes:
    """BARCODE: a CODE128 symbol at (x, y) dots."""
    head = b'BARCODE %d,%d,"128",%d,%d,%d,%d,%d,' % (
        x, y, height_dots, human_readable, rotation, narrow, wide,
    )
    return head + _quoted(data) + CRLF


def barcode_ean13(
    dialect: Dialect | str,
    x: int,
    y: int,
    height_dots: int,
    human_readable: int,
    rotation: int,
    narrow: int,
    wide: int,
    data: Payload,
) -> bytes:
    """BARCODE: an EAN-13 symbol; Rongta firmware wants ``EAN-13``, others ``EAN13``."""
    identifier = "EAN-13" if dialect == Dialect.RONGTA else "EAN13"
    params = b",%d,%d,%d,%d,%d," % (height_dots, human_readable, rotation, narrow, wide)
    return b"BARCODE %d,%d," % (x, y) + _quoted(identifier) + params + _quoted(data) + CRLF


def qr_code(
    x: int,
    y: int,
    ecc_level: QRMode | str,
    cell_width: int,
    mode: str,
    rotation: int,
    data: Payload,
) -> bytes:
    """QRCODE: a QR symbol at (x, y) dots."""
    return (
        b"QRCODE %d,%d," % (x, y)
        + _quoted(ecc_level)
        + b",%d," % cell_width
        + _quoted(mode)
        + b",%d," % rotation
        + _quoted(data)
        + CRLF
    )


def print_cmd(quantity: int, copies: int) -> bytes:
    """PRINT: emit the assembled image ``quantity`` times, each ``copies`` times."""
    return _line(f"PRINT {int(quantity)},{int(copies)}")


class Builder:
    """Accumulates TSPL2 command lines through chainable methods.

    The dialect only affects :meth:`barcode_ean13`.
    """

    def __init__(self, dialect: Dialect = Dialect.STANDARD) -> None:
        self.dialect = Dialect(dialect)
        self._buf = bytearray()

    def to_bytes(self) -> bytes:
        """Return a copy of the accumulated job."""
        return bytes(self._buf)

    def write(self, data: bytes) -> "Builder":
        """Append raw bytes; the caller supplies the CRLF terminator."""
        self._buf += data
        return self

    def cls(self) -> "Builder":
        return self.write(cls())

    def size(self, width_mm: int, height_mm: int) -> "Builder":
        return self.write(size(width_mm, height_mm))

    def gap(self, gap_mm: int, offset_mm: int) -> "Builder":
        return self.write(gap(gap_mm, offset_mm))

    def direction(self, d: Direction | int) -> "Builder":
        return self.write(direction_cmd(d))

    def density(self, level: int) -> "Builder":
        return self.write(density(level))

    def speed(self, ips: int) -> "Builder":
        return self.write(speed(ips))

    def codepage(self, name: str) -> "Builder":
        return self.write(codepage(name))

    def text(
        self,
        x: int,
        y: int,
        font: FontName | str,
        rotation: int,
        x_mul: int,
        y_mul: int,
        s: Payload,
    ) -> "Builder":
        return self.write(text(x, y, font, rotation, x_mul, y_mul, s))

    def text_simple(self, x: int, y: int, font: FontName | str, s: Payload) -> "Builder":
        """Append TEXT with no rotation and 1x1 magnification."""
        return self.text(x, y, font, 0, 1, 1, s)

    def text_cp1252(
        self,
        x: int,
        y: int,
        font: FontName | str,
        rotation: int,
        x_mul: int,
        y_mul: int,
        s: str,
    ) -> "Builder":
        """Append TEXT with the string transcoded to CP1252 (see ``to_cp1252``)."""
        return self.text(x, y, font, rotation, x_mul, y_mul, to_cp1252(s))

    def barcode_code128(
        self,
        x: int,
        y: int,
        height_dots: int,
        human_readable: int,
        rotation: int,
        narrow: int,
        wide: int,
        data: Payload,
    ) -> "Builder":
        return self.write(
            barcode_code128(x, y, height_dots, human_readable, rotation, narrow, wide, data)
        )

    def barcode_ean13(
        self,
        x: int,
        y: int,
        height_dots: int,
        human_readable: int,
        rotation: int,
        narrow: int,
        wide: int,
        data: Payload,
    ) -> "Builder":
        return self.write(
            barcode_ean13(
                self.dialect, x, y, height_dots, human_readable, rotation, narrow, wide, data
            )
        )

    def qr_code(
        self,
        x: int,
        y: int,
        ecc_level: QRMode | str,
        cell_width: int,
        mode: str,
        rotation: int,
        data: Payload,
    ) -> "Builder":
        return self.write(qr_code(x, y, ecc_level, cell_width, mode, rotation, data))

    def print(self, quantity: int, copies: int) -> "Builder":
        return self.write(print_cmd(quantity, copies))