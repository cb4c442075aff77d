"""Fixed-size payload framing for ping-pong events.

Every event carries exactly ``size`` bytes laid out as::

    <decimal sequence number><separator><filler ... filler>

e.g. with a size of 8, a separator of " " and a filler of "a", exchange 12
is framed as ``"12 aaaaa"``.
"""

from typing import Optional, Union

from .errors import EventFormatError


def _check_single_char(name: str, value: str) -> None:
    if len(value) != 1 or not value.isascii():
        raise ValueError(f"{name} must be a single ASCII character, got {value!r}")


def check_framing_chars(separator: str, filler: str) -> None:
    """Raise ValueError unless separator and filler can frame a payload."""
    _check_single_char("separator", separator)
    _check_single_char("filler", filler)
    if filler == separator or filler.isdigit() or separator.isdigit():
        raise ValueError("separator and filler must be distinct non-digit characters")


def encode_payload(
    sequence_number: int,
    size: int,
    separator: str = " ",
    filler: str = "a",
) -> str:
    """
    Build the payload published for one exchange.

    Args:
        sequence_number: 1-based exchange number
        size: Exact payload size in bytes
        separator: Character terminating the number
        filler: Character used to pad the payload up to ``size``

    Returns:
        ASCII payload of exactly ``size`` characters

    Raises:
        ValueError: If the number is not positive, the size cannot hold the
            header, or separator/filler are not single ASCII characters
    """
    if sequence_number < 1:
        raise ValueError(f"Sequence number must be positive, got {sequence_number}")
    check_framing_chars(separator, filler)

    header = f"{sequence_number}{separator}"
    if len(header) > size:
        raise ValueError(
            f"Event size {size} is too small for sequence number {sequence_number}"
        )
    return header.ljust(size, filler)


def parse_header(
    payload: Optional[Union[str, bytes]],
    size: int,
    separator: str = " ",
    expected: Optional[int] = None,
) -> int:
    """
    Validate a received payload and return the sequence number it encodes.

    Args:
        payload: Received event data (text or raw bytes)
        size: Exact payload size in bytes
        separator: Character terminating the number
        expected: Sequence number being awaited, attached to raised errors

    Returns:
        The decoded sequence number, which may carry a sign

    Raises:
        EventFormatError: If the payload is missing, has the wrong length, has
            no separator, has an empty number, or the number is not decimal
    """
    if payload is None:
        raise EventFormatError("Unexpected event size: no data", expected)

    raw = payload if isinstance(payload, bytes) else payload.encode("utf-8")
    if len(raw) != size:
        raise EventFormatError(
            f"Unexpected event size: {len(raw)} bytes (expected {size})", expected
        )

    pos = raw.find(separator.encode("ascii"))
    if pos < 0:
        raise EventFormatError("Unexpected event format: separator not found", expected)
    if pos == 0:
        raise EventFormatError("Unexpected event format: empty sequence number", expected)

    token = raw[:pos]
    # Signed numbers parse; a negative one never matches and reads as stale
    digits = token[1:] if token[:1] in (b"+", b"-") else token
    if not digits or not all(0x30 <= b <= 0x39 for b in digits):
        raise EventFormatError(
            f"Unexpected event format: {token[:32]!r} is not a decimal number", expected
        )
    return int(token)
