"""Wire formatting of scalar values.

The exchange compares string fields byte for byte after signing,
so numbers and addresses must have exactly one textual form.
"""

from decimal import Context, Decimal, InvalidOperation

from eth_typing import HexAddress
from eth_utils import is_hex_address

from hypercore_signing.exceptions import EncodingError


def decimal_to_wire(value: Decimal | int | float | str) -> str:
    """Format a number the way the exchange expects.

    - No exponent, no trailing zeros, no trailing dot

    - Negative zero becomes ``0``

    - Floats go through ``str()`` first so ``0.1`` stays ``0.1``

    Example:

    .. code-block:: python

        assert decimal_to_wire(Decimal("1.500")) == "1.5"
        assert decimal_to_wire(Decimal("1E+2")) == "100"

    :raise EncodingError:
        Not a finite number.
    """
    if isinstance(value, bool):
        raise EncodingError(f"Bool is not a decimal: {value}")

    try:
        d = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except InvalidOperation as e:
        raise EncodingError(f"Not a decimal number: {value!r}") from e

    if not d.is_finite():
        raise EncodingError(f"Non-finite number cannot be encoded: {value!r}")

    if d.is_zero():
        return "0"

    # Wide enough context so normalize() never rounds
    context = Context(prec=max(len(d.as_tuple().digits), 1))
    return format(d.normalize(context), "f")


def normalise_address(address: str) -> HexAddress:
    """Lowercase ``0x`` hex address.

    Checksum casing is not verified.

    :raise EncodingError:
        Not a 20 byte hex address.
    """
    if not isinstance(address, str) or not is_hex_address(address):
        raise EncodingError(f"Not a hex address: {address!r}")
    return HexAddress(address.lower())


def format_cloid(cloid: int | str | bytes) -> str:
    """Client order id as ``0x`` + 32 lowercase hex characters.

    :param cloid:
        128-bit integer, 16 raw bytes or a hex string.

    :raise EncodingError:
        Does not fit 128 bits.
    """
    match cloid:
        case bool():
            raise EncodingError(f"Bad cloid: {cloid!r}")
        case int():
            value = cloid
        case bytes():
            if len(cloid) != 16:
                raise EncodingError(f"cloid must be 16 bytes, got {len(cloid)}")
            value = int.from_bytes(cloid, "big")
        case str():
            hex_str = cloid[2:] if cloid.startswith("0x") else cloid
            if len(hex_str) != 32:
                raise EncodingError(f"cloid must be 32 hex characters, got {cloid!r}")
            try:
                value = int(hex_str, 16)
            except ValueError as e:
                raise EncodingError(f"cloid is not hex: {cloid!r}") from e
        case _:
            raise EncodingError(f"Bad cloid type: {type(cloid)}")

    if not 0 <= value < 2**128:
        raise EncodingError(f"cloid out of range: {cloid!r}")

    return f"0x{value:032x}"
