"""Conversions between UTF-32 and UTF-16 code units, plus UTF-8 validation.

Each converter walks a sequence of code units and reports how far it got:
the produced output, how many source units were consumed and a
:class:`ConversionResult` describing why it stopped.  A strict conversion
stops on isolated surrogates; a lenient one replaces them.  Illegal input
is always reported, whatever the flags.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass, field

UNI_REPLACEMENT_CHAR = 0x0000FFFD
UNI_MAX_BMP = 0x0000FFFF
UNI_MAX_UTF16 = 0x0010FFFF
UNI_MAX_UTF32 = 0x7FFFFFFF
UNI_MAX_LEGAL_UTF32 = 0x0010FFFF

_SUR_HIGH_START = 0xD800
_SUR_HIGH_END = 0xDBFF
_SUR_LOW_START = 0xDC00
_SUR_LOW_END = 0xDFFF

_HALF_SHIFT = 10
_HALF_BASE = 0x0010000
_HALF_MASK = 0x3FF

# Number of trailing bytes that follow a given UTF-8 lead byte.  Five- and
# six-byte forms are kept so that old-style sequences are recognised (and
# then rejected as illegal).
_TRAILING_BYTES = bytes(
    [0] * 192 + [1] * 32 + [2] * 16 + [3] * 8 + [4] * 4 + [5] * 4
)

# Values subtracted after accumulating a UTF-8 sequence, per trailing count.
_OFFSETS_FROM_UTF8 = (
    0x00000000,
    0x00003080,
    0x000E2080,
    0x03C82080,
    0xFA082080,
    0x82082080,
)

# Mark OR-ed into the first byte of an encoded sequence, per total length.
_FIRST_BYTE_MARK = (0x00, 0x00, 0xC0, 0xE0, 0xF0, 0xF8, 0xFC)


class ConversionResult(enum.Enum):
    """Why a conversion stopped."""

    OK = 0
    SOURCE_EXHAUSTED = 1
    TARGET_EXHAUSTED = 2
    SOURCE_ILLEGAL = 3


class ConversionFlags(enum.IntEnum):
    """How isolated surrogates and out-of-range values are treated."""

    STRICT = 0
    LENIENT = 1


class ConversionError(ValueError):
    """Raised by :meth:`Conversion.check` when a conversion did not finish cleanly."""

    def __init__(self, conversion: "Conversion") -> None:
        super().__init__(
            f"conversion stopped with {conversion.result.name} "
            f"after {conversion.consumed} source units"
        )
        self.conversion = conversion


@dataclass(frozen=True)
class Conversion:
    """Outcome of a conversion: produced units, consumed count and status."""

    output: tuple[int, ...]
    consumed: int
    result: ConversionResult = ConversionResult.OK
    _: None = field(default=None, repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.result is ConversionResult.OK

    def check(self) -> tuple[int, ...]:
        """Return the output, or raise :class:`ConversionError` if not OK."""
        if not self.ok:
            raise ConversionError(self)
        return self.output


def _validate_units(source: Sequence[int], limit: int, name: str) -> None:
    for unit in source:
        if not 0 <= unit <= limit:
            raise ValueError(f"{name} code unit out of range: {unit:#x}")


def _is_high_surrogate(ch: int) -> bool:
    return _SUR_HIGH_START <= ch <= _SUR_HIGH_END


def _is_low_surrogate(ch: int) -> bool:
    return _SUR_LOW_START <= ch <= _SUR_LOW_END


def _is_surrogate(ch: int) -> bool:
    return _SUR_HIGH_START <= ch <= _SUR_LOW_END


def _has_room(produced: int, needed: int, target_size: int | None) -> bool:
    return target_size is None or produced + needed <= target_size


def _split_surrogates(ch: int) -> tuple[int, int]:
    ch -= _HALF_BASE
    return (ch >> _HALF_SHIFT) + _SUR_HIGH_START, (ch & _HALF_MASK) + _SUR_LOW_START


def _join_surrogates(high: int, low: int) -> int:
    return ((high - _SUR_HIGH_START) << _HALF_SHIFT) + (low - _SUR_LOW_START) + _HALF_BASE


def _is_legal_utf8(data: Sequence[int], start: int, length: int) -> bool:
    """Check the UTF-8 sequence of ``length`` bytes at ``data[start]``."""
    if not 1 <= length <= 4:
        return False
    lead = data[start]
    if length >= 2:
        for pos in range(start + length - 1, start + 1, -1):
            if not 0x80 <= data[pos] <= 0xBF:
                return False
        second = data[start + 1]
        if second > 0xBF:
            return False
        if lead == 0xE0:
            if second < 0xA0:
                return False
        elif lead == 0xED:
            if second > 0x9F:
                return False
        elif lead == 0xF0:
            if second < 0x90:
                return False
        elif lead == 0xF4:
            if second > 0x8F:
                return False
        elif second < 0x80:
            return False
    if 0x80 <= lead < 0xC2:
        return False
    return lead <= 0xF4


def is_legal_utf8_sequence(source: bytes) -> bool:
    """Tell whether ``source`` starts with one complete, legal UTF-8 sequence."""
    if not source:
        return False
    length = _TRAILING_BYTES[source[0]] + 1
    if length > len(source):
        return False
    return _is_legal_utf8(source, 0, length)


def utf32_to_utf16(
    source: Sequence[int],
    flags: ConversionFlags = ConversionFlags.STRICT,
    target_size: int | None = None,
) -> Conversion:
    """Convert UTF-32 code points to UTF-16 code units.

    ``target_size`` limits the number of produced units; ``None`` means
    no limit.
    """
    _validate_units(source, 0xFFFFFFFF, "UTF-32")
    strict = flags == ConversionFlags.STRICT
    output: list[int] = []
    result = ConversionResult.OK
    pos = 0
    while pos < len(source):
        if not _has_room(len(output), 1, target_size):
            result = ConversionResult.TARGET_EXHAUSTED
            break
        ch = source[pos]
        pos += 1
        if ch <= UNI_MAX_BMP:
            if _is_surrogate(ch):
                if strict:
                    pos -= 1
                    result = ConversionResult.SOURCE_ILLEGAL
                    break
                output.append(UNI_REPLACEMENT_CHAR)
            else:
                output.append(ch)
        elif ch > UNI_MAX_LEGAL_UTF32:
            # Out-of-range values are flagged but conversion carries on.
            if strict:
                result = ConversionResult.SOURCE_ILLEGAL
            else:
                output.append(UNI_REPLACEMENT_CHAR)
        else:
            if not _has_room(len(output), 2, target_size):
                pos -= 1
                result = ConversionResult.TARGET_EXHAUSTED
                break
            output.extend(_split_surrogates(ch))
    return Conversion(tuple(output), pos, result)


def utf16_to_utf32(
    source: Sequence[int],
    flags: ConversionFlags = ConversionFlags.STRICT,
    target_size: int | None = None,
) -> Conversion:
    """Convert UTF-16 code units to UTF-32 code points.

    A high surrogate at the very end of the input stops the conversion with
    ``SOURCE_EXHAUSTED`` so that it can be resumed with more input.
    """
    _validate_units(source, 0xFFFF, "UTF-16")
    strict = flags == ConversionFlags.STRICT
    output: list[int] = []
    result = ConversionResult.OK
    pos = 0
    while pos < len(source):
        start = pos
        ch = source[pos]
        pos += 1
        if _is_high_surrogate(ch):
            if pos < len(source):
                nxt = source[pos]
                if _is_low_surrogate(nxt):
                    ch = _join_surrogates(ch, nxt)
                    pos += 1
                elif strict:
                    pos -= 1
                    result = ConversionResult.SOURCE_ILLEGAL
                    break
            else:
                pos -= 1
                result = ConversionResult.SOURCE_EXHAUSTED
                break
        elif strict and _is_low_surrogate(ch):
            pos -= 1
            result = ConversionResult.SOURCE_ILLEGAL
            break
        if not _has_room(len(output), 1, target_size):
            pos = start
            result = ConversionResult.TARGET_EXHAUSTED
            break
        output.append(ch)
    return Conversion(tuple(output), pos, result)