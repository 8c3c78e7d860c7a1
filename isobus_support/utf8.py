"""Conversions between UTF-8 bytes and UTF-16 / UTF-32 code units.

These follow the same conventions as :mod:`isobus_support.convertutf`:
each converter returns a :class:`Conversion` holding the produced units,
the number of source units consumed and the reason it stopped.  UTF-8
output is given as a tuple of byte values; ``bytes(result.output)``
turns it into a byte string.
"""

from __future__ import annotations

from collections.abc import Sequence

from isobus_support.convertutf import (
    UNI_MAX_BMP,
    UNI_MAX_LEGAL_UTF32,
    UNI_MAX_UTF16,
    UNI_REPLACEMENT_CHAR,
    Conversion,
    ConversionFlags,
    ConversionResult,
    _FIRST_BYTE_MARK,
    _OFFSETS_FROM_UTF8,
    _TRAILING_BYTES,
    _has_room,
    _is_high_surrogate,
    _is_legal_utf8,
    _is_low_surrogate,
    _is_surrogate,
    _join_surrogates,
    _split_surrogates,
    _validate_units,
)

_BYTE_MASK = 0xBF
_BYTE_MARK = 0x80


def _utf8_length(ch: int) -> int:
    """Number of UTF-8 bytes needed for ``ch``, or 0 if it is out of range."""
    if ch < 0x80:
        return 1
    if ch < 0x800:
        return 2
    if ch < 0x10000:
        return 3
    if ch <= UNI_MAX_LEGAL_UTF32:
        return 4
    return 0


def _encode(ch: int, length: int) -> list[int]:
    """Encode ``ch`` as ``length`` UTF-8 bytes."""
    trailing: list[int] = []
    for _ in range(length - 1):
        trailing.append((ch | _BYTE_MARK) & _BYTE_MASK)
        ch >>= 6
    lead = (ch | _FIRST_BYTE_MARK[length]) & 0xFF
    return [lead, *reversed(trailing)]


def _decode(source: Sequence[int], start: int, extra: int) -> int:
    """Accumulate the UTF-8 sequence at ``source[start]`` into a code point."""
    ch = 0
    for byte in source[start:start + extra + 1]:
        ch = ((ch << 6) + byte) & 0xFFFFFFFF
    return (ch - _OFFSETS_FROM_UTF8[extra]) & 0xFFFFFFFF


def _read_utf8(source: Sequence[int], pos: int) -> tuple[int, int] | ConversionResult:
    """Read one UTF-8 sequence; return (code point, extra bytes) or a failure."""
    extra = _TRAILING_BYTES[source[pos]]
    if pos + extra >= len(source):
        return ConversionResult.SOURCE_EXHAUSTED
    if not _is_legal_utf8(source, pos, extra + 1):
        return ConversionResult.SOURCE_ILLEGAL
    return _decode(source, pos, extra), extra


def utf16_to_utf8(
    source: Sequence[int],
    flags: ConversionFlags = ConversionFlags.STRICT,
    target_size: int | None = None,
) -> Conversion:
    """Convert UTF-16 code units to UTF-8 bytes.

    In lenient mode an unpaired surrogate is encoded as it is.
    ``target_size`` limits the number of produced bytes.
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
        length = _utf8_length(ch)
        if length == 0:
            length = 3
            ch = UNI_REPLACEMENT_CHAR
        if not _has_room(len(output), length, target_size):
            pos = start
            result = ConversionResult.TARGET_EXHAUSTED
            break
        output.extend(_encode(ch, length))
    return Conversion(tuple(output), pos, result)


def utf8_to_utf16(
    source: Sequence[int],
    flags: ConversionFlags = ConversionFlags.STRICT,
    target_size: int | None = None,
) -> Conversion:
    """Convert UTF-8 bytes to UTF-16 code units.

    Illegal sequences are reported whatever the flags; an incomplete
    sequence at the end stops with ``SOURCE_EXHAUSTED``.
    """
    _validate_units(source, 0xFF, "UTF-8")
    strict = flags == ConversionFlags.STRICT
    output: list[int] = []
    result = ConversionResult.OK
    pos = 0
    while pos < len(source):
        read = _read_utf8(source, pos)
        if isinstance(read, ConversionResult):
            result = read
            break
        ch, extra = read
        if not _has_room(len(output), 1, target_size):
            result = ConversionResult.TARGET_EXHAUSTED
            break
        if ch <= UNI_MAX_BMP:
            if _is_surrogate(ch):
                if strict:
                    result = ConversionResult.SOURCE_ILLEGAL
                    break
                output.append(UNI_REPLACEMENT_CHAR)
            else:
                output.append(ch)
        elif ch > UNI_MAX_UTF16:
            if strict:
                result = ConversionResult.SOURCE_ILLEGAL
                break
            output.append(UNI_REPLACEMENT_CHAR)
        else:
            if not _has_room(len(output), 2, target_size):
                result = ConversionResult.TARGET_EXHAUSTED
                break
            output.extend(_split_surrogates(ch))
        pos += extra + 1
    return Conversion(tuple(output), pos, result)


def utf32_to_utf8(
    source: Sequence[int],
    flags: ConversionFlags = ConversionFlags.STRICT,
    target_size: int | None = None,
) -> Conversion:
    """Convert UTF-32 code points to UTF-8 bytes.

    Values above U+10FFFF become the replacement character and mark the
    result as ``SOURCE_ILLEGAL`` while the conversion carries on.
    """
    _validate_units(source, 0xFFFFFFFF, "UTF-32")
    strict = flags == ConversionFlags.STRICT
    output: list[int] = []
    result = ConversionResult.OK
    pos = 0
    while pos < len(source):
        ch = source[pos]
        pos += 1
        if strict and _is_surrogate(ch):
            pos -= 1
            result = ConversionResult.SOURCE_ILLEGAL
            break
        length = _utf8_length(ch)
        if length == 0:
            length = 3
            ch = UNI_REPLACEMENT_CHAR
            result = ConversionResult.SOURCE_ILLEGAL
        if not _has_room(len(output), length, target_size):
            pos -= 1
            result = ConversionResult.TARGET_EXHAUSTED
            break
        output.extend(_encode(ch, length))
    return Conversion(tuple(output), pos, result)


def utf8_to_utf32(
    source: Sequence[int],
    flags: ConversionFlags = ConversionFlags.STRICT,
    target_size: int | None = None,
) -> Conversion:
    """Convert UTF-8 bytes to UTF-32 code points."""
    _validate_units(source, 0xFF, "UTF-8")
    strict = flags == ConversionFlags.STRICT
    output: list[int] = []
    result = ConversionResult.OK
    pos = 0
    while pos < len(source):
        read = _read_utf8(source, pos)
        if isinstance(read, ConversionResult):
            result = read
            break
        ch, extra = read
        if not _has_room(len(output), 1, target_size):
            result = ConversionResult.TARGET_EXHAUSTED
            break
        if ch <= UNI_MAX_LEGAL_UTF32:
            if _is_surrogate(ch):
                if strict:
                    result = ConversionResult.SOURCE_ILLEGAL
                    break
                output.append(UNI_REPLACEMENT_CHAR)
            else:
                output.append(ch)
        else:
            result = ConversionResult.SOURCE_ILLEGAL
            output.append(UNI_REPLACEMENT_CHAR)
        pos += extra + 1
    return Conversion(tuple(output), pos, result)