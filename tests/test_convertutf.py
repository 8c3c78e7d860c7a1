import struct

import pytest

from isobus_support.convertutf import (
    UNI_REPLACEMENT_CHAR,
    Conversion,
    ConversionError,
    ConversionFlags,
    ConversionResult,
    is_legal_utf8_sequence,
    utf16_to_utf32,
    utf32_to_utf16,
)

SAMPLE = "Hallo ISOBUS \u00e4\u20ac \U0001f600\U00010348 end"


def _utf16_units(text):
    data = text.encode("utf-16-le")
    return tuple(struct.unpack(f"<{len(data) // 2}H", data))


def _code_points(text):
    return tuple(ord(c) for c in text)


def test_utf32_to_utf16_matches_stdlib():
    conv = utf32_to_utf16(_code_points(SAMPLE))
    assert conv.result is ConversionResult.OK
    assert conv.output == _utf16_units(SAMPLE)
    assert conv.consumed == len(SAMPLE)


def test_utf16_to_utf32_matches_stdlib():
    units = _utf16_units(SAMPLE)
    conv = utf16_to_utf32(units)
    assert conv.ok
    assert conv.output == _code_points(SAMPLE)
    assert conv.consumed == len(units)


def test_round_trip():
    points = _code_points(SAMPLE)
    there = utf32_to_utf16(points).check()
    back = utf16_to_utf32(there).check()
    assert back == points


def test_empty_input():
    assert utf32_to_utf16([]) == Conversion((), 0, ConversionResult.OK)
    assert utf16_to_utf32([]) == Conversion((), 0, ConversionResult.OK)


def test_utf32_surrogate_strict_is_illegal():
    conv = utf32_to_utf16([0x41, 0xD800, 0x42])
    assert conv.result is ConversionResult.SOURCE_ILLEGAL
    assert conv.output == (0x41,)
    assert conv.consumed == 1


def test_utf32_surrogate_lenient_is_replaced():
    conv = utf32_to_utf16([0x41, 0xDC00, 0x42], ConversionFlags.LENIENT)
    assert conv.result is ConversionResult.OK
    assert conv.output == (0x41, UNI_REPLACEMENT_CHAR, 0x42)


def test_utf32_out_of_range_strict_flags_but_continues():
    conv = utf32_to_utf16([0x110000, 0x41])
    assert conv.result is ConversionResult.SOURCE_ILLEGAL
    assert conv.output == (0x41,)
    assert conv.consumed == 2


def test_utf32_out_of_range_lenient_replaced():
    conv = utf32_to_utf16([0x110000, 0x41], ConversionFlags.LENIENT)
    assert conv.ok
    assert conv.output == (UNI_REPLACEMENT_CHAR, 0x41)


def test_utf32_target_too_small_for_pair():
    conv = utf32_to_utf16(_code_points("a\U0001f600"), target_size=2)
    assert conv.result is ConversionResult.TARGET_EXHAUSTED
    assert conv.output == (ord("a"),)
    assert conv.consumed == 1


def test_utf32_target_exhausted_is_resumable():
    points = _code_points(SAMPLE)
    first = utf32_to_utf16(points, target_size=10)
    assert first.result is ConversionResult.TARGET_EXHAUSTED
    assert len(first.output) <= 10
    rest = utf32_to_utf16(points[first.consumed:])
    assert first.output + rest.output == _utf16_units(SAMPLE)


def test_utf16_trailing_high_surrogate_is_source_exhausted():
    units = _utf16_units("ab") + (0xD83D,)
    conv = utf16_to_utf32(units)
    assert conv.result is ConversionResult.SOURCE_EXHAUSTED
    assert conv.output == _code_points("ab")
    assert conv.consumed == 2


def test_utf16_unpaired_high_strict_and_lenient():
    units = (0xD800, 0x41)
    strict = utf16_to_utf32(units)
    assert strict.result is ConversionResult.SOURCE_ILLEGAL
    assert strict.consumed == 0
    lenient = utf16_to_utf32(units, ConversionFlags.LENIENT)
    assert lenient.ok
    assert lenient.output == units


def test_utf16_lone_low_surrogate():
    units = (0x41, 0xDC00)
    strict = utf16_to_utf32(units)
    assert strict.result is ConversionResult.SOURCE_ILLEGAL
    assert strict.consumed == 1
    assert strict.output == (0x41,)
    lenient = utf16_to_utf32(units, ConversionFlags.LENIENT)
    assert lenient.output == units


def test_utf16_target_exhausted_rewinds_whole_pair():
    units = _utf16_units("a\U0001f600")
    conv = utf16_to_utf32(units, target_size=1)
    assert conv.result is ConversionResult.TARGET_EXHAUSTED
    assert conv.output == (ord("a"),)
    assert conv.consumed == 1


def test_check_raises_conversion_error():
    conv = utf32_to_utf16([0xDFFF])
    with pytest.raises(ConversionError) as info:
        conv.check()
    assert info.value.conversion is conv
    assert isinstance(info.value, ValueError)


@pytest.mark.parametrize(
    "func, units",
    [(utf32_to_utf16, [-1]), (utf32_to_utf16, [1 << 32]), (utf16_to_utf32, [0x10000])],
)
def test_out_of_range_units_rejected(func, units):
    with pytest.raises(ValueError):
        func(units)


@pytest.mark.parametrize("char", ["A", "\u00e4", "\u20ac", "\U0001f600", "\U0010ffff"])
def test_legal_utf8_sequences(char):
    assert is_legal_utf8_sequence(char.encode("utf-8")) is True


@pytest.mark.parametrize(
    "data",
    [
        b"\xf4\x90\x80\x80",
        b"\xc0\x80",
        b"\xa0",
        b"\xed\xa0\x80",
        b"\xe0\x80\x80",
        b"\xf8\x88\x80\x80\x80",
        b"\xe2\x82",
        b"",
    ],
)
def test_illegal_utf8_sequences(data):
    assert is_legal_utf8_sequence(data) is False


def test_legal_utf8_sequence_ignores_trailing_data():
    assert is_legal_utf8_sequence("\u20ac".encode("utf-8") + b"\xff") is True