import pytest

from isobus_support.serial_number import serial_number_string, short_serial_number

MAC = bytes([0x02, 0x00, 0x00, 0xAB, 0xCD, 0xEF])


def test_short_serial_number_value():
    assert short_serial_number(MAC) == 0x0BCDEF


def test_short_serial_number_fits_21_bits():
    for top in range(256):
        value = short_serial_number([0xFF, 0xFF, 0xFF, top, 0xFF, 0xFF])
        assert 0 <= value < (1 << 21)


def test_short_serial_number_ignores_upper_bytes():
    other = bytes([0xFE, 0xDC, 0xBA]) + MAC[3:]
    assert short_serial_number(other) == short_serial_number(MAC)


def test_short_serial_number_keeps_last_two_bytes():
    assert short_serial_number(MAC) & 0xFFFF == (MAC[4] << 8) | MAC[5]


def test_short_serial_number_accepts_list():
    assert short_serial_number(list(MAC)) == short_serial_number(MAC)


def test_serial_number_string_format():
    assert serial_number_string(MAC) == "##MAC:02:00:00:ab:cd:ef##"


def test_serial_number_string_contains_every_byte():
    text = serial_number_string(MAC)
    assert text.startswith("##MAC:") and text.endswith("##")
    parts = text[len("##MAC:"):-2].split(":")
    assert bytes(int(p, 16) for p in parts) == MAC


@pytest.mark.parametrize("bad", [b"\x01\x02\x03", bytes(7), [0, 0, 0, 0, 0, 256], "abcdef"])
def test_invalid_mac_rejected(bad):
    with pytest.raises(ValueError):
        short_serial_number(bad)
    with pytest.raises(ValueError):
        serial_number_string(bad)