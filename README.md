# isobus_support

Small, dependency-free helpers for applications built around an
ISO 11783 (ISOBUS) / J1939 stack.

## Modules

### `isobus_support.convertutf`

Conversions between UTF-32 and UTF-16 code units, plus UTF-8 validation.

- `utf32_to_utf16(source, flags=ConversionFlags.STRICT, target_size=None)`
- `utf16_to_utf32(source, flags=ConversionFlags.STRICT, target_size=None)`
- `is_legal_utf8_sequence(source)`: whether `source` starts with one complete,
  legal UTF-8 sequence.

Every converter returns a `Conversion` holding `output` (a tuple of code
units), `consumed` (how many source units were used) and `result`, a
`ConversionResult` (`OK`, `SOURCE_EXHAUSTED`, `TARGET_EXHAUSTED`,
`SOURCE_ILLEGAL`). `Conversion.ok` tells whether it finished cleanly and
`Conversion.check()` returns the output or raises `ConversionError`.
`target_size` limits the number of produced units; `None` means no limit.
With `ConversionFlags.STRICT` isolated surrogates stop the conversion; with
`ConversionFlags.LENIENT` they are replaced by U+FFFD. Source units outside
the range of their encoding raise `ValueError`.

### `isobus_support.utf8`

Conversions to and from UTF-8 with the same conventions:
`utf16_to_utf8`, `utf8_to_utf16`, `utf32_to_utf8`, `utf8_to_utf32`.
UTF-8 output is a tuple of byte values; `bytes(conversion.output)` gives a
byte string. Illegal UTF-8 is reported whatever the flags, and an incomplete
sequence at the end stops with `SOURCE_EXHAUSTED`.

### `isobus_support.serial_number`

- `short_serial_number(mac)`: a 21-bit number from the last three bytes of a
  6-byte MAC address (the fourth byte cut to its low five bits).
- `serial_number_string(mac)`: the whole MAC as `##MAC:xx:xx:xx:xx:xx:xx##`.

A MAC that is not exactly six bytes raises `ValueError`.

### `isobus_support.settings`

`Settings(path=None)` is a key/value store kept in a JSON file, or in memory
when `path` is `None`. Every change is written to the file at once.

- `get_int(section, key, default, kind)` / `set_int(section, key, value, kind)`
  with `kind` one of the `IntKind` members `S8`, `S16`, `S32`, `S64`, `U8`,
  `U16`, `U32`, `U64`, `X64`. Values outside the kind's range raise
  `ValueError`.
- `get_string(section, key, default)` / `set_string(section, key, value)`
- `erase(section, key)`

Reading a missing key stores and returns the default; `get_string` with a
default of `None` returns `""` and stores nothing. Keys share one namespace:
`section` only appears in log messages. An entry read back with another type
behaves as missing.

### `isobus_support.isoconf`

`IsoConfig` is a frozen dataclass of the stack's limits and enabled parts
(CAN nodes, self-configurable address range, transport channels, VT client
buffers, task controller, file server and sequence control limits). Its
defaults are a sample configuration. `vtc_connections_max`,
`aux_instances_max`, `aux_entries_max` and `vtc_cmd_instance_max` are
derived from other fields when given as `None`. The configuration is checked
on creation; `validate()` raises `ValueError` when values contradict each
other.

## What it does not do

This package holds no CAN or ISOBUS protocol stack: it sends and receives
nothing on a bus. It does not read a MAC address from hardware; the caller
passes one in. It has no command-line program.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from isobus_support.convertutf import ConversionFlags, utf32_to_utf16
from isobus_support.serial_number import serial_number_string, short_serial_number
from isobus_support.settings import IntKind, Settings

units = utf32_to_utf16([0x41, 0x1F600], ConversionFlags.STRICT, 16).check()

mac = bytes([0x02, 0x00, 0x00, 0xAB, 0xCD, 0xEF])
print(serial_number_string(mac))   # ##MAC:02:00:00:ab:cd:ef##
print(short_serial_number(mac))

settings = Settings("settings.json")
brightness = settings.get_int("display", "brightness", 50, IntKind.U8)
settings.set_string("display", "name", "left boom")
```