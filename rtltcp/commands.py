"""rtl_tcp command opcodes and 5-byte command framing."""

import struct
from enum import IntEnum

from .common import COMMAND_SIZE
from .errors import InvalidArgument
from .models import Command

# opcode (u8) | parameter (u32), big-endian
_COMMAND = struct.Struct(">BI")


class Opcode(IntEnum):
    """Command ids as defined by rtl_tcp.c."""
    SET_FREQUENCY       = 0x01  # Hz
    SET_SAMPLE_RATE     = 0x02  # Hz
    SET_GAIN_MODE       = 0x03  # 1 = manual, 0 = automatic
    SET_GAIN            = 0x04  # tenths of dB
    SET_FREQ_CORRECTION = 0x05  # ppm, signed
    SET_IF_GAIN         = 0x06  # (stage << 16) | gain
    SET_TEST_MODE       = 0x07
    SET_AGC_MODE        = 0x08
    SET_DIRECT_SAMPLING = 0x09
    SET_OFFSET_TUNING   = 0x0A
    SET_RTL_XTAL        = 0x0B  # Hz
    SET_TUNER_XTAL      = 0x0C  # Hz
    SET_GAIN_BY_INDEX   = 0x0D  # index <= gain_count


def encode_command(opcode: int, parameter: int) -> bytes:
    """
    Frame one command.
    Negative parameters down to -2**31 go out as 32-bit two's complement,
    the way the server reads a signed ppm back. Anything that does not fit
    the frame raises InvalidArgument instead of wrapping.
    """
    opcode = int(opcode)
    parameter = int(parameter)
    if not 0 <= opcode <= 0xFF:
        raise InvalidArgument(f"opcode {opcode} does not fit in 8 bits")
    if not -(1 << 31) <= parameter <= 0xFFFFFFFF:
        raise InvalidArgument(f"parameter {parameter} does not fit in 32 bits")
    return _COMMAND.pack(opcode, parameter & 0xFFFFFFFF)


def decode_command(data: bytes) -> Command:
    if len(data) != COMMAND_SIZE:
        raise ValueError(f"Command frame must be {COMMAND_SIZE} bytes, got {len(data)}")
    opcode, parameter = _COMMAND.unpack(data)
    return Command(opcode=opcode, parameter=parameter)


def opcode_name(opcode: int) -> str:
    try:
        return Opcode(opcode).name
    except ValueError:
        return f"CMD_{opcode}"
