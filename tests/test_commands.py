"""
Unit tests for command framing.
"""

import pytest

from rtltcp import (
    COMMAND_SIZE,
    Command,
    InvalidArgument,
    Opcode,
    decode_command,
    encode_command,
)


class TestEncodeCommand:
    """Tests for encode_command"""

    def test_center_frequency_bytes(self):
        """Test 100 MHz center frequency encodes as 01 05 F5 E1 00"""
        assert encode_command(Opcode.SET_FREQUENCY, 100_000_000) == bytes.fromhex("0105F5E100")

    @pytest.mark.parametrize("opcode", list(Opcode))
    @pytest.mark.parametrize("parameter", [0, 1, 0x7F, 0x12345678, 0xFFFFFFFF])
    def test_layout(self, opcode, parameter):
        """Test opcode in byte 0 and parameter big-endian in bytes 1-4"""
        frame = encode_command(opcode, parameter)

        assert len(frame) == COMMAND_SIZE
        assert frame[0] == int(opcode)
        assert int.from_bytes(frame[1:], "big") == parameter

    def test_negative_parameter_is_twos_complement(self):
        """Test negative values go out as their unsigned 32-bit form"""
        assert encode_command(Opcode.SET_FREQ_CORRECTION, -1) == bytes.fromhex("05FFFFFFFF")
        assert encode_command(Opcode.SET_FREQ_CORRECTION, -12) == bytes.fromhex("05FFFFFFF4")

    @pytest.mark.parametrize("opcode", [-1, 256, 1000])
    def test_opcode_out_of_range(self, opcode):
        """Test opcodes outside 0..255 raise instead of wrapping"""
        with pytest.raises(InvalidArgument, match="8 bits"):
            encode_command(opcode, 0)

    @pytest.mark.parametrize("parameter", [1 << 32, 5_000_000_000, -(1 << 31) - 1])
    def test_parameter_out_of_range(self, parameter):
        """Test parameters outside the 32-bit range raise instead of wrapping"""
        with pytest.raises(InvalidArgument, match="32 bits"):
            encode_command(Opcode.SET_FREQUENCY, parameter)

    def test_parameter_range_edges(self):
        """Test the extremes of the signed and unsigned ranges are framed"""
        assert encode_command(1, 0xFFFFFFFF) == bytes.fromhex("01FFFFFFFF")
        assert encode_command(5, -(1 << 31)) == bytes.fromhex("0580000000")

    def test_opcode_numbering(self):
        """Test the opcode table matches rtl_tcp"""
        assert [int(op) for op in Opcode] == list(range(1, 14))


class TestDecodeCommand:
    """Tests for decode_command"""

    @pytest.mark.parametrize(
        "opcode,parameter",
        [(1, 100_000_000), (2, 2_048_000), (6, (1 << 16) | 30), (13, 0), (255, 0xFFFFFFFF)],
    )
    def test_decode_inverts_encode(self, opcode, parameter):
        """Test decode(encode(x)) == x"""
        assert decode_command(encode_command(opcode, parameter)) == Command(opcode, parameter)

    @pytest.mark.parametrize("size", [0, 4, 6])
    def test_wrong_length_rejected(self, size):
        """Test frames that are not exactly 5 bytes raise ValueError"""
        with pytest.raises(ValueError, match="5 bytes"):
            decode_command(bytes(size))
