"""Client for the rtl_tcp SDR wire protocol.

Connect, read the dongle handshake, send tuning commands and decode the
unsigned 8-bit I/Q stream into complex samples.
"""

from .common import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DONGLE_MAGIC,
    HANDSHAKE_SIZE,
    COMMAND_SIZE,
    configure_logging,
)
from .errors import (
    RTLTCPError,
    ConnectionFailed,
    TransportError,
    ShortRead,
    WriteFailed,
    ShortWrite,
    ProtocolMismatch,
    InvalidArgument,
)
from .tuners import TunerKind, tuner_name
from .models import DongleInfo, Command
from .handshake import parse_dongle_info, encode_dongle_info, read_dongle_info
from .commands import Opcode, encode_command, decode_command
from .samples import SampleDecoder, iq_to_complex, raw_buffer, complex_buffer
from .client import RTLTCPClient
from .core import connect

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DONGLE_MAGIC",
    "HANDSHAKE_SIZE",
    "COMMAND_SIZE",
    "configure_logging",
    "RTLTCPError",
    "ConnectionFailed",
    "TransportError",
    "ShortRead",
    "WriteFailed",
    "ShortWrite",
    "ProtocolMismatch",
    "InvalidArgument",
    "TunerKind",
    "tuner_name",
    "DongleInfo",
    "Command",
    "parse_dongle_info",
    "encode_dongle_info",
    "read_dongle_info",
    "Opcode",
    "encode_command",
    "decode_command",
    "SampleDecoder",
    "iq_to_complex",
    "raw_buffer",
    "complex_buffer",
    "RTLTCPClient",
    "connect",
]
