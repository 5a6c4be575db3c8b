"""Parsing of the fixed 12-byte rtl_tcp server greeting."""

import struct

from .common import HANDSHAKE_SIZE
from .errors import ShortRead
from .models import DongleInfo
from .tuners import as_tuner_kind
from .transport import recv_exactly

# magic[4] | tuner id (u32) | gain count (u32), big-endian
_HANDSHAKE = struct.Struct(">4sII")


def parse_dongle_info(data: bytes) -> DongleInfo:
    """
    Decode a handshake frame.
    The magic marker is not checked here; call ``DongleInfo.valid()`` for that,
    so a server speaking some other protocol can still be inspected.
    """
    if len(data) < HANDSHAKE_SIZE:
        raise ShortRead(HANDSHAKE_SIZE, len(data), what="dongle information")
    magic, tuner, gain_count = _HANDSHAKE.unpack_from(data, 0)
    return DongleInfo(magic=magic, tuner=as_tuner_kind(tuner), gain_count=gain_count)


def encode_dongle_info(info: DongleInfo) -> bytes:
    """Serialize ``info`` back into the 12 bytes a server would send."""
    return _HANDSHAKE.pack(info.magic, info.tuner, info.gain_count)


def read_dongle_info(sock) -> DongleInfo:
    """Read exactly one handshake frame from a freshly connected socket."""
    data = recv_exactly(sock, HANDSHAKE_SIZE, what="dongle information")
    return parse_dongle_info(data)
