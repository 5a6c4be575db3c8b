"""Data structures for the rtl_tcp handshake and command frames."""

from dataclasses import dataclass

from .common import DONGLE_MAGIC
from .tuners import tuner_name


@dataclass(frozen=True)
class DongleInfo:
    """Device information sent by the server once, right after connect."""
    magic:      bytes       # 4 bytes, b"RTL0" for a genuine rtl_tcp server
    tuner:      int         # TunerKind when known, else the raw id
    gain_count: int         # number of discrete gain steps, bounds set_gain_by_index

    def valid(self) -> bool:
        """True when the magic marker matches ``RTL0``."""
        return self.magic == DONGLE_MAGIC

    @property
    def tuner_name(self) -> str:
        return tuner_name(self.tuner)

    def __str__(self) -> str:
        magic = self.magic.decode("latin-1")
        return f"{{Magic:{magic!r} Tuner:{self.tuner_name} GainCount:{self.gain_count}}}"


@dataclass(frozen=True)
class Command:
    opcode:    int          # uint8
    parameter: int          # uint32
