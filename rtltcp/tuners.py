"""Tuner identifiers reported in the rtl_tcp handshake."""

from enum import IntEnum


class TunerKind(IntEnum):
    UNKNOWN = 0
    E4000   = 1
    FC0012  = 2
    FC0013  = 3
    FC2580  = 4
    R820T   = 5
    R828D   = 6


def tuner_name(value: int) -> str:
    """Return the part name for a tuner id, ``"UNKNOWN"`` for unlisted values."""
    try:
        return TunerKind(value).name
    except ValueError:
        return TunerKind.UNKNOWN.name


def as_tuner_kind(value: int):
    """Wrap a known tuner id as TunerKind; unlisted ids stay plain ints."""
    try:
        return TunerKind(value)
    except ValueError:
        return value
