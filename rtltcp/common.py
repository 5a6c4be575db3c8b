"""Shared constants and logging helpers for the rtl_tcp client."""

import logging

log = logging.getLogger("rtltcp")

DEFAULT_HOST    = "127.0.0.1"
DEFAULT_PORT    = 1234          # rtl_tcp default listen port

DEFAULT_CONNECT_TIMEOUT = 5.0   # seconds, covers connect + handshake

DEFAULT_BLOCK_SIZE = 16384      # I/Q pairs per read in the CLI receiver

DONGLE_MAGIC    = b"RTL0"       # 0x52544C30

HANDSHAKE_SIZE  = 12            # magic[4] | tuner(u32) | gain_count(u32)

COMMAND_SIZE    = 5             # opcode(u8) | parameter(u32)

BYTES_PER_SAMPLE = 2            # one unsigned byte each for I and Q

RECV_BUFFER_SIZE = 1 << 20      # SO_RCVBUF, absorbs bursts at MS/s rates


def configure_logging(level_name: str = "INFO"):
    """Set up root logging for command line use.

    Only the entry point calls this; importing the package leaves logging alone.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(message)s')
    else:
        root_logger.setLevel(level)

    log.setLevel(level)
