"""Connection setup for rtl_tcp servers and a command line test receiver."""

import logging
import time
from typing import Optional

import numpy as np

from .common import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DONGLE_MAGIC,
    configure_logging,
    log,
)
from .client import RTLTCPClient
from .errors import ProtocolMismatch, RTLTCPError
from .handshake import read_dongle_info
from .transport import open_connection


def connect(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
            timeout: Optional[float] = DEFAULT_CONNECT_TIMEOUT,
            read_timeout: Optional[float] = None,
            strict: bool = False,
            logger: Optional[logging.Logger] = None) -> RTLTCPClient:
    """
    Connect to an rtl_tcp server and read its handshake.

    ``timeout`` covers the TCP connect and the 12-byte handshake; afterwards
    the socket uses ``read_timeout`` (None blocks until data or close).
    A wrong magic marker is logged and stored on ``client.protocol_error``;
    with ``strict=True`` the socket is closed and ProtocolMismatch raised.
    The socket is closed on every failure path before the error propagates.
    """
    logger = logger or log
    logger.info(f"Connecting to rtl_tcp at {host}:{port}")
    sock = open_connection(host, port, timeout)

    try:
        info = read_dongle_info(sock)
        sock.settimeout(read_timeout)
    except BaseException:
        sock.close()
        raise

    client = RTLTCPClient(sock, info, logger=logger)
    if not info.valid():
        err = ProtocolMismatch(DONGLE_MAGIC, info.magic)
        client.protocol_error = err
        if strict:
            client.close()
            raise err
        logger.warning(f"{err}; continuing with {info}")
    else:
        logger.info(f"Dongle: {info}")
    return client


def _power_dbfs(block: np.ndarray) -> float:
    power = float(np.mean(block.real ** 2 + block.imag ** 2))
    return 10 * np.log10(power + 1e-12)


def main(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="rtl_tcp test receiver")
    parser.add_argument("--host",  default=DEFAULT_HOST, help="Server address")
    parser.add_argument("--port",  default=DEFAULT_PORT, type=int, help="Server port")
    parser.add_argument("--freq",  default=100.0, type=float, help="Center freq MHz")
    parser.add_argument("--rate",  default=2_048_000, type=int, help="Sample rate Hz")
    parser.add_argument("--gain",  default=None, type=float, help="Tuner gain dB (omit for auto)")
    parser.add_argument("--ppm",   default=0, type=int, help="Frequency correction ppm")
    parser.add_argument("--agc",   action="store_true", help="Enable RTL2832 digital AGC")
    parser.add_argument("--secs",  default=5, type=int, help="Seconds to run")
    parser.add_argument("--block", default=DEFAULT_BLOCK_SIZE, type=int, help="I/Q pairs per read")
    parser.add_argument("--strict", action="store_true", help="Abort on a wrong handshake magic")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging verbosity (default: INFO)")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        client = connect(args.host, args.port, strict=args.strict)
    except RTLTCPError as e:
        log.error(str(e))
        return 1

    try:
        client.set_sample_rate(args.rate).set_center_freq(int(args.freq * 1e6))
        if args.gain is None:
            client.set_gain_mode(False)
        else:
            client.set_gain_mode(True).set_gain_db(args.gain)
        if args.ppm:
            client.set_freq_correction(args.ppm)
        client.set_agc_mode(args.agc)

        t_start = time.time()
        t_end = t_start + args.secs
        block_count = 0
        for block in client.iter_samples(args.block):
            block_count += 1
            if block_count % 50 == 0:
                log.info(f"Blocks: {block_count}  Samples: {client.sample_count}  "
                         f"Power: {_power_dbfs(block):.1f} dBFS")
            if time.time() >= t_end:
                break

        elapsed = max(time.time() - t_start, 1e-9)
        log.info(f"Done. {client.sample_count} samples in {elapsed:.1f}s "
                 f"({client.sample_count / elapsed / 1e6:.3f} MS/s)")
    except KeyboardInterrupt:
        log.info("Interrupted")
    except RTLTCPError as e:
        log.error(str(e))
        return 1
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
