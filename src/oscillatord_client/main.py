#!/usr/bin/env python3
"""
oscillatord-client: oscillatord monitoring socket client

Main entry point. Each run performs exactly one exchange with oscillatord:
1. Resolves the requested action (if any) to its command code
2. Connects to the monitoring socket and sends {"request": <code>}
3. Reads and decodes the status reply
4. Prints the reported sections (disciplining, oscillator, clock, GNSS,
   disciplining parameters, action echo)

Usage:
    # Status only
    oscillatord-client -p 2970

    # Ask the daemon to start the GNSS receiver
    oscillatord-client -a 192.168.1.10 -p 2970 -r gnss_start

    # Settings from a TOML file
    oscillatord-client --config /etc/oscillatord-client.toml

Exit codes:
    0  success
    1  invalid arguments or configuration
    2  unknown request token
    3  connection, send or receive failure
    4  reply could not be decoded
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml

# Set up logging before imports that use it
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger('oscillatord-client')

from .client import MonitoringClient
from .errors import ConfigError, DecodeError, TransportError, UnknownCommand
from .output.report_renderer import ReportRenderer
from .protocol.commands import CommandKind, DEFAULT_COMMAND, describe_commands, resolve
from .protocol.status_decoder import decode
from .transport.monitoring_socket import DEFAULT_BUFFER_SIZE

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_UNKNOWN_COMMAND = 2
EXIT_TRANSPORT = 3
EXIT_DECODE = 4

DEFAULT_TIMEOUT = 5.0


def default_config() -> Dict[str, Any]:
    return {
        'monitoring': {
            'address': None,
            'port': None,
            'timeout': DEFAULT_TIMEOUT,
            'buffer_size': DEFAULT_BUFFER_SIZE,
        }
    }


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a TOML file, on top of the defaults.

    Raises:
        ConfigError: file missing or not valid TOML
    """
    config = default_config()
    if not config_path:
        return config

    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")
    try:
        with open(path, 'r') as f:
            loaded = toml.load(f)
    except toml.TomlDecodeError as e:
        raise ConfigError(f"Invalid configuration file {path}: {e}") from e

    config['monitoring'].update(loaded.get('monitoring', {}))
    return config


def apply_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Apply command-line overrides and validate the monitoring settings."""
    monitoring = dict(config.get('monitoring', {}))

    if args.address is not None:
        monitoring['address'] = args.address
    if args.port is not None:
        monitoring['port'] = args.port
    if args.timeout is not None:
        monitoring['timeout'] = args.timeout
    if args.buffer_size is not None:
        monitoring['buffer_size'] = args.buffer_size

    port = monitoring.get('port')
    try:
        port = int(port)
    except (TypeError, ValueError):
        raise ConfigError(f"Bad port: {port!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"Bad port: {port}")
    monitoring['port'] = port

    buffer_size = monitoring.get('buffer_size')
    if not isinstance(buffer_size, int) or buffer_size <= 0:
        raise ConfigError(f"Bad buffer size: {buffer_size!r}")

    timeout = monitoring.get('timeout')
    if timeout is not None and (not isinstance(timeout, (int, float)) or timeout < 0):
        raise ConfigError(f"Bad timeout: {timeout!r}")

    return monitoring


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='oscillatord-client',
        description='oscillatord-client: query the oscillatord monitoring socket',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Accepted request types:\n" + describe_commands(),
    )
    parser.add_argument(
        '--address', '-a',
        help='Address of the monitoring socket (default: local address)'
    )
    parser.add_argument(
        '--port', '-p',
        type=int,
        help='Port of the monitoring socket'
    )
    parser.add_argument(
        '--request', '-r',
        metavar='REQUEST_TYPE',
        help='Send a request to oscillatord (see list below)'
    )
    parser.add_argument(
        '--config', '-c',
        help='Path to TOML configuration file'
    )
    parser.add_argument(
        '--timeout',
        type=float,
        help=f'Socket timeout in seconds, 0 to disable (default: {DEFAULT_TIMEOUT})'
    )
    parser.add_argument(
        '--buffer-size',
        type=int,
        help=f'Maximum reply size in bytes (default: {DEFAULT_BUFFER_SIZE})'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the decoded report as JSON'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        settings = apply_overrides(load_config(args.config), args)
    except ConfigError as e:
        logger.error(str(e))
        parser.print_usage(sys.stderr)
        return EXIT_CONFIG

    kind: CommandKind = DEFAULT_COMMAND
    if args.request is not None:
        try:
            kind = resolve(args.request)
        except UnknownCommand as e:
            logger.error(str(e))
            return EXIT_UNKNOWN_COMMAND
        logger.info(f"Action requested: {args.request}")

    client = MonitoringClient(
        settings.get('address'),
        settings['port'],
        timeout=settings.get('timeout'),
        buffer_size=settings['buffer_size'],
    )

    try:
        reply = client.exchange(kind)
    except TransportError as e:
        logger.error(str(e))
        logger.error("FAIL")
        return EXIT_TRANSPORT

    logger.debug(reply.decode('utf-8', errors='replace'))

    try:
        report = decode(reply)
    except DecodeError as e:
        logger.error(str(e))
        logger.error("FAIL")
        return EXIT_DECODE

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        for line in ReportRenderer().render(report):
            logger.info(line)

    logger.info("PASSED !")
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
