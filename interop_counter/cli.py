#!/usr/bin/env python3
"""
Command-line interface for the cross-chain counter dashboard
"""

import argparse
import sys
from typing import Dict, List, Optional

from pydantic import ValidationError

from .config import Config
from .models import TimeWindow

# CLI flag -> Config field, only passed on when given
OVERRIDES = {
    "source_rpc": "source_rpc_url",
    "source_chain_id": "source_chain_id",
    "destination_rpc": "destination_rpc_url",
    "destination_chain_id": "destination_chain_id",
    "counter": "counter_address",
    "incrementer": "incrementer_address",
    "account": "dev_account",
    "capacity": "max_capacity",
    "window": "default_window",
    "log_level": "log_level",
}


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the dashboard"""
    parser = argparse.ArgumentParser(
        description='Cross-chain counter demo with live transaction analytics'
    )
    parser.add_argument('--source-rpc', type=str,
                        help='Source chain HTTP RPC URL (default: http://127.0.0.1:9545)')
    parser.add_argument('--source-chain-id', type=int,
                        help='Source chain id (default: 901)')
    parser.add_argument('--destination-rpc', type=str,
                        help='Destination chain WebSocket RPC URL (default: ws://127.0.0.1:9546)')
    parser.add_argument('--destination-chain-id', type=int,
                        help='Destination chain id (default: 902)')
    parser.add_argument('--counter', type=str,
                        help='CrossChainCounter address on the destination chain')
    parser.add_argument('--incrementer', type=str,
                        help='CrossChainCounterIncrementer address on the source chain')
    parser.add_argument('--account', type=str,
                        help='Unlocked dev account that sends transactions')
    parser.add_argument('--capacity', '-n', type=int,
                        help='Maximum number of tracked transactions (default: 100)')
    parser.add_argument('--window', '-w', choices=[w.value for w in TimeWindow],
                        help='Initial analytics window (default: 1h)')
    parser.add_argument('--log-level', '-l', type=str,
                        help='Log level for the activity log (default: INFO)')
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    """Build a Config from parsed arguments, environment and defaults"""
    values: Dict[str, object] = {}
    for arg_name, field_name in OVERRIDES.items():
        value = getattr(args, arg_name, None)
        if value is not None:
            values[field_name] = value
    return Config(**values)


def run(argv: Optional[List[str]] = None):
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        sys.exit(2)

    # Imported late so --help works without the UI stack
    from .container import Container
    from .ui import dashboard

    container = Container()
    container.config.override(config)
    container.wire(modules=[dashboard])

    app = dashboard.CounterDashboard()
    app.run()


if __name__ == "__main__":
    run()
