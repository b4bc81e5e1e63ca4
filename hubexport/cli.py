"""CLI interface for hubexport.

Usage:
    python -m hubexport [--client-id ID] [--client-secret SECRET] [--hub-id HUB] <command> [options]

Commands:
    indexes export <dir>        Export index settings, replicas and webhooks of a hub
    content-type-schema get     Print a content type schema
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .core.config import ExportConfig, get_config
from .core.logging_config import configure_logging
from .export import (
    ExportAggregator,
    ExportGate,
    ExportOutcome,
    HubWebhookResolver,
    LoggingProgressReporter,
    export_indexes,
)
from .rest import DirectoryOperations, DynamicContentClient
from .utils.error_handler import ConfigurationError, describe_error

logger = logging.getLogger(__name__)


def build_client(config: ExportConfig) -> DynamicContentClient:
    """REST client from validated configuration."""
    return DynamicContentClient(
        api_url=config.api_url,
        auth_url=config.auth_url,
        client_id=config.client_id or "",
        client_secret=config.client_secret.get_secret_value() if config.client_secret else "",
        timeout=config.timeout,
        max_attempts=config.max_attempts,
    )


def _require(config: ExportConfig, *fields: str) -> None:
    errors = {k: v for k, v in config.validate_config().items() if k in fields}
    if errors:
        raise ConfigurationError(errors)


async def cmd_indexes_export(args, config: ExportConfig) -> int:
    """Export the hub's indexes to <dir>."""
    _require(config, "client_id", "client_secret", "hub_id")

    async with build_client(config) as client:
        ops = DirectoryOperations(client, config.hub_id)
        hub = await ops.get_hub()
        logger.info(f"Exporting indexes of hub {hub.id} ({hub.name})")

        progress = LoggingProgressReporter()
        aggregator = ExportAggregator(ops, HubWebhookResolver(ops), progress=progress)
        gate = ExportGate(force=args.force)

        outcome = await export_indexes(hub, args.dir, aggregator, gate)

    if outcome is ExportOutcome.NOTHING_EXPORTED:
        print("Nothing was exported, exiting.")
        return 0

    print("Indexes exported successfully!")
    return 0


async def cmd_content_type_schema_get(args, config: ExportConfig) -> int:
    """Print one content type schema as JSON."""
    _require(config, "client_id", "client_secret")

    async with build_client(config) as client:
        ops = DirectoryOperations(client, config.hub_id or "")
        schema = await ops.get_content_type_schema(args.id)

    print(json.dumps(schema, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hubexport",
        description="Export search-index configuration from a content-delivery hub"
    )
    parser.add_argument('--client-id', type=str, help='OAuth client id (overrides DC_CLIENT_ID)')
    parser.add_argument('--client-secret', type=str, help='OAuth client secret (overrides DC_CLIENT_SECRET)')
    parser.add_argument('--hub-id', type=str, help='Hub id (overrides DC_HUB_ID)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # indexes
    indexes_parser = subparsers.add_parser('indexes', help='Index commands')
    indexes_sub = indexes_parser.add_subparsers(dest='action')

    export_parser = indexes_sub.add_parser('export', help='Export Indexes')
    export_parser.add_argument(
        'dir',
        type=str,
        help='Output directory for the exported Indexes'
    )
    export_parser.add_argument(
        '-f', '--force',
        action='store_true',
        help='Overwrite an existing export without asking'
    )
    export_parser.set_defaults(handler=cmd_indexes_export)

    # content-type-schema
    schema_parser = subparsers.add_parser('content-type-schema', help='Content type schema commands')
    schema_sub = schema_parser.add_subparsers(dest='action')

    get_parser = schema_sub.add_parser('get', help='Get Content Type Schema')
    get_parser.add_argument(
        '--id',
        type=str,
        required=True,
        help='content-type-schema ID'
    )
    get_parser.set_defaults(handler=cmd_content_type_schema_get)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, 'handler', None):
        parser.print_help()
        return 1

    try:
        config = get_config().with_overrides(
            client_id=args.client_id,
            client_secret=args.client_secret,
            hub_id=args.hub_id,
        )
        configure_logging(config.log_level.value)
        return asyncio.run(args.handler(args, config))
    except KeyboardInterrupt:
        logger.info("\nOperation cancelled")
        return 1
    except Exception as e:
        logger.error(f"Command failed: {describe_error(e)}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
