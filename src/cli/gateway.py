# =============================================================================
# src/cli/gateway.py -- Gateway Operator CLI
# =============================================================================
#
# Operator commands that run outside the web server:
#
#   python -m src.cli serve                      # run the gateway under uvicorn
#   python -m src.cli sources                    # provider table, attempt order
#   python -m src.cli sources --json             # same, machine-readable
#   python -m src.cli probe /detail --param bookId=42
#                                                # resolve one route upstream
#
# "probe" goes through the same AggregationService the server uses, with the
# cache lookup skipped, so it shows which provider would serve the route
# right now.  The provider file comes from PROVIDERS_CONFIG_PATH unless
# --config is given.
# =============================================================================

"""Command-line tools for running and inspecting the Dracin gateway."""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from urllib.parse import urlencode

import httpx

from src.config.loader import GatewayConfig, load_config
from src.config.settings import Settings
from src.models.provider import attempt_order, provider_table
from src.providers.upstream.http_upstream_provider import build_upstream_providers
from src.services.aggregation_service import AggregationService
from src.utils.errors import AllSourcesFailedError, ConfigurationError
from src.utils.logging import configure_logging


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _handle_serve(args: argparse.Namespace, app_settings: Settings) -> int:
    import uvicorn

    # uvicorn rebuilds the app from the environment, so --config travels there.
    if args.config:
        os.environ["PROVIDERS_CONFIG_PATH"] = args.config

    uvicorn.run(
        "src.main:create_app",
        factory=True,
        host=args.host or app_settings.app_host,
        port=args.port or app_settings.app_port,
        reload=args.reload,
    )
    return 0


def _handle_sources(args: argparse.Namespace, gateway_config: GatewayConfig) -> int:
    ordered = attempt_order(gateway_config.providers)

    if args.json:
        payload = {
            "sources": provider_table(gateway_config.providers),
            "attempt_order": [p.id for p in ordered],
        }
        print(json.dumps(payload, indent=2))
        return 0

    print("Configured Sources")
    print("=" * 60)
    for provider in gateway_config.providers:
        state = "enabled " if provider.enabled else "disabled"
        print(f"  [{state}] p={provider.priority:<3} {provider.id:<22} {provider.base_url}")
    print()
    print("Attempt order: " + (" -> ".join(p.id for p in ordered) or "(none enabled)"))
    return 0


def _parse_params(pairs: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {pair!r}")
        params[key] = value
    return params


async def _handle_probe(
    args: argparse.Namespace,
    app_settings: Settings,
    gateway_config: GatewayConfig,
) -> int:
    try:
        params = _parse_params(args.param)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    route = args.route if args.route.startswith("/") else f"/{args.route}"
    query_string = f"?{urlencode(params)}" if params else ""

    async with httpx.AsyncClient(timeout=app_settings.http_timeout) as http_client:
        service = AggregationService(
            providers=build_upstream_providers(
                list(gateway_config.providers),
                http_client,
                user_agent=app_settings.upstream_user_agent,
            ),
            ttl_table=gateway_config.cache_ttl,
        )
        try:
            result = await service.resolve(route, query_string, params, use_cache=False)
        except AllSourcesFailedError as exc:
            print(f"All API sources failed: {exc.message}", file=sys.stderr)
            return 1

    print(f"Route:   {route}{query_string}")
    print(f"Source:  {result.source_id}")
    print(f"TTL:     {result.ttl}s")
    print(f"Bytes:   {len(result.body)}")
    if args.body:
        print()
        print(result.body.decode("utf-8", errors="replace"))
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the gateway CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Run and inspect the Dracin aggregation gateway.",
    )
    parser.add_argument("--config", help="Provider YAML file (default: PROVIDERS_CONFIG_PATH)")
    subparsers = parser.add_subparsers(dest="command", help="Gateway commands")

    # -- serve --
    serve_parser = subparsers.add_parser("serve", help="Run the gateway under uvicorn")
    serve_parser.add_argument("--host", help="Bind address (default: APP_HOST)")
    serve_parser.add_argument("--port", type=int, help="Bind port (default: APP_PORT)")
    serve_parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes")

    # -- sources --
    sources_parser = subparsers.add_parser("sources", help="Show the provider table")
    sources_parser.add_argument("--json", action="store_true", help="Print JSON")

    # -- probe --
    probe_parser = subparsers.add_parser(
        "probe", help="Resolve one route through the provider fallback chain"
    )
    probe_parser.add_argument("route", help="Route without the /api prefix, e.g. /trending")
    probe_parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter to forward (repeatable)",
    )
    probe_parser.add_argument("--body", action="store_true", help="Print the upstream body")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    app_settings = Settings()

    if args.command == "serve":
        return _handle_serve(args, app_settings)

    # Keep stdout clean for command output.
    configure_logging(log_level="WARNING")

    try:
        gateway_config = load_config(args.config or app_settings.providers_config_path)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.command == "sources":
        return _handle_sources(args, gateway_config)
    return asyncio.run(_handle_probe(args, app_settings, gateway_config))


if __name__ == "__main__":
    sys.exit(main())
