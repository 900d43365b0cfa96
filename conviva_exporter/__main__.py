"""Entry point — python -m conviva_exporter."""

from __future__ import annotations

import argparse
import asyncio
import sys


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="conviva-exporter",
        description="Prometheus exporter for the Conviva Experience Insights API",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to configuration YAML file",
        default=None,
    )
    parser.add_argument(
        "--web.listen-address",
        dest="listen_address",
        help="Address to listen on for telemetry (default :8080)",
        default=None,
    )
    parser.add_argument(
        "--web.telemetry-path",
        dest="telemetry_path",
        help="Path under which to expose metrics (default /metrics)",
        default=None,
    )
    args = parser.parse_args(argv)

    from conviva_exporter.app import Application
    from conviva_exporter.config.settings import (
        WebConfig,
        load_config,
        parse_listen_address,
    )

    try:
        settings = load_config(args.config)
        web = settings.web.model_dump()
        if args.listen_address:
            web["host"], web["port"] = parse_listen_address(args.listen_address)
        if args.telemetry_path:
            web["telemetry_path"] = args.telemetry_path
        settings.web = WebConfig.model_validate(web)
        app = Application(settings=settings)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    try:
        asyncio.run(app.start())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
