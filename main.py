#!/usr/bin/env python3
"""Main entry point for the Gmail forwarding confirmation service"""

import asyncio
import sys
import argparse
import json
from pathlib import Path
from loguru import logger

from src.config.settings import ConfigError, Settings
from src.utils.log_setup import configure_logging
from src.forwarding.errors import ForwardingError
from src.forwarding.models import ForwardingRequest
from src.forwarding.service import ForwardingService
from src.forwarding.validation import request_from_email


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Gmail Forwarding Confirmation Service')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode (verbose logging)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    accept = subparsers.add_parser('accept', help='Accept one forwarding confirmation')
    source = accept.add_mutually_exclusive_group(required=True)
    source.add_argument('--url', help='Gmail forwarding confirmation URL')
    source.add_argument('--email-file', metavar='FILE',
                        help='JSON file with "snippet" and "body" of the forwarding email')

    serve = subparsers.add_parser('serve', help='Run the HTTP service')
    serve.add_argument('--host', help='Bind address (default: HOST env or 0.0.0.0)')
    serve.add_argument('--port', type=int, help='Bind port (default: PORT env or 3000)')
    return parser


def load_request(args) -> ForwardingRequest:
    """Request from --url, or parsed out of a saved forwarding email"""
    if args.url is not None:
        return ForwardingRequest(url=args.url)

    data = json.loads(Path(args.email_file).read_text())
    # Accept both a bare {snippet, body} and the webhook shape {data: {object: {...}}}
    message = data.get('data', {}).get('object', data)
    return request_from_email(message.get('snippet', ''), message.get('body', ''))


async def accept(settings: Settings, args) -> int:
    try:
        request = load_request(args)
    except ForwardingError as e:
        logger.error(f"Could not build request: {e.message}")
        return 1

    service = ForwardingService(settings)
    result = await service.accept_forwarding(request)
    print(json.dumps(result.to_response(), indent=2))

    if result.success:
        logger.success(f"{result.message} ({result.response_time}ms)")
        return 0
    logger.error(result.message)
    return 1


def serve(settings: Settings, args) -> int:
    import uvicorn
    from src.api.server import create_app

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info(f"Email forwarding service starting on http://{host}:{port} ({settings.env})")
    uvicorn.run(create_app(settings), host=host, port=port, log_level='warning')
    return 0


def main(argv=None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logger.error(str(e))
        return 1

    configure_logging(settings, level='DEBUG' if args.debug else None)
    if args.debug:
        logger.debug("DEBUG mode enabled (verbose logging active)")

    try:
        if args.command == 'serve':
            return serve(settings, args)
        return asyncio.run(accept(settings, args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
