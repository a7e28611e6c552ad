"""
Command line entry point for Media Bridge.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from media_bridge import __version__
from media_bridge.core.context import CoreContext
from media_bridge.core.database import SettingsDatabase
from media_bridge.core.errors import MediaBridgeError
from media_bridge.core.media_provider import MediaProvider
from media_bridge.core.settings import KEY_AUTH_SCHEME, KEY_DOMAIN, KEY_TOKEN, sanitize_base_url
from media_bridge.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _host_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Map CLI flags onto the host query vocabulary."""
    host: Dict[str, Any] = {}
    if args.page is not None:
        host["paged"] = args.page
    if args.per_page is not None:
        host["posts_per_page"] = args.per_page
    if args.search:
        host["s"] = args.search
    if args.order:
        host["order"] = args.order
    if args.orderby:
        host["orderby"] = args.orderby
    if args.mime:
        host["post_mime_type"] = args.mime
    return host


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="media-bridge", description="Remote media library bridge")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--db", type=Path, default=None, help="Settings database path")
    p.add_argument("--log-dir", type=Path, default=None, help="Directory for log files")
    p.add_argument("-v", "--verbose", action="store_true", help="Log to the console at INFO")
    p.add_argument("--strict-mime", action="store_true", help="Reject MIME filters spanning several types")

    sub = p.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("list", help="List one page of remote media")
    ls.add_argument("--page", type=int, default=None)
    ls.add_argument("--per-page", type=int, default=None)
    ls.add_argument("--search", type=str, default=None)
    ls.add_argument("--order", type=str, default=None, help="asc or desc")
    ls.add_argument("--orderby", type=str, default=None)
    ls.add_argument("--mime", type=str, default=None, help="Comma-separated MIME types, e.g. image/jpeg,image/png")

    get = sub.add_parser("get", help="Fetch a single media item")
    get.add_argument("media_id")

    up = sub.add_parser("upload", help="Upload a local file")
    up.add_argument("path", type=Path)

    cfg = sub.add_parser("configure", help="Persist the remote source settings")
    cfg.add_argument("--domain", type=str, default=None)
    cfg.add_argument("--token", type=str, default=None, help="Stored encrypted")
    cfg.add_argument("--auth-scheme", type=str, choices=("Basic", "Bearer"), default=None)

    return p


def _configure(db: SettingsDatabase, args: argparse.Namespace) -> int:
    if args.domain is not None:
        db.set_config(KEY_DOMAIN, sanitize_base_url(args.domain))
    if args.token is not None:
        db.set_config(KEY_TOKEN, args.token, encrypt=True)
    if args.auth_scheme is not None:
        db.set_config(KEY_AUTH_SCHEME, args.auth_scheme)
    _print_json(db.get_all_config())
    return 0


def _run(provider: MediaProvider, args: argparse.Namespace) -> int:
    if args.command == "list":
        page = provider.list(_host_args(args))
        _print_json({
            "items": [item.to_dict() for item in page.items],
            "total": page.total,
            "total_pages": page.total_pages,
            "page": page.page,
            "per_page": page.per_page,
        })
    elif args.command == "get":
        _print_json(provider.get(args.media_id).to_dict())
    elif args.command == "upload":
        _print_json(provider.upload(args.path).to_dict())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point"""
    args = build_parser().parse_args(argv)

    db = SettingsDatabase(args.db)
    setup_logging(db, args.log_dir, console_level=logging.INFO if args.verbose else logging.WARNING)

    context: Optional[CoreContext] = None
    try:
        if args.command == "configure":
            return _configure(db, args)

        context = CoreContext(db=db, strict_mime=args.strict_mime)
        return _run(context.media, args)
    except MediaBridgeError as e:
        logger.error(f"{args.command} failed: {e}")
        print(MediaProvider.describe_error(e), file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        # Missing upload file, unconfigured domain
        print(f"Error: {e}", file=sys.stderr)
        return 2
    finally:
        if context is not None:
            context.close()
        else:
            db.close()


if __name__ == "__main__":
    raise SystemExit(main())
