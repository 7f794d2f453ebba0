#!/usr/bin/env python3
"""
newsreach CLI - Entry Point
===========================

Thin terminal front end over the NNTP operations: log in, list groups,
list a group's articles, show headers or a whole article.
"""

import sys
import argparse
from typing import List, Optional


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    import logging
    from newsreach.utils.config import LOG_DIR

    handlers: List[logging.Handler] = []
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            LOG_DIR / "newsreach.log",
            encoding='utf-8',
            mode='a'
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
    except OSError as e:
        print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)

    if verbose:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        handlers.append(stream_handler)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        handlers=handlers or [logging.NullHandler()],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="newsreach", description="One-shot NNTP reader")
    parser.add_argument("--host", help="NNTP server (default from config)")
    parser.add_argument("--port", type=int, help="NNTP port (default from config)")
    parser.add_argument("--user", help="AUTHINFO username")
    parser.add_argument("--password", help="AUTHINFO password")
    parser.add_argument("--timeout", type=float, help="Override every operation timeout (seconds)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log protocol traffic to stderr")
    parser.add_argument("--save", action="store_true", help="Store these settings (never the password) as defaults")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("auth", help="Connect and authenticate")
    sub.add_parser("groups", help="List newsgroups")

    articles = sub.add_parser("articles", help="List article numbers in a group")
    articles.add_argument("group")
    articles.add_argument("--all", action="store_true", help="Show every number, oldest first")

    for name, text in (("head", "Show article headers"), ("article", "Show a full article")):
        p = sub.add_parser(name, help=text)
        p.add_argument("article_id")
        p.add_argument("--group", help="Select this group first (needed for numeric ids)")

    return parser


def apply_overrides(config, args: argparse.Namespace) -> None:
    """Command-line values win over file and environment."""
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    if args.user is not None:
        config.server.username = args.user
    if args.password is not None:
        config.server.password = args.password
    if args.timeout:
        t = config.timeouts
        t.auth = t.groups = t.articles = t.article = args.timeout


def render(result, args: argparse.Namespace, max_shown: int) -> List[str]:
    """Lines to print for a result."""
    from newsreach.core.listing import group_names, newest_first

    out = []
    if result.greeting:
        out.append(f"Server greeting: {result.greeting}")
    out.append(result.message)
    if not result.success or result.payload is None:
        return out

    if args.command == "groups":
        names = group_names(result.payload)
        out.extend(names or ["(no groups returned)"])
    elif args.command == "articles":
        numbers = result.payload if args.all else newest_first(result.payload, max_shown)
        out.extend(numbers or ["(no articles returned)"])
    else:
        out.extend(result.payload or ["(no article body returned)"])
    return out


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    import logging
    logger = logging.getLogger(__name__)

    from newsreach.core.client import NewsClient
    from newsreach.utils.config import ensure_directories, load_config, save_config

    config = load_config()
    ensure_directories()
    apply_overrides(config, args)

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Config error: {error}", file=sys.stderr)
        return 2

    if args.save:
        save_config(config)

    client = NewsClient(config)
    logger.info(f"newsreach {args.command} against {config.server.host}:{config.server.port}")

    if args.command == "auth":
        result = client.authenticate()
    elif args.command == "groups":
        result = client.list_groups()
    elif args.command == "articles":
        result = client.list_articles(args.group)
    elif args.command == "head":
        result = client.get_headers(args.article_id, group=args.group)
    else:
        result = client.get_article(args.article_id, group=args.group)

    stream = sys.stdout if result.success else sys.stderr
    for line in render(result, args, config.display.max_articles_shown):
        print(line, file=stream)

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
