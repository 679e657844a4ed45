#!/usr/bin/env python3
"""
Command-line client for a running URL shortener service.

Usage:
    python url_shortener_cli.py shorten <url>
    python url_shortener_cli.py get <short_id_or_url>
    python url_shortener_cli.py batch <url> [<url> ...]
    python url_shortener_cli.py list
    python url_shortener_cli.py delete <short_id> [<short_id> ...]
    python url_shortener_cli.py ping
    python url_shortener_cli.py interactive

The service identifies users by a session cookie. Pass --token (or set
URL_SHORTENER_TOKEN) to act as the same user across invocations; the token
the server assigned is printed with every result.
"""

import argparse
import json
import os
import sys
from typing import List, Optional

import requests

SESSION_COOKIE_NAME = "session_token"


class URLShortenerCLI:
    """HTTP client for the URL shortener API."""

    def __init__(self, endpoint: str, token: Optional[str] = None, timeout: float = 5.0):
        """Initialize CLI."""
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        if token:
            self.session.cookies.set(SESSION_COOKIE_NAME, token)

    @property
    def token(self) -> Optional[str]:
        return self.session.cookies.get(SESSION_COOKIE_NAME)

    def _print(self, success: bool, **fields) -> int:
        payload = {"success": success, **fields, "session_token": self.token}
        print(json.dumps(payload, indent=2), file=sys.stdout if success else sys.stderr)
        return 0 if success else 1

    def shorten(self, url: str) -> int:
        """Shorten a URL."""
        response = self.session.post(f"{self.endpoint}/", data=url.encode("utf-8"), timeout=self.timeout)

        if response.status_code == 201:
            return self._print(True, short_url=response.text, original_url=url)
        if response.status_code == 409:
            return self._print(True, short_url=response.text, original_url=url, already_existed=True)
        return self._print(False, status=response.status_code, error=response.text)

    def get(self, short_id: str) -> int:
        """Resolve a short ID (or full short URL) without following the redirect."""
        short_id = short_id.rstrip("/").rsplit("/", 1)[-1]
        response = self.session.get(
            f"{self.endpoint}/{short_id}",
            allow_redirects=False,
            timeout=self.timeout,
        )

        if response.status_code == 307:
            return self._print(True, short_id=short_id, original_url=response.headers["Location"])
        if response.status_code == 410:
            return self._print(False, short_id=short_id, error="deleted")
        return self._print(False, short_id=short_id, status=response.status_code, error="not found")

    def batch(self, urls: List[str]) -> int:
        """Shorten several URLs; correlation IDs are their positions."""
        body = [{"correlation_id": str(i), "original_url": url} for i, url in enumerate(urls)]
        response = self.session.post(f"{self.endpoint}/api/shorten/batch", json=body, timeout=self.timeout)

        if response.status_code == 201:
            return self._print(True, results=response.json())
        return self._print(False, status=response.status_code, error=response.text)

    def list_urls(self) -> int:
        """List the URLs owned by the session."""
        response = self.session.get(f"{self.endpoint}/api/user/urls", timeout=self.timeout)

        if response.status_code == 204:
            return self._print(True, count=0, urls=[])
        if response.status_code == 200:
            urls = response.json()
            return self._print(True, count=len(urls), urls=urls)
        return self._print(False, status=response.status_code, error=response.text)

    def delete(self, short_ids: List[str]) -> int:
        """Request deletion of URLs owned by the session."""
        response = self.session.delete(f"{self.endpoint}/api/user/urls", json=short_ids, timeout=self.timeout)

        if response.status_code == 202:
            return self._print(True, accepted=short_ids)
        return self._print(False, status=response.status_code, error=response.text)

    def ping(self) -> int:
        """Check storage health."""
        response = self.session.get(f"{self.endpoint}/ping", timeout=self.timeout)
        return self._print(response.status_code == 200, status=response.status_code)

    def interactive(self) -> int:
        """Read URLs from stdin, one per line, and shorten each."""
        print("Insert original URLs, one per line (Ctrl-D to quit)", file=sys.stderr)
        for line in sys.stdin:
            url = line.strip()
            if url:
                self.shorten(url)
        return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Resolve a short URL
  %(prog)s get http://localhost:8080/1

  # List and delete URLs of a session
  %(prog)s --token 3f1c... list
  %(prog)s --token 3f1c... delete 1 2
        """
    )

    parser.add_argument(
        "--endpoint",
        default=os.getenv("BASE_URL", "http://localhost:8080"),
        help="Service URL (default: from BASE_URL env or http://localhost:8080)"
    )
    parser.add_argument(
        "--token",
        default=os.getenv("URL_SHORTENER_TOKEN"),
        help="Session token to act as (default: from URL_SHORTENER_TOKEN env)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")

    get_parser = subparsers.add_parser("get", help="Get original URL")
    get_parser.add_argument("short_id", help="Short ID or short URL")

    batch_parser = subparsers.add_parser("batch", help="Shorten several URLs")
    batch_parser.add_argument("urls", nargs="+", help="URLs to shorten")

    subparsers.add_parser("list", help="List URLs of the session")

    delete_parser = subparsers.add_parser("delete", help="Delete URLs of the session")
    delete_parser.add_argument("short_ids", nargs="+", help="Short IDs to delete")

    subparsers.add_parser("ping", help="Check service health")
    subparsers.add_parser("interactive", help="Shorten URLs read from stdin")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    cli = URLShortenerCLI(endpoint=args.endpoint, token=args.token)

    try:
        if args.command == "shorten":
            return cli.shorten(args.url)
        elif args.command == "get":
            return cli.get(args.short_id)
        elif args.command == "batch":
            return cli.batch(args.urls)
        elif args.command == "list":
            return cli.list_urls()
        elif args.command == "delete":
            return cli.delete(args.short_ids)
        elif args.command == "ping":
            return cli.ping()
        elif args.command == "interactive":
            return cli.interactive()
        else:
            parser.print_help()
            return 1

    except requests.RequestException as e:
        print(json.dumps({
            "success": False,
            "error": f"Request failed: {e}"
        }, indent=2), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
