"""One-shot local HTTP listener for the OAuth redirect."""

import logging
import time
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Optional
from urllib.parse import urlsplit

DEFAULT_TIMEOUT = 300
_DONE_PAGE = (
    b"<html><body><h3>Spotify login received. You can close this window.</h3></body></html>"
)

logger = logging.getLogger("top_albums.auth")


def is_local_redirect(redirect_uri: str) -> bool:
    parts = urlsplit(redirect_uri)
    return parts.scheme == "http" and parts.hostname in {"127.0.0.1", "localhost"}


class LocalRedirectReceiver:
    """Listen on the redirect URI's host and port until Spotify calls back.

    The socket is bound in the constructor, so a browser hitting the URI
    before ``wait`` runs is queued rather than refused.
    """

    def __init__(self, redirect_uri: str):
        parts = urlsplit(redirect_uri)
        if not is_local_redirect(redirect_uri):
            raise ValueError(f"Cannot listen on non-local redirect URI {redirect_uri}")
        self.redirect_uri = redirect_uri
        self.callback_path = parts.path or "/"
        self._base = f"{parts.scheme}://{parts.netloc}"
        self._received: Optional[str] = None

        receiver = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self):
                if urlsplit(self.path).path != receiver.callback_path:
                    self.send_response(404)
                    self.end_headers()
                    return
                receiver._received = receiver._base + self.path
                self.send_response(200)
                self.send_header("Content-Type", "text/html; charset=utf-8")
                self.end_headers()
                self.wfile.write(_DONE_PAGE)

            def log_request(self, code="-", size="-"):
                # The query string holds the authorization code.
                logger.debug("redirect listener: %s %s -> %s", self.command, urlsplit(self.path).path, code)

            def log_message(self, format, *args):
                logger.debug("redirect listener: could not handle a request")

        self._server = HTTPServer((parts.hostname, parts.port if parts.port is not None else 80), Handler)

    @property
    def port(self) -> int:
        return self._server.server_address[1]

    def wait(self, timeout: float = DEFAULT_TIMEOUT) -> Optional[str]:
        """Return the full callback URL, or None if nothing arrived in time."""
        deadline = time.monotonic() + timeout
        try:
            while self._received is None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning("No Spotify redirect within %.0fs", timeout)
                    return None
                self._server.timeout = min(remaining, 1.0)
                self._server.handle_request()
        finally:
            self.close()
        return self._received

    def close(self) -> None:
        self._server.server_close()
