"""Entry point for Top Albums — rank your most-played albums on Spotify."""

import argparse
import datetime
import logging
import os
import sys

from top_albums.domain.aggregation import release_year_options
from top_albums.domain.errors import (
    AUTH_REJECTED,
    MISSING_CODE,
    MISSING_VERIFIER,
    PROFILE_FETCH_FAILED,
    TOKEN_EXCHANGE_FAILED,
)

FAILURE_MESSAGES = {
    AUTH_REJECTED: "Spotify login was cancelled or refused.",
    MISSING_CODE: "Spotify did not send an authorization code back.",
    MISSING_VERIFIER: "No login is in progress here. Run `login` again.",
    TOKEN_EXCHANGE_FAILED: "Could not exchange the authorization code for a token.",
    PROFILE_FETCH_FAILED: "Logged in, but your Spotify profile could not be loaded.",
}

QUIET_LOGGERS = ("spotipy", "urllib3")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="top-albums", description="Rank your top Spotify albums from your top tracks.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    sub = ap.add_subparsers(dest="command", required=True)

    configure = sub.add_parser("configure", help="Save the Spotify app settings")
    configure.add_argument("--client-id", required=True)
    configure.add_argument("--redirect-uri")

    login = sub.add_parser("login", help="Log in with Spotify (PKCE)")
    login.add_argument("--no-browser", action="store_true", help="Print the login URL instead of opening it")
    login.add_argument("--paste", action="store_true", help="Paste the callback URL instead of listening for it")
    login.add_argument("--timeout", type=float, default=300, help="Seconds to wait for the redirect")

    complete = sub.add_parser("complete", help="Finish a login from a callback URL")
    complete.add_argument("callback_url")

    sub.add_parser("whoami", help="Show the logged-in user")
    sub.add_parser("logout", help="Forget the stored session")

    albums = sub.add_parser("albums", help="Show your top albums")
    albums.add_argument("--time-range", choices=["short_term", "medium_term", "long_term"])
    albums.add_argument("--count", type=int, help="Number of top tracks to fetch")
    this_year = datetime.date.today().year
    albums.add_argument(
        "--year",
        help=f"Release year filter (default {this_year}): {', '.join(release_year_options(this_year))} or any year",
    )
    albums.add_argument("--share", action="store_true", help="Print the list as shareable text")
    albums.add_argument("--output", help="Also write the shareable text to this file")
    return ap


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else os.getenv("TOP_ALBUMS_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("top_albums").setLevel(level)
    # Their debug output carries the bearer header and request URLs.
    floor = max(logging.INFO, logging.getLogger("top_albums").getEffectiveLevel())
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(floor)


def _controller(cfg: dict):
    from top_albums.adapters.session.json_session_adapter import JsonSessionAdapter
    from top_albums.adapters.spotify.token_client import SpotifyTokenClient
    from top_albums.usecases.auth_flow import AuthFlowController

    return AuthFlowController(
        session=JsonSessionAdapter(),
        tokens=SpotifyTokenClient(),
        client_id=cfg["spotify_client_id"],
        redirect_uri=cfg["spotify_redirect_uri"],
    )


def _report_outcome(controller) -> int:
    from top_albums.domain.model import AuthState

    if controller.state == AuthState.AUTHENTICATED:
        user = controller.session.load().user or {}
        print(f"Logged in as: {user.get('display_name') or 'Music Lover'}")
        return 0
    if controller.state == AuthState.FAILED:
        reason = controller.failure_reason
        print(f"Spotify auth failed ({controller.error.code}): {FAILURE_MESSAGES.get(reason, controller.error)}")
        return 1
    print(f"Login is {controller.state.value}.")
    return 0


def cmd_configure(args, config) -> int:
    cfg = config.load()
    cfg["spotify_client_id"] = args.client_id
    if args.redirect_uri:
        cfg["spotify_redirect_uri"] = args.redirect_uri
    config.save(cfg)
    print(f"Saved {config.path}")
    return 0


def cmd_login(args, config) -> int:
    import webbrowser

    from top_albums.adapters.auth.redirect_receiver import LocalRedirectReceiver, is_local_redirect
    from top_albums.domain.model import AuthState

    cfg = config.load()
    controller = _controller(cfg)
    if controller.state == AuthState.AUTHENTICATED:
        print("Already logged in. Run `logout` first to switch accounts.")
        return 0

    receiver = None
    if not args.paste and is_local_redirect(cfg["spotify_redirect_uri"]):
        try:
            receiver = LocalRedirectReceiver(cfg["spotify_redirect_uri"])
        except OSError as exc:
            print(f"Cannot listen on {cfg['spotify_redirect_uri']} ({exc.strerror or exc}). Retry with --paste.")
            return 1

    try:
        url = controller.start()
        print("Open this URL to log in with Spotify:")
        print(url)
        if not args.no_browser:
            webbrowser.open(url)

        if receiver is None:
            callback = input("Paste the URL you were redirected to: ").strip()
        else:
            print("Waiting for Spotify to redirect back...")
            callback = receiver.wait(timeout=args.timeout)
            if callback is None:
                print("Timed out waiting for the Spotify redirect.")
                return 1
    finally:
        if receiver is not None:
            receiver.close()

    controller.complete_from_redirect(callback)
    return _report_outcome(controller)


def cmd_complete(args, config) -> int:
    controller = _controller(config.load())
    controller.complete_from_redirect(args.callback_url)
    return _report_outcome(controller)


def cmd_whoami(args, config) -> int:
    from top_albums.adapters.session.json_session_adapter import JsonSessionAdapter

    session = JsonSessionAdapter().load()
    if not session.is_authenticated:
        print("Not logged in.")
        return 1
    user = session.user or {}
    print(f"Logged in as: {user.get('display_name') or 'Music Lover'} ({user.get('email', 'no email')})")
    return 0


def cmd_logout(args, config) -> int:
    _controller(config.load()).logout()
    print("Logged out.")
    return 0


def cmd_albums(args, config) -> int:
    from top_albums.adapters.session.json_session_adapter import JsonSessionAdapter
    from top_albums.adapters.spotify.track_adapter import SpotifyTopTracksAdapter
    from top_albums.domain.model import TimeRange
    from top_albums.usecases.share_top_albums import ShareTopAlbumsUseCase, share_title
    from top_albums.usecases.top_albums import TopAlbumsUseCase

    session = JsonSessionAdapter().load()
    if not session.is_authenticated:
        print("Not logged in. Run `login` first.")
        return 1

    cfg = config.load()
    time_range = TimeRange(args.time_range or cfg["time_range"])
    count = args.count if args.count is not None else int(cfg["tracks_to_fetch"])
    year = args.year or cfg["release_year"] or str(datetime.date.today().year)

    print(f"Fetching up to {count} top tracks ({time_range.label})...")
    report = TopAlbumsUseCase(SpotifyTopTracksAdapter()).execute(session.access_token, time_range, count, year)
    if report.partial:
        print(f"Only {len(report.tracks)} tracks were available.")

    if args.share or args.output:
        print(ShareTopAlbumsUseCase().execute(report.albums, report.year_filter, path=args.output))
        return 0

    print(share_title(report.year_filter))
    if not report.albums:
        print("No album has at least two of your top tracks for this selection.")
        return 0
    for i, album in enumerate(report.albums, start=1):
        released = f" [{album.release_date}]" if album.release_date else ""
        print(
            f"{i:>3}. {album.name} - {', '.join(album.artists)}{released}"
            f"  score={album.score} tracks={album.track_count} best=#{album.best_rank}"
        )
    return 0


COMMANDS = {
    "configure": cmd_configure,
    "login": cmd_login,
    "complete": cmd_complete,
    "whoami": cmd_whoami,
    "logout": cmd_logout,
    "albums": cmd_albums,
}


def main(argv=None) -> int:
    from top_albums.adapters.config.json_config_adapter import JsonConfigAdapter

    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    config = JsonConfigAdapter()
    if args.command not in ("configure", "whoami", "logout") and not config.is_configured():
        print("Spotify is not configured. Run `configure --client-id <id>` first.")
        return 1

    try:
        return COMMANDS[args.command](args, config)
    except KeyboardInterrupt:
        print("Cancelled.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
