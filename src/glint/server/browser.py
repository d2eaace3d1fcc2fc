"""Open the served URL in the user's default browser."""

import logging
import webbrowser

logger = logging.getLogger("glint.server")


def open_browser(url: str) -> bool:
    """Ask the platform browser to open *url*.

    Failure is never fatal: the server keeps running and the URL is in
    the banner.  Returns whether a browser accepted the request.
    """
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as exc:
        logger.warning("could not open browser: %s", exc)
        return False
    if not opened:
        logger.warning("no browser available to open %s", url)
    return opened
