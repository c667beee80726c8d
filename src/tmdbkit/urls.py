"""TMDB endpoint paths and query string helpers."""

from collections.abc import Mapping
from urllib.parse import quote

TMDB_BASE_URL = "https://api.themoviedb.org/3"
TMDB_PERMISSION_URL = "https://www.themoviedb.org/authenticate/"
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

AUTHENTICATION_PATH = "/authentication/"
MOVIE_PATH = "/movie/"
TV_PATH = "/tv/"
TV_SEASON_PATH = "/season/"
PERSON_PATH = "/person/"
SEARCH_PATH = "/search/"
COMPANY_PATH = "/company/"
CONFIGURATION_PATH = "/configuration"
DISCOVER_PATH = "/discover/"
GENRE_PATH = "/genre/"
LIST_PATH = "/list/"
ACCOUNT_PATH = "/account/"


def format_options(options: Mapping[str, str] | None) -> str:
    """Render query options as ``&key=value`` pairs.

    Values are percent-escaped (a space becomes ``%20``). Pairs follow the
    mapping's iteration order; TMDB does not depend on parameter order.

    Args:
        options: Query options, may be empty or None

    Returns:
        String ready to append after an existing query string
    """
    if not options:
        return ""
    return "".join(f"&{key}={quote(str(value), safe='')}" for key, value in options.items())
