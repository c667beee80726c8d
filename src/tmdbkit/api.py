"""TMDB endpoint methods.

Every method assembles an endpoint URL and funnels it through the shared
executor in ``BaseTMDBClient``. Extra query parameters (``language``,
``append_to_response``, ``page``...) are passed through ``options``.

API Documentation: https://developer.themoviedb.org/reference
"""

from collections.abc import Mapping

import structlog

from tmdbkit.client import BaseTMDBClient
from tmdbkit.errors import TMDBUsageError
from tmdbkit.models import (
    Company,
    Configuration,
    Credits,
    GenreList,
    GuestSession,
    ListCreated,
    MediaType,
    Movie,
    Page,
    PersonDetails,
    RequestToken,
    Response,
    SearchResult,
    Season,
    Session,
    SessionDeleted,
    TVShow,
)
from tmdbkit.urls import (
    ACCOUNT_PATH,
    AUTHENTICATION_PATH,
    COMPANY_PATH,
    CONFIGURATION_PATH,
    DISCOVER_PATH,
    GENRE_PATH,
    LIST_PATH,
    MOVIE_PATH,
    PERSON_PATH,
    SEARCH_PATH,
    TMDB_BASE_URL,
    TMDB_PERMISSION_URL,
    TV_PATH,
    TV_SEASON_PATH,
    format_options,
)

logger = structlog.get_logger(__name__)

Options = Mapping[str, str] | None

# Ratings accepted by TMDB, in steps of 0.5
MIN_RATING = 0.5
MAX_RATING = 10.0


class TMDBClient(BaseTMDBClient):
    """Async client for The Movie Database API.

    Example:
        async with TMDBClient("api-key") as client:
            page = await client.search_movies("Inception")
            movie = await client.get_movie_details(page.results[0].id)
    """

    def _url(self, path: str, options: Options = None, *, session: bool = False) -> str:
        url = f"{TMDB_BASE_URL}{path}?api_key={self.api_key}"
        if session:
            url += f"&session_id={self._require_session()}"
        return url + format_options(options)

    # =========================================================================
    # Movies
    # =========================================================================

    async def get_movie_details(self, movie_id: int, options: Options = None) -> Movie:
        """Get the primary information about a movie.

        Args:
            movie_id: TMDB movie ID
            options: Extra query parameters (language, append_to_response)

        Raises:
            TMDBNotFoundError: Movie not found
        """
        movie = await self.get(self._url(f"{MOVIE_PATH}{movie_id}", options), Movie)
        logger.info("tmdb_get_movie", movie_id=movie_id, title=movie.title)
        return movie

    async def get_movie_credits(self, movie_id: int, options: Options = None) -> Credits:
        return await self.get(self._url(f"{MOVIE_PATH}{movie_id}/credits", options), Credits)

    async def rate_movie(self, movie_id: int, value: float) -> Response:
        """Rate a movie on behalf of the session user.

        Args:
            movie_id: TMDB movie ID
            value: Rating between 0.5 and 10.0 in steps of 0.5

        Raises:
            TMDBUsageError: Invalid rating or no session id set
        """
        if not MIN_RATING <= value <= MAX_RATING or (value * 2) % 1:
            raise TMDBUsageError(f"Rating must be between {MIN_RATING} and {MAX_RATING} in steps of 0.5")

        url = self._url(f"{MOVIE_PATH}{movie_id}/rating", session=True)
        response = await self.request(url, {"value": value}, "POST", Response)
        logger.info("tmdb_rate_movie", movie_id=movie_id, value=value)
        return response

    async def delete_movie_rating(self, movie_id: int) -> Response:
        url = self._url(f"{MOVIE_PATH}{movie_id}/rating", session=True)
        return await self.request(url, None, "DELETE", Response)

    # =========================================================================
    # TV
    # =========================================================================

    async def get_tv_details(self, tv_id: int, options: Options = None) -> TVShow:
        """Get the primary information about a TV show.

        Raises:
            TMDBNotFoundError: TV show not found
        """
        tv_show = await self.get(self._url(f"{TV_PATH}{tv_id}", options), TVShow)
        logger.info("tmdb_get_tv_show", tv_id=tv_id, name=tv_show.name)
        return tv_show

    async def get_tv_season_details(
        self,
        tv_id: int,
        season_number: int,
        options: Options = None,
    ) -> Season:
        url = self._url(f"{TV_PATH}{tv_id}{TV_SEASON_PATH}{season_number}", options)
        return await self.get(url, Season)

    # =========================================================================
    # People, Companies, Genres
    # =========================================================================

    async def get_person_details(self, person_id: int, options: Options = None) -> PersonDetails:
        return await self.get(self._url(f"{PERSON_PATH}{person_id}", options), PersonDetails)

    async def get_company_details(self, company_id: int) -> Company:
        return await self.get(self._url(f"{COMPANY_PATH}{company_id}"), Company)

    async def get_genre_movie_list(self, options: Options = None) -> GenreList:
        return await self.get(self._url(f"{GENRE_PATH}movie/list", options), GenreList)

    async def get_genre_tv_list(self, options: Options = None) -> GenreList:
        return await self.get(self._url(f"{GENRE_PATH}tv/list", options), GenreList)

    async def get_configuration(self) -> Configuration:
        """Get the API configuration (image base URLs and sizes)."""
        return await self.get(self._url(CONFIGURATION_PATH), Configuration)

    # =========================================================================
    # Search and Discover
    # =========================================================================

    async def _search(self, kind: str, query: str, options: Options) -> Page[SearchResult]:
        if not query:
            raise TMDBUsageError("Search query is empty")

        url = self._url(f"{SEARCH_PATH}{kind}", {"query": query, **(options or {})})
        page = await self.get(url, Page[SearchResult])
        logger.info(
            "tmdb_search",
            kind=kind,
            query=query,
            results_count=len(page.results),
        )
        return page

    async def search_movies(self, query: str, options: Options = None) -> Page[SearchResult]:
        """Search for movies by title.

        Args:
            query: Movie title to search for
            options: Extra query parameters (year, page, language)

        Returns:
            One page of search results
        """
        return await self._search("movie", query, options)

    async def search_tv(self, query: str, options: Options = None) -> Page[SearchResult]:
        return await self._search("tv", query, options)

    async def search_multi(self, query: str, options: Options = None) -> Page[SearchResult]:
        """Search movies, TV shows and people in a single request."""
        return await self._search("multi", query, options)

    async def discover_movie(self, options: Options = None) -> Page[SearchResult]:
        """Discover movies by filters such as ``with_genres`` or ``sort_by``."""
        return await self.get(self._url(f"{DISCOVER_PATH}movie", options), Page[SearchResult])

    # =========================================================================
    # Authentication
    # =========================================================================

    async def create_request_token(self) -> RequestToken:
        """Create a temporary request token for the user to approve."""
        return await self.get(self._url(f"{AUTHENTICATION_PATH}token/new"), RequestToken)

    def get_authorization_url(self, request_token: str, redirect_to: str | None = None) -> str:
        """Get the TMDB page where the user approves a request token."""
        if not request_token:
            raise TMDBUsageError("Request token is empty")

        url = f"{TMDB_PERMISSION_URL}{request_token}"
        if redirect_to:
            url += "?" + format_options({"redirect_to": redirect_to}).lstrip("&")
        return url

    async def create_session(self, request_token: str) -> Session:
        """Exchange an approved request token for a session id.

        The returned id is not stored; pass it to ``set_session_id``.
        """
        if not request_token:
            raise TMDBUsageError("Request token is empty")

        url = self._url(f"{AUTHENTICATION_PATH}session/new")
        return await self.request(url, {"request_token": request_token}, "POST", Session)

    async def create_guest_session(self) -> GuestSession:
        return await self.get(self._url(f"{AUTHENTICATION_PATH}guest_session/new"), GuestSession)

    async def delete_session(self, session_id: str | None = None) -> SessionDeleted:
        """Invalidate a session. Uses the configured session id if None."""
        session_id = session_id or self._require_session()
        url = self._url(f"{AUTHENTICATION_PATH}session")
        return await self.request(url, {"session_id": session_id}, "DELETE", SessionDeleted)

    # =========================================================================
    # Lists and Account
    # =========================================================================

    async def create_list(self, name: str, description: str = "", language: str = "en") -> ListCreated:
        """Create a list owned by the session user."""
        if not name:
            raise TMDBUsageError("List name is empty")

        url = self._url(LIST_PATH.rstrip("/"), session=True)
        body = {"name": name, "description": description, "language": language}
        created = await self.request(url, body, "POST", ListCreated)
        logger.info("tmdb_list_created", list_id=created.list_id)
        return created

    async def add_movie_to_list(self, list_id: int, movie_id: int) -> Response:
        url = self._url(f"{LIST_PATH}{list_id}/add_item", session=True)
        return await self.request(url, {"media_id": movie_id}, "POST", Response)

    async def delete_list(self, list_id: int) -> Response:
        url = self._url(f"{LIST_PATH}{list_id}", session=True)
        return await self.request(url, None, "DELETE", Response)

    async def mark_as_favorite(
        self,
        account_id: int,
        media_type: MediaType,
        media_id: int,
        favorite: bool = True,
    ) -> Response:
        """Add or remove a movie or TV show from the account favorites.

        Raises:
            TMDBUsageError: media_type is not movie or tv, or no session id set
        """
        if media_type not in (MediaType.MOVIE, MediaType.TV):
            raise TMDBUsageError(f"Invalid media type for favorites: {media_type}")

        url = self._url(f"{ACCOUNT_PATH}{account_id}/favorite", session=True)
        body = {"media_type": media_type.value, "media_id": media_id, "favorite": favorite}
        return await self.request(url, body, "POST", Response)
