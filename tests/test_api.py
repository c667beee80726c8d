"""Tests for TMDB endpoint methods."""

import json

import httpx
import pytest

from tmdbkit.api import TMDBClient
from tmdbkit.config import TransportConfig
from tmdbkit.errors import TMDBNotFoundError, TMDBUsageError
from tmdbkit.models import (
    Company,
    Credits,
    GenreList,
    MediaType,
    Movie,
    PersonDetails,
    SearchResult,
    TVShow,
)

# =============================================================================
# Sample API Responses
# =============================================================================

SAMPLE_MOVIE_DETAILS = {
    "id": 27205,
    "title": "Inception",
    "original_title": "Inception",
    "overview": "A skilled thief is given a chance at redemption.",
    "release_date": "2010-07-16",
    "poster_path": "/9gk7adHYeDvHkCSEqAvQNLV5Ber.jpg",
    "vote_average": 8.4,
    "vote_count": 35000,
    "genres": [
        {"id": 28, "name": "Action"},
        {"id": 878, "name": "Science Fiction"},
    ],
    "runtime": 148,
    "status": "Released",
    "production_companies": [
        {
            "id": 923,
            "name": "Legendary Pictures",
            "logo_path": "/8M99Dkt23MjQMTTWukq4m5XsEuo.png",
            "origin_country": "US",
        },
    ],
    "imdb_id": "tt1375666",
    "homepage": "https://www.warnerbros.com/movies/inception",
}

SAMPLE_TV_DETAILS = {
    "id": 1396,
    "name": "Breaking Bad",
    "first_air_date": "2008-01-20",
    "number_of_seasons": 5,
    "number_of_episodes": 62,
    "in_production": False,
    "last_episode_to_air": {
        "air_date": "2013-09-29",
        "episode_number": 16,
        "season_number": 5,
        "name": "Felina",
    },
}

SAMPLE_SEASON = {
    "id": 3572,
    "name": "Season 1",
    "season_number": 1,
    "episodes": [
        {"air_date": "2008-01-20", "episode_number": 1, "season_number": 1, "name": "Pilot"},
        {"air_date": "2008-01-27", "episode_number": 2, "season_number": 1, "name": "Cat's in the Bag..."},
    ],
}

SAMPLE_CREDITS = {
    "id": 27205,
    "cast": [
        {"id": 6193, "name": "Leonardo DiCaprio", "character": "Cobb", "popularity": 50.0},
    ],
    "crew": [
        {"id": 525, "name": "Christopher Nolan", "job": "Director", "department": "Directing"},
    ],
}

SAMPLE_MULTI_SEARCH_RESPONSE = {
    "page": 1,
    "results": [
        {"id": 27205, "media_type": "movie", "title": "Inception", "release_date": "2010-07-16"},
        {"id": 1396, "media_type": "tv", "name": "Breaking Bad", "first_air_date": "2008-01-20"},
        {"id": 12345, "media_type": "person", "name": "Some Actor"},
    ],
    "total_pages": 1,
    "total_results": 3,
}

SAMPLE_PERSON_DETAILS = {
    "id": 137427,
    "name": "Denis Villeneuve",
    "biography": "Denis Villeneuve is a French Canadian film director and writer.",
    "birthday": "1967-10-03",
    "deathday": None,
    "known_for_department": "Directing",
}

SAMPLE_ACK = {"status_code": 1, "status_message": "Success."}


def make_client(handler, session_id: str | None = None) -> TMDBClient:
    return TMDBClient(
        "test_key",
        session_id=session_id,
        transport_config=TransportConfig(transport=httpx.MockTransport(handler)),
    )


class Recorder:
    """Mock transport handler replying with a fixed response."""

    def __init__(self, data: dict | None = None, status_code: int = 200):
        self.data = data
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.data is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.data)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


# =============================================================================
# Read Endpoint Tests
# =============================================================================


class TestReadEndpoints:
    """Tests for read endpoints."""

    @pytest.mark.asyncio
    async def test_get_movie_details(self):
        """Test getting movie details."""
        recorder = Recorder(SAMPLE_MOVIE_DETAILS)
        client = make_client(recorder)

        movie = await client.get_movie_details(27205, {"language": "en-US"})

        assert isinstance(movie, Movie)
        assert movie.title == "Inception"
        assert movie.runtime == 148
        assert movie.get_year() == 2010
        assert movie.genres[1].name == "Science Fiction"
        assert recorder.last.url.path == "/3/movie/27205"
        assert recorder.last.url.params["api_key"] == "test_key"
        assert recorder.last.url.params["language"] == "en-US"

    @pytest.mark.asyncio
    async def test_get_movie_not_found(self):
        """Test 404 on movie details."""
        recorder = Recorder({"status_code": 34, "status_message": "Not found"}, status_code=404)
        client = make_client(recorder)

        with pytest.raises(TMDBNotFoundError):
            await client.get_movie_details(999999)

    @pytest.mark.asyncio
    async def test_get_movie_credits(self):
        """Test getting movie credits."""
        client = make_client(Recorder(SAMPLE_CREDITS))

        credits = await client.get_movie_credits(27205)

        assert isinstance(credits, Credits)
        assert credits.cast[0].character == "Cobb"
        assert credits.get_directors()[0].name == "Christopher Nolan"

    @pytest.mark.asyncio
    async def test_get_tv_details(self):
        """Test getting TV show details."""
        recorder = Recorder(SAMPLE_TV_DETAILS)
        client = make_client(recorder)

        tv = await client.get_tv_details(1396)

        assert isinstance(tv, TVShow)
        assert tv.number_of_seasons == 5
        assert tv.last_episode_to_air.name == "Felina"
        assert tv.next_episode_to_air is None
        assert recorder.last.url.path == "/3/tv/1396"

    @pytest.mark.asyncio
    async def test_get_tv_season_details(self):
        """Test getting a TV season."""
        recorder = Recorder(SAMPLE_SEASON)
        client = make_client(recorder)

        season = await client.get_tv_season_details(1396, 1)

        assert len(season.episodes) == 2
        assert season.episodes[0].name == "Pilot"
        assert recorder.last.url.path == "/3/tv/1396/season/1"

    @pytest.mark.asyncio
    async def test_get_person_details(self):
        """Test getting person details."""
        client = make_client(Recorder(SAMPLE_PERSON_DETAILS))

        person = await client.get_person_details(137427)

        assert isinstance(person, PersonDetails)
        assert person.birthday == "1967-10-03"
        assert person.deathday is None

    @pytest.mark.asyncio
    async def test_get_company_details(self):
        """Test getting company details."""
        recorder = Recorder({"id": 923, "name": "Legendary Pictures", "headquarters": "Burbank"})
        client = make_client(recorder)

        company = await client.get_company_details(923)

        assert isinstance(company, Company)
        assert company.headquarters == "Burbank"
        assert recorder.last.url.path == "/3/company/923"

    @pytest.mark.asyncio
    async def test_get_genre_lists(self):
        """Test genre list endpoints."""
        recorder = Recorder({"genres": [{"id": 28, "name": "Action"}]})
        client = make_client(recorder)

        movie_genres = await client.get_genre_movie_list()
        assert recorder.last.url.path == "/3/genre/movie/list"
        tv_genres = await client.get_genre_tv_list()
        assert recorder.last.url.path == "/3/genre/tv/list"

        assert isinstance(movie_genres, GenreList)
        assert movie_genres.genres[0].name == "Action"
        assert tv_genres.genres[0].id == 28

    @pytest.mark.asyncio
    async def test_get_configuration(self):
        """Test getting API configuration."""
        recorder = Recorder({"images": {"secure_base_url": "https://image.tmdb.org/t/p/"}})
        client = make_client(recorder)

        config = await client.get_configuration()

        assert config.images.secure_base_url == "https://image.tmdb.org/t/p/"
        assert recorder.last.url.path == "/3/configuration"


# =============================================================================
# Search Tests
# =============================================================================


class TestSearch:
    """Tests for search and discover."""

    @pytest.mark.asyncio
    async def test_search_movies(self):
        """Test movie search passes an escaped query."""
        recorder = Recorder({"page": 1, "results": [{"id": 27205, "title": "Inception"}]})
        client = make_client(recorder)

        page = await client.search_movies("Inception 2010", {"year": "2010"})

        assert page.results[0].display_title == "Inception"
        assert "query=Inception%202010" in str(recorder.last.url)
        assert recorder.last.url.params["query"] == "Inception 2010"
        assert recorder.last.url.params["year"] == "2010"
        assert recorder.last.url.path == "/3/search/movie"

    @pytest.mark.asyncio
    async def test_search_multi(self):
        """Test multi search keeps every media type."""
        client = make_client(Recorder(SAMPLE_MULTI_SEARCH_RESPONSE))

        page = await client.search_multi("test")

        assert page.total_results == 3
        assert [r.media_type for r in page.results] == [MediaType.MOVIE, MediaType.TV, MediaType.PERSON]
        assert isinstance(page.results[1], SearchResult)
        assert page.results[1].display_title == "Breaking Bad"
        assert page.results[1].get_year() == 2008

    @pytest.mark.asyncio
    async def test_search_tv(self):
        """Test TV search endpoint."""
        recorder = Recorder({"page": 1, "results": []})
        client = make_client(recorder)

        page = await client.search_tv("Breaking Bad")

        assert page.results == []
        assert recorder.last.url.path == "/3/search/tv"

    @pytest.mark.asyncio
    async def test_search_empty_query(self):
        """Test empty queries fail without a request."""
        recorder = Recorder({})
        client = make_client(recorder)

        with pytest.raises(TMDBUsageError):
            await client.search_movies("")
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_discover_movie(self):
        """Test discover passes filters through."""
        recorder = Recorder({"page": 2, "results": [{"id": 1, "title": "A"}], "total_pages": 9})
        client = make_client(recorder)

        page = await client.discover_movie({"with_genres": "28", "page": "2"})

        assert page.page == 2
        assert page.total_pages == 9
        assert recorder.last.url.params["with_genres"] == "28"
        assert recorder.last.url.path == "/3/discover/movie"


# =============================================================================
# Authentication Tests
# =============================================================================


class TestAuthentication:
    """Tests for authentication endpoints."""

    @pytest.mark.asyncio
    async def test_create_request_token(self):
        """Test creating a request token."""
        recorder = Recorder({"success": True, "expires_at": "2026-10-18 12:00:00 UTC", "request_token": "tok"})
        client = make_client(recorder)

        token = await client.create_request_token()

        assert token.request_token == "tok"
        assert recorder.last.url.path == "/3/authentication/token/new"

    def test_get_authorization_url(self):
        """Test building the approval URL."""
        client = TMDBClient("test_key")

        assert client.get_authorization_url("tok") == "https://www.themoviedb.org/authenticate/tok"
        assert (
            client.get_authorization_url("tok", "https://example.com/cb")
            == "https://www.themoviedb.org/authenticate/tok?redirect_to=https%3A%2F%2Fexample.com%2Fcb"
        )

    def test_get_authorization_url_empty_token(self):
        """Test empty token is rejected."""
        with pytest.raises(TMDBUsageError):
            TMDBClient("test_key").get_authorization_url("")

    @pytest.mark.asyncio
    async def test_create_session(self):
        """Test exchanging a token for a session id."""
        recorder = Recorder({"success": True, "session_id": "sid"})
        client = make_client(recorder)

        session = await client.create_session("tok")

        assert session.session_id == "sid"
        assert client.session_id is None
        assert recorder.last.method == "POST"
        assert json.loads(recorder.last.content) == {"request_token": "tok"}

    @pytest.mark.asyncio
    async def test_create_guest_session(self):
        """Test creating a guest session."""
        client = make_client(Recorder({"success": True, "guest_session_id": "gsid"}))
        guest = await client.create_guest_session()
        assert guest.guest_session_id == "gsid"

    @pytest.mark.asyncio
    async def test_delete_session(self):
        """Test deleting the configured session."""
        recorder = Recorder({"success": True})
        client = make_client(recorder, session_id="sid")

        result = await client.delete_session()

        assert result.success is True
        assert recorder.last.method == "DELETE"
        assert json.loads(recorder.last.content) == {"session_id": "sid"}


# =============================================================================
# Write Endpoint Tests
# =============================================================================


class TestWriteEndpoints:
    """Tests for rating, list and account endpoints."""

    @pytest.mark.asyncio
    async def test_rate_movie(self):
        """Test rating a movie sends the session id and value."""
        recorder = Recorder(SAMPLE_ACK, status_code=201)
        client = make_client(recorder, session_id="sid")

        result = await client.rate_movie(27205, 8.5)

        assert result.status_message == "Success."
        assert recorder.last.url.path == "/3/movie/27205/rating"
        assert recorder.last.url.params["session_id"] == "sid"
        assert json.loads(recorder.last.content) == {"value": 8.5}

    @pytest.mark.asyncio
    async def test_rate_movie_without_session(self):
        """Test write calls need a session id."""
        recorder = Recorder(SAMPLE_ACK)
        client = make_client(recorder)

        with pytest.raises(TMDBUsageError, match="session id"):
            await client.rate_movie(27205, 8.0)
        assert recorder.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [0.0, 10.5, 7.3])
    async def test_rate_movie_invalid_value(self, value):
        """Test ratings outside 0.5..10 or off the half step are rejected."""
        client = make_client(Recorder(SAMPLE_ACK), session_id="sid")
        with pytest.raises(TMDBUsageError, match="Rating"):
            await client.rate_movie(27205, value)

    @pytest.mark.asyncio
    async def test_delete_movie_rating(self):
        """Test deleting a rating."""
        recorder = Recorder(SAMPLE_ACK)
        client = make_client(recorder, session_id="sid")

        await client.delete_movie_rating(27205)

        assert recorder.last.method == "DELETE"
        assert recorder.last.content == b""

    @pytest.mark.asyncio
    async def test_create_list(self):
        """Test creating a list."""
        recorder = Recorder({"status_code": 1, "status_message": "Success.", "success": True, "list_id": 42}, 201)
        client = make_client(recorder, session_id="sid")

        created = await client.create_list("Favorites", "Best films")

        assert created.list_id == 42
        assert recorder.last.url.path == "/3/list"
        assert json.loads(recorder.last.content) == {
            "name": "Favorites",
            "description": "Best films",
            "language": "en",
        }

    @pytest.mark.asyncio
    async def test_add_movie_to_list(self):
        """Test adding a movie to a list."""
        recorder = Recorder({"status_code": 12, "status_message": "The item/record was updated successfully."}, 201)
        client = make_client(recorder, session_id="sid")

        result = await client.add_movie_to_list(42, 27205)

        assert result.status_code == 12
        assert recorder.last.url.path == "/3/list/42/add_item"
        assert json.loads(recorder.last.content) == {"media_id": 27205}

    @pytest.mark.asyncio
    async def test_delete_list(self):
        """Test deleting a list."""
        recorder = Recorder(SAMPLE_ACK)
        client = make_client(recorder, session_id="sid")

        await client.delete_list(42)

        assert recorder.last.method == "DELETE"
        assert recorder.last.url.path == "/3/list/42"

    @pytest.mark.asyncio
    async def test_mark_as_favorite(self):
        """Test marking a movie as favorite."""
        recorder = Recorder(SAMPLE_ACK, 201)
        client = make_client(recorder, session_id="sid")

        await client.mark_as_favorite(7, MediaType.MOVIE, 27205)

        assert recorder.last.url.path == "/3/account/7/favorite"
        assert json.loads(recorder.last.content) == {
            "media_type": "movie",
            "media_id": 27205,
            "favorite": True,
        }

    @pytest.mark.asyncio
    async def test_mark_as_favorite_invalid_type(self):
        """Test people cannot be favorites."""
        client = make_client(Recorder(SAMPLE_ACK), session_id="sid")
        with pytest.raises(TMDBUsageError, match="Invalid media type"):
            await client.mark_as_favorite(7, MediaType.PERSON, 1)
