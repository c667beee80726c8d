"""Payload models for TMDB responses.

Only the fields callers commonly need are declared; unknown fields are
ignored so schema additions upstream do not break decoding.
"""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from tmdbkit.urls import TMDB_IMAGE_BASE_URL

T = TypeVar("T")


class MediaType(str, Enum):
    """Type of media content."""

    MOVIE = "movie"
    TV = "tv"
    PERSON = "person"


def _image_url(path: str | None, size: str) -> str | None:
    if not path:
        return None
    return f"{TMDB_IMAGE_BASE_URL}/{size}{path}"


def _year(date: str) -> int | None:
    if date and len(date) >= 4:
        try:
            return int(date[:4])
        except ValueError:
            return None
    return None


# =============================================================================
# Envelopes
# =============================================================================


class Response(BaseModel):
    """Generic acknowledgement returned by write endpoints."""

    status_code: int = 0
    status_message: str = ""


class Page(BaseModel, Generic[T]):
    """One page of a paginated result as returned by TMDB."""

    page: int = 1
    results: list[T] = Field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0


# =============================================================================
# Reference Data
# =============================================================================


class Genre(BaseModel):
    """Movie or TV show genre."""

    id: int
    name: str


class GenreList(BaseModel):
    genres: list[Genre] = Field(default_factory=list)


class ProductionCompany(BaseModel):
    """Production company as listed on a movie or show."""

    id: int
    name: str
    logo_path: str | None = None
    origin_country: str = ""


class Company(ProductionCompany):
    """Company details."""

    description: str = ""
    headquarters: str = ""
    homepage: str = ""
    parent_company: ProductionCompany | None = None


class ImageConfiguration(BaseModel):
    base_url: str = ""
    secure_base_url: str = ""
    backdrop_sizes: list[str] = Field(default_factory=list)
    logo_sizes: list[str] = Field(default_factory=list)
    poster_sizes: list[str] = Field(default_factory=list)
    profile_sizes: list[str] = Field(default_factory=list)
    still_sizes: list[str] = Field(default_factory=list)


class Configuration(BaseModel):
    """API configuration (image base URLs and sizes)."""

    images: ImageConfiguration = Field(default_factory=ImageConfiguration)
    change_keys: list[str] = Field(default_factory=list)


# =============================================================================
# People
# =============================================================================


class Person(BaseModel):
    """Person (actor, director, etc.) as listed in credits."""

    id: int
    name: str
    profile_path: str | None = None
    character: str | None = None  # For cast members
    job: str | None = None  # For crew members
    department: str | None = None
    known_for_department: str | None = None
    popularity: float = 0.0

    def get_profile_url(self, size: str = "w185") -> str | None:
        """Get full URL for profile image.

        Args:
            size: Image size (w45, w185, h632, original)

        Returns:
            Full URL or None if no profile image
        """
        return _image_url(self.profile_path, size)


class PersonDetails(Person):
    """Person details."""

    biography: str = ""
    birthday: str | None = None
    deathday: str | None = None
    place_of_birth: str | None = None
    imdb_id: str | None = None


class Credits(BaseModel):
    """Movie or TV show credits (cast and crew)."""

    id: int | None = None
    cast: list[Person] = Field(default_factory=list)
    crew: list[Person] = Field(default_factory=list)

    def get_directors(self) -> list[Person]:
        """Get all directors from crew."""
        return [p for p in self.crew if p.job == "Director"]

    def get_top_cast(self, limit: int = 10) -> list[Person]:
        return self.cast[:limit]


# =============================================================================
# Movies and TV
# =============================================================================


class Movie(BaseModel):
    """Movie details."""

    id: int
    title: str
    original_title: str = ""
    overview: str = ""
    release_date: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    genres: list[Genre] = Field(default_factory=list)
    runtime: int | None = None
    status: str = ""
    tagline: str = ""
    budget: int = 0
    revenue: int = 0
    production_companies: list[ProductionCompany] = Field(default_factory=list)
    imdb_id: str | None = None

    def get_poster_url(self, size: str = "w500") -> str | None:
        """Get full URL for poster image.

        Args:
            size: Image size (w92, w154, w185, w342, w500, w780, original)

        Returns:
            Full URL or None if no poster
        """
        return _image_url(self.poster_path, size)

    def get_year(self) -> int | None:
        """Extract year from release date."""
        return _year(self.release_date)


class Episode(BaseModel):
    air_date: str | None = None
    episode_number: int = 0
    season_number: int = 0
    name: str = ""
    overview: str = ""
    still_path: str | None = None


class Season(BaseModel):
    """TV season details."""

    id: int | None = None
    air_date: str | None = None
    name: str = ""
    overview: str = ""
    season_number: int = 0
    poster_path: str | None = None
    episodes: list[Episode] = Field(default_factory=list)


class TVShow(BaseModel):
    """TV show details."""

    id: int
    name: str
    original_name: str = ""
    overview: str = ""
    first_air_date: str = ""
    last_air_date: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    genres: list[Genre] = Field(default_factory=list)
    status: str = ""
    number_of_seasons: int = 0
    number_of_episodes: int = 0
    in_production: bool = False
    next_episode_to_air: Episode | None = None
    last_episode_to_air: Episode | None = None

    def get_poster_url(self, size: str = "w500") -> str | None:
        return _image_url(self.poster_path, size)

    def get_year(self) -> int | None:
        """Extract year from first air date."""
        return _year(self.first_air_date)


class SearchResult(BaseModel):
    """Entry of a search or discover page.

    Movies carry ``title``/``release_date``, shows ``name``/``first_air_date``
    and multi search adds ``media_type``.
    """

    id: int
    media_type: MediaType | None = None
    title: str | None = None
    name: str | None = None
    overview: str = ""
    release_date: str | None = None
    first_air_date: str | None = None
    poster_path: str | None = None
    vote_average: float = 0.0
    popularity: float = 0.0

    @property
    def display_title(self) -> str:
        return self.title or self.name or ""

    def get_year(self) -> int | None:
        return _year(self.release_date or self.first_air_date or "")


# =============================================================================
# Authentication and Account
# =============================================================================


class RequestToken(BaseModel):
    """Temporary token the user approves on the TMDB website."""

    success: bool = False
    expires_at: str = ""
    request_token: str


class Session(BaseModel):
    success: bool = False
    session_id: str


class GuestSession(BaseModel):
    success: bool = False
    guest_session_id: str
    expires_at: str = ""


class SessionDeleted(BaseModel):
    success: bool = False


class ListCreated(Response):
    """Acknowledgement for a newly created list."""

    success: bool = False
    list_id: int
