"""
Data schemas for Filmtracker.

Pydantic models for the payloads the router hands to views and JSON
responses, and for parsing the watchlist form.
"""

from typing import Optional, Literal
from pydantic import BaseModel, Field, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from filmtracker.errors import ValidationError
from filmtracker.models import Film


class FilmSchema(BaseModel):
    """
    A catalog film as served by /movies.

    Serialized with the store's column names (filmID, ...) so client scripts
    can look films up by filmID.
    """
    film_id: int = Field(..., serialization_alias="filmID", description="Film ID")
    title: str = Field(..., description="Film title")
    director: Optional[str] = Field(None, description="Director name")
    year: Optional[int] = Field(None, description="Release year")
    tagline: Optional[str] = Field(None, description="Tagline, '-' when the film has none")
    description: Optional[str] = Field(None, description="Plot description")
    poster: Optional[str] = Field(None, description="Poster image URI")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "filmID": 5,
                "title": "The Matrix",
                "director": "Lana Wachowski, Lilly Wachowski",
                "year": 1999,
                "tagline": "Welcome to the Real World.",
                "description": "A hacker learns the truth about his reality.",
                "poster": "https://example.com/matrix.jpg"
            }
        }
    )

    def to_dict(self):
        return self.model_dump(by_alias=True)


class FilmView(BaseModel):
    """
    Film detail page model.

    planned and watched are None when no user is logged in; otherwise each
    independently reflects whether a matching watchlist entry exists.
    """
    film: FilmSchema
    tagline: Optional[str] = Field(None, description="Tagline, None when absent")
    planned: Optional[bool] = None
    watched: Optional[bool] = None

    @classmethod
    def build(cls, film: Film, planned: Optional[bool] = None, watched: Optional[bool] = None) -> "FilmView":
        return cls(
            film=FilmSchema.model_validate(film),
            tagline=film.tagline if film.has_tagline else None,
            planned=planned,
            watched=watched,
        )


class WatchlistItem(BaseModel):
    """A poster tile on the watchlist or dashboard."""
    film_id: int = Field(..., serialization_alias="filmID")
    poster: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class WatchlistForm(BaseModel):
    """Form body of POST /watchlist."""
    filmID: int = Field(..., gt=0)
    status: Literal["planned", "watched"]

    @classmethod
    def parse(cls, form) -> "WatchlistForm":
        """
        Parse a request form.

        Raises:
            ValidationError: If filmID is not a positive integer or status is unknown
        """
        try:
            return cls(filmID=form.get("filmID"), status=form.get("status"))
        except PydanticValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise ValidationError(f"Invalid watchlist request: {fields}") from e
