"""Document schemas for the ``books`` and ``users`` collections.

Records coming back from the document store are validated against these
models before they reach application state. Field aliases keep the camelCase
names stored in the documents.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

BOOKS = "books"
USERS = "users"


class Page(str, Enum):
    HOME = "home"
    ABOUT = "about"
    SEARCH = "search"
    PROFILE = "profile"
    ADD = "add"


class ProfileTab(str, Enum):
    RECOMMENDATIONS = "recommendations"
    READING_LIST = "reading-list"
    FAVORITES = "favorites"


class SortMode(str, Enum):
    RELEVANCE = "relevance"
    RATING = "rating"
    NEWEST = "newest"


class BookFields(BaseModel):
    """Fields shared by stored books and book submissions."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    author: str
    genre: str = ""
    rating: float = Field(0.0, ge=0, le=5)
    description: str = ""


class NewBook(BookFields):
    """A book about to be inserted; the store assigns its id."""

    recommended_by: str = Field(..., alias="recommendedBy")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class Book(NewBook):
    id: str

    @classmethod
    def from_document(cls, doc_id: str, data: dict) -> "Book":
        return cls.model_validate({**data, "id": doc_id})


class BookUpdate(BaseModel):
    """Partial update of a stored book. Unset fields are left alone."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    author: str | None = None
    genre: str | None = None
    rating: float | None = Field(None, ge=0, le=5)
    description: str | None = None

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class BookDraft(BaseModel):
    """Submission form payload. Fields may be blank until validated."""

    title: str = ""
    author: str = ""
    genre: str = ""
    rating: float = 0
    description: str = ""

    def is_complete(self) -> bool:
        fields = (self.title, self.author, self.genre, self.description)
        return all(value.strip() for value in fields) and 1 <= self.rating <= 5


class Identity(BaseModel):
    """The user as reported by the authentication provider."""

    model_config = ConfigDict(populate_by_name=True)

    uid: str
    display_name: str = Field("", alias="displayName")
    email: str = ""

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class UserProfile(Identity):
    liked_books: list[str] = Field(default_factory=list, alias="likedBooks")
    favorite_books: list[str] = Field(default_factory=list, alias="favoriteBooks")
