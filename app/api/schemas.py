"""Request and response models of the HTTP API."""

from pydantic import BaseModel, Field

from app.domain.models import Book, Page, ProfileTab, SortMode
from app.domain.state import AppState


class BookCard(BaseModel):
    id: str
    title: str
    author: str
    genre: str
    rating: float
    description: str
    recommended_by: str
    liked: bool = False
    favorite: bool = False

    @classmethod
    def build(cls, book: Book, state: AppState) -> "BookCard":
        return cls(
            **book.model_dump(),
            liked=book.id in state.liked,
            favorite=book.id in state.favorites,
        )


def cards(books: list[Book], state: AppState) -> list[BookCard]:
    return [BookCard.build(b, state) for b in books]


class UserHeader(BaseModel):
    signed_in: bool
    display_name: str
    initial: str
    email: str | None = None

    @classmethod
    def build(cls, state: AppState) -> "UserHeader":
        if state.user is None:
            return cls(signed_in=False, display_name="Guest", initial="G")
        name = state.user.display_name or state.user.email or state.user.uid
        return cls(
            signed_in=True,
            display_name=name,
            initial=name[:1].upper(),
            email=state.user.email,
        )


class HomeContent(BaseModel):
    popular: list[BookCard]
    for_you: list[BookCard]


class AboutContent(BaseModel):
    paragraphs: list[str]


class SearchContent(BaseModel):
    query: str
    sort_by: SortMode
    results: list[BookCard]


class ProfileContent(BaseModel):
    active_tab: ProfileTab
    books: list[BookCard]


class AddContent(BaseModel):
    message: str


class ViewResponse(BaseModel):
    page: Page
    user: UserHeader
    selected_book: BookCard | None = None
    home: HomeContent | None = None
    about: AboutContent | None = None
    search: SearchContent | None = None
    profile: ProfileContent | None = None
    add: AddContent | None = None


class NavigateRequest(BaseModel):
    page: Page


class SearchRequest(BaseModel):
    query: str = ""


class SortRequest(BaseModel):
    sort_by: SortMode


class TabRequest(BaseModel):
    tab: ProfileTab


class BookUpdateRequest(BaseModel):
    title: str | None = Field(None, min_length=1)
    author: str | None = Field(None, min_length=1)
    genre: str | None = None
    rating: float | None = Field(None, ge=0, le=5)
    description: str | None = None


class SubmissionResponse(BaseModel):
    message: str
    book: BookCard | None = None


class ToggleResponse(BaseModel):
    book_id: str
    liked: bool
    favorite: bool
