"""Per-client application state."""

from dataclasses import dataclass, field

from app.domain.models import Book, Identity


@dataclass
class AppState:
    """
    Everything one client knows about the remote data.

    Starts anonymous and empty. ``reset_user`` returns it to the anonymous
    state on sign-out while keeping the loaded books.
    """

    user: Identity | None = None
    books: list[Book] = field(default_factory=list)
    liked: set[str] = field(default_factory=set)
    favorites: set[str] = field(default_factory=set)

    @property
    def signed_in(self) -> bool:
        return self.user is not None

    def find_book(self, book_id: str) -> Book | None:
        return next((b for b in self.books if b.id == book_id), None)

    def reset_user(self) -> None:
        self.user = None
        self.liked.clear()
        self.favorites.clear()
