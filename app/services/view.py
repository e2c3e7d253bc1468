"""View controller: page navigation, search and selection for one client."""

from app.domain.models import Book, Page, ProfileTab, SortMode
from app.domain.state import AppState

HOME_SECTION_SIZE = 3


def search_books(books: list[Book], query: str) -> list[Book]:
    """Case-insensitive substring match on title or author. Empty query matches all."""
    needle = query.lower()
    return [
        b for b in books if needle in b.title.lower() or needle in b.author.lower()
    ]


def sort_books(books: list[Book], mode: SortMode, load_order: list[Book]) -> list[Book]:
    """
    Order search results.

    ``relevance`` keeps match order, ``rating`` puts the highest rated first
    and ``newest`` puts the most recently added first, using the position in
    ``load_order`` since the store appends in insertion order.
    """
    if mode == SortMode.RATING:
        return sorted(books, key=lambda b: b.rating, reverse=True)
    if mode == SortMode.NEWEST:
        position = {b.id: i for i, b in enumerate(load_order)}
        return sorted(books, key=lambda b: position.get(b.id, -1), reverse=True)
    return list(books)


class ViewController:
    """Holds UI state. All transitions are synchronous and cannot fail."""

    def __init__(self, state: AppState) -> None:
        self._state = state
        self.page = Page.HOME
        self.search_query = ""
        self.search_results: list[Book] = []
        self.sort_by = SortMode.RELEVANCE
        self.active_tab = ProfileTab.RECOMMENDATIONS
        self.selected_book: Book | None = None
        self.form_message = ""

    def navigate(self, page: Page) -> None:
        self.page = page

    def search(self, query: str) -> list[Book]:
        self.search_query = query
        self.search_results = search_books(self._state.books, query)
        self.page = Page.SEARCH
        return self.search_results

    def set_sort(self, mode: SortMode) -> None:
        self.sort_by = mode

    def sorted_results(self) -> list[Book]:
        return sort_books(self.search_results, self.sort_by, self._state.books)

    def select_book(self, book: Book) -> None:
        self.selected_book = book

    def close_book(self) -> None:
        self.selected_book = None

    def set_active_tab(self, tab: ProfileTab) -> None:
        self.active_tab = tab

    def home_sections(self) -> dict[str, list[Book]]:
        books = self._state.books
        return {
            "popular": books[:HOME_SECTION_SIZE],
            "for_you": books[HOME_SECTION_SIZE : 2 * HOME_SECTION_SIZE],
        }

    def liked_books(self) -> list[Book]:
        return [b for b in self._state.books if b.id in self._state.liked]

    def favorite_books(self) -> list[Book]:
        return [b for b in self._state.books if b.id in self._state.favorites]

    def forget_book(self, book_id: str) -> None:
        """Drop a deleted book from search results and the selection."""
        self.search_results = [b for b in self.search_results if b.id != book_id]
        if self.selected_book and self.selected_book.id == book_id:
            self.selected_book = None

    def refresh_book(self, book: Book) -> None:
        """Swap an edited book into search results and the selection."""
        self.search_results = [book if b.id == book.id else b for b in self.search_results]
        if self.selected_book and self.selected_book.id == book.id:
            self.selected_book = book
