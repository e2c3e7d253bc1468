"""Tests for the view controller."""

from app.domain.models import Book, Page, ProfileTab, SortMode
from app.domain.state import AppState
from app.services.view import ViewController, search_books


def make_book(book_id: str, title: str, author: str, rating: float = 3.0) -> Book:
    return Book(
        id=book_id,
        title=title,
        author=author,
        genre="Fiction",
        rating=rating,
        description="",
        recommended_by="someone",
    )


DUNE = make_book("b1", "Dune", "Herbert", 4.6)
FOUNDATION = make_book("b2", "Foundation", "Asimov", 4.3)


def controller(*books: Book) -> ViewController:
    return ViewController(AppState(books=list(books)))


def test_search_matches_title_case_insensitively():
    assert search_books([DUNE, FOUNDATION], "dun") == [DUNE]


def test_search_matches_author_or_title():
    assert search_books([DUNE, FOUNDATION], "a") == [FOUNDATION]
    assert search_books([DUNE, FOUNDATION], "N") == [DUNE, FOUNDATION]
    assert search_books([DUNE, FOUNDATION], "herb") == [DUNE]


def test_search_empty_query_returns_all():
    assert search_books([DUNE, FOUNDATION], "") == [DUNE, FOUNDATION]


def test_search_no_match():
    assert search_books([DUNE, FOUNDATION], "tolkien") == []


def test_search_switches_to_search_page():
    view = controller(DUNE, FOUNDATION)
    results = view.search("ASIMOV")
    assert results == [FOUNDATION]
    assert view.page == Page.SEARCH
    assert view.search_query == "ASIMOV"


def test_navigate_is_unconditional():
    view = controller()
    for page in Page:
        view.navigate(page)
        assert view.page == page


def test_select_and_close_book():
    view = controller(DUNE)
    view.select_book(DUNE)
    assert view.selected_book == DUNE
    view.close_book()
    assert view.selected_book is None


def test_set_active_tab():
    view = controller()
    assert view.active_tab == ProfileTab.RECOMMENDATIONS
    view.set_active_tab(ProfileTab.FAVORITES)
    assert view.active_tab == ProfileTab.FAVORITES


def test_sort_by_rating_and_newest():
    low = make_book("b3", "Dusk", "Someone", 2.0)
    view = controller(FOUNDATION, low, DUNE)
    view.search("")

    assert view.sorted_results() == [FOUNDATION, low, DUNE]
    view.set_sort(SortMode.RATING)
    assert view.sorted_results() == [DUNE, FOUNDATION, low]
    view.set_sort(SortMode.NEWEST)
    assert view.sorted_results() == [DUNE, low, FOUNDATION]


def test_home_sections_split_loaded_books():
    books = [make_book(f"b{i}", f"Book {i}", "Author") for i in range(7)]
    sections = controller(*books).home_sections()
    assert sections["popular"] == books[:3]
    assert sections["for_you"] == books[3:6]


def test_liked_and_favorite_lists_follow_state():
    state = AppState(books=[DUNE, FOUNDATION], liked={"b2"}, favorites={"b1", "gone"})
    view = ViewController(state)
    assert view.liked_books() == [FOUNDATION]
    assert view.favorite_books() == [DUNE]


def test_forget_book_clears_selection_and_results():
    view = controller(DUNE, FOUNDATION)
    view.search("")
    view.select_book(DUNE)
    view.forget_book("b1")
    assert view.search_results == [FOUNDATION]
    assert view.selected_book is None


def test_refresh_book_updates_selection_and_results():
    view = controller(DUNE, FOUNDATION)
    view.search("")
    view.select_book(DUNE)
    edited = DUNE.model_copy(update={"rating": 5.0})
    view.refresh_book(edited)
    assert view.search_results == [edited, FOUNDATION]
    assert view.selected_book.rating == 5.0


def test_refresh_book_leaves_other_selection_alone():
    view = controller(DUNE, FOUNDATION)
    view.select_book(FOUNDATION)
    view.refresh_book(DUNE.model_copy(update={"title": "Dune Messiah"}))
    assert view.selected_book is FOUNDATION
    assert view.search_results == []
