"""Tests for the data sync layer against the in-memory store."""

import asyncio

from app.domain.models import BOOKS, USERS, BookDraft, BookUpdate, Identity, NewBook
from app.domain.state import AppState
from app.ports.store import StoreError
from app.services.library import LibrarySync, SubmissionStatus

ALICE = Identity(uid="alice", display_name="Alice", email="alice@example.com")
BOB = Identity(uid="bob", display_name="Bob", email="bob@example.com")


def new_book(title: str = "Solaris") -> NewBook:
    return NewBook(
        title=title,
        author="Stanislaw Lem",
        genre="Science Fiction",
        rating=4.0,
        description="An ocean that thinks.",
        recommended_by="alice",
    )


async def test_fetch_all_books_loads_collection(library):
    assert [b.title for b in library.state.books] == [
        "Dune",
        "Foundation",
        "Kafka on the Shore",
    ]


async def test_fetch_all_books_skips_malformed_documents(store, library):
    await store.insert(BOOKS, {"title": "No author"})
    books = await library.fetch_all_books()
    assert len(books) == 3


async def test_fetch_all_books_failure_leaves_empty_state(store):
    store.failing = True
    sync = LibrarySync(store, AppState())
    assert await sync.fetch_all_books() == []
    assert sync.state.books == []


async def test_add_book_then_fresh_fetch_has_new_id(store, library):
    existing = {b.id for b in library.state.books}
    assert await library.add_book(new_book())

    fresh = LibrarySync(store, AppState())
    books = await fresh.fetch_all_books()
    added = [b for b in books if b.title == "Solaris"]
    assert len(added) == 1
    assert added[0].id not in existing
    assert added[0].recommended_by == "alice"


async def test_add_book_mirrors_locally(library):
    await library.add_book(new_book())
    assert library.state.books[-1].title == "Solaris"


async def test_add_book_failure_returns_false(store, library):
    store.failing = True
    assert not await library.add_book(new_book())
    assert len(library.state.books) == 3


async def test_update_book(store, library):
    book_id = library.state.books[0].id
    assert await library.update_book(book_id, BookUpdate(rating=5.0))
    assert library.state.books[0].rating == 5.0
    assert library.state.books[0].title == "Dune"
    assert (await store.get(BOOKS, book_id))["rating"] == 5.0


async def test_update_missing_book_returns_false(library):
    assert not await library.update_book("missing", BookUpdate(title="X"))


async def test_delete_book(store, library):
    await library.sign_in(ALICE)
    book_id = library.state.books[0].id
    await library.toggle_like(book_id)

    assert await library.delete_book(book_id)
    assert library.state.find_book(book_id) is None
    assert book_id not in library.state.liked
    assert await store.get(BOOKS, book_id) is None


async def test_delete_book_failure_keeps_local_state(store, library):
    await library.sign_in(ALICE)
    book_id = library.state.books[0].id
    await library.toggle_like(book_id)

    store.failing = True
    assert not await library.delete_book(book_id)
    assert library.state.find_book(book_id) is not None
    assert library.state.liked == {book_id}


async def test_fetch_user_profile_without_document(library):
    library.state.liked.add("stale")
    assert await library.fetch_user_profile("nobody") is None
    assert library.state.liked == set()
    assert library.state.favorites == set()


async def test_sign_in_merges_user_document(store, library):
    await store.set(USERS, "alice", {"uid": "alice", "likedBooks": ["b1"]})
    assert await library.sign_in(ALICE)

    doc = await store.get(USERS, "alice")
    assert doc["displayName"] == "Alice"
    assert doc["likedBooks"] == ["b1"]
    assert library.state.liked == {"b1"}


async def test_sign_in_clears_previous_user_when_profile_load_fails(
    store, library, monkeypatch
):
    await library.sign_in(ALICE)
    await library.toggle_like(library.state.books[0].id)

    async def broken_query(*args):
        raise StoreError("store unavailable")

    monkeypatch.setattr(store, "query", broken_query)
    assert await library.sign_in(BOB)
    assert library.state.user == BOB
    assert library.state.liked == set()
    assert library.state.favorites == set()


async def test_like_then_unlike_restores_set(store, library):
    await library.sign_in(ALICE)
    book_id = library.state.books[1].id
    before = set(library.state.liked)

    assert await library.toggle_like(book_id)
    assert book_id in library.state.liked
    assert (await store.get(USERS, "alice"))["likedBooks"] == [book_id]

    assert await library.toggle_like(book_id)
    assert library.state.liked == before
    assert (await store.get(USERS, "alice"))["likedBooks"] == []


async def test_toggle_favorite(store, library):
    await library.sign_in(ALICE)
    book_id = library.state.books[2].id
    assert await library.toggle_favorite(book_id)
    assert library.state.favorites == {book_id}
    assert library.state.liked == set()


async def test_toggle_failure_keeps_local_state(store, library):
    await library.sign_in(ALICE)
    book_id = library.state.books[0].id
    store.failing = True
    assert not await library.toggle_like(book_id)
    assert library.state.liked == set()


async def test_toggle_favorite_failure_keeps_local_state(store, library):
    await library.sign_in(ALICE)
    book_id = library.state.books[0].id
    assert await library.toggle_favorite(book_id)

    store.failing = True
    assert not await library.toggle_favorite(book_id)
    assert library.state.favorites == {book_id}


async def test_toggle_finishing_after_sign_out_is_dropped(store, library, monkeypatch):
    await library.sign_in(ALICE)
    book_id = library.state.books[0].id
    release = asyncio.Event()
    write = store.array_union

    async def slow_union(*args):
        await release.wait()
        await write(*args)

    monkeypatch.setattr(store, "array_union", slow_union)
    pending = asyncio.create_task(library.toggle_like(book_id))
    await asyncio.sleep(0)
    library.sign_out()
    release.set()

    assert not await pending
    assert library.state.user is None
    assert library.state.liked == set()


async def test_toggle_requires_user(library):
    assert not await library.toggle_like(library.state.books[0].id)


async def test_sign_out_resets_user_state(library):
    await library.sign_in(ALICE)
    await library.toggle_favorite(library.state.books[0].id)
    library.sign_out()
    assert library.state.user is None
    assert library.state.favorites == set()
    assert len(library.state.books) == 3


async def test_fetch_user_recommendations(library):
    books = await library.fetch_user_recommendations("seed-user")
    assert [b.title for b in books] == ["Dune", "Foundation"]


async def test_submit_recommendation(library):
    await library.sign_in(ALICE)
    draft = BookDraft(
        title="Solaris",
        author="Stanislaw Lem",
        genre="Science Fiction",
        rating=4.5,
        description="An ocean that thinks.",
    )
    result = await library.submit_recommendation(draft)
    assert result.status == SubmissionStatus.ADDED
    assert result.book.recommended_by == "alice"


async def test_submit_incomplete_recommendation(library):
    await library.sign_in(ALICE)
    result = await library.submit_recommendation(BookDraft(title="Solaris", rating=4))
    assert result.status == SubmissionStatus.INCOMPLETE
    assert result.message == "Please fill in all fields."


async def test_submit_requires_sign_in(library):
    result = await library.submit_recommendation(BookDraft())
    assert result.status == SubmissionStatus.UNAUTHENTICATED
