"""Data sync layer: keeps one client's state in step with the document store."""

import logging
from dataclasses import dataclass
from enum import Enum

from pydantic import ValidationError

from app.domain.models import (
    BOOKS,
    USERS,
    Book,
    BookDraft,
    BookUpdate,
    Identity,
    NewBook,
    UserProfile,
)
from app.domain.state import AppState
from app.ports.store import DocumentStore, StoreError

logger = logging.getLogger(__name__)

LIKED_FIELD = "likedBooks"
FAVORITES_FIELD = "favoriteBooks"


class SubmissionStatus(str, Enum):
    ADDED = "added"
    INCOMPLETE = "incomplete"
    FAILED = "failed"
    UNAUTHENTICATED = "unauthenticated"


@dataclass
class SubmissionResult:
    status: SubmissionStatus
    message: str
    book: Book | None = None


def parse_books(docs: list[tuple[str, dict]]) -> list[Book]:
    """Validate raw documents, skipping any that do not fit the Book schema."""
    books: list[Book] = []
    for doc_id, data in docs:
        try:
            books.append(Book.from_document(doc_id, data))
        except ValidationError as exc:
            logger.warning("Skipping malformed book %s: %d errors", doc_id, exc.error_count())
    return books


class LibrarySync:
    """
    Performs remote reads and writes and mirrors them into ``AppState``.

    Every remote failure is logged and reported as ``False`` (or an empty
    result). Local state changes only after the remote call succeeded.
    """

    def __init__(self, store: DocumentStore, state: AppState) -> None:
        self._store = store
        self._state = state

    @property
    def state(self) -> AppState:
        return self._state

    # ── Books ─────────────────────────────────────

    async def fetch_all_books(self) -> list[Book]:
        """Load the whole ``books`` collection into state."""
        try:
            docs = await self._store.list_all(BOOKS)
        except StoreError:
            logger.exception("Error fetching books")
            return self._state.books
        self._state.books = parse_books(docs)
        logger.info("Loaded %d books", len(self._state.books))
        return self._state.books

    async def add_book(self, book: NewBook) -> bool:
        try:
            book_id = await self._store.insert(BOOKS, book.to_document())
        except StoreError:
            logger.exception("Error adding book")
            return False
        self._state.books.append(Book(id=book_id, **book.model_dump()))
        logger.info("Added book %s (%s)", book_id, book.title)
        return True

    async def update_book(self, book_id: str, changes: BookUpdate) -> bool:
        data = changes.to_document()
        try:
            await self._store.update(BOOKS, book_id, data)
        except StoreError:
            logger.exception("Error updating book %s", book_id)
            return False
        self._state.books = [
            b.model_copy(update=changes.model_dump(exclude_none=True)) if b.id == book_id else b
            for b in self._state.books
        ]
        return True

    async def delete_book(self, book_id: str) -> bool:
        try:
            await self._store.delete(BOOKS, book_id)
        except StoreError:
            logger.exception("Error deleting book %s", book_id)
            return False
        self._state.books = [b for b in self._state.books if b.id != book_id]
        self._state.liked.discard(book_id)
        self._state.favorites.discard(book_id)
        return True

    async def fetch_user_recommendations(self, uid: str) -> list[Book]:
        """Books the given user recommended, straight from the store."""
        try:
            docs = await self._store.query(BOOKS, "recommendedBy", uid)
        except StoreError:
            logger.exception("Error fetching recommendations of %s", uid)
            return []
        return parse_books(docs)

    async def submit_recommendation(self, draft: BookDraft) -> SubmissionResult:
        """Validate the submission form and add the book for the signed-in user."""
        user = self._state.user
        if user is None:
            return SubmissionResult(
                SubmissionStatus.UNAUTHENTICATED, "Please sign in to recommend a book."
            )
        if not draft.is_complete():
            return SubmissionResult(SubmissionStatus.INCOMPLETE, "Please fill in all fields.")

        book = NewBook(**draft.model_dump(), recommended_by=user.uid)
        if not await self.add_book(book):
            return SubmissionResult(
                SubmissionStatus.FAILED,
                "An error occurred while adding the recommendation. Please try again.",
            )
        return SubmissionResult(
            SubmissionStatus.ADDED,
            "Book recommendation added successfully!",
            self._state.books[-1],
        )

    # ── Users ─────────────────────────────────────

    async def fetch_user_profile(self, uid: str) -> UserProfile | None:
        """
        Load the user document whose ``uid`` field matches.

        No document means no profile yet: liked and favorite sets are
        emptied and None is returned.
        """
        try:
            docs = await self._store.query(USERS, "uid", uid)
        except StoreError:
            logger.exception("Error fetching profile of %s", uid)
            return None

        profile = None
        if docs:
            try:
                profile = UserProfile.model_validate(docs[0][1])
            except ValidationError:
                logger.warning("Malformed profile document for %s", uid)

        self._state.liked = set(profile.liked_books) if profile else set()
        self._state.favorites = set(profile.favorite_books) if profile else set()
        return profile

    async def sign_in(self, identity: Identity) -> bool:
        """
        Merge the identity into ``users/<uid>`` and load the profile.

        Whatever the previous user left in the state is cleared first, so a
        failed profile load never leaves their liked or favorite books behind.
        """
        self._state.reset_user()
        try:
            await self._store.set(USERS, identity.uid, identity.to_document(), merge=True)
        except StoreError:
            logger.exception("Error signing in %s", identity.uid)
            return False
        self._state.user = identity
        await self.fetch_user_profile(identity.uid)
        logger.info("Signed in %s", identity.uid)
        return True

    def sign_out(self) -> None:
        if self._state.user is not None:
            logger.info("Signed out %s", self._state.user.uid)
        self._state.reset_user()

    async def toggle_like(self, book_id: str) -> bool:
        return await self._toggle(book_id, LIKED_FIELD, "liked")

    async def toggle_favorite(self, book_id: str) -> bool:
        return await self._toggle(book_id, FAVORITES_FIELD, "favorites")

    async def _toggle(self, book_id: str, field: str, attr: str) -> bool:
        user = self._state.user
        if user is None:
            return False
        removing = book_id in getattr(self._state, attr)
        try:
            if removing:
                await self._store.array_remove(USERS, user.uid, field, book_id)
            else:
                await self._store.array_union(USERS, user.uid, field, book_id)
        except StoreError:
            logger.exception("Error toggling %s for %s", field, book_id)
            return False

        # The user may have signed out or switched while the write was in flight.
        if self._state.user is not user:
            logger.info("Dropped %s toggle for %s after sign-out", field, user.uid)
            return False
        members = getattr(self._state, attr)
        if removing:
            members.discard(book_id)
        else:
            members.add(book_id)
        return True
