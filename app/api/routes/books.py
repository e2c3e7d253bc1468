"""Book routes: listing, submission, edits, selection, likes and favorites."""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import get_client, require_user
from app.api.routes.view import render_view
from app.api.schemas import (
    BookCard,
    BookUpdateRequest,
    SubmissionResponse,
    ToggleResponse,
    ViewResponse,
    cards,
)
from app.domain.models import Book, BookDraft, BookUpdate
from app.services.library import SubmissionStatus
from app.services.sessions import ClientSession

router = APIRouter(tags=["Books"])

SUBMISSION_ERRORS = {
    SubmissionStatus.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    SubmissionStatus.INCOMPLETE: 422,
    SubmissionStatus.FAILED: status.HTTP_502_BAD_GATEWAY,
}


def _loaded_book(client: ClientSession, book_id: str) -> Book:
    book = client.state.find_book(book_id)
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


@router.get("/books", response_model=list[BookCard])
async def list_books(client: ClientSession = Depends(get_client)) -> list[BookCard]:
    return cards(client.state.books, client.state)


@router.post("/books", response_model=SubmissionResponse, status_code=201)
async def submit_book(
    data: BookDraft, client: ClientSession = Depends(get_client)
) -> SubmissionResponse:
    """Add a recommendation from the submission form."""
    result = await client.library.submit_recommendation(data)
    client.view.form_message = result.message
    if result.status != SubmissionStatus.ADDED:
        raise HTTPException(status_code=SUBMISSION_ERRORS[result.status], detail=result.message)
    return SubmissionResponse(
        message=result.message,
        book=BookCard.build(result.book, client.state),
    )


@router.put("/books/{book_id}", response_model=BookCard)
async def update_book(
    book_id: str,
    data: BookUpdateRequest,
    client: ClientSession = Depends(require_user),
) -> BookCard:
    _loaded_book(client, book_id)
    changes = BookUpdate(**data.model_dump(exclude_unset=True))
    if not await client.library.update_book(book_id, changes):
        raise HTTPException(status_code=502, detail="Could not update the book")
    book = _loaded_book(client, book_id)
    client.view.refresh_book(book)
    return BookCard.build(book, client.state)


@router.delete("/books/{book_id}", status_code=204)
async def delete_book(
    book_id: str, client: ClientSession = Depends(require_user)
) -> Response:
    _loaded_book(client, book_id)
    if not await client.library.delete_book(book_id):
        raise HTTPException(status_code=502, detail="Could not delete the book")
    client.view.forget_book(book_id)
    return Response(status_code=204)


@router.post("/books/{book_id}/select", response_model=ViewResponse)
async def select_book(
    book_id: str, client: ClientSession = Depends(get_client)
) -> ViewResponse:
    client.view.select_book(_loaded_book(client, book_id))
    return await render_view(client)


@router.delete("/selection", response_model=ViewResponse)
async def close_book(client: ClientSession = Depends(get_client)) -> ViewResponse:
    client.view.close_book()
    return await render_view(client)


def _toggle_response(client: ClientSession, book_id: str) -> ToggleResponse:
    return ToggleResponse(
        book_id=book_id,
        liked=book_id in client.state.liked,
        favorite=book_id in client.state.favorites,
    )


@router.post("/books/{book_id}/like", response_model=ToggleResponse)
async def toggle_like(
    book_id: str, client: ClientSession = Depends(require_user)
) -> ToggleResponse:
    _loaded_book(client, book_id)
    if not await client.library.toggle_like(book_id):
        raise HTTPException(status_code=502, detail="Could not update liked books")
    return _toggle_response(client, book_id)


@router.post("/books/{book_id}/favorite", response_model=ToggleResponse)
async def toggle_favorite(
    book_id: str, client: ClientSession = Depends(require_user)
) -> ToggleResponse:
    _loaded_book(client, book_id)
    if not await client.library.toggle_favorite(book_id):
        raise HTTPException(status_code=502, detail="Could not update favorite books")
    return _toggle_response(client, book_id)
