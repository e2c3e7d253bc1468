"""View state routes: navigation, search, sorting and profile tabs."""

from fastapi import APIRouter, Depends

from app.api.deps import get_client
from app.api.schemas import (
    AboutContent,
    AddContent,
    BookCard,
    HomeContent,
    NavigateRequest,
    ProfileContent,
    SearchContent,
    SearchRequest,
    SortRequest,
    TabRequest,
    UserHeader,
    ViewResponse,
    cards,
)
from app.domain.models import Book, Page, ProfileTab
from app.services.sessions import ClientSession

router = APIRouter(tags=["View"])

ABOUT_TEXT = [
    "Kuuburi is an experimental book recommendation platform named after a "
    "Japanese play on sounds.",
    "Create a profile in moments, get book recommendations and share your "
    "thoughts on books.",
    "Kuuburi looks at your reading habits to suggest the books that suit you best.",
]


async def _profile_books(client: ClientSession) -> list[Book]:
    view, state = client.view, client.state
    if view.active_tab == ProfileTab.READING_LIST:
        return view.liked_books()
    if view.active_tab == ProfileTab.FAVORITES:
        return view.favorite_books()
    if state.user is None:
        return []
    return await client.library.fetch_user_recommendations(state.user.uid)


async def render_view(client: ClientSession) -> ViewResponse:
    """Assemble the content of the current page."""
    view, state = client.view, client.state
    response = ViewResponse(page=view.page, user=UserHeader.build(state))
    if view.selected_book is not None:
        response.selected_book = BookCard.build(view.selected_book, state)

    if view.page == Page.HOME:
        sections = view.home_sections()
        response.home = HomeContent(
            popular=cards(sections["popular"], state),
            for_you=cards(sections["for_you"], state),
        )
    elif view.page == Page.ABOUT:
        response.about = AboutContent(paragraphs=ABOUT_TEXT)
    elif view.page == Page.SEARCH:
        response.search = SearchContent(
            query=view.search_query,
            sort_by=view.sort_by,
            results=cards(view.sorted_results(), state),
        )
    elif view.page == Page.PROFILE:
        response.profile = ProfileContent(
            active_tab=view.active_tab,
            books=cards(await _profile_books(client), state),
        )
    elif view.page == Page.ADD:
        response.add = AddContent(message=view.form_message)
    return response


@router.get("/view", response_model=ViewResponse)
async def get_view(client: ClientSession = Depends(get_client)) -> ViewResponse:
    return await render_view(client)


@router.post("/navigate", response_model=ViewResponse)
async def navigate(
    data: NavigateRequest, client: ClientSession = Depends(get_client)
) -> ViewResponse:
    client.view.navigate(data.page)
    return await render_view(client)


@router.post("/search", response_model=ViewResponse)
async def search(
    data: SearchRequest, client: ClientSession = Depends(get_client)
) -> ViewResponse:
    """Match the query against titles and authors and open the results page."""
    client.view.search(data.query)
    return await render_view(client)


@router.put("/sort", response_model=ViewResponse)
async def set_sort(
    data: SortRequest, client: ClientSession = Depends(get_client)
) -> ViewResponse:
    client.view.set_sort(data.sort_by)
    return await render_view(client)


@router.put("/profile/tab", response_model=ViewResponse)
async def set_tab(
    data: TabRequest, client: ClientSession = Depends(get_client)
) -> ViewResponse:
    client.view.set_active_tab(data.tab)
    return await render_view(client)
