"""API routes implementation."""

from typing import List

from fastapi import APIRouter, BackgroundTasks, Body, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    BatchShortenItem,
    BatchShortenResult,
    UserURLResponse,
)
from shortener.common.logging_config import get_logger
from shortener.common.url_builder import short_id_from_url
from shortener.errors import AlreadyExistsError, BackendError, NotFoundError
from shortener.models import BatchItem
from ..middleware.session import get_user_token

router = APIRouter()
logger = get_logger("web")


def backend_failure(e: BackendError) -> HTTPException:
    """Translate a storage failure into a 500 response."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Internal error: {e}",
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ShortenResponse, "description": "URL already shortened"},
        500: {"description": "Internal server error"},
    },
    summary="Create short URL",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL owned by the session."""
    storage = request.app.state.storage

    try:
        short_url = await storage.shorten_url(body.url, get_user_token(request))
    except AlreadyExistsError as e:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=ShortenResponse(result=e.short_url).model_dump(),
        )
    except BackendError as e:
        raise backend_failure(e)

    return ShortenResponse(result=short_url)


@router.post(
    "/shorten/batch",
    response_model=List[BatchShortenResult],
    status_code=status.HTTP_201_CREATED,
    summary="Create short URLs in batch",
    description="URLs that were already shortened are stored for the session but left out of the response.",
)
async def shorten_batch(request: Request, body: List[BatchShortenItem]):
    """Shorten several URLs at once."""
    storage = request.app.state.storage
    results: List[BatchShortenResult] = []

    def collect(correlation_id: str, short_url: str) -> None:
        results.append(BatchShortenResult(correlation_id=correlation_id, short_url=short_url))

    items = [BatchItem(item.correlation_id, item.original_url) for item in body]
    try:
        await storage.for_each(items, get_user_token(request), collect)
    except BackendError as e:
        raise backend_failure(e)

    return results


@router.get(
    "/user/urls",
    response_model=List[UserURLResponse],
    responses={204: {"description": "The session owns no URLs"}},
    summary="List URLs of the session",
)
async def get_user_urls(request: Request):
    """List live URLs shortened by the session."""
    storage = request.app.state.storage

    try:
        archive = await storage.get_user_archive(get_user_token(request))
    except NotFoundError:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except BackendError as e:
        raise backend_failure(e)

    if not archive:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return [UserURLResponse(**url.to_dict()) for url in archive]


async def delete_in_background(storage, short_ids: List[str], user_token: str) -> None:
    """Run a delete after the 202 response was sent; failures can only be logged."""
    try:
        await storage.delete_keys(short_ids, user_token)
    except BackendError as e:
        logger.error(f"Background delete of {len(short_ids)} URLs failed: {e}")


@router.delete(
    "/user/urls",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Delete URLs of the session",
    description="Deletion is processed after the response is sent. IDs the session does not own are ignored.",
)
async def delete_user_urls(
    request: Request,
    background_tasks: BackgroundTasks,
    short_ids: List[str] = Body(...),
):
    """Schedule deletion of the session's URLs."""
    storage = request.app.state.storage
    user_token = get_user_token(request)

    ids = [short_id_from_url(short_id) for short_id in short_ids]
    background_tasks.add_task(delete_in_background, storage, ids, user_token)

    return Response(status_code=status.HTTP_202_ACCEPTED)
