"""Plain-text and redirect routes implementation."""

import gzip
import zlib

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from shortener.errors import AlreadyExistsError, BackendError, GoneError, NotFoundError
from ..middleware.session import get_user_token

router = APIRouter()


async def read_body(request: Request) -> str:
    """Read the raw request body, gunzipping it when sent compressed."""
    body = await request.body()

    if "gzip" in request.headers.get("content-encoding", ""):
        try:
            body = gzip.decompress(body)
        except (OSError, EOFError, zlib.error) as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid gzip body: {e}",
            )

    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Body must be UTF-8 text",
        )


@router.post("/", response_class=PlainTextResponse, include_in_schema=False)
async def shorten_url_text(request: Request):
    """Shorten the URL sent as the raw request body."""
    storage = request.app.state.storage

    original_url = await read_body(request)
    if not original_url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="URL is required",
        )

    try:
        short_url = await storage.shorten_url(original_url, get_user_token(request))
    except AlreadyExistsError as e:
        return PlainTextResponse(e.short_url, status_code=status.HTTP_409_CONFLICT)
    except BackendError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal error: {e}",
        )

    return PlainTextResponse(short_url, status_code=status.HTTP_201_CREATED)


@router.get("/ping", include_in_schema=False)
async def ping(request: Request):
    """Report whether the storage backend is reachable."""
    storage = request.app.state.storage

    if await storage.ping():
        return Response(status_code=status.HTTP_200_OK)
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def resolve_for_redirect(request: Request, short_id: str) -> str:
    """Resolve ``short_id`` for the redirect endpoint.

    The session's own archive is consulted first so that URLs it deleted
    answer 410. Unless ownership is enforced on redirects, URLs the session
    never shortened are then resolved publicly.
    """
    storage = request.app.state.storage
    config = request.app.state.config
    user_token = get_user_token(request)

    try:
        return await storage.get_original_url(short_id, user_token)
    except NotFoundError:
        if not user_token or config.enforce_ownership_on_redirect:
            raise

    return await storage.get_original_url(short_id, "")


@router.get("/{short_id}", include_in_schema=False)
async def redirect_to_url(request: Request, short_id: str):
    """Redirect to the original URL."""
    try:
        original_url = await resolve_for_redirect(request, short_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Short ID '{short_id}' not found",
        )
    except GoneError:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail=f"Short ID '{short_id}' was deleted",
        )
    except BackendError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal error: {e}",
        )

    return RedirectResponse(url=original_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
