"""Serves the client UI entry document."""

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from packtrack.exceptions import NotFoundError

router = APIRouter(tags=["Site"])


@router.get("/", include_in_schema=False)
async def index(request: Request) -> FileResponse:
    index_file = request.app.state.settings.index_file
    if not index_file.is_file():
        raise NotFoundError(message="Client UI is not installed.")
    return FileResponse(path=str(index_file), media_type="text/html")
