"""Upload Size Gate — rejects oversized multipart uploads before the body is read.

Invariants:
    - Applies to POST on the photo upload paths only
    - A declared Content-Length above max_upload_bytes + MULTIPART_OVERHEAD_BYTES
      is answered with 413 and the body is never parsed
    - Bodies without a Content-Length pass through; LocalImageStorage.save
      still caps the bytes it writes

Design Decisions:
    - HTTP middleware, not a route dependency: FastAPI parses the form before
      dependencies run, so only a middleware sees the request first
    - Responds directly: exceptions raised here bypass the registered handlers
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from truckest.config import get_settings
from truckest.core.errors import UploadTooLargeError

logger = logging.getLogger(__name__)

UPLOAD_PATHS = {"/api/upload", "/api/vehicle-database"}
MULTIPART_OVERHEAD_BYTES = 64 * 1024


def declared_length(request: Request) -> int | None:
    raw = request.headers.get("content-length")
    if raw is None or not raw.isdigit():
        return None
    return int(raw)


async def limit_upload_size(request: Request, call_next):
    if request.method == "POST" and request.url.path in UPLOAD_PATHS:
        limit = get_settings().max_upload_bytes
        length = declared_length(request)
        if length is not None and length > limit + MULTIPART_OVERHEAD_BYTES:
            error = UploadTooLargeError(limit)
            logger.warning(
                f"Upload rejected before parsing: {length} bytes declared",
                extra={"path": request.url.path, "error_code": error.code},
            )
            return JSONResponse(
                status_code=error.http_status, content=error.to_response(),
            )
    return await call_next(request)
