"""Extraction endpoint.

Routes
------
POST /api/extract    Body: {"url": "https://..."}    → extract and notify

Responses
---------
200  ``{title, content, webhook_status: "success"}``
200  ``{title, content, webhook_status: "failed", webhook_error}``
400  ``{error}``: ``url`` missing or not a string
500  ``{error, sourceUrl}``: extraction failed
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pagerelay.errors import ExtractionError, InvalidInputError
from pagerelay.relay import RelayHandler

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ExtractResponse(BaseModel):
    title: str
    content: str
    webhook_status: str
    webhook_error: Optional[str] = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/extract",
    response_model=ExtractResponse,
    response_model_exclude_none=True,
)
def extract_endpoint(request: Request, body: Any = Body(default=None)) -> Any:
    """Extract a page's title and text and forward them to the webhook.

    The body is accepted as free-form JSON so that a missing or mistyped
    ``url`` produces a 400 with an ``error`` field rather than FastAPI's 422.
    """
    handler: RelayHandler = request.app.state.handler
    url = body.get("url") if isinstance(body, dict) else None

    try:
        result = handler.run(url)
    except InvalidInputError as exc:
        logger.warning("Rejected extract request: %s", exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})
    except ExtractionError as exc:
        return JSONResponse(
            status_code=500,
            content={"error": str(exc), "sourceUrl": exc.source_url or url},
        )

    return result.as_dict()
