"""
app/api/routers/check_router.py

Streaming index check endpoint and the request token it requires.
"""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from app.auth import SessionPrincipal, get_session
from app.config import SecuritySettings, get_security_settings
from app.indexing.streaming import SSE_HEADERS
from app.schemas.check import CheckRequest, SecurityTokenResponse
from app.security import client_ip, generate_request_token, validate_request
from app.services.check_service import CheckAdmissionError, CheckService, get_check_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["index-check"])


@router.get("/security/token", response_model=SecurityTokenResponse)
def get_security_token(
    settings: SecuritySettings = Depends(get_security_settings),
) -> SecurityTokenResponse:
    return SecurityTokenResponse(token=generate_request_token(settings.secret))


@router.post("/check")
async def check_index(
    request: Request,
    session: SessionPrincipal | None = Depends(get_session),
    settings: SecuritySettings = Depends(get_security_settings),
    check_service: CheckService = Depends(get_check_service),
) -> StreamingResponse:
    """
    Check every submitted URL and stream one SSE frame per outcome.
    """

    if not validate_request(request, settings):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    try:
        payload = CheckRequest.model_validate(await request.json())
    except (ValidationError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid request body") from exc

    urls = payload.cleaned_urls()
    if not urls:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No URLs provided")

    try:
        admission = await asyncio.to_thread(
            check_service.admit,
            urls,
            economy_mode=payload.economy_mode,
            session=session,
            ip=client_ip(request),
        )
    except CheckAdmissionError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    channel = check_service.start(admission)
    return StreamingResponse(
        channel.frames(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
