# mspdesk/app/relay.py
# Server-side request relay: lets the browser reach third-party APIs that
# refuse cross-origin calls.
import json
import logging
from typing import Optional

import requests
from fastapi import APIRouter, Request, Response
from starlette.concurrency import run_in_threadpool

from .schemas import RelayRequest
from .settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

RELAY_PATH = "/api/cors-proxy"
DEFAULT_CONTENT_TYPE = "application/json"


def _is_empty_body(body) -> bool:
    # null, false, 0 and "" mean "no body"; {} and [] are still sent
    return body is None or body == "" or (isinstance(body, (int, float)) and not body)


def _header_value(value) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def forward_request(url: str, method: str = "GET", headers: Optional[dict] = None,
                    body=None) -> requests.Response:
    """Perform the described request; a non-empty body is sent JSON-encoded."""
    data = None if _is_empty_body(body) else json.dumps(body)
    headers = {name: _header_value(value) for name, value in (headers or {}).items()}
    logger.debug("relaying %s %s", method.upper(), url)
    return requests.request(method.upper(), url, headers=headers, data=data,
                            timeout=get_settings().RELAY_TIMEOUT_SECONDS)


@router.post(RELAY_PATH)
async def relay(request: Request):
    try:
        raw = await request.body()
        payload = RelayRequest.model_validate(json.loads(raw or b"{}"))
        if not payload.url:
            return Response(content="URL is required", status_code=400, media_type="text/plain")

        upstream = await run_in_threadpool(forward_request, payload.url, payload.method,
                                           payload.headers, payload.body)
        return Response(content=upstream.text, status_code=upstream.status_code,
                        headers={"Content-Type": upstream.headers.get("Content-Type") or DEFAULT_CONTENT_TYPE})
    except Exception:
        logger.exception("relay error")
        return Response(content="Internal Server Error", status_code=500, media_type="text/plain")


@router.api_route(RELAY_PATH, methods=["GET", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
                  include_in_schema=False)
def relay_method_not_allowed():
    return Response(content="Method Not Allowed", status_code=405, media_type="text/plain",
                    headers={"Allow": "POST"})
