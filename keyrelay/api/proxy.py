"""
Proxy API

A single catch-all route that classifies each request and dispatches it to its branch.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, Response

from keyrelay.api.deps import OpenAIDelegateDep, ProxyServiceDep, VerifyDelegateDep
from keyrelay.common.errors import AppError, internal_error_response
from keyrelay.common.proxy_headers import CORS_HEADERS
from keyrelay.config import get_settings
from keyrelay.services.proxy_service import request_path
from keyrelay.services.router import Branch, classify
from keyrelay.upstreams import get_upstream

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Proxy"])

# Routes only match listed methods; anything else is answered with 405 before reaching the proxy.
ALL_METHODS = [
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "OPTIONS",
    "TRACE",
    # WebDAV and other registered extension methods
    "PROPFIND",
    "PROPPATCH",
    "MKCOL",
    "COPY",
    "MOVE",
    "LOCK",
    "UNLOCK",
    "REPORT",
    "SEARCH",
    "QUERY",
]

LANDING_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Key Relay</title></head>
<body>
<h1>Key Relay</h1>
<p>Proxy for the Google Gemini and Groq APIs.</p>
<ul>
<li><code>/groq/...</code> is forwarded to Groq. Pass one or more keys in
<code>x-groq-api-key</code> (comma-separated) or <code>Authorization: Bearer &lt;key&gt;</code>.</li>
<li>Any other path is forwarded to Gemini. Pass keys in <code>x-goog-api-key</code>.</li>
</ul>
<p>When several keys are given, one is picked at random for each request.</p>
</body>
</html>
"""


@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def handle_request(
    request: Request,
    service: ProxyServiceDep,
    openai_delegate: OpenAIDelegateDep,
    verify_delegate: VerifyDelegateDep,
):
    """
    Route any request

    This is the only place per-request failures are turned into responses.
    """
    settings = get_settings()
    path = request_path(request)

    try:
        branch = classify(request.method, path, settings.GROQ_ROUTE_PREFIX)

        if branch is Branch.PREFLIGHT:
            return Response(status_code=200, headers=CORS_HEADERS)
        if branch is Branch.LANDING:
            return HTMLResponse(LANDING_PAGE)
        if branch is Branch.VERIFY:
            return await verify_delegate(request)
        if branch is Branch.OPENAI:
            return await openai_delegate(request)

        return await service.forward(request, get_upstream(branch.value))

    except AppError as e:
        logger.warning("Request rejected: path=%s code=%s message=%s", path, e.code, e.message)
        return e.to_response()
    except Exception as e:
        logger.error("[Request Error] Path: %s, Error: %s", path, e, exc_info=True)
        return internal_error_response(e)
