"""Edge endpoints protected by bearer tokens and signed URLs."""

import logging

from fastapi import Request

from edgekit import __version__
from edgekit.api.guards import require_bearer_token, require_signed_url
from edgekit.api.responses import create_response
from edgekit.api.router import Router

logger = logging.getLogger(__name__)

router = Router(base="/edge")


async def ping(request: Request):
    """Unauthenticated liveness check."""
    return create_response({"status": "ok", "version": __version__})


async def whoami(request: Request):
    """Report the caller's authentication state."""
    return create_response(
        {"authenticated": getattr(request.state, "authenticated", False)},
        headers={"Cache-Control": "no-store"},
    )


async def get_file(request: Request):
    """
    Describe a file reachable through a signed URL.

    The signature covers the whole URL, so the name and every other query
    parameter were chosen by the signer.
    """
    name = request.path_params["name"]
    logger.info(f"Serving signed file: {name}")
    return create_response(
        {
            "name": name,
            "signed": getattr(request.state, "signed", False),
            "query": {
                k: v for k, v in request.query_params.items() if k != "sig"
            },
        },
        headers={"Cache-Control": "private, no-cache"},
    )


router.get("/ping", ping)
router.get("/whoami", require_bearer_token, whoami)
router.get("/files/{name:path}", require_signed_url, get_file)
