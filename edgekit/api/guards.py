"""Handler-chain guards enforcing bearer tokens and signed URLs.

A guard returns None to let the chain continue, or an error response to stop
it. Malformed credentials get 400, wrong ones 401/403, bad configuration 5xx.
"""

import logging

from fastapi import Request

from edgekit.api.responses import create_response, create_response_from_error
from edgekit.auth import (
    InvalidPublicKeyError,
    VerificationError,
    verify_signed_url,
    verify_token,
)
from edgekit.config import get_settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "
WWW_AUTHENTICATE = {"WWW-Authenticate": "Bearer"}


def _not_configured(what: str):
    logger.error(f"{what} is not configured, rejecting request")
    return create_response(
        {"errorCode": "NotConfigured", "errorMessage": f"{what} is not configured"},
        503,
    )


async def require_bearer_token(request: Request, *_):
    """
    Require ``Authorization: Bearer <token>`` matching the configured hash.

    Sets ``request.state.authenticated`` on success.
    """
    settings = get_settings()
    if not settings.token_hash:
        return _not_configured("Token hash")

    authorization = request.headers.get("Authorization", "")
    if not authorization.lower().startswith(BEARER_PREFIX):
        return create_response(
            {"errorCode": "Unauthorized", "errorMessage": "Bearer token required"},
            401,
            WWW_AUTHENTICATE,
        )
    token = authorization[len(BEARER_PREFIX):].strip()

    try:
        valid = await verify_token(token, settings.token_hash)
    except VerificationError as e:
        if e.parameter != "token":
            logger.error(f"Configured token hash is unusable: {e}")
            return create_response_from_error(e, 500)
        logger.info(f"Malformed bearer token on {request.url.path}: {e}")
        return create_response_from_error(e, 400)

    if not valid:
        logger.warning(f"Invalid bearer token on {request.url.path}")
        return create_response(
            {"errorCode": "Unauthorized", "errorMessage": "Invalid token"},
            401,
            WWW_AUTHENTICATE,
        )

    request.state.authenticated = True
    return None


async def require_signed_url(request: Request, *_):
    """
    Require the request URL to carry a valid ``sig`` parameter.

    Sets ``request.state.signed`` on success.
    """
    settings = get_settings()
    if not settings.public_key:
        return _not_configured("Public key")

    try:
        valid = await verify_signed_url(str(request.url), settings.public_key)
    except InvalidPublicKeyError as e:
        logger.error(f"Configured public key is unusable: {e}")
        return create_response_from_error(e, 500)
    except VerificationError as e:
        logger.info(f"Rejected signed URL for {request.url.path}: {e}")
        return create_response_from_error(e, 400)

    if not valid:
        logger.warning(f"Invalid URL signature for {request.url.path}")
        return create_response(
            {"errorCode": "Forbidden", "errorMessage": "Invalid signature"},
            403,
        )

    request.state.signed = True
    return None
