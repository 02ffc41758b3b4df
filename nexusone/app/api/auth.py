"""Minimal auth dependency.

Session management is handled by an external identity provider; this stub
only turns a bearer token into the tenant/employee pair every route needs.
"""

import uuid
from typing import Annotated

from fastapi import Header, HTTPException, status

from nexusone.app.db.context import RequestContext

DEV_COMPANY_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
DEV_EMPLOYEE_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_context(
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context from authorization header.

    Accepts "Bearer <company_id>:<employee_id>"; with no header the dev
    company and employee are used.

    Raises:
        HTTPException: 401 if the header is present but malformed
    """
    if not authorization:
        return RequestContext(company_id=DEV_COMPANY_ID, employee_id=DEV_EMPLOYEE_ID)

    if not authorization.startswith("Bearer "):
        raise _unauthorized("Invalid authorization header format")

    token = authorization[len("Bearer ") :]

    if ":" not in token:
        raise _unauthorized("Invalid bearer token")

    company_id_str, employee_id_str = token.split(":", 1)
    try:
        return RequestContext(
            company_id=uuid.UUID(company_id_str),
            employee_id=uuid.UUID(employee_id_str),
        )
    except ValueError as e:
        raise _unauthorized("Invalid token format (expected company_id:employee_id)") from e
