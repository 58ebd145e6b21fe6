"""HTTP errors shared by the routers."""

from fastapi import HTTPException, status


def not_found(entity: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{entity} not found",
    )


def conflict(error: ValueError) -> HTTPException:
    """Map a service-layer rule violation to 409."""
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=str(error),
    )
