"""Pydantic request/response schemas shared by services and routers."""

from app.schemas.common import Page, PaginationInfo, SuccessResponse

__all__ = [
    "Page",
    "PaginationInfo",
    "SuccessResponse",
]
