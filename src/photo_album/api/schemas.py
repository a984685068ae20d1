"""Pydantic response models for the photo album API."""

from pydantic import BaseModel, ConfigDict, Field


class PhotoModel(BaseModel):
    """Photo payload."""

    id: int
    url: str


class PaginationModel(BaseModel):
    """Pagination metadata payload."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
    has_more: bool = Field(alias="hasMore")
    has_previous: bool = Field(alias="hasPrevious")


class PaginatedPhotosModel(BaseModel):
    """Paginated photo listing payload."""

    photos: list[PhotoModel]
    pagination: PaginationModel


class ErrorModel(BaseModel):
    """Error payload shared by every failing endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    message: str | None = None
    status_code: int | None = Field(default=None, alias="statusCode")
