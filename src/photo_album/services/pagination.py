"""Pagination parameter normalization and page slicing."""

import math
import re
from collections.abc import Sequence

from photo_album.domain.errors import InvalidArgumentError
from photo_album.domain.photos import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    PaginationMeta,
    PaginationParams,
    Photo,
    PhotoPage,
)

_PHOTO_ID_PATTERN = re.compile(r"[1-9][0-9]*")
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")

RawNumber = str | int | float | None


def normalize_pagination(raw_page: RawNumber, raw_limit: RawNumber) -> PaginationParams:
    """Map untrusted page and limit inputs onto safe bounds.

    Invalid values fall back to the defaults and oversized limits are clamped;
    nothing here raises.
    """
    page = _parse_number(raw_page, truncate=False)
    if page is None or page < 1:
        page = DEFAULT_PAGE

    limit = _parse_number(raw_limit, truncate=True)
    if limit is None or limit < 1:
        limit = DEFAULT_LIMIT
    limit = min(limit, MAX_LIMIT)

    return PaginationParams(page=page, limit=limit)


def parse_photo_id(raw: str | None) -> int:
    """Validate a photo identifier taken from a request path."""
    if raw is None or raw == "":
        raise InvalidArgumentError("Photo ID is required")
    if not _PHOTO_ID_PATTERN.fullmatch(raw):
        raise InvalidArgumentError("Photo ID must be a valid positive integer")
    return int(raw)


def paginate(params: PaginationParams, photos: Sequence[Photo]) -> PhotoPage:
    """Slice one page out of the catalog and compute its metadata."""
    total = len(photos)
    total_pages = math.ceil(total / params.limit)
    offset = (params.page - 1) * params.limit
    return PhotoPage(
        photos=list(photos[offset : offset + params.limit]),
        pagination=PaginationMeta(
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=total_pages,
            has_more=params.page < total_pages,
            has_previous=params.page > 1,
        ),
    )


def _parse_number(raw: RawNumber, *, truncate: bool) -> int | None:
    """Parse an integer from loose input.

    Strings must be plain decimals; exponent and digit-separator forms are
    rejected. Fractional values are truncated when ``truncate`` is set and
    rejected otherwise.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if not _DECIMAL_PATTERN.fullmatch(text):
            return None
        if "." not in text:
            return int(text)
        value = float(text)
    else:
        value = float(raw)
    if not math.isfinite(value):
        return None
    if value.is_integer() or truncate:
        return int(value)
    return None
