from typing import Annotated, Any, Generic, List, Optional, Type, TypeVar
from urllib.parse import urlencode

from fastapi import Depends, Query as GetQuery, Request
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class _PaginationParams(BaseModel):
    """Pagination parameters as a Pydantic model"""

    limit: int = 10
    offset: int = 0


def get_pagination_params(
    limit: Annotated[int, GetQuery(ge=1, le=100)] = 10,
    offset: Annotated[int, GetQuery(ge=0)] = 0,
) -> _PaginationParams:
    return _PaginationParams(limit=limit, offset=offset)


class PaginatedResponse(BaseModel, Generic[T]):
    limit: int
    offset: int
    total: int
    next: Optional[str] = None
    items: List[T]


def paginated_response(
    result: List[Any],
    request: Request,
    schema: Type[M],
    total: int | None = None,
) -> PaginatedResponse[M]:
    """
    Wrap one page of results.

    Services fetch ``limit + 1`` rows when they do not know the total, so an
    extra row means there is a next page.
    """
    limit = int(request.query_params.get("limit", 10))
    offset = int(request.query_params.get("offset", 0))

    if total is not None:
        has_next = offset + len(result) < total
    else:
        has_next = len(result) > limit
        if has_next:
            result = result[:limit]
        total = offset + len(result)

    if has_next:
        query_params = dict(request.query_params)
        query_params["offset"] = str(offset + limit)
        next_url = f"{request.url.path}?{urlencode(query_params)}"
    else:
        next_url = None

    items = [schema.model_validate(jsonable_encoder(item)) for item in result]

    return PaginatedResponse[M](
        limit=limit,
        offset=offset,
        total=total,
        next=next_url,
        items=items,
    )


PaginationParams = Annotated[_PaginationParams, Depends(get_pagination_params)]
