# condo_core/common/api/pagination.py
from __future__ import annotations

from typing import Any, Optional

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200


class DefaultPagination(PageNumberPagination):
    """?page=N&page_size=M; body is {count, next, previous, results}."""

    page_size = DEFAULT_PAGE_SIZE
    page_size_query_param = "page_size"
    max_page_size = MAX_PAGE_SIZE


def paginate(request, queryset, serializer_class, *, context: Optional[dict[str, Any]] = None) -> Response:
    # ViewSet-based views have no GenericAPIView.paginate_queryset, so list actions call this
    pager = DefaultPagination()
    ctx = {"request": request, **(context or {})}

    rows = pager.paginate_queryset(queryset, request)
    if rows is None:
        return Response(serializer_class(queryset, many=True, context=ctx).data)
    return pager.get_paginated_response(serializer_class(rows, many=True, context=ctx).data)
