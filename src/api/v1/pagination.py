"""Pagination utilities for API v1."""

from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """Page number pagination for the customer and product directories."""

    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100
