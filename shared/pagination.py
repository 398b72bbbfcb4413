# shared/pagination.py
from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """?page=1&size=20 (size 최대 100)"""

    page_size = 20
    page_size_query_param = "size"
    max_page_size = 100
