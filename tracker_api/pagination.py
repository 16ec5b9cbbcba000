import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class TransactionPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'limit'
    max_page_size = 100

    def get_paginated_response(self, data):
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        return Response({
            'success': True,
            'data': {
                'transactions': data,
                'pagination': {
                    'page': self.page.number,
                    'limit': limit,
                    'total': total,
                    'pages': math.ceil(total / limit),
                },
            },
        })
