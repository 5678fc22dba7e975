"""
Order flow errors. Views turn these into {'message': ...} responses
with the carried status code.
"""
from rest_framework import status


class OrderError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ProductNotFound(OrderError):
    status_code = status.HTTP_404_NOT_FOUND


class InsufficientStock(OrderError):
    pass


class PaymentMethodNotAllowed(OrderError):
    pass


class OrderNotFound(OrderError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message='Order not found', status_code=None):
        super().__init__(message, status_code)
