class StockError(Exception):
    """Base class for stock availability errors."""


class InputError(StockError, ValueError):
    """Missing, mismatched or negative request field. Never retried."""


class ProductNotFound(StockError):
    def __init__(self, product_id):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class LookupFailure(StockError):
    """Underlying data access failed while fetching a stock snapshot."""
