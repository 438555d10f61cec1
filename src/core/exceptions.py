"""Domain exceptions shared by the catalog, sales and reports apps."""


class DistributionError(Exception):
    """Base class for every error raised by the order / analytics core."""


class NotFound(DistributionError):
    """A referenced product or customer does not exist in the store."""

    def __init__(self, kind, missing_ids):
        self.kind = kind
        self.missing_ids = sorted(str(pk) for pk in missing_ids)
        super().__init__(f"{kind} not found: {', '.join(self.missing_ids)}")


class InvalidQuantity(DistributionError):
    """An order line asks for zero or a negative number of bags."""


class EmptyOrder(DistributionError):
    """An order request without any line."""


class StoreUnavailable(DistributionError):
    """The data store could not be reached or failed transiently."""


class StockConflict(DistributionError):
    """Another writer changed a product's stock between read and write.

    Raised only inside a transactional write; nothing has been committed.
    """

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Stock for product {product_id} changed concurrently.")


class PartialCommit(DistributionError):
    """The order and its items are committed but some stock updates failed.

    The order stands; ``failures`` maps product id to the underlying error.
    """

    def __init__(self, order, failures):
        self.order = order
        self.failures = dict(failures)
        super().__init__(
            f"Order {order.pk} committed but stock update failed for "
            f"{len(self.failures)} product(s)."
        )
