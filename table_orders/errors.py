class OrderValidationError(ValueError):
    """Order submission rejected; the message is shown to the customer."""


class MenuValidationError(ValueError):
    pass


class OrderNotFoundError(LookupError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id
