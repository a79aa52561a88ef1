class ServiceError(RuntimeError):
    """Base class for service-layer errors."""


class EmptyInputError(ServiceError):
    """Recipe prompt requested with no ingredients; nothing is sent to the model."""


class GatewayError(ServiceError):
    """The text-generation call failed or returned an error payload."""


class FulfillmentItemError(ServiceError):
    """One missing ingredient could not be resolved to a product or added to the cart."""

    def __init__(self, ingredient_name: str, message: str) -> None:
        super().__init__(f"{ingredient_name}: {message}")
        self.ingredient_name = ingredient_name
        self.message = message


class NotFoundError(ServiceError):
    """A referenced row does not exist or belongs to another user."""


class EmptyCartError(ServiceError):
    """An order was requested for an empty cart."""


class ConflictError(ServiceError):
    """A row with the same unique key already exists."""
