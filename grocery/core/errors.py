class GroceryError(Exception):
    """Base class for failures reported back to the caller as text"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class ClientInputError(GroceryError):
    pass


class MissingOrInvalidProductKey(ClientInputError):
    def __init__(self, message: str = "Please pass a PLU parameter"):
        super().__init__(message)


class RatingOutOfRange(ClientInputError):
    def __init__(self, message: str = "Rating must be between 1 and 5"):
        super().__init__(message)


class ProductNotFound(ClientInputError):
    def __init__(self, plu: int):
        super().__init__(f"No product with PLU {plu}")
        self.plu = plu


class StoreError(GroceryError):
    pass


class InconsistentAggregate(StoreError):
    def __init__(self, plu: int):
        super().__init__(f"Average rating for PLU {plu} could not be computed")
        self.plu = plu
