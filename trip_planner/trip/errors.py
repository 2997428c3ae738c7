class TripValidationError(ValueError):
    """Base class for input rejected at the trip validation boundary."""


class InvalidDateRange(TripValidationError):
    pass


class EmptyDestinationList(TripValidationError):
    pass


class InvalidStayLength(TripValidationError):
    pass


class EmptyOrBlankName(TripValidationError):
    pass


class ItineraryItemNotFound(LookupError):
    pass


class ItineraryContractError(RuntimeError):
    """Raised when the generator is called with input the caller should have rejected."""
