"""Exceptions raised by the ride services and the persistence gateway."""

from rest_framework import status


class RideServiceError(Exception):
    """Base class for all typed service failures."""
    error_code = "ride_service_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Ride operation failed"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class NotFoundError(RideServiceError):
    """Raised when an entity is missing or not visible to the caller."""
    error_code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class RideNotFoundError(NotFoundError):
    """Raised when a ride cannot be found."""
    error_code = "ride_not_found"
    default_message = "Ride not found"


class DriverNotFoundError(NotFoundError):
    """Raised when the user has no driver profile."""
    error_code = "driver_not_found"
    default_message = "Driver profile not found"


class ForbiddenError(RideServiceError):
    """Raised when the actor has no rights on the ride."""
    error_code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to act on this ride"


class InvalidStateError(RideServiceError):
    """Raised when the operation is not valid for the current lifecycle state."""
    error_code = "invalid_state"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Operation not allowed in the current state"


class RideNotAvailableError(InvalidStateError):
    """Raised when a ride is not in an available state for the operation."""
    error_code = "ride_not_available"
    default_message = "Ride not available"


class DriverBusyError(InvalidStateError):
    """Raised when the driver is already bound to an active ride."""
    error_code = "driver_busy"
    default_message = "Driver already has an active ride"


class CapacityError(RideServiceError):
    """Raised when a shared ride has no free seats."""
    error_code = "ride_full"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Ride is full"


class PreconditionFailedError(RideServiceError):
    """Raised for duplicate registrations, duplicate ratings and bad input."""
    error_code = "precondition_failed"
    status_code = status.HTTP_412_PRECONDITION_FAILED
    default_message = "Precondition failed"


class ServiceUnavailableError(RideServiceError):
    """Raised when the persistence layer cannot be reached."""
    error_code = "storage_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage is temporarily unavailable"
