import logging

from drivers.models import Driver
from services.exceptions import DriverBusyError, DriverNotFoundError, PreconditionFailedError
from services.gateway import RideGateway

logger = logging.getLogger(__name__)


# DRIVER REGISTRATION
def register_driver(
    gateway: RideGateway,
    user,
    vehicle_type: str,
    vehicle_plate: str,
    vehicle_model: str = "",
    vehicle_color: str = "",
    vehicle_capacity: int = 4,
) -> Driver:
    """
    Create the driver profile for a user.
    A user can only ever hold one profile.
    """
    if gateway.get_driver_by_user_id(user.id) is not None:
        raise PreconditionFailedError("Already registered as driver")

    driver = gateway.create_driver(
        user.id,
        vehicle_type=vehicle_type,
        vehicle_model=vehicle_model or "",
        vehicle_plate=vehicle_plate,
        vehicle_color=vehicle_color or "",
        vehicle_capacity=vehicle_capacity,
    )
    logger.info("User %s registered as driver %s (%s)", user.id, driver.id, vehicle_plate)
    return driver


def get_driver_for_user(gateway: RideGateway, user) -> Driver:
    driver = gateway.get_driver_by_user_id(user.id)
    if driver is None:
        raise DriverNotFoundError()
    return driver


# DRIVER STATUS UPDATE
def set_driver_availability(gateway: RideGateway, driver: Driver, is_available: bool) -> Driver:
    """
    Update driver availability.
    A driver bound to an accepted or in-progress ride cannot go available.
    """
    with gateway.atomic():
        gateway.get_driver(driver.id, for_update=True)
        if is_available and gateway.driver_has_active_ride(driver.id):
            raise DriverBusyError("Finish your current ride before going available")
        gateway.update_driver_availability(driver.id, is_available)

    driver.is_available = is_available
    logger.info("Driver %s availability set to %s", driver.id, is_available)
    return driver


def update_driver_location(gateway: RideGateway, driver: Driver, lat, lon) -> Driver:
    """
    Update driver location (polled by the app, no live streaming).
    """
    lat, lon = str(lat), str(lon)
    gateway.update_driver_location(driver.id, lat, lon)

    driver.current_latitude = lat
    driver.current_longitude = lon
    return driver
