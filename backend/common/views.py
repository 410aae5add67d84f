"""Shared view helpers."""

from services.gateway import RideGateway


class GatewayMixin:
    """
    Gives a view a persistence gateway for the current request.

    The gateway is opened in ``initial()`` once authentication and permission
    checks have passed, so an unreachable database answers 503 before any
    work starts. Closing is left to Django's ``request_finished`` handling,
    which honours ``CONN_MAX_AGE``.
    """
    gateway_class = RideGateway
    gateway = None

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.gateway = self.gateway_class().open()

    def get_gateway(self):
        if self.gateway is None:
            self.gateway = self.gateway_class().open()
        return self.gateway
