class DeploymentError(Exception):
    """Base class for errors raised while planning a MinIO deployment."""


class ConfigurationError(DeploymentError, ValueError):
    """A required parameter is missing, empty or malformed."""

    def __init__(self, field: str, reason: str):
        super().__init__(f'{field}: {reason}')
        self.field = field
        self.reason = reason


class AmbiguousRouteError(DeploymentError, ValueError):
    """One host would have to be routed to more than one backend port."""

    def __init__(self, host: str, ports: tuple[int, int], fields: tuple[str, str]):
        super().__init__(
            f"{fields[1]}: host '{host}' is already routed to port {ports[0]} by {fields[0]}, "
            f'cannot also route it to port {ports[1]}'
        )
        self.host = host
        self.ports = ports
        self.fields = fields


class GraphIntegrityError(DeploymentError):
    """The resource graph has a dangling dependency or a cycle."""
