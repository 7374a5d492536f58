"""Exception types raised while building scenes and cameras.

Construction-time failures are fatal and propagate to the caller; nothing in
the intersection or shading code catches them except where a degenerate
vector marks an expected geometric non-event (for example a ray starting on a
triangle vertex).
"""


class GeometryError(ValueError):
    """Raised when geometric input is degenerate."""


class ZeroVectorError(GeometryError):
    """Raised when an operation would produce or requires a zero vector."""


class MissingRenderingDataError(RuntimeError):
    """Raised when a required camera or render field was never supplied.

    Attributes:
        owner: The name of the object being built (e.g. "Camera").
        field: The missing field.
    """

    def __init__(self, owner: str, field: str) -> None:
        super().__init__(f"Missing rendering data: {owner}.{field}")
        self.owner = owner
        self.field = field
