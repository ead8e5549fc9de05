# This project was developed with assistance from AI tools.
"""Error kinds raised by the access-arbitration core.

The message of each exception is user-visible text; the HTTP layer passes it
through verbatim as the Problem Details ``detail``.
"""


class AccessError(Exception):
    """Base for every failure the core reports to its caller."""

    status_code: int = 500
    title: str = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(AccessError):
    status_code = 400
    title = "Bad Request"


class PaymentRequired(AccessError):
    status_code = 402
    title = "Payment Required"


class Forbidden(AccessError):
    status_code = 403
    title = "Forbidden"


class NotFound(AccessError):
    status_code = 404
    title = "Not Found"


class Conflict(AccessError):
    status_code = 409
    title = "Conflict"


class InvalidState(AccessError):
    """Operation not allowed in the entity's current lifecycle state."""

    status_code = 409
    title = "Conflict"
