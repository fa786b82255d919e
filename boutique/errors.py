# boutique/errors.py
from typing import Optional

# Every error the storefront raises carries the HTTP status it maps to.
# The message is what the client sees in {"error": ...}.


class BoutiqueError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BoutiqueError):
    status_code = 400
    default_message = "Invalid request."


class Unauthorized(BoutiqueError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(BoutiqueError):
    status_code = 404
    default_message = "Not found."


class ServiceUnavailable(BoutiqueError):
    status_code = 500
    default_message = "Service unavailable."


class PersistenceError(BoutiqueError):
    status_code = 500
    default_message = "Failed to save products."
