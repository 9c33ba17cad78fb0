from typing import Iterable, Optional


class TicketingException(Exception):
    error_kind = "TicketingError"

    def __init__(self, message: str = None, code: Optional[str] = None):
        self.message = message or self.error_kind
        self.code = code
        super().__init__(self.message)


class DuplicateCodeError(TicketingException):
    error_kind = "DuplicateCode"

    def __init__(self, code: Optional[str] = None, codes: Iterable[str] = ()):
        self.codes = sorted(set(codes) | ({code} if code else set()))
        super().__init__(f"Ticket code already exists: {', '.join(self.codes) or 'unknown'}", code)


class NotFoundError(TicketingException):
    error_kind = "NotFound"

    def __init__(self, code: str, what: str = "Ticket"):
        super().__init__(f"{what} {code} not found", code)


class AlreadyBoundError(TicketingException):
    error_kind = "AlreadyBound"

    def __init__(self, code: str):
        super().__init__(f"Ticket {code} already has content, clear it before binding again", code)


class UploadFailedError(TicketingException):
    error_kind = "UploadFailed"


class InvalidPayloadError(TicketingException):
    error_kind = "InvalidPayload"
