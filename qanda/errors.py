# qanda/errors.py


class QandAError(Exception):
    """Errors surfaced to socket clients; the message is a translation key."""
    message = "[[error:unknown]]"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)


class NoPrivilegesError(QandAError):
    message = "[[error:no-privileges]]"


class InvalidEventError(QandAError):
    message = "[[error:invalid-event]]"


class InvalidDataError(QandAError):
    message = "[[error:invalid-data]]"
