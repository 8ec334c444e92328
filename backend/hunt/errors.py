"""Errors raised by the session services.

Every error is recoverable: the Socket.IO layer turns it into a failure
acknowledgement and the session carries on.
"""


class HuntError(Exception):
    code = 'error'
    default_message = 'Request failed'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_ack(self):
        return {'success': False, 'message': self.message, 'error': self.code}


class NotFound(HuntError):
    code = 'not_found'
    default_message = 'Game not found'


class Unauthorized(HuntError):
    code = 'unauthorized'
    default_message = 'Not authorized'


class AlreadyMember(HuntError):
    code = 'already_member'
    default_message = 'Already joined this game'


class RejoinCodeTaken(HuntError):
    code = 'rejoin_code_taken'
    default_message = 'Rejoin code already in use'


class InvalidRejoinCode(HuntError):
    code = 'invalid_rejoin_code'
    default_message = 'Invalid rejoin code'


class ValidationError(HuntError):
    code = 'validation_error'
    default_message = 'Invalid request'
