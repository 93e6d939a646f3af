from flask import jsonify
from werkzeug.exceptions import BadRequest, Conflict, Forbidden


class ValidationFailed(BadRequest):
    """Raised when one or more input fields fail validation"""

    def __init__(self, fields, description='Validation failed'):
        super().__init__(description)
        self.fields = fields


class AuthorizationDenied(Forbidden):
    """Raised when an admin tries to write outside of their own bank"""

    def __init__(self, reason, description):
        super().__init__(description)
        self.reason = reason


class InvalidTransition(Conflict):
    """Raised when a request status change is not allowed from the current status"""

    def __init__(self, current, requested, description=None):
        super().__init__(description or f'Cannot change request status from {current} to {requested}')
        self.current = current
        self.requested = requested


def error_response(e):
    """Build the JSON error body for a werkzeug HTTP exception"""
    body = {'error': e.description}
    if isinstance(e, ValidationFailed):
        body['fields'] = e.fields
    if isinstance(e, AuthorizationDenied):
        body['reason'] = e.reason
    return jsonify(body), e.code
