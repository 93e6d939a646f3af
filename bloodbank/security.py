"""Access tokens for admins.

A token only carries the admin id. The admin row, and with it the bank id
and role used for scoping, is loaded from the store on every request.
"""
from flask import jsonify
from flask_jwt_extended import create_access_token

from bloodbank.extensions import db, jwt
from bloodbank.models import Admin


def issue_token(admin):
    return create_access_token(identity=admin)


@jwt.user_identity_loader
def admin_identity(admin):
    return str(admin.id)


@jwt.user_lookup_loader
def load_admin(_jwt_header, jwt_data):
    return db.session.get(Admin, int(jwt_data['sub']))


@jwt.user_lookup_error_loader
def admin_gone(_jwt_header, jwt_data):
    return jsonify({'error': 'Admin account no longer exists'}), 401


@jwt.unauthorized_loader
def missing_token(reason):
    return jsonify({'error': 'Authentication required', 'detail': reason}), 401


@jwt.invalid_token_loader
def invalid_token(reason):
    return jsonify({'error': 'Invalid token', 'detail': reason}), 401


@jwt.expired_token_loader
def expired_token(_jwt_header, jwt_data):
    return jsonify({'error': 'Token has expired'}), 401
