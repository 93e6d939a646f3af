from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import Conflict, HTTPException, NotFound

from bloodbank.authorization import can_add, can_modify, enforce
from bloodbank.controllers.helpers import with_editable
from bloodbank.controllers.public_controller import list_blood_stock
from bloodbank.errors import error_response
from bloodbank.extensions import db
from bloodbank.models import Admin
from bloodbank.validators import clean_admin, clean_admin_update

admin_bp = Blueprint('admin_bp', __name__)

ADMIN_FIELDS = {
    'email': 'email',
    'contactNumber': 'contact_number',
    'roleName': 'role',
    'username': 'username',
    'bankId': 'bank_id',
}


def _username_taken(username, exclude_id=None):
    query = Admin.query.filter(Admin.username == username)
    if exclude_id is not None:
        query = query.filter(Admin.id != exclude_id)
    return query.first() is not None


@admin_bp.route('/current', methods=['GET'])
@jwt_required()
def get_current_admin():
    return jsonify(current_user.to_dict()), 200


@admin_bp.route('/bloodstock', methods=['GET'])
@jwt_required()
def get_admin_blood_stock():
    try:
        return jsonify(list_blood_stock()), 200
    except SQLAlchemyError:
        current_app.logger.exception('Error fetching blood stock')
        return jsonify({'error': 'Failed to fetch blood stock'}), 500


@admin_bp.route('/list', methods=['GET'])
@jwt_required()
def get_admins():
    try:
        admins = Admin.query.order_by(Admin.id).all()
        return jsonify(with_editable(admins, current_user)), 200
    except SQLAlchemyError:
        current_app.logger.exception('Error fetching admins')
        return jsonify({'error': 'Database error'}), 500


@admin_bp.route('/add-admin', methods=['POST'])
@jwt_required()
def add_admin():
    try:
        cleaned = clean_admin(request.get_json(silent=True))
        bank_id = cleaned.get('bankId', current_user.bank_id)
        enforce(can_add(current_user.bank_id, bank_id), actor=current_user, target=f'bank {bank_id}')
        if _username_taken(cleaned['username']):
            raise Conflict('Username already exists.')

        admin = Admin(
            full_name=cleaned['fullName'],
            email=cleaned['email'],
            contact_number=cleaned['contactNumber'],
            role=cleaned['roleName'],
            username=cleaned['username'],
            bank_id=bank_id,
        )
        admin.set_password(cleaned['password'])
        db.session.add(admin)
        db.session.commit()

        current_app.logger.info('Admin %s created admin %s', current_user.id, admin.username)
        return jsonify({'message': 'Admin added successfully.', 'adminId': admin.id}), 201
    except HTTPException as e:
        return error_response(e)
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Username already exists.'}), 409
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Error inserting admin')
        return jsonify({'error': 'Database error.'}), 500


@admin_bp.route('/update-admin/<int:id>', methods=['PATCH'])
@jwt_required()
def update_admin(id):
    try:
        cleaned = clean_admin_update(request.get_json(silent=True))
        admin = db.session.get(Admin, id)
        if not admin:
            raise NotFound('Admin not found.')
        enforce(can_modify(current_user.bank_id, admin.bank_id, cleaned.get('bankId')),
                actor=current_user, target=admin)
        if 'username' in cleaned and _username_taken(cleaned['username'], exclude_id=admin.id):
            raise Conflict('Username already exists.')

        for key, attribute in ADMIN_FIELDS.items():
            if key in cleaned:
                setattr(admin, attribute, cleaned[key])
        db.session.commit()
        return jsonify({'message': 'Admin updated successfully.', 'admin': admin.to_dict()}), 200
    except HTTPException as e:
        return error_response(e)
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Username already exists.'}), 409
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Error updating admin %s', id)
        return jsonify({'error': 'Database error.'}), 500


@admin_bp.route('/delete-admin/<int:id>', methods=['DELETE'])
@jwt_required()
def delete_admin(id):
    actor_id = current_user.id
    try:
        admin = db.session.get(Admin, id)
        if not admin:
            raise NotFound('Admin not found.')
        enforce(can_modify(current_user.bank_id, admin.bank_id), actor=current_user, target=admin)

        db.session.delete(admin)
        db.session.commit()
        current_app.logger.info('Admin %s deleted admin %s', actor_id, id)
        return jsonify({'message': 'Admin deleted successfully.'}), 200
    except HTTPException as e:
        return error_response(e)
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Admin has recorded donations or requests and cannot be deleted.'}), 409
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Error deleting admin %s', id)
        return jsonify({'error': 'Database error'}), 500
