from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import Conflict, HTTPException, NotFound

from bloodbank.authorization import can_modify, enforce
from bloodbank.controllers.helpers import update_contact_details, with_editable
from bloodbank.errors import error_response
from bloodbank.extensions import db
from bloodbank.models import Recipient
from bloodbank.validators import clean_contact_update

recipient_bp = Blueprint('recipient_bp', __name__)


@recipient_bp.route('/manage-recipients', methods=['GET'])
@jwt_required()
def get_recipients():
    try:
        recipients = Recipient.query.order_by(Recipient.id).all()
        return jsonify(with_editable(recipients, current_user)), 200
    except SQLAlchemyError:
        current_app.logger.exception('Failed to fetch recipients')
        return jsonify({'error': 'Database error occurred'}), 500


@recipient_bp.route('/recipient-history/<int:id>', methods=['GET'])
@jwt_required()
def get_recipient_history(id):
    try:
        recipient = db.session.get(Recipient, id)
        if not recipient:
            return jsonify({'error': 'Recipient not found', 'message': 'Recipient not found', 'results': []}), 404

        results = [{
            'requestId': blood_request.id,
            'fullName': recipient.full_name,
            'age': recipient.age,
            'bloodGroup': recipient.blood_group,
            'requestDate': blood_request.request_date.isoformat(),
            'requestedBloodGroup': blood_request.blood_group,
            'units': blood_request.units,
            'requestStatus': blood_request.status,
            'bankId': blood_request.bank_id,
        } for blood_request in recipient.requests]

        if not results:
            return jsonify({'message': 'No request history found for this recipient', 'results': []}), 200
        return jsonify({'results': results}), 200
    except SQLAlchemyError:
        current_app.logger.exception('Error fetching recipient history for %s', id)
        return jsonify({'error': 'Internal Server Error'}), 500


@recipient_bp.route('/update-recipient/<int:id>', methods=['PUT'])
@jwt_required()
def update_recipient(id):
    try:
        cleaned = clean_contact_update(request.get_json(silent=True))
        recipient = db.session.get(Recipient, id)
        if not recipient:
            raise NotFound('Recipient not found')

        update_contact_details(recipient, cleaned, current_user)
        db.session.commit()
        return jsonify({'message': 'Recipient updated successfully', 'recipient': recipient.to_dict()}), 200
    except HTTPException as e:
        db.session.rollback()
        return error_response(e)
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Another recipient already uses this email or phone'}), 409
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Update of recipient %s failed', id)
        return jsonify({'error': 'Update failed'}), 500


@recipient_bp.route('/delete-recipient/<int:id>', methods=['DELETE'])
@jwt_required()
def delete_recipient(id):
    try:
        recipient = db.session.get(Recipient, id)
        if not recipient:
            raise NotFound('Recipient not found')
        enforce(can_modify(current_user.bank_id, recipient.bank_id), actor=current_user, target=recipient)
        if recipient.requests:
            raise Conflict('Recipient has recorded requests and cannot be deleted')

        db.session.delete(recipient)
        db.session.commit()
        current_app.logger.info('Admin %s deleted recipient %s', current_user.id, id)
        return jsonify({'message': 'Recipient deleted successfully'}), 200
    except HTTPException as e:
        return error_response(e)
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Recipient has recorded requests and cannot be deleted'}), 409
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Delete of recipient %s failed', id)
        return jsonify({'error': 'Delete failed'}), 500
