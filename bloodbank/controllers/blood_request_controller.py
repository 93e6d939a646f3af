from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException, NotFound

from bloodbank.authorization import can_create, can_modify, enforce, is_editable
from bloodbank.controllers.helpers import resolve_handler, with_editable
from bloodbank.errors import InvalidTransition, ValidationFailed, error_response
from bloodbank.extensions import db
from bloodbank.lifecycle import INITIAL_STATUS, check_transition
from bloodbank.models import BloodRequest, Recipient
from bloodbank.validators import clean_blood_request

blood_request_bp = Blueprint('blood_request_bp', __name__)


@blood_request_bp.route('/requests', methods=['GET'])
@jwt_required()
def get_requests():
    try:
        blood_requests = BloodRequest.query.order_by(BloodRequest.request_date.desc(), BloodRequest.id.desc()).all()
        return jsonify(with_editable(blood_requests, current_user)), 200
    except SQLAlchemyError:
        current_app.logger.exception('Error fetching requests')
        return jsonify({'error': 'Failed to fetch requests'}), 500


@blood_request_bp.route('/request-details/<int:id>', methods=['GET'])
@jwt_required()
def get_request_details(id):
    try:
        blood_request = db.session.get(BloodRequest, id)
        if not blood_request:
            return jsonify({'error': 'Request not found', 'message': 'Request not found', 'results': []}), 404

        details = blood_request.to_dict()
        details['age'] = blood_request.recipient.age
        details['bloodGroup'] = blood_request.recipient.blood_group
        details['editable'] = is_editable(current_user.bank_id, blood_request.bank_id)
        return jsonify(details), 200
    except SQLAlchemyError:
        current_app.logger.exception('Error fetching request details for %s', id)
        return jsonify({'error': 'Internal Server Error'}), 500


@blood_request_bp.route('/add-request', methods=['POST'])
@jwt_required()
def add_request():
    try:
        cleaned = clean_blood_request(request.get_json(silent=True))
        status = cleaned.get('requestStatus', INITIAL_STATUS.value)
        if status != INITIAL_STATUS.value:
            raise ValidationFailed({'requestStatus': 'New requests must start as Pending'})
        actor = current_user

        recipient = db.session.get(Recipient, cleaned['recipientId'])
        if not recipient:
            raise NotFound('Recipient not found')
        handler = resolve_handler(cleaned.get('fulfilledBy'), actor)
        bank_id = cleaned.get('bankId', actor.bank_id)

        enforce(can_create(actor.bank_id, recipient.bank_id, handler.bank_id, bank_id), actor=actor, target=recipient)

        blood_request = BloodRequest(
            recipient_id=recipient.id,
            blood_group=cleaned['bloodGroup'],
            request_date=cleaned['requestDate'],
            units=cleaned['unitsRequested'],
            status=INITIAL_STATUS.value,
            fulfilled_by=handler.id,
            bank_id=bank_id,
        )
        db.session.add(blood_request)
        db.session.commit()

        current_app.logger.info('Request %s for %s units added at bank %s', blood_request.id, blood_request.units, bank_id)
        return jsonify({'message': 'Request added successfully', 'requestId': blood_request.id}), 201
    except HTTPException as e:
        return error_response(e)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('DB insert error for request')
        return jsonify({'error': 'Failed to add request'}), 500


@blood_request_bp.route('/update-request-status/<int:id>', methods=['PUT'])
@jwt_required()
def update_request_status(id):
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data.get('status'):
            raise ValidationFailed({'status': 'This field is required'})

        blood_request = db.session.get(BloodRequest, id)
        if not blood_request:
            raise NotFound('Request not found')
        enforce(can_modify(current_user.bank_id, blood_request.bank_id), actor=current_user, target=blood_request)
        new_status = check_transition(blood_request.status, data['status'])

        # Only flip rows that are still Pending in the store
        updated = BloodRequest.query.filter_by(id=id, status=INITIAL_STATUS.value).update(
            {'status': new_status.value, 'status_updated_at': datetime.utcnow()}
        )
        if not updated:
            db.session.rollback()
            db.session.refresh(blood_request)
            raise InvalidTransition(blood_request.status, new_status.value)
        db.session.commit()

        current_app.logger.info('Admin %s set request %s to %s', current_user.id, id, new_status.value)
        return jsonify({
            'message': 'Request status updated successfully',
            'requestId': id,
            'requestStatus': new_status.value,
        }), 200
    except InvalidTransition as e:
        current_app.logger.info('Rejected status change on request %s: %s', id, e.description)
        return error_response(e)
    except HTTPException as e:
        return error_response(e)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Error updating request status for %s', id)
        return jsonify({'error': 'Update failed'}), 500
