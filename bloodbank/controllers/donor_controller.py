from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import Conflict, HTTPException, NotFound

from bloodbank.authorization import can_modify, enforce
from bloodbank.controllers.helpers import update_contact_details, with_editable
from bloodbank.errors import error_response
from bloodbank.extensions import db
from bloodbank.models import Donor
from bloodbank.validators import clean_contact_update

donor_bp = Blueprint('donor_bp', __name__)


@donor_bp.route('/manage-donors', methods=['GET'])
@jwt_required()
def get_donors():
    try:
        donors = Donor.query.order_by(Donor.id).all()
        return jsonify(with_editable(donors, current_user)), 200
    except SQLAlchemyError:
        current_app.logger.exception('Failed to fetch donors')
        return jsonify({'error': 'Database error occurred'}), 500


@donor_bp.route('/donor-history/<int:id>', methods=['GET'])
@jwt_required()
def get_donor_history(id):
    try:
        donor = db.session.get(Donor, id)
        if not donor:
            return jsonify({'error': 'Donor not found', 'message': 'Donor not found', 'results': []}), 404

        results = [{
            'donationId': donation.id,
            'fullName': donor.full_name,
            'age': donor.age,
            'bloodGroup': donor.blood_group,
            'donationDate': donation.donation_date.isoformat(),
            'units': donation.units,
            'bankId': donation.bank_id,
        } for donation in donor.donations]

        if not results:
            return jsonify({'message': 'No donation history found for this donor', 'results': []}), 200
        return jsonify({'results': results}), 200
    except SQLAlchemyError:
        current_app.logger.exception('Error fetching donor history for %s', id)
        return jsonify({'error': 'Internal Server Error'}), 500


@donor_bp.route('/update-donor/<int:id>', methods=['PUT'])
@jwt_required()
def update_donor(id):
    try:
        cleaned = clean_contact_update(request.get_json(silent=True))
        donor = db.session.get(Donor, id)
        if not donor:
            raise NotFound('Donor not found')

        update_contact_details(donor, cleaned, current_user)
        db.session.commit()
        return jsonify({'message': 'Donor updated successfully', 'donor': donor.to_dict()}), 200
    except HTTPException as e:
        db.session.rollback()
        return error_response(e)
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Another donor already uses this email or phone'}), 409
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Update of donor %s failed', id)
        return jsonify({'error': 'Update failed'}), 500


@donor_bp.route('/delete-donor/<int:id>', methods=['DELETE'])
@jwt_required()
def delete_donor(id):
    try:
        donor = db.session.get(Donor, id)
        if not donor:
            raise NotFound('Donor not found')
        enforce(can_modify(current_user.bank_id, donor.bank_id), actor=current_user, target=donor)
        if donor.donations:
            raise Conflict('Donor has recorded donations and cannot be deleted')

        db.session.delete(donor)
        db.session.commit()
        current_app.logger.info('Admin %s deleted donor %s', current_user.id, id)
        return jsonify({'message': 'Donor deleted successfully'}), 200
    except HTTPException as e:
        return error_response(e)
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Donor has recorded donations and cannot be deleted'}), 409
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Delete of donor %s failed', id)
        return jsonify({'error': 'Delete failed'}), 500
