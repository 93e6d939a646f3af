from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException, NotFound

from bloodbank.authorization import can_create, enforce
from bloodbank.controllers.helpers import resolve_handler, with_editable
from bloodbank.errors import ValidationFailed, error_response
from bloodbank.extensions import db
from bloodbank.models import Donation, Donor
from bloodbank.validators import clean_donation

donation_bp = Blueprint('donation_bp', __name__)


@donation_bp.route('/donations', methods=['GET'])
@jwt_required()
def get_donations():
    try:
        donations = Donation.query.order_by(Donation.donation_date.desc(), Donation.id.desc()).all()
        return jsonify(with_editable(donations, current_user)), 200
    except SQLAlchemyError:
        current_app.logger.exception('Error fetching donations')
        return jsonify({'error': 'Failed to fetch donations'}), 500


@donation_bp.route('/donation-details/<int:id>', methods=['GET'])
@jwt_required()
def get_donation_details(id):
    try:
        donation = db.session.get(Donation, id)
        if not donation:
            return jsonify({'error': 'Donation not found', 'message': 'Donation not found', 'results': []}), 404

        details = donation.to_dict()
        details['age'] = donation.donor.age
        details['donorBloodGroup'] = donation.donor.blood_group
        return jsonify(details), 200
    except SQLAlchemyError:
        current_app.logger.exception('Error fetching donation details for %s', id)
        return jsonify({'error': 'Internal Server Error'}), 500


@donation_bp.route('/add-donation', methods=['POST'])
@jwt_required()
def add_donation():
    try:
        cleaned = clean_donation(request.get_json(silent=True))
        actor = current_user

        donor = db.session.get(Donor, cleaned['donorId'])
        if not donor:
            raise NotFound('Donor not found')
        collector = resolve_handler(cleaned.get('collectedBy'), actor)
        bank_id = cleaned.get('bankId', actor.bank_id)

        enforce(can_create(actor.bank_id, donor.bank_id, collector.bank_id, bank_id), actor=actor, target=donor)
        if cleaned['bloodGroup'] != donor.blood_group:
            raise ValidationFailed({'bloodGroup': f"Donor's blood group is {donor.blood_group}"})

        donation = Donation(
            donor_id=donor.id,
            blood_group=cleaned['bloodGroup'],
            donation_date=cleaned['donationDate'],
            units=cleaned['unitsDonated'],
            collected_by=collector.id,
            bank_id=bank_id,
        )
        db.session.add(donation)
        db.session.commit()

        current_app.logger.info('Donation %s of %s units added at bank %s', donation.id, donation.units, bank_id)
        return jsonify({
            'message': 'Donation added successfully',
            'donationId': donation.id,
            'donorBankId': donor.bank_id,
            'adminBankId': actor.bank_id,
        }), 201
    except HTTPException as e:
        return error_response(e)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Database insertion error for donation')
        return jsonify({'error': 'Failed to add donation'}), 500
