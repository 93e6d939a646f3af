from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException, NotFound

from bloodbank.errors import error_response
from bloodbank.extensions import db
from bloodbank.models import Admin, Bank, BloodStock, Donor, Recipient
from bloodbank.security import issue_token
from bloodbank.validators import clean_donor, clean_recipient, clean_signin

# Endpoints that need no token: sign-in, self registration and the stock overview
public_bp = Blueprint('public_bp', __name__)


def list_blood_stock():
    rows = BloodStock.query.join(Bank).order_by(Bank.name, BloodStock.blood_group).all()
    return [row.to_dict() for row in rows]


@public_bp.route('/signin', methods=['POST'])
def signin():
    try:
        data = clean_signin(request.get_json(silent=True))
        admin = Admin.query.filter_by(username=data['username']).first()
        if not admin or not admin.check_password(data['password']):
            current_app.logger.warning('Failed sign-in for username %r', data['username'])
            return jsonify({'error': 'Invalid username or password'}), 401

        current_app.logger.info('Admin %s signed in', admin.username)
        response = admin.to_dict()
        response['message'] = 'Login successful'
        response['accessToken'] = issue_token(admin)
        return jsonify(response), 200
    except HTTPException as e:
        return error_response(e)
    except SQLAlchemyError:
        current_app.logger.exception('Sign-in query failed')
        return jsonify({'error': 'Server error'}), 500


@public_bp.route('/banks', methods=['GET'])
def get_banks():
    try:
        banks = Bank.query.order_by(Bank.id).all()
        return jsonify([bank.to_dict() for bank in banks]), 200
    except SQLAlchemyError:
        current_app.logger.exception('Failed to fetch banks')
        return jsonify({'error': 'Database error occurred'}), 500


def _register(model, cleaned, extra=None):
    """Insert a donor or recipient after checking the bank exists"""
    if not db.session.get(Bank, cleaned['bankId']):
        raise NotFound('Bank not found')

    person = model(
        full_name=cleaned['fullName'],
        age=cleaned['age'],
        gender=cleaned['gender'],
        blood_group=cleaned['bloodGroup'],
        contact_number=cleaned['contactNumber'],
        email=cleaned['email'],
        address=cleaned['address'],
        bank_id=cleaned['bankId'],
        **(extra or {})
    )
    db.session.add(person)
    db.session.commit()
    return person


@public_bp.route('/donor', methods=['POST'])
def register_donor():
    try:
        cleaned = clean_donor(request.get_json(silent=True))
        donor = _register(Donor, cleaned, {'last_donation_date': cleaned.get('lastDonationDate')})
        current_app.logger.info('Registered donor %s at bank %s', donor.id, donor.bank_id)
        return jsonify({'message': 'Donor registered successfully', 'donorId': donor.id}), 201
    except HTTPException as e:
        return error_response(e)
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Donor with this email or phone already exists'}), 409
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Error inserting donor')
        return jsonify({'error': 'Failed to register donor'}), 500


@public_bp.route('/recipient', methods=['POST'])
def register_recipient():
    try:
        cleaned = clean_recipient(request.get_json(silent=True))
        recipient = _register(Recipient, cleaned)
        current_app.logger.info('Registered recipient %s at bank %s', recipient.id, recipient.bank_id)
        return jsonify({'message': 'Recipient registered successfully', 'recipientId': recipient.id}), 201
    except HTTPException as e:
        return error_response(e)
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Recipient with this email or phone already exists'}), 409
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Error inserting recipient')
        return jsonify({'error': 'Failed to register recipient'}), 500


@public_bp.route('/bloodstock', methods=['GET'])
def get_blood_stock():
    try:
        return jsonify(list_blood_stock()), 200
    except SQLAlchemyError:
        current_app.logger.exception('Error fetching blood stock')
        return jsonify({'error': 'Failed to fetch blood stock'}), 500
