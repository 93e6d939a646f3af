"""
Field validation for incoming JSON bodies.

Each ``validate_*`` function takes the raw value from the request body and
returns the cleaned value, or raises ``ValueError`` with the message shown
to the user. ``clean`` runs a set of rules over a body and collects every
field error at once so clients can render them next to their inputs.
"""
import re
from datetime import date, timedelta

from bloodbank.errors import ValidationFailed

BLOOD_GROUPS = ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')
GENDERS = ('Male', 'Female', 'Other')
ADMIN_ROLES = ('Manager', 'Assistant Manager', 'Account Manager', 'Support Staff')

NAME_RE = re.compile(r"^[a-zA-Z\s.'-]+$")
CONTACT_RE = re.compile(r'^\d{10}$')
EMAIL_RE = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
DIGIT_RE = re.compile(r'\d')

MIN_DONOR_AGE = 18
MAX_DONOR_AGE = 65
MIN_RECIPIENT_AGE = 1
MAX_RECIPIENT_AGE = 120

# Ids are stored as signed 32-bit integers
MAX_ID = 2 ** 31 - 1


def _text(value):
    if not isinstance(value, str):
        raise ValueError('Must be text')
    return value.strip()


def _positive_int(value, label):
    if isinstance(value, bool):
        raise ValueError(f'{label} must be a positive number')
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValueError(f'{label} must be a positive number')
    if number <= 0:
        raise ValueError(f'{label} must be a positive number')
    if number > MAX_ID:
        raise ValueError(f'{label} is out of range')
    return number


def validate_full_name(value):
    name = _text(value)
    if len(name) < 2:
        raise ValueError('Full name must be at least 2 characters')
    if len(name) > 100:
        raise ValueError('Full name must be less than 100 characters')
    if not NAME_RE.match(name):
        raise ValueError("Full name can only contain letters, spaces, dots, apostrophes and hyphens")
    return name


def _age(value):
    if isinstance(value, bool):
        raise ValueError('Age must be a number')
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValueError('Age must be a number')


def validate_age(value):
    """Donor age"""
    age = _age(value)
    if age < MIN_DONOR_AGE:
        raise ValueError(f'Minimum age is {MIN_DONOR_AGE}')
    if age > MAX_DONOR_AGE:
        raise ValueError(f'Maximum age is {MAX_DONOR_AGE}')
    return age


def validate_recipient_age(value):
    age = _age(value)
    if age < MIN_RECIPIENT_AGE:
        raise ValueError(f'Age must be at least {MIN_RECIPIENT_AGE}')
    if age > MAX_RECIPIENT_AGE:
        raise ValueError('Please enter a valid age')
    return age


def validate_gender(value):
    if value not in GENDERS:
        raise ValueError('Please select a valid gender')
    return value


def validate_blood_group(value):
    group = _text(value).upper()
    if group not in BLOOD_GROUPS:
        raise ValueError('Please enter a valid blood group (A+, A-, B+, B-, AB+, AB-, O+, O-)')
    return group


def validate_contact_number(value):
    number = _text(value)
    if not CONTACT_RE.match(number):
        raise ValueError('Phone number must be exactly 10 digits')
    return number


def validate_email(value):
    email = _text(value)
    if not EMAIL_RE.match(email):
        raise ValueError('Please enter a valid email address')
    if len(email) > 100:
        raise ValueError('Email must be less than 100 characters')
    return email


def validate_address(value):
    address = _text(value)
    if len(address) < 10:
        raise ValueError('Address must be at least 10 characters')
    if len(address) > 200:
        raise ValueError('Address must be less than 200 characters')
    return address


def validate_bank_id(value):
    return _positive_int(value, 'Bank ID')


def validate_record_id(value):
    return _positive_int(value, 'ID')


def _past_date(value, oldest, too_old_message):
    try:
        parsed = date.fromisoformat(_text(value))
    except ValueError:
        raise ValueError('Date must be in YYYY-MM-DD format')
    if parsed > date.today():
        raise ValueError('Date cannot be in the future')
    if parsed < oldest:
        raise ValueError(too_old_message)
    return parsed


def validate_last_donation_date(value):
    return _past_date(value, date.today() - timedelta(days=round(50 * 365.25)),
                      'Date seems too far in the past')


def validate_record_date(value):
    """Donation and request dates: today or within the last year"""
    return _past_date(value, date.today() - timedelta(days=365),
                      'Date seems too old (more than 1 year ago)')


def validate_units(value):
    if isinstance(value, bool):
        raise ValueError('Units must be a number')
    try:
        units = float(str(value).strip())
    except ValueError:
        raise ValueError('Units must be a number')
    if units <= 0:
        raise ValueError('Units must be greater than 0')
    if not (units * 2).is_integer():
        raise ValueError('Units must be in steps of 0.5')
    return units


def validate_role(value):
    if value not in ADMIN_ROLES:
        raise ValueError('Please select a valid role')
    return value


def validate_username(value):
    username = _text(value)
    if len(username) < 6:
        raise ValueError('Username must be at least 6 characters')
    if len(username) > 50:
        raise ValueError('Username must be less than 50 characters')
    return username


def validate_password(value):
    if not isinstance(value, str) or len(value) < 6 or not DIGIT_RE.search(value):
        raise ValueError('Password must be at least 6 characters with at least 1 number')
    return value


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def clean(data, required=None, optional=None, forbidden=()):
    """Validate ``data`` against the given rules.

    ``required`` and ``optional`` map body keys to validators. Keys listed in
    ``forbidden`` may not appear at all. Returns a dict of cleaned values for
    the keys that were present, or raises ValidationFailed with every error.
    """
    if not isinstance(data, dict):
        raise ValidationFailed({}, 'No input data provided')

    cleaned, errors = {}, {}
    for field in forbidden:
        if field in data:
            errors[field] = 'This field cannot be changed'

    for rules, is_required in ((required or {}, True), (optional or {}, False)):
        for field, validator in rules.items():
            value = data.get(field)
            if _is_blank(value):
                if is_required:
                    errors[field] = 'This field is required'
                continue
            try:
                cleaned[field] = validator(value)
            except ValueError as e:
                errors[field] = str(e)

    if errors:
        raise ValidationFailed(errors)
    return cleaned


PERSON_RULES = {
    'fullName': validate_full_name,
    'age': validate_age,
    'gender': validate_gender,
    'bloodGroup': validate_blood_group,
    'contactNumber': validate_contact_number,
    'email': validate_email,
    'address': validate_address,
    'bankId': validate_bank_id,
}

RECIPIENT_RULES = dict(PERSON_RULES, age=validate_recipient_age)

CONTACT_UPDATE_RULES = {
    'contactNumber': validate_contact_number,
    'email': validate_email,
    'address': validate_address,
    'bankId': validate_bank_id,
}

IMMUTABLE_PERSON_FIELDS = ('fullName', 'age', 'gender', 'bloodGroup')


def clean_donor(data):
    return clean(data, required=PERSON_RULES, optional={'lastDonationDate': validate_last_donation_date})


def clean_recipient(data):
    return clean(data, required=RECIPIENT_RULES)


def clean_contact_update(data):
    cleaned = clean(data, optional=CONTACT_UPDATE_RULES, forbidden=IMMUTABLE_PERSON_FIELDS)
    if not cleaned:
        raise ValidationFailed({}, 'No updatable fields provided')
    return cleaned


def clean_admin(data):
    return clean(
        data,
        required={
            'fullName': validate_full_name,
            'email': validate_email,
            'contactNumber': validate_contact_number,
            'roleName': validate_role,
            'username': validate_username,
            'password': validate_password,
        },
        optional={'bankId': validate_bank_id},
    )


def clean_admin_update(data):
    cleaned = clean(
        data,
        optional={
            'email': validate_email,
            'contactNumber': validate_contact_number,
            'roleName': validate_role,
            'username': validate_username,
            'bankId': validate_bank_id,
        },
        forbidden=('fullName', 'id', 'adminId'),
    )
    if not cleaned:
        raise ValidationFailed({}, 'No updatable fields provided')
    return cleaned


def clean_donation(data):
    return clean(
        data,
        required={
            'donorId': validate_record_id,
            'bloodGroup': validate_blood_group,
            'donationDate': validate_record_date,
            'unitsDonated': validate_units,
        },
        optional={'collectedBy': validate_record_id, 'bankId': validate_bank_id},
    )


def clean_blood_request(data):
    return clean(
        data,
        required={
            'recipientId': validate_record_id,
            'bloodGroup': validate_blood_group,
            'requestDate': validate_record_date,
            'unitsRequested': validate_units,
        },
        optional={
            'fulfilledBy': validate_record_id,
            'bankId': validate_bank_id,
            'requestStatus': _text,
        },
    )


def _secret(value):
    if not isinstance(value, str):
        raise ValueError('Must be text')
    return value


def clean_signin(data):
    return clean(data, required={'username': _text, 'password': _secret})
