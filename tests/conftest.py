from datetime import date, timedelta

import pytest

from bloodbank import create_app
from bloodbank.config import TestingConfig
from bloodbank.extensions import db
from bloodbank.models import Admin, Bank, BloodRequest, BloodStock, Donor, Recipient

PASSWORD = 'secret123'


def make_admin(username, bank_id, role='Manager'):
    admin = Admin(
        full_name=username.title(),
        email=f'{username}@example.com',
        contact_number='9000000000',
        role=role,
        username=username,
        bank_id=bank_id,
    )
    admin.set_password(PASSWORD)
    return admin


def make_person(model, name, contact, bank_id, blood_group='O+', **extra):
    return model(
        full_name=name,
        age=30,
        gender='Female',
        blood_group=blood_group,
        contact_number=contact,
        email=f'{contact}@example.com',
        address='12 Long Street, Springfield',
        bank_id=bank_id,
        **extra
    )


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seeded(app):
    """Two banks, each with admins, a donor, a recipient and a pending request.

    Request 42 belongs to bank 2.
    """
    with app.app_context():
        central = Bank(name='Central Blood Bank', location='Springfield')
        north = Bank(name='North Blood Bank', location='Shelbyville')
        db.session.add_all([central, north])
        db.session.flush()
        db.session.add(BloodStock(bank_id=central.id, blood_group='O+', units_available=3))

        alice = make_admin('alice_admin', central.id)
        carol = make_admin('carol_admin', central.id, role='Support Staff')
        bob = make_admin('bob_admin', north.id)
        db.session.add_all([alice, carol, bob])

        donor_1 = make_person(Donor, 'Dana One', '1111111111', central.id)
        donor_2 = make_person(Donor, 'Dan Two', '2222222222', north.id, blood_group='A-')
        recipient_1 = make_person(Recipient, 'Rita One', '3333333333', central.id)
        recipient_2 = make_person(Recipient, 'Rob Two', '4444444444', north.id)
        db.session.add_all([donor_1, donor_2, recipient_1, recipient_2])
        db.session.flush()

        pending_1 = BloodRequest(recipient_id=recipient_1.id, blood_group='O+', request_date=date.today(),
                                 units=1, fulfilled_by=alice.id, bank_id=central.id)
        pending_42 = BloodRequest(id=42, recipient_id=recipient_2.id, blood_group='O+',
                                  request_date=date.today() - timedelta(days=1),
                                  units=2, fulfilled_by=bob.id, bank_id=north.id)
        db.session.add_all([pending_1, pending_42])
        db.session.commit()

        return {
            'bank_1': central.id,
            'bank_2': north.id,
            'alice': alice.id,
            'carol': carol.id,
            'bob': bob.id,
            'donor_1': donor_1.id,
            'donor_2': donor_2.id,
            'recipient_1': recipient_1.id,
            'recipient_2': recipient_2.id,
            'request_1': pending_1.id,
            'request_42': pending_42.id,
        }


@pytest.fixture
def login(client):
    """Return a function that signs in and builds the Authorization header"""
    def _login(username, password=PASSWORD):
        response = client.post('/signin', json={'username': username, 'password': password})
        assert response.status_code == 200, response.get_json()
        return {'Authorization': f"Bearer {response.get_json()['accessToken']}"}
    return _login


@pytest.fixture
def alice(seeded, login):
    return login('alice_admin')


@pytest.fixture
def bob(seeded, login):
    return login('bob_admin')
