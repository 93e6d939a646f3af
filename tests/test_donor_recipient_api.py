from datetime import date

import pytest

from bloodbank.extensions import db
from bloodbank.models import Donation, Donor, Recipient


@pytest.mark.parametrize('path', [
    '/admin/manage-donors',
    '/admin/manage-recipients',
    '/admin/donations',
    '/admin/requests',
    '/admin/list',
    '/admin/current',
])
def test_admin_endpoints_need_a_token(client, seeded, path):
    response = client.get(path)
    assert response.status_code == 401
    assert response.get_json()['error'] == 'Authentication required'


def test_bad_token_is_rejected(client, seeded):
    response = client.get('/admin/manage-donors', headers={'Authorization': 'Bearer not-a-token'})
    assert response.status_code == 401


def test_listing_marks_cross_bank_rows_read_only(client, seeded, alice):
    response = client.get('/admin/manage-donors', headers=alice)
    rows = {row['donorId']: row for row in response.get_json()}
    assert response.status_code == 200
    assert rows[seeded['donor_1']]['editable'] is True
    assert rows[seeded['donor_2']]['editable'] is False


def test_update_own_bank_donor(app, client, seeded, alice):
    response = client.put(f"/admin/update-donor/{seeded['donor_1']}", headers=alice,
                          json={'contactNumber': '5555555555', 'address': '99 New Road, Springfield'})
    assert response.status_code == 200
    with app.app_context():
        donor = db.session.get(Donor, seeded['donor_1'])
        assert donor.contact_number == '5555555555'
        assert donor.full_name == 'Dana One'


def test_update_other_bank_donor_is_denied(app, client, seeded, alice):
    response = client.put(f"/admin/update-donor/{seeded['donor_2']}", headers=alice,
                          json={'email': 'stolen@example.com'})
    assert response.status_code == 403
    assert response.get_json()['reason'] == 'entity_other_bank'
    with app.app_context():
        assert db.session.get(Donor, seeded['donor_2']).email == '2222222222@example.com'


def test_donor_cannot_be_moved_to_another_bank(app, client, seeded, alice):
    response = client.put(f"/admin/update-donor/{seeded['donor_1']}", headers=alice,
                          json={'bankId': seeded['bank_2']})
    assert response.status_code == 403
    assert response.get_json()['reason'] == 'reassign_other_bank'
    with app.app_context():
        assert db.session.get(Donor, seeded['donor_1']).bank_id == seeded['bank_1']


def test_donor_name_is_immutable(client, seeded, alice):
    response = client.put(f"/admin/update-donor/{seeded['donor_1']}", headers=alice,
                          json={'fullName': 'Someone Else'})
    assert response.status_code == 400
    assert response.get_json()['fields'] == {'fullName': 'This field cannot be changed'}


def test_update_missing_donor(client, seeded, alice):
    response = client.put('/admin/update-donor/999', headers=alice, json={'email': 'x@example.com'})
    assert response.status_code == 404


def test_update_duplicate_email_is_conflict(client, seeded, bob):
    response = client.put(f"/admin/update-donor/{seeded['donor_2']}", headers=bob,
                          json={'email': '1111111111@example.com'})
    assert response.status_code == 409


def test_delete_donor_scoping(app, client, seeded, alice, bob):
    assert client.delete(f"/admin/delete-donor/{seeded['donor_2']}", headers=alice).status_code == 403
    assert client.delete(f"/admin/delete-donor/{seeded['donor_2']}", headers=bob).status_code == 200
    with app.app_context():
        assert db.session.get(Donor, seeded['donor_2']) is None


def test_delete_donor_with_donations_is_conflict(app, client, seeded, alice):
    with app.app_context():
        db.session.add(Donation(donor_id=seeded['donor_1'], blood_group='O+', donation_date=date.today(),
                                units=1, collected_by=seeded['alice'], bank_id=seeded['bank_1']))
        db.session.commit()
    response = client.delete(f"/admin/delete-donor/{seeded['donor_1']}", headers=alice)
    assert response.status_code == 409


def test_donor_history(app, client, seeded, alice):
    response = client.get(f"/admin/donor-history/{seeded['donor_2']}", headers=alice)
    assert response.status_code == 200
    assert response.get_json() == {'message': 'No donation history found for this donor', 'results': []}

    with app.app_context():
        db.session.add(Donation(donor_id=seeded['donor_1'], blood_group='O+', donation_date=date(2025, 1, 5),
                                units=1.5, collected_by=seeded['alice'], bank_id=seeded['bank_1']))
        db.session.commit()
    results = client.get(f"/admin/donor-history/{seeded['donor_1']}", headers=alice).get_json()['results']
    assert [(row['donationDate'], row['units']) for row in results] == [('2025-01-05', 1.5)]


def test_donor_history_unknown_donor(client, seeded, alice):
    response = client.get('/admin/donor-history/999', headers=alice)
    assert response.status_code == 404
    assert response.get_json()['results'] == []


def test_update_and_delete_recipient(app, client, seeded, bob):
    response = client.put(f"/admin/update-recipient/{seeded['recipient_2']}", headers=bob,
                          json={'address': '1 Harbour View, Shelbyville'})
    assert response.status_code == 200
    assert response.get_json()['recipient']['address'] == '1 Harbour View, Shelbyville'

    # request 42 still references the recipient
    response = client.delete(f"/admin/delete-recipient/{seeded['recipient_2']}", headers=bob)
    assert response.status_code == 409
    with app.app_context():
        assert db.session.get(Recipient, seeded['recipient_2']) is not None


def test_update_other_bank_recipient_is_denied(client, seeded, bob):
    response = client.put(f"/admin/update-recipient/{seeded['recipient_1']}", headers=bob,
                          json={'contactNumber': '7777777777'})
    assert response.status_code == 403


def test_recipient_history_lists_requests(client, seeded, alice):
    response = client.get(f"/admin/recipient-history/{seeded['recipient_2']}", headers=alice)
    results = response.get_json()['results']
    assert response.status_code == 200
    assert [(row['requestId'], row['requestStatus']) for row in results] == [(42, 'Pending')]
