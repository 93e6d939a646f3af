from bloodbank.extensions import db
from bloodbank.models import Admin


def admin_payload(**overrides):
    payload = {
        'fullName': 'Nina Patel',
        'email': 'nina@example.com',
        'contactNumber': '9123456780',
        'roleName': 'Account Manager',
        'username': 'nina_patel',
        'password': 'welcome1',
    }
    payload.update(overrides)
    return payload


def test_current_admin(client, seeded, alice):
    body = client.get('/admin/current', headers=alice).get_json()
    assert body['username'] == 'alice_admin'
    assert body['bankId'] == seeded['bank_1']


def test_add_admin_defaults_to_own_bank(app, client, seeded, alice, login):
    response = client.post('/admin/add-admin', headers=alice, json=admin_payload())
    assert response.status_code == 201
    with app.app_context():
        admin = db.session.get(Admin, response.get_json()['adminId'])
        assert admin.bank_id == seeded['bank_1']
        assert admin.password_hash != 'welcome1'
    assert login('nina_patel', 'welcome1')


def test_add_admin_into_other_bank_is_denied(client, seeded, alice):
    response = client.post('/admin/add-admin', headers=alice, json=admin_payload(bankId=seeded['bank_2']))
    assert response.status_code == 403


def test_duplicate_username_is_conflict(client, seeded, alice):
    response = client.post('/admin/add-admin', headers=alice, json=admin_payload(username='bob_admin'))
    assert response.status_code == 409
    assert response.get_json()['error'] == 'Username already exists.'


def test_add_admin_validation(client, seeded, alice):
    response = client.post('/admin/add-admin', headers=alice,
                           json=admin_payload(password='nodigits', roleName='Boss', contactNumber='12345'))
    assert response.status_code == 400
    assert set(response.get_json()['fields']) == {'password', 'roleName', 'contactNumber'}


def test_list_admins_hides_passwords(client, seeded, alice):
    rows = client.get('/admin/list', headers=alice).get_json()
    assert {row['username']: row['editable'] for row in rows} == {
        'alice_admin': True,
        'carol_admin': True,
        'bob_admin': False,
    }
    assert all('password' not in key.lower() for row in rows for key in row)


def test_update_admin_in_own_bank(client, seeded, alice):
    response = client.patch(f"/admin/update-admin/{seeded['carol']}", headers=alice,
                            json={'roleName': 'Assistant Manager', 'username': 'carol_assistant'})
    assert response.status_code == 200
    assert response.get_json()['admin']['role'] == 'Assistant Manager'


def test_update_admin_full_name_is_immutable(client, seeded, alice):
    response = client.patch(f"/admin/update-admin/{seeded['carol']}", headers=alice, json={'fullName': 'Caroline'})
    assert response.status_code == 400


def test_update_admin_in_other_bank_is_denied(app, client, seeded, alice):
    response = client.patch(f"/admin/update-admin/{seeded['bob']}", headers=alice, json={'roleName': 'Support Staff'})
    assert response.status_code == 403
    with app.app_context():
        assert db.session.get(Admin, seeded['bob']).role == 'Manager'


def test_update_admin_username_collision(client, seeded, alice):
    response = client.patch(f"/admin/update-admin/{seeded['carol']}", headers=alice, json={'username': 'bob_admin'})
    assert response.status_code == 409


def test_update_missing_admin(client, seeded, alice):
    response = client.patch('/admin/update-admin/999', headers=alice, json={'roleName': 'Manager'})
    assert response.status_code == 404


def test_delete_admin(app, client, seeded, alice, bob):
    assert client.delete(f"/admin/delete-admin/{seeded['carol']}", headers=bob).status_code == 403
    assert client.delete(f"/admin/delete-admin/{seeded['carol']}", headers=alice).status_code == 200
    assert client.delete(f"/admin/delete-admin/{seeded['carol']}", headers=alice).status_code == 404
    with app.app_context():
        assert db.session.get(Admin, seeded['carol']) is None


def test_delete_admin_with_history_is_conflict(client, seeded, bob):
    # bob handles request 42
    response = client.delete(f"/admin/delete-admin/{seeded['bob']}", headers=bob)
    assert response.status_code == 409


def test_token_of_deleted_admin_stops_working(client, seeded, alice, login):
    carol = login('carol_admin')
    client.delete(f"/admin/delete-admin/{seeded['carol']}", headers=alice)
    response = client.get('/admin/current', headers=carol)
    assert response.status_code == 401


def test_admin_blood_stock(client, seeded, alice):
    rows = client.get('/admin/bloodstock', headers=alice).get_json()
    assert [(row['bankName'], row['bloodGroup']) for row in rows] == [('Central Blood Bank', 'O+')]
