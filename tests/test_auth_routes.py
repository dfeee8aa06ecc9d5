from siddha_savor.extensions import db


def _login(client, email, password, role):
    return client.post('/api/auth/login', json={'email': email, 'password': password, 'role': role})


def test_admin_login_returns_token_with_role_claim(client, admin):
    response = _login(client, 'admin@siddhasavor.com', 'admin123', 'admin')
    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert body['data']['role'] == 'admin'

    me = client.get('/api/auth/me', headers={'Authorization': f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.get_json()['data']['email'] == 'admin@siddhasavor.com'


def test_doctor_token_carries_uid(client, doctor, make_patient):
    token = _login(client, doctor.email, 'doctor123', 'doctor').get_json()['access_token']
    make_patient()
    response = client.get('/api/doctor/patients', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 200
    assert len(response.get_json()['data']) == 1


def test_login_failures(client, admin):
    assert client.post('/api/auth/login').status_code == 400
    assert _login(client, 'admin@siddhasavor.com', '', 'admin').status_code == 400
    assert _login(client, 'admin@siddhasavor.com', 'admin123', 'nurse').status_code == 400
    assert _login(client, 'admin@siddhasavor.com', 'wrong', 'admin').status_code == 401
    assert _login(client, 'admin@siddhasavor.com', 'admin123', 'doctor').status_code == 401


def test_pending_patient_cannot_log_in(client, make_patient):
    patient = make_patient(email='pending@example.com')
    response = _login(client, 'pending@example.com', 'patient123', 'patient')
    assert response.status_code == 403

    patient.status = 'APPROVED'
    patient.invite_token = None
    db.session.commit()
    assert _login(client, 'pending@example.com', 'patient123', 'patient').status_code == 200


def test_unapproved_doctor_cannot_log_in(client, doctor):
    doctor.status = 'PENDING'
    db.session.commit()
    response = _login(client, doctor.email, 'doctor123', 'doctor')
    assert response.status_code == 403
    assert 'approval' in response.get_json()['error']


def test_logout_always_succeeds(client):
    assert client.post('/api/auth/logout').get_json() == {
        'success': True,
        'message': 'Logged out successfully',
    }
    response = client.post('/api/auth/logout', headers={'Authorization': 'Bearer not-a-jwt'})
    assert response.status_code == 200
    assert response.get_json()['success'] is True


def test_me_requires_token(client, app):
    response = client.get('/api/auth/me')
    assert response.status_code == 401
    assert response.get_json() == {'success': False, 'error': 'Authentication required'}


def test_unknown_route_uses_json_envelope(client, app):
    response = client.get('/api/nothing-here')
    assert response.status_code == 404
    assert response.get_json()['success'] is False


def test_health_endpoints(client, app):
    assert client.get('/health').get_json()['status'] == 'healthy'
    ready = client.get('/health/ready')
    assert ready.status_code == 200
    assert ready.get_json()['database'] == 'connected'
