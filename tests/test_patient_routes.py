from siddha_savor.services import deactivate_patient
from siddha_savor.utils.diet_plans import DIET_PLANS


def test_patient_reads_own_diet_plan(client, patient_headers):
    response = client.get('/api/patient/diet-plan?date=2026-03-11', headers=patient_headers)
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['diagnosis'] == 'Hypertension'
    assert data['currentDay'] == 3
    assert data['today'] == DIET_PLANS['Hypertension']['days'][2]


def test_patient_meals_for_a_day(client, patient_headers):
    response = client.get('/api/patient/meals?date=2026-03-09', headers=patient_headers)
    assert response.status_code == 200
    data = response.get_json()['data']
    monday = DIET_PLANS['Hypertension']['days'][0]

    assert data['date'] == '2026-03-09'
    assert data['day'] == 1
    assert [m['mealType'] for m in data['meals']] == ['breakfast', 'lunch', 'dinner']
    assert data['meals'][0] == {'mealType': 'breakfast', 'time': '8:00 AM', 'items': monday['breakfast']}
    assert data['notes'] == monday['notes']


def test_patient_meals_default_to_today(client, patient_headers):
    data = client.get('/api/patient/meals', headers=patient_headers).get_json()['data']
    assert data['diagnosis'] == 'Hypertension'
    assert 1 <= data['day'] <= 7


def test_patient_meals_rejects_bad_date(client, patient_headers):
    response = client.get('/api/patient/meals?date=09/03/2026', headers=patient_headers)
    assert response.status_code == 400


def test_patient_without_diagnosis_gets_not_found(client, patient_headers, approved_patient):
    from siddha_savor.extensions import db
    approved_patient.diagnosis = None
    db.session.commit()

    assert client.get('/api/patient/meals', headers=patient_headers).status_code == 404
    assert client.get('/api/patient/diet-plan', headers=patient_headers).status_code == 404


def test_deactivated_patient_token_stops_working(client, patient_headers, approved_patient):
    deactivate_patient(approved_patient.id)
    response = client.get('/api/patient/meals', headers=patient_headers)
    assert response.status_code == 403


def test_patient_routes_require_patient_role(client, doctor_headers):
    assert client.get('/api/patient/meals').status_code == 401
    assert client.get('/api/patient/meals', headers=doctor_headers).status_code == 403
