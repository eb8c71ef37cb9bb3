"""Tests for the /api/pharmacies blueprint, end to end through the app factory."""
from unittest.mock import patch

from pharmacy_registry.domain.exceptions import TransportFailureError
from pharmacy_registry.models_db import AuditRecord, Pharmacy, TraceRecord

from tests.conftest import COMPANY_CNPJ, LEGAL_CPF, OTHER_CNPJ

PAYLOAD = {
    'cnpj': '11.222.333/0001-81',
    'company_name': 'Drogaria Teste LTDA',
    'trade_name': 'Drogaria Teste',
    'city_ibge_code': '355030',
    'legal_responsible_cpf': LEGAL_CPF,
}


class TestPharmacyRoutes:

    def test_create(self, client, app_registry, auth_headers, app_session):
        resp = client.post('/api/pharmacies', json=PAYLOAD, headers=auth_headers('owner'))

        assert resp.status_code == 201
        body = resp.get_json()
        assert body['cnpj'] == COMPANY_CNPJ
        assert body['operational_status'] == 'ACTIVE'
        assert app_session.query(Pharmacy).count() == 1
        assert app_session.query(AuditRecord).count() == 1

    def test_create_records_request_trace(self, client, app_registry, auth_headers, app_session):
        client.post('/api/pharmacies', json=PAYLOAD, headers=auth_headers('owner'),
                    environ_base={'REMOTE_ADDR': '10.1.1.1'})

        trace = app_session.query(TraceRecord).one()
        assert trace.route == '/api/pharmacies'
        assert trace.method == 'POST'
        assert trace.actor_id is not None
        assert trace.origin == '10.1.1.1'

    def test_origin_comes_from_forwarded_for(self, client, app_registry, auth_headers, app_session):
        headers = {**auth_headers('owner'), 'X-Forwarded-For': '200.10.10.10'}
        client.post('/api/pharmacies', json=PAYLOAD, headers=headers)

        assert app_session.query(AuditRecord).one().origin == '200.10.10.10'

    def test_anonymous_request(self, client, app_registry):
        resp = client.post('/api/pharmacies', json=PAYLOAD)

        assert resp.status_code == 401
        assert resp.get_json()['error'] == 'UNAUTHENTICATED'

    def test_expired_session(self, client, app_registry, auth_headers):
        resp = client.get(f'/api/pharmacies/{COMPANY_CNPJ}', headers=auth_headers('owner', expired=True))
        assert resp.status_code == 401

    def test_session_without_active_organization(self, client, app_registry, auth_headers):
        resp = client.post('/api/pharmacies', json=PAYLOAD, headers=auth_headers('owner', active_organization=False))

        assert resp.status_code == 403
        assert resp.get_json()['error'] == 'NO_ACTIVE_TENANT'

    def test_invalid_document(self, client, app_registry, auth_headers):
        resp = client.post('/api/pharmacies', json={**PAYLOAD, 'cnpj': '11222333000180'},
                           headers=auth_headers('owner'))

        assert resp.status_code == 422
        body = resp.get_json()
        assert body['error'] == 'INVALID_DOCUMENT'
        assert body['field'] == 'cnpj'
        assert body['retryable'] is False

    def test_invalid_input_lists_fields(self, client, app_registry, auth_headers):
        resp = client.post('/api/pharmacies', json={'cnpj': COMPANY_CNPJ}, headers=auth_headers('owner'))

        assert resp.status_code == 422
        assert resp.get_json()['details'][0]['field'] == 'company_name'

    def test_non_object_body(self, client, app_registry, auth_headers):
        resp = client.post('/api/pharmacies', data='[]', content_type='application/json',
                           headers=auth_headers('owner'))
        assert resp.status_code == 422

    def test_unknown_company(self, client, app_registry, auth_headers, app_session):
        resp = client.post('/api/pharmacies', json={**PAYLOAD, 'cnpj': OTHER_CNPJ}, headers=auth_headers('owner'))

        assert resp.status_code == 422
        assert resp.get_json()['error'] == 'UNKNOWN_IDENTITY'
        assert app_session.query(Pharmacy).count() == 0

    def test_duplicate(self, client, app_registry, auth_headers):
        headers = auth_headers('owner')
        client.post('/api/pharmacies', json=PAYLOAD, headers=headers)

        resp = client.post('/api/pharmacies', json=PAYLOAD, headers=headers)
        assert resp.status_code == 409
        assert resp.get_json()['retryable'] is False

    def test_get_and_update(self, client, app_registry, auth_headers):
        headers = auth_headers('editor')
        client.post('/api/pharmacies', json=PAYLOAD, headers=headers)

        resp = client.patch(f'/api/pharmacies/{COMPANY_CNPJ}', json={'trade_name': 'Drogaria Nova'}, headers=headers)
        assert resp.status_code == 200
        assert resp.get_json()['trade_name'] == 'Drogaria Nova'

        resp = client.get(f'/api/pharmacies/{COMPANY_CNPJ}', headers=auth_headers('viewer'))
        assert resp.status_code == 200
        assert resp.get_json()['trade_name'] == 'Drogaria Nova'

    def test_get_not_found(self, client, app_registry, auth_headers):
        resp = client.get(f'/api/pharmacies/{OTHER_CNPJ}', headers=auth_headers('viewer'))
        assert resp.status_code == 404

    def test_deactivate_and_reactivate(self, client, app_registry, auth_headers):
        headers = auth_headers('admin')
        client.post('/api/pharmacies', json=PAYLOAD, headers=headers)

        resp = client.post(f'/api/pharmacies/{COMPANY_CNPJ}/deactivate', headers=headers)
        assert resp.status_code == 200
        assert resp.get_json()['operational_status'] == 'INACTIVE'

        resp = client.post(f'/api/pharmacies/{COMPANY_CNPJ}/reactivate', headers=headers)
        assert resp.get_json()['operational_status'] == 'ACTIVE'

    def test_write_role_cannot_deactivate(self, client, app_registry, auth_headers):
        client.post('/api/pharmacies', json=PAYLOAD, headers=auth_headers('owner'))

        resp = client.post(f'/api/pharmacies/{COMPANY_CNPJ}/deactivate', headers=auth_headers('member'))
        assert resp.status_code == 403
        assert resp.get_json()['error'] == 'FORBIDDEN'

    def test_history(self, client, app_registry, auth_headers):
        headers = auth_headers('owner')
        client.post('/api/pharmacies', json=PAYLOAD, headers=headers)
        client.post(f'/api/pharmacies/{COMPANY_CNPJ}/deactivate', headers=headers)

        resp = client.get(f'/api/pharmacies/{COMPANY_CNPJ}/history', headers=headers)
        assert [h['action'] for h in resp.get_json()['history']] == ['CREATE', 'DEACTIVATE']

    def test_reference_store_down_is_retryable(self, client, app_registry, auth_headers):
        failure = TransportFailureError('referencia', 'OperationalError')
        with patch('pharmacy_registry.services.registry_client.RegistryClient.lookup_legal_entity', side_effect=failure):
            resp = client.post('/api/pharmacies', json=PAYLOAD, headers=auth_headers('owner'))

        assert resp.status_code == 503
        assert resp.get_json()['retryable'] is True

    def test_health(self, client):
        assert client.get('/health').get_json() == {'status': 'ok'}
