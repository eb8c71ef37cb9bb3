"""Tests for the pharmacy input schemas."""
import pytest
from pydantic import ValidationError

from pharmacy_registry.application.schemas import PharmacyCreate, PharmacyPatch


class TestPharmacyCreate:

    def test_minimal_payload(self):
        payload = PharmacyCreate.model_validate({'cnpj': '11222333000181', 'company_name': 'Drogaria'})
        assert payload.trade_name is None

    def test_digits_only_fields_are_cleaned(self):
        payload = PharmacyCreate.model_validate({
            'cnpj': '11222333000181',
            'company_name': 'Drogaria',
            'zip_code': '01310-100',
            'area_code': '(11)',
            'phone_number': '3333-4444',
        })
        assert payload.zip_code == '01310100'
        assert payload.area_code == '11'
        assert payload.phone_number == '33334444'

    @pytest.mark.parametrize("field", ['zip_code', 'area_code', 'phone_number', 'city_ibge_code'])
    def test_digit_fields_without_digits_are_rejected(self, field):
        data = {'cnpj': '11222333000181', 'company_name': 'Drogaria', field: 'n/a'}
        with pytest.raises(ValidationError) as exc:
            PharmacyCreate.model_validate(data)
        assert exc.value.errors()[0]['loc'] == (field,)

    @pytest.mark.parametrize("field", ['zip_code', 'area_code', 'phone_number', 'city_ibge_code'])
    @pytest.mark.parametrize("value", [None, '', '   '])
    def test_digit_fields_blank_clears(self, field, value):
        patch = PharmacyPatch.model_validate({field: value})
        assert patch.model_dump(exclude_unset=True) == {field: None}

    def test_whitespace_is_stripped(self):
        payload = PharmacyCreate.model_validate({'cnpj': '11222333000181', 'company_name': '  Drogaria  '})
        assert payload.company_name == 'Drogaria'

    def test_crf_state_upper_cased(self):
        payload = PharmacyCreate.model_validate({'cnpj': '1', 'company_name': 'D', 'crf_state': 'rj'})
        assert payload.crf_state == 'RJ'

    @pytest.mark.parametrize("field, value", [
        ('company_name', ''),
        ('company_name', 'x' * 101),
        ('zip_code', '0131010'),
        ('city_ibge_code', '35503'),
        ('email', 'not-an-email'),
        ('crf_state', 'SPX'),
    ])
    def test_invalid_values(self, field, value):
        data = {'cnpj': '11222333000181', 'company_name': 'Drogaria', field: value}
        with pytest.raises(ValidationError):
            PharmacyCreate.model_validate(data)

    def test_company_name_required(self):
        with pytest.raises(ValidationError):
            PharmacyCreate.model_validate({'cnpj': '11222333000181'})

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            PharmacyCreate.model_validate({'cnpj': '1', 'company_name': 'D', 'inscricao': 'x'})


class TestPharmacyPatch:

    def test_only_sent_fields_are_set(self):
        patch = PharmacyPatch.model_validate({'trade_name': 'Nova', 'email': None})
        assert patch.model_dump(exclude_unset=True) == {'trade_name': 'Nova', 'email': None}

    def test_cnpj_is_not_patchable(self):
        with pytest.raises(ValidationError):
            PharmacyPatch.model_validate({'cnpj': '11222333000181'})
