"""Tests for CPF / CNPJ validation and formatting."""

import pytest

from procurement_engines.tax_ids import (
    TaxIdKind,
    digits_only,
    format_cnpj,
    format_cpf,
    validate_cnpj,
    validate_cpf,
    validate_tax_id,
)


class TestCpf:

    @pytest.mark.parametrize("value", ["529.982.247-25", "52998224725", " 529 982 247 25 "])
    def test_valid(self, value):
        assert validate_cpf(value) is True

    def test_wrong_check_digit(self):
        assert validate_cpf("529.982.247-26") is False

    def test_repeated_digits_rejected(self):
        assert validate_cpf("111.111.111-11") is False

    def test_wrong_length(self):
        assert validate_cpf("529.982.247") is False

    def test_format(self):
        assert format_cpf("52998224725") == "529.982.247-25"

    def test_format_leaves_wrong_length_unchanged(self):
        assert format_cpf("1234") == "1234"


class TestCnpj:

    @pytest.mark.parametrize("value", ["11.222.333/0001-81", "11222333000181"])
    def test_valid(self, value):
        assert validate_cnpj(value) is True

    def test_wrong_check_digit(self):
        assert validate_cnpj("11.222.333/0001-82") is False

    def test_repeated_digits_rejected(self):
        assert validate_cnpj("00.000.000/0000-00") is False

    def test_format(self):
        assert format_cnpj("11222333000181") == "11.222.333/0001-81"


class TestDispatch:

    def test_validate_by_kind(self):
        assert validate_tax_id("529.982.247-25", TaxIdKind.CPF) is True
        assert validate_tax_id("11222333000181", "cnpj") is True
        assert validate_tax_id("11222333000181", TaxIdKind.CPF) is False

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError):
            validate_tax_id("52998224725", "ssn")

    def test_digits_only(self):
        assert digits_only("11.222.333/0001-81") == "11222333000181"
