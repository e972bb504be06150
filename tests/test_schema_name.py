import pytest

from vicash.exceptions import InvalidSchemaNameError
from vicash.lib.schema_name import (
    MAX_IDENTIFIER_LENGTH,
    derive_schema_name,
    is_valid_schema_name,
    quote_schema,
    with_suffix,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Acme", "tenant_acme"),
        ("Acme Inc.", "tenant_acme_inc_"),
        ("juan.perez", "tenant_juan_perez"),
        ("Créditos 2024", "tenant_cr_ditos_2024"),
        ("x'; DROP SCHEMA public; --", "tenant_x___drop_schema_public____"),
    ],
)
def test_derive_schema_name(value, expected):
    assert derive_schema_name(value) == expected


def test_derive_schema_name_is_deterministic_and_collides():
    assert derive_schema_name("Acme") == derive_schema_name("ACME")


def test_derive_schema_name_empty_input_is_degenerate():
    assert derive_schema_name("") == "tenant_"
    assert derive_schema_name(None) == "tenant_"
    assert not is_valid_schema_name("tenant_")


def test_derive_schema_name_respects_identifier_limit():
    name = derive_schema_name("a" * 200)
    assert len(name) == MAX_IDENTIFIER_LENGTH
    assert is_valid_schema_name(name)


def test_with_suffix_stays_within_limit():
    base = derive_schema_name("a" * 200)
    suffixed = with_suffix(base, 12)
    assert suffixed.endswith("_12")
    assert len(suffixed) == MAX_IDENTIFIER_LENGTH
    assert with_suffix("tenant_acme", 2) == "tenant_acme_2"


@pytest.mark.parametrize("name", ["public", "tenant_Acme", 'tenant_a"b', "tenant_a;drop", "", "x" * 70])
def test_quote_schema_rejects_names_outside_allow_list(name):
    assert not is_valid_schema_name(name)
    with pytest.raises(InvalidSchemaNameError):
        quote_schema(name)


def test_quote_schema_quotes_valid_name():
    assert quote_schema("tenant_acme") == '"tenant_acme"'
