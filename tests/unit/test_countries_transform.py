from __future__ import annotations

import json

import pytest

from collector.errors import DecodingFailureError
from transforms.countries import Country, CountriesParser, ParseResult, filter_countries, parse_countries


def _raw(name: str, capital: str, code: str, **overrides) -> dict:
    item = {
        "capital": capital,
        "code": code,
        "currency": {"code": "EUR", "name": "Euro", "symbol": "€"},
        "flag": "🏳",
        "language": {"code": code.lower(), "name": "Lang"},
        "name": name,
        "region": "EU",
    }
    item.update(overrides)
    return item


def _country(name: str, capital: str, code: str = "XX") -> Country:
    return Country.model_validate(_raw(name, capital, code))


def test_parse_success_preserves_fields() -> None:
    payload = """
    [
        {
            "capital": "Madrid",
            "code": "ES",
            "currency": {"code": "EUR", "name": "Euro", "symbol": "€"},
            "flag": "🇪🇸",
            "language": {"code": "es", "name": "Spanish"},
            "name": "Spain",
            "region": "EU"
        }
    ]
    """.encode("utf-8")

    result = CountriesParser().parse(payload)

    assert result.ok
    assert result.error is None
    assert len(result.countries) == 1
    spain = result.countries[0]
    assert spain.name == "Spain"
    assert spain.capital == "Madrid"
    assert spain.code == "ES"
    assert spain.region == "EU"
    assert spain.flag == "🇪🇸"
    assert (spain.currency.code, spain.currency.name, spain.currency.symbol) == ("EUR", "Euro", "€")
    assert (spain.language.code, spain.language.name) == ("es", "Spanish")


def test_parse_keeps_server_order_and_duplicates() -> None:
    items = [_raw("Peru", "Lima", "PE"), _raw("Chad", "N'Djamena", "TD"), _raw("Peru", "Lima", "PE")]

    result = parse_countries(json.dumps(items).encode("utf-8"))

    assert result.ok
    assert [c.name for c in result.countries] == ["Peru", "Chad", "Peru"]
    assert result.countries[0] == result.countries[2]


def test_parse_none_payload_is_success_without_list() -> None:
    result = parse_countries(None)

    assert result.ok
    assert result.countries is None


def test_parse_empty_array_is_success_with_empty_list() -> None:
    result = parse_countries(b"[]")

    assert result.ok
    assert result.countries == []


@pytest.mark.parametrize(
    "payload",
    [
        b"invalid json",
        b"",
        b"{}",
        b'{"name": "Spain"}',
        b"[1, 2]",
        b"\xff\xfe",
        json.dumps([{k: v for k, v in _raw("Spain", "Madrid", "ES").items() if k != "capital"}]).encode(),
        json.dumps([dict(_raw("Spain", "Madrid", "ES"), code=34)]).encode(),
        json.dumps([_raw("Spain", "Madrid", "ES", currency={"code": "EUR", "name": "Euro"})]).encode(),
        json.dumps([_raw("Spain", "Madrid", "ES", language="es")]).encode(),
    ],
)
def test_parse_malformed_payload_fails_with_decoding_failure(payload: bytes) -> None:
    result = CountriesParser().parse(payload)

    assert not result.ok
    assert result.countries is None
    assert isinstance(result.error, DecodingFailureError)


def test_parse_one_bad_record_fails_whole_payload() -> None:
    items = [_raw("Peru", "Lima", "PE"), _raw("Chad", None, "TD")]

    result = parse_countries(json.dumps(items))

    assert not result.ok
    assert result.countries is None


def test_parse_ignores_unknown_keys() -> None:
    result = parse_countries(json.dumps([_raw("Peru", "Lima", "PE", population=33_000_000)]))

    assert result.ok
    assert result.countries[0].name == "Peru"


def test_parse_result_failure_defaults_to_decoding_failure() -> None:
    r = ParseResult.failure()
    assert not r.ok
    assert str(r.error) == "Failed to decode response"


def test_country_is_immutable() -> None:
    c = _country("Italy", "Rome", "IT")
    with pytest.raises(Exception):
        c.name = "Italia"  # type: ignore[misc]


def test_name_and_region() -> None:
    c = Country.model_validate(_raw("Italy", "Rome", "IT", region="Europe"))
    assert c.name_and_region == "Italy, Europe"


def test_filter_matches_name_case_insensitive() -> None:
    countries = [_country("Germany", "Berlin"), _country("France", "Paris")]

    assert filter_countries(countries, "ger") == [countries[0]]
    assert filter_countries(countries, "GER") == [countries[0]]


def test_filter_matches_capital() -> None:
    countries = [_country("Germany", "Berlin"), _country("France", "Paris")]

    assert filter_countries(countries, "par") == [countries[1]]


def test_filter_empty_text_returns_full_list() -> None:
    countries = [_country("Germany", "Berlin"), _country("France", "Paris")]

    assert filter_countries(countries, "") == countries
    assert filter_countries(countries, None) == countries
    assert filter_countries(countries, "") is not countries


def test_filter_no_match() -> None:
    countries = [_country("Germany", "Berlin"), _country("France", "Paris")]

    assert filter_countries(countries, "xyz") == []
