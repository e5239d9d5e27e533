"""
Unit tests for orsr_parser.parsing.fields module.

Covers positional splitting and each of the field fixups on its own.
"""

import pytest

from orsr_parser.constants import SKK_PER_EUR
from orsr_parser.parsing.fields import (
    apply_city_zip,
    apply_street_number,
    extract_date_range,
    parse_address,
    parse_money,
    parse_person,
    split_city_zip,
    split_fields,
    split_name_function,
    split_street_number,
    split_tokens,
)


class TestSplitTokens:
    """Tests for split_tokens and split_fields."""

    def test_split_and_trim(self):
        assert split_tokens(" a , b,,c ") == ["a", "b", "", "c"]

    def test_skip_pattern(self):
        assert split_tokens("Ján Novák, trvalý pobyt, Nitra", skip_pattern=r"^trval") == ["Ján Novák", "Nitra"]

    def test_empty_line(self):
        assert split_tokens("") == []

    def test_split_fields_left_to_right(self):
        fields = split_fields("Hlavná 5, Nitra 949 01", ["street", "city", "country"])
        assert fields == {"street": "Hlavná 5", "city": "Nitra 949 01"}

    def test_split_fields_extra_tokens_dropped(self):
        assert split_fields("a, b, c", ["x"]) == {"x": "a"}


class TestSplitNameFunction:
    """Tests for split_name_function."""

    def test_role_after_dash(self):
        name, function = split_name_function("Ing. Vladislav Šustr - predseda predstavenstva")
        assert name == "Ing. Vladislav Šustr"
        assert function == "predseda predstavenstva"

    def test_capitalized_role_keyword(self):
        assert split_name_function("Ján Novák - Konateľ") == ("Ján Novák", "Konateľ")

    def test_hyphenated_surname_kept(self):
        assert split_name_function("Anna Nováková-Kováčová") == ("Anna Nováková-Kováčová", "")

    def test_single_word_before_dash_kept(self):
        """At least two words must precede the dash."""
        assert split_name_function("Novák - predseda") == ("Novák - predseda", "")

    def test_trade_name_after_dash_kept(self):
        assert split_name_function("Peter Hrach - HRACHSTAV") == ("Peter Hrach - HRACHSTAV", "")


class TestSplitStreetNumber:
    """Tests for split_street_number rules."""

    def test_trailing_number(self):
        assert split_street_number("Pod Kalváriou 373") == {"street": "Pod Kalváriou", "number": "373"}

    def test_trailing_compound_number(self):
        result = split_street_number("Nejaká ulica 654/ 99-87B")
        assert result == {"street": "Nejaká ulica", "number": "654/ 99-87B"}

    def test_leading_number(self):
        assert split_street_number("12 Hlavná") == {"street": "Hlavná", "number": "12"}

    def test_house_number_marker_stripped(self):
        assert split_street_number("Hlavná č. 15") == {"street": "Hlavná", "number": "15"}
        assert split_street_number("č. 15 Hlavná") == {"street": "Hlavná", "number": "15"}

    def test_no_digits(self):
        """A bare place name has neither street nor number."""
        assert split_street_number("Beluša") == {"street": "", "number": ""}

    def test_only_number(self):
        assert split_street_number("373/12") == {"street": "", "number": "373/12"}

    def test_unseparable_line_is_number(self):
        """Digits that are neither a leading nor a trailing number make the whole line the number."""
        assert split_street_number("1. mája") == {"street": "", "number": "1. mája"}

    def test_apply_unseparable_line(self):
        assert apply_street_number({"street": "1. mája"}) == {"street": "", "number": "1. mája"}

    @pytest.mark.parametrize(
        "street",
        ["Pod Kalváriou 373", "Nejaká ulica 654/ 99-87B", "12 Hlavná", "Nám. SNP 8", "1. mája"],
    )
    def test_idempotent(self, street):
        """Splitting the resulting street again does not change it."""
        once = apply_street_number({"street": street})
        twice = apply_street_number(dict(once))
        assert twice == once

    def test_apply_street_number_without_number(self):
        assert apply_street_number({"street": "Beluša"}) == {"street": "Beluša"}
        assert apply_street_number({}) == {}


class TestSplitCityZip:
    """Tests for split_city_zip."""

    def test_city_and_zip(self):
        assert split_city_zip("Bratislava 821 04") == {"city": "Bratislava", "zip": "82104"}

    def test_unsplit_zip(self):
        assert split_city_zip("Nitra 94901") == {"city": "Nitra", "zip": "94901"}

    def test_district(self):
        result = split_city_zip("Bratislava 821 04 Ružinov")
        assert result == {"city": "Bratislava", "zip": "82104", "district": "Ružinov"}

    def test_multi_word_city(self):
        assert split_city_zip("Banská Bystrica 974 01") == {"city": "Banská Bystrica", "zip": "97401"}

    @pytest.mark.parametrize(
        "line, city, zip_code",
        [("Praha CZ-110 00", "Praha", "CZ-11000"), ("Wien A-1010", "Wien", "A-1010")],
    )
    def test_foreign_zip(self, line, city, zip_code):
        result = split_city_zip(line)
        assert result["city"] == city
        assert result["zip"] == zip_code

    def test_bare_zip(self):
        assert split_city_zip("058 01") == {"city": "", "zip": "05801"}

    def test_no_zip(self):
        assert split_city_zip("Poprad") == {"city": "Poprad", "zip": ""}

    def test_apply_city_zip_only_with_zip(self):
        assert apply_city_zip({"city": "Poprad"}) == {"city": "Poprad"}
        assert apply_city_zip({"city": "Poprad 058 01"}) == {"city": "Poprad", "zip": "05801"}


class TestParseMoney:
    """Tests for parse_money."""

    def test_eur(self):
        money = parse_money("6 972 EUR")
        assert money.amount == 6972.0
        assert money.currency == "EUR"
        assert money.original is None

    def test_decimal_comma(self):
        assert parse_money("33,19 EUR").amount == 33.19

    def test_euro_sign(self):
        assert parse_money("120 €").amount == 120.0

    def test_legacy_currency_converted(self):
        money = parse_money("200 000 Sk")
        assert money.currency == "EUR"
        assert money.amount == round(200000 / SKK_PER_EUR, 2)
        assert money.original == "200 000 Sk"

    @pytest.mark.parametrize("text, value", [("200 000 Sk", 200000), ("100 000 SKK", 100000), ("1 Sk", 1)])
    def test_legacy_round_trip(self, text, value):
        """Converted amounts stay within a cent of the exact conversion."""
        money = parse_money(text)
        assert abs(money.amount - value / SKK_PER_EUR) <= 0.01
        assert money.amount * SKK_PER_EUR == pytest.approx(value, abs=0.01 * SKK_PER_EUR)

    def test_after_label(self):
        money = parse_money("Vklad: 100 EUR Splatené: 50 EUR", label="Splatené")
        assert money.amount == 50.0

    def test_label_longer_after_folding(self):
        """Search resumes after the whole folded label ("ß" folds to "ss")."""
        assert parse_money("Stammeinlage Maß 2 100 EUR", label="Maß 2").amount == 100.0

    def test_missing_label(self):
        assert parse_money("100 EUR", label="Splatené") is None

    def test_no_currency(self):
        assert parse_money("100 000") is None
        assert parse_money("") is None

    def test_to_dict(self):
        assert parse_money("6 972 EUR").to_dict() == {"amount": 6972.0, "currency": "EUR"}
        assert "original" in parse_money("100 Sk").to_dict()


class TestExtractDateRange:
    """Tests for extract_date_range."""

    def test_function_dates(self):
        text = "Vznik funkcie: 01.06.2013 Skončenie funkcie: 30.01.2016"
        assert extract_date_range(text) == {"since": "01.06.2013", "until": "30.01.2016"}

    def test_validity_column(self):
        assert extract_date_range("(od: 12.03.1997 do: 04.05.2012)") == {"since": "12.03.1997", "until": "04.05.2012"}

    def test_spaces_around_dots(self):
        assert extract_date_range("od: 1 . 6 . 2013") == {"since": "1.6.2013"}

    def test_until_without_since(self):
        """Dates are looked up independently."""
        assert extract_date_range("Skončenie funkcie: 30.01.2016") == {"until": "30.01.2016"}

    def test_no_dates(self):
        assert extract_date_range("Ing. Ján Novák") == {}
        assert extract_date_range("") == {}

    def test_label_must_start_word(self):
        """"od" inside "Dôvod" is not a label."""
        assert extract_date_range("Dôvod: 01.01.2000") == {}

    def test_custom_labels(self):
        assert extract_date_range("Vznik členstva: 2.3.2004", since_labels=("vznik clenstva",)) == {
            "since": "2.3.2004"
        }


class TestParseAddress:
    """Tests for parse_address."""

    def test_street_and_city(self):
        address = parse_address("Tuhovská 3, Bratislava 831 06")
        assert address.to_dict() == {"street": "Tuhovská", "number": "3", "city": "Bratislava", "zip": "83106"}

    def test_city_only(self):
        """A place without digits lands in city with empty street and number."""
        address = parse_address("Poprad")
        assert address.street == ""
        assert address.number == ""
        assert address.city == "Poprad"

    def test_city_with_zip_only(self):
        address = parse_address("Bratislava 821 04")
        assert address.to_dict() == {"street": "", "number": "", "city": "Bratislava", "zip": "82104"}

    def test_country(self):
        address = parse_address("Hauptstrasse 1, Wien A-1010, Rakúska republika")
        assert address.country == "Rakúska republika"
        assert address.zip == "A-1010"

    def test_empty(self):
        assert parse_address("").is_empty()


class TestParsePerson:
    """Tests for parse_person."""

    def test_full_line(self):
        person = parse_person(
            "Peter Malý, Pod Kalváriou 373, Topoľčany 955 01, Vznik funkcie: 01.06.2013 Skončenie funkcie: 30.01.2016"
        )
        assert person.to_dict() == {
            "city": "Topoľčany",
            "function": "",
            "name": "Peter Malý",
            "number": "373",
            "since": "01.06.2013",
            "street": "Pod Kalváriou",
            "until": "30.01.2016",
            "zip": "95501",
        }

    def test_keys_sorted(self):
        person = parse_person("Ján Novák, Hlavná 12, Nitra 949 01")
        keys = list(person.to_dict())
        assert keys == sorted(keys)

    def test_function_split(self):
        person = parse_person("Ing. Vladislav Šustr - predseda predstavenstva, Hlavná 1, Nitra 949 01")
        assert person.name == "Ing. Vladislav Šustr"
        assert person.function == "predseda predstavenstva"

    def test_village_without_street(self):
        person = parse_person("Mária Nováková, Beluša")
        assert person.name == "Mária Nováková"
        assert person.address.city == "Beluša"
        assert person.address.street == ""

    def test_country_and_default_country(self):
        person = parse_person("Karl Huber, Hauptstrasse 1, Wien A-1010, Rakúska republika", default_country="SR")
        assert person.address.country == "Rakúska republika"

        person = parse_person("Ján Novák, Hlavná 12, Nitra 949 01", default_country="Slovenská republika")
        assert person.address.country == "Slovenská republika"

    def test_residence_token_skipped(self):
        person = parse_person("Ján Novák, trvalý pobyt:, Hlavná 12, Nitra 949 01")
        assert person.address.street == "Hlavná"
        assert person.address.city == "Nitra"

    def test_spaced_letters_closed_up(self):
        person = parse_person("Ing. J o z e f Novák, Hlavná 12, Nitra 949 01")
        assert person.name == "Ing. Jozef Novák"

    def test_unlabelled_date_token(self):
        """A date token with an unknown label still yields the since date."""
        person = parse_person("Ján Novák, Hlavná 12, Nitra 949 01, Deň vzniku: 02.03.2004")
        assert person.since == "02.03.2004"
        assert person.until == ""
