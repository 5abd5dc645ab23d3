# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_oidc_client

from coreason_oidc_client.utils.urls import add_query_param, encode_component


def test_add_first_param() -> None:
    assert add_query_param("https://x", "a", "b") == "https://x?a=b"


def test_add_second_param() -> None:
    assert add_query_param("https://x?a=b", "c", "d") == "https://x?a=b&c=d"


def test_url_ending_with_question_mark() -> None:
    assert add_query_param("https://x?", "a", "b") == "https://x?a=b"


def test_value_is_percent_encoded() -> None:
    url = add_query_param("https://idp/auth", "redirect_uri", "https://app/cb")
    assert url == "https://idp/auth?redirect_uri=https%3A%2F%2Fapp%2Fcb"


def test_space_encodes_as_percent_20() -> None:
    assert add_query_param("https://x", "scope", "openid profile") == "https://x?scope=openid%20profile"


def test_name_is_percent_encoded() -> None:
    assert add_query_param("https://x", "a b&c", "d") == "https://x?a%20b%26c=d"


def test_unreserved_characters_untouched() -> None:
    assert encode_component("AZaz09-_.!~*'()") == "AZaz09-_.!~*'()"


def test_alphanumeric_value_unchanged() -> None:
    assert encode_component("abc123XYZ") == "abc123XYZ"


def test_non_ascii_value_utf8_encoded() -> None:
    assert encode_component("é") == "%C3%A9"


def test_scalar_types() -> None:
    assert add_query_param("https://x", "max_age", 300) == "https://x?max_age=300"
    assert add_query_param("https://x", "flag", True) == "https://x?flag=true"
    assert add_query_param("https://x", "flag", False) == "https://x?flag=false"


def test_mapping_flattens_every_entry() -> None:
    url = add_query_param("https://x", "extraQueryParams", {"audience": "api://a", "foo": "bar"})
    assert url == "https://x?audience=api%3A%2F%2Fa&foo=bar"
    assert "extraQueryParams" not in url


def test_mapping_appends_to_existing_query() -> None:
    url = add_query_param("https://x?a=b", "ignored", {"c": "d", "e": "f"})
    assert url == "https://x?a=b&c=d&e=f"


def test_mapping_skips_none_entries() -> None:
    assert add_query_param("https://x", "extra", {"a": None, "b": "2"}) == "https://x?b=2"


def test_nested_mapping() -> None:
    assert add_query_param("https://x", "outer", {"a": {"b": "c"}, "d": "e"}) == "https://x?b=c&d=e"


def test_empty_mapping_leaves_url_unchanged() -> None:
    assert add_query_param("https://x", "extra", {}) == "https://x"
