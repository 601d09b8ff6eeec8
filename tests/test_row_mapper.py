import pytest

from field_mapper.config import FieldConfig, parse_field_config
from field_mapper.mapping.row_mapper import (
    MISSING_MARKER,
    RowMapper,
    find_column,
    map_row,
    normalize_header,
    normalize_headers,
)

HEADERS = normalize_headers(["Account Number", "Account Active", "Customer Name", "Customer ID"])


def _mapper(config: FieldConfig, mapping, headers=HEADERS) -> RowMapper:
    return RowMapper(
        normalized_headers=headers,
        mapping=mapping,
        field_order=config.ordered_fields(),
        fields=config.index(),
    )


@pytest.mark.parametrize("header", ["Account Number", "ACCOUNT NUMBER", " account number ", "\tAccount number\n"])
def test_header_matching_ignores_case_and_surrounding_whitespace(header):
    assert find_column(HEADERS, header) == 0


def test_header_matching_is_otherwise_exact():
    assert find_column(HEADERS, "AccountNumber") is None
    assert find_column(HEADERS, "Account-Number") is None
    assert find_column(HEADERS, "Account  Number") is None


def test_normalize_header():
    assert normalize_header("  Customer ID ") == "customer id"
    assert normalize_header(None) == ""


def test_header_collision_resolves_to_leftmost_column(scenario_config: FieldConfig):
    headers = normalize_headers(["ID", "Client Code", " client code "])
    mapper = _mapper(scenario_config, {"Client Code": "client code"}, headers)

    outcome = mapper.map_row(["x", "left", "right"])

    assert outcome.processed == ["left", ""]


def test_complete_row_keeps_raw_values(scenario_config: FieldConfig):
    mapper = _mapper(scenario_config, {"Client Code": "Account Number", "Customer ID": "Customer ID"})

    outcome = mapper.map_row([" 1234 ", "Yes", "John Doe", "1001"])

    assert outcome.is_complete is True
    assert outcome.failed_fields == []
    assert outcome.processed == [" 1234 ", "1001"]
    assert outcome.missing == [" 1234 ", "1001"]


def test_unmapped_optional_field_is_blank_not_missing(scenario_config: FieldConfig):
    mapper = _mapper(scenario_config, {"Client Code": "Account Number"})

    outcome = mapper.map_row(["1234", "Yes", "John Doe", "1001"])

    assert outcome.is_complete is True
    assert outcome.processed == ["1234", ""]
    assert outcome.missing == ["1234", ""]
    assert MISSING_MARKER not in outcome.missing


def test_mapped_but_unresolved_optional_field_is_marked_but_row_stays_complete(scenario_config: FieldConfig):
    mapper = _mapper(scenario_config, {"Client Code": "Account Number", "Customer ID": "No Such Column"})

    outcome = mapper.map_row(["1234", "Yes", "John Doe", "1001"])

    assert outcome.is_complete is True
    assert outcome.failed_fields == []
    assert outcome.processed == ["1234", ""]
    assert outcome.missing == ["1234", MISSING_MARKER]


def test_unmapped_mandatory_field_fails_the_row(scenario_config: FieldConfig):
    mapper = _mapper(scenario_config, {"Customer ID": "Customer ID"})

    outcome = mapper.map_row(["1234", "Yes", "John Doe", "1001"])

    assert outcome.is_complete is False
    assert outcome.failed_fields == ["Client Code"]
    assert outcome.processed == ["", "1001"]
    assert outcome.missing == [MISSING_MARKER, "1001"]


@pytest.mark.parametrize("row", [["   ", "Yes"], [""], []])
def test_blank_or_short_rows_fail_mandatory_fields(scenario_config: FieldConfig, row):
    mapper = _mapper(scenario_config, {"Client Code": "Account Number", "Customer ID": "Customer ID"})

    outcome = mapper.map_row(row)

    assert outcome.is_complete is False
    assert outcome.failed_fields == ["Client Code"]
    assert outcome.missing == [MISSING_MARKER, MISSING_MARKER]


def test_whitespace_only_mapping_counts_as_unmapped(scenario_config: FieldConfig):
    mapper = _mapper(scenario_config, {"Client Code": "Account Number", "Customer ID": "   "})

    outcome = mapper.map_row(["1234", "Yes", "John Doe", "1001"])

    assert outcome.missing == ["1234", ""]


def test_failed_fields_follow_declaration_order():
    config = parse_field_config(
        {
            "fields": [
                {"name": "b", "displayName": "B", "isMandatory": True},
                {"name": "a", "displayName": "A", "isMandatory": True},
                {"name": "c", "displayName": "C", "isMandatory": False},
            ]
        }
    )

    outcome = map_row(
        ["", "", "z"],
        normalize_headers(["A", "B", "C"]),
        {"a": "A", "b": "B", "c": "C"},
        config.ordered_fields(),
        config.index(),
    )

    assert outcome.failed_fields == ["b", "a"]
    assert outcome.missing == [MISSING_MARKER, MISSING_MARKER, "z"]
    assert outcome.processed == ["", "", "z"]


def test_fields_without_definition_are_optional(scenario_config: FieldConfig):
    mapper = RowMapper(
        normalized_headers=HEADERS,
        mapping={"Client Code": "Account Number", "Extra": "Customer Name"},
        field_order=[*scenario_config.ordered_fields(), "Extra"],
        fields=scenario_config.index(),
    )

    outcome = mapper.map_row(["1234", "Yes", "", "1001"])

    assert outcome.is_complete is True
    assert outcome.missing == ["1234", "", MISSING_MARKER]
