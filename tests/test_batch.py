import pytest

from field_mapper.config import FieldConfig
from field_mapper.exceptions import NoDataError
from field_mapper.mapping.batch import classify_rows, resolve_field_order, unmapped_mandatory_fields
from field_mapper.mapping.row_mapper import MISSING_MARKER
from field_mapper.mapping.summary import Summary, SummaryBuilder


def test_all_rows_processed_when_mandatory_field_is_mapped(scenario_table, scenario_config: FieldConfig):
    result = classify_rows(
        scenario_table,
        {"Client Code": "Account Number", "Customer ID": "Customer ID"},
        scenario_config,
    )

    assert result.field_order == ["Client Code", "Customer ID"]
    assert result.processed_rows == [["1234", "1001"], ["2345", "1002"]]
    assert result.missing_rows == []
    assert (result.summary.total_rows, result.summary.successful_rows, result.summary.missing_rows) == (2, 2, 0)
    assert result.summary.lines() == []


def test_all_rows_missing_when_mandatory_field_is_not_mapped(scenario_table, scenario_config: FieldConfig):
    result = classify_rows(scenario_table, {"Customer ID": "Customer ID"}, scenario_config)

    assert result.processed_rows == []
    assert result.missing_rows == [[MISSING_MARKER, "1001"], [MISSING_MARKER, "1002"]]
    summary = result.summary
    assert (summary.total_rows, summary.successful_rows, summary.missing_rows) == (2, 0, 2)
    assert summary.lines() == [
        "Row 2: Missing mandatory fields - Client Code",
        "Row 3: Missing mandatory fields - Client Code",
    ]


def test_rows_are_split_in_input_order(scenario_config: FieldConfig):
    table = [
        ["Account Number", "Customer ID"],
        ["1", "a"],
        ["", "b"],
        ["3", "c"],
        ["  ", "d"],
    ]

    result = classify_rows(table, {"Client Code": "account number", "Customer ID": "customer id"}, scenario_config)

    assert result.processed_rows == [["1", "a"], ["3", "c"]]
    assert result.missing_rows == [[MISSING_MARKER, "b"], [MISSING_MARKER, "d"]]
    assert result.summary.lines() == [
        "Row 3: Missing mandatory fields - Client Code",
        "Row 5: Missing mandatory fields - Client Code",
    ]


def test_header_only_table_has_zero_rows(scenario_config: FieldConfig):
    result = classify_rows([["Account Number"]], {"Client Code": "Account Number"}, scenario_config)

    assert result.summary.total_rows == 0
    assert result.processed_rows == []
    assert result.missing_rows == []


def test_empty_table_is_no_data(scenario_config: FieldConfig):
    with pytest.raises(NoDataError, match="No data found in the file."):
        classify_rows([], {"Client Code": "Account Number"}, scenario_config)


def test_unknown_mapping_keys_are_appended_to_field_order(scenario_table, scenario_config: FieldConfig):
    mapping = {"Client Code": "Account Number", "Name": "Customer Name"}

    assert resolve_field_order(scenario_config, mapping) == ["Client Code", "Customer ID", "Name"]

    result = classify_rows(scenario_table, mapping, scenario_config)
    assert result.processed_rows == [["1234", "", "John Doe"], ["2345", "", "Jane Smith"]]
    assert result.to_output().field_order == ["Client Code", "Customer ID", "Name"]


def test_unmapped_mandatory_fields(scenario_config: FieldConfig):
    assert unmapped_mandatory_fields(scenario_config, {}) == ["Client Code"]
    assert unmapped_mandatory_fields(scenario_config, {"Client Code": " "}) == ["Client Code"]
    assert unmapped_mandatory_fields(scenario_config, {"Client Code": "Account Number"}) == []


def test_classification_does_not_depend_on_previous_calls(scenario_table, scenario_config: FieldConfig):
    mapping = {"Customer ID": "Customer ID"}

    first = classify_rows(scenario_table, mapping, scenario_config)
    second = classify_rows(scenario_table, mapping, scenario_config)

    assert first == second


def test_summary_render_matches_report_format():
    builder = SummaryBuilder()
    builder.record(line_number=2, failed_fields=[])
    builder.record(line_number=3, failed_fields=["Client Code", "Customer ID"])
    summary = builder.build()

    assert summary.render() == (
        "Data Mapping Summary:\n"
        "Row 3: Missing mandatory fields - Client Code, Customer ID\n"
        "\n"
        "Total Rows Processed: 2\n"
        "Successful Rows: 1\n"
        "Rows with Missing Data: 1\n"
    )
    assert str(summary) == summary.render()
    assert summary.to_dict()["details"] == ["Row 3: Missing mandatory fields - Client Code, Customer ID"]


def test_empty_summary_render():
    assert Summary(total_rows=0, successful_rows=0, missing_rows=0).render() == (
        "Data Mapping Summary:\n\nTotal Rows Processed: 0\nSuccessful Rows: 0\nRows with Missing Data: 0\n"
    )
