import pytest

from chart_mcp.shell.options import build_bar_option, build_line_option, build_pie_option

DATA = [
    {"category": "Mon", "value": 10},
    {"category": "Tue", "value": 20},
]


def test_line_option():
    option = build_line_option(DATA, title="Sales", axis_x_title="Day", axis_y_title="Units")

    assert option["title"] == {"text": "Sales"}
    assert option["xAxis"] == {"type": "category", "data": ["Mon", "Tue"], "name": "Day"}
    assert option["yAxis"] == {"type": "value", "name": "Units"}
    assert option["series"] == [{"type": "line", "data": [10, 20]}]
    assert "legend" not in option


def test_grouped_bar_option():
    data = [
        {"category": "Q1", "value": 1, "group": "2023"},
        {"category": "Q2", "value": 2, "group": "2023"},
        {"category": "Q1", "value": 3, "group": "2024"},
    ]
    option = build_bar_option(data)

    assert option["xAxis"]["data"] == ["Q1", "Q2"]
    assert option["series"] == [
        {"type": "bar", "data": [1, 2], "name": "2023"},
        {"type": "bar", "data": [3, 0], "name": "2024"},
    ]
    assert option["legend"] == {}
    assert "title" not in option


def test_pie_option():
    option = build_pie_option(DATA, title="Share")
    assert option["series"] == [
        {"type": "pie", "data": [{"name": "Mon", "value": 10}, {"name": "Tue", "value": 20}]}
    ]


def test_builders_are_pure():
    assert build_line_option(DATA) == build_line_option(DATA)


@pytest.mark.parametrize("builder", [build_line_option, build_bar_option, build_pie_option])
def test_empty_data_rejected(builder):
    with pytest.raises(ValueError, match="at least one point"):
        builder([])


def test_missing_keys_rejected():
    with pytest.raises(ValueError, match=r"data\[1\]"):
        build_line_option([{"category": "a", "value": 1}, {"category": "b"}])
