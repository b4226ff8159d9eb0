"""
ECharts option builders for the convenience chart tools.

Pure functions: same inputs always produce the same option.
"""

from __future__ import annotations

from typing import Any

DataPoint = dict[str, Any]


def _title(title: str | None) -> dict[str, Any]:
    return {"title": {"text": title}} if title else {}


def _categories(data: list[DataPoint]) -> list[str]:
    return [str(p["category"]) for p in data]


def _values(data: list[DataPoint]) -> list[float]:
    return [p["value"] for p in data]


def _validate(data: list[DataPoint]) -> None:
    if not data:
        raise ValueError("data must contain at least one point")
    for i, point in enumerate(data):
        if "category" not in point or "value" not in point:
            raise ValueError(f"data[{i}] must have 'category' and 'value' keys")


def _grouped(data: list[DataPoint]) -> tuple[list[str], dict[str | None, list[Any]]]:
    """Split points into categories and per-group value lists."""
    categories: list[str] = []
    groups: dict[str | None, dict[str, Any]] = {}
    for p in data:
        category = str(p["category"])
        if category not in categories:
            categories.append(category)
        groups.setdefault(p.get("group"), {})[category] = p["value"]
    return categories, {g: [vals.get(c, 0) for c in categories] for g, vals in groups.items()}


def _cartesian_option(
    series_type: str,
    data: list[DataPoint],
    title: str | None,
    axis_x_title: str | None,
    axis_y_title: str | None,
) -> dict[str, Any]:
    _validate(data)
    categories, groups = _grouped(data)
    series = [
        {"type": series_type, "data": values, **({"name": group} if group else {})}
        for group, values in groups.items()
    ]
    option: dict[str, Any] = {
        **_title(title),
        "xAxis": {"type": "category", "data": categories},
        "yAxis": {"type": "value"},
        "series": series,
    }
    if axis_x_title:
        option["xAxis"]["name"] = axis_x_title
    if axis_y_title:
        option["yAxis"]["name"] = axis_y_title
    if len(series) > 1:
        option["legend"] = {}
    return option


def build_line_option(
    data: list[DataPoint],
    title: str | None = None,
    axis_x_title: str | None = None,
    axis_y_title: str | None = None,
) -> dict[str, Any]:
    """Line chart: one series per 'group' value (or a single series)."""
    return _cartesian_option("line", data, title, axis_x_title, axis_y_title)


def build_bar_option(
    data: list[DataPoint],
    title: str | None = None,
    axis_x_title: str | None = None,
    axis_y_title: str | None = None,
) -> dict[str, Any]:
    """Bar chart: one series per 'group' value (or a single series)."""
    return _cartesian_option("bar", data, title, axis_x_title, axis_y_title)


def build_pie_option(data: list[DataPoint], title: str | None = None) -> dict[str, Any]:
    _validate(data)
    return {
        **_title(title),
        "legend": {},
        "series": [
            {
                "type": "pie",
                "data": [{"name": c, "value": v} for c, v in zip(_categories(data), _values(data))],
            }
        ],
    }
