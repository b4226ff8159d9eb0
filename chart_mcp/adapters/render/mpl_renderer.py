import json
from io import BytesIO
from typing import Any

import matplotlib.figure
from matplotlib import style
from matplotlib.backends.backend_agg import FigureCanvasAgg

from chart_mcp.components.delivery import OutputFormat, Theme

DPI = 100
SUPPORTED_SERIES = ("line", "bar", "scatter", "pie")


def _text(value: Any) -> str | None:
    """Accept either a plain string or an ECharts {"text": ...} object."""
    if isinstance(value, dict):
        return value.get("text") or None
    if isinstance(value, str):
        return value or None
    return None


def _first(value: Any) -> dict[str, Any]:
    # ECharts allows an axis to be a dict or a list of dicts
    if isinstance(value, list):
        return value[0] if value else {}
    return value or {}


def _point_value(point: Any) -> Any:
    if isinstance(point, dict):
        return point.get("value")
    return point


class MatplotlibRenderer:
    def render(
        self,
        configuration: dict[str, Any],
        width: int = 800,
        height: int = 600,
        theme: Theme = Theme.DEFAULT,
        output_format: OutputFormat = OutputFormat.PNG,
    ) -> bytes | str:
        """
        Renders an ECharts-style option.
        Supported subset:
        {
            "title": {"text": str} | str,
            "xAxis": {"data": list, "name": str},
            "yAxis": {"name": str},
            "legend": {},
            "backgroundColor": str,
            "series": [
                {"type": "line" | "bar" | "scatter" | "pie",
                 "name": str,
                 "data": list[number | [x, y] | {"name": str, "value": number}]}
            ]
        }
        """
        output_format = OutputFormat(output_format)

        # Configuration echo never draws
        if output_format is OutputFormat.OPTION:
            return json.dumps(configuration, indent=2, ensure_ascii=False)

        theme_style = "dark_background" if Theme(theme) is Theme.DARK else "default"
        with style.context(theme_style):
            fig = self._draw(configuration, width, height)

            buf = BytesIO()
            fig.savefig(buf, format=output_format.value, facecolor=fig.get_facecolor())
            data = buf.getvalue()
            buf.close()

        if output_format is OutputFormat.SVG:
            return data.decode("utf-8")
        return data

    def _draw(self, configuration: dict[str, Any], width: int, height: int) -> matplotlib.figure.Figure:
        fig = matplotlib.figure.Figure(figsize=(width / DPI, height / DPI), dpi=DPI)
        FigureCanvasAgg(fig)  # Attach canvas backend
        if bg := configuration.get("backgroundColor"):
            fig.set_facecolor(bg)
        ax = fig.add_subplot(111)

        x_axis = _first(configuration.get("xAxis"))
        y_axis = _first(configuration.get("yAxis"))
        categories = x_axis.get("data") or []

        series = configuration.get("series") or []
        if isinstance(series, dict):
            series = [series]

        named = False
        bar_index = 0
        bar_series = [s for s in series if s.get("type") == "bar"]
        bar_width = 0.8 / max(len(bar_series), 1)

        for s in series:
            s_type = s.get("type", "line")
            if s_type not in SUPPORTED_SERIES:
                raise ValueError(
                    f"Unsupported series type '{s_type}'. Supported: {', '.join(SUPPORTED_SERIES)}"
                )
            name = s.get("name")
            named = named or bool(name)
            points = s.get("data") or []

            if s_type == "pie":
                labels = [p.get("name", "") if isinstance(p, dict) else "" for p in points]
                ax.pie([_point_value(p) for p in points], labels=labels, autopct="%1.1f%%")
                ax.axis("equal")
                continue

            if points and isinstance(points[0], (list, tuple)):
                xs = [p[0] for p in points]
                ys = [p[1] for p in points]
            else:
                ys = [_point_value(p) for p in points]
                xs = list(categories[: len(ys)]) if categories else list(range(len(ys)))

            if s_type == "bar":
                offset = (bar_index - (len(bar_series) - 1) / 2) * bar_width
                positions = [i + offset for i in range(len(ys))]
                ax.bar(positions, ys, width=bar_width, label=name)
                ax.set_xticks(range(len(ys)))
                ax.set_xticklabels([str(x) for x in xs])
                bar_index += 1
            elif s_type == "scatter":
                ax.scatter(xs, ys, label=name)
            else:  # line
                ax.plot(xs, ys, label=name)

        if title := _text(configuration.get("title")):
            ax.set_title(title)
        if xlabel := x_axis.get("name"):
            ax.set_xlabel(xlabel)
        if ylabel := y_axis.get("name"):
            ax.set_ylabel(ylabel)
        if named and "legend" in configuration:
            ax.legend()

        fig.tight_layout()
        return fig
