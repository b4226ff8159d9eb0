import pytest

from chart_mcp.adapters.fs.filestore import ChartFileSink


@pytest.fixture
def sink(tmp_path):
    return ChartFileSink(tmp_path / "charts")


def test_ensure_directory_is_idempotent(sink):
    sink.ensure_directory(sink.base_path)
    sink.ensure_directory(sink.base_path)
    assert sink.base_path.is_dir()


def test_write_and_read(sink):
    sink.ensure_directory(sink.base_path)
    sink.write(sink.base_path / "chart-1-abc.png", b"png bytes")
    assert sink.read("chart-1-abc.png") == b"png bytes"


def test_overwrite(sink):
    sink.ensure_directory(sink.base_path)
    sink.write("overwrite.png", b"v1")
    sink.write("overwrite.png", b"v2")
    assert sink.read("overwrite.png") == b"v2"


def test_write_without_directory_fails(sink):
    with pytest.raises(FileNotFoundError):
        sink.write("chart-1-abc.png", b"png bytes")


def test_read_missing(sink):
    with pytest.raises(FileNotFoundError):
        sink.read("missing.png")


def test_path_traversal(sink):
    with pytest.raises(ValueError):
        sink.write("../hack.png", b"bad")

    with pytest.raises(ValueError):
        sink.read("/etc/passwd")


def test_nested_folders(sink):
    sink.ensure_directory("2024/06")
    sink.write("2024/06/chart.png", b"nested")
    assert sink.read("2024/06/chart.png") == b"nested"
