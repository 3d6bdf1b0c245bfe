"""Tests for the rserial command line interface."""

import io

import click
import pytest
from click.testing import CliRunner

from rds_decoder import unserialize
from rserial.cli.main import cli, count_lines, read_columns


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.mark.unit
def test_read_columns_types() -> None:
    data = b"id\tscore\tname\n1\t0.5\talpha\n2\tNA\t\n3\t1e3\t7\n"

    columns = read_columns(io.BytesIO(data))

    assert columns == {
        "id": [1, 2, 3],
        "score": [0.5, None, 1000.0],
        "name": ["alpha", None, "7"],
    }


@pytest.mark.unit
def test_read_columns_keeps_underscored_numbers_as_text() -> None:
    columns = read_columns(io.BytesIO(b"code\n1_000\n"))

    assert columns == {"code": ["1_000"]}


@pytest.mark.unit
def test_read_columns_ragged_row() -> None:
    with pytest.raises(click.ClickException, match="Line 3"):
        read_columns(io.BytesIO(b"a\tb\n1\t2\n3\n"))


@pytest.mark.unit
def test_read_columns_duplicate_header() -> None:
    with pytest.raises(click.ClickException, match="Duplicate"):
        read_columns(io.BytesIO(b"a\ta\n1\t2\n"))


@pytest.mark.unit
@pytest.mark.parametrize(
    "data, expected",
    [(b"", 0), (b"a\n", 1), (b"a\nb", 2), (b"a\nb\n", 2), (b"\n", 1)],
)
def test_count_lines(data: bytes, expected: int) -> None:
    assert count_lines(data) == expected


@pytest.mark.integration
def test_encode_command(runner: CliRunner, tmp_path) -> None:
    source = tmp_path / "data.tsv"
    source.write_bytes(b"x\ty\n1\ta\n2\tb\n")
    target = tmp_path / "data.bin"

    result = runner.invoke(cli, ["encode", str(source), "-o", str(target)])

    assert result.exit_code == 0, result.output
    obj = unserialize(target.read_bytes())
    assert obj.names == [b"x", b"y"]
    assert obj.columns[0].values == [1, 2]
    assert obj.columns[1].values == [b"a", b"b"]


@pytest.mark.integration
def test_encode_command_with_yaml_config(runner: CliRunner, tmp_path) -> None:
    source = tmp_path / "data.csv"
    source.write_bytes(b"v\n0.25\n")
    config = tmp_path / "rserial.yaml"
    config.write_text("encoder:\n  format_version: 3\n")
    target = tmp_path / "data.bin"

    result = runner.invoke(
        cli,
        ["encode", str(source), "-o", str(target), "--config", str(config), "-d", ","],
    )

    assert result.exit_code == 0, result.output
    obj = unserialize(target.read_bytes())
    assert obj.version == 3
    assert obj.columns[0].values == [0.25]


@pytest.mark.integration
def test_tsv_command(runner: CliRunner, tmp_path) -> None:
    source = tmp_path / "rows.tsv"
    source.write_bytes(b"a\t1\nb\t2\n")
    target = tmp_path / "rows.out"

    result = runner.invoke(cli, ["tsv", str(source), "-o", str(target)])

    assert result.exit_code == 0, result.output
    assert target.read_bytes() == b"2\na\t1\nb\t2\n"


@pytest.mark.integration
def test_tsv_command_empty_input(runner: CliRunner, tmp_path) -> None:
    source = tmp_path / "empty.tsv"
    source.write_bytes(b"")
    target = tmp_path / "empty.out"

    result = runner.invoke(cli, ["tsv", str(source), "-o", str(target)])

    assert result.exit_code == 0, result.output
    assert target.read_bytes() == b"0\n"


@pytest.mark.unit
def test_invalid_log_level(runner: CliRunner, tmp_path) -> None:
    source = tmp_path / "rows.tsv"
    source.write_bytes(b"a\n")

    result = runner.invoke(cli, ["--log-level", "LOUD", "tsv", str(source)])

    assert result.exit_code != 0
    assert isinstance(result.exception, ValueError)
