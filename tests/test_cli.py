"""Tests for the powert command line."""

import numpy as np
from typer.testing import CliRunner

from powert_core.analysis.decay import DecaySeries
from powert_core.cli.main import app
from powert_core.io import load_params_csv, read_decay_file, write_decay_file

runner = CliRunner()


def _write_power_law(path, amplitude=500.0, exponent=0.5):
    times = np.logspace(-2, 3, 200)
    write_decay_file(path, DecaySeries(times, amplitude / (1.0 + times) ** exponent))
    return path


def test_estimate(tmp_path):
    first = _write_power_law(tmp_path / "10us.csv")
    second = _write_power_law(tmp_path / "2us.csv", amplitude=800.0)
    output = tmp_path / "params.csv"

    result = runner.invoke(app, ["estimate", str(first), str(second), "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert "Name\tA0\tA\tα\tAT\tτt" in result.output
    # natural order: 2us before 10us
    assert [name for name, _ in load_params_csv(output)] == ["2us", "10us"]


def test_estimate_shares_alpha_unless_configured(tmp_path):
    first = _write_power_law(tmp_path / "a.csv", exponent=0.5)
    second = _write_power_law(tmp_path / "b.csv", exponent=1.5)
    output = tmp_path / "params.csv"
    config = tmp_path / "powert.yaml"
    config.write_text("workspace:\n  sync_alpha: false\n")

    result = runner.invoke(app, ["estimate", str(first), str(second), "-o", str(output)])
    assert result.exit_code == 0, result.output
    shared = [params.alpha for _, params in load_params_csv(output)]

    result = runner.invoke(
        app, ["estimate", str(first), str(second), "-o", str(output), "-c", str(config)]
    )
    assert result.exit_code == 0, result.output
    separate = [params.alpha for _, params in load_params_csv(output)]

    assert shared[0] == shared[1]
    assert separate[0] != separate[1]


def test_estimate_undecodable_file(tmp_path):
    path = tmp_path / "binary.csv"
    path.write_bytes(b"0.1,100\n\xff\xfe,50\n")

    result = runner.invoke(app, ["estimate", str(path)])

    assert result.exit_code == 1
    assert "Failed to load file" in result.output


def test_estimate_bad_file(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("1,2\nbroken\n")

    result = runner.invoke(app, ["estimate", str(path)])

    assert result.exit_code == 1


def test_fit_with_fixed_parameter(tmp_path):
    path = _write_power_law(tmp_path / "decay.csv")

    result = runner.invoke(app, ["fit", str(path), "--fix", "tau_t"])

    assert result.exit_code == 0, result.output
    assert "decay:" in result.output


def test_fit_unknown_parameter(tmp_path):
    path = _write_power_law(tmp_path / "decay.csv")
    result = runner.invoke(app, ["fit", str(path), "--fix", "beta"])
    assert result.exit_code == 1


def test_evaluate_with_override(tmp_path):
    path = _write_power_law(tmp_path / "decay.csv")
    output = tmp_path / "fitted.csv"

    result = runner.invoke(
        app, ["evaluate", str(path), "-o", str(output), "--a0", "500", "--a", "1",
              "--alpha", "0.5", "--at", "0"]
    )

    assert result.exit_code == 0, result.output
    assert "500 / ((1 + 1 * x) ^ 0.5) + 0 * exp(-x / 0.3)" in result.output
    fitted = read_decay_file(output)
    source = read_decay_file(path)
    np.testing.assert_allclose(fitted.signals, source.signals)


def test_concatenate(tmp_path):
    for name, step in (("1us", 1e-8), ("10us", 1e-7)):
        folder = tmp_path / name
        folder.mkdir()
        times = np.arange(200) * step
        b = np.zeros(200)
        write_decay_file(folder / f"{name}-a-b.csv", DecaySeries(times, -1e-3 / (1.0 + times * 1e6)))
        write_decay_file(folder / f"{name}-b.csv", DecaySeries(times, b))
    output = tmp_path / "joined.csv"

    result = runner.invoke(
        app, ["concatenate", str(tmp_path / "10us"), str(tmp_path / "1us"), "-o", str(output)]
    )

    assert result.exit_code == 0, result.output
    joined = read_decay_file(output)
    assert np.all(np.diff(joined.times) > 0)
    assert joined.signal_min > 0
