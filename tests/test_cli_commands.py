import json

import numpy as np
from typer.testing import CliRunner

from chronoprop.cli import app

runner = CliRunner()


def make_document(tmp_path):
    packets = [
        {
            "id": "gauge",
            "scale": {"epoch": "1970-01-01T00:00:00Z", "number": [0, 0.0, 100, 10.0]},
        },
        {
            "id": "lamp",
            "availability": "1970-01-01T00:00:00Z/1970-01-01T00:01:00Z",
            "color": {"rgba": [255, 0, 0, 255]},
        },
    ]
    path = tmp_path / "doc.json"
    path.write_text(json.dumps(packets))
    return path


def test_summary(tmp_path):
    doc = make_document(tmp_path)
    result = runner.invoke(app, ["summary", str(doc)])
    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == "gauge"
    assert "  scale: number, 1 interval(s), 2 sample(s)" in lines
    assert "lamp" in lines
    assert "  availability: 1970-01-01T00:00:00Z / 1970-01-01T00:01:00Z" in lines


def test_query_interpolates(tmp_path):
    doc = make_document(tmp_path)
    result = runner.invoke(app, ["query", str(doc), "gauge", "scale", "50"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "5.0"


def test_query_outside_availability(tmp_path):
    doc = make_document(tmp_path)
    result = runner.invoke(app, ["query", str(doc), "lamp", "color", "1970-01-01T00:00:30Z"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "1.0 0.0 0.0 1.0"

    result = runner.invoke(app, ["query", str(doc), "lamp", "color", "1970-01-01T01:00:00Z"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "no value"


def test_query_unknown_property(tmp_path):
    doc = make_document(tmp_path)
    result = runner.invoke(app, ["query", str(doc), "gauge", "color", "0"])
    assert result.exit_code != 0


def test_sample_with_override(tmp_path):
    doc = make_document(tmp_path)
    result = runner.invoke(
        app,
        ["--set", "timestamp.output_format=seconds", "sample", str(doc), "gauge", "scale", "0", "100", "-s", "50"],
    )
    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ["0.0 0.0", "50.0 5.0", "100.0 10.0"]


def test_sample_to_csv(tmp_path):
    doc = make_document(tmp_path)
    out = tmp_path / "rows.csv"
    result = runner.invoke(app, ["sample", str(doc), "gauge", "scale", "0", "100", "-s", "25", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "Saved 5 row(s)" in result.stdout
    rows = np.loadtxt(out, delimiter=",")
    assert rows.shape == (5, 2)
    assert np.allclose(rows[:, 1], [0.0, 2.5, 5.0, 7.5, 10.0])


def test_bad_override_rejected(tmp_path):
    doc = make_document(tmp_path)
    result = runner.invoke(app, ["--set", "interpolation.nope=1", "summary", str(doc)])
    assert result.exit_code != 0
    result = runner.invoke(app, ["--set", "interpolation.degree=0", "summary", str(doc)])
    assert result.exit_code != 0


def test_config_file(tmp_path):
    doc = make_document(tmp_path)
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("timestamp:\n  output_format: seconds\n")
    result = runner.invoke(app, ["--config", str(cfg), "summary", str(doc)])
    assert result.exit_code == 0, result.output
    assert "  availability: 0.0 / 60.0" in result.stdout.splitlines()
