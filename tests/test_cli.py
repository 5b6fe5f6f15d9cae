"""Tests for the command line interface."""

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest
import yaml

from refrigerants import cli
from refrigerants.formulas import calculate_criteria
from refrigerants.freon import Freon, Refrigerant
from refrigerants.sweep import SWEEP_COLUMNS


def make_input(answers):
    """Input function returning the given answers in order"""
    answers = iter(answers)
    return lambda prompt="": next(answers)


def test_prompt_refrigerant_retries_until_valid(capsys):
    refrigerant = cli.prompt_refrigerant(make_input(["x", "7", "-1", "2"]))

    assert refrigerant is Refrigerant.R410
    captured = capsys.readouterr()
    assert captured.out.count("Select refrigerant:") == 4
    assert "0. R134" in captured.out
    assert "3. R32" in captured.out


def test_prompt_refrigerant_retries_on_non_ascii_digit(capsys):
    refrigerant = cli.prompt_refrigerant(make_input(["²", "0"]))

    assert refrigerant is Refrigerant.R134
    assert capsys.readouterr().out.count("Select refrigerant:") == 2


def test_prompt_diameter_converts_mm_to_m():
    answers = ["abc", "0", "-1", "inf", "0,5"]

    diameter = cli.prompt_diameter(make_input(answers))

    assert diameter == pytest.approx(5e-4)


def test_prompt_temperature_stays_in_range():
    t = cli.prompt_temperature(
        -30.0, 30.0, make_input(["warm", "31", "-30.5", "nan", "12.5"])
    )

    assert t == 12.5


def test_run_interactive(capsys):
    result = cli.run_interactive(make_input(["0", "0.5", "0"]))

    expected = calculate_criteria(Freon("R134", 0.0), 0.0005)
    assert result == expected
    captured = capsys.readouterr()
    assert "Archimedes criterion:" in captured.out
    assert "Reynolds criterion:" in captured.out
    assert f"{expected.drift_velocity}\n" in captured.out


def test_main_single_query(capsys):
    exit_code = cli.main(["-r", "R410", "-d", "0.5", "-t", "5"])

    assert exit_code == 0
    expected = calculate_criteria(Freon("R410", 5.0), 0.0005)
    captured = capsys.readouterr()
    assert f"{expected.archimedes}\n" in captured.out
    assert f"{expected.drift_velocity}\n" in captured.out


def test_main_incomplete_query():
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["-r", "R410", "-d", "0.5"])

    assert exc_info.value.code == 2


def test_main_out_of_range_temperature(capsys):
    exit_code = cli.main(["-r", "R32", "-d", "0.5", "-t", "45"])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert "Error:" in captured.err
    assert "45" in captured.err


def test_main_unknown_refrigerant(capsys):
    exit_code = cli.main(["-r", "R22", "-d", "0.5", "-t", "0"])

    assert exit_code == 1
    assert "Unknown refrigerant" in capsys.readouterr().err


def test_main_list(capsys):
    assert cli.main(["--list"]) == 0

    captured = capsys.readouterr()
    for refrigerant in Refrigerant:
        assert refrigerant.value in captured.out


def test_main_diameter_sweep_saves_csv(tmp_path, capsys):
    output = tmp_path / "sweep.csv"

    exit_code = cli.main(["--sweep", "diameter", "-t", "0", "-o", str(output)])

    assert exit_code == 0
    df = pd.read_csv(output)
    assert list(df.columns) == SWEEP_COLUMNS
    assert set(df["refrigerant"]) == {r.value for r in Refrigerant}
    captured = capsys.readouterr()
    assert captured.out.startswith("R134\n")
    assert "," in captured.out.splitlines()[1]


def test_main_diameter_sweep_requires_temperature():
    with pytest.raises(SystemExit):
        cli.main(["--sweep", "diameter"])


def test_main_temperature_sweep(capsys):
    exit_code = cli.main(["--sweep", "temperature", "-r", "R407", "-d", "1"])

    assert exit_code == 0
    captured = capsys.readouterr()
    lines = captured.out.splitlines()
    assert lines[0] == "t=-10"
    assert sum(line.startswith("t=") for line in lines) == 6


def test_main_spec_file(tmp_path, capsys):
    spec_path = tmp_path / "query.yaml"
    spec_path.write_text(
        yaml.dump(
            {
                "refrigerant": "R32",
                "temperature": {"value": 10, "units": "degC"},
                "drop_diameter": {"value": 1.0, "units": "mm"},
            }
        )
    )

    assert cli.main(["--spec", str(spec_path)]) == 0

    expected = calculate_criteria(Freon("R32", 10.0), 0.001)
    assert f"{expected.drift_velocity}\n" in capsys.readouterr().out


def test_main_spec_sweep(tmp_path):
    spec_path = tmp_path / "sweep.yaml"
    output = tmp_path / "sweep.csv"
    spec_path.write_text(
        yaml.dump(
            {
                "refrigerant": "R134",
                "sweep": {
                    "kind": "temperature",
                    "temperatures": {"start": 0, "end": 20, "step": 10},
                    "diameters": {"start": 0.5, "end": 1.0, "step": 0.5},
                },
            }
        )
    )

    assert cli.main(["--spec", str(spec_path), "-o", str(output)]) == 0

    df = pd.read_csv(output)
    assert len(df) == 3 * 2
    assert sorted(df["temperature_C"].unique()) == [0.0, 10.0, 20.0]


@pytest.mark.parametrize(
    "spec",
    [
        {"refrigerant": "R410", "temperature": 5, "drop_diameter": -0.5},
        {
            "refrigerant": "R410",
            "temperature": 5,
            "drop_diameter": {"value": 0.5, "units": "kg"},
        },
        {
            "refrigerant": "R410",
            "sweep": {
                "kind": "temperature",
                "temperatures": {"start": 20, "end": 10, "step": 5},
            },
        },
    ],
    ids=["negative_diameter", "wrong_units", "reversed_range"],
)
def test_main_spec_file_invalid(tmp_path, capsys, spec):
    """Invalid specs are reported on stderr with exit code 1"""
    spec_path = tmp_path / "query.yaml"
    spec_path.write_text(yaml.dump(spec))

    assert cli.main(["--spec", str(spec_path)]) == 1

    captured = capsys.readouterr()
    assert captured.err.startswith("Error: ")
    assert "criterion" not in captured.out
