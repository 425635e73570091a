import os

import pytest

from paleolatitude import APWPEntry, EulerPoleEntry, EulerPoleTable, PolarWanderPaths, data
from paleolatitude.exceptions import DataNotFoundError

from conftest import get_test_apwp_entries, get_test_euler_entries

## ==========================


def _touch(directory, *names):
    for name in names:
        with open(os.path.join(directory, name), "w") as f:
            f.write("")


def test_known_data_sources(test_data_dir):
    sources = data.get_known_data_sources(test_data_dir)
    assert list(sources) == ["test"]
    source = sources["test"]
    assert source.apwp_csv == os.path.join(test_data_dir, "apwp-test.csv")
    assert source.euler_csv == os.path.join(test_data_dir, "euler-test.csv")
    assert source.plates_file == os.path.join(test_data_dir, "plates.kml")


def test_euler_table_prefix(tmp_path):
    _touch(
        tmp_path,
        "apwp-torsvik-2012-vandervoo-2015.csv",
        "apwp-torsvik-2012.csv",
        "apwp-lonely.csv",
        "euler-torsvik.csv",
        "euler-torsvik-2012.csv",
        "README.txt",
    )
    sources = data.get_known_data_sources(tmp_path)
    assert sorted(sources) == ["torsvik-2012", "torsvik-2012-vandervoo-2015"]
    assert sources["torsvik-2012-vandervoo-2015"].euler_csv.endswith("euler-torsvik-2012.csv")
    assert sources["torsvik-2012"].euler_csv.endswith("euler-torsvik-2012.csv")
    assert sources["torsvik-2012"].plates_file is None


def test_data_dir_from_environment(monkeypatch, test_data_dir):
    monkeypatch.setenv(data.DATA_DIR_ENV_VAR, test_data_dir)
    assert data.get_data_dir() == test_data_dir
    assert data.get_data_dir("elsewhere") == "elsewhere"
    assert data.get_data_source("test").name == "test"

    monkeypatch.delenv(data.DATA_DIR_ENV_VAR)
    assert data.get_data_dir() == data.DEFAULT_DATA_DIR


def test_unknown_data_source(test_data_dir, tmp_path):
    with pytest.raises(DataNotFoundError, match="available: test"):
        data.get_data_source("no-such-source", test_data_dir)
    assert data.get_known_data_sources(os.path.join(tmp_path, "missing")) == {}


def test_consistent_data(test_euler_table, test_apwp_table):
    assert data.check_data_consistency(test_euler_table, test_apwp_table) == ([], [])


def test_inconsistent_data():
    euler_table = EulerPoleTable(
        get_test_euler_entries()
        + [
            EulerPoleEntry(201, 10, 0.0, 0.0, 150.0, 701),  # rotation out of range
            EulerPoleEntry(202, 10, 0.0, 0.0, 0.0, 555),  # no polar wander path for 555
        ]
    )
    apwp_table = PolarWanderPaths(
        get_test_apwp_entries() + [APWPEntry(999, 10, 2.0, 80.0, 400.0)]
    )
    errors, warnings = data.check_data_consistency(euler_table, apwp_table)
    assert len(errors) == 3
    assert any("plate 555" in e for e in errors)
    assert any("rotation 150.0" in e for e in errors)
    assert any("longitude 400.0" in e for e in errors)
    assert len(warnings) == 1
    assert "plate ID 999" in warnings[0]
