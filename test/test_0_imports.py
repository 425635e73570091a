import pytest

## ==========================

def test_numpy_import():
    import numpy
    return

def test_pandas_import():
    import pandas
    print("\t\t You have pandas version {}".format(pandas.__version__))


def test_yaml_import():
    import yaml


def test_pygplates_import():
    import pygplates


def test_paleolatitude_modules():
    import paleolatitude
    from paleolatitude import data
    from paleolatitude import geomath
    from paleolatitude import io
    from paleolatitude import spatial
    from paleolatitude.commands import about, check_data, compute, list_data

    assert paleolatitude.__version__
