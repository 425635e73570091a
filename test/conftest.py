import os

import numpy as np
import pytest

import paleolatitude
from paleolatitude import (
    APWPEntry,
    EulerPoleEntry,
    EulerPoleTable,
    PaleoLatitude,
    Plate,
    PlateCollection,
    PolarWanderPaths,
)

## ==========================

# We will test the paleolatitude computation on a small synthetic data set shaped like the
# reference data: an African plate (701, the anchor plate) with rotations relative to itself,
# a North American plate (101) whose rotations switch reference plate at 50 Ma, an
# unconstrained plate (1001) and a pair of nested plates (301, 302).
cape_town = (-33.925278, 18.423889)  # (lat, lon) on plate 701
north_america_site = (40.0, -100.0)  # on plate 101
unconstrained_site = (32.0, 70.0)  # on plate 1001
nested_site = (52.0, 40.0)  # on plate 302, which is nested in plate 301
ocean_site = (0.0, -30.0)  # not on any plate

anchor_ages = list(range(0, 201, 10))
north_america_ages = [0, 10, 20, 30, 40, 50, 60]


def box_polygon(lat_min, lat_max, lon_min, lon_max, step=1.0):
    """a closed ring (lat, lon) along the borders of a lat/lon box, with a vertex every `step` degrees"""
    lons = np.arange(lon_min, lon_max, step)
    lats = np.arange(lat_min, lat_max, step)
    ring = (
        [(lat_min, lon) for lon in lons]
        + [(lat, lon_max) for lat in lats]
        + [(lat_max, lon) for lon in lons[::-1] + step]
        + [(lat, lon_min) for lat in lats[::-1] + step]
    )
    return [(float(lat), float(lon)) for lat, lon in ring]


def get_test_plates():
    return [
        Plate(701, "Africa", box_polygon(-36, -10, 10, 42)),
        Plate(101, "North America", box_polygon(30, 60, -120, -80)),
        Plate(1001, "Unconstrained (Tibet)", box_polygon(25, 40, 60, 80)),
        Plate(301, "Outer plate", box_polygon(40, 70, 20, 60)),
        Plate(302, "Inner plate", box_polygon(50, 55, 35, 45)),
    ]


def get_test_euler_entries():
    entries = [EulerPoleEntry(701, age, 0.0, 0.0, 0.0, 701) for age in anchor_ages]
    for age in [0, 10, 20, 30, 40, 50]:
        entries.append(EulerPoleEntry(101, age, 80.0, 20.0, -0.3 * age, 701))
    # cross-over: from 50 Ma on, North America uses its own polar wander path
    entries.append(EulerPoleEntry(101, 50, 0.0, 0.0, 0.0, 101))
    entries.append(EulerPoleEntry(101, 60, 0.0, 0.0, 0.0, 101))
    return entries


def get_test_apwp_entries():
    entries = [
        APWPEntry(701, age, 2.0 + age / 100, 90.0 - 0.03 * age, 1.5 * age)
        for age in anchor_ages
    ]
    entries.append(APWPEntry(101, 50, 3.0, 85.0, 200.0))
    entries.append(APWPEntry(101, 60, 3.5, 84.0, 210.0))
    return entries


def write_euler_csv(filename, entries):
    with open(filename, "w") as f:
        f.write("plate_id;age;latitude;longitude;rotation;relative_to\n")
        for e in entries:
            f.write(";".join(str(v) for v in e) + "\n")


def write_apwp_csv(filename, entries):
    with open(filename, "w") as f:
        f.write("plate_id,age,a95,latitude,longitude\n")
        for e in entries:
            f.write(",".join(str(v) for v in e) + "\n")


def write_plates_kml(filename, plates):
    placemarks = []
    for plate in plates:
        coords = " ".join(f"{lon},{lat},0" for lat, lon in plate.coordinates)
        placemarks.append(
            f"""  <Placemark>
   <name>{plate.name}</name>
   <ExtendedData><SchemaData schemaUrl="#plates">
    <SimpleData name="PLATEID1">{plate.id}</SimpleData>
   </SchemaData></ExtendedData>
   <MultiGeometry><Polygon><outerBoundaryIs><LinearRing>
    <coordinates>{coords}</coordinates>
   </LinearRing></outerBoundaryIs></Polygon></MultiGeometry>
  </Placemark>"""
        )
    with open(filename, "w") as f:
        f.write('<?xml version="1.0" encoding="utf-8"?>\n')
        f.write('<kml xmlns="http://www.opengis.net/kml/2.2">\n <Document>\n')
        f.write("\n".join(placemarks))
        f.write("\n </Document>\n</kml>\n")


@pytest.fixture(scope="module")
def test_plates():
    return PlateCollection(get_test_plates())


@pytest.fixture(scope="module")
def test_euler_table():
    return EulerPoleTable(get_test_euler_entries())


@pytest.fixture(scope="module")
def test_apwp_table():
    return PolarWanderPaths(get_test_apwp_entries())


@pytest.fixture(scope="module")
def test_paleolatitude(test_plates, test_euler_table, test_apwp_table):
    return PaleoLatitude(test_plates, test_euler_table, test_apwp_table)


@pytest.fixture(scope="module")
def test_data_dir(tmp_path_factory):
    """a data directory with the "test" data source"""
    data_dir = tmp_path_factory.mktemp("data")
    write_euler_csv(os.path.join(data_dir, "euler-test.csv"), get_test_euler_entries())
    write_apwp_csv(os.path.join(data_dir, "apwp-test.csv"), get_test_apwp_entries())
    write_plates_kml(os.path.join(data_dir, "plates.kml"), get_test_plates())
    return str(data_dir)
