import io as _io
import os
import xml.etree.ElementTree as ET

import pygplates
import pytest

from paleolatitude import PaleoLatitudeEntry, io
from paleolatitude.exceptions import DataFileParseError
from paleolatitude.geomath import INVALID_LATITUDE

from conftest import (
    box_polygon,
    cape_town,
    get_test_euler_entries,
    get_test_plates,
    write_euler_csv,
    write_plates_kml,
)

## ==========================


def _write(tmp_path, name, text):
    filename = os.path.join(tmp_path, name)
    with open(filename, "w") as f:
        f.write(text)
    return filename


def test_read_euler_csv(tmp_path):
    filename = os.path.join(tmp_path, "euler.csv")
    write_euler_csv(filename, get_test_euler_entries())
    table = io.read_euler_csv(filename)
    assert table.all_entries() == get_test_euler_entries()
    assert table.source == filename


def test_csv_headers_and_separators(tmp_path):
    filename = _write(
        tmp_path,
        "apwp.csv",
        "# apparent polar wander path\n"
        "plate;age;a95;lat;lon\n"
        "701,0;2.5,-88.0;10.5\n"
        "\n"
        "701;10;3.0;-87.5;12\n",
    )
    df = io.read_csv_table(filename, io.APWP_SCHEMA)
    assert df["age"].tolist() == [0, 10]
    assert df["line_no"].tolist() == [3, 5]
    assert df["latitude"].tolist() == [-88.0, -87.5]

    table = io.read_apwp_csv(filename)
    assert table.entry_for(701, 10).a95 == 3.0


@pytest.mark.parametrize(
    "text,message",
    [
        ("a;b;c;d;e\n701;0;2.5;-88.0;10.5\n701;10;3.0;-87.5;12\n701;20;3.0\n", "line 4"),
        ("701;0;2.5;-88.0;10.5\nplate;age;a95;lat;lon\n", "line 2"),
        ("701;0;2.5;-88.0;10.5\n701;10;2.5;-88.0;10.5\n701;-10;2.5;-88.0;10.5\n", "line 3"),
        ("header\nheader\nheader\n701;0;2.5;-88.0;10.5\n", "line 3"),
        ("plate;age;a95;lat;lon\n", "no valid comma-separated lines"),
    ],
)
def test_csv_parse_errors(tmp_path, text, message):
    filename = _write(tmp_path, "apwp.csv", text)
    with pytest.raises(DataFileParseError, match=message):
        io.read_apwp_csv(filename)


def test_missing_files(tmp_path):
    with pytest.raises(DataFileParseError, match="does not exist"):
        io.read_euler_csv(os.path.join(tmp_path, "missing.csv"))
    with pytest.raises(DataFileParseError, match="does not exist"):
        io.read_plates(os.path.join(tmp_path, "missing.gpml"))


def test_unsupported_plates_format(tmp_path):
    filename = _write(tmp_path, "plates.shp", "")
    with pytest.raises(DataFileParseError, match="Unsupported file format"):
        io.read_plates(filename)


def test_read_plates_kml(tmp_path):
    filename = os.path.join(tmp_path, "plates.kml")
    write_plates_kml(filename, get_test_plates())
    plates = io.read_plates(filename)
    assert [p.id for p in plates] == [701, 101, 1001, 301, 302]
    assert plates.get_plate_name(701) == "Africa"
    assert plates.find_plate(cape_town).id == 701
    africa = plates.get_plates()[0]
    assert africa.coordinates == get_test_plates()[0].coordinates


def test_read_plates_kml_without_plate_id(tmp_path):
    filename = _write(
        tmp_path,
        "plates.kml",
        '<?xml version="1.0" encoding="utf-8"?>\n'
        "<kml><Document><Placemark><name>No ID</name>"
        "<Polygon><outerBoundaryIs><LinearRing><coordinates>0,0 1,0 1,1</coordinates>"
        "</LinearRing></outerBoundaryIs></Polygon></Placemark></Document></kml>\n",
    )
    assert io.read_plates_kml(filename) == []
    with pytest.raises(DataFileParseError, match="No plate polygons"):
        io.read_plates(filename)


def test_read_plates_gpml(tmp_path):
    features = []
    for plate in get_test_plates()[:2]:
        feature = pygplates.Feature()
        feature.set_name(plate.name)
        feature.set_reconstruction_plate_id(plate.id)
        feature.set_geometry(pygplates.PolygonOnSphere([(lat, lon) for lat, lon in plate.coordinates]))
        features.append(feature)
    # a feature without a plate ID is ignored
    feature = pygplates.Feature()
    feature.set_name("No plate ID")
    feature.set_geometry(pygplates.PolygonOnSphere(box_polygon(0, 5, 0, 5)))
    features.append(feature)

    filename = os.path.join(tmp_path, "plates.gpml")
    pygplates.FeatureCollection(features).write(filename)

    plates = io.read_plates(filename)
    assert [p.id for p in plates] == [701, 101]
    assert plates.get_plate_name(101) == "North America"
    assert plates.find_plate(cape_town).id == 701


def test_write_csv(test_plates):
    entries = [
        PaleoLatitudeEntry.at_age(50, -36.1, -34.2, -32.3, 701),
        PaleoLatitudeEntry(55_000_000, 55_000_000, 55_000_000, INVALID_LATITUDE, -34.0, INVALID_LATITUDE, 999, True),
    ]
    output = _io.StringIO()
    io.write_csv(entries, test_plates, output)
    lines = output.getvalue().splitlines()
    assert lines[0] == "age;latitude;lower bound;upper bound;interpolated;relative_to"
    assert lines[1] == "50.00;-34.20000;-36.10000;-32.30000;0;Africa (701)"
    assert lines[2] == "55.00;-34.00000;;;1;Plate 999"


def test_write_kml(tmp_path, test_plates):
    africa = test_plates.get_plates()[0]
    filename = os.path.join(tmp_path, "site.kml")
    io.write_kml(cape_town, test_plates, africa, filename)

    root = ET.parse(filename).getroot()
    placemarks = [e for e in root.iter() if e.tag.endswith("Placemark")]
    assert len(placemarks) == 1 + len(test_plates)
    colours = [e.text for e in root.iter() if e.tag.endswith("color")]
    assert colours.count(io.SITE_PLATE_COLOUR) == 1
    assert colours.count(io.DEFAULT_PLATE_COLOUR) == len(test_plates) - 1

    text = io.kml_to_string(io.build_kml(cape_town, test_plates, africa))
    assert text.startswith("<?xml")
    assert f"{cape_town[1]},{cape_town[0]}" in text


def test_machine_readable(test_plates):
    africa = test_plates.get_plates()[0]
    entries = [PaleoLatitudeEntry.at_age(50, -36.1, -34.2, -32.3, 701)]
    text = io.format_machine_readable(cape_town, africa, entries, test_plates)
    lines = text.splitlines()
    assert lines[:5] == [
        "#latitude:-33.925278",
        "#longitude:18.423889",
        "#plate_name:Africa",
        "#plate_id:701",
        "#CSV",
    ]
    assert "#KML" in lines
    assert "50.00;-34.20000;-36.10000;-32.30000;0;Africa (701)" in lines
