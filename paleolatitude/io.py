#
#    Copyright (C) 2024-2025 The University of Sydney, Australia
#
#    This program is free software; you can redistribute it and/or modify it under
#    the terms of the GNU General Public License, version 2, as published by
#    the Free Software Foundation.
#
#    This program is distributed in the hope that it will be useful, but WITHOUT
#    ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or
#    FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License
#    for more details.
#
#    You should have received a copy of the GNU General Public License along
#    with this program; if not, write to Free Software Foundation, Inc.,
#    51 Franklin Street, Fifth Floor, Boston, MA  02110-1301, USA.
#

"""Readers and writers of the paleolatitude data files.

- Euler rotation and apparent polar wander path tables (CSV, ";" or "," separated)
- plate polygons (GPML through pygplates, or KML)
- results (CSV, KML and the "machine readable" text output)
"""

import logging
import os
import re
import xml.etree.ElementTree as ET
from typing import Callable, List, Sequence, Tuple

import pandas as pd
import pygplates

from .apwp import APWP_COLUMNS, PolarWanderPaths
from .euler import EULER_COLUMNS, EulerPoleTable
from .exceptions import DataFileParseError
from .plates import Coordinate, Plate, PlateCollection
from .result import is_valid_latitude

logger = logging.getLogger("paleolatitude")

# the first lines of a CSV file which may be a header (and are ignored when they do not parse)
MAX_HEADER_LINES = 2

KML_NAMESPACE = "http://www.opengis.net/kml/2.2"

# KML colours are aabbggrr
SITE_PLATE_COLOUR = "ff0000ff"
DEFAULT_PLATE_COLOUR = "440000ff"

CSV_OUTPUT_HEADER = ["age", "latitude", "lower bound", "upper bound", "interpolated", "relative_to"]


def _parse_uint(value: str) -> int:
    v = int(value)
    if v < 0:
        raise ValueError(f"negative value {v}")
    return v


EULER_SCHEMA: List[Tuple[str, Callable]] = list(
    zip(EULER_COLUMNS, [_parse_uint, _parse_uint, float, float, float, _parse_uint])
)
APWP_SCHEMA: List[Tuple[str, Callable]] = list(
    zip(APWP_COLUMNS, [_parse_uint, _parse_uint, float, float, float])
)


def read_csv_table(filename, schema) -> pd.DataFrame:
    """Decode a ";" or "," separated file into a DataFrame with one typed column per schema entry
    and a "line_no" column holding the source line of each row.

    Up to MAX_HEADER_LINES leading lines which do not fit the schema are ignored. Blank lines are
    skipped. Any other line which does not fit the schema is an error.

    :param filename: path of the CSV file
    :param schema: list of (column name, converter) tuples

    :raises DataFileParseError: if the file cannot be read, a line is malformed, or no data was found
    """
    if not os.path.isfile(filename):
        raise DataFileParseError(f"File '{filename}' does not exist or is not readable")

    rows = []
    try:
        with open(filename, "rt", encoding="utf-8-sig") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                values = re.split("[;,]", line)
                may_be_header = len(rows) == 0 and line_no <= MAX_HEADER_LINES
                if len(values) != len(schema):
                    if may_be_header:
                        logger.debug(f"Ignoring header line {line_no} of '{filename}'")
                        continue
                    raise DataFileParseError(
                        f"Parse error on line {line_no} of '{filename}': expecting "
                        f"{len(schema)} values, got {len(values)}"
                    )
                row = []
                for (name, converter), value in zip(schema, values):
                    try:
                        row.append(converter(value.strip()))
                    except ValueError:
                        if may_be_header:
                            break
                        raise DataFileParseError(
                            f"Parse exception on line {line_no} of '{filename}': unexpected string "
                            f"'{value}' for column '{name}'"
                        ) from None
                if len(row) != len(schema):
                    logger.debug(f"Ignoring header line {line_no} of '{filename}'")
                    continue
                rows.append(row + [line_no])
    except UnicodeDecodeError as e:
        raise DataFileParseError(f"Could not read '{filename}': {e}") from e

    if len(rows) == 0:
        raise DataFileParseError(
            f"Could not parse information from '{filename}': no valid comma-separated lines found"
        )

    columns = [name for name, _ in schema] + ["line_no"]
    return pd.DataFrame(rows, columns=columns)


def read_euler_csv(filename) -> EulerPoleTable:
    """read an Euler rotation table: plate_id, age, latitude, longitude, rotation, reference_plate_id"""
    logger.info(f"Reading Euler rotation data from {filename}...")
    df = read_csv_table(filename, EULER_SCHEMA)
    return EulerPoleTable.from_dataframe(df, source=str(filename))


def read_apwp_csv(filename) -> PolarWanderPaths:
    """read an apparent polar wander path table: plate_id, age, a95, latitude, longitude"""
    logger.info(f"Reading polar wander path data from {filename}...")
    df = read_csv_table(filename, APWP_SCHEMA)
    return PolarWanderPaths.from_dataframe(df, source=str(filename))


#
# plate polygons
#


def read_plates(filename, **kwargs) -> PlateCollection:
    """Read plate polygons from a GPML (.gpml, .gpmlz) or KML (.kml) file.
    Extra keyword arguments are passed to PlateCollection.

    :raises DataFileParseError: if the format is not supported or the file cannot be read
    """
    filename = str(filename)
    if not os.path.isfile(filename):
        raise DataFileParseError(f"File '{filename}' does not exist or is not readable")

    logger.info(f"Reading plate polygons from {filename}...")
    lower = filename.lower()
    if lower.endswith(".kml"):
        plates = read_plates_kml(filename)
    elif lower.endswith(".gpml") or lower.endswith(".gpmlz"):
        plates = read_plates_gpml(filename)
    else:
        raise DataFileParseError(
            f"Unsupported file format (expecting .kml, .gpml or .gpmlz): {filename}"
        )

    if len(plates) == 0:
        raise DataFileParseError(f"No plate polygons found in '{filename}'")
    return PlateCollection(plates, **kwargs)


def read_plates_gpml(filename) -> List[Plate]:
    """read the polygons of the features in a GPML file. Every polygon of a feature becomes a
    plate part. Features without a plate ID or a name are ignored."""
    try:
        features = pygplates.FeatureCollection(filename)
    except Exception as e:
        # pygplates file errors share no common base class
        raise DataFileParseError(f"Error reading plate polygons from '{filename}': {e}") from e

    plates = []
    for feature in features:
        plate_id = feature.get_reconstruction_plate_id(None)
        name = feature.get_name(None)
        if plate_id is None or plate_id == 0:
            logger.warning(f"Ignoring feature '{name}': unable to determine plate ID")
            continue
        if not name:
            logger.warning(f"Could not find name for plate '{plate_id}' in GPML file - ignoring plate")
            continue

        polygons = [
            g for g in feature.get_geometries() if isinstance(g, pygplates.PolygonOnSphere)
        ]
        if not polygons:
            logger.warning(
                f"Could not find polygon definition for plate '{name}' (id: {plate_id}) in GPML file - ignoring plate"
            )
            continue
        for polygon in polygons:
            plates.append(Plate(plate_id, name, polygon.to_lat_lon_list()))
    return plates


def _local_name(tag):
    return tag.rsplit("}", 1)[-1]


def _find_all(element, name):
    return [e for e in element.iter() if _local_name(e.tag) == name]


def _parse_kml_coordinates(text, filename) -> List[Coordinate]:
    coords = []
    for tuple_str in text.split():
        values = tuple_str.split(",")
        try:
            lon, lat = float(values[0]), float(values[1])
        except (ValueError, IndexError):
            raise DataFileParseError(
                f"Error parsing coordinate '{tuple_str}' in '{filename}'"
            ) from None
        coords.append(Coordinate(lat, lon))
    return coords


def read_plates_kml(filename) -> List[Plate]:
    """read the polygons of the Placemarks in a KML file. The plate ID is taken from the
    Placemark's SimpleData "PLATEID1", and polygons may be nested in a MultiGeometry."""
    try:
        root = ET.parse(filename).getroot()
    except ET.ParseError as e:
        raise DataFileParseError(f"Error reading polygons from KML file: {e} ({filename})") from e

    plates = []
    for placemark in _find_all(root, "Placemark"):
        name_elems = [c for c in placemark if _local_name(c.tag) == "name"]
        name = (name_elems[0].text or "").strip() if name_elems else ""

        plate_id = 0
        for sdata in _find_all(placemark, "SimpleData"):
            if sdata.get("name") == "PLATEID1":
                try:
                    plate_id = int((sdata.text or "").strip())
                except ValueError:
                    logger.warning(f"Ignoring plate '{name}': unable to parse plate ID")
                break
        if plate_id == 0:
            logger.warning(f"Ignoring plate '{name}': unable to determine plate ID")
            continue

        for polygon in _find_all(placemark, "Polygon"):
            for outer in _find_all(polygon, "outerBoundaryIs"):
                for coords in _find_all(outer, "coordinates"):
                    plates.append(
                        Plate(plate_id, name, _parse_kml_coordinates(coords.text or "", filename))
                    )
    return plates


#
# results
#


def _relative_to(plates, plate_id):
    if plate_id <= 0:
        return ""
    name = plates.get_plate_name(plate_id)
    if name == "":
        return f"Plate {plate_id}"
    return f"{name} ({plate_id})"


def results_to_dataframe(entries, plates) -> pd.DataFrame:
    """format the result entries as the strings of the CSV output"""
    rows = []
    for entry in entries:
        rows.append(
            [
                f"{entry.age_years / 1_000_000:.2f}",
                f"{entry.palat:.5f}",
                f"{entry.palat_min:.5f}" if is_valid_latitude(entry.palat_min) else "",
                f"{entry.palat_max:.5f}" if is_valid_latitude(entry.palat_max) else "",
                "1" if entry.is_interpolated else "0",
                _relative_to(plates, entry.computed_using_plate_id),
            ]
        )
    return pd.DataFrame(rows, columns=CSV_OUTPUT_HEADER)


def write_csv(entries, plates, output):
    """write the result entries as ";" separated CSV to a path or a text stream"""
    df = results_to_dataframe(entries, plates)
    if isinstance(output, (str, os.PathLike)):
        df.to_csv(output, sep=";", index=False, lineterminator="\n")
    else:
        output.write(df.to_csv(sep=";", index=False, lineterminator="\n"))


def _kml_placemark(parent, name, colour, coordinates):
    placemark = ET.SubElement(parent, "Placemark")
    ET.SubElement(placemark, "name").text = name
    style = ET.SubElement(placemark, "Style")
    ET.SubElement(ET.SubElement(style, "LineStyle"), "color").text = colour
    ET.SubElement(ET.SubElement(style, "PolyStyle"), "fill").text = "0"
    ring = ET.SubElement(
        ET.SubElement(ET.SubElement(placemark, "Polygon"), "outerBoundaryIs"), "LinearRing"
    )
    ET.SubElement(ring, "coordinates").text = " ".join(
        f"{c.longitude},{c.latitude}" for c in coordinates
    )


def build_kml(site, plates, site_plate=None) -> ET.ElementTree:
    """a KML document with the site and all plate parts; the site's plate is drawn in red"""
    site = Coordinate(*site)
    kml = ET.Element("kml", xmlns=KML_NAMESPACE)
    doc = ET.SubElement(kml, "Document")
    ET.SubElement(doc, "name").text = "paleolatitude.org"

    style = ET.SubElement(doc, "Style", id="paleolatitude_site_default")
    icon_style = ET.SubElement(style, "IconStyle")
    ET.SubElement(icon_style, "scale").text = "0.75"
    ET.SubElement(
        ET.SubElement(icon_style, "Icon"), "href"
    ).text = "http://maps.google.com/mapfiles/kml/shapes/target.png"

    style_map = ET.SubElement(doc, "StyleMap", id="paleolatitude_site")
    for key in ("normal", "highlight"):
        pair = ET.SubElement(style_map, "Pair")
        ET.SubElement(pair, "key").text = key
        ET.SubElement(pair, "styleUrl").text = "#paleolatitude_site_default"

    site_mark = ET.SubElement(doc, "Placemark")
    ET.SubElement(site_mark, "name").text = "Site location"
    ET.SubElement(site_mark, "open").text = "1"
    ET.SubElement(site_mark, "styleUrl").text = "#paleolatitude_site"
    ET.SubElement(
        ET.SubElement(site_mark, "Point"), "coordinates"
    ).text = f"{site.longitude},{site.latitude}"

    for plate in plates.get_plates():
        colour = SITE_PLATE_COLOUR if plate is site_plate else DEFAULT_PLATE_COLOUR
        _kml_placemark(doc, f"{plate.name} ({plate.id})", colour, plate.coordinates)

    tree = ET.ElementTree(kml)
    ET.indent(tree, space=" ")
    return tree


def write_kml(site, plates, site_plate, output):
    """write the KML document to a path or a text stream"""
    tree = build_kml(site, plates, site_plate)
    if isinstance(output, (str, os.PathLike)):
        tree.write(output, encoding="utf-8", xml_declaration=True)
    else:
        output.write(kml_to_string(tree))


def kml_to_string(tree) -> str:
    return (
        '<?xml version="1.0" encoding="utf-8" ?>\n'
        + ET.tostring(tree.getroot(), encoding="unicode")
        + "\n"
    )


def format_machine_readable(site, plate, entries, plates) -> str:
    """the output of --machine-readable: site and plate header lines, the CSV and the KML"""
    site = Coordinate(*site)
    lines = [
        f"#latitude:{site.latitude}",
        f"#longitude:{site.longitude}",
        f"#plate_name:{plate.name}",
        f"#plate_id:{plate.id}",
        "#CSV",
        results_to_dataframe(entries, plates)
        .to_csv(sep=";", index=False, lineterminator="\n")
        .rstrip("\n"),
        "",
        "#KML",
        kml_to_string(build_kml(site, plates, plate)).rstrip("\n"),
    ]
    return "\n".join(lines) + "\n"
