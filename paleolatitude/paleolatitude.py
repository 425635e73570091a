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
import enum
import logging
from typing import List, Optional

from . import io
from .apwp import PolarWanderPaths
from .euler import EulerPoleTable
from .exceptions import (
    ParameterValidationError,
    ResultNotComputedError,
    UnconstrainedPlateError,
)
from .geomath import compute_paleolatitude_range
from .parameters import QueryParameters
from .plates import Plate, PlateCollection
from .result import (
    ANCHOR_PLATE_ID,
    PaleoLatitudeEntry,
    aggregate_entries,
    interpolate_entries,
    sort_entries,
)

# plate ID of the areas without a tectonic reconstruction (mobile belts)
UNCONSTRAINED_PLATE_ID = 1001


class ComputationState(enum.Enum):
    """The stages of a paleolatitude computation. A failure at any stage aborts the computation."""

    CREATED = "created"
    VALIDATED = "validated"
    PLATE_RESOLVED = "plate_resolved"
    AGES_RESOLVED = "ages_resolved"
    PER_AGE_COMPUTED = "per_age_computed"
    INTERPOLATED = "interpolated"
    FINALIZED = "finalized"


class PaleoLatitude(object):
    """Compute the paleolatitude of a site, at an age or over an age window.

    The plate the site is located on is found first. The Euler rotations of that plate, relative
    to a reference plate, are then applied to the apparent polar wander path of the reference
    plate. The angular distance between the site and the rotated pole gives the paleolatitude,
    and the A95 of the pole gives its uncertainty bounds. Values at ages between tabulated ages
    are interpolated.

    The tables and plates are read-only, so one instance can answer many sequential queries.
    Each call of :meth:`compute` replaces the previous result.

    Parameters
    ----------
    plates : PlateCollection
        The plate polygons.
    euler_table : EulerPoleTable
        The Euler rotations of the plates.
    apwp_table : PolarWanderPaths
        The apparent polar wander paths of the reference plates.
    anchor_plate_id : int, default=701
        At equal ages, results computed relative to this plate are listed first.
    unconstrained_plate_id : int, default=1001
        Sites on this plate have no reconstruction and cannot be computed.
    logger : logging.Logger, optional
        Defaults to the "paleolatitude" logger.
    """

    def __init__(
        self,
        plates: PlateCollection,
        euler_table: EulerPoleTable,
        apwp_table: PolarWanderPaths,
        *,
        anchor_plate_id=ANCHOR_PLATE_ID,
        unconstrained_plate_id=UNCONSTRAINED_PLATE_ID,
        logger: Optional[logging.Logger] = None,
    ):
        self.plates = plates
        self.euler_table = euler_table
        self.apwp_table = apwp_table
        self.anchor_plate_id = anchor_plate_id
        self.unconstrained_plate_id = unconstrained_plate_id
        self.logger = logger if logger is not None else logging.getLogger("paleolatitude")

        self.state = ComputationState.CREATED
        self.error_message = None
        self._params: Optional[QueryParameters] = None
        self._plate: Optional[Plate] = None
        self._result: List[PaleoLatitudeEntry] = []

    @classmethod
    def from_files(cls, apwp_csv, euler_csv, plates_file, plate_kwargs=None, **kwargs):
        """read the tables and plates from files, see :mod:`paleolatitude.io`

        :param plate_kwargs: keyword arguments of the PlateCollection (e.g. ray_targets)
        :param kwargs: keyword arguments of the constructor
        """
        apwp_table = io.read_apwp_csv(apwp_csv)
        plates = io.read_plates(plates_file, **(plate_kwargs or {}))
        euler_table = io.read_euler_csv(euler_csv)
        return cls(plates, euler_table, apwp_table, **kwargs)

    def _fail(self, message):
        self.error_message = message
        self.logger.error(message)
        return False

    def compute_for_age(self, site, plate, age) -> List[PaleoLatitudeEntry]:
        """compute the paleolatitude of a site on a plate at a tabulated age (Myr)

        :returns: one entry per Euler rotation of the plate at that age (two at a cross-over),
            each computed relative to the rotation's reference plate
        :raises DataNotFoundError: if the rotation or the reference pole is missing
        """
        self.logger.debug(f"Calculating paleolatitude for (lat,lon)=({site}) for age={age}")
        res = []
        for euler_entry in self.euler_table.entries_for(plate, age):
            apwp_entry = self.apwp_table.entry_for(euler_entry.reference_plate_id, age)
            palat_min, palat, palat_max = compute_paleolatitude_range(
                site, euler_entry, apwp_entry
            )
            res.append(
                PaleoLatitudeEntry.at_age(
                    age, palat_min, palat, palat_max, euler_entry.reference_plate_id
                )
            )
        return res

    def compute(self, params: QueryParameters) -> bool:
        """Compute the paleolatitude for the query.

        Invalid parameters, a site on the unconstrained plate, or no rotation data for the age
        window make this return False; the reason is kept in `error_message`.

        :raises DataNotFoundError: if the site is on no plate, or data is missing
        :raises AmbiguousLocationError: if the site's plate cannot be determined
        :raises InterpolationError: if a value must be interpolated across a reference plate switch
        :raises GeometryConsistencyError: if the rotation math fails its self-check
        """
        self.state = ComputationState.CREATED
        self.error_message = None
        self._params = None
        self._plate = None
        self._result = []

        try:
            params.validate()
        except ParameterValidationError as e:
            return self._fail(str(e))
        self.state = ComputationState.VALIDATED

        site = params.site
        plate = self.plates.find_plate(site)
        self.logger.info(
            f"Site {site} (lat,lon) is located on plate '{plate.name}' (id: {plate.id})"
        )
        if plate.id == self.unconstrained_plate_id:
            return self._fail(str(UnconstrainedPlateError(plate)))
        self.state = ComputationState.PLATE_RESOLVED

        min_age, max_age = params.get_age_window()
        ages = self.euler_table.relevant_ages(plate, min_age, max_age)
        if not ages:
            return self._fail(
                f"Insufficient data available to compute paleolatitude for site ({site}) on plate "
                f"{plate.name} (id: {plate.id}) for the requested age(s). Maybe try computing for all ages?"
            )
        self.logger.info(
            "Computing lower and upper bound of paleolatitude for the following ages: "
            + " ".join(str(a) for a in ages)
        )
        self.state = ComputationState.AGES_RESOLVED

        entries = []
        for age in ages:
            entries.extend(self.compute_for_age(site, plate, age))
        entries = sort_entries(entries, self.anchor_plate_id)
        self.state = ComputationState.PER_AGE_COMPUTED

        interpolated = interpolate_entries(entries, params.get_target_ages_in_years())
        if interpolated:
            entries = sort_entries(entries + interpolated, self.anchor_plate_id)
        self.state = ComputationState.INTERPOLATED

        for entry in entries:
            self.logger.info(str(entry))

        self._params = params
        self._plate = plate
        self._result = entries
        self.state = ComputationState.FINALIZED
        return True

    def _require_result(self):
        if self.state != ComputationState.FINALIZED:
            raise ResultNotComputedError()

    def get_relevant_entries(self) -> List[PaleoLatitudeEntry]:
        """all entries of the last computation, sorted by age"""
        self._require_result()
        return list(self._result)

    def get_paleolatitude(self) -> PaleoLatitudeEntry:
        """Return the aggregated result of the last computation: the overall bounds of the age
        window and, when a single age was requested, the paleolatitude at that age.
        """
        self._require_result()
        return aggregate_entries(self._result, self._params.get_age_in_years())

    def get_paleolatitude_bounds(self):
        """(min, max) paleolatitude over the whole age window of the last computation"""
        self._require_result()
        aggr = aggregate_entries(self._result)
        return aggr.palat_min, aggr.palat_max

    def get_plate(self) -> Plate:
        """the plate the site of the last computation is located on"""
        self._require_result()
        return self._plate

    get_resolved_plate = get_plate

    def get_parameters(self) -> QueryParameters:
        self._require_result()
        return self._params

    def write_csv(self, output):
        io.write_csv(self.get_relevant_entries(), self.plates, output)

    def write_kml(self, output):
        io.write_kml(self.get_parameters().site, self.plates, self.get_plate(), output)

    def format_machine_readable(self) -> str:
        return io.format_machine_readable(
            self.get_parameters().site, self.get_plate(), self.get_relevant_entries(), self.plates
        )
