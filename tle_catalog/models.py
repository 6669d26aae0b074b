"""
TLE data models.

OrbitalRecord is the decoded form of one three-line element set. Python
attribute names describe the data; the JSON names (aliases) are the ones the
persisted cache snapshot has always used.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class OrbitalRecord(BaseModel):
    """Decoded, immutable TLE record"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    catalog_number: int = Field(alias="satellite_number", ge=0)
    classification: str = Field(min_length=1, max_length=1)
    international_designator: str
    epoch_timestamp: int = Field(alias="epoch")
    epoch_iso8601: str = Field(alias="date_time")
    first_derivative_mean_motion: float
    second_derivative_mean_motion: float
    drag_term: float
    ephemeris_type: int = Field(ge=0)
    element_set_number: int = Field(alias="element_number", ge=0)
    inclination: float
    right_ascension: float
    eccentricity: float = Field(ge=0.0, lt=1.0)
    argument_of_perigee: float
    mean_anomaly: float
    mean_motion: float
    revolution_number: int = Field(ge=0)

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True)

    def describe(self) -> str:
        """Multi-line human readable summary."""
        return "\n".join(
            [
                self.name,
                f"Satellite #: {self.catalog_number}",
                f"Classification: {self.classification}",
                f"International Designator: {self.international_designator}",
                f"Element #: {self.element_set_number}",
                f"Epoch: {self.epoch_timestamp}",
                f"Epoch (ISO8601): {self.epoch_iso8601}",
                f"Mean Motion: {self.mean_motion}",
                f"First Derivative Mean Motion: {self.first_derivative_mean_motion}",
                f"Second Derivative Mean Motion: {self.second_derivative_mean_motion}",
                f"Drag Term: {self.drag_term}",
                f"Inclination: {self.inclination}",
                f"Right Ascension: {self.right_ascension}",
                f"Eccentricity: {self.eccentricity}",
                f"Argument of Perigee: {self.argument_of_perigee}",
                f"Mean Anomaly: {self.mean_anomaly}",
                f"Revolution #: {self.revolution_number}",
            ]
        )

    def __str__(self):
        return self.describe()


class CacheSnapshot(BaseModel):
    """Persisted form of the TLE cache"""

    last_bulk_update: int
    tles: List[OrbitalRecord] = Field(default_factory=list)
