"""Device point records and their XML document format.

The document is the one produced by a .NET ``XmlSerializer`` for a list of
device points::

    <ArrayOfDevicePoint xmlns:xsi="..." xmlns:xsd="...">
      <DevicePoint>
        <LapNumber>1</LapNumber>
        <Latitude>35.9297645</Latitude>
        <AltitudeCalculated xsi:nil="true" />
        ...
      </DevicePoint>
    </ArrayOfDevicePoint>

Absent values are written as ``xsi:nil="true"`` elements. Only latitude,
longitude and calculated altitude matter to the resolver; all other fields
are carried through unchanged.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
XSD_NS = "http://www.w3.org/2001/XMLSchema"
_NIL = f"{{{XSI_NS}}}nil"

ROOT_TAG = "ArrayOfDevicePoint"
POINT_TAG = "DevicePoint"

_DECIMAL_FIELDS = (
    "latitude",
    "longitude",
    "altitude_calculated",
    "altitude",
    "distance",
    "speed",
    "ground_contact",
    "vertical_oscillation",
)


class DevicePoint(BaseModel):
    """One recorded track point (Entity; mutable).

    Field aliases are the XML element names. Declaration order is the
    element order of the document.
    """

    lap_number: int | None = Field(default=None, alias="LapNumber")
    start_seconds: float | None = Field(default=None, alias="StartSeconds")
    latitude: Decimal | None = Field(default=None, alias="Latitude")
    longitude: Decimal | None = Field(default=None, alias="Longitude")
    altitude_calculated: Decimal | None = Field(default=None, alias="AltitudeCalculated")
    altitude: Decimal | None = Field(default=None, alias="Altitude")
    distance: Decimal | None = Field(default=None, alias="Distance")
    speed: Decimal | None = Field(default=None, alias="Speed")
    hr: int | None = Field(default=None, alias="HR")
    rpm: int | None = Field(default=None, alias="RPM")
    cad: int | None = Field(default=None, alias="CAD")
    watts: int | None = Field(default=None, alias="Watts")
    calories: int | None = Field(default=None, alias="Calories")
    temp: int | None = Field(default=None, alias="Temp")
    ground_contact: Decimal | None = Field(default=None, alias="GroundContact")
    vertical_oscillation: Decimal | None = Field(
        default=None, alias="VerticalOscillation"
    )

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    @field_validator(*_DECIMAL_FIELDS, mode="before")
    @classmethod
    def _float_to_decimal(cls, value: Any) -> Any:
        # Go through repr so 79.4 becomes Decimal("79.4"), not its binary expansion
        if isinstance(value, float):
            return Decimal(repr(value))
        return value


# ---------------------------------------------------------------------------
# XML codec
# ---------------------------------------------------------------------------
def _format_value(value: Any) -> str:
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _parse_point(element: ET.Element) -> DevicePoint:
    values: dict[str, str | None] = {}
    for name, field in DevicePoint.model_fields.items():
        child = element.find(field.alias)
        if child is None or child.get(_NIL) == "true":
            values[name] = None
            continue
        text = (child.text or "").strip()
        values[name] = text or None
    return DevicePoint.model_validate(values)


def parse_device_points(text: str | bytes) -> list[DevicePoint]:
    """Parse an ``ArrayOfDevicePoint`` document.

    Raises:
        ValueError: If the document is malformed or a value cannot be parsed
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ValueError(f"Invalid device point XML: {e}") from e
    if root.tag != ROOT_TAG:
        raise ValueError(f"Expected <{ROOT_TAG}> root element, got <{root.tag}>")
    return [_parse_point(element) for element in root.iter(POINT_TAG)]


def read_device_points(path: Path | str) -> list[DevicePoint]:
    """Read device points from an XML file."""
    path = Path(path)
    points = parse_device_points(path.read_bytes())
    logger.debug("Read %d device points from %s", len(points), path.name)
    return points


def device_points_to_element(points: list[DevicePoint]) -> ET.Element:
    """Build the ``ArrayOfDevicePoint`` element tree for ``points``."""
    root = ET.Element(ROOT_TAG, {"xmlns:xsi": XSI_NS, "xmlns:xsd": XSD_NS})
    for point in points:
        element = ET.SubElement(root, POINT_TAG)
        for name, field in DevicePoint.model_fields.items():
            value = getattr(point, name)
            child = ET.SubElement(element, field.alias)
            if value is None:
                child.set("xsi:nil", "true")
            else:
                child.text = _format_value(value)
    ET.indent(root, space="  ")
    return root


def write_device_points(points: list[DevicePoint], path: Path | str) -> None:
    """Write device points to an XML file (UTF-8, with declaration)."""
    path = Path(path)
    tree = ET.ElementTree(device_points_to_element(points))
    tree.write(path, encoding="utf-8", xml_declaration=True)
    logger.debug("Wrote %d device points to %s", len(points), path.name)
