"""
Data quality check specifications.

A check binds a sensor (the query that captures a reading) with a rule (the
evaluation of the reading). The sensor and rule definitions themselves live
outside the store, a check only references them by name.
"""

from typing import Optional

from ..validation import MetadataStructureError
from .basespecs import AbstractSpec, ChildField, DirtyTrackingSpecMap, SpecField
from .id import NodeKind


class SensorParametersSpec(AbstractSpec):
    """Reference to a sensor definition with its parameters."""

    node_kind = NodeKind.SENSOR_PARAMETERS

    sensor_definition_name = SpecField()
    disabled = SpecField(default=False)
    parameters = SpecField(default_factory=dict)


class RuleParametersSpec(AbstractSpec):
    """Reference to a rule definition with its parameters."""

    node_kind = NodeKind.RULE_PARAMETERS

    rule_definition_name = SpecField()
    disabled = SpecField(default=False)
    parameters = SpecField(default_factory=dict)


class CheckSpec(AbstractSpec):
    node_kind = NodeKind.CHECK

    sensor = ChildField(SensorParametersSpec)
    rule = ChildField(RuleParametersSpec)
    disabled = SpecField(default=False)
    comments = SpecField(default_factory=list)

    @property
    def check_name(self) -> Optional[str]:
        """Name of the check, the last segment of its hierarchy id."""
        return self.hierarchy_id.last if self.hierarchy_id is not None else None

    @property
    def sensor_name(self) -> Optional[str]:
        return self.sensor.sensor_definition_name if self.sensor is not None else None

    def check_hash(self) -> int:
        """Identity of the check in the sensor readings, derived from its hierarchy id."""
        if self.hierarchy_id is None:
            raise MetadataStructureError("Cannot compute the hash of a check that is not attached to a tree")
        return self.hierarchy_id.hash64()


class CheckSpecMap(DirtyTrackingSpecMap[CheckSpec]):
    """Checks of a table or a column, keyed by the check name."""

    node_kind = NodeKind.CHECK_MAP
    value_type = CheckSpec
