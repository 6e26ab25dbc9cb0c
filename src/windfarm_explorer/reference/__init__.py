"""Static reference data.

Values that never change with API calls: Darwin Core field names, pipeline
defaults, and the geographic bounds of the monitored area.

Adding a new module:
1. Create ``reference/{name}.py`` with constants/dataclasses
2. Re-export from this ``__init__.py``
"""

from windfarm_explorer.reference.fields import DEFAULT_JOIN_KEY as DEFAULT_JOIN_KEY
from windfarm_explorer.reference.fields import DEFAULT_MEASUREMENT_TYPE as DEFAULT_MEASUREMENT_TYPE
from windfarm_explorer.reference.fields import (
    DEFAULT_PROPAGATED_FIELDS as DEFAULT_PROPAGATED_FIELDS,
)
from windfarm_explorer.reference.fields import DEFAULT_RANK_FIELDS as DEFAULT_RANK_FIELDS
from windfarm_explorer.reference.fields import MEASUREMENT_TYPE_FIELD as MEASUREMENT_TYPE_FIELD
from windfarm_explorer.reference.fields import MEASUREMENT_UNIT_FIELD as MEASUREMENT_UNIT_FIELD
from windfarm_explorer.reference.fields import MEASUREMENT_VALUE_FIELD as MEASUREMENT_VALUE_FIELD
from windfarm_explorer.reference.fields import OCCURRENCE_KEY_FIELD as OCCURRENCE_KEY_FIELD
from windfarm_explorer.reference.geography import BELGIAN_NORTH_SEA_BBOX as BELGIAN_NORTH_SEA_BBOX
from windfarm_explorer.reference.geography import CRS as CRS
from windfarm_explorer.reference.geography import LAT_FIELD as LAT_FIELD
from windfarm_explorer.reference.geography import LON_FIELD as LON_FIELD
from windfarm_explorer.reference.geography import BoundingBox as BoundingBox
