"""Darwin Core field names and pipeline defaults."""

MEASUREMENT_TYPE_FIELD = "measurementType"
MEASUREMENT_VALUE_FIELD = "measurementValue"
MEASUREMENT_UNIT_FIELD = "measurementUnit"

DEFAULT_JOIN_KEY = "eventID"
DEFAULT_MEASUREMENT_TYPE = "Biomass"

# Unique per occurrence; written onto core and extension rows by the OBIS
# datasource
OCCURRENCE_KEY_FIELD = "occurrenceKey"

# Core fields copied onto every unnested measurement row
DEFAULT_PROPAGATED_FIELDS: tuple[str, ...] = (
    "eventID",
    "parentEventID",
    "occurrenceID",
    "decimalLongitude",
    "decimalLatitude",
    "scientificName",
    "species",
    "class",
    "order",
    "year",
)

DEFAULT_RANK_FIELDS: tuple[str, ...] = ("class", "order")
