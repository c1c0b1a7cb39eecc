"""Application constants."""

USER_AGENT = "heritage-atlas/0.3 (+data refresh; contact: configured-email)"
STAGES = (
    "fetch",
    "build",
    "report",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "skipped_rows",
    "matched_rows",
    "error_code",
    "message",
)

METHOD_EXACT_SPATIAL = "exact-spatial"
METHOD_ADDRESS_FUZZY = "address-fuzzy"
METHOD_ADDRESS_FUZZY_LOW = "address-fuzzy-low"
MATCH_METHODS = (
    METHOD_EXACT_SPATIAL,
    METHOD_ADDRESS_FUZZY,
    METHOD_ADDRESS_FUZZY_LOW,
)

CONFIDENCE_HIGH = "high"
CONFIDENCE_MEDIUM = "medium"
CONFIDENCE_LOW = "low"
CONFIDENCE_NONE = "none"

EXACT_SPATIAL_SCORE = 100
SKIPPED_SAMPLE_LIMIT = 50
