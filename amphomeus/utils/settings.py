import os


# Database
AMPHOMEUS_DB_URI = os.environ.get("AMPHOMEUS_DB_URI")
if AMPHOMEUS_DB_URI is None:
    raise ValueError("AMPHOMEUS_DB_URI environment variable not set")
AMPHOMEUS_DB_URI_READ_ONLY = os.environ.get(
    "AMPHOMEUS_DB_URI_READ_ONLY", AMPHOMEUS_DB_URI
)

AMPHOMEUS_DB_POOL_RECYCLE_SECONDS_RAW = os.environ.get(
    "AMPHOMEUS_DB_POOL_RECYCLE_SECONDS"
)
AMPHOMEUS_DB_POOL_RECYCLE_SECONDS = 1800
try:
    if AMPHOMEUS_DB_POOL_RECYCLE_SECONDS_RAW is not None:
        AMPHOMEUS_DB_POOL_RECYCLE_SECONDS = int(AMPHOMEUS_DB_POOL_RECYCLE_SECONDS_RAW)
except ValueError:
    raise ValueError(
        f"AMPHOMEUS_DB_POOL_RECYCLE_SECONDS must be an integer: {AMPHOMEUS_DB_POOL_RECYCLE_SECONDS_RAW}"
    )

AMPHOMEUS_DB_STATEMENT_TIMEOUT_MILLIS_RAW = os.environ.get(
    "AMPHOMEUS_DB_STATEMENT_TIMEOUT_MILLIS"
)
AMPHOMEUS_DB_STATEMENT_TIMEOUT_MILLIS = 30000
try:
    if AMPHOMEUS_DB_STATEMENT_TIMEOUT_MILLIS_RAW is not None:
        AMPHOMEUS_DB_STATEMENT_TIMEOUT_MILLIS = int(
            AMPHOMEUS_DB_STATEMENT_TIMEOUT_MILLIS_RAW
        )
except ValueError:
    raise ValueError(
        f"AMPHOMEUS_DB_STATEMENT_TIMEOUT_MILLIS must be an integer: {AMPHOMEUS_DB_STATEMENT_TIMEOUT_MILLIS_RAW}"
    )

AMPHOMEUS_DB_POOL_SIZE = 2
AMPHOMEUS_DB_POOL_SIZE_RAW = os.environ.get("AMPHOMEUS_DB_POOL_SIZE")
AMPHOMEUS_DB_MAX_OVERFLOW = 2
AMPHOMEUS_DB_MAX_OVERFLOW_RAW = os.environ.get("AMPHOMEUS_DB_MAX_OVERFLOW")
try:
    if AMPHOMEUS_DB_POOL_SIZE_RAW is not None:
        AMPHOMEUS_DB_POOL_SIZE = int(AMPHOMEUS_DB_POOL_SIZE_RAW)
except ValueError:
    raise ValueError(
        f"Could not parse AMPHOMEUS_DB_POOL_SIZE as int: {AMPHOMEUS_DB_POOL_SIZE_RAW}"
    )
try:
    if AMPHOMEUS_DB_MAX_OVERFLOW_RAW is not None:
        AMPHOMEUS_DB_MAX_OVERFLOW = int(AMPHOMEUS_DB_MAX_OVERFLOW_RAW)
except ValueError:
    raise ValueError(
        f"Could not parse AMPHOMEUS_DB_MAX_OVERFLOW as int: {AMPHOMEUS_DB_MAX_OVERFLOW_RAW}"
    )

# CORS
_origins_raw = os.environ.get("AMPHOMEUS_CORS_ALLOWED_ORIGINS")
if _origins_raw is None:
    raise ValueError("AMPHOMEUS_CORS_ALLOWED_ORIGINS environment variable must be set")
CORS_ALLOWED_ORIGINS = [origin.strip() for origin in _origins_raw.split(",")]

# Media store
MEDIA_MAX_PAYLOAD_BYTES = 10 * 1024 * 1024
CLOUDINARY_UPLOAD_FOLDER = os.environ.get("CLOUDINARY_UPLOAD_FOLDER", "amphomeus")
CLOUDINARY_UPLOAD_PREFIX = os.environ.get(
    "CLOUDINARY_UPLOAD_PREFIX", "https://api.cloudinary.com"
).rstrip("/")

AMPHOMEUS_MEDIA_TIMEOUT_SECONDS_RAW = os.environ.get(
    "AMPHOMEUS_MEDIA_TIMEOUT_SECONDS"
)
AMPHOMEUS_MEDIA_TIMEOUT_SECONDS = 10.0
try:
    if AMPHOMEUS_MEDIA_TIMEOUT_SECONDS_RAW is not None:
        AMPHOMEUS_MEDIA_TIMEOUT_SECONDS = float(AMPHOMEUS_MEDIA_TIMEOUT_SECONDS_RAW)
except ValueError:
    raise ValueError(
        f"Could not parse AMPHOMEUS_MEDIA_TIMEOUT_SECONDS as float: {AMPHOMEUS_MEDIA_TIMEOUT_SECONDS_RAW}"
    )

# OpenAPI
DOCS_TARGET_PATH = "docs"
AMPHOMEUS_OPENAPI_LIST = []
AMPHOMEUS_OPENAPI_LIST_RAW = os.environ.get("AMPHOMEUS_OPENAPI_LIST")
if AMPHOMEUS_OPENAPI_LIST_RAW is not None:
    AMPHOMEUS_OPENAPI_LIST = AMPHOMEUS_OPENAPI_LIST_RAW.split(",")

DOCS_PATHS = []
for path in AMPHOMEUS_OPENAPI_LIST:
    DOCS_PATHS.append(f"/{path}/{DOCS_TARGET_PATH}")
    DOCS_PATHS.append(f"/{path}/{DOCS_TARGET_PATH}/openapi.json")
