from enum import Enum

# Firebase ID tokens are always RS256
EXPECTED_ALGORITHM = "RS256"

ISSUER_PREFIX = "https://securetoken.google.com/"

GOOGLE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/"
    "securetoken@system.gserviceaccount.com"
)

KEY_SET_CACHE_KEY = "google_pk"

# Subtracted from the Cache-Control max-age before caching the key set
CACHE_TTL_SAFETY_MARGIN = 120

# Used by the bundled caches when no explicit TTL is given
DEFAULT_CACHE_TTL = 3600

DEFAULT_HTTP_TIMEOUT = 10.0


class RejectionReason(Enum):
    NO_TOKEN = "no_token"
    MALFORMED_TOKEN = "malformed_token"
    CLAIMS_INVALID = "claims_invalid"
    KEY_NOT_FOUND = "key_not_found"
    KEY_FETCH_FAILED = "key_fetch_failed"
    KEY_IMPORT_FAILED = "key_import_failed"
    SIGNATURE_INVALID = "signature_invalid"
    INTERNAL_ERROR = "internal_error"
