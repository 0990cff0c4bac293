"""
KLADR API Constants

Endpoints, defaults and wire-level parameter names used by the KLADR client.
"""

VERSION = "1.0.0"

# Paid endpoint, used when client has an API token
API_URL_PAID = "https://kladr-api.com/api.php"
# Free endpoint, used without token
API_URL_FREE = "https://kladr-api.ru/api.php"

DEFAULT_TIMEOUT = 10.0
DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0

HTTP_GET = "GET"
CONTENT_TYPE_JSON = "application/json"

# Query parameters
PARAM_QUERY = "query"
PARAM_LIMIT = "limit"
PARAM_OFFSET = "offset"
PARAM_TOKEN = "token"
PARAM_ONE_STRING = "oneString"
PARAM_WITH_PARENT = "withParent"
PARAM_CONTENT_TYPE = "contentType"
PARAM_ZIP = "zip"

# Integers outside of this range are decoded as strings
JSON_INT_MIN = -(2**63)
JSON_INT_MAX = 2**63 - 1
