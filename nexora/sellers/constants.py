from nexora.common.logging_setup import get_logger

logger = get_logger("nexora.sellers")

TOP_RATED_DEFAULT_LIMIT = 10
TOP_RATED_MAX_LIMIT = 100

SEARCH_DEFAULT_LIMIT = 20
SEARCH_MAX_LIMIT = 100
