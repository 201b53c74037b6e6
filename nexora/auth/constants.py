
from nexora.common.logging_setup import get_logger

logger = get_logger("nexora.auth")
