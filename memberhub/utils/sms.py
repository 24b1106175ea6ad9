"""SMS dispatch. No provider is integrated; phone delivery is unimplemented."""
import logging

from memberhub.core.config import settings

logger = logging.getLogger(__name__)


def sms_available() -> bool:
    return settings.SMS_LOG_ONLY


def send_sms_otp(phone: str, otp: str) -> bool:
    """
    Returns True only when ``SMS_LOG_ONLY`` is enabled, in which case the code
    is written to the log for development use. Otherwise nothing is sent and
    False is returned.
    """
    if settings.SMS_LOG_ONLY:
        logger.warning(f"[SMS] Log-only delivery to {phone}: code {otp}")
        return True

    logger.error(f"[SMS] No SMS provider configured; code for {phone} was not sent")
    return False
