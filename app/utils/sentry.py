"""
Опциональная интеграция Sentry для error tracking
"""

import logging

from app.config import Config


logger = logging.getLogger(__name__)


def init_sentry(dsn: str | None = None, environment: str | None = None) -> str | None:
    """
    Инициализация Sentry (опционально, extra "monitoring")

    Ошибки категории DATABASE логируются на уровне ERROR и через
    LoggingIntegration уходят в Sentry как события; клиентские ошибки
    (WARNING) остаются breadcrumbs.

    Args:
        dsn: DSN проекта (по умолчанию Config.SENTRY_DSN)
        environment: Окружение (по умолчанию Config.ENVIRONMENT)

    Returns:
        Sentry DSN если успешно, None если Sentry не настроен
    """
    sentry_dsn = dsn or Config.SENTRY_DSN
    environment = environment or Config.ENVIRONMENT

    if not sentry_dsn:
        logger.info("Sentry DSN не настроен, error tracking отключен")
        return None

    try:
        import sentry_sdk
        from sentry_sdk.integrations.logging import LoggingIntegration
    except ImportError:
        logger.warning(
            "Sentry SDK не установлен. Установите: pip install -e .[monitoring]"
        )
        return None

    try:
        logging_integration = LoggingIntegration(
            level=logging.INFO,  # breadcrumbs
            event_level=logging.ERROR,  # события
        )

        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            traces_sample_rate=0.1,
            integrations=[logging_integration],
            send_default_pii=False,  # адреса доставки не уходят наружу
            attach_stacktrace=True,
            max_breadcrumbs=50,
        )
    except Exception as e:
        logger.error(f"Ошибка инициализации Sentry: {e}")
        return None

    logger.info(f"Sentry инициализирован (environment: {environment})")
    return sentry_dsn
