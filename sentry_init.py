import os

import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration
from sentry_sdk.integrations.logging import LoggingIntegration


def init_sentry(flask: bool = True) -> bool:
    """Initialize Sentry if SENTRY_DSN present. Returns True if initialized."""
    dsn = os.getenv('SENTRY_DSN')
    if not dsn:
        return False

    # breadcrumbs from logging, but no events; errors are captured explicitly
    integrations = [LoggingIntegration(level=None, event_level=None)]
    if flask:
        integrations.append(FlaskIntegration())
    sentry_sdk.init(
        dsn=dsn,
        integrations=integrations,
        traces_sample_rate=float(os.getenv('SENTRY_TRACES', os.getenv('SENTRY_TRACES_SAMPLE_RATE', '0.1'))),
        environment=os.getenv('ENVIRONMENT', 'dev'),
        release=os.getenv('RELEASE', 'local'),
        send_default_pii=False,
    )
    return True


def capture_exception(exc: Exception):
    sentry_sdk.capture_exception(exc)


def set_tag(key: str, value):
    sentry_sdk.set_tag(key, value)
