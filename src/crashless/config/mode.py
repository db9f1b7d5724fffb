"""Environment mode resolution.

The mode is read from ``ENVIRONMENT`` on every call so that flipping the
variable between requests changes masking and stack exposure immediately.
"""

import os

DEVELOPMENT = "development"
PRODUCTION = "production"

MODE_ENV_VAR = "ENVIRONMENT"


def current_mode() -> str:
    return (os.getenv(MODE_ENV_VAR) or DEVELOPMENT).strip().lower()


def is_production() -> bool:
    return current_mode() == PRODUCTION
