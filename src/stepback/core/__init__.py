"""stepback core -- errors, results, logging and settings.

Architecture::

    errors.py     Structured error hierarchy (StepbackError and friends)
    result.py     Result[T] envelope (Ok / Err / try_result)
    logging.py    structlog configuration and context helpers
    settings.py   STEPBACK_* environment settings (pydantic-settings)

Nothing here knows about migration files; ``stepback.migrations`` builds on
these pieces.
"""
