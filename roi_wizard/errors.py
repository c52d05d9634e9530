"""Exceptions raised by the ROI wizard core.

Field-level validation problems are not exceptions: they are returned as
``FieldError`` records inside a ``ValidationResult`` (see ``inputs.py``).
The classes here cover programmer/configuration mistakes only.
"""


class RoiWizardError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(RoiWizardError, ValueError):
    """Engine configuration is malformed."""


class CurrencyConversionError(RoiWizardError, KeyError):
    """No exchange rate is known for a currency."""


class EmptySelectionError(RoiWizardError, ValueError):
    """Priority weights were requested for an empty selection."""


class UnknownFieldError(RoiWizardError, AttributeError):
    """An update named a field the input record does not have."""
