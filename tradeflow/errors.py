"""Exception types for TradeFlow.

All application errors inherit from :class:`TradeflowError` so the CLI can
catch them at the command boundary and render a single readable message.
Validation of user input is left to pydantic's ``ValidationError``.
"""


class TradeflowError(Exception):
    """Base for all TradeFlow errors."""


class NotAuthenticatedError(TradeflowError):
    """Raised when a data operation is attempted without an owner identity."""


class StoreError(TradeflowError):
    """The journal store could not complete an operation."""


class EntryNotFoundError(StoreError):
    """A journal entry does not exist or belongs to another owner."""


class SettingsError(TradeflowError):
    """Base for field option and default value errors."""


class OptionNotFoundError(SettingsError):
    """An option to rename is not present in the field's vocabulary."""


class DuplicateOptionError(SettingsError):
    """A rename would introduce a value already present in the vocabulary."""


class CustomColumnError(TradeflowError):
    """A custom column definition is invalid."""


class DuplicateColumnError(CustomColumnError):
    """A custom column with the same name already exists."""


class AnalysisError(TradeflowError):
    """The AI provider failed or returned no usable structured result.

    Distinct from a successful analysis that found no patterns, which
    is represented by an empty strategy list.
    """
