"""Common CLI infrastructure.

    - options: Reusable CLI options and arguments
    - errors: CLI error handling
"""

from cldrtables.cli_modules.common.errors import (
    CLIError,
    DataPathNotFoundError,
    ErrorCode,
    UnknownKeyError,
    UnknownLocaleError,
    ValidationError,
    error_boundary,
)
from cldrtables.cli_modules.common.options import (
    BundleOpt,
    DataDirOpt,
    FormatOpt,
    JsonOpt,
    LocaleArg,
    VerboseOpt,
)

__all__ = [
    # Errors
    "CLIError",
    "DataPathNotFoundError",
    "ErrorCode",
    "UnknownKeyError",
    "UnknownLocaleError",
    "ValidationError",
    "error_boundary",
    # Options
    "BundleOpt",
    "DataDirOpt",
    "FormatOpt",
    "JsonOpt",
    "LocaleArg",
    "VerboseOpt",
]
