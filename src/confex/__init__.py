"""
confex — schema-driven validation of environment variables.

File: src/confex/__init__.py

Purpose
- Package root. Exports the validators, factories, runner and builder.

Functional requirements
- Must not have side effects at import time (no environment reads, no logging setup).
"""

from confex.builder import ConfexBuilder, builder
from confex.errors import InvalidCallOrderError, ValidationError, ValidationErrorGroup
from confex.factories import boolean, enumeration, number, string, tuple_of
from confex.runner import Confex, ValidationReport, define_config
from confex.validator import MISSING, Validator
from confex.validators import (
    BooleanValidator,
    EnumValidator,
    NumberValidator,
    StringValidator,
    TupleValidator,
)

__version__ = "0.1.0"

__all__ = [
    "BooleanValidator",
    "Confex",
    "ConfexBuilder",
    "EnumValidator",
    "InvalidCallOrderError",
    "MISSING",
    "NumberValidator",
    "StringValidator",
    "TupleValidator",
    "ValidationError",
    "ValidationErrorGroup",
    "ValidationReport",
    "Validator",
    "__version__",
    "boolean",
    "builder",
    "define_config",
    "enumeration",
    "number",
    "string",
    "tuple_of",
]
