from .base import AsyncValidator, Issue, IssueKind, ValidationResult, Validator
from .combinators import (
    all_of,
    any_of,
    as_validator,
    async_check,
    check,
    dict_of,
    instance_of,
    list_of,
    optional,
)
from .schema import ANY, Schema, issues_from_error


__all__ = [
    "ANY",
    "AsyncValidator",
    "Issue",
    "IssueKind",
    "Schema",
    "ValidationResult",
    "Validator",
    "all_of",
    "any_of",
    "as_validator",
    "async_check",
    "check",
    "dict_of",
    "instance_of",
    "issues_from_error",
    "list_of",
    "optional",
]
