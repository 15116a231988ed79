from .cli import main
from .env_loader import EnvLoader, EnvNotFoundError, EnvParseError, EnvReadError, FindEnvError, find_env, find_nearest_env
from .env_parser import (
    EnvSyntaxError,
    ExpectedValueButFoundAssignment,
    FoundOnlyKey,
    MissingAssignmentOperator,
    MissingKey,
    MissingValue,
    UnclosedValue,
    UnexpectedToken,
    parse,
    process,
    tokenize,
)
from .env_writer import serialize

__all__ = [
    "EnvLoader",
    "EnvNotFoundError",
    "EnvParseError",
    "EnvReadError",
    "EnvSyntaxError",
    "ExpectedValueButFoundAssignment",
    "FindEnvError",
    "FoundOnlyKey",
    "MissingAssignmentOperator",
    "MissingKey",
    "MissingValue",
    "UnclosedValue",
    "UnexpectedToken",
    "find_env",
    "find_nearest_env",
    "main",
    "parse",
    "process",
    "serialize",
    "tokenize",
]
