"""
Railway-Oriented Programming (ROP) Framework for Python.

Explicit, composable, functional error handling — adapters return Result
instead of raising, and failures carry a chain of contextual messages.

    from railway import Result, ErrorCode

    def read_archive(path: Path) -> Result[bytes]:
        if not path.exists():
            return Result.failure(ErrorCode.NOT_FOUND, f"{path} does not exist")
        return Result.success(path.read_bytes())

    result = (
        read_archive(path)
        .flat_map(extractor.extract_der)
        .map_failure(lambda err: err.wrap("error extracting authroot.stl"))
    )
"""

from railway.result import Result, Success, Failure
from railway.failure import ErrorCode, FailureDescription
from railway.execution import (
    ExecutionContext,
    NoOpExecutionContext,
    LoggingExecutionContext,
)
from railway.assertions import ResultAssertions

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ExecutionContext",
    "NoOpExecutionContext",
    "LoggingExecutionContext",
    "ResultAssertions",
]

__version__ = "1.1.0"
