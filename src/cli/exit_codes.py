"""Exit code taxonomy for the embedkit CLI."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Exit codes follow Unix conventions with domain-specific extensions:
    - 0: Success
    - 1-9: General errors (parse, validation, environment, usage)
    - 10-19: Embedding precondition errors
    - 20-29: File-system and toolchain errors
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    PARSE_ERROR = 2
    VALIDATION_ERROR = 3
    ENVIRONMENT_ERROR = 4
    USAGE_ERROR = 5

    # Precondition errors (10-19)
    MISSING_DEPENDENCY = 10
    UNSUPPORTED_ARCHITECTURE = 11

    # Operational errors (20-29)
    FOLDER_CREATION_ERROR = 20
    COPY_ERROR = 21
    SIGNING_ERROR = 22

    @classmethod
    def from_exception(cls, exc: BaseException) -> ExitCode:
        """Map an exception to an appropriate exit code.

        Parameters
        ----------
        exc
            Exception to classify.

        Returns
        -------
        ExitCode
            Exit code appropriate for the exception type.
        """
        cyclopts_code = _exit_code_for_cyclopts(exc)
        if cyclopts_code is not None:
            return cyclopts_code

        declared_code = _exit_code_for_declared(exc)
        if declared_code is not None:
            return declared_code

        type_code = _exit_code_for_exception_type(exc)
        if type_code is not None:
            return type_code

        return cls.GENERAL_ERROR


def _exit_code_for_cyclopts(exc: BaseException) -> ExitCode | None:
    module = exc.__class__.__module__
    if not module.startswith("cyclopts"):
        return None
    if exc.__class__.__name__ == "ValidationError":
        return ExitCode.VALIDATION_ERROR
    return ExitCode.PARSE_ERROR


def _exit_code_for_declared(exc: BaseException) -> ExitCode | None:
    code = getattr(exc, "exit_code", None)
    if not isinstance(code, int) or isinstance(code, bool):
        return None
    try:
        return ExitCode(code)
    except ValueError:
        return ExitCode.GENERAL_ERROR


def _exit_code_for_exception_type(exc: BaseException) -> ExitCode | None:
    if isinstance(exc, (ValueError, TypeError)):
        return ExitCode.VALIDATION_ERROR
    return None


__all__ = ["ExitCode"]
