from __future__ import annotations


class MatchingError(RuntimeError):
    def __init__(self, message: str, *, code: str = "matching_error"):
        super().__init__(message)
        self.code = code


class ValidationError(MatchingError):
    def __init__(self, message: str, *, code: str = "invalid_input"):
        super().__init__(message, code=code)


class EmptyInputError(ValidationError):
    def __init__(self, message: str = "No usable terms found in resume text."):
        super().__init__(message, code="empty_input")


class NoResumeError(ValidationError):
    def __init__(self, message: str = "Resume data not available. Please upload your resume first."):
        super().__init__(message, code="no_resume")


class NoJobsError(ValidationError):
    def __init__(self, message: str = "No job listings available."):
        super().__init__(message, code="no_jobs")


class ConcurrencyError(MatchingError):
    def __init__(self, message: str, *, code: str = "concurrency"):
        super().__init__(message, code=code)


class AlreadyInProgressError(ConcurrencyError):
    def __init__(self, message: str = "Job matching already in progress."):
        super().__init__(message, code="already_in_progress")


class StaleRunError(ConcurrencyError):
    def __init__(self, message: str = "Job listings changed while matching was running."):
        super().__init__(message, code="stale_run")


class TransportError(MatchingError):
    """Raised by oracle providers when the remote call itself fails."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message, code="oracle_transport")
        self.status_code = status_code


class ResumeExtractionError(MatchingError):
    def __init__(self, message: str, *, code: str = "extraction_failed"):
        super().__init__(message, code=code)


class ResumeExtractionTimeout(ResumeExtractionError):
    def __init__(self, timeout_s: float):
        super().__init__(
            f"Resume text extraction timed out after {timeout_s:g} seconds",
            code="extraction_timeout",
        )
        self.timeout_s = timeout_s
