"""Failures raised by the prescription-analysis pipeline."""


class AnalysisError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EncodingError(AnalysisError):
    """The image could not be read; raised before any network call."""


class TransportError(AnalysisError):
    """The model endpoint could not be reached (DNS, refused connection, timeout)."""


class ApiRequestError(AnalysisError):
    """The model endpoint answered with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class AnalysisCancelled(AnalysisError):
    """A newer analysis superseded this one; its result must be discarded."""

    def __init__(self) -> None:
        super().__init__("Analysis superseded by a newer request")
