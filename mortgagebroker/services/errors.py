"""Error taxonomy for the advisor pipeline"""


class AdvisorError(Exception):
    """Base class for advisor pipeline errors"""


class UpstreamUnavailableError(AdvisorError):
    """A data source could not be reached or returned unusable data"""


class NotConfiguredError(UpstreamUnavailableError):
    """A capability's credential is absent"""


class UpstreamTimeoutError(UpstreamUnavailableError):
    """An upstream call exceeded its deadline"""


class UpstreamError(UpstreamUnavailableError):
    """The upstream provider failed after the call was attempted"""


class MalformedInputError(AdvisorError, ValueError):
    """Input rejected at the tool boundary"""
