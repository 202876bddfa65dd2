class ProbeError(Exception):
    """Fatal error raised before the connection loop starts."""


class ResolutionError(ProbeError):
    pass


class DiscoveryError(ProbeError):
    """No candidate endpoint accepted the validating connection."""
