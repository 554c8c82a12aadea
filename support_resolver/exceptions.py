"""Exception hierarchy for the resolver.

Only :class:`GenerationError` is allowed to escape a request. Every other
failure is logged and degraded to "no hit" / "no match" by the resolvers.
"""


class SupportResolverError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CapabilityError(SupportResolverError):
    """An external capability (embedding or generation) failed or timed out."""


class EmbeddingError(CapabilityError):
    pass


class GenerationError(CapabilityError):
    pass


class PolicyConfigurationError(SupportResolverError):
    """The static policy set is unusable (e.g. the fallback policy is missing)."""


class CorpusError(SupportResolverError):
    """The FAQ corpus file could not be read or has the wrong shape."""
