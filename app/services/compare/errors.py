"""Error taxonomy for the project comparison pipeline."""


class ComparisonError(Exception):
    """Base class for comparison pipeline failures."""


class InvalidComparisonRequest(ComparisonError):
    """Raised when the owner or either project name is missing."""


class ProjectNotFound(ComparisonError):
    """Raised when either repository's metadata cannot be fetched."""


class UpstreamCallFailure(ComparisonError):
    """Raised when the generation service cannot be reached or errors out."""


class UpstreamParseFailure(ComparisonError):
    """Raised when the generation response holds no valid comparison result."""


class ComparisonInternalError(ComparisonError):
    """Raised for any unexpected failure outside the recovered paths."""
