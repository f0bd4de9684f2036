class CyberNewsError(Exception):
    """Base class for all errors raised by cyber_news."""


class InputRejected(CyberNewsError, ValueError):
    """Raised when a caller-supplied parameter is malformed or out of bounds."""


class FeedNotFound(InputRejected):
    """Raised when a feed name does not match any configured source."""


class FeedFetchError(CyberNewsError):
    """Raised when an RSS/Atom feed cannot be fetched or parsed."""


class ParseError(CyberNewsError):
    """Raised when a feed entry cannot be parsed into expected fields."""


class TaxonomyError(CyberNewsError):
    """Raised when a topic taxonomy document is malformed."""
