"""Root of the mapfy exception hierarchy.

Conversion failures live in :mod:`mapfy.conversion.exceptions` and
configuration/lookup failures in :mod:`mapfy.mapping.exceptions`; both derive
from :class:`MapfyError` so callers can catch everything mapfy raises at once.
"""


class MapfyError(Exception):
    """Base class for all errors raised by mapfy."""
