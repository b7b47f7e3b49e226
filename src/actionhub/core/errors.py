from __future__ import annotations


class ActionHubError(Exception):
    """Base class for actionhub errors."""


class RegistrationError(ActionHubError, ValueError):
    """Empty/invalid action or category name, or a non-callable handler."""


class PayloadError(ActionHubError, TypeError):
    """Posted data is not an ordered sequence of primitives."""


class WireConfigError(ActionHubError):
    """Malformed wiring file or unresolvable handler reference."""
