"""Error taxonomy shared by the lifecycle services.

Services raise these; ``pawsi.main`` maps them onto HTTP responses. Best-effort
side effects (email, image purge) never raise them into the caller, they log
instead.
"""


class LifecycleError(Exception):
    status_code = 500
    default_detail = 'Internal error'

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(LifecycleError):
    status_code = 404
    default_detail = 'Not found'


class UnauthorizedError(LifecycleError):
    status_code = 403
    default_detail = 'Not allowed'


class InvalidInputError(LifecycleError):
    status_code = 400
    default_detail = 'Invalid input'


class ConflictError(LifecycleError):
    status_code = 409
    default_detail = 'Conflicting state'


class SweepLockedError(ConflictError):
    default_detail = 'A maintenance sweep is already running'


class DependencyError(LifecycleError):
    """A store, email or image-store call failed; the caller may retry."""

    status_code = 503
    default_detail = 'Upstream dependency failed'
