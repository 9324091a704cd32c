"""Exceptions raised by the store, repository and form parsers."""


class FleetError(Exception):
    """Base class for fleet errors. The message is safe to show to users."""


class StoreError(FleetError):
    """The data store rejected a read or write."""


class NotFoundError(StoreError):
    """No visible record with the requested id."""


class IntegrityError(StoreError):
    """A write would violate a column or foreign key constraint."""


class FormError(FleetError):
    """Submitted form data is missing a required field or is malformed."""
