"""
Service-layer errors; routers map them to HTTP responses
"""


class ServiceError(Exception):
    """Base class for expected business-rule failures"""


class ProfileNotFoundError(ServiceError, LookupError):
    pass


class ProfileAlreadyExistsError(ServiceError):
    pass


class MedicationNotFoundError(ServiceError, LookupError):
    """Missing, inactive, or owned by someone else"""


class DoseAlreadyLoggedError(ServiceError):
    """A log for this medication already exists for the day"""
