"""Domain exceptions."""


class RolegateError(Exception):
    """Base exception for Rolegate."""

    code = "RolegateError"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__doc__ or self.code)


class InvalidID(RolegateError):
    """Identifier argument is zero or malformed."""

    code = "InvalidID"


class InvalidHandle(RolegateError):
    """Handle does not pass handle syntax validation."""

    code = "InvalidHandle"


class ValidationError(RolegateError):
    """Validation failed for input data."""

    code = "ValidationError"


class RoleNameNotUnique(RolegateError):
    """Role name is already used by another role."""

    code = "RoleNameNotUnique"


class RoleHandleNotUnique(RolegateError):
    """Role handle is already used by another role."""

    code = "RoleHandleNotUnique"


class NoPermission(RolegateError):
    """User does not have permission for the requested action."""

    code = "NoPermission"


class NoCreatePermission(NoPermission):
    """User is not allowed to create roles."""

    code = "NoCreatePermission"


class NoUpdatePermission(NoPermission):
    """User is not allowed to update this role."""

    code = "NoUpdatePermission"


class MemberManagementDenied(NoPermission):
    """Not allowed to manage role members."""

    code = "MemberManagementDenied"


class NotFound(RolegateError):
    """Requested resource was not found."""

    code = "NotFound"

    def __init__(self, entity: str, identifier: object) -> None:
        super().__init__(f"{entity} {identifier} not found")
        self.entity = entity
        self.identifier = identifier
