from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_GROUP_NAME = "INVALID_GROUP_NAME"
    GROUP_DOES_NOT_EXIST = "GROUP_DOES_NOT_EXIST"
    GROUP_ALREADY_HAS_GAME = "GROUP_ALREADY_HAS_GAME"
    GAME_DOES_NOT_EXIST_IN_GROUP = "GAME_DOES_NOT_EXIST_IN_GROUP"
    USER_DOES_NOT_EXIST = "USER_DOES_NOT_EXIST"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    UNAUTHORIZED = "UNAUTHORIZED"
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    CATALOG_UNAVAILABLE = "CATALOG_UNAVAILABLE"
    INVALID_OPERATION = "INVALID_OPERATION"


class BorgaError(Exception):
    """Base for every failure the store and service can report. Subclasses fix ``code`` and ``message``."""
    code: ErrorCode
    message: str

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(f"{self.message} ({detail})" if detail else self.message)


class InvalidGroupName(BorgaError):
    code = ErrorCode.INVALID_GROUP_NAME
    message = "Group name must not be empty"


class GroupDoesNotExist(BorgaError):
    code = ErrorCode.GROUP_DOES_NOT_EXIST
    message = "Group does not exist"


class GroupAlreadyHasGame(BorgaError):
    code = ErrorCode.GROUP_ALREADY_HAS_GAME
    message = "Group already has this game"


class GameDoesNotExistInGroup(BorgaError):
    code = ErrorCode.GAME_DOES_NOT_EXIST_IN_GROUP
    message = "Game does not exist in this group"


class UserDoesNotExist(BorgaError):
    code = ErrorCode.USER_DOES_NOT_EXIST
    message = "User does not exist"


class UserAlreadyExists(BorgaError):
    code = ErrorCode.USER_ALREADY_EXISTS
    message = "User already exists"


class Unauthorized(BorgaError):
    code = ErrorCode.UNAUTHORIZED
    message = "Invalid or missing token"


class GameNotFound(BorgaError):
    code = ErrorCode.GAME_NOT_FOUND
    message = "Game was not found in the catalog"


class CatalogUnavailable(BorgaError):
    code = ErrorCode.CATALOG_UNAVAILABLE
    message = "Game catalog is unavailable, try again later"


class InvalidOperation(BorgaError):
    code = ErrorCode.INVALID_OPERATION
    message = "Operation cannot be executed with a token"
