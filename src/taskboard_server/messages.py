"""Stable message codes returned to clients.

The web client translates these keys; the server never sends prose.
"""

from enum import StrEnum


class ErrorMessage(StrEnum):
    ALL_FIELDS_ARE_REQUIRED = "allFieldsAreRequired"
    EMAIL_IS_REQUIRED = "emailIsRequired"
    INVALID_EMAIL_FORMAT = "invalidEmailFormat"
    USER_ALREADY_EXISTS = "userAlreadyExists"
    USERNAME_ALREADY_TAKEN = "usernameAlreadyTaken"
    USER_DOES_NOT_EXIST = "userDoesNotExist"
    USER_ALREADY_VERIFIED = "userAlreadyVerified"
    USER_NOT_VERIFIED = "userNotVerified"
    USER_DEACTIVATED = "userDeactivated"
    INVALID_CREDENTIALS = "invalidCredentials"
    INVALID_OR_EXPIRED_OTP = "invalidOrExpiredOtp"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    INVALID_ROLE = "invalidRole"
    TEAM_NOT_FOUND = "teamsNotFound"
    PROJECT_NOT_FOUND = "projectNotFound"
    INVITE_ALREADY_SENT = "inviteAlreadySent"
    USER_ALREADY_TEAM_MEMBER = "userAlreadyTeamMember"
    PASSWORD_TOO_SHORT = "passwordMustBeAtLeast8Characters"
    PASSWORD_NEEDS_LOWERCASE = "passwordMustContainLowercase"
    PASSWORD_NEEDS_UPPERCASE = "passwordMustContainUppercase"
    PASSWORD_NEEDS_NUMBER = "passwordMustContainNumber"
    PASSWORD_NEEDS_SPECIAL = "passwordMustContainSpecialCharacter"
    INTERNAL_SERVER_ERROR = "internalServerError"


class SuccessMessage(StrEnum):
    USER_REGISTERED = "userRegisteredSuccessfully"
    USER_VERIFIED = "userVerifiedSuccessfully"
    LOGIN_SUCCESSFUL = "loginSuccessful"
    LOGOUT_SUCCESSFUL = "logoutSuccessful"
    OTP_SENT = "otpSentSuccessfully"
    PASSWORD_RESET_REQUESTED = "passwordResetEmailSent"
    PASSWORD_UPDATED = "passwordUpdatedSuccessfully"
    INVITE_SENT = "inviteSentSuccessfully"
    MEMBER_ADDED = "memberAddedSuccessfully"
    USER_FETCHED = "userFetchedSuccessfully"
    PROJECTS_FETCHED = "projectsFetchedSuccessfully"
    PROJECT_FETCHED = "projectFetchedSuccessfully"
    PROJECT_CREATED = "projectCreatedSuccessfully"
    PROJECT_UPDATED = "projectUpdatedSuccessfully"
    TEAM_CREATED = "teamCreatedSuccessfully"
    TEAMS_FETCHED = "teamsRetrievedSuccessfully"
