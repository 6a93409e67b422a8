"""Password reset request/response schemas.

Every input field is optional at the schema level: presence and
non-emptiness are checked by the reset flow so that a missing field is
reported as a 400 before any collaborator is contacted.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ResetFlowRequest(BaseModel):
    """Base for reset flow bodies; numbers sent for text fields are accepted."""

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")


class SendCodeRequest(ResetFlowRequest):
    """Body for POST /send-code."""

    email: str | None = Field(
        default=None,
        validation_alias=AliasChoices("email", "user_email"),
        description="Address the code is sent to",
    )


class VerifyCodeRequest(ResetFlowRequest):
    """Body for POST /verify-code."""

    email: str | None = Field(default=None, validation_alias=AliasChoices("email", "user_email"))
    code: str | None = Field(default=None, validation_alias=AliasChoices("code", "user_code"))


class ResetPasswordRequest(ResetFlowRequest):
    """Body for POST /reset-password."""

    email: str | None = Field(default=None, validation_alias=AliasChoices("email", "user_email"))
    new_password: str | None = Field(
        default=None,
        validation_alias=AliasChoices("new_password", "password"),
    )
    code: str | None = Field(default=None, validation_alias=AliasChoices("code", "user_code"))


class VerifyCodeResponse(BaseModel):
    """Result of a code check. An invalid code is a normal result, not an error."""

    success: bool = Field(default=True)
    valid: bool = Field(description="Whether the store accepted the code")
