"""Password reset API routes."""

from fastapi import APIRouter

from src.schemas.common import SuccessResponse
from src.schemas.password_reset import (
    ResetPasswordRequest,
    SendCodeRequest,
    VerifyCodeRequest,
    VerifyCodeResponse,
)
from src.services.password_reset_service import PasswordResetService

router = APIRouter(tags=["password-reset"])


@router.post(
    "/send-code",
    response_model=SuccessResponse,
    summary="Send reset code",
    description="Generate a six-digit code, store it and email it to the address.",
)
async def send_code(data: SendCodeRequest) -> SuccessResponse:
    """Store a fresh reset code and email it.

    Args:
        data: Request with the email address.

    Returns:
        SuccessResponse: Confirmation that the code was stored and sent.
    """
    service = PasswordResetService()
    result = await service.send_code(data.email)
    return SuccessResponse(**result)


@router.post(
    "/verify-code",
    response_model=VerifyCodeResponse,
    summary="Verify reset code",
    description="Check whether a code is currently valid for an email. Does not consume it.",
)
async def verify_code(data: VerifyCodeRequest) -> VerifyCodeResponse:
    """Check a reset code.

    An invalid or expired code is reported as ``valid: false`` with 200.

    Args:
        data: Request with email and code.

    Returns:
        VerifyCodeResponse: Validity of the code.
    """
    service = PasswordResetService()
    valid = await service.verify_code(data.email, data.code)
    return VerifyCodeResponse(valid=valid)


@router.post(
    "/reset-password",
    response_model=SuccessResponse,
    summary="Reset password",
    description="Re-verify the code and set a new password for the account.",
)
async def reset_password(data: ResetPasswordRequest) -> SuccessResponse:
    """Set a new password after verifying the code.

    Args:
        data: Request with email, new password and code.

    Returns:
        SuccessResponse: Confirmation that the password was updated.
    """
    service = PasswordResetService()
    result = await service.reset_password(data.email, data.new_password, data.code)
    return SuccessResponse(**result)
