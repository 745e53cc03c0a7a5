from fastapi import APIRouter, Request

from server.core.OTPService import OTPService
from shared.helper.errors import AppError, UpstreamError, ValidationError
from shared.models.otp import OTPSendRequest, OTPVerifyRequest

router = APIRouter(prefix="/api/otp", tags=["otp"])


def _get_otp_service(request: Request) -> OTPService:
    otp_service = getattr(request.app.state, "otp_service", None)
    if otp_service is None:
        raise AppError("OTP delivery is not configured.", status_code=501)
    return otp_service


@router.post("/send")
async def send_otp(request: Request, body: OTPSendRequest) -> dict:
    """Email a fresh 6-digit code to the given address.

    Raises:
        UpstreamError: If the email provider rejects or cannot be reached.
    """
    if "@" not in body.email:
        raise ValidationError("A valid email is required")
    result = await _get_otp_service(request).send_otp(body.email)
    if not result.success:
        raise UpstreamError(result.error or "Failed to send OTP")
    return {"success": True, "message": result.message}


@router.post("/verify")
async def verify_otp(request: Request, body: OTPVerifyRequest) -> dict:
    result = _get_otp_service(request).verify_otp(body.email, body.otp)
    if not result.success:
        raise ValidationError(result.message)
    return result.model_dump()
