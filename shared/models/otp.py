from pydantic import BaseModel


class EmailResult(BaseModel):
    """Outcome of a transactional email send. Provider failures land in ``error``."""

    success: bool
    message: str | None = None
    error: str | None = None


class OTPEntry(BaseModel):
    otp: str
    expires_at: float
    attempts: int = 0


class OTPResult(BaseModel):
    success: bool
    message: str


class OTPSendRequest(BaseModel):
    email: str


class OTPVerifyRequest(BaseModel):
    email: str
    otp: str
