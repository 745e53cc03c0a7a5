import secrets
import time
from typing import Callable

from shared.clients.email.EmailClientInterface import OTP_VALID_MINUTES, EmailClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.otp import EmailResult, OTPEntry, OTPResult

MAX_VERIFY_ATTEMPTS = 3


class OTPService:
    """Issues 6-digit one-time passwords by email and verifies them.

    Codes are held in process memory, keyed by lower-cased email address,
    expire after OTP_VALID_MINUTES and allow MAX_VERIFY_ATTEMPTS wrong guesses.
    """

    def __init__(
        self,
        helper_config: HelperConfig,
        email_client: EmailClientInterface,
        ttl_seconds: float = OTP_VALID_MINUTES * 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._email_client = email_client
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, OTPEntry] = {}

    @staticmethod
    def generate_otp() -> str:
        return str(100000 + secrets.randbelow(900000))

    def store_otp(self, email: str, otp: str) -> None:
        """Remember a code for an address, replacing any previous one."""
        self._entries[email.strip().lower()] = OTPEntry(otp=otp, expires_at=self._clock() + self._ttl_seconds)
        self.cleanup_expired()

    def cleanup_expired(self) -> int:
        now = self._clock()
        expired = [email for email, entry in self._entries.items() if now > entry.expires_at]
        for email in expired:
            del self._entries[email]
        return len(expired)

    def verify_otp(self, email: str, provided: str) -> OTPResult:
        key = email.strip().lower()
        entry = self._entries.get(key)
        if entry is None:
            return OTPResult(success=False, message="No OTP found for this email")

        if self._clock() > entry.expires_at:
            del self._entries[key]
            return OTPResult(success=False, message="OTP has expired")

        if entry.attempts >= MAX_VERIFY_ATTEMPTS:
            del self._entries[key]
            return OTPResult(success=False, message="Too many failed attempts. Please request a new OTP")

        if secrets.compare_digest(entry.otp.encode(), provided.strip().encode()):
            del self._entries[key]
            return OTPResult(success=True, message="OTP verified successfully")

        entry.attempts += 1
        remaining = MAX_VERIFY_ATTEMPTS - entry.attempts
        return OTPResult(success=False, message=f"Invalid OTP. {remaining} attempts remaining")

    async def send_otp(self, email: str) -> EmailResult:
        """Generate, remember and email a fresh code. A failed send forgets the code again."""
        otp = self.generate_otp()
        self.store_otp(email, otp)
        result = await self._email_client.do_send_otp(email.strip(), otp)
        if not result.success:
            self._entries.pop(email.strip().lower(), None)
        return result
