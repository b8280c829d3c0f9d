"""Unit tests for the password reset flow (request code → consume code)."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from errors import (
    InternalError,
    InvalidResetCodeError,
    NotFoundError,
    StateError,
    ValidationError,
)
from schemas.models.user import UserDoc
from services.password_reset_service import PasswordResetService
from shared.crypto import hash_password, hash_secret, verify_password, verify_secret

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def ada(user_repository):
    return await user_repository.create("Ada", "ada@example.com", hash_password("secret1"))


@pytest.fixture
def dev_service(user_repository, clock) -> PasswordResetService:
    """No email provider, codes exposed (development setup)."""
    return PasswordResetService(user_repository, None, expose_code=True, clock=clock)


def _email_provider(sent: bool = True) -> AsyncMock:
    provider = AsyncMock()
    provider.send_password_reset_email.return_value = sent
    return provider


# ---------------------------------------------------------------------------
# request_reset
# ---------------------------------------------------------------------------


class TestRequestReset:
    async def test_invalid_email(self, dev_service):
        with pytest.raises(ValidationError, match="Invalid email"):
            await dev_service.request_reset("nope")

    async def test_unknown_email_creates_no_state(self, dev_service, user_repository, ada):
        result = await dev_service.request_reset("ghost@example.com")
        assert result.exists is False
        assert result.code is None

        stored = await user_repository.find_by_email("ada@example.com")
        assert stored.has_pending_reset is False

    async def test_known_email_stores_hashed_code(self, dev_service, user_repository, ada):
        result = await dev_service.request_reset(" ADA@example.com ")
        assert result.exists is True
        assert result.code is not None and len(result.code) == 6

        stored = await user_repository.find_by_email("ada@example.com")
        assert stored.reset_code_hash != result.code
        assert verify_secret(result.code, stored.reset_code_hash)
        assert stored.reset_code_expired(T0 + timedelta(minutes=10)) is False
        assert stored.reset_code_expired(T0 + timedelta(minutes=10, seconds=1)) is True

    async def test_sends_email_when_provider_configured(self, user_repository, ada, clock):
        provider = _email_provider()
        service = PasswordResetService(user_repository, provider, expose_code=True, clock=clock)

        result = await service.request_reset("ada@example.com")

        assert result.code_sent is True
        assert result.code is None
        provider.send_password_reset_email.assert_awaited_once()
        email, name, code = provider.send_password_reset_email.call_args.args
        assert (email, name) == ("ada@example.com", "Ada")
        stored = await user_repository.find_by_email("ada@example.com")
        assert verify_secret(code, stored.reset_code_hash)

    async def test_delivery_failure_is_internal_error(self, user_repository, ada, clock):
        service = PasswordResetService(
            user_repository, _email_provider(sent=False), expose_code=True, clock=clock
        )
        with pytest.raises(InternalError, match="Failed to send reset code"):
            await service.request_reset("ada@example.com")

    async def test_no_provider_and_not_exposed_fails_before_writing(
        self, user_repository, ada, clock
    ):
        service = PasswordResetService(user_repository, None, expose_code=False, clock=clock)
        with pytest.raises(InternalError, match="Email delivery is not configured"):
            await service.request_reset("ada@example.com")

        stored = await user_repository.find_by_email("ada@example.com")
        assert stored.has_pending_reset is False

    async def test_second_request_overwrites_first(self, dev_service, ada):
        first = await dev_service.request_reset("ada@example.com")
        second = await dev_service.request_reset("ada@example.com")
        if first.code == second.code:
            pytest.skip("random codes collided")

        with pytest.raises(InvalidResetCodeError):
            await dev_service.reset_password("ada@example.com", first.code, "newpass1")
        await dev_service.reset_password("ada@example.com", second.code, "newpass1")


# ---------------------------------------------------------------------------
# reset_password
# ---------------------------------------------------------------------------


class TestResetPassword:
    @pytest.mark.parametrize(
        "email, code, new_password, message",
        [
            ("bad", "123456", "newpass1", "Invalid email"),
            ("ada@example.com", "123", "newpass1", "Invalid code"),
            ("ada@example.com", "  12  ", "newpass1", "Invalid code"),
            ("ada@example.com", None, "newpass1", "Invalid code"),
            ("ada@example.com", "123456", "12345", "Password must be at least 6 characters"),
        ],
        ids=["bad_email", "short_code", "short_code_after_trim", "no_code", "short_password"],
    )
    async def test_validation(self, dev_service, email, code, new_password, message):
        with pytest.raises(ValidationError) as exc:
            await dev_service.reset_password(email, code, new_password)
        assert exc.value.message == message

    async def test_unknown_email(self, dev_service):
        with pytest.raises(NotFoundError, match="Email not found"):
            await dev_service.reset_password("ghost@example.com", "123456", "newpass1")

    async def test_no_pending_reset(self, dev_service, ada):
        with pytest.raises(StateError, match="No reset request found"):
            await dev_service.reset_password("ada@example.com", "123456", "newpass1")

    async def test_success_replaces_password_and_clears_state(
        self, dev_service, user_repository, ada, clock
    ):
        code = (await dev_service.request_reset("ada@example.com")).code
        clock.advance(timedelta(minutes=9))

        await dev_service.reset_password("ada@example.com", f" {code} ", "newpass1")

        stored = await user_repository.find_by_email("ada@example.com")
        assert verify_password("newpass1", stored.password_hash)
        assert not verify_password("secret1", stored.password_hash)
        assert stored.reset_code_hash is None
        assert stored.reset_code_expires_at is None

    async def test_code_is_single_use(self, dev_service, ada):
        code = (await dev_service.request_reset("ada@example.com")).code
        await dev_service.reset_password("ada@example.com", code, "newpass1")

        with pytest.raises(StateError, match="No reset request found"):
            await dev_service.reset_password("ada@example.com", code, "another1")

    async def test_expired_code_rejected_and_password_unchanged(
        self, dev_service, user_repository, ada, clock
    ):
        code = (await dev_service.request_reset("ada@example.com")).code
        clock.advance(timedelta(minutes=10, seconds=1))

        with pytest.raises(StateError, match="Code expired"):
            await dev_service.reset_password("ada@example.com", code, "newpass1")

        stored = await user_repository.find_by_email("ada@example.com")
        assert verify_password("secret1", stored.password_hash)
        # Expired state is left in place until a new request supersedes it.
        assert stored.has_pending_reset is True

    async def test_expiry_checked_before_code(self, dev_service, ada, clock):
        await dev_service.request_reset("ada@example.com")
        clock.advance(timedelta(hours=1))
        with pytest.raises(StateError, match="Code expired"):
            await dev_service.reset_password("ada@example.com", "000000", "newpass1")

    async def test_wrong_code_keeps_pending_state(self, dev_service, user_repository, ada):
        code = (await dev_service.request_reset("ada@example.com")).code
        wrong = "100000" if code != "100000" else "100001"

        with pytest.raises(InvalidResetCodeError, match="Wrong code"):
            await dev_service.reset_password("ada@example.com", wrong, "newpass1")

        stored = await user_repository.find_by_email("ada@example.com")
        assert stored.has_pending_reset is True
        assert verify_password("secret1", stored.password_hash)

        await dev_service.reset_password("ada@example.com", code, "newpass1")

    async def test_lost_race_reports_no_reset(self, clock):
        user = UserDoc(
            name="Ada",
            email="ada@example.com",
            password_hash=hash_password("secret1"),
            reset_code_hash=hash_secret("123456"),
            reset_code_expires_at=T0 + timedelta(minutes=5),
        )
        repo = AsyncMock()
        repo.find_by_email.return_value = user
        repo.complete_password_reset.return_value = False

        service = PasswordResetService(repo, None, expose_code=True, clock=clock)
        with pytest.raises(StateError, match="No reset request found"):
            await service.reset_password("ada@example.com", "123456", "newpass1")
