import pytest

from app.core.config import settings
from app.core.errors import DomainRuleViolation
from app.models.user import User
from app.services import otp_service
from app.services.otp_service import OtpPurpose, consume_otp, generate_otp, issue_otp

MINUTE = 60 * 1000
HOUR = 60 * MINUTE
T0 = 1_700_000_000_000


def new_user():
    return User(
        name="Otp", email="otp@example.com",
        verify_otp="", verify_otp_expire_at=0,
        reset_otp="", reset_otp_expire_at=0,
    )


# ============ SERVICE ============

def test_generate_otp_is_six_digits():
    for _ in range(50):
        otp = generate_otp()
        assert len(otp) == 6
        assert otp.isdigit()


def test_generate_otp_keeps_leading_zeros(monkeypatch):
    monkeypatch.setattr(otp_service.secrets, "randbelow", lambda n: 42)
    assert generate_otp() == "000042"


def test_issue_sets_code_and_expiry_together():
    user = new_user()
    otp = issue_otp(user, OtpPurpose.VERIFY, settings, now=T0)
    assert user.verify_otp == otp
    assert user.verify_otp_expire_at == T0 + 24 * HOUR
    # l'autre usage n'est pas touché
    assert user.reset_otp == "" and user.reset_otp_expire_at == 0


def test_reissue_overwrites_previous_code(monkeypatch):
    user = new_user()
    codes = iter([111111, 222222])
    monkeypatch.setattr(otp_service.secrets, "randbelow", lambda n: next(codes))
    issue_otp(user, OtpPurpose.RESET, settings, now=T0)
    issue_otp(user, OtpPurpose.RESET, settings, now=T0 + MINUTE)

    assert user.reset_otp == "222222"
    with pytest.raises(DomainRuleViolation, match="Invalid OTP"):
        consume_otp(user, OtpPurpose.RESET, "111111", now=T0 + 2 * MINUTE)


def test_verify_code_accepted_before_24h():
    user = new_user()
    otp = issue_otp(user, OtpPurpose.VERIFY, settings, now=T0)
    consume_otp(user, OtpPurpose.VERIFY, otp, now=T0 + 23 * HOUR + 59 * MINUTE)
    assert user.verify_otp == ""
    assert user.verify_otp_expire_at == 0


def test_verify_code_rejected_after_24h():
    user = new_user()
    otp = issue_otp(user, OtpPurpose.VERIFY, settings, now=T0)
    with pytest.raises(DomainRuleViolation, match="OTP Expired"):
        consume_otp(user, OtpPurpose.VERIFY, otp, now=T0 + 24 * HOUR + MINUTE)
    # un code expiré n'est pas effacé par la tentative
    assert user.verify_otp == otp


def test_reset_code_accepted_at_14_minutes():
    user = new_user()
    otp = issue_otp(user, OtpPurpose.RESET, settings, now=T0)
    consume_otp(user, OtpPurpose.RESET, otp, now=T0 + 14 * MINUTE)
    assert user.reset_otp == ""


def test_reset_code_rejected_at_16_minutes():
    user = new_user()
    otp = issue_otp(user, OtpPurpose.RESET, settings, now=T0)
    with pytest.raises(DomainRuleViolation, match="OTP Expired"):
        consume_otp(user, OtpPurpose.RESET, otp, now=T0 + 16 * MINUTE)


def test_wrong_code_is_invalid_even_when_expired():
    user = new_user()
    otp = issue_otp(user, OtpPurpose.RESET, settings, now=T0)
    wrong = "000000" if otp != "000000" else "111111"
    with pytest.raises(DomainRuleViolation, match="Invalid OTP"):
        consume_otp(user, OtpPurpose.RESET, wrong, now=T0 + HOUR)


def test_replay_is_invalid_not_expired():
    user = new_user()
    otp = issue_otp(user, OtpPurpose.VERIFY, settings, now=T0)
    consume_otp(user, OtpPurpose.VERIFY, otp, now=T0 + MINUTE)
    with pytest.raises(DomainRuleViolation, match="Invalid OTP"):
        consume_otp(user, OtpPurpose.VERIFY, otp, now=T0 + 2 * MINUTE)


def test_no_active_code_rejects_empty_input():
    user = new_user()
    with pytest.raises(DomainRuleViolation, match="Invalid OTP"):
        consume_otp(user, OtpPurpose.VERIFY, "", now=T0)


# ============ API ============

@pytest.fixture
def clock(monkeypatch):
    state = {"now": T0}
    monkeypatch.setattr(otp_service, "now_ms", lambda: state["now"])
    return state


@pytest.fixture
def token(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Alice", "email": "alice@example.com", "password": "password123"},
    )
    client.cookies.clear()
    return response.json()["token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_verify_account_flow(client, mailer, token, db):
    response = client.post("/api/auth/send-verify-otp", headers=bearer(token))
    assert response.json() == {"success": True, "message": "Verification OTP sent on Email"}
    otp = mailer.last_otp("verify")

    response = client.post("/api/auth/verify-account", headers=bearer(token), json={"otp": otp})
    assert response.json() == {"success": True, "message": "Email verified successfully"}

    user = db.query(User).filter(User.email == "alice@example.com").one()
    assert user.is_account_verified is True
    assert user.verify_otp == "" and user.verify_otp_expire_at == 0

    data = client.get("/api/user/data", headers=bearer(token)).json()
    assert data["userData"]["isAccountVerified"] is True

    # rejouer le code échoue en "invalid"
    response = client.post("/api/auth/verify-account", headers=bearer(token), json={"otp": otp})
    assert response.json() == {"success": False, "message": "Invalid OTP"}

    response = client.post("/api/auth/send-verify-otp", headers=bearer(token))
    assert response.json() == {"success": False, "message": "Account already verified"}


def test_verify_account_expired_via_api(client, mailer, token, clock):
    client.post("/api/auth/send-verify-otp", headers=bearer(token))
    otp = mailer.last_otp("verify")

    clock["now"] = T0 + 24 * HOUR + MINUTE
    response = client.post("/api/auth/verify-account", headers=bearer(token), json={"otp": otp})
    assert response.json() == {"success": False, "message": "OTP Expired"}


def test_verify_account_requires_auth(client):
    client.cookies.clear()
    response = client.post("/api/auth/verify-account", json={"otp": "123456"})
    assert response.json() == {"success": False, "message": "Not Authorized. Login Again"}


def test_verify_account_missing_otp(client, token):
    response = client.post("/api/auth/verify-account", headers=bearer(token), json={})
    assert response.json() == {"success": False, "message": "Missing OTP"}


def test_send_verify_otp_mail_failure_keeps_code(client, token, failing_mailer, db):
    response = client.post("/api/auth/send-verify-otp", headers=bearer(token))
    assert response.json() == {"success": False, "message": "Could not send email"}

    user = db.query(User).filter(User.email == "alice@example.com").one()
    assert len(user.verify_otp) == 6
    assert user.verify_otp_expire_at > 0


def test_reset_password_flow(client, mailer, token):
    response = client.post("/api/auth/send-reset-otp", json={"email": "alice@example.com"})
    assert response.json() == {"success": True, "message": "OTP sent to your email"}
    otp = mailer.last_otp("reset")

    response = client.post(
        "/api/auth/reset-password",
        json={"email": "alice@example.com", "otp": otp, "newPassword": "new-password"},
    )
    assert response.json() == {"success": True, "message": "Password has been reset successfully"}

    old = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "password123"})
    assert old.json()["success"] is False
    new = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "new-password"})
    assert new.json()["success"] is True

    # code consommé
    response = client.post(
        "/api/auth/reset-password",
        json={"email": "alice@example.com", "otp": otp, "newPassword": "again"},
    )
    assert response.json() == {"success": False, "message": "Invalid OTP"}


def test_reset_password_expired_via_api(client, mailer, token, clock):
    client.post("/api/auth/send-reset-otp", json={"email": "alice@example.com"})
    otp = mailer.last_otp("reset")

    clock["now"] = T0 + 16 * MINUTE
    response = client.post(
        "/api/auth/reset-password",
        json={"email": "alice@example.com", "otp": otp, "newPassword": "new-password"},
    )
    assert response.json() == {"success": False, "message": "OTP Expired"}

    login = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "password123"})
    assert login.json()["success"] is True


def test_send_reset_otp_unknown_email(client, mailer):
    response = client.post("/api/auth/send-reset-otp", json={"email": "ghost@example.com"})
    assert response.json() == {"success": False, "message": "User not found"}
    assert mailer.outbox == []


def test_send_reset_otp_missing_email(client):
    response = client.post("/api/auth/send-reset-otp", json={})
    assert response.json() == {"success": False, "message": "Email is required"}


def test_reset_password_missing_fields(client):
    response = client.post("/api/auth/reset-password", json={"email": "alice@example.com", "otp": "123456"})
    assert response.json() == {"success": False, "message": "Email, OTP and new password are required"}
