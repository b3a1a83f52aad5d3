# /tests/test_auth_service.py

from datetime import datetime, timedelta, timezone

from app.core.errors import ErrorCode
from app.core.security import TokenCodec, pwd_context, verify_password
from app.db.models.auth_models import UserRole
from app.services import auth_service
from app.services.auth_service import AuthService


def test_register_then_login(db_service, codec):
    auth = AuthService(db_service, codec)
    registered = auth.register("Admin@School.org", "s3cret-pw")
    assert registered.ok
    assert registered.error is None
    assert registered.value.email == "admin@school.org"
    assert registered.value.role == UserRole.ADMIN

    login = auth.login("  ADMIN@school.org ", "s3cret-pw")
    assert login.ok
    assert login.value.token_type == "bearer"


def test_register_is_idempotent_first_write_wins(db_service, codec):
    auth = AuthService(db_service, codec)
    first = auth.register("x@y.com", "pw1")
    second = auth.register("x@y.com", "pw2")

    assert first.ok and second.ok
    assert second.error == ErrorCode.ALREADY_REGISTERED
    assert db_service.count_users() == 1
    stored = db_service.get_user_by_email("x@y.com")
    assert verify_password("pw1", stored.hashed_password)
    assert not verify_password("pw2", stored.hashed_password)


def test_password_is_never_stored_in_plaintext(db_service, codec):
    AuthService(db_service, codec).register("x@y.com", "pw1")
    stored = db_service.get_user_by_email("x@y.com")
    assert stored.hashed_password != "pw1"
    assert pwd_context.identify(stored.hashed_password) == "pbkdf2_sha256"


def test_reset_hashes_exactly_once(db_service, codec, mocker):
    auth = AuthService(db_service, codec)
    auth.register("x@y.com", "old-password")
    spy = mocker.spy(auth_service, "hash_password")

    assert auth.reset_password("X@Y.com", "new-password").ok
    spy.assert_called_once_with("new-password")

    stored = db_service.get_user_by_email("x@y.com")
    # The stored value is one transformation of the plaintext, not of a hash.
    assert verify_password("new-password", stored.hashed_password)
    assert not verify_password(spy.spy_return, stored.hashed_password)
    assert auth.login("x@y.com", "new-password").ok
    assert auth.login("x@y.com", "old-password").error == ErrorCode.INVALID_CREDENTIALS


def test_register_hashes_exactly_once(db_service, codec, mocker):
    spy = mocker.spy(auth_service, "hash_password")
    AuthService(db_service, codec).register("x@y.com", "pw1")
    spy.assert_called_once_with("pw1")


def test_reset_unknown_email_is_not_found(db_service, codec):
    result = AuthService(db_service, codec).reset_password("ghost@y.com", "pw")
    assert result.error == ErrorCode.NOT_FOUND


def test_login_does_not_reveal_which_part_was_wrong(db_service, codec):
    auth = AuthService(db_service, codec)
    auth.register("x@y.com", "right")

    unknown = auth.login("nobody@y.com", "right")
    wrong = auth.login("x@y.com", "wrong")

    assert unknown.error == wrong.error == ErrorCode.INVALID_CREDENTIALS
    assert unknown.message == wrong.message
    assert unknown.value is None and wrong.value is None


def test_token_carries_identity_and_role(db_service, codec):
    auth = AuthService(db_service, codec)
    user = auth.register("teacher@y.com", "pw", role=UserRole.TEACHER).value
    token = auth.login("teacher@y.com", "pw").value.access_token

    claims = auth.authorize(token)
    assert claims.ok
    assert claims.value.sub == user.id
    assert claims.value.email == "teacher@y.com"
    assert claims.value.role == UserRole.TEACHER


def test_token_expires_after_a_day(db_service, codec):
    auth = AuthService(db_service, codec)
    user = auth.register("x@y.com", "pw").value
    issued = datetime.now(timezone.utc) - timedelta(hours=24, minutes=1)
    stale = codec.sign({"sub": user.id, "email": user.email, "role": "admin"}, timedelta(hours=24), now=issued)

    assert auth.authorize(stale).error == ErrorCode.INVALID_TOKEN


def test_token_signed_with_other_secret_is_rejected(db_service, codec):
    forged = TokenCodec("some-other-secret").sign({"sub": "usr_1", "email": "x@y.com", "role": "admin"}, timedelta(hours=1))
    assert AuthService(db_service, codec).authorize(forged).error == ErrorCode.INVALID_TOKEN


def test_garbage_token_is_rejected(db_service, codec):
    auth = AuthService(db_service, codec)
    assert auth.authorize("not-a-jwt").error == ErrorCode.INVALID_TOKEN
    assert auth.authorize("").error == ErrorCode.INVALID_TOKEN


def test_token_without_role_is_rejected(db_service, codec):
    partial = codec.sign({"sub": "usr_1"}, timedelta(hours=1))
    assert AuthService(db_service, codec).authorize(partial).error == ErrorCode.INVALID_TOKEN


def test_teacher_accounts_can_be_listed_and_deleted(db_service, codec):
    auth = AuthService(db_service, codec)
    auth.register("admin@y.com", "pw")
    teacher = auth.register("t@y.com", "pw", role=UserRole.TEACHER).value

    assert [u.email for u in auth.list_users(UserRole.TEACHER)] == ["t@y.com"]
    assert auth.delete_teacher_user(teacher.id).ok
    assert auth.list_users(UserRole.TEACHER) == []
    assert auth.delete_teacher_user(teacher.id).error == ErrorCode.NOT_FOUND


def test_login_expiry_follows_injected_clock(db_service, codec, clock):
    auth = AuthService(db_service, codec, clock=clock)
    auth.register("x@y.com", "pw1")
    token = auth.login("x@y.com", "pw1").value
    assert token.expires_at == clock() + auth_service.SESSION_TTL


def test_admin_account_is_not_deletable_as_teacher(db_service, codec):
    auth = AuthService(db_service, codec)
    admin = auth.register("admin@y.com", "pw").value

    assert auth.delete_teacher_user(admin.id).error == ErrorCode.NOT_FOUND
    assert db_service.get_user_by_id(admin.id) is not None
