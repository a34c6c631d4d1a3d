"""Tests for password hashing, tokens, the credential store and auth flows."""

from datetime import timedelta

import pytest
from fastapi import HTTPException

from comply.api.dependencies import require_role
from comply.exceptions import (
    DuplicateEmailError,
    ForbiddenError,
    InactiveAccountError,
    InvalidCredentialsError,
    NotFoundError,
)
from comply.models.enums import Role
from comply.models.user import User
from comply.schemas.auth import TokenClaims, UserRegister
from comply.services.auth import (
    AuthService,
    CredentialStore,
    PasswordHasher,
    TokenService,
    to_public_view,
)
from comply.services.authorization import authorize, ensure_authorized

SECRET = "test-signing-secret"


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenService(secret=SECRET, expiration_minutes=30)


@pytest.fixture
def auth_service(db, hasher, tokens):
    return AuthService(db, hasher=hasher, tokens=tokens)


def _register(auth_service, email="jane@example.com", password="s3cret-pass"):
    return auth_service.register(
        UserRegister(email=email, password=password, first_name="Jane", last_name="Doe")
    )


class TestPasswordHasher:
    """Tests for PasswordHasher."""

    def test_verify_matches_own_hash(self, hasher):
        digest = hasher.hash("correct horse")
        assert hasher.verify("correct horse", digest) is True

    def test_verify_rejects_other_password(self, hasher):
        digest = hasher.hash("correct horse")
        assert hasher.verify("battery staple", digest) is False

    def test_hash_is_salted(self, hasher):
        assert hasher.hash("same password") != hasher.hash("same password")

    def test_hash_never_contains_plaintext(self, hasher):
        assert "plaintext-pw" not in hasher.hash("plaintext-pw")

    def test_default_cost_factor_is_ten(self):
        digest = PasswordHasher().hash("pw")
        assert digest.startswith("$2b$10$")

    @pytest.mark.parametrize("digest", ["", "not-a-hash", "$2b$10$short", None])
    def test_malformed_digest_returns_false(self, hasher, digest):
        assert hasher.verify("anything", digest) is False


class TestTokenService:
    """Tests for TokenService."""

    def test_roundtrip_preserves_claims(self, tokens):
        token = tokens.create_access_token("user-1", "jane@example.com", Role.ADMIN)
        claims = tokens.decode_access_token(token)

        assert isinstance(claims, TokenClaims)
        assert claims.sub == "user-1"
        assert claims.email == "jane@example.com"
        assert claims.role == Role.ADMIN
        assert claims.exp - claims.iat == timedelta(minutes=30)

    def test_expired_token_is_invalid(self, tokens):
        token = tokens.create_access_token(
            "user-1", "jane@example.com", Role.USER, expires_delta=timedelta(seconds=-1)
        )
        assert tokens.decode_access_token(token) is None

    def test_altered_signature_is_invalid(self, tokens):
        token = tokens.create_access_token("user-1", "jane@example.com", Role.USER)
        header, payload, signature = token.split(".")
        flipped = "A" if signature[0] != "A" else "B"
        tampered = f"{header}.{payload}.{flipped}{signature[1:]}"

        assert tokens.decode_access_token(tampered) is None

    def test_other_secret_is_invalid(self, tokens):
        token = TokenService(secret="someone-else").create_access_token(
            "user-1", "jane@example.com", Role.ADMIN
        )
        assert tokens.decode_access_token(token) is None

    def test_garbage_is_invalid(self, tokens):
        assert tokens.decode_access_token("not.a.token") is None
        assert tokens.decode_access_token("") is None

    def test_missing_secret_is_rejected(self):
        with pytest.raises(ValueError):
            TokenService(secret="")


class TestAuthorization:
    """Tests for the role policy."""

    def _claims(self, role):
        tokens = TokenService(secret=SECRET)
        return tokens.decode_access_token(tokens.create_access_token("u", "u@example.com", role))

    def test_admin_satisfies_every_role(self):
        claims = self._claims(Role.ADMIN)
        assert authorize(claims, Role.ADMIN) is True
        assert authorize(claims, Role.USER) is True

    def test_user_cannot_act_as_admin(self):
        claims = self._claims(Role.USER)
        assert authorize(claims, Role.USER) is True
        assert authorize(claims, Role.ADMIN) is False

    def test_ensure_authorized_raises_forbidden(self):
        with pytest.raises(ForbiddenError):
            ensure_authorized(self._claims(Role.USER), Role.ADMIN)

    def test_role_guard_refuses_user_with_403(self):
        guard = require_role(Role.ADMIN)
        with pytest.raises(HTTPException) as exc:
            guard(current_user=object(), claims=self._claims(Role.USER))

        assert exc.value.status_code == 403
        assert exc.value.detail == "You don't have permission to perform this action"

    def test_role_guard_passes_admin_through(self):
        user = object()
        guard = require_role(Role.ADMIN)
        assert guard(current_user=user, claims=self._claims(Role.ADMIN)) is user


class TestCredentialStore:
    """Tests for CredentialStore."""

    def test_duplicate_email_is_rejected_by_the_store(self, db, hasher):
        store = CredentialStore(db)
        store.create("dup@example.com", hasher.hash("pw"), "A", "B")

        with pytest.raises(DuplicateEmailError):
            store.create("dup@example.com", hasher.hash("pw2"), "C", "D")

        assert db.query(User).filter(User.email == "dup@example.com").count() == 1

    def test_email_is_case_sensitive(self, db, hasher):
        store = CredentialStore(db)
        store.create("Case@example.com", hasher.hash("pw"), "A", "B")

        assert store.get_by_email("case@example.com") is None
        assert store.get_by_email("Case@example.com") is not None

    def test_get_by_id_missing(self, db):
        with pytest.raises(NotFoundError):
            CredentialStore(db).get_by_id("does-not-exist")

    def test_new_users_are_active_users(self, db, hasher):
        user = CredentialStore(db).create("new@example.com", hasher.hash("pw"), "A", "B")
        assert user.role == Role.USER
        assert user.is_active is True
        assert user.created_at is not None


class TestAuthService:
    """Tests for login, registration and profile flows."""

    def test_register_hashes_password_and_logs_in(self, db, auth_service, tokens):
        result = _register(auth_service)

        stored = db.query(User).filter(User.email == "jane@example.com").one()
        assert stored.password_hash != "s3cret-pass"
        assert result.user.id == stored.id
        assert tokens.decode_access_token(result.access_token).sub == stored.id

    def test_register_twice_fails(self, db, auth_service):
        _register(auth_service)
        with pytest.raises(DuplicateEmailError):
            _register(auth_service, password="different-pass")
        assert db.query(User).count() == 1

    def test_login_returns_token_and_public_view(self, auth_service, tokens):
        _register(auth_service)
        result = auth_service.login("jane@example.com", "s3cret-pass")

        claims = tokens.decode_access_token(result.access_token)
        assert claims.email == "jane@example.com"
        assert claims.role == Role.USER
        assert "password_hash" not in result.user.model_dump()

    def test_login_wrong_password(self, auth_service):
        _register(auth_service)
        with pytest.raises(InvalidCredentialsError):
            auth_service.login("jane@example.com", "wrong-pass")

    def test_login_unknown_email_matches_wrong_password(self, auth_service):
        _register(auth_service)
        with pytest.raises(InvalidCredentialsError) as unknown:
            auth_service.login("nobody@example.com", "s3cret-pass")
        with pytest.raises(InvalidCredentialsError) as wrong:
            auth_service.login("jane@example.com", "wrong-pass")
        assert str(unknown.value) == str(wrong.value)

    def test_login_inactive_account(self, db, auth_service):
        _register(auth_service)
        user = db.query(User).filter(User.email == "jane@example.com").one()
        user.is_active = False
        db.commit()

        with pytest.raises(InactiveAccountError):
            auth_service.login("jane@example.com", "s3cret-pass")

    def test_inactive_account_with_wrong_password_is_invalid_credentials(self, db, auth_service):
        _register(auth_service)
        user = db.query(User).filter(User.email == "jane@example.com").one()
        user.is_active = False
        db.commit()

        with pytest.raises(InvalidCredentialsError):
            auth_service.login("jane@example.com", "wrong-pass")

    def test_get_profile(self, auth_service):
        registered = _register(auth_service)
        profile = auth_service.get_profile(registered.user.id)

        assert profile.email == "jane@example.com"
        assert profile.first_name == "Jane"

    def test_get_profile_missing(self, auth_service):
        with pytest.raises(NotFoundError):
            auth_service.get_profile("missing")


def test_public_view_strips_password_hash(db, hasher):
    user = CredentialStore(db).create("view@example.com", hasher.hash("pw"), "View", "Er")
    view = to_public_view(user).model_dump()

    assert set(view) == {"id", "email", "first_name", "last_name", "role"}
    assert view["id"] == user.id
