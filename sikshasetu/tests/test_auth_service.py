import pytest

from sikshasetu.backend.base import Backend, CollaboratorError, IdentityRecord
from sikshasetu.backend.disabled import (
    DisabledDocumentStore,
    DisabledIdentityProvider,
    DisabledPostStore,
    DisabledProfileStore,
)
from sikshasetu.core.errors import (
    AuthError,
    StorageOperationError,
    ValidationError,
    map_auth_error,
)
from sikshasetu.models.enums import UserRole, VerificationStatus
from sikshasetu.services.auth_service import AuthService, derive_username


class ScriptedIdentity(DisabledIdentityProvider):
    def __init__(self, error=None):
        self.error = error
        self.calls = 0

    def register(self, email, password):
        self.calls += 1
        if self.error:
            raise CollaboratorError(self.error)
        return IdentityRecord(id="id-1", email=email.strip().lower())


class RecordingProfiles(DisabledProfileStore):
    def __init__(self, fail=False):
        self.fail = fail
        self.created = []

    def create_profile(self, profile):
        if self.fail:
            raise CollaboratorError("insert or update on table violates foreign key constraint")
        self.created.append(profile)
        return profile


def service(identity=None, profiles=None):
    backend = Backend(
        identity=identity or ScriptedIdentity(),
        profiles=profiles or RecordingProfiles(),
        posts=DisabledPostStore(),
        documents=DisabledDocumentStore(),
        configured=True,
    )
    return AuthService(backend, password_min_length=6)


@pytest.mark.parametrize(
    "email,password,message",
    [
        ("", "secret1", "Please fill in all fields"),
        ("a@b.c", "", "Please fill in all fields"),
        ("not-an-email", "secret1", "Please enter a valid email address"),
        ("a@b.c", "12345", "Password must be at least 6 characters"),
    ],
)
def test_local_validation_never_reaches_identity_provider(email, password, message):
    identity = ScriptedIdentity()
    svc = service(identity=identity)

    with pytest.raises(ValidationError) as e:
        svc.register(email, password, UserRole.STUDENT)

    assert e.value.message == message
    assert identity.calls == 0


def test_student_profile_starts_unverified_donor_starts_verified():
    profiles = RecordingProfiles()
    svc = service(profiles=profiles)

    student = svc.register("Riya@Example.edu", "secret1", UserRole.STUDENT)
    donor = svc.register("giver@example.org", "secret1", UserRole.DONOR)

    assert student.verification_status == VerificationStatus.UNVERIFIED
    assert student.username == "riya"
    assert donor.verification_status == VerificationStatus.VERIFIED


def test_profile_failure_after_identity_is_reported_not_rolled_back():
    identity = ScriptedIdentity()
    svc = service(identity=identity, profiles=RecordingProfiles(fail=True))

    with pytest.raises(StorageOperationError) as e:
        svc.register("a@b.co", "secret1", UserRole.STUDENT)

    assert identity.calls == 1
    assert "foreign key" not in e.value.message
    assert "Sign in to finish" in e.value.message


def test_existing_account_switches_to_sign_in():
    svc = service(identity=ScriptedIdentity(error="User already registered"))

    with pytest.raises(AuthError) as e:
        svc.register("a@b.co", "secret1", UserRole.DONOR)

    assert e.value.code == "account_exists"
    assert e.value.switch_to_sign_in is True


@pytest.mark.parametrize(
    "raw,code,message",
    [
        ("Invalid login credentials", "invalid_credentials", "Invalid email or password"),
        ("User already registered", "account_exists",
         "An account with this email already exists. Try signing in instead."),
        ('duplicate key value violates unique constraint "identities_email_key"', "account_exists",
         "An account with this email already exists. Try signing in instead."),
        ("Email not confirmed", "email_not_confirmed", "Please check your email and confirm your account"),
        ("FATAL: remaining connection slots are reserved", "auth_failed", "Authentication failed"),
        ("", "auth_failed", "Authentication failed"),
    ],
)
def test_auth_error_allow_list(raw, code, message):
    err = map_auth_error(raw)
    assert err.code == code
    assert err.message == message


def test_derive_username():
    assert derive_username("  asha.k@college.in ") == "asha.k"
