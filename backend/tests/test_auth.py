import base64

from updoo.auth import create_access_token, decode_access_token, hash_password, verify_password
from updoo.models.enums import Language, Role
from updoo.services.identity import Caller


def test_password_hash_roundtrip():
    password = "strong-pass-123"
    hashed = hash_password(password)
    assert verify_password(password, hashed)
    assert not verify_password("wrong-password", hashed)


def test_access_token_roundtrip():
    token = create_access_token(42)
    user_id = decode_access_token(token)
    assert user_id == 42


def test_tampered_token_is_rejected():
    token = create_access_token(42)
    padded = token + "=" * (-len(token) % 4)
    user_id, exp, nonce, _ = base64.urlsafe_b64decode(padded).decode("utf-8").split(":", 3)
    forged = base64.urlsafe_b64encode(f"{user_id}:{exp}:{nonce}:{'0' * 64}".encode("utf-8")).decode("utf-8")
    assert decode_access_token(forged) is None
    assert decode_access_token("not-a-token") is None


def test_caller_permissions(client_user, other_client_user, admin_user):
    class Listing:
        author_id = client_user.id

    owner = Caller.for_user(client_user)
    stranger = Caller.for_user(other_client_user)
    admin = Caller.for_user(admin_user)

    assert owner.role == Role.CLIENT and owner.language == Language.POLISH
    assert owner.can_manage(Listing()) and not stranger.can_manage(Listing())
    assert admin.can_manage(Listing()) and admin.is_admin
    assert not Caller.anonymous().is_authenticated
    assert not Caller.anonymous().owns(Listing())
