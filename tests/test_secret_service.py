from pawsi.models.enums import ContentKind, ContentStatus
from pawsi.services import content_store
from pawsi.services.ownership_service import resolve_with_secret
from pawsi.services.secret_service import generate_secret, hash_secret, verify_secret


def test_generated_secret_is_six_digits():
    for _ in range(50):
        secret = generate_secret()
        assert len(secret) == 6
        assert secret.isdigit()
        assert 100000 <= int(secret) <= 999999


def test_hash_verifies_only_the_original_secret():
    hashed = hash_secret('482913')
    assert hashed != '482913'
    assert verify_secret('482913', hashed)
    assert not verify_secret('482914', hashed)


def test_verify_rejects_missing_or_malformed_hash():
    assert not verify_secret('482913', None)
    assert not verify_secret('482913', '')
    assert not verify_secret('482913', 'not-a-bcrypt-hash')
    assert not verify_secret('', hash_secret('482913'))


def test_resolve_with_secret_flips_status(session, make_listing):
    item, secret = make_listing(ContentKind.LOST)
    assert secret is not None
    assert item.owner_secret_hash and secret not in item.owner_secret_hash

    assert resolve_with_secret(session, ContentKind.LOST, item.id, secret)
    stored = content_store.get_content(session, ContentKind.LOST, item.id)
    session.refresh(stored)
    assert stored.status == ContentStatus.RESOLVED


def test_resolve_with_wrong_secret_leaves_listing_active(session, make_listing):
    item, secret = make_listing(ContentKind.ADOPTION)
    wrong = '100000' if secret != '100000' else '100001'

    assert not resolve_with_secret(session, ContentKind.ADOPTION, item.id, wrong)
    stored = content_store.get_content(session, ContentKind.ADOPTION, item.id)
    session.refresh(stored)
    assert stored.status == ContentStatus.ACTIVE


def test_resolve_unknown_listing_returns_false(session):
    assert not resolve_with_secret(session, ContentKind.LOST, 'missing-id', '123456')


def test_found_listing_resolved_by_owner_becomes_inactive(session, make_listing):
    item, secret = make_listing(ContentKind.REPORTED)

    assert resolve_with_secret(session, ContentKind.REPORTED, item.id, secret)
    stored = content_store.get_content(session, ContentKind.REPORTED, item.id)
    session.refresh(stored)
    assert stored.status == ContentStatus.INACTIVE
