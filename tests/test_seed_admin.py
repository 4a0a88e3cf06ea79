"""Admin bootstrap script — creates the first admin once."""

import importlib.util
from pathlib import Path

import pytest

from core.config import settings
from core.security import verify_password
from users.schemas import UserDescriptor, UserPatch

_SCRIPT = Path(__file__).resolve().parent.parent / "bin" / "seed_admin.py"


@pytest.fixture
def seed_admin():
    spec = importlib.util.spec_from_file_location("seed_admin", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def admin_settings(monkeypatch):
    monkeypatch.setattr(settings, "first_admin_username", "root")
    monkeypatch.setattr(settings, "first_admin_password", "S3cret!")


def test_seed_creates_admin(seed_admin, admin_settings, session_factory, service):
    assert seed_admin.seed(session_factory) is True

    admin = service.resolve(UserDescriptor(username="root"))
    assert admin.admin is True
    assert admin.group_id == 0
    assert verify_password("S3cret!", admin.password, admin.salt)


def test_seed_is_idempotent(seed_admin, admin_settings, session_factory, service):
    seed_admin.seed(session_factory)
    assert seed_admin.seed(session_factory) is False
    assert len(service.search(UserDescriptor(username="root"))) == 1


def test_seed_without_credentials_does_nothing(seed_admin, monkeypatch, session_factory, service):
    monkeypatch.setattr(settings, "first_admin_username", "")
    assert seed_admin.seed(session_factory) is False
    assert service.search(UserDescriptor()) == []


def test_seed_ignores_same_name_in_other_group(seed_admin, admin_settings, session_factory, service):
    service.save(service.create(UserPatch(username="root", group_id=5)))

    assert seed_admin.seed(session_factory) is True

    groups = sorted(u.group_id for u in service.search(UserDescriptor(username="root")))
    assert groups == [0, 5]
