"""Unit tests for the permission catalog, role-based oracle and gate"""

import logging

import pytest

from ldn_inbox.auth import (
    DEFAULT_ROLES,
    MANAGER_ROLE,
    READER_ROLE,
    Actor,
    Permission,
    PermissionCheckerPort,
    PermissionGate,
    ResourceDescriptor,
    ResourceRole,
    RoleBasedPermissionChecker,
)
from ldn_inbox.auth.permissions import PERMISSION_CATALOG, describe_permission
from ldn_inbox.auth.roles import get_granting_roles, has_permission
from ldn_inbox.auth.schemas import actor_id
from ldn_inbox.errors import PermissionDeniedError

ALICE = "https://example.com/i/alice"
BOB = "https://example.com/i/bob"


class RecordingChecker(PermissionCheckerPort):
    """Oracle that records every call and allows everything"""

    def __init__(self):
        self.calls = []

    def check_permission(self, actor, permission, resource=None):
        self.calls.append((actor, permission, resource))


class TestPermissionCatalog:
    """Test the permission catalog"""

    def test_all_permissions_described(self):
        """Test every permission has a label and comment"""
        assert set(PERMISSION_CATALOG) == set(Permission)
        for entry in PERMISSION_CATALOG.values():
            assert entry["label"]
            assert entry["comment"]

    def test_str_is_permission_id(self):
        assert str(Permission.LDN_MESSAGE_REMOVE) == "LDN_MESSAGE_REMOVE"

    def test_describe_permission(self):
        assert describe_permission(Permission.LDN_INBOX_ACCESS) == "Access an LDN inbox"


class TestActor:
    """Test actor helpers"""

    def test_owning_scopes_role_to_own_id(self):
        actor = Actor.owning(ALICE, MANAGER_ROLE)
        assert actor.roles == [ResourceRole(role=MANAGER_ROLE, resources=[ALICE])]
        assert actor.roles[0].is_global is False

    def test_actor_id_for_logging(self):
        """Test the log context id of an actor and of the system caller"""
        assert actor_id(Actor.owning(ALICE, MANAGER_ROLE)) == ALICE
        assert actor_id(None) is None


class TestRoleDefinitions:
    """Test default role definitions"""

    def test_manager_has_everything(self):
        for permission in Permission:
            assert has_permission(DEFAULT_ROLES, MANAGER_ROLE, permission) is True

    def test_reader_is_read_only(self):
        assert has_permission(DEFAULT_ROLES, READER_ROLE, Permission.LDN_INBOX_ACCESS) is True
        assert has_permission(DEFAULT_ROLES, READER_ROLE, Permission.LDN_MESSAGE_ACCESS) is True
        assert has_permission(DEFAULT_ROLES, READER_ROLE, Permission.LDN_MESSAGE_INSERT) is False

    def test_unknown_role_grants_nothing(self):
        assert has_permission(DEFAULT_ROLES, "ldn-inbox.ghost", Permission.LDN_INBOX_ACCESS) is False

    def test_granting_roles(self):
        assert get_granting_roles(DEFAULT_ROLES, Permission.LDN_INBOX_REMOVE) == {MANAGER_ROLE}


class TestRoleBasedPermissionChecker:
    """Test oracle decisions for global and resource-scoped roles"""

    @pytest.fixture
    def checker(self):
        return RoleBasedPermissionChecker()

    def test_unscoped_check_uses_roles_only(self, checker):
        """Test a resource-scoped role passes the coarse (unscoped) check"""
        checker.check_permission(Actor.owning(ALICE, MANAGER_ROLE), Permission.LDN_INBOX_ACCESS)

    def test_owner_allowed(self, checker):
        resource = ResourceDescriptor("https://example.com/inbox/1", (ALICE,))
        checker.check_permission(Actor.owning(ALICE, MANAGER_ROLE), Permission.LDN_INBOX_REMOVE, resource)

    def test_non_owner_denied(self, checker):
        """Test denial names the permission, actor and resource"""
        resource = ResourceDescriptor("https://example.com/inbox/1", (ALICE,))
        with pytest.raises(PermissionDeniedError) as exc_info:
            checker.check_permission(Actor.owning(BOB, MANAGER_ROLE), Permission.LDN_INBOX_REMOVE, resource)
        assert exc_info.value.details == {
            "permission": "LDN_INBOX_REMOVE",
            "actor": BOB,
            "resource": "https://example.com/inbox/1",
        }

    def test_role_restricted_to_resource_id(self, checker):
        """Test a role listing a resource id applies to that resource only"""
        actor = Actor(id=BOB, roles=[ResourceRole(role=READER_ROLE, resources=["https://example.com/inbox/1"])])
        checker.check_permission(
            actor, Permission.LDN_INBOX_ACCESS, ResourceDescriptor("https://example.com/inbox/1", (ALICE,))
        )
        with pytest.raises(PermissionDeniedError):
            checker.check_permission(
                actor, Permission.LDN_INBOX_ACCESS, ResourceDescriptor("https://example.com/inbox/2", (ALICE,))
            )

    def test_global_role_allowed_everywhere(self, checker):
        admin = Actor(id="admin", roles=[ResourceRole(role=MANAGER_ROLE)])
        checker.check_permission(admin, Permission.LDN_MESSAGE_REMOVE, ResourceDescriptor("m1", (BOB,)))

    def test_role_without_permission_denied(self, checker):
        reader = Actor(id="auditor", roles=[ResourceRole(role=READER_ROLE)])
        with pytest.raises(PermissionDeniedError) as exc_info:
            checker.check_permission(reader, Permission.LDN_MESSAGE_INSERT)
        assert exc_info.value.permission == "LDN_MESSAGE_INSERT"

    def test_actor_without_roles_denied(self, checker):
        with pytest.raises(PermissionDeniedError):
            checker.check_permission(Actor(id="nobody"), Permission.LDN_INBOX_ACCESS)

    def test_custom_role_definitions(self):
        checker = RoleBasedPermissionChecker({"poster": ["LDN_MESSAGE_INSERT"]})
        poster = Actor(id="poster", roles=[ResourceRole(role="poster")])
        checker.check_permission(poster, Permission.LDN_MESSAGE_INSERT)
        with pytest.raises(PermissionDeniedError):
            checker.check_permission(poster, Permission.LDN_MESSAGE_ACCESS)


class TestPermissionGate:
    """Test the gate in front of the oracle"""

    def test_system_caller_bypasses_oracle(self):
        """Test a None actor never reaches the oracle"""
        checker = RecordingChecker()
        gate = PermissionGate(checker)
        gate.authorize(None, Permission.LDN_INBOX_REMOVE, ResourceDescriptor("i1", (ALICE,)))
        assert gate.is_authorized(None, Permission.LDN_INBOX_REMOVE) is True
        assert checker.calls == []

    def test_inbox_descriptor(self):
        checker = RecordingChecker()
        actor = Actor.owning(ALICE, MANAGER_ROLE)
        PermissionGate(checker).authorize_inbox(actor, Permission.LDN_INBOX_ACCESS, "i1", ALICE)
        assert checker.calls == [(actor, Permission.LDN_INBOX_ACCESS, ResourceDescriptor("i1", (ALICE,)))]

    def test_message_descriptor_anchored_on_inbox_owner(self):
        checker = RecordingChecker()
        actor = Actor.owning(BOB, MANAGER_ROLE)
        PermissionGate(checker).authorize_message(actor, Permission.LDN_MESSAGE_ACCESS, "m1", ALICE)
        assert checker.calls == [(actor, Permission.LDN_MESSAGE_ACCESS, ResourceDescriptor("m1", (ALICE,)))]

    def test_denial_logged_and_reraised(self, caplog):
        gate = PermissionGate(RoleBasedPermissionChecker())
        with caplog.at_level(logging.WARNING, logger="ldn_inbox.auth.gate"):
            with pytest.raises(PermissionDeniedError):
                gate.authorize_inbox(Actor.owning(BOB, MANAGER_ROLE), Permission.LDN_INBOX_REMOVE, "i1", ALICE)
        assert len(caplog.records) == 1
        assert caplog.records[0].permission == "LDN_INBOX_REMOVE"
        assert caplog.records[0].actor_id == BOB

    def test_is_authorized(self):
        gate = PermissionGate(RoleBasedPermissionChecker())
        alice = Actor.owning(ALICE, MANAGER_ROLE)
        assert gate.is_authorized(alice, Permission.LDN_INBOX_ACCESS, ResourceDescriptor("i1", (ALICE,))) is True
        assert gate.is_authorized(alice, Permission.LDN_INBOX_ACCESS, ResourceDescriptor("i2", (BOB,))) is False
