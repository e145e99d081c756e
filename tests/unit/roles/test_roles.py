from pipedash.core.roles import ROLE_CATALOGUE, get_permissions_for_role, has_permission, has_permissions


def test_catalogue_levels_are_ordered():
    levels = {role_id: role.level for role_id, role in ROLE_CATALOGUE.items()}
    assert levels == {"admin": 100, "industry_leader": 80, "account_owner": 60, "client_leader": 40}


def test_admin_wildcard_grants_everything():
    assert has_permission("admin", "users:delete")
    assert has_permission("ADMIN", "anything:at-all")


def test_manage_covers_every_action_on_its_resource():
    assert has_permission("client_leader", "opportunities:delete")
    assert has_permission("client_leader", "jobs:update")
    assert not has_permission("client_leader", "jobs:delete")
    assert not has_permission("client_leader", "import:create")


def test_has_permissions_requires_all():
    assert has_permissions("account_owner", ["accounts:read", "export:create"])
    assert not has_permissions("account_owner", ["accounts:read", "accounts:delete"])


def test_unknown_role_has_no_permissions():
    assert get_permissions_for_role("intern") == frozenset()
    assert not has_permission("intern", "reports:read")
