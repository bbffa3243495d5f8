import pytest

from app.services.owner_resolver import OwnerResolver, parse_repository_identifier
from app.shared_kernel.exceptions import EntityNotFoundError, InvalidScopeError
from app.shared_kernel.value_objects import OwnerType


@pytest.mark.asyncio
async def test_resolve_user_by_name(db, accounts):
    owner = await OwnerResolver(db).resolve(OwnerType.INDIVIDUAL, "alice")
    assert owner == accounts.alice_owner


@pytest.mark.asyncio
async def test_resolve_user_name_is_case_insensitive(db, accounts):
    owner = await OwnerResolver(db).resolve(OwnerType.INDIVIDUAL, "ALICE")
    assert owner.id == accounts.alice_owner.id
    assert owner.name == "alice"


@pytest.mark.asyncio
async def test_resolve_organization(db, accounts):
    owner = await OwnerResolver(db).resolve(OwnerType.ORGANIZATION, "acme")
    assert owner.kind == OwnerType.ORGANIZATION
    assert owner.id == accounts.acme_owner.id


@pytest.mark.asyncio
async def test_resolve_repository_from_pair_and_string(db, accounts):
    resolver = OwnerResolver(db)
    from_pair = await resolver.resolve(OwnerType.REPOSITORY, ("acme", "rocket"))
    from_string = await resolver.resolve(OwnerType.REPOSITORY, "acme/rocket")
    assert from_pair == from_string == accounts.rocket_owner


@pytest.mark.asyncio
async def test_resolve_scope_kind_from_string(db, accounts):
    owner = await OwnerResolver(db).resolve("organization", "acme")
    assert owner == accounts.acme_owner


@pytest.mark.asyncio
async def test_organization_name_under_user_scope_is_not_found(db, accounts):
    with pytest.raises(EntityNotFoundError):
        await OwnerResolver(db).resolve(OwnerType.INDIVIDUAL, "acme")


@pytest.mark.asyncio
async def test_unknown_names_are_not_found(db, accounts):
    resolver = OwnerResolver(db)
    with pytest.raises(EntityNotFoundError):
        await resolver.resolve(OwnerType.ORGANIZATION, "nobody")
    with pytest.raises(EntityNotFoundError):
        await resolver.resolve(OwnerType.REPOSITORY, ("alice", "missing"))
    with pytest.raises(EntityNotFoundError) as exc_info:
        await resolver.resolve(OwnerType.REPOSITORY, ("nobody", "rocket"))
    assert exc_info.value.code == "not_found"
    assert exc_info.value.details["name"] == "nobody/rocket"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "identifier",
    ["acme", "acme/rocket/extra", "/rocket", ("acme",), ("acme", ""), ("acme", "rocket", "x"), 42],
)
async def test_malformed_repository_identifier(db, accounts, identifier):
    with pytest.raises(InvalidScopeError) as exc_info:
        await OwnerResolver(db).resolve(OwnerType.REPOSITORY, identifier)
    assert exc_info.value.code == "invalid_scope"


@pytest.mark.asyncio
async def test_unknown_scope_kind(db, accounts):
    with pytest.raises(InvalidScopeError):
        await OwnerResolver(db).resolve("team", "acme")


def test_parse_repository_identifier_strips_names():
    assert parse_repository_identifier((" acme ", "rocket")) == ("acme", "rocket")
