import pytest

from app.models.project import BoardType
from app.schemas.board import BoardUpdate
from app.services.board_service import BoardService
from app.services.hooks import BoardDetachHook
from app.services.project_service import ProjectService
from app.shared_kernel.exceptions import EntityNotFoundError, ValidationError


class RecordingHook(BoardDetachHook):
    def __init__(self):
        self.calls = []

    async def boards_detached(self, db, project_id, board_ids):
        self.calls.append((project_id, list(board_ids)))


async def make_project(db, owner, board_type=BoardType.NONE, **kwargs):
    project = await ProjectService(db).create(owner, "Roadmap", board_type=board_type, **kwargs)
    return project.id


async def board_state(service, project_id):
    return [(board.title, board.sorting, board.is_default) for board in await service.list(project_id)]


@pytest.mark.asyncio
async def test_first_board_becomes_default(db, accounts):
    project_id = await make_project(db, accounts.alice_owner)
    service = BoardService(db)

    board = await service.create(project_id, "  Backlog  ", color="#ff0000")

    assert board.title == "Backlog"
    assert board.color == "#ff0000"
    assert board.sorting == 0
    assert board.is_default is True


@pytest.mark.asyncio
async def test_new_board_goes_last_and_keeps_existing_default(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    service = BoardService(db)

    board = await service.create(project_id, "Archived")

    assert board.sorting == 3
    assert board.is_default is False
    default = await service.get_default(project_id)
    assert default.title == "To Do"


@pytest.mark.asyncio
async def test_create_with_default_moves_the_flag(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    service = BoardService(db)

    await service.create(project_id, "Inbox", is_default=True)

    state = await board_state(service, project_id)
    assert [title for title, _, is_default in state if is_default] == ["Inbox"]


@pytest.mark.asyncio
async def test_create_rejects_empty_title(db, accounts):
    project_id = await make_project(db, accounts.alice_owner)
    service = BoardService(db)

    with pytest.raises(ValidationError) as exc_info:
        await service.create(project_id, "   ")
    assert exc_info.value.details == {"field": "title"}
    assert await service.list(project_id) == []


@pytest.mark.asyncio
async def test_create_on_missing_project(db, accounts):
    with pytest.raises(EntityNotFoundError):
        await BoardService(db).create(9999, "Backlog")


@pytest.mark.asyncio
async def test_get_board_of_another_project_is_not_found(db, accounts):
    first_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    second_id = await make_project(db, accounts.alice_owner)
    service = BoardService(db)
    board_id = (await service.list(first_id))[0].id

    with pytest.raises(EntityNotFoundError):
        await service.get(second_id, board_id)


@pytest.mark.asyncio
async def test_partial_update_keeps_position_and_default(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    service = BoardService(db)
    board_id = (await service.list(project_id))[0].id

    board = await service.update(project_id, board_id, BoardUpdate(color="blue"))

    assert board.color == "blue"
    assert board.title == "To Do"
    assert board.sorting == 0
    assert board.is_default is True


@pytest.mark.asyncio
async def test_update_title_is_trimmed_and_validated(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    service = BoardService(db)
    board_id = (await service.list(project_id))[1].id

    board = await service.update(project_id, board_id, BoardUpdate(title=" Doing "))
    assert board.title == "Doing"

    with pytest.raises(ValidationError):
        await service.update(project_id, board_id, BoardUpdate(title=""))
    assert (await service.get(project_id, board_id)).title == "Doing"


@pytest.mark.asyncio
async def test_update_sorting_bumps_colliding_boards(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    service = BoardService(db)
    done_id = (await service.list(project_id))[2].id

    await service.update(project_id, done_id, BoardUpdate(sorting=0))

    assert await board_state(service, project_id) == [
        ("Done", 0, False),
        ("To Do", 1, True),
        ("In Progress", 2, False),
    ]


@pytest.mark.asyncio
async def test_update_rejects_negative_sorting(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    service = BoardService(db)
    board_id = (await service.list(project_id))[1].id

    with pytest.raises(ValidationError) as exc_info:
        await service.update(project_id, board_id, BoardUpdate(sorting=-1))
    assert exc_info.value.details["field"] == "sorting"


@pytest.mark.asyncio
async def test_update_default_flag(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    service = BoardService(db)
    to_do_id, in_progress_id, _ = [board.id for board in await service.list(project_id)]

    await service.update(project_id, in_progress_id, BoardUpdate(is_default=True))
    assert (await service.get_default(project_id)).id == in_progress_id

    with pytest.raises(ValidationError):
        await service.update(project_id, in_progress_id, BoardUpdate(is_default=False))
    assert (await service.get_default(project_id)).id == in_progress_id

    # clearing the flag of a non-default board is a no-op
    board = await service.update(project_id, to_do_id, BoardUpdate(is_default=False))
    assert board.is_default is False


@pytest.mark.asyncio
async def test_set_default_is_idempotent(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BUG_TRIAGE)
    service = BoardService(db)
    closed_id = (await service.list(project_id))[3].id

    await service.set_default(project_id, closed_id)
    await service.set_default(project_id, closed_id)

    defaults = [board.id for board in await service.list(project_id) if board.is_default]
    assert defaults == [closed_id]


@pytest.mark.asyncio
async def test_delete_default_promotes_smallest_position(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    hook = RecordingHook()
    service = BoardService(db, hook)
    to_do_id = (await service.list(project_id))[0].id

    await service.delete(project_id, to_do_id)

    assert await board_state(service, project_id) == [
        ("In Progress", 1, True),
        ("Done", 2, False),
    ]
    assert hook.calls == [(project_id, [to_do_id])]


@pytest.mark.asyncio
async def test_delete_non_default_keeps_default(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    service = BoardService(db)
    done_id = (await service.list(project_id))[2].id

    await service.delete(project_id, done_id)

    assert (await service.get_default(project_id)).title == "To Do"


@pytest.mark.asyncio
async def test_deleting_every_board_leaves_no_default(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    service = BoardService(db)

    for board_id in [board.id for board in await service.list(project_id)]:
        await service.delete(project_id, board_id)

    assert await service.list(project_id) == []
    assert await service.get_default(project_id) is None


@pytest.mark.asyncio
async def test_delete_missing_board(db, accounts):
    project_id = await make_project(db, accounts.alice_owner)

    with pytest.raises(EntityNotFoundError):
        await BoardService(db).delete(project_id, 4242)


@pytest.mark.asyncio
async def test_hook_failure_rolls_back_delete(db, accounts):
    class FailingHook(BoardDetachHook):
        async def boards_detached(self, db, project_id, board_ids):
            raise RuntimeError("card store unavailable")

    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    board_id = (await BoardService(db).list(project_id))[0].id

    with pytest.raises(RuntimeError):
        await BoardService(db, FailingHook()).delete(project_id, board_id)

    boards = await BoardService(db).list(project_id)
    assert len(boards) == 3
    assert boards[0].is_default is True


@pytest.mark.asyncio
async def test_reorder_rewrites_positions(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    service = BoardService(db)
    to_do_id, in_progress_id, done_id = [board.id for board in await service.list(project_id)]

    ordered = await service.reorder(project_id, [done_id, to_do_id, in_progress_id])

    assert [board.id for board in ordered] == [done_id, to_do_id, in_progress_id]
    assert await board_state(service, project_id) == [
        ("Done", 0, False),
        ("To Do", 1, True),
        ("In Progress", 2, False),
    ]


@pytest.mark.asyncio
async def test_reorder_rejects_incomplete_lists(db, accounts):
    project_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    other_id = await make_project(db, accounts.alice_owner, BoardType.BASIC_KANBAN)
    service = BoardService(db)
    to_do_id, in_progress_id, done_id = [board.id for board in await service.list(project_id)]
    foreign_id = (await service.list(other_id))[0].id

    with pytest.raises(ValidationError) as exc_info:
        await service.reorder(project_id, [done_id, done_id, foreign_id])

    assert exc_info.value.details == {
        "field": "board_ids",
        "missing": sorted([to_do_id, in_progress_id]),
        "unexpected": [foreign_id],
        "duplicates": [done_id],
    }
    assert await board_state(service, project_id) == [
        ("To Do", 0, True),
        ("In Progress", 1, False),
        ("Done", 2, False),
    ]


@pytest.mark.asyncio
async def test_reorder_empty_project(db, accounts):
    project_id = await make_project(db, accounts.alice_owner)
    assert await BoardService(db).reorder(project_id, []) == []


@pytest.mark.asyncio
async def test_list_missing_project(db, accounts):
    with pytest.raises(EntityNotFoundError):
        await BoardService(db).list(9999)
