"""Unit tests for the RecordService."""

import pytest

from hermes.application.schemas import PersonnelWrite, UserWrite
from hermes.application.services import RecordSearch, RecordService
from hermes.domain.entities import RecordPatch
from hermes.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    RecordValidationError,
)


@pytest.fixture
def service(personnel_repo) -> RecordService:
    return RecordService(personnel_repo)


@pytest.fixture
def user_service(user_repo) -> RecordService:
    return RecordService(user_repo)


async def _seed(service: RecordService) -> None:
    await service.create_record(PersonnelWrite(nip="198001012010011001", nama="Budi Santoso"))
    await service.create_record(
        PersonnelWrite(nip="199003202015031003", nama="Ahmad Dhani", status="cuti")
    )
    await service.create_record(
        PersonnelWrite(
            nip="198502152012022002",
            nama="Siti Nurhaliza",
            additional_data={"golongan": "III/a"},
        )
    )


@pytest.mark.asyncio
async def test_create_defaults_status_to_aktif(service: RecordService):
    record = await service.create_record(
        PersonnelWrite(nip="198001012010011001", nama="Budi Santoso")
    )
    assert record.id is not None
    assert record.status == "aktif"
    assert record.metadata == {}
    assert record.chat_identity is None


@pytest.mark.asyncio
async def test_create_treats_empty_status_as_default(service: RecordService):
    record = await service.create_record(PersonnelWrite(nip="1", nama="Budi", status=""))
    assert record.status == "aktif"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"nama": "Budi Santoso"},
        {"nip": "198001012010011001"},
        {"nip": "   ", "nama": "Budi Santoso"},
        {"nip": "198001012010011001", "nama": "  "},
    ],
)
async def test_create_requires_natural_key_and_nama(service: RecordService, payload):
    with pytest.raises(RecordValidationError) as exc_info:
        await service.create_record(PersonnelWrite(**payload))
    assert exc_info.value.message == "NIP and nama are required"
    assert await service.list_records() == []


@pytest.mark.asyncio
async def test_create_rejects_duplicate_natural_key(service: RecordService):
    await service.create_record(PersonnelWrite(nip="198001012010011001", nama="Budi Santoso"))
    with pytest.raises(DuplicateEntityError):
        await service.create_record(PersonnelWrite(nip="198001012010011001", nama="Someone Else"))
    assert len(await service.list_records()) == 1


@pytest.mark.asyncio
async def test_user_requires_uuid(user_service: RecordService):
    with pytest.raises(RecordValidationError) as exc_info:
        await user_service.create_record(UserWrite(nama="Budi"))
    assert exc_info.value.message == "UUID and nama are required"


@pytest.mark.asyncio
async def test_list_orders_by_nama(service: RecordService):
    await _seed(service)
    names = [r.nama for r in await service.list_records()]
    assert names == ["Ahmad Dhani", "Budi Santoso", "Siti Nurhaliza"]


@pytest.mark.asyncio
async def test_search_by_name_fragment_is_case_insensitive(service: RecordService):
    await _seed(service)
    records = await service.list_records(RecordSearch(query="ahmad"))
    assert [r.nama for r in records] == ["Ahmad Dhani"]


@pytest.mark.asyncio
async def test_query_takes_precedence_over_status(service: RecordService):
    await _seed(service)
    records = await service.list_records(RecordSearch(query="budi", status="cuti"))
    assert [r.nama for r in records] == ["Budi Santoso"]


@pytest.mark.asyncio
async def test_empty_query_falls_back_to_status(service: RecordService):
    await _seed(service)
    records = await service.list_records(RecordSearch(query="", status="cuti"))
    assert [r.nama for r in records] == ["Ahmad Dhani"]


@pytest.mark.asyncio
async def test_whitespace_criteria_count_as_absent(service: RecordService):
    await _seed(service)

    everyone = await service.list_records(RecordSearch(query="  ", meta_key=" "))
    assert [r.nama for r in everyone] == ["Ahmad Dhani", "Budi Santoso", "Siti Nurhaliza"]

    on_leave = await service.list_records(RecordSearch(query=" ", status="cuti"))
    assert [r.nama for r in on_leave] == ["Ahmad Dhani"]

    by_metadata = await service.list_records(
        RecordSearch(query="\t", status=" ", meta_key="golongan", meta_value="III/a")
    )
    assert [r.nama for r in by_metadata] == ["Siti Nurhaliza"]


@pytest.mark.asyncio
async def test_search_by_metadata_matches_booleans_as_json_text(service: RecordService):
    await service.create_record(PersonnelWrite(nip="1", nama="Budi", additional_data={"aktif_pns": True}))
    await service.create_record(PersonnelWrite(nip="2", nama="Siti", additional_data={"aktif_pns": 1}))
    await service.create_record(PersonnelWrite(nip="3", nama="Ahmad", additional_data={"aktif_pns": False}))

    assert [r.nama for r in await service.search_by_metadata("aktif_pns", "true")] == ["Budi"]
    assert [r.nama for r in await service.search_by_metadata("aktif_pns", "false")] == ["Ahmad"]
    assert [r.nama for r in await service.search_by_metadata("aktif_pns", "1")] == ["Siti"]


@pytest.mark.asyncio
async def test_search_by_metadata(service: RecordService):
    await _seed(service)
    records = await service.list_records(RecordSearch(meta_key="golongan", meta_value="III/a"))
    assert [r.nama for r in records] == ["Siti Nurhaliza"]


@pytest.mark.asyncio
async def test_search_by_metadata_rejected_for_users(user_service: RecordService):
    with pytest.raises(RecordValidationError):
        await user_service.search_by_metadata("golongan", "III/a")


@pytest.mark.asyncio
async def test_update_replaces_fields_and_keeps_identity(service: RecordService, personnel_repo):
    created = await service.create_record(
        PersonnelWrite(nip="1", nama="Budi", jabatan="Staff", telepon="0811")
    )
    await personnel_repo.apply_patch(created.id, RecordPatch(chat_identity="555"))

    updated = await service.update_record(created.id, PersonnelWrite(nip="1", nama="Budi S"))

    assert updated.nama == "Budi S"
    assert updated.jabatan is None
    assert updated.telepon is None
    assert updated.status == "aktif"
    assert updated.chat_identity == "555"
    assert updated.created_at == created.created_at


@pytest.mark.asyncio
async def test_update_missing_record(service: RecordService):
    with pytest.raises(EntityNotFoundError):
        await service.update_record(999, PersonnelWrite(nip="1", nama="Budi"))


@pytest.mark.asyncio
async def test_update_to_taken_natural_key_conflicts(service: RecordService):
    first = await service.create_record(PersonnelWrite(nip="1", nama="Budi"))
    second = await service.create_record(PersonnelWrite(nip="2", nama="Ahmad"))
    with pytest.raises(DuplicateEntityError):
        await service.update_record(second.id, PersonnelWrite(nip="1", nama="Ahmad Dhani"))

    # neither record is touched by the rejected rename
    assert (await service.get_record(first.id)).natural_key == "1"
    assert (await service.get_record(first.id)).nama == "Budi"
    unchanged = await service.get_record(second.id)
    assert (unchanged.natural_key, unchanged.nama) == ("2", "Ahmad")


@pytest.mark.asyncio
async def test_user_records_carry_no_metadata(user_service: RecordService):
    created = await user_service.create_record(UserWrite(uuid="u-1", nama="Budi"))
    assert created.metadata == {}


@pytest.mark.asyncio
async def test_patch_touches_only_given_field(service: RecordService):
    created = await service.create_record(
        PersonnelWrite(nip="1", nama="Budi", jabatan="Staff", additional_data={"a": 1})
    )
    patched = await service.patch_record(created.id, RecordPatch(telepon="0811"))
    assert patched.telepon == "0811"
    assert patched.jabatan == "Staff"
    assert patched.metadata == {"a": 1}


@pytest.mark.asyncio
async def test_patch_rejects_empty_nama(service: RecordService):
    created = await service.create_record(PersonnelWrite(nip="1", nama="Budi"))
    with pytest.raises(RecordValidationError):
        await service.patch_record(created.id, RecordPatch(nama=" "))
    assert (await service.get_record(created.id)).nama == "Budi"


@pytest.mark.asyncio
async def test_empty_patch_returns_record_unchanged(service: RecordService):
    created = await service.create_record(PersonnelWrite(nip="1", nama="Budi"))
    patched = await service.patch_record(created.id, RecordPatch())
    assert patched == created


@pytest.mark.asyncio
async def test_set_metadata_key_preserves_other_keys(service: RecordService):
    created = await service.create_record(
        PersonnelWrite(nip="1", nama="Budi", additional_data={"a": 1, "b": "x"})
    )
    updated = await service.set_metadata_key(created.id, "b", "y")
    assert updated.metadata == {"a": 1, "b": "y"}


@pytest.mark.asyncio
async def test_set_metadata_key_missing_record(service: RecordService):
    with pytest.raises(EntityNotFoundError):
        await service.set_metadata_key(42, "a", 1)


@pytest.mark.asyncio
async def test_delete_then_get_is_not_found(service: RecordService):
    created = await service.create_record(PersonnelWrite(nip="1", nama="Budi"))
    assert await service.delete_record(created.id) is True

    with pytest.raises(EntityNotFoundError):
        await service.get_record(created.id)
    assert await service.list_records() == []
    with pytest.raises(EntityNotFoundError):
        await service.delete_record(created.id)
