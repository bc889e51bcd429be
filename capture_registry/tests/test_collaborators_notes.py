from conftest import AUDITOR, CLOCK_START, DEPLOYER, FACILITY, USER

from capture_registry.app.domain.errors import ErrorCode
from capture_registry.app.domain.schemas import Result


def test_owner_adds_collaborator(registry, event_id):
    result = registry.add_collaborator(FACILITY, event_id, AUDITOR, "auditor", ["update-status", "add-notes"])
    assert result == Result.ok()

    entry = registry.get_collaborator(event_id, AUDITOR)
    assert entry.role == "auditor"
    assert entry.permissions == ["update-status", "add-notes"]
    assert entry.added_at == CLOCK_START + 1


def test_only_owner_adds_collaborators(registry, event_id):
    registry.add_collaborator(FACILITY, event_id, AUDITOR, "auditor", ["update-status", "add-notes"])

    for caller in (DEPLOYER, AUDITOR, USER):
        result = registry.add_collaborator(caller, event_id, USER, "helper", ["add-notes"])
        assert result.error_code == ErrorCode.UNAUTHORIZED
    assert registry.get_collaborator(event_id, USER) is None


def test_collaborator_for_missing_event(registry):
    result = registry.add_collaborator(FACILITY, 3, AUDITOR, "auditor", [])
    assert result.error_code == ErrorCode.NOT_FOUND


def test_re_adding_replaces_permissions(registry, event_id):
    registry.add_collaborator(FACILITY, event_id, AUDITOR, "auditor", ["update-status", "add-notes"])
    registry.add_collaborator(FACILITY, event_id, AUDITOR, "observer", [])

    entry = registry.get_collaborator(event_id, AUDITOR)
    assert entry.role == "observer"
    assert entry.permissions == []
    assert registry.update_event_status(AUDITOR, event_id, "verified").error_code == ErrorCode.UNAUTHORIZED
    assert len(registry.list_collaborators(event_id)) == 1


def test_permissions_are_scoped_to_one_event(registry, event_id, make_hash):
    other = registry.register_capture_event(FACILITY, 5, make_hash("other"), "").value
    registry.add_collaborator(FACILITY, event_id, AUDITOR, "auditor", ["update-status"])

    result = registry.update_event_status(AUDITOR, other, "verified")
    assert result.error_code == ErrorCode.UNAUTHORIZED


def test_unknown_tokens_are_stored_but_grant_nothing(registry, event_id):
    registry.add_collaborator(FACILITY, event_id, AUDITOR, "auditor", ["update_status"])
    assert registry.get_collaborator(event_id, AUDITOR).permissions == ["update_status"]
    assert registry.update_event_status(AUDITOR, event_id, "verified").error_code == ErrorCode.UNAUTHORIZED


def test_owner_adds_note(registry, event_id):
    result = registry.add_note(FACILITY, event_id, "Verification complete, data accurate")
    assert result == Result.ok(1)

    note = registry.get_note(event_id, 1)
    assert note.author == FACILITY
    assert note.content == "Verification complete, data accurate"


def test_note_authors(registry, event_id):
    registry.add_collaborator(FACILITY, event_id, AUDITOR, "auditor", ["add-notes"])

    assert registry.add_note(AUDITOR, event_id, "from auditor").success
    assert registry.add_note(DEPLOYER, event_id, "from admin").success
    assert registry.add_note(USER, event_id, "Unauthorized note").error_code == ErrorCode.UNAUTHORIZED
    assert [n.author for n in registry.list_notes(event_id)] == [AUDITOR, DEPLOYER]


def test_note_ids_are_shared_across_events(registry, event_id, make_hash):
    other = registry.register_capture_event(FACILITY, 5, make_hash("other"), "").value

    first = registry.add_note(FACILITY, event_id, "on event A")
    second = registry.add_note(FACILITY, other, "on event B")
    assert (first.value, second.value) == (1, 2)
    assert registry.get_note(other, 1) is None
    assert registry.get_note(other, 2).content == "on event B"


def test_rejected_note_does_not_consume_an_id(registry, event_id):
    assert registry.add_note(FACILITY, event_id, "x" * 1001).error_code == ErrorCode.INVALID_LENGTH
    assert registry.add_note(USER, event_id, "nope").error_code == ErrorCode.UNAUTHORIZED
    assert registry.add_note(FACILITY, 404, "nope").error_code == ErrorCode.NOT_FOUND
    assert registry.add_note(FACILITY, event_id, "x" * 1000) == Result.ok(1)
