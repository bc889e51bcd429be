import pytest
from conftest import AUDITOR, CLOCK_START, DEPLOYER, FACILITY, USER

from capture_registry.app.domain.errors import ErrorCode
from capture_registry.app.domain.models import EventStatus
from capture_registry.app.domain.schemas import Result


def test_owner_updates_status(registry, event_id):
    assert registry.update_event_status(FACILITY, event_id, "verified") == Result.ok()

    event = registry.get_event_details(event_id)
    assert event.status == EventStatus.VERIFIED
    assert event.timestamp == CLOCK_START
    assert event.last_updated == CLOCK_START + 1
    assert event.co2_amount == 1_000_000
    assert event.metadata == "Test"


def test_collaborator_with_update_status_may_update(registry, event_id):
    registry.add_collaborator(FACILITY, event_id, AUDITOR, "auditor", ["update-status", "add-notes"])
    assert registry.update_event_status(AUDITOR, event_id, "rejected") == Result.ok()
    assert registry.get_event_details(event_id).status == "rejected"


def test_admin_may_update_status(registry, event_id):
    assert registry.update_event_status(DEPLOYER, event_id, "verified") == Result.ok()


def test_other_callers_cannot_update_status(registry, event_id):
    registry.add_collaborator(FACILITY, event_id, AUDITOR, "reviewer", ["add-notes"])

    for caller in (USER, AUDITOR):
        result = registry.update_event_status(caller, event_id, "verified")
        assert result.error_code == ErrorCode.UNAUTHORIZED
    assert registry.get_event_details(event_id).status == EventStatus.PENDING


@pytest.mark.parametrize("status", ["pending", "archived", "VERIFIED", ""])
def test_invalid_status_values(registry, event_id, status):
    result = registry.update_event_status(FACILITY, event_id, status)
    assert result.error_code == ErrorCode.INVALID_STATUS
    assert registry.get_event_details(event_id).last_updated == CLOCK_START


def test_status_checks_run_in_order(registry, event_id):
    assert registry.update_event_status(FACILITY, 99, "bogus").error_code == ErrorCode.NOT_FOUND
    assert registry.update_event_status(USER, event_id, "bogus").error_code == ErrorCode.UNAUTHORIZED


def test_owner_adds_version_and_status_is_forced(registry, event_id, make_hash):
    registry.update_event_status(FACILITY, event_id, "rejected")
    new_hash = make_hash("newhash")

    result = registry.add_event_version(FACILITY, event_id, 1, 1_500_000, new_hash, "Adjusted measurements")
    assert result == Result.ok()

    version = registry.get_event_version(event_id, 1)
    assert version.updated_co2_amount == 1_500_000
    assert version.updated_doc_hash == new_hash
    assert version.update_notes == "Adjusted measurements"

    event = registry.get_event_details(event_id)
    assert event.status == EventStatus.UPDATED
    assert event.last_updated == version.timestamp
    # the original claim is untouched
    assert event.co2_amount == 1_000_000


def test_add_version_collaborator(registry, event_id, make_hash):
    registry.add_collaborator(FACILITY, event_id, AUDITOR, "engineer", ["add-version"])
    result = registry.add_event_version(AUDITOR, event_id, 3, 10, make_hash("v3"), "")
    assert result.success
    assert registry.get_event_details(event_id).status == EventStatus.UPDATED


def test_admin_cannot_add_version(registry, event_id, make_hash):
    result = registry.add_event_version(DEPLOYER, event_id, 1, 10, make_hash("v1"), "")
    assert result.error_code == ErrorCode.UNAUTHORIZED
    assert registry.get_event_version(event_id, 1) is None
    assert registry.get_event_details(event_id).status == EventStatus.PENDING


def test_update_status_permission_does_not_grant_versions(registry, event_id, make_hash):
    registry.add_collaborator(FACILITY, event_id, AUDITOR, "auditor", ["update-status"])
    result = registry.add_event_version(AUDITOR, event_id, 1, 10, make_hash("v1"), "")
    assert result.error_code == ErrorCode.UNAUTHORIZED


def test_version_amount_must_be_positive(registry, event_id, make_hash):
    result = registry.add_event_version(FACILITY, event_id, 1, 0, make_hash("v1"), "")
    assert result.error_code == ErrorCode.INVALID_AMOUNT
    assert registry.get_event_details(event_id).status == EventStatus.PENDING


def test_version_for_missing_event(registry, make_hash):
    result = registry.add_event_version(FACILITY, 7, 1, 10, make_hash("v1"), "")
    assert result.error_code == ErrorCode.NOT_FOUND


def test_same_version_number_overwrites(registry, event_id, make_hash):
    registry.add_event_version(FACILITY, event_id, 1, 100, make_hash("first"), "first pass")
    registry.add_event_version(FACILITY, event_id, 1, 200, make_hash("second"), "second pass")

    versions = registry.list_event_versions(event_id)
    assert len(versions) == 1
    assert versions[0].updated_co2_amount == 200
    assert versions[0].update_notes == "second pass"


def test_versions_listed_in_order(registry, event_id, make_hash):
    for version in (5, 2, 9):
        registry.add_event_version(FACILITY, event_id, version, version * 10, make_hash(f"v{version}"), "")
    assert [v.version for v in registry.list_event_versions(event_id)] == [2, 5, 9]
