import pytest

from nexentastor_client import NexentaStorClient
from nexentastor_client.auth.token import TokenAuth
from nexentastor_client.exceptions import (
    ApplianceError,
    InvalidArgumentError,
    RequestError,
    is_not_found_error,
)
from nexentastor_client.resources import JobStatus
from nexentastor_client.resources.shares import default_nfs_rules

BASE_URL = "https://nef:8443"


def build_client():
    return NexentaStorClient(base_url=BASE_URL, auth_strategy=TokenAuth("abc"))


def nef_error(code, message="failed"):
    return {"name": "NefError", "code": code, "message": message}


def test_snapshot_detail_includes_clones_and_txg(requests_mock):
    matcher = requests_mock.get(
        f"{BASE_URL}/storage/snapshots/pool%2Ffs%40snap",
        json={
            "path": "pool/fs@snap",
            "name": "snap",
            "parent": "pool/fs",
            "clones": ["pool/clone"],
            "creationTxg": "1234",
        },
    )

    snapshot = build_client().snapshots.get("pool/fs@snap")

    assert snapshot.clones == ["pool/clone"]
    assert snapshot.creation_txg == "1234"
    assert "clones" in matcher.last_request.qs["fields"][0]


def test_snapshot_list_is_recursive_on_request(requests_mock):
    matcher = requests_mock.get(
        f"{BASE_URL}/storage/snapshots",
        json={"data": [{"path": "pool/fs@a", "name": "a", "parent": "pool/fs"}]},
    )

    snapshots = build_client().snapshots.list("pool/fs", recursive=True)

    assert [snapshot.name for snapshot in snapshots] == ["a"]
    assert matcher.last_request.qs["recursive"] == ["true"]
    assert matcher.last_request.qs["parent"] == ["pool/fs"]


def test_clone_snapshot(requests_mock):
    matcher = requests_mock.post(f"{BASE_URL}/storage/snapshots/pool%2Ffs%40snap/clone")

    build_client().snapshots.clone("pool/fs@snap", "pool/clone", referenced_quota_size=10)

    assert matcher.last_request.json() == {"targetPath": "pool/clone", "referencedQuotaSize": 10}


def test_create_lun_mapping_tolerates_existing(requests_mock):
    matcher = requests_mock.post(
        f"{BASE_URL}/san/lunMappings",
        [{"status_code": 201}, {"status_code": 422, "json": nef_error("EEXIST")}],
    )
    client = build_client()

    assert client.lun_mappings.create("pool/vg/vol", "hg1", "tg1") is True
    assert client.lun_mappings.create("pool/vg/vol", "hg1", "tg1") is False
    assert matcher.last_request.json() == {
        "hostGroup": "hg1",
        "volume": "pool/vg/vol",
        "targetGroup": "tg1",
    }


def test_create_lun_mapping_requires_every_argument(requests_mock):
    with pytest.raises(InvalidArgumentError):
        build_client().lun_mappings.create("pool/vg/vol", "", "tg1")

    assert requests_mock.call_count == 0


def test_get_lun_mapping_by_volume(requests_mock):
    requests_mock.get(f"{BASE_URL}/san/lunMappings", json={"data": []})

    with pytest.raises(ApplianceError) as excinfo:
        build_client().lun_mappings.get("pool/vg/vol")

    assert is_not_found_error(excinfo.value)


def test_list_all_lun_mappings(requests_mock):
    mappings = [{"id": str(index), "volume": f"pool/vg/v{index}", "lun": index} for index in range(99)]
    matcher = requests_mock.get(
        f"{BASE_URL}/san/lunMappings",
        [{"json": {"data": mappings}}, {"json": {"data": []}}],
    )

    listed = build_client().lun_mappings.list_all()

    assert len(listed) == 99
    assert listed[5].lun == 5
    assert matcher.call_count == 2


def test_list_all_logical_units(requests_mock):
    requests_mock.get(
        f"{BASE_URL}/san/logicalUnits",
        json={"data": [{"guid": "600144F0", "volume": "pool/vg/vol", "volSize": 1024}]},
    )

    units = build_client().logical_units.list_all()

    assert units[0].guid == "600144F0"
    assert units[0].vol_size == 1024


def test_target_group_members_replaced_when_group_exists(requests_mock):
    requests_mock.post(f"{BASE_URL}/san/targetgroups", status_code=422, json=nef_error("EEXIST"))
    update = requests_mock.put(f"{BASE_URL}/san/targetgroups/tg1")

    build_client().target_groups.create_or_update("tg1", ["iqn.2005-07.com.nexenta:01"])

    assert update.last_request.json() == {"members": ["iqn.2005-07.com.nexenta:01"]}


def test_host_group_update_path(requests_mock):
    matcher = requests_mock.put(f"{BASE_URL}/san/hostgroups/hg1")

    build_client().host_groups.update("hg1", ["iqn.1993-08.org.debian:01"])

    assert matcher.called


def test_iscsi_target_create_tolerates_existing(requests_mock):
    requests_mock.post(f"{BASE_URL}/san/iscsi/targets", status_code=422, json=nef_error("EEXIST"))

    assert build_client().iscsi_targets.create("iqn.target") is False


def test_remote_initiator_uses_versioned_path(requests_mock):
    matcher = requests_mock.put(
        f"{BASE_URL}/v1.2.6/san/iscsi/remoteInitiators/iqn.1993-08.org.debian%3A01"
    )

    build_client().remote_initiators.update("iqn.1993-08.org.debian:01", "user", "secret")

    assert matcher.last_request.json() == {"chapUser": "user", "chapSecret": "secret"}


@pytest.mark.parametrize(
    ("read_write", "read_only", "expected_rw", "expected_ro"),
    [
        ([], [], ["*"], ["none"]),
        ([], ["10.0.0.1"], ["none"], ["10.0.0.1"]),
        (["10.0.0.2"], [], ["10.0.0.2"], ["none"]),
    ],
)
def test_default_nfs_rules(read_write, read_only, expected_rw, expected_ro):
    def rules(entities):
        return [{"entity": entity, "etype": "fqdn"} for entity in entities]

    rw, ro = default_nfs_rules(rules(read_write), rules(read_only))

    assert rw == rules(expected_rw)
    assert ro == rules(expected_ro)


def test_nfs_share_payload(requests_mock):
    matcher = requests_mock.post(f"{BASE_URL}/nas/nfs")

    build_client().nfs.create("pool/fs")

    context = matcher.last_request.json()["securityContexts"][0]
    assert matcher.last_request.json()["anon"] == "root"
    assert context["securityModes"] == ["sys"]
    assert context["readWriteList"] == [{"entity": "*", "etype": "fqdn"}]


def test_smb_share_name(requests_mock):
    requests_mock.get(f"{BASE_URL}/nas/smb/pool%2Ffs", json={"shareName": "pool_fs"})

    assert build_client().smb.get_share_name("pool/fs") == "pool_fs"


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [(200, JobStatus.DONE), (201, JobStatus.DONE), (202, JobStatus.IN_PROGRESS)],
)
def test_job_status(requests_mock, status_code, expected):
    requests_mock.get(f"{BASE_URL}/jobStatus/job1", status_code=status_code)

    assert build_client().jobs.status("job1") is expected


def test_failed_job_raises_appliance_error(requests_mock):
    requests_mock.get(f"{BASE_URL}/jobStatus/job1", status_code=500, json=nef_error("EIO", "disk"))

    with pytest.raises(ApplianceError) as excinfo:
        build_client().jobs.status("job1")

    assert excinfo.value.code == "EIO"
    assert "Job was finished with error" in str(excinfo.value)


def test_failed_job_without_explanation(requests_mock):
    requests_mock.get(f"{BASE_URL}/jobStatus/job1", status_code=500, text="")

    with pytest.raises(RequestError) as excinfo:
        build_client().jobs.status("job1")

    assert "doesn't contain explanation" in str(excinfo.value)
    assert excinfo.value.status_code == 500


def test_rsf_clusters(requests_mock):
    requests_mock.get(f"{BASE_URL}/rsf/clusters", json={"data": [{"clusterName": "ha1"}]})

    assert build_client().system.rsf_clusters() == [{"clusterName": "ha1"}]
