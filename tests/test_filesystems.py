import pytest

from nexentastor_client import NexentaStorClient
from nexentastor_client.auth.token import TokenAuth
from nexentastor_client.exceptions import (
    ApplianceError,
    InvalidArgumentError,
    is_busy_error,
    is_not_found_error,
)

BASE_URL = "https://nef:8443"
PARENT = "pool/ds"
FS = "pool/ds/fs"
FS_URL = f"{BASE_URL}/storage/filesystems/pool%2Fds%2Ffs"


def build_client():
    return NexentaStorClient(base_url=BASE_URL, auth_strategy=TokenAuth("abc"))


def nef_error(code, message="failed"):
    return {"name": "NefError", "code": code, "message": message}


def serve_filesystems(requests_mock, children):
    """Serve ``parent=`` listings the way the appliance does: the parent comes first."""

    records = [{"path": PARENT}] + [{"path": path, "bytesUsed": 1} for path in children]

    def _respond(request, context):
        offset = int(request.qs["offset"][0])
        limit = int(request.qs["limit"][0])
        return {"data": records[offset : offset + limit]}

    return requests_mock.get(f"{BASE_URL}/storage/filesystems", json=_respond)


def test_get_filesystem(requests_mock):
    matcher = requests_mock.get(
        f"{BASE_URL}/storage/filesystems",
        json={
            "data": [
                {
                    "path": FS,
                    "mountPoint": "/pool/ds/fs",
                    "bytesAvailable": 70,
                    "bytesUsed": 30,
                    "sharedOverNfs": True,
                    "sharedOverSmb": False,
                }
            ]
        },
    )

    filesystem = build_client().filesystems.get(FS)

    assert filesystem.mount_point == "/pool/ds/fs"
    assert filesystem.shared_over_nfs is True
    assert filesystem.referenced_quota_size == 100
    assert filesystem.default_smb_share_name == "pool_ds_fs"
    assert matcher.last_request.qs["path"] == [FS]


def test_get_missing_filesystem_is_not_found(requests_mock):
    requests_mock.get(f"{BASE_URL}/storage/filesystems", json={"data": []})

    with pytest.raises(ApplianceError) as excinfo:
        build_client().filesystems.get("pool/ds/missing")

    assert is_not_found_error(excinfo.value)


def test_get_with_empty_path_makes_no_request(requests_mock):
    with pytest.raises(InvalidArgumentError):
        build_client().filesystems.get("")

    assert requests_mock.call_count == 0


def test_available_capacity(requests_mock):
    requests_mock.get(f"{BASE_URL}/storage/filesystems", json={"data": [{"bytesAvailable": 4096}]})

    assert build_client().filesystems.get_available_capacity(FS) == 4096


def test_slice_limit_is_validated_before_sending(requests_mock):
    client = build_client()

    with pytest.raises(InvalidArgumentError):
        client.filesystems.list_slice(PARENT, 100, 0)
    with pytest.raises(InvalidArgumentError):
        client.filesystems.list_slice(PARENT, 10, -1)

    assert requests_mock.call_count == 0


def test_slice_excludes_parent_and_asks_for_one_more(requests_mock):
    matcher = serve_filesystems(requests_mock, ["pool/ds/a", "pool/ds/b"])

    filesystems = build_client().filesystems.list_slice(PARENT, 5, 0)

    assert [fs.path for fs in filesystems] == ["pool/ds/a", "pool/ds/b"]
    assert matcher.last_request.qs["limit"] == ["6"]


def test_slice_past_first_child_never_exceeds_limit(requests_mock):
    children = [f"pool/ds/c{index:02d}" for index in range(10)]
    serve_filesystems(requests_mock, children)
    client = build_client()

    first = client.filesystems.list_slice(PARENT, 2, 1)
    second = client.filesystems.list_slice(PARENT, 2, 3)

    assert [fs.path for fs in first] == ["pool/ds/c00", "pool/ds/c01"]
    assert [fs.path for fs in second] == ["pool/ds/c02", "pool/ds/c03"]


def test_list_walks_every_page(requests_mock):
    children = [f"pool/ds/fs{index:03d}" for index in range(150)]
    matcher = serve_filesystems(requests_mock, children)

    filesystems = build_client().filesystems.list(PARENT)

    assert [fs.path for fs in filesystems] == children
    assert [request.qs["offset"][0] for request in matcher.request_history] == ["1", "100"]


def test_list_with_starting_token(requests_mock):
    children = [f"pool/ds/fs{index:03d}" for index in range(150)]
    serve_filesystems(requests_mock, children)
    client = build_client()

    first, token = client.filesystems.list_with_starting_token(PARENT, "", 120)
    second, last_token = client.filesystems.list_with_starting_token(PARENT, token, 120)

    assert token == "pool/ds/fs119"
    assert [fs.path for fs in first + second] == children
    assert last_token == ""


def test_create_and_update(requests_mock):
    create = requests_mock.post(f"{BASE_URL}/storage/filesystems", status_code=201)
    update = requests_mock.put(FS_URL, status_code=200)
    client = build_client()

    client.filesystems.create(FS, referenced_quota_size=1024)
    client.filesystems.update(FS, referenced_quota_size=2048)

    assert create.last_request.json() == {"path": FS, "referencedQuotaSize": 1024}
    assert update.last_request.json() == {"referencedQuotaSize": 2048}


def test_ensure_created_tolerates_existing(requests_mock):
    requests_mock.post(
        f"{BASE_URL}/storage/filesystems", status_code=422, json=nef_error("EEXIST")
    )

    assert build_client().filesystems.ensure_created(FS) is False


def test_destroy_sends_force_and_snapshot_flags(requests_mock):
    matcher = requests_mock.delete(FS_URL, status_code=200)

    build_client().filesystems.destroy(FS, destroy_snapshots=True)

    assert matcher.last_request.qs["force"] == ["true"]
    assert matcher.last_request.qs["snapshots"] == ["true"]


def test_destroy_with_snapshots_flag_scenario(requests_mock):
    requests_mock.delete(
        FS_URL,
        [
            {"status_code": 422, "json": nef_error("EBUSY", "filesystem has snapshots")},
            {"status_code": 200},
        ],
    )
    requests_mock.get(f"{BASE_URL}/storage/filesystems", json={"data": []})
    client = build_client()

    with pytest.raises(ApplianceError) as excinfo:
        client.filesystems.destroy(FS, destroy_snapshots=False)
    assert is_busy_error(excinfo.value)

    client.filesystems.destroy(FS, destroy_snapshots=True)

    with pytest.raises(ApplianceError) as excinfo:
        client.filesystems.get(FS)
    assert is_not_found_error(excinfo.value)


def test_destroy_promotes_most_recent_clone(requests_mock):
    destroy = requests_mock.delete(
        FS_URL,
        [
            {"status_code": 422, "json": nef_error("EEXIST", "filesystem has dependent clones")},
            {"status_code": 200},
        ],
    )
    requests_mock.get(
        f"{BASE_URL}/storage/snapshots",
        json={"data": [{"path": f"{FS}@s1"}, {"path": f"{FS}@s2"}, {"path": f"{FS}@s3"}]},
    )
    details = {
        "s1": {"path": f"{FS}@s1", "clones": [], "creationTxg": "11"},
        "s2": {"path": f"{FS}@s2", "clones": ["pool/ds/c1"], "creationTxg": "12"},
        "s3": {"path": f"{FS}@s3", "clones": ["pool/ds/c2"], "creationTxg": "13"},
    }
    for name, payload in details.items():
        requests_mock.get(f"{BASE_URL}/storage/snapshots/pool%2Fds%2Ffs%40{name}", json=payload)
    promote = requests_mock.post(f"{BASE_URL}/storage/filesystems/pool%2Fds%2Fc2/promote")

    build_client().filesystems.destroy(
        FS, destroy_snapshots=True, promote_most_recent_clone=True
    )

    assert promote.call_count == 1
    assert destroy.call_count == 2


def test_ensure_destroyed_tolerates_missing(requests_mock):
    requests_mock.delete(FS_URL, status_code=404, json=nef_error("ENOENT"))

    assert build_client().filesystems.ensure_destroyed(FS, destroy_snapshots=True) is False


def test_ensure_destroyed_still_raises_busy(requests_mock):
    requests_mock.delete(FS_URL, status_code=422, json=nef_error("EBUSY"))

    with pytest.raises(ApplianceError):
        build_client().filesystems.ensure_destroyed(FS)


def test_set_acl_read_only(requests_mock):
    matcher = requests_mock.post(f"{FS_URL}/acl")

    build_client().filesystems.set_acl(FS, read_only=True)

    assert matcher.last_request.json() == {
        "type": "allow",
        "principal": "everyone@",
        "flags": ["file_inherit", "dir_inherit"],
        "permissions": ["read_set"],
    }
