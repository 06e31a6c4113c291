from itertools import count

import pytest

from app.core.constants import LogicalType
from app.core.errors import InvalidType, MissingFile, NotFound, StorageUnavailable, TooLarge, Unauthorized
from app.models.uploads import UploadRequest
from app.services.upload_gateway import UploadGateway
from tests.fakes import FIXED_MILLIS, InMemoryStorageClient


def make_request(**overrides) -> UploadRequest:
    values = {
        "owner_id": "user-1",
        "logical_type": LogicalType.RESUME,
        "filename": "My Resume.pdf",
        "content_type": "application/pdf",
        "size": 4,
        "payload": b"%PDF",
    }
    values.update(overrides)
    return UploadRequest(**values)


@pytest.fixture
def gateway(storage: InMemoryStorageClient) -> UploadGateway:
    return UploadGateway(storage, clock=lambda: FIXED_MILLIS)


@pytest.mark.asyncio
async def test_proxied_upload_stores_object_and_returns_result(gateway, storage):
    result = await gateway.proxied_upload(make_request())

    assert result.bucket == "ai-powered-resumes"
    assert result.key == f"user-1/{FIXED_MILLIS}-My_Resume.pdf"
    assert result.canonical_url == f"s3://ai-powered-resumes/user-1/{FIXED_MILLIS}-My_Resume.pdf"
    assert result.filename == "My Resume.pdf"
    assert result.size == 4
    assert result.content_type == "application/pdf"
    assert storage.calls == [("put", "ai-powered-resumes", result.key)]


@pytest.mark.asyncio
async def test_proxied_upload_then_head_round_trip(gateway, storage):
    request = make_request(logical_type=LogicalType.DOCUMENT, content_type="text/plain", payload=b"hello", size=5)

    result = await gateway.proxied_upload(request)
    meta = storage.head(result.bucket, result.key)

    assert result.bucket == "ai-powered-documents"
    assert meta.content_type == "text/plain"
    assert meta.size == 5


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("overrides", "error"),
    [
        ({"content_type": "image/png"}, InvalidType),
        ({"size": 6 * 1024 * 1024}, TooLarge),
        ({"payload": None, "size": 0}, MissingFile),
        ({"owner_id": None}, Unauthorized),
        ({"owner_id": ""}, Unauthorized),
    ],
)
async def test_rejected_uploads_never_touch_storage(gateway, storage, overrides, error):
    with pytest.raises(error):
        await gateway.proxied_upload(make_request(**overrides))

    assert storage.calls == []
    assert storage.objects == {}


@pytest.mark.asyncio
async def test_same_millisecond_same_filename_overwrites(gateway, storage):
    first = await gateway.proxied_upload(make_request(payload=b"one", size=3))
    second = await gateway.proxied_upload(make_request(payload=b"two!", size=4))

    assert first.key == second.key
    assert storage.head(second.bucket, second.key).size == 4


@pytest.mark.asyncio
async def test_keys_differ_across_clock_readings(storage):
    gateway = UploadGateway(storage, clock=count(FIXED_MILLIS).__next__)

    first = await gateway.proxied_upload(make_request())
    second = await gateway.proxied_upload(make_request())

    assert first.key != second.key


@pytest.mark.asyncio
async def test_presigned_upload_for_resume_with_accented_name(gateway, storage):
    presigned = await gateway.request_presigned_upload(
        owner_id="user-1",
        logical_type="resume",
        filename="résumé final.pdf",
        content_type="application/pdf",
    )

    assert presigned.bucket == "ai-powered-resumes"
    assert presigned.key == f"user-1/{FIXED_MILLIS}-r_sum__final.pdf"
    assert presigned.expires_in_seconds == 900
    assert "X-Amz-Expires=900" in presigned.url
    assert storage.calls == [("presign_put", "ai-powered-resumes", presigned.key)]


@pytest.mark.asyncio
async def test_presigned_upload_honours_custom_ttl_and_default_filename(gateway):
    presigned = await gateway.request_presigned_upload("user-1", None, "", "text/plain", ttl_seconds=60)

    assert presigned.bucket == "ai-powered-documents"
    assert presigned.key == f"user-1/{FIXED_MILLIS}-file"
    assert presigned.expires_in_seconds == 60


@pytest.mark.asyncio
async def test_presigned_upload_rejects_content_type_before_signing(gateway, storage):
    with pytest.raises(InvalidType):
        await gateway.request_presigned_upload("user-1", "document", "a.png", "image/png")

    with pytest.raises(Unauthorized):
        await gateway.request_presigned_upload(None, "document", "a.pdf", "application/pdf")

    assert storage.calls == []


@pytest.mark.asyncio
async def test_storage_failure_propagates(gateway, storage):
    storage.fail_with = StorageUnavailable()

    with pytest.raises(StorageUnavailable):
        await gateway.proxied_upload(make_request())


@pytest.mark.asyncio
async def test_list_uploads_only_returns_owner_prefix(gateway, storage):
    storage.put("ai-powered-resumes", "user-1/1-a.pdf", b"a", "application/pdf")
    storage.put("ai-powered-resumes", "user-2/1-b.pdf", b"bb", "application/pdf")
    storage.put("ai-powered-documents", "user-1/1-c.pdf", b"ccc", "application/pdf")

    items = await gateway.list_uploads("user-1", "resume")

    assert [item.key for item in items] == ["user-1/1-a.pdf"]
    assert await gateway.list_uploads("user-3", "resume") == []


@pytest.mark.asyncio
async def test_download_url_requires_owned_key(gateway, storage):
    presigned = await gateway.request_download_url("user-1", "resume", "user-1/1-a.pdf")
    assert presigned.expires_in_seconds == 3600
    assert presigned.bucket == "ai-powered-resumes"

    storage.calls.clear()
    with pytest.raises(NotFound):
        await gateway.request_download_url("user-1", "resume", "user-2/1-a.pdf")
    with pytest.raises(NotFound):
        await gateway.request_download_url("user-1", "resume", "user-10/1-a.pdf")
    assert storage.calls == []


@pytest.mark.asyncio
async def test_describe_upload(gateway, storage):
    storage.put("ai-powered-documents", "user-1/5-notes.txt", b"notes", "text/plain")

    meta = await gateway.describe_upload("user-1", "document", "user-1/5-notes.txt")
    assert meta.content_type == "text/plain"
    assert meta.size == 5

    with pytest.raises(NotFound):
        await gateway.describe_upload("user-1", "document", "user-1/6-missing.txt")


@pytest.mark.asyncio
async def test_body_is_read_only_after_validation(gateway, storage):
    reads = []

    async def reader() -> bytes:
        reads.append(True)
        return b"%PDF-1.4"

    with pytest.raises(TooLarge):
        await gateway.proxied_upload(make_request(payload=None, reader=reader, size=6 * 1024 * 1024))
    assert reads == []

    result = await gateway.proxied_upload(make_request(payload=None, reader=reader, size=8))
    assert reads == [True]
    assert result.size == 8
    assert storage.head(result.bucket, result.key).size == 8
