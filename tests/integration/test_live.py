"""
Integration tests for kt-client: tests against a real KnowledgeTree server.

Requires environment variables:
  KT_SERVER   : server URL, e.g. https://example.knowledgetree.com
  KT_USERNAME : login name
  KT_PASSWORD : password

Run: KT_INTEGRATION=1 pytest tests/integration/ -v
"""

import os

import pytest

from kt_client import AsyncKTClient, RemoteError

SKIP = not os.environ.get("KT_INTEGRATION")
SERVER = os.environ.get("KT_SERVER", "")
USERNAME = os.environ.get("KT_USERNAME", "")
PASSWORD = os.environ.get("KT_PASSWORD", "")

pytestmark = pytest.mark.skipif(SKIP, reason="KT_INTEGRATION not set")


def make_client() -> AsyncKTClient:
    return AsyncKTClient(SERVER, cache_wsdl="memory", trace=True)


class TestSessionLifecycle:
    @pytest.mark.asyncio
    async def test_login_and_logout(self):
        async with make_client() as client:
            token = await client.login(USERNAME, PASSWORD)
            assert token
            assert client.last_request() is not None
            await client.logout()
            assert client.session_id is None

    @pytest.mark.asyncio
    async def test_rejects_bad_password(self):
        async with make_client() as client:
            with pytest.raises(RemoteError):
                await client.login(USERNAME, "definitely-not-the-password")


class TestDocumentRoundTrip:
    @pytest.mark.asyncio
    async def test_add_search_metadata_remove(self, tmp_path):
        path = tmp_path / "kt-client-integration.txt"
        path.write_text("kt-client integration test document")

        async with make_client() as client:
            await client.login(USERNAME, PASSWORD)
            document_id = await client.documents.add(path.name, path, 1, title="kt-client integration")
            try:
                metadata = await client.documents.get_metadata(document_id)
                assert isinstance(metadata, dict)
                await client.documents.set_metadata(document_id, metadata)

                await client.documents.add_comment(document_id, "integration comment")
                comments = await client.documents.get_comments(document_id)
                assert comments
            finally:
                await client.documents.remove(document_id, "integration test cleanup")
                await client.logout()


class TestErrorHandling:
    @pytest.mark.asyncio
    async def test_locate_missing_folder(self):
        async with make_client() as client:
            await client.login(USERNAME, PASSWORD)
            with pytest.raises(RemoteError):
                await client.folders.locate("/kt-client/does/not/exist")
            await client.logout()
