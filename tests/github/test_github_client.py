import logging

import httpx
import pytest

from app.crawlers.github.client import GitHubRepoClient
from app.crawlers.github.contracts import FetchState


def _client(handler) -> GitHubRepoClient:
    return GitHubRepoClient(token="test-token", base_url="https://api.github.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_get_repo_returns_ok_contract_for_200() -> None:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"name": "repo", "stargazers_count": 42})

    client = _client(handler)
    result = await client.get_repo("owner", "repo")
    await client.aclose()

    assert result.state == FetchState.OK
    assert result.data["stargazers_count"] == 42
    assert seen[0].url.path == "/repos/owner/repo"
    assert seen[0].headers["Authorization"] == "Bearer test-token"


@pytest.mark.asyncio
async def test_get_repo_returns_not_found_contract_for_404() -> None:
    async def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    client = _client(handler)
    result = await client.get_repo("owner", "missing")
    await client.aclose()

    assert result.state == FetchState.NOT_FOUND
    assert result.is_failed
    assert result.status_code == 404


@pytest.mark.asyncio
async def test_list_contents_empty_listing_is_ok_and_empty() -> None:
    async def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    client = _client(handler)
    result = await client.list_contents("owner", "repo")
    await client.aclose()

    assert result.state == FetchState.EMPTY
    assert result.is_ok
    assert result.unwrap_or(["fallback"]) == []


@pytest.mark.asyncio
async def test_list_directory_rejects_single_file_payload() -> None:
    async def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"name": "README.md", "type": "file"})

    client = _client(handler)
    result = await client.list_directory("https://api.github.test/repos/owner/repo/contents/README.md")
    await client.aclose()

    assert result.state == FetchState.FAILED
    assert result.unwrap_or([]) == []


@pytest.mark.asyncio
async def test_get_raw_returns_text_from_download_url() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "raw.githubusercontent.test"
        return httpx.Response(200, text="# Demo\n")

    client = _client(handler)
    result = await client.get_raw("https://raw.githubusercontent.test/owner/repo/main/README.md")
    await client.aclose()

    assert result.is_ok
    assert result.data == "# Demo\n"


@pytest.mark.asyncio
async def test_transport_error_becomes_failed_contract() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    result = await client.get_languages("owner", "repo")
    await client.aclose()

    assert result.state == FetchState.FAILED
    assert result.error


@pytest.mark.asyncio
async def test_client_error_logs_redact_query_tokens(caplog: pytest.LogCaptureFixture) -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, request=request, json={"message": "bad creds"})

    client = _client(handler)
    with caplog.at_level(logging.WARNING, logger="app.crawlers.github.client"):
        result = await client._request("/repos/owner/repo", params={"access_token": "plain-secret-token"})
    await client.aclose()

    assert result.state == FetchState.FAILED
    assert result.status_code == 401
    assert any(record.msg == "GitHub request failed" for record in caplog.records)
    for record in caplog.records:
        assert "plain-secret-token" not in str(record.__dict__)


@pytest.mark.asyncio
async def test_list_commits_requests_ten_and_surfaces_empty_repo_as_failed() -> None:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/empty/commits"):
            return httpx.Response(409, json={"message": "Git Repository is empty."})
        return httpx.Response(200, json=[{"sha": "abc", "commit": {"message": "init"}}])

    client = _client(handler)
    listed = await client.list_commits("owner", "repo")
    empty = await client.list_commits("owner", "empty")
    await client.aclose()

    assert listed.state == FetchState.OK
    assert listed.data[0]["sha"] == "abc"
    assert seen[0].url.path == "/repos/owner/repo/commits"
    assert seen[0].url.params["per_page"] == "10"
    assert empty.state == FetchState.FAILED
    assert empty.status_code == 409
    assert empty.unwrap_or([]) == []
