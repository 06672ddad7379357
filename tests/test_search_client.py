import pytest
import requests

from albumgen import search_client
from albumgen.search_client import SearchServiceError, search_images, top_matches


class FakeResponse:
    def __init__(self, payload=None, status=200, bad_json=False):
        self.payload = payload
        self.status_code = status
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value")
        return self.payload


@pytest.fixture
def post(monkeypatch):
    calls = []

    def install(response):
        def fake_post(url, json=None, timeout=None):
            calls.append((url, json, timeout))
            if isinstance(response, Exception):
                raise response
            return response
        monkeypatch.setattr(search_client.requests, "post", fake_post)
        return calls
    return install


def test_search_returns_ranked_filenames(post):
    calls = post(FakeResponse({"filenames": ["best.jpg", "good.jpg", "ok.jpg"]}))
    result = search_images("  dog on a beach ", endpoint="http://search.local/search", timeout=5)

    assert result == ["best.jpg", "good.jpg", "ok.jpg"]
    assert calls == [("http://search.local/search", {"text": "dog on a beach"}, 5)]


@pytest.mark.parametrize("response", [
    FakeResponse({"filenames": []}, status=500),
    FakeResponse(bad_json=True),
    FakeResponse({"results": ["a.jpg"]}),
    FakeResponse({"filenames": ["a.jpg", 3]}),
    FakeResponse(["a.jpg"]),
    requests.ConnectionError("connection refused"),
])
def test_search_failures_raise_service_error(post, response):
    post(response)
    with pytest.raises(SearchServiceError):
        search_images("sunset")


def test_empty_query_is_rejected_without_a_request(post):
    calls = post(FakeResponse({"filenames": []}))
    with pytest.raises(SearchServiceError):
        search_images("   ")
    assert calls == []


def test_top_matches_keeps_first_sixteen_in_order():
    names = [f"{i}.jpg" for i in range(40)]
    assert top_matches(names) == names[:16]
    assert top_matches(names[:3]) == names[:3]
