import pytest
import requests

from minilinkedin.frontend.api import BackendClient, BackendError
from minilinkedin.frontend.composer import PostComposer
from minilinkedin.frontend.feed import FeedPage, FeedState
from minilinkedin.frontend.storage import LocalStorage


def _response(status_code, body, content_type="text/html"):
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    response.headers["Content-Type"] = content_type
    return response


class StubSession:
    """Answers every request with the same canned response."""

    def __init__(self, response):
        self.response = response
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url))
        return self.response


@pytest.fixture
def html_client():
    return BackendClient(base_url="http://api.test", session=StubSession(_response(200, b"<html>proxy</html>")))


def test_non_json_success_is_backend_error(html_client):
    with pytest.raises(BackendError) as excinfo:
        html_client.get_posts()
    assert excinfo.value.status_code == 200
    assert excinfo.value.message == "Unexpected response from server"


def test_composer_survives_non_json_success(html_client):
    composer = PostComposer(html_client, LocalStorage({"token": "tok"}))
    composer.change("hello")
    assert composer.submit() is False
    assert composer.error == "Error posting. Please try again."
    assert composer.content == "hello"
    assert composer.loading is False


def test_feed_survives_non_json_success(html_client):
    page = FeedPage(html_client, LocalStorage())
    page.mount()
    assert page.state == FeedState.ERROR
    assert page.error == "Failed to load posts."


def test_error_message_from_non_json_error_body():
    client = BackendClient(base_url="http://api.test", session=StubSession(_response(502, b"Bad Gateway")))
    with pytest.raises(BackendError) as excinfo:
        client.get_posts()
    assert excinfo.value.status_code == 502
    assert excinfo.value.message == "Bad Gateway"


def test_requests_go_to_base_url():
    session = StubSession(_response(200, b"[]", "application/json"))
    client = BackendClient(base_url="http://api.test", session=session)
    assert client.get_posts() == []
    assert session.requests == [("GET", "http://api.test/posts")]
