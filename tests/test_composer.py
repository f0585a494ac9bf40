import pytest

from minilinkedin.frontend.api import BackendError, MediaFile
from minilinkedin.frontend.composer import MAX_CHARS, MediaStash, PostComposer
from minilinkedin.frontend.storage import LocalStorage

PNG = MediaFile("cat.png", "image/png", b"\x89PNG")
MP4 = MediaFile("clip.mp4", "video/mp4", b"video")
PDF = MediaFile("doc.pdf", "application/pdf", b"%PDF")


class StubClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def create_post(self, content, media, token):
        self.calls.append((content, media, token))
        if self.fail:
            raise BackendError(500, "Server error")
        return {"id": "p1", "content": content}


@pytest.fixture
def client():
    return StubClient()


@pytest.fixture
def refreshes():
    return []


@pytest.fixture
def composer(client, refreshes):
    return PostComposer(client, LocalStorage({"token": "tok"}), on_post_created=lambda: refreshes.append(1))


def test_typing_is_capped(composer):
    composer.change("a" * (MAX_CHARS - 1))
    composer.change(composer.content + "b")
    assert len(composer.content) == MAX_CHARS

    composer.change(composer.content + "c")
    assert composer.content == "a" * (MAX_CHARS - 1) + "b"
    assert composer.remaining == 0


def test_insert_into_full_draft_is_dropped(composer):
    draft = "a" * (MAX_CHARS - 1) + "Z"
    composer.change(draft)
    composer.change(draft[:10] + "X" + draft[10:])
    assert composer.content == draft


def test_emoji_only_added_when_it_fits(composer):
    composer.change("hi")
    composer.add_emoji("🚀")
    assert composer.content == "hi🚀"

    composer.change("x" * MAX_CHARS)
    composer.add_emoji("🚀")
    assert composer.content == "x" * MAX_CHARS


def test_toggle_emoji_picker(composer):
    composer.toggle_emoji_picker()
    assert composer.show_emoji_picker
    composer.toggle_emoji_picker()
    assert not composer.show_emoji_picker


def test_rejects_non_media_file(composer):
    composer.select_media(PNG)
    composer.select_media(PDF)
    assert composer.error == "Please select an image or video file only."
    assert composer.media == PNG


def test_valid_media_clears_error(composer):
    composer.select_media(PDF)
    composer.select_media(MP4)
    assert composer.error is None
    assert composer.media == MP4
    assert composer.preview()["kind"] == "video"


def test_no_selection_is_ignored(composer):
    composer.select_media(PNG)
    composer.select_media(None)
    assert composer.media == PNG


def test_image_preview_is_data_url(composer):
    composer.select_media(PNG)
    preview = composer.preview()
    assert preview["kind"] == "image"
    assert preview["url"].startswith("data:image/png;base64,")


def test_remove_media_resets_file_input(composer):
    composer.select_media(PNG)
    key = composer.file_input_key
    composer.remove_media()
    assert composer.media is None
    assert composer.preview() is None
    assert composer.file_input_key == key + 1


def test_blank_post_is_blocked_before_network(composer, client):
    composer.change("   \n ")
    assert composer.submit() is False
    assert composer.error == "Please enter some text or attach media to post."
    assert client.calls == []


def test_missing_token_is_blocked(client, refreshes):
    composer = PostComposer(client, LocalStorage(), on_post_created=lambda: refreshes.append(1))
    composer.change("hello")
    assert composer.submit() is False
    assert composer.error == "You must be logged in to post."
    assert client.calls == []


def test_successful_submit_clears_draft_and_refreshes_once(composer, client, refreshes):
    composer.change("  Hello world  ")
    composer.select_media(PNG)
    composer.show_emoji_picker = True

    assert composer.submit() is True
    assert client.calls == [("Hello world", PNG, "tok")]
    assert composer.content == ""
    assert composer.media is None
    assert composer.show_emoji_picker is False
    assert composer.loading is False
    assert refreshes == [1]


def test_media_only_post(composer, client):
    composer.select_media(MP4)
    assert composer.submit() is True
    assert client.calls == [("", MP4, "tok")]


def test_failed_submit_keeps_draft(refreshes):
    client = StubClient(fail=True)
    composer = PostComposer(client, LocalStorage({"token": "tok"}), on_post_created=lambda: refreshes.append(1))
    composer.change("keep me")

    assert composer.submit() is False
    assert composer.error == "Error posting. Please try again."
    assert composer.content == "keep me"
    assert composer.loading is False
    assert refreshes == []


def test_can_submit(composer):
    assert not composer.can_submit
    composer.change("x")
    assert composer.can_submit
    composer.loading = True
    assert not composer.can_submit


def test_media_stash_hands_each_file_back_once():
    stash = MediaStash()
    key = stash.put(PNG)
    assert stash.pop(key) == PNG
    assert stash.pop(key) is None
    assert stash.pop("unknown") is None


def test_media_stash_drops_oldest_past_capacity():
    stash = MediaStash(capacity=2)
    first = stash.put(PNG)
    second = stash.put(MP4)
    third = stash.put(PNG)
    assert stash.pop(first) is None
    assert stash.pop(second) == MP4
    assert stash.pop(third) == PNG
