"""
HTTP tests for comments and the live comment stream.
"""
import pytest

JSON = {"Accept": "application/json"}
STREAM = {"Accept": "text/vnd.turbo-stream.html, text/html"}


@pytest.fixture
def published_post(make_post):
    return make_post("Test Post", "Test content", published=True)


@pytest.fixture
def draft_post(make_post):
    return make_post("Draft Post", "Draft content", published=False)


class TestCreateComment:
    """POST /posts/{post_id}/comments."""

    def test_creates_comment(self, client, published_post):
        resp = client.post(
            f"/posts/{published_post['id']}/comments",
            data={"comment[author_name]": "Test Author", "comment[content]": "Test comment"},
            follow_redirects=False,
        )

        assert resp.status_code == 303
        page = client.get(resp.headers["location"])
        assert "Test comment" in page.text
        assert "Comentario creado exitosamente" in page.text

    def test_stream_response_updates_list_count_form_and_toast(self, client, published_post):
        pid = published_post["id"]

        resp = client.post(
            f"/posts/{pid}/comments",
            data={"comment[author_name]": "Test Author", "comment[content]": "Test comment"},
            headers=STREAM,
        )

        assert resp.status_code == 200
        assert f'target="post_{pid}_comments_list"' in resp.text
        assert f'target="comments_count_{pid}"' in resp.text
        assert 'target="comment_form"' in resp.text
        assert '<turbo-stream action="append" target="notifications">' in resp.text
        assert "(1)" in resp.text

    def test_invalid_comment_rerenders_form(self, client, published_post):
        resp = client.post(
            f"/posts/{published_post['id']}/comments",
            data={"comment[author_name]": "", "comment[content]": ""},
        )

        assert resp.status_code == 422
        assert "form-errors" in resp.text
        assert client.get(f"/posts/{published_post['id']}", headers=JSON).json()["comments"] == 0

    def test_invalid_comment_stream_replaces_form(self, client, published_post):
        resp = client.post(
            f"/posts/{published_post['id']}/comments",
            json={"author_name": "A", "content": "Hi"},
            headers=STREAM,
        )

        assert resp.status_code == 422
        assert '<turbo-stream action="replace" target="comment_form">' in resp.text
        assert "form-errors" in resp.text

    def test_draft_post_rejected_with_message(self, client, draft_post):
        resp = client.post(
            f"/posts/{draft_post['id']}/comments",
            json={"author_name": "Test Author", "content": "Test comment content"},
            headers=JSON,
        )

        assert resp.status_code == 422
        assert resp.json() == {"error": "No se pueden agregar comentarios a un post en borrador"}
        assert client.get(f"/posts/{draft_post['id']}", headers=JSON).json()["comments"] == 0

    def test_draft_post_rejected_before_field_validation(self, client, draft_post):
        resp = client.post(f"/posts/{draft_post['id']}/comments", json={}, headers=STREAM)

        assert resp.status_code == 422
        assert "draft-message" in resp.text
        assert "form-errors" not in resp.text

    def test_draft_post_page_gets_alert(self, client, draft_post):
        resp = client.post(
            f"/posts/{draft_post['id']}/comments",
            data={"comment[author_name]": "Test Author", "comment[content]": "Test comment content"},
        )

        assert resp.status_code == 200
        assert "No se pueden agregar comentarios a un post en borrador" in resp.text
        assert "notification-error" in resp.text

    def test_unknown_post(self, client):
        resp = client.post("/posts/999999/comments", json={"author_name": "Ana", "content": "Hello there"}, headers=JSON)

        assert resp.status_code == 404


class TestDestroyComment:
    """DELETE /posts/{post_id}/comments/{id}."""

    def test_destroys_comment(self, client, published_post):
        pid = published_post["id"]
        comment = client.post(
            f"/posts/{pid}/comments", json={"author_name": "Test Author", "content": "Test comment"}, headers=JSON
        ).json()

        resp = client.delete(f"/posts/{pid}/comments/{comment['id']}", follow_redirects=False)

        assert resp.status_code == 303
        assert client.get(f"/posts/{pid}", headers=JSON).json()["comments"] == 0

    def test_destroy_via_form_fallback_as_stream(self, client, published_post):
        pid = published_post["id"]
        comment = client.post(
            f"/posts/{pid}/comments", json={"author_name": "Test Author", "content": "Test comment"}, headers=JSON
        ).json()

        resp = client.post(f"/posts/{pid}/comments/{comment['id']}/delete", headers=STREAM)

        assert resp.status_code == 200
        assert "(0)" in resp.text
        assert "Comentario eliminado" in resp.text

    def test_comment_of_other_post_is_404(self, client, make_post, published_post):
        other = make_post("Other Post", "Other content")
        comment = client.post(
            f"/posts/{published_post['id']}/comments", json={"author_name": "Ana", "content": "Hello there"}, headers=JSON
        ).json()

        resp = client.delete(f"/posts/{other['id']}/comments/{comment['id']}", headers=JSON)

        assert resp.status_code == 404


class TestCommentStream:
    """WS /posts/{post_id}/stream relays comment broadcasts."""

    def test_create_and_destroy_are_broadcast(self, client, published_post):
        pid = published_post["id"]
        with client.websocket_connect(f"/posts/{pid}/stream") as ws:
            comment = client.post(
                f"/posts/{pid}/comments", json={"author_name": "Ana", "content": "Live comment body"}, headers=JSON
            ).json()
            listing = ws.receive_json()
            count = ws.receive_json()

            client.delete(f"/posts/{pid}/comments/{comment['id']}", headers=JSON)
            listing_after = ws.receive_json()
            count_after = ws.receive_json()

        assert listing["channel"] == f"post_{pid}_comments"
        assert listing["action"] == "replace"
        assert listing["target"] == f"post_{pid}_comments_list"
        assert "Live comment body" in listing["html"]
        assert count["target"] == f"comments_count_{pid}"
        assert "(1)" in count["html"]
        assert "Live comment body" not in listing_after["html"]
        assert "(0)" in count_after["html"]

    def test_likes_are_broadcast_on_post_channel(self, client, published_post):
        pid = published_post["id"]
        with client.websocket_connect(f"/posts/{pid}/stream") as ws:
            client.patch(f"/posts/{pid}/like", headers=JSON)
            message = ws.receive_json()

        assert message["channel"] == f"post_{pid}"
        assert message["target"] == f"post_{pid}_likes"
        assert message["html"].strip() == "1"

    def test_other_posts_are_not_relayed(self, client, published_post, make_post):
        other = make_post("Other Post", "Other content")
        with client.websocket_connect(f"/posts/{published_post['id']}/stream") as ws:
            client.post(f"/posts/{other['id']}/comments", json={"author_name": "Ana", "content": "Elsewhere"}, headers=JSON)
            client.patch(f"/posts/{published_post['id']}/like", headers=JSON)
            message = ws.receive_json()

        assert message["target"] == f"post_{published_post['id']}_likes"
