"""Tests for BlogService — list, get, create, update, delete, and forms."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

from blogcore.config.settings import BlogSettings
from blogcore.domain.forms import PostForm
from blogcore.domain.post import NotFound, Post
from blogcore.infrastructure.store import Store
from blogcore.services.blog import BlogService, process_post_form
from blogcore.services.result import ErrorStatus, SuccessStatus
from tests.conftest import T0, create_post, make_post

# ---------------------------------------------------------------------------
# process_post_form()
# ---------------------------------------------------------------------------


class TestProcessPostForm:
    def test_valid_calls_persist(self) -> None:
        seen: list[PostForm] = []
        result = process_post_form({"title": "Hi"}, seen.append, op="test")
        assert isinstance(result, SuccessStatus)
        assert result.ok
        assert result.op == "test"
        assert result.data == {}
        assert [f.title for f in seen] == ["Hi"]

    def test_invalid_skips_persist(self) -> None:
        seen: list[PostForm] = []
        result = process_post_form({"title": ""}, seen.append, op="test")
        assert isinstance(result, ErrorStatus)
        assert not result.ok
        assert seen == []
        assert result.error.code == "VALIDATION_FAILED"
        assert result.error.message == "title can't be blank"
        assert result.error.detail == {"errors": {"title": ["can't be blank"]}}

    def test_post_outcome_sets_id(self) -> None:
        post = make_post("p1")
        result = process_post_form({"title": "Hi"}, lambda form: post, op="test")
        assert result.ok
        assert result.data == {"id": "p1"}

    def test_not_found_outcome(self) -> None:
        result = process_post_form({"title": "Hi"}, lambda form: NotFound(id="x"), op="test")
        assert isinstance(result, ErrorStatus)
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"id": "x"}
        assert result.form.title == "Hi"
        assert result.errors == {}


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestListPosts:
    def test_empty(self, service: BlogService) -> None:
        assert service.list_posts() == []

    def test_newest_first(self, service: BlogService) -> None:
        t1 = T0
        t2 = T0 + timedelta(hours=1)
        t3 = T0 + timedelta(hours=2)
        # Created out of order on purpose.
        create_post(service, "second", now=t2)
        create_post(service, "first", now=t1)
        create_post(service, "third", now=t3)
        posts = service.list_posts()
        assert [p.created_at for p in posts] == [t3, t2, t1]
        assert [p.title for p in posts] == ["third", "second", "first"]

    def test_naive_now_sorts_with_default_time(self, service: BlogService) -> None:
        create_post(service, "naive", now=datetime(2024, 1, 1))
        latest = service.create_post({"title": "default"})
        assert latest.ok
        posts = service.list_posts()
        assert [p.title for p in posts] == ["default", "naive"]
        assert posts[1].created_at == datetime(2024, 1, 1, tzinfo=UTC)

    def test_seeded_posts_sorted(self, store_path: Path) -> None:
        seed = [
            make_post("old", created_at=datetime(2020, 1, 1, tzinfo=UTC)),
            make_post("new", created_at=datetime(2022, 1, 1, tzinfo=UTC)),
            make_post("mid", created_at=datetime(2021, 1, 1, tzinfo=UTC)),
        ]
        with Store(store_path, seed) as store:
            assert [p.id for p in BlogService(store).list_posts()] == ["new", "mid", "old"]


class TestGetPost:
    def test_found(self, service: BlogService) -> None:
        post_id = create_post(service, "Hello")
        post = service.get_post(post_id)
        assert isinstance(post, Post)
        assert post.title == "Hello"

    def test_not_found(self, service: BlogService) -> None:
        assert service.get_post("missing") == NotFound(id="missing")

    def test_idempotent(self, service: BlogService) -> None:
        post_id = create_post(service, "Hello")
        assert service.get_post(post_id) == service.get_post(post_id)


class TestForms:
    def test_new_post_form_is_empty(self, service: BlogService) -> None:
        form = service.new_post_form()
        assert form.to_dict() == {"title": "", "description": "", "body": ""}
        assert form.errors == {}

    def test_edit_post_form_prefilled(self, service: BlogService) -> None:
        post_id = create_post(service, "Hello", description="d", body="b")
        form = service.edit_post_form(post_id)
        assert isinstance(form, PostForm)
        assert form.to_dict() == {"title": "Hello", "description": "d", "body": "b"}

    def test_edit_post_form_missing(self, service: BlogService) -> None:
        assert service.edit_post_form("missing") == NotFound(id="missing")


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


class TestCreatePost:
    def test_success(self, service: BlogService) -> None:
        result = service.create_post({"title": "Hello"}, now=T0)
        assert isinstance(result, SuccessStatus)
        assert result.op == "create_post"

        post = service.get_post(result.data["id"])
        assert isinstance(post, Post)
        assert post.id != ""
        assert post.title == "Hello"
        assert post.created_at == T0
        assert post.description == ""
        assert post.body == ""

    def test_all_fields(self, service: BlogService) -> None:
        result = service.create_post(
            {"title": "T", "description": "D", "body": "B", "ignored": "x"}, now=T0
        )
        post = service.get_post(result.data["id"])
        assert isinstance(post, Post)
        assert (post.title, post.description, post.body) == ("T", "D", "B")

    def test_blank_title_fails(self, service: BlogService) -> None:
        result = service.create_post({"title": ""}, now=T0)
        assert isinstance(result, ErrorStatus)
        assert result.form.errors["title"] == ["can't be blank"]
        assert result.errors == {"title": ["can't be blank"]}
        assert service.store.all() == []

    def test_missing_title_fails(self, service: BlogService) -> None:
        result = service.create_post({"body": "no title"})
        assert not result.ok
        assert service.store.all() == []

    def test_failure_keeps_submitted_values(self, service: BlogService) -> None:
        result = service.create_post({"title": "", "body": "draft"})
        assert isinstance(result, ErrorStatus)
        assert result.form.body == "draft"

    def test_whitespace_title_accepted(self, service: BlogService) -> None:
        result = service.create_post({"title": "  "}, now=T0)
        assert result.ok
        post = service.get_post(result.data["id"])
        assert isinstance(post, Post)
        assert post.title == "  "

    def test_default_now_is_current_time(self, service: BlogService) -> None:
        before = datetime.now(UTC)
        result = service.create_post({"title": "Now"})
        after = datetime.now(UTC)
        post = service.get_post(result.data["id"])
        assert isinstance(post, Post)
        assert before <= post.created_at <= after


class TestUpdatePost:
    def test_preserves_id_and_created_at(self, service: BlogService) -> None:
        post_id = create_post(service, "Old", body="old body", description="old desc")
        result = service.update_post(post_id, {"title": "New"})
        assert isinstance(result, SuccessStatus)
        assert result.op == "update_post"
        assert result.data == {"id": post_id}

        post = service.get_post(post_id)
        assert isinstance(post, Post)
        assert post.id == post_id
        assert post.created_at == T0
        assert post.title == "New"

    def test_form_fields_replace_stored_values(self, service: BlogService) -> None:
        post_id = create_post(service, "Old", body="old body")
        service.update_post(post_id, {"title": "New"})
        post = service.get_post(post_id)
        assert isinstance(post, Post)
        # Absent form fields extract as "" and are merged like any other.
        assert post.body == ""

    def test_blank_title_leaves_post_unchanged(self, service: BlogService) -> None:
        post_id = create_post(service, "Keep me")
        before = service.get_post(post_id)
        result = service.update_post(post_id, {"title": ""})
        assert isinstance(result, ErrorStatus)
        assert result.error.code == "VALIDATION_FAILED"
        assert service.get_post(post_id) == before

    def test_missing_post(self, service: BlogService) -> None:
        result = service.update_post("missing", {"title": "New"})
        assert isinstance(result, ErrorStatus)
        assert result.error.code == "NOT_FOUND"
        assert service.store.all() == []


class TestDeletePost:
    def test_delete_then_get_not_found(self, service: BlogService) -> None:
        post_id = create_post(service, "Doomed")
        result = service.delete_post(post_id)
        assert result.ok
        assert result.data == {"id": post_id, "removed": True}
        assert service.get_post(post_id) == NotFound(id=post_id)

    def test_delete_absent_succeeds(self, service: BlogService) -> None:
        post_id = create_post(service, "Doomed")
        service.delete_post(post_id)
        result = service.delete_post(post_id)
        assert result.ok
        assert result.data["removed"] is False

    def test_delete_only_target(self, service: BlogService) -> None:
        keep = create_post(service, "Keep")
        drop = create_post(service, "Drop")
        service.delete_post(drop)
        assert [p.id for p in service.list_posts()] == [keep]


class TestFromSettings:
    def test_opens_configured_store(self, tmp_path: Path) -> None:
        settings = BlogSettings.load(root=tmp_path)
        service = BlogService.from_settings(settings)
        try:
            assert service.store.path == tmp_path / "blog.db"
            result = service.create_post({"title": "Configured"}, now=T0)
            assert result.ok
            assert result.meta is None
        finally:
            service.store.close()

    def test_verbose_leaves_telemetry_to_caller(self, tmp_path: Path) -> None:
        settings = BlogSettings.load(root=tmp_path, verbose=True)
        service = BlogService.from_settings(settings)
        try:
            result = service.create_post({"title": "Untraced"}, now=T0)
            assert result.ok
            assert result.meta is None
        finally:
            service.store.close()
