"""Tests for release type resolution."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from monorelease.core.release_type import ResolveOptions, resolve_release_type
from monorelease.core.transform import transform_commit
from monorelease.core.version import ReleaseType, Version
from monorelease.exceptions import EmptyRepositoryError, TagNotFoundError
from monorelease.vcs.git import GitRepository
from tests.helpers import commit, commit_file, git


@pytest.fixture
def transform() -> MagicMock:
    """A transformer that only records the raw type, like the real one does."""

    def passthrough(commit, context):
        commit.raw_type = commit.type
        return commit

    return MagicMock(side_effect=passthrough)


def resolve(transform, repo_path, **kwargs):
    return resolve_release_type(transform, ResolveOptions(cwd=repo_path, **kwargs))


class TestResolveReleaseType:
    """Tests for resolve_release_type()."""

    def test_empty_repository_raises(self, transform, empty_repo):
        with pytest.raises(EmptyRepositoryError, match=r"^Given repository is empty\.$"):
            resolve(transform, empty_repo)

    def test_empty_repository_allowed(self, transform, empty_repo):
        decision = resolve(transform, empty_repo, allow_empty=True)

        assert decision.release_type == ReleaseType.SKIP
        assert not decision.is_release
        transform.assert_not_called()

    def test_invalid_commits_skip(self, transform, empty_repo):
        commit(empty_repo, "Foo Bar.")
        commit(empty_repo, "Foo Bar even more...")
        transform.side_effect = None
        transform.return_value = None

        decision = resolve(transform, empty_repo)

        assert decision.release_type == ReleaseType.SKIP
        assert decision.commits == []

    def test_unknown_type_is_not_counted(self, transform, empty_repo):
        commit(empty_repo, "Foo: Bar.")

        assert resolve(transform, empty_repo).release_type == ReleaseType.SKIP

    def test_patch_for_non_feature_commits(self, transform, empty_repo):
        commit(empty_repo, "Fix: Some fix.")
        commit(empty_repo, "Other: Some change.")

        decision = resolve(transform, empty_repo)

        assert decision.release_type == ReleaseType.PATCH
        assert decision.version == Version(0, 0, 1)
        assert [c.header for c in decision.commits] == ["Other: Some change.", "Fix: Some fix."]

    def test_notes_of_hidden_commits_are_ignored(self, transform, empty_repo):
        commit(empty_repo, "Fix: Some fix.")
        commit(empty_repo, "Docs: Nothing.", "BREAKING CHANGES: It should not bump the major.")

        assert resolve(transform, empty_repo).release_type == ReleaseType.PATCH

    def test_minor_for_feature_commit(self, transform, empty_repo):
        commit(empty_repo, "Fix: Some fix.")
        commit(empty_repo, "Feature: Nothing new.")

        assert resolve(transform, empty_repo).release_type == ReleaseType.MINOR

    def test_major_for_breaking_change(self, transform, empty_repo):
        commit(empty_repo, "Fix: Some fix.")
        commit(empty_repo, "Feature: Nothing new.")
        commit(empty_repo, "Other: Nothing.", "BREAKING CHANGES: Bump the major!")

        assert resolve(transform, empty_repo).release_type == ReleaseType.MAJOR

    def test_singular_breaking_change_is_major(self, transform, empty_repo):
        commit(empty_repo, "Fix: Some fix.", "BREAKING CHANGE: Removed something.")

        assert resolve(transform, empty_repo).release_type == ReleaseType.MAJOR

    def test_skip_without_commits_since_tag(self, transform, empty_repo):
        commit(empty_repo, "Other: Nothing.", "BREAKING CHANGES: Bump the major!")
        git(empty_repo, "tag", "v1.0.0")

        decision = resolve(transform, empty_repo, tag_name="v1.0.0")

        assert decision.release_type == ReleaseType.SKIP
        assert decision.version == Version(1, 0, 0)
        transform.assert_not_called()

    def test_internal_for_hidden_commits_since_tag(self, transform, empty_repo):
        commit(empty_repo, "Fix: Some fix.")
        git(empty_repo, "tag", "v1.0.0")
        commit(empty_repo, "Docs: Added some notes to README #1.")

        decision = resolve(transform, empty_repo, tag_name="v1.0.0")

        assert decision.release_type == ReleaseType.INTERNAL
        assert decision.version == Version(1, 0, 0)
        assert decision.commits == []

    def test_transforms_each_commit_since_tag(self, transform, empty_repo):
        commit(empty_repo, "Fix: Some fix.")
        commit(empty_repo, "Feature: Nothing new.")
        commit(empty_repo, "Other: Nothing.", "BREAKING CHANGES: Bump the major!")
        git(empty_repo, "tag", "v1.0.0")
        commit(empty_repo, "Docs: Added some notes to README #1.")
        commit(empty_repo, "Other: Nothing.")
        commit(empty_repo, "Docs: Added some notes to README #2.")

        decision = resolve(transform, empty_repo, tag_name="v1.0.0")

        assert transform.call_count == 3
        assert decision.release_type == ReleaseType.PATCH
        assert decision.version == Version(1, 0, 1)

    def test_stops_at_first_breaking_change(self, transform, empty_repo):
        commit(empty_repo, "Fix: Some fix.")
        git(empty_repo, "tag", "v1.0.0")
        commit(empty_repo, "Docs: Added some notes to README #1.")
        commit(empty_repo, "Other: Nothing.", "BREAKING CHANGES: Bump the major!")
        commit(empty_repo, "Docs: Added some notes to README #2.")

        decision = resolve(transform, empty_repo, tag_name="v1.0.0")

        assert transform.call_count == 2
        assert decision.release_type == ReleaseType.MAJOR
        assert decision.version == Version(2, 0, 0)

    def test_transform_context(self, transform, empty_repo, package):
        commit(empty_repo, "Fix: Some fix.")

        resolve(transform, empty_repo, package=package)

        context = transform.call_args.args[1]
        assert context.display_logs is False
        assert context.return_invalid_commit is True
        assert context.package == package

    def test_missing_tag_raises(self, transform, empty_repo):
        commit(empty_repo, "Fix: Some fix.")

        with pytest.raises(TagNotFoundError) as exc_info:
            resolve(transform, empty_repo, tag_name="v1.1.2")

        assert str(exc_info.value) == (
            'Cannot find tag "v1.1.2" (the latest version from the changelog) '
            "in given repository."
        )
        assert exc_info.value.tag_name == "v1.1.2"

    def test_tag_without_version(self, empty_repo):
        """A tag that holds no version still limits the history."""
        commit(empty_repo, "Fix: Old.")
        git(empty_repo, "tag", "stable")
        commit(empty_repo, "Feature: New.")

        decision = resolve_release_type(
            transform_commit,
            ResolveOptions(cwd=empty_repo, tag_name="stable"),
        )

        assert decision.release_type == ReleaseType.MINOR
        assert decision.version == Version(0, 1, 0)
        assert [c.header for c in decision.commits] == ["Feature: New."]

    def test_with_real_transformer(self, empty_repo, package):
        commit(empty_repo, "Fix: Some fix.")
        commit(empty_repo, "Tests: More tests.")
        commit(empty_repo, "Not a valid commit")
        commit(empty_repo, "Feature: Something new. Closes #3.")

        decision = resolve_release_type(
            transform_commit,
            ResolveOptions(cwd=empty_repo, package=package),
        )

        assert decision.release_type == ReleaseType.MINOR
        assert [c.type for c in decision.commits] == ["Features", "Bug fixes"]

    def test_explicit_repository(self, transform, empty_repo):
        commit(empty_repo, "Feature: Foo.")

        decision = resolve_release_type(transform, repo=GitRepository(empty_repo))

        assert decision.release_type == ReleaseType.MINOR

    def test_path_filter(self, transform, monorepo):
        commit_file(monorepo, "packages/alpha/index.js", "Feature: Alpha feature.")
        commit_file(monorepo, "packages/beta/index.js", "Fix: Beta fix.")

        alpha = resolve(transform, monorepo / "packages" / "alpha", path=".")
        beta = resolve(transform, monorepo / "packages" / "beta", path=".")

        # The initial commit touched every package
        assert alpha.release_type == ReleaseType.MINOR
        assert [c.header for c in alpha.commits] == ["Feature: Alpha feature."]
        assert beta.release_type == ReleaseType.PATCH
        assert [c.header for c in beta.commits] == ["Fix: Beta fix."]
