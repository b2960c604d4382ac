import os

import pytest

from conftest import make_request
from fman.errors import InvalidDestinationError, InvalidPathError, SelfConflictError
from fman.models import OperationKind
from fman.path_resolver import PathResolver, canonical_path


@pytest.fixture
def resolver():
    return PathResolver()


# -------------------------------
# canonical_path
# -------------------------------
def test_canonical_path_is_absolute_and_normalized(base, monkeypatch):
    monkeypatch.chdir(base)
    assert canonical_path("x/../y.txt") == base / "y.txt"


def test_canonical_path_keeps_symlink_name(base):
    (base / "real").mkdir()
    os.symlink(base / "real", base / "link")
    assert canonical_path(base / "link") == base / "link"


# -------------------------------
# sources
# -------------------------------
def test_missing_source_is_invalid_path(resolver, base):
    request = make_request(OperationKind.DELETE, base / "missing.txt")
    with pytest.raises(InvalidPathError):
        resolver.resolve(request)


def test_empty_sources_is_invalid_path(resolver):
    with pytest.raises(InvalidPathError):
        resolver.resolve(make_request(OperationKind.DELETE, []))


def test_broken_symlink_source_exists(resolver, base):
    os.symlink(base / "nowhere", base / "dangling")
    resolved = resolver.resolve(make_request(OperationKind.DELETE, base / "dangling"))
    assert resolved[0].source == base / "dangling"
    assert resolved[0].target is None


@pytest.mark.parametrize("kind", [OperationKind.DELETE, OperationKind.MOVE])
@pytest.mark.parametrize("order", ["parent_first", "child_first"])
def test_nested_sources_rejected_when_recursive(resolver, tree, base, kind, order):
    sources = [tree, tree / "sub"] if order == "parent_first" else [tree / "sub", tree]
    (base / "dst").mkdir()
    destination = base / "dst" if kind == OperationKind.MOVE else None

    with pytest.raises(InvalidPathError):
        resolver.resolve(make_request(kind, sources, destination, recursive=True))


def test_nested_sources_allowed_without_recursive(resolver, tree):
    request = make_request(OperationKind.DELETE, [tree / "sub" / "b.txt", tree / "sub"])
    resolved = resolver.resolve(request)
    assert [r.source for r in resolved] == [tree / "sub" / "b.txt", tree / "sub"]


def test_duplicate_source_rejected(resolver, tree):
    with pytest.raises(InvalidPathError):
        resolver.resolve(make_request(OperationKind.DELETE, [tree / "a.txt", tree / "a.txt"]))


def test_sibling_with_common_prefix_is_not_nested(resolver, base):
    (base / "data").mkdir()
    (base / "data-old").mkdir()
    resolved = resolver.resolve(make_request(
        OperationKind.DELETE, [base / "data", base / "data-old"], recursive=True
    ))
    assert len(resolved) == 2


def test_delete_ignores_destination(resolver, tree):
    request = make_request(OperationKind.DELETE, tree, destination=tree / "sub")
    resolved = resolver.resolve(request)
    assert [r.source for r in resolved] == [tree]
    assert resolved[0].target is None


# -------------------------------
# destination
# -------------------------------
def test_copy_requires_destination(resolver, tree):
    with pytest.raises(InvalidDestinationError):
        resolver.resolve(make_request(OperationKind.COPY, tree / "a.txt"))


def test_destination_parent_must_exist(resolver, tree, base):
    request = make_request(OperationKind.COPY, tree / "a.txt", base / "nope" / "a.txt")
    with pytest.raises(InvalidDestinationError):
        resolver.resolve(request)


def test_multiple_sources_need_existing_directory(resolver, tree, base):
    request = make_request(OperationKind.COPY, [tree / "a.txt", tree / "sub" / "b.txt"],
                           base / "dst")
    with pytest.raises(InvalidDestinationError):
        resolver.resolve(request)


def test_existing_directory_destination_receives_source_name(resolver, tree, base):
    (base / "dst").mkdir()
    request = make_request(OperationKind.COPY, [tree / "a.txt", tree / "sub"], base / "dst")
    resolved = resolver.resolve(request)
    assert [r.target for r in resolved] == [base / "dst" / "a.txt", base / "dst" / "sub"]


def test_missing_destination_means_rename(resolver, tree, base):
    request = make_request(OperationKind.MOVE, tree / "a.txt", base / "renamed.txt")
    resolved = resolver.resolve(request)
    assert resolved[0].target == base / "renamed.txt"


# -------------------------------
# self-conflict
# -------------------------------
def test_destination_inside_source_is_rejected(resolver, base):
    (base / "a").mkdir()
    request = make_request(OperationKind.COPY, base / "a", base / "a" / "sub")
    with pytest.raises(SelfConflictError):
        resolver.resolve(request)
    assert list((base / "a").iterdir()) == []


def test_copy_file_onto_itself_is_rejected(resolver, tree):
    request = make_request(OperationKind.COPY, tree / "a.txt", tree)
    with pytest.raises(SelfConflictError):
        resolver.resolve(request)


def test_move_directory_into_own_parent_is_rejected(resolver, tree):
    request = make_request(OperationKind.MOVE, tree / "sub", tree)
    with pytest.raises(SelfConflictError):
        resolver.resolve(request)


def test_conflict_detected_through_symlinked_destination(resolver, tree, base):
    os.symlink(tree / "sub", base / "alias")
    request = make_request(OperationKind.COPY, tree, base / "alias")
    with pytest.raises(SelfConflictError):
        resolver.resolve(request)


def test_symlink_source_into_its_target_is_allowed(resolver, tree, base):
    os.symlink(tree, base / "link")
    request = make_request(OperationKind.COPY, base / "link", tree / "sub")
    resolved = resolver.resolve(request)
    assert resolved[0].target == tree / "sub" / "link"


def test_sibling_with_common_prefix_is_not_a_conflict(resolver, base):
    (base / "data").mkdir()
    (base / "data2").mkdir()
    request = make_request(OperationKind.COPY, base / "data", base / "data2")
    assert resolver.resolve(request)[0].target == base / "data2" / "data"
