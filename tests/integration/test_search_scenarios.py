"""End-to-end search scenarios over real directory trees."""

import logging
from pathlib import Path

import pytest

from filesearch.domain.model import IssueKind
from filesearch.search.ordering import ResultOrderer
from filesearch.search.scanner import LineScanner
from filesearch.service_layer.search_service import SearchService


def _summary(matches):
    return [(Path(m.file_path).name, m.line_number, m.line_text) for m in matches]


def test_todo_scenario(make_tree, settings, channel):
    root = make_tree({"a.txt": "hello\nTODO fix\nworld", "b.txt": "TODO: refactor"})

    response = SearchService(settings, channel=channel).search(root, "TODO", 4, False)

    assert _summary(response.matches) == [("a.txt", 2, "TODO fix"), ("b.txt", 1, "TODO: refactor")]
    assert response.issues == []


def test_empty_directory(make_tree, settings, channel):
    root = make_tree({})

    response = SearchService(settings, channel=channel).search(root, "anything", 4)

    assert response.matches == []
    assert response.issues == []
    assert response.stats.files_found == 0
    assert channel.lines == ["Files to scan: 0"]


def test_root_is_a_regular_file(make_tree, settings, channel):
    root = make_tree({"only.txt": "anything\n"})

    response = SearchService(settings, channel=channel).search(root / "only.txt", "anything", 4)

    assert response.matches == []
    assert [issue.kind for issue in response.issues] == [IssueKind.CONFIGURATION]


def test_one_unreadable_file_among_readable_ones(make_tree, settings, channel, caplog):
    files = {f"f{index}.txt": f"line\nmatch {index}\n" for index in range(9)}
    files["locked.txt"] = "no keyword here\n"
    root = make_tree(files)
    locked = str(root / "locked.txt")

    class PermissionDeniedScanner(LineScanner):
        def _open(self, path):
            if str(path) == locked:
                raise PermissionError(13, "Permission denied", str(path))
            return super()._open(path)

    service = SearchService(settings, channel=channel, scanner=PermissionDeniedScanner())
    with caplog.at_level(logging.WARNING):
        response = service.search(root, "match", 4)

    assert len(response.matches) == 9
    assert locked not in {m.file_path for m in response.matches}
    assert [issue.file_path for issue in response.failures] == [locked]
    assert any(locked in message for message in caplog.messages)


def test_skipped_files_produce_no_matches_and_no_errors(make_tree, settings, channel, caplog):
    root = make_tree({"small.txt": "match\n", "large.txt": "match\n" * 100, "hidden.txt": "match\n"})
    hidden = root / "hidden.txt"
    scanner = LineScanner(max_file_size=50, readable=lambda path: path != hidden)

    with caplog.at_level(logging.WARNING):
        response = SearchService(settings, channel=channel, scanner=scanner).search(root, "match", 2)

    assert _summary(response.matches) == [("small.txt", 1, "match")]
    assert response.issues == []
    assert response.stats.files_skipped == 2
    assert caplog.messages == []


def test_case_modes(make_tree, settings, channel):
    root = make_tree({"notes.txt": "TODO upper\nToDo mixed\ntodo lower\nnone\n"})
    service = SearchService(settings, channel=channel)

    insensitive = service.search(root, "todo", 2, True)
    sensitive = service.search(root, "todo", 2, False)

    assert [m.line_number for m in insensitive.matches] == [1, 2, 3]
    assert [m.line_number for m in sensitive.matches] == [3]


def test_output_is_independent_of_worker_count(make_tree, settings, channel):
    files = {f"dir{index % 7}/file{index:03d}.txt": "\n".join(
        f"{'needle' if (index + line) % 3 == 0 else 'hay'} {line}" for line in range(40)
    ) for index in range(150)}
    root = make_tree(files)
    service = SearchService(settings, channel=channel)

    single = service.search(root, "needle", 1)
    many = service.search(root, "needle", 16)

    assert single.matches == many.matches
    assert len(single.matches) == sum(
        1 for index in range(150) for line in range(40) if (index + line) % 3 == 0
    )
    assert ResultOrderer.is_ordered(many.matches)
    assert ResultOrderer().order(many.matches) == many.matches


@pytest.mark.parametrize("workers", [1, 4, 16])
def test_progress_counts_every_submitted_file(make_tree, settings, channel, workers):
    root = make_tree({f"f{index:03d}.txt": "x\n" for index in range(101)})

    response = SearchService(settings, channel=channel).search(root, "x", workers)

    assert response.stats.files_scanned == 101
    assert sorted(line for line in channel.lines if line.startswith("Files scanned")) == [
        "Files scanned: 100/101",
        "Files scanned: 50/101",
    ]
