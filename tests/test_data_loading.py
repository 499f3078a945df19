import json
import logging
from pathlib import Path

import pytest

from cyoa.data import DataLoadError, FileFetcher
from cyoa.data.repositories import CatalogRepository, NarrativeGraphRepository, resolve
from cyoa.domain import Message, Option
from cyoa.errors import CatalogUnavailable, GraphUnavailable, StoryNotFound


def test_catalog_loads_entries_in_order(tmp_path: Path) -> None:
    _write_json(
        tmp_path / "stories.json",
        {
            "stories": [
                {
                    "id": "forest-adventure",
                    "title": "Forest Adventure",
                    "description": "A walk in the woods.",
                    "file": "teststory.json",
                    "difficulty": "Easy",
                    "themes": ["Trust", "Feedback"],
                },
                {
                    "id": "budget-crunch",
                    "title": "Budget Crunch",
                    "description": "Tough calls.",
                    "file": "budget.json",
                },
            ]
        },
    )
    repo = CatalogRepository(FileFetcher(tmp_path))
    catalog = repo.load_catalog()

    assert [entry.id for entry in catalog] == ["forest-adventure", "budget-crunch"]
    assert catalog[0].themes == ("Trust", "Feedback")
    assert catalog[0].difficulty == "Easy"
    assert catalog[1].difficulty == ""
    assert catalog[1].themes == ()


def test_catalog_resolve_finds_entry_and_rejects_unknown(tmp_path: Path) -> None:
    _write_catalog(tmp_path)
    repo = CatalogRepository(FileFetcher(tmp_path))
    catalog = repo.load_catalog()

    assert resolve(catalog, "forest-adventure").file == "teststory.json"
    assert repo.find("forest-adventure").title == "Forest Adventure"
    with pytest.raises(StoryNotFound) as excinfo:
        resolve(catalog, "nonexistent")
    assert excinfo.value.story_id == "nonexistent"


def test_catalog_is_fetched_once(tmp_path: Path) -> None:
    fetcher = _CountingFetcher(FileFetcher(tmp_path))
    _write_catalog(tmp_path)
    repo = CatalogRepository(fetcher)

    repo.load_catalog()
    repo.find("forest-adventure")

    assert fetcher.calls == ["/stories.json"]


def test_catalog_missing_file_is_unavailable(tmp_path: Path) -> None:
    repo = CatalogRepository(FileFetcher(tmp_path))
    with pytest.raises(CatalogUnavailable) as excinfo:
        repo.load_catalog()
    assert isinstance(excinfo.value.__cause__, DataLoadError)


@pytest.mark.parametrize(
    "payload",
    [
        "not json at all",
        json.dumps([]),
        json.dumps({"stories": {}}),
        json.dumps({"stories": [{"id": "a", "title": "A", "description": "d"}]}),
        json.dumps({"stories": [{"id": "a", "title": "A", "description": "d", "file": "a.json", "themes": [1]}]}),
    ],
)
def test_catalog_bad_payload_is_unavailable(tmp_path: Path, payload: str) -> None:
    (tmp_path / "stories.json").write_text(payload, encoding="utf-8")
    repo = CatalogRepository(FileFetcher(tmp_path))
    with pytest.raises(CatalogUnavailable):
        repo.load_catalog()


def test_catalog_duplicate_ids_are_rejected(tmp_path: Path) -> None:
    entry = {"id": "a", "title": "A", "description": "d", "file": "a.json"}
    _write_json(tmp_path / "stories.json", {"stories": [entry, dict(entry)]})
    with pytest.raises(CatalogUnavailable):
        CatalogRepository(FileFetcher(tmp_path)).load_catalog()


def test_graph_loader_normalizes_every_node(tmp_path: Path) -> None:
    _write_json(
        tmp_path / "story.json",
        {
            "start_node": "start",
            "nodes": {
                "start": {
                    "message": {"body": "Hey!", "sender": "them"},
                    "choices": [{"text": "Hi", "destination": "middle"}],
                },
                "middle": {
                    "message": [{"body": "Hey!", "sender": "them"}],
                    "options": [{"text": "Bye", "destination": "end"}],
                },
                "end": {"messages": [{"body": "Hey!", "sender": "them"}], "isEnd": True},
            },
        },
    )
    graph = NarrativeGraphRepository(FileFetcher(tmp_path)).load("/story.json")

    assert graph.start_node == "start"
    messages = {node_id: node.messages for node_id, node in graph.nodes.items()}
    assert messages["start"] == messages["middle"] == messages["end"] == (Message("Hey!", "them"),)
    assert graph.get("start").options == (Option("Hi", "middle"),)
    assert graph.get("end").is_end is True
    assert graph.get("end").is_terminal
    assert not graph.get("start").is_terminal


def test_graph_loader_missing_file_is_unavailable(tmp_path: Path) -> None:
    with pytest.raises(GraphUnavailable):
        NarrativeGraphRepository(FileFetcher(tmp_path)).load("missing.json")


@pytest.mark.parametrize(
    "payload",
    [
        "{broken",
        {"nodes": {}},
        {"start_node": "start", "nodes": []},
        {"start_node": "start", "nodes": {"other": {}}},
        {"start_node": "start", "nodes": {"start": {"isEnd": "yes"}}},
        {"start_node": "start", "nodes": {"start": {"messages": [{"sender": "them"}]}}},
    ],
)
def test_graph_loader_bad_payload_is_unavailable(tmp_path: Path, payload: object) -> None:
    path = tmp_path / "story.json"
    if isinstance(payload, str):
        path.write_text(payload, encoding="utf-8")
    else:
        _write_json(path, payload)
    with pytest.raises(GraphUnavailable):
        NarrativeGraphRepository(FileFetcher(tmp_path)).load("story.json")


def test_graph_loader_does_not_reject_dangling_destinations(tmp_path: Path, caplog) -> None:
    _write_json(
        tmp_path / "story.json",
        {
            "start_node": "start",
            "nodes": {
                "start": {
                    "messages": [{"body": "Hi", "sender": "them"}],
                    "options": [{"text": "Go", "destination": "nowhere"}],
                }
            },
        },
    )
    with caplog.at_level(logging.WARNING, logger="cyoa.data.repositories.graph_repo"):
        graph = NarrativeGraphRepository(FileFetcher(tmp_path)).load("story.json")

    assert "nowhere" not in graph
    assert any("DANGLING_DESTINATION" in record.getMessage() for record in caplog.records)


class _CountingFetcher:
    def __init__(self, inner: FileFetcher) -> None:
        self._inner = inner
        self.calls: list[str] = []

    def fetch(self, path: str) -> str:
        self.calls.append(path)
        return self._inner.fetch(path)


def _write_catalog(directory: Path) -> None:
    _write_json(
        directory / "stories.json",
        {
            "stories": [
                {
                    "id": "forest-adventure",
                    "title": "Forest Adventure",
                    "description": "A walk in the woods.",
                    "file": "teststory.json",
                    "difficulty": "Easy",
                    "themes": ["Trust"],
                }
            ]
        },
    )


def _write_json(path: Path, data: object) -> None:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def test_graph_loader_keeps_omitted_is_end_unset(tmp_path: Path) -> None:
    _write_json(
        tmp_path / "story.json",
        {
            "start_node": "start",
            "nodes": {
                "start": {"messages": [{"body": "Hi"}], "options": [{"text": "Go", "destination": "end"}]},
                "end": {"messages": [{"body": "Bye"}]},
            },
        },
    )
    graph = NarrativeGraphRepository(FileFetcher(tmp_path)).load("story.json")

    assert graph.get("end").is_end is None
    assert graph.get("end").is_terminal
    with pytest.raises(KeyError):
        graph.get("missing")


def test_invalid_utf8_resource_is_a_load_error(tmp_path: Path) -> None:
    (tmp_path / "stories.json").write_bytes(b"\xff\xfe{}")
    with pytest.raises(DataLoadError, match="UTF-8"):
        FileFetcher(tmp_path).fetch("/stories.json")


def test_deeply_nested_json_is_unavailable(tmp_path: Path) -> None:
    (tmp_path / "story.json").write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
    with pytest.raises(GraphUnavailable):
        NarrativeGraphRepository(FileFetcher(tmp_path)).load("story.json")
