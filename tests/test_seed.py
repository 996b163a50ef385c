from __future__ import annotations

from typer.testing import CliRunner

from formstash.cli import cli
from formstash.seed import DEMO_SUBMISSIONS, seed_demo_data
from formstash.store import SubmissionStore


def test_seed_fills_empty_store(repo):
    assert seed_demo_data(repo) == len(DEMO_SUBMISSIONS)

    page = SubmissionStore(repo).list_page(1, 100)
    names = [item["data"]["name"] for item in page["items"]]
    assert names[0] == "Eve Martinez"
    assert names[-1] == "John Smith"
    assert {item["form_type"] for item in page["items"]} == {"contact"}


def test_seed_skips_non_empty_store(store, repo):
    store.create("contact", {"name": "existing"})
    assert seed_demo_data(repo) == 0
    assert store.count() == 1


def test_seed_command_is_idempotent(settings, monkeypatch, tmp_path):
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    monkeypatch.setenv("JSON_PATH", str(tmp_path / "seeded.json"))
    runner = CliRunner()

    first = runner.invoke(cli, ["seed"])
    assert first.exit_code == 0
    assert "inserted 8 submissions" in first.output

    second = runner.invoke(cli, ["seed"])
    assert second.exit_code == 0
    assert "inserted 0 submissions" in second.output


def test_seed_command_refuses_memory_backend(settings):
    result = CliRunner().invoke(cli, ["seed"])
    assert result.exit_code == 1
