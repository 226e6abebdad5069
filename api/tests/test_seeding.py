import json

from brm import repo
from brm import store as store_module
from brm.config import TEMPLATES_SEED_PATH
from brm.services.seeding import load_template_definitions, seed_demo_data, seed_templates_if_empty
from brm.store import JsonFileStore


def _store(monkeypatch, tmp_path):
    store = JsonFileStore(tmp_path / "data")
    store.init_collections()
    monkeypatch.setattr(store_module, "_store", store)
    return store


def test_bundled_templates_have_sections_and_questions():
    definitions = load_template_definitions(TEMPLATES_SEED_PATH)
    assert definitions
    for template in definitions:
        assert template["name"]
        for section in template["sections"]:
            assert section["id"] and section["questions"]
            for question in section["questions"]:
                assert question["type"] in {"text", "number", "multipleChoice", "checkboxes"}


def test_seed_templates_only_when_empty(monkeypatch, tmp_path):
    _store(monkeypatch, tmp_path)
    path = tmp_path / "templates.json"
    path.write_text(json.dumps([{"name": "One", "sections": []}, {"name": "Two", "sections": []}]))

    assert seed_templates_if_empty(path) == 2
    assert seed_templates_if_empty(path) == 0
    assert [t["name"] for t in repo.templates.list_all()] == ["One", "Two"]


def test_seed_templates_ignores_bad_file(monkeypatch, tmp_path):
    _store(monkeypatch, tmp_path)
    path = tmp_path / "templates.json"
    path.write_text('{"name": "not a list"}')
    assert seed_templates_if_empty(path) == 0
    assert seed_templates_if_empty(tmp_path / "missing.json") == 0


def test_seed_demo_data_links_contacts_and_assessments(monkeypatch, tmp_path):
    _store(monkeypatch, tmp_path)
    summary = seed_demo_data(TEMPLATES_SEED_PATH, n_accounts=3, contacts_per_account=2, reset=True, seed=7)
    assert summary["accounts"] == 3
    assert summary["contacts"] == 6
    assert summary["assessments"] == 3

    account_ids = {a["id"] for a in repo.accounts.list_all()}
    template_ids = {t["id"] for t in repo.templates.list_all()}
    assert all(c["AccountId"] in account_ids for c in repo.contacts.list_all())
    assert all(a["templateId"] in template_ids for a in repo.assessments.list_all())

    seed_demo_data(TEMPLATES_SEED_PATH, n_accounts=1, contacts_per_account=0, reset=True)
    assert len(repo.accounts.list_all()) == 1
    assert repo.contacts.list_all() == []
