# tests/test_cli.py
import json

import httpx
import pytest

from wildbook.cli import app, build_query, encounters, individuals, show_query
from wildbook.errors import QueryError
from wildbook.query import Bool, exists, match_all, missing, sex, species, year_range


def test_build_query_without_filters():
    assert build_query() == match_all()


def test_build_query_single_filter_is_not_wrapped():
    assert build_query(sex_value="female") == sex("female")


def test_build_query_combines_filters():
    q = build_query(sex_value="female", genus="Megaptera", year_from=2020, has_individual=True)
    assert q == Bool(
        must=(sex("female"), species("Megaptera"), year_range(2020), exists("individualId"))
    )


def test_build_query_operator_and_missing():
    q = build_query(sex_value="male", has_individual=False, operator="should")
    assert q == Bool(should=(sex("male"), missing("individualId")))


def test_build_query_epithet_requires_genus():
    with pytest.raises(QueryError):
        build_query(epithet="novaeangliae")


def test_query_command_prints_request(capsys):
    show_query(sex="female", year_from=2020, year_to=2023, size=5, sort="year", sort_order="desc")
    output = json.loads(capsys.readouterr().out)
    assert output == {
        "body": {
            "query": {
                "bool": {
                    "must": [
                        {"term": {"sex": "female"}},
                        {"range": {"year": {"gte": 2020, "lte": 2023}}},
                    ]
                }
            }
        },
        "params": {"from": 0, "size": 5, "sort": "year", "sortOrder": "desc"},
    }


def test_query_command_rejects_bad_operator(capsys):
    with pytest.raises(SystemExit):
        show_query(sex="female", year_from=2020, operator="xor")
    assert "Unknown operator" in capsys.readouterr().err


def run_app(*tokens: str) -> None:
    try:
        app(list(tokens))
    except SystemExit as e:
        assert not e.code, f"exited with {e.code}"


def test_no_individual_flag(capsys):
    run_app("query", "--no-individual")
    output = json.loads(capsys.readouterr().out)
    assert output["body"] == {"query": {"bool": {"must_not": [{"exists": {"field": "individualId"}}]}}}


def test_has_individual_flag(capsys):
    run_app("query", "--has-individual")
    output = json.loads(capsys.readouterr().out)
    assert output["body"] == {"query": {"exists": {"field": "individualId"}}}


class TestSearchCommands:
    @pytest.fixture(autouse=True)
    def credentials(self, monkeypatch):
        monkeypatch.setenv("WILDBOOK_URL", "http://wildbook.test")
        monkeypatch.setenv("WILDBOOK_USERNAME", "alice@example.com")
        monkeypatch.setenv("WILDBOOK_PASSWORD", "secret")

    @pytest.fixture
    def serve(self, monkeypatch, fake_wildbook):
        def install(routes):
            fake = fake_wildbook(routes)
            monkeypatch.setattr("wildbook.cli.WildbookClient", lambda *_, **__: fake.client())
            return fake

        return install

    def test_encounters_prints_results(self, serve, capsys):
        fake = serve(
            {("POST", "/api/v3/search/encounter"): httpx.Response(200, json={"hits": [{"id": "enc-1"}]})}
        )
        encounters(sex="female", year_from=2020, size=5, sort="year", sort_order="desc")

        assert json.loads(capsys.readouterr().out) == {"hits": [{"id": "enc-1"}]}
        assert fake.calls == [
            ("POST", "/api/v3/login"),
            ("POST", "/api/v3/search/encounter"),
            ("POST", "/api/v3/logout"),
        ]
        search = fake.requests[1]
        assert json.loads(search.content) == {
            "query": {
                "bool": {
                    "must": [
                        {"term": {"sex": "female"}},
                        {"range": {"year": {"gte": 2020}}},
                    ]
                }
            }
        }
        assert dict(search.url.params) == {
            "from": "0",
            "size": "5",
            "sort": "year",
            "sortOrder": "desc",
        }

    def test_individuals_hits_individual_endpoint(self, serve, capsys):
        fake = serve({("POST", "/api/v3/search/individual"): httpx.Response(200, json={"hits": []})})
        individuals(genus="Megaptera")

        assert json.loads(capsys.readouterr().out) == {"hits": []}
        assert ("POST", "/api/v3/search/individual") in fake.calls

    def test_search_failure_exits_and_still_logs_out(self, serve, capsys):
        fake = serve(
            {("POST", "/api/v3/search/encounter"): httpx.Response(500, json={"error": "index offline"})}
        )
        with pytest.raises(SystemExit) as excinfo:
            encounters(sex="female")

        assert excinfo.value.code == 1
        assert "index offline" in capsys.readouterr().err
        assert fake.calls[-1] == ("POST", "/api/v3/logout")

    def test_login_failure_exits(self, serve, capsys):
        serve({("POST", "/api/v3/login"): httpx.Response(401, json={"error": "bad password"})})
        with pytest.raises(SystemExit) as excinfo:
            encounters()

        assert excinfo.value.code == 1
        assert "bad password" in capsys.readouterr().err
