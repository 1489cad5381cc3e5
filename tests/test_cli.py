"""Tests for the command line interface."""

import json
import logging

import pytest
from typer.testing import CliRunner

from gardener import cli
from gardener.errors import ExternalQueryError

from conftest import FakeCatalogClient, read_tsv


runner = CliRunner()
HEADER = ["Title", "020|a"]


class StubYazClient(FakeCatalogClient):
    """YazClient replacement: K&R is held by the first catalog only."""

    instances: list["StubYazClient"] = []

    def __init__(self, executable="yaz-client", timeout=None):
        super().__init__(hits={("0131103628", "uofo")}, fail_on={"1111111111"})
        self.executable = executable
        self.timeout = timeout
        StubYazClient.instances.append(self)

    def version(self) -> str:
        return "YAZ version 5.34.0\n"


class MissingYazClient(StubYazClient):
    def version(self) -> str:
        raise ExternalQueryError("unable to execute yaz-client: not found")


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("gardener")
    logger.handlers[:] = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def stub_client(monkeypatch):
    StubYazClient.instances = []
    monkeypatch.setattr(cli, "YazClient", StubYazClient)
    return StubYazClient


class TestCli:
    """Tests for the well-connected-gardener command."""

    def test_version(self):
        result = runner.invoke(cli.app, ["--version"])
        assert result.exit_code == 0
        assert "Well Connected Gardener - Version" in result.output

    def test_requires_a_file(self, stub_client):
        result = runner.invoke(cli.app, [])
        assert result.exit_code == 1
        assert "Please provide one file to process" in result.output

    def test_missing_yaz_client_fails_before_work(self, monkeypatch, write_tsv):
        path = write_tsv("list.tsv", [HEADER, ["Book", "0131103628"]])
        monkeypatch.setattr(cli, "YazClient", MissingYazClient)

        result = runner.invoke(cli.app, [str(path)])

        assert result.exit_code == 1
        assert "unable to execute yaz-client" in result.output
        assert not path.with_name("list_augmented.tsv").exists()

    def test_augments_files(self, stub_client, write_tsv):
        first = write_tsv("a.tsv", [HEADER, ["The C programming language", "0131103628"]])
        second = write_tsv("b.tsv", [HEADER, ["Dune", "0441172717"]])

        result = runner.invoke(cli.app, ["-v", "--settle-delay", "0", str(first), str(second)])

        assert result.exit_code == 0, result.output
        assert "Summary" in result.output
        _, row = read_tsv(first.with_name("a_augmented.tsv"))
        assert row[2] == "true"
        _, row = read_tsv(second.with_name("b_augmented.tsv"))
        assert row[2] == "false"

    def test_options_reach_client(self, stub_client, write_tsv):
        path = write_tsv("a.tsv", [HEADER])
        result = runner.invoke(
            cli.app,
            ["--settle-delay", "0", "--query-timeout", "30", "--yaz-client", "/opt/yaz/bin/yaz-client", str(path)],
        )

        assert result.exit_code == 0, result.output
        (client,) = stub_client.instances
        assert client.executable == "/opt/yaz/bin/yaz-client"
        assert client.timeout == 30

    def test_aborted_file_sets_exit_code(self, stub_client, write_tsv):
        bad = write_tsv("bad.tsv", [HEADER, ["Broken", "1111111111"]])
        good = write_tsv("good.tsv", [HEADER, ["Book", "0131103628"]])

        result = runner.invoke(cli.app, ["--settle-delay", "0", str(bad), str(good)])

        assert result.exit_code == 1
        assert "[aborted]" in result.output
        assert "[completed]" in result.output

    def test_json_logs(self, stub_client, write_tsv):
        path = write_tsv("a.tsv", [HEADER])
        result = runner.invoke(cli.app, ["--json-logs", "--settle-delay", "0", str(path)])
        assert result.exit_code == 0, result.output


def _log_record(**extra):
    record = logging.makeLogRecord({"name": "gardener.test", "levelname": "INFO", "levelno": logging.INFO, "msg": "file_started"})
    record.__dict__.update(extra)
    return record


class TestFormatters:
    """Tests for JsonFormatter and TextFormatter."""

    def test_json_includes_extras(self):
        line = cli.JsonFormatter().format(_log_record(file="a.tsv", records=3))
        payload = json.loads(line)
        assert payload["msg"] == "file_started"
        assert payload["logger"] == "gardener.test"
        assert payload["file"] == "a.tsv"
        assert payload["records"] == 3
        assert "args" not in payload

    def test_json_unserializable_extra_falls_back_to_repr(self):
        payload = json.loads(cli.JsonFormatter().format(_log_record(path=object)))
        assert payload["path"] == repr(object)

    def test_text_appends_extras(self):
        line = cli.TextFormatter("%(levelname)s %(message)s").format(_log_record(file="a.tsv", records=3))
        assert line == "INFO file_started file=a.tsv records=3"

    def test_text_without_extras(self):
        assert cli.TextFormatter("%(message)s").format(_log_record()) == "file_started"
