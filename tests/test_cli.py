"""Tests for the command line entrypoint."""

import io
import json
import logging

import pytest

from api_transform.cli import build_parser, main, run_transform
from api_transform.transform import PipelineConfig, TransformError
from api_transform.transform.errors import InvalidInputError

pytestmark = pytest.mark.usefixtures("restore_root_logging")


class TestRunTransform:
    """Tests for payload handling."""

    def test_whole_payload(self, post_record, utc_timezone):
        """Test the whole document is transformed without a key."""
        result = run_transform(post_record, "Post", config=PipelineConfig())

        assert result["comments"] == [{"id": 2, "body": "x"}]

    def test_envelope_key(self, post_record, utc_timezone):
        """Test only the given envelope key is transformed."""
        payload = {"success": True, "count": "1", "data": post_record}
        result = run_transform(payload, "Post", config=PipelineConfig(), key="data")

        assert result["success"] is True
        assert result["count"] == "1"
        assert result["data"]["id"] == 1
        assert payload["data"] is post_record

    @pytest.mark.parametrize("data", [None, [], {}])
    def test_empty_envelope_value_left_alone(self, data):
        """Test empty or missing data is returned untouched."""
        payload = {"success": True, "data": data}

        assert run_transform(payload, "Post", key="data") is payload

    def test_missing_envelope_key(self):
        """Test a missing key is returned untouched."""
        payload = {"success": True}

        assert run_transform(payload, "Post", key="data") is payload

    def test_envelope_must_be_object(self, post_record):
        """Test key mode needs a JSON object."""
        with pytest.raises(TransformError):
            run_transform([post_record], "Post", key="data")

    def test_errors_propagate(self):
        """Test pipeline errors reach the caller."""
        with pytest.raises(InvalidInputError):
            run_transform({"Other": {}}, "Post")

    def test_run_success_reports_metrics(self, post_records, caplog):
        """Test the final run line carries the transform metrics."""
        with caplog.at_level(logging.INFO, logger="api_transform.run.Post"):
            run_transform(post_records, "Post", config=PipelineConfig(), run_id="run-1")

        lines = [
            json.loads(r.getMessage())
            for r in caplog.records
            if r.name == "api_transform.run.Post"
        ]
        run_line = [line for line in lines if line["step"] == "run"][-1]

        assert run_line["status"] == "success"
        assert run_line["record_count"] == 2
        assert run_line["extra"]["run_id"] == "run-1"
        assert run_line["extra"]["total_transforms"] == 1

    def test_config_from_env(self, post_record, monkeypatch):
        """Test the environment configures the run when no config is given."""
        monkeypatch.setenv("API_TRANSFORM_CHANGE_KEYS", "false")

        result = run_transform(post_record, "Post")

        assert "Comment" in result


class TestParser:
    """Tests for argument parsing."""

    def test_alias_required(self):
        """Test --alias is mandatory."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_defaults(self):
        """Test default options."""
        args = build_parser().parse_args(["--alias", "Post"])

        assert args.input is None
        assert args.output is None
        assert args.key is None
        assert not args.no_nesting


class TestMain:
    """Tests for the CLI entrypoint."""

    def test_file_to_file(self, tmp_path, post_records):
        """Test reading and writing files."""
        input_path = tmp_path / "in.json"
        output_path = tmp_path / "out" / "result.json"
        input_path.write_text(json.dumps(post_records), encoding="utf-8")

        code = main(["--alias", "Post", "--input", str(input_path), "--output", str(output_path)])

        assert code == 0
        result = json.loads(output_path.read_text(encoding="utf-8"))
        assert [r["id"] for r in result] == [1, 2]
        assert result[0]["author"]["profile"] == {"bio": "hello"}

    def test_stdin_to_stdout(self, monkeypatch, capsys, post_record):
        """Test reading stdin and writing stdout."""
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(post_record)))

        code = main(["--alias", "Post", "--no-time", "--no-keys"])

        assert code == 0
        result = json.loads(capsys.readouterr().out)
        assert result == {
            "id": 1,
            "created": "2021-01-01",
            "title": "Hi",
            "Comment": [{"id": 2, "body": "x"}],
        }

    def test_no_nesting_flag(self, monkeypatch, capsys, post_record):
        """Test --no-nesting keeps the primary record nested."""
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(post_record)))

        main(["--alias", "Post", "--no-nesting", "--no-numbers", "--no-time"])

        result = json.loads(capsys.readouterr().out)
        assert result["post"] == {"id": "1", "created": "2021-01-01", "title": "Hi"}

    def test_invalid_input_exit_code(self, monkeypatch, capsys):
        """Test bad data exits with 1 and writes nothing."""
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"Other": {}})))

        code = main(["--alias", "Post"])

        assert code == 1
        assert capsys.readouterr().out == ""

    def test_malformed_json_exit_code(self, monkeypatch, capsys):
        """Test invalid JSON exits with 1."""
        monkeypatch.setattr("sys.stdin", io.StringIO("{not json"))

        assert main(["--alias", "Post"]) == 1

    def test_invalid_env_flag_exit_code(self, monkeypatch, post_record):
        """Test a bad configuration value exits with 1."""
        monkeypatch.setenv("API_TRANSFORM_CHANGE_TIME", "sometimes")
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(post_record)))

        assert main(["--alias", "Post"]) == 1

    def test_missing_input_file_exit_code(self, tmp_path, capsys):
        """Test an unreadable input path exits with 1 and writes nothing."""
        code = main(["--alias", "Post", "--input", str(tmp_path / "missing.json")])

        assert code == 1
        assert capsys.readouterr().out == ""
