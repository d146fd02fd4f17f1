"""
Tests for the fsmguard command-line interface.
"""

import json

import pytest

from fsmguard.cli import main


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def definition_file(tmp_path, lifecycle_document):
    lifecycle_document["defaults"] = {"initialState": "Draft"}
    path = tmp_path / "lifecycle.json"
    path.write_text(json.dumps(lifecycle_document))
    return path


@pytest.fixture
def trail_file(tmp_path):
    lines = [
        {"entityId": 1, "actor": "a", "from_state": "Draft", "to_state": "Approved",
         "action": "approve", "timestamp": 1},
        {"entityId": 1, "actor": "b", "from_state": "Approved", "to_state": "Active",
         "action": "activate", "timestamp": 2},
    ]
    path = tmp_path / "trail.jsonl"
    path.write_text("".join(json.dumps(line) + "\n" for line in lines))
    return path


# =============================================================================
# DEFINITION MODE
# =============================================================================

class TestDefinitionCommand:
    """Tests for `fsmguard definition`."""

    def test_valid(self, definition_file, capsys):
        assert main(["definition", str(definition_file)]) == 0
        assert "[PASS]" in capsys.readouterr().out

    def test_strict_and_builtin_schema(self, definition_file):
        assert main(["definition", str(definition_file), "--strict", "--builtin-schema"]) == 0

    def test_invalid_definition(self, tmp_path, lifecycle_document, capsys):
        lifecycle_document["transitions"].append({"from": "Archived", "to": "Draft", "action": "revert"})
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(lifecycle_document))
        assert main(["definition", str(path)]) == 1
        out = capsys.readouterr().out
        assert "[FAIL]" in out
        assert "TerminalStateHasOutbound" in out

    def test_strict_rejects_missing_initial_state(self, tmp_path, lifecycle_document):
        path = tmp_path / "loose.json"
        path.write_text(json.dumps(lifecycle_document))
        assert main(["definition", str(path)]) == 0
        assert main(["definition", str(path), "--strict"]) == 1

    def test_json_output(self, definition_file, capsys):
        assert main(["definition", str(definition_file), "--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["valid"] is True
        assert payload["target"] == "lifecycle.json"

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{ not json")
        assert main(["definition", str(path)]) == 1
        assert "InvalidJson" in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        assert main(["definition", str(tmp_path / "absent.json")]) == 1

    def test_invalid_schema_file(self, tmp_path, definition_file, capsys):
        schema = tmp_path / "schema.json"
        schema.write_text(json.dumps({"type": 12}))
        assert main(["definition", str(definition_file), "--schema", str(schema), "--json"]) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["errors"][0]["code"] == "InvalidSchema"
        assert payload["errors"][0]["location"] == str(schema)

    def test_non_utf8_definition(self, tmp_path, capsys):
        path = tmp_path / "latin.json"
        path.write_bytes(b'{"states": ["\xff"]}')
        assert main(["definition", str(path), "--json"]) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["errors"][0]["code"] == "InvalidJson"
        assert payload["errors"][0]["location"] == str(path)

    def test_custom_schema(self, tmp_path, definition_file, capsys):
        schema = tmp_path / "schema.json"
        schema.write_text(json.dumps({"type": "object", "required": ["owner"]}))
        assert main(["definition", str(definition_file), "--schema", str(schema)]) == 1
        assert "SchemaViolation" in capsys.readouterr().out

    def test_schema_options_are_exclusive(self, definition_file):
        with pytest.raises(SystemExit) as exc_info:
            main(["definition", str(definition_file), "--schema", "s.json", "--builtin-schema"])
        assert exc_info.value.code == 2

    def test_mode_required(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2


# =============================================================================
# AUDIT MODE
# =============================================================================

class TestAuditCommand:
    """Tests for `fsmguard audit`."""

    def test_valid_trail(self, definition_file, trail_file, capsys):
        assert main(["audit", str(definition_file), str(trail_file), "-v"]) == 0
        out = capsys.readouterr().out
        assert "[PASS]" in out
        assert "Verified 2 entries" in out

    def test_broken_trail(self, tmp_path, definition_file, capsys):
        path = tmp_path / "swapped.jsonl"
        path.write_text(json.dumps({
            "entityId": 1, "actor": "b", "from_state": "Approved", "to_state": "Active",
            "action": "activate", "timestamp": 2,
        }) + "\n")
        assert main(["audit", str(definition_file), str(path), "--json"]) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["errors"][0]["code"] == "InvalidStateTransition"
        assert payload["errors"][0]["position"] == 0

    def test_malformed_trail(self, tmp_path, definition_file, capsys):
        path = tmp_path / "bad.jsonl"
        path.write_text("{}\n")
        assert main(["audit", str(definition_file), str(path)]) == 1
        assert "InvalidShape" in capsys.readouterr().out

    def test_missing_trail(self, tmp_path, definition_file):
        assert main(["audit", str(definition_file), str(tmp_path / "none.jsonl")]) == 1

    def test_non_utf8_trail(self, tmp_path, definition_file, capsys):
        path = tmp_path / "binary.jsonl"
        path.write_bytes(b"\xff\xfe\n")
        assert main(["audit", str(definition_file), str(path), "--json"]) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["target"] == "binary.jsonl"
        assert payload["errors"][0]["code"] == "InvalidJson"
        assert payload["errors"][0]["location"] == str(path)

    def test_invalid_definition_blocks_verification(self, tmp_path, trail_file, capsys):
        path = tmp_path / "dup.json"
        path.write_text(json.dumps({
            "states": ["Draft", "Draft", "Approved", "Active"],
            "transitions": [
                {"from": "Draft", "to": "Approved", "action": "approve"},
                {"from": "Approved", "to": "Active", "action": "activate"},
            ],
        }))
        assert main(["audit", str(path), str(trail_file)]) == 1
        assert "DuplicateState" in capsys.readouterr().out
        assert main(["audit", str(path), str(trail_file), "--no-definition-check"]) == 0

    def test_json_logs_go_to_stderr(self, definition_file, trail_file, capsys):
        assert main(["--log-level", "DEBUG", "--json-logs", "audit",
                     str(definition_file), str(trail_file)]) == 0
        err_lines = [line for line in capsys.readouterr().err.splitlines() if line]
        assert err_lines
        assert all(json.loads(line)["logger"].startswith("fsmguard") for line in err_lines)
