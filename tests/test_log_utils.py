from __future__ import annotations

import json
from pathlib import Path

from ui.log_utils import clear_logs, write_cli_log, write_incoming_log


def test_incoming_log_masks_credentials(tmp_path: Path) -> None:
    path = write_incoming_log(
        "POST",
        "/v1/chat/completions",
        {"authorization": "Bearer sk-1234567890abcdef", "x-api-key": "short", "accept": "*/*"},
        '{"model": "llama3"}',
        log_root=tmp_path,
    )

    entry = json.loads(path.read_text())
    assert path.parent == tmp_path / "incoming"
    assert entry["method"] == "POST"
    assert entry["headers"]["authorization"] == "Bearer...cdef"
    assert entry["headers"]["x-api-key"] == "***"
    assert entry["headers"]["accept"] == "*/*"
    assert entry["body"] == {"model": "llama3"}


def test_incoming_log_keeps_non_json_body_as_text(tmp_path: Path) -> None:
    path = write_incoming_log("POST", "/x", {}, "not json", log_root=tmp_path)
    assert json.loads(path.read_text())["body"] == "not json"


def test_cli_log_appends_lines_and_clear_removes_them(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "proxy.log"
    write_cli_log("OPENAI", "http://x/v1", log_file=log_file, model="gpt-4o")
    write_cli_log("ERROR", "boom", log_file=log_file, route="ollama", status=502)

    lines = log_file.read_text().splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("OPENAI: http://x/v1 model=gpt-4o")
    assert lines[1].endswith("ERROR: boom route=ollama status=502")

    clear_logs(tmp_path / "logs")
    assert not log_file.exists()
