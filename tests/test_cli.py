"""
Tests for the Storygrid CLI

Tests for storygrid/__main__.py
"""

import json

import pytest

from storygrid.__main__ import main


class TestPromptCommand:
    """Tests for the 'prompt' subcommand."""

    def test_prints_english_prompt_and_transitions(self, temp_dir, storyboard_wire_2x2, capsys):
        path = temp_dir / "result.json"
        path.write_text(json.dumps(storyboard_wire_2x2, ensure_ascii=False), encoding="utf-8")

        code = main(["prompt", str(path), "--language", "en", "--aspect-ratio", "1:1", "--transitions"])
        out = capsys.readouterr().out

        assert code == 0
        assert "1:1 aspect ratio" in out
        assert "Shot 04: Shot 4 description" in out
        assert "Shot 03 -> Shot 04: Dolly from 3 to 4" in out

    def test_defaults_to_chinese(self, temp_dir, storyboard_wire_2x2, capsys):
        path = temp_dir / "result.json"
        path.write_text(json.dumps(storyboard_wire_2x2, ensure_ascii=False), encoding="utf-8")

        assert main(["--config", str(temp_dir / "missing.json"), "prompt", str(path)]) == 0
        assert "镜头 01: 镜头1描述" in capsys.readouterr().out

    def test_invalid_config_exits_with_error(self, temp_dir, storyboard_wire_2x2, capsys):
        config_path = temp_dir / "bad.json"
        config_path.write_text(json.dumps({"defaults": {"language": "fr"}}), encoding="utf-8")
        path = temp_dir / "result.json"
        path.write_text(json.dumps(storyboard_wire_2x2), encoding="utf-8")

        assert main(["--config", str(config_path), "prompt", str(path)]) == 1
        assert "fr" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "content",
        ["not json", json.dumps({"scenePrompt": {"en": "only english"}})],
    )
    def test_malformed_result_file_exits_with_error(self, temp_dir, content, capsys):
        path = temp_dir / "result.json"
        path.write_text(content, encoding="utf-8")

        assert main(["prompt", str(path)]) == 1
        assert capsys.readouterr().out == ""
