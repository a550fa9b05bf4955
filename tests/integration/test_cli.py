"""
Integration tests for CLI.
"""

import pytest

from archiver.cli import build_config, main, parse_args


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("ARCHIVER_SEPARATE_FILE", raising=False)
    monkeypatch.delenv("ARCHIVER_SORT_ORDER", raising=False)


class TestParseArgs:
    def test_defaults(self):
        args = parse_args(["todo.md"])
        assert args.file == "todo.md"
        assert args.vault is None
        assert args.config is None
        assert args.separate_file is None
        assert args.task_sort_order is None
        assert args.verbose is False

    def test_separate_file(self):
        assert parse_args(["todo.md", "--separate-file"]).separate_file is True

    def test_same_file(self):
        assert parse_args(["todo.md", "--same-file"]).separate_file is False

    def test_destination_flags_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["todo.md", "--same-file", "--separate-file"])

    def test_order_flags(self):
        assert parse_args(["todo.md", "--newest-first"]).task_sort_order == "newest-first"
        assert parse_args(["todo.md", "--newest-last"]).task_sort_order == "newest-last"

    def test_file_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestBuildConfig:
    def test_flags_override_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[archive]\nheading = "Done"\nto_separate_file = true\n', encoding="utf-8"
        )
        config = build_config(parse_args(["todo.md", "--config", str(path), "--same-file", "--newest-first"]))
        assert config.archive.heading == "Done"
        assert config.archive.to_separate_file is False
        assert config.archive.task_sort_order == "newest-first"

    def test_unset_flags_keep_file_values(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[archive]\nto_separate_file = true\n", encoding="utf-8")
        config = build_config(parse_args(["todo.md", "--config", str(path)]))
        assert config.archive.to_separate_file is True


class TestMain:
    def test_archives_and_reports(self, tmp_path, capsys):
        todo = tmp_path / "todo.md"
        todo.write_text("- [x] done\n- [ ] open", encoding="utf-8")
        assert main([str(todo)]) == 0
        assert capsys.readouterr().out.strip() == "Archived 1 tasks"
        assert todo.read_text(encoding="utf-8") == "- [ ] open\n\n# Archived\n- [x] done"

    def test_nothing_to_archive(self, tmp_path, capsys):
        todo = tmp_path / "todo.md"
        todo.write_text("- [ ] open", encoding="utf-8")
        assert main([str(todo)]) == 0
        assert capsys.readouterr().out.strip() == "No tasks to archive"

    def test_vault_relative_path(self, tmp_path, capsys):
        (tmp_path / "notes").mkdir()
        todo = tmp_path / "notes" / "todo.md"
        todo.write_text("- [x] done", encoding="utf-8")
        assert main(["notes/todo.md", "--vault", str(tmp_path), "--separate-file"]) == 0
        assert capsys.readouterr().out.strip() == "Archived 1 tasks"
        # archive file name is relative to the vault root
        assert (tmp_path / "todo (archive).md").read_text(encoding="utf-8") == "\n# Archived\n- [x] done"

    def test_unsupported_document(self, tmp_path, capsys):
        todo = tmp_path / "todo.txt"
        todo.write_text("- [x] done", encoding="utf-8")
        assert main([str(todo)]) == 1
        assert "markdown" in capsys.readouterr().err
        assert todo.read_text(encoding="utf-8") == "- [x] done"

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.md")]) == 1
        assert "Error:" in capsys.readouterr().err
