"""
Unit tests for placeholder resolution.
"""

from datetime import datetime

from archiver.placeholders import PlaceholderResolver

NOW = datetime(2026, 10, 19, 14, 5)


class TestResolve:
    def test_date_with_format(self):
        resolver = PlaceholderResolver(now=NOW)
        assert resolver.resolve("Done {{date}}", date_format="%d.%m.%Y") == "Done 19.10.2026"

    def test_date_default_format(self):
        resolver = PlaceholderResolver(now=NOW, default_date_format="%Y/%m")
        assert resolver.resolve("{{date}}") == "2026/10"

    def test_source_file_placeholders(self):
        resolver = PlaceholderResolver(now=NOW)
        result = resolver.resolve(
            "[[{{sourceFileName}}]] in {{sourceFilePath}}", source_path="notes/todo.md"
        )
        assert result == "[[todo]] in notes/todo.md"

    def test_source_placeholders_kept_without_source(self):
        resolver = PlaceholderResolver(now=NOW)
        assert resolver.resolve("{{sourceFileName}}") == "{{sourceFileName}}"

    def test_unknown_placeholder_untouched(self):
        resolver = PlaceholderResolver(now=NOW)
        assert resolver.resolve("{{title}} {{date}}") == "{{title}} 2026-10-19"

    def test_heading_placeholder(self):
        resolver = PlaceholderResolver(now=NOW)
        assert resolver.resolve("(from {{heading}})", heading="Inbox") == "(from Inbox)"
        assert resolver.resolve("(from {{heading}})") == "(from {{heading}})"

    def test_same_date_for_every_call(self):
        resolver = PlaceholderResolver()
        first = resolver.resolve("{{date}}", date_format="%H:%M:%S.%f")
        second = resolver.resolve("{{date}}", date_format="%H:%M:%S.%f")
        assert first == second
