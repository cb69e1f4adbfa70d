"""Tests for the conversion factory."""

import pytest

from cardtrace.graph.builder import BuildOptions
from cardtrace.graph.cards import CardKind
from cardtrace.graph.factory import (
    ConversionStrategy,
    NormalizedDocument,
    UnsupportedStrategyError,
    convert_document,
    convert_file,
    load_document,
    normalize_newlines,
)


class TestNormalizedDocument:
    def test_markdown_inferred_from_extension(self):
        doc = NormalizedDocument.from_text("# T", "Srs.MD")

        assert doc.is_markdown is True
        assert doc.extension == ".md"
        assert doc.base_name == "Srs"

    def test_text_file_is_plain(self):
        assert NormalizedDocument.from_text("x", "notes.txt").is_markdown is False

    def test_newlines_normalized(self):
        assert normalize_newlines("a\r\nb\rc\n") == "a\nb\nc\n"

    def test_load_document(self, tmp_path):
        path = tmp_path / "doc.markdown"
        path.write_bytes("# Título\r\n\r\nTexto".encode("utf-8"))

        doc = load_document(path)

        assert doc.file_name == "doc.markdown"
        assert doc.content == "# Título\n\nTexto"
        assert doc.is_markdown is True


class TestConvertDocument:
    def test_rule_strategy(self, fixed_now):
        doc = NormalizedDocument.from_text("# Title\n\nBody text", "a.md")

        result = convert_document(doc, "rule", BuildOptions(now=fixed_now))

        assert [c.kind for c in result.cards] == [CardKind.HEADING, CardKind.PARAGRAPH]
        assert result.warnings == []

    def test_crlf_input_segments_cleanly(self, fixed_now):
        doc = NormalizedDocument.from_text("# Title\r\n\r\nBody", "a.md")

        result = convert_document(doc, options=BuildOptions(now=fixed_now))

        assert [c.title for c in result.cards] == ["Title", "Body"]

    def test_markdown_preview_follows_document(self):
        doc = NormalizedDocument.from_text("text", "a.md")

        result = convert_document(doc)

        assert result.cards[0].markdown_preview_enabled is True

    def test_llm_strategy_rejected(self):
        doc = NormalizedDocument.from_text("text", "a.md")

        with pytest.raises(UnsupportedStrategyError):
            convert_document(doc, ConversionStrategy.LLM)

    def test_unknown_strategy_rejected(self):
        doc = NormalizedDocument.from_text("text", "a.md")

        with pytest.raises(ValueError):
            convert_document(doc, "magic")

    def test_progress_phases(self):
        events = []
        doc = NormalizedDocument.from_text("text", "a.txt")

        convert_document(doc, on_progress=lambda phase, pct: events.append((phase, pct)))

        assert events == [("prepare", 5), ("convert", 40), ("complete", 75)]


class TestConvertFile:
    def test_forced_plain_grammar(self, tmp_path, fixed_now):
        path = tmp_path / "doc.md"
        path.write_text("1 Scope\nbody", encoding="utf-8")

        result = convert_file(path, BuildOptions(now=fixed_now), is_markdown=False)

        assert result.cards[0].kind == CardKind.HEADING
        assert result.cards[0].title == "Scope"
