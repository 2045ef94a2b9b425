"""Tests for context extraction and its fallbacks."""

import pytest

from text_titler.errors import EmptyDocumentError
from text_titler.extraction import (
    FALLBACK_CHARS,
    NO_SENTENCES,
    SUMMARIZER_ERROR,
    extract_context,
    strip_image_embeds,
)


class TestStripImageEmbeds:
    def test_removes_wiki_embed_lines(self):
        text = "Intro line\n![[photo.png]]\n  ![[diagram.svg]]  \nOutro line"
        assert strip_image_embeds(text) == "Intro line\nOutro line"

    def test_removes_markdown_image_lines(self):
        assert strip_image_embeds("![a cat](cat.jpg)\nText") == "Text"

    def test_keeps_inline_images(self):
        text = "See ![[photo.png]] for details"
        assert strip_image_embeds(text) == text


class TestExtractContext:
    def test_joins_selected_sentences(self, mammals_text):
        result = extract_context(mammals_text, 2)
        assert result.context == "Cats are mammals. Dogs are mammals too."
        assert result.sentences == ["Cats are mammals.", "Dogs are mammals too."]
        assert not result.used_fallback

    def test_image_lines_ignored(self):
        text = "![[cover.png]]\nCats are mammals. Dogs are mammals too."
        result = extract_context(text, 5)
        assert result.context == "Cats are mammals. Dogs are mammals too."

    @pytest.mark.parametrize("text", ["", "   ", "\n\t\n"])
    def test_blank_document(self, text):
        with pytest.raises(EmptyDocumentError):
            extract_context(text, 5)

    def test_image_only_document(self):
        with pytest.raises(EmptyDocumentError):
            extract_context("![[image.png]]", 5)

    def test_no_qualifying_sentences_falls_back(self):
        text = "Hi. Ok. Yes no."
        result = extract_context(text, 5)
        assert result.context == text
        assert result.fallback_reason == NO_SENTENCES
        assert result.used_fallback

    def test_fallback_is_truncated(self):
        text = "![[top.png]]\n" + "Hi.\n\n" * 300
        result = extract_context(text, 5)
        assert len(result.context) == FALLBACK_CHARS
        assert result.context.startswith("Hi.")

    def test_summarizer_error_falls_back(self, monkeypatch, mammals_text):
        def boom(*args, **kwargs):
            raise RuntimeError("ranking failed")

        monkeypatch.setattr("text_titler.extraction.summarize", boom)
        result = extract_context(mammals_text, 2)
        assert result.fallback_reason == SUMMARIZER_ERROR
        assert result.context == mammals_text

    def test_invalid_sentence_count(self, mammals_text):
        with pytest.raises(ValueError):
            extract_context(mammals_text, 0)
