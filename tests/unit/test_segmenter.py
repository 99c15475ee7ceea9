"""
Unit tests for page classification (occurrence start detection).
"""

import re

import pytest

from pdf import DEFAULT_BOILERPLATE, SegmenterConfig, classify, classify_pages
from pdf.text_cleaner import clean_text, collapse_whitespace, normalize_upper, strip_diacritics
from tests.conftest import CONTINUATION_PAGE, NOISE_PAGE, ROBBERY_PAGE


class TestClassify:
    """Test the occurrence-start heuristic."""

    def test_header_page_starts_occurrence(self):
        """The documented header opens an occurrence."""
        assert classify("49294 - 20/12/2025 06:00:13 - 10BPM-19DEZ2025-03 ...")

    def test_header_after_boilerplate(self):
        """Letterhead lines before the header are ignored."""
        assert classify(ROBBERY_PAGE)
        assert classify(NOISE_PAGE)

    def test_continuation_page(self):
        """A page without a header continues the previous occurrence."""
        assert not classify(CONTINUATION_PAGE)

    @pytest.mark.parametrize("text", [
        "",
        "RESERVADO",
        "\n".join(DEFAULT_BOILERPLATE),
        "Sumário de Informações\nSubsecretaria de Inteligência\nRESERVADO",
    ])
    def test_boilerplate_alone_never_starts(self, text):
        """Boilerplate phrases alone are not an occurrence start."""
        assert not classify(text)

    def test_boilerplate_with_diacritics(self):
        """Boilerplate is matched after diacritics are stripped."""
        page = "SECRETARIA DE ESTADO DA POLÍCIA MILITAR\n12345 - 01/01/2024 - X"
        assert classify(page)

    def test_header_not_at_start(self):
        """A header in the middle of the page does not count."""
        page = "Relato anterior continua.\n49294 - 20/12/2025 06:00:13 - 10BPM"
        assert not classify(page)

    def test_unknown_boilerplate_is_a_false_negative(self):
        """A letterhead line missing from the config hides the header."""
        page = "BOLETIM INTERNO\n49294 - 20/12/2025 06:00:13 - 10BPM"
        assert not classify(page)

    def test_custom_config(self):
        """Boilerplate list is swappable per call."""
        config = SegmenterConfig(boilerplate=DEFAULT_BOILERPLATE + ("BOLETIM INTERNO",))
        page = "BOLETIM INTERNO\n49294 - 20/12/2025 06:00:13 - 10BPM"
        assert classify(page, config)

    def test_short_number_rejected(self):
        """The occurrence number needs at least four digits."""
        assert not classify("123 - 01/01/2024 - X")
        assert classify("1234 - 01/01/2024 - X")

    def test_dash_optional(self):
        """The dash between number and date may be absent."""
        assert classify("49294 20/12/2025 06:00")


class TestSegmenterConfig:
    """Test SegmenterConfig validation."""

    def test_empty_phrase_rejected(self):
        with pytest.raises(ValueError, match="non-empty"):
            SegmenterConfig(boilerplate=("RESERVADO", ""))

    def test_pattern_must_be_compiled(self):
        with pytest.raises(ValueError, match="compiled pattern"):
            SegmenterConfig(header_pattern=r"^\d+")  # type: ignore[arg-type]

    def test_custom_pattern(self):
        config = SegmenterConfig(header_pattern=re.compile(r"^OCORRENCIA \d+"))
        assert classify("Ocorrência 7 - roubo", config)


class TestClassifyPages:
    """Test classify_pages()."""

    def test_numbering_is_one_based(self, sample_pages):
        pages = classify_pages(sample_pages)
        assert [p.page_number for p in pages] == [1, 2, 3, 4]

    def test_flags(self, sample_pages):
        pages = classify_pages(sample_pages)
        assert [p.is_occurrence_start for p in pages] == [True, False, True, True]

    def test_text_preserved(self, sample_pages):
        pages = classify_pages(sample_pages)
        assert [p.text for p in pages] == sample_pages


class TestTextCleaner:
    """Test normalisation helpers."""

    def test_strip_diacritics_keeps_case(self):
        assert strip_diacritics("Mãe de João") == "Mae de Joao"

    def test_normalize_upper(self):
        assert normalize_upper("Polícia Militar") == "POLICIA MILITAR"

    def test_clean_text(self):
        assert clean_text("  jo´ão ") == "JOAO"
        assert clean_text(None) == ""

    def test_collapse_whitespace(self):
        assert collapse_whitespace(" a \n\n b\tc ") == "a b c"
