"""Unit tests for edit distance, similarity and contextual matching."""
import pytest

from src.utils.fuzzy import (
    levenshtein_distance,
    calculate_similarity,
    has_contextual_match,
    tokenize
)
from src.utils.text import normalize, fold


class TestNormalize:
    """Test the text normalizer."""

    def test_strips_diacritics(self):
        """Test accents and cedillas are removed."""
        assert normalize("Data de Criação") == "Data de Criacao"
        assert normalize("Responsável") == "Responsavel"
        assert normalize("Presença Confirmada") == "Presenca Confirmada"

    def test_folds_whitespace(self):
        """Test whitespace runs collapse and ends are trimmed."""
        assert normalize("  Data   de\tCriação \n") == "Data de Criacao"

    def test_preserves_case(self):
        """Test case is left to the caller."""
        assert normalize("TELEFONE") == "TELEFONE"
        assert fold("TELEFONE") == "telefone"

    def test_idempotent(self):
        """Test normalizing twice changes nothing."""
        for text in ["Gestão do Scouter", "  R$/Ficha ", "", "Horário Agendamento"]:
            assert normalize(normalize(text)) == normalize(text)

    def test_empty_and_none(self):
        """Test empty input."""
        assert normalize("") == ""
        assert normalize(None) == ""
        assert normalize("   ") == ""

    def test_fold_cap(self):
        """Test folded text is capped when asked."""
        assert fold("Abcdef", max_length=3) == "abc"


class TestLevenshteinDistance:
    """Test edit distance."""

    def test_classic_example(self):
        """Test kitten -> sitting."""
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_empty_strings(self):
        """Test distance to the empty string is the other length."""
        assert levenshtein_distance("", "") == 0
        assert levenshtein_distance("", "telefone") == 8
        assert levenshtein_distance("scouter", "") == 7

    def test_identity(self):
        """Test a string has zero distance to itself."""
        for s in ["", "a", "nome", "data de criacao"]:
            assert levenshtein_distance(s, s) == 0

    def test_symmetry(self):
        """Test distance is symmetric."""
        pairs = [("flaw", "lawn"), ("nome", "nomes"), ("tel", "telefone"), ("", "abc")]
        for a, b in pairs:
            assert levenshtein_distance(a, b) == levenshtein_distance(b, a)

    def test_no_normalization(self):
        """Test case and accents count as differences."""
        assert levenshtein_distance("A", "a") == 1
        assert levenshtein_distance("ção", "cao") == 2


class TestCalculateSimilarity:
    """Test similarity scoring."""

    def test_case_insensitive_identity(self):
        """Test same word in different case scores 1."""
        assert calculate_similarity("telefone", "Telefone") == 1.0

    def test_diacritic_insensitive_identity(self):
        """Test accented and plain forms score 1."""
        assert calculate_similarity("Localização", "localizacao") == 1.0

    def test_empty(self):
        """Test empty inputs."""
        assert calculate_similarity("", "") == 1.0
        assert calculate_similarity("", "x") == 0.0
        assert calculate_similarity("x", "") == 0.0
        assert calculate_similarity("   ", "nome") == 0.0

    def test_formula(self):
        """Test 1 - distance / longer length."""
        assert calculate_similarity("nome", "nomes") == pytest.approx(0.8)
        assert calculate_similarity("Data de Criação", "Data Criação") == pytest.approx(0.8)
        assert calculate_similarity("abc", "xyz") == 0.0

    def test_longer_strings_degrade_less(self):
        """Test one edit costs less on longer strings."""
        short = calculate_similarity("abc", "abd")
        long = calculate_similarity("a" * 29 + "b", "a" * 30)
        assert short == pytest.approx(2 / 3)
        assert long == pytest.approx(1 - 1 / 30)
        assert short < long

    def test_bounds(self):
        """Test scores stay within [0, 1]."""
        pairs = [("a", "bbbbbbbb"), ("Telefone", "Tel"), ("xyz123", "scouter"), ("Nome", "Nome Completo")]
        for a, b in pairs:
            assert 0.0 <= calculate_similarity(a, b) <= 1.0

    def test_only_equal_strings_score_one(self):
        """Test non-identical folded strings never score 1."""
        assert calculate_similarity("nome", "nome_") < 1.0


class TestContextualMatch:
    """Test word overlap matching."""

    def test_shared_words(self):
        """Test shared words after dropping short connectors."""
        assert has_contextual_match("valor_da_ficha", "Valor Ficha") is True

    def test_abbreviation(self):
        """Test abbreviation contained in the full word."""
        assert has_contextual_match("tel", "telefone") is True
        assert has_contextual_match("Telefone", "Tel Casa") is True

    def test_compound_field(self):
        """Test compound field names split on underscores and hyphens."""
        assert has_contextual_match("data_criacao", "Criação") is True
        assert has_contextual_match("Data-Criação", "criacao") is True

    def test_short_tokens_ignored(self):
        """Test two-letter tokens never match."""
        assert has_contextual_match("de", "de") is False
        assert has_contextual_match("id", "ID Projeto") is False
        assert has_contextual_match("Nome", "UF") is False

    def test_no_overlap(self):
        """Test unrelated names."""
        assert has_contextual_match("xyz123", "scouter") is False
        assert has_contextual_match("Supervisor", "Etapa Funil") is False

    def test_empty(self):
        """Test empty inputs."""
        assert has_contextual_match("", "telefone") is False
        assert has_contextual_match("telefone", "") is False

    def test_tokenize(self):
        """Test tokenization drops separators and short words."""
        assert tokenize("Valor_da-Ficha  Paga") == ["valor", "ficha", "paga"]
        assert tokenize("_nome_") == ["nome"]
