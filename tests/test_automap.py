"""Unit tests for header auto-mapping and row mapping."""
import json
import pytest

from src.matching.automap import (
    auto_map_headers,
    summarize,
    map_row_to_lead,
    save_mapping,
    load_mapping,
    validate_mapping
)
from src.matching.fields import (
    DEFAULT_LEAD_FIELDS,
    FieldMapping,
    get_field,
    required_fields,
    to_candidates
)


class TestFieldCatalog:
    """Test the default lead field catalog."""

    def test_names_unique(self):
        """Test canonical names are unique."""
        names = [f.name for f in DEFAULT_LEAD_FIELDS]
        assert len(names) == len(set(names))

    def test_required_fields(self):
        """Test nome is the only required field."""
        assert required_fields() == ["nome"]

    def test_get_field(self):
        """Test lookup by canonical name."""
        field = get_field("valor_ficha")
        assert field.data_type == "number"
        assert field.transform_function == "parseBRL"
        assert get_field("missing") is None

    def test_to_candidates(self):
        """Test candidates keep order, names and aliases."""
        candidates = to_candidates(DEFAULT_LEAD_FIELDS)
        assert [c.name for c in candidates] == [f.name for f in DEFAULT_LEAD_FIELDS]
        assert "Tel" in candidates[1].aliases


class TestAutoMapHeaders:
    """Test header row auto-mapping."""

    def test_legacy_headers(self):
        """Test a typical legacy sheet header row."""
        headers = ["Nome", "Telefone", "E-mail", "Valor por Fichas", "Data de Criação", "xyz123"]
        result = auto_map_headers(headers)

        assert result.mapping == {
            "nome": {"primary": "Nome"},
            "telefone": {"primary": "Telefone"},
            "email": {"primary": "E-mail"},
            "valor_ficha": {"primary": "Valor por Fichas"},
            "criado": {"primary": "Data de Criação"},
        }
        assert result.unmapped_headers == ["xyz123"]
        assert result.counts == {"exact": 5, "high": 0, "contextual": 0}
        assert result.mapped_count == 5

    def test_matches_follow_header_order(self):
        """Test every header gets a decision, in order."""
        headers = ["Nome", "xyz123"]
        result = auto_map_headers(headers)
        assert [h for h, _ in result.matches] == headers
        assert result.matches[0][1].field == "nome"
        assert result.matches[1][1] is None

    def test_priority_slots(self):
        """Test extra headers for one field fill secondary and tertiary slots."""
        headers = ["Telefone", "Tel", "Whatsapp", "PHONE"]
        result = auto_map_headers(headers)

        assert result.mapping == {
            "telefone": {"primary": "Telefone", "secondary": "Tel", "tertiary": "Whatsapp"}
        }
        assert result.overflow_headers == ["PHONE"]
        assert result.counts["exact"] == 3

    def test_custom_fields_and_types(self):
        """Test match types are counted with a custom catalog."""
        fields = [
            FieldMapping(name="valor_ficha"),
            FieldMapping(name="criado", aliases=("Data Criação", "Data")),
        ]
        result = auto_map_headers(["Valor por Fichas", "Data de Criação"], fields)

        assert result.mapping == {
            "valor_ficha": {"primary": "Valor por Fichas"},
            "criado": {"primary": "Data de Criação"},
        }
        assert result.counts == {"exact": 0, "high": 1, "contextual": 1}

    def test_threshold(self):
        """Test a strict threshold keeps only exact matches."""
        fields = [
            FieldMapping(name="valor_ficha"),
            FieldMapping(name="nome"),
        ]
        result = auto_map_headers(["Valor por Fichas", "NOME"], fields, threshold=0.99)
        assert result.mapping == {"nome": {"primary": "NOME"}}
        assert result.unmapped_headers == ["Valor por Fichas"]

    def test_empty_headers(self):
        """Test an empty header row."""
        result = auto_map_headers([])
        assert result.mapping == {}
        assert summarize(result) == "0 fields mapped"


class TestSummarize:
    """Test mapping summaries."""

    def test_summary_details(self):
        """Test counts per match type are listed."""
        fields = [
            FieldMapping(name="valor_ficha"),
            FieldMapping(name="criado", aliases=("Data Criação", "Data")),
            FieldMapping(name="nome"),
        ]
        result = auto_map_headers(["Valor por Fichas", "Data de Criação", "Nome"], fields)
        assert summarize(result) == "3 fields mapped (1 exact, 1 high, 1 contextual)"

    def test_singular(self):
        """Test singular wording."""
        result = auto_map_headers(["Nome"])
        assert summarize(result) == "1 field mapped (1 exact)"


class TestMapRowToLead:
    """Test building lead records from rows."""

    def test_primary_value(self):
        """Test primary columns are used."""
        mapping = {"nome": {"primary": "Nome"}, "email": {"primary": "E-mail"}}
        row = {"Nome": "Ana", "E-mail": "ana@example.com", "Other": "x"}
        assert map_row_to_lead(row, mapping) == {"nome": "Ana", "email": "ana@example.com"}

    def test_fallback_to_secondary(self):
        """Test blank primary values fall back to the next slot."""
        mapping = {"telefone": {"primary": "Tel", "secondary": "Celular", "tertiary": "Whatsapp"}}
        assert map_row_to_lead({"Tel": "", "Celular": "11999990000"}, mapping) == {"telefone": "11999990000"}
        assert map_row_to_lead({"Tel": " ", "Celular": None, "Whatsapp": "1188"}, mapping) == {"telefone": "1188"}

    def test_blank_values_omitted(self):
        """Test fields without values are left out."""
        mapping = {"nome": {"primary": "Nome"}, "idade": {"primary": "Idade"}}
        row = {"Nome": float("nan"), "Idade": ""}
        assert map_row_to_lead(row, mapping) == {}

    def test_missing_column(self):
        """Test columns absent from the row are skipped."""
        mapping = {"nome": {"primary": "Nome"}}
        assert map_row_to_lead({"Outro": "x"}, mapping) == {}


class TestMappingPersistence:
    """Test mapping JSON files."""

    def test_save_and_load(self, tmp_path):
        """Test a saved mapping loads back."""
        mapping = {"nome": {"primary": "Nome"}, "criado": {"primary": "Data de Criação"}}
        path = save_mapping(mapping, tmp_path / "nested" / "mapping.json")
        assert path.exists()
        assert load_mapping(path) == mapping

    def test_missing_file(self, tmp_path):
        """Test loading a missing file."""
        with pytest.raises(FileNotFoundError):
            load_mapping(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        """Test loading broken JSON."""
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            load_mapping(path)

    def test_invalid_shapes(self, tmp_path):
        """Test malformed mappings are rejected."""
        with pytest.raises(ValueError):
            validate_mapping(["nome"])
        with pytest.raises(ValueError):
            validate_mapping({"nome": "Nome"})
        with pytest.raises(ValueError):
            validate_mapping({"nome": {"quaternary": "Nome"}})
        with pytest.raises(ValueError):
            validate_mapping({"nome": {"primary": 3}})

        path = tmp_path / "list.json"
        path.write_text(json.dumps([1, 2]), encoding="utf-8")
        with pytest.raises(ValueError):
            load_mapping(path)
