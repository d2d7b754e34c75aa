"""Lead field catalog: canonical `leads` columns and their legacy CSV headers."""
from typing import List, Literal, Optional, Sequence, Tuple
from pydantic import BaseModel, ConfigDict

from src.matching.resolver import CandidateField

DataType = Literal["text", "number", "date", "boolean"]


class FieldMapping(BaseModel):
    """A canonical lead field with the header aliases seen in legacy sheets."""

    model_config = ConfigDict(frozen=True)

    name: str
    aliases: Tuple[str, ...] = ()
    data_type: DataType = "text"
    transform_function: Optional[str] = None
    is_required: bool = False
    description: str = ""

    def to_candidate(self) -> CandidateField:
        return CandidateField(name=self.name, aliases=self.aliases)


def _field(name: str, aliases: Sequence[str], data_type: DataType = "text",
           description: str = "", **kwargs) -> FieldMapping:
    return FieldMapping(
        name=name,
        aliases=tuple(aliases),
        data_type=data_type,
        description=description,
        **kwargs
    )


DEFAULT_LEAD_FIELDS: List[FieldMapping] = [
    # Core
    _field("nome", ["Nome", "Nome Completo", "Nome do Candidato", "TITLE", "NAME"],
           description="Nome do candidato", is_required=True),
    _field("telefone", ["Telefone", "Tel", "Celular", "Whatsapp", "PHONE"],
           description="Telefone de contato"),
    _field("email", ["Email", "E-mail", "EMAIL"], description="E-mail do candidato"),

    # Management
    _field("projeto", ["Projetos Comerciais", "Projetos Cormeciais", "Projetos", "Projeto"],
           description="Nome do projeto comercial associado"),
    _field("scouter", ["Gestão do Scouter", "Gestão de Scouter", "Scouter", "Nome Scouter",
                       "ASSIGNED_BY_ID"],
           description="Nome do scouter responsável"),
    _field("supervisor", ["Supervisor", "Gestor"], description="Supervisor responsável"),

    # Money
    _field("valor_ficha", ["Valor por Fichas", "Valor Ficha", "Valor_ficha", "R$/Ficha",
                           "Valor da Ficha", "Valor por Ficha", "valor"],
           data_type="number", transform_function="parseBRL",
           description="Valor monetário da ficha"),

    # Dates
    _field("criado", ["Data_criacao_Ficha", "Data", "Criado", "Data de Criação", "Data Criação",
                      "DATE_CREATE"],
           data_type="date", description="Data de criação da ficha"),
    _field("data_criacao_ficha", ["Data Criação Ficha", "Data_criacao_Ficha"],
           data_type="date", description="Data de criação específica da ficha"),
    _field("data_confirmacao_ficha", ["Data Confirmação", "Data Confirmação Ficha"],
           data_type="date", description="Data de confirmação da ficha"),
    _field("data_criacao_agendamento", ["Data Agendamento", "Data de Agendamento"],
           data_type="date", description="Data de criação do agendamento"),
    _field("data_retorno_ligacao", ["Data Retorno", "Data Retorno Ligação"],
           data_type="date", description="Data de retorno da ligação"),
    _field("modificado", ["Modificado", "Data Modificação", "DATE_MODIFY"],
           data_type="date", description="Data de modificação"),

    # Location
    _field("latitude", ["lat", "Latitude", "LAT"], data_type="number",
           description="Coordenada de latitude"),
    _field("longitude", ["lng", "lon", "Longitude", "LNG", "LON"], data_type="number",
           description="Coordenada de longitude"),
    _field("local_abordagem", ["Local Abordagem", "Local de Abordagem", "Localização"],
           description="Local onde ocorreu a abordagem"),
    _field("local_da_abordagem", ["Local da Abordagem"], description="Local da abordagem"),
    _field("localizacao", ["Localização"], description="Localização geral"),

    # Stages and status
    _field("etapa", ["Etapa", "STAGE_ID"], description="Etapa atual do lead"),
    _field("etapa_funil", ["Etapa Funil", "Etapa do Funil"], description="Etapa no funil de vendas"),
    _field("etapa_fluxo", ["Etapa Fluxo", "Etapa do Fluxo"],
           description="Etapa no fluxo de trabalho"),
    _field("status_tabulacao", ["Status Tabulação", "Status da Tabulação"],
           description="Status da tabulação"),
    _field("status_fluxo", ["Status Fluxo", "Status do Fluxo"], description="Status no fluxo"),
    _field("funil_fichas", ["Funil Fichas", "Funil de Fichas"], description="Funil de fichas"),
    _field("gerenciamento_funil", ["Gerenciamento Funil", "Gerenciamento do Funil"],
           description="Gerenciamento do funil"),

    # Confirmations
    _field("ficha_confirmada", ["Ficha Confirmada", "Confirmada"],
           description="Status de confirmação da ficha"),
    _field("aprovado", ["Aprovado"], data_type="boolean", description="Se o lead foi aprovado"),
    _field("compareceu", ["Compareceu"], data_type="boolean", description="Se o lead compareceu"),
    _field("presenca_confirmada", ["Presença Confirmada", "Presenca Confirmada"],
           data_type="boolean", description="Se a presença foi confirmada"),
    _field("cadastro_existe_foto", ["Existe Foto", "Cadastro Existe Foto"],
           data_type="boolean", description="Se existe foto no cadastro"),

    # Extra contacts
    _field("celular", ["Celular", "Telefone Celular"], description="Número de celular"),
    _field("telefone_trabalho", ["Telefone Trabalho", "Tel Trabalho"],
           description="Telefone do trabalho"),
    _field("telefone_casa", ["Telefone Casa", "Tel Casa"], description="Telefone residencial"),

    # Complementary
    _field("age", ["Idade", "Age"], data_type="number", description="Idade do candidato"),
    _field("foto", ["Foto", "Foto URL"], description="URL da foto"),
    _field("fonte", ["Fonte", "SOURCE_ID"], description="Fonte do lead"),
    _field("origem_sincronizacao", ["Origem", "Origem Sincronização"],
           description="Origem da sincronização"),
    _field("responsible", ["Responsável", "Responsible", "ASSIGNED_BY_ID"],
           description="Responsável pelo lead"),
    _field("horario_agendamento", ["Horário Agendamento", "Horario"],
           description="Horário do agendamento"),
    _field("op_telemarketing", ["OP Telemarketing", "Operador Telemarketing"],
           description="Operador de telemarketing"),
    _field("nome_modelo", ["Nome Modelo", "Modelo"], description="Nome do modelo"),

    # External IDs
    _field("id", ["ID", "ID Bitrix", "Bitrix ID", "Lead ID", "eu_id"], data_type="number",
           description="ID único do lead (Bitrix)"),
    _field("maxsystem_id_ficha", ["MaxSystem ID", "ID MaxSystem"], description="ID no MaxSystem"),
    _field("commercial_project_id", ["Commercial Project ID", "ID Projeto"],
           description="ID do projeto comercial"),
]


def to_candidates(fields: Sequence[FieldMapping]) -> List[CandidateField]:
    """Candidate list for the resolver, in catalog order."""
    return [f.to_candidate() for f in fields]


def get_field(name: str, fields: Sequence[FieldMapping] = DEFAULT_LEAD_FIELDS) -> Optional[FieldMapping]:
    """
    Look up a field by canonical name.

    Args:
        name: Canonical field name
        fields: Field catalog

    Returns:
        FieldMapping or None
    """
    for f in fields:
        if f.name == name:
            return f
    return None


def required_fields(fields: Sequence[FieldMapping] = DEFAULT_LEAD_FIELDS) -> List[str]:
    """Names of fields every imported lead must carry."""
    return [f.name for f in fields if f.is_required]
