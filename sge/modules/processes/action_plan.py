# sge/modules/processes/action_plan.py
from typing import Dict, NamedTuple, Optional


class ActionTemplate(NamedTuple):
    title: str
    step: str
    tool: str


DEFAULT_TEMPLATES: Dict[str, ActionTemplate] = {
    "D01": ActionTemplate("Formalizar Planejamento", "Criar documento de visão anual", "Miro/Word"),
    "D02": ActionTemplate("Definir Orçamento", "Criar planilha de budget mensal", "Excel/Sheets"),
    "F01": ActionTemplate("Implementar Fluxo de Caixa", "Registrar todas entradas e saídas", "Sistema ERP"),
    "F05": ActionTemplate("Gestão de Inadimplência", "Definir régua de cobrança", "CRM/Email"),
    "P01": ActionTemplate("Organizar Onboarding", "Criar checklist de entrada de funcionário", "Notion"),
    "P04": ActionTemplate("Avaliação de Desempenho", "Rodar ciclo de feedback semestral", "Forms"),
    "O01": ActionTemplate("Mapear Fluxo de Valor", "Desenhar etapas da entrega principal", "Bizagi/Mermaid"),
    "O05": ActionTemplate("Controle de Qualidade", "Checklist de entrega final", "App/Papel"),
    "G01": ActionTemplate("Reunião de Sócios", "Agendar papo mensal de resultados", "Google Calendar"),
    "G03": ActionTemplate("Acordo de Sócios", "Redigir contrato social/acordo", "Advogado"),
}

SEGMENT_TEMPLATES: Dict[str, Dict[str, ActionTemplate]] = {
    "varejo": {
        "F01": ActionTemplate("Frente de Caixa", "Implantar sistema de PDV e fechamento diário", "Sistema PDV"),
        "O01": ActionTemplate("Gestão de Estoque", "Implementar inventário rotativo", "Planilha/ERP"),
        "P01": ActionTemplate("Treinamento de Vendas", "Criar manual de atendimento ao cliente", "Vídeo/PDF"),
        "D01": ActionTemplate("Planejamento de Compras", "Definir calendário de sazonalidade", "Excel"),
    },
    "serviços": {
        "F01": ActionTemplate("Fluxo de Caixa Projetado", "Controlar contas a receber x pagar", "ERP"),
        "O01": ActionTemplate("Gestão de Projetos", "Definir etapas padrão de entrega", "Trello/Jira"),
        "O05": ActionTemplate("NPS e Qualidade", "Rodar pesquisa de satisfação pós-entrega", "Forms"),
        "D01": ActionTemplate("Capacidade Produtiva", "Calcular horas disponíveis da equipe", "Excel"),
    },
    "industria": {
        "F01": ActionTemplate("Custeio Industrial", "Mapear custos fixos e variáveis por produto", "Excel Avançado"),
        "O01": ActionTemplate("PCP (Planejamento)", "Definir ordem de produção semanal", "ERP Industrial"),
        "O05": ActionTemplate("ISO 9001 / Qualidade", "Escrever procedimentos operacionais padrão (POP)", "Word"),
        "P01": ActionTemplate("Segurança do Trabalho", "Implementar checklist de EPIs diário", "App/Papel"),
    },
    "tecnologia": {
        "P01": ActionTemplate("Onboarding Técnico", "Setup de ambiente e acesso aos repositórios", "Wiki/Notion"),
        "O01": ActionTemplate("Metodologia Ágil", "Implementar Sprints e Dailies", "Jira/Linear"),
        "O05": ActionTemplate("Code Review", "Definir checklist de PR (Pull Request)", "GitHub/GitLab"),
    },
}

# Primeira correspondência vence; "ti" é substring muito comum e fica por último
SEGMENT_KEYWORDS = (
    ("varejo", ("varejo", "loja", "comercio")),
    ("serviços", ("serviço", "consultoria", "agencia")),
    ("industria", ("industria", "fabrica", "produção")),
    ("tecnologia", ("tech", "software", "ti")),
)

FALLBACK_TEMPLATE = ActionTemplate("Melhorar Processo", "Mapear e documentar o processo atual", "Documento de Texto")


class ActionPlanService:
    """Sugestões de ação por código de processo, ajustadas ao segmento da empresa."""

    @staticmethod
    def resolve_segment(segment: Optional[str]) -> str:
        normalized = (segment or "").lower().strip() or "geral"
        for key, keywords in SEGMENT_KEYWORDS:
            if any(k in normalized for k in keywords):
                return key
        return "geral"

    @classmethod
    def get_template(cls, code: str, segment: Optional[str] = None) -> ActionTemplate:
        segment_templates = SEGMENT_TEMPLATES.get(cls.resolve_segment(segment), {})
        if code in segment_templates:
            return segment_templates[code]
        return DEFAULT_TEMPLATES.get(code, FALLBACK_TEMPLATE)
