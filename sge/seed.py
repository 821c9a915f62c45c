# sge/seed.py
"""
Popula uma empresa de demonstração: catálogo de maturidade de processos,
fluxos de vendas/projetos/serviços, clientes, itens, KPIs, lançamentos,
colaboradores e alertas.

Uso: python -m sge.seed
"""
import asyncio
from datetime import datetime
from typing import Dict, List, Optional

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase

from sge.core.database import mongo_manager
from sge.core.logging_config import setup_logging
from sge.core.security import get_password_hash
from sge.core.utils import month_window, utcnow
from sge.modules.alerts.repository import AlertRepository
from sge.modules.clients.repository import ClientRepository
from sge.modules.company.models import CompanyInDB
from sge.modules.company.repository import CompanyRepository
from sge.modules.financial.repository import FinancialEntryRepository
from sge.modules.flows.repository import FlowRepository, FlowStageRepository
from sge.modules.items.repository import ItemRepository
from sge.modules.kpis.repository import KpiRepository
from sge.modules.people.repository import PersonRepository
from sge.modules.processes.repository import ProcessBlockRepository, ProcessItemRepository
from sge.modules.users.repository import UserRepository

ADMIN_EMAIL = "admin@yf.com.br"
ADMIN_PASSWORD = "admin123"

COMPANY = {
    "name": "Empresa Demo - YF Consultoria",
    "cnpj": "12.345.678/0001-00",
    "segment": "consulting",
    "size": "medium",
    "revenue": 145000,
    "headcount": 42,
}

CLIENTS = [
    ("TechSolutions LTDA", "contato@techsolutions.com.br", "(11) 99999-0001", "Tecnologia", "active", 250000),
    ("Varejo Express", "compras@varejoexpress.com.br", "(11) 99999-0002", "Varejo", "active", 180000),
    ("Indústria Nacional", "diretoria@inacional.com.br", "(11) 99999-0003", "Indústria", "active", 320000),
    ("StartupXYZ", "ceo@startupxyz.io", "(11) 99999-0004", "Tecnologia", "prospect", 0),
    ("Construtora Horizonte", "projetos@horizonte.com.br", "(11) 99999-0005", "Construção", "active", 420000),
    ("Clínica Saúde Total", "admin@saudetotal.com.br", "(11) 99999-0006", "Saúde", "inactive", 95000),
]

# (nome, tipo, [(etapa, sla, tipo da etapa)])
FLOWS = [
    ("Vendas B2B", "sales", [
        ("Prospecção", 48, "start"),
        ("Qualificação", 72, "process"),
        ("Proposta", 48, "process"),
        ("Negociação", 96, "process"),
        ("Fechamento", 24, "end_success"),
        ("Perdido", 0, "end_fail"),
    ]),
    ("Projetos", "project", [
        ("Planejamento", 120, "start"),
        ("Diagnóstico", 160, "process"),
        ("Implementação", 240, "process"),
        ("Treinamento", 80, "process"),
        ("Entrega", 40, "end_success"),
    ]),
    ("Serviços", "service", [
        ("Abertura", 4, "start"),
        ("Análise", 24, "process"),
        ("Execução", 48, "process"),
        ("Validação", 24, "process"),
        ("Concluído", 0, "end_success"),
    ]),
]

# (título, tipo, fluxo, índice da etapa, índice do cliente, com responsável, valor, prioridade, prazo SLA)
ITEMS = [
    ("Consultoria Estratégica - TechSolutions", "deal", "sales", 3, 0, True, 85000, "high", datetime(2026, 2, 20)),
    ("Diagnóstico Operacional - Varejo Express", "deal", "sales", 2, 1, True, 45000, "medium", None),
    ("Reestruturação - Indústria Nacional", "deal", "sales", 3, 2, True, 120000, "critical", datetime(2026, 2, 18)),
    ("Mentoria CEO - StartupXYZ", "lead", "sales", 0, 3, False, 15000, "low", None),
    ("Gestão Financeira - Horizonte", "deal", "sales", 1, 4, True, 65000, "high", None),
    ("Plano de Crescimento - TechSolutions", "deal", "sales", 2, 0, True, 95000, "medium", None),
    ("Assessment Cultural - Varejo Express", "lead", "sales", 0, 1, False, 22000, "low", None),
    ("Automação de Processos", "deal", "sales", 1, 2, True, 78000, "high", None),
    ("Implantação ERP - Indústria Nacional", "project", "project", 2, 2, True, 180000, "critical", None),
    ("Consultoria RH - Horizonte", "project", "project", 1, 4, True, 55000, "medium", None),
    ("Redesenho Comercial - TechSolutions", "project", "project", 0, 0, False, 72000, "high", None),
    ("Relatório Mensal - TechSolutions", "task", "service", 1, 0, True, 5000, "medium", None),
    ("Revisão Contratual - Horizonte", "ticket", "service", 2, 4, True, 3000, "low", None),
]

# Catálogo padrão de maturidade: (código, nome, status, responsável, frequência)
PROCESS_CATALOGUE = [
    ("Direção Estratégica", "direction", [
        ("D01", "Planejamento Estratégico", "informal", True, "eventual"),
        ("D02", "Definição de Metas e KPIs", "none", False, "never"),
        ("D03", "Reunião de Resultado Mensal", "formal", True, "periodic"),
        ("D04", "Gestão de Riscos Corporativos", "none", False, "never"),
        ("D05", "Plano de Expansão / Crescimento", "informal", False, "eventual"),
    ]),
    ("Gestão Financeira", "finance", [
        ("F01", "Controle de Fluxo de Caixa", "formal", True, "periodic"),
        ("F02", "DRE e Balancete Mensal", "formal", True, "periodic"),
        ("F03", "Contas a Pagar / Receber", "formal", True, "periodic"),
        ("F04", "Precificação e Margem", "informal", False, "eventual"),
        ("F05", "Planejamento Orçamentário Anual", "none", False, "never"),
    ]),
    ("Administrativo", "admin", [
        ("A01", "Controle de Contratos", "formal", True, "periodic"),
        ("A02", "Gestão de Fornecedores", "informal", True, "eventual"),
        ("A03", "Compliance e Documentação", "formal", True, "periodic"),
        ("A04", "Gestão de Patrimônio", "informal", False, "eventual"),
        ("A05", "Procedimento de Compras", "formal", True, "periodic"),
    ]),
    ("Pessoas & Cultura", "people", [
        ("P01", "Recrutamento e Seleção", "formal", True, "periodic"),
        ("P02", "Onboarding de Novos", "informal", True, "eventual"),
        ("P03", "Avaliação de Desempenho", "informal", False, "eventual"),
        ("P04", "Plano de Cargos e Salários", "none", False, "never"),
        ("P05", "Pesquisa de Clima", "informal", False, "eventual"),
    ]),
    ("Operacional", "ops", [
        ("O01", "Gestão de Projetos", "formal", True, "periodic"),
        ("O02", "Controle de Qualidade", "formal", True, "periodic"),
        ("O03", "Gestão de Estoque / Insumos", "informal", True, "eventual"),
        ("O04", "SLA e Indicadores de Entrega", "formal", True, "periodic"),
        ("O05", "Melhoria Contínua (PDCA)", "none", False, "never"),
    ]),
    ("Governança", "governance", [
        ("G01", "Reunião de Conselho / Sócios", "formal", True, "periodic"),
        ("G02", "Política de Segurança da Informação", "informal", False, "eventual"),
        ("G03", "Auditoria Interna", "none", False, "never"),
        ("G04", "Código de Conduta", "formal", True, "periodic"),
        ("G05", "Gestão de Sucessão", "none", False, "never"),
    ]),
]

KPIS = [
    ("Faturamento Mensal", "Financeiro", 145000, 130000, "R$", "up", "success"),
    ("Margem Operacional", "Financeiro", 22, 24, "%", "down", "warning"),
    ("Turnover Trimestral", "Pessoas", 5.2, 3.0, "%", "up", "danger"),
    ("NPS (Satisfação)", "Cliente", 72, 75, "score", "down", "warning"),
    ("Custo Fixo Total", "Financeiro", 45000, 45000, "R$", "stable", "success"),
    ("Absenteísmo", "Pessoas", 1.5, 2.0, "%", "down", "success"),
]

# (tipo, categoria, descrição, valor, dia do mês corrente, recorrente)
CURRENT_MONTH_ENTRIES = [
    ("revenue", "Consultoria", "Projeto TechSolutions - Parcela 2/4", 55000, 5, False),
    ("revenue", "Consultoria", "Diagnóstico Indústria Nacional", 40000, 10, False),
    ("revenue", "Treinamento", "Workshop Liderança - Horizonte", 25000, 12, False),
    ("revenue", "Mensalidade", "Contrato Mensal - Varejo Express", 15000, 1, True),
    ("revenue", "Consultoria", "Assessment Cultural - 3 empresas", 10000, 15, False),
    ("cost", "Folha de Pagamento", "Salários + Encargos", 52000, 5, True),
    ("cost", "Infraestrutura", "Aluguel + Utilities", 12000, 1, True),
    ("cost", "Marketing", "Campanha LinkedIn + Google", 8000, 3, False),
    ("cost", "Tecnologia", "SaaS Tools + Licenças", 5000, 1, True),
    ("cost", "Viagens", "Deslocamento consultores", 8000, 8, False),
]

DEPARTMENTS = {
    "Comercial": ["Fernanda Santos", "Ricardo Alves", "Mariana Costa", "Lucas Oliveira", "Patrícia Lima", "André Souza",
                  "Camila Ferreira", "Bruno Nascimento", "Juliana Martins", "Felipe Rodrigues", "Aline Pereira", "Gustavo Mendes"],
    "Tecnologia": ["Carlos Machado", "Amanda Ribeiro", "Thiago Cardoso", "Larissa Gomes", "Eduardo Nunes", "Isabela Araujo",
                   "Vinícius Barros", "Natália Castro"],
    "Operações": ["Roberto Junior", "Sandra Viana", "Marcos Paulo", "Tatiana Lopes", "Renato Freitas", "Vanessa Moura",
                  "Diego Ramos", "Priscila Dias", "Artur Nogueira", "Elaine Cavalcanti", "Hugo Teixeira", "Rafaela Monteiro",
                  "Daniel Correia", "Simone Rezende", "Otávio Cunha"],
    "Financeiro": ["Ana Paula", "Beatriz Carvalho", "Miguel Fonseca", "Cláudia Duarte"],
    "RH": ["Juliana Rosa", "Karen Torres", "Leonardo Pinto"],
}

ROLES = {
    "Comercial": ["Gerente Comercial", "Executivo de Vendas", "Analista Comercial", "SDR", "Key Account Manager"],
    "Tecnologia": ["Tech Lead", "Desenvolvedor Full Stack", "Desenvolvedor Front-end", "Analista de BI", "DevOps"],
    "Operações": ["Diretor de Operações", "Consultor Sênior", "Consultor Pleno", "Analista de Processos", "Coordenador de Projetos"],
    "Financeiro": ["Controller", "Analista Financeiro", "Assistente Fiscal", "Analista Contábil"],
    "RH": ["Gerente de RH", "Analista de DP", "Analista de R&S"],
}

ALERTS = [
    ("Fluxo de Caixa Projetado", "Previsão de caixa negativo para dia 25/02. Necessário aporte ou antecipação de recebíveis.", "financial", "high"),
    ("Gargalo em Negociação", "Estágio de Negociação no funil de vendas está com 168% da capacidade. Redistribuir responsáveis.", "operational", "high"),
    ("Margem em Queda", "Custos operacionais subiram 15% este mês, impactando a margem direta. Revisar orçamento.", "financial", "medium"),
    ("Turnover no Comercial", "3 desligamentos no setor comercial nos últimos 30 dias. Avaliar clima e remuneração.", "people", "medium"),
    ("Avaliação de Desempenho Pendente", "Ciclo trimestral pendente para 5 gestores. Prazo encerra em 3 dias.", "people", "low"),
    ("Meta de Expansão Atrasada", "Progresso da meta de abertura de nova filial está 10% atrasado vs timeline.", "strategic", "low"),
]


async def _seed_flows(db: AsyncIOMotorDatabase, company_id, admin_id, client_ids: List) -> None:
    flow_repo, stage_repo, item_repo = FlowRepository(db), FlowStageRepository(db), ItemRepository(db)
    stages_by_flow: Dict[str, list] = {}
    for name, flow_type, stages in FLOWS:
        flow = await flow_repo.create({"name": name, "type": flow_type, "company_id": company_id})
        stages_by_flow[flow_type] = [
            await stage_repo.create({
                "flow_id": flow.id, "company_id": company_id, "name": stage_name,
                "order": order, "sla": sla, "type": stage_type,
            })
            for order, (stage_name, sla, stage_type) in enumerate(stages)
        ]

    for title, item_type, flow_type, stage_idx, client_idx, with_owner, value, priority, sla_due_at in ITEMS:
        stage = stages_by_flow[flow_type][stage_idx]
        await item_repo.create({
            "title": title,
            "type": item_type,
            "flow_id": stage.flow_id,
            "stage_id": stage.id,
            "client_id": client_ids[client_idx],
            "responsible_id": admin_id if with_owner else None,
            "value": value,
            "priority": priority,
            "sla_due_at": sla_due_at,
            "status": "active",
            "history": [],
            "company_id": company_id,
        })


async def _seed_processes(db: AsyncIOMotorDatabase, company_id) -> None:
    block_repo, item_repo = ProcessBlockRepository(db), ProcessItemRepository(db)
    for order, (name, block_type, processes) in enumerate(PROCESS_CATALOGUE):
        block = await block_repo.create({"name": name, "type": block_type, "order": order, "company_id": company_id})
        for code, process_name, status, responsible, frequency in processes:
            await item_repo.create({
                "block_id": block.id, "code": code, "name": process_name, "status": status,
                "responsible": responsible, "frequency": frequency, "company_id": company_id,
            })


async def _seed_financial(db: AsyncIOMotorDatabase, company_id, now: datetime) -> None:
    entry_repo = FinancialEntryRepository(db)
    month_start, _ = month_window(now)
    prev_start, _ = month_window(now, -1)
    rows = [
        (entry_type, category, description, value, month_start.replace(day=day), recurring)
        for entry_type, category, description, value, day, recurring in CURRENT_MONTH_ENTRIES
    ]
    rows += [
        ("revenue", "Consultoria", "Faturamento mês anterior", 129000, prev_start.replace(day=15), False),
        ("cost", "Operacional", "Custos mês anterior", 74000, prev_start.replace(day=15), False),
        ("revenue", "Acumulado", "Reserva acumulada de meses anteriores", 500000, datetime(2025, 12, 31), False),
        ("cost", "Acumulado", "Custos acumulados de meses anteriores", 180000, datetime(2025, 12, 31), False),
    ]
    for entry_type, category, description, value, date, recurring in rows:
        await entry_repo.create({
            "type": entry_type, "category": category, "description": description,
            "value": value, "date": date, "recurring": recurring, "company_id": company_id,
        })


async def _seed_people(db: AsyncIOMotorDatabase, company_id) -> None:
    person_repo = PersonRepository(db)
    for department, names in DEPARTMENTS.items():
        roles = ROLES.get(department, ["Colaborador"])
        for i, name in enumerate(names):
            await person_repo.create({
                "name": name,
                "role": roles[i % len(roles)],
                "department": department,
                # datas e salários fixos para o seed ser reprodutível
                "hire_date": datetime(2024, i % 12 + 1, (i * 7) % 28 + 1),
                "salary": 4000 + (i * 1500) % 12000,
                "status": "active",
                "company_id": company_id,
            })


async def seed_demo_company(db: AsyncIOMotorDatabase, now: Optional[datetime] = None) -> Optional[CompanyInDB]:
    """Cria a empresa demo com seu admin. Não faz nada se o admin já existir."""
    now = now or utcnow()
    log = logger.bind(service="Seed")
    user_repo = UserRepository(db)
    if await user_repo.get_by_email(ADMIN_EMAIL):
        log.warning(f"Seed ignorado: usuário {ADMIN_EMAIL} já existe.")
        return None

    company = await CompanyRepository(db).create(COMPANY)
    admin = await user_repo.create({
        "email": ADMIN_EMAIL,
        "hashed_password": get_password_hash(ADMIN_PASSWORD),
        "name": "Administrador YF",
        "role": "admin",
        "company_id": company.id,
    })

    client_repo = ClientRepository(db)
    client_ids = []
    for name, email, phone, segment, status, total_value in CLIENTS:
        client = await client_repo.create({
            "name": name, "type": "PJ", "email": email, "phone": phone, "segment": segment,
            "status": status, "total_value": total_value, "company_id": company.id,
        })
        client_ids.append(client.id)

    await _seed_flows(db, company.id, admin.id, client_ids)
    await _seed_processes(db, company.id)

    kpi_repo = KpiRepository(db)
    for name, category, value, target, unit, trend, status in KPIS:
        await kpi_repo.create({
            "name": name, "category": category, "value": value, "target": target,
            "unit": unit, "trend": trend, "status": status, "company_id": company.id,
        })

    await _seed_financial(db, company.id, now)
    await _seed_people(db, company.id)

    alert_repo = AlertRepository(db)
    for title, description, alert_type, priority in ALERTS:
        await alert_repo.create({
            "title": title, "description": description, "type": alert_type,
            "priority": priority, "status": "active", "company_id": company.id,
        })

    log.success(f"Seed concluído para '{company.name}'. Login: {ADMIN_EMAIL} / {ADMIN_PASSWORD}")
    return company


async def main() -> None:
    setup_logging()
    await mongo_manager.connect()
    try:
        await seed_demo_company(mongo_manager.get_db())
    finally:
        await mongo_manager.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
