# tests/modules/reports/test_reports_api.py
from datetime import datetime

import pytest
from fastapi import status
from httpx import AsyncClient

from sge.modules.reports.services import BOM, Column, render_cell, to_csv


def test_render_cell_formats():
    assert render_cell(None) == ""
    assert render_cell(True) == "Sim"
    assert render_cell(False) == "Não"
    assert render_cell(datetime(2026, 3, 7, 15, 30)) == "2026-03-07"
    assert render_cell(1500.0) == "1500"
    assert render_cell(12.5) == "12.5"


def test_to_csv_quotes_every_cell():
    rows = [{"name": 'Padaria "Central"', "total": 10.0}]
    columns = [Column("Nome", lambda r: r["name"]), Column("Total", lambda r: r["total"])]
    content = to_csv(rows, columns)
    assert content == BOM + '"Nome","Total"\n"Padaria ""Central""","10"'


@pytest.mark.asyncio
async def test_export_clients_csv(authenticated_client: AsyncClient):
    await authenticated_client.post("/api/clients", json={"name": "Mercado Sol", "email": "contato@sol.com.br", "status": "active", "totalValue": 2500})

    response = await authenticated_client.get("/api/reports/clients.csv")
    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith("attachment; filename=clients_")
    assert disposition.endswith(".csv")

    assert response.content.startswith(BOM.encode("utf-8"))
    lines = response.content.decode("utf-8-sig").split("\n")
    assert lines[0] == '"Nome","Tipo","Email","Telefone","Segmento","Status","Valor Total","Criado em"'
    assert lines[1].startswith('"Mercado Sol","PJ","contato@sol.com.br","","","active","2500",')
    assert len(lines) == 2


@pytest.mark.asyncio
async def test_export_items_resolves_names(authenticated_client: AsyncClient):
    flow = (await authenticated_client.post("/api/flows", json={"name": "Vendas", "type": "sales", "stages": [{"name": "Novo"}, {"name": "Ganho", "type": "end_success"}]})).json()
    await authenticated_client.post("/api/items", json={"title": "Bolo de festa", "flowId": flow["id"], "stageId": flow["stages"][0]["id"], "value": 180})

    response = await authenticated_client.get("/api/reports/items.csv")
    lines = response.content.decode("utf-8-sig").split("\n")
    assert lines[1].startswith('"Bolo de festa","Vendas","Novo","","180","medium","active","",')


@pytest.mark.asyncio
async def test_export_empty_resource_has_only_header(authenticated_client: AsyncClient):
    response = await authenticated_client.get("/api/reports/people.csv")
    assert response.content.decode("utf-8-sig") == '"Nome","Cargo","Departamento","Admissão","Salário","Status"'


@pytest.mark.asyncio
async def test_unknown_report(authenticated_client: AsyncClient):
    response = await authenticated_client.get("/api/reports/segredos.csv")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "Relatório não encontrado"


@pytest.mark.asyncio
async def test_export_requires_auth(test_client: AsyncClient):
    response = await test_client.get("/api/reports/clients.csv")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
