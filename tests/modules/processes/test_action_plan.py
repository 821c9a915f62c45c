# tests/modules/processes/test_action_plan.py
import pytest

from sge.modules.processes.action_plan import ActionPlanService


@pytest.mark.parametrize(
    "segment,expected",
    [
        ("Varejo", "varejo"),
        ("Loja de roupas", "varejo"),
        ("Consultoria empresarial", "serviços"),
        ("Serviços gerais", "serviços"),
        ("Industria metalúrgica", "industria"),
        ("Software house", "tecnologia"),
        ("", "geral"),
        (None, "geral"),
        ("Agropecuária", "geral"),
    ],
)
def test_resolve_segment(segment, expected):
    assert ActionPlanService.resolve_segment(segment) == expected


def test_segment_template_overrides_default():
    template = ActionPlanService.get_template("F01", "Varejo")
    assert template.title == "Frente de Caixa"
    assert template.tool == "Sistema PDV"


def test_falls_back_to_default_then_generic():
    assert ActionPlanService.get_template("G03", "Varejo").title == "Acordo de Sócios"
    generic = ActionPlanService.get_template("X99", None)
    assert generic.title == "Melhorar Processo"
    assert generic.step == "Mapear e documentar o processo atual"
    assert generic.tool == "Documento de Texto"
