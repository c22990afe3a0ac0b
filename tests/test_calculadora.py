"""
Testes da calculadora de viabilidade
"""

import copy

import pytest

from viabilidade.calculadora import (
    TRIBUTACAO_ENTRADA,
    arredondar,
    calc_assessoria,
    calc_valor_itbi,
    calcular_viabilidade,
    projetar_horizonte,
    resolver_aquisicao,
)
from viabilidade.modelos import EntradaViabilidade


def _entrada(**kwargs):
    return EntradaViabilidade.from_dict(kwargs)


# ==================== ARREDONDAMENTO ====================

@pytest.mark.parametrize("valor", [0, 1.234, 6000.0005, 15.8838, 37740.0, 123456.785])
def test_arredondar_idempotente(valor):
    assert arredondar(arredondar(valor)) == arredondar(valor)


def test_arredondar_meio_para_cima_com_epsilon():
    assert arredondar(1.005) == 1.01
    assert arredondar(0.125) == 0.13
    assert arredondar(15.8838) == 15.88


# ==================== ASSESSORIA ====================

def test_assessoria_fixa_ate_threshold_inclusive():
    assert calc_assessoria(_entrada(valorArrematado=120000)) == 6000


def test_assessoria_continua_logo_acima_do_threshold():
    assert calc_assessoria(_entrada(valorArrematado=120000.01)) == 6000.00


def test_assessoria_percentual_acima_do_threshold():
    assert calc_assessoria(_entrada(valorArrematado=300000)) == 15000


def test_assessoria_manual_sobrescreve_faixa():
    assert calc_assessoria(_entrada(valorArrematado=300000, valorAssessoria=10000)) == 10000


def test_assessoria_manual_zero_usa_faixa():
    assert calc_assessoria(_entrada(valorArrematado=100000, valorAssessoria=0)) == 6000


def test_assessoria_faixa_configuravel():
    entrada = _entrada(
        valorArrematado=90000,
        assessoriaThreshold=80000,
        assessoriaFeeBelow=4000,
        assessoriaFeeAbovePercent=4,
    )
    assert calc_assessoria(entrada) == 3600


# ==================== ITBI ====================

def test_itbi_financiado_divide_base():
    entrada = _entrada(
        valorArrematado=300000,
        valorEntrada=60000,
        itbiBase="avaliacao",
        valorAvaliacao=300000,
        itbi=3,
        itbiFinanciadoPercent=0.5,
        tipoPagamento="financiado",
    )
    assert calc_valor_itbi(entrada) == 3000


def test_itbi_financiado_percentual_padrao():
    entrada = _entrada(
        valorArrematado=300000,
        valorEntrada=60000,
        valorAvaliacao=300000,
        itbi=3,
        tipoPagamento="financiado",
    )
    assert calc_valor_itbi(entrada) == 3000


def test_itbi_financiado_base_menor_que_financiado():
    entrada = _entrada(
        valorArrematado=300000,
        valorEntrada=60000,
        valorAvaliacao=100000,
        itbi=3,
        tipoPagamento="financiado",
    )
    # So a parte financiada paga ITBI: 240000 * 0.5%
    assert calc_valor_itbi(entrada) == 1200


def test_itbi_financiado_valor_informado():
    entrada = _entrada(
        valorArrematado=300000,
        valorEntrada=60000,
        valorFinanciado=200000,
        valorAvaliacao=300000,
        itbi=3,
        tipoPagamento="financiado",
    )
    assert calc_valor_itbi(entrada) == 1000 + 3000


def test_itbi_vista_usa_avaliacao_quando_informada():
    entrada = _entrada(valorArrematado=200000, valorAvaliacao=250000, itbi=3)
    assert calc_valor_itbi(entrada) == 7500


def test_itbi_vista_sem_avaliacao_usa_arremate():
    assert calc_valor_itbi(_entrada(valorArrematado=200000, itbi=3)) == 6000


def test_itbi_base_arremate_ignora_avaliacao():
    entrada = _entrada(valorArrematado=200000, valorAvaliacao=250000, itbi=2, itbiBase="arremate")
    assert calc_valor_itbi(entrada) == 4000


# ==================== AQUISICAO ====================

def test_aquisicao_vista_usa_valor_arrematado():
    entrada = _entrada(
        valorArrematado=200000,
        valorEntrada=50000,
        assessoriaThreshold=300000,
        assessoriaFeeBelow=0,
    )
    aquisicao = resolver_aquisicao(entrada)
    assert aquisicao.valor_assessoria == 0
    # a entrada nao reduz o desembolso a vista
    assert aquisicao.investimento_base == 200000


def test_aquisicao_financiada_usa_entrada():
    entrada = _entrada(
        valorArrematado=300000,
        valorEntrada=60000,
        valorAvaliacao=300000,
        itbi=3,
        tipoPagamento="financiado",
    )
    aquisicao = resolver_aquisicao(entrada)
    assert aquisicao.valor_assessoria == 15000
    assert aquisicao.valor_itbi == 3000
    assert aquisicao.investimento_base == 78000


def test_aquisicao_leiloeiro_cinco_por_cento():
    entrada = _entrada(valorArrematado=200000, incluirLeiloeiro=True)
    aquisicao = resolver_aquisicao(entrada)
    assert aquisicao.valor_leiloeiro == 10000
    assert aquisicao.investimento_base == 200000 + 10000 + 10000


def test_aquisicao_soma_todos_os_custos_iniciais():
    entrada = _entrada(
        valorArrematado=100000,
        custosCartorarios=1000,
        reforma=2000,
        debitosPendentes=3000,
        custosAdicionais=4000,
        custoDesocupacao=5000,
    )
    assert resolver_aquisicao(entrada).investimento_base == 100000 + 6000 + 15000


def test_aquisicao_campos_invalidos_viram_zero():
    entrada = _entrada(valorArrematado="abc", reforma=None, custosCartorarios="")
    aquisicao = resolver_aquisicao(entrada)
    assert aquisicao.investimento_base == 6000
    assert aquisicao.valor_itbi == 0


# ==================== PROJECAO ====================

def test_projecao_roi_zero_sem_investimento():
    projecao = projetar_horizonte(4, EntradaViabilidade(), 0, 0)
    assert projecao.investimento_total == 0
    assert projecao.roi_liquido == 0


def test_projecao_prejuizo_nao_gera_imposto():
    entrada = _entrada(valorVendaFinal=100000)
    projecao = projetar_horizonte(4, entrada, 234000, 6000)
    assert projecao.resultado_bruto == -140000
    assert projecao.imposto_lucro == 0
    assert projecao.resultado_liquido == projecao.resultado_bruto


def test_projecao_seguro_caixa_e_fixo():
    entrada = _entrada(condominioMensal=500, taxaSeguroCaixa=800)
    curta = projetar_horizonte(4, entrada, 0, 0)
    longa = projetar_horizonte(16, entrada, 0, 0)
    assert curta.custos_periodo == 2800
    assert longa.custos_periodo == 8800


def test_projecao_seguro_mensal_multiplica_meses():
    entrada = _entrada(taxaSeguroMensal=50)
    assert projetar_horizonte(4, entrada, 0, 0).custos_periodo == 200


def test_projecao_iptu_mensal_tem_prioridade_sobre_anual():
    entrada = _entrada(iptuMensal=150, iptuAnual=1200)
    assert projetar_horizonte(4, entrada, 0, 0).custos_periodo == 600


def test_projecao_iptu_mensal_negativo_usa_anual():
    entrada = _entrada(iptuMensal=-50, iptuAnual=1200)
    assert projetar_horizonte(4, entrada, 0, 0).custos_periodo == 400


def test_projecao_seguro_caixa_prevalece_sobre_mensal():
    entrada = _entrada(taxaSeguroCaixa=800, taxaSeguroMensal=50)
    assert projetar_horizonte(16, entrada, 0, 0).custos_periodo == 800


def test_projecao_financiada_inclui_parcelas_e_quitacao():
    entrada = _entrada(
        tipoPagamento="financiado",
        valorFinanciado=240000,
        custoMensalFinanciamento=2000,
        valorVendaFinal=400000,
    )
    projecao = projetar_horizonte(4, entrada, 78000, 24000)
    assert projecao.custos_periodo == 8000
    assert projecao.investimento_total == 86000
    assert projecao.resultado_bruto == 50000
    assert projecao.imposto_lucro == 7500
    assert projecao.resultado_liquido == 42500
    assert projecao.roi_liquido == 49.42


def test_projecao_vista_ignora_parcelas_de_financiamento():
    entrada = _entrada(custoMensalFinanciamento=2000, valorFinanciado=100000, valorVendaFinal=1000)
    projecao = projetar_horizonte(4, entrada, 0, 0)
    assert projecao.custos_periodo == 0
    assert projecao.resultado_bruto == 1000


def test_projecao_aliquota_zero_explicita():
    entrada = _entrada(valorVendaFinal=100000, aliquotaIRGC=0)
    projecao = projetar_horizonte(4, entrada, 50000, 0)
    assert projecao.imposto_lucro == 0
    assert projecao.resultado_liquido == 50000


def test_projecao_tributacao_entrada_desabilitada():
    entrada = _entrada(valorVendaFinal=300000)
    projecao = projetar_horizonte(4, entrada, 100000, 18000)
    assert TRIBUTACAO_ENTRADA == 0
    assert projecao.tributacao_entrada == 0
    assert projecao.imposto_devido == projecao.imposto_lucro


# ==================== CALCULO COMPLETO ====================

def test_cenario_vista_completo(cenario_vista):
    resultado = calcular_viabilidade(cenario_vista)

    assert resultado.valor_assessoria == 6000
    assert resultado.valor_itbi == 6000
    assert resultado.valor_leiloeiro == 0
    assert resultado.investimento_base == 234000
    assert resultado.corretagem == 18000

    quatro = resultado.projecao(4)
    assert quatro.custos_periodo == 3200
    assert quatro.custo_mensal_recorrente == 800
    assert quatro.investimento_total == 237200
    assert quatro.resultado_bruto == 44800
    assert quatro.imposto_lucro == 6720
    assert quatro.resultado_liquido == 38080
    assert quatro.roi_liquido == 16.05

    oito = resultado.projecao(8)
    assert oito.investimento_total == 239600
    assert oito.resultado_liquido == 36040
    assert oito.roi_liquido == 15.04


def test_cenario_vista_com_assessoria_pela_faixa(cenario_vista):
    del cenario_vista["valorAssessoria"]
    resultado = calcular_viabilidade(cenario_vista)

    # 200 mil esta acima do threshold: 5% do arremate
    assert resultado.valor_assessoria == 10000
    assert resultado.investimento_base == 238000

    quatro = resultado.projecao(4)
    assert quatro.investimento_total == 241200
    assert quatro.resultado_bruto == 40800
    assert quatro.resultado_liquido == 34680
    assert quatro.roi_liquido == 14.38


def test_venda_longa_usada_nos_horizontes_de_12_e_16(cenario_vista):
    cenario_vista["valorVendaLongo"] = 350000
    resultado = calcular_viabilidade(cenario_vista)

    assert resultado.projecao(4).valor_venda == 300000
    assert resultado.projecao(8).valor_venda == 300000
    assert resultado.projecao(12).valor_venda == 350000
    assert resultado.projecao(16).valor_venda == 350000
    # corretagem de referencia continua sendo a da venda curta
    assert resultado.corretagem == 18000

    doze = resultado.projecao(12)
    assert doze.investimento_total == 242000
    assert doze.resultado_bruto == 87000
    assert doze.resultado_liquido == 73950


def test_venda_longa_zero_usa_venda_curta(cenario_vista):
    cenario_vista["valorVendaLongo"] = 0
    resultado = calcular_viabilidade(cenario_vista)
    assert resultado.projecao(16).valor_venda == 300000


def test_corretagem_percentual_zero_usa_padrao(cenario_vista):
    cenario_vista["corretagemPercent"] = 0
    assert calcular_viabilidade(cenario_vista).corretagem == 18000


def test_aquisicao_igual_em_todos_os_horizontes(cenario_vista):
    resultado = calcular_viabilidade(cenario_vista)
    for meses in (4, 8, 12, 16):
        projecao = resultado.projecao(meses)
        assert arredondar(projecao.investimento_total - projecao.custos_periodo) == resultado.investimento_base


def test_calculo_nao_altera_entrada(cenario_vista):
    original = copy.deepcopy(cenario_vista)
    entrada = EntradaViabilidade.from_dict(cenario_vista)
    entrada_original = copy.deepcopy(entrada)

    calcular_viabilidade(cenario_vista)
    calcular_viabilidade(entrada)

    assert cenario_vista == original
    assert entrada == entrada_original


def test_resultado_to_dict_formato_da_api(cenario_vista):
    dados = calcular_viabilidade(cenario_vista).to_dict()

    assert set(dados) == {
        "common", "projection4Months", "projection8Months",
        "projection12Months", "projection16Months",
    }
    assert dados["common"] == {
        "investimentoBase": 234000,
        "corretagem": 18000,
        "valorAssessoria": 6000,
        "valorITBI": 6000,
        "valorLeiloeiro": 0,
    }
    assert dados["projection4Months"]["roiLiquido"] == 16.05
    assert dados["projection4Months"]["impostoDevido"] == 6720


def test_entrada_vazia_nao_gera_erro():
    resultado = calcular_viabilidade({})
    assert resultado.investimento_base == 6000
    assert resultado.projecao(4).imposto_lucro == 0
