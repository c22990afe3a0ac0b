"""
Calculadora de Viabilidade - Custos de Aquisicao e Projecao de Lucro por Horizonte
Arremate de imoveis em leilao: investimento base + cenarios de 4, 8, 12 e 16 meses
"""

import math
import sys
from dataclasses import replace
from typing import Dict, Union

from .modelos import (
    BaseITBI,
    EntradaViabilidade,
    ProjecaoHorizonte,
    ResultadoAquisicao,
    ResultadoViabilidade,
    ALIQUOTA_IRGC_PADRAO,
    COMISSAO_LEILOEIRO,
    CORRETAGEM_PERCENT_PADRAO,
    HORIZONTES_CURTOS,
    HORIZONTES_LONGOS,
    ITBI_FINANCIADO_PERCENT_PADRAO,
)

# Tributacao fixa sobre a venda (3.75%, cenario PJ). Desabilitada: o padrao
# e Pessoa Fisica, 15% sobre o ganho de capital. Deve permanecer 0.
TRIBUTACAO_ENTRADA = 0


def arredondar(valor: float) -> float:
    """Arredonda para centavos (meio para cima), com epsilon contra ruido de float"""
    return math.floor((valor + sys.float_info.epsilon) * 100 + 0.5) / 100


# ==================== AQUISICAO ====================

def calc_assessoria(entrada: EntradaViabilidade) -> float:
    """
    Honorarios da assessoria.

    Valor manual (> 0) tem prioridade. Sem ele, aplica a faixa:
    ate o threshold (inclusive) cobra o valor fixo, acima cobra percentual
    sobre o arremate.
    """
    if entrada.valor_assessoria and entrada.valor_assessoria > 0:
        return entrada.valor_assessoria

    if entrada.valor_arrematado <= entrada.assessoria_threshold:
        return entrada.assessoria_fee_below

    return arredondar(entrada.valor_arrematado * entrada.assessoria_fee_above_percent / 100)


def calc_base_itbi(entrada: EntradaViabilidade) -> float:
    if entrada.itbi_base == BaseITBI.ARREMATE.value:
        return entrada.valor_arrematado

    if entrada.valor_avaliacao and entrada.valor_avaliacao > 0:
        return entrada.valor_avaliacao
    return entrada.valor_arrematado


def calc_valor_itbi(entrada: EntradaViabilidade) -> float:
    """
    Calcula o ITBI.

    A vista: aliquota cheia sobre a base escolhida.
    Financiado: a parte financiada paga a aliquota reduzida e o restante
    (base - financiado) paga a aliquota cheia.
    """
    base_itbi = calc_base_itbi(entrada)

    if not entrada.financiado:
        return arredondar(base_itbi * entrada.itbi / 100)

    val_financiado = entrada.valor_financiado or (entrada.valor_arrematado - entrada.valor_entrada)
    taxa_financiado = (entrada.itbi_financiado_percent or ITBI_FINANCIADO_PERCENT_PADRAO) / 100

    # Base nunca menor que o financiado (caso atipico)
    calc_base = max(base_itbi, val_financiado)
    val_restante = max(0, calc_base - val_financiado)

    itbi_financiado = arredondar(val_financiado * taxa_financiado)
    itbi_restante = arredondar(val_restante * entrada.itbi / 100)

    return itbi_financiado + itbi_restante


def calc_leiloeiro(entrada: EntradaViabilidade) -> float:
    if not entrada.incluir_leiloeiro:
        return 0
    return arredondar(entrada.valor_arrematado * COMISSAO_LEILOEIRO)


def resolver_aquisicao(entrada: EntradaViabilidade) -> ResultadoAquisicao:
    """
    Calcula o desembolso inicial para arrematar o imovel.

    Returns:
        ResultadoAquisicao com investimento base, assessoria, ITBI e leiloeiro
    """
    valor_assessoria = calc_assessoria(entrada)
    valor_itbi = calc_valor_itbi(entrada)
    valor_leiloeiro = calc_leiloeiro(entrada)

    # Financiado: sai do caixa apenas a entrada
    valor_aquisicao = entrada.valor_entrada if entrada.financiado else entrada.valor_arrematado

    investimento_base = arredondar(
        valor_aquisicao
        + valor_assessoria
        + valor_itbi
        + entrada.custos_cartorarios
        + entrada.reforma
        + entrada.debitos_pendentes
        + entrada.custos_adicionais
        + valor_leiloeiro
        + entrada.custo_desocupacao
    )

    return ResultadoAquisicao(
        investimento_base=investimento_base,
        valor_assessoria=valor_assessoria,
        valor_itbi=valor_itbi,
        valor_leiloeiro=valor_leiloeiro,
    )


# ==================== PROJECAO ====================

def calc_iptu_mensal(entrada: EntradaViabilidade) -> float:
    """IPTU mensal informado; senao anual / 12"""
    if entrada.iptu_mensal and entrada.iptu_mensal > 0:
        return entrada.iptu_mensal
    if entrada.iptu_anual:
        return entrada.iptu_anual / 12
    return 0


def calc_seguro(meses: int, entrada: EntradaViabilidade) -> float:
    # Seguro Caixa e um valor fixo: igual em qualquer horizonte
    if entrada.taxa_seguro_caixa and entrada.taxa_seguro_caixa > 0:
        return entrada.taxa_seguro_caixa
    if entrada.taxa_seguro_mensal and entrada.taxa_seguro_mensal > 0:
        return entrada.taxa_seguro_mensal * meses
    return 0


def projetar_horizonte(
    meses: int,
    entrada: EntradaViabilidade,
    investimento_base: float,
    corretagem: float
) -> ProjecaoHorizonte:
    """
    Projeta o resultado da venda apos `meses` de posse.

    Args:
        meses: Horizonte de manutencao ate a venda
        entrada: Dados do calculo; valor_venda_final ja e o preco deste horizonte
        investimento_base: Desembolso inicial (resolver_aquisicao)
        corretagem: Corretagem sobre o preco de venda deste horizonte

    Returns:
        ProjecaoHorizonte com custos, resultado bruto/liquido, impostos e ROI
    """
    aliquota_irgc = ALIQUOTA_IRGC_PADRAO if entrada.aliquota_irgc is None else entrada.aliquota_irgc

    # 1. CUSTOS DE MANUTENCAO
    custos_manutencao = (
        entrada.condominio_mensal * meses
        + calc_iptu_mensal(entrada) * meses
        + calc_seguro(meses, entrada)
    )

    # Parcelas do financiamento durante a posse
    if entrada.financiado:
        custos_manutencao += entrada.custo_mensal_financiamento * meses

    custos_periodo = arredondar(custos_manutencao)
    custo_mensal_recorrente = arredondar(custos_manutencao / meses) if meses else 0

    investimento_total = arredondar(investimento_base + custos_periodo)

    # Saldo devedor quitado na venda
    custo_quitacao = (entrada.valor_financiado or 0) if entrada.financiado else 0

    # 2. RESULTADO
    resultado_bruto = arredondar(
        entrada.valor_venda_final - corretagem - investimento_total - custo_quitacao
    )

    # Prejuizo nao gera imposto
    imposto_lucro = arredondar(resultado_bruto * aliquota_irgc) if resultado_bruto > 0 else 0
    imposto_total = arredondar(TRIBUTACAO_ENTRADA + imposto_lucro)

    resultado_liquido = arredondar(resultado_bruto - imposto_total)

    roi_liquido = (
        arredondar(resultado_liquido / investimento_total * 100)
        if investimento_total > 0 else 0
    )

    return ProjecaoHorizonte(
        meses=meses,
        valor_venda=entrada.valor_venda_final,
        custos_periodo=custos_periodo,
        custo_mensal_recorrente=custo_mensal_recorrente,
        investimento_total=investimento_total,
        resultado_bruto=resultado_bruto,
        resultado_liquido=resultado_liquido,
        roi_liquido=roi_liquido,
        imposto_devido=imposto_total,
        tributacao_entrada=TRIBUTACAO_ENTRADA,
        imposto_lucro=imposto_lucro,
    )


# ==================== CALCULO COMPLETO ====================

def calcular_viabilidade(entrada: Union[EntradaViabilidade, Dict]) -> ResultadoViabilidade:
    """
    Calculo completo: aquisicao uma unica vez e projecoes de 4, 8, 12 e 16 meses.

    Os horizontes curtos (4 e 8) usam valor_venda_final; os longos (12 e 16)
    usam valor_venda_longo quando informado (> 0).

    Args:
        entrada: EntradaViabilidade ou dicionario no formato do formulario

    Returns:
        ResultadoViabilidade (use .to_dict() para o formato da API)
    """
    if not isinstance(entrada, EntradaViabilidade):
        entrada = EntradaViabilidade.from_dict(entrada)

    aquisicao = resolver_aquisicao(entrada)
    corretagem_percent = entrada.corretagem_percent or CORRETAGEM_PERCENT_PADRAO

    valor_venda_curto = entrada.valor_venda_final
    if entrada.valor_venda_longo and entrada.valor_venda_longo > 0:
        valor_venda_longo = entrada.valor_venda_longo
    else:
        valor_venda_longo = valor_venda_curto

    def _projetar(meses: int, valor_venda: float) -> ProjecaoHorizonte:
        corretagem = arredondar(valor_venda * corretagem_percent / 100)
        dados_horizonte = replace(entrada, valor_venda_final=valor_venda)
        return projetar_horizonte(meses, dados_horizonte, aquisicao.investimento_base, corretagem)

    projecoes = {}
    for meses in HORIZONTES_CURTOS:
        projecoes[meses] = _projetar(meses, valor_venda_curto)
    for meses in HORIZONTES_LONGOS:
        projecoes[meses] = _projetar(meses, valor_venda_longo)

    return ResultadoViabilidade(
        investimento_base=aquisicao.investimento_base,
        corretagem=arredondar(valor_venda_curto * corretagem_percent / 100),
        valor_assessoria=aquisicao.valor_assessoria,
        valor_itbi=aquisicao.valor_itbi,
        valor_leiloeiro=aquisicao.valor_leiloeiro,
        projecoes=projecoes,
    )


# Exemplo de uso
if __name__ == "__main__":
    resultado = calcular_viabilidade({
        "valorArrematado": 200000,
        "itbi": 3,
        "itbiBase": "avaliacao",
        "custosCartorarios": 2000,
        "reforma": 15000,
        "debitosPendentes": 5000,
        "tipoPagamento": "vista",
        "valorVendaFinal": 300000,
        "condominioMensal": 500,
        "iptuAnual": 1200,
        "taxaSeguroCaixa": 800,
        "aliquotaIRGC": 0.15,
    })

    import json
    print(json.dumps(resultado.to_dict(), indent=2, ensure_ascii=False))
