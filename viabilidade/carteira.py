"""
Tools de Carteira - Estimativas e KPIs dos Imoveis Arrematados
Converte calculos salvos em registros da carteira e agrega o dashboard
"""

from datetime import date
from typing import Dict, List, Optional
import logging

from .calculadora import arredondar, calc_iptu_mensal, calcular_viabilidade
from .conversao import normalizar_formulario, parse_monetario, parse_percentual
from .modelos import (
    ALIQUOTA_IRGC_PADRAO,
    CORRETAGEM_PERCENT_PADRAO,
    EntradaViabilidade,
)

logger = logging.getLogger(__name__)

# Projecao usada como estimativa padrao da carteira
MESES_ESTIMATIVA = 4

STATUS_ARREMATADO = "Arrematado"
ENDERECO_PADRAO = "Endereço a definir"


def estimar_lucro_venda(
    valor_venda: float,
    investido: float,
    corretagem_percent: float = CORRETAGEM_PERCENT_PADRAO,
    aliquota_irgc: float = ALIQUOTA_IRGC_PADRAO
) -> Dict:
    """
    Estimativa rapida de lucro para um imovel ja na carteira.

    Args:
        valor_venda: Preco de venda estimado
        investido: Total ja investido (compra + custos lancados)
        corretagem_percent: Percentual de corretagem
        aliquota_irgc: Aliquota do IR sobre ganho de capital (fracao)

    Returns:
        Dict com corretagem, lucro bruto, imposto, lucro liquido e ROI
    """
    corretagem = arredondar(valor_venda * corretagem_percent / 100)
    lucro_bruto = arredondar(valor_venda - corretagem - investido)
    imposto = arredondar(lucro_bruto * aliquota_irgc) if lucro_bruto > 0 else 0
    lucro_liquido = arredondar(lucro_bruto - imposto)
    roi = arredondar(lucro_liquido / investido * 100) if investido > 0 else 0

    return {
        "corretagem": corretagem,
        "lucro_bruto": lucro_bruto,
        "imposto": imposto,
        "lucro_liquido": lucro_liquido,
        "roi": roi
    }


def _entrada(dados) -> EntradaViabilidade:
    if isinstance(dados, EntradaViabilidade):
        return dados
    return EntradaViabilidade.from_dict(normalizar_formulario(dados))


def estimativa_carteira(dados) -> Dict:
    """Lucro e ROI gravados junto ao imovel (projecao de 4 meses)"""
    resultado = calcular_viabilidade(_entrada(dados))
    projecao = resultado.projecao(MESES_ESTIMATIVA)

    return {
        "lucro_estimado": projecao.resultado_liquido,
        "roi_estimado": projecao.roi_liquido
    }


def registro_carteira(
    dados: Dict,
    descricao: str,
    data_aquisicao: Optional[str] = None
) -> Dict:
    """
    Monta o registro da carteira a partir de um calculo salvo.

    Args:
        dados: Entrada bruta do calculo (como foi salva)
        descricao: Nome do calculo / descricao do imovel
        data_aquisicao: Data ISO; padrao hoje

    Returns:
        Dict com as colunas de carteira_imoveis
    """
    entrada = _entrada(dados)

    return {
        "descricao": descricao,
        "endereco": ENDERECO_PADRAO,
        "valor_compra": entrada.valor_arrematado,
        "data_aquisicao": data_aquisicao or date.today().isoformat(),
        "valor_venda_estimado": entrada.valor_venda_final,
        "status": STATUS_ARREMATADO,
        "condominio_estimado": entrada.condominio_mensal,
        "iptu_estimado": arredondar(calc_iptu_mensal(entrada)),
        **estimativa_carteira(entrada)
    }


def custos_iniciais(dados, data_custo: Optional[str] = None) -> List[Dict]:
    """
    Lancamentos iniciais de custo do imovel importado, a partir do calculo.

    ITBI, assessoria e leiloeiro saem do resultado da calculadora; os demais
    sao os valores informados. Itens zerados nao sao lancados.
    """
    entrada = _entrada(dados)
    resultado = calcular_viabilidade(entrada)
    data_custo = data_custo or date.today().isoformat()

    itens = [
        ("Reforma", entrada.reforma, "Estimativa de reforma (do cálculo)"),
        ("Impostos", resultado.valor_itbi, "ITBI (do cálculo)"),
        ("Documentação", entrada.custos_cartorarios, "Custos de registro (do cálculo)"),
        ("Comissão", resultado.valor_leiloeiro, "Comissão Leiloeiro (do cálculo)"),
        ("Comissão", resultado.valor_assessoria, "Assessoria (do cálculo)"),
        ("Outros", entrada.custos_adicionais, "Outros custos iniciais (do cálculo)"),
        ("Outros", entrada.debitos_pendentes, "Débitos Pendentes (do cálculo)"),
        ("Outros", entrada.custo_desocupacao, "Desocupação / Advogado (do cálculo)"),
        ("Seguro", entrada.taxa_seguro_caixa, "Seguro Fixo (do cálculo)"),
    ]

    return [
        {"tipo_custo": tipo, "valor": valor, "data_custo": data_custo, "descricao": descricao}
        for tipo, valor, descricao in itens
        if valor and valor > 0
    ]


def calc_kpis_carteira(imoveis: List[Dict]) -> Dict:
    """
    KPIs do dashboard da carteira do assessor.

    Cada imovel precisa de total_investido e valor_venda_estimado; imoveis sem
    venda estimada entram no total investido mas nao no ROI medio.

    Returns:
        Dict com kpis e a lista de imoveis com lucro/ROI estimados
    """
    total_investido = 0.0
    total_investido_com_estimativa = 0.0
    lucro_potencial = 0.0
    custo_recorrente = 0.0
    detalhados = []

    for imovel in imoveis:
        investido = parse_monetario(imovel.get("total_investido"))
        venda_estimada = parse_monetario(imovel.get("valor_venda_estimado"))
        total_investido += investido

        detalhe = dict(imovel)
        if venda_estimada > 0:
            total_investido_com_estimativa += investido
            estimativa = estimar_lucro_venda(venda_estimada, investido)
            lucro_potencial += estimativa["lucro_liquido"]
            detalhe["lucro_liquido_estimado"] = estimativa["lucro_liquido"]
            detalhe["roi_estimado"] = estimativa["roi"]
        else:
            detalhe["lucro_liquido_estimado"] = 0
            detalhe["roi_estimado"] = 0
        detalhados.append(detalhe)

        custo_recorrente += (
            parse_monetario(imovel.get("condominio_estimado"))
            + parse_monetario(imovel.get("iptu_estimado"))
        )

    roi_medio = 0
    if total_investido_com_estimativa > 0:
        roi_medio = round(lucro_potencial / total_investido_com_estimativa * 100, 1)

    logger.info(f"KPIs da carteira calculados para {len(imoveis)} imoveis")

    return {
        "kpis": {
            "total_investido": arredondar(total_investido),
            "lucro_potencial": arredondar(lucro_potencial),
            "roi_medio": roi_medio,
            "total_imoveis": len(imoveis),
            "custo_recorrente_mensal": arredondar(custo_recorrente)
        },
        "imoveis": detalhados
    }


def calc_kpis_cliente(imoveis: List[Dict]) -> Dict:
    """
    KPIs do dashboard de um cliente.

    Prioriza lucro_estimado / roi_estimado gravados (nao zero); sem eles,
    estima a partir da venda e do investido (valor_compra + total_custos).
    """
    total_investido = 0.0
    total_lucro = 0.0
    total_roi = 0.0
    count_roi = 0
    custos_mensais = 0.0

    for imovel in imoveis:
        investido = (
            parse_monetario(imovel.get("valor_compra"))
            + parse_monetario(imovel.get("total_custos"))
        )
        total_investido += investido

        lucro_liquido = parse_monetario(imovel.get("lucro_estimado"))
        if not lucro_liquido:
            venda = parse_monetario(imovel.get("valor_venda_estimado"))
            if venda > 0:
                lucro_liquido = estimar_lucro_venda(venda, investido)["lucro_liquido"]
        total_lucro += lucro_liquido

        roi = parse_percentual(imovel.get("roi_estimado"))
        if roi:
            total_roi += roi
            count_roi += 1
        elif investido > 0 and lucro_liquido != 0:
            total_roi += lucro_liquido / investido * 100
            count_roi += 1

        custos_mensais += (
            parse_monetario(imovel.get("condominio_estimado"))
            + parse_monetario(imovel.get("iptu_estimado"))
        )

    return {
        "totalInvestido": arredondar(total_investido),
        "totalLucroEstimado": arredondar(total_lucro),
        "roiMedio": arredondar(total_roi / count_roi) if count_roi > 0 else 0,
        "totalImoveis": len(imoveis),
        "custosMensaisRecorrentes": arredondar(custos_mensais)
    }
