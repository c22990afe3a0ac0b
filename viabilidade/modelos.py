"""
Modelos de Dados - Entrada e Resultado da Calculadora de Viabilidade
Registros planos, sem estado entre chamadas
"""

import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, Optional


class TipoPagamento(Enum):
    VISTA = "vista"
    FINANCIADO = "financiado"


class BaseITBI(Enum):
    """Valor usado como base de calculo do ITBI"""
    AVALIACAO = "avaliacao"   # padrao, mais comum
    ARREMATE = "arremate"     # varia por municipio


# Faixas da assessoria
ASSESSORIA_THRESHOLD_PADRAO = 120000
ASSESSORIA_FEE_BELOW_PADRAO = 6000
ASSESSORIA_FEE_ABOVE_PERCENT_PADRAO = 5

ITBI_FINANCIADO_PERCENT_PADRAO = 0.5
CORRETAGEM_PERCENT_PADRAO = 6
ALIQUOTA_IRGC_PADRAO = 0.15       # 15% - Pessoa Fisica
COMISSAO_LEILOEIRO = 0.05         # 5% sobre o arremate

# Horizontes projetados (meses); 4 e 8 usam a venda curta, 12 e 16 a venda longa
HORIZONTES_CURTOS = (4, 8)
HORIZONTES_LONGOS = (12, 16)


# Nome do campo no formulario -> atributo
CAMPOS_FORMULARIO = {
    "valorArrematado": "valor_arrematado",
    "valorAvaliacao": "valor_avaliacao",
    "itbi": "itbi",
    "itbiBase": "itbi_base",
    "tipoPagamento": "tipo_pagamento",
    "valorEntrada": "valor_entrada",
    "valorFinanciado": "valor_financiado",
    "itbiFinanciadoPercent": "itbi_financiado_percent",
    "custosCartorarios": "custos_cartorarios",
    "reforma": "reforma",
    "debitosPendentes": "debitos_pendentes",
    "custosAdicionais": "custos_adicionais",
    "custoDesocupacao": "custo_desocupacao",
    "incluirLeiloeiro": "incluir_leiloeiro",
    "valorAssessoria": "valor_assessoria",
    "assessoriaThreshold": "assessoria_threshold",
    "assessoriaFeeBelow": "assessoria_fee_below",
    "assessoriaFeeAbovePercent": "assessoria_fee_above_percent",
    "condominioMensal": "condominio_mensal",
    "iptuMensal": "iptu_mensal",
    "iptuAnual": "iptu_anual",
    "taxaSeguroCaixa": "taxa_seguro_caixa",
    "taxaSeguroMensal": "taxa_seguro_mensal",
    "custoMensalFinanciamento": "custo_mensal_financiamento",
    "valorVendaFinal": "valor_venda_final",
    "valorVendaLongo": "valor_venda_longo",
    "corretagemPercent": "corretagem_percent",
    "aliquotaIRGC": "aliquota_irgc",
}

CAMPOS_TEXTO = ("tipo_pagamento", "itbi_base")


def _numero(valor, padrao: float = 0.0) -> float:
    """Converte para float; qualquer valor invalido vira o padrao"""
    if valor is None or valor == "":
        return padrao
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        return padrao
    if math.isnan(numero) or math.isinf(numero):
        return padrao
    return numero


def _numero_opcional(valor) -> Optional[float]:
    if valor is None or valor == "":
        return None
    return _numero(valor)


def _enum_valor(enum_cls, valor, padrao: Enum) -> str:
    try:
        return enum_cls(str(valor).strip().lower()).value
    except ValueError:
        return padrao.value


@dataclass
class EntradaViabilidade:
    """
    Dados de entrada de um calculo de viabilidade de arremate.

    Campos numericos ausentes valem 0. Campos Optional distinguem
    "nao informado" (None) de zero, pois a regra muda conforme o caso.
    """
    # Aquisicao
    valor_arrematado: float = 0.0
    valor_avaliacao: float = 0.0
    itbi: float = 0.0                                # % aliquota cheia
    itbi_base: str = BaseITBI.AVALIACAO.value
    tipo_pagamento: str = TipoPagamento.VISTA.value
    valor_entrada: float = 0.0
    valor_financiado: Optional[float] = None         # None -> arrematado - entrada
    itbi_financiado_percent: Optional[float] = None  # None ou 0 -> 0.5

    # Custos iniciais fixos
    custos_cartorarios: float = 0.0
    reforma: float = 0.0
    debitos_pendentes: float = 0.0
    custos_adicionais: float = 0.0
    custo_desocupacao: float = 0.0
    incluir_leiloeiro: bool = False

    # Assessoria
    valor_assessoria: Optional[float] = None         # > 0 sobrescreve a faixa
    assessoria_threshold: float = ASSESSORIA_THRESHOLD_PADRAO
    assessoria_fee_below: float = ASSESSORIA_FEE_BELOW_PADRAO
    assessoria_fee_above_percent: float = ASSESSORIA_FEE_ABOVE_PERCENT_PADRAO

    # Custos mensais
    condominio_mensal: float = 0.0
    iptu_mensal: Optional[float] = None
    iptu_anual: Optional[float] = None
    taxa_seguro_caixa: float = 0.0                   # valor fixo, nao multiplica por meses
    taxa_seguro_mensal: Optional[float] = None
    custo_mensal_financiamento: float = 0.0

    # Venda
    valor_venda_final: float = 0.0
    valor_venda_longo: Optional[float] = None        # None ou <= 0 -> valor_venda_final
    corretagem_percent: Optional[float] = None       # None ou 0 -> 6
    aliquota_irgc: Optional[float] = None            # fracao decimal; None -> 0.15

    @property
    def financiado(self) -> bool:
        return self.tipo_pagamento == TipoPagamento.FINANCIADO.value

    @classmethod
    def from_dict(cls, dados: Dict) -> "EntradaViabilidade":
        """
        Monta a entrada a partir do dicionario do formulario/JSON.

        Aceita as chaves camelCase do formulario ou os nomes dos atributos.
        Chaves desconhecidas sao ignoradas e valores invalidos viram 0.
        """
        dados = dados or {}
        atributos = {f.name: f for f in fields(cls)}
        valores = {}

        for chave, valor in dados.items():
            nome = CAMPOS_FORMULARIO.get(chave, chave)
            if nome not in atributos:
                continue

            if nome == "tipo_pagamento":
                valores[nome] = _enum_valor(TipoPagamento, valor, TipoPagamento.VISTA)
            elif nome == "itbi_base":
                valores[nome] = _enum_valor(BaseITBI, valor, BaseITBI.AVALIACAO)
            elif nome == "incluir_leiloeiro":
                valores[nome] = bool(valor)
            elif atributos[nome].default is None:
                valores[nome] = _numero_opcional(valor)
            else:
                valores[nome] = _numero(valor, atributos[nome].default)

        return cls(**valores)

    def to_dict(self) -> Dict:
        """Entrada no formato camelCase do formulario"""
        return {chave: getattr(self, nome) for chave, nome in CAMPOS_FORMULARIO.items()}


@dataclass(frozen=True)
class ResultadoAquisicao:
    investimento_base: float
    valor_assessoria: float
    valor_itbi: float
    valor_leiloeiro: float


@dataclass(frozen=True)
class ProjecaoHorizonte:
    meses: int
    valor_venda: float
    custos_periodo: float
    custo_mensal_recorrente: float
    investimento_total: float
    resultado_bruto: float
    resultado_liquido: float
    roi_liquido: float
    imposto_devido: float
    tributacao_entrada: float
    imposto_lucro: float

    def to_dict(self) -> Dict:
        return {
            "custosPeriodo": self.custos_periodo,
            "custoMensalRecorrente": self.custo_mensal_recorrente,
            "investimentoTotal": self.investimento_total,
            "resultadoBruto": self.resultado_bruto,
            "resultadoLiquido": self.resultado_liquido,
            "roiLiquido": self.roi_liquido,
            "impostoDevido": self.imposto_devido,
            "tributacaoEntrada": self.tributacao_entrada,
            "impostoLucro": self.imposto_lucro,
            "valorVenda": self.valor_venda,
        }


@dataclass(frozen=True)
class ResultadoViabilidade:
    investimento_base: float
    corretagem: float                 # referencia: corretagem da venda curta
    valor_assessoria: float
    valor_itbi: float
    valor_leiloeiro: float
    projecoes: Dict[int, ProjecaoHorizonte] = field(default_factory=dict)

    def projecao(self, meses: int) -> ProjecaoHorizonte:
        return self.projecoes[meses]

    @property
    def common(self) -> Dict:
        return {
            "investimentoBase": self.investimento_base,
            "corretagem": self.corretagem,
            "valorAssessoria": self.valor_assessoria,
            "valorITBI": self.valor_itbi,
            "valorLeiloeiro": self.valor_leiloeiro,
        }

    def to_dict(self) -> Dict:
        resultado = {"common": self.common}
        for meses, projecao in sorted(self.projecoes.items()):
            resultado[f"projection{meses}Months"] = projecao.to_dict()
        return resultado
