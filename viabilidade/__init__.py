# Calculadora de Viabilidade de Arremate
# Nucleo puro: sem I/O e sem estado entre chamadas

from .modelos import (
    EntradaViabilidade, ResultadoAquisicao, ProjecaoHorizonte, ResultadoViabilidade,
    TipoPagamento, BaseITBI
)
from .calculadora import arredondar, resolver_aquisicao, projetar_horizonte, calcular_viabilidade
from .conversao import parse_monetario, parse_percentual, parse_booleano, normalizar_formulario
from .carteira import (
    estimar_lucro_venda, estimativa_carteira, registro_carteira, custos_iniciais,
    calc_kpis_carteira, calc_kpis_cliente
)

__version__ = "1.0.0"

__all__ = [
    # Modelos
    'EntradaViabilidade', 'ResultadoAquisicao', 'ProjecaoHorizonte', 'ResultadoViabilidade',
    'TipoPagamento', 'BaseITBI',
    # Calculadora
    'arredondar', 'resolver_aquisicao', 'projetar_horizonte', 'calcular_viabilidade',
    # Conversao
    'parse_monetario', 'parse_percentual', 'parse_booleano', 'normalizar_formulario',
    # Carteira
    'estimar_lucro_venda', 'estimativa_carteira', 'registro_carteira', 'custos_iniciais',
    'calc_kpis_carteira', 'calc_kpis_cliente'
]
