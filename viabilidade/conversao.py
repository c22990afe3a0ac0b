"""
Tools de Conversao - Valores de Formulario para a Calculadora
Campos chegam como texto (BRL "1.234,56" ou "1234.56") e viram numeros
"""

import re
from typing import Dict

from .modelos import CAMPOS_FORMULARIO, CAMPOS_TEXTO

_NUMERO_INICIAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)")

VALORES_VERDADEIROS = ("1", "on", "true")

# Campos do formulario que nao pertencem ao calculo
CAMPOS_CONTROLE = ("calculationName", "calculationId", "editingName")

_ATRIBUTO_PARA_CAMPO = {nome: campo for campo, nome in CAMPOS_FORMULARIO.items()}


def _float_prefixo(texto: str) -> float:
    """Le o numero no inicio do texto ("12.5abc" -> 12.5); sem numero -> 0"""
    match = _NUMERO_INICIAL.match(texto)
    if not match:
        return 0.0
    return float(match.group(0))


def parse_monetario(valor) -> float:
    """
    Converte valor monetario em float.

    Com virgula assume BRL ("R$ 1.234,56" -> 1234.56); sem virgula assume
    formato padrao ("1234.56", vindo de inputs hidden). Invalido -> 0.
    """
    if valor is None or valor == "":
        return 0.0
    if isinstance(valor, bool):
        return float(valor)
    if isinstance(valor, (int, float)):
        return float(valor)

    texto = str(valor).strip()

    if "," in texto:
        # Remove pontos de milhar e simbolos, virgula vira ponto decimal
        limpo = re.sub(r"[^\d,-]", "", texto)
        return _float_prefixo(limpo.replace(",", ".", 1))

    limpo = re.sub(r"[^\d.-]", "", texto)
    return _float_prefixo(limpo)


def parse_percentual(valor) -> float:
    """Percentual em texto ("15,5%") -> 15.5"""
    if isinstance(valor, str):
        valor = valor.replace("%", "")
    return parse_monetario(valor)


def parse_booleano(valor) -> bool:
    """Checkbox: True, "1", "on" ou "true" marcam o campo"""
    if isinstance(valor, bool):
        return valor
    if valor is None:
        return False
    return str(valor).strip().lower() in VALORES_VERDADEIROS


def normalizar_formulario(dados: Dict) -> Dict:
    """
    Converte o corpo do formulario na entrada numerica da calculadora.

    - Campos numericos passam por parse_monetario
    - tipoPagamento e itbiBase continuam texto
    - incluirLeiloeiro segue a regra de checkbox
    - aliquotaIRGC chega em percentual (15) e vira fracao (0.15)
    - Campos em branco sao omitidos, valendo o padrao da calculadora

    Nao altera o dicionario recebido.

    Returns:
        Dict com chaves camelCase apenas dos campos do calculo
    """
    entrada = {}

    for chave, valor in (dados or {}).items():
        if chave in CAMPOS_CONTROLE:
            continue

        campo = _ATRIBUTO_PARA_CAMPO.get(chave, chave)
        if campo not in CAMPOS_FORMULARIO:
            continue

        nome = CAMPOS_FORMULARIO[campo]

        if nome == "incluir_leiloeiro":
            entrada[campo] = parse_booleano(valor)
        elif valor is None or (isinstance(valor, str) and not valor.strip()):
            continue
        elif nome in CAMPOS_TEXTO:
            entrada[campo] = str(valor).strip().lower()
        else:
            entrada[campo] = parse_monetario(valor)

    if entrada.get("aliquotaIRGC"):
        entrada["aliquotaIRGC"] = entrada["aliquotaIRGC"] / 100

    return entrada
