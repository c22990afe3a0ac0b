"""
API Flask da Calculadora de Viabilidade de Arremate
Calculo de viabilidade, calculos salvos e KPIs da carteira
"""

import os
import json
import logging
from typing import Dict

from flask import Flask, request, jsonify
from flask_cors import CORS
from dotenv import load_dotenv
from supabase import create_client, Client

from viabilidade import (
    __version__,
    calcular_viabilidade,
    normalizar_formulario,
    registro_carteira,
    custos_iniciais,
    calc_kpis_carteira,
    calc_kpis_cliente,
)
from viabilidade.conversao import CAMPOS_CONTROLE

load_dotenv()

# Configuração de logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

# Configuração da aplicação
app = Flask(__name__)
# CORS: permitir configurar origens via env (CORS_ALLOWED_ORIGINS="http://localhost:3000,https://app.example.com")
_allowed = os.getenv("CORS_ALLOWED_ORIGINS")
if _allowed:
    _origins = [o.strip() for o in _allowed.split(',') if o.strip()]
    CORS(app, resources={r"/*": {"origins": _origins}})
else:
    CORS(app)

# Configuração Supabase (opcional)
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_SERVICE_KEY")
supabase = None

if not SUPABASE_URL or not SUPABASE_KEY:
    logging.warning("SUPABASE_URL/SUPABASE_SERVICE_KEY não configurados. API funcionará sem persistência.")
else:
    try:
        supabase: Client = create_client(SUPABASE_URL, SUPABASE_KEY)
        logging.info("Supabase conectado com sucesso")
    except Exception as e:
        logging.warning(f"Supabase indisponível: {e}. API funcionará sem persistência.")

TABELA_CALCULOS = "saved_calculations"
TABELA_CARTEIRA = "carteira_imoveis"
TABELA_CUSTOS = "carteira_custos"

# Segurança e controle
API_TOKEN = os.getenv("VIABILIDADE_API_TOKEN")  # Se definido, exige header x-api-key
MAX_BODY_KB = int(os.getenv("MAX_BODY_KB", "256"))
DEBUG_SAFE_ERRORS = os.getenv("VIABILIDADE_DEBUG", "0").lower() in ("1", "true", "yes")


@app.before_request
def _pre_checks():
    # Limitar tamanho do corpo
    cl = request.content_length or 0
    if cl > MAX_BODY_KB * 1024:
        return jsonify({"erro": "Payload muito grande"}), 413
    # Autenticação via token (opcional)
    if API_TOKEN and request.method == "POST":
        if request.headers.get("x-api-key") != API_TOKEN:
            return jsonify({"erro": "Não autorizado"}), 401


def _dados_requisicao() -> Dict:
    """Corpo JSON ou, na falta dele, campos do formulário"""
    dados = request.get_json(silent=True)
    if dados is None:
        dados = request.form.to_dict()
    return dados


def _erro_interno(mensagem: str, e: Exception):
    logger.error(f"{mensagem}: {str(e)}")
    resposta = {"erro": mensagem}
    if DEBUG_SAFE_ERRORS:
        resposta["detalhes"] = str(e)
    return jsonify(resposta), 500


def _sem_persistencia():
    return jsonify({"erro": "Persistência indisponível"}), 503


# ==================== API ENDPOINTS ====================

@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({
        "status": "ok",
        "service": "viabilidade-leilao",
        "version": __version__
    })


@app.route('/calculadora', methods=['POST'])
def calcular():
    """
    Calcula a viabilidade do arremate.

    Body (JSON ou formulário):
    {
        "valorArrematado": "200.000,00",
        "itbi": "3",
        "tipoPagamento": "vista",
        "valorVendaFinal": "300000",
        "aliquotaIRGC": "15",
        ... (demais campos da calculadora)
    }
    """
    dados = _dados_requisicao()
    if not isinstance(dados, dict) or not dados:
        return jsonify({"erro": "Dados do cálculo não fornecidos"}), 400

    try:
        entrada = normalizar_formulario(dados)
        resultado = calcular_viabilidade(entrada)

        logger.info(
            f"Cálculo concluído: investimento base R$ {resultado.investimento_base:,.2f}, "
            f"ROI 4 meses {resultado.projecao(4).roi_liquido}%"
        )

        return jsonify({
            "resultado": resultado.to_dict(),
            "entrada": entrada
        }), 200

    except Exception as e:
        return _erro_interno("Erro ao calcular viabilidade", e)


@app.route('/calculadora/salvar', methods=['POST'])
def salvar_calculo():
    """
    Salva a entrada bruta do cálculo (não o resultado).

    Body: campos da calculadora + "calculationName" (obrigatório) e
    "calculationId" (opcional, atualiza um cálculo existente).
    """
    dados = _dados_requisicao()
    if not isinstance(dados, dict):
        return jsonify({"erro": "Dados do cálculo não fornecidos"}), 400

    nome = str(dados.get("calculationName") or "").strip()
    if not nome:
        return jsonify({"erro": "O nome do cálculo é obrigatório."}), 400

    if supabase is None:
        return _sem_persistencia()

    calculo_id = dados.get("calculationId")
    registro = {
        "name": nome,
        "data": json.dumps({k: v for k, v in dados.items() if k not in CAMPOS_CONTROLE})
    }

    try:
        if calculo_id:
            result = supabase.table(TABELA_CALCULOS).update(registro).eq("id", calculo_id).execute()
            if not result.data:
                return jsonify({"erro": "Cálculo não encontrado"}), 404
        else:
            result = supabase.table(TABELA_CALCULOS).insert(registro).execute()

        salvo = result.data[0] if result.data else {}
        logger.info(f"Cálculo salvo: {nome}")

        return jsonify({"status": "salvo", "id": salvo.get("id", calculo_id)}), 200

    except Exception as e:
        return _erro_interno("Erro ao salvar o cálculo", e)


@app.route('/carteira/importar/<calculo_id>', methods=['POST'])
def importar_calculo(calculo_id):
    """Importa um cálculo salvo para a carteira (estimativa de 4 meses)"""
    if supabase is None:
        return _sem_persistencia()

    try:
        result = supabase.table(TABELA_CALCULOS).select("*").eq("id", calculo_id).limit(1).execute()
        if not result.data:
            return jsonify({"erro": "Cálculo não encontrado"}), 404

        calculo = result.data[0]
        dados = calculo["data"]
        if isinstance(dados, str):
            dados = json.loads(dados)

        registro = registro_carteira(dados, calculo.get("name"))
        inserido = supabase.table(TABELA_CARTEIRA).insert(registro).execute()
        imovel_id = inserido.data[0]["id"]

        custos = custos_iniciais(dados, registro["data_aquisicao"])
        for custo in custos:
            custo["imovel_id"] = imovel_id
        if custos:
            supabase.table(TABELA_CUSTOS).insert(custos).execute()

        logger.info(f"Cálculo {calculo_id} importado para a carteira (imóvel {imovel_id})")

        return jsonify({
            "success": True,
            "imovelId": imovel_id,
            "registro": registro,
            "custos": len(custos)
        }), 200

    except Exception as e:
        return _erro_interno("Erro ao importar cálculo", e)


@app.route('/carteira/kpis', methods=['POST'])
def kpis_carteira():
    """
    KPIs da carteira do assessor.

    Body: {"imoveis": [{"total_investido": ..., "valor_venda_estimado": ..., ...}]}
    """
    dados = request.get_json(silent=True) or {}
    imoveis = dados.get("imoveis")
    if not isinstance(imoveis, list):
        return jsonify({"erro": "Lista de imóveis não fornecida"}), 400

    try:
        return jsonify(calc_kpis_carteira(imoveis)), 200
    except Exception as e:
        return _erro_interno("Erro ao calcular KPIs da carteira", e)


@app.route('/clientes/kpis', methods=['POST'])
def kpis_cliente():
    """
    KPIs do dashboard de um cliente.

    Body: {"imoveis": [{"valor_compra": ..., "total_custos": ..., "lucro_estimado": ..., ...}]}
    """
    dados = request.get_json(silent=True) or {}
    imoveis = dados.get("imoveis")
    if not isinstance(imoveis, list):
        return jsonify({"success": False, "erro": "Lista de imóveis não fornecida"}), 400

    try:
        return jsonify({"success": True, "kpis": calc_kpis_cliente(imoveis)}), 200
    except Exception as e:
        return _erro_interno("Erro ao obter dashboard", e)


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('DEBUG', 'false').lower() == 'true'

    app.run(host='0.0.0.0', port=port, debug=debug)
