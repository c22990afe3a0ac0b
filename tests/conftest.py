"""
Fixtures compartilhadas: cliente Flask e Supabase em memoria
"""

import pytest

import main


class FakeResposta:
    def __init__(self, data):
        self.data = data


class FakeConsulta:
    """Imita o encadeamento table().insert/update/select().eq().execute()"""

    def __init__(self, banco, tabela, acao, payload=None):
        self.banco = banco
        self.tabela = tabela
        self.acao = acao
        self.payload = payload
        self.filtros = []

    def eq(self, coluna, valor):
        self.filtros.append((coluna, valor))
        return self

    def limit(self, n):
        return self

    def _filtrar(self, linhas):
        return [
            linha for linha in linhas
            if all(str(linha.get(coluna)) == str(valor) for coluna, valor in self.filtros)
        ]

    def execute(self):
        linhas = self.banco.tabelas.setdefault(self.tabela, [])

        if self.acao == "insert":
            novos = self.payload if isinstance(self.payload, list) else [self.payload]
            inseridos = []
            for novo in novos:
                linha = dict(novo, id=self.banco.proximo_id())
                linhas.append(linha)
                inseridos.append(linha)
            return FakeResposta(inseridos)

        if self.acao == "update":
            alvos = self._filtrar(linhas)
            for linha in alvos:
                linha.update(self.payload)
            return FakeResposta(alvos)

        return FakeResposta(self._filtrar(linhas))


class FakeTabela:
    def __init__(self, banco, nome):
        self.banco = banco
        self.nome = nome

    def insert(self, payload):
        return FakeConsulta(self.banco, self.nome, "insert", payload)

    def update(self, payload):
        return FakeConsulta(self.banco, self.nome, "update", payload)

    def select(self, colunas="*"):
        return FakeConsulta(self.banco, self.nome, "select")


class FakeSupabase:
    def __init__(self):
        self.tabelas = {}
        self._ultimo_id = 0

    def proximo_id(self):
        self._ultimo_id += 1
        return self._ultimo_id

    def table(self, nome):
        return FakeTabela(self, nome)


@pytest.fixture
def client(monkeypatch):
    """Fixture para cliente de teste Flask"""
    monkeypatch.setattr(main, "API_TOKEN", None)
    monkeypatch.setattr(main, "supabase", None)
    main.app.config['TESTING'] = True
    with main.app.test_client() as client:
        yield client


@pytest.fixture
def banco(monkeypatch):
    """Supabase em memoria no lugar do cliente real"""
    fake = FakeSupabase()
    monkeypatch.setattr(main, "supabase", fake)
    return fake


@pytest.fixture
def cenario_vista():
    """Cenario de referencia: arremate a vista de R$ 200 mil, assessoria fechada em R$ 6 mil"""
    return {
        "valorAssessoria": 6000,
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
        "corretagemPercent": 6,
    }
