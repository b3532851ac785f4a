import pytest

from logica import Pattern
from modelos import KeyMatchup, Matchup
from sessao import (
    MODO_COMPLETO,
    MODO_SIMPLES,
    ErroSessao,
    RascunhoRodada,
    Sessao,
    obter_sessao,
    sessoes,
)

NOMES = ["Vale", "Karina", "Layla", "Lukas", "Kagura", "Nana", "Miya"]


class TestJogadores:
    def test_starts_with_me(self):
        s = Sessao()
        assert [p.name for p in s.players] == ["Você"]
        assert s.rodada_atual == 1

    def test_get_or_create_is_case_insensitive(self):
        s = Sessao()
        a = s.obter_ou_criar("  Layla ")
        b = s.obter_ou_criar("LAYLA")
        assert a == b
        assert a.id == 2
        assert a.name == "Layla"
        assert s.obter_ou_criar("Miya").id == 3

    def test_empty_name(self):
        with pytest.raises(ErroSessao):
            Sessao().obter_ou_criar("   ")

    def test_unknown_name(self):
        assert Sessao().nome(42) == "ID: 42"


class TestModoSimples:
    def test_register_round(self):
        s = Sessao()
        e = s.registrar_rodada("Layla")
        assert e.round == 1
        assert s.nome(e.my_opponent_id) == "Layla"
        assert s.rodada_atual == 2

    def test_key_player_required_in_round_two(self):
        s = Sessao()
        s.registrar_rodada("Layla")
        assert s.jogador_chave().name == "Layla"
        with pytest.raises(ErroSessao):
            s.registrar_rodada("Miya")
        assert s.rodada_atual == 2

        e = s.registrar_rodada("Miya", "Nana")
        assert e.key_matchup == KeyMatchup(s.buscar("Layla").id, s.buscar("Nana").id)

    def test_cannot_face_myself(self):
        s = Sessao()
        with pytest.raises(ErroSessao):
            s.registrar_rodada("você")

    def test_key_player_cannot_face_themself(self):
        s = Sessao()
        s.registrar_rodada("Layla")
        with pytest.raises(ErroSessao):
            s.registrar_rodada("Miya", "layla")

    def test_pattern2_prediction(self):
        s = Sessao()
        s.registrar_rodada("Layla")
        s.registrar_rodada("Miya", "Nana")
        s.registrar_rodada("Kagura", "Vale")
        s.registrar_rodada("Lukas", "Karina")
        analise = s.analisar()
        assert analise.pattern is Pattern.PATTERN_2
        assert s.oponente_previsto().name == "Karina"

    def test_tentative_round_four(self):
        s = Sessao()
        s.registrar_rodada("Layla")
        s.registrar_rodada("Miya", "Nana")
        s.registrar_rodada("Kagura", "Vale")
        analise = s.analisar()
        assert analise.tentative
        assert s.oponente_previsto().name == "Layla"

    def test_single_engine(self):
        s = Sessao(motor="simples")
        s.registrar_rodada("Layla")
        s.registrar_rodada("Miya", "Nana")
        s.registrar_rodada("Kagura", "Vale")
        assert s.oponente_previsto() is None
        assert not s.analisar().tentative

    def test_key_opponent_cannot_be_my_opponent(self):
        s = Sessao()
        s.registrar_rodada("Layla")
        with pytest.raises(ErroSessao):
            s.registrar_rodada("Miya", "miya")
        assert s.rodada_atual == 2
        assert s.buscar("Miya") is None

    def test_facing_key_player_means_they_face_me(self):
        s = Sessao()
        s.registrar_rodada("Layla")
        with pytest.raises(ErroSessao):
            s.registrar_rodada("Layla", "Nana")
        assert s.buscar("Nana") is None

        e = s.registrar_rodada("Layla", "Você")
        assert e.my_opponent_id == s.buscar("Layla").id
        assert e.key_matchup == KeyMatchup(s.buscar("Layla").id, 1)

    def test_key_player_cannot_face_me_when_i_face_someone_else(self):
        s = Sessao()
        s.registrar_rodada("Layla")
        with pytest.raises(ErroSessao):
            s.registrar_rodada("Miya", "Você")

    def test_single_engine_reports_no_pattern(self):
        s = Sessao(motor="simples")
        s.registrar_rodada("Layla")
        s.registrar_rodada("Miya", "Nana")
        s.registrar_rodada("Kagura", "Vale")
        s.registrar_rodada("Lukas", "Karina")
        analise = s.analisar()
        assert analise.pattern is Pattern.UNKNOWN
        assert s.oponente_previsto().name == "Karina"

    def test_unknown_engine(self):
        with pytest.raises(ErroSessao):
            Sessao().mudar_motor("triplo")

    def test_reset(self):
        s = Sessao()
        s.registrar_rodada("Layla")
        s.reset()
        assert s.historico == []
        assert s.rodada_atual == 1
        assert len(s.players) == 1


class TestModoCompleto:
    def configurada(self):
        s = Sessao(modo=MODO_COMPLETO)
        s.configurar(NOMES)
        return s

    def test_mode_switch_resets(self):
        s = Sessao()
        s.registrar_rodada("Layla")
        s.mudar_modo(MODO_COMPLETO)
        assert s.players == []
        assert s.rodada_atual == 1
        s.mudar_modo(MODO_COMPLETO)
        assert s.modo == MODO_COMPLETO

    def test_setup(self):
        s = self.configurada()
        assert [p.id for p in s.players] == list(range(1, 9))
        assert s.players[0].name == "Você"
        assert s.configurada

    @pytest.mark.parametrize("nomes", [
        NOMES[:6],
        NOMES[:6] + ["vale"],
        NOMES[:6] + [" "],
        NOMES[:6] + ["Você"],
    ])
    def test_setup_rejects_bad_names(self, nomes):
        s = Sessao(modo=MODO_COMPLETO)
        with pytest.raises(ErroSessao):
            s.configurar(nomes)

    def test_setup_requires_full_mode(self):
        with pytest.raises(ErroSessao):
            Sessao().configurar(NOMES)

    def test_draft_requires_setup(self):
        with pytest.raises(ErroSessao):
            Sessao(modo=MODO_COMPLETO).novo_rascunho()

    def test_simple_round_rejected(self):
        with pytest.raises(ErroSessao):
            self.configurada().registrar_rodada("Vale")

    def test_confirm_rounds_and_predict(self):
        s = self.configurada()
        rodadas = [
            [(1, 2), (3, 4), (5, 6), (7, 8)],
            [(1, 3), (2, 7), (4, 5), (6, 8)],
            [(1, 4), (2, 8), (3, 5), (6, 7)],
            [(1, 5), (2, 6), (3, 8), (4, 7)],
        ]
        for pares in rodadas:
            r = s.novo_rascunho()
            for a, b in pares:
                r.parear(a, b)
            s.confirmar_rodada(r)

        assert s.rodada_atual == 5
        assert len(s.historico_completo) == 4
        assert s.analisar().pattern is Pattern.PATTERN_2
        assert s.oponente_previsto().id == 6

    def test_stale_draft_rejected(self):
        s = self.configurada()
        velho = s.novo_rascunho()
        novo = s.novo_rascunho()
        for a, b in [(1, 2), (3, 4), (5, 6), (7, 8)]:
            novo.parear(a, b)
            velho.parear(a, b)
        s.confirmar_rodada(novo)
        with pytest.raises(ErroSessao):
            s.confirmar_rodada(velho)


class TestRascunho:
    def test_pairing(self):
        r = RascunhoRodada(1, [1, 2, 3, 4])
        r.parear(1, 3)
        assert r.sem_par() == [2, 4]
        assert not r.completo()
        r.parear(4, 2)
        assert r.completo()
        entrada = r.finalizar()
        assert entrada.round == 1
        assert entrada.matchups == (Matchup(1, 3), Matchup(2, 4))

    def test_rejects_already_paired(self):
        r = RascunhoRodada(1, [1, 2, 3, 4])
        r.parear(1, 2)
        with pytest.raises(ErroSessao):
            r.parear(2, 3)

    def test_rejects_self_and_unknown(self):
        r = RascunhoRodada(1, [1, 2])
        with pytest.raises(ErroSessao):
            r.parear(1, 1)
        with pytest.raises(ErroSessao):
            r.parear(1, 9)

    def test_incomplete_finalize(self):
        r = RascunhoRodada(1, [1, 2, 3, 4])
        r.parear(1, 2)
        with pytest.raises(ErroSessao):
            r.finalizar()

    def test_clear(self):
        r = RascunhoRodada(1, [1, 2])
        r.parear(1, 2)
        r.limpar()
        assert r.sem_par() == [1, 2]


def test_session_per_server():
    sessoes.clear()
    a = obter_sessao(10)
    assert obter_sessao(10) is a
    assert obter_sessao(20) is not a
    assert a.modo == MODO_SIMPLES
    sessoes.clear()
