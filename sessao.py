import dataclasses
from typing import Dict, List, Optional

from config import MEU_ID, NOME_MEU, TOTAL_JOGADORES
from logica import (
    ENGINES,
    Pattern,
    analyze,
    derive_history,
    key_player_for_round,
    opponent_map,
)
from modelos import FullRoundHistoryEntry, KeyMatchup, Matchup, Player, RoundHistoryEntry

MODO_SIMPLES = "simples"
MODO_COMPLETO = "completo"
MODOS = (MODO_SIMPLES, MODO_COMPLETO)


class ErroSessao(ValueError):
    """Ação inválida do usuário; a mensagem vai direto para o Discord."""


# ---------------------- Rascunho de rodada (modo completo) ----------------------
class RascunhoRodada:
    """Confrontos escolhidos no menu, antes de confirmar a rodada."""

    def __init__(self, rodada, jogadores_ids):
        self.rodada = rodada
        self.jogadores_ids = list(jogadores_ids)
        self.pares: Dict[int, int] = {}

    def sem_par(self):
        return [j for j in self.jogadores_ids if j not in self.pares]

    def completo(self):
        return bool(self.jogadores_ids) and not self.sem_par()

    def parear(self, a, b):
        if a == b:
            raise ErroSessao("Um jogador não pode enfrentar a si mesmo.")
        for j in (a, b):
            if j not in self.jogadores_ids:
                raise ErroSessao(f"Jogador {j} não está nesta partida.")
            if j in self.pares:
                raise ErroSessao(f"Jogador {j} já tem confronto nesta rodada.")
        self.pares[a] = b
        self.pares[b] = a

    def limpar(self):
        self.pares = {}

    def finalizar(self) -> FullRoundHistoryEntry:
        if not self.completo():
            raise ErroSessao("Ainda há jogadores sem confronto nesta rodada.")
        matchups = []
        feitos = set()
        for j in self.jogadores_ids:
            if j in feitos:
                continue
            oponente = self.pares[j]
            matchups.append(Matchup(player1_id=j, player2_id=oponente))
            feitos.update((j, oponente))
        opponent_map(matchups)
        return FullRoundHistoryEntry(round=self.rodada, matchups=tuple(matchups))


# ---------------------- Sessão por servidor ----------------------
class Sessao:
    def __init__(self, modo=MODO_SIMPLES, motor="duplo"):
        if modo not in MODOS:
            raise ErroSessao(f"Modo desconhecido: {modo}")
        if motor not in ENGINES:
            raise ErroSessao(f"Motor desconhecido: {motor}")
        self.modo = modo
        self.motor = motor
        self.reset()

    def reset(self):
        self.players: List[Player] = [Player(MEU_ID, NOME_MEU)] if self.modo == MODO_SIMPLES else []
        self.historico: List[RoundHistoryEntry] = []
        self.historico_completo: List[FullRoundHistoryEntry] = []
        self.rodada_atual = 1
        self.configurada = False
        self.rascunho: Optional[RascunhoRodada] = None

    def mudar_modo(self, modo):
        if modo not in MODOS:
            raise ErroSessao(f"Modo desconhecido: {modo}")
        if modo != self.modo:
            self.modo = modo
            self.reset()

    def mudar_motor(self, motor):
        if motor not in ENGINES:
            raise ErroSessao(f"Motor desconhecido: {motor}")
        self.motor = motor

    # -------- jogadores --------
    def jogador(self, player_id) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def nome(self, player_id):
        p = self.jogador(player_id)
        return p.name if p else f"ID: {player_id}"

    def buscar(self, nome):
        alvo = nome.strip().lower()
        return next((p for p in self.players if p.name.lower() == alvo), None)

    def obter_ou_criar(self, nome) -> Player:
        nome = nome.strip()
        if not nome:
            raise ErroSessao("Nome de jogador vazio.")
        existente = self.buscar(nome)
        if existente:
            return existente
        novo = Player(max((p.id for p in self.players), default=0) + 1, nome)
        self.players.append(novo)
        return novo

    def _id_provisorio(self, nome, novos):
        existente = self.buscar(nome)
        if existente:
            return existente.id
        # nomes ainda não cadastrados ganham ids negativos só para a checagem
        return novos.setdefault(nome.strip().lower(), -(len(novos) + 1))

    # -------- modo simples --------
    def jogador_chave(self):
        if self.modo != MODO_SIMPLES:
            return None
        chave_id = key_player_for_round(self.rodada_atual, self.historico)
        if chave_id is None:
            return None
        return self.jogador(chave_id) or Player(chave_id, "Jogador desconhecido")

    def _checar_confrontos(self, nome_oponente, chave, nome_oponente_chave):
        """Cada jogador tem um único adversário na rodada."""
        novos = {}
        oponente_id = self._id_provisorio(nome_oponente, novos)
        pares = [Matchup(MEU_ID, oponente_id)]
        if chave:
            oponente_chave_id = self._id_provisorio(nome_oponente_chave, novos)
            # o jogador-chave jogou contra mim: o par já está registrado
            if not (oponente_id == chave.id and oponente_chave_id == MEU_ID):
                pares.append(Matchup(chave.id, oponente_chave_id))
        try:
            opponent_map(pares)
        except ValueError:
            raise ErroSessao(
                "Os confrontos informados não batem: cada jogador enfrenta um único adversário por rodada."
            ) from None

    def registrar_rodada(self, nome_oponente, nome_oponente_chave=None) -> RoundHistoryEntry:
        if self.modo != MODO_SIMPLES:
            raise ErroSessao("Use `/confronto` no modo completo.")
        if not nome_oponente or not nome_oponente.strip():
            raise ErroSessao("Informe o nome do seu oponente.")

        chave = self.jogador_chave()
        if chave and not (nome_oponente_chave and nome_oponente_chave.strip()):
            raise ErroSessao(f"Informe também o oponente de **{chave.name}** nesta rodada.")
        existente = self.buscar(nome_oponente)
        if existente and existente.id == MEU_ID:
            raise ErroSessao("Você não pode enfrentar a si mesmo.")
        if chave and nome_oponente_chave.strip().lower() == chave.name.lower():
            raise ErroSessao(f"**{chave.name}** não pode enfrentar a si mesmo.")
        self._checar_confrontos(nome_oponente, chave, nome_oponente_chave)

        oponente = self.obter_ou_criar(nome_oponente)
        key_matchup = None
        if chave:
            oponente_chave = self.obter_ou_criar(nome_oponente_chave)
            key_matchup = KeyMatchup(player1_id=chave.id, player2_id=oponente_chave.id)

        entrada = RoundHistoryEntry(
            round=self.rodada_atual,
            my_opponent_id=oponente.id,
            key_matchup=key_matchup,
        )
        self.historico.append(entrada)
        self.rodada_atual += 1
        return entrada

    # -------- modo completo --------
    def configurar(self, nomes):
        if self.modo != MODO_COMPLETO:
            raise ErroSessao("Mude para o modo completo com `/modo completo`.")
        nomes = [n.strip() for n in nomes]
        esperados = TOTAL_JOGADORES - 1
        if len(nomes) != esperados or any(not n for n in nomes):
            raise ErroSessao(f"Devem ser **{esperados} nomes** além de você.")
        minusculos = {n.lower() for n in nomes}
        if len(minusculos) != esperados or NOME_MEU.lower() in minusculos:
            raise ErroSessao(f"Devem ser **{esperados} nomes únicos** (e diferentes de \"{NOME_MEU}\").")
        self.reset()
        self.players = [Player(MEU_ID, NOME_MEU)] + [Player(i + 2, n) for i, n in enumerate(nomes)]
        self.configurada = True

    def novo_rascunho(self) -> RascunhoRodada:
        if self.modo != MODO_COMPLETO or not self.configurada:
            raise ErroSessao("Cadastre os jogadores primeiro com `/analise`.")
        self.rascunho = RascunhoRodada(self.rodada_atual, [p.id for p in self.players])
        return self.rascunho

    def confirmar_rodada(self, rascunho):
        if rascunho.rodada != self.rodada_atual:
            raise ErroSessao(f"Este menu é da rodada {rascunho.rodada}; a rodada atual é {self.rodada_atual}.")
        entrada = rascunho.finalizar()
        self.historico_completo.append(entrada)
        self.rodada_atual += 1
        self.rascunho = None
        return entrada

    # -------- previsão --------
    def historico_para_previsao(self):
        if self.modo == MODO_SIMPLES:
            return list(self.historico)
        return derive_history(self.historico_completo, MEU_ID)

    def analisar(self):
        historico = self.historico_para_previsao()
        analise = analyze(self.rodada_atual, historico)
        if self.motor != "duplo":
            # o motor simples não detecta padrão
            previsto = ENGINES[self.motor](self.rodada_atual, historico)
            analise = dataclasses.replace(
                analise, pattern=Pattern.UNKNOWN, predicted_id=previsto, tentative=False
            )
        return analise

    def oponente_previsto(self):
        return self.jogador(self.analisar().predicted_id)


# Guardar dados por servidor
sessoes: Dict[int, Sessao] = {}


def obter_sessao(servidor_id):
    if servidor_id not in sessoes:
        sessoes[servidor_id] = Sessao()
    return sessoes[servidor_id]
