import io
import logging
from typing import Optional

import discord
from discord import app_commands

from exportar import ARQUIVO_COMPLETO, ARQUIVO_SIMPLES, historico_completo_csv, historico_simples_csv
from logica import Pattern
from sessao import MODO_COMPLETO, MODO_SIMPLES, ErroSessao, Sessao, obter_sessao

log = logging.getLogger(__name__)

NOMES_PADRAO = {
    Pattern.PATTERN_1: "Padrão 1 (clássico)",
    Pattern.PATTERN_2: "Padrão 2 (novo)",
    Pattern.UNKNOWN: "Desconhecido",
}
SEM_PREVISAO = "Aleatório / Desconhecido"
LIMITE_MENSAGEM = 2000  # caracteres por mensagem no Discord
AVISO_CORTE = "\n_(rodadas mais antigas omitidas; use `/exportar` para o histórico completo)_"


# ---------------------- Textos ----------------------
def texto_previsao(sessao: Sessao) -> str:
    analise = sessao.analisar()
    oponente = sessao.jogador(analise.predicted_id)
    nome = f"**{oponente.name}**" if oponente else SEM_PREVISAO

    linhas = [f"🔮 **Rodada {analise.round}** (rodada {analise.effective_round} do ciclo)"]
    if sessao.motor == "duplo":
        linhas.append(f"Padrão: {NOMES_PADRAO[analise.pattern]}")
    linhas.append(f"Próximo oponente: {nome}")
    if analise.tentative:
        linhas.append("_(provisório: assumindo o Padrão 1 até o resultado desta rodada)_")
    if sessao.motor != "duplo":
        linhas.append(f"_(motor: {sessao.motor})_")

    chave = sessao.jogador_chave()
    if chave:
        linhas.append(f"👉 Ao registrar esta rodada, informe também o oponente de **{chave.name}**.")
    return "\n".join(linhas)


def texto_historico(sessao: Sessao) -> str:
    """Rodadas mais recentes primeiro, cortando as antigas no limite do Discord."""
    linhas = []
    if sessao.modo == MODO_SIMPLES:
        for h in reversed(sessao.historico):
            linha = f"Rodada {h.round}: {sessao.nome(h.my_opponent_id)}"
            if h.key_matchup:
                km = h.key_matchup
                linha += f"  ({sessao.nome(km.player1_id)} x {sessao.nome(km.player2_id)})"
            linhas.append(linha)
    else:
        for rodada in reversed(sessao.historico_completo):
            partes = ", ".join(f"{sessao.nome(m.player1_id)} x {sessao.nome(m.player2_id)}" for m in rodada.matchups)
            linhas.append(f"Rodada {rodada.round}: {partes}")
    if not linhas:
        return "📜 Nenhuma rodada registrada ainda."

    cabecalho = "📜 **Histórico**\n```\n"
    rodape = "\n```"
    espaco = LIMITE_MENSAGEM - len(cabecalho) - len(rodape) - len(AVISO_CORTE)

    cabem = []
    usado = 0
    for linha in linhas:
        custo = len(linha) + (1 if cabem else 0)
        if usado + custo > espaco:
            break
        cabem.append(linha)
        usado += custo
    if not cabem:
        cabem = [linhas[0][:espaco - 1] + "…"]

    texto = cabecalho + "\n".join(cabem) + rodape
    if len(cabem) < len(linhas):
        texto += AVISO_CORTE
    return texto


def arquivo_csv(sessao: Sessao) -> discord.File:
    if sessao.modo == MODO_COMPLETO:
        conteudo = historico_completo_csv(sessao.historico_completo, sessao.nome)
        nome = ARQUIVO_COMPLETO
    else:
        conteudo = historico_simples_csv(sessao.historico, sessao.nome)
        nome = ARQUIVO_SIMPLES
    return discord.File(io.BytesIO(conteudo.encode("utf-8")), filename=nome)


# ---------------------- Função principal ----------------------
def registrar_previsao(bot):
    tree = bot.tree

    @tree.command(name="modo", description="Escolhe o modo: previsão simples ou análise completa")
    @app_commands.choices(modo=[
        app_commands.Choice(name="Previsão simples", value=MODO_SIMPLES),
        app_commands.Choice(name="Análise completa", value=MODO_COMPLETO),
    ])
    async def modo(interaction: discord.Interaction, modo: app_commands.Choice[str]):
        sessao = obter_sessao(interaction.guild.id)
        sessao.mudar_modo(modo.value)
        log.info("Servidor %s mudou para o modo %s", interaction.guild.id, modo.value)
        extra = " Use `/analise` para cadastrar os jogadores." if modo.value == MODO_COMPLETO else ""
        await interaction.response.send_message(f"✅ Modo **{modo.name}** ativo.{extra}")

    @tree.command(name="motor", description="Escolhe o motor de previsão")
    @app_commands.choices(motor=[
        app_commands.Choice(name="Duplo (detecta o padrão)", value="duplo"),
        app_commands.Choice(name="Simples (só padrão novo)", value="simples"),
    ])
    async def motor(interaction: discord.Interaction, motor: app_commands.Choice[str]):
        sessao = obter_sessao(interaction.guild.id)
        sessao.mudar_motor(motor.value)
        await interaction.response.send_message(f"✅ Motor **{motor.name}** ativo.\n\n{texto_previsao(sessao)}")

    @tree.command(name="rodada", description="Registra o seu oponente desta rodada (modo simples)")
    @app_commands.describe(
        oponente="Quem você enfrentou nesta rodada",
        oponente_chave="Oponente do jogador-chave nesta rodada (quando pedido)",
    )
    async def rodada(interaction: discord.Interaction, oponente: str, oponente_chave: Optional[str] = None):
        sessao = obter_sessao(interaction.guild.id)
        try:
            entrada = sessao.registrar_rodada(oponente, oponente_chave)
        except ErroSessao as e:
            await interaction.response.send_message(f"❌ {e}", ephemeral=True)
            return

        await interaction.response.send_message(
            f"✅ Rodada {entrada.round} registrada: **{sessao.nome(entrada.my_opponent_id)}**\n\n"
            f"{texto_previsao(sessao)}"
        )

    @rodada.autocomplete("oponente")
    @rodada.autocomplete("oponente_chave")
    async def rodada_autocomplete(interaction: discord.Interaction, atual: str):
        sessao = obter_sessao(interaction.guild.id)
        atual = atual.strip().lower()
        return [
            app_commands.Choice(name=p.name, value=p.name)
            for p in sessao.players
            if atual in p.name.lower()
        ][:25]

    @tree.command(name="previsao", description="Mostra o provável próximo oponente")
    async def previsao(interaction: discord.Interaction):
        sessao = obter_sessao(interaction.guild.id)
        await interaction.response.send_message(texto_previsao(sessao))

    @tree.command(name="historico", description="Mostra as rodadas registradas")
    async def historico(interaction: discord.Interaction):
        sessao = obter_sessao(interaction.guild.id)
        await interaction.response.send_message(texto_historico(sessao))

    @tree.command(name="exportar", description="Exporta o histórico em CSV")
    async def exportar(interaction: discord.Interaction):
        sessao = obter_sessao(interaction.guild.id)
        if not sessao.historico and not sessao.historico_completo:
            await interaction.response.send_message("⚠️ Nada para exportar ainda.", ephemeral=True)
            return
        await interaction.response.send_message("📎 Histórico exportado:", file=arquivo_csv(sessao))

    @tree.command(name="reset", description="Recomeça a partida do zero")
    async def reset(interaction: discord.Interaction):
        sessao = obter_sessao(interaction.guild.id)
        sessao.reset()
        log.info("Sessão do servidor %s reiniciada", interaction.guild.id)
        await interaction.response.send_message("🔄 Partida reiniciada.")
