import asyncio
import logging

import discord
from discord.ui import Button, Select, View

from config import TIMEOUT_MENSAGEM, TIMEOUT_VIEW, TOTAL_JOGADORES
from previsao import texto_previsao
from sessao import MODO_COMPLETO, ErroSessao, RascunhoRodada, Sessao, obter_sessao

log = logging.getLogger(__name__)


# ---------------------- Select Menu de confrontos ----------------------
class ConfrontoSelect(Select):
    """Escolha dois jogadores, um de cada vez, para formar um confronto."""

    def __init__(self, sessao: Sessao, rascunho: RascunhoRodada):
        super().__init__(min_values=1, max_values=1, options=[discord.SelectOption(label="-")])
        self.sessao = sessao
        self.rascunho = rascunho
        self.escolhido = None
        self.atualizar()

    def atualizar(self):
        livres = [j for j in self.rascunho.sem_par() if j != self.escolhido]
        if not livres:
            self.options = [discord.SelectOption(label="Todos os jogadores pareados", value="0")]
            self.placeholder = "Todos os jogadores pareados"
            self.disabled = True
            return
        self.options = [discord.SelectOption(label=self.sessao.nome(j), value=str(j)) for j in livres]
        self.disabled = False
        if self.escolhido is None:
            self.placeholder = f"Rodada {self.rascunho.rodada}: escolha um jogador"
        else:
            self.placeholder = f"Oponente de {self.sessao.nome(self.escolhido)}"

    async def callback(self, interaction: discord.Interaction):
        escolhido = int(self.values[0])

        if self.escolhido is None:
            self.escolhido = escolhido
            self.atualizar()
            await interaction.response.edit_message(content=self.view.texto(), view=self.view)
            return

        a, b = self.escolhido, escolhido
        self.escolhido = None
        try:
            self.rascunho.parear(a, b)
        except ErroSessao as e:
            self.atualizar()
            await interaction.response.send_message(f"❌ {e}", ephemeral=True)
            return

        self.atualizar()
        self.view.atualizar_botoes()
        await interaction.response.edit_message(content=self.view.texto(), view=self.view)


class ConfrontoView(View):
    def __init__(self, sessao: Sessao, rascunho: RascunhoRodada):
        super().__init__(timeout=TIMEOUT_VIEW)
        self.sessao = sessao
        self.rascunho = rascunho
        self.select = ConfrontoSelect(sessao, rascunho)
        self.add_item(self.select)

        self.confirmar = Button(label=f"Confirmar rodada {rascunho.rodada}", style=discord.ButtonStyle.success)
        self.confirmar.callback = self.on_confirmar
        self.add_item(self.confirmar)

        self.limpar = Button(label="Limpar confrontos", style=discord.ButtonStyle.danger)
        self.limpar.callback = self.on_limpar
        self.add_item(self.limpar)

        self.atualizar_botoes()

    def atualizar_botoes(self):
        self.confirmar.disabled = not self.rascunho.completo()

    def texto(self) -> str:
        linhas = [f"👉 Confrontos da **Rodada {self.rascunho.rodada}**:"]
        feitos = set()
        for j in self.rascunho.jogadores_ids:
            oponente = self.rascunho.pares.get(j)
            if oponente is None or j in feitos:
                continue
            feitos.update((j, oponente))
            linhas.append(f"  ✅ {self.sessao.nome(j)} x {self.sessao.nome(oponente)}")
        if self.select.escolhido is not None:
            linhas.append(f"  ⏳ {self.sessao.nome(self.select.escolhido)} x ?")
        return "\n".join(linhas)

    async def on_confirmar(self, interaction: discord.Interaction):
        try:
            entrada = self.sessao.confirmar_rodada(self.rascunho)
        except ErroSessao as e:
            await interaction.response.send_message(f"❌ {e}", ephemeral=True)
            return

        log.info("Rodada %s confirmada no servidor %s", entrada.round, interaction.guild.id)
        self.stop()
        for item in self.children:
            item.disabled = True
        await interaction.response.edit_message(content=self.texto(), view=self)
        await interaction.followup.send(
            f"✅ Rodada {entrada.round} confirmada!\n\n{texto_previsao(self.sessao)}\n\n"
            f"Use `/confronto` para registrar a próxima rodada."
        )

    async def on_limpar(self, interaction: discord.Interaction):
        self.rascunho.limpar()
        self.select.escolhido = None
        self.select.atualizar()
        self.atualizar_botoes()
        await interaction.response.edit_message(content=self.texto(), view=self)


# ---------------------- Função principal ----------------------
def registrar_analise(bot):
    tree = bot.tree

    @tree.command(name="analise", description="Inicia a análise completa com os 8 jogadores")
    async def analise(interaction: discord.Interaction):
        sessao = obter_sessao(interaction.guild.id)
        sessao.mudar_modo(MODO_COMPLETO)

        outros = TOTAL_JOGADORES - 1
        await interaction.response.send_message(
            f"🔹 Vamos começar! \nDigite os {outros} outros jogadores separados por vírgula (você é o jogador 1).\n"
            "(*Exemplo*: Vale, Karina, Layla, Lukas, Kagura, Nana, Miya)"
        )

        def check(msg):
            return msg.author == interaction.user and msg.channel == interaction.channel

        try:
            msg = await bot.wait_for("message", check=check, timeout=TIMEOUT_MENSAGEM)
        except asyncio.TimeoutError:
            await interaction.channel.send("❌ Tempo esgotado. Reinicie com `/analise`.")
            return

        try:
            sessao.configurar(msg.content.split(","))
        except ErroSessao as e:
            await interaction.channel.send(f"❌ {e} Reinicie com `/analise`.")
            return

        enum_text = "\n".join(f"{p.id}: {p.name}" for p in sessao.players)
        rascunho = sessao.novo_rascunho()
        view = ConfrontoView(sessao, rascunho)
        await interaction.channel.send(f"✅ Jogadores cadastrados!\n```{enum_text}```")
        await interaction.channel.send(view.texto(), view=view)

    @tree.command(name="confronto", description="Registra os confrontos da rodada atual (modo completo)")
    async def confronto(interaction: discord.Interaction):
        sessao = obter_sessao(interaction.guild.id)
        try:
            rascunho = sessao.novo_rascunho()
        except ErroSessao as e:
            await interaction.response.send_message(f"⚠️ {e}", ephemeral=True)
            return

        view = ConfrontoView(sessao, rascunho)
        await interaction.response.send_message(
            f"{texto_previsao(sessao)}\n\n{view.texto()}", view=view
        )
