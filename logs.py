import logging

import discord
from discord import app_commands

log = logging.getLogger(__name__)


def registrar_logs(bot, CANAL_LOG=None):
    @bot.event
    async def on_guild_join(guild):
        log.info("Adicionado ao servidor %s (%s)", guild.name, guild.id)
        canal = bot.get_channel(CANAL_LOG) if CANAL_LOG else None

        dono = getattr(guild, "owner", None)
        dono_info = f"{dono} (ID: {dono.id})" if dono else "Desconhecido"

        if canal:
            await canal.send(
                f"⚠️ O bot foi adicionado ao servidor **{guild.name}** (ID: {guild.id}) "
                f"pelo dono **{dono_info}**."
            )

    @bot.event
    async def on_guild_remove(guild):
        log.info("Removido do servidor %s (%s)", guild.name, guild.id)
        canal = bot.get_channel(CANAL_LOG) if CANAL_LOG else None
        if canal:
            await canal.send(
                f"🚪 O bot foi removido do servidor **{guild.name}** (ID: {guild.id})."
            )

    @bot.tree.error
    async def on_app_command_error(interaction: discord.Interaction, error: app_commands.AppCommandError):
        nome = interaction.command.name if interaction.command else "?"
        log.error("Erro no comando /%s", nome, exc_info=error)

        canal = bot.get_channel(CANAL_LOG) if CANAL_LOG else None
        if canal:
            await canal.send(f"🚨 Erro no comando `/{nome}` no servidor {interaction.guild_id}: `{error}`")

        mensagem = "❌ Ocorreu um erro inesperado. Tente novamente."
        if interaction.response.is_done():
            await interaction.followup.send(mensagem, ephemeral=True)
        else:
            await interaction.response.send_message(mensagem, ephemeral=True)
