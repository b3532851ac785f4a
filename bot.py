import discord
from discord.ext import commands

import config
from analise import registrar_analise
from logs import registrar_logs
from previsao import registrar_previsao

# ---------------- Variáveis ----------------
TOKEN = config.carregar_token()
CANAL_LOG = config.canal_log()
SERVIDOR_TESTE = config.servidor_teste()

# ---------------- Configuração do bot ----------------
intents = discord.Intents.default()
intents.guilds = True
intents.message_content = True
bot = commands.Bot(command_prefix="/", intents=intents)

# ---------------- Registrar comandos ----------------
registrar_previsao(bot)
registrar_analise(bot)
registrar_logs(bot, CANAL_LOG)


# ---------------- Evento on_ready ----------------
@bot.event
async def on_ready():
    print(f"🤖 Bot conectado como {bot.user}")
    if SERVIDOR_TESTE:
        # servidor de teste recebe os comandos na hora
        guild = discord.Object(id=SERVIDOR_TESTE)
        bot.tree.copy_global_to(guild=guild)
        await bot.tree.sync(guild=guild)
    else:
        await bot.tree.sync()
    print("✅ Comandos sincronizados!")


# ---------------- Rodar bot ----------------
if __name__ == "__main__":
    bot.run(TOKEN)
