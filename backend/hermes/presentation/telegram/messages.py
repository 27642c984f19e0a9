"""Renders dispatcher outcomes as Telegram (legacy Markdown) messages."""

from hermes.application.services import UPDATE_COMMANDS, CommandOutcome, OutcomeKind
from hermes.domain.entities import Record, RecordVariant

PARSE_MODE = "Markdown"

_MARKDOWN_SPECIALS = ("\\", "_", "*", "`", "[")

# Command name → (icon, help description), in /help order
_UPDATE_HELP = {
    "update_nama": ("✏️", "Update nama"),
    "update_pangkat": ("🎖️", "Update pangkat"),
    "update_telepon": ("📱", "Update nomor telepon"),
    "update_ig": ("📸", "Update Instagram username"),
    "update_fb": ("👥", "Update Facebook username"),
    "update_tt": ("🎵", "Update TikTok username"),
    "update_x": ("🐦", "Update X/Twitter username"),
    "update_yt": ("📺", "Update YouTube username"),
}


def escape_markdown(value: object) -> str:
    """Escape legacy-Markdown control characters in user-supplied text."""
    text = str(value)
    for char in _MARKDOWN_SPECIALS:
        text = text.replace(char, f"\\{char}")
    return text


def _show(value: object) -> str:
    if value is None or value == "":
        return "-"
    return escape_markdown(value)


def _key_label(variant: RecordVariant) -> str:
    return variant.natural_key_field.upper()


def welcome_message(variant: RecordVariant, display_name: str = "") -> str:
    key = _key_label(variant)
    greeting = f"Selamat datang, {escape_markdown(display_name)}! 👋" if display_name else "Selamat datang! 👋"
    update_lines = "\n".join(
        f"   • /{command} <{target.label.lower()}>" for command, target in UPDATE_COMMANDS.items()
    )
    return (
        f"{greeting}\n\n"
        f"Bot ini digunakan untuk menautkan akun Telegram Anda dengan data {variant.name.lower()} Hermes.\n\n"
        f"*Cara Penggunaan:*\n"
        f"1️⃣ Gunakan command /link <{key}> untuk menautkan akun\n\n"
        f"2️⃣ Setelah tertaut, gunakan command berikut:\n"
        f"{escape_markdown(update_lines)}\n\n"
        f"3️⃣ /mydata - Lihat data Anda\n"
        f"4️⃣ /help - Bantuan"
    )


def help_message(variant: RecordVariant) -> str:
    key = _key_label(variant)
    update_lines = "\n".join(
        f"{icon} /{escape_markdown(command)} <nilai> - {description}"
        for command, (icon, description) in _UPDATE_HELP.items()
    )
    return (
        f"*Daftar Command:*\n\n"
        f"📌 /start - Memulai bot\n"
        f"🔗 /link <{key}> - Menautkan akun Telegram dengan {key} Anda\n"
        f"📊 /mydata - Melihat data Anda\n"
        f"{update_lines}\n"
        f"❓ /help - Menampilkan bantuan"
    )


def linked_message(record: Record, variant: RecordVariant) -> str:
    return (
        f"✅ Berhasil menautkan akun!\n\n"
        f"*Data Anda:*\n"
        f"Nama: {_show(record.nama)}\n"
        f"{_key_label(variant)}: {_show(record.natural_key)}\n"
        f"Pangkat: {_show(record.pangkat)}\n"
        f"Telepon: {_show(record.telepon)}\n\n"
        f"Sekarang Anda dapat mengupdate data menggunakan command /update\\_\\*\n"
        f"Gunakan /help untuk melihat daftar command."
    )


def profile_message(record: Record, variant: RecordVariant) -> str:
    return (
        f"*Data Anda:*\n\n"
        f"👤 Nama: {_show(record.nama)}\n"
        f"🆔 {_key_label(variant)}: {_show(record.natural_key)}\n"
        f"🎖️ Pangkat: {_show(record.pangkat)}\n"
        f"📱 Telepon: {_show(record.telepon)}\n"
        f"📧 Email: {_show(record.email)}\n"
        f"🏢 Unit Kerja: {_show(record.unit_kerja)}\n"
        f"📊 Status: {_show(record.status)}\n\n"
        f"*Social Media:*\n"
        f"📸 Instagram: {_show(record.ig_uname)}\n"
        f"👥 Facebook: {_show(record.fb_uname)}\n"
        f"🎵 TikTok: {_show(record.tt_uname)}\n"
        f"🐦 X/Twitter: {_show(record.x_uname)}\n"
        f"📺 YouTube: {_show(record.yt_uname)}"
    )


def render_outcome(
    outcome: CommandOutcome,
    variant: RecordVariant,
    display_name: str = "",
) -> str:
    """Turn a dispatcher outcome into the reply text."""
    key = _key_label(variant)
    kind = outcome.kind

    if kind is OutcomeKind.WELCOME:
        return welcome_message(variant, display_name)
    if kind is OutcomeKind.HELP:
        return help_message(variant)
    if kind is OutcomeKind.LINKED:
        return linked_message(outcome.record, variant)
    if kind is OutcomeKind.PROFILE:
        return profile_message(outcome.record, variant)
    if kind is OutcomeKind.UPDATED:
        return (
            f"✅ {outcome.label} berhasil diupdate!\n\n"
            f"{outcome.label}: {_show(outcome.value)}\n\n"
            f"Gunakan /mydata untuk melihat semua data Anda."
        )
    if kind is OutcomeKind.USAGE:
        hint = (outcome.label or key).lower()
        return f"ℹ️ Format: /{escape_markdown(outcome.command)} <{hint}>"
    if kind is OutcomeKind.UNLINKED:
        return (
            f"❌ Akun Telegram Anda belum tertaut.\n\n"
            f"Gunakan /link <{key}> untuk menautkan akun Anda terlebih dahulu."
        )
    if kind is OutcomeKind.NOT_FOUND:
        return f"❌ {key} tidak ditemukan. Pastikan {key} Anda benar."
    if kind is OutcomeKind.CONFLICT:
        if outcome.command == "link":
            return (
                "❌ Akun Telegram Anda sudah tertaut dengan user lain.\n\n"
                "Jika ini adalah kesalahan, hubungi administrator."
            )
        return f"❌ Data bentrok dengan {variant.name.lower()} lain: {_show(outcome.detail)}"
    if kind is OutcomeKind.INVALID:
        return f"❌ Data tidak valid: {_show(outcome.detail)}"
    return error_message()


def error_message() -> str:
    return "❌ Terjadi kesalahan. Silakan coba lagi."
