"""
Bilingual user-facing strings.

Lookup falls back to English, then to the key itself, so a missing
translation never breaks output. Parameters use {name} placeholders.
"""

from __future__ import annotations

from datetime import timedelta

SUPPORTED_LANGUAGES = ("en", "es")

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "welcome": "Welcome to Visual DeX! Photograph objects around you to learn new words.",
        "daily_missions": "Daily Missions",
        "todays_missions": "Today's Missions",
        "find_objects": "Find and photograph these objects",
        "mission_completed": "Mission Completed!",
        "mission_reward": "Mission reward: +{points} points",
        "mission_progress": "Progress",
        "remaining_photos": "Photos remaining",
        "photo_limit": "Daily photo limit reached",
        "photo_limit_message": "You've reached your daily limit of {limit} photos. Come back in {time} to continue learning!",
        "healthy_break": "Healthy Break Time",
        "break_message": "Take a break from the screen! Go outside, play, or do another activity. See you later!",
        "next_session": "Next session in",
        "total_points": "Total Points",
        "streak_days": "Day Streak",
        "well_done": "Well Done!",
        "all_missions_completed": "All missions completed for today!",
        "come_back_tomorrow": "Come back tomorrow for new missions!",
        "free_play": "Free Play Mode",
        "invalid_input": "Could not process the image. Please try again.",
        "not_found": "No object detected. Try another angle!",
        "wrong_object": "That looks like a {found}. Keep looking for the {target}!",
        "not_on_list": "A {found} is not on today's list. Keep looking!",
        "object_found": "Found: {object}",
        "level": "Level: {tier}",
        "reset_done": "Learning data cleared ({count} objects forgotten).",
        "language_set": "Language set to English.",
        "hours_minutes": "{hours}h {minutes}m",
    },
    "es": {
        "welcome": "¡Bienvenido a Visual DeX! Fotografía objetos a tu alrededor para aprender palabras nuevas.",
        "daily_missions": "Misiones Diarias",
        "todays_missions": "Misiones de Hoy",
        "find_objects": "Encuentra y fotografía estos objetos",
        "mission_completed": "¡Misión Completada!",
        "mission_reward": "Recompensa de misión: +{points} puntos",
        "mission_progress": "Progreso",
        "remaining_photos": "Fotos restantes",
        "photo_limit": "Límite diario de fotos alcanzado",
        "photo_limit_message": "Has alcanzado tu límite diario de {limit} fotos. ¡Regresa en {time} para continuar aprendiendo!",
        "healthy_break": "Hora de Descanso Saludable",
        "break_message": "¡Toma un descanso de la pantalla! Sal afuera, juega o haz otra actividad. ¡Nos vemos después!",
        "next_session": "Próxima sesión en",
        "total_points": "Puntos Totales",
        "streak_days": "Días Seguidos",
        "well_done": "¡Muy Bien!",
        "all_missions_completed": "¡Todas las misiones completadas por hoy!",
        "come_back_tomorrow": "¡Regresa mañana para nuevas misiones!",
        "free_play": "Modo Libre",
        "invalid_input": "No se pudo procesar la imagen. Inténtalo de nuevo.",
        "not_found": "No se detectó ningún objeto. ¡Prueba otro ángulo!",
        "wrong_object": "Eso parece {found}. ¡Sigue buscando {target}!",
        "not_on_list": "{found} no está en la lista de hoy. ¡Sigue buscando!",
        "object_found": "Encontrado: {object}",
        "level": "Nivel: {tier}",
        "reset_done": "Datos de aprendizaje borrados ({count} objetos olvidados).",
        "language_set": "Idioma cambiado a español.",
        "hours_minutes": "{hours}h {minutes}m",
    },
}

TIER_NAMES: dict[str, dict[str, str]] = {
    "en": {"beginner": "Beginner", "intermediate": "Intermediate", "advanced": "Advanced"},
    "es": {"beginner": "Principiante", "intermediate": "Intermedio", "advanced": "Avanzado"},
}


def t(key: str, language: str = "en", **params: object) -> str:
    """Localized message with {param} substitution."""
    table = MESSAGES.get(language, MESSAGES["en"])
    template = table.get(key) or MESSAGES["en"].get(key, key)
    if not params:
        return template
    try:
        return template.format(**params)
    except (KeyError, IndexError):
        return template


def tier_name(tier: str, language: str = "en") -> str:
    return TIER_NAMES.get(language, TIER_NAMES["en"]).get(tier, tier)


def format_duration(delta: timedelta, language: str = "en") -> str:
    """Render a wait as "Xh Ym", rounding seconds up to the next minute."""
    total_seconds = max(0, int(delta.total_seconds()))
    total_minutes = (total_seconds + 59) // 60
    hours, minutes = divmod(total_minutes, 60)
    return t("hours_minutes", language, hours=hours, minutes=minutes)
