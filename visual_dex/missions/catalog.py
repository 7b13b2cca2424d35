"""
Mission catalog: environments, their objects, and display names.

Centralizes the content model so mission generation and the UI read the
same data. "pillow" and "mirror" appear in two environments each; that is
shared vocabulary and is kept as is.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Environment:
    """A themed place the learner is asked to search."""

    key: str
    emoji: str
    color: str
    objects: tuple[str, ...]


# =============================================================================
# Environments
# =============================================================================
ENVIRONMENTS: dict[str, Environment] = {
    "kitchen": Environment(
        key="kitchen",
        emoji="🍳",
        color="#e74c3c",
        objects=("bottle", "cup", "plate", "spoon", "refrigerator", "microwave"),
    ),
    "living_room": Environment(
        key="living_room",
        emoji="🛋️",
        color="#3498db",
        objects=("sofa", "television", "book", "pillow", "lamp", "remote"),
    ),
    "bedroom": Environment(
        key="bedroom",
        emoji="🛏️",
        color="#9b59b6",
        objects=("bed", "pillow", "blanket", "clock", "mirror", "dresser"),
    ),
    "bathroom": Environment(
        key="bathroom",
        emoji="🚿",
        color="#1abc9c",
        objects=("towel", "toothbrush", "soap", "mirror", "sink", "shower"),
    ),
    "garden": Environment(
        key="garden",
        emoji="🌱",
        color="#27ae60",
        objects=("plant", "flower", "tree", "grass", "pot", "leaf"),
    ),
    "school": Environment(
        key="school",
        emoji="🎒",
        color="#f39c12",
        objects=("pencil", "pen", "notebook", "backpack", "ruler", "eraser"),
    ),
}

# =============================================================================
# Display Names
# =============================================================================
# park and office have names but no object lists yet
ENVIRONMENT_NAMES: dict[str, dict[str, str]] = {
    "en": {
        "kitchen": "Kitchen",
        "living_room": "Living Room",
        "bedroom": "Bedroom",
        "bathroom": "Bathroom",
        "garden": "Garden",
        "school": "School",
        "park": "Park",
        "office": "Office",
    },
    "es": {
        "kitchen": "Cocina",
        "living_room": "Sala de Estar",
        "bedroom": "Dormitorio",
        "bathroom": "Baño",
        "garden": "Jardín",
        "school": "Escuela",
        "park": "Parque",
        "office": "Oficina",
    },
}

OBJECT_NAMES: dict[str, dict[str, str]] = {
    "en": {
        # Kitchen
        "bottle": "Bottle",
        "cup": "Cup",
        "plate": "Plate",
        "spoon": "Spoon",
        "refrigerator": "Refrigerator",
        "microwave": "Microwave",
        # Living room
        "sofa": "Sofa",
        "television": "Television",
        "book": "Book",
        "pillow": "Pillow",
        "lamp": "Lamp",
        "remote": "Remote Control",
        # Bedroom
        "bed": "Bed",
        "blanket": "Blanket",
        "clock": "Clock",
        "mirror": "Mirror",
        "dresser": "Dresser",
        # Bathroom
        "towel": "Towel",
        "toothbrush": "Toothbrush",
        "soap": "Soap",
        "sink": "Sink",
        "shower": "Shower",
        # Garden
        "plant": "Plant",
        "flower": "Flower",
        "tree": "Tree",
        "grass": "Grass",
        "pot": "Pot",
        "leaf": "Leaf",
        # School
        "pencil": "Pencil",
        "pen": "Pen",
        "notebook": "Notebook",
        "backpack": "Backpack",
        "ruler": "Ruler",
        "eraser": "Eraser",
        # General
        "phone": "Phone",
        "computer": "Computer",
        "camera": "Camera",
        "bag": "Bag",
        "shoe": "Shoe",
        "chair": "Chair",
        "table": "Table",
        "door": "Door",
        "window": "Window",
        "car": "Car",
    },
    "es": {
        "bottle": "Botella",
        "cup": "Taza",
        "plate": "Plato",
        "spoon": "Cuchara",
        "refrigerator": "Refrigerador",
        "microwave": "Microondas",
        "sofa": "Sofá",
        "television": "Televisión",
        "book": "Libro",
        "pillow": "Almohada",
        "lamp": "Lámpara",
        "remote": "Control Remoto",
        "bed": "Cama",
        "blanket": "Manta",
        "clock": "Reloj",
        "mirror": "Espejo",
        "dresser": "Cómoda",
        "towel": "Toalla",
        "toothbrush": "Cepillo de Dientes",
        "soap": "Jabón",
        "sink": "Lavabo",
        "shower": "Ducha",
        "plant": "Planta",
        "flower": "Flor",
        "tree": "Árbol",
        "grass": "Pasto",
        "pot": "Maceta",
        "leaf": "Hoja",
        "pencil": "Lápiz",
        "pen": "Bolígrafo",
        "notebook": "Cuaderno",
        "backpack": "Mochila",
        "ruler": "Regla",
        "eraser": "Borrador",
        "phone": "Teléfono",
        "computer": "Computadora",
        "camera": "Cámara",
        "bag": "Bolsa",
        "shoe": "Zapato",
        "chair": "Silla",
        "table": "Mesa",
        "door": "Puerta",
        "window": "Ventana",
        "car": "Carro",
    },
}


def object_display_name(object_key: str, language: str = "en") -> str:
    """
    Get the display name of an object.

    Falls back to English, then to the raw key.
    """
    return (
        OBJECT_NAMES.get(language, {}).get(object_key)
        or OBJECT_NAMES["en"].get(object_key)
        or object_key
    )


def environment_display_name(environment_key: str, language: str = "en") -> str:
    """Get the display name of an environment (same fallback as objects)."""
    return (
        ENVIRONMENT_NAMES.get(language, {}).get(environment_key)
        or ENVIRONMENT_NAMES["en"].get(environment_key)
        or environment_key
    )
