"""
Protein doneness guide for probe cooking.

Recommended internal temperatures per protein and doneness level, with the
remove temperature to pull the food at for carryover cooking.
"""

import re
from typing import Optional

from pydantic import BaseModel


class DonenessLevel(BaseModel):
    key: str
    target_temp: int
    remove_temp: Optional[int] = None
    is_usda_approved: bool = False

    @property
    def label(self) -> str:
        return DONENESS_LABELS.get(self.key, self.key)


class ProteinGuide(BaseModel):
    key: str
    icon: str = ""
    doneness: list[DonenessLevel]

    @property
    def label(self) -> str:
        return PROTEIN_LABELS.get(self.key, self.key)


def _level(key: str, target: int, remove: Optional[int] = None, usda: bool = False) -> DonenessLevel:
    return DonenessLevel(key=key, target_temp=target, remove_temp=remove, is_usda_approved=usda)


# Red meat shares the same ladder
_RED_MEAT = [
    _level("rare", 125, 120),
    _level("medium_rare", 135, 130),
    _level("medium", 145, 140, usda=True),
    _level("medium_well", 155, 150, usda=True),
    _level("well_done", 165, 160, usda=True),
    _level("bbq_tender", 205, 200, usda=True),
]

TEMPERATURE_GUIDE = [
    ProteinGuide(
        key="poultry_white",
        icon="https://icons.chefiq.com/ico_pu_05.png",
        doneness=[_level("well_done", 165, usda=True)],
    ),
    ProteinGuide(
        key="poultry_dark",
        icon="https://icons.chefiq.com/ico_pu_tu_05.png",
        doneness=[_level("well_done", 180, usda=True)],
    ),
    ProteinGuide(key="beef", icon="https://icons.chefiq.com/ico_me_be_05.png", doneness=_RED_MEAT),
    ProteinGuide(
        key="pork",
        icon="https://icons.chefiq.com/ico_me_po_05.png",
        doneness=[
            _level("medium", 145, 140, usda=True),
            _level("medium_well", 150, 145, usda=True),
            _level("well_done", 160, 155, usda=True),
            _level("bbq_tender", 205, 200, usda=True),
        ],
    ),
    ProteinGuide(key="lamb", icon="https://icons.chefiq.com/ico_me_la_05.png", doneness=_RED_MEAT),
    ProteinGuide(key="veal", icon="https://icons.chefiq.com/ico_me_vl_05.png", doneness=_RED_MEAT[1:]),
    ProteinGuide(
        key="ground_meat",
        icon="https://icons.chefiq.com/ico_me_be_ground_05.png",
        doneness=[
            _level("rare", 125, 120),
            _level("medium_rare", 135, 130),
            _level("medium", 145, 140),
            _level("medium_well", 155, 150),
            _level("well_done", 165, usda=True),
        ],
    ),
    ProteinGuide(
        key="fish",
        icon="https://icons.chefiq.com/ico_sf_fi_05.png",
        doneness=[
            _level("rare", 120, 115),
            _level("medium_rare", 125, 120),
            _level("medium", 130, 125),
            _level("medium_well", 135, 130),
            _level("well_done", 145, 140, usda=True),
        ],
    ),
]

PROTEIN_LABELS = {
    "poultry_white": "Chicken (White Meat)",
    "poultry_dark": "Chicken (Dark Meat)",
    "beef": "Beef",
    "pork": "Pork",
    "lamb": "Lamb",
    "veal": "Veal",
    "ground_meat": "Ground Meat",
    "fish": "Fish",
}

DONENESS_LABELS = {
    "rare": "Rare",
    "medium_rare": "Medium Rare",
    "medium": "Medium",
    "medium_well": "Medium Well",
    "well_done": "Well Done",
    "bbq_tender": "BBQ Tender",
}

# Checked in order: specific cuts before the generic protein name
_PROTEIN_CUES = [
    ("poultry_white", r"chicken breast|turkey breast"),
    ("poultry_dark", r"chicken thigh|chicken leg|turkey thigh|turkey leg"),
    ("poultry_white", r"chicken|turkey"),
    ("ground_meat", r"ground beef|ground pork|ground lamb|hamburger|burger"),
    ("beef", r"beef|steak|brisket"),
    ("pork", r"pork|\bham\b"),
    ("lamb", r"lamb"),
    ("veal", r"veal"),
    ("fish", r"fish|salmon|tuna|halibut"),
]

_GUIDE_BY_KEY = {guide.key: guide for guide in TEMPERATURE_GUIDE}


def get_protein_guide(key: str) -> Optional[ProteinGuide]:
    return _GUIDE_BY_KEY.get(key)


def detect_protein_type(text: str) -> Optional[ProteinGuide]:
    """Guess the protein a recipe is about.

    Args:
        text: Any recipe text (title, steps...).

    Returns:
        The matching guide entry, or None when no protein is mentioned.
    """
    lowered = text.lower()
    for key, cue in _PROTEIN_CUES:
        if re.search(cue, lowered):
            return _GUIDE_BY_KEY[key]
    return None


def get_usda_recommended_temp(protein: ProteinGuide) -> int:
    """First USDA-approved target, or the first level's target when none is."""
    for level in protein.doneness:
        if level.is_usda_approved:
            return level.target_temp
    return protein.doneness[0].target_temp


def find_doneness_for_temp(protein: ProteinGuide, temperature: int) -> Optional[DonenessLevel]:
    """Closest doneness level to a temperature, if one is within 10°F."""
    if not protein.doneness:
        return None
    closest = min(protein.doneness, key=lambda level: abs(level.target_temp - temperature))
    return closest if abs(closest.target_temp - temperature) <= 10 else None
