# ═══════════════════════════════════════════════════════════════════════════════
# EnergiePortaal — Location Lookup Module
# © 2026 Aparajita Parihar. All rights reserved.
#
# Provides:
#   • Département → climate-zone database (all metropolitan départements)
#   • Postcode → département resolver (including the Corsica 2A / 2B split)
#   • Postcode → climate-zone resolver with a default-zone fallback
#
# Pure lookups only: no geocoding, no network access.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import logging

from config.constants import CLIMATE_ZONES, DEFAULT_ZONE_ID

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# DÉPARTEMENT DATABASE
# Département number (string) → zone id. Corsica uses "2A" / "2B".
# ─────────────────────────────────────────────────────────────────────────────
DEPARTMENT_ZONES: dict[str, str] = {
    # Méditerranée — HDD ~1400
    "06": "med",     # Alpes-Maritimes (Nice)
    "11": "med",     # Aude (Narbonne, Carcassonne)
    "13": "med",     # Bouches-du-Rhône (Marseille, Aix)
    "2A": "med",     # Corse-du-Sud (Ajaccio)
    "2B": "med",     # Haute-Corse (Bastia)
    "30": "med",     # Gard (Nîmes)
    "34": "med",     # Hérault (Montpellier)
    "66": "med",     # Pyrénées-Orientales (Perpignan)
    "83": "med",     # Var (Toulon)
    "84": "med",     # Vaucluse (Avignon)
    # South-West / Atlantic — HDD ~1900
    "09": "ouest",   # Ariège
    "12": "ouest",   # Aveyron (Rodez)
    "16": "ouest",   # Charente (Angoulême)
    "17": "ouest",   # Charente-Maritime (La Rochelle)
    "24": "ouest",   # Dordogne
    "31": "ouest",   # Haute-Garonne (Toulouse)
    "32": "ouest",   # Gers
    "33": "ouest",   # Gironde (Bordeaux)
    "40": "ouest",   # Landes
    "46": "ouest",   # Lot (Cahors)
    "47": "ouest",   # Lot-et-Garonne (Agen)
    "64": "ouest",   # Pyrénées-Atlantiques (Bayonne, Pau)
    "65": "ouest",   # Hautes-Pyrénées (Tarbes)
    "79": "ouest",   # Deux-Sèvres (Niort)
    "81": "ouest",   # Tarn (Albi)
    "82": "ouest",   # Tarn-et-Garonne (Montauban)
    "85": "ouest",   # Vendée
    "86": "ouest",   # Vienne (Poitiers)
    "87": "ouest",   # Haute-Vienne (Limoges)
    # North / Paris — HDD ~2200
    "02": "paris",   # Aisne
    "14": "paris",   # Calvados (Caen)
    "22": "paris",   # Côtes-d'Armor
    "27": "paris",   # Eure
    "28": "paris",   # Eure-et-Loir (Chartres)
    "29": "paris",   # Finistère (Brest, Quimper)
    "35": "paris",   # Ille-et-Vilaine (Rennes)
    "37": "paris",   # Indre-et-Loire (Tours)
    "41": "paris",   # Loir-et-Cher (Blois)
    "44": "paris",   # Loire-Atlantique (Nantes)
    "45": "paris",   # Loiret (Orléans)
    "49": "paris",   # Maine-et-Loire (Angers)
    "50": "paris",   # Manche
    "53": "paris",   # Mayenne (Laval)
    "56": "paris",   # Morbihan (Vannes)
    "59": "paris",   # Nord (Lille)
    "60": "paris",   # Oise (Beauvais)
    "61": "paris",   # Orne (Alençon)
    "62": "paris",   # Pas-de-Calais (Arras)
    "72": "paris",   # Sarthe (Le Mans)
    "75": "paris",   # Paris
    "76": "paris",   # Seine-Maritime (Rouen, Le Havre)
    "77": "paris",   # Seine-et-Marne
    "78": "paris",   # Yvelines (Versailles)
    "80": "paris",   # Somme (Amiens)
    "91": "paris",   # Essonne
    "92": "paris",   # Hauts-de-Seine
    "93": "paris",   # Seine-Saint-Denis
    "94": "paris",   # Val-de-Marne
    "95": "paris",   # Val-d'Oise
    # Centre / Bourgogne — HDD ~2500
    "03": "centre",  # Allier (Moulins)
    "15": "centre",  # Cantal (Aurillac)
    "18": "centre",  # Cher (Bourges)
    "19": "centre",  # Corrèze (Tulle)
    "21": "centre",  # Côte-d'Or (Dijon)
    "23": "centre",  # Creuse (Guéret)
    "36": "centre",  # Indre (Châteauroux)
    "42": "centre",  # Loire (Saint-Étienne)
    "43": "centre",  # Haute-Loire (Le Puy)
    "48": "centre",  # Lozère (Mende)
    "58": "centre",  # Nièvre (Nevers)
    "63": "centre",  # Puy-de-Dôme (Clermont-Ferrand)
    "69": "centre",  # Rhône (Lyon)
    "71": "centre",  # Saône-et-Loire (Mâcon)
    # East / Alsace-Lorraine — HDD ~2800
    "08": "est",     # Ardennes
    "10": "est",     # Aube (Troyes)
    "25": "est",     # Doubs (Besançon)
    "39": "est",     # Jura
    "51": "est",     # Marne (Reims)
    "52": "est",     # Haute-Marne (Chaumont)
    "54": "est",     # Meurthe-et-Moselle (Nancy)
    "55": "est",     # Meuse (Bar-le-Duc)
    "57": "est",     # Moselle (Metz)
    "67": "est",     # Bas-Rhin (Strasbourg)
    "68": "est",     # Haut-Rhin (Colmar, Mulhouse)
    "70": "est",     # Haute-Saône (Vesoul)
    "88": "est",     # Vosges (Épinal)
    "89": "est",     # Yonne (Auxerre)
    "90": "est",     # Territoire de Belfort
    # Mountains — HDD ~3400
    "01": "mont",    # Ain
    "04": "mont",    # Alpes-de-Haute-Provence (Digne)
    "05": "mont",    # Hautes-Alpes (Gap, Briançon)
    "07": "mont",    # Ardèche (Privas)
    "26": "mont",    # Drôme (Valence)
    "38": "mont",    # Isère (Grenoble)
    "73": "mont",    # Savoie (Chambéry)
    "74": "mont",    # Haute-Savoie (Annecy)
}

# Overseas départements (971–976) are approximated as a warm climate
OVERSEAS_PREFIX: str = "97"
OVERSEAS_ZONE_ID: str = "med"

CORSICA_PREFIX: str = "20"
CORSICA_SPLIT_POSTCODE: int = 20200  # 20000–20199 → 2A, 20200+ → 2B


# ─────────────────────────────────────────────────────────────────────────────
# RESOLVERS
# ─────────────────────────────────────────────────────────────────────────────

def _clean(postcode) -> str:
    return str(postcode or "").strip()


def _corsica_department(postcode: str) -> str:
    digits = "".join(ch for ch in postcode if ch.isdigit())
    try:
        number = int(digits)
    except ValueError:
        return "2A"
    return "2B" if number >= CORSICA_SPLIT_POSTCODE else "2A"


def department_for_postcode(postcode: str) -> str:
    """Return the département number for a French postcode.

    The first two characters give the département, except for Corsica where
    the ``20xxx`` range is split into ``2A`` and ``2B``.  Returns ``""`` when
    the postcode is shorter than two characters.
    """
    cleaned = _clean(postcode)
    if len(cleaned) < 2:
        return ""
    prefix = cleaned[:2]
    if prefix == CORSICA_PREFIX:
        return _corsica_department(cleaned)
    return prefix


def zone_id_for_postcode(postcode: str) -> str:
    """Resolve a postcode to a climate-zone id.

    Never raises: short, malformed, or unmapped postcodes resolve to
    ``DEFAULT_ZONE_ID``.
    """
    department = department_for_postcode(postcode)
    if not department:
        logger.debug("Postcode %r too short, using default zone %s", postcode, DEFAULT_ZONE_ID)
        return DEFAULT_ZONE_ID
    if department == OVERSEAS_PREFIX:
        return OVERSEAS_ZONE_ID
    zone_id = DEPARTMENT_ZONES.get(department)
    if zone_id is None:
        logger.debug("No zone for département %r, using default zone %s", department, DEFAULT_ZONE_ID)
        return DEFAULT_ZONE_ID
    return zone_id


def zone_for_postcode(postcode: str) -> dict:
    """Return a copy of the climate-zone record for a postcode."""
    return dict(CLIMATE_ZONES[zone_id_for_postcode(postcode)])


def zone_options() -> list[str]:
    """Return zone ids in table order (mildest first)."""
    return list(CLIMATE_ZONES)
