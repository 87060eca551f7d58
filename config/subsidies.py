# ═══════════════════════════════════════════════════════════════════════════════
# EnergiePortaal — Subsidy Programme Registry
# © 2026 Aparajita Parihar. All rights reserved.
#
# Static programme metadata (titles, amounts, reference links) and the value
# sets of the subsidy questionnaire. Eligibility rules live in
# core/subsidies.py; this module holds text only.
#
# Sources:
#   ANAH — MaPrimeRénov' Guide des aides financières 2026
#   Ministère de la Transition écologique — CEE, Éco-PTZ
#   CGI art. 279-0 bis — TVA à taux réduit 5,5 %
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

# ─────────────────────────────────────────────────────────────────────────────
# QUESTIONNAIRE VALUE SETS
# "onbekend" (unknown) is valid for every question except the project stage.
# ─────────────────────────────────────────────────────────────────────────────

UNKNOWN: str = "onbekend"

USAGE_VALUES: tuple[str, ...]     = ("rp", "secondaire", "verhuur", UNKNOWN)
AGE_VALUES: tuple[str, ...]       = ("ja", "nee", UNKNOWN)
STAGE_VALUES: tuple[str, ...]     = ("voor", "offertes", "getekend", "gestart")
WORK_TYPE_VALUES: tuple[str, ...] = ("envelop", "ventilatie", "verwarming", "combo", UNKNOWN)
MPR_PATH_VALUES: tuple[str, ...]  = ("geste", "ampleur", UNKNOWN)

DEFAULT_STAGE: str = "voor"

INTAKE_ENUMS: dict[str, tuple[str, ...]] = {
    "usage":     USAGE_VALUES,
    "age_gt_2":  AGE_VALUES,
    "stage":     STAGE_VALUES,
    "work_type": WORK_TYPE_VALUES,
    "mpr_path":  MPR_PATH_VALUES,
}

STATUSES: tuple[str, ...] = ("green", "amber", "red")


# ─────────────────────────────────────────────────────────────────────────────
# PROGRAMMES
# ─────────────────────────────────────────────────────────────────────────────

PROGRAMMES: dict[str, dict] = {
    "mpr_geste": {
        "title":        "MaPrimeRénov' Geste",
        "short_title":  "MPR' Geste",
        "amount":       "Up to €15,000 per measure",
        "url":          "https://infofrankrijk.com/ma-prime-renov-in-frankrijk-voorwaarden-werking-en-aandachtspunten/",
        "green_reason": "You appear to qualify for MaPrimeRénov' Geste.",
    },
    "mpr_ampleur": {
        "title":        "MaPrimeRénov' Ampleur",
        "short_title":  "MPR' Ampleur",
        "amount":       "Up to €70,000 (≥ 50% improvement)",
        "url":          "https://infofrankrijk.com/ma-prime-renov-in-frankrijk-voorwaarden-werking-en-aandachtspunten/",
        "green_reason": "You appear to qualify for MaPrimeRénov' Ampleur.",
    },
    "cee": {
        "title":        "CEE (Certificats d'Économies d'Énergie)",
        "short_title":  "CEE",
        "amount":       "Variable (via energy supplier)",
        "url":          "https://infofrankrijk.com/cee-en-primes-energie-energiebesparingspremies-in-frankrijk-uitgelegd/",
        "green_reason": "CEE premiums can be combined with MPR' and are open to all dwellings over 2 years old.",
    },
    "eco_ptz": {
        "title":        "Éco-prêt à taux zéro (Éco-PTZ)",
        "short_title":  "Éco-PTZ",
        "amount":       "Up to €50,000 interest-free",
        "url":          "https://infofrankrijk.com/eco-ptz-renteloze-lening-voor-energierenovatie-in-frankrijk/",
        "green_reason": "Éco-PTZ is an interest-free loan of up to €50,000 and can be combined with MPR'.",
    },
    "tva": {
        "title":        "TVA réduite 5,5%",
        "short_title":  "TVA 5,5%",
        "amount":       "5.5% instead of 20% VAT",
        "url":          "https://infofrankrijk.com/tva-a-55-bij-renovatie-in-frankrijk-wanneer-geldt-het-lage-btw-tarief/",
        "green_reason": "The 5.5% VAT rate applies automatically to eligible renovation works on dwellings over 2 years old.",
    },
    "local": {
        "title":        "Local subsidies (commune / département / région)",
        "short_title":  "Local",
        "amount":       "Varies by commune",
        "url":          "https://infofrankrijk.com/lokale-subsidies-voor-energierenovatie-in-frankrijk-zo-vindt-u-wat-er-geldt/",
        "green_reason": "",
    },
}

PROGRAMME_ORDER: tuple[str, ...] = (
    "mpr_geste", "mpr_ampleur", "cee", "eco_ptz", "tva", "local",
)
