# ═══════════════════════════════════════════════════════════════════════════════
# EnergiePortaal — Subsidy Eligibility Rules
# © 2026 Aparajita Parihar. All rights reserved.
#
# Stateless decision table mapping the subsidy questionnaire to a stoplight
# verdict (green / amber / red) per programme, plus a staged action plan.
#
# Each programme owns an ordered tuple of (predicate, status, reason) rules,
# evaluated top-to-bottom; the first matching rule wins and a programme with
# no matching rule is green. Disqualifying checks come first, "unknown"
# answers last.
#
# Programmes: MaPrimeRénov' Geste · MaPrimeRénov' Ampleur · CEE · Éco-PTZ ·
#             TVA réduite 5,5% · local subsidies
#
# DISCLAIMER: Results are indicative only. Eligibility is confirmed solely by
# ANAH / France Rénov' and the lending bank.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from config.constants import DEFAULT_SUBSIDY_INTAKE
from config.subsidies import (
    DEFAULT_STAGE,
    INTAKE_ENUMS,
    PROGRAMME_ORDER,
    PROGRAMMES,
    UNKNOWN,
)
from core.utils import _safe_bool

logger = logging.getLogger(__name__)

Rule = tuple[Callable[[dict], bool], str, str]


# ─────────────────────────────────────────────────────────────────────────────
# INTAKE RESOLUTION
# ─────────────────────────────────────────────────────────────────────────────

def resolve_intake(raw: Optional[Mapping[str, Any]]) -> dict:
    """
    Return a complete, valid intake dict built from ``raw``.

    Missing answers take the value from ``DEFAULT_SUBSIDY_INTAKE``.
    Unrecognised answers become ``"onbekend"``, or ``"voor"`` for the project
    stage, which has no unknown option.  ``heatloss_done`` is coerced to bool.
    The caller's mapping is never mutated.
    """
    raw = raw if isinstance(raw, Mapping) else {}
    intake: dict = {}
    for key, allowed in INTAKE_ENUMS.items():
        value = raw.get(key)
        if value is None:
            value = DEFAULT_SUBSIDY_INTAKE[key]
        elif value not in allowed:
            fallback = DEFAULT_STAGE if key == "stage" else UNKNOWN
            logger.warning("Unknown %s answer %r, using %r", key, value, fallback)
            value = fallback
        intake[key] = value
    intake["heatloss_done"] = _safe_bool(
        raw.get("heatloss_done"), default=bool(DEFAULT_SUBSIDY_INTAKE["heatloss_done"])
    )
    return intake


# ─────────────────────────────────────────────────────────────────────────────
# CONDITIONS
# ─────────────────────────────────────────────────────────────────────────────

def _stage_is(*stages: str) -> Callable[[dict], bool]:
    return lambda intake: intake["stage"] in stages


def _usage_is(*usages: str) -> Callable[[dict], bool]:
    return lambda intake: intake["usage"] in usages


def _age_is(answer: str) -> Callable[[dict], bool]:
    return lambda intake: intake["age_gt_2"] == answer


def _usage_or_age_unknown(intake: dict) -> bool:
    return intake["usage"] == UNKNOWN or intake["age_gt_2"] == UNKNOWN


# ─────────────────────────────────────────────────────────────────────────────
# RULE TABLES
# ─────────────────────────────────────────────────────────────────────────────

RULES: dict[str, tuple[Rule, ...]] = {
    "mpr_geste": (
        (_stage_is("gestart"), "red",
         "Works have already started. MPR' must be applied for before work begins."),
        (_usage_is("secondaire"), "red",
         "MPR' Geste is only available for a main residence (résidence principale)."),
        (_age_is("nee"), "red",
         "The dwelling must be at least 2 years old for MPR'."),
        (_stage_is("getekend"), "amber",
         "Quote already signed. Contact your advisor: MPR' must be approved before the works are carried out."),
        (lambda i: i["work_type"] == "combo" and i["mpr_path"] != "geste", "amber",
         "For combined works MPR' Ampleur is usually more generous. Geste is possible but pays less."),
        (_usage_or_age_unknown, "amber",
         "Check: the dwelling must be your main residence and more than 2 years old."),
    ),
    "mpr_ampleur": (
        (_stage_is("gestart"), "red",
         "Works have already started. MPR' Ampleur must be applied for before work begins."),
        (_usage_is("secondaire", "verhuur"), "red",
         "MPR' Ampleur is only available to owner-occupiers of their main residence."),
        (_age_is("nee"), "red",
         "The dwelling must be at least 2 years old."),
        (lambda i: i["work_type"] not in ("combo", UNKNOWN), "amber",
         "MPR' Ampleur requires a combination of works (at least 2 types). Reconsider your approach."),
        (lambda i: not i["heatloss_done"], "amber",
         "An energy audit is mandatory for MPR' Ampleur and has not been done yet."),
        (lambda i: i["mpr_path"] == "geste", "amber",
         "You chose the Geste path. Ampleur requires a different application route."),
        (_usage_or_age_unknown, "amber",
         "Check: the dwelling must be your main residence and more than 2 years old."),
    ),
    "cee": (
        (_stage_is("getekend"), "red",
         "CEE requires registration BEFORE the quote is signed. A signed contract is too late."),
        (_stage_is("gestart"), "red",
         "CEE must be applied for before the works start."),
        (_age_is("nee"), "red",
         "The dwelling must be more than 2 years old for CEE."),
        (_age_is(UNKNOWN), "amber",
         "Check whether your dwelling is more than 2 years old."),
    ),
    "eco_ptz": (
        (_usage_is("secondaire"), "red",
         "Éco-PTZ is only available for a main residence (résidence principale)."),
        (_age_is("nee"), "red",
         "The dwelling must be more than 2 years old for Éco-PTZ."),
        (_stage_is("gestart"), "red",
         "Éco-PTZ must be applied for before the works start."),
        (_usage_or_age_unknown, "amber",
         "Check whether your dwelling is a main residence and more than 2 years old."),
    ),
    "tva": (
        (_age_is("nee"), "red",
         "The dwelling must be more than 2 years old for the 5.5% VAT rate."),
        (_stage_is("gestart"), "amber",
         "Works started: check that your contractor has already applied the reduced rate."),
        (lambda i: i["work_type"] == UNKNOWN, "amber",
         "Type of work unclear: not every job qualifies for the 5.5% VAT rate."),
        (_age_is(UNKNOWN), "amber",
         "Check whether your dwelling is more than 2 years old."),
    ),
}

# Programmes with a fixed verdict regardless of the intake
FIXED_VERDICTS: dict[str, tuple[str, str]] = {
    "local": (
        "amber",
        "Local subsidies vary by commune and région. Contact your mairie or the local ADIL.",
    ),
}


# ─────────────────────────────────────────────────────────────────────────────
# EVALUATION
# ─────────────────────────────────────────────────────────────────────────────

def _first_match(rules: tuple[Rule, ...], intake: dict, default_reason: str) -> tuple[str, str]:
    for predicate, status, reason in rules:
        if predicate(intake):
            return status, reason
    return "green", default_reason


def evaluate_programme(programme_id: str, intake: Mapping[str, Any]) -> dict:
    """
    Evaluate one programme and return its card.

    Returns a dict with keys:
      id, title, short_title, status, reason, amount, url, eligible
    ``eligible`` is True for every status except red.
    """
    meta = PROGRAMMES[programme_id]
    resolved = resolve_intake(intake)
    if programme_id in FIXED_VERDICTS:
        status, reason = FIXED_VERDICTS[programme_id]
    else:
        status, reason = _first_match(RULES[programme_id], resolved, meta["green_reason"])
    return {
        "id":          programme_id,
        "title":       meta["title"],
        "short_title": meta["short_title"],
        "status":      status,
        "reason":      reason,
        "amount":      meta["amount"],
        "url":         meta["url"],
        "eligible":    status != "red",
    }


def build_action_plan(intake: Mapping[str, Any], cards: list[dict]) -> list[str]:
    """Numbered next steps for the applicant, depending on the project stage."""
    resolved = resolve_intake(intake)
    stage = resolved["stage"]
    plan: list[str] = []

    if stage in ("voor", "offertes"):
        plan.append("1. Request a certified renovation advisor (Mon Accompagnateur Rénov') via France Rénov'.")
        if not resolved["heatloss_done"]:
            plan.append("2. Have an energy audit (audit énergétique) carried out. It is mandatory for MPR' Ampleur.")
        step = 2 if resolved["heatloss_done"] else 3
        eligible = [card["short_title"] for card in cards if card["eligible"]]
        if eligible:
            plan.append(f"{step}. Apply for: {', '.join(eligible)}. Do this BEFORE the works start.")
            step += 1
        plan.append(f"{step}. Choose an RGE-certified contractor (required for subsidies).")
        plan.append(f"{step + 1}. Carry out the works and keep every invoice for the claim.")
    elif stage == "getekend":
        plan.append("1. Contract signed: CEE is probably no longer possible (registration is required before signing).")
        plan.append("2. MPR' can still be applied for as long as the works have not started.")
        plan.append("3. Éco-PTZ can also still be requested before the works start.")
    elif stage == "gestart":
        plan.append("1. Works started: most premiums can unfortunately no longer be claimed.")
        plan.append("2. Check with your contractor that the 5.5% VAT rate is shown correctly on the invoice.")
        plan.append("3. Ask your mairie about local aid that can be claimed after the works.")

    return plan


def evaluate(intake: Optional[Mapping[str, Any]]) -> dict:
    """
    Evaluate every programme for a questionnaire.

    Returns:
      cards       : list[dict] — one card per programme, in PROGRAMME_ORDER
      action_plan : list[str]  — numbered next steps
    """
    resolved = resolve_intake(intake)
    cards = [evaluate_programme(pid, resolved) for pid in PROGRAMME_ORDER]
    return {
        "cards":       cards,
        "action_plan": build_action_plan(resolved, cards),
    }
