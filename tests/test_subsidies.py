"""
QA Test Suite — core/subsidies.py
=================================
Tests for intake resolution, every per-programme rule, exhaustive invariants
over the full questionnaire space, and the staged action plan.
"""
from __future__ import annotations

import copy
import itertools
import os
import sys

import pytest

_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _root not in sys.path:
    sys.path.insert(0, _root)

from config.constants import DEFAULT_SUBSIDY_INTAKE
from config.subsidies import INTAKE_ENUMS, PROGRAMME_ORDER, PROGRAMMES, STATUSES
from core import subsidies


def intake(**overrides):
    answers = dict(DEFAULT_SUBSIDY_INTAKE)
    answers.update(overrides)
    return answers


def status(programme_id, **overrides):
    return subsidies.evaluate_programme(programme_id, intake(**overrides))["status"]


def _all_intakes():
    keys = list(INTAKE_ENUMS)
    for values in itertools.product(*(INTAKE_ENUMS[k] for k in keys)):
        for heatloss in (True, False):
            answers = dict(zip(keys, values))
            answers["heatloss_done"] = heatloss
            yield answers


ALL_INTAKES = list(_all_intakes())


# ─────────────────────────────────────────────────────────────────────────────
# Intake resolution
# ─────────────────────────────────────────────────────────────────────────────

class TestResolveIntake:
    @pytest.mark.parametrize("raw", [None, {}, "rp", 7])
    def test_missing_gives_defaults(self, raw):
        assert subsidies.resolve_intake(raw) == DEFAULT_SUBSIDY_INTAKE

    def test_unknown_answer_becomes_onbekend(self):
        assert subsidies.resolve_intake({"usage": "castle"})["usage"] == "onbekend"
        assert subsidies.resolve_intake({"work_type": "roof"})["work_type"] == "onbekend"

    def test_unknown_stage_becomes_voor(self):
        assert subsidies.resolve_intake({"stage": "later"})["stage"] == "voor"

    @pytest.mark.parametrize("raw,expected", [
        (True, True), ("ja", True), ("true", True), (1, True),
        (False, False), ("nee", False), (None, False), ("maybe", False),
    ])
    def test_heatloss_coerced(self, raw, expected):
        assert subsidies.resolve_intake({"heatloss_done": raw})["heatloss_done"] is expected

    def test_does_not_mutate(self):
        raw = {"usage": "castle", "heatloss_done": "ja"}
        snapshot = copy.deepcopy(raw)
        subsidies.resolve_intake(raw)
        subsidies.evaluate(raw)
        assert raw == snapshot


# ─────────────────────────────────────────────────────────────────────────────
# Per-programme rules
# ─────────────────────────────────────────────────────────────────────────────

class TestMprGeste:
    def test_default_green(self):
        assert status("mpr_geste") == "green"

    def test_partial_intake_then_started(self):
        answers = {"usage": "rp", "age_gt_2": "ja", "stage": "voor"}
        card = subsidies.evaluate_programme("mpr_geste", answers)
        assert (card["status"], card["eligible"]) == ("green", True)
        card = subsidies.evaluate_programme("mpr_geste", dict(answers, stage="gestart"))
        assert (card["status"], card["eligible"]) == ("red", False)

    def test_started_red(self):
        assert status("mpr_geste", stage="gestart") == "red"

    def test_secondary_home_red(self):
        assert status("mpr_geste", usage="secondaire") == "red"

    def test_rental_allowed(self):
        assert status("mpr_geste", usage="verhuur") == "green"

    def test_too_new_red(self):
        assert status("mpr_geste", age_gt_2="nee") == "red"

    def test_signed_amber(self):
        assert status("mpr_geste", stage="getekend") == "amber"

    def test_combo_without_geste_path_amber(self):
        assert status("mpr_geste", work_type="combo") == "amber"
        assert status("mpr_geste", work_type="combo", mpr_path="geste") == "green"

    @pytest.mark.parametrize("field", ["usage", "age_gt_2"])
    def test_unknown_answers_amber(self, field):
        assert status("mpr_geste", **{field: "onbekend"}) == "amber"

    def test_started_reason_wins(self):
        card = subsidies.evaluate_programme("mpr_geste", intake(stage="gestart", usage="secondaire"))
        assert "already started" in card["reason"]


class TestMprAmpleur:
    def test_ideal_case_green(self):
        assert status("mpr_ampleur", work_type="combo", heatloss_done=True, mpr_path="ampleur") == "green"

    def test_default_needs_audit(self):
        card = subsidies.evaluate_programme("mpr_ampleur", intake())
        assert card["status"] == "amber"
        assert "audit" in card["reason"]

    @pytest.mark.parametrize("usage", ["secondaire", "verhuur"])
    def test_not_main_residence_red(self, usage):
        assert status("mpr_ampleur", usage=usage) == "red"

    def test_started_red(self):
        assert status("mpr_ampleur", stage="gestart") == "red"

    def test_single_work_type_amber(self):
        assert status("mpr_ampleur", work_type="envelop", heatloss_done=True) == "amber"

    def test_geste_path_amber(self):
        assert status("mpr_ampleur", work_type="combo", heatloss_done=True, mpr_path="geste") == "amber"


class TestCee:
    def test_default_green(self):
        assert status("cee") == "green"

    @pytest.mark.parametrize("stage", ["getekend", "gestart"])
    def test_signed_or_started_red(self, stage):
        assert status("cee", stage=stage) == "red"

    def test_quotes_stage_green(self):
        assert status("cee", stage="offertes") == "green"

    def test_secondary_home_allowed(self):
        assert status("cee", usage="secondaire") == "green"

    def test_unknown_age_amber(self):
        assert status("cee", age_gt_2="onbekend") == "amber"


class TestEcoPtz:
    def test_default_green(self):
        assert status("eco_ptz") == "green"

    def test_signed_still_green(self):
        assert status("eco_ptz", stage="getekend") == "green"

    def test_started_red(self):
        assert status("eco_ptz", stage="gestart") == "red"

    def test_secondary_home_red(self):
        assert status("eco_ptz", usage="secondaire") == "red"

    def test_unknown_usage_amber(self):
        assert status("eco_ptz", usage="onbekend") == "amber"


class TestTva:
    def test_known_work_green(self):
        assert status("tva", work_type="envelop") == "green"

    def test_unknown_work_amber(self):
        assert status("tva") == "amber"

    def test_started_amber_not_red(self):
        assert status("tva", stage="gestart", work_type="envelop") == "amber"

    def test_too_new_red(self):
        assert status("tva", age_gt_2="nee") == "red"


class TestLocal:
    def test_always_amber(self):
        assert status("local") == "amber"
        assert status("local", stage="gestart", age_gt_2="nee") == "amber"


# ─────────────────────────────────────────────────────────────────────────────
# Exhaustive invariants
# ─────────────────────────────────────────────────────────────────────────────

class TestInvariants:
    def test_every_intake_yields_one_card_per_programme(self):
        for answers in ALL_INTAKES:
            cards = subsidies.evaluate(answers)["cards"]
            assert [c["id"] for c in cards] == list(PROGRAMME_ORDER)

    def test_statuses_valid_and_eligibility_consistent(self):
        for answers in ALL_INTAKES:
            for card in subsidies.evaluate(answers)["cards"]:
                assert card["status"] in STATUSES
                assert card["eligible"] is (card["status"] != "red")
                assert card["reason"], f"{card['id']} has an empty reason for {answers}"

    def test_new_dwelling_blocks_every_national_programme(self):
        for answers in ALL_INTAKES:
            if answers["age_gt_2"] != "nee":
                continue
            for card in subsidies.evaluate(answers)["cards"]:
                expected = "amber" if card["id"] == "local" else "red"
                assert card["status"] == expected, f"{card['id']} for {answers}"

    def test_started_works_block_premiums(self):
        for answers in ALL_INTAKES:
            if answers["stage"] != "gestart":
                continue
            by_id = {c["id"]: c["status"] for c in subsidies.evaluate(answers)["cards"]}
            for pid in ("mpr_geste", "mpr_ampleur", "cee", "eco_ptz"):
                assert by_id[pid] == "red"
            assert by_id["tva"] != "green"

    def test_deterministic(self):
        for answers in ALL_INTAKES[::17]:
            assert subsidies.evaluate(answers) == subsidies.evaluate(answers)

    def test_card_metadata(self):
        for card in subsidies.evaluate(None)["cards"]:
            meta = PROGRAMMES[card["id"]]
            assert card["title"] == meta["title"]
            assert card["amount"] == meta["amount"]
            assert card["url"].startswith("https://")


# ─────────────────────────────────────────────────────────────────────────────
# Action plan
# ─────────────────────────────────────────────────────────────────────────────

class TestActionPlan:
    def test_before_works_without_audit(self):
        plan = subsidies.evaluate(intake())["action_plan"]
        assert len(plan) == 5
        assert plan[1].startswith("2. Have an energy audit")
        assert plan[2].startswith("3. Apply for: MPR' Geste, MPR' Ampleur, CEE")
        assert plan[4].startswith("5. Carry out the works")

    def test_before_works_with_audit(self):
        plan = subsidies.evaluate(intake(heatloss_done=True))["action_plan"]
        assert len(plan) == 4
        assert plan[1].startswith("2. Apply for:")
        assert plan[3].startswith("4. Carry out the works")

    def test_red_programmes_not_listed(self):
        plan = subsidies.evaluate(intake(age_gt_2="nee", heatloss_done=True))["action_plan"]
        assert plan[1] == "2. Apply for: Local. Do this BEFORE the works start."

    def test_quotes_stage_same_as_before(self):
        assert (
            subsidies.evaluate(intake(stage="offertes"))["action_plan"]
            == subsidies.evaluate(intake(stage="voor"))["action_plan"]
        )

    def test_signed(self):
        plan = subsidies.evaluate(intake(stage="getekend"))["action_plan"]
        assert len(plan) == 3
        assert plan[0].startswith("1. Contract signed")

    def test_started(self):
        plan = subsidies.evaluate(intake(stage="gestart"))["action_plan"]
        assert len(plan) == 3
        assert "5.5% VAT" in plan[1]

    def test_steps_numbered_consecutively(self):
        for answers in ALL_INTAKES[::7]:
            plan = subsidies.evaluate(answers)["action_plan"]
            for index, line in enumerate(plan, start=1):
                assert line.startswith(f"{index}. ")
