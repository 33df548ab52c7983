from heroledger.models import BenefitLedger, BenefitSource, BenefitType, GrantedBenefit


def entry(kind, target, src=("feat", "Alert"), value=1):
    return GrantedBenefit(
        source=BenefitSource(type=src[0], name=src[1]),
        benefit_type=kind,
        target=target,
        value=value,
    )


def test_source_tag():
    assert BenefitSource(type="feat", name="Tough").tag == "feat: Tough"


def test_query_by_source_and_type():
    ledger = BenefitLedger()
    ledger.add_benefit(entry(BenefitType.INITIATIVE, "initiative", value=5))
    ledger.add_benefit(entry(BenefitType.LANGUAGE, "Elvish", src=("species", "Elf")))
    assert len(ledger.get_benefits_by_source("feat", "Alert")) == 1
    assert [e.target for e in ledger.get_benefits_by_type(BenefitType.LANGUAGE)] == ["Elvish"]
    assert len(ledger) == 2


def test_remove_by_source_is_scoped_to_exact_pair():
    ledger = BenefitLedger()
    ledger.add_benefit(entry(BenefitType.LANGUAGE, "Elvish", src=("feat", "Linguist")))
    ledger.add_benefit(entry(BenefitType.LANGUAGE, "Elvish", src=("species", "Elf")))
    ledger.add_benefit(entry(BenefitType.LANGUAGE, "Giant", src=("feat", "Linguist")))
    removed = ledger.remove_benefits_by_source("feat", "Linguist")
    assert [e.target for e in removed] == ["Elvish", "Giant"]
    assert ledger.count_target(BenefitType.LANGUAGE, "elvish") == 1
    assert ledger.remove_benefits_by_source("feat", "Linguist") == []


def test_ledger_is_a_multiset():
    ledger = BenefitLedger()
    ledger.add_benefit(entry(BenefitType.LANGUAGE, "Elvish"))
    ledger.add_benefit(entry(BenefitType.LANGUAGE, "Elvish"))
    assert ledger.count_target(BenefitType.LANGUAGE, "Elvish") == 2
