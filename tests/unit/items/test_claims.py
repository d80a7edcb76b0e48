"""
Tests for explanation of benefits items.

Covers:
- Decimal claim amounts written and read without rounding
- Required claim fields
- Service summaries and the claim summary
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import ApproximateDate, DurationValue, HealthServiceDateTime
from healthitems.domain.people import Name, Organization, PersonItem
from healthitems.items.legal import ClaimAmounts, ExplanationOfBenefits, Service


def _amounts(charged: str) -> ClaimAmounts:
    zero = Decimal("0")
    return ClaimAmounts(
        charged_amount=Decimal(charged),
        negotiated_amount=Decimal("80.10"),
        copay=Decimal("20.00"),
        deductible=zero,
        amount_not_covered=zero,
        eligible_for_benefits=Decimal("80.10"),
        coinsurance=zero,
        miscellaneous_adjustments=zero,
        benefits_paid=Decimal("60.10"),
        patient_responsibility=Decimal("20.00"),
    )


def _claim(**overrides: object) -> ExplanationOfBenefits:
    values: dict[str, object] = {
        "date_submitted": HealthServiceDateTime.from_datetime(datetime(2024, 4, 2)),
        "patient": PersonItem(name=Name(full="Jo Park")),
        "plan": Organization(name="Acme Health"),
        "member_id": "M-123",
        "claim_type": CodableValue(text="medical"),
        "claim_id": "C-987",
        "submitted_by": Organization(name="Valley Clinic"),
        "provider": Organization(name="Valley Clinic"),
        "currency": CodableValue(text="USD"),
        "claim_totals": _amounts("125.50"),
    }
    values.update(overrides)
    return ExplanationOfBenefits.model_validate(values)


class TestExplanationOfBenefits:
    def test_summary(self) -> None:
        assert str(_claim()) == "Valley Clinic: medical, 125.50 USD"

    def test_amounts_keep_their_digits(self) -> None:
        claim = _claim()

        element = claim.write_xml()

        assert element.findtext("claim-totals/charged-amount") == "125.50"
        assert element.findtext("claim-totals/copay") == "20.00"
        assert ExplanationOfBenefits.parse_xml(element).claim_totals == claim.claim_totals

    def test_services(self) -> None:
        service = Service(
            service_type=CodableValue(text="Office visit"),
            service_dates=DurationValue(
                start_date=ApproximateDate(y=2024, m=3, d=30),
                end_date=ApproximateDate(y=2024, m=3, d=30),
            ),
            claim_amounts=_amounts("125.50"),
            notes=["Follow-up in two weeks"],
        )

        claim = _claim(services=[service])

        assert str(claim.services[0]) == "Office visit"
        assert claim.write_xml().findtext("services/notes") == "Follow-up in two weeks"

    @pytest.mark.parametrize("missing", ["patient", "member_id", "claim_totals", "currency"])
    def test_required_fields(self, missing: str) -> None:
        claim = _claim()
        values = claim.model_dump(exclude={missing})

        with pytest.raises(ValidationError):
            ExplanationOfBenefits.model_validate(values)

    def test_percentage_covered_is_a_fraction(self) -> None:
        values = {**_amounts("1").model_dump(), "percentage_covered": 2.0}

        with pytest.raises(ValidationError):
            ClaimAmounts.model_validate(values)
