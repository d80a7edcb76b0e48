"""Advance directives, healthcare proxies, insurance coverage and claims."""

from decimal import Decimal
from uuid import UUID

from pydantic import Field

from healthitems.domain.base import NonBlankStr, XmlModel
from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import ApproximateDateTime, DurationValue, HealthServiceDateTime
from healthitems.domain.people import ContactInfo, Organization, PersonItem
from healthitems.items.base import HealthRecordItem
from healthitems.items.registry import register_item_type


@register_item_type
class Directive(HealthRecordItem):
    """An advance directive such as a living will or do-not-resuscitate order."""

    TYPE_ID = UUID("822a5e5a-14f1-4d06-b92f-8f3f1b05218f")
    TYPE_NAME = "Advance Directive"
    ROOT_ELEMENT = "directive"

    start_date: ApproximateDateTime | None = None
    stop_date: ApproximateDateTime | None = None
    description: NonBlankStr | None = None
    full_resuscitation: bool | None = None
    prohibited_interventions: CodableValue | None = None
    additional_instructions: NonBlankStr | None = None
    attending_physician: PersonItem | None = None
    attending_physician_endorsement: HealthServiceDateTime | None = None
    attending_nurse: PersonItem | None = None
    attending_nurse_endorsement: HealthServiceDateTime | None = None
    expiration_date: HealthServiceDateTime | None = None
    discontinuation_date: ApproximateDateTime | None = None
    discontinuation_physician: PersonItem | None = None
    discontinuation_physician_endorsement: HealthServiceDateTime | None = None
    discontinuation_nurse: PersonItem | None = None
    discontinuation_nurse_endorsement: HealthServiceDateTime | None = None

    def __str__(self) -> str:
        return self.description or ""


@register_item_type
class HealthcareProxy(HealthRecordItem):
    TYPE_ID = UUID("7EA47715-CBA4-47F0-99D2-EB0A9FB4A85C")
    TYPE_NAME = "Healthcare Proxy"
    ROOT_ELEMENT = "healthcare-proxy"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    proxy: PersonItem | None = None
    alternate: PersonItem | None = None
    primary_witness: PersonItem | None = None
    secondary_witness: PersonItem | None = None
    content: NonBlankStr | None = None

    def __str__(self) -> str:
        if self.proxy is not None:
            return str(self.proxy)
        return self.content or ""


@register_item_type
class Payer(HealthRecordItem):
    """An insurance plan that pays for the person's care."""

    TYPE_ID = UUID("9366440c-ec81-4b89-b231-308a4c4d70ed")
    TYPE_NAME = "Payer"
    ROOT_ELEMENT = "payer"

    plan_name: NonBlankStr
    coverage_type: CodableValue | None = None
    carrier_id: NonBlankStr | None = None
    group_num: NonBlankStr | None = None
    plan_code: NonBlankStr | None = None
    subscriber_id: NonBlankStr | None = None
    person_code: NonBlankStr | None = None
    subscriber_name: NonBlankStr | None = None
    subscriber_dob: HealthServiceDateTime | None = None
    is_primary: bool | None = None
    expiration_date: HealthServiceDateTime | None = None
    contact: ContactInfo | None = None

    def __str__(self) -> str:
        if self.coverage_type is None:
            return self.plan_name
        return f"{self.plan_name} ({self.coverage_type.text})"


class ClaimAmounts(XmlModel):
    """Money amounts of a claim or of one service, in the claim's currency."""

    charged_amount: Decimal
    negotiated_amount: Decimal
    copay: Decimal
    deductible: Decimal
    amount_not_covered: Decimal
    eligible_for_benefits: Decimal
    percentage_covered: float | None = Field(default=None, ge=0.0, le=1.0)
    coinsurance: Decimal
    miscellaneous_adjustments: Decimal
    benefits_paid: Decimal
    patient_responsibility: Decimal


class Service(XmlModel):
    service_type: CodableValue
    diagnosis: CodableValue | None = None
    billing_code: CodableValue | None = None
    service_dates: DurationValue
    claim_amounts: ClaimAmounts
    notes: list[NonBlankStr] = Field(default_factory=list)

    def __str__(self) -> str:
        return self.service_type.text


@register_item_type
class ExplanationOfBenefits(HealthRecordItem):
    """An insurer's statement of what it paid for a claim."""

    TYPE_ID = UUID("356fbba9-e0c9-4f4f-b0d9-4594f2490d2f")
    TYPE_NAME = "Explanation Of Benefits"
    ROOT_ELEMENT = "explanation-of-benefits"

    date_submitted: HealthServiceDateTime
    patient: PersonItem
    relationship_to_member: CodableValue | None = None
    plan: Organization
    group_id: NonBlankStr | None = None
    member_id: NonBlankStr
    claim_type: CodableValue
    claim_id: NonBlankStr
    submitted_by: Organization
    provider: Organization
    currency: CodableValue
    claim_totals: ClaimAmounts
    services: list[Service] = Field(default_factory=list)

    def __str__(self) -> str:
        charged = self.claim_totals.charged_amount
        return f"{self.provider}: {self.claim_type}, {charged} {self.currency}"
