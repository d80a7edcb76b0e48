"""Appointments, encounters, procedures, devices, health events and image studies."""

from uuid import UUID

from pydantic import Field

from healthitems.domain.base import NonBlankStr, XmlModel
from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import ApproximateDateTime, DurationValue, HealthServiceDateTime
from healthitems.domain.people import Organization, PersonItem
from healthitems.items.base import HealthRecordItem, summarize
from healthitems.items.registry import register_item_type


@register_item_type
class Appointment(HealthRecordItem):
    TYPE_ID = UUID("4B18AEB6-5F01-444C-8C70-DBF13A2F510B")
    TYPE_NAME = "Appointment"
    ROOT_ELEMENT = "appointment"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    duration: DurationValue | None = None
    service: CodableValue | None = None
    clinic: PersonItem | None = None
    specialty: CodableValue | None = None
    status: CodableValue | None = None
    care_class: CodableValue | None = None

    def __str__(self) -> str:
        return summarize(self.when, self.duration, self.clinic, self.status, self.service)


@register_item_type
class Encounter(HealthRecordItem):
    TYPE_ID = UUID("464083cc-13de-4f3e-a189-da8e47d5651b")
    TYPE_NAME = "Encounter"
    ROOT_ELEMENT = "encounter"

    when: HealthServiceDateTime | None = None
    type: CodableValue | None = None
    reason: NonBlankStr | None = None
    duration: DurationValue | None = None
    consent_granted: bool | None = None
    facility: Organization | None = None

    def __str__(self) -> str:
        return summarize(self.type, self.reason)


@register_item_type
class Procedure(HealthRecordItem):
    TYPE_ID = UUID("df4db479-a1ba-42a2-8714-2b083b88150f")
    TYPE_NAME = "Procedure"
    ROOT_ELEMENT = "procedure"

    when: ApproximateDateTime | None = None
    name: CodableValue | None = None
    anatomic_location: CodableValue | None = None
    primary_provider: PersonItem | None = None
    secondary_provider: PersonItem | None = None

    def __str__(self) -> str:
        return summarize(self.name, self.anatomic_location, self.when)


@register_item_type
class DischargeSummary(HealthRecordItem):
    """Summary written when a patient leaves a care setting."""

    TYPE_ID = UUID("02EF57A2-A620-425A-8E92-A301542CCA54")
    TYPE_NAME = "Discharge Summary"
    ROOT_ELEMENT = "discharge-summary"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    type: CodableValue | None = None
    category: CodableValue | None = None
    setting: CodableValue | None = None
    specialty: NonBlankStr | None = None
    text: NonBlankStr | None = None
    primary_provider: PersonItem | None = None
    primary_provider_endorsement: HealthServiceDateTime | None = None
    secondary_provider: PersonItem | None = None
    secondary_provider_endorsement: HealthServiceDateTime | None = None
    discharge_date_time: ApproximateDateTime | None = None
    admitting_diagnosis: CodableValue | None = None
    principal_diagnosis: CodableValue | None = None
    additional_diagnosis: CodableValue | None = None
    principal_procedure_physician: PersonItem | None = None
    principal_procedure: CodableValue | None = None
    additional_procedure: CodableValue | None = None

    def __str__(self) -> str:
        return summarize(self.when, self.primary_provider, self.principal_diagnosis, self.text)


@register_item_type
class Device(HealthRecordItem):
    TYPE_ID = UUID("EF9CF8D5-6C0B-4292-997F-4047240BC7BE")
    TYPE_NAME = "Device"
    ROOT_ELEMENT = "device"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    device_name: NonBlankStr | None = None
    vendor: PersonItem | None = None
    model: NonBlankStr | None = None
    serial_number: NonBlankStr | None = None
    anatomic_site: NonBlankStr | None = None
    description: NonBlankStr | None = None

    def __str__(self) -> str:
        return summarize(
            self.device_name, self.model, self.vendor, self.anatomic_site, self.description
        )


@register_item_type
class HealthEvent(HealthRecordItem):
    TYPE_ID = UUID("1572af76-1653-4c39-9683-9f9ca6584ba3")
    TYPE_NAME = "Health Event"
    ROOT_ELEMENT = "health-event"

    when: ApproximateDateTime
    event: CodableValue
    category: CodableValue | None = None

    def __str__(self) -> str:
        if self.category is None:
            return str(self.event)
        return f"{self.event} ({self.category})"


class MedicalImageStudySeriesImage(XmlModel):
    """Blob names of one image and its preview; the blobs belong to the item."""

    image_blob_name: NonBlankStr
    image_preview_blob_name: NonBlankStr | None = None

    def __str__(self) -> str:
        return self.image_blob_name


class MedicalImageStudySeries(XmlModel):
    acquisition_datetime: HealthServiceDateTime
    description: NonBlankStr | None = None
    images: list[MedicalImageStudySeriesImage] = Field(default_factory=list)
    institution_name: Organization | None = None
    referring_physician: PersonItem | None = None
    modality: CodableValue | None = None
    body_part: CodableValue | None = None
    preview_blob_name: NonBlankStr | None = None
    series_instance_uid: NonBlankStr | None = None

    def __str__(self) -> str:
        return summarize(self.description, self.modality, self.body_part) or str(
            self.acquisition_datetime
        )


@register_item_type
class MedicalImageStudy(HealthRecordItem):
    """A DICOM study: its series, key images and the reason it was taken."""

    TYPE_ID = UUID("c75651c8-548e-449f-8942-9e6379b0b88a")
    TYPE_NAME = "Medical Image Study"
    ROOT_ELEMENT = "medical-image-study"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    patient_name: NonBlankStr | None = None
    description: NonBlankStr | None = None
    series: list[MedicalImageStudySeries] = Field(default_factory=list)
    reason: CodableValue | None = None
    preview_blob_name: NonBlankStr | None = None
    key_images: list[MedicalImageStudySeriesImage] = Field(default_factory=list)
    study_instance_uid: NonBlankStr | None = None

    def __str__(self) -> str:
        return summarize(self.description, self.reason)


class MedicalImageStudySeriesV2(XmlModel):
    acquisition_datetime: HealthServiceDateTime | None = None
    description: NonBlankStr | None = None
    images: list[MedicalImageStudySeriesImage] = Field(default_factory=list)
    institution_name: Organization | None = None
    modality: CodableValue | None = None
    body_part: CodableValue | None = None
    preview_blob_name: NonBlankStr | None = None
    series_instance_uid: NonBlankStr | None = None

    def __str__(self) -> str:
        return summarize(self.description, self.modality, self.body_part)


@register_item_type
class MedicalImageStudyV2(HealthRecordItem):
    TYPE_ID = UUID("cdfc0a9b-6d3b-4d16-afa8-02b86d621a8d")
    TYPE_NAME = "Medical Image Study V2"
    ROOT_ELEMENT = "medical-image-study"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    patient_name: NonBlankStr | None = None
    description: NonBlankStr | None = None
    series: list[MedicalImageStudySeriesV2] = Field(min_length=1)
    reason: CodableValue | None = None
    preview_blob_name: NonBlankStr | None = None
    key_images: list[MedicalImageStudySeriesImage] = Field(default_factory=list)
    study_instance_uid: NonBlankStr | None = None
    referring_physician: PersonItem | None = None
    accession_number: NonBlankStr | None = None

    def __str__(self) -> str:
        return summarize(self.description, self.reason)
