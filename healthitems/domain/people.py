"""People, organizations and their contact details."""

from pydantic import Field

from healthitems.domain.base import NonBlankStr, XmlModel
from healthitems.domain.codes import CodableValue


class Name(XmlModel):
    full: NonBlankStr
    title: CodableValue | None = None
    first: NonBlankStr | None = None
    middle: NonBlankStr | None = None
    last: NonBlankStr | None = None
    suffix: CodableValue | None = None

    @classmethod
    def from_parts(cls, first: str, last: str, middle: str | None = None) -> "Name":
        full = " ".join(part for part in (first, middle, last) if part)
        return cls(full=full, first=first, middle=middle, last=last)

    def __str__(self) -> str:
        return self.full


class Address(XmlModel):
    description: NonBlankStr | None = None
    is_primary: bool | None = None
    street: list[NonBlankStr] = Field(min_length=1)
    city: NonBlankStr
    state: NonBlankStr | None = None
    postcode: NonBlankStr
    country: NonBlankStr
    county: NonBlankStr | None = None

    def __str__(self) -> str:
        parts = [*self.street, self.city, self.state, self.postcode, self.country]
        return ", ".join(part for part in parts if part)


class Phone(XmlModel):
    description: NonBlankStr | None = None
    is_primary: bool | None = None
    number: NonBlankStr

    def __str__(self) -> str:
        return self.number


class Email(XmlModel):
    description: NonBlankStr | None = None
    is_primary: bool | None = None
    address: NonBlankStr

    def __str__(self) -> str:
        return self.address


class ContactInfo(XmlModel):
    address: list[Address] = Field(default_factory=list)
    phone: list[Phone] = Field(default_factory=list)
    email: list[Email] = Field(default_factory=list)

    @property
    def primary_phone(self) -> Phone | None:
        return next((phone for phone in self.phone if phone.is_primary), None)

    @property
    def primary_email(self) -> Email | None:
        return next((email for email in self.email if email.is_primary), None)

    def __str__(self) -> str:
        if self.primary_phone is not None:
            return str(self.primary_phone)
        if self.phone:
            return str(self.phone[0])
        if self.address:
            return self.address[0].city
        if self.primary_email is not None:
            return str(self.primary_email)
        if self.email:
            return str(self.email[0])
        return ""


class PersonItem(XmlModel):
    """A person: provider, proxy, witness, physician and so on."""

    name: Name
    organization: NonBlankStr | None = None
    professional_training: NonBlankStr | None = None
    id: NonBlankStr | None = None
    contact: ContactInfo | None = None
    type: CodableValue | None = None

    def __str__(self) -> str:
        return str(self.name)


class Organization(XmlModel):
    name: NonBlankStr
    contact: ContactInfo | None = None
    type: list[CodableValue] = Field(default_factory=list)
    website: NonBlankStr | None = None

    def __str__(self) -> str:
        return self.name
