"""
Coded values: free text plus zero or more vocabulary codes.

A `CodableValue` always carries human-readable text. Codes pin that text to
entries of controlled vocabularies so that it can be interpreted by software.
"""

from pydantic import Field

from healthitems.domain.base import NonBlankStr, XmlModel


class VocabularyKey(XmlModel):
    """Identifies a vocabulary by name, family and version."""

    name: NonBlankStr
    family: NonBlankStr | None = None
    version: NonBlankStr | None = None

    def __str__(self) -> str:
        return ", ".join(part for part in (self.family, self.name, self.version) if part)


class CodedValue(XmlModel):
    """A single vocabulary code."""

    value: NonBlankStr
    family: NonBlankStr | None = None
    vocabulary_name: NonBlankStr = Field(alias="type", description="Vocabulary name")
    version: NonBlankStr | None = None

    def __str__(self) -> str:
        parts = (self.family, self.vocabulary_name, self.version, self.value)
        return ", ".join(part for part in parts if part)


class CodableValue(XmlModel):
    """Text with optional codes from one or more vocabularies."""

    text: NonBlankStr
    codes: list[CodedValue] = Field(default_factory=list, alias="code")

    @classmethod
    def from_vocabulary(cls, text: str, code: str, key: VocabularyKey) -> "CodableValue":
        value = cls(text=text)
        value.add_code(code, key.name, family=key.family, version=key.version)
        return value

    def add(self, code: CodedValue) -> None:
        # Reassign so validate_assignment checks the element type
        self.codes = [*self.codes, code]

    def add_code(
        self,
        value: str,
        vocabulary_name: str,
        family: str | None = None,
        version: str | None = None,
    ) -> CodedValue:
        code = CodedValue(
            value=value, vocabulary_name=vocabulary_name, family=family, version=version
        )
        self.add(code)
        return code

    def matches(self, value: str, vocabulary_name: str, family: str | None = None) -> bool:
        """True when any code has this value in the named vocabulary."""
        return any(
            code.value == value
            and code.vocabulary_name == vocabulary_name
            and (family is None or code.family == family)
            for code in self.codes
        )

    def __str__(self) -> str:
        return self.text
