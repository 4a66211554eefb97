from __future__ import annotations

from typing import Any, Literal, cast

from pydantic import BaseModel, Field, field_validator

from pseudocode_converter.emitters import AnnotationOptions

MAX_INPUT_CHARS = 100_000

# -----------------------
# Shared
# -----------------------


class AnnotationOptionsModel(BaseModel):
    """Learner comments; only the javascript target has an annotated emitter"""

    show_metacognition: bool = False
    show_actor_pattern: bool = False
    explain_every_line: bool = False


class GenerationOptionsModel(BaseModel):
    """Per-request overrides of the configured generation options"""

    indent_size: int | None = Field(default=None, ge=1)
    indent_char: Literal["space", "tab"] | None = None
    include_comments: bool | None = None
    strict_mode: bool | None = None
    annotations: AnnotationOptionsModel | None = None

    def overrides(self) -> dict[str, Any]:
        values = self.model_dump(exclude_none=True)
        if "indent_char" in values:
            values["indent_char"] = "\t" if values["indent_char"] == "tab" else " "
        if self.annotations is not None:
            values["annotations"] = AnnotationOptions(**self.annotations.model_dump())
        return values


def _normalize_tag(v: str | None) -> str | None:
    if v is None:
        return None
    return v.strip().lower() or None


# -----------------------
# Convert DTOs
# -----------------------


class ConvertRequest(BaseModel):
    text: str = Field(..., max_length=MAX_INPUT_CHARS)
    target: str | None = Field(default=None, description="Target tag; configured default when omitted")
    source: str | None = Field(default=None, description="Source tag; auto-detected when omitted")
    use_indentation: bool | None = None
    options: GenerationOptionsModel | None = None

    @field_validator("target", "source")
    @classmethod
    def _normalize(cls, v: str | None) -> str | None:
        return _normalize_tag(v)


class ConvertResponse(BaseModel):
    code: str
    source: str
    target: str
    implemented: bool
    node_count: int
    warnings: list[str] = Field(default_factory=lambda: cast("list[str]", []))
    duration_ms: float


# -----------------------
# Detect / parse DTOs
# -----------------------


class DetectRequest(BaseModel):
    text: str = Field(..., max_length=MAX_INPUT_CHARS)


class DetectResponse(BaseModel):
    language: str
    implemented: bool


class ParseRequest(BaseModel):
    text: str = Field(..., max_length=MAX_INPUT_CHARS)
    source: str | None = None
    use_indentation: bool | None = None

    @field_validator("source")
    @classmethod
    def _normalize(cls, v: str | None) -> str | None:
        return _normalize_tag(v)


class ParseResponse(BaseModel):
    source: str
    implemented: bool
    warnings: list[str] = Field(default_factory=lambda: cast("list[str]", []))
    ast: list[dict[str, Any]]


# -----------------------
# Languages / system
# -----------------------


class SourceLanguageInfo(BaseModel):
    name: str
    implemented: bool
    parser: str
    note: str = ""


class LanguagesResponse(BaseModel):
    sources: list[SourceLanguageInfo]
    targets: list[str]
    default_target: str
    default_source: str


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    version: str
    targets: int
