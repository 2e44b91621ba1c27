from pydantic import BaseModel, ConfigDict

MISSING_SECTION = "Content not generated."


class StructuredReport(BaseModel):
    """Eight-section academic report derived from a draft."""

    model_config = ConfigDict(frozen=True)

    tajuk: str = MISSING_SECTION
    abstrak: str = MISSING_SECTION
    pengenalan: str = MISSING_SECTION
    metodologi: str = MISSING_SECTION
    hasil_kajian: str = MISSING_SECTION
    perbincangan: str = MISSING_SECTION
    rumusan: str = MISSING_SECTION
    rujukan: str = MISSING_SECTION
    missing_sections: tuple[str, ...] = ()
