from enum import Enum
from pydantic import AliasChoices, BaseModel, Field


class ChartType(str, Enum):
    BAR = "bar"
    LINE = "line"
    SCATTER = "scatter"
    AREA = "area"


class ChartPoint(BaseModel):
    name: str
    value: float


class AnalysisResult(BaseModel):
    summary: str = ""
    insights: list[str] = []
    chart_data: list[ChartPoint] = Field(
        default_factory=list, validation_alias=AliasChoices("chart_data", "chartData")
    )
    chart_type: ChartType = Field(
        default=ChartType.BAR, validation_alias=AliasChoices("chart_type", "chartType")
    )
    recommendations: list[str] = []


ANALYSIS_SCHEMA = {
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "insights": {"type": "array", "items": {"type": "string"}},
        "chart_data": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "value": {"type": "number"},
                },
                "required": ["name", "value"],
            },
        },
        "chart_type": {"type": "string", "enum": [c.value for c in ChartType]},
        "recommendations": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["summary", "insights", "chart_data", "chart_type", "recommendations"],
}
