from enum import Enum

VIEW_PREFERENCE_KEY = "scholar_pulse_view"


class AppView(str, Enum):
    LITERATURE_REVIEW = "LITERATURE_REVIEW"
    COMPOSITION = "COMPOSITION"
    DATA_ANALYSIS = "DATA_ANALYSIS"


VIEW_TITLES = {
    AppView.LITERATURE_REVIEW: "Literature Review Workspace",
    AppView.COMPOSITION: "Academic Writing Studio",
    AppView.DATA_ANALYSIS: "Intelligent Data Analysis",
}

DEFAULT_VIEW = AppView.LITERATURE_REVIEW
