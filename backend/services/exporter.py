import re
from html import escape
from models.session import ReviewSession
from services.report_parser import REPORT_SECTIONS, parse_report

WORD_HEADER = (
    "<html xmlns:o='urn:schemas-microsoft-com:office:office' "
    "xmlns:w='urn:schemas-microsoft-com:office:word' "
    "xmlns='http://www.w3.org/TR/REC-html40'>"
    "<head><meta charset='utf-8'><title>Research Report</title><style>"
    "body{font-family:'Times New Roman',serif; line-height:1.5; padding: 40px;} "
    "h1{color:#1e3a8a; border-bottom: 2px solid #1e3a8a; padding-bottom: 10px;} "
    "h2{color:#4338ca; margin-top: 30px;} "
    ".section{margin-bottom:20px; text-align: justify;} "
    "table{width:100%; border-collapse:collapse; margin-top:20px;} "
    "th, td{border:1px solid #ccc; padding:10px; text-align:left; vertical-align: top;}"
    "</style></head><body>"
)
WORD_FOOTER = "</body></html>"


def report_filename(session: ReviewSession, extension: str) -> str:
    slug = re.sub(r"\s+", "_", session.topic)
    return f"Report_{slug}.{extension}"


def render_text(session: ReviewSession) -> str:
    return f"Topic: {session.topic}\nReview Type: {session.review_type.value}\n\n{session.draft}"


def _html_lines(text: str) -> str:
    return escape(text).replace("\n", "<br/>")


def render_word_document(session: ReviewSession) -> str:
    """HTML that word processors open as a .doc: section matrix plus the full draft."""
    report = parse_report(session.draft)
    rows = "\n".join(
        f"<tr><td><b>{label}</b></td><td>{_html_lines(getattr(report, field))}</td></tr>"
        for field, label in REPORT_SECTIONS
    )
    body = f"""
      <h1>ScholarPulse AI Research Report</h1>
      <p><b>Research Topic:</b> {escape(session.topic)}</p>
      <p><b>Review Methodology:</b> {escape(session.review_type.value)}</p>
      <hr/>

      <div class="section">
        <h2>Report Matrix</h2>
        <table>
          <thead>
            <tr style="background:#f3f4f6;"><th>BAHAGIAN</th><th>KANDUNGAN LAPORAN</th></tr>
          </thead>
          <tbody>
{rows}
          </tbody>
        </table>
      </div>

      <div class="section">
        <h2>Full Text Draft</h2>
        <p>{_html_lines(session.draft)}</p>
      </div>
    """
    return WORD_HEADER + body + WORD_FOOTER
