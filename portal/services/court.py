"""
Court case records and transcripts.

``CourtCase`` is the canonical record shape. Payloads from the external
court-records API use different field names; ``CourtCase.from_api`` maps
them onto the canonical shape.
"""
import re
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field


class Transcript(BaseModel):
    id: str
    title: str
    date: str
    pages: int


class CourtCase(BaseModel):
    case_name: str
    docket_number: str
    court: str
    date_filed: str
    judge: str = ""
    parties: List[str] = Field(default_factory=list)
    summary: str = ""
    type: str = "Civil"
    status: str = "Active"

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "CourtCase":
        """
        Map an external API search result onto the canonical schema.

        Accepts camelCase keys (``caseName``, ``docketNumber``, ``dateFiled``,
        ``assignedTo``, ``party``, ``snippet``, ``dateTerminated``); canonical
        snake_case keys pass through unchanged.
        """
        parties = payload.get("parties") or payload.get("party") or []
        if isinstance(parties, str):
            parties = [parties]
        date_filed = str(payload.get("date_filed") or payload.get("dateFiled") or "")[:10]
        terminated = payload.get("dateTerminated")
        nature = str(payload.get("natureOfSuit") or payload.get("suitNature") or "")
        case_type = payload.get("type") or ("Criminal" if "criminal" in nature.lower() else "Civil")
        return cls(
            case_name=payload.get("case_name") or payload.get("caseName") or "Untitled case",
            docket_number=payload.get("docket_number") or payload.get("docketNumber") or "",
            court=payload.get("court") or payload.get("court_id") or "",
            date_filed=date_filed,
            judge=payload.get("judge") or payload.get("assignedTo") or "",
            parties=list(parties),
            summary=payload.get("summary") or payload.get("snippet") or payload.get("cause") or "",
            type=case_type,
            status=payload.get("status") or ("Closed" if terminated else "Active"),
        )


_CASES = [
    {
        "case_name": "Securities & Exchange Commission v. FTX Trading Ltd.",
        "docket_number": "2024-SDNY-11547",
        "court": "US District Court, Southern District of New York",
        "date_filed": "2022-11-08",
        "judge": "Judge John J. Kaplan",
        "parties": ["Securities & Exchange Commission", "FTX Trading Ltd.", "Sam Bankman-Fried"],
        "summary": "High-profile cryptocurrency fraud case. Securities violations, wire fraud, and conspiracy charges involving billions in customer funds. Judge Kaplan presiding.",
        "type": "Criminal",
        "status": "Active",
    },
    {
        "case_name": "United States v. Bankman-Fried, Samuel",
        "docket_number": "2024-USDC-SDNY-845",
        "court": "US District Court, Southern District of New York",
        "date_filed": "2022-12-13",
        "judge": "Judge John J. Kaplan",
        "parties": ["United States", "Samuel Bankman-Fried"],
        "summary": "Criminal prosecution of FTX founder. Wire fraud, money laundering, and conspiracy. Judge Kaplan overseeing trial.",
        "type": "Criminal",
        "status": "Active",
    },
    {
        "case_name": "Federal Trade Commission v. TechCorp Inc.",
        "docket_number": "2024-NDCA-8901",
        "court": "US District Court, Northern District of California",
        "date_filed": "2024-01-20",
        "judge": "Judge Elena Rodriguez",
        "parties": ["Federal Trade Commission", "TechCorp Inc."],
        "summary": "Antitrust case involving alleged monopolistic practices in the technology sector.",
        "type": "Civil",
        "status": "Ongoing",
    },
]

_SESSIONS = [
    ("Opening Statements", 14, 42),
    ("Witness Testimony", 21, 118),
    ("Closing Arguments", 45, 36),
]


def _safe_filename(title: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]+", "_", title).strip("_") or "transcript"


class CourtService:
    def __init__(self, download_dir: str = "downloads"):
        self.download_dir = Path(download_dir)
        self.cases: List[CourtCase] = [CourtCase.model_validate(item) for item in _CASES]

    def get_cases(self) -> List[CourtCase]:
        return list(self.cases)

    def get_case(self, docket_number: str) -> Optional[CourtCase]:
        return next((c for c in self.cases if c.docket_number == docket_number), None)

    def add_api_results(self, payloads: List[Dict[str, Any]]) -> List[CourtCase]:
        """Merge external API results into the case list, skipping known dockets."""
        added = []
        for payload in payloads:
            case = CourtCase.from_api(payload)
            if case.docket_number and self.get_case(case.docket_number) is None:
                self.cases.append(case)
                added.append(case)
        return added

    def search_cases(self, query: str = "", judge: str = "", party: str = "") -> List[CourtCase]:
        q, j, p = query.lower(), judge.lower(), party.lower()

        def matches(case: CourtCase) -> bool:
            query_match = not q or (
                q in case.case_name.lower()
                or q in case.summary.lower()
                or any(q in name.lower() for name in case.parties)
            )
            judge_match = not j or j in case.judge.lower()
            party_match = not p or any(p in name.lower() for name in case.parties)
            return query_match and judge_match and party_match

        return [c for c in self.cases if matches(c)]

    # --- Transcripts ---
    def get_transcripts(self, docket_number: str) -> List[Transcript]:
        case = self.get_case(docket_number)
        if case is None:
            return []
        try:
            filed = date.fromisoformat(case.date_filed)
        except ValueError:
            filed = date.today()
        return [
            Transcript(
                id=f"{docket_number}-T{index}",
                title=f"{title} - {case.case_name}",
                date=(filed + timedelta(days=offset)).isoformat(),
                pages=pages,
            )
            for index, (title, offset, pages) in enumerate(_SESSIONS, start=1)
        ]

    def _find_transcript(self, transcript_id: str):
        docket, _, _ = transcript_id.rpartition("-T")
        case = self.get_case(docket)
        transcript = next((t for t in self.get_transcripts(docket) if t.id == transcript_id), None)
        return case, transcript

    def get_transcript_content(self, transcript_id: str) -> str:
        case, transcript = self._find_transcript(transcript_id)
        if case is None or transcript is None:
            return ""
        lines = [
            case.court.upper(),
            "",
            case.case_name,
            f"Docket No. {case.docket_number}",
            f"Transcript of Proceedings: {transcript.title}",
            f"Date: {transcript.date}",
            f"Before: {case.judge}",
            "",
            "THE COURT: We are on the record.",
        ]
        for name in case.parties:
            lines.append(f"COUNSEL FOR {name.upper()}: Present, Your Honor.")
        lines += ["", f"({transcript.pages} pages)", "", "END OF TRANSCRIPT"]
        return "\n".join(lines)

    def download_transcript(self, transcript_id: str, title: str) -> Optional[Path]:
        content = self.get_transcript_content(transcript_id)
        if not content:
            logger.warning(f"Transcript '{transcript_id}' not found")
            return None
        return self._write(f"{_safe_filename(title)}.txt", content)

    def download_all_transcripts(self, docket_number: str, case_name: str) -> Optional[Path]:
        transcripts = self.get_transcripts(docket_number)
        if not transcripts:
            return None
        separator = "\n\n" + "=" * 72 + "\n\n"
        content = separator.join(self.get_transcript_content(t.id) for t in transcripts)
        return self._write(f"{_safe_filename(case_name)}_transcripts.txt", content)

    def _write(self, filename: str, content: str) -> Path:
        self.download_dir.mkdir(parents=True, exist_ok=True)
        path = self.download_dir / filename
        path.write_text(content, encoding="utf-8")
        logger.info(f"Downloaded: {path}")
        return path
