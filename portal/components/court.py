from html import escape

from loguru import logger

from portal.core.keys import ServiceKey
from portal.ui.component import BaseComponent


class CourtComponent(BaseComponent):
    """
    Case search with a detail view and transcript viewer.

    The ``#court-section`` mount point only exists once the court page is
    shown, so this component is initialized data-only at startup and
    attached by navigation.
    """

    def __init__(self, dependencies):
        super().__init__("court-section", dependencies)
        self.court_service = self.get_service(ServiceKey.COURT)
        self.notifications = self.get_service(ServiceKey.NOTIFICATION)

    def on_init(self):
        cases = self.court_service.get_cases()
        self.set_state({
            "cases": cases,
            "filtered": cases,
            "query": "",
            "judge": "",
            "selected": None,
            "viewer": None,
        })

    @property
    def selected_case(self):
        docket = self.state["selected"]
        if docket is None:
            return None
        return next((c for c in self.state["cases"] if c.docket_number == docket), None)

    # --- Markup ---
    def build_markup(self) -> str:
        case = self.selected_case
        if case is not None:
            return self._render_case_details(case)
        return self._render_case_list()

    def _render_case_list(self) -> str:
        cards = []
        for case in self.state["filtered"]:
            count = len(self.court_service.get_transcripts(case.docket_number))
            cards.append(f"""
                <div class="case-card" data-docket="{escape(case.docket_number)}">
                    <h4>{escape(case.case_name)}</h4>
                    <p class="case-docket">Docket: {escape(case.docket_number)}</p>
                    <p class="case-judge">Judge: {escape(case.judge)}</p>
                    <p class="case-summary">{escape(case.summary)}</p>
                    <div class="case-card-footer">
                        <span class="case-status">{escape(case.status)}</span>
                        <span class="transcript-count">{count} transcripts</span>
                    </div>
                </div>
            """)
        listing = "".join(cards) or '<p class="empty-state">No matching cases.</p>'
        return f"""
            <div class="court-container">
                <h2>Court Document Search</h2>
                <div class="search-filters">
                    <input type="text" id="search-query" placeholder="Search cases..." value="{escape(self.state['query'])}">
                    <input type="text" id="filter-judge" placeholder="Filter by judge..." value="{escape(self.state['judge'])}">
                </div>
                <div class="cases-list">{listing}</div>
            </div>
        """

    def _render_case_details(self, case) -> str:
        transcripts = self.court_service.get_transcripts(case.docket_number)
        info = "".join(
            f'<div class="info-item"><label>{label}:</label><p>{escape(value)}</p></div>'
            for label, value in (
                ("Docket Number", case.docket_number),
                ("Court", case.court),
                ("Judge", case.judge),
                ("Date Filed", case.date_filed),
                ("Type", case.type),
                ("Status", case.status),
            )
        )
        parties = "".join(f"<li>{escape(name)}</li>" for name in case.parties)
        rows = "".join(f"""
            <div class="transcript-card">
                <div class="transcript-info">
                    <h4>{escape(t.title)}</h4>
                    <p class="transcript-meta"><span class="date">{t.date}</span> <span class="pages">{t.pages} pages</span></p>
                </div>
                <div class="transcript-actions">
                    <button class="btn-view-transcript" data-id="{escape(t.id)}" data-title="{escape(t.title)}">View</button>
                    <button class="btn-download-transcript" data-id="{escape(t.id)}" data-title="{escape(t.title)}">Download</button>
                </div>
            </div>
        """ for t in transcripts)

        viewer = self.state["viewer"]
        if viewer is not None:
            viewer_html = f"""
                <div id="transcript-viewer" class="transcript-viewer">
                    <div class="transcript-viewer-header">
                        <h3 id="viewer-title">{escape(viewer['title'])}</h3>
                        <button class="btn-close-viewer" id="btn-close-viewer">Close</button>
                    </div>
                    <div id="transcript-content" class="transcript-content"><pre>{escape(viewer['content'])}</pre></div>
                </div>
            """
        else:
            viewer_html = '<div id="transcript-viewer" class="transcript-viewer hidden"></div>'

        return f"""
            <div class="court-container">
                <button class="btn-back" id="btn-back-cases">Back to Cases</button>
                <div class="case-details">
                    <h2>{escape(case.case_name)}</h2>
                    <div class="case-info-grid">{info}</div>
                    <div class="case-parties"><h3>Parties Involved</h3><ul>{parties}</ul></div>
                    <div class="case-summary"><h3>Summary</h3><p>{escape(case.summary)}</p></div>
                    <div class="transcripts-section">
                        <div class="transcripts-header">
                            <h3>Court Transcripts ({len(transcripts)})</h3>
                            <button class="btn-download-all" id="btn-download-all">Download All Transcripts</button>
                        </div>
                        <div class="transcripts-list">{rows}</div>
                    </div>
                    {viewer_html}
                </div>
            </div>
        """

    # --- Events ---
    def bind_events(self):
        if self.state["selected"] is not None:
            self.listen("#btn-back-cases", "click", self.go_back_to_cases)
            self.listen("#btn-download-all", "click", self.download_all_transcripts)
            self.listen(".btn-view-transcript", "click", self.view_transcript)
            self.listen(".btn-download-transcript", "click", self.download_transcript)
            self.listen("#btn-close-viewer", "click", self.close_transcript_viewer)
        else:
            self.listen("#search-query", "input", self.filter_cases)
            self.listen("#filter-judge", "input", self.filter_cases)
            self.listen(".case-card", "click", self.select_case)

    def select_case(self, event):
        self.set_state({"selected": event.attr("data-docket"), "viewer": None})

    def go_back_to_cases(self, event=None):
        self.set_state({"selected": None, "viewer": None})

    def filter_cases(self, event=None):
        query = self.surface.get_value(self.query("#search-query"))
        judge = self.surface.get_value(self.query("#filter-judge"))
        self.set_state({
            "query": query,
            "judge": judge,
            "filtered": self.court_service.search_cases(query, judge, ""),
        })

    def view_transcript(self, event):
        transcript_id = event.attr("data-id")
        content = self.court_service.get_transcript_content(transcript_id)
        self.set_state({"viewer": {"title": event.attr("data-title", ""), "content": content}})

    def close_transcript_viewer(self, event=None):
        self.set_state({"viewer": None})

    def download_transcript(self, event):
        path = self.court_service.download_transcript(event.attr("data-id"), event.attr("data-title", "transcript"))
        self._report_download(path)

    def download_all_transcripts(self, event=None):
        case = self.selected_case
        if case is None:
            return
        path = self.court_service.download_all_transcripts(case.docket_number, case.case_name)
        self._report_download(path)

    def _report_download(self, path):
        if self.notifications is None:
            return
        if path is None:
            self.notifications.warning("Transcript not available")
        else:
            logger.debug(f"Transcript saved to {path}")
            self.notifications.success(f"Saved {path.name}")
