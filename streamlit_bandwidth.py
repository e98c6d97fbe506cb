"""Meeting Bandwidth Analyzer - Streamlit front-end."""

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

import pytz
import streamlit as st

import config
from models.entities import MeetingType
from models.personas import PERSONA_PROFILES, get_persona_profile
from services.analysis_service import AnalysisService
from services.event_table import default_rows, rows_to_events
from services.timezone_utils import today_in_timezone
from services.validation import InputValidationError
from services.workday import WORK_END_HOUR, WORK_START_HOUR

# ============================================================================
# CONFIGURATION
# ============================================================================

config.setup_logging()

st.set_page_config(
    page_title="Meeting Bandwidth Analyzer",
    page_icon="🗓️",
    layout="wide"
)

MAX_DAYS = 7
MEETING_TYPE_OPTIONS = [meeting_type.value for meeting_type in MeetingType]
LEVEL_ICONS = {"high": "🟢", "medium": "🟡", "low": "🔴"}

# ============================================================================
# SERVICE INITIALIZATION
# ============================================================================

@st.cache_resource
def get_analysis_service(_cache_version="v1"):
    """Initialize and cache the analysis service."""
    return AnalysisService()

analysis_service = get_analysis_service()

# ============================================================================
# SESSION STATE INITIALIZATION
# ============================================================================

if "events_by_date" not in st.session_state:
    st.session_state.events_by_date = {}
    st.session_state.edited_by_date = {}
    st.session_state.editor_version = 0
    st.session_state.last_response = None
    st.session_state.last_error = None

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def selected_dates(start_date: date, day_count: int) -> List[str]:
    """ISO dates of the analyzed range."""
    return [(start_date + timedelta(days=offset)).isoformat() for offset in range(day_count)]


def build_request(
    time_zone: str,
    persona_id: str,
    advanced: bool,
    dates: List[str]
) -> Dict[str, Any]:
    """Build a multi-day request body from the edited tables."""
    return {
        "timeZone": time_zone,
        "persona": persona_id,
        "advancedResponse": advanced,
        "schedules": [
            {"date": date_string, "events": rows_to_events(date_string, st.session_state.edited_by_date.get(date_string))}
            for date_string in dates
        ],
    }


def render_day(day: Dict[str, Any], advanced: bool):
    """Render one day's metrics and slots."""
    st.markdown(f"**📅 {day['date']}**")

    cols = st.columns(3)
    cols[0].metric("Daily load", f"{day['dailyLoadScore']:.0%}")
    cols[1].metric("Persona fit", f"{day['personaFitScore']:.2f}")
    preferred = ", ".join(day["inferredPreferredMeetingTypes"]) or "—"
    cols[2].metric("Preferred types", preferred)

    if not day["availableSlots"]:
        st.info("No free time in the workday.")
        return

    rows = []
    for slot in day["availableSlots"]:
        row = {
            "Level": f"{LEVEL_ICONS.get(slot['bandwidthLevel'], '')} {slot['bandwidthLevel']}",
            "Start": slot["start"][11:16],
            "End": slot["end"][11:16],
            "Minutes": slot["durationMinutes"],
            "Score": slot["bandwidthScore"],
        }
        if advanced:
            row.update(slot["penaltyBreakdown"])
        rows.append(row)
    st.dataframe(rows, use_container_width=True, hide_index=True)

    if advanced:
        with st.expander("Advanced metrics", expanded=False):
            st.json({
                key: value for key, value in day.items()
                if key not in ("availableSlots", "date")
            })

# ============================================================================
# SIDEBAR
# ============================================================================

with st.sidebar:
    st.header("⚙️ Settings")

    zones = pytz.common_timezones
    default_zone = config.DEFAULT_TIME_ZONE if config.DEFAULT_TIME_ZONE in zones else "UTC"
    time_zone = st.selectbox("Time zone", zones, index=list(zones).index(default_zone))

    persona_ids = list(PERSONA_PROFILES.keys())
    default_persona = get_persona_profile(config.DEFAULT_PERSONA).id
    persona_id = st.selectbox(
        "Persona",
        persona_ids,
        index=persona_ids.index(default_persona),
        format_func=lambda pid: PERSONA_PROFILES[pid].label,
    )

    start_date = st.date_input("First day", value=today_in_timezone(time_zone))
    day_count = st.number_input("Days", min_value=1, max_value=MAX_DAYS, value=1, step=1)
    advanced = st.toggle("Advanced response", value=False)

    if st.button("🧹 Clear all events", use_container_width=True):
        st.session_state.events_by_date = {}
        st.session_state.edited_by_date = {}
        st.session_state.editor_version += 1
        st.session_state.last_response = None

# ============================================================================
# MAIN
# ============================================================================

st.title("🗓️ Meeting Bandwidth Analyzer")
st.caption(
    f"Workday {WORK_START_HOUR:02d}:00–{WORK_END_HOUR:02d}:00 in the selected time zone. "
    "Add meetings per day, then analyze."
)

dates = selected_dates(start_date, int(day_count))

for tab, date_string in zip(st.tabs(dates), dates):
    with tab:
        edited = st.data_editor(
            st.session_state.events_by_date.setdefault(date_string, default_rows()),
            key=f"events_{date_string}_{st.session_state.editor_version}",
            num_rows="dynamic",
            use_container_width=True,
            column_config={
                "start": st.column_config.TimeColumn("Start", step=timedelta(minutes=15), required=True),
                "end": st.column_config.TimeColumn("End", step=timedelta(minutes=15), required=True),
                "meetingType": st.column_config.SelectboxColumn(
                    "Meeting type", options=MEETING_TYPE_OPTIONS, default=MeetingType.OTHER.value
                ),
            },
        )
        st.session_state.edited_by_date[date_string] = edited

if st.button("🔍 Analyze bandwidth", type="primary"):
    request = build_request(time_zone, persona_id, advanced, dates)
    try:
        with st.spinner("Scoring free time..."):
            st.session_state.last_response = analysis_service.analyze_manual_multiday(request)
        st.session_state.last_error = None
    except InputValidationError as e:
        st.session_state.last_response = None
        st.session_state.last_error = str(e)

if st.session_state.last_error:
    st.error(f"⚠️ {st.session_state.last_error}")

response: Optional[Dict[str, Any]] = st.session_state.last_response
if response:
    st.subheader(f"Results · {response['personaLabel']} · {response['timeZone']}")

    if len(response["days"]) > 1:
        cols = st.columns(3)
        cols[0].metric("Average load", f"{response['averageDailyLoadScore']:.0%}")
        cols[1].metric("Average persona fit", f"{response['averagePersonaFitScore']:.2f}")
        cols[2].metric("Preferred types", ", ".join(response["inferredPreferredMeetingTypes"]) or "—")

    for day in response["days"]:
        render_day(day, response["advancedResponse"])
        st.divider()

    st.caption(f"Generated {datetime.now():%Y-%m-%d %H:%M}")
