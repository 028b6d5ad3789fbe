"""
Streamlit web app for internship hour tracking.
Setup sidebar, month calendar, day editor, progress summary and exports.
"""

import logging
from dataclasses import replace
from datetime import date, datetime

import streamlit as st

import adjustments as adj_ops
import calc
import db
import report
from models import MODE_AUTOMATIC, MODE_MANUAL, STATUS_WORK, Stats, TrackerConfig, get_date_key

logger = logging.getLogger(__name__)

WEEKDAY_ABBR = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
# Sunday = 0 numbering shown in the weekly schedule picker
SCHEDULE_DAYS = [(1, "Mon"), (2, "Tue"), (3, "Wed"), (4, "Thu"), (5, "Fri"), (6, "Sat"), (0, "Sun")]

CALENDAR_CSS = """
<style>
.day-cell {
    border: 1px solid #eee;
    border-radius: 0.5rem;
    padding: 1.25rem 0.5rem 0.5rem;
    min-height: 90px;
    position: relative;
    text-align: center;
}
.day-number {
    position: absolute;
    top: 0.35rem;
    left: 0.5rem;
    font-weight: 600;
    opacity: 0.85;
    font-size: 14px;
}
.empty { background: #fafafa; opacity: 0.5; }
.day-work { background: #e6f4ea; }
.day-overtime { background: #fff7cc; }
.day-off { background: #f3f4f6; }
.hours { font-size: 18px; font-weight: 700; margin-top: 10px; }
.holiday-badge {
    font-size: 9px;
    color: red;
    background-color: rgba(255, 255, 255, 0.9);
    padding: 2px 4px;
    border-radius: 3px;
    position: absolute;
    bottom: 5px;
    left: 5px;
    right: 5px;
    font-weight: 500;
}
.log-dot { position: absolute; top: 0.35rem; right: 0.5rem; font-size: 12px; }
</style>
"""


def get_config() -> TrackerConfig:
    return st.session_state["config"]


def commit(config: TrackerConfig) -> None:
    """Persist a new configuration snapshot and redraw."""
    st.session_state["config"] = config
    try:
        db.save_config(st.session_state["user_id"], config)
    except Exception as e:
        logger.exception("Saving state failed")
        st.error(f"Error saving data: {e}")
        return
    st.rerun()


def install_config(config: TrackerConfig, persist: bool = True) -> None:
    """
    Replace the whole configuration after a restore or reset.

    Setup widgets are keyed by the config revision, so bumping it makes them
    start from the new values instead of their previous session state.
    """
    st.session_state["config"] = config
    st.session_state["config_rev"] = st.session_state.get("config_rev", 0) + 1
    if not persist:
        return
    try:
        db.save_config(st.session_state["user_id"], config)
    except Exception as e:
        logger.exception("Saving restored state failed")
        st.error(f"Error saving data: {e}")


def load_state() -> None:
    """Load configuration once per session."""
    if "config" in st.session_state:
        return
    st.session_state["user_id"] = db.get_current_user_id()
    try:
        db.init_schema_if_needed()
        st.session_state["config"] = db.load_config(st.session_state["user_id"])
    except Exception as e:
        logger.exception("Loading state failed")
        st.error(f"Error loading data: {e}")
        st.session_state["config"] = TrackerConfig()


def hours_for(day: date, config: TrackerConfig) -> int:
    return calc.day_hours(day, config.adjustments, config.mode,
                          config.excluded_days, config.exclude_holidays)


def compute_stats(config: TrackerConfig) -> Stats:
    return calc.internship_stats(config.numeric_goal, config.start_date, config.adjustments,
                                 config.mode, config.excluded_days, config.exclude_holidays)


def render_setup(config: TrackerConfig) -> None:
    """Sidebar inputs for goal, start date, mode and weekly schedule."""
    st.sidebar.header("🎯 Setup")
    rev = st.session_state.get("config_rev", 0)

    # min/step follow the stored goal's type; number_input rejects mixed int/float
    shown_goal = config.numeric_goal
    goal_value = st.sidebar.number_input(
        "Target Hours", min_value=type(shown_goal)(0), step=type(shown_goal)(8),
        value=shown_goal, key=f"goal_{rev}",
    )
    start_value = st.sidebar.date_input("Start Date", value=config.start_date, key=f"start_{rev}")
    mode = st.sidebar.radio(
        "Planning Mode", options=[MODE_AUTOMATIC, MODE_MANUAL],
        index=0 if config.mode == MODE_AUTOMATIC else 1,
        format_func=str.title, key=f"mode_{rev}",
    )
    exclude_holidays = st.sidebar.toggle(
        "Exclude PH Holidays (2026)", value=config.exclude_holidays,
        help=f"{len(calc.DEFAULT_HOLIDAYS)} holidays will not count as work days",
        key=f"holidays_{rev}",
    )

    st.sidebar.markdown("**Weekly Schedule** (checked = day off)")
    excluded_days = list(config.excluded_days)
    cols = st.sidebar.columns(7)
    for col, (weekday, label) in zip(cols, SCHEDULE_DAYS):
        with col:
            checked = st.checkbox(label, value=weekday in excluded_days, key=f"excl_{rev}_{weekday}")
            if checked != (weekday in excluded_days):
                excluded_days = adj_ops.toggle_excluded_day(excluded_days, weekday)

    # Untouched widgets keep the stored values as they are
    if goal_value == shown_goal:
        new_goal = config.goal
    else:
        new_goal = goal_value if goal_value > 0 else ''
    if start_value == config.start_date:
        new_start = config.start_date_str
    else:
        new_start = start_value.isoformat() if isinstance(start_value, date) else ''
    updated = replace(
        config,
        goal=new_goal,
        start_date_str=new_start,
        mode=mode,
        exclude_holidays=exclude_holidays,
        excluded_days=excluded_days,
    )
    if updated != config:
        commit(updated)

    if st.sidebar.button("Reset everything"):
        st.session_state["confirm_reset"] = True
    if st.session_state.get("confirm_reset"):
        st.sidebar.warning("This clears goal, start date and all day adjustments.")
        if st.sidebar.button("Confirm reset"):
            st.session_state["confirm_reset"] = False
            try:
                db.clear_config(st.session_state["user_id"])
            except Exception as e:
                logger.exception("Clearing state failed")
                st.error(f"Error resetting data: {e}")
            install_config(adj_ops.reset_config(), persist=False)
            st.rerun()


def render_summary(stats: Stats) -> None:
    """Render the progress summary."""
    st.subheader("📊 Progress")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Accumulated", f"{stats.accumulated}h")
    c2.metric("Remaining", f"{stats.remaining}h")
    c3.metric("Work Days", stats.work_days_count)
    c4.metric("Calendar Days", stats.total_calendar_days)
    st.progress(stats.progress_percentage / 100)
    st.markdown(f"**Projected End Date:** {stats.estimated_end_date_str} "
                f"({stats.progress_percentage:.0f}% of {stats.total_goal}h)")
    if stats.exceeded:
        st.success(f"Goal exceeded by {stats.excess_hours}h")


def day_class(hours: int) -> str:
    if hours > calc.BASE_DAY_HOURS:
        return "day-overtime"
    if hours > 0:
        return "day-work"
    return "day-off"


def render_day_cell(day_date: date, config: TrackerConfig) -> None:
    """Render a single day with its hours, holiday badge and log marker."""
    hours = hours_for(day_date, config)
    adj = config.adjustments.get(get_date_key(day_date))
    holiday = calc.DEFAULT_HOLIDAYS.lookup(day_date)

    holiday_badge = ""
    if holiday:
        holiday_badge = f'<div class="holiday-badge">🎉 {holiday.name[:14]}</div>'
    log_dot = '<div class="log-dot">📝</div>' if adj and adj.log else ""

    st.markdown(f"""
    <div class="day-cell {day_class(hours)}">
        <div class="day-number">{day_date.day}</div>
        {log_dot}
        <div class="hours">{f"{hours}h" if hours else "–"}</div>
        {holiday_badge}
    </div>
    """, unsafe_allow_html=True)


def render_calendar(config: TrackerConfig) -> None:
    """Render the month grid with navigation."""
    view = st.session_state.setdefault("view_date", date.today().replace(day=1))

    col1, col2, col3 = st.columns([1, 3, 1])
    with col1:
        if st.button("◀", key="prev_month"):
            st.session_state["view_date"] = calc.add_months(view, -1)
            st.rerun()
    with col2:
        st.markdown(f"<h2 style='text-align: center'>{calc.get_month_name(view.month)} {view.year}</h2>",
                    unsafe_allow_html=True)
    with col3:
        if st.button("▶", key="next_month"):
            st.session_state["view_date"] = calc.add_months(view, 1)
            st.rerun()

    cols = st.columns(7)
    for i, weekday in enumerate(WEEKDAY_ABBR):
        with cols[i]:
            st.markdown(f"<div style='text-align: center; font-weight: bold; padding: 10px;'>{weekday}</div>",
                        unsafe_allow_html=True)

    for week in calc.month_grid(view.year, view.month):
        cols = st.columns(7)
        for i, day_date in enumerate(week):
            with cols[i]:
                if day_date is None:
                    st.markdown("<div style='height: 90px;'></div>", unsafe_allow_html=True)
                else:
                    render_day_cell(day_date, config)


def render_range_painter(config: TrackerConfig, stats: Stats) -> None:
    """Mark a span of days as work or off in one step."""
    st.subheader("🖌️ Mark Days")
    start = config.start_date
    if start is None:
        st.caption("Set a start date first.")
        return

    picked = st.date_input("Days", value=(start, start), min_value=start, key="paint_range")
    if not isinstance(picked, (tuple, list)) or len(picked) != 2:
        return
    anchor, current = picked
    end_limit = stats.estimated_end_date if config.mode == MODE_AUTOMATIC else None
    keys = adj_ops.select_range(anchor, current, start, end_limit)
    status = adj_ops.next_paint_status(hours_for(anchor, config))

    label = "Mark as work" if status == STATUS_WORK else "Mark as off"
    if st.button(f"{label} ({len(keys)} days)", disabled=not keys):
        commit(replace(config, adjustments=adj_ops.paint_range(config.adjustments, keys, status)))
    if not keys and end_limit is not None:
        st.caption("In automatic mode only days up to the projected end date can be marked.")


def render_day_editor(config: TrackerConfig) -> None:
    """Overtime and daily log editing for one day."""
    st.subheader("✏️ Day Details")
    start = config.start_date
    if start is None:
        return
    selected = st.date_input("Day", value=max(start, date.today()), min_value=start, key="selected_day")
    key = get_date_key(selected)
    hours = hours_for(selected, config)
    adj = config.adjustments.get(key)

    st.markdown(f"**{selected.strftime('%A, %B %d')}**: {hours}h")
    holiday = calc.DEFAULT_HOLIDAYS.lookup(selected)
    if holiday:
        st.caption(f"🎉 {holiday.name} ({holiday.kind} holiday)")

    minus, plus = st.columns(2)
    if minus.button("− 1h overtime", disabled=not adj or adj.overtime == 0):
        commit(replace(config, adjustments=adj_ops.update_overtime(config.adjustments, selected, -1, hours)))
    if plus.button("+ 1h overtime"):
        commit(replace(config, adjustments=adj_ops.update_overtime(config.adjustments, selected, 1, hours)))

    entered = st.checkbox("Entered (locked)", value=bool(adj and adj.entered), key=f"entered_{key}")
    if entered != bool(adj and adj.entered):
        commit(replace(config, adjustments=adj_ops.set_entered(config.adjustments, selected, entered, hours)))

    log_text = st.text_area("Daily Log", value=(adj.log if adj and adj.log else ""), key=f"log_{key}")
    save_col, delete_col = st.columns(2)
    if save_col.button("Save log"):
        commit(replace(config, adjustments=adj_ops.save_log(config.adjustments, selected, log_text, hours)))
    if delete_col.button("Delete log", disabled=not (adj and adj.log)):
        commit(replace(config, adjustments=adj_ops.delete_log(config.adjustments, selected)))


def render_work_days(stats: Stats) -> None:
    with st.expander(f"Schedule ({len(stats.work_days)} days)"):
        for month_name, days in calc.group_work_days_by_month(stats.work_days).items():
            st.markdown(f"**{month_name}**")
            for wd in days:
                st.markdown(f"- {wd.date.strftime('%a %b %d')}: {wd.hours}h")


def render_export_import(config: TrackerConfig, stats: Stats) -> None:
    """Render export/import controls."""
    st.sidebar.markdown("---")
    st.sidebar.header("📁 Export/Import")
    today = date.today().isoformat()

    st.sidebar.download_button(
        "CSV Schedule",
        data=report.generate_csv(stats.work_days, config.adjustments),
        file_name="internship-report.csv",
        mime="text/csv",
    )
    st.sidebar.download_button(
        "Progress Report",
        data=report.generate_pdf_report(stats, datetime.now()),
        file_name=f"internship-report-{today}.pdf",
        mime="application/pdf",
    )
    st.sidebar.download_button(
        "Data Backup",
        data=report.serialize_backup(config),
        file_name=f"internship-backup-{today}.json",
        mime="application/json",
    )

    uploaded_file = st.sidebar.file_uploader("Restore Backup", type=["json"])
    if uploaded_file is not None:
        try:
            imported = report.deserialize_backup(uploaded_file.read().decode("utf-8"))
        except (report.BackupFormatError, UnicodeDecodeError) as e:
            logger.warning("Rejected backup %s: %s", uploaded_file.name, e)
            st.sidebar.error("Invalid backup file. Please select a valid JSON backup.")
            return
        if st.sidebar.button("Confirm Restore"):
            st.session_state["pending_config"] = imported
            st.session_state["flash"] = "Backup restored successfully!"
            st.rerun()


def main() -> None:
    """Main application function."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    st.set_page_config(
        page_title="Internship Tracker",
        page_icon="🎓",
        layout="wide",
        initial_sidebar_state="expanded",
    )
    st.markdown(CALENDAR_CSS, unsafe_allow_html=True)
    st.title("🎓 Internship Tracker")
    st.caption("Track your hours, exclude off-days, and hit your goal!")

    load_state()
    pending = st.session_state.pop("pending_config", None)
    if pending is not None:
        install_config(pending)
    flash = st.session_state.pop("flash", None)
    if flash:
        st.sidebar.success(flash)
    config = get_config()

    render_setup(config)
    stats = compute_stats(config)
    render_export_import(config, stats)

    render_summary(stats)
    render_calendar(config)

    left, right = st.columns(2)
    with left:
        render_range_painter(config, stats)
    with right:
        render_day_editor(config)
    render_work_days(stats)


if __name__ == "__main__":
    main()
